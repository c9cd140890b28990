import pytest

pytestmark = pytest.mark.django_db

CLIENTES = [
    {"id_cliente": 1, "nombre_completo": "Ana Pérez", "contacto_email": "ana@x.cl", "fecha_creacion": "2024-02-01T12:00:00Z"},
    {"id_cliente": 2, "nombre_completo": "Luis Soto", "contacto_tel": "+56911111111"},
    {"id_cliente": 3, "nombre_completo": "Marta Díaz"},
]


def test_lista_renderiza_una_fila_por_cliente(logueado, fake_http):
    fake_http.responder("GET", "/clientes", CLIENTES)
    resp = logueado.get("/clientes/")

    assert resp.status_code == 200
    assert resp.content.decode().count("<tr><td>") == 3
    assert resp.context["filas"][1] == [2, "Luis Soto", "", "+56911111111", "-"]


def test_error_del_backend_se_muestra_tal_cual(logueado, fake_http):
    fake_http.responder("GET", "/clientes", {"message": "Token expirado"}, status=401)
    resp = logueado.get("/clientes/")

    assert resp.context["error"] == "Token expirado"
    assert resp.context["filas"] == []
    assert "Token expirado" in resp.content.decode()


def test_error_sin_mensaje_usa_texto_fijo(logueado, fake_http):
    fake_http.responder("GET", "/clientes", None, status=500)
    resp = logueado.get("/clientes/")
    assert resp.context["error"] == "Error al listar clientes"


def test_crear_envia_null_en_opcionales(logueado, fake_http):
    fake_http.responder("GET", "/clientes", [])
    fake_http.responder("POST", "/clientes", {"id_cliente": 10, "nombre_completo": "Nuevo"})
    resp = logueado.post("/clientes/", {"nombre_completo": "Nuevo", "contacto_email": "", "contacto_tel": ""})

    assert resp.status_code == 302
    enviado = fake_http.llamadas_a("/clientes", "POST")[0].kwargs["json"]
    assert enviado == {"nombre_completo": "Nuevo", "contacto_email": None, "contacto_tel": None, "direccion": None}


def test_crear_fallido_muestra_fallback(logueado, fake_http):
    fake_http.responder("GET", "/clientes", [])
    fake_http.responder("POST", "/clientes", None, status=500)
    resp = logueado.post("/clientes/", {"nombre_completo": "Nuevo"})

    assert resp.status_code == 200
    assert resp.context["error"] == "Error al crear cliente"


def test_detalle_muestra_expedientes_del_cliente(logueado, fake_http):
    fake_http.responder("GET", "/clientes/1", CLIENTES[0])
    fake_http.responder("GET", "/expedientes", [{"id_expediente": 4, "id_cliente": 1, "titulo": "Herencia"}])
    resp = logueado.get("/clientes/1/")

    assert resp.status_code == 200
    assert resp.context["cliente"]["nombre_completo"] == "Ana Pérez"
    assert fake_http.llamadas_a("/expedientes")[0].kwargs["params"] == {"id_cliente": 1}
    assert "Herencia" in resp.content.decode()

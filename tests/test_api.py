import time

import pytest
import requests

from core.api import ApiClient
from core.errors import ApiError, mensaje_error
from tests.conftest import FakeResponse


def test_bearer_en_rutas_protegidas(fake_http):
    fake_http.responder("GET", "/clientes", [])
    ApiClient("http://api.test", token="abc").get("/clientes")

    llamada = fake_http.llamadas[-1]
    assert llamada.url == "http://api.test/clientes"
    assert llamada.kwargs["headers"]["Authorization"] == "Bearer abc"
    assert llamada.kwargs["timeout"] == 15


def test_prefijo_publico_no_lleva_bearer(fake_http):
    fake_http.responder("GET", "/admin/documentos", [])
    ApiClient("http://docs.test", token="abc").get("/admin/documentos", params={"limit": 25})

    llamada = fake_http.llamadas[-1]
    assert "Authorization" not in llamada.kwargs["headers"]
    assert llamada.kwargs["params"] == {"limit": 25}


def test_sin_token_no_hay_bearer(fake_http):
    fake_http.responder("GET", "/clientes", [])
    ApiClient("http://api.test", token=None).get("/clientes")
    assert "Authorization" not in fake_http.llamadas[-1].kwargs["headers"]


def test_params_vacios_se_omiten(fake_http):
    fake_http.responder("GET", "/expedientes", [])
    ApiClient("http://api.test").get("/expedientes", params={"id_cliente": None, "q": "", "estado": "ABIERTO"})
    assert fake_http.llamadas[-1].kwargs["params"] == {"estado": "ABIERTO"}


def test_error_con_mensaje_lista(fake_http):
    fake_http.responder("POST", "/clientes", {"message": ["nombre requerido", "email inválido"]}, status=400)
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.test").post("/clientes", json={})
    assert exc.value.mensaje == "nombre requerido, email inválido"
    assert exc.value.status == 400


def test_error_con_clave_error(fake_http):
    fake_http.responder("GET", "/admin/documentos", {"error": "Mongo caído"}, status=500)
    with pytest.raises(ApiError) as exc:
        ApiClient("http://docs.test").get("/admin/documentos")
    assert mensaje_error(exc.value, "Error al listar documentos") == "Mongo caído"


def test_error_sin_mensaje_usa_fallback(fake_http):
    fake_http.responder("GET", "/clientes", FakeResponse(502, None, content=b"Bad gateway"))
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.test").get("/clientes")
    assert exc.value.mensaje is None
    assert exc.value.detalle == "HTTP 502"
    assert mensaje_error(exc.value, "Error al listar clientes") == "Error al listar clientes"


def test_timeout_es_falla_de_red(fake_http):
    fake_http.responder("GET", "/clientes", requests.Timeout("lento"))
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.test").get("/clientes")
    assert exc.value.detalle == "timeout"


def test_204_devuelve_none(fake_http):
    fake_http.responder("DELETE", "/notas/3", FakeResponse(204))
    assert ApiClient("http://api.test", token="t").delete("/notas/3") is None


class _SesionLenta:
    def request(self, method, url, **kwargs):
        time.sleep(2)
        return FakeResponse(200, {"tarde": True})


def test_plazo_total_corta_la_request():
    inicio = time.monotonic()
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.test", token="abc", timeout=0.2, http=_SesionLenta()).get("/clientes")

    assert exc.value.detalle == "timeout"
    assert time.monotonic() - inicio < 1.5

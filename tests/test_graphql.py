import pytest

from core.backends import GraphQLBackend, RestBackend, get_backend
from core.errors import ApiError
from core.graphql import GraphQLClient


def test_execute_envia_query_y_bearer(fake_http):
    fake_http.responder("POST", "/graphql", {"data": {"clientes": []}})
    data = GraphQLClient("http://api.test/graphql", token="tok").execute("query { x }", {"limit": 10, "offset": None})

    assert data == {"clientes": []}
    llamada = fake_http.llamadas[-1]
    assert llamada.kwargs["json"] == {"query": "query { x }", "variables": {"limit": 10, "offset": None}}
    assert llamada.kwargs["headers"]["Authorization"] == "Bearer tok"


def test_errores_graphql_exponen_mensaje(fake_http):
    fake_http.responder("POST", "/graphql", {"errors": [{"message": "Credenciales inválidas"}], "data": None})
    with pytest.raises(ApiError) as exc:
        GraphQLClient("http://api.test/graphql").execute("mutation { login }")
    assert exc.value.mensaje == "Credenciales inválidas"


def test_backend_graphql_normaliza_camel_case(fake_http):
    fake_http.responder("POST", "/graphql", {"data": {"expedientes": [
        {"idExpediente": 4, "idCliente": 9, "titulo": "Herencia", "estado": "ABIERTO", "fechaCreacion": "2024-05-01T10:00:00Z"},
    ]}})
    filas = GraphQLBackend(token="t").listar_expedientes(id_cliente=9)

    assert filas[0]["id_expediente"] == 4
    assert filas[0]["cliente"] == 9
    assert fake_http.llamadas[-1].kwargs["json"]["variables"] == {"idCliente": 9}


def test_actualizar_nota_envia_tipo_nulo(fake_http):
    fake_http.responder("POST", "/graphql", {"data": {"updateNota": {"idNota": 1, "contenido": "x", "tipo": None}}})
    nota = GraphQLBackend(token="t").actualizar_nota(1, "x", None)

    assert fake_http.llamadas[-1].kwargs["json"]["variables"] == {"id": 1, "contenido": "x", "tipo": None}
    assert nota["tipo"] is None


def test_cambiar_estado_no_toca_otros_campos(fake_http):
    fake_http.responder("POST", "/graphql", {"data": {"updateExpediente": {"idExpediente": 3, "estado": "CERRADO"}}})
    GraphQLBackend(token="t").actualizar_expediente(3, {"estado": "CERRADO"})

    assert fake_http.llamadas[-1].kwargs["json"]["variables"] == {"id": 3, "estado": "CERRADO"}


def test_eliminar_sin_exito_lanza(fake_http):
    fake_http.responder("POST", "/graphql", {"data": {"deleteNota": {"success": False, "message": "No existe"}}})
    with pytest.raises(ApiError) as exc:
        GraphQLBackend(token="t").eliminar_nota(5)
    assert exc.value.mensaje == "No existe"


def test_login_graphql(fake_http):
    usuario = {"idUsuario": 1, "email": "ana@bufete.cl", "rol": "ADMIN"}
    fake_http.responder("POST", "/graphql", {"data": {"login": {"accessToken": "jwt", "usuario": usuario}}})
    assert GraphQLBackend().login("ana@bufete.cl", "x") == ("jwt", usuario)


def test_ml_solo_en_graphql():
    with pytest.raises(ApiError):
        RestBackend(token="t").ml_docs_clusters(k=3)


def test_get_backend_segun_ajuste(settings):
    assert isinstance(get_backend(token="t"), RestBackend)
    settings.API_BACKEND = "graphql"
    assert isinstance(get_backend(token="t"), GraphQLBackend)

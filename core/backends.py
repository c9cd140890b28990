# core/backends.py
"""
Integraciones con el backend legal.

RestBackend y GraphQLBackend exponen los mismos métodos y devuelven registros
ya normalizados (ver core.normalizers). get_backend() elige según
settings.API_BACKEND y usa el token de la sesión actual.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings

from . import graphql as ops
from .api import ApiClient
from .errors import ApiError
from .graphql import GraphQLClient
from .normalizers import (
    normalizar_cliente, normalizar_documento, normalizar_expediente,
    normalizar_lista, normalizar_nota, normalizar_plazo,
)
from .sesion import token_actual

logger = logging.getLogger(__name__)

Registro = Dict[str, Any]


class _DocumentosRest:
    """Descarga / subida de binarios: siempre por REST contra el servicio de documentos."""

    docs: ApiClient

    def descargar_documento(self, doc_id: str) -> Tuple[bytes, str]:
        res = self.docs.get(f"/documentos/{doc_id}", raw=True)
        content_type = res.headers.get("Content-Type", "application/pdf")
        return res.content, content_type

    def subir_documento(self, id_expediente: int, archivo) -> Registro:
        files = {"file": (archivo.name, archivo.read(), getattr(archivo, "content_type", None) or "application/octet-stream")}
        data = self.docs.post("/documentos", data={"id_expediente": id_expediente}, files=files)
        return normalizar_documento(data or {})


class RestBackend(_DocumentosRest):
    def __init__(self, token: Optional[str] = None, http=None):
        self.api = ApiClient(settings.API_BASE_URL, token=token, http=http)
        self.docs = ApiClient(settings.DOCS_API_BASE_URL, token=token, http=http)

    # ---- Auth ----
    def login(self, email: str, password: str) -> Tuple[str, Registro]:
        data = self.api.post("/auth/login", json={"email": email, "password": password}) or {}
        token = data.get("access_token")
        if not token:
            raise ApiError(mensaje=data.get("message"), detalle="Respuesta de login sin access_token")
        return token, data.get("usuario") or {}

    # ---- Clientes ----
    def listar_clientes(self, limit=None, offset=None) -> List[Registro]:
        data = self.api.get("/clientes", params={"limit": limit, "offset": offset})
        return normalizar_lista(data, normalizar_cliente)

    def obtener_cliente(self, id_cliente: int) -> Registro:
        return normalizar_cliente(self.api.get(f"/clientes/{id_cliente}"))

    def crear_cliente(self, datos: Registro) -> Registro:
        return normalizar_cliente(self.api.post("/clientes", json=datos))

    # ---- Expedientes ----
    def listar_expedientes(self, id_cliente=None, q=None, estado=None, limit=None, offset=None) -> List[Registro]:
        params = {"id_cliente": id_cliente, "q": q, "estado": estado, "limit": limit, "offset": offset}
        return normalizar_lista(self.api.get("/expedientes", params=params), normalizar_expediente)

    def obtener_expediente(self, id_expediente: int) -> Registro:
        return normalizar_expediente(self.api.get(f"/expedientes/{id_expediente}"))

    def crear_expediente(self, datos: Registro) -> Registro:
        return normalizar_expediente(self.api.post("/expedientes", json=datos))

    def actualizar_expediente(self, id_expediente: int, datos: Registro) -> Registro:
        return normalizar_expediente(self.api.patch(f"/expedientes/{id_expediente}", json=datos))

    def eliminar_expediente(self, id_expediente: int) -> None:
        self.api.delete(f"/expedientes/{id_expediente}")

    # ---- Notas ----
    def listar_notas(self, id_expediente: int) -> List[Registro]:
        return normalizar_lista(self.api.get(f"/expedientes/{id_expediente}/notas"), normalizar_nota)

    def crear_nota(self, id_expediente: int, contenido: str, tipo: Optional[str]) -> Registro:
        data = self.api.post("/notas", json={"id_expediente": id_expediente, "contenido": contenido, "tipo": tipo})
        return normalizar_nota(data)

    def actualizar_nota(self, id_nota: int, contenido: str, tipo: Optional[str]) -> Registro:
        return normalizar_nota(self.api.patch(f"/notas/{id_nota}", json={"contenido": contenido, "tipo": tipo}))

    def eliminar_nota(self, id_nota: int) -> None:
        self.api.delete(f"/notas/{id_nota}")

    # ---- Plazos ----
    def listar_plazos(self, id_expediente: int) -> List[Registro]:
        return normalizar_lista(self.api.get(f"/expedientes/{id_expediente}/plazos"), normalizar_plazo)

    def crear_plazo(self, id_expediente: int, descripcion: str, fecha_vencimiento: str) -> Registro:
        data = self.api.post("/plazos", json={
            "id_expediente": id_expediente,
            "descripcion": descripcion,
            "fecha_vencimiento": fecha_vencimiento,
        })
        return normalizar_plazo(data)

    def actualizar_plazo(self, id_plazo: int, descripcion: str, fecha_vencimiento: str) -> Registro:
        data = self.api.patch(f"/plazos/{id_plazo}", json={
            "descripcion": descripcion,
            "fecha_vencimiento": fecha_vencimiento,
        })
        return normalizar_plazo(data)

    def cumplir_plazo(self, id_plazo: int) -> Registro:
        return normalizar_plazo(self.api.patch(f"/plazos/{id_plazo}/cumplir"))

    def eliminar_plazo(self, id_plazo: int) -> None:
        self.api.delete(f"/plazos/{id_plazo}")

    # ---- Documentos ----
    def listar_documentos(self, limit: int, offset: int) -> List[Registro]:
        data = self.docs.get("/admin/documentos", params={"limit": limit, "offset": offset})
        return normalizar_lista(data, normalizar_documento)

    def eliminar_documento(self, doc_id: str) -> None:
        self.docs.delete(f"/documentos/{doc_id}")

    # ---- ML: sólo disponible vía GraphQL ----
    def ml_prob_riesgo(self, *args, **kwargs):
        raise ApiError(mensaje="Consulta disponible sólo con el backend GraphQL")

    ml_docs_clusters = ml_plazos_anomalias = ml_prob_riesgo


def _sin_nulos(variables: Dict[str, Any]) -> Dict[str, Any]:
    # filtros y argumentos opcionales: None significa "no enviar"
    return {k: v for k, v in variables.items() if v is not None}


def _exigir_exito(resultado: Optional[Dict[str, Any]], fallback: str) -> None:
    if resultado and resultado.get("success") is False:
        raise ApiError(mensaje=resultado.get("message") or fallback)


class GraphQLBackend(_DocumentosRest):
    def __init__(self, token: Optional[str] = None, http=None):
        self.gql = GraphQLClient(settings.API_GRAPHQL_URL, token=token, http=http)
        self.docs = ApiClient(settings.DOCS_API_BASE_URL, token=token, http=http)

    # ---- Auth ----
    def login(self, email: str, password: str) -> Tuple[str, Registro]:
        data = self.gql.execute(ops.LOGIN, {"email": email, "password": password}).get("login") or {}
        token = data.get("accessToken")
        if not token:
            raise ApiError(detalle="Respuesta de login sin accessToken")
        return token, data.get("usuario") or {}

    # ---- Clientes ----
    def listar_clientes(self, limit=None, offset=None) -> List[Registro]:
        data = self.gql.execute(ops.GET_CLIENTES, _sin_nulos({"limit": limit, "offset": offset}))
        return normalizar_lista(data.get("clientes"), normalizar_cliente)

    def obtener_cliente(self, id_cliente: int) -> Registro:
        return normalizar_cliente(self.gql.execute(ops.GET_CLIENTE, {"id": id_cliente}).get("cliente"))

    def crear_cliente(self, datos: Registro) -> Registro:
        data = self.gql.execute(ops.CREATE_CLIENTE, {
            "nombreCompleto": datos.get("nombre_completo"),
            "contactoEmail": datos.get("contacto_email"),
            "contactoTel": datos.get("contacto_tel"),
            "direccion": datos.get("direccion"),
        })
        return normalizar_cliente(data.get("createCliente"))

    # ---- Expedientes ----
    def listar_expedientes(self, id_cliente=None, q=None, estado=None, limit=None, offset=None) -> List[Registro]:
        data = self.gql.execute(ops.GET_EXPEDIENTES, _sin_nulos({
            "idCliente": id_cliente, "q": q, "estado": estado, "limit": limit, "offset": offset,
        }))
        return normalizar_lista(data.get("expedientes"), normalizar_expediente)

    def obtener_expediente(self, id_expediente: int) -> Registro:
        data = self.gql.execute(ops.GET_EXPEDIENTE, {"id": id_expediente})
        return normalizar_expediente(data.get("expediente"))

    def crear_expediente(self, datos: Registro) -> Registro:
        data = self.gql.execute(ops.CREATE_EXPEDIENTE, {
            "idCliente": datos.get("id_cliente"),
            "titulo": datos.get("titulo"),
            "descripcion": datos.get("descripcion"),
            "estado": datos.get("estado"),
        })
        return normalizar_expediente(data.get("createExpediente"))

    def actualizar_expediente(self, id_expediente: int, datos: Registro) -> Registro:
        # actualización parcial: sólo los campos presentes en datos
        variables = {"id": id_expediente}
        variables.update({k: v for k, v in datos.items() if k in ("titulo", "descripcion", "estado")})
        data = self.gql.execute(ops.UPDATE_EXPEDIENTE, variables)
        return normalizar_expediente(data.get("updateExpediente"))

    def eliminar_expediente(self, id_expediente: int) -> None:
        data = self.gql.execute(ops.DELETE_EXPEDIENTE, {"id": id_expediente})
        _exigir_exito(data.get("deleteExpediente"), "No se pudo eliminar el expediente")

    # ---- Notas ----
    def listar_notas(self, id_expediente: int) -> List[Registro]:
        data = self.gql.execute(ops.GET_NOTAS_EXPEDIENTE, {"idExpediente": id_expediente})
        return normalizar_lista(data.get("notasExpediente"), normalizar_nota)

    def crear_nota(self, id_expediente: int, contenido: str, tipo: Optional[str]) -> Registro:
        data = self.gql.execute(ops.CREATE_NOTA, {"idExpediente": id_expediente, "contenido": contenido, "tipo": tipo})
        return normalizar_nota(data.get("createNota"))

    def actualizar_nota(self, id_nota: int, contenido: str, tipo: Optional[str]) -> Registro:
        data = self.gql.execute(ops.UPDATE_NOTA, {"id": id_nota, "contenido": contenido, "tipo": tipo})
        return normalizar_nota(data.get("updateNota"))

    def eliminar_nota(self, id_nota: int) -> None:
        data = self.gql.execute(ops.DELETE_NOTA, {"id": id_nota})
        _exigir_exito(data.get("deleteNota"), "No se pudo eliminar la nota")

    # ---- Plazos ----
    def listar_plazos(self, id_expediente: int) -> List[Registro]:
        data = self.gql.execute(ops.GET_PLAZOS_EXPEDIENTE, {"idExpediente": id_expediente})
        return normalizar_lista(data.get("plazosExpediente"), normalizar_plazo)

    def crear_plazo(self, id_expediente: int, descripcion: str, fecha_vencimiento: str) -> Registro:
        data = self.gql.execute(ops.CREATE_PLAZO, {
            "idExpediente": id_expediente,
            "descripcion": descripcion,
            "fechaVencimiento": fecha_vencimiento,
        })
        return normalizar_plazo(data.get("createPlazo"))

    def actualizar_plazo(self, id_plazo: int, descripcion: str, fecha_vencimiento: str) -> Registro:
        data = self.gql.execute(ops.UPDATE_PLAZO, {
            "idPlazo": id_plazo,
            "descripcion": descripcion,
            "fechaVencimiento": fecha_vencimiento,
        })
        return normalizar_plazo(data.get("updatePlazo"))

    def cumplir_plazo(self, id_plazo: int) -> Registro:
        data = self.gql.execute(ops.MARCAR_PLAZO_CUMPLIDO, {"idPlazo": id_plazo})
        return normalizar_plazo(data.get("marcarPlazoCumplido"))

    def eliminar_plazo(self, id_plazo: int) -> None:
        data = self.gql.execute(ops.DELETE_PLAZO, {"idPlazo": id_plazo})
        _exigir_exito(data.get("deletePlazo"), "No se pudo eliminar el plazo")

    # ---- Documentos ----
    def listar_documentos(self, limit: int, offset: int) -> List[Registro]:
        data = self.gql.execute(ops.GET_ADMIN_DOCUMENTOS, _sin_nulos({"limit": limit, "offset": offset}))
        return normalizar_lista(data.get("adminDocumentos"), normalizar_documento)

    def eliminar_documento(self, doc_id: str) -> None:
        data = self.gql.execute(ops.DELETE_DOCUMENTO, {"docId": doc_id})
        _exigir_exito(data.get("eliminarDocumento"), "No se pudo eliminar el documento")

    # ---- ML (sólo lectura) ----
    def ml_prob_riesgo(self) -> Registro:
        return self.gql.execute(ops.ML_PROB_RIESGO).get("mlProbRiesgo") or {}

    def ml_docs_clusters(self, k: int = 3) -> Registro:
        return self.gql.execute(ops.ML_DOCS_CLUSTERS, {"k": k}).get("mlDocsClusters") or {}

    def ml_plazos_anomalias(self, contaminacion: float = 0.2, max_lista: int = 10, explain: bool = True) -> Registro:
        data = self.gql.execute(ops.ML_PLAZOS_ANOMALIAS, {
            "contaminacion": contaminacion, "maxLista": max_lista, "explain": explain,
        })
        return data.get("mlPlazosAnomalias") or {}


BACKENDS = {"rest": RestBackend, "graphql": GraphQLBackend}


def get_backend(request=None, token: Optional[str] = None):
    nombre = getattr(settings, "API_BACKEND", "rest")
    cls = BACKENDS.get(nombre)
    if cls is None:
        logger.warning("API_BACKEND desconocido (%r); se usa REST", nombre)
        cls = RestBackend
    if token is None and request is not None:
        token = token_actual(request)
    return cls(token=token)

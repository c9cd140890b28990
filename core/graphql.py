# core/graphql.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .api import con_plazo
from .errors import ApiError

logger = logging.getLogger(__name__)


class GraphQLClient:
    """POST {query, variables} al endpoint GraphQL, con bearer si hay token."""

    def __init__(self, url: str, token: Optional[str] = None,
                 timeout: Optional[float] = None, http=None):
        self.url = url
        self.token = token
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.http = http or requests.Session()

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        body = {"query": query, "variables": dict(variables or {})}

        try:
            res = con_plazo(
                lambda: self.http.request("POST", self.url, json=body, headers=headers, timeout=self.timeout),
                self.timeout,
            )
        except requests.Timeout as e:
            logger.warning("GraphQL: timeout tras %ss", self.timeout)
            raise ApiError(detalle="timeout") from e
        except requests.RequestException as e:
            logger.warning("GraphQL: error de red (%s)", e)
            raise ApiError(detalle=str(e)) from e

        try:
            payload = res.json()
        except ValueError:
            payload = None

        # El servidor puede responder 200 con "errors" o 4xx/5xx con "errors"
        errors = (payload or {}).get("errors") if isinstance(payload, dict) else None
        if errors:
            primero = errors[0] if isinstance(errors[0], dict) else {"message": str(errors[0])}
            raise ApiError(mensaje=primero.get("message"), status=res.status_code,
                           detalle="GraphQL error", payload=payload)
        if not res.ok:
            raise ApiError(status=res.status_code, detalle=f"HTTP {res.status_code}", payload=payload)
        if not isinstance(payload, dict) or "data" not in payload:
            raise ApiError(status=res.status_code, detalle="Respuesta GraphQL sin 'data'")
        return payload["data"] or {}


# ============= AUTH =============
LOGIN = """
mutation Login($email: String!, $password: String!) {
  login(input: { email: $email, password: $password }) {
    accessToken
    usuario { idUsuario email rol }
  }
}
"""

# ============= CLIENTES =============
_CLIENTE_CAMPOS = "idCliente nombreCompleto contactoEmail contactoTel direccion fechaRegistro"

GET_CLIENTES = """
query GetClientes($limit: Int, $offset: Int) {
  clientes(limit: $limit, offset: $offset) { %s }
}
""" % _CLIENTE_CAMPOS

GET_CLIENTE = """
query GetCliente($id: Int!) {
  cliente(id: $id) { %s }
}
""" % _CLIENTE_CAMPOS

CREATE_CLIENTE = """
mutation CreateCliente($nombreCompleto: String!, $contactoEmail: String, $contactoTel: String, $direccion: String) {
  createCliente(input: {
    nombreCompleto: $nombreCompleto
    contactoEmail: $contactoEmail
    contactoTel: $contactoTel
    direccion: $direccion
  }) { %s }
}
""" % _CLIENTE_CAMPOS

# ============= EXPEDIENTES =============
_EXPEDIENTE_CAMPOS = (
    "idExpediente idCliente titulo descripcion estado "
    "fechaInicio fechaCierre fechaCreacion fechaActualizacion"
)

GET_EXPEDIENTES = """
query GetExpedientes($limit: Int, $offset: Int, $idCliente: Int, $estado: EstadoExpediente, $q: String) {
  expedientes(limit: $limit, offset: $offset, idCliente: $idCliente, estado: $estado, q: $q) { %s }
}
""" % _EXPEDIENTE_CAMPOS

GET_EXPEDIENTE = """
query GetExpediente($id: Int!) {
  expediente(id: $id) { %s }
}
""" % _EXPEDIENTE_CAMPOS

CREATE_EXPEDIENTE = """
mutation CreateExpediente($idCliente: Int!, $titulo: String!, $descripcion: String, $estado: EstadoExpediente) {
  createExpediente(input: {
    idCliente: $idCliente
    titulo: $titulo
    descripcion: $descripcion
    estado: $estado
  }) { idExpediente idCliente titulo descripcion estado fechaInicio }
}
"""

UPDATE_EXPEDIENTE = """
mutation UpdateExpediente($id: Int!, $titulo: String, $descripcion: String, $estado: EstadoExpediente) {
  updateExpediente(id: $id, input: { titulo: $titulo, descripcion: $descripcion, estado: $estado }) {
    idExpediente titulo descripcion estado fechaActualizacion
  }
}
"""

DELETE_EXPEDIENTE = """
mutation DeleteExpediente($id: Int!) {
  deleteExpediente(id: $id) { success message }
}
"""

# ============= NOTAS =============
_NOTA_CAMPOS = "idNota idExpediente contenido tipo fechaCreacion fechaActualizacion"

GET_NOTAS_EXPEDIENTE = """
query GetNotasExpediente($idExpediente: Int!) {
  notasExpediente(idExpediente: $idExpediente) { %s }
}
""" % _NOTA_CAMPOS

CREATE_NOTA = """
mutation CreateNota($idExpediente: Int!, $contenido: String!, $tipo: String) {
  createNota(input: { idExpediente: $idExpediente, contenido: $contenido, tipo: $tipo }) {
    idNota idExpediente contenido tipo fechaCreacion
  }
}
"""

UPDATE_NOTA = """
mutation UpdateNota($id: Int!, $contenido: String, $tipo: String) {
  updateNota(id: $id, input: { contenido: $contenido, tipo: $tipo }) {
    idNota contenido tipo fechaActualizacion
  }
}
"""

DELETE_NOTA = """
mutation DeleteNota($id: Int!) {
  deleteNota(id: $id) { success message }
}
"""

# ============= PLAZOS =============
_PLAZO_CAMPOS = (
    "idPlazo idExpediente descripcion fechaVencimiento cumplido "
    "fechaCumplimiento fechaCreacion fechaActualizacion"
)

GET_PLAZOS_EXPEDIENTE = """
query GetPlazosExpediente($idExpediente: Int!) {
  plazosExpediente(idExpediente: $idExpediente) { %s }
}
""" % _PLAZO_CAMPOS

CREATE_PLAZO = """
mutation CreatePlazo($idExpediente: Int!, $descripcion: String!, $fechaVencimiento: String!) {
  createPlazo(input: {
    idExpediente: $idExpediente
    descripcion: $descripcion
    fechaVencimiento: $fechaVencimiento
  }) { idPlazo idExpediente descripcion fechaVencimiento cumplido }
}
"""

UPDATE_PLAZO = """
mutation UpdatePlazo($idPlazo: Int!, $descripcion: String, $fechaVencimiento: String) {
  updatePlazo(idPlazo: $idPlazo, input: { descripcion: $descripcion, fechaVencimiento: $fechaVencimiento }) {
    idPlazo descripcion fechaVencimiento fechaActualizacion
  }
}
"""

MARCAR_PLAZO_CUMPLIDO = """
mutation MarcarPlazoCumplido($idPlazo: Int!) {
  marcarPlazoCumplido(idPlazo: $idPlazo) { idPlazo cumplido fechaCumplimiento }
}
"""

DELETE_PLAZO = """
mutation DeletePlazo($idPlazo: Int!) {
  deletePlazo(idPlazo: $idPlazo) { success message }
}
"""

# ============= DOCUMENTOS =============
# La subida y la descarga siguen por REST (multipart / binario)
_DOC_CAMPOS = "id docId filename size idCliente idExpediente createdAt"

GET_ADMIN_DOCUMENTOS = """
query GetAdminDocumentos($limit: Int, $offset: Int) {
  adminDocumentos(limit: $limit, offset: $offset) { %s }
}
""" % _DOC_CAMPOS

DELETE_DOCUMENTO = """
mutation DeleteDocumento($docId: String!) {
  eliminarDocumento(docId: $docId) { success message }
}
"""

# ============= MACHINE LEARNING (sólo lectura) =============
ML_PROB_RIESGO = """
query MLProbRiesgo {
  mlProbRiesgo {
    status model accuracy total
    predictions { idPlazo descripcion fechaVencimiento cumplido idExpediente probabilidadRiesgo features }
  }
}
"""

ML_DOCS_CLUSTERS = """
query MLDocsClusters($k: Int) {
  mlDocsClusters(k: $k) {
    status nClusters nSamples
    assignments { docId filename cluster idExpediente idCliente features }
  }
}
"""

ML_PLAZOS_ANOMALIAS = """
query MLPlazosAnomalias($contaminacion: Float, $maxLista: Int, $explain: Boolean) {
  mlPlazosAnomalias(contaminacion: $contaminacion, maxLista: $maxLista, explain: $explain) {
    status nSamples numAnomalos contaminacion features
    top { idPlazo descripcion fechaVencimiento cumplido idExpediente score features }
  }
}
"""

# core/errors.py
from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """
    Falla de cualquier llamada saliente (REST, GraphQL o analítica).

    - mensaje: texto entregado por el backend (o None si no vino ninguno)
    - status: código HTTP si hubo respuesta
    - detalle: descripción técnica (red, timeout, HTTP 500...)
    """

    def __init__(self, mensaje: Optional[str] = None, status: Optional[int] = None,
                 detalle: str = "", payload: Any = None):
        self.mensaje = mensaje
        self.status = status
        self.detalle = detalle
        self.payload = payload
        super().__init__(mensaje or detalle or "Error de comunicación con el backend")


def _como_texto(valor) -> Optional[str]:
    if isinstance(valor, (list, tuple)):
        partes = [str(v) for v in valor if v not in (None, "")]
        return ", ".join(partes) or None
    if valor in (None, ""):
        return None
    return str(valor)


def mensaje_de_payload(payload) -> Optional[str]:
    """Extrae el mensaje de error de un cuerpo JSON del backend ('message' o 'error')."""
    if not isinstance(payload, dict):
        return None
    for clave in ("message", "error"):
        texto = _como_texto(payload.get(clave))
        if texto:
            return texto
    return None


def mensaje_error(exc: Exception, fallback: str) -> str:
    return getattr(exc, "mensaje", None) or fallback

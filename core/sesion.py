# core/sesion.py
"""
Sesión del usuario de la consola.

El token del backend y el usuario devuelto en el login se guardan en la sesión
de Django bajo las claves "token" y "usuario".
"""
import logging

logger = logging.getLogger(__name__)

CLAVE_TOKEN = "token"
CLAVE_USUARIO = "usuario"


def usuario_actual(request):
    return request.session.get(CLAVE_USUARIO)


def token_actual(request):
    return request.session.get(CLAVE_TOKEN)


def iniciar_sesion(request, email, password):
    """
    Autentica contra el backend configurado y guarda token + usuario.
    Si el backend rechaza, ApiError se propaga y la sesión queda intacta.
    """
    from .backends import get_backend

    token, usuario = get_backend(token="").login(email, password)
    request.session.cycle_key()
    request.session[CLAVE_TOKEN] = token
    request.session[CLAVE_USUARIO] = usuario
    request.usuario = usuario
    logger.info("Inicio de sesión: %s", usuario.get("email") or email)
    return usuario


def cerrar_sesion(request):
    usuario = usuario_actual(request) or {}
    request.session.pop(CLAVE_TOKEN, None)
    request.session.pop(CLAVE_USUARIO, None)
    request.usuario = None
    logger.info("Cierre de sesión: %s", usuario.get("email", "-"))

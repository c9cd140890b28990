# core/middleware.py
from .sesion import usuario_actual


def usuario_sesion(get_response):
    def middleware(request):
        # disponible en vistas y plantillas como request.usuario
        request.usuario = usuario_actual(request)
        return get_response(request)
    return middleware

# core/decorators.py
from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect, resolve_url

from .sesion import token_actual


def sesion_requerida(view_func):
    """Como login_required, pero mirando el token del backend en la sesión."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not token_actual(request):
            url = resolve_url(settings.LOGIN_URL)
            return redirect(f"{url}?{urlencode({'next': request.get_full_path()})}")
        return view_func(request, *args, **kwargs)
    return _wrapped


class SesionRequeridaMixin:
    """Versión para vistas basadas en clase."""

    def dispatch(self, request, *args, **kwargs):
        return sesion_requerida(super().dispatch)(request, *args, **kwargs)

# core/http.py
from urllib.parse import urlencode

from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme


def url_con_params(nombre, *args, **params):
    url = reverse(nombre, args=args)
    params = {k: v for k, v in params.items() if v not in (None, "", False)}
    return f"{url}?{urlencode(params)}" if params else url


def volver(request, nombre, *args, **params):
    """
    Redirección tras un POST: respeta el campo oculto "next" si es local,
    si no arma la URL nombrada con los filtros dados.
    """
    nxt = request.POST.get("next")
    if nxt and url_has_allowed_host_and_scheme(nxt, allowed_hosts={request.get_host()}):
        return redirect(nxt)
    return redirect(url_con_params(nombre, *args, **params))

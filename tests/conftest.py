# tests/conftest.py
import json
from collections import namedtuple

import pytest
import requests

Llamada = namedtuple("Llamada", "method url kwargs")


class FakeResponse:
    def __init__(self, status_code=200, data=None, content=None, headers=None):
        self.status_code = status_code
        self._data = data
        if content is None:
            content = b"" if data is None else json.dumps(data).encode()
        self.content = content
        self.headers = headers or {}

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._data is None:
            raise ValueError("sin JSON")
        return self._data


class FakeHttp:
    """
    Sustituto de requests.Session: registra cada llamada y responde según
    las rutas configuradas (método + fragmento de URL). La última ruta
    registrada que coincide gana. Si la respuesta es una excepción, se lanza.
    """

    def __init__(self):
        self.rutas = []
        self.llamadas = []

    def __call__(self):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def close(self):
        pass

    def responder(self, method, fragmento, respuesta=None, status=200, **kw):
        if respuesta is None or isinstance(respuesta, (dict, list)):
            respuesta = FakeResponse(status, respuesta, **kw)
        self.rutas.append((method.upper(), fragmento, respuesta))
        return self

    def request(self, method, url, **kwargs):
        self.llamadas.append(Llamada(method.upper(), url, kwargs))
        for m, fragmento, resp in reversed(self.rutas):
            if m == method.upper() and fragmento in url:
                if isinstance(resp, Exception):
                    raise resp
                return resp
        return FakeResponse(404, {"message": f"sin ruta para {method} {url}"})

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def llamadas_a(self, fragmento, method=None):
        return [c for c in self.llamadas if fragmento in c.url and (method is None or c.method == method.upper())]


@pytest.fixture(autouse=True)
def _ajustes(settings):
    settings.SECURE_SSL_REDIRECT = False
    settings.SESSION_COOKIE_SECURE = False
    settings.CSRF_COOKIE_SECURE = False
    settings.STORAGES = {
        "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }
    settings.API_BACKEND = "rest"
    settings.API_BASE_URL = "http://api.test"
    settings.DOCS_API_BASE_URL = "http://docs.test"
    settings.API_GRAPHQL_URL = "http://api.test/graphql"
    settings.ANALYTICS_BASE_URL = "http://ml.test"
    settings.API_TIMEOUT = 15
    settings.API_PUBLIC_PREFIXES = ("/admin/",)


@pytest.fixture
def fake_http(monkeypatch):
    http = FakeHttp()
    monkeypatch.setattr(requests, "Session", http)
    return http


USUARIO = {"id_usuario": 1, "email": "ana@bufete.cl", "rol": "ADMIN"}


@pytest.fixture
def logueado(client, db):
    session = client.session
    session["token"] = "tok-123"
    session["usuario"] = dict(USUARIO)
    session.save()
    return client

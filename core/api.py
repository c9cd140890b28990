# core/api.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Any, Dict, Iterable, Optional

import requests
from django.conf import settings

from .errors import ApiError, mensaje_de_payload

logger = logging.getLogger(__name__)


def con_plazo(fn, limite: float):
    """
    Ejecuta fn() en un hilo aparte con un plazo total de `limite` segundos
    (conexión + cuerpo completo). Pasado el plazo lanza requests.Timeout.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(fn)
    try:
        return future.result(timeout=limite)
    except FuturesTimeout as e:
        raise requests.Timeout(f"plazo total de {limite}s excedido") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


class ApiClient:
    """
    Cliente REST autenticado.

    Adjunta "Authorization: Bearer <token>" a cada request, salvo a las rutas
    que comienzan con un prefijo público (por defecto /admin/).
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 public_prefixes: Optional[Iterable[str]] = None,
                 timeout: Optional[float] = None, http=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.public_prefixes = tuple(
            public_prefixes if public_prefixes is not None else settings.API_PUBLIC_PREFIXES
        )
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.http = http or requests.Session()

    def es_publica(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.public_prefixes)

    def headers_para(self, path: str) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token and not self.es_publica(path):
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, params=None, json=None,
                data=None, files=None, raw: bool = False) -> Any:
        if not path.startswith("/"):
            path = "/" + path
        headers = self.headers_para(path)
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        logger.debug("%s %s (bearer=%s)", method, path, "Authorization" in headers)

        try:
            res = con_plazo(lambda: self.http.request(
                method, self.base_url + path,
                params=params or None, json=json, data=data, files=files,
                headers=headers, timeout=self.timeout,
            ), self.timeout)
        except requests.Timeout as e:
            logger.warning("%s %s: timeout tras %ss", method, path, self.timeout)
            raise ApiError(detalle="timeout") from e
        except requests.RequestException as e:
            logger.warning("%s %s: error de red (%s)", method, path, e)
            raise ApiError(detalle=str(e)) from e

        if not res.ok:
            payload = _json_o_none(res)
            logger.warning("%s %s: HTTP %s", method, path, res.status_code)
            raise ApiError(
                mensaje=mensaje_de_payload(payload),
                status=res.status_code,
                detalle=f"HTTP {res.status_code}",
                payload=payload,
            )

        if raw:
            return res
        if res.status_code == 204 or not res.content:
            return None
        return _json_o_none(res)

    def get(self, path, **kw):
        return self.request("GET", path, **kw)

    def post(self, path, **kw):
        return self.request("POST", path, **kw)

    def patch(self, path, **kw):
        return self.request("PATCH", path, **kw)

    def delete(self, path, **kw):
        return self.request("DELETE", path, **kw)


def _json_o_none(res):
    try:
        return res.json()
    except ValueError:
        return None

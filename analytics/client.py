# analytics/client.py
"""
Lecturas JSON contra el servicio de analítica (sin auth).

Cada endpoint se pide en paralelo con su propio timeout; el fallo de uno
sólo marca su propio resultado.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, NamedTuple, Optional
from urllib.parse import urlencode

import requests
from django.conf import settings

from core.api import con_plazo
from core.errors import ApiError

logger = logging.getLogger(__name__)


class Resultado(NamedTuple):
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def url_analitica(path: str, **params) -> str:
    url = settings.ANALYTICS_BASE_URL.rstrip("/") + path
    if params:
        url += "?" + urlencode({k: str(v).lower() if isinstance(v, bool) else v for k, v in params.items()})
    return url


def _get(url: str, timeout: float):
    with requests.Session() as http:
        return http.get(url, headers={"Content-Type": "application/json"}, timeout=timeout)


def fetch_json(url: str, timeout: Optional[float] = None) -> Any:
    timeout = timeout if timeout is not None else settings.API_TIMEOUT
    try:
        res = con_plazo(lambda: _get(url, timeout), timeout)
    except requests.Timeout as e:
        logger.warning("Analítica: timeout (%ss) en %s", timeout, url)
        raise ApiError(detalle="timeout") from e
    except requests.RequestException as e:
        logger.warning("Analítica: error de red en %s (%s)", url, e)
        raise ApiError(detalle=str(e)) from e

    if not res.ok:
        logger.warning("Analítica: HTTP %s en %s", res.status_code, url)
        raise ApiError(status=res.status_code, detalle=f"HTTP {res.status_code}")
    try:
        return res.json()
    except ValueError as e:
        raise ApiError(status=res.status_code, detalle="Respuesta no es JSON") from e


def fetch_all(tareas: Dict[str, Callable[[], Any]], max_workers: Optional[int] = None,
              limite: Optional[float] = None) -> Dict[str, Resultado]:
    """
    Ejecuta cada tarea en un hilo y devuelve {clave: Resultado(data, error)}.
    Una ApiError queda registrada en su propio Resultado; las tareas que no
    terminan dentro de `limite` segundos quedan como Resultado(error="timeout").
    """
    if not tareas:
        return {}
    limite = limite if limite is not None else settings.API_TIMEOUT
    executor = ThreadPoolExecutor(max_workers=max_workers or len(tareas))
    futures = {executor.submit(fn): clave for clave, fn in tareas.items()}
    try:
        hechos, pendientes = wait(futures, timeout=limite)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    resultados: Dict[str, Resultado] = {}
    for future in hechos:
        clave = futures[future]
        try:
            resultados[clave] = Resultado(data=future.result())
        except ApiError as e:
            resultados[clave] = Resultado(error=e.mensaje or e.detalle or str(e))
    for future in pendientes:
        logger.warning("Analítica: %s sin respuesta tras %ss", futures[future], limite)
        resultados[futures[future]] = Resultado(error="timeout")
    return resultados

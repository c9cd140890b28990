# documents/filtros.py
"""Paginación y filtros en memoria sobre la página de documentos ya descargada."""
import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date

from core.formato import a_datetime

LIMIT_DEFAULT = 25
LIMIT_MAX = 200


def _entero(valor, default):
    try:
        return int(str(valor).strip())
    except (TypeError, ValueError):
        return default


def paginacion(params):
    """limit en 1..200 (25 si no es número) y offset >= 0."""
    limit = _entero(params.get("limit"), LIMIT_DEFAULT) or LIMIT_DEFAULT
    limit = max(1, min(LIMIT_MAX, limit))
    offset = max(0, _entero(params.get("offset"), 0))
    return limit, offset


def _limite_dia(valor, fin=False):
    try:
        d = parse_date(valor) if valor else None
    except ValueError:
        d = None
    if d is None:
        return None
    t = datetime.time.max if fin else datetime.time.min
    return timezone.make_aware(datetime.datetime.combine(d, t), timezone.get_current_timezone())


def _creado(doc):
    return a_datetime(doc.get("created_at"))


def filtrar_documentos(docs, expediente=None, desde=None, hasta=None):
    """
    expediente: sólo se aplica si es numérico.
    desde / hasta: días completos (YYYY-MM-DD), ambos inclusive, sobre created_at.
    """
    out = list(docs)

    expediente = (expediente or "").strip()
    if expediente.isdecimal():
        num = int(expediente)
        out = [d for d in out if _entero(d.get("id_expediente"), None) == num]

    ini = _limite_dia(desde)
    if ini:
        out = [d for d in out if _creado(d) is not None and _creado(d) >= ini]
    fin = _limite_dia(hasta, fin=True)
    if fin:
        out = [d for d in out if _creado(d) is not None and _creado(d) <= fin]
    return out

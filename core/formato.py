# core/formato.py
from __future__ import annotations

import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

SIN_VALOR = "-"


def a_datetime(value):
    """Convierte ISO (str), date o datetime en datetime aware; None si no se puede."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        dt = datetime.datetime.combine(value, datetime.time.min)
    else:
        texto = str(value).strip()
        try:
            dt = parse_datetime(texto)
        except ValueError:
            dt = None
        if dt is None:
            try:
                d = parse_date(texto[:10])
            except ValueError:
                d = None
            if d is None:
                return None
            dt = datetime.datetime.combine(d, datetime.time.min)
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def fecha_hora(value) -> str:
    dt = a_datetime(value)
    if dt is None:
        return SIN_VALOR
    return timezone.localtime(dt).strftime("%d-%m-%Y %H:%M")


def fecha(value) -> str:
    # fechas "YYYY-MM-DD" sin hora se muestran tal cual, sin corrimiento de zona
    if isinstance(value, str) and len(value.strip()) == 10:
        d = parse_date(value.strip())
        if d:
            return d.strftime("%d-%m-%Y")
    dt = a_datetime(value)
    if dt is None:
        return SIN_VALOR
    return timezone.localtime(dt).strftime("%d-%m-%Y")


def fecha_iso(value) -> str:
    """'YYYY-MM-DD' para precargar <input type="date">."""
    if value in (None, ""):
        return ""
    return str(value)[:10]

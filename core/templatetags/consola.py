from django import template

from core import formato
from analytics.stats import formato_bytes

register = template.Library()


@register.filter
def fecha_hora(value):
    return formato.fecha_hora(value)


@register.filter
def fecha(value):
    return formato.fecha(value)


@register.filter
def fecha_iso(value):
    return formato.fecha_iso(value)


@register.filter(name="bytes")
def bytes_(value):
    return formato_bytes(value)


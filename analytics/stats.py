# analytics/stats.py
import math


def quantile(values, q):
    """Cuantil con interpolación lineal entre vecinos; 0 si no hay datos."""
    a = sorted(values or [])
    if not a:
        return 0
    pos = (len(a) - 1) * q
    base = math.floor(pos)
    resto = pos - base
    if base + 1 < len(a):
        return a[base] + resto * (a[base + 1] - a[base])
    return a[base]


def r2_badge_text(r2):
    if isinstance(r2, bool) or not isinstance(r2, (int, float)):
        return "R²: —"
    if r2 >= 0.7:
        return f"R²: {r2:.3f} · bueno"
    if r2 >= 0.3:
        return f"R²: {r2:.3f} · aceptable"
    if r2 >= 0:
        return f"R²: {r2:.3f} · bajo"
    return f"R²: {r2:.3f} · peor que promedio"


def formato_bytes(n):
    if n in (None, ""):
        return "-"
    try:
        n = float(n)
    except (TypeError, ValueError):
        return str(n)
    if n < 1024:
        return f"{n:.0f} B"
    for unidad in ("KB", "MB", "GB"):
        n /= 1024
        if n < 1024 or unidad == "GB":
            return f"{n:.1f} {unidad}"

# analytics/transforms.py
"""
Derivaciones de las respuestas de analítica a datos listos para graficar.

Todas son funciones puras: reciben el JSON del endpoint (o None si falló)
y devuelven listas/dicts serializables con json.dumps.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .stats import quantile

COLORS = [
    "#6366F1", "#22C55E", "#F59E0B", "#EF4444", "#14B8A6",
    "#8B5CF6", "#06B6D4", "#A3E635", "#FB7185",
]
ROJO, AMBAR, VERDE = "#EF4444", "#F59E0B", "#22C55E"


def _num(v, default=0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _lista(data, clave) -> List[Dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    return [x for x in (data.get(clave) or []) if isinstance(x, dict)]


def _dict(data, clave) -> Dict[str, Any]:
    valor = data.get(clave) if isinstance(data, dict) else None
    return valor if isinstance(valor, dict) else {}


# ============ Supervisado (plazos) ============
def prioridad_pie(data) -> List[Dict[str, Any]]:
    counts = {"ALTA": 0, "MEDIA": 0, "BAJA": 0}
    for r in _lista(data, "data"):
        p = r.get("prioridad_recomendada")
        counts[p] = counts.get(p, 0) + 1
    return [{"name": k, "value": v} for k, v in counts.items()]


def top_riesgo(data, n=5) -> List[Dict[str, Any]]:
    rows = sorted(_lista(data, "data"), key=lambda r: _num(r.get("riesgo_atraso")), reverse=True)
    return [
        {
            "id_plazo": r.get("id_plazo"),
            "descripcion": r.get("descripcion"),
            "riesgo": round(_num(r.get("riesgo_atraso")), 4),
            "prioridad": r.get("prioridad_recomendada"),
        }
        for r in rows[:n]
    ]


def overdue_stats(data) -> List[Dict[str, Any]]:
    rows = _lista(data, "data")
    vencidos = sum(1 for r in rows if r.get("overdue_now"))
    return [
        {"name": "Vencidos", "value": vencidos},
        {"name": "Al día", "value": len(rows) - vencidos},
    ]


# ============ Clusters ============
def cluster_sizes(data) -> List[Dict[str, Any]]:
    return [{"cluster": str(c.get("cluster")), "size": c.get("size")} for c in _lista(data, "clusters")]


def explicar_centro_plazo(ce=None) -> Dict[str, Any]:
    ce = ce or {}
    partes = []
    d = _num(ce.get("days_to_due"))
    if d <= 2:
        partes.append("próximos a vencer")
    elif d < 10:
        partes.append("en curso")
    else:
        partes.append("lejanos a vencer")

    dc = _num(ce.get("docs_count_exp"))
    if dc == 0:
        partes.append("sin documentos")
    elif dc < 2:
        partes.append("1 documento")
    else:
        partes.append("varios documentos")

    partes.append("actividad reciente" if _num(ce.get("recent_docs_7d")) >= 0.5 else "sin actividad reciente")

    dl = _num(ce.get("desc_len"))
    if dl >= 25:
        partes.append("descripciones largas")
    elif dl <= 8:
        partes.append("descripciones cortas")

    return {"label": " · ".join(partes[:3]), "bullets": partes}


def explicar_centro_doc(ce=None) -> Dict[str, Any]:
    ce = ce or {}
    partes = []
    s = _num(ce.get("size_mb"))
    if s < 0.3:
        partes.append("archivos pequeños")
    elif s < 0.7:
        partes.append("archivos medianos")
    else:
        partes.append("archivos grandes")

    partes.append("recientes" if _num(ce.get("days_since_created")) <= 0 else "antiguos")

    nl = _num(ce.get("name_len"))
    if nl < 20:
        partes.append("nombre corto")
    elif nl < 35:
        partes.append("nombre medio")
    else:
        partes.append("nombre largo")

    partes.append("PDF" if _num(ce.get("is_pdf")) >= 0.5 else "no PDF")

    return {"label": " · ".join(partes[:3]), "bullets": partes}


def explicar_clusters(data, explicar) -> Dict[str, Dict[str, Any]]:
    return {str(c.get("cluster")): explicar(c.get("center") or {}) for c in _lista(data, "clusters")}


# ============ Anomalías ============
def anomaly_bars(data) -> List[Dict[str, Any]]:
    return [
        {
            "id": t.get("id_plazo"),
            "descripcion": t.get("descripcion"),
            "score": round(_num(t.get("anomaly_score")), 4),
            "es_anomalo": bool(t.get("es_anomalo")),
            "color": ROJO if t.get("es_anomalo") else VERDE,
        }
        for t in _lista(data, "top")
    ]


def doc_anomaly_bars(data) -> List[Dict[str, Any]]:
    return [
        {
            "filename": t.get("filename"),
            "score": round(_num(t.get("anomaly_score")), 4),
            "es_anomalo": bool(t.get("es_anomalo")),
            "color": ROJO if t.get("es_anomalo") else VERDE,
            "reasons": [
                {
                    "feature": r.get("feature"),
                    "value": round(_num(r.get("value")), 3),
                    "zscore": round(_num(r.get("zscore")), 2),
                }
                for r in (t.get("reasons") or [])[:3] if isinstance(r, dict)
            ],
        }
        for t in _lista(data, "top")
    ]


def docs_scatter(data) -> List[Dict[str, Any]]:
    out = []
    for a in _lista(data, "assignments"):
        f = a.get("features") or {}
        out.append({
            "x": _num(f.get("name_len")),
            "y": round(_num(f.get("size_mb")), 3),
            "cluster": str(a.get("cluster")),
            "filename": a.get("filename"),
        })
    return out


def near_pairs(data) -> List[Dict[str, Any]]:
    def nombre(doc):
        doc = doc or {}
        return doc.get("filename") or doc.get("doc_id")

    return [
        {"a": nombre(p.get("a")), "b": nombre(p.get("b")), "score": round(_num(p.get("score")), 3)}
        for p in _lista(data, "pairs")
    ]


# ============ Deep / autoencoders ============
def color_banda(score) -> str:
    if score >= 0.7:
        return ROJO
    if score >= 0.4:
        return AMBAR
    return VERDE


def ae_bars(data, etiqueta="id_plazo") -> List[Dict[str, Any]]:
    out = []
    for t in _lista(data, "top"):
        score = round(_num(t.get("deep_anomaly_score")), 4)
        fila = {"score": score, "color": color_banda(score)}
        if etiqueta == "id_plazo":
            fila.update(id=t.get("id_plazo"), descripcion=t.get("descripcion"))
        else:
            fila.update(filename=t.get("filename"))
        out.append(fila)
    return out


# ============ Regresión ============
def coeficientes(data, por_abs=True) -> List[Dict[str, Any]]:
    c = _dict(data, "coefficients_std_space")
    items = [{"name": k, "coef": _num(v)} for k, v in c.items()]
    clave = (lambda i: abs(i["coef"])) if por_abs else (lambda i: i["coef"])
    items.sort(key=clave, reverse=True)
    for i in items:
        i["color"] = VERDE if i["coef"] >= 0 else ROJO
    return items


def residuos(data, id_key="id_plazo", etiqueta_key="descripcion") -> Dict[str, Any]:
    """Residuos (real - predicho) ordenados por |residuo|, coloreados contra el P75."""
    filas = []
    for p in _lista(data, "predictions"):
        r = _num(p.get("residual"))
        filas.append({
            "id": p.get(id_key),
            "etiqueta": p.get(etiqueta_key),
            "residual": r,
            "abs_residual": abs(r),
            "y_true": _num(p.get("y_true")),
            "y_pred": _num(p.get("y_pred")),
        })
    filas.sort(key=lambda f: f["abs_residual"], reverse=True)
    umbral = quantile([f["abs_residual"] for f in filas], 0.75)
    for f in filas:
        a = f["abs_residual"]
        f["color"] = ROJO if a >= umbral else AMBAR if a >= umbral * 0.5 else VERDE
    return {"filas": filas, "umbral": umbral}


def dispersion(data, id_key="id_plazo") -> Dict[str, Any]:
    puntos = [
        {"x": _num(p.get("y_true")), "y": _num(p.get("y_pred")), "id": p.get(id_key)}
        for p in _lista(data, "predictions")
    ]
    if not puntos:
        return {"puntos": [], "min": 0, "max": 1}
    valores = [p["x"] for p in puntos] + [p["y"] for p in puntos]
    return {"puntos": puntos, "min": min(valores), "max": max(valores)}


def r2_folds_texto(data) -> str:
    cv = _dict(data, "cv")
    folds = [v for v in (cv.get("r2_folds") or []) if isinstance(v, (int, float)) and not isinstance(v, bool)]
    if not folds:
        return ""
    return "R² por fold: " + " · ".join(f"{v:.3f}" for v in folds)


def mae_texto(data, unidad="días", decimales=2) -> str:
    cv = _dict(data, "cv")
    mae = cv.get("mae_mean")
    if isinstance(mae, bool) or not isinstance(mae, (int, float)):
        return ""
    return f"MAE: {mae:.{decimales}f} {unidad}"


def r2_medio(data):
    cv = _dict(data, "cv")
    return cv.get("r2_mean")

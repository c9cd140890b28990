# analytics/views.py
import json
from collections import Counter

from django.conf import settings
from django.shortcuts import render

from core.backends import GraphQLBackend
from core.decorators import sesion_requerida
from core.sesion import token_actual

from . import transforms as tx
from .client import fetch_all, fetch_json, url_analitica
from .stats import r2_badge_text

KFOLDS = (3, 5, 10)


def a_json(obj):
    return json.dumps(obj, ensure_ascii=False)


def endpoints_dashboard():
    return {
        "sup": url_analitica("/ml/supervisado/prob_riesgo"),
        "ml_clu": url_analitica("/ml/no_supervisado/clusters", k=3),
        "ml_ano": url_analitica("/ml/no_supervisado/anomalias"),
        "doc_clu": url_analitica("/docs/no_supervisado/clusters", k=3),
        "doc_ano": url_analitica("/docs/no_supervisado/anomalias", contaminacion=0.2, explain=True, k_reasons=3),
        "near_dup": url_analitica("/docs/near_duplicados", threshold=0.85, max_pairs=50, w_name=0.7, w_size=0.3),
        "ae_plazos": url_analitica("/ml/deep/plazos/autoencoder", epochs=150, hidden=8, bottleneck=3, lr=0.01, top=10),
        "ae_docs": url_analitica("/ml/deep/docs/autoencoder", epochs=150, hidden=8, bottleneck=2, lr=0.01, top=10),
    }


def _tareas(urls):
    return {clave: (lambda u=url: fetch_json(u)) for clave, url in urls.items()}


def datos_dashboard(res):
    """Arma los datos de cada tarjeta a partir de los resultados (data, error)."""
    sup, ml_clu, ml_ano = res["sup"].data, res["ml_clu"].data, res["ml_ano"].data
    doc_clu, doc_ano = res["doc_clu"].data, res["doc_ano"].data

    plazo_explica = tx.explicar_clusters(ml_clu, tx.explicar_centro_plazo)
    doc_explica = tx.explicar_clusters(doc_clu, tx.explicar_centro_doc)

    return {
        "prioridad_pie": tx.prioridad_pie(sup),
        "top_riesgo": tx.top_riesgo(sup),
        "overdue": tx.overdue_stats(sup),
        "cluster_sizes": tx.cluster_sizes(ml_clu),
        "plazo_explica": plazo_explica,
        "anomaly_bars": tx.anomaly_bars(ml_ano),
        "doc_cluster_sizes": tx.cluster_sizes(doc_clu),
        "doc_explica": doc_explica,
        "docs_scatter": tx.docs_scatter(doc_clu),
        "doc_anomaly_bars": tx.doc_anomaly_bars(doc_ano),
        "near_pairs": tx.near_pairs(res["near_dup"].data),
        "ae_plazos": tx.ae_bars(res["ae_plazos"].data, "id_plazo"),
        "ae_docs": tx.ae_bars(res["ae_docs"].data, "filename"),
        "colors": tx.COLORS,
    }


@sesion_requerida
def dashboard(request):
    res = fetch_all(_tareas(endpoints_dashboard()))
    datos = datos_dashboard(res)
    return render(request, "analytics/dashboard.html", {
        "base_url": settings.ANALYTICS_BASE_URL,
        "errores": {k: r.error for k, r in res.items()},
        "datos": datos,
        "datos_json": a_json(datos),
    })


def datos_regresion(data, por_abs, id_key, etiqueta_key, unidad, decimales):
    r2 = tx.r2_medio(data)
    return {
        "coeficientes": tx.coeficientes(data, por_abs),
        "residuos": tx.residuos(data, id_key, etiqueta_key),
        "dispersion": tx.dispersion(data, id_key),
        "r2_folds": tx.r2_folds_texto(data),
        "r2_badge": r2_badge_text(r2) if isinstance(r2, (int, float)) else "",
        "mae": tx.mae_texto(data, unidad, decimales),
    }


@sesion_requerida
def regresion(request):
    try:
        kfold = int(request.GET.get("kfold", 5))
    except ValueError:
        kfold = 5
    if kfold not in KFOLDS:
        kfold = 5
    orden = "signo" if request.GET.get("orden") == "signo" else "abs"
    por_abs = orden == "abs"

    res = fetch_all(_tareas({
        "plazos": url_analitica("/ml/regresion/plazos/dias_restantes", kfold=kfold),
        "docs": url_analitica("/docs/regresion/size_mb", kfold=kfold),
    }))
    datos = {
        "plazos": datos_regresion(res["plazos"].data, por_abs, "id_plazo", "descripcion", "días", 2),
        "docs": datos_regresion(res["docs"].data, por_abs, "doc_id", "filename", "MB", 3),
    }
    return render(request, "analytics/regresion.html", {
        "kfold": kfold,
        "kfolds": KFOLDS,
        "orden": orden,
        "errores": {k: r.error for k, r in res.items()},
        "datos": datos,
        "datos_json": a_json(datos),
    })


def resumen_clusters(data):
    conteo = Counter(str(a.get("cluster")) for a in (data or {}).get("assignments") or [])
    return [{"cluster": k, "size": v} for k, v in sorted(conteo.items())]


@sesion_requerida
def ml_graphql(request):
    """Resumen de las tres consultas ML de sólo lectura del backend GraphQL."""
    backend = GraphQLBackend(token=token_actual(request))
    res = fetch_all({
        "riesgo": backend.ml_prob_riesgo,
        "clusters": lambda: backend.ml_docs_clusters(k=3),
        "anomalias": lambda: backend.ml_plazos_anomalias(contaminacion=0.2, max_lista=10, explain=True),
    })
    riesgo = res["riesgo"].data or {}
    predicciones = sorted(
        riesgo.get("predictions") or [],
        key=lambda p: p.get("probabilidadRiesgo") or 0, reverse=True,
    )
    clusters = res["clusters"].data or {}
    anomalias = res["anomalias"].data or {}
    datos = {
        "riesgo": riesgo,
        "top_riesgo": predicciones[:10],
        "clusters": clusters,
        "cluster_sizes": resumen_clusters(clusters),
        "anomalias": anomalias,
    }
    return render(request, "analytics/ml_graphql.html", {
        "errores": {k: r.error for k, r in res.items()},
        "datos": datos,
        "datos_json": a_json({"cluster_sizes": datos["cluster_sizes"]}),
    })

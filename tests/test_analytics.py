import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from analytics import transforms as tx
from analytics.client import fetch_all, fetch_json
from analytics.stats import formato_bytes, quantile, r2_badge_text
from core.errors import ApiError


# ---- stats ----
def test_quantile_interpola():
    assert quantile([], 0.75) == 0
    assert quantile([5], 0.75) == 5
    assert quantile([1, 2, 3, 4], 0.75) == pytest.approx(3.25)
    assert quantile([4, 1, 3, 2], 0.5) == pytest.approx(2.5)


@pytest.mark.parametrize("r2,texto", [
    (0.812, "R²: 0.812 · bueno"),
    (0.3, "R²: 0.300 · aceptable"),
    (0.0, "R²: 0.000 · bajo"),
    (-0.5, "R²: -0.500 · peor que promedio"),
    (None, "R²: —"),
])
def test_r2_badge(r2, texto):
    assert r2_badge_text(r2) == texto


def test_formato_bytes():
    assert formato_bytes(512) == "512 B"
    assert formato_bytes(1536) == "1.5 KB"
    assert formato_bytes(5 * 1024 * 1024) == "5.0 MB"
    assert formato_bytes(None) == "-"


# ---- derivaciones ----
SUP = {"data": [
    {"id_plazo": 1, "descripcion": "a", "riesgo_atraso": 0.123456, "prioridad_recomendada": "BAJA", "overdue_now": False},
    {"id_plazo": 2, "descripcion": "b", "riesgo_atraso": 0.91, "prioridad_recomendada": "ALTA", "overdue_now": True},
    {"id_plazo": 3, "descripcion": "c", "riesgo_atraso": 0.5, "prioridad_recomendada": "ALTA", "overdue_now": False},
]}


def test_prioridad_pie_parte_de_cero():
    assert tx.prioridad_pie(SUP) == [
        {"name": "ALTA", "value": 2}, {"name": "MEDIA", "value": 0}, {"name": "BAJA", "value": 1},
    ]
    assert [x["value"] for x in tx.prioridad_pie(None)] == [0, 0, 0]


def test_top_riesgo_y_vencidos():
    top = tx.top_riesgo(SUP)
    assert [r["id_plazo"] for r in top] == [2, 3, 1]
    assert top[2]["riesgo"] == 0.1235
    assert tx.overdue_stats(SUP) == [{"name": "Vencidos", "value": 1}, {"name": "Al día", "value": 2}]


def test_explicacion_centro_plazo():
    info = tx.explicar_centro_plazo({"days_to_due": 1, "docs_count_exp": 0, "recent_docs_7d": 0.8, "desc_len": 30})
    assert info["bullets"] == ["próximos a vencer", "sin documentos", "actividad reciente", "descripciones largas"]
    assert info["label"] == "próximos a vencer · sin documentos · actividad reciente"
    assert tx.explicar_centro_plazo({"days_to_due": 20, "docs_count_exp": 3, "desc_len": 12})["bullets"] == [
        "lejanos a vencer", "varios documentos", "sin actividad reciente",
    ]


def test_explicacion_centro_doc():
    info = tx.explicar_centro_doc({"size_mb": 0.5, "days_since_created": 3, "name_len": 40, "is_pdf": 1})
    assert info["bullets"] == ["archivos medianos", "antiguos", "nombre largo", "PDF"]
    assert info["label"] == "archivos medianos · antiguos · nombre largo"


def test_bandas_autoencoder_y_scatter():
    bars = tx.ae_bars({"top": [{"id_plazo": 1, "deep_anomaly_score": 0.75}, {"id_plazo": 2, "deep_anomaly_score": 0.4},
                               {"id_plazo": 3, "deep_anomaly_score": 0.1}]})
    assert [b["color"] for b in bars] == [tx.ROJO, tx.AMBAR, tx.VERDE]
    puntos = tx.docs_scatter({"assignments": [{"cluster": 1, "filename": "a", "features": {"name_len": 12, "size_mb": 0.12345}}]})
    assert puntos == [{"x": 12.0, "y": 0.123, "cluster": "1", "filename": "a"}]


def test_near_pairs_usa_doc_id_sin_nombre():
    pares = tx.near_pairs({"pairs": [{"a": {"filename": "x.pdf"}, "b": {"doc_id": "b2"}, "score": 0.91234}]})
    assert pares == [{"a": "x.pdf", "b": "b2", "score": 0.912}]


def test_regresion_residuos_y_coeficientes():
    data = {
        "coefficients_std_space": {"a": -3.0, "b": 2.0, "c": 0.5},
        "predictions": [
            {"id_plazo": i, "residual": r, "y_true": t, "y_pred": t - r}
            for i, (r, t) in enumerate([(1.0, 5), (-4.0, 8), (2.0, 3), (0.2, 1)])
        ],
        "cv": {"r2_folds": [0.5, 0.61, None], "mae_mean": 1.234},
    }
    assert [c["name"] for c in tx.coeficientes(data, por_abs=True)] == ["a", "b", "c"]
    assert [c["name"] for c in tx.coeficientes(data, por_abs=False)] == ["b", "c", "a"]

    res = tx.residuos(data)
    assert [f["residual"] for f in res["filas"]] == [-4.0, 2.0, 1.0, 0.2]
    assert res["umbral"] == pytest.approx(2.5)
    assert [f["color"] for f in res["filas"]] == [tx.ROJO, tx.AMBAR, tx.VERDE, tx.VERDE]

    assert tx.r2_folds_texto(data) == "R² por fold: 0.500 · 0.610"
    assert tx.mae_texto(data) == "MAE: 1.23 días"
    assert tx.dispersion({}) == {"puntos": [], "min": 0, "max": 1}


# ---- lecturas en paralelo ----
def test_fetch_json_http_error(fake_http):
    fake_http.responder("GET", "/ml/no_supervisado/anomalias", None, status=500)
    with pytest.raises(ApiError) as exc:
        fetch_json("http://ml.test/ml/no_supervisado/anomalias")
    assert exc.value.detalle == "HTTP 500"
    assert fake_http.llamadas[-1].kwargs["timeout"] == 15


def test_fetch_all_aisla_fallos():
    def lento():
        raise ApiError(detalle="timeout")

    def rapido():
        time.sleep(0.01)
        return {"ok": True}

    res = fetch_all({"a": lento, "b": rapido})
    assert res["a"].error == "timeout"
    assert res["a"].data is None
    assert res["b"].ok and res["b"].data == {"ok": True}


class _Goteo(BaseHTTPRequestHandler):
    """Responde un JSON de 12 bytes, un byte cada 0.4 s."""

    def do_GET(self):
        cuerpo = b'{"ok": true}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(cuerpo)))
        self.end_headers()
        try:
            for i in range(len(cuerpo)):
                self.wfile.write(cuerpo[i:i + 1])
                self.wfile.flush()
                time.sleep(0.4)
        except OSError:
            pass

    def log_message(self, *args):
        pass


@pytest.fixture
def servidor_lento():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Goteo)
    server.daemon_threads = True
    hilo = threading.Thread(target=server.serve_forever, daemon=True)
    hilo.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/"
    server.shutdown()
    server.server_close()


def test_fetch_json_respeta_plazo_total(servidor_lento):
    inicio = time.monotonic()
    with pytest.raises(ApiError) as exc:
        fetch_json(servidor_lento, timeout=1)

    assert exc.value.detalle == "timeout"
    assert time.monotonic() - inicio < 2.5


def test_fetch_all_no_espera_tareas_colgadas():
    def colgada():
        time.sleep(3)
        return {"tarde": True}

    inicio = time.monotonic()
    res = fetch_all({"colgada": colgada, "rapida": lambda: {"ok": True}}, limite=0.3)

    assert time.monotonic() - inicio < 2
    assert res["colgada"] == (None, "timeout")
    assert res["rapida"].data == {"ok": True}


@pytest.mark.django_db
def test_dashboard_timeout_solo_afecta_su_tarjeta(logueado, fake_http):
    fake_http.responder("GET", "http://ml.test/", {})
    fake_http.responder("GET", "/ml/supervisado/prob_riesgo", SUP)
    fake_http.responder("GET", "/ml/no_supervisado/clusters", requests.Timeout("15s"))
    fake_http.responder("GET", "/docs/near_duplicados", {"pairs": [{"a": {"filename": "x.pdf"}, "b": {"filename": "y.pdf"}, "score": 0.9}]})

    resp = logueado.get("/analitica/")

    assert resp.status_code == 200
    errores = resp.context["errores"]
    assert errores["ml_clu"] == "timeout"
    assert [k for k, v in errores.items() if v] == ["ml_clu"]
    assert resp.context["datos"]["top_riesgo"][0]["id_plazo"] == 2
    assert resp.context["datos"]["cluster_sizes"] == []
    assert len(fake_http.llamadas) == 8
    assert all("Authorization" not in c.kwargs["headers"] for c in fake_http.llamadas)
    assert resp.content.decode().count("Error: timeout") == 1


@pytest.mark.django_db
def test_regresion_kfold_y_orden(logueado, fake_http):
    fake_http.responder("GET", "http://ml.test/", {})
    resp = logueado.get("/analitica/regresion/?kfold=10&orden=signo")

    urls = sorted(c.url for c in fake_http.llamadas)
    assert urls == [
        "http://ml.test/docs/regresion/size_mb?kfold=10",
        "http://ml.test/ml/regresion/plazos/dias_restantes?kfold=10",
    ]
    assert resp.context["orden"] == "signo"

    logueado.get("/analitica/regresion/?kfold=7")
    assert fake_http.llamadas[-1].url.endswith("kfold=5")


@pytest.mark.django_db
def test_resumen_ml_graphql_errores_por_seccion(logueado, fake_http):
    fake_http.responder("POST", "/graphql", {"errors": [{"message": "modelo no entrenado"}]})
    resp = logueado.get("/analitica/graphql/")

    errores = resp.context["errores"]
    assert errores == {"riesgo": "modelo no entrenado", "clusters": "modelo no entrenado", "anomalias": "modelo no entrenado"}
    assert fake_http.llamadas[-1].kwargs["headers"]["Authorization"] == "Bearer tok-123"

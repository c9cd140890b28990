from django.urls import path, include


urlpatterns = [
    path("", include("core.urls")),              # ← registra el namespace 'core'
    path("cuentas/", include(("accounts.urls", "accounts"), namespace="accounts")),
    path("clientes/", include(("clients.urls", "clients"), namespace="clients")),
    path("", include(("cases.urls", "cases"), namespace="cases")),
    path("documentos/", include(("documents.urls", "documents"), namespace="documents")),
    path("analitica/", include(("analytics.urls", "analytics"), namespace="analytics")),
]

from django.urls import path
from . import views

app_name = "documents"

urlpatterns = [
    path("", views.listar_documentos, name="listar"),
    path("subir/", views.subir_documento, name="subir"),
    path("<str:doc_id>/descargar/", views.descargar_documento, name="descargar"),
    path("<str:doc_id>/eliminar/", views.eliminar_documento, name="eliminar"),
]

# documents/views.py
import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import render
from django.views.decorators.http import require_POST

from core.backends import get_backend
from core.decorators import sesion_requerida
from core.errors import ApiError, mensaje_error
from core.http import url_con_params, volver

from .filtros import filtrar_documentos, paginacion
from .forms import SubirDocumentoForm

logger = logging.getLogger(__name__)


@sesion_requerida
def listar_documentos(request):
    """
    Listado admin de documentos (paginado en el servicio de documentos).
    Los filtros expediente / desde / hasta se aplican sobre la página obtenida.
    """
    limit, offset = paginacion(request.GET)
    expediente = request.GET.get("expediente", "")
    desde = request.GET.get("desde", "")
    hasta = request.GET.get("hasta", "")

    docs, error = [], None
    try:
        docs = get_backend(request).listar_documentos(limit=limit, offset=offset)
    except ApiError as e:
        error = mensaje_error(e, "Error al listar documentos")

    filtros = {"expediente": expediente, "desde": desde, "hasta": hasta, "limit": limit}
    return render(request, "documents/listar.html", {
        "documentos": filtrar_documentos(docs, expediente, desde, hasta),
        "total_pagina": len(docs),
        "limit": limit,
        "offset": offset,
        "expediente": expediente,
        "desde": desde,
        "hasta": hasta,
        "url_anterior": url_con_params("documents:listar", offset=max(0, offset - limit), **filtros) if offset > 0 else None,
        "url_siguiente": url_con_params("documents:listar", offset=offset + limit, **filtros),
        "form": SubirDocumentoForm(),
        "error": error,
    })


@sesion_requerida
def descargar_documento(request, doc_id):
    try:
        contenido, content_type = get_backend(request).descargar_documento(doc_id)
    except ApiError as e:
        logger.warning("Descarga fallida %s: %s", doc_id, e)
        messages.error(request, "No se pudo descargar el documento")
        return volver(request, "documents:listar")

    resp = HttpResponse(contenido, content_type=content_type or "application/pdf")
    resp["Content-Disposition"] = f'attachment; filename="{doc_id}.pdf"'
    return resp


@sesion_requerida
@require_POST
def subir_documento(request):
    form = SubirDocumentoForm(request.POST, request.FILES)
    if not form.is_valid():
        messages.error(request, "Indica el expediente y el archivo a subir.")
        return volver(request, "documents:listar")
    try:
        doc = get_backend(request).subir_documento(form.cleaned_data["id_expediente"], form.cleaned_data["archivo"])
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo subir el documento"))
    else:
        messages.success(request, f"Documento '{doc['filename'] or form.cleaned_data['archivo'].name}' subido.")
    return volver(request, "documents:listar")


@sesion_requerida
@require_POST
def eliminar_documento(request, doc_id):
    try:
        get_backend(request).eliminar_documento(doc_id)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo eliminar el documento"))
    else:
        messages.success(request, f"Documento {doc_id} eliminado.")
    return volver(request, "documents:listar")

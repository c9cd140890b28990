# cases/views_plazos.py
from django.contrib import messages
from django.shortcuts import render
from django.views.decorators.http import require_POST

from core.backends import get_backend
from core.decorators import sesion_requerida
from core.errors import ApiError, mensaje_error
from core.formato import fecha_iso
from core.http import volver

from .forms import PlazoForm
from .views import expedientes_para_selector, id_numerico


def filtrar_pendientes(plazos, solo_pendientes):
    if not solo_pendientes:
        return list(plazos)
    return [p for p in plazos if not p["cumplido"]]


def _filtros_post(request):
    return {
        "expediente": id_numerico(request.POST.get("id_expediente")),
        "pendientes": "1" if request.POST.get("pendientes") == "1" else None,
    }


@sesion_requerida
def plazos(request):
    backend = get_backend(request)
    q = request.GET.get("q", "").strip()
    id_exp = id_numerico(request.GET.get("expediente"))
    solo_pendientes = request.GET.get("pendientes") == "1"

    expedientes, error = expedientes_para_selector(backend, q)
    todos = []
    if id_exp:
        try:
            todos = backend.listar_plazos(id_exp)
        except ApiError as e:
            error = mensaje_error(e, "No se pudieron listar los plazos")

    editar = id_numerico(request.GET.get("editar"))
    form_editar = None
    if editar:
        plazo = next((p for p in todos if p["id_plazo"] == editar), None)
        if plazo:
            form_editar = PlazoForm(initial={
                "descripcion": plazo["descripcion"],
                "fecha_vencimiento": fecha_iso(plazo["fecha_vencimiento"]),
            })

    return render(request, "cases/plazos.html", {
        "expedientes": expedientes,
        "id_expediente": id_exp,
        "q": q,
        "solo_pendientes": solo_pendientes,
        "plazos": filtrar_pendientes(todos, solo_pendientes),
        "total": len(todos),
        "form": PlazoForm(),
        "editar": editar if form_editar else None,
        "form_editar": form_editar,
        "error": error,
    })


@sesion_requerida
@require_POST
def crear_plazo(request):
    filtros = _filtros_post(request)
    form = PlazoForm(request.POST)
    if not filtros["expediente"] or not form.is_valid():
        messages.error(request, "Selecciona un expediente e indica descripción y fecha de vencimiento.")
        return volver(request, "cases:plazos", **filtros)
    cd = form.cleaned_data
    try:
        get_backend(request).crear_plazo(
            filtros["expediente"], cd["descripcion"].strip(), cd["fecha_vencimiento"].isoformat(),
        )
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo crear el plazo"))
    else:
        messages.success(request, "Plazo creado.")
    return volver(request, "cases:plazos", **filtros)


@sesion_requerida
@require_POST
def editar_plazo(request, pk):
    filtros = _filtros_post(request)
    form = PlazoForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Descripción y fecha de vencimiento son obligatorias.")
        return volver(request, "cases:plazos", editar=pk, **filtros)
    cd = form.cleaned_data
    try:
        get_backend(request).actualizar_plazo(pk, cd["descripcion"].strip(), cd["fecha_vencimiento"].isoformat())
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo actualizar el plazo"))
    else:
        messages.success(request, f"Plazo #{pk} actualizado.")
    return volver(request, "cases:plazos", **filtros)


@sesion_requerida
@require_POST
def cumplir_plazo(request, pk):
    filtros = _filtros_post(request)
    try:
        get_backend(request).cumplir_plazo(pk)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo marcar el plazo como cumplido"))
    else:
        messages.success(request, f"Plazo #{pk} marcado como cumplido.")
    return volver(request, "cases:plazos", **filtros)


@sesion_requerida
@require_POST
def eliminar_plazo(request, pk):
    filtros = _filtros_post(request)
    try:
        get_backend(request).eliminar_plazo(pk)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo eliminar el plazo"))
    else:
        messages.success(request, f"Plazo #{pk} eliminado.")
    return volver(request, "cases:plazos", **filtros)

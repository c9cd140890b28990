# cases/views_notas.py
from django.contrib import messages
from django.shortcuts import render
from django.views.decorators.http import require_POST

from core.backends import get_backend
from core.decorators import sesion_requerida
from core.errors import ApiError, mensaje_error
from core.http import volver

from .forms import NotaEditarForm, NotaForm
from .views import expedientes_para_selector, id_numerico


@sesion_requerida
def notas(request):
    """
    Notas de un expediente.
    ?expediente=<id> selecciona el expediente, ?q= filtra el selector por título
    y ?editar=<id_nota> abre la edición en línea.
    """
    backend = get_backend(request)
    q = request.GET.get("q", "").strip()
    id_exp = id_numerico(request.GET.get("expediente"))

    expedientes, error = expedientes_para_selector(backend, q)
    notas_exp = []
    if id_exp:
        try:
            notas_exp = backend.listar_notas(id_exp)
        except ApiError as e:
            error = mensaje_error(e, "No se pudieron listar las notas")

    editar = id_numerico(request.GET.get("editar"))
    form_editar = None
    if editar:
        nota = next((n for n in notas_exp if n["id_nota"] == editar), None)
        if nota:
            form_editar = NotaEditarForm(initial={"contenido": nota["contenido"], "tipo": nota["tipo"] or ""})

    return render(request, "cases/notas.html", {
        "expedientes": expedientes,
        "id_expediente": id_exp,
        "q": q,
        "notas": notas_exp,
        "form": NotaForm(),
        "editar": editar if form_editar else None,
        "form_editar": form_editar,
        "error": error,
    })


@sesion_requerida
@require_POST
def crear_nota(request):
    id_exp = id_numerico(request.POST.get("id_expediente"))
    form = NotaForm(request.POST)
    if not id_exp or not form.is_valid():
        messages.error(request, "Selecciona un expediente y escribe el contenido de la nota.")
        return volver(request, "cases:notas", expediente=id_exp)
    try:
        get_backend(request).crear_nota(id_exp, form.cleaned_data["contenido"], form.cleaned_data["tipo"])
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo crear la nota"))
    else:
        messages.success(request, "Nota creada.")
    return volver(request, "cases:notas", expediente=id_exp)


@sesion_requerida
@require_POST
def editar_nota(request, pk):
    id_exp = id_numerico(request.POST.get("id_expediente"))
    form = NotaEditarForm(request.POST)
    if not form.is_valid():
        messages.error(request, "El contenido de la nota es obligatorio.")
        return volver(request, "cases:notas", expediente=id_exp, editar=pk)
    try:
        get_backend(request).actualizar_nota(pk, form.cleaned_data["contenido"], form.cleaned_data["tipo"] or None)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo actualizar la nota"))
    else:
        messages.success(request, f"Nota #{pk} actualizada.")
    return volver(request, "cases:notas", expediente=id_exp)


@sesion_requerida
@require_POST
def eliminar_nota(request, pk):
    id_exp = id_numerico(request.POST.get("id_expediente"))
    try:
        get_backend(request).eliminar_nota(pk)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo eliminar la nota"))
    else:
        messages.success(request, f"Nota #{pk} eliminada.")
    return volver(request, "cases:notas", expediente=id_exp)

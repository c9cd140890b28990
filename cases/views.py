# cases/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views import View
from django.views.decorators.http import require_POST

from core.backends import get_backend
from core.decorators import SesionRequeridaMixin, sesion_requerida
from core.errors import ApiError, mensaje_error
from core.http import volver

from .forms import ESTADOS, EstadoForm, ExpedienteForm

logger = logging.getLogger(__name__)


def id_numerico(valor):
    valor = (valor or "").strip()
    return int(valor) if valor.isdecimal() else None


def filtros_expedientes(params):
    """Filtros de la lista: el cliente sólo se usa si es numérico."""
    cliente = (params.get("cliente") or "").strip()
    q = (params.get("q") or "").strip()
    estado = (params.get("estado") or "").strip()
    return {
        "id_cliente": id_numerico(cliente),
        "q": q or None,
        "estado": estado if estado in ESTADOS else None,
    }


def expedientes_para_selector(backend, q=None):
    """Expedientes para los selectores de Notas y Plazos (máx. 200)."""
    try:
        return backend.listar_expedientes(q=q or None, limit=200), None
    except ApiError as e:
        return [], mensaje_error(e, "No se pudo cargar la lista de expedientes")


@sesion_requerida
def listar_expedientes(request):
    filtros = filtros_expedientes(request.GET)
    expedientes, error = [], None
    try:
        expedientes = get_backend(request).listar_expedientes(**filtros)
    except ApiError as e:
        error = mensaje_error(e, "No se pudo listar expedientes")

    return render(request, "cases/listar.html", {
        "expedientes": expedientes,
        "estados": ESTADOS,
        "cliente": request.GET.get("cliente", ""),
        "q": request.GET.get("q", ""),
        "estado": request.GET.get("estado", ""),
        "error": error,
    })


@sesion_requerida
def crear_expediente(request):
    backend = get_backend(request)
    clientes, error_clientes = [], None
    try:
        clientes = backend.listar_clientes()
    except ApiError as e:
        error_clientes = mensaje_error(e, "No se pudo cargar la lista de clientes")

    error = None
    if request.method == "POST":
        form = ExpedienteForm(request.POST, clientes=clientes)
        if form.is_valid():
            cd = form.cleaned_data
            datos = {
                "titulo": cd["titulo"].strip(),
                "descripcion": cd["descripcion"].strip() or None,
                "estado": "ABIERTO",
                "fecha_inicio": timezone.localdate().isoformat(),
                "id_cliente": cd["id_cliente"],
            }
            try:
                exp = backend.crear_expediente(datos)
            except ApiError as e:
                error = mensaje_error(e, "No se pudo crear el expediente")
            else:
                messages.success(request, f"Expediente #{exp['id_expediente']} creado correctamente.")
                return redirect("cases:listar")
        elif "id_cliente" in form.errors:
            error = form.errors["id_cliente"][0]
    else:
        form = ExpedienteForm(clientes=clientes)

    return render(request, "cases/crear.html", {
        "form": form,
        "error": error,
        "error_clientes": error_clientes,
    })


class CambiarEstadoExpedienteView(SesionRequeridaMixin, View):
    def post(self, request, pk):
        form = EstadoForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Estado inválido.")
            return volver(request, "cases:listar")

        estado = form.cleaned_data["estado"]
        try:
            get_backend(request).actualizar_expediente(pk, {"estado": estado})
        except ApiError as e:
            messages.error(request, mensaje_error(e, "No se pudo actualizar el estado"))
        else:
            logger.info("Expediente #%s -> %s", pk, estado)
            messages.success(request, f'Estado actualizado a "{estado}" para #{pk}')
        return volver(request, "cases:listar")


@sesion_requerida
@require_POST
def eliminar_expediente(request, pk):
    try:
        get_backend(request).eliminar_expediente(pk)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo eliminar el expediente"))
    else:
        messages.success(request, f"Expediente #{pk} eliminado.")
    return volver(request, "cases:listar")

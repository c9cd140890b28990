import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse

from core.backends import get_backend
from core.decorators import sesion_requerida
from core.errors import ApiError, mensaje_error
from core.formato import fecha_hora

from .forms import ClienteForm

logger = logging.getLogger(__name__)

COLUMNAS = ["ID", "Nombre", "Email", "Tel", "Fecha"]


def filas_clientes(clientes):
    return [
        [c["id_cliente"], c["nombre_completo"], c["contacto_email"], c["contacto_tel"], fecha_hora(c["fecha_creacion"])]
        for c in clientes
    ]


@sesion_requerida
def listar_clientes(request):
    """
    Lista los clientes del backend y, por POST, crea uno nuevo.
    Tras crear se redirige (PRG) para volver a listar.
    """
    backend = get_backend(request)
    error = None

    if request.method == "POST":
        form = ClienteForm(request.POST)
        if form.is_valid():
            try:
                cliente = backend.crear_cliente(form.datos())
            except ApiError as e:
                error = mensaje_error(e, "Error al crear cliente")
            else:
                messages.success(request, f"Cliente '{cliente['nombre_completo']}' creado correctamente.")
                return redirect(reverse("clients:listar"))
        else:
            error = "Por favor corrige los errores del formulario."
    else:
        form = ClienteForm()

    clientes = []
    try:
        clientes = backend.listar_clientes()
    except ApiError as e:
        error = error or mensaje_error(e, "Error al listar clientes")

    return render(request, "clients/listar.html", {
        "form": form,
        "clientes": clientes,
        "columnas": COLUMNAS,
        "filas": filas_clientes(clientes),
        "error": error,
    })


@sesion_requerida
def detalle_cliente(request, pk):
    backend = get_backend(request)
    try:
        cliente = backend.obtener_cliente(pk)
    except ApiError as e:
        messages.error(request, mensaje_error(e, "No se pudo cargar el cliente"))
        return redirect("clients:listar")

    expedientes, error = [], None
    try:
        expedientes = backend.listar_expedientes(id_cliente=pk)
    except ApiError as e:
        error = mensaje_error(e, "No se pudo listar expedientes")

    return render(request, "clients/detalle.html", {
        "cliente": cliente,
        "expedientes": expedientes,
        "error": error,
    })

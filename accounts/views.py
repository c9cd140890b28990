from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from core.errors import ApiError
from core.sesion import cerrar_sesion, iniciar_sesion, token_actual

from .forms import LoginForm


# =========================
# Auth
# =========================
def _destino(request):
    nxt = request.POST.get("next") or request.GET.get("next")
    if nxt and url_has_allowed_host_and_scheme(nxt, allowed_hosts={request.get_host()}):
        return nxt
    return "core:home"


def login_view(request):
    if token_actual(request):
        return redirect("core:home")

    error = None
    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                usuario = iniciar_sesion(request, form.cleaned_data["email"], form.cleaned_data["password"])
            except ApiError as e:
                error = e.mensaje or e.detalle or "Error de login"
            else:
                messages.success(request, f"Bienvenido, {usuario.get('email') or form.cleaned_data['email']}")
                return redirect(_destino(request))
    else:
        form = LoginForm()
    return render(request, "accounts/login.html", {
        "form": form,
        "error": error,
        "next": request.POST.get("next") or request.GET.get("next", ""),
    })


@require_POST
def logout_view(request):
    cerrar_sesion(request)
    return redirect("accounts:login")

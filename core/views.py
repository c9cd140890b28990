from django.shortcuts import redirect

from .decorators import sesion_requerida


@sesion_requerida
def home(request):
    # el panel de inicio es el dashboard de analítica
    return redirect("analytics:dashboard")

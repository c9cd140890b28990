# core/context_processors.py
MENU = [
    ("Dashboard", "analytics:dashboard"),
    ("Clientes", "clients:listar"),
    ("Expedientes", "cases:listar"),
    ("Notas", "cases:notas"),
    ("Plazos", "cases:plazos"),
    ("Documentos", "documents:listar"),
    ("Regresión", "analytics:regresion"),
    ("ML GraphQL", "analytics:ml_graphql"),
]


def sesion(request):
    return {
        "usuario": getattr(request, "usuario", None),
        "menu": MENU,
    }

from django.urls import path

from . import views, views_notas, views_plazos

app_name = "cases"

urlpatterns = [
    # Expedientes
    path("expedientes/", views.listar_expedientes, name="listar"),
    path("expedientes/nuevo/", views.crear_expediente, name="crear"),
    path("expedientes/<int:pk>/estado/", views.CambiarEstadoExpedienteView.as_view(), name="cambiar_estado"),
    path("expedientes/<int:pk>/eliminar/", views.eliminar_expediente, name="eliminar"),

    # Notas
    path("notas/", views_notas.notas, name="notas"),
    path("notas/crear/", views_notas.crear_nota, name="crear_nota"),
    path("notas/<int:pk>/editar/", views_notas.editar_nota, name="editar_nota"),
    path("notas/<int:pk>/eliminar/", views_notas.eliminar_nota, name="eliminar_nota"),

    # Plazos
    path("plazos/", views_plazos.plazos, name="plazos"),
    path("plazos/crear/", views_plazos.crear_plazo, name="crear_plazo"),
    path("plazos/<int:pk>/editar/", views_plazos.editar_plazo, name="editar_plazo"),
    path("plazos/<int:pk>/cumplir/", views_plazos.cumplir_plazo, name="cumplir_plazo"),
    path("plazos/<int:pk>/eliminar/", views_plazos.eliminar_plazo, name="eliminar_plazo"),
]

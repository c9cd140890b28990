from django.urls import path
from . import views

app_name = "clients"

urlpatterns = [
    path("", views.listar_clientes, name="listar"),
    path("<int:pk>/", views.detalle_cliente, name="detalle"),
]

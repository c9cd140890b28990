from django.urls import path
from . import views

app_name = "analytics"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("regresion/", views.regresion, name="regresion"),
    path("graphql/", views.ml_graphql, name="ml_graphql"),
]

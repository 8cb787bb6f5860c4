from django.urls import include, path

from .views import initialize_data

urlpatterns = [
    path("api/initialize", initialize_data, name="initialize-data"),
    path("api/", include("scheduler.api.urls")),
]

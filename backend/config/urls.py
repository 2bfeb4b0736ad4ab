"""
Root URL configuration for the backend project.

The `samples` app owns every API endpoint; they all live under
/api/sand-samples/.
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def api_root(request):
    """Tiny liveness check used by the frontends and deploy health checks."""
    return JsonResponse({"message": "Sand Sample Data API is running"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", api_root, name="api-root"),
    path("api/sand-samples/", include("samples.urls")),
]

"""
URL configuration for core_backend project.

    /admin/                 Django admin
    /api/health/            liveness probe
    /api/auth/              JWT login and refresh
    /api/users/             staff accounts
    /api/orders/            order lifecycle
    /api/tables/            table registry, table bill and table close
    /api/reports/           statistics
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

from users.urls import auth_urlpatterns


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/auth/", include((auth_urlpatterns, "auth"))),
    path("api/users/", include("users.urls")),
    path("api/", include("orders.urls")),
    path("api/", include("tables.urls")),
    path("api/reports/", include("reports.urls")),
]

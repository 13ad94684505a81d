"""
URL configuration for country_currency project.

The countries app owns /countries..., /status; the admin is kept for
inspecting cached rows.
"""
import logging

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

logger = logging.getLogger("countries")

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('countries.urls'))
]


def custom_404(request, exception):
    return JsonResponse({"error": f"Route {request.path} not found"}, status=404)


def custom_500(request):
    logger.error("Unhandled error serving %s %s", request.method, request.path)
    return JsonResponse({"error": "Internal server error"}, status=500)


handler404 = "country_currency.urls.custom_404"
handler500 = "country_currency.urls.custom_500"

"""
URL configuration for the cloth shop POS.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("apps.inventory.urls")),
    path("", include("apps.sales.urls")),
]

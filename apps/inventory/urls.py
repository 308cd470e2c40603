"""
URL configuration for the catalog app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("api/products/", views.ProductListCreateView.as_view(), name="product_list"),
    path("api/products/categories/", views.product_categories, name="product_categories"),
    path("api/products/<int:id>/", views.ProductDetailView.as_view(), name="product_detail"),
]

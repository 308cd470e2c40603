"""
Django admin configuration for catalog models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "category", "size", "color", "price", "discount", "stock", "created_at"]
    list_filter = ["category", "size", "color", "created_at"]
    search_fields = ["name", "description", "category"]
    readonly_fields = ["id", "created_at"]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "name", "description", "image_url"],
            },
        ),
        (
            "Attributes",
            {
                "fields": ["category", "size", "color"],
            },
        ),
        (
            "Pricing & Stock",
            {
                "fields": ["price", "discount", "stock"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at"],
            },
        ),
    ]

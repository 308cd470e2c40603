"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin interface for Order model.

    Orders are read-only here; payment status only moves through the
    outcome endpoint.
    """

    list_display = [
        "id",
        "customer_name",
        "customer_phone",
        "total_amount",
        "discount_amount",
        "payment_status",
        "needs_review",
        "created_at",
    ]
    list_filter = ["payment_status", "needs_review", "payment_method", "created_at"]
    search_fields = ["customer_name", "customer_phone", "external_payment_reference"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "id",
        "customer_name",
        "customer_phone",
        "items",
        "total_amount",
        "discount_amount",
        "payment_status",
        "payment_method",
        "external_payment_reference",
        "failure_reason",
        "created_at",
        "resolved_at",
    ]
    fieldsets = [
        (
            "Customer",
            {
                "fields": ["id", "customer_name", "customer_phone"],
            },
        ),
        (
            "Items & Amounts",
            {
                "fields": ["items", "total_amount", "discount_amount"],
            },
        ),
        (
            "Payment",
            {
                "fields": [
                    "payment_status",
                    "payment_method",
                    "external_payment_reference",
                    "failure_reason",
                    "needs_review",
                ],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "resolved_at"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False

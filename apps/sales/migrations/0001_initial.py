from decimal import Decimal

import django.core.validators
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "customer_name",
                    models.CharField(help_text="Name of the customer billed", max_length=255),
                ),
                (
                    "customer_phone",
                    models.CharField(
                        blank=True, help_text="Optional customer phone number", max_length=20
                    ),
                ),
                (
                    "items",
                    models.JSONField(
                        default=list,
                        help_text="Cart lines at submission (product, quantity, prices)",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=6,
                        help_text="Payable total after discounts",
                        max_digits=18,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("0"),
                        help_text="Total discount granted on the order",
                        max_digits=18,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "payment_status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("success", "Success"),
                            ("failed", "Failed"),
                        ],
                        default="pending",
                        help_text="Current payment status of the order",
                        max_length=50,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True, help_text="Payment method used (e.g., 'upi')", max_length=30
                    ),
                ),
                (
                    "external_payment_reference",
                    models.CharField(
                        blank=True,
                        help_text="Reference of the payment request or gateway",
                        max_length=100,
                    ),
                ),
                (
                    "failure_reason",
                    models.CharField(
                        blank=True, help_text="Why the payment was marked failed", max_length=255
                    ),
                ),
                (
                    "needs_review",
                    models.BooleanField(
                        default=False,
                        help_text="Set when a payment stayed pending past the confirmation timeout",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the order was submitted"
                    ),
                ),
                (
                    "resolved_at",
                    models.DateTimeField(
                        blank=True, help_text="When the payment outcome was recorded", null=True
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "orders",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="order_created_idx"),
                    models.Index(
                        fields=["payment_status", "created_at"], name="order_status_date_idx"
                    ),
                ],
            },
        ),
    ]

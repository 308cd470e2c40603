"""
Sales models for the cloth shop POS.

An Order is the durable record of a submitted bill:
- Customer name and optional phone
- Copy of the cart lines at submission
- Payable total and total discount, computed by the pricing engine
- Payment status driven by a finite state machine (pending -> success | failed)

Lines and amounts never change after creation. Only the payment fields move,
and only through the FSM transitions below.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition


class Order(models.Model):
    """
    Order submitted from a POS billing session.

    The payment status starts as pending when the bill is persisted and is
    resolved exactly once, either to success or to failed.
    """

    STATUS_PENDING = "pending"
    STATUS_SUCCESS = "success"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SUCCESS, "Success"),
        (STATUS_FAILED, "Failed"),
    ]

    customer_name = models.CharField(max_length=255, help_text="Name of the customer billed")
    customer_phone = models.CharField(
        max_length=20, blank=True, help_text="Optional customer phone number"
    )

    items = models.JSONField(
        default=list, help_text="Cart lines at submission (product, quantity, prices)"
    )

    # Two-place prices times two-place discount percentages need six places
    total_amount = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Payable total after discounts",
    )
    discount_amount = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Total discount granted on the order",
    )

    # Payment
    payment_status = FSMField(
        default=STATUS_PENDING,
        choices=STATUS_CHOICES,
        help_text="Current payment status of the order",
    )
    payment_method = models.CharField(
        max_length=30, blank=True, help_text="Payment method used (e.g., 'upi')"
    )
    external_payment_reference = models.CharField(
        max_length=100, blank=True, help_text="Reference of the payment request or gateway"
    )
    failure_reason = models.CharField(
        max_length=255, blank=True, help_text="Why the payment was marked failed"
    )
    needs_review = models.BooleanField(
        default=False,
        help_text="Set when a payment stayed pending past the confirmation timeout",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, help_text="When the order was submitted")
    resolved_at = models.DateTimeField(
        null=True, blank=True, help_text="When the payment outcome was recorded"
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        indexes = [
            models.Index(fields=["-created_at"], name="order_created_idx"),
            models.Index(fields=["payment_status", "created_at"], name="order_status_date_idx"),
        ]

    def __str__(self):
        return f"Order {self.pk} - {self.customer_name} - {self.total_amount}"

    @property
    def is_pending(self):
        return self.payment_status == self.STATUS_PENDING

    @property
    def item_count(self):
        return sum(int(item.get("quantity", 0)) for item in self.items or [])

    @transition(field=payment_status, source=STATUS_PENDING, target=STATUS_SUCCESS)
    def mark_success(self, payment_method="upi", reference=""):
        """Record a confirmed payment."""
        self.payment_method = payment_method
        if reference:
            self.external_payment_reference = reference
        self.needs_review = False
        self.resolved_at = timezone.now()

    @transition(field=payment_status, source=STATUS_PENDING, target=STATUS_FAILED)
    def mark_failed(self, reason="", reference=""):
        """Record a declined or abandoned payment."""
        self.failure_reason = reason[:255]
        if reference:
            self.external_payment_reference = reference
        self.needs_review = False
        self.resolved_at = timezone.now()

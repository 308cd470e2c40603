"""
Serializers for the POS billing API.

- Cart and cart line representations (display-rounded amounts)
- Cart mutation payloads
- Orders, payment requests and payment outcomes
- Direct order / QR payloads kept for older POS clients
"""

from decimal import ROUND_HALF_UP, Decimal

from rest_framework import serializers

from apps.core.formatting_utils import format_currency

from .models import Order
from .outcome import OUTCOMES


def money_field(**kwargs):
    """Read-only amount rounded half up to two places for display."""
    return serializers.DecimalField(
        max_digits=16, decimal_places=2, rounding=ROUND_HALF_UP, read_only=True, **kwargs
    )


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    price = money_field()
    discount = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)
    discounted_price = money_field()
    quantity = serializers.IntegerField(read_only=True)
    stock = serializers.IntegerField(read_only=True)
    category = serializers.CharField(read_only=True)
    size = serializers.CharField(read_only=True)
    color = serializers.CharField(read_only=True)
    line_total = money_field()


class CartTotalsSerializer(serializers.Serializer):
    gross = money_field()
    subtotal = money_field()
    total_discount = money_field()
    total = money_field()
    total_display = serializers.SerializerMethodField()

    def get_total_display(self, obj):
        return format_currency(obj.total)


class CartSerializer(serializers.Serializer):
    """Read-only view of a CartSession with its priced totals."""

    lines = CartLineSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(read_only=True)
    customer_phone = serializers.CharField(read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    totals = serializers.SerializerMethodField()

    def get_totals(self, obj):
        return CartTotalsSerializer(obj.totals()).data


class CartLineAddSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(default=1)


class CartLineUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


class CartCustomerSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=255, allow_blank=True)
    customer_phone = serializers.CharField(
        max_length=20, allow_blank=True, required=False, default=""
    )


class OrderSerializer(serializers.ModelSerializer):
    """Order with amounts rounded for display."""

    total_amount = money_field()
    discount_amount = money_field()
    total_display = serializers.SerializerMethodField()
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "customer_phone",
            "items",
            "item_count",
            "total_amount",
            "discount_amount",
            "total_display",
            "payment_status",
            "payment_method",
            "external_payment_reference",
            "failure_reason",
            "needs_review",
            "created_at",
            "resolved_at",
        ]
        read_only_fields = fields

    def get_total_display(self, obj):
        return format_currency(obj.total_amount)


class PaymentRequestSerializer(serializers.Serializer):
    order_id = serializers.IntegerField(read_only=True)
    amount = money_field()
    amount_minor = serializers.IntegerField(read_only=True)
    currency = serializers.CharField(read_only=True)
    payload = serializers.CharField(read_only=True)
    request_reference = serializers.CharField(read_only=True)
    qr_code = serializers.CharField(read_only=True)


class PaymentOutcomeSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=OUTCOMES)
    payment_method = serializers.CharField(max_length=30, required=False, default="upi")
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class DirectOrderItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(required=False)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    discount = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        default=Decimal("0"),
    )
    quantity = serializers.IntegerField(min_value=1)


class DirectOrderSerializer(serializers.Serializer):
    """
    Order submitted with client-computed totals.

    Totals are recomputed from the items; the submitted values are ignored
    when they disagree.
    """

    customer_name = serializers.CharField(max_length=255)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    items = DirectOrderItemSerializer(many=True, allow_empty=False)
    total_amount = serializers.DecimalField(max_digits=18, decimal_places=6, required=False)
    discount_amount = serializers.DecimalField(max_digits=18, decimal_places=6, required=False)


class GenerateQRSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=18, decimal_places=6)
    order_id = serializers.IntegerField()

"""
Serializers for catalog products.
"""

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for reading and writing catalog products."""

    discounted_price = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        rounding=ROUND_HALF_UP,
        read_only=True,
    )
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "discount",
            "discounted_price",
            "category",
            "size",
            "color",
            "stock",
            "is_out_of_stock",
            "image_url",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

"""
Catalog models for the cloth shop.

The catalog is the source of product price, discount and stock snapshots
that the POS cart copies into its lines.
"""

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Product(models.Model):
    """
    A garment offered for sale.

    Price and discount are stored as entered; the discounted unit price is
    derived on read and never persisted.
    """

    name = models.CharField(
        max_length=255,
        help_text="Product name (e.g., 'Cotton Casual Shirt')",
    )

    description = models.TextField(
        blank=True,
        help_text="Detailed description of the product",
    )

    # Pricing
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price before discount",
    )

    discount = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        help_text="Discount percentage (0-100)",
    )

    # Descriptive attributes
    category = models.CharField(
        max_length=100,
        blank=True,
        help_text="Product category (e.g., 'Shirts', 'Jeans')",
    )

    size = models.CharField(
        max_length=20,
        blank=True,
        help_text="Garment size (XS, S, M, L, XL, XXL)",
    )

    color = models.CharField(
        max_length=50,
        blank=True,
        help_text="Garment color",
    )

    # Inventory tracking
    stock = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Units currently in stock",
    )

    image_url = models.URLField(
        blank=True,
        help_text="Optional product image URL",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was added to the catalog",
    )

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(discount__gte=0) & models.Q(discount__lte=100),
                name="product_discount_percentage_range",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.size} / {self.color})"

    @property
    def discounted_price(self):
        """Unit price after the percentage discount, unrounded."""
        from apps.sales.pricing import discounted_unit_price

        return discounted_unit_price(self.price, self.discount)

    @property
    def is_out_of_stock(self):
        return self.stock == 0

from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Product name (e.g., 'Cotton Casual Shirt')", max_length=255
                    ),
                ),
                (
                    "description",
                    models.TextField(blank=True, help_text="Detailed description of the product"),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price before discount",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "discount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount percentage (0-100)",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00")),
                            django.core.validators.MaxValueValidator(Decimal("100.00")),
                        ],
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        help_text="Product category (e.g., 'Shirts', 'Jeans')",
                        max_length=100,
                    ),
                ),
                (
                    "size",
                    models.CharField(
                        blank=True, help_text="Garment size (XS, S, M, L, XL, XXL)", max_length=20
                    ),
                ),
                (
                    "color",
                    models.CharField(blank=True, help_text="Garment color", max_length=50),
                ),
                (
                    "stock",
                    models.IntegerField(
                        default=0,
                        help_text="Units currently in stock",
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "image_url",
                    models.URLField(blank=True, help_text="Optional product image URL"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the product was added to the catalog"
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "products",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["category"], name="product_category_idx"),
                    models.Index(fields=["name"], name="product_name_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0), name="product_stock_non_negative"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(discount__gte=0) & models.Q(discount__lte=100),
                        name="product_discount_percentage_range",
                    ),
                ],
            },
        ),
    ]

# Seeds the catalog with the shop's starter garments.

from decimal import Decimal

from django.db import migrations

SAMPLE_PRODUCTS = [
    {
        "name": "Cotton Casual Shirt",
        "description": "Premium cotton casual shirt for everyday wear",
        "price": Decimal("899.00"),
        "discount": Decimal("10"),
        "category": "Shirts",
        "size": "M",
        "color": "Blue",
        "stock": 25,
    },
    {
        "name": "Formal Trouser",
        "description": "Professional formal trouser perfect for office",
        "price": Decimal("1299.00"),
        "discount": Decimal("15"),
        "category": "Trousers",
        "size": "L",
        "color": "Black",
        "stock": 20,
    },
    {
        "name": "Designer T-Shirt",
        "description": "Trendy designer t-shirt with modern print",
        "price": Decimal("599.00"),
        "discount": Decimal("5"),
        "category": "T-Shirts",
        "size": "S",
        "color": "White",
        "stock": 30,
    },
    {
        "name": "Denim Jeans",
        "description": "Classic denim jeans with perfect fit",
        "price": Decimal("1599.00"),
        "discount": Decimal("20"),
        "category": "Jeans",
        "size": "M",
        "color": "Blue",
        "stock": 15,
    },
    {
        "name": "Summer Dress",
        "description": "Elegant summer dress for special occasions",
        "price": Decimal("2199.00"),
        "discount": Decimal("25"),
        "category": "Dresses",
        "size": "M",
        "color": "Pink",
        "stock": 18,
    },
]


def seed_products(apps, schema_editor):
    Product = apps.get_model("inventory", "Product")
    for fields in SAMPLE_PRODUCTS:
        Product.objects.get_or_create(name=fields["name"], defaults=fields)


def remove_products(apps, schema_editor):
    Product = apps.get_model("inventory", "Product")
    Product.objects.filter(name__in=[fields["name"] for fields in SAMPLE_PRODUCTS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_products, remove_products),
    ]

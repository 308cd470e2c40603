"""
Catalog store operations.

Thin read/write helpers over the Product table used by the POS and by the
product management API.
"""

import logging

from django.db.models import Q

from .models import Product

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name",
    "description",
    "price",
    "discount",
    "category",
    "size",
    "color",
    "stock",
    "image_url",
)


def list_products(search=None, category=None):
    """
    Return catalog products, newest first.

    Args:
        search: Optional case-insensitive match on name, description or category
        category: Optional exact category filter

    Returns:
        QuerySet of Product
    """
    queryset = Product.objects.all()

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search)
            | Q(description__icontains=search)
            | Q(category__icontains=search)
        )

    if category:
        queryset = queryset.filter(category=category)

    return queryset


def list_categories():
    """Distinct, sorted category names present in the catalog."""
    return list(
        Product.objects.exclude(category="")
        .order_by("category")
        .values_list("category", flat=True)
        .distinct()
    )


def get_product(product_id):
    """Raises Product.DoesNotExist for unknown ids."""
    return Product.objects.get(pk=product_id)


def create_product(fields):
    """
    Create a product from a mapping of field values.

    Returns:
        The new product id
    """
    values = {key: value for key, value in fields.items() if key in PRODUCT_FIELDS}
    product = Product(**values)
    product.full_clean()
    product.save()
    logger.info(f"Created product {product.pk} ({product.name})")
    return product.pk


def update_product(product_id, fields):
    """
    Update the given fields of a product.

    Returns:
        True once the row is written
    """
    product = get_product(product_id)
    for key, value in fields.items():
        if key in PRODUCT_FIELDS:
            setattr(product, key, value)
    product.full_clean()
    product.save()
    logger.info(f"Updated product {product_id}")
    return True


def delete_product(product_id):
    """
    Delete a product.

    Orders keep their own copy of the lines, so deleting a product never
    affects order history.
    """
    deleted, _ = Product.objects.filter(pk=product_id).delete()
    if not deleted:
        raise Product.DoesNotExist(f"Product {product_id} not found")
    logger.info(f"Deleted product {product_id}")
    return True

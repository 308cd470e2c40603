"""
Pytest configuration and fixtures for the cloth shop POS.
"""

from decimal import Decimal

from django.core.cache import cache

import pytest


@pytest.fixture(autouse=True)
def clear_cache():
    """Sessions and payment requests live in the cache; start every test empty."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def make_product(db):
    """
    Factory fixture creating catalog products with sensible defaults.
    """
    from apps.inventory.models import Product

    def _make_product(**overrides):
        fields = {
            "name": "Test Shirt",
            "description": "Plain test shirt",
            "price": Decimal("500.00"),
            "discount": Decimal("0.00"),
            "stock": 10,
            "category": "Shirts",
            "size": "M",
            "color": "White",
        }
        fields.update(overrides)
        return Product.objects.create(**fields)

    return _make_product


@pytest.fixture
def shirt(make_product):
    """Cotton shirt at 899 with 10% off, 25 in stock."""
    return make_product(
        name="Cotton Casual Shirt",
        description="Comfortable cotton shirt perfect for casual wear",
        price=Decimal("899.00"),
        discount=Decimal("10.00"),
        stock=25,
        category="Shirts",
        size="M",
        color="Blue",
    )


@pytest.fixture
def jeans(make_product):
    return make_product(
        name="Denim Jeans",
        price=Decimal("1599.00"),
        discount=Decimal("20.00"),
        stock=15,
        category="Jeans",
        size="32",
        color="Dark Blue",
    )


@pytest.fixture
def low_stock_product(make_product):
    return make_product(name="Silk Scarf", price=Decimal("450.00"), stock=3, category="Accessories")


@pytest.fixture
def ledger():
    from apps.sales.ledger import OrderLedger

    return OrderLedger()


@pytest.fixture
def generator():
    from apps.sales.payment_service import PaymentRequestGenerator

    return PaymentRequestGenerator()


@pytest.fixture
def customer_cart(shirt):
    """Cart with two shirts for a named customer."""
    from apps.sales.cart import CartSession

    return CartSession().with_customer("Asha", "9876543210").add_line(shirt, 2)

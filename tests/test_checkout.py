"""
Tests for checkout and order submission.

Tests cover:
- Order creation with priced totals and line copies
- Precondition failures with no ledger writes
- Persistence failures surfaced as PersistenceFailure
- Checkout followed by payment request generation
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

from django.db import DatabaseError

import pytest

from apps.sales.cart import CartSession
from apps.sales.checkout import checkout, start_payment
from apps.sales.exceptions import EncodingFailure, PersistenceFailure, ValidationError
from apps.sales.ledger import OrderLedger
from apps.sales.models import Order


@pytest.mark.django_db
class TestCheckout:
    def test_creates_pending_order(self, customer_cart):
        order = checkout(customer_cart)

        assert order.pk is not None
        assert order.payment_status == Order.STATUS_PENDING
        assert order.customer_name == "Asha"
        assert order.customer_phone == "9876543210"

        order.refresh_from_db()
        assert order.total_amount == Decimal("1618.2")
        assert order.discount_amount == Decimal("179.8")

    def test_order_copies_cart_lines(self, customer_cart, shirt):
        order = checkout(customer_cart)
        order.refresh_from_db()

        assert len(order.items) == 1
        item = order.items[0]
        assert item["product_id"] == shirt.pk
        assert item["quantity"] == 2
        assert item["name"] == "Cotton Casual Shirt"
        assert Decimal(item["line_total"]) == Decimal("1618.2")

    def test_order_total_matches_cart_totals(self, shirt, jeans):
        cart = CartSession().with_customer("Ravi").add_line(shirt, 3).add_line(jeans, 2)
        totals = cart.totals()

        order = checkout(cart)
        order.refresh_from_db()

        assert order.total_amount == totals.total
        assert order.discount_amount == totals.total_discount

    def test_cart_is_not_modified(self, customer_cart):
        before = customer_cart.to_dict()
        checkout(customer_cart)
        assert customer_cart.to_dict() == before

    def test_stock_is_not_decremented(self, customer_cart, shirt):
        checkout(customer_cart)
        shirt.refresh_from_db()
        assert shirt.stock == 25

    @pytest.mark.parametrize("name", ["", "   "])
    def test_missing_customer_name_writes_nothing(self, shirt, name):
        cart = CartSession().with_customer(name).add_line(shirt)
        spy = MagicMock(wraps=OrderLedger())

        with pytest.raises(ValidationError) as exc_info:
            checkout(cart, ledger=spy)

        assert exc_info.value.field == "customer_name"
        assert spy.create_order.call_count == 0
        assert Order.objects.count() == 0

    def test_empty_cart_writes_nothing(self):
        spy = MagicMock(wraps=OrderLedger())

        with pytest.raises(ValidationError) as exc_info:
            checkout(CartSession().with_customer("Asha"), ledger=spy)

        assert exc_info.value.field == "lines"
        assert spy.create_order.call_count == 0

    def test_ledger_receives_priced_totals(self, customer_cart):
        spy = MagicMock(wraps=OrderLedger())

        checkout(customer_cart, ledger=spy)

        spy.create_order.assert_called_once()
        kwargs = spy.create_order.call_args.kwargs
        assert kwargs["total"] == Decimal("1618.2")
        assert kwargs["discount_total"] == Decimal("179.8")
        assert kwargs["lines"] == customer_cart.lines

    def test_database_error_becomes_persistence_failure(self, customer_cart):
        with patch.object(Order.objects, "create", side_effect=DatabaseError("disk full")):
            with pytest.raises(PersistenceFailure) as exc_info:
                checkout(customer_cart)

        assert "disk full" in exc_info.value.message
        assert exc_info.value.as_dict()["code"] == "persistence_failure"


@pytest.mark.django_db
class TestStartPayment:
    def test_returns_order_and_payment_request(self, customer_cart):
        order, payment_request = start_payment(customer_cart)

        assert payment_request.order_id == order.pk
        assert payment_request.amount_minor == 161820
        assert payment_request.qr_code.startswith("data:image/png;base64,")

    def test_persistence_failure_skips_generation(self, customer_cart):
        failing = MagicMock()
        failing.create_order.side_effect = PersistenceFailure("database unavailable")
        generator = MagicMock()

        with pytest.raises(PersistenceFailure):
            start_payment(customer_cart, ledger=failing, generator=generator)

        assert generator.create_payment_request.call_count == 0

    def test_encoding_failure_carries_order_id(self, customer_cart):
        generator = MagicMock()
        generator.create_payment_request.side_effect = EncodingFailure("too long")

        with pytest.raises(EncodingFailure) as exc_info:
            start_payment(customer_cart, generator=generator)

        order = Order.objects.get()
        assert exc_info.value.order_id == order.pk
        assert order.payment_status == Order.STATUS_PENDING

    def test_reloaded_order_keeps_exact_total(self, make_product, generator):
        item = make_product(price=Decimal("2.87"), discount=Decimal("5.75"), stock=5)
        cart = CartSession().with_customer("Asha").add_line(item, 1)

        order, payment_request = start_payment(cart, generator=generator)
        order.refresh_from_db()

        assert order.total_amount == cart.totals().total == Decimal("2.704975")
        retry = generator.create_payment_request(order)
        assert retry.amount_minor == payment_request.amount_minor == 270
        assert retry.request_reference == payment_request.request_reference

"""
Tests for the POS cart state machine.

Tests cover:
- Adding products with stock clamping
- Setting quantities, removing lines, clearing
- Immutability of cart snapshots
- Session storage round trip
- Line invariants under random operation sequences
"""

import random
from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.sales.cart import CartLine, CartSession
from apps.sales.exceptions import OutOfStock, ValidationError


def product(pk, stock=10, price="500.00", discount="0", name=None):
    return SimpleNamespace(
        pk=pk,
        name=name or f"Product {pk}",
        price=Decimal(price),
        discount=Decimal(discount),
        stock=stock,
        category="Shirts",
        size="M",
        color="Blue",
    )


def assert_invariants(cart):
    product_ids = [item.product_id for item in cart.lines]
    assert len(product_ids) == len(set(product_ids))
    for item in cart.lines:
        assert 0 < item.quantity <= item.stock


class TestAddLine:
    def test_add_new_product(self):
        cart = CartSession().add_line(product(1), 2)

        assert len(cart.lines) == 1
        assert cart.lines[0].product_id == 1
        assert cart.lines[0].quantity == 2

    def test_default_quantity_is_one(self):
        cart = CartSession().add_line(product(1))
        assert cart.get_line(1).quantity == 1

    def test_adding_again_increments(self):
        item = product(1)
        cart = CartSession().add_line(item).add_line(item, 3)

        assert len(cart.lines) == 1
        assert cart.get_line(1).quantity == 4

    def test_repeated_adds_clamp_to_stock(self):
        """Five adds of a product with three in stock leave three in the cart."""
        item = product(1, stock=3)
        cart = CartSession()
        for _ in range(5):
            cart = cart.add_line(item)

        assert cart.get_line(1).quantity == 3

    def test_large_add_clamps_silently(self):
        cart = CartSession().add_line(product(1, stock=4), 100)
        assert cart.get_line(1).quantity == 4

    def test_out_of_stock_product_adds_no_line(self):
        cart = CartSession().add_line(product(1, stock=0))
        assert cart.is_empty

    def test_re_add_refreshes_snapshot(self):
        cart = CartSession().add_line(product(1, price="500.00", stock=5), 2)
        cart = cart.add_line(product(1, price="450.00", discount="10", stock=8), 1)

        line = cart.get_line(1)
        assert line.price == Decimal("450.00")
        assert line.discount == Decimal("10")
        assert line.stock == 8
        assert line.quantity == 3

    def test_re_add_clamps_to_reduced_stock(self):
        cart = CartSession().add_line(product(1, stock=5), 5)
        cart = cart.add_line(product(1, stock=2), 1)
        assert cart.get_line(1).quantity == 2

    def test_re_add_after_stock_sold_out_removes_line(self):
        cart = CartSession().add_line(product(1, stock=5), 2)
        cart = cart.add_line(product(1, stock=0), 1)
        assert cart.get_line(1) is None

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity_rejected(self, qty):
        with pytest.raises(ValidationError) as exc_info:
            CartSession().add_line(product(1), qty)
        assert exc_info.value.field == "quantity"

    def test_lines_keep_insertion_order(self):
        cart = CartSession().add_line(product(3)).add_line(product(1)).add_line(product(2))
        cart = cart.add_line(product(1))
        assert [item.product_id for item in cart.lines] == [3, 1, 2]

    def test_original_cart_is_not_modified(self):
        original = CartSession().add_line(product(1), 1)
        updated = original.add_line(product(1), 1)

        assert original.get_line(1).quantity == 1
        assert updated.get_line(1).quantity == 2


class TestSetQuantity:
    def test_updates_quantity(self):
        cart = CartSession().add_line(product(1, stock=10), 1).set_quantity(1, 7)
        assert cart.get_line(1).quantity == 7

    def test_zero_removes_line(self):
        cart = CartSession().add_line(product(1)).set_quantity(1, 0)
        assert cart.is_empty

    def test_negative_rejected(self):
        cart = CartSession().add_line(product(1))
        with pytest.raises(ValidationError):
            cart.set_quantity(1, -2)

    def test_above_stock_raises_out_of_stock(self):
        cart = CartSession().add_line(product(1, stock=3))

        with pytest.raises(OutOfStock) as exc_info:
            cart.set_quantity(1, 4)

        error = exc_info.value
        assert error.product_id == 1
        assert error.requested == 4
        assert error.available == 3
        assert error.as_dict()["code"] == "out_of_stock"

    def test_unknown_product_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CartSession().set_quantity(99, 1)
        assert exc_info.value.field == "product_id"


class TestRemoveAndClear:
    def test_remove_line(self):
        cart = CartSession().add_line(product(1)).add_line(product(2)).remove_line(1)
        assert [item.product_id for item in cart.lines] == [2]

    def test_remove_missing_line_is_noop(self):
        cart = CartSession().add_line(product(1))
        assert cart.remove_line(42) == cart

    def test_clear_empties_lines_and_customer(self):
        cart = CartSession().with_customer("Asha", "9876543210").add_line(product(1))
        cleared = cart.clear()

        assert cleared.is_empty
        assert cleared.customer_name == ""
        assert cleared.customer_phone == ""

    def test_with_customer_strips_whitespace(self):
        cart = CartSession().with_customer("  Asha ", " 98765 ")
        assert cart.customer_name == "Asha"
        assert cart.customer_phone == "98765"


class TestTotalsAndStorage:
    def test_totals_use_line_snapshots(self):
        cart = CartSession().add_line(product(1, price="899.00", discount="10", stock=25), 2)
        totals = cart.totals()

        assert totals.total == Decimal("1618.2")
        assert totals.total_discount == Decimal("179.8")

    def test_line_total(self):
        line = CartLine.from_product(product(1, price="899.00", discount="10"), 2)
        assert line.discounted_price == Decimal("809.1")
        assert line.line_total == Decimal("1618.2")

    def test_item_count(self):
        cart = CartSession().add_line(product(1), 2).add_line(product(2), 3)
        assert cart.item_count == 5

    def test_dict_round_trip(self):
        cart = (
            CartSession()
            .with_customer("Asha", "9876543210")
            .add_line(product(1, price="899.00", discount="10"), 2)
            .add_line(product(2, price="1599.00", discount="20"), 1)
        )
        assert CartSession.from_dict(cart.to_dict()) == cart

    def test_from_empty_dict(self):
        assert CartSession.from_dict(None) == CartSession()

    def test_from_dict_rejects_invalid_lines(self):
        data = CartSession().add_line(product(1, stock=2), 2).to_dict()
        data["lines"][0]["quantity"] = 5

        with pytest.raises(AssertionError):
            CartSession.from_dict(data)


class TestCartInvariants:
    @pytest.mark.parametrize("seed", range(25))
    def test_random_operation_sequence_keeps_invariants(self, seed):
        rng = random.Random(seed)
        catalog = [product(pk, stock=rng.randint(0, 6)) for pk in range(1, 6)]
        cart = CartSession()

        for _ in range(60):
            item = rng.choice(catalog)
            action = rng.choice(["add", "set", "remove", "clear"])
            try:
                if action == "add":
                    cart = cart.add_line(item, rng.randint(1, 4))
                elif action == "set":
                    cart = cart.set_quantity(item.pk, rng.randint(-1, 8))
                elif action == "remove":
                    cart = cart.remove_line(item.pk)
                elif rng.random() < 0.1:
                    cart = cart.clear()
            except (ValidationError, OutOfStock):
                pass
            assert_invariants(cart)

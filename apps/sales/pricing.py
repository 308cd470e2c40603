"""
Cart pricing.

Pure functions turning cart lines into subtotal, discount and payable total.
Amounts are accumulated as Decimal in full precision; rounding happens only
when a value is displayed or converted to minor currency units.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .exceptions import ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    total_discount: Decimal
    total: Decimal

    @property
    def gross(self) -> Decimal:
        """Amount before discount, shown as the bill's first line."""
        return self.subtotal + self.total_discount

    def as_dict(self):
        return {
            "subtotal": self.subtotal,
            "total_discount": self.total_discount,
            "total": self.total,
            "gross": self.gross,
        }


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def discounted_unit_price(price, discount) -> Decimal:
    """price - price * discount / 100"""
    price = to_decimal(price)
    discount = to_decimal(discount)
    if price < ZERO:
        raise ValidationError(f"Price must not be negative (got {price})", field="price")
    if discount < ZERO or discount > HUNDRED:
        raise ValidationError(
            f"Discount must be between 0 and 100 percent (got {discount})", field="discount"
        )
    return price - price * discount / HUNDRED


def price_cart(lines: Iterable) -> CartTotals:
    """
    Price a sequence of cart lines.

    Each line must expose ``price``, ``discount`` (percent) and ``quantity``.
    Calling this twice on the same lines yields identical totals.

    Raises:
        ValidationError: negative quantity, negative price or a discount
            outside 0-100
    """
    subtotal = ZERO
    total_discount = ZERO

    for line in lines:
        quantity = line.quantity
        if quantity < 0:
            raise ValidationError(
                f"Quantity must not be negative (got {quantity})", field="quantity"
            )
        price = to_decimal(line.price)
        discount = to_decimal(line.discount)
        unit = discounted_unit_price(price, discount)

        subtotal += unit * quantity
        total_discount += price * discount / HUNDRED * quantity

    return CartTotals(subtotal=subtotal, total_discount=total_discount, total=subtotal)

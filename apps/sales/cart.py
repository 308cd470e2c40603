"""
POS cart state machine.

A CartSession is an immutable value: every operation returns a new session
and leaves the original untouched, so callers decide when to store or
re-render it. The session is owned by a single terminal; see
``session_store`` for how concurrent requests of one terminal are serialized.

Invariants held after every operation:
- each line's quantity is a positive integer no larger than its stock snapshot
- no two lines share a product id
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Tuple

from .exceptions import OutOfStock, ValidationError
from .pricing import CartTotals, discounted_unit_price, price_cart, to_decimal


@dataclass(frozen=True)
class CartLine:
    """One product in the cart with the catalog values copied at add time."""

    product_id: int
    name: str
    price: Decimal
    discount: Decimal
    stock: int
    quantity: int
    category: str = ""
    size: str = ""
    color: str = ""

    @classmethod
    def from_product(cls, product, quantity):
        return cls(
            product_id=product.pk,
            name=product.name,
            price=to_decimal(product.price),
            discount=to_decimal(product.discount),
            stock=product.stock,
            quantity=quantity,
            category=product.category or "",
            size=product.size or "",
            color=product.color or "",
        )

    @property
    def discounted_price(self) -> Decimal:
        return discounted_unit_price(self.price, self.discount)

    @property
    def line_total(self) -> Decimal:
        return self.discounted_price * self.quantity

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "discount": str(self.discount),
            "stock": self.stock,
            "quantity": self.quantity,
            "category": self.category,
            "size": self.size,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            product_id=int(data["product_id"]),
            name=data["name"],
            price=Decimal(data["price"]),
            discount=Decimal(data["discount"]),
            stock=int(data["stock"]),
            quantity=int(data["quantity"]),
            category=data.get("category", ""),
            size=data.get("size", ""),
            color=data.get("color", ""),
        )


@dataclass(frozen=True)
class CartSession:
    """Lines in insertion order plus the customer the bill is for."""

    lines: Tuple[CartLine, ...] = field(default_factory=tuple)
    customer_name: str = ""
    customer_phone: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def get_line(self, product_id) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def totals(self) -> CartTotals:
        return price_cart(self.lines)

    # Mutations

    def add_line(self, product, qty=1) -> "CartSession":
        """
        Add ``qty`` units of a product.

        The resulting quantity is clamped to the product's current stock;
        units beyond stock are dropped without error. The line's snapshot is
        refreshed from the product.
        """
        if qty <= 0:
            raise ValidationError(
                f"Quantity to add must be positive (got {qty})", field="quantity"
            )

        existing = self.get_line(product.pk)
        current = existing.quantity if existing else 0
        quantity = min(current + qty, product.stock)

        if quantity <= 0:
            return self.remove_line(product.pk)

        line = CartLine.from_product(product, quantity)
        if existing:
            lines = tuple(line if item.product_id == product.pk else item for item in self.lines)
        else:
            lines = self.lines + (line,)
        return self._checked(replace(self, lines=lines))

    def set_quantity(self, product_id, qty) -> "CartSession":
        """
        Set the quantity of an existing line; zero removes it.

        Raises:
            ValidationError: negative quantity or no line for product_id
            OutOfStock: qty exceeds the line's stock snapshot
        """
        if qty < 0:
            raise ValidationError(f"Quantity must not be negative (got {qty})", field="quantity")

        existing = self.get_line(product_id)
        if existing is None:
            raise ValidationError(f"Product {product_id} is not in the cart", field="product_id")

        if qty == 0:
            return self.remove_line(product_id)

        if qty > existing.stock:
            raise OutOfStock(
                f"Only {existing.stock} of {existing.name} in stock (requested {qty})",
                product_id=product_id,
                requested=qty,
                available=existing.stock,
            )

        lines = tuple(
            replace(item, quantity=qty) if item.product_id == product_id else item
            for item in self.lines
        )
        return self._checked(replace(self, lines=lines))

    def remove_line(self, product_id) -> "CartSession":
        lines = tuple(item for item in self.lines if item.product_id != product_id)
        if len(lines) == len(self.lines):
            return self
        return self._checked(replace(self, lines=lines))

    def with_customer(self, name, phone="") -> "CartSession":
        return replace(self, customer_name=(name or "").strip(), customer_phone=(phone or "").strip())

    def clear(self) -> "CartSession":
        return CartSession()

    # Serialization for session storage

    def to_dict(self):
        return {
            "lines": [line.to_dict() for line in self.lines],
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
        }

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        return cls._checked(
            cls(
                lines=tuple(CartLine.from_dict(item) for item in data.get("lines", [])),
                customer_name=data.get("customer_name", ""),
                customer_phone=data.get("customer_phone", ""),
            )
        )

    @staticmethod
    def _checked(cart: "CartSession") -> "CartSession":
        seen = set()
        for line in cart.lines:
            if line.product_id in seen:
                raise AssertionError(f"Duplicate cart line for product {line.product_id}")
            if not 0 < line.quantity <= line.stock:
                raise AssertionError(
                    f"Cart line for product {line.product_id} has quantity {line.quantity} "
                    f"outside 1..{line.stock}"
                )
            seen.add(line.product_id)
        return cart

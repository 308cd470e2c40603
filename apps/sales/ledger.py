"""
Order ledger.

Durable store of submitted orders. Database errors are translated into
PersistenceFailure so callers can retry the submission step.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.db.models import Count, Q, Sum

from .exceptions import PersistenceFailure
from .models import Order
from .pricing import to_decimal

logger = logging.getLogger(__name__)


def _serialize_line(line):
    if hasattr(line, "to_dict"):
        data = line.to_dict()
        data["discounted_price"] = str(line.discounted_price)
        data["line_total"] = str(line.line_total)
        return data
    return {key: str(value) if isinstance(value, Decimal) else value for key, value in line.items()}


class OrderLedger:
    """Creates and reads orders in the database."""

    def create_order(self, customer_name, customer_phone, lines, total, discount_total) -> Order:
        """
        Persist a new pending order.

        Returns:
            The created Order with payment status pending

        Raises:
            PersistenceFailure: the database rejected the write or is unreachable
        """
        items = [_serialize_line(line) for line in lines]
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    customer_name=customer_name,
                    customer_phone=customer_phone or "",
                    items=items,
                    total_amount=to_decimal(total),
                    discount_amount=to_decimal(discount_total or 0),
                )
        except DatabaseError as e:
            logger.error(f"Order creation failed for {customer_name}: {str(e)}", exc_info=True)
            raise PersistenceFailure(f"Could not save order: {str(e)}") from e

        logger.info(
            f"Order {order.pk} created for {customer_name}: "
            f"{len(items)} line(s), total {order.total_amount}"
        )
        return order

    def list_orders(self):
        """All orders, newest first."""
        try:
            return list(Order.objects.all())
        except DatabaseError as e:
            logger.error(f"Order listing failed: {str(e)}", exc_info=True)
            raise PersistenceFailure(f"Could not load orders: {str(e)}") from e

    def get_order(self, order_id) -> Order:
        """
        Raises:
            Order.DoesNotExist: no order with that id
            PersistenceFailure: the database is unreachable
        """
        try:
            return Order.objects.get(pk=order_id)
        except DatabaseError as e:
            logger.error(f"Order {order_id} lookup failed: {str(e)}", exc_info=True)
            raise PersistenceFailure(f"Could not load order {order_id}: {str(e)}") from e

    def matches_cart(self, order, cart) -> bool:
        """True when the order was submitted from a cart with these lines, customer and total."""
        return (
            order.customer_name == cart.customer_name.strip()
            and order.customer_phone == (cart.customer_phone or "")
            and order.items == [_serialize_line(line) for line in cart.lines]
            and order.total_amount == cart.totals().total
        )

    def revenue_summary(self):
        """Counts per payment status plus collected revenue and discount."""
        try:
            stats = Order.objects.aggregate(
                order_count=Count("id"),
                pending_count=Count("id", filter=Q(payment_status=Order.STATUS_PENDING)),
                paid_count=Count("id", filter=Q(payment_status=Order.STATUS_SUCCESS)),
                failed_count=Count("id", filter=Q(payment_status=Order.STATUS_FAILED)),
                review_count=Count("id", filter=Q(needs_review=True)),
                revenue=Sum("total_amount", filter=Q(payment_status=Order.STATUS_SUCCESS)),
                discount_given=Sum("discount_amount", filter=Q(payment_status=Order.STATUS_SUCCESS)),
            )
        except DatabaseError as e:
            logger.error(f"Revenue summary failed: {str(e)}", exc_info=True)
            raise PersistenceFailure(f"Could not compute revenue summary: {str(e)}") from e

        stats["revenue"] = stats["revenue"] or Decimal("0")
        stats["discount_given"] = stats["discount_given"] or Decimal("0")
        return stats

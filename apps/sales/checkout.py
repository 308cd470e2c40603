"""
Checkout pipeline: price the cart, persist the order, generate the payment
request. Each step runs only after the previous one succeeded.
"""

import logging

from .exceptions import EncodingFailure, ValidationError
from .ledger import OrderLedger
from .models import Order
from .payment_service import PaymentRequestGenerator

logger = logging.getLogger(__name__)


def validate_cart(cart):
    if not (cart.customer_name or "").strip():
        raise ValidationError("Customer name is required", field="customer_name")
    if cart.is_empty:
        raise ValidationError("Cart is empty", field="lines")


def checkout(cart, ledger=None):
    """
    Submit the cart as a pending order. The cart itself is not modified.

    Raises:
        ValidationError: missing customer name or empty cart; nothing is written
        PersistenceFailure: the ledger could not store the order
    """
    validate_cart(cart)
    ledger = ledger or OrderLedger()

    totals = cart.totals()
    return ledger.create_order(
        customer_name=cart.customer_name.strip(),
        customer_phone=cart.customer_phone,
        lines=cart.lines,
        total=totals.total,
        discount_total=totals.total_discount,
    )


def _retryable_order(cart, order_id, ledger):
    if order_id is None:
        return None
    validate_cart(cart)
    try:
        order = ledger.get_order(order_id)
    except Order.DoesNotExist:
        return None
    if not order.is_pending or not ledger.matches_cart(order, cart):
        return None
    logger.info(f"Reusing pending order {order.pk} for checkout retry")
    return order


def start_payment(cart, ledger=None, generator=None, retry_order_id=None):
    """
    Checkout and create the payment request for the new order.

    When ``retry_order_id`` names a pending order submitted from this same
    cart, that order is reused instead of submitting the cart again.

    Returns:
        (order, payment_request)

    Raises:
        EncodingFailure: carries the id of the already-created order so the
            request can be regenerated without submitting the cart again
    """
    ledger = ledger or OrderLedger()
    order = _retryable_order(cart, retry_order_id, ledger) or checkout(cart, ledger=ledger)
    generator = generator or PaymentRequestGenerator()

    try:
        payment_request = generator.create_payment_request(order)
    except EncodingFailure as e:
        if e.order_id is None:
            e.order_id = order.pk
        logger.error(f"Order {order.pk} saved but payment request failed: {e.message}")
        raise

    return order, payment_request

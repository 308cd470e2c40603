"""
Payment outcome resolution.

An order's payment status moves from pending to success or failed exactly
once. Resolving an order that is already terminal raises
PaymentOutcomeConflict and writes nothing.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from django.db import DatabaseError, transaction
from django.utils import timezone
from django_fsm import can_proceed

from .cart import CartSession
from .exceptions import PaymentOutcomeConflict, PersistenceFailure, ValidationError
from .models import Order
from .payment_service import PaymentRequestGenerator

logger = logging.getLogger(__name__)

OUTCOME_SUCCESS = "success"
OUTCOME_FAILED = "failed"
OUTCOMES = (OUTCOME_SUCCESS, OUTCOME_FAILED)


@dataclass(frozen=True)
class OutcomeResult:
    order: Order
    cart: Optional[CartSession]


class PaymentOutcomeResolver:
    """Applies confirmed or failed payment outcomes to orders."""

    def __init__(self, generator=None):
        self.generator = generator or PaymentRequestGenerator()

    def resolve(
        self, order_id, outcome, cart=None, payment_method="upi", reason=""
    ) -> OutcomeResult:
        """
        Record the payment outcome of an order.

        On success the returned cart is empty; on failure it is returned
        unchanged so the cashier can retry or pick another method.

        Raises:
            ValidationError: outcome is not "success" or "failed"
            Order.DoesNotExist: no order with that id
            PaymentOutcomeConflict: the order is already success or failed
            PersistenceFailure: the database rejected the update
        """
        if outcome not in OUTCOMES:
            raise ValidationError(
                f"Outcome must be one of {', '.join(OUTCOMES)} (got {outcome!r})",
                field="outcome",
                order_id=order_id,
            )

        cached = self.generator.get_cached(order_id)
        reference = cached.request_reference if cached else ""

        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().get(pk=order_id)
                transition = order.mark_success if outcome == OUTCOME_SUCCESS else order.mark_failed

                if not can_proceed(transition):
                    logger.error(
                        f"Conflicting payment outcome for order {order_id}: "
                        f"already {order.payment_status}, got {outcome}"
                    )
                    raise PaymentOutcomeConflict(
                        f"Order {order_id} is already {order.payment_status}", order_id=order_id
                    )

                if outcome == OUTCOME_SUCCESS:
                    order.mark_success(payment_method=payment_method, reference=reference)
                else:
                    order.mark_failed(reason=reason, reference=reference)
                order.save()
        except DatabaseError as e:
            logger.error(f"Recording outcome for order {order_id} failed: {str(e)}", exc_info=True)
            raise PersistenceFailure(
                f"Could not record payment outcome: {str(e)}", order_id=order_id
            ) from e

        self.generator.discard(order_id)
        logger.info(f"Order {order_id} payment resolved as {order.payment_status}")

        if cart is not None and outcome == OUTCOME_SUCCESS:
            cart = cart.clear()
        return OutcomeResult(order=order, cart=cart)

    def flag_stale_pending(self, timeout) -> int:
        """
        Flag pending orders older than ``timeout`` seconds for review.

        Their status stays pending; a late confirmation can still resolve them.
        """
        cutoff = timezone.now() - timedelta(seconds=timeout)
        flagged = Order.objects.filter(
            payment_status=Order.STATUS_PENDING,
            needs_review=False,
            created_at__lt=cutoff,
        ).update(needs_review=True)
        if flagged:
            logger.warning(f"Flagged {flagged} pending order(s) older than {timeout}s for review")
        return flagged

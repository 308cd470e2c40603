"""
Celery tasks for the billing session.

- Flag payments left pending past the confirmation timeout for manual review
"""

import logging
from typing import Optional

from django.conf import settings

from celery import shared_task

from .outcome import PaymentOutcomeResolver

logger = logging.getLogger(__name__)


@shared_task(name="apps.sales.tasks.flag_stale_pending_orders")
def flag_stale_pending_orders(timeout: Optional[int] = None) -> str:
    """
    Mark orders still pending after the confirmation timeout as needing review.

    Runs every 5 minutes via Celery Beat. Orders are not failed automatically;
    the cashier confirms or fails them once the payment is checked.

    Args:
        timeout: Age in seconds (default: BILLING_PAYMENT_CONFIRMATION_TIMEOUT)

    Returns:
        str: Summary of the sweep
    """
    if timeout is None:
        timeout = settings.BILLING_PAYMENT_CONFIRMATION_TIMEOUT

    flagged = PaymentOutcomeResolver().flag_stale_pending(timeout)
    message = f"Flagged {flagged} stale pending order(s)"
    logger.info(message)
    return message

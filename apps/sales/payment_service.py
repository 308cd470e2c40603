"""
Payment request generation.

Turns a pending order into a payable instrument:
- Amount converted to integer minor units (paise)
- Deep-link payment URI (``upi://pay?...``)
- QR code of the URI rendered as a PNG data URL

Requests are held in the cache keyed by order id until the outcome is
resolved, so retries for the same order reuse the same reference.
"""

import base64
import io
import logging
import uuid
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import quote, urlencode

import qrcode
from django.conf import settings
from django.core.cache import cache
from django.utils.module_loading import import_string

from .exceptions import EncodingFailure, PaymentOutcomeConflict, ValidationError
from .pricing import ZERO, to_decimal

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "billing:payment_request"
CENT = Decimal("0.01")


@dataclass(frozen=True)
class PaymentRequest:
    order_id: int
    amount_minor: int
    currency: str
    payload: str
    request_reference: str
    qr_code: str

    @property
    def amount(self) -> Decimal:
        return (Decimal(self.amount_minor) / 100).quantize(CENT)

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**data)


def cache_key(order_id):
    return f"{CACHE_KEY_PREFIX}:{order_id}"


def to_minor_units(amount) -> int:
    """
    Convert a currency amount to integer minor units, rounding half up.

    Raises:
        ValidationError: amount is not finite or is negative
    """
    try:
        amount = to_decimal(amount)
    except ArithmeticError as e:
        raise ValidationError(f"Invalid amount: {amount!r}", field="amount") from e
    if not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number (got {amount})", field="amount")
    if amount < ZERO:
        raise ValidationError(f"Amount must not be negative (got {amount})", field="amount")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_payment_uri(merchant_id, merchant_name, amount_minor, currency, note, scheme="upi"):
    """
    Build ``scheme://pay?pa=..&pn=..&am=..&cu=..&tn=..``.

    The amount is the exact major-unit value without trailing zeros
    (``1618.2``, ``899``); values are percent-encoded with ``%20`` for spaces.
    """
    amount = format(Decimal(amount_minor) / 100, "f")
    params = [
        ("pa", merchant_id),
        ("pn", merchant_name),
        ("am", amount),
        ("cu", currency),
        ("tn", note),
    ]
    return f"{scheme}://pay?{urlencode(params, quote_via=quote, safe='@')}"


def render_qr_data_url(data: str, size: int = 10) -> str:
    """
    Render data as a QR code and return it as a PNG data URL.

    Raises:
        EncodingFailure: the encoder rejected the data (e.g. too long)
    """
    try:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=size,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    except Exception as e:
        raise EncodingFailure(f"QR code generation failed: {str(e)}") from e

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


class LocalPaymentGateway:
    """
    Gateway that registers payment orders locally.

    References mimic the hosted gateway's format (``order_<14 hex>``) so a
    remote gateway can be swapped in through ``BILLING_PAYMENT_GATEWAY``.
    """

    def create_order(self, amount_minor, currency, receipt):
        reference = f"order_{uuid.uuid4().hex[:14]}"
        logger.debug(f"Local gateway order {reference} for {receipt}: {amount_minor} {currency}")
        return reference


def get_gateway():
    return import_string(settings.BILLING_PAYMENT_GATEWAY)()


class PaymentRequestGenerator:
    """Creates, caches and discards payment requests for orders."""

    def __init__(self, gateway=None):
        self._gateway = gateway

    @property
    def gateway(self):
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    def create_payment_request(self, order) -> PaymentRequest:
        """
        Create the payment request for a pending order.

        Calling this again for the same order returns the cached request.

        Raises:
            PaymentOutcomeConflict: order is no longer pending
            ValidationError: order total is negative or not finite
            EncodingFailure: payload could not be rendered
        """
        if not order.is_pending:
            raise PaymentOutcomeConflict(
                f"Order {order.pk} is already {order.payment_status}", order_id=order.pk
            )

        amount_minor = to_minor_units(order.total_amount)

        cached = self.get_cached(order.pk)
        if cached is not None and cached.amount_minor == amount_minor:
            logger.info(f"Reusing payment request {cached.request_reference} for order {order.pk}")
            return cached

        request = self._build(order.pk, amount_minor)
        cache.set(
            cache_key(order.pk),
            request.to_dict(),
            timeout=settings.BILLING_PAYMENT_REQUEST_CACHE_TIMEOUT,
        )
        logger.info(
            f"Payment request {request.request_reference} created for order {order.pk}: "
            f"{request.amount} {request.currency}"
        )
        return request

    def create_payment_request_for_amount(self, order_id, amount) -> PaymentRequest:
        """Payment request for an explicit amount; not cached."""
        return self._build(order_id, to_minor_units(amount))

    def get_cached(self, order_id):
        data = cache.get(cache_key(order_id))
        if data is None:
            return None
        return PaymentRequest.from_dict(data)

    def discard(self, order_id):
        cache.delete(cache_key(order_id))

    def _build(self, order_id, amount_minor) -> PaymentRequest:
        currency = settings.BILLING_CURRENCY
        payload = build_payment_uri(
            merchant_id=settings.BILLING_MERCHANT_ID,
            merchant_name=settings.BILLING_MERCHANT_NAME,
            amount_minor=amount_minor,
            currency=currency,
            note=f"Payment for Order {order_id}",
            scheme=settings.BILLING_PAYMENT_URI_SCHEME,
        )

        try:
            qr_code = render_qr_data_url(payload, size=settings.BILLING_QR_BOX_SIZE)
        except EncodingFailure as e:
            logger.error(f"Payment request for order {order_id} failed: {e.message}")
            raise EncodingFailure(e.message, order_id=order_id) from e

        reference = self.gateway.create_order(amount_minor, currency, receipt=f"receipt_{order_id}")
        return PaymentRequest(
            order_id=order_id,
            amount_minor=amount_minor,
            currency=currency,
            payload=payload,
            request_reference=reference,
            qr_code=qr_code,
        )

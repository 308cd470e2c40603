"""
Views for the POS billing session.

- Cart of the current terminal session (add, update, remove, clear, customer)
- Checkout: persist the order and generate its payment request
- Payment request retry and payment outcome resolution
- Order history and revenue summary
- Direct order and QR endpoints used by older POS clients
"""

import functools
import logging
from types import SimpleNamespace

from django.http import Http404

from rest_framework import generics, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.formatting_utils import format_currency, round_amount
from apps.inventory import catalog
from apps.inventory.models import Product

from .checkout import start_payment
from .exceptions import (
    BillingError,
    EncodingFailure,
    OutOfStock,
    PaymentOutcomeConflict,
    PersistenceFailure,
    ValidationError,
)
from .ledger import OrderLedger
from .models import Order
from .outcome import PaymentOutcomeResolver
from .payment_service import PaymentRequestGenerator
from .pricing import price_cart
from .serializers import (
    CartCustomerSerializer,
    CartLineAddSerializer,
    CartLineUpdateSerializer,
    CartSerializer,
    DirectOrderSerializer,
    GenerateQRSerializer,
    OrderSerializer,
    PaymentOutcomeSerializer,
    PaymentRequestSerializer,
)
from .session_store import cart_session, load_cart

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    OutOfStock: status.HTTP_400_BAD_REQUEST,
    PaymentOutcomeConflict: status.HTTP_409_CONFLICT,
    PersistenceFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    EncodingFailure: status.HTTP_502_BAD_GATEWAY,
}


def billing_error_response(error):
    """Map a billing error to a JSON response carrying its context."""
    http_status = ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return Response(error.as_dict(), status=http_status)


def handles_billing_errors(view):
    """Turn BillingError raised by a view into its mapped response."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except BillingError as e:
            return billing_error_response(e)

    return wrapper


def _get_product(product_id):
    try:
        return catalog.get_product(product_id)
    except Product.DoesNotExist:
        raise Http404(f"Product {product_id} not found")


def _get_order(order_id):
    try:
        return OrderLedger().get_order(order_id)
    except Order.DoesNotExist:
        raise Http404(f"Order {order_id} not found")


def _cart_response(cart, http_status=status.HTTP_200_OK):
    return Response(CartSerializer(cart).data, status=http_status)


# Cart


@api_view(["GET"])
def cart_detail(request):
    """Current cart with priced totals."""
    return _cart_response(load_cart(request))


@api_view(["POST"])
@handles_billing_errors
def cart_add_line(request):
    """
    Add a product to the cart.

    Request body:
    {
        "product_id": 1,
        "quantity": 1 (optional, clamped to stock)
    }
    """
    serializer = CartLineAddSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product = _get_product(serializer.validated_data["product_id"])
    with cart_session(request) as handle:
        handle.cart = handle.cart.add_line(product, serializer.validated_data["quantity"])
    return _cart_response(handle.cart)


@api_view(["PUT", "DELETE"])
@handles_billing_errors
def cart_line_detail(request, product_id):
    """Set the quantity of a cart line (0 removes it) or remove it."""
    if request.method == "DELETE":
        with cart_session(request) as handle:
            handle.cart = handle.cart.remove_line(product_id)
        return _cart_response(handle.cart)

    serializer = CartLineUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with cart_session(request) as handle:
        handle.cart = handle.cart.set_quantity(product_id, serializer.validated_data["quantity"])
    return _cart_response(handle.cart)


@api_view(["POST"])
def cart_clear(request):
    with cart_session(request) as handle:
        handle.cart = handle.cart.clear()
        handle.checkout_order_id = None
    return _cart_response(handle.cart)


@api_view(["PUT"])
def cart_customer(request):
    """Set the customer the bill is for."""
    serializer = CartCustomerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with cart_session(request) as handle:
        handle.cart = handle.cart.with_customer(
            serializer.validated_data["customer_name"],
            serializer.validated_data["customer_phone"],
        )
    return _cart_response(handle.cart)


# Checkout and payment


@api_view(["POST"])
@handles_billing_errors
def pos_checkout(request):
    """
    Submit the cart as an order and create its payment request.

    Request body (optional, overrides the cart's customer):
    {
        "customer_name": "Asha",
        "customer_phone": "9876543210"
    }

    The cart is kept until the payment outcome is recorded as success. If
    this session already submitted the same cart and that order is still
    pending (e.g. its QR code failed to render), the order is reused.
    """
    error = None
    with cart_session(request) as handle:
        if "customer_name" in request.data:
            handle.cart = handle.cart.with_customer(
                request.data.get("customer_name"),
                request.data.get("customer_phone", handle.cart.customer_phone),
            )
        try:
            order, payment_request = start_payment(
                handle.cart, retry_order_id=handle.checkout_order_id
            )
        except EncodingFailure as e:
            handle.checkout_order_id = e.order_id
            error = e
        else:
            handle.checkout_order_id = order.pk

    if error is not None:
        return billing_error_response(error)

    return Response(
        {
            "order": OrderSerializer(order).data,
            "payment_request": PaymentRequestSerializer(payment_request).data,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@handles_billing_errors
def order_payment_request(request, order_id):
    """Create (or fetch the existing) payment request for a pending order."""
    order = _get_order(order_id)
    payment_request = PaymentRequestGenerator().create_payment_request(order)
    return Response(PaymentRequestSerializer(payment_request).data, status=status.HTTP_200_OK)


@api_view(["POST"])
@handles_billing_errors
def order_outcome(request, order_id):
    """
    Record the payment outcome of an order.

    Request body:
    {
        "outcome": "success|failed",
        "payment_method": "upi" (optional),
        "reason": "" (optional, for failed payments)
    }

    A success for the order checked out from this session clears its cart.
    """
    serializer = PaymentOutcomeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    _get_order(order_id)
    with cart_session(request) as handle:
        owns_order = handle.checkout_order_id == order_id
        result = PaymentOutcomeResolver().resolve(
            order_id,
            data["outcome"],
            cart=handle.cart if owns_order else None,
            payment_method=data["payment_method"],
            reason=data["reason"],
        )
        if owns_order:
            handle.cart = result.cart
            handle.checkout_order_id = None

    return Response(
        {"order": OrderSerializer(result.order).data, "cart": CartSerializer(handle.cart).data},
        status=status.HTTP_200_OK,
    )


# Orders


class OrderListView(generics.ListAPIView):
    """
    API endpoint for order history, newest first.

    POST creates an order from client-supplied lines (older POS clients).
    """

    serializer_class = OrderSerializer

    def get_queryset(self):
        return OrderLedger().list_orders()

    @handles_billing_errors
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @handles_billing_errors
    def post(self, request, *args, **kwargs):
        serializer = DirectOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        items = [dict(item) for item in data["items"]]
        totals = price_cart(SimpleNamespace(**item) for item in items)
        for item, line in zip(items, data["items"]):
            unit = line["price"] - line["price"] * line["discount"] / 100
            item["discounted_price"] = unit
            item["line_total"] = unit * line["quantity"]

        submitted = data.get("total_amount")
        if submitted is not None and submitted != totals.total:
            logger.warning(
                f"Submitted total {submitted} for {data['customer_name']} "
                f"differs from computed {totals.total}"
            )

        order = OrderLedger().create_order(
            customer_name=data["customer_name"],
            customer_phone=data.get("customer_phone", ""),
            lines=items,
            total=totals.total,
            discount_total=totals.total_discount,
        )
        return Response(
            {
                "id": order.pk,
                "message": "Order created successfully",
                "order": OrderSerializer(order).data,
            },
            status=status.HTTP_201_CREATED,
        )


class OrderDetailView(generics.RetrieveAPIView):
    serializer_class = OrderSerializer
    queryset = Order.objects.all()
    lookup_field = "id"
    lookup_url_kwarg = "order_id"


@api_view(["GET"])
@handles_billing_errors
def order_summary(request):
    """Order counts by payment status and collected revenue."""
    summary = OrderLedger().revenue_summary()
    summary["revenue"] = f"{round_amount(summary['revenue'])}"
    summary["discount_given"] = f"{round_amount(summary['discount_given'])}"
    summary["revenue_display"] = format_currency(summary["revenue"])
    return Response(summary, status=status.HTTP_200_OK)


@api_view(["POST"])
@handles_billing_errors
def generate_qr(request):
    """
    Payment QR for an explicit amount and order id.

    Request body:
    {
        "amount": "1618.20",
        "order_id": 1
    }
    """
    serializer = GenerateQRSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    payment_request = PaymentRequestGenerator().create_payment_request_for_amount(
        serializer.validated_data["order_id"], serializer.validated_data["amount"]
    )
    return Response(PaymentRequestSerializer(payment_request).data, status=status.HTTP_200_OK)

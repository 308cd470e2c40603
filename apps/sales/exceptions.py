"""
Billing error taxonomy.

Every error carries enough context (offending field, order id when one
exists) for the caller to resume checkout at the failing step.
"""


class BillingError(Exception):
    """Base class for billing session failures."""

    code = "billing_error"

    def __init__(self, message, field=None, order_id=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.order_id = order_id

    def as_dict(self):
        payload = {"code": self.code, "detail": self.message}
        if self.field is not None:
            payload["field"] = self.field
        if self.order_id is not None:
            payload["order_id"] = self.order_id
        return payload


class ValidationError(BillingError, ValueError):
    """Missing customer name, empty cart, non-positive quantity or price."""

    code = "validation_error"


class OutOfStock(BillingError):
    """Requested quantity exceeds the stock snapshot of a cart line."""

    code = "out_of_stock"

    def __init__(self, message, product_id=None, requested=None, available=None):
        super().__init__(message, field="quantity")
        self.product_id = product_id
        self.requested = requested
        self.available = available

    def as_dict(self):
        payload = super().as_dict()
        payload.update(
            {
                "product_id": self.product_id,
                "requested": self.requested,
                "available": self.available,
            }
        )
        return payload


class PersistenceFailure(BillingError):
    """The order ledger could not be reached or rejected the write."""

    code = "persistence_failure"


class EncodingFailure(BillingError):
    """The payment payload could not be rendered as a scannable code."""

    code = "encoding_failure"


class PaymentOutcomeConflict(BillingError):
    """Attempt to resolve a payment that is already in a terminal state."""

    code = "payment_outcome_conflict"

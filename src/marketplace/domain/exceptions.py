"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Checkout failures additionally carry a machine-readable ``kind`` so callers
can report ``{errorKind, message}`` without parsing the message text.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidStatusTransition(ValidationError):
    """An order was asked to move to a status its current status forbids."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class RefundFailed(DomainException):
    """The gateway would not refund a charge; the order was left unchanged."""


class InvariantViolation(DomainException):
    """Internal bookkeeping disagrees with itself.

    Never expected in a correct run. Raised so the saga still compensates.
    """


# ---------------------------------------------------------------------------
# Checkout errors
# ---------------------------------------------------------------------------


class CheckoutError(DomainException):
    """Base class for errors surfaced by the checkout pipeline."""

    kind = "CheckoutError"

    def to_dict(self) -> dict:
        return {"errorKind": self.kind, "message": str(self)}


class EmptySelection(CheckoutError):
    kind = "EmptySelection"

    def __init__(self, message: str = "No cart items selected for checkout") -> None:
        super().__init__(message)


class UnknownPaymentMethod(CheckoutError):
    kind = "UnknownPaymentMethod"

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown payment method: '{method}'")
        self.method = method


class InsufficientStock(CheckoutError):
    kind = "InsufficientStock"

    def __init__(self, product_id: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(requested {requested}, available {available})"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["productId"] = self.product_id
        data["available"] = self.available
        return data


class PaymentFailed(CheckoutError):
    kind = "PaymentFailed"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment failed: {reason}")
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class ProductNotFound(CheckoutError, EntityNotFoundError):
    kind = "ProductNotFound"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: '{product_id}'")
        self.product_id = product_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["productId"] = self.product_id
        return data


# ---------------------------------------------------------------------------
# Collaborator errors (not domain rules)
# ---------------------------------------------------------------------------


class PaymentGatewayError(Exception):
    """The payment provider could not be reached or answered garbage."""

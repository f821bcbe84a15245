"""Order aggregate — the immutable record produced by checkout.

An Order is written once, with its line snapshots and pricing frozen.
Afterwards only its status moves, and every move is appended to the
timeline. Lines and pricing are never edited.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from marketplace.domain.exceptions import InvalidStatusTransition, ValidationError
from marketplace.domain.model.pricing import PriceBreakdown
from marketplace.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


# Forward moves plus the two exits (cancellation, return). Nothing else.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.RETURNED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Value types owned by the aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineSnapshot:
    """Point-in-time copy of the product facts a buyer paid for.

    Later edits or deletion of the product never reach this record.
    """

    product_id: str
    seller_id: str
    quantity: Quantity
    unit_price_at_purchase: Money
    name_at_purchase: str
    description_at_purchase: str = ""
    image_at_purchase: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price_at_purchase * self.quantity.value


@dataclass(frozen=True)
class ShippingAddress:
    street: str
    city: str
    state: str
    zip_code: str
    first_name: str = "Customer"
    last_name: str = "Name"
    country: str = "US"
    phone: str = ""

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("street", "city", "state", "zip_code")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Shipping address is missing: {', '.join(missing)}"
            )


@dataclass
class PaymentRecord:
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    paid_at: datetime | None = None
    refunded_at: datetime | None = None
    refund_amount: Money | None = None


@dataclass(frozen=True)
class TimelineEntry:
    status: OrderStatus
    timestamp: datetime
    note: str = ""


@dataclass(frozen=True)
class Cancellation:
    reason: str
    cancelled_at: datetime


# ---------------------------------------------------------------------------
# Order numbers
# ---------------------------------------------------------------------------

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_order_number(now: datetime | None = None) -> str:
    """Return ``ORD-<base36 ms timestamp>-<6 random chars>``."""
    moment = now or _utcnow()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"ORD-{_to_base36(millis)}-{suffix}"


# ---------------------------------------------------------------------------
# Aggregate root
# ---------------------------------------------------------------------------


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders. The ``__init__`` is intentionally
    simple so the repository can reconstitute persisted orders without
    re-validating.
    """

    order_number: str
    buyer_id: str
    lines: tuple[OrderLineSnapshot, ...]
    pricing: PriceBreakdown
    payment: PaymentRecord
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    timeline: list[TimelineEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    cancellation: Cancellation | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        order_number: str,
        buyer_id: str,
        lines: list[OrderLineSnapshot],
        pricing: PriceBreakdown,
        payment_method: PaymentMethod,
        transaction_id: str,
        shipping_address: ShippingAddress,
        now: datetime | None = None,
    ) -> Order:
        """Create a paid, confirmed order in one step."""
        if not lines:
            raise ValidationError("Order must contain at least one line")
        if not transaction_id:
            raise ValidationError("A paid order needs a transaction ID")

        moment = now or _utcnow()
        return Order(
            order_number=order_number,
            buyer_id=buyer_id,
            lines=tuple(lines),
            pricing=pricing,
            payment=PaymentRecord(
                method=payment_method,
                status=PaymentStatus.COMPLETED,
                transaction_id=transaction_id,
                paid_at=moment,
            ),
            shipping_address=shipping_address,
            status=OrderStatus.CONFIRMED,
            timeline=[
                TimelineEntry(
                    status=OrderStatus.CONFIRMED,
                    timestamp=moment,
                    note="Order confirmed and payment processed",
                )
            ],
            created_at=moment,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition_to(
        self, target: OrderStatus, note: str = "", now: datetime | None = None
    ) -> None:
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} to {target.value}"
            )
        self.status = target
        self.timeline.append(
            TimelineEntry(status=target, timestamp=now or _utcnow(), note=note)
        )

    def cancel(self, reason: str, now: datetime | None = None) -> None:
        """Transition to CANCELLED and record why.

        Refunding a completed payment is a separate step
        (``record_refund``), coordinated by the application handler.
        """
        moment = now or _utcnow()
        self.transition_to(OrderStatus.CANCELLED, note=reason, now=moment)
        self.cancellation = Cancellation(reason=reason, cancelled_at=moment)
        if self.payment.status == PaymentStatus.PENDING:
            self.payment.status = PaymentStatus.CANCELLED

    def mark_returned(self, note: str = "", now: datetime | None = None) -> None:
        self.transition_to(OrderStatus.RETURNED, note=note, now=now)

    def record_refund(self, amount: Money, now: datetime | None = None) -> None:
        if self.payment.status != PaymentStatus.COMPLETED:
            raise ValidationError(
                f"Cannot refund a payment in {self.payment.status.value} status"
            )
        self.payment.status = PaymentStatus.REFUNDED
        self.payment.refunded_at = now or _utcnow()
        self.payment.refund_amount = amount

    # --- Computed properties --------------------------------------------------

    @property
    def is_paid(self) -> bool:
        return self.payment.status == PaymentStatus.COMPLETED

    def quantities_by_product(self) -> dict[str, int]:
        result: dict[str, int] = {}
        for line in self.lines:
            result[line.product_id] = result.get(line.product_id, 0) + line.quantity.value
        return result

"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Money is pre-formatted
(e.g. "$15.00").
"""

from __future__ import annotations

from dataclasses import dataclass

from marketplace.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    product_name: str
    seller_id: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class TimelineEntryDTO:
    status: str
    timestamp: str
    note: str


@dataclass(frozen=True)
class OrderDTO:
    order_number: str
    buyer_id: str
    status: str
    payment_method: str
    payment_status: str
    transaction_id: str | None
    items: list[OrderLineDTO]
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str
    created_at: str
    timeline: list[TimelineEntryDTO]


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # live price, advisory only
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    """Output: a cart as the buyer sees it.

    Totals are a preview. Checkout re-prices every line.
    """

    buyer_id: str
    lines: list[CartLineDTO]
    saved_for_later: list[str]
    coupons: list[str]
    item_count: int
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str


def _timestamp(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC")


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        order_number=order.order_number,
        buyer_id=order.buyer_id,
        status=order.status.value,
        payment_method=order.payment.method.value,
        payment_status=order.payment.status.value,
        transaction_id=order.payment.transaction_id,
        items=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.name_at_purchase,
                seller_id=line.seller_id,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price_at_purchase),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        subtotal=str(order.pricing.subtotal),
        tax=str(order.pricing.tax),
        shipping=str(order.pricing.shipping),
        discount=str(order.pricing.discount),
        total=str(order.pricing.total),
        created_at=_timestamp(order.created_at),
        timeline=[
            TimelineEntryDTO(
                status=entry.status.value,
                timestamp=_timestamp(entry.timestamp),
                note=entry.note,
            )
            for entry in order.timeline
        ],
    )

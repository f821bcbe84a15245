"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from marketplace.domain.model.order import (
    Cancellation,
    Order,
    OrderLineSnapshot,
    OrderStatus,
    PaymentMethod,
    PaymentRecord,
    PaymentStatus,
    ShippingAddress,
    TimelineEntry,
)
from marketplace.domain.model.pricing import PriceBreakdown
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def get_by_number(self, order_number: str) -> Order | None:
        for raw in self._load_raw():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_for_buyer(self, buyer_id: str) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._load_raw() if raw["buyer_id"] == buyer_id]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["order_number"] == order.order_number:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    def discard(self, order_number: str) -> None:
        with self._lock:
            orders = [o for o in self._load_raw() if o["order_number"] != order_number]
            self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        payment = order.payment
        address = order.shipping_address
        return {
            "order_number": order.order_number,
            "buyer_id": order.buyer_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "lines": [
                {
                    "product_id": line.product_id,
                    "seller_id": line.seller_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price_at_purchase.amount),
                    "currency": line.unit_price_at_purchase.currency,
                    "name": line.name_at_purchase,
                    "description": line.description_at_purchase,
                    "image": line.image_at_purchase,
                }
                for line in order.lines
            ],
            "pricing": {
                "subtotal": str(order.pricing.subtotal.amount),
                "tax": str(order.pricing.tax.amount),
                "shipping": str(order.pricing.shipping.amount),
                "discount": str(order.pricing.discount.amount),
                "total": str(order.pricing.total.amount),
            },
            "payment": {
                "method": payment.method.value,
                "status": payment.status.value,
                "transaction_id": payment.transaction_id,
                "paid_at": _iso(payment.paid_at),
                "refunded_at": _iso(payment.refunded_at),
                "refund_amount": (
                    str(payment.refund_amount.amount) if payment.refund_amount else None
                ),
            },
            "shipping_address": {
                "first_name": address.first_name,
                "last_name": address.last_name,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
                "country": address.country,
                "phone": address.phone,
            },
            "timeline": [
                {
                    "status": entry.status.value,
                    "timestamp": entry.timestamp.isoformat(),
                    "note": entry.note,
                }
                for entry in order.timeline
            ],
            "cancellation": (
                {
                    "reason": order.cancellation.reason,
                    "cancelled_at": order.cancellation.cancelled_at.isoformat(),
                }
                if order.cancellation
                else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = tuple(
            OrderLineSnapshot(
                product_id=line["product_id"],
                seller_id=line["seller_id"],
                quantity=Quantity(line["quantity"]),
                unit_price_at_purchase=Money(
                    Decimal(line["unit_price"]), line.get("currency", "USD")
                ),
                name_at_purchase=line["name"],
                description_at_purchase=line.get("description", ""),
                image_at_purchase=line.get("image", ""),
            )
            for line in raw["lines"]
        )
        pricing = PriceBreakdown(
            **{key: Money(Decimal(value)) for key, value in raw["pricing"].items()}
        )
        p = raw["payment"]
        payment = PaymentRecord(
            method=PaymentMethod(p["method"]),
            status=PaymentStatus(p["status"]),
            transaction_id=p.get("transaction_id"),
            paid_at=_parse(p.get("paid_at")),
            refunded_at=_parse(p.get("refunded_at")),
            refund_amount=Money(Decimal(p["refund_amount"])) if p.get("refund_amount") else None,
        )
        cancellation = None
        if raw.get("cancellation"):
            cancellation = Cancellation(
                reason=raw["cancellation"]["reason"],
                cancelled_at=datetime.fromisoformat(raw["cancellation"]["cancelled_at"]),
            )
        return Order(
            order_number=raw["order_number"],
            buyer_id=raw["buyer_id"],
            lines=lines,
            pricing=pricing,
            payment=payment,
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            status=OrderStatus(raw["status"]),
            timeline=[
                TimelineEntry(
                    status=OrderStatus(entry["status"]),
                    timestamp=datetime.fromisoformat(entry["timestamp"]),
                    note=entry.get("note", ""),
                )
                for entry in raw.get("timeline", [])
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            cancellation=cancellation,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None

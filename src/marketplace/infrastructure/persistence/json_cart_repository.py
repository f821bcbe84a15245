"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from marketplace.domain.model.cart import AppliedCoupon, Cart, CartLine
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def get_for_buyer(self, buyer_id: str) -> Cart | None:
        raw = self._load_raw().get(buyer_id)
        return self._to_domain(raw) if raw is not None else None

    def save(self, cart: Cart) -> None:
        with self._lock:
            carts = self._load_raw()
            carts[cart.buyer_id] = self._to_raw(cart)
            self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "buyer_id": cart.buyer_id,
            "lines": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity.value,
                    "added_at": line.added_at.isoformat(),
                }
                for line in cart.lines
            ],
            "saved_for_later": sorted(cart.saved_for_later),
            "applied_coupons": [
                {
                    "code": c.code,
                    "discount": str(c.discount.amount),
                    "applied_at": c.applied_at.isoformat(),
                }
                for c in cart.applied_coupons
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            buyer_id=raw["buyer_id"],
            lines=[
                CartLine(
                    product_id=line["product_id"],
                    quantity=Quantity(line["quantity"]),
                    added_at=datetime.fromisoformat(line["added_at"]),
                )
                for line in raw.get("lines", [])
            ],
            saved_for_later=set(raw.get("saved_for_later", [])),
            applied_coupons=[
                AppliedCoupon(
                    code=c["code"],
                    discount=Money(Decimal(c["discount"])),
                    applied_at=datetime.fromisoformat(c["applied_at"]),
                )
                for c in raw.get("applied_coupons", [])
            ],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, carts: dict[str, dict]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")

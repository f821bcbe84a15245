"""Cart aggregate — a buyer's mutable, pre-checkout item set.

A cart stores product ids and quantities only. It never stores a price:
anything shown from a cart is recomputed against the live catalog, and
checkout re-prices again on its own.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.value_objects import Money, Quantity


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartLine:
    product_id: str
    quantity: Quantity
    added_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class AppliedCoupon:
    code: str
    discount: Money
    applied_at: datetime = field(default_factory=_utcnow)


@dataclass
class Cart:
    """Aggregate root for a buyer's cart.

    Invariants:
    - at most one line per product
    - every line has a positive quantity
    - a product is either in ``lines`` or in ``saved_for_later``, not both
    """

    buyer_id: str
    lines: list[CartLine] = field(default_factory=list)
    saved_for_later: set[str] = field(default_factory=set)
    applied_coupons: list[AppliedCoupon] = field(default_factory=list)

    @staticmethod
    def empty(buyer_id: str) -> Cart:
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer ID is required")
        return Cart(buyer_id=buyer_id.strip())

    # --- Line management ------------------------------------------------------

    def add_item(self, product_id: str, quantity: int, now: datetime | None = None) -> CartLine:
        """Add *quantity* units, merging into an existing line if present."""
        qty = Quantity(quantity)
        existing = self.find_line(product_id)
        if existing is not None:
            existing.quantity = Quantity(existing.quantity.value + qty.value)
            return existing

        self.saved_for_later.discard(product_id)
        line = CartLine(product_id=product_id, quantity=qty, added_at=now or _utcnow())
        self.lines.append(line)
        return line

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity. Zero removes the line."""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        line = self._get_line(product_id)
        if quantity == 0:
            self.lines.remove(line)
            return
        line.quantity = Quantity(quantity)

    def remove_item(self, product_id: str) -> None:
        self.lines.remove(self._get_line(product_id))

    def deduct(self, quantities: Mapping[str, int]) -> None:
        """Take checked-out units off their lines.

        Only the given units go. A line the buyer grew in the meantime keeps
        the extra units; a line that reaches zero is dropped.
        """
        kept: list[CartLine] = []
        for line in self.lines:
            remaining = line.quantity.value - quantities.get(line.product_id, 0)
            if remaining > 0:
                line.quantity = Quantity(remaining)
                kept.append(line)
        self.lines = kept

    def lines_for(self, product_ids: Iterable[str]) -> list[CartLine]:
        wanted = set(product_ids)
        return [line for line in self.lines if line.product_id in wanted]

    def clear(self) -> None:
        self.lines = []
        self.applied_coupons = []

    # --- Saved for later ------------------------------------------------------

    def save_for_later(self, product_id: str) -> None:
        self.remove_item(product_id)
        self.saved_for_later.add(product_id)

    def move_to_cart(self, product_id: str, now: datetime | None = None) -> CartLine:
        if product_id not in self.saved_for_later:
            raise EntityNotFoundError(f"Product '{product_id}' is not saved for later")
        self.saved_for_later.remove(product_id)
        return self.add_item(product_id, 1, now=now)

    # --- Coupons --------------------------------------------------------------

    def apply_coupon(self, code: str, discount: Money, now: datetime | None = None) -> None:
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError("Coupon code is required")
        if any(c.code == code for c in self.applied_coupons):
            raise ValidationError(f"Coupon '{code}' is already applied")
        self.applied_coupons.append(
            AppliedCoupon(code=code, discount=discount, applied_at=now or _utcnow())
        )

    @property
    def coupon_discount(self) -> Money:
        total = Money.zero()
        for coupon in self.applied_coupons:
            total = total + coupon.discount
        return total

    def consume_coupons(self) -> list[AppliedCoupon]:
        used, self.applied_coupons = self.applied_coupons, []
        return used

    # --- Queries --------------------------------------------------------------

    @property
    def product_ids(self) -> set[str]:
        return {line.product_id for line in self.lines}

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    # --- Internal helpers -----------------------------------------------------

    def _get_line(self, product_id: str) -> CartLine:
        line = self.find_line(product_id)
        if line is None:
            raise EntityNotFoundError(f"Product '{product_id}' is not in the cart")
        return line

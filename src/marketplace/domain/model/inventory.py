"""InventoryRecord aggregate — tracks on-hand stock per product.

A reservation decrements ``quantity_on_hand`` immediately; there is no
separate "reserved" bucket. Compensation simply adds the units back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from marketplace.domain.exceptions import InsufficientStock, ValidationError

DEFAULT_LOW_STOCK_THRESHOLD = 10


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


@dataclass
class InventoryRecord:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``quantity_on_hand`` is always >= 0

    The record itself is not thread-safe; concurrent callers go through
    ``InventoryLedger`` which serialises access per product.
    """

    product_id: str
    quantity_on_hand: int
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD

    def __post_init__(self) -> None:
        if self.quantity_on_hand < 0:
            raise ValidationError("Quantity on hand cannot be negative")

    @property
    def stock_status(self) -> StockStatus:
        if self.quantity_on_hand == 0:
            return StockStatus.OUT_OF_STOCK
        if self.quantity_on_hand <= self.low_stock_threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def reserve(self, quantity: int) -> None:
        """Take *quantity* units off the shelf, all or nothing.

        Raises InsufficientStock if fewer units are on hand.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.quantity_on_hand:
            raise InsufficientStock(
                product_id=self.product_id,
                available=self.quantity_on_hand,
                requested=quantity,
            )
        self.quantity_on_hand -= quantity

    def release(self, quantity: int) -> None:
        """Put previously reserved units back on the shelf."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.quantity_on_hand += quantity

    def set_quantity(self, quantity: int) -> None:
        """Overwrite the on-hand count (stock-take / admin correction)."""
        if quantity < 0:
            raise ValidationError("Quantity on hand cannot be negative")
        self.quantity_on_hand = quantity

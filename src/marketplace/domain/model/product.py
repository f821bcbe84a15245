"""Product aggregate.

Products live independently of orders and carts. They have their own
lifecycle: prices change, sales start and end, products are added to and
removed from the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Money

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Discount:
    """A percentage sale, optionally bounded by a validity window.

    An open end (``None``) means the window is unbounded on that side.
    """

    percentage: Decimal
    valid_from: datetime | None = None
    valid_to: datetime | None = None

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.percentage <= HUNDRED:
            raise ValidationError(
                f"Discount percentage must be between 0 and 100, got {self.percentage}"
            )
        if self.valid_from and self.valid_to and self.valid_from > self.valid_to:
            raise ValidationError("Discount window ends before it starts")

    def is_active(self, moment: datetime) -> bool:
        if self.percentage == 0:
            return False
        if self.valid_from is not None and moment < self.valid_from:
            return False
        if self.valid_to is not None and moment > self.valid_to:
            return False
        return True


@dataclass
class Product:
    """A product in the catalog.

    ``price`` is the list price. What a buyer actually pays at a given
    moment is ``price_at(moment)``, which applies any active sale.
    """

    id: str
    seller_id: str
    name: str
    price: Money
    description: str = ""
    image: str = ""
    discount: Discount | None = None

    def price_at(self, moment: datetime) -> Money:
        if self.discount is None or not self.discount.is_active(moment):
            return self.price
        remaining = (HUNDRED - self.discount.percentage) / HUNDRED
        return self.price.scaled(remaining)

    def update_price(self, new_price: Money) -> None:
        """Change the list price.

        This does NOT affect any existing orders because orders capture a
        price snapshot at creation time. It DOES affect carts: a cart holds
        no price of its own.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def start_sale(self, discount: Discount) -> None:
        self.discount = discount

    def end_sale(self) -> None:
        self.discount = None

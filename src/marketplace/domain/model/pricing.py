"""Pricing policy — tax, shipping and discount arithmetic.

One policy instance prices both the advisory cart preview and the
checkout charge, so the two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Money

DEFAULT_TAX_RATE = Decimal("0.085")
DEFAULT_SHIPPING_FEE = Money(Decimal("10.00"))
DEFAULT_FREE_SHIPPING_THRESHOLD = Money(Decimal("50.00"))


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal = DEFAULT_TAX_RATE
    shipping_fee: Money = DEFAULT_SHIPPING_FEE
    free_shipping_threshold: Money = DEFAULT_FREE_SHIPPING_THRESHOLD

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.tax_rate < Decimal("1"):
            raise ValidationError(f"Tax rate must be in [0, 1), got {self.tax_rate}")

    def quote(self, subtotal: Money, discount: Money | None = None) -> PriceBreakdown:
        """Price a basket whose line totals add up to *subtotal*.

        The discount is capped so the total never goes below zero.
        """
        tax = subtotal.scaled(self.tax_rate)
        if subtotal >= self.free_shipping_threshold:
            shipping = Money.zero(subtotal.currency)
        else:
            shipping = self.shipping_fee

        gross = subtotal + tax + shipping
        discount = discount or Money.zero(subtotal.currency)
        if discount > gross:
            discount = gross

        return PriceBreakdown(
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            discount=discount,
            total=gross - discount,
        )

"""Money and Quantity, the two value types every aggregate shares."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from marketplace.domain.exceptions import ValidationError

CENT = Decimal("0.01")


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount in one currency.

    Totals never mix currencies and never go below zero; both are checked
    on every arithmetic result, not just at construction.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(f"Money needs a Decimal amount, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValidationError(f"Money cannot be negative: {self.amount}")

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same_currency(other).amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        # Money() rejects the negative result
        return Money(self.amount - self._same_currency(other).amount, self.currency)

    def __mul__(self, units: int) -> Money:
        if not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {type(units).__name__}")
        return Money(self.amount * units, self.currency)

    def scaled(self, rate: Decimal) -> Money:
        """``amount * rate`` rounded half-up to whole cents (tax, sale prices)."""
        return Money((self.amount * rate).quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same_currency(other).amount

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def _same_currency(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(f"Currency mismatch: {self.currency} vs {other.currency}")
        return other


@dataclass(frozen=True)
class Quantity:
    """Units of one product on a cart line or order line; always >= 1."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a quantity
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Quantity must be a whole number, got {type(self.value).__name__}")
        if self.value < 1:
            raise ValidationError(f"Quantity must be at least 1, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)

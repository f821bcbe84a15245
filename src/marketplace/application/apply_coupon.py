"""Application service: Apply Coupon use case.

Coupon codes are not validated against a catalog of promotions; the
caller supplies the discount amount. Coupons are consumed by the next
successful checkout.
"""

from __future__ import annotations

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.cart_repository import CartRepository


class ApplyCouponHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, buyer_id: str, code: str, discount: str) -> None:
        amount = Money.of(discount)
        if amount.amount <= 0:
            raise ValidationError("Coupon discount must be greater than zero")

        cart = self._cart_repo.get_or_create(buyer_id)
        cart.apply_coupon(code, amount)
        self._cart_repo.save(cart)

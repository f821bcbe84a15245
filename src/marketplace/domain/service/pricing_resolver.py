"""Domain service: Pricing Resolver.

Answers "what does this product cost right now", sale included. Carts
and checkout both ask here instead of remembering a price, so a price
change between add-to-cart and checkout is always honoured at checkout.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from marketplace.domain.exceptions import ProductNotFound
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PricingResolver:

    def __init__(
        self,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def current_price(self, product_id: str) -> Money:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product.price_at(self._clock())

"""Application service: Update Product use case."""

from __future__ import annotations

from marketplace.domain.exceptions import ProductNotFound
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str) -> None:
        """Update a product's list price.

        Existing orders keep their snapshot. Carts pick the new price up
        immediately, and the next checkout charges it.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        product.update_price(Money.of(new_price))
        self._product_repo.save(product)

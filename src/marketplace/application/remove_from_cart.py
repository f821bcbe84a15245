"""Application service: Remove From Cart use case."""

from __future__ import annotations

from marketplace.domain.repository.cart_repository import CartRepository


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, buyer_id: str, product_id: str) -> None:
        cart = self._cart_repo.get_or_create(buyer_id)
        cart.remove_item(product_id)
        self._cart_repo.save(cart)

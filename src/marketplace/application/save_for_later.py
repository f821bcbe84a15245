"""Application services: move cart lines to and from "saved for later"."""

from __future__ import annotations

from marketplace.domain.repository.cart_repository import CartRepository


class SaveForLaterHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, buyer_id: str, product_id: str) -> None:
        cart = self._cart_repo.get_or_create(buyer_id)
        cart.save_for_later(product_id)
        self._cart_repo.save(cart)


class MoveToCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, buyer_id: str, product_id: str) -> None:
        """Bring a saved product back into the cart with quantity 1."""
        cart = self._cart_repo.get_or_create(buyer_id)
        cart.move_to_cart(product_id)
        self._cart_repo.save(cart)

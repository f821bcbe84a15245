"""Abstract repository for Cart aggregate (one cart per buyer)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_for_buyer(self, buyer_id: str) -> Cart | None:
        """Return the buyer's cart, or None if they never had one."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""

    def get_or_create(self, buyer_id: str) -> Cart:
        """Return the buyer's cart, creating an empty one on first access.

        The new cart is not persisted until the caller saves it.
        """
        cart = self.get_for_buyer(buyer_id)
        if cart is None:
            cart = Cart.empty(buyer_id)
        return cart

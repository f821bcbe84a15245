"""Application service: Add To Cart use case."""

from __future__ import annotations

from marketplace.domain.exceptions import InsufficientStock, ProductNotFound
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(self, buyer_id: str, product_id: str, quantity: int = 1) -> int:
        """Add units of a product to the buyer's cart.

        The stock check here is a courtesy to the buyer, not a
        reservation: stock is only taken at checkout.

        Returns the line's new quantity.
        """
        if self._product_repo.get_by_id(product_id) is None:
            raise ProductNotFound(product_id)

        cart = self._cart_repo.get_or_create(buyer_id)
        existing = cart.find_line(product_id)
        wanted = quantity + (existing.quantity.value if existing else 0)
        available = self._ledger.available(product_id)
        if wanted > available:
            raise InsufficientStock(product_id=product_id, available=available, requested=wanted)

        line = cart.add_item(product_id, quantity)
        self._cart_repo.save(cart)
        return line.quantity.value

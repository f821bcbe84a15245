"""Application service: Update Cart Item use case.

Setting the quantity to zero removes the line.
"""

from __future__ import annotations

from marketplace.domain.exceptions import InsufficientStock
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger


class UpdateCartItemHandler:

    def __init__(self, cart_repo: CartRepository, ledger: InventoryLedger) -> None:
        self._cart_repo = cart_repo
        self._ledger = ledger

    def handle(self, buyer_id: str, product_id: str, quantity: int) -> None:
        cart = self._cart_repo.get_or_create(buyer_id)

        if quantity > 0:
            available = self._ledger.available(product_id)
            if quantity > available:
                raise InsufficientStock(
                    product_id=product_id, available=available, requested=quantity
                )

        cart.update_quantity(product_id, quantity)
        self._cart_repo.save(cart)

"""Application service: Set Inventory use case."""

from __future__ import annotations

from marketplace.domain.exceptions import ProductNotFound
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger


class SetInventoryHandler:

    def __init__(self, ledger: InventoryLedger, product_repo: ProductRepository) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> None:
        """Set the on-hand quantity for a product."""
        if self._product_repo.get_by_id(product_id) is None:
            raise ProductNotFound(product_id)
        self._ledger.restock(product_id, quantity)

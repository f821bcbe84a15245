"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    on_hand: int
    low_stock_threshold: int
    status: str


class ShowInventoryHandler:

    def __init__(self, ledger: InventoryLedger, product_repo: ProductRepository) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self) -> list[InventoryLineDTO]:
        names = {p.id: p.name for p in self._product_repo.list_all()}
        records = sorted(self._ledger.list_all(), key=lambda r: r.product_id)
        return [
            InventoryLineDTO(
                product_id=record.product_id,
                product_name=names.get(record.product_id, "(deleted)"),
                on_hand=record.quantity_on_hand,
                low_stock_threshold=record.low_stock_threshold,
                status=record.stock_status.value,
            )
            for record in records
        ]

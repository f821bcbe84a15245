"""Abstract repository for InventoryRecord aggregate.

Repositories only load and store. Mutual exclusion around a
load-modify-save cycle is the job of ``InventoryLedger``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.inventory import InventoryRecord


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> InventoryRecord | None:
        """Return the inventory record for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryRecord]:
        """Return every inventory record."""

    @abstractmethod
    def save(self, record: InventoryRecord) -> None:
        """Persist a new or updated inventory record."""

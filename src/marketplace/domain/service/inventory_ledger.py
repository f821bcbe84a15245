"""Domain service: Inventory Ledger.

The ledger is the only code allowed to change ``quantity_on_hand``.
Every load-check-decrement-save cycle runs while holding a lock keyed by
product id, so two concurrent reservations of the last unit cannot both
succeed: the second one sees the decremented record and is rejected.

One ledger instance must be shared by everything in the process that
touches stock, otherwise the locks protect nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from marketplace.domain.exceptions import InsufficientStock
from marketplace.domain.model.inventory import InventoryRecord
from marketplace.domain.repository.inventory_repository import InventoryRepository
from marketplace.domain.service.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


@dataclass
class Reservation:
    """A compensable decrement of one product's stock."""

    product_id: str
    quantity: int
    released: bool = field(default=False, compare=False)


class InventoryLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo
        self._locks = KeyedLocks()

    def reserve(self, product_id: str, quantity: int) -> Reservation:
        """Atomically take *quantity* units of a product, all or nothing.

        A product without an inventory record has nothing on hand.
        Raises InsufficientStock naming what is actually available.
        """
        with self._locks.for_key(product_id):
            record = self._inventory_repo.get_by_product_id(product_id)
            if record is None:
                raise InsufficientStock(product_id=product_id, available=0, requested=quantity)
            record.reserve(quantity)
            self._inventory_repo.save(record)

        logger.debug("Reserved %d of %s (%d left)", quantity, product_id, record.quantity_on_hand)
        return Reservation(product_id=product_id, quantity=quantity)

    def release(self, product_id: str, quantity: int) -> None:
        """Put *quantity* units back. Used for compensation only.

        Does not require knowledge of the original reservation. If the
        record has disappeared since, there is nothing to restore into and
        the release is logged and skipped.
        """
        with self._locks.for_key(product_id):
            record = self._inventory_repo.get_by_product_id(product_id)
            if record is None:
                logger.warning(
                    "Cannot release %d of %s: no inventory record", quantity, product_id
                )
                return
            record.release(quantity)
            self._inventory_repo.save(record)

        logger.debug("Released %d of %s (%d on hand)", quantity, product_id, record.quantity_on_hand)

    def release_reservation(self, reservation: Reservation) -> None:
        """Release a reservation exactly once; later calls are no-ops."""
        if reservation.released:
            return
        self.release(reservation.product_id, reservation.quantity)
        reservation.released = True

    def restock(self, product_id: str, quantity: int) -> InventoryRecord:
        """Set the on-hand count for a product, creating the record if needed."""
        with self._locks.for_key(product_id):
            record = self._inventory_repo.get_by_product_id(product_id)
            if record is None:
                record = InventoryRecord(product_id=product_id, quantity_on_hand=quantity)
            else:
                record.set_quantity(quantity)
            self._inventory_repo.save(record)
        logger.info("Stock for %s set to %d", product_id, quantity)
        return record

    def available(self, product_id: str) -> int:
        record = self._inventory_repo.get_by_product_id(product_id)
        return record.quantity_on_hand if record is not None else 0

    def list_all(self) -> list[InventoryRecord]:
        return self._inventory_repo.list_all()

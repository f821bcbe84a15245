"""Unit tests for the InventoryLedger domain service."""

import threading

import pytest

from marketplace.domain.exceptions import InsufficientStock
from marketplace.domain.model.inventory import InventoryRecord
from marketplace.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeInventoryRepository


def _setup(**stock: int) -> tuple[InventoryLedger, FakeInventoryRepository]:
    repo = FakeInventoryRepository(
        [InventoryRecord(product_id=pid, quantity_on_hand=qty) for pid, qty in stock.items()]
    )
    return InventoryLedger(repo), repo


class TestReserve:

    def test_reserve_persists_decrement(self):
        ledger, repo = _setup(A=5)
        reservation = ledger.reserve("A", 2)
        assert repo.on_hand("A") == 3
        assert reservation.product_id == "A"
        assert reservation.quantity == 2

    def test_insufficient_stock_leaves_record_alone(self):
        ledger, repo = _setup(A=1)
        with pytest.raises(InsufficientStock) as info:
            ledger.reserve("A", 2)
        assert info.value.product_id == "A"
        assert info.value.available == 1
        assert repo.on_hand("A") == 1

    def test_missing_record_means_nothing_available(self):
        ledger, _ = _setup()
        with pytest.raises(InsufficientStock) as info:
            ledger.reserve("ghost", 1)
        assert info.value.available == 0


class TestRelease:

    def test_release_reservation_restores_stock(self):
        ledger, repo = _setup(A=5)
        reservation = ledger.reserve("A", 2)
        ledger.release_reservation(reservation)
        assert repo.on_hand("A") == 5
        assert reservation.released

    def test_release_reservation_is_idempotent(self):
        ledger, repo = _setup(A=5)
        reservation = ledger.reserve("A", 2)
        ledger.release_reservation(reservation)
        ledger.release_reservation(reservation)
        assert repo.on_hand("A") == 5

    def test_release_of_vanished_record_is_skipped(self, caplog):
        ledger, repo = _setup(A=5)
        reservation = ledger.reserve("A", 2)
        repo.delete("A")
        ledger.release_reservation(reservation)
        assert repo.get_by_product_id("A") is None
        assert "no inventory record" in caplog.text


class TestRestock:

    def test_restock_creates_missing_record(self):
        ledger, repo = _setup()
        ledger.restock("B", 7)
        assert repo.on_hand("B") == 7
        assert ledger.available("B") == 7

    def test_restock_overwrites_existing(self):
        ledger, repo = _setup(A=5)
        ledger.restock("A", 1)
        assert repo.on_hand("A") == 1


class TestConcurrency:

    def test_last_unit_is_sold_once(self):
        ledger, repo = _setup(A=1)
        workers = 8
        barrier = threading.Barrier(workers)
        wins: list[int] = []
        losses: list[int] = []

        def attempt(i: int) -> None:
            barrier.wait()
            try:
                ledger.reserve("A", 1)
                wins.append(i)
            except InsufficientStock:
                losses.append(i)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(wins) == 1
        assert len(losses) == workers - 1
        assert repo.on_hand("A") == 0

    def test_concurrent_reservations_never_oversell(self):
        ledger, repo = _setup(A=20)
        workers = 10
        barrier = threading.Barrier(workers)
        reserved: list[int] = []

        def attempt() -> None:
            barrier.wait()
            for _ in range(5):
                try:
                    ledger.reserve("A", 1)
                    reserved.append(1)
                except InsufficientStock:
                    pass

        threads = [threading.Thread(target=attempt) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(reserved) == 20
        assert repo.on_hand("A") == 0

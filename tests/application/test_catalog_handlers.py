"""Integration tests for catalog and stock administration use cases."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from marketplace.application.add_product import AddProductHandler
from marketplace.application.set_discount import SetDiscountHandler
from marketplace.application.set_inventory import SetInventoryHandler
from marketplace.application.show_inventory import ShowInventoryHandler
from marketplace.application.update_product import UpdateProductHandler
from marketplace.domain.exceptions import ProductNotFound, ValidationError
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeInventoryRepository, FakeProductRepository


class TestAddProduct:

    def test_ids_are_sequential(self):
        repo = FakeProductRepository()
        handler = AddProductHandler(repo)
        first = handler.handle("seller-1", "Widget", "15.00")
        second = handler.handle("seller-1", "Gadget", "25.00", description="Shiny")
        assert (first.id, second.id) == ("1", "2")
        assert repo.get_by_id("2").description == "Shiny"

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            AddProductHandler(FakeProductRepository()).handle("seller-1", "Widget", "0")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(FakeProductRepository()).handle("seller-1", " ", "1")


class TestUpdateAndDiscount:

    def _repo(self) -> FakeProductRepository:
        repo = FakeProductRepository()
        AddProductHandler(repo).handle("seller-1", "Widget", "20.00")
        return repo

    def test_update_price(self):
        repo = self._repo()
        UpdateProductHandler(repo).handle("1", "29.99")
        assert repo.get_by_id("1").price == Money.of("29.99")

    def test_update_unknown_product(self):
        with pytest.raises(ProductNotFound):
            UpdateProductHandler(FakeProductRepository()).handle("1", "5")

    def test_start_and_end_sale(self):
        repo = self._repo()
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        SetDiscountHandler(repo).handle("1", "10", valid_from=start)
        discount = repo.get_by_id("1").discount
        assert discount.percentage == Decimal("10")
        assert discount.valid_from == start

        SetDiscountHandler(repo).handle("1", "0")
        assert repo.get_by_id("1").discount is None

    def test_bad_percentage(self):
        with pytest.raises(ValidationError, match="Invalid discount percentage"):
            SetDiscountHandler(self._repo()).handle("1", "lots")


class TestInventoryAdmin:

    def test_set_and_show(self):
        products = FakeProductRepository()
        AddProductHandler(products).handle("seller-1", "Widget", "20.00")
        ledger = InventoryLedger(FakeInventoryRepository())

        SetInventoryHandler(ledger, products).handle("1", 4)
        lines = ShowInventoryHandler(ledger, products).handle()

        assert len(lines) == 1
        assert lines[0].product_name == "Widget"
        assert lines[0].on_hand == 4
        assert lines[0].status == "low_stock"

    def test_set_for_unknown_product(self):
        ledger = InventoryLedger(FakeInventoryRepository())
        with pytest.raises(ProductNotFound):
            SetInventoryHandler(ledger, FakeProductRepository()).handle("9", 4)

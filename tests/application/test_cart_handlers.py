"""Integration tests for the cart use cases."""

from decimal import Decimal

import pytest

from marketplace.application.add_to_cart import AddToCartHandler
from marketplace.application.apply_coupon import ApplyCouponHandler
from marketplace.application.remove_from_cart import RemoveFromCartHandler
from marketplace.application.save_for_later import MoveToCartHandler, SaveForLaterHandler
from marketplace.application.show_cart import ShowCartHandler
from marketplace.application.update_cart_item import UpdateCartItemHandler
from marketplace.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStock,
    ProductNotFound,
    ValidationError,
)
from marketplace.domain.model.inventory import InventoryRecord
from marketplace.domain.model.product import Discount, Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.inventory_ledger import InventoryLedger
from marketplace.domain.service.pricing_resolver import PricingResolver
from tests.fakes import FakeCartRepository, FakeInventoryRepository, FakeProductRepository


def _setup() -> tuple[FakeCartRepository, FakeProductRepository, InventoryLedger]:
    product_repo = FakeProductRepository([
        Product(id="1", seller_id="s1", name="Widget", price=Money.of("15.00")),
        Product(id="2", seller_id="s1", name="Gadget", price=Money.of("25.00")),
    ])
    ledger = InventoryLedger(FakeInventoryRepository([
        InventoryRecord(product_id="1", quantity_on_hand=5),
        InventoryRecord(product_id="2", quantity_on_hand=1),
    ]))
    return FakeCartRepository(), product_repo, ledger


class TestAddToCart:

    def test_add_creates_cart(self):
        carts, products, ledger = _setup()
        qty = AddToCartHandler(carts, products, ledger).handle("buyer-1", "1", 2)
        assert qty == 2
        assert carts.get_for_buyer("buyer-1").item_count == 2

    def test_add_merges(self):
        carts, products, ledger = _setup()
        handler = AddToCartHandler(carts, products, ledger)
        handler.handle("buyer-1", "1", 2)
        assert handler.handle("buyer-1", "1", 3) == 5

    def test_add_beyond_stock_rejected(self):
        carts, products, ledger = _setup()
        handler = AddToCartHandler(carts, products, ledger)
        handler.handle("buyer-1", "1", 4)
        with pytest.raises(InsufficientStock) as info:
            handler.handle("buyer-1", "1", 2)
        assert info.value.requested == 6
        assert carts.get_for_buyer("buyer-1").item_count == 4

    def test_add_does_not_reserve(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1", 3)
        assert ledger.available("1") == 5

    def test_unknown_product(self):
        carts, products, ledger = _setup()
        with pytest.raises(ProductNotFound):
            AddToCartHandler(carts, products, ledger).handle("buyer-1", "99")


class TestUpdateAndRemove:

    def test_update_quantity(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1")
        UpdateCartItemHandler(carts, ledger).handle("buyer-1", "1", 4)
        assert carts.get_for_buyer("buyer-1").find_line("1").quantity.value == 4

    def test_update_beyond_stock_rejected(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "2")
        with pytest.raises(InsufficientStock):
            UpdateCartItemHandler(carts, ledger).handle("buyer-1", "2", 2)

    def test_update_to_zero_removes(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1")
        UpdateCartItemHandler(carts, ledger).handle("buyer-1", "1", 0)
        assert carts.get_for_buyer("buyer-1").is_empty

    def test_remove(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1")
        RemoveFromCartHandler(carts).handle("buyer-1", "1")
        assert carts.get_for_buyer("buyer-1").is_empty

    def test_remove_missing(self):
        carts, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            RemoveFromCartHandler(carts).handle("buyer-1", "1")


class TestSaveForLater:

    def test_round_trip(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1", 3)
        SaveForLaterHandler(carts).handle("buyer-1", "1")
        assert carts.get_for_buyer("buyer-1").saved_for_later == {"1"}

        MoveToCartHandler(carts).handle("buyer-1", "1")
        cart = carts.get_for_buyer("buyer-1")
        assert cart.find_line("1").quantity.value == 1
        assert cart.saved_for_later == set()


class TestApplyCoupon:

    def test_apply(self):
        carts, _, _ = _setup()
        ApplyCouponHandler(carts).handle("buyer-1", "welcome", "5.00")
        cart = carts.get_for_buyer("buyer-1")
        assert cart.applied_coupons[0].code == "WELCOME"
        assert cart.coupon_discount == Money.of("5.00")

    def test_zero_discount_rejected(self):
        carts, _, _ = _setup()
        with pytest.raises(ValidationError, match="greater than zero"):
            ApplyCouponHandler(carts).handle("buyer-1", "NOTHING", "0")


class TestShowCart:

    def _show(self, carts, products):
        return ShowCartHandler(carts, products, PricingResolver(products)).handle("buyer-1")

    def test_empty_cart(self):
        carts, products, _ = _setup()
        dto = self._show(carts, products)
        assert dto.lines == []
        assert dto.total == "$10.00"

    def test_preview_uses_live_prices_and_policy(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "1", 2)
        products.get_by_id("1").start_sale(Discount(percentage=Decimal("50")))

        dto = self._show(carts, products)

        assert dto.lines[0].unit_price == "$7.50"
        assert dto.lines[0].line_total == "$15.00"
        assert dto.subtotal == "$15.00"
        assert dto.tax == "$1.28"
        assert dto.shipping == "$10.00"
        assert dto.total == "$26.28"
        assert dto.item_count == 2

    def test_coupon_in_preview(self):
        carts, products, ledger = _setup()
        AddToCartHandler(carts, products, ledger).handle("buyer-1", "2")
        ApplyCouponHandler(carts).handle("buyer-1", "save5", "5")
        dto = self._show(carts, products)
        assert dto.coupons == ["SAVE5"]
        assert dto.discount == "$5.00"
        assert dto.total == "$32.13"

    def test_deleted_product_left_out(self):
        carts, products, ledger = _setup()
        handler = AddToCartHandler(carts, products, ledger)
        handler.handle("buyer-1", "1")
        handler.handle("buyer-1", "2")
        products.delete("2")
        dto = self._show(carts, products)
        assert [l.product_id for l in dto.lines] == ["1"]

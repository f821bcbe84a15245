"""Concurrent checkouts competing for the same stock."""

import threading

from marketplace.application.checkout import CheckoutHandler
from marketplace.domain.exceptions import InsufficientStock, PaymentFailed
from marketplace.domain.model.cart import Cart
from marketplace.domain.model.inventory import InventoryRecord
from marketplace.domain.model.order import ShippingAddress
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.inventory_ledger import InventoryLedger
from marketplace.domain.service.pricing_resolver import PricingResolver
from tests.fakes import (
    FakeCartRepository,
    FakeInventoryRepository,
    FakeOrderRepository,
    FakePaymentGateway,
    FakeProductRepository,
)

ADDRESS = ShippingAddress(street="1 Main St", city="Springfield", state="IL", zip_code="62701")


def _setup(
    buyers: list[str], on_hand: int, gateway: FakePaymentGateway | None = None
) -> tuple[CheckoutHandler, FakeInventoryRepository, FakeOrderRepository]:
    carts = []
    for buyer in buyers:
        cart = Cart.empty(buyer)
        cart.add_item("A", 1)
        carts.append(cart)

    product_repo = FakeProductRepository(
        [Product(id="A", seller_id="seller-1", name="Last One", price=Money.of("12.00"))]
    )
    inventory_repo = FakeInventoryRepository([InventoryRecord(product_id="A", quantity_on_hand=on_hand)])
    order_repo = FakeOrderRepository()
    handler = CheckoutHandler(
        cart_repo=FakeCartRepository(carts),
        product_repo=product_repo,
        order_repo=order_repo,
        ledger=InventoryLedger(inventory_repo),
        pricing_resolver=PricingResolver(product_repo),
        payment_gateway=gateway or FakePaymentGateway(),
    )
    return handler, inventory_repo, order_repo


def _race(handler: CheckoutHandler, buyers: list[str]) -> tuple[list[str], list[Exception]]:
    barrier = threading.Barrier(len(buyers))
    placed: list[str] = []
    failed: list[Exception] = []

    def run(buyer: str) -> None:
        barrier.wait()
        try:
            placed.append(handler.handle(buyer, ["A"], "credit_card", ADDRESS).order_number)
        except (InsufficientStock, PaymentFailed) as exc:
            failed.append(exc)

    threads = [threading.Thread(target=run, args=(b,)) for b in buyers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return placed, failed


class TestConcurrentCheckout:

    def test_two_buyers_one_unit(self):
        buyers = ["alice", "bob"]
        handler, inventory_repo, order_repo = _setup(buyers, on_hand=1)

        placed, failed = _race(handler, buyers)

        assert len(placed) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], InsufficientStock)
        assert inventory_repo.on_hand("A") == 0
        assert order_repo.count() == 1

    def test_many_buyers_never_oversell(self):
        buyers = [f"buyer-{i}" for i in range(12)]
        handler, inventory_repo, order_repo = _setup(buyers, on_hand=5)

        placed, failed = _race(handler, buyers)

        assert len(placed) == 5
        assert len(failed) == 7
        assert inventory_repo.on_hand("A") == 0
        assert order_repo.count() == 5

    def test_declined_buyer_returns_unit_for_others(self):
        buyers = ["alice", "bob", "carol"]
        gateway = FakePaymentGateway(decline_reason="declined")
        handler, inventory_repo, order_repo = _setup(buyers, on_hand=3, gateway=gateway)

        placed, failed = _race(handler, buyers)

        assert placed == []
        assert all(isinstance(exc, PaymentFailed) for exc in failed)
        assert inventory_repo.on_hand("A") == 3
        assert order_repo.count() == 0

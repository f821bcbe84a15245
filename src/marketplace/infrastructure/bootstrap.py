"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Stateful collaborators (the inventory ledger with its locks, the per-order
locks, the payment gateway with its worker threads) are built once per
container and shared by every handler the container hands out.
"""

from __future__ import annotations

from decimal import Decimal
from functools import cached_property

from marketplace.domain.model.pricing import PricingPolicy
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.inventory_ledger import InventoryLedger
from marketplace.domain.service.keyed_locks import KeyedLocks
from marketplace.domain.service.payment_gateway import PaymentGateway, TimeoutPaymentGateway
from marketplace.domain.service.pricing_resolver import PricingResolver
from marketplace.infrastructure.config import Settings
from marketplace.infrastructure.payments import SimulatedPaymentGateway
from marketplace.infrastructure.persistence.json_cart_repository import JsonCartRepository
from marketplace.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from marketplace.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from marketplace.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


class Container:

    def __init__(self, settings: Settings) -> None:
        settings.validate()
        self.settings = settings

    # --- Repositories ---------------------------------------------------------

    @cached_property
    def product_repository(self) -> JsonProductRepository:
        return JsonProductRepository(self.settings.DATA_DIR / "products.json")

    @cached_property
    def inventory_repository(self) -> JsonInventoryRepository:
        return JsonInventoryRepository(self.settings.DATA_DIR / "inventory.json")

    @cached_property
    def cart_repository(self) -> JsonCartRepository:
        return JsonCartRepository(self.settings.DATA_DIR / "carts.json")

    @cached_property
    def order_repository(self) -> JsonOrderRepository:
        return JsonOrderRepository(self.settings.DATA_DIR / "orders.json")

    # --- Domain services ------------------------------------------------------

    @cached_property
    def inventory_ledger(self) -> InventoryLedger:
        return InventoryLedger(self.inventory_repository)

    @cached_property
    def order_locks(self) -> KeyedLocks:
        return KeyedLocks()

    @cached_property
    def pricing_resolver(self) -> PricingResolver:
        return PricingResolver(self.product_repository)

    @cached_property
    def pricing_policy(self) -> PricingPolicy:
        return PricingPolicy(
            tax_rate=self.settings.TAX_RATE,
            shipping_fee=Money(self.settings.SHIPPING_FEE.quantize(Decimal("0.01"))),
            free_shipping_threshold=Money(
                self.settings.FREE_SHIPPING_THRESHOLD.quantize(Decimal("0.01"))
            ),
        )

    @cached_property
    def payment_gateway(self) -> PaymentGateway:
        return TimeoutPaymentGateway(
            SimulatedPaymentGateway(success_rate=self.settings.PAYMENT_SUCCESS_RATE),
            timeout=self.settings.PAYMENT_TIMEOUT,
        )

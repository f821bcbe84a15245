"""Application service: Cancel Order use case.

Allowed while the order is pending, confirmed or processing. A paid
order is refunded against its original transaction, and its stock goes
back to the ledger. If the refund fails, nothing changes.

The whole cancel runs under the order's lock, so two cancels of the
same order cannot both refund or both restock.
"""

from __future__ import annotations

import logging

from marketplace.domain.exceptions import (
    EntityNotFoundError,
    InvalidStatusTransition,
    PaymentGatewayError,
    RefundFailed,
)
from marketplace.domain.model.order import OrderStatus
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger
from marketplace.domain.service.keyed_locks import KeyedLocks
from marketplace.domain.service.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        payment_gateway: PaymentGateway,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._payment_gateway = payment_gateway
        self._order_locks = order_locks or KeyedLocks()

    def handle(self, order_number: str, reason: str = "Cancelled by buyer") -> None:
        with self._order_locks.for_key(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise EntityNotFoundError(f"Order {order_number} not found")

            # Check first so a forbidden cancel never touches money or stock.
            if not order.can_transition_to(OrderStatus.CANCELLED):
                raise InvalidStatusTransition(
                    f"Cannot cancel order {order_number} in {order.status.value} status"
                )

            if order.is_paid:
                try:
                    self._payment_gateway.refund(order.payment.transaction_id, order.pricing.total)
                except PaymentGatewayError as exc:
                    logger.error("Refund for order %s failed: %s", order_number, exc)
                    raise RefundFailed(f"Could not refund order {order_number}") from exc
                order.record_refund(order.pricing.total)

            for product_id, quantity in order.quantities_by_product().items():
                self._ledger.release(product_id, quantity)

            order.cancel(reason)
            self._order_repo.save(order)
        logger.info("Order %s cancelled: %s", order_number, reason)

"""Application service: Return Order use case.

A delivered order can be returned; the buyer is refunded in full.
Returned goods are inspected before going back on sale, so stock is
not restored here.
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
from marketplace.domain.service.keyed_locks import KeyedLocks
from marketplace.domain.service.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class ReturnOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_gateway: PaymentGateway,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._payment_gateway = payment_gateway
        self._order_locks = order_locks or KeyedLocks()

    def handle(self, order_number: str, note: str = "Returned by buyer") -> None:
        with self._order_locks.for_key(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise EntityNotFoundError(f"Order {order_number} not found")

            if not order.can_transition_to(OrderStatus.RETURNED):
                raise InvalidStatusTransition(
                    f"Cannot return order {order_number} in {order.status.value} status"
                )

            if order.is_paid:
                try:
                    self._payment_gateway.refund(order.payment.transaction_id, order.pricing.total)
                except PaymentGatewayError as exc:
                    logger.error("Refund for order %s failed: %s", order_number, exc)
                    raise RefundFailed(f"Could not refund order {order_number}") from exc
                order.record_refund(order.pricing.total)

            order.mark_returned(note)
            self._order_repo.save(order)
        logger.info("Order %s returned", order_number)

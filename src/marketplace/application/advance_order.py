"""Application service: Advance Order use case.

Moves an order forward through fulfilment (confirmed -> processing ->
shipped -> delivered). Cancellation and returns move money and stock,
so they have their own handlers.
"""

from __future__ import annotations

import logging

from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.order import OrderStatus
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.service.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)

FORWARD_STATUSES = (
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)


class AdvanceOrderHandler:

    def __init__(self, order_repo: OrderRepository, order_locks: KeyedLocks | None = None) -> None:
        self._order_repo = order_repo
        self._order_locks = order_locks or KeyedLocks()

    def handle(self, order_number: str, status: str, note: str = "") -> None:
        try:
            target = OrderStatus(status.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown order status: '{status}'")
        if target not in FORWARD_STATUSES:
            raise ValidationError(
                f"Use the cancel or return command to move an order to {target.value}"
            )

        with self._order_locks.for_key(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise EntityNotFoundError(f"Order {order_number} not found")

            previous = order.status
            order.transition_to(target, note=note)
            self._order_repo.save(order)
        logger.info("Order %s: %s -> %s", order_number, previous.value, target.value)

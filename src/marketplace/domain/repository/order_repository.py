"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def list_for_buyer(self, buyer_id: str) -> list[Order]:
        """Return a buyer's orders, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new order or a status change to an existing one."""

    @abstractmethod
    def discard(self, order_number: str) -> None:
        """Remove an order that was never handed back to a caller.

        Only checkout compensation uses this. Orders that reached a
        caller are cancelled, never discarded.
        """

    def exists(self, order_number: str) -> bool:
        return self.get_by_number(order_number) is not None

"""Application service: List Orders use case (query)."""

from __future__ import annotations

from marketplace.application.dto import OrderDTO, to_order_dto
from marketplace.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, buyer_id: str) -> list[OrderDTO]:
        return [to_order_dto(o) for o in self._order_repo.list_for_buyer(buyer_id)]

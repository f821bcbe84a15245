"""Application service: Set Discount use case (start or end a sale)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from marketplace.domain.exceptions import ProductNotFound, ValidationError
from marketplace.domain.model.product import Discount
from marketplace.domain.repository.product_repository import ProductRepository


class SetDiscountHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        percentage: str,
        valid_from: datetime | None = None,
        valid_to: datetime | None = None,
    ) -> None:
        """Put a product on sale. A percentage of zero ends the sale."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        try:
            pct = Decimal(str(percentage))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid discount percentage: {percentage!r}") from exc

        if pct == 0:
            product.end_sale()
        else:
            product.start_sale(Discount(percentage=pct, valid_from=valid_from, valid_to=valid_to))
        self._product_repo.save(product)

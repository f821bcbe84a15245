"""Application service: Add Product use case."""

from __future__ import annotations

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        seller_id: str,
        name: str,
        price: str,
        description: str = "",
        image: str = "",
    ) -> Product:
        """Add a new product to a seller's catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not seller_id or not seller_id.strip():
            raise ValidationError("Seller ID is required")

        money = Money.of(price)
        if money.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(
            id=next_id,
            seller_id=seller_id.strip(),
            name=name.strip(),
            price=money,
            description=description,
            image=image,
        )
        self._product_repo.save(product)
        return product

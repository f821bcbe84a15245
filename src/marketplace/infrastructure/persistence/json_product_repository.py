"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from marketplace.domain.model.product import Discount, Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        with self._lock:
            products = self._load()
            products[product.id] = product
            self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {item["id"]: self._to_domain(item) for item in raw}

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [self._to_raw(p) for p in products.values()]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    @staticmethod
    def _to_raw(product: Product) -> dict:
        discount = None
        if product.discount is not None:
            discount = {
                "percentage": str(product.discount.percentage),
                "valid_from": _iso(product.discount.valid_from),
                "valid_to": _iso(product.discount.valid_to),
            }
        return {
            "id": product.id,
            "seller_id": product.seller_id,
            "name": product.name,
            "description": product.description,
            "image": product.image,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "discount": discount,
        }

    @staticmethod
    def _to_domain(item: dict) -> Product:
        discount = None
        if item.get("discount"):
            d = item["discount"]
            discount = Discount(
                percentage=Decimal(d["percentage"]),
                valid_from=_parse(d.get("valid_from")),
                valid_to=_parse(d.get("valid_to")),
            )
        return Product(
            id=item["id"],
            seller_id=item["seller_id"],
            name=item["name"],
            description=item.get("description", ""),
            image=item.get("image", ""),
            price=Money(Decimal(item["price"]), item.get("currency", "USD")),
            discount=discount,
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None

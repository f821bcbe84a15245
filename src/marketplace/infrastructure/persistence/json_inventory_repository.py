"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from marketplace.domain.model.inventory import DEFAULT_LOW_STOCK_THRESHOLD, InventoryRecord
from marketplace.domain.repository.inventory_repository import InventoryRepository


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> InventoryRecord | None:
        for raw in self._load_raw():
            if raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryRecord]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, record: InventoryRecord) -> None:
        # Whole-file rewrite: serialise writers even for different products.
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["product_id"] == record.product_id:
                    records[i] = self._to_raw(record)
                    break
            else:
                records.append(self._to_raw(record))
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: InventoryRecord) -> dict:
        return {
            "product_id": record.product_id,
            "quantity_on_hand": record.quantity_on_hand,
            "low_stock_threshold": record.low_stock_threshold,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryRecord:
        return InventoryRecord(
            product_id=raw["product_id"],
            quantity_on_hand=raw["quantity_on_hand"],
            low_stock_threshold=raw.get("low_stock_threshold", DEFAULT_LOW_STOCK_THRESHOLD),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")

"""JSON-file-backed implementation of SaleRepository.

Sales are stored as the same documents the Sales Service receives.
"""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order
from storefront.domain.repository.sale_repository import SaleRepository


class JsonSaleRepository(SaleRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- SaleRepository interface ---------------------------------------------

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._load_raw():
            if raw["numeroOrden"] == order_number:
                return Order.from_payload(raw)
        return None

    def list_all(self) -> list[Order]:
        return [Order.from_payload(raw) for raw in self._load_raw()]

    def add(self, order: Order) -> None:
        sales = self._load_raw()
        if any(raw["numeroOrden"] == order.order_number for raw in sales):
            raise ValidationError(f"Order number {order.order_number} already exists")
        sales.append(order.to_payload())
        self._persist_raw(sales)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, sales: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(sales, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")

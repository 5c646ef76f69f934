"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {item["_id"]: to_domain(item) for item in raw}

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [to_raw(p) for p in products.values()]
        self._file_path.write_text(
            json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


# Same document shape the catalog API serves, so both adapters share it.


def to_raw(product: Product) -> dict:
    return {
        "_id": product.id,
        "name": product.name,
        "price": product.price.amount,
        "stock": product.stock,
        "image": product.image,
        "category": product.category,
        "featured": product.featured,
    }


def to_domain(raw: dict) -> Product:
    return Product(
        id=str(raw.get("_id") or raw["id"]),
        name=raw["name"],
        price=Money.of(raw["price"]),
        stock=int(raw.get("stock", 0)),
        image=raw.get("image") or "",
        category=raw.get("category") or "",
        featured=bool(raw.get("featured", False)),
    )

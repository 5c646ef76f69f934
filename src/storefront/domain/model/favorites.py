"""Favorites — a saved-for-later list with no quantities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.value_objects import Money

logger = logging.getLogger(__name__)


@dataclass
class FavoriteItem:

    id: str
    name: str
    price: Money
    image_url: str
    category: str
    added_at: int

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "nombre": self.name,
            "precio": self.price.amount,
            "imagen": self.image_url,
            "categoria": self.category,
            "agregadoEl": self.added_at,
        }

    @staticmethod
    def from_record(raw: Mapping[str, Any]) -> FavoriteItem:
        if not raw.get("id"):
            raise ValidationError("Stored favorite has no id")
        return FavoriteItem(
            id=str(raw["id"]),
            name=raw.get("nombre", ""),
            price=Money.of(raw.get("precio", 0)),
            image_url=raw.get("imagen") or "",
            category=raw.get("categoria") or "",
            added_at=int(raw.get("agregadoEl", 0)),
        )

    def as_product(self) -> ProductRef:
        return ProductRef(id=self.id, name=self.name, price=self.price, image=self.image_url)


@dataclass
class Favorites:
    """Ordered set of favorite products, unique by id."""

    items: list[FavoriteItem] = field(default_factory=list)

    @staticmethod
    def from_records(records: list[Mapping[str, Any]]) -> Favorites:
        favorites = Favorites()
        for raw in records:
            try:
                item = FavoriteItem.from_record(raw)
            except (ValidationError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("[FAVORITES] Skipping unreadable stored item %r: %s", raw, exc)
                continue
            if not favorites.contains(item.id):
                favorites.items.append(item)
        return favorites

    def to_records(self) -> list[dict]:
        return [item.to_record() for item in self.items]

    def add(self, product: ProductRef, now: int, category: str = "") -> bool:
        """Add *product*; returns False when it is already a favorite."""
        if not product.id:
            raise ValidationError("Product id is required")
        if self.contains(product.id):
            return False
        self.items.append(
            FavoriteItem(
                id=product.id,
                name=product.name,
                price=product.price,
                image_url=product.image,
                category=category,
                added_at=now,
            )
        )
        return True

    def remove(self, product_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.id != product_id]
        return len(self.items) < before

    def contains(self, product_id: str) -> bool:
        return any(item.id == product_id for item in self.items)

    def find(self, product_id: str) -> FavoriteItem | None:
        for item in self.items:
            if item.id == product_id:
                return item
        return None

    def clear(self) -> None:
        self.items = []

    def snapshot(self) -> list[FavoriteItem]:
        return [replace(item) for item in self.items]

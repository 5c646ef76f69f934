"""Application service: Favorites list.

Same persistence design as the cart (see CartEngine), with a longer
time-to-live and no quantities.
"""

from __future__ import annotations

import logging

from storefront.application.cart_engine import CartEngine
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import ProductRef
from storefront.domain.model.favorites import FavoriteItem, Favorites
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service.clock import Clock, now_ms

logger = logging.getLogger(__name__)


class FavoritesList:

    def __init__(self, repository: CartRepository, clock: Clock = now_ms) -> None:
        self._repository = repository
        self._clock = clock
        self._favorites = Favorites.from_records(repository.load())

    def add(self, product: ProductRef, category: str = "") -> bool:
        if not product.id:
            logger.error("[FAVORITES] Refusing product without id")
            return False
        if not self._favorites.add(product, now=self._clock(), category=category):
            logger.info("[FAVORITES] %s is already a favorite", product.name)
            return False
        self._save()
        return True

    def remove(self, product_id: str) -> bool:
        if not self._favorites.remove(product_id):
            return False
        self._save()
        return True

    def toggle(self, product: ProductRef, category: str = "") -> bool:
        """Add or remove; returns True when the product is now a favorite."""
        if self._favorites.contains(product.id):
            self.remove(product.id)
            return False
        return self.add(product, category)

    def contains(self, product_id: str) -> bool:
        return self._favorites.contains(product_id)

    def items(self) -> list[FavoriteItem]:
        return self._favorites.snapshot()

    def count(self) -> int:
        return len(self._favorites.items)

    def clear(self) -> None:
        self._favorites.clear()
        self._repository.clear()

    def move_to_cart(self, product_id: str, engine: CartEngine) -> bool:
        """Add a favorite to the cart; the favorite itself is kept."""
        item = self._favorites.find(product_id)
        if item is None:
            raise EntityNotFoundError(f"Product '{product_id}' is not a favorite")
        return engine.add_product(item.as_product())

    def _save(self) -> None:
        self._repository.save(self._favorites.to_records())

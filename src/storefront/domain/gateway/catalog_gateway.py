"""Port to the Catalog Service (product listing and lookup)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class CatalogGateway(ABC):

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Return a product by ID, or None if unknown."""

    @abstractmethod
    def list_products(self) -> list[Product]:
        """Return the whole catalog."""

    @abstractmethod
    def recommended(self, limit: int = 4) -> list[Product]:
        """Return up to *limit* featured products."""

"""CatalogGateway backed by the local product repository."""

from __future__ import annotations

from storefront.domain.gateway.catalog_gateway import CatalogGateway
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository


class LocalCatalogGateway(CatalogGateway):

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def get_product(self, product_id: str) -> Product | None:
        return self._product_repo.get_by_id(product_id)

    def list_products(self) -> list[Product]:
        return self._product_repo.list_all()

    def recommended(self, limit: int = 4) -> list[Product]:
        featured = [p for p in self._product_repo.list_all() if p.featured and p.stock > 0]
        return featured[:limit]

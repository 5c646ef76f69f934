"""HTTP client for the remote Catalog Service."""

import logging
from typing import Any, Dict, List, Optional

import requests

from storefront.domain.exceptions import CatalogServiceError, ValidationError
from storefront.domain.gateway.catalog_gateway import CatalogGateway
from storefront.domain.model.product import Product
from storefront.infrastructure.persistence.json_product_repository import to_domain

logger = logging.getLogger(__name__)


class HttpCatalogClient(CatalogGateway):
    """Reads ``/api/products`` on the storefront backend."""

    PRODUCTS_PATH = "/api/products"

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_product(self, product_id: str) -> Optional[Product]:
        response = self._get(f"{self.PRODUCTS_PATH}/{product_id}")
        if response.status_code == 404:
            return None
        body = self._json(response)
        return self._product(body.get("data", body))

    def list_products(self) -> List[Product]:
        response = self._get(self.PRODUCTS_PATH, params={"limit": 100})
        return [self._product(raw) for raw in self._items(self._json(response))]

    def recommended(self, limit: int = 4) -> List[Product]:
        """Featured products; an unavailable catalog yields an empty list."""
        try:
            response = self._get(
                self.PRODUCTS_PATH, params={"limit": limit, "featured": "true"}
            )
            return [self._product(raw) for raw in self._items(self._json(response))][:limit]
        except CatalogServiceError as e:
            logger.warning(f"[CATALOG] Recommended products unavailable: {e}")
            return []

    # --- Helpers ---------------------------------------------------------------

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            return self.session.get(
                f"{self.base_url}{path}", params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"[CATALOG] Request failed: {e}")
            raise CatalogServiceError(f"Catalog Service unreachable: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            raise CatalogServiceError(f"Catalog Service error {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise CatalogServiceError(f"Catalog Service sent invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise CatalogServiceError("Catalog Service sent an unexpected response")
        return body

    @staticmethod
    def _items(body: Dict[str, Any]) -> List[Dict[str, Any]]:
        items = body.get("data") or body.get("products") or []
        if not isinstance(items, list):
            raise CatalogServiceError("Catalog Service sent an unexpected product list")
        return items

    @staticmethod
    def _product(raw: Any) -> Product:
        try:
            return to_domain(raw)
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as e:
            raise CatalogServiceError(f"Catalog Service sent an unreadable product: {e}") from e

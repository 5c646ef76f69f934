"""HTTP client for the remote Sales Service."""

import logging
from typing import Any, Dict, Optional

import requests

from storefront.domain.exceptions import SalesServiceError, ValidationError
from storefront.domain.gateway.sales_gateway import SalesGateway
from storefront.domain.model.order import Order

logger = logging.getLogger(__name__)


class HttpSalesGateway(SalesGateway):
    """Talks to ``/api/sales`` on the storefront backend."""

    SALES_PATH = "/api/sales"

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root, e.g. http://localhost:4000
            session: requests session to reuse (a new one if None)
            timeout: Seconds to wait for each request
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def create_order(self, order: Order) -> Dict[str, Any]:
        """
        Submit a sale.

        Returns:
            The stored sale document (the response's ``data`` field)

        Raises:
            ValidationError: The backend rejected the sale (4xx)
            SalesServiceError: Network failure or server error (5xx)
        """
        url = f"{self.base_url}{self.SALES_PATH}"
        logger.info(f"[SALES] Submitting order {order.order_number}")

        try:
            response = self.session.post(url, json=order.to_payload(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[SALES] Request failed: {e}")
            raise SalesServiceError(f"Sales Service unreachable: {e}") from e

        data = self._parse(response)
        logger.info(f"[SALES] Order {order.order_number} stored")
        return data.get("data", data)

    def get_order(self, order_number: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a stored sale by order number.

        Returns:
            The sale document, or None if the backend does not know it
        """
        url = f"{self.base_url}{self.SALES_PATH}/orden/{order_number}"

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[SALES] Request failed: {e}")
            raise SalesServiceError(f"Sales Service unreachable: {e}") from e

        if response.status_code == 404:
            return None
        data = self._parse(response)
        return data.get("data", data)

    @staticmethod
    def _parse(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if response.status_code >= 400:
                body = {}
            else:
                logger.error(f"[SALES] Unexpected response body ({response.status_code})")
                raise SalesServiceError(
                    f"Sales Service sent an unexpected response ({response.status_code})"
                )

        if response.status_code >= 500:
            message = body.get("message") or response.text or "server error"
            logger.error(f"[SALES] Server error {response.status_code}: {message}")
            raise SalesServiceError(f"Sales Service error {response.status_code}: {message}")
        if response.status_code >= 400:
            message = body.get("message") or f"request rejected ({response.status_code})"
            logger.warning(f"[SALES] Rejected: {message}")
            raise ValidationError(message)
        return body

"""Port to the Sales Service, the external collaborator that accepts orders.

The service checks and decrements stock one line at a time.  A rejection
of one line says nothing about lines already decremented; callers get no
rollback and must not assume one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class SalesGateway(ABC):

    @abstractmethod
    def create_order(self, order: Order) -> dict:
        """Submit *order*; return the stored sale document.

        Raises:
            InsufficientStockError / ValidationError: the service rejected it.
            SalesServiceError: the service could not be reached or failed.
        """

    @abstractmethod
    def get_order(self, order_number: str) -> dict | None:
        """Return a stored sale document, or None if unknown."""

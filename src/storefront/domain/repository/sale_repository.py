"""Abstract repository for accepted sales."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class SaleRepository(ABC):

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return a sale by its order number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every stored sale, oldest first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new sale.

        Raises ValidationError if the order number is already taken.
        """

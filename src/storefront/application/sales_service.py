"""Application service: Sales Service (local backend).

Accepts sale documents the way the storefront backend does:

1. Check the required top-level fields.
2. Check each line on its own: the product exists and has the stock.
3. Store the sale (order numbers are unique).
4. Decrement stock line by line, saving each product separately.

Step 4 is not atomic.  If saving one product fails, products already
saved stay decremented; nothing rolls them back.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from storefront.application.dto import SalesSummary
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.sale_repository import SaleRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("numeroOrden", "cliente", "productos", "totales", "pago")


class SalesService:

    def __init__(
        self,
        product_repo: ProductRepository,
        sale_repo: SaleRepository,
    ) -> None:
        self._product_repo = product_repo
        self._sale_repo = sale_repo

    def create_sale(self, payload: Mapping[str, Any]) -> Order:
        missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
        if missing:
            raise ValidationError(f"Missing required sale fields: {', '.join(missing)}")

        for line in payload["productos"]:
            product = self._product_repo.get_by_id(str(line["id"]))
            if product is None:
                raise EntityNotFoundError(f"Product with ID {line['id']} not found")
            quantity = int(line["cantidad"])
            if not product.has_stock(quantity):
                raise InsufficientStockError(product.name, quantity, product.stock)

        order = Order.from_payload(payload)
        if self._sale_repo.get_by_order_number(order.order_number) is not None:
            raise ValidationError(f"Order number {order.order_number} already exists")
        self._sale_repo.add(order)

        for line in order.lines:
            product = self._product_repo.get_by_id(line.product_id)
            product.decrement_stock(line.quantity)
            self._product_repo.save(product)

        logger.info("[SALES] Sale %s stored", order.order_number)
        return order

    def get_sale(self, order_number: str) -> Order:
        order = self._sale_repo.get_by_order_number(order_number)
        if order is None:
            raise EntityNotFoundError(f"Sale {order_number} not found")
        return order

    def summary(self) -> SalesSummary:
        """Basic counts; revenue counts completed sales only."""
        sales = self._sale_repo.list_all()
        completed = [s for s in sales if s.status == OrderStatus.COMPLETED]
        revenue = sum(s.totals.total.amount for s in completed)
        return SalesSummary(
            count=len(sales),
            completed=len(completed),
            revenue=revenue,
            average_ticket=revenue // len(completed) if completed else 0,
        )

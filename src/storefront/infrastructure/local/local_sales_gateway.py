"""SalesGateway backed by the local SalesService (JSON files)."""

from __future__ import annotations

from storefront.application.sales_service import SalesService
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.gateway.sales_gateway import SalesGateway
from storefront.domain.model.order import Order


class LocalSalesGateway(SalesGateway):

    def __init__(self, service: SalesService) -> None:
        self._service = service

    def create_order(self, order: Order) -> dict:
        return self._service.create_sale(order.to_payload()).to_payload()

    def get_order(self, order_number: str) -> dict | None:
        try:
            return self._service.get_sale(order_number).to_payload()
        except EntityNotFoundError:
            return None

"""Tests for the local Sales Service and its gateway adapter."""

from datetime import datetime, timezone

import pytest

from storefront.application.sales_service import SalesService
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.cart import LineItem
from storefront.domain.model.order import Address, Customer, Order
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.local.local_sales_gateway import LocalSalesGateway
from tests.fakes import FakeProductRepository, FakeSaleRepository

CUSTOMER = Customer("Ana", "García", "ana@example.com", "1155551234", Address("Calle 1 123", "CABA", "BA", "1043"))


def _order(*lines: tuple[str, int], number: str = "MMDR-20250101-AAAA0001", paid: bool = True) -> Order:
    items = [LineItem(pid, f"Product {pid}", Money(1000), "", qty, 0) for pid, qty in lines]
    order = Order.create(
        number, CUSTOMER, items, "paypal", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)
    )
    if paid:
        order.mark_paid("txn_1")
    return order


def _setup(
    products: list[Product] | None = None,
) -> tuple[SalesService, FakeProductRepository, FakeSaleRepository]:
    if products is None:
        products = [
            Product(id="1", name="Mate", price=Money(1000), stock=5),
            Product(id="2", name="Bombilla", price=Money(1000), stock=1),
        ]
    product_repo = FakeProductRepository(products)
    sale_repo = FakeSaleRepository()
    return SalesService(product_repo, sale_repo), product_repo, sale_repo


class TestCreateSale:

    def test_stores_sale_and_decrements_stock(self):
        service, product_repo, sale_repo = _setup()
        service.create_sale(_order(("1", 2), ("2", 1)).to_payload())
        assert product_repo.get_by_id("1").stock == 3
        assert product_repo.get_by_id("2").stock == 0
        assert sale_repo.get_by_order_number("MMDR-20250101-AAAA0001") is not None

    def test_missing_fields_rejected(self):
        service, _, _ = _setup()
        payload = _order(("1", 1)).to_payload()
        del payload["pago"]
        with pytest.raises(ValidationError, match="Missing required sale fields: pago"):
            service.create_sale(payload)

    def test_unknown_product_rejected(self):
        service, _, sale_repo = _setup()
        with pytest.raises(EntityNotFoundError, match="Product with ID 9 not found"):
            service.create_sale(_order(("9", 1)).to_payload())
        assert sale_repo.list_all() == []

    def test_insufficient_stock_rejected_before_any_change(self):
        service, product_repo, sale_repo = _setup()
        with pytest.raises(InsufficientStockError, match="Bombilla"):
            service.create_sale(_order(("1", 2), ("2", 3)).to_payload())
        assert product_repo.get_by_id("1").stock == 5
        assert sale_repo.list_all() == []

    def test_duplicate_order_number_rejected(self):
        service, product_repo, _ = _setup()
        service.create_sale(_order(("1", 1)).to_payload())
        with pytest.raises(ValidationError, match="already exists"):
            service.create_sale(_order(("1", 1)).to_payload())
        assert product_repo.get_by_id("1").stock == 4

    def test_stock_decrements_are_not_rolled_back(self):
        service, product_repo, sale_repo = _setup()
        product_repo.fail_save_for = {"2"}
        with pytest.raises(OSError):
            service.create_sale(_order(("1", 2), ("2", 1)).to_payload())
        # The sale and the first product's decrement stay in place.
        assert product_repo.get_by_id("1").stock == 3
        assert len(sale_repo.list_all()) == 1


class TestQueries:

    def test_get_sale(self):
        service, _, _ = _setup()
        service.create_sale(_order(("1", 1)).to_payload())
        assert service.get_sale("MMDR-20250101-AAAA0001").item_count == 1

    def test_get_unknown_sale(self):
        service, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            service.get_sale("nope")

    def test_summary_counts_completed_revenue(self):
        service, _, _ = _setup()
        service.create_sale(_order(("1", 1), number="N-1").to_payload())
        service.create_sale(_order(("1", 2), number="N-2").to_payload())
        service.create_sale(_order(("1", 1), number="N-3", paid=False).to_payload())

        summary = service.summary()
        assert summary.count == 3
        assert summary.completed == 2
        # 1000 + 5000 shipping, 2000 + 5000 shipping
        assert summary.revenue == 13000
        assert summary.average_ticket == 6500

    def test_summary_without_sales(self):
        service, _, _ = _setup()
        summary = service.summary()
        assert (summary.count, summary.revenue, summary.average_ticket) == (0, 0, 0)


class TestLocalSalesGateway:

    def test_create_and_get(self):
        service, _, _ = _setup()
        gateway = LocalSalesGateway(service)
        stored = gateway.create_order(_order(("1", 1)))
        assert stored["numeroOrden"] == "MMDR-20250101-AAAA0001"
        assert gateway.get_order("MMDR-20250101-AAAA0001")["estado"] == "completado"

    def test_get_unknown_is_none(self):
        service, _, _ = _setup()
        assert LocalSalesGateway(service).get_order("nope") is None

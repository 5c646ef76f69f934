"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from storefront.application.cart_engine import CartEngine
from storefront.application.checkout import CheckoutOrchestrator
from storefront.application.favorites import FavoritesList
from storefront.application.outbox import OrderOutbox
from storefront.application.sales_service import SalesService
from storefront.config import Config
from storefront.domain.gateway.catalog_gateway import CatalogGateway
from storefront.domain.gateway.sales_gateway import SalesGateway
from storefront.domain.model.value_objects import Money
from storefront.domain.service.clock import DAY_MS, HOUR_MS
from storefront.domain.service.payment_simulator import PaymentSimulator
from storefront.infrastructure.http.catalog_client import HttpCatalogClient
from storefront.infrastructure.http.sales_client import HttpSalesGateway
from storefront.infrastructure.local.local_catalog_gateway import LocalCatalogGateway
from storefront.infrastructure.local.local_sales_gateway import LocalSalesGateway
from storefront.infrastructure.persistence.json_file_storage import JsonFileStorage
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_sale_repository import (
    JsonSaleRepository,
)
from storefront.infrastructure.persistence.storage_cart_repository import (
    CART_EXPIRES_KEY,
    CART_ITEMS_KEY,
    FAVORITES_EXPIRES_KEY,
    FAVORITES_ITEMS_KEY,
    StorageCartRepository,
)


def _data_dir(config: type[Config]) -> Path:
    return Path(config.DATA_DIR)


def storage(config: type[Config] = Config) -> JsonFileStorage:
    return JsonFileStorage(_data_dir(config) / "storage.json")


def product_repository(config: type[Config] = Config) -> JsonProductRepository:
    return JsonProductRepository(_data_dir(config) / "products.json")


def sale_repository(config: type[Config] = Config) -> JsonSaleRepository:
    return JsonSaleRepository(_data_dir(config) / "sales.json")


def sales_service(config: type[Config] = Config) -> SalesService:
    return SalesService(product_repository(config), sale_repository(config))


def sales_gateway(config: type[Config] = Config) -> SalesGateway:
    if config.SALES_BACKEND == "http":
        return HttpSalesGateway(config.API_BASE_URL, timeout=config.HTTP_TIMEOUT)
    return LocalSalesGateway(sales_service(config))


def catalog_gateway(config: type[Config] = Config) -> CatalogGateway:
    if config.SALES_BACKEND == "http":
        return HttpCatalogClient(config.API_BASE_URL, timeout=config.HTTP_TIMEOUT)
    return LocalCatalogGateway(product_repository(config))


def cart_engine(config: type[Config] = Config) -> CartEngine:
    repository = StorageCartRepository(
        storage(config),
        items_key=CART_ITEMS_KEY,
        expires_key=CART_EXPIRES_KEY,
        ttl_ms=config.CART_TTL_HOURS * HOUR_MS,
    )
    return CartEngine(repository, clamp_on_add=config.CART_CLAMP_ON_ADD)


def favorites_list(config: type[Config] = Config) -> FavoritesList:
    repository = StorageCartRepository(
        storage(config),
        items_key=FAVORITES_ITEMS_KEY,
        expires_key=FAVORITES_EXPIRES_KEY,
        ttl_ms=config.FAVORITES_TTL_DAYS * DAY_MS,
    )
    return FavoritesList(repository)


def order_outbox(config: type[Config] = Config) -> OrderOutbox:
    return OrderOutbox(storage(config))


def checkout_orchestrator(
    engine: CartEngine, config: type[Config] = Config
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(
        storage=storage(config),
        sales_gateway=sales_gateway(config),
        outbox=order_outbox(config),
        payment_simulator=PaymentSimulator(delay_seconds=config.PAYMENT_SIMULATION_DELAY),
        cart_engine=engine,
        free_shipping_threshold=Money(config.FREE_SHIPPING_THRESHOLD),
        shipping_fee=Money(config.SHIPPING_FEE),
    )


def shipping_rule(config: type[Config] = Config) -> tuple[Money, Money]:
    return Money(config.FREE_SHIPPING_THRESHOLD), Money(config.SHIPPING_FEE)

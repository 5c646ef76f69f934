"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.application.catalog import (
    AddProductHandler,
    SetStockHandler,
    UpdatePriceHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Product
from storefront.infrastructure.bootstrap import catalog_gateway, product_repository


def _print_products(products: list[Product]) -> None:
    click.echo(f"{'ID':<8} {'Name':<24} {'Price':>12} {'Stock':>7}")
    click.echo("-" * 54)
    for p in products:
        click.echo(f"{p.id:<8} {p.name:<24} {str(p.price):>12} {p.stock:>7}")


@click.command("list")
@click.pass_obj
def product_list(obj: dict) -> None:
    """List all products in the catalog."""
    try:
        products = catalog_gateway(obj["config"]).list_products()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return
    _print_products(products)


@click.command("recommended")
@click.option("--limit", default=4, show_default=True, type=int)
@click.pass_obj
def product_recommended(obj: dict, limit: int) -> None:
    """List featured products."""
    products = catalog_gateway(obj["config"]).recommended(limit)
    if not products:
        click.echo("No recommendations right now.")
        return
    _print_products(products)


@click.command("add")
@click.option("--id", "product_id", default=None, help="Product ID (auto-assigned if omitted).")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in whole pesos (e.g. 15000).")
@click.option("--stock", default=0, type=int, help="Units in stock.")
@click.option("--image", default="", help="Image URL.")
@click.option("--category", default="", help="Category.")
@click.option("--featured", is_flag=True, default=False, help="Show in recommendations.")
@click.pass_obj
def product_add(
    obj: dict,
    product_id: str | None,
    name: str,
    price: str,
    stock: int,
    image: str,
    category: str,
    featured: bool,
) -> None:
    """Add a new product to the local catalog."""
    handler = AddProductHandler(product_repo=product_repository(obj["config"]))

    try:
        product = handler.handle(
            name=name,
            price=price,
            stock=stock,
            product_id=product_id,
            image=image,
            category=category,
            featured=featured,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@click.pass_obj
def product_stock(obj: dict, product_id: str, quantity: int) -> None:
    """Set the stock level of a product in the local catalog."""
    handler = SetStockHandler(product_repo=product_repository(obj["config"]))

    try:
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for #{product_id} set to {quantity}")


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price in whole pesos.")
@click.pass_obj
def product_price(obj: dict, product_id: str, price: str) -> None:
    """Update a product's price in the local catalog."""
    handler = UpdatePriceHandler(product_repo=product_repository(obj["config"]))

    try:
        product = handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} price updated to {product.price}")

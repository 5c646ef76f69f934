"""CLI commands for the favorites list."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import catalog_gateway, favorites_list
from storefront.infrastructure.cli.cart_commands import open_cart


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def favorites_add(obj: dict, product_id: str) -> None:
    """Save a product to favorites."""
    config = obj["config"]
    try:
        product = catalog_gateway(config).get_product(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    if favorites_list(config).add(product.as_ref(), category=product.category):
        click.echo(f"{product.name} added to favorites")
    else:
        click.echo(f"{product.name} is already a favorite")


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def favorites_remove(obj: dict, product_id: str) -> None:
    """Remove a product from favorites."""
    if not favorites_list(obj["config"]).remove(product_id):
        raise click.ClickException(f"Product '{product_id}' is not a favorite")


@click.command("list")
@click.pass_obj
def favorites_show(obj: dict) -> None:
    """List favorites."""
    items = favorites_list(obj["config"]).items()
    if not items:
        click.echo("No favorites yet.")
        return
    for item in items:
        click.echo(f"{item.id:<8} {item.name:<24} {str(item.price):>12}")


@click.command("to-cart")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def favorites_to_cart(obj: dict, product_id: str) -> None:
    """Add a favorite to the cart."""
    config = obj["config"]
    try:
        favorites_list(config).move_to_cart(product_id, open_cart(config))
    except DomainException as exc:
        raise click.ClickException(str(exc))

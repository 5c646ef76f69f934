"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from storefront.application.cart_engine import CartEngine
from storefront.application.dto import CartSummary
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import format_pesos
from storefront.infrastructure.bootstrap import cart_engine, catalog_gateway


def _badge(summary: CartSummary) -> None:
    """Stand-in for the cart badge: one line after every change."""
    click.echo(f"Cart: {summary.item_count} item(s), subtotal ${format_pesos(summary.subtotal)}")


def open_cart(config) -> CartEngine:
    engine = cart_engine(config)
    if engine.check_expiration():
        click.echo("Your cart expired and was cleared.")
    engine.subscribe(_badge)
    return engine


def display_cart(engine: CartEngine) -> None:
    lines = engine.lines()
    if not lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'ID':<8} {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*65}")
    for line in lines:
        click.echo(
            f"  {line.product_id:<8} {line.name:<24} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.line_total:>12}"
        )
    click.echo(f"  {'-'*65}")
    click.echo(f"  {'Subtotal':<39} {str(engine.subtotal()):>26}")


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_add(obj: dict, product_id: str) -> None:
    """Add one unit of a product to the cart."""
    config = obj["config"]
    try:
        product = catalog_gateway(config).get_product(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    engine = open_cart(config)
    engine.add_product(product.as_ref())
    click.echo(f"{product.name} x{engine.quantity_of(product.id)} in cart")


@click.command("show")
@click.pass_obj
def cart_show(obj: dict) -> None:
    """Show the cart contents."""
    display_cart(open_cart(obj["config"]))


@click.command("set")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
@click.pass_obj
def cart_set(obj: dict, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line (clamped to 1..99)."""
    engine = open_cart(obj["config"])
    if not engine.set_quantity(product_id, quantity):
        raise click.ClickException(f"Product '{product_id}' is not in the cart")


@click.command("inc")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_inc(obj: dict, product_id: str) -> None:
    """Add one unit to a cart line."""
    if not open_cart(obj["config"]).increment(product_id):
        raise click.ClickException(f"Product '{product_id}' is not in the cart")


@click.command("dec")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_dec(obj: dict, product_id: str) -> None:
    """Take one unit off a cart line (the last unit removes it)."""
    if not open_cart(obj["config"]).decrement(product_id):
        raise click.ClickException(f"Product '{product_id}' is not in the cart")


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(obj: dict, product_id: str) -> None:
    """Remove a line from the cart."""
    if not open_cart(obj["config"]).remove_product(product_id):
        raise click.ClickException(f"Product '{product_id}' is not in the cart")


@click.command("clear")
@click.confirmation_option(prompt="Empty the whole cart?")
@click.pass_obj
def cart_clear(obj: dict) -> None:
    """Empty the cart."""
    open_cart(obj["config"]).clear()

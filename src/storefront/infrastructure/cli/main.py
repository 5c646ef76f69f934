import logging

import click

from storefront.config import Config
from storefront.domain.exceptions import StorageError
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_dec,
    cart_inc,
    cart_remove,
    cart_set,
    cart_show,
)
from storefront.infrastructure.cli.checkout_commands import checkout
from storefront.infrastructure.cli.favorites_commands import (
    favorites_add,
    favorites_remove,
    favorites_show,
    favorites_to_cart,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_price,
    product_recommended,
    product_stock,
)
from storefront.infrastructure.cli.sale_commands import (
    outbox_flush,
    outbox_show,
    sale_show,
    sale_summary,
)


class StorefrontGroup(click.Group):
    """Reports local storage failures as CLI errors."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except StorageError as exc:
            raise click.ClickException(str(exc)) from exc


@click.group(cls=StorefrontGroup)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Storefront — cart, favorites and checkout"""
    ctx.ensure_object(dict)
    config = ctx.obj.setdefault("config", Config)
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def product() -> None:
    """Browse and maintain the catalog."""


@cli.group()
def sale() -> None:
    """Inspect stored sales."""


@cli.group()
def outbox() -> None:
    """Orders waiting for the Sales Service."""


@cli.group()
def favorites() -> None:
    """Manage favorites."""


# Register subcommands
cli.add_command(checkout)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_dec)
cart.add_command(cart_inc)
cart.add_command(cart_remove)
cart.add_command(cart_set)
cart.add_command(cart_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_price)
product.add_command(product_recommended)
product.add_command(product_stock)
sale.add_command(sale_show)
sale.add_command(sale_summary)
outbox.add_command(outbox_flush)
outbox.add_command(outbox_show)
favorites.add_command(favorites_add)
favorites.add_command(favorites_remove)
favorites.add_command(favorites_show)
favorites.add_command(favorites_to_cart)

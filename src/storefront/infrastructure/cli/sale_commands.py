"""CLI commands for stored sales and the order outbox."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import format_pesos
from storefront.infrastructure.bootstrap import order_outbox, sales_gateway, sales_service


@click.command("show")
@click.option("--order-number", required=True, help="Order number, e.g. MMDR-20250101-AB12CD34.")
@click.pass_obj
def sale_show(obj: dict, order_number: str) -> None:
    """Show a sale stored by the Sales Service."""
    try:
        sale = sales_gateway(obj["config"]).get_order(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if sale is None:
        raise click.ClickException(f"Sale {order_number} not found")

    click.echo(f"Sale {sale['numeroOrden']}  (status={sale['estado']})")
    click.echo(f"Customer: {sale['cliente']['nombre']} <{sale['cliente']['email']}>")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for line in sale["productos"]:
        click.echo(
            f"  {line['nombre']:<24} {line['cantidad']:>5} "
            f"{'$' + format_pesos(line['precio']):>12} {'$' + format_pesos(line['subtotal']):>12}"
        )
    click.echo(f"  {'-'*56}")
    totals = sale["totales"]
    click.echo(f"  {'Shipping':<31} {'$' + format_pesos(totals['envio']):>25}")
    click.echo(f"  {'Total':<31} {'$' + format_pesos(totals['total']):>25}")


@click.command("summary")
@click.pass_obj
def sale_summary(obj: dict) -> None:
    """Counts and revenue of the local sales."""
    summary = sales_service(obj["config"]).summary()
    click.echo(f"Sales:          {summary.count}")
    click.echo(f"Completed:      {summary.completed}")
    click.echo(f"Revenue:        ${format_pesos(summary.revenue)}")
    click.echo(f"Average ticket: ${format_pesos(summary.average_ticket)}")


@click.command("show")
@click.pass_obj
def outbox_show(obj: dict) -> None:
    """List orders waiting to be delivered to the Sales Service."""
    entries = order_outbox(obj["config"]).entries()
    if not entries:
        click.echo("Outbox is empty.")
        return

    for entry in entries:
        queued = datetime.fromtimestamp(entry.queued_at / 1000, tz=timezone.utc)
        state = "REJECTED" if entry.rejected else "pending"
        click.echo(
            f"{entry.order_number:<26} {state:<9} attempts={entry.attempts} "
            f"queued={queued:%Y-%m-%d %H:%M} UTC  {entry.error}"
        )


@click.command("flush")
@click.pass_obj
def outbox_flush(obj: dict) -> None:
    """Retry delivering queued orders."""
    config = obj["config"]
    report = order_outbox(config).flush(sales_gateway(config))
    click.echo(f"Delivered {report.sent}, still pending {report.failed}, rejected {report.rejected}")

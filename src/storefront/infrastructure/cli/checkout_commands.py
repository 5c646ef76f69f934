"""CLI command for the checkout flow."""

from __future__ import annotations

import click

from storefront.application.checkout import CheckoutOrchestrator
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import CARD_PAYMENT_METHODS, PAYMENT_METHODS
from storefront.infrastructure.bootstrap import (
    checkout_orchestrator,
    shipping_rule,
    storage,
)
from storefront.infrastructure.cli.cart_commands import open_cart


def _report_errors(errors: dict[str, str], heading: str) -> None:
    click.echo(heading, err=True)
    for field_name, message in errors.items():
        click.echo(f"  {field_name}: {message}", err=True)
    raise click.ClickException("Please correct the fields above")


def _run_payment(orchestrator: CheckoutOrchestrator) -> None:
    while True:
        click.echo("Processing payment...")
        result = orchestrator.pay()
        if result.approved:
            break
        click.echo(f"Payment failed: {result.message}", err=True)
        if not click.confirm("Try again?", default=False):
            raise click.ClickException(f"Payment failed: {result.message}")

    order = result.order
    click.echo()
    click.echo(f"Order {order.order_number} confirmed")
    click.echo(f"  Date:            {order.created_at:%d/%m/%Y}")
    click.echo(f"  Payment method:  {order.payment.method}")
    click.echo(f"  Subtotal:        {order.totals.subtotal}")
    click.echo(f"  Shipping:        {order.totals.shipping}")
    click.echo(f"  Total:           {order.totals.total}")
    if not result.synced:
        click.echo(
            "Note: the order could not be sent to the store yet; "
            "it is queued and will be retried by 'storefront outbox flush'."
        )


@click.command("checkout")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--email", required=True)
@click.option("--phone", required=True)
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", "state_", required=True, help="Province.")
@click.option("--zip-code", required=True)
@click.option(
    "--payment-method",
    required=True,
    type=click.Choice(PAYMENT_METHODS),
)
@click.option("--card-number", default="", help="Required for card payments.")
@click.option("--card-expiry", default="", help="MM/YY")
@click.option("--card-cvv", default="")
@click.option("--cardholder", default="")
@click.pass_obj
def checkout(
    obj: dict,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    street: str,
    city: str,
    state_: str,
    zip_code: str,
    payment_method: str,
    card_number: str,
    card_expiry: str,
    card_cvv: str,
    cardholder: str,
) -> None:
    """Check out the current cart with a simulated payment."""
    config = obj["config"]
    engine = open_cart(config)
    threshold, fee = shipping_rule(config)

    try:
        draft = engine.prepare_checkout(storage(config), threshold, fee)
        click.echo(
            f"{engine.total_item_count()} item(s): subtotal {draft.totals.subtotal}, "
            f"shipping {draft.totals.shipping}, total {draft.totals.total}"
        )

        orchestrator = checkout_orchestrator(engine, config)
        orchestrator.start()

        errors = orchestrator.submit_shipping(
            {
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "phone": phone,
                "street": street,
                "city": city,
                "state": state_,
                "zipCode": zip_code,
                "paymentMethod": payment_method,
            }
        )
        if errors:
            _report_errors(errors, "Shipping details are invalid:")

        if payment_method in CARD_PAYMENT_METHODS:
            errors = orchestrator.submit_card(
                {
                    "cardNumber": card_number,
                    "cardExpiry": card_expiry,
                    "cardCvv": card_cvv,
                    "cardholderName": cardholder,
                }
            )
            if errors:
                _report_errors(errors, "Card details are invalid:")

        _run_payment(orchestrator)
    except DomainException as exc:
        raise click.ClickException(str(exc))

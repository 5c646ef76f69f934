"""Application service: Checkout Orchestrator.

Turns the checkout draft into a submitted Order in three stages:

    SHIPPING_INFO -> PAYMENT -> CONFIRMATION

Each stage gates the next.  A refused payment keeps the flow in PAYMENT
so the customer can retry.  An approved payment always ends in
CONFIRMATION: the cart is cleared and the customer is told the order went
through, whether or not the Sales Service accepted it.  Orders the
service did not take are queued in the OrderOutbox for later delivery.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from enum import Enum
from typing import Mapping

from storefront.application.cart_engine import CartEngine
from storefront.application.checkout_draft import (
    CheckoutDraft,
    discard_draft,
    read_draft,
    write_draft,
)
from storefront.application.dto import CheckoutResult
from storefront.application.outbox import OrderOutbox
from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    StorageError,
    ValidationError,
)
from storefront.domain.gateway.sales_gateway import SalesGateway
from storefront.domain.model.order import (
    CARD_PAYMENT_METHODS,
    FREE_SHIPPING_THRESHOLD,
    SHIPPING_FEE,
    Customer,
    Order,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.storage import KeyValueStorage
from storefront.domain.service.clock import Clock, now_ms, to_datetime
from storefront.domain.service.order_number import (
    generate_order_number,
    payment_reference,
)
from storefront.domain.service.payment_simulator import PaymentSimulator
from storefront.domain.service.validation import validate_card, validate_shipping

logger = logging.getLogger(__name__)


class CheckoutStage(Enum):
    SHIPPING_INFO = 1
    PAYMENT = 2
    CONFIRMATION = 3


class CheckoutOrchestrator:

    def __init__(
        self,
        storage: KeyValueStorage,
        sales_gateway: SalesGateway,
        outbox: OrderOutbox,
        payment_simulator: PaymentSimulator,
        cart_engine: CartEngine,
        clock: Clock = now_ms,
        rng: random.Random | None = None,
        free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
        shipping_fee: Money = SHIPPING_FEE,
    ) -> None:
        self._storage = storage
        self._sales_gateway = sales_gateway
        self._outbox = outbox
        self._payment_simulator = payment_simulator
        self._cart_engine = cart_engine
        self._clock = clock
        self._rng = rng or random.Random()
        self._free_shipping_threshold = free_shipping_threshold
        self._shipping_fee = shipping_fee

        self._stage = CheckoutStage.SHIPPING_INFO
        self._draft: CheckoutDraft | None = None
        self._card_validated = False
        self._busy = False
        self.last_error: str | None = None

    @property
    def stage(self) -> CheckoutStage:
        return self._stage

    @property
    def draft(self) -> CheckoutDraft | None:
        return self._draft

    @property
    def busy(self) -> bool:
        return self._busy

    # --- Stage 1: shipping info -----------------------------------------------

    def start(self) -> CheckoutDraft:
        """Load the draft written by the cart and enter SHIPPING_INFO."""
        draft = read_draft(self._storage)
        if draft is None:
            raise EntityNotFoundError("No checkout data; return to the cart")
        self._draft = draft
        self._stage = CheckoutStage.SHIPPING_INFO
        self._card_validated = False
        self.last_error = None
        return draft

    def submit_shipping(self, form: Mapping[str, str]) -> dict[str, str]:
        """Validate the shipping form; an empty result moves to PAYMENT."""
        self._require_stage(CheckoutStage.SHIPPING_INFO)
        errors = validate_shipping(form)
        if errors:
            logger.info("[CHECKOUT] Shipping form rejected: %s", sorted(errors))
            return errors

        customer = {key: (value or "").strip() for key, value in form.items()}
        self._draft = replace(self._draft, customer=customer)
        write_draft(self._storage, self._draft)
        self._stage = CheckoutStage.PAYMENT
        return {}

    # --- Stage 2: payment -----------------------------------------------------

    def submit_card(self, card: Mapping[str, str]) -> dict[str, str]:
        """Validate the card sub-form for card payment methods."""
        self._require_stage(CheckoutStage.PAYMENT)
        errors = validate_card(card, today=to_datetime(self._clock()).date())
        self._card_validated = not errors
        return errors

    def pay(self) -> CheckoutResult:
        """Run one simulated payment attempt."""
        self._require_stage(CheckoutStage.PAYMENT)
        if self._busy:
            raise ValidationError("A payment is already being processed")
        if self.payment_method in CARD_PAYMENT_METHODS and not self._card_validated:
            raise ValidationError("Enter valid card details before paying")

        self._busy = True
        try:
            outcome = self._payment_simulator.process()
        finally:
            self._busy = False

        if not outcome.approved:
            self.last_error = outcome.message
            logger.info("[CHECKOUT] Payment refused: %s", outcome.message)
            return CheckoutResult(approved=False, message=outcome.message)

        now = self._clock()
        order = self._build_order(now)
        order.mark_paid(payment_reference(now))
        synced = self._submit(order)

        self._cart_engine.clear()
        discard_draft(self._storage)
        self._stage = CheckoutStage.CONFIRMATION
        self.last_error = None
        logger.info("[CHECKOUT] Order %s confirmed (synced=%s)", order.order_number, synced)
        return CheckoutResult(approved=True, message=outcome.message, order=order, synced=synced)

    @property
    def payment_method(self) -> str:
        if self._draft is None:
            return ""
        return self._draft.customer.get("paymentMethod", "")

    # --- Navigation -----------------------------------------------------------

    def back(self) -> CheckoutStage:
        if self._stage == CheckoutStage.CONFIRMATION:
            raise ValidationError("The order is already confirmed")
        if self._stage == CheckoutStage.PAYMENT:
            self._stage = CheckoutStage.SHIPPING_INFO
            self._card_validated = False
        return self._stage

    # --- Internal helpers -----------------------------------------------------

    def _require_stage(self, expected: CheckoutStage) -> None:
        if self._draft is None:
            raise ValidationError("Checkout has not been started")
        if self._stage != expected:
            raise ValidationError(
                f"Checkout is at {self._stage.name}, expected {expected.name}"
            )

    def _build_order(self, now: int) -> Order:
        created_at = to_datetime(now)
        return Order.create(
            order_number=generate_order_number(created_at, self._rng),
            customer=Customer.from_form(self._draft.customer),
            items=self._draft.items,
            payment_method=self.payment_method,
            created_at=created_at,
            free_shipping_threshold=self._free_shipping_threshold,
            shipping_fee=self._shipping_fee,
        )

    def _submit(self, order: Order) -> bool:
        """Send the order to the Sales Service, queueing it on failure."""
        try:
            self._sales_gateway.create_order(order)
            return True
        except DomainException as exc:
            logger.error("[CHECKOUT] Sales Service did not take %s: %s", order.order_number, exc)
            error = str(exc)

        try:
            self._outbox.add(order.to_payload(), error)
        except StorageError:
            logger.critical(
                "[CHECKOUT] Order %s lost: could not write outbox", order.order_number
            )
        return False

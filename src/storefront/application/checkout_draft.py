"""Checkout draft — the cart snapshot handed from the cart to checkout.

Stored under its own key so checkout can be resumed after a restart.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from storefront.domain.exceptions import StorageError, ValidationError
from storefront.domain.model.cart import Cart, LineItem
from storefront.domain.model.order import OrderTotals
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.storage import KeyValueStorage

logger = logging.getLogger(__name__)

CHECKOUT_DRAFT_KEY = "mmdr_checkout_data"


@dataclass
class CheckoutDraft:

    items: list[LineItem]
    totals: OrderTotals
    customer: dict[str, str] = field(default_factory=dict)

    def to_record(self) -> dict:
        record = {
            "items": [item.to_record() for item in self.items],
            "subtotal": self.totals.subtotal.amount,
            "envio": self.totals.shipping.amount,
            "total": self.totals.total.amount,
        }
        if self.customer:
            record["cliente"] = dict(self.customer)
        return record

    @staticmethod
    def from_record(raw: dict) -> CheckoutDraft:
        cart = Cart.from_records(raw.get("items") or [])
        if cart.is_empty:
            raise ValidationError("Checkout draft has no items")
        return CheckoutDraft(
            items=cart.items,
            totals=OrderTotals(
                subtotal=Money.of(raw["subtotal"]),
                shipping=Money.of(raw.get("envio", 0)),
                total=Money.of(raw["total"]),
            ),
            customer=dict(raw.get("cliente") or {}),
        )


def write_draft(storage: KeyValueStorage, draft: CheckoutDraft) -> None:
    storage.set_item(CHECKOUT_DRAFT_KEY, json.dumps(draft.to_record()))


def read_draft(storage: KeyValueStorage) -> CheckoutDraft | None:
    """Return the stored draft, or None if absent or unreadable."""
    try:
        raw = storage.get_item(CHECKOUT_DRAFT_KEY)
        if not raw:
            return None
        return CheckoutDraft.from_record(json.loads(raw))
    except (StorageError, ValidationError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.error("[CHECKOUT] Could not read checkout draft: %s", exc)
        return None


def discard_draft(storage: KeyValueStorage) -> None:
    try:
        storage.remove_item(CHECKOUT_DRAFT_KEY)
    except StorageError as exc:
        logger.error("[CHECKOUT] Could not discard checkout draft: %s", exc)

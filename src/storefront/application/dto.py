"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import LineItem
from storefront.domain.model.order import Order


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the user."""

    product_id: str
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$1.500"
    line_total: str


@dataclass(frozen=True)
class CartSummary:
    """What cart listeners receive after every mutation."""

    items: list[LineItem]
    item_count: int
    subtotal: int

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class CheckoutResult:
    """Output of one payment attempt.

    ``synced`` is False when the Sales Service did not take the order and
    it went to the local outbox instead.
    """

    approved: bool
    message: str
    order: Order | None = None
    synced: bool = False


@dataclass(frozen=True)
class FlushReport:

    sent: int
    failed: int
    rejected: int


@dataclass(frozen=True)
class SalesSummary:

    count: int
    completed: int
    revenue: int
    average_ticket: int

"""Cart aggregate — the pending purchase of one client session.

The Cart owns its line items and enforces every quantity rule.  It has
no knowledge of storage or of who is watching it; the CartEngine in the
application layer persists it and notifies listeners after each change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import MIN_QUANTITY, Money, Quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductRef:
    """What the storefront knows about a product when it is added."""

    id: str
    name: str
    price: Money
    image: str = ""

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> ProductRef:
        """Accept either the Spanish or the English product field names."""
        product_id = str(data.get("id") or data.get("_id") or "").strip()
        name = data.get("nombre") or data.get("name") or ""
        price = data.get("precio")
        if price is None:
            price = data.get("price", 0)
        image = data.get("imagen") or data.get("image") or ""
        return ProductRef(id=product_id, name=name, price=Money.of(price), image=image)


@dataclass
class LineItem:
    """One product line in the cart.

    ``quantity`` is a plain int: adding an existing product increments it
    without the upper clamp unless the engine is configured otherwise.
    """

    id: str
    name: str
    unit_price: Money
    image_url: str
    quantity: int
    added_at: int  # epoch milliseconds

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    # --- Storage records ------------------------------------------------------

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "nombre": self.name,
            "precio": self.unit_price.amount,
            "imagen": self.image_url,
            "cantidad": self.quantity,
            "agregadoEl": self.added_at,
        }

    @staticmethod
    def from_record(raw: Mapping[str, Any]) -> LineItem:
        if not raw.get("id"):
            raise ValidationError("Stored line item has no id")
        quantity = raw.get("cantidad", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < MIN_QUANTITY:
            raise ValidationError(f"Stored line item has invalid quantity {quantity!r}")
        return LineItem(
            id=str(raw["id"]),
            name=raw.get("nombre", ""),
            unit_price=Money.of(raw.get("precio", 0)),
            image_url=raw.get("imagen") or "",
            quantity=quantity,
            added_at=int(raw.get("agregadoEl", 0)),
        )


@dataclass
class Cart:
    """Aggregate root for the shopping cart.

    Invariants:
    - no two line items share the same ``id``
    - a stored quantity is always >= 1; driving it to 0 removes the line
    - items keep insertion order
    """

    items: list[LineItem] = field(default_factory=list)

    # --- Hydration ------------------------------------------------------------

    @staticmethod
    def from_records(records: list[Mapping[str, Any]]) -> Cart:
        """Rebuild a cart from storage, skipping records that cannot be read."""
        cart = Cart()
        for raw in records:
            try:
                item = LineItem.from_record(raw)
            except (ValidationError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("[CART] Skipping unreadable stored item %r: %s", raw, exc)
                continue
            if cart.find(item.id) is not None:
                logger.warning("[CART] Skipping duplicate stored item %s", item.id)
                continue
            cart.items.append(item)
        return cart

    def to_records(self) -> list[dict]:
        return [item.to_record() for item in self.items]

    # --- Mutations ------------------------------------------------------------

    def add(self, product: ProductRef, now: int, clamp: bool = False) -> LineItem:
        """Add one unit of *product*, merging with an existing line."""
        if not product.id:
            raise ValidationError("Product id is required")

        existing = self.find(product.id)
        if existing is not None:
            new_quantity = existing.quantity + 1
            existing.quantity = Quantity.clamp(new_quantity).value if clamp else new_quantity
            return existing

        item = LineItem(
            id=product.id,
            name=product.name,
            unit_price=product.price,
            image_url=product.image,
            quantity=1,
            added_at=now,
        )
        self.items.append(item)
        return item

    def set_quantity(self, product_id: str, quantity: int) -> bool:
        """Overwrite a line quantity; ``quantity <= 0`` removes the line."""
        item = self.find(product_id)
        if item is None:
            return False
        if quantity <= 0:
            return self.remove(product_id)
        item.quantity = Quantity.clamp(quantity).value
        return True

    def increment(self, product_id: str) -> bool:
        item = self.find(product_id)
        if item is None:
            return False
        item.quantity = Quantity.clamp(item.quantity + 1).value
        return True

    def decrement(self, product_id: str) -> bool:
        """Take one unit off; the last unit removes the line."""
        item = self.find(product_id)
        if item is None:
            return False
        if item.quantity > 1:
            item.quantity -= 1
            return True
        return self.remove(product_id)

    def remove(self, product_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.id != product_id]
        return len(self.items) < before

    def clear(self) -> None:
        self.items = []

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> LineItem | None:
        for item in self.items:
            if item.id == product_id:
                return item
        return None

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.subtotal
        return result

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def snapshot(self) -> list[LineItem]:
        """Copies of the line items; mutating them leaves the cart untouched."""
        return [replace(item) for item in self.items]

"""Application service: Cart Engine.

The only mutator of cart state for one session.  Every mutation runs
the same sequence: change the Cart aggregate, persist it (which pushes
the expiration forward), then notify listeners.  Nothing here is
asynchronous; calls are handled one at a time, in order.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from storefront.application.checkout_draft import CheckoutDraft, write_draft
from storefront.application.dto import CartLineDTO, CartSummary
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart, LineItem, ProductRef
from storefront.domain.model.order import (
    FREE_SHIPPING_THRESHOLD,
    SHIPPING_FEE,
    OrderTotals,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.storage import KeyValueStorage
from storefront.domain.service.clock import Clock, now_ms

logger = logging.getLogger(__name__)

CartListener = Callable[[CartSummary], None]


class CartEngine:

    def __init__(
        self,
        repository: CartRepository,
        clock: Clock = now_ms,
        clamp_on_add: bool = False,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._clamp_on_add = clamp_on_add
        self._listeners: list[CartListener] = []
        self._cart = Cart.from_records(repository.load())
        logger.debug("[CART] Loaded %d items", len(self._cart.items))

    # --- Listeners ------------------------------------------------------------

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register *listener*; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Mutations ------------------------------------------------------------

    def add_product(self, product: ProductRef | Mapping[str, Any]) -> bool:
        """Add one unit; returns False when the id is missing or the price is unusable."""
        if not isinstance(product, ProductRef):
            try:
                product = ProductRef.from_mapping(product or {})
            except ValidationError as exc:
                logger.error("[CART] Refusing product %r: %s", product, exc)
                return False
        if not product.id:
            logger.error("[CART] Refusing product without id: %r", product)
            return False

        item = self._cart.add(product, now=self._clock(), clamp=self._clamp_on_add)
        logger.info("[CART] %s x%d", item.name, item.quantity)
        self._commit()
        return True

    def set_quantity(self, product_id: str, quantity: int) -> bool:
        """Overwrite a quantity, clamped to [1, 99]; ``<= 0`` removes."""
        if quantity <= 0:
            return self.remove_product(product_id)
        if not self._cart.set_quantity(product_id, quantity):
            return False
        self._commit()
        return True

    def increment(self, product_id: str) -> bool:
        if not self._cart.increment(product_id):
            return False
        self._commit()
        return True

    def decrement(self, product_id: str) -> bool:
        if not self._cart.decrement(product_id):
            return False
        self._commit()
        return True

    def remove_product(self, product_id: str) -> bool:
        if not self._cart.remove(product_id):
            return False
        logger.info("[CART] Removed %s", product_id)
        self._commit()
        return True

    def clear(self) -> None:
        """Empty the cart and delete its stored state and expiration."""
        self._cart.clear()
        self._repository.clear()
        logger.info("[CART] Cleared")
        self._notify()

    def check_expiration(self) -> bool:
        """Drop the cart if its stored expiration has passed."""
        if not self._repository.is_expired():
            return False
        logger.info("[CART] Cart expired")
        self.clear()
        return True

    # --- Queries --------------------------------------------------------------

    def subtotal(self) -> Money:
        return self._cart.subtotal

    def total_item_count(self) -> int:
        return self._cart.item_count

    def snapshot(self) -> list[LineItem]:
        return self._cart.snapshot()

    def contains(self, product_id: str) -> bool:
        return self._cart.find(product_id) is not None

    def quantity_of(self, product_id: str) -> int:
        item = self._cart.find(product_id)
        return item.quantity if item else 0

    def is_empty(self) -> bool:
        return self._cart.is_empty

    def summary(self) -> CartSummary:
        return CartSummary(
            items=self.snapshot(),
            item_count=self.total_item_count(),
            subtotal=self.subtotal().amount,
        )

    def lines(self) -> list[CartLineDTO]:
        return [
            CartLineDTO(
                product_id=item.id,
                name=item.name,
                quantity=item.quantity,
                unit_price=str(item.unit_price),
                line_total=str(item.subtotal),
            )
            for item in self._cart.items
        ]

    # --- Checkout hand-off ----------------------------------------------------

    def prepare_checkout(
        self,
        storage: KeyValueStorage,
        free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
        shipping_fee: Money = SHIPPING_FEE,
    ) -> CheckoutDraft:
        """Write the checkout draft for the current cart."""
        if self._cart.is_empty:
            raise ValidationError("Your cart is empty")
        draft = CheckoutDraft(
            items=self.snapshot(),
            totals=OrderTotals.for_subtotal(
                self.subtotal(), free_shipping_threshold, shipping_fee
            ),
        )
        write_draft(storage, draft)
        return draft

    # --- Internal helpers -----------------------------------------------------

    def _commit(self) -> None:
        self._repository.save(self._cart.to_records())
        self._notify()

    def _notify(self) -> None:
        summary = self.summary()
        for listener in list(self._listeners):
            try:
                listener(summary)
            except Exception:
                logger.exception("[CART] Listener %r failed", listener)

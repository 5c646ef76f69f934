"""KeyValueStorage-backed implementation of CartRepository.

Two keys per list: the JSON array of records and the expiration marker
(epoch milliseconds as a string).  Every successful save rewrites the
marker to ``now + ttl``.

A missing marker means "fresh", not "expired": ``load`` writes a new one
and keeps whatever records are stored.

Storage and parse errors never propagate.  The list is a convenience
cache, so an unreadable one is reported as empty.
"""

from __future__ import annotations

import json
import logging

from storefront.domain.exceptions import StorageError
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.storage import KeyValueStorage
from storefront.domain.service.clock import DAY_MS, Clock, now_ms

logger = logging.getLogger(__name__)

CART_ITEMS_KEY = "mmdr_carrito"
CART_EXPIRES_KEY = "mmdr_carrito_expiracion"
CART_TTL_MS = DAY_MS

FAVORITES_ITEMS_KEY = "mmdr_favoritos"
FAVORITES_EXPIRES_KEY = "mmdr_favoritos_expiracion"
FAVORITES_TTL_MS = 30 * DAY_MS


class StorageCartRepository(CartRepository):

    def __init__(
        self,
        storage: KeyValueStorage,
        items_key: str = CART_ITEMS_KEY,
        expires_key: str = CART_EXPIRES_KEY,
        ttl_ms: int = CART_TTL_MS,
        clock: Clock = now_ms,
    ) -> None:
        self._storage = storage
        self._items_key = items_key
        self._expires_key = expires_key
        self._ttl_ms = ttl_ms
        self._clock = clock

    # --- CartRepository interface ---------------------------------------------

    def load(self) -> list[dict]:
        try:
            marker = self.expires_at()
            if marker is None:
                self._touch()
            elif self._clock() > marker:
                logger.info("[STORE] %s expired, clearing", self._items_key)
                self.clear()
                return []

            raw = self._storage.get_item(self._items_key)
            if not raw:
                return []
            records = json.loads(raw)
        except (StorageError, ValueError) as exc:
            logger.error("[STORE] Could not load %s: %s", self._items_key, exc)
            return []

        if not isinstance(records, list):
            logger.error("[STORE] %s does not hold a list", self._items_key)
            return []
        return records

    def save(self, records: list[dict]) -> None:
        try:
            self._storage.set_item(self._items_key, json.dumps(records, ensure_ascii=False))
            self._touch()
        except (StorageError, TypeError, ValueError) as exc:
            logger.error("[STORE] Could not save %s: %s", self._items_key, exc)

    def clear(self) -> None:
        try:
            self._storage.remove_item(self._items_key)
            self._storage.remove_item(self._expires_key)
        except StorageError as exc:
            logger.error("[STORE] Could not clear %s: %s", self._items_key, exc)

    def expires_at(self) -> int | None:
        """Raises StorageError when storage is unreadable."""
        raw = self._storage.get_item(self._expires_key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("[STORE] Ignoring malformed marker %r", raw)
            return None

    def is_expired(self) -> bool:
        try:
            marker = self.expires_at()
        except StorageError as exc:
            logger.error("[STORE] Could not read %s: %s", self._expires_key, exc)
            return False
        return marker is not None and self._clock() > marker

    # --- Internal helpers -----------------------------------------------------

    def _touch(self) -> None:
        self._storage.set_item(self._expires_key, str(self._clock() + self._ttl_ms))

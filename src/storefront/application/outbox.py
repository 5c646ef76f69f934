"""Application service: Order Outbox.

Checkout reports success to the customer as soon as the simulated
payment is approved.  When the Sales Service does not take the order,
the sale document waits here until ``flush`` delivers it.  Orders the
service rejects outright are marked and skipped by later flushes; they
need a person to look at them.

The outbox is the only copy of an undelivered order, so records that
cannot be parsed are kept (marked rejected) rather than dropped, and
nothing is written back after a read that failed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from storefront.application.dto import FlushReport
from storefront.domain.exceptions import (
    DomainException,
    SalesServiceError,
    StorageError,
)
from storefront.domain.gateway.sales_gateway import SalesGateway
from storefront.domain.model.order import Order
from storefront.domain.repository.storage import KeyValueStorage
from storefront.domain.service.clock import Clock, now_ms

logger = logging.getLogger(__name__)

OUTBOX_KEY = "mmdr_ventas_locales"


@dataclass
class OutboxEntry:

    payload: dict
    error: str
    attempts: int
    queued_at: int
    rejected: bool = False
    # Record that could not be parsed; written back unchanged.
    original: Any = None

    @property
    def order_number(self) -> str:
        return self.payload.get("numeroOrden", "")

    def to_record(self) -> dict:
        if self.original is not None:
            if isinstance(self.original, dict):
                record = dict(self.original)
            else:
                record = {"registro": self.original}
            record.update(error=self.error, rechazado=True)
            return record
        return {
            "venta": self.payload,
            "error": self.error,
            "intentos": self.attempts,
            "encoladoEl": self.queued_at,
            "rechazado": self.rejected,
        }

    @staticmethod
    def from_record(raw: dict) -> OutboxEntry:
        if not isinstance(raw["venta"], dict):
            raise TypeError("sale document is not an object")
        return OutboxEntry(
            payload=raw["venta"],
            error=raw.get("error", ""),
            attempts=int(raw.get("intentos", 0)),
            queued_at=int(raw.get("encoladoEl", 0)),
            rejected=bool(raw.get("rechazado", False)),
        )

    @staticmethod
    def unreadable(raw: Any, reason: str) -> OutboxEntry:
        error = raw.get("error") if isinstance(raw, dict) else None
        return OutboxEntry(
            payload={},
            error=error or f"Unreadable outbox record: {reason}",
            attempts=0,
            queued_at=0,
            rejected=True,
            original=raw,
        )


class OrderOutbox:

    def __init__(self, storage: KeyValueStorage, clock: Clock = now_ms) -> None:
        self._storage = storage
        self._clock = clock

    def add(self, payload: dict, error: str) -> None:
        """Queue a sale document.

        Raises StorageError if it cannot be kept, including when the
        existing outbox cannot be read (overwriting it would lose orders).
        """
        entries = self._read()
        entries.append(
            OutboxEntry(payload=payload, error=error, attempts=1, queued_at=self._clock())
        )
        self._persist(entries)
        logger.warning("[OUTBOX] Queued order %s: %s", payload.get("numeroOrden"), error)

    def entries(self) -> list[OutboxEntry]:
        """Every entry, for display; an unreadable outbox lists as empty."""
        try:
            return self._read()
        except StorageError as exc:
            logger.error("[OUTBOX] Could not read outbox: %s", exc)
            return []

    def pending(self) -> list[OutboxEntry]:
        return [entry for entry in self.entries() if not entry.rejected]

    def flush(self, gateway: SalesGateway) -> FlushReport:
        """Try to deliver every pending entry once.

        Raises StorageError when the outbox cannot be read or rewritten.
        """
        sent = failed = rejected = 0
        remaining: list[OutboxEntry] = []

        for entry in self._read():
            if entry.rejected:
                remaining.append(entry)
                continue
            try:
                order = Order.from_payload(entry.payload)
            except (KeyError, TypeError, ValueError, DomainException) as exc:
                entry.error = f"Unreadable sale document: {exc}"
                entry.rejected = True
                remaining.append(entry)
                rejected += 1
                logger.error("[OUTBOX] Order %s unreadable: %s", entry.order_number, exc)
                continue

            try:
                gateway.create_order(order)
            except SalesServiceError as exc:
                entry.attempts += 1
                entry.error = str(exc)
                remaining.append(entry)
                failed += 1
                logger.warning("[OUTBOX] Order %s still undelivered: %s", entry.order_number, exc)
            except DomainException as exc:
                entry.attempts += 1
                entry.error = str(exc)
                entry.rejected = True
                remaining.append(entry)
                rejected += 1
                logger.error("[OUTBOX] Order %s rejected: %s", entry.order_number, exc)
            else:
                sent += 1
                logger.info("[OUTBOX] Order %s delivered", entry.order_number)

        self._persist(remaining)
        return FlushReport(sent=sent, failed=failed, rejected=rejected)

    # --- Storage helpers ------------------------------------------------------

    def _read(self) -> list[OutboxEntry]:
        raw = self._storage.get_item(OUTBOX_KEY)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"Outbox is not valid JSON: {exc}") from exc
        if not isinstance(records, list):
            raise StorageError("Outbox does not hold a list")

        entries = []
        for record in records:
            try:
                entries.append(OutboxEntry.from_record(record))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.error("[OUTBOX] Keeping unreadable record: %r", record)
                entries.append(OutboxEntry.unreadable(record, str(exc)))
        return entries

    def _persist(self, entries: list[OutboxEntry]) -> None:
        if entries:
            self._storage.set_item(
                OUTBOX_KEY, json.dumps([entry.to_record() for entry in entries])
            )
        else:
            self._storage.remove_item(OUTBOX_KEY)

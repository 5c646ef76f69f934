"""Abstract repository for a persisted, expiring list of records.

Defined in the domain layer so the cart never depends on where it is
stored.  The same contract serves the cart and the favorites list; only
the keys and the time-to-live differ.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> list[dict]:
        """Return the stored records, or [] if none, expired or unreadable."""

    @abstractmethod
    def save(self, records: list[dict]) -> None:
        """Persist *records* and push the expiration forward."""

    @abstractmethod
    def clear(self) -> None:
        """Delete the records and the expiration marker."""

    @abstractmethod
    def expires_at(self) -> int | None:
        """Return the expiration marker in epoch milliseconds, or None."""

    @abstractmethod
    def is_expired(self) -> bool:
        """True when a marker exists and lies in the past."""

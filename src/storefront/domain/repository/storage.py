"""Abstract key-value storage — the client-local store carts live in.

Values are strings, the way browser local storage holds them.  Callers
serialize to JSON before writing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored string, or None if the key is absent.

        Raises StorageError if the backing store cannot be read.
        """

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*; a missing key is not an error."""

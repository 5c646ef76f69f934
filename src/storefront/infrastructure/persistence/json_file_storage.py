"""JSON-file-backed implementation of KeyValueStorage.

The whole store is one JSON object of string values, rewritten on every
change.  Two processes writing at once race; the last write wins.
"""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import StorageError
from storefront.domain.repository.storage import KeyValueStorage


class JsonFileStorage(KeyValueStorage):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- KeyValueStorage interface --------------------------------------------

    def get_item(self, key: str) -> str | None:
        return self._load_raw().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Storage values must be strings, got {type(value).__name__}")
        data = self._load_raw()
        data[key] = value
        self._persist_raw(data)

    def remove_item(self, key: str) -> None:
        data = self._load_raw()
        if key in data:
            del data[key]
            self._persist_raw(data)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, str]:
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self._file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self._file_path} does not hold a JSON object")
        return data

    def _persist_raw(self, data: dict[str, str]) -> None:
        try:
            self._file_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot create {self._file_path}: {exc}") from exc

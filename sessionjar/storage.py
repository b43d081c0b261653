"""Key-value storage backends for cookie snapshots and the session cache."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from sessionjar.cookies.utils import normalize_cookie_name


class StorageBackend(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class StorageAdapter:
    """Wraps a backend so that every key goes through normalize_cookie_name."""

    def __init__(self, storage: StorageBackend):
        self._storage = storage

    def get_item(self, key: str) -> str | None:
        return self._storage.get_item(normalize_cookie_name(key))

    def set_item(self, key: str, value: str) -> None:
        self._storage.set_item(normalize_cookie_name(key), value)


class MemoryStorage:
    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """All items in one JSON object file. A missing or corrupt file reads as empty."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

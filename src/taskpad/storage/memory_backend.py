# src/taskpad/storage/memory_backend.py

from __future__ import annotations

import threading
from collections.abc import Mapping


class InMemoryKeyValueStore:
    """Process-local KeyValueStorage (nothing survives a restart)."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

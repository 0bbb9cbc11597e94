# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and the gateway depend on Protocols instead of concrete backends.
This keeps storage swappable (JSON file, SQLite, in-memory) and makes testing easier.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task

TaskListListener = Callable[[list["Task"]], None]
# Receives the post-mutation snapshot (copies, display order).


class KeyValueStorage(Protocol):
    """
    Opaque string store, durable across restarts.

    get() returns None when the key was never written.
    set() replaces the previous value as a whole.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SnapshotWriter(Protocol):
    """Persistence trigger: receives the full collection after each mutation."""

    def submit(self, tasks: Sequence[Task]) -> None: ...

    def flush(self, timeout: float | None = None) -> bool: ...

    def close(self, timeout: float | None = None) -> None: ...

# src/taskpad/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskListStore
from .ports import KeyValueStorage


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    storage: KeyValueStorage
    store: TaskListStore

    # Serializes connector-level work (render + command) across threads.
    lock: threading.RLock = field(default_factory=threading.RLock)

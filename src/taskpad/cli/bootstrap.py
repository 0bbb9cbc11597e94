# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend and autosave mode,
- wires storage -> gateway -> store into AppState and hydrates the store.
"""

from __future__ import annotations

import logging

from ..config import AutosaveMode, StorageBackend, get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..storage.json_prefs import JsonPrefsStore
from ..storage.memory_backend import InMemoryKeyValueStore
from ..storage.sqlite_backend import SqliteKeyValueStore
from ..tasks.persistence import PersistenceGateway
from ..tasks.task_store import TaskListStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_path.parent.mkdir(parents=True, exist_ok=True)
    settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStorage:
    backend = StorageBackend.parse(str(getattr(settings, "storage_backend", "json")))
    if backend is StorageBackend.SQLITE:
        return SqliteKeyValueStore(
            settings.sqlite_path,
            timeout=float(getattr(settings, "storage_timeout_seconds", 30.0)),
        )
    if backend is StorageBackend.MEMORY:
        logger.warning("Using in-memory storage: tasks will not survive a restart.")
        return InMemoryKeyValueStore()
    return JsonPrefsStore(settings.prefs_path)


def create_initial_state(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings and hydrate the task list.

    Keeping settings (and storage) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if storage is None:
        storage = create_storage(settings)

    gateway = PersistenceGateway(storage, key=getattr(settings, "storage_key", "todo_list"))
    mode = AutosaveMode.parse(str(getattr(settings, "autosave_mode", "sync")))
    store = TaskListStore(gateway, background=mode is AutosaveMode.BACKGROUND)
    store.initialize()

    return AppState(settings=settings, storage=storage, store=store)


def shutdown_state(state: AppState, *, timeout: float = 10.0) -> None:
    """Best-effort shutdown: push the last snapshot out, stop the autosave worker."""
    try:
        if not state.store.flush(timeout):
            logger.warning("Autosave did not finish within %ss.", timeout)
    except Exception:
        logger.exception("Failed to flush task list.")

    try:
        state.store.close(timeout)
    except Exception:
        logger.debug("Autosave close failed.", exc_info=True)

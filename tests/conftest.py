# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.tasks.persistence import PersistenceGateway
from taskpad.tasks.task_store import TaskListStore

from .fakes import FakeKeyValueStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        storage_backend="json",
        storage_key="todo_list",
        storage_timeout_seconds=1.0,
        autosave_mode="sync",
        data_dir=tmp_path,
        prefs_path=tmp_path / "todo_prefs.json",
        sqlite_path=tmp_path / "taskpad.sqlite3",
    )


@pytest.fixture()
def storage() -> FakeKeyValueStorage:
    return FakeKeyValueStorage()


@pytest.fixture()
def gateway(storage: FakeKeyValueStorage) -> PersistenceGateway:
    return PersistenceGateway(storage)


@pytest.fixture()
def store(gateway: PersistenceGateway) -> TaskListStore:
    s = TaskListStore(gateway)
    s.initialize()
    return s

# src/taskpad/tasks/persistence.py

from __future__ import annotations

"""
Snapshot codec + storage access for the task list.

The whole collection lives under one key as a JSON array:
    [{"id": 1, "description": "buy milk", "completed": false}, ...]

The gateway keeps no state between calls: every load() reads the backend,
every save() overwrites the key with a freshly encoded snapshot.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

from ..core.errors import CorruptPersistedState, PersistenceFailure
from ..core.ports import KeyValueStorage
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todo_list"

# Field names written by the original Android app; accepted on load only.
_LEGACY_DESCRIPTION_KEY = "task"
_LEGACY_COMPLETED_KEY = "isChecked"


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps(
        [t.to_dict() for t in tasks],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def _pick(item: dict[str, Any], key: str, legacy_key: str) -> Any:
    if key in item:
        return item[key]
    if legacy_key in item:
        return item[legacy_key]
    raise CorruptPersistedState(f"Task entry is missing {key!r}", context={"entry": item})


def decode_tasks(raw: str) -> list[Task]:
    """
    Parse a stored snapshot.

    Raises CorruptPersistedState for anything that is not a list of
    {id: int, description: str, completed: bool} objects with distinct ids.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CorruptPersistedState("Stored task list is not valid JSON", original_error=e) from e

    if not isinstance(data, list):
        raise CorruptPersistedState(
            "Stored task list is not a JSON array",
            context={"type": type(data).__name__},
        )

    tasks: list[Task] = []
    seen: set[int] = set()
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise CorruptPersistedState(
                "Task entry is not an object", context={"index": index}
            )

        task_id = item.get("id")
        # bool is an int subclass; true/false are never valid ids.
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise CorruptPersistedState(
                "Task entry has an invalid id", context={"index": index, "id": task_id}
            )
        if task_id in seen:
            raise CorruptPersistedState(
                "Duplicate task id in stored list", context={"id": task_id}
            )

        description = _pick(item, "description", _LEGACY_DESCRIPTION_KEY)
        completed = _pick(item, "completed", _LEGACY_COMPLETED_KEY)
        if not isinstance(description, str):
            raise CorruptPersistedState(
                "Task description is not a string", context={"id": task_id}
            )
        if not isinstance(completed, bool):
            raise CorruptPersistedState(
                "Task completed flag is not a boolean", context={"id": task_id}
            )

        seen.add(task_id)
        tasks.append(Task(id=task_id, description=description, completed=completed))

    return tasks


class PersistenceGateway:
    """Reads/writes the task list snapshot under a single storage key."""

    def __init__(self, storage: KeyValueStorage, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        if not key:
            raise ValueError("storage key is required")
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, tasks: Sequence[Task]) -> None:
        payload = encode_tasks(tasks)
        try:
            self._storage.set(self._key, payload)
        except Exception as e:
            raise PersistenceFailure(
                f"Failed to write {self._key!r}",
                context={"key": self._key, "count": len(tasks)},
                original_error=e,
            ) from e
        logger.debug("Saved %d task(s) to key=%s (%d chars)", len(tasks), self._key, len(payload))

    def load(self) -> list[Task]:
        try:
            raw = self._storage.get(self._key)
        except Exception as e:
            raise PersistenceFailure(
                f"Failed to read {self._key!r}",
                context={"key": self._key},
                original_error=e,
            ) from e

        if raw is None:
            logger.debug("No stored task list under key=%s (first run)", self._key)
            return []

        tasks = decode_tasks(raw)
        logger.debug("Loaded %d task(s) from key=%s", len(tasks), self._key)
        return tasks

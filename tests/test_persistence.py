# tests/test_persistence.py

from __future__ import annotations

import json

import pytest

from taskpad.core.errors import CorruptPersistedState, PersistenceFailure
from taskpad.tasks.persistence import PersistenceGateway, decode_tasks, encode_tasks
from taskpad.tasks.task_models import Task

from .fakes import FakeKeyValueStorage


def test_load_absent_key_is_empty(gateway: PersistenceGateway) -> None:
    assert gateway.load() == []


def test_save_then_load_preserves_order_and_fields(
    gateway: PersistenceGateway, storage: FakeKeyValueStorage
) -> None:
    tasks = [
        Task(id=7, description="buy milk", completed=False),
        Task(id=2, description="café ☕ \"quoted\"", completed=True),
        Task(id=11, description="call mom", completed=False),
    ]
    gateway.save(tasks)

    assert list(storage.data) == ["todo_list"]
    assert gateway.load() == tasks


def test_save_overwrites_whole_snapshot(gateway: PersistenceGateway, storage: FakeKeyValueStorage) -> None:
    gateway.save([Task(1, "a"), Task(2, "b")])
    gateway.save([Task(2, "b", True)])

    assert gateway.load() == [Task(2, "b", True)]
    assert len(storage.writes) == 2


def test_snapshot_is_json_array_with_field_order() -> None:
    raw = encode_tasks([Task(id=1, description="x", completed=True)])
    assert raw == '[{"id":1,"description":"x","completed":true}]'
    assert encode_tasks([]) == "[]"


def test_custom_key(storage: FakeKeyValueStorage) -> None:
    gw = PersistenceGateway(storage, key="other")
    gw.save([Task(1, "a")])
    assert "other" in storage.data
    assert PersistenceGateway(storage).load() == []


def test_empty_key_rejected(storage: FakeKeyValueStorage) -> None:
    with pytest.raises(ValueError):
        PersistenceGateway(storage, key="")


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "",
        '{"id": 1}',
        "[1, 2, 3]",
        '[{"id": "1", "description": "a", "completed": false}]',
        '[{"id": true, "description": "a", "completed": false}]',
        '[{"id": 1, "description": 5, "completed": false}]',
        '[{"id": 1, "description": "a", "completed": "yes"}]',
        '[{"id": 1, "completed": false}]',
        '[{"id": 1, "description": "a", "completed": false}, {"id": 1, "description": "b", "completed": true}]',
    ],
)
def test_corrupt_snapshot_raises(raw: str) -> None:
    storage = FakeKeyValueStorage(data={"todo_list": raw})
    with pytest.raises(CorruptPersistedState):
        PersistenceGateway(storage).load()


def test_legacy_field_names_are_accepted() -> None:
    raw = json.dumps([{"id": 3, "task": "old", "isChecked": True}])
    assert decode_tasks(raw) == [Task(id=3, description="old", completed=True)]


def test_read_failure_becomes_persistence_failure() -> None:
    gw = PersistenceGateway(FakeKeyValueStorage(fail_get=True))
    with pytest.raises(PersistenceFailure) as exc_info:
        gw.load()
    assert isinstance(exc_info.value.original_error, OSError)


def test_write_failure_becomes_persistence_failure() -> None:
    storage = FakeKeyValueStorage(fail_set=True)
    gw = PersistenceGateway(storage)
    with pytest.raises(PersistenceFailure) as exc_info:
        gw.save([Task(1, "a")])
    assert exc_info.value.to_dict()["original_error"]["type"] == "OSError"
    assert storage.data == {}

"""taskpad - a single-user task list that saves itself on every change."""

__version__ = "0.1.0"

from .core.errors import (
    CorruptPersistedState,
    InvalidInput,
    NotFound,
    PersistenceFailure,
    StorageError,
    TaskpadError,
)
from .tasks.persistence import DEFAULT_STORAGE_KEY, PersistenceGateway
from .tasks.task_models import Task
from .tasks.task_store import TaskListStore

__all__ = [
    "CorruptPersistedState",
    "DEFAULT_STORAGE_KEY",
    "InvalidInput",
    "NotFound",
    "PersistenceFailure",
    "PersistenceGateway",
    "StorageError",
    "Task",
    "TaskListStore",
    "TaskpadError",
]

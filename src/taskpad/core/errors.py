# src/taskpad/core/errors.py

"""
Error hierarchy for taskpad.

Every error carries a human-readable message, an optional context dict and
the original exception (if any), so callers can log or display it uniformly.

- InvalidInput / NotFound: rejected mutations, nothing changed.
- CorruptPersistedState: stored snapshot exists but cannot be decoded.
- PersistenceFailure: the storage backend failed to read or write.
- StorageError: raised by storage backends themselves.
"""

from __future__ import annotations

from typing import Any


class TaskpadError(Exception):
    """Base class for all taskpad errors."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.context:
            result["context"] = self.context
        if self.original_error is not None:
            result["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error),
            }
        return result


class InvalidInput(TaskpadError, ValueError):
    """Empty or whitespace-only description on add/edit."""


class NotFound(TaskpadError, LookupError):
    """A mutation targeted a task id that is not in the collection."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found", context={"task_id": task_id})
        self.task_id = task_id


class CorruptPersistedState(TaskpadError):
    """The stored snapshot exists but is not a valid task list."""


class PersistenceFailure(TaskpadError):
    """The storage backend failed (I/O error, quota, timeout, ...)."""


class StorageError(TaskpadError):
    """Backend-level problem reported by a storage implementation."""

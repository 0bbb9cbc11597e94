# src/taskpad/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from ..core.errors import (
    CorruptPersistedState,
    InvalidInput,
    NotFound,
    PersistenceFailure,
    TaskpadError,
)
from ..core.ports import SnapshotWriter, TaskListListener
from .autosave import BackgroundSnapshotWriter, SyncSnapshotWriter
from .persistence import PersistenceGateway
from .task_models import Task, normalize_description

logger = logging.getLogger(__name__)


class TaskListStore:
    """
    Authoritative in-memory task list with auto-persistence.

    - initialize() hydrates from the gateway once; corrupt storage is logged,
      kept in load_error, and replaced by an empty list.
    - An unreadable backend (PersistenceFailure on load) leaves the store
      degraded: it starts empty, and every mutation first retries the load and
      is refused until a read succeeds, so the stored list is never clobbered.
    - After close() no mutation is accepted.
    - Every successful add/edit/toggle/delete hands exactly one full snapshot
      to the snapshot writer, then notifies subscribers.
    - Failed mutations (InvalidInput, NotFound) change nothing and save nothing.
    - Ids come from next_id, which only ever grows (never from len(tasks)).
    - background=True saves from a worker thread; flush() waits for it.

    Thread-safety:
    - mutations and the snapshot hand-off run under one RLock, so snapshots
      reach the writer in mutation order.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        background: bool = False,
        writer: SnapshotWriter | None = None,
    ) -> None:
        self._gateway = gateway
        if writer is None:
            writer_cls = BackgroundSnapshotWriter if background else SyncSnapshotWriter
            writer = writer_cls(gateway, on_error=self.record_persistence_result)
        self._writer: SnapshotWriter = writer
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._next_id = 1
        self._initialized = False
        self._degraded = False
        self._closed = False
        self._listeners: list[TaskListListener] = []

        self.load_error: TaskpadError | None = None
        self.last_persistence_error: PersistenceFailure | None = None

    # ---- lifecycle ----

    def initialize(self) -> None:
        with self._lock:
            if self._initialized:
                raise RuntimeError("TaskListStore.initialize() called twice")

            self._initialized = True
            try:
                self._hydrate(self._gateway.load())
            except CorruptPersistedState as e:
                logger.warning("Stored task list is corrupt, starting empty: %s", e.message)
                self.load_error = e
                self._hydrate([])
            except PersistenceFailure as e:
                logger.error(
                    "Could not read stored task list, saving is off until it can be read: %s (%r)",
                    e.message,
                    e.original_error,
                )
                self.load_error = e
                self._degraded = True
                self._hydrate([])
                return
            self.load_error = None

    @property
    def degraded(self) -> bool:
        """True while the stored list could not be read; mutations are refused."""
        with self._lock:
            return self._degraded

    def _hydrate(self, loaded: list[Task]) -> None:
        self._tasks = loaded
        self._next_id = max((t.id for t in loaded), default=0) + 1
        logger.info("TaskListStore ready tasks=%d next_id=%d", len(loaded), self._next_id)

    def _recover(self) -> None:
        try:
            loaded = self._gateway.load()
        except CorruptPersistedState as e:
            logger.warning(
                "Stored task list became readable but is corrupt, starting empty: %s", e.message
            )
            self.load_error = e
            loaded = []
        except PersistenceFailure as e:
            self.load_error = e
            raise PersistenceFailure(
                "Stored task list is still unreadable; change refused to protect it",
                context=e.context,
                original_error=e.original_error,
            ) from e
        else:
            self.load_error = None
        self._degraded = False
        self._hydrate(loaded)
        logger.info("Stored task list recovered after a failed read.")
        self._notify([replace(t) for t in self._tasks])

    def flush(self, timeout: float | None = None) -> bool:
        return self._writer.flush(timeout)

    def close(self, timeout: float | None = None) -> None:
        with self._lock:
            self._closed = True
        self._writer.close(timeout)

    def record_persistence_result(self, err: PersistenceFailure | None) -> None:
        """Writer callback: remember the latest save failure (None clears it)."""
        self.last_persistence_error = err

    # ---- observation ----

    def subscribe(self, listener: TaskListListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ---- queries ----

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def current_tasks(self) -> list[Task]:
        with self._lock:
            return [replace(t) for t in self._tasks]

    def get_task(self, task_id: int) -> Task:
        with self._lock:
            return replace(self._find(task_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # ---- mutations ----

    def add_task(self, description: str) -> Task:
        with self._lock:
            self._require_writable()
            text = normalize_description(description)
            if not text:
                raise InvalidInput("Task description must not be empty")
            task = Task(id=self._next_id, description=text, completed=False)
            self._tasks.append(task)
            self._next_id += 1
            logger.debug("Task added id=%s", task.id)
            self._changed()
            return replace(task)

    def edit_task(self, task_id: int, new_description: str) -> Task:
        with self._lock:
            self._require_writable()
            task = self._find(task_id)
            text = normalize_description(new_description)
            if not text:
                raise InvalidInput(
                    "Task description must not be empty", context={"task_id": task_id}
                )
            task.description = text
            logger.debug("Task edited id=%s", task_id)
            self._changed()
            return replace(task)

    def toggle_task(self, task_id: int) -> Task:
        with self._lock:
            self._require_writable()
            task = self._find(task_id)
            task.completed = not task.completed
            logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
            self._changed()
            return replace(task)

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            self._require_writable()
            task = self._find(task_id)
            self._tasks.remove(task)
            logger.debug("Task deleted id=%s", task_id)
            self._changed()

    # ---- internals ----

    def _require_writable(self) -> None:
        """Gate for every mutation; runs before any state is touched."""
        if not self._initialized:
            raise RuntimeError("TaskListStore.initialize() must be called before mutating")
        if self._closed:
            raise RuntimeError("TaskListStore is closed")
        if self._degraded:
            self._recover()

    def _find(self, task_id: int) -> Task:
        for t in self._tasks:
            if t.id == task_id:
                return t
        raise NotFound(task_id)

    def _changed(self) -> None:
        snapshot = [replace(t) for t in self._tasks]
        self._writer.submit(snapshot)
        self._notify(snapshot)

    def _notify(self, snapshot: list[Task]) -> None:
        for listener in list(self._listeners):
            try:
                listener([replace(t) for t in snapshot])
            except Exception:
                logger.exception("Task list listener failed.")

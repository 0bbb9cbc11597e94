# src/taskpad/tasks/autosave.py

from __future__ import annotations

"""
Persistence triggers.

The store hands every post-mutation snapshot to a writer:
- SyncSnapshotWriter saves before the mutation returns.
- BackgroundSnapshotWriter saves from a worker thread. Bursts are coalesced
  (only the newest pending snapshot is written) and a single worker does all
  writes, so storage never goes back to an older state.

Write failures never reach the mutating caller: they are logged and passed
to on_error.
"""

import logging
import threading
from collections.abc import Callable, Sequence

from ..core.errors import PersistenceFailure
from .persistence import PersistenceGateway
from .task_models import Task

logger = logging.getLogger(__name__)

AUTOSAVE_THREAD_NAME = "taskpad-autosave"

ErrorCallback = Callable[[PersistenceFailure | None], None]
# Called with the failure, or with None after a successful save.


def _report(on_error: ErrorCallback | None, err: PersistenceFailure | None) -> None:
    if on_error is None:
        return
    try:
        on_error(err)
    except Exception:
        logger.exception("Autosave error callback failed.")


class SyncSnapshotWriter:
    def __init__(self, gateway: PersistenceGateway, *, on_error: ErrorCallback | None = None) -> None:
        self._gateway = gateway
        self._on_error = on_error

    def submit(self, tasks: Sequence[Task]) -> None:
        try:
            self._gateway.save(tasks)
        except PersistenceFailure as e:
            logger.error("Autosave failed: %s (%r)", e.message, e.original_error)
            _report(self._on_error, e)
            return
        _report(self._on_error, None)

    def flush(self, timeout: float | None = None) -> bool:
        return True

    def close(self, timeout: float | None = None) -> None:
        return


class BackgroundSnapshotWriter:
    """
    Ordered, coalescing autosave worker.

    submit() never blocks on I/O. flush() waits until the newest submitted
    snapshot has been written (or has failed).
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        on_error: ErrorCallback | None = None,
        name: str = AUTOSAVE_THREAD_NAME,
    ) -> None:
        self._gateway = gateway
        self._on_error = on_error

        self._cond = threading.Condition()
        self._pending: list[Task] | None = None
        self._submitted_seq = 0
        self._done_seq = 0
        self._closing = False

        self._worker = threading.Thread(target=self._run, name=name, daemon=True)
        self._worker.start()
        logger.debug("Autosave worker %s started.", name)

    def submit(self, tasks: Sequence[Task]) -> None:
        with self._cond:
            if self._closing:
                raise RuntimeError("autosave writer is closed")
            self._pending = list(tasks)
            self._submitted_seq += 1
            self._cond.notify_all()

    def _run(self) -> None:
        while True:
            with self._cond:
                while self._pending is None and not self._closing:
                    self._cond.wait()
                if self._pending is None:
                    # closing and drained
                    return
                snapshot = self._pending
                seq = self._submitted_seq
                self._pending = None

            err: PersistenceFailure | None = None
            try:
                self._gateway.save(snapshot)
            except PersistenceFailure as e:
                err = e
                logger.error("Autosave failed: %s (%r)", e.message, e.original_error)
            except Exception as e:
                err = PersistenceFailure("Unexpected autosave error", original_error=e)
                logger.exception("Autosave worker crashed while saving.")

            _report(self._on_error, err)

            with self._cond:
                self._done_seq = seq
                self._cond.notify_all()

    def flush(self, timeout: float | None = None) -> bool:
        with self._cond:
            target = self._submitted_seq
            return self._cond.wait_for(lambda: self._done_seq >= target, timeout=timeout)

    def close(self, timeout: float | None = None) -> None:
        with self._cond:
            if self._closing:
                return
            self._closing = True
            self._cond.notify_all()
        self._worker.join(timeout=timeout)
        if self._worker.is_alive():
            logger.warning("Autosave worker did not stop within %ss.", timeout)
        else:
            logger.debug("Autosave worker stopped.")

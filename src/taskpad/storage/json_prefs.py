# src/taskpad/storage/json_prefs.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path

from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class JsonPrefsStore:
    """
    Preferences-style KeyValueStorage: one JSON object file {key: string}.

    Writes go to a sibling .tmp file and are moved into place with os.replace,
    so readers see either the old file or the new one, never a partial write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info("JsonPrefsStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(
                f"Preferences file {self._path} is unreadable",
                context={"path": str(self._path)},
                original_error=e,
            ) from e
        if not isinstance(data, dict):
            raise StorageError(
                f"Preferences file {self._path} is not a JSON object",
                context={"path": str(self._path)},
            )
        dropped = sorted(str(k) for k, v in data.items() if not isinstance(v, str))
        if dropped:
            logger.warning(
                "Ignoring non-string entries in preferences file %s (not kept on the next write): %s",
                self._path,
                ", ".join(dropped),
            )
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageError as e:
                logger.warning("Rewriting broken preferences file %s: %s", self._path, e.message)
                data = {}
            data[key] = value

            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(OSError):
                # Best-effort: not critical on Windows or restricted FS.
                os.chmod(self._path, 0o600)

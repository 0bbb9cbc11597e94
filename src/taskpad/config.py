# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a local default, so the app runs with no env at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


class StorageBackend(StrEnum):
    JSON = "json"
    SQLITE = "sqlite"
    MEMORY = "memory"  # nothing persisted; demos/tests

    @classmethod
    def parse(cls, raw: str | None) -> StorageBackend:
        if not raw:
            return cls.JSON
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.JSON


class AutosaveMode(StrEnum):
    SYNC = "sync"
    BACKGROUND = "background"

    @classmethod
    def parse(cls, raw: str | None) -> AutosaveMode:
        if not raw:
            return cls.SYNC
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.SYNC


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage_backend: StorageBackend
    storage_key: str
    storage_timeout_seconds: float
    autosave_mode: AutosaveMode

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    prefs_path: Path
    sqlite_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        storage_backend = StorageBackend.parse(os.getenv(_k("STORAGE")))
        storage_key = _env(_k("STORAGE_KEY"), "todo_list").strip() or "todo_list"
        storage_timeout_seconds = _env_float(_k("STORAGE_TIMEOUT"), 30.0)
        autosave_mode = AutosaveMode.parse(os.getenv(_k("AUTOSAVE")))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        prefs_path = _env_path(_k("PREFS_PATH"), data_dir / "todo_prefs.json")
        sqlite_path = _env_path(_k("SQLITE_PATH"), data_dir / "taskpad.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_backend=storage_backend,
            storage_key=storage_key,
            storage_timeout_seconds=storage_timeout_seconds,
            autosave_mode=autosave_mode,
            data_dir=data_dir,
            prefs_path=prefs_path,
            sqlite_path=sqlite_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

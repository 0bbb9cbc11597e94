# src/taskpad/logging_setup.py

"""
Logging for the console app.

The REPL shares stderr with the prompt, so the console handler stays quiet:
- taskpad records at the configured level (Settings.log_level, default WARNING),
- records from the autosave worker thread only at ERROR+ (the REPL already
  prints its own "[STORAGE] ..." line for failed saves),
- third-party and py.warnings records only at ERROR+.

Everything, including per-mutation DEBUG lines and the worker thread name,
goes to a rotating file under Settings.data_dir.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .tasks.autosave import AUTOSAVE_THREAD_NAME

LOG_FILE_NAME = "taskpad.log"
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3


def resolve_level(name: str | int | None, default: int = logging.WARNING) -> int:
    """Map "debug"/"INFO"/20 to a logging level; unknown names give default."""
    if isinstance(name, int):
        return name
    if not name:
        return default
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith("taskpad"):
            return record.levelno >= logging.ERROR
        if record.threadName.startswith(AUTOSAVE_THREAD_NAME):
            return record.levelno >= logging.ERROR
        return True


def setup_logging(
    settings=None,
    *,
    log_dir: str | Path | None = None,
    console_level: int | None = None,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install console + rotating file handlers on the root logger.

    Levels and directory come from settings (log_level, data_dir) unless given
    explicitly. Call once, before the store is built. Returns the log file path.
    """
    if log_dir is None:
        log_dir = getattr(settings, "data_dir", ".local/taskpad")
    if console_level is None:
        console_level = resolve_level(getattr(settings, "log_level", None))

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFilter())
    root.addHandler(ch)

    fh = RotatingFileHandler(
        str(log_file),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file

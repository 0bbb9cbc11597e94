# tests/test_logging_setup.py

from __future__ import annotations

import logging
import threading
from types import SimpleNamespace

import pytest

from taskpad.logging_setup import LOG_FILE_NAME, _ConsoleFilter, resolve_level, setup_logging
from taskpad.tasks.autosave import AUTOSAVE_THREAD_NAME


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int, thread_name: str = "MainThread") -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    record.threadName = thread_name
    return record


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("debug", logging.DEBUG),
        (" Info ", logging.INFO),
        (logging.ERROR, logging.ERROR),
        ("chatty", logging.WARNING),
        (None, logging.WARNING),
    ],
)
def test_resolve_level(value, expected: int) -> None:
    assert resolve_level(value) == expected


def test_console_filter_keeps_autosave_worker_quiet() -> None:
    f = _ConsoleFilter()

    assert f.filter(_record("taskpad.tasks.task_store", logging.INFO))
    assert not f.filter(_record("taskpad.tasks.autosave", logging.WARNING, AUTOSAVE_THREAD_NAME))
    assert f.filter(_record("taskpad.tasks.autosave", logging.ERROR, AUTOSAVE_THREAD_NAME))
    assert not f.filter(_record("urllib3", logging.WARNING))
    assert f.filter(_record("urllib3", logging.ERROR))


def test_setup_logging_uses_settings(tmp_path, restore_root_logging) -> None:
    settings = SimpleNamespace(log_level="info", data_dir=tmp_path / "data")

    log_file = setup_logging(settings)

    assert log_file == tmp_path / "data" / LOG_FILE_NAME
    console = [h for h in restore_root_logging.handlers if type(h) is logging.StreamHandler]
    assert len(console) == 1
    assert console[0].level == logging.INFO


def test_log_file_records_worker_thread_name(tmp_path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path, console_level=logging.CRITICAL)

    t = threading.Thread(
        target=lambda: logging.getLogger("taskpad.tasks.autosave").debug("saved snapshot"),
        name=AUTOSAVE_THREAD_NAME,
    )
    t.start()
    t.join()
    for h in restore_root_logging.handlers:
        h.flush()

    text = log_file.read_text("utf-8")
    assert f"[{AUTOSAVE_THREAD_NAME}] taskpad.tasks.autosave: saved snapshot" in text

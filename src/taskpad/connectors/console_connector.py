# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import format_task, format_task_list
from ..cli.commands import registry as command_registry
from ..core.errors import InvalidInput, PersistenceFailure
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "todo> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    One REPL step. Slash lines go to the command registry, anything else is
    a new task (like typing into the "Enter new task..." field).
    """
    def emit(text: str) -> None:
        # Immediate user-visible feedback for slow operations
        print(f"[{_ts_local()}] {text}", flush=True)

    with state.lock:
        reply = command_registry.handle(state, line, emit=emit)
        if reply is not None:
            return reply
        try:
            task = state.store.add_task(line)
        except InvalidInput:
            return None
        except PersistenceFailure as e:
            return f"Not saved: {e.message}."
        return f"Added: {format_task(task)}"


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskpad"))

    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(format_task_list(state.store.current_tasks()))

    load_error = state.store.load_error
    if state.store.degraded and load_error is not None:
        _print_ts(f"[STORAGE] Saved tasks could not be read; changes are refused until they can: {load_error.message}")
    elif load_error is not None:
        _print_ts(f"[STORAGE] Saved tasks were unreadable, starting empty: {load_error.message}")

    while True:
        try:
            user_input = input(PROMPT).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input)
        except Exception:
            logger.exception("Console command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

        err = state.store.last_persistence_error
        if err is not None:
            _print_ts(f"[STORAGE] Last save failed, changes are only in memory: {err.message}")

    logger.info("Console connector finished.")

# src/taskpad/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import cast

from ..core.errors import InvalidInput, NotFound, PersistenceFailure
from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, str], str]
CommandHandler3 = Callable[[AppState, str, CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

EMPTY_LIST_TEXT = "No tasks added yet!"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers get the raw argument text (inner whitespace untouched).
        InvalidInput / NotFound / PersistenceFailure become user-facing replies.
        """
        if not line.startswith("/"):
            return None

        head, _, rest = line[1:].strip().partition(" ")
        if not head:
            return "Empty command. Use /help to list available commands."

        name = head.lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, rest.strip(), emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, rest.strip())
        except InvalidInput as e:
            return f"Rejected: {e.message}."
        except NotFound as e:
            return f"{e.message}."
        except PersistenceFailure as e:
            return f"Not saved: {e.message}."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other line is added as a new task. /exit quits.")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    mark = "[x]" if task.completed else "[ ]"
    return f"{task.id:>3}. {mark} {task.description}"


def format_task_list(tasks: Sequence[Task]) -> str:
    if not tasks:
        return EMPTY_LIST_TEXT
    return "\n".join(format_task(t) for t in tasks)


def _parse_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise InvalidInput(f"{raw!r} is not a task id") from None


def _split_id(arg_text: str, usage: str) -> tuple[int, str]:
    head, _, rest = arg_text.partition(" ")
    if not head:
        raise InvalidInput(usage)
    return _parse_id(head), rest


def cmd_help(state: AppState, arg_text: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, arg_text: str) -> str:
    return format_task_list(state.store.current_tasks())


def cmd_add(state: AppState, arg_text: str) -> str:
    task = state.store.add_task(arg_text)
    return f"Added: {format_task(task)}"


def cmd_edit(state: AppState, arg_text: str) -> str:
    """/edit ID new text"""
    task_id, text = _split_id(arg_text, "usage /edit ID TEXT")
    task = state.store.edit_task(task_id, text)
    return f"Edited: {format_task(task)}"


def cmd_toggle(state: AppState, arg_text: str) -> str:
    task_id, _ = _split_id(arg_text, "usage /toggle ID")
    task = state.store.toggle_task(task_id)
    return f"{'Done' if task.completed else 'Reopened'}: {format_task(task)}"


def cmd_delete(state: AppState, arg_text: str) -> str:
    task_id, _ = _split_id(arg_text, "usage /delete ID")
    state.store.delete_task(task_id)
    return f"Deleted task {task_id}."


def cmd_status(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    store = state.store
    settings = state.settings
    tasks = store.current_tasks()
    done = sum(1 for t in tasks if t.completed)

    if emit is not None and not store.flush(timeout=5.0):
        emit("[AUTOSAVE] Still writing the latest snapshot...")

    lines = [
        "Status:",
        f"  Storage: {getattr(settings, 'storage_backend', '?')} key={getattr(settings, 'storage_key', '?')}",
        f"  Autosave: {getattr(settings, 'autosave_mode', '?')}",
        f"  Tasks: {len(tasks)} ({done} done), next id {store.next_id}",
    ]
    if store.degraded:
        lines.append("  Changes are refused until the stored list can be read again.")
    if store.load_error is not None:
        lines.append(f"  Load problem: {store.load_error.message}")
    if store.last_persistence_error is not None:
        lines.append(f"  Last save failed: {store.last_persistence_error.message}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add TEXT.")
registry.register("edit", cmd_edit, help_text="Change a task's text: /edit ID TEXT.")
registry.register(
    "toggle", cmd_toggle, help_text="Mark done / not done: /toggle ID.", aliases=["done", "x"]
)
registry.register("delete", cmd_delete, help_text="Remove a task: /delete ID.", aliases=["del", "rm"])
registry.register("status", cmd_status, help_text="Show storage and autosave state.")

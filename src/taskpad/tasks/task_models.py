# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Task:
    """
    A single to-do entry.

    The store mutates description/completed in place inside its own collection;
    everything it hands out is a copy.
    """

    id: int
    description: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        # Field order is part of the snapshot format.
        return {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
        }


def normalize_description(raw: str | None) -> str:
    """Trim surrounding whitespace; empty string means "rejected"."""
    if not raw:
        return ""
    return raw.strip()

# src/todo_vault/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

MAX_DESCRIPTION_BYTES = 500


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    description: str
    is_completed: bool
    created_at: float
    completed_at: float = 0.0


class TaskStats(NamedTuple):
    total: int
    completed: int
    pending: int


@dataclass(slots=True)
class OwnerScope:
    """
    All state kept for one owner.

    - counter: last assigned id (0 before the first task, never decremented)
    - tasks: id -> Task for live tasks only
    - live_ids: live ids in enumeration order (swap-remove on delete)
    """

    counter: int = 0
    tasks: dict[int, Task] = field(default_factory=dict)
    live_ids: list[int] = field(default_factory=list)

    def copy(self) -> OwnerScope:
        # Task is frozen, a shallow copy of the containers is enough.
        return OwnerScope(counter=self.counter, tasks=dict(self.tasks), live_ids=list(self.live_ids))


def description_size(description: str) -> int:
    """Size of a description as stored: UTF-8 byte length, not character count."""
    return len(description.encode("utf-8"))


def is_valid_description(description: str) -> bool:
    if not isinstance(description, str):
        return False
    return 0 < description_size(description) <= MAX_DESCRIPTION_BYTES

# src/todo_vault/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the store.

TaskStore depends on Protocols instead of concrete implementations.
This keeps persistence and event delivery swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_events import TaskEvent
    from ..tasks.task_models import OwnerScope

Clock = Callable[[], float]
# Returns "now" as epoch seconds (time.time by default).


class TaskEventSink(Protocol):
    """
    Receiver of change notifications.

    Called synchronously, once per successful mutation, after the new state
    is visible. Delivery beyond the process (queues, webhooks, audit logs)
    is up to the implementation.
    """

    def publish(self, event: TaskEvent) -> None: ...


class TaskBackend(Protocol):
    """Durable storage for owner scopes (write-through from TaskStore)."""

    def load_all(self) -> dict[str, OwnerScope]: ...

    def save_owner(self, owner: str, scope: OwnerScope) -> None: ...

# src/todo_vault/tasks/task_events.py

from __future__ import annotations

"""
Change notifications emitted by TaskStore.

The store publishes one event per successful mutation into a TaskEventSink.
EventHub is the in-process sink: it fans events out to subscribers in
subscription order. Where the events go next (audit log, queue, websocket)
is decided by whoever subscribes.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskCreated:
    owner: str
    task_id: int
    description: str


@dataclass(frozen=True, slots=True)
class TaskCompleted:
    owner: str
    task_id: int


@dataclass(frozen=True, slots=True)
class TaskDeleted:
    owner: str
    task_id: int


@dataclass(frozen=True, slots=True)
class TaskUpdated:
    owner: str
    task_id: int
    description: str


TaskEvent = Union[TaskCreated, TaskCompleted, TaskDeleted, TaskUpdated]
Subscriber = Callable[[TaskEvent], None]


class EventHub:
    """Synchronous fan-out of task events."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that removes it again."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: TaskEvent) -> None:
        # The mutation is already committed; a broken subscriber must not hide it from the rest.
        for cb in list(self._subscribers):
            try:
                cb(event)
            except Exception:
                logger.exception("Task event subscriber failed event=%s", type(event).__name__)


def log_event(event: TaskEvent) -> None:
    """Subscriber that writes every event to the log."""
    if isinstance(event, (TaskCreated, TaskUpdated)):
        logger.info(
            "%s owner=%s task_id=%s description=%r",
            type(event).__name__,
            event.owner,
            event.task_id,
            event.description,
        )
    else:
        logger.info("%s owner=%s task_id=%s", type(event).__name__, event.owner, event.task_id)

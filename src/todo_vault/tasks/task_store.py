# src/todo_vault/tasks/task_store.py

from __future__ import annotations

import logging
import time
from dataclasses import replace

from ..core.ports import Clock, TaskBackend, TaskEventSink
from .task_errors import AlreadyCompleted, InvalidDescription, TaskNotFound
from .task_events import TaskCompleted, TaskCreated, TaskDeleted, TaskEvent, TaskUpdated
from .task_models import (
    MAX_DESCRIPTION_BYTES,
    OwnerScope,
    Task,
    TaskStats,
    description_size,
    is_valid_description,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Per-owner task store.

    State is partitioned by owner key; every operation takes the owner
    explicitly and only ever touches that owner's scope. Task ids are
    allocated per owner from a counter that never goes back, so ids are
    never reused, even after deletion.

    Atomicity:
    - all preconditions are checked before anything changes,
    - writes are applied to a copy of the owner scope, persisted through the
      backend (if any), then swapped in,
    - the event is published only after the new state is visible.

    Thread-safety:
    - none; the host must serialize calls for the same owner.
    """

    def __init__(
        self,
        *,
        backend: TaskBackend | None = None,
        sink: TaskEventSink | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._backend = backend
        self._sink = sink
        self._clock = clock
        self._owners: dict[str, OwnerScope] = backend.load_all() if backend is not None else {}
        logger.info(
            "TaskStore ready backend=%s owners=%s",
            type(backend).__name__ if backend is not None else "memory",
            len(self._owners),
        )

    @property
    def sink(self) -> TaskEventSink | None:
        return self._sink

    # ---- low-level helpers ----

    @staticmethod
    def _check_owner(owner: str) -> None:
        if not isinstance(owner, str) or not owner.strip():
            raise ValueError("owner is required")

    @staticmethod
    def _check_description(description: str) -> None:
        if not is_valid_description(description):
            size = description_size(description) if isinstance(description, str) else 0
            raise InvalidDescription(size, MAX_DESCRIPTION_BYTES)

    def _scope(self, owner: str) -> OwnerScope:
        self._check_owner(owner)
        scope = self._owners.get(owner)
        return scope if scope is not None else OwnerScope()

    def _require_task(self, owner: str, task_id: int) -> Task:
        scope = self._scope(owner)
        # bool is an int subclass and True == 1; only real ints name a task.
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise TaskNotFound(owner, task_id)
        task = scope.tasks.get(task_id)
        if task is None:
            raise TaskNotFound(owner, task_id)
        return task

    def _commit(self, owner: str, scope: OwnerScope, event: TaskEvent) -> None:
        if self._backend is not None:
            self._backend.save_owner(owner, scope)
        self._owners[owner] = scope
        if self._sink is None:
            return
        # State is already committed at this point; sink failures are only logged.
        try:
            self._sink.publish(event)
        except Exception:
            logger.exception(
                "Task event sink failed event=%s owner=%s task_id=%s",
                type(event).__name__,
                owner,
                event.task_id,
            )

    # ---- writes ----

    def create_task(self, owner: str, description: str) -> int:
        self._check_owner(owner)
        self._check_description(description)

        existing = self._owners.get(owner)
        scope = existing.copy() if existing is not None else OwnerScope()
        scope.counter += 1
        task_id = scope.counter
        scope.tasks[task_id] = Task(
            id=task_id,
            description=description,
            is_completed=False,
            created_at=self._clock(),
        )
        scope.live_ids.append(task_id)

        self._commit(owner, scope, TaskCreated(owner=owner, task_id=task_id, description=description))
        logger.debug("Task created owner=%s id=%s", owner, task_id)
        return task_id

    def complete_task(self, owner: str, task_id: int) -> None:
        task = self._require_task(owner, task_id)
        if task.is_completed:
            raise AlreadyCompleted(owner, task_id)

        scope = self._owners[owner].copy()
        scope.tasks[task_id] = replace(task, is_completed=True, completed_at=self._clock())

        self._commit(owner, scope, TaskCompleted(owner=owner, task_id=task_id))
        logger.debug("Task completed owner=%s id=%s", owner, task_id)

    def update_task(self, owner: str, task_id: int, new_description: str) -> None:
        task = self._require_task(owner, task_id)
        if task.is_completed:
            raise AlreadyCompleted(owner, task_id)
        self._check_description(new_description)

        scope = self._owners[owner].copy()
        scope.tasks[task_id] = replace(task, description=new_description)

        self._commit(
            owner, scope, TaskUpdated(owner=owner, task_id=task_id, description=new_description)
        )
        logger.debug("Task updated owner=%s id=%s", owner, task_id)

    def delete_task(self, owner: str, task_id: int) -> None:
        self._require_task(owner, task_id)

        scope = self._owners[owner].copy()
        # Swap-remove: the last live id takes the removed slot.
        idx = scope.live_ids.index(task_id)
        last = scope.live_ids.pop()
        if idx < len(scope.live_ids):
            scope.live_ids[idx] = last
        del scope.tasks[task_id]

        self._commit(owner, scope, TaskDeleted(owner=owner, task_id=task_id))
        logger.debug("Task deleted owner=%s id=%s live=%s", owner, task_id, len(scope.live_ids))

    # ---- reads ----

    def get_task(self, owner: str, task_id: int) -> Task:
        # Task is frozen, handing out the stored instance cannot leak mutation.
        return self._require_task(owner, task_id)

    def get_all_task_ids(self, owner: str) -> list[int]:
        return list(self._scope(owner).live_ids)

    def get_all_tasks(self, owner: str) -> list[Task]:
        scope = self._scope(owner)
        return [scope.tasks[i] for i in scope.live_ids]

    def get_completed_tasks(self, owner: str) -> list[Task]:
        return [t for t in self.get_all_tasks(owner) if t.is_completed]

    def get_pending_tasks(self, owner: str) -> list[Task]:
        return [t for t in self.get_all_tasks(owner) if not t.is_completed]

    def get_task_count(self, owner: str) -> int:
        return len(self._scope(owner).live_ids)

    def get_task_stats(self, owner: str) -> TaskStats:
        tasks = self.get_all_tasks(owner)
        completed = sum(1 for t in tasks if t.is_completed)
        return TaskStats(total=len(tasks), completed=completed, pending=len(tasks) - completed)

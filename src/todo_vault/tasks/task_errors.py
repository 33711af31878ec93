# src/todo_vault/tasks/task_errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for every domain error raised by TaskStore."""


class InvalidDescription(TaskStoreError, ValueError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        if size == 0:
            msg = "description is required"
        else:
            msg = f"description is {size} bytes, limit is {limit}"
        super().__init__(msg)


class TaskNotFound(TaskStoreError, LookupError):
    def __init__(self, owner: str, task_id: int) -> None:
        self.owner = owner
        self.task_id = task_id
        super().__init__(f"task {task_id} not found for owner {owner!r}")


class AlreadyCompleted(TaskStoreError):
    def __init__(self, owner: str, task_id: int) -> None:
        self.owner = owner
        self.task_id = task_id
        super().__init__(f"task {task_id} of owner {owner!r} is already completed")

# src/todo_vault/__init__.py

"""Per-owner task-list store."""

from .tasks.task_errors import AlreadyCompleted, InvalidDescription, TaskNotFound, TaskStoreError
from .tasks.task_models import Task, TaskStats
from .tasks.task_store import TaskStore

__all__ = [
    "AlreadyCompleted",
    "InvalidDescription",
    "Task",
    "TaskNotFound",
    "TaskStats",
    "TaskStore",
    "TaskStoreError",
]

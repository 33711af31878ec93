# src/todo_vault/bootstrap.py

"""
Composition root.

- loads settings once,
- ensures local (gitignored) directories exist,
- configures logging from settings,
- wires the persistence backend and event hub into a TaskStore.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import get_settings
from .core.ports import TaskEventSink
from .logging_setup import setup_logging
from .tasks.task_db import SqliteTaskBackend
from .tasks.task_events import EventHub, log_event
from .tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(settings) -> Path:
    """Install console + file logging, console level taken from settings.log_level."""
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    log_dir = getattr(settings, "data_dir", ".local/todo_vault")
    return setup_logging(log_dir=log_dir, console_level=console_level)


def build_event_hub(settings) -> EventHub:
    hub = EventHub()
    if getattr(settings, "log_events", True):
        hub.subscribe(log_event)
    return hub


def create_task_store(*, settings=None, sink: TaskEventSink | None = None) -> TaskStore:
    """
    Build a TaskStore from the provided settings.

    If settings is None, falls back to get_settings().
    If sink is None, an EventHub is created (with the log subscriber when
    settings.log_events is on); reach it through store.sink to subscribe more.
    """
    if settings is None:
        settings = get_settings()

    backend = None
    if settings.persist:
        _ensure_local_dirs(settings)
        backend = SqliteTaskBackend(settings.tasks_db_path)
    else:
        logger.warning("Persistence disabled: tasks live in memory only.")

    if sink is None:
        sink = build_event_hub(settings)

    return TaskStore(backend=backend, sink=sink)


def start(*, settings=None, sink: TaskEventSink | None = None) -> TaskStore:
    """
    Process entry for a hosting layer: configure logging first, then build the store.

    Call this ONCE; use create_task_store() directly when logging is set up elsewhere.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings)
    logger.info("Starting %s...", getattr(settings, "app_name", "todo_vault"))
    return create_task_store(settings=settings, sink=sink)

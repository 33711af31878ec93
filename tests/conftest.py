# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_vault.tasks.task_store import TaskStore

from .fakes import FakeClock, RecordingSink


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="todo_vault-test",
        log_level="DEBUG",
        log_events=True,
        persist=True,
        data_dir=data_dir,
        tasks_db_path=data_dir / "tasks.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def store(clock: FakeClock, sink: RecordingSink) -> TaskStore:
    """In-memory TaskStore with a deterministic clock and a recording sink."""
    return TaskStore(sink=sink, clock=clock)

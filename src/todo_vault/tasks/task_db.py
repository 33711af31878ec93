# src/todo_vault/tasks/task_db.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import OwnerScope, Task

logger = logging.getLogger(__name__)


class SqliteTaskBackend:
    """
    SQLite persistence for TaskStore.

    Layout (one row set per owner):
    - owners:   owner -> counter
    - tasks:    (owner, id) -> task fields
    - live_ids: (owner, position) -> task id, keeps enumeration order

    The schema is migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteTaskBackend ready db=%s owners=%s", self._db_path, self.count_owners())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS owners (
                    owner TEXT PRIMARY KEY,
                    counter INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    owner TEXT NOT NULL,
                    id INTEGER NOT NULL,
                    description TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    completed_at REAL NOT NULL DEFAULT 0,
                    PRIMARY KEY (owner, id)
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS live_ids (
                    owner TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    task_id INTEGER NOT NULL,
                    PRIMARY KEY (owner, position)
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskBackend migration: added column %s", name)

            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("completed_at", "REAL NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            description=str(row["description"]),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
            completed_at=float(row["completed_at"] or 0.0),
        )

    # ---- public API ----

    def count_owners(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM owners").fetchone()
            return int(n)
        finally:
            conn.close()

    def load_all(self) -> dict[str, OwnerScope]:
        conn = self._get_conn()
        try:
            scopes: dict[str, OwnerScope] = {
                str(row["owner"]): OwnerScope(counter=int(row["counter"]))
                for row in conn.execute("SELECT owner, counter FROM owners")
            }

            for row in conn.execute("SELECT * FROM tasks"):
                scope = scopes.get(str(row["owner"]))
                if scope is None:
                    logger.warning(
                        "Skipping task row without owner row owner=%s id=%s", row["owner"], row["id"]
                    )
                    continue
                task = self._row_to_task(row)
                scope.tasks[task.id] = task

            for row in conn.execute("SELECT owner, task_id FROM live_ids ORDER BY owner, position"):
                scope = scopes.get(str(row["owner"]))
                if scope is not None:
                    scope.live_ids.append(int(row["task_id"]))

            for owner, scope in scopes.items():
                if set(scope.live_ids) != set(scope.tasks) or len(scope.live_ids) != len(scope.tasks):
                    raise ValueError(f"corrupt task state for owner {owner!r}: live ids do not match tasks")

            logger.debug(
                "Loaded task state owners=%s tasks=%s",
                len(scopes),
                sum(len(s.tasks) for s in scopes.values()),
            )
            return scopes
        finally:
            conn.close()

    def save_owner(self, owner: str, scope: OwnerScope) -> None:
        """Replace everything stored for one owner in a single transaction."""
        conn = self._get_conn()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO owners(owner, counter) VALUES (?, ?)
                    ON CONFLICT(owner) DO UPDATE SET counter = excluded.counter
                    """,
                    (owner, int(scope.counter)),
                )
                conn.execute("DELETE FROM tasks WHERE owner = ?", (owner,))
                conn.execute("DELETE FROM live_ids WHERE owner = ?", (owner,))
                conn.executemany(
                    """
                    INSERT INTO tasks(owner, id, description, is_completed, created_at, completed_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            owner,
                            t.id,
                            t.description,
                            int(t.is_completed),
                            float(t.created_at),
                            float(t.completed_at),
                        )
                        for t in scope.tasks.values()
                    ],
                )
                conn.executemany(
                    "INSERT INTO live_ids(owner, position, task_id) VALUES (?, ?, ?)",
                    [(owner, pos, task_id) for pos, task_id in enumerate(scope.live_ids)],
                )
            logger.debug(
                "Saved owner scope owner=%s counter=%s live=%s", owner, scope.counter, len(scope.live_ids)
            )
        finally:
            conn.close()

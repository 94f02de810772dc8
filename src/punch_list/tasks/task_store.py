# src/punch_list/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import re
import sqlite3
import time
from collections.abc import Iterator
from pathlib import Path

from .task_models import Task, iso_to_ts

logger = logging.getLogger(__name__)

# Minimum step applied to updatedAt so that it strictly advances per row,
# kept above the microsecond resolution of the wire format.
_UPDATED_AT_STEP = 0.00001

# "2024-01-01 10:00:00.123 +00:00": the offset is separated by a space.
_SPACED_OFFSET = re.compile(r"\s+([+-]\d{2}:?\d{2})$")


class TaskStoreError(RuntimeError):
    """Storage-layer fault (connection, disk or constraint failure)."""


def _db_ts(raw: object) -> float:
    """
    Timestamp column -> epoch seconds.

    Rows written here hold REAL epoch seconds. Tables created by the earlier
    Sequelize backend hold DATETIME text, which is parsed as UTC when it carries
    no offset.
    """
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    text = _SPACED_OFFSET.sub(r"\1", str(raw).strip())
    try:
        return iso_to_ts(text)
    except ValueError:
        logger.warning("Unreadable timestamp in tasks table: %r", raw)
        return 0.0


class TaskStore:
    """
    SQLite task store.

    The schema is simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Columns follow the original table: id, task, complete, createdAt, updatedAt.
    Ids come from AUTOINCREMENT, so they are never reused after deletion
    (only reset() starts a new id sequence).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "database.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except TaskStoreError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

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

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Short-lived connection; sqlite errors surface as TaskStoreError."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise TaskStoreError(f"cannot open task database {self._db_path}: {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            raise TaskStoreError(str(e)) from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task TEXT NOT NULL,
                    complete INTEGER NOT NULL DEFAULT 0,
                    createdAt REAL NOT NULL,
                    updatedAt REAL NOT NULL
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
                logger.info("TaskStore migration: added column %s", name)

            add_col("task", "TEXT NOT NULL DEFAULT ''")
            add_col("complete", "INTEGER NOT NULL DEFAULT 0")
            add_col("createdAt", "REAL NOT NULL DEFAULT 0")
            add_col("updatedAt", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_complete ON tasks(complete, id)")

            conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            task=str(row["task"] or ""),
            complete=bool(row["complete"]),
            created_at=_db_ts(row["createdAt"]),
            updated_at=_db_ts(row["updatedAt"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._connect() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def get_task(self, task_id: int) -> Task | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None

    def list_by_completion(self, complete: bool) -> list[Task]:
        """All tasks whose completion flag matches, oldest first (ascending id)."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE complete = ? ORDER BY id ASC",
                (1 if complete else 0,),
            ).fetchall()
            return [self._row_to_task(r) for r in rows]

    def create_task(self, task: str, complete: bool = False) -> Task:
        """Insert a new row. The text is stored verbatim (no trimming, no validation)."""
        now = time.time()
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks(task, complete, createdAt, updatedAt)
                VALUES (?, ?, ?, ?)
                """,
                (task, 1 if complete else 0, now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise TaskStoreError("SQLite did not return lastrowid for tasks insert")

        task_id = int(rowid)
        logger.debug("Task added id=%s complete=%s", task_id, complete)
        return Task(
            id=task_id,
            task=task,
            complete=bool(complete),
            created_at=now,
            updated_at=now,
        )

    def _update_field(self, task_id: int, column: str, value: object) -> bool:
        with self._connect() as conn:
            cur = conn.execute(
                f"""
                UPDATE tasks
                SET {column} = ?,
                    updatedAt = MAX(?, updatedAt + ?)
                WHERE id = ?
                """,
                (value, time.time(), _UPDATED_AT_STEP, int(task_id)),
            )
            conn.commit()
            return cur.rowcount == 1

    def update_text(self, task_id: int, text: str) -> bool:
        """
        Replace the task text and refresh updatedAt.

        Returns False (and changes nothing) when the id does not exist.
        """
        return self._update_field(task_id, "task", text)

    def update_completion(self, task_id: int, complete: bool) -> bool:
        """Set the completion flag and refresh updatedAt; False if the id is unknown."""
        return self._update_field(task_id, "complete", 1 if complete else 0)

    def delete_by_id(self, task_id: int) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1

    def delete_where_completed(self) -> int:
        """Remove every completed task. Returns how many rows were removed."""
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE complete = 1")
            conn.commit()
            removed = int(cur.rowcount)
        logger.debug("Cleared completed tasks removed=%s", removed)
        return removed

    def reset(self, seed_text: str | None = None) -> None:
        """
        Truncate the table and restart ids at 1.

        This wipes the store and begins a new store lifetime: ids are unique
        only within one lifetime, so ids from before the reset will be handed
        out again. Optionally inserts one bootstrap task so the new store is
        not empty.
        """
        with self._connect() as conn:
            conn.execute("DELETE FROM tasks")
            # sqlite_sequence only exists once an AUTOINCREMENT row was inserted.
            with contextlib.suppress(sqlite3.OperationalError):
                conn.execute("DELETE FROM sqlite_sequence WHERE name = 'tasks'")
            conn.commit()
        logger.info("TaskStore reset db=%s", self._db_path)

        if seed_text is not None:
            self.create_task(seed_text)

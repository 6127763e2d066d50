from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Iterator, List, Tuple

from .backends import Backend
from .errors import NotFound, StorageUnavailable
from .models import TodoRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    text: str = "text"
    done: str = "done"


_COLS = _Cols()


class SQLiteBackend(Backend):
    """
    Lightweight SQLite backend implementing the Backend contract.

    Text uniqueness is not declared on the table; TodoStore owns that
    invariant. Every sqlite3 error surfaces as StorageUnavailable.
    """

    name = "sqlite"

    def __init__(self, db_path: str) -> None:
        try:
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create directory for {db_path}", cause=e) from e
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path, timeout=10.0)
        except sqlite3.Error as e:
            logger.warning("Cannot open sqlite database %s: %s", self._db_path, e)
            raise StorageUnavailable(f"Cannot open {self._db_path}", cause=e) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.warning("sqlite operation failed on %s: %s", self._db_path, e)
            raise StorageUnavailable(str(e), cause=e) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.text} TEXT NOT NULL,
                    {_COLS.done} INTEGER NOT NULL DEFAULT 0
                )
                """
            )

    def _row_to_record(self, row: sqlite3.Row) -> TodoRecord:
        return {
            "id": str(row[_COLS.id]),
            "text": str(row[_COLS.text]),
            "done": bool(row[_COLS.done]),
        }

    def put(self, todo_id: str, record: TodoRecord) -> None:
        # Upsert keeps the original rowid, so scan order stays insertion order
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.text}, {_COLS.done})
                VALUES (?, ?, ?)
                ON CONFLICT({_COLS.id}) DO UPDATE SET
                    {_COLS.text} = excluded.{_COLS.text},
                    {_COLS.done} = excluded.{_COLS.done}
                """,
                (todo_id, record["text"], 1 if record["done"] else 0),
            )

    def get(self, todo_id: str) -> TodoRecord:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()
        if row is None:
            raise NotFound(todo_id)
        return self._row_to_record(row)

    def delete(self, todo_id: str) -> None:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            deleted = cur.rowcount > 0
        if not deleted:
            raise NotFound(todo_id)

    def scan(self) -> Iterator[Tuple[str, TodoRecord]]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY rowid").fetchall()
        items: List[Tuple[str, TodoRecord]] = []
        for row in rows:
            record = self._row_to_record(row)
            items.append((record["id"], record))
        return iter(items)

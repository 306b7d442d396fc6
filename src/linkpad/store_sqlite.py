"""Persistent page store backed by SQLite — survives process restarts.

Drop-in replacement for PageStore when you need durability.

Usage:
    store = SqlitePageStore("qkrsai", db_path="~/.linkpad/pages.db")
    # Same API as PageStore: get, write, subscribe, etc.

Rows are scoped by namespace, so several pads can share one file.
Subscribers are notified in-process only.
"""

from __future__ import annotations
import logging
import sqlite3
import time
from pathlib import Path

from .errors import StoreError
from .store import Listener, Subscribers, Unsubscribe
from .types import PageData

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "qkrsai"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pages (
    namespace TEXT NOT NULL,
    page_id TEXT NOT NULL,
    content TEXT NOT NULL,
    updated_at REAL NOT NULL,
    PRIMARY KEY (namespace, page_id)
);
"""


class SqlitePageStore:
    """Persistent page store."""

    __slots__ = ("_namespace", "_db", "_subscribers")

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        *,
        db_path: str | Path = "pages.db",
    ) -> None:
        self._namespace = namespace
        db_path = Path(db_path).expanduser()
        if str(db_path) != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._db = sqlite3.connect(str(db_path), check_same_thread=False)
            self._db.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open {db_path}: {e}") from e
        self._subscribers = Subscribers()

    @property
    def namespace(self) -> str:
        return self._namespace

    def get(self, page_id: str) -> str:
        data = self.get_data(page_id)
        return data.content if data else ""

    def get_data(self, page_id: str) -> PageData | None:
        try:
            row = self._db.execute(
                "SELECT content, updated_at FROM pages WHERE namespace = ? AND page_id = ?",
                (self._namespace, page_id),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(str(e), page_id) from e
        if row is None:
            return None
        return PageData(content=row[0], updated_at=row[1])

    def write(self, page_id: str, content: str) -> None:
        try:
            self._db.execute(
                "INSERT OR REPLACE INTO pages (namespace, page_id, content, updated_at) "
                "VALUES (?, ?, ?, ?)",
                (self._namespace, page_id, content, time.time()),
            )
            self._db.commit()
        except sqlite3.Error as e:
            logger.error("failed to write page %r: %s", page_id, e)
            raise StoreError(str(e), page_id) from e
        logger.debug("wrote page %r (%d chars)", page_id, len(content))
        self._subscribers.notify(page_id, content)

    def subscribe(self, page_id: str, callback: Listener) -> Unsubscribe:
        unsubscribe = self._subscribers.add(page_id, callback)
        callback(self.get(page_id))
        return unsubscribe

    def _query(self, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            return self._db.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def pages(self) -> list[str]:
        rows = self._query(
            "SELECT page_id FROM pages WHERE namespace = ? ORDER BY page_id",
            (self._namespace,),
        )
        return [r[0] for r in rows]

    def delete(self, page_id: str) -> None:
        try:
            cur = self._db.execute(
                "DELETE FROM pages WHERE namespace = ? AND page_id = ?",
                (self._namespace, page_id),
            )
            self._db.commit()
        except sqlite3.Error as e:
            raise StoreError(str(e), page_id) from e
        if cur.rowcount:
            self._subscribers.notify(page_id, "")

    def subscriber_count(self, page_id: str) -> int:
        return self._subscribers.count(page_id)

    @property
    def size(self) -> int:
        rows = self._query(
            "SELECT COUNT(*) FROM pages WHERE namespace = ?", (self._namespace,)
        )
        return rows[0][0]

    def list_namespaces(self) -> list[str]:
        """List all namespaces in the database."""
        rows = self._query("SELECT DISTINCT namespace FROM pages ORDER BY namespace")
        return [r[0] for r in rows]

    def close(self) -> None:
        self._db.close()

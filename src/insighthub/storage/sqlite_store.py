"""Summary: SQLite storage implementation for InsightHub.

Importance: Provides local-first options, transients, and site content in a single file.
Alternatives: Use an ORM or an external database immediately.
"""

from __future__ import annotations

import json
import sqlite3
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from insighthub.errors import StoreError
from insighthub.models import PostType
from insighthub.storage.base import Clock, ContentStore, OptionStore, TransientStore


DEFAULT_POST_TYPES = (
    PostType(name="post", label="Post"),
    PostType(name="page", label="Page"),
)


class SqliteStore(ContentStore):
    """Summary: SQLite-backed storage for InsightHub.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use Postgres and SQLAlchemy from day one.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready for options, transients, and counts.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS options (
                    option_key TEXT PRIMARY KEY,
                    option_value TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS transients (
                    transient_key TEXT PRIMARY KEY,
                    transient_value TEXT NOT NULL,
                    expires_at REAL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS post_types (
                    name TEXT PRIMARY KEY,
                    label TEXT NOT NULL,
                    public INTEGER NOT NULL DEFAULT 1
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS posts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    post_type TEXT NOT NULL,
                    status TEXT NOT NULL,
                    title TEXT,
                    created_at INTEGER NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS comments (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    post_id INTEGER,
                    status TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS terms (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    taxonomy TEXT NOT NULL,
                    name TEXT NOT NULL,
                    UNIQUE(taxonomy, name)
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    display_name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS orders (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    status TEXT NOT NULL,
                    total REAL NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """
            )
            cursor.executemany(
                "INSERT OR IGNORE INTO post_types (name, label, public) VALUES (?, ?, ?)",
                [(item.name, item.label, int(item.public)) for item in DEFAULT_POST_TYPES],
            )
            connection.commit()

    def import_content(self, payload: dict[str, Any]) -> dict[str, int]:
        """Summary: Load site content from a JSON-style payload.

        Importance: Enables deterministic demos and tests of the dashboard counts.
        Alternatives: Require a live CMS database to read from.
        """

        imported = {"post_types": 0, "posts": 0, "comments": 0, "terms": 0, "users": 0, "orders": 0}
        with self._connection() as connection:
            cursor = connection.cursor()
            for item in payload.get("post_types", []):
                cursor.execute(
                    "INSERT OR REPLACE INTO post_types (name, label, public) VALUES (?, ?, ?)",
                    (item["name"], item.get("label") or item["name"], int(item.get("public", True))),
                )
                imported["post_types"] += 1
            for item in payload.get("posts", []):
                cursor.execute(
                    "INSERT INTO posts (post_type, status, title, created_at) VALUES (?, ?, ?, ?)",
                    (
                        item.get("post_type", "post"),
                        item.get("status", "publish"),
                        item.get("title"),
                        _to_timestamp(item["created_at"]),
                    ),
                )
                imported["posts"] += 1
            for item in payload.get("comments", []):
                cursor.execute(
                    "INSERT INTO comments (post_id, status, created_at) VALUES (?, ?, ?)",
                    (item.get("post_id"), item.get("status", "approved"), _to_timestamp(item["created_at"])),
                )
                imported["comments"] += 1
            for item in payload.get("terms", []):
                cursor.execute(
                    "INSERT OR IGNORE INTO terms (taxonomy, name) VALUES (?, ?)",
                    (item["taxonomy"], item["name"]),
                )
                imported["terms"] += cursor.rowcount
            for item in payload.get("users", []):
                cursor.execute(
                    "INSERT OR IGNORE INTO users (display_name, email) VALUES (?, ?)",
                    (item.get("display_name") or item["email"], item["email"]),
                )
                imported["users"] += cursor.rowcount
            for item in payload.get("orders", []):
                cursor.execute(
                    "INSERT INTO orders (status, total, created_at) VALUES (?, ?, ?)",
                    (item["status"], float(item["total"]), _to_timestamp(item["created_at"])),
                )
                imported["orders"] += 1
            connection.commit()
        return imported

    def count_published(self, post_type: str) -> int:
        return self._scalar(
            "SELECT COUNT(*) FROM posts WHERE post_type = ? AND status = 'publish'",
            (post_type,),
        )

    def count_published_since(self, post_type: str, since: int) -> int:
        return self._scalar(
            """
            SELECT COUNT(*) FROM posts
            WHERE post_type = ? AND status = 'publish' AND created_at >= ?
            """,
            (post_type, since),
        )

    def count_approved_comments(self, since: int | None = None) -> int:
        if since is None:
            return self._scalar("SELECT COUNT(*) FROM comments WHERE status = 'approved'", ())
        return self._scalar(
            "SELECT COUNT(*) FROM comments WHERE status = 'approved' AND created_at >= ?",
            (since,),
        )

    def count_terms(self, taxonomy: str) -> int:
        return self._scalar("SELECT COUNT(*) FROM terms WHERE taxonomy = ?", (taxonomy,))

    def count_users(self) -> int:
        return self._scalar("SELECT COUNT(*) FROM users", ())

    def list_post_types(self) -> list[PostType]:
        """Summary: List public post types.

        Importance: Drives the per-type totals table on the dashboard.
        Alternatives: Derive types from distinct values in the posts table.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT name, label, public FROM post_types WHERE public = 1 ORDER BY rowid")
            rows = cursor.fetchall()
        return [PostType(name=row[0], label=row[1], public=bool(row[2])) for row in rows]

    def has_orders(self) -> bool:
        return self._scalar("SELECT COUNT(*) FROM orders", ()) > 0

    def order_totals(self, statuses: Iterable[str], since: int) -> tuple[int, float]:
        """Summary: Aggregate orders for the given statuses after a timestamp.

        Importance: Supports the optional e-commerce card without loading every order.
        Alternatives: Load order rows and sum in Python.
        """

        status_list = list(statuses)
        if not status_list:
            return 0, 0.0
        placeholders = ", ".join("?" for _ in status_list)
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"""
                SELECT COUNT(*), COALESCE(SUM(total), 0) FROM orders
                WHERE status IN ({placeholders}) AND created_at > ?
                """,
                (*status_list, since),
            )
            row = cursor.fetchone()
        if not row:
            return 0, 0.0
        return int(row[0] or 0), float(row[1] or 0.0)

    def _scalar(self, query: str, params: tuple[Any, ...]) -> int:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(query, params)
            row = cursor.fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly and driver errors are wrapped.
        Alternatives: Keep a single long-lived connection.
        """

        try:
            connection = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StoreError(f"Unable to open {self._db_path}: {exc}") from exc
        try:
            yield connection
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        finally:
            connection.close()


class SqliteOptionStore(OptionStore):
    """Summary: Option store persisted in the SQLite options table.

    Importance: Keeps connection records and scheduled events across restarts.
    Alternatives: Write options to a JSON file.
    """

    def __init__(self, store: SqliteStore) -> None:
        self._store = store

    def get(self, key: str, default: Any = None) -> Any:
        with self._store._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT option_value FROM options WHERE option_key = ?", (key,))
            row = cursor.fetchone()
        if not row:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        with self._store._connection() as connection:
            connection.execute(
                """
                INSERT INTO options (option_key, option_value) VALUES (?, ?)
                ON CONFLICT(option_key) DO UPDATE SET option_value = excluded.option_value
                """,
                (key, json.dumps(value)),
            )
            connection.commit()

    def delete(self, key: str) -> None:
        with self._store._connection() as connection:
            connection.execute("DELETE FROM options WHERE option_key = ?", (key,))
            connection.commit()


class SqliteTransientStore(TransientStore):
    """Summary: Transient store persisted in the SQLite transients table.

    Importance: Shares expiring state between the web process and cron runs.
    Alternatives: Use Redis or memcached for expiring keys.
    """

    def __init__(self, store: SqliteStore, clock: Clock = time.time) -> None:
        self._store = store
        self._clock = clock

    def get(self, key: str, default: Any = None) -> Any:
        with self._store._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "SELECT transient_value, expires_at FROM transients WHERE transient_key = ?",
                (key,),
            )
            row = cursor.fetchone()
            if not row:
                return default
            if row[1] is not None and row[1] <= self._clock():
                cursor.execute("DELETE FROM transients WHERE transient_key = ?", (key,))
                connection.commit()
                return default
        return json.loads(row[0])

    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        with self._store._connection() as connection:
            connection.execute(
                """
                INSERT INTO transients (transient_key, transient_value, expires_at) VALUES (?, ?, ?)
                ON CONFLICT(transient_key) DO UPDATE SET
                    transient_value = excluded.transient_value,
                    expires_at = excluded.expires_at
                """,
                (key, json.dumps(value), expires_at),
            )
            connection.commit()

    def delete(self, key: str) -> None:
        with self._store._connection() as connection:
            connection.execute("DELETE FROM transients WHERE transient_key = ?", (key,))
            connection.commit()


def _to_timestamp(value: str | int | float) -> int:
    """Summary: Normalize ISO strings or epoch numbers to unix seconds.

    Importance: Lets fixtures use readable dates while queries compare integers.
    Alternatives: Store ISO strings and compare lexically.
    """

    if isinstance(value, (int, float)):
        return int(value)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


from __future__ import annotations

import os
import sqlite3
import threading
from typing import Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        """Return the stored string for key, or None."""

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def warmup(self) -> None: ...

    def close(self) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def warmup(self) -> None:
        return None

    def close(self) -> None:
        return None


class SqliteKeyValueStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        self._conn = conn
        return conn

    def warmup(self) -> None:
        with self._lock:
            self._get_connection()

    def get(self, key: str) -> str | None:
        with self._lock:
            row = self._get_connection().execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._get_connection().execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )

    def remove(self, key: str) -> None:
        with self._lock:
            self._get_connection().execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

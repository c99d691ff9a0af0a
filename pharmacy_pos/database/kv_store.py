"""
database/kv_store.py

Small string key/value storage used for local caches.

Public API
----------
- KeyValueStore            protocol: get(key) -> str | None, set(key, value) -> None
- SqliteKeyValueStore      persisted in the app database (kv_store table)
- MemoryKeyValueStore      in-process dict, for tests and throwaway sessions
"""
from __future__ import annotations

import sqlite3
import threading
from typing import Dict, Optional, Protocol

from ..constants import KV_TABLE
from .schema import apply_schema

__all__ = ["KeyValueStore", "SqliteKeyValueStore", "MemoryKeyValueStore"]


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class SqliteKeyValueStore:
    """
    Thin data-access layer over the kv_store table.

    The connection may be shared with a worker thread (payment status refresh
    runs on the Qt thread pool), so every statement goes through one lock.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._lock = threading.Lock()
        with self._lock:
            apply_schema(self.conn)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            row = self.conn.execute(
                f"SELECT value FROM {KV_TABLE} WHERE key = ?;", (key,)
            ).fetchone()
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.conn.execute(
                f"""
                INSERT INTO {KV_TABLE}(key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at;
                """,
                (key, value),
            )
            self.conn.commit()


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

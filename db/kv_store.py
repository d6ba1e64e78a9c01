from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Optional


class StoreError(Exception):
    """Raised when the backing store cannot complete an operation."""


class KVStore:
    """String-keyed document store: get, set, delete and prefix scan, nothing else.

    There are no transactions. Concurrent writers to the same key race and the
    last ``set`` wins; callers that touch several keys must treat the sequence
    as best effort.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def scan_by_prefix(self, prefix: str) -> List[Any]:
        raise NotImplementedError


class SQLiteStore(KVStore):
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, key: str) -> Optional[Any]:
        try:
            row = self.conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"get {key!r} failed: {exc}") from exc
        if not row:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        try:
            self.conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, json.dumps(value)),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"set {key!r} failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"delete {key!r} failed: {exc}") from exc

    def scan_by_prefix(self, prefix: str) -> List[Any]:
        # substr() rather than LIKE: LIKE is case-insensitive and treats % and _ as wildcards
        try:
            rows = self.conn.execute(
                "SELECT value FROM kv_store WHERE substr(key, 1, ?) = ?",
                (len(prefix), prefix),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"scan {prefix!r} failed: {exc}") from exc
        return [json.loads(row[0]) for row in rows]


class MemoryStore(KVStore):
    """Process-local store; values are copied through JSON so callers never share references."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def scan_by_prefix(self, prefix: str) -> List[Any]:
        return [json.loads(raw) for key, raw in list(self._data.items()) if key.startswith(prefix)]

    def clear(self) -> None:
        self._data.clear()

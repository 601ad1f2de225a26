"""SQLite-backed implementation of ``SettingsStore``.

Stores a single-row settings document with JSON-serialized values and an
``updated_at`` timestamp. Each write commits immediately; the store has no
unit of work because every write is a single statement.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Dict, Iterable, Mapping, Optional

from .engine import create_connection, init_schema


class SqliteSettingsStore:
    """SQLite-backed settings store.

    Parameters
    ----------
    conn:
        Active SQLite connection. When omitted, one is opened on ``db_path``
        (or the default path) and the schema is created.
    db_path:
        Optional database path used when ``conn`` is omitted.
    """

    def __init__(self, conn: Optional[sqlite3.Connection] = None, db_path: Optional[str] = None) -> None:
        if conn is None:
            conn = create_connection(db_path)
        init_schema(conn)
        self.conn = conn

    def _load(self) -> Dict[str, str]:
        row = self.conn.execute("SELECT values_json FROM settings WHERE id = 1").fetchone()
        if not row or not row[0]:
            return {}
        try:
            values = json.loads(row[0])
        except ValueError:
            return {}
        return values if isinstance(values, dict) else {}

    def _save(self, values: Dict[str, str]) -> None:
        self.conn.execute(
            "INSERT INTO settings(id, values_json, updated_at) VALUES(1, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(id) DO UPDATE SET values_json=excluded.values_json, updated_at=CURRENT_TIMESTAMP",
            (json.dumps(values, ensure_ascii=False),),
        )
        self.conn.commit()

    def get(self, keys: Iterable[str]) -> Dict[str, str]:
        values = self._load()
        return {k: values[k] for k in keys if k in values}

    def set(self, values: Mapping[str, Optional[str]]) -> None:
        current = self._load()
        current.update({k: v for k, v in values.items() if v is not None})
        self._save(current)

    def remove(self, keys: Iterable[str]) -> None:
        current = self._load()
        for k in keys:
            current.pop(k, None)
        self._save(current)

    def close(self) -> None:
        self.conn.close()


__all__ = ["SqliteSettingsStore"]

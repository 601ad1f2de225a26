"""SQLite engine helpers for the settings store.

Purpose
-------
Provide centralized helpers for opening SQLite connections and ensuring the
settings table exists.

External dependencies
---------------------
- Standard library only (``sqlite3``). No side effects at import time.

Timeout and reliability strategy
--------------------------------
- Applies a ``busy_timeout`` (milliseconds) from
  ``answer_relay.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

DEFAULT_DB_DIR = Path.home() / ".answer_relay"
DEFAULT_DB_PATH = DEFAULT_DB_DIR / "settings.db"


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return a concrete database file path (``~`` expanded)."""
    return Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a SQLite connection and apply PRAGMA settings.

    ``":memory:"`` opens a private in-memory database (journal mode is left
    at its default there).
    """
    if db_path == ":memory:":
        conn = sqlite3.connect(":memory:")
    else:
        path = get_db_path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the singleton ``settings`` row table if missing, then commit."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            values_json TEXT NOT NULL,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )
    conn.commit()


@contextmanager
def db_session(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection with schema initialized.

    Commits on normal exit, rolls back on error, always closes.
    """
    conn = create_connection(db_path)
    try:
        init_schema(conn)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


__all__ = ["DEFAULT_DB_PATH", "get_db_path", "create_connection", "init_schema", "db_session"]

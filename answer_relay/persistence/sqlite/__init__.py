from __future__ import annotations

from .engine import create_connection, db_session, init_schema
from .settings_repo import SqliteSettingsStore

__all__ = [
    "create_connection",
    "db_session",
    "init_schema",
    "SqliteSettingsStore",
]

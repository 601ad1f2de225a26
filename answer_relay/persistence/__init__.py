"""Settings persistence for the answer pipeline.

Exports the ``SettingsStore`` protocol plus in-memory and SQLite
implementations.
"""

from .interfaces import SettingsStore
from .memory_store import InMemorySettingsStore
from .sqlite import SqliteSettingsStore

__all__ = ["SettingsStore", "InMemorySettingsStore", "SqliteSettingsStore"]

"""Persistence interfaces package.

Defines the settings storage protocol. Concrete implementations live under
``persistence/memory_store.py`` and ``persistence/sqlite/``.
"""

from .settings import SettingsStore  # noqa: F401

__all__ = ["SettingsStore"]

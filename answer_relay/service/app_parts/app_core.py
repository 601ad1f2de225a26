from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel

from answer_relay.bus.coordinator import Coordinator
from answer_relay.persistence.interfaces import SettingsStore
from answer_relay.persistence.memory_store import InMemorySettingsStore
from answer_relay.persistence.sqlite import SqliteSettingsStore

SETTINGS_DB_ENV = "ANSWER_RELAY_SETTINGS_DB"


class SettingsBody(BaseModel):
    """Credential-entry payload: secret plus provider selection.

    ``verify`` sends one short probe with the secret before it is saved.
    """

    apiKey: str
    provider: Optional[str] = None
    verify: bool = False


def build_store() -> SettingsStore:
    """Return the SQLite store when ``ANSWER_RELAY_SETTINGS_DB`` is set, else in-memory."""
    path = os.getenv(SETTINGS_DB_ENV)
    if path:
        return SqliteSettingsStore(db_path=path)
    return InMemorySettingsStore()


def build_coordinator(store: Optional[SettingsStore] = None) -> Coordinator:
    return Coordinator(store or build_store())

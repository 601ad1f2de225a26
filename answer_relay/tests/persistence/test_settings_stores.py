"""Contract tests shared by the in-memory and SQLite settings stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from answer_relay.persistence import InMemorySettingsStore
from answer_relay.persistence.sqlite import SqliteSettingsStore, db_session
from answer_relay.persistence.sqlite.engine import get_db_path


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    if request.param == "memory":
        yield InMemorySettingsStore()
        return
    s = SqliteSettingsStore(db_path=":memory:")
    yield s
    s.close()


def test_set_get_remove(store):
    store.set({"apiKey": "sk-1", "aiProvider": "chatgpt", "ignored": None})

    assert store.get(["apiKey", "aiProvider", "missing"]) == {"apiKey": "sk-1", "aiProvider": "chatgpt"}  # nosec B101

    store.set({"apiKey": "sk-2"})
    store.remove(["aiProvider"])

    assert store.get(["apiKey", "aiProvider"]) == {"apiKey": "sk-2"}  # nosec B101


def test_sqlite_store_persists_across_connections(tmp_path: Path):
    path = str(tmp_path / "settings.db")
    first = SqliteSettingsStore(db_path=path)
    first.set({"apiKey": "https://llm.test"})
    first.close()

    second = SqliteSettingsStore(db_path=path)
    try:
        assert second.get(["apiKey"]) == {"apiKey": "https://llm.test"}  # nosec B101
    finally:
        second.close()


def test_db_session_initializes_schema_and_pragmas(tmp_path: Path):
    with db_session(str(tmp_path / "s.db")) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()}
        assert "settings" in tables  # nosec B101 - pytest assertion in tests
        journal_mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert str(journal_mode).lower() == "wal"  # nosec B101 - pytest assertion in tests


def test_get_db_path_expands_user():
    expanded = get_db_path("~/.answer_relay/settings.db")
    assert "~" not in str(expanded)  # nosec B101 - pytest assertion in tests
    assert expanded.is_absolute()  # nosec B101 - pytest assertion in tests

"""Pytest configuration for the answer_relay test suite.

Provides scripted ``httpx.MockTransport`` clients so no test touches the
network, and isolates every test from provider environment variables and the
cached external config file.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List

import httpx
import pytest

from answer_relay.config import reset_config_cache

_PROVIDER_ENV = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "CUSTOM_ENDPOINT_URL",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "CHATGPT_MODEL",
    "CHATGPT_BASE_URL",
    "CUSTOM_MODEL",
    "ANSWER_RELAY_CONFIG_FILE",
    "ANSWER_RELAY_HTTP_TIMEOUT_SECONDS",
    "ANSWER_RELAY_BUS_TIMEOUT_SECONDS",
    "ANSWER_RELAY_SETTLE_DELAY_SECONDS",
    "ANSWER_RELAY_BUS_RETRIES",
    "ANSWER_RELAY_SETTINGS_DB",
)


class ScriptedBackend:
    """Callable ``MockTransport`` handler that records every request.

    ``responder`` receives the ``httpx.Request`` and returns an
    ``httpx.Response`` (or raises an ``httpx`` transport exception).
    """

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider env vars and config caches around each test."""
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
async def mock_http() -> Any:
    """Return a builder ``mock_http(responder) -> (AsyncClient, ScriptedBackend)``.

    Every client built is closed when the test finishes.
    """
    clients: List[httpx.AsyncClient] = []

    def _build(responder: Callable[[httpx.Request], httpx.Response]):
        backend = ScriptedBackend(responder)
        client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
        clients.append(client)
        return client, backend

    yield _build
    for client in clients:
        await client.aclose()


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def chat_payload(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


@pytest.fixture()
def payloads():
    """Expose canonical success bodies for both wire formats."""

    class _Payloads:
        gemini = staticmethod(gemini_payload)
        chat = staticmethod(chat_payload)

    return _Payloads

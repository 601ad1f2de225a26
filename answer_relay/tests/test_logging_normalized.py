from __future__ import annotations

import json
import logging

import httpx

from answer_relay.base.kinds import ProviderKind
from answer_relay.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    get_logger,
    log_event,
    normalized_log_event,
)
from answer_relay.base.models import Credential, Request
from answer_relay.gemini.client import GeminiClient


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - trivial
        self.messages.append(record.getMessage())


def _capture(name: str) -> _ListHandler:
    logger = get_logger(name, json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    logger.propagate = False
    return handler


def test_normalized_log_event_emits_required_keys():
    logger = get_logger("test.logging", json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]

    ctx = LogContext(provider="gemini", model="m", target="tab-1")
    normalized_log_event(
        logger,
        "bus.settled",
        ctx,
        phase="settle",
        attempt=2,
        error_code="timeout",
        state="timeout",
    )

    assert handler.messages, "expected a log message"  # nosec B101
    payload = json.loads(handler.messages[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["event"] == "bus.settled"  # nosec B101
    assert payload["target"] == "tab-1"  # nosec B101
    assert payload["attempt"] == 2  # nosec B101


def test_success_events_keep_null_attempt_and_omit_error_code():
    logger = get_logger("test.logging2", json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]

    normalized_log_event(logger, "answer.end", LogContext(extra={"mode": "qa"}), phase="finalize")

    payload = json.loads(handler.messages[-1])
    assert payload["attempt"] is None  # nosec B101
    assert "error_code" not in payload  # nosec B101
    assert payload["mode"] == "qa"  # nosec B101


def test_log_event_drops_none_fields():
    logger = get_logger("test.logging3", json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]

    log_event(logger, "coordinator.verify", LogContext(provider="gemini"), ok=True, status=None)

    assert json.loads(handler.messages[-1]) == {"event": "coordinator.verify", "provider": "gemini", "ok": True}  # nosec B101


def test_child_loggers_share_the_package_prefix():
    assert get_logger("bus").name == "answer_relay.bus"  # nosec B101
    assert get_logger("answer_relay.service").name == "answer_relay.service"  # nosec B101


async def test_provider_logs_never_contain_the_secret(mock_http, payloads):
    handler = _capture("providers.gemini")
    secret = "AIzaSy-very-secret-key-9999"  # pragma: allowlist secret
    client, _ = mock_http(lambda r: httpx.Response(200, json=payloads.gemini("A: 4")))

    await GeminiClient(client=client).call(Request(question_text="q"), Credential(secret, ProviderKind.GEMINI))

    events = [json.loads(m)["event"] for m in handler.messages]
    assert events == ["provider.call.start", "provider.call.end"]  # nosec B101
    assert all(secret not in m for m in handler.messages)  # nosec B101

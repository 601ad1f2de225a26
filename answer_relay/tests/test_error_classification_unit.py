from __future__ import annotations

import asyncio

import httpx
import pytest

from answer_relay.base.constants import EXTENSION_RELOADED, UNKNOWN_ERROR
from answer_relay.base.errors import (
    AnswerError,
    ErrorKind,
    as_answer_error,
    classify,
    classify_exception,
    classify_status,
    is_context_invalid,
)


class _StatusErr(Exception):
    def __init__(self, status: int):
        super().__init__(f"status={status}")
        self.status_code = status


class _Resp:
    def __init__(self, status_code: int):
        self.status_code = status_code


class _RespErr(Exception):
    def __init__(self, status: int):
        super().__init__("wrapped")
        self.response = _Resp(status)


@pytest.mark.parametrize(
    "status,kind",
    [
        (401, ErrorKind.AUTH),
        (403, ErrorKind.AUTH),
        (429, ErrorKind.RATE_LIMIT),
        (404, ErrorKind.UNKNOWN),
        (500, ErrorKind.UNKNOWN),
    ],
)
def test_status_mapping(status, kind):
    assert classify(status).kind is kind  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(_StatusErr(status)) is kind  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(_RespErr(status)) is kind  # nosec B101 - assert is appropriate in unit tests


def test_auth_ignores_body():
    kind, message = classify_status(401, detail="everything is fine, really")
    assert kind is ErrorKind.AUTH  # nosec B101
    assert "check your API key" in message  # nosec B101


def test_rate_limit_embeds_retry_after_verbatim():
    kind, message = classify_status(429, retry_after="17")
    assert kind is ErrorKind.RATE_LIMIT  # nosec B101
    assert "17 seconds" in message  # nosec B101


def test_other_status_embeds_body():
    _, message = classify_status(418, detail="short and stout")
    assert message == "API request failed: 418 - short and stout"  # nosec B101


def test_timeouts_and_transport_errors():
    req = httpx.Request("POST", "https://example.test")
    assert classify_exception(httpx.ReadTimeout("slow", request=req)) is ErrorKind.TIMEOUT  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorKind.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused", request=req)) is ErrorKind.NETWORK  # nosec B101
    assert classify_exception(ConnectionResetError("reset")) is ErrorKind.NETWORK  # nosec B101


@pytest.mark.parametrize(
    "text",
    [
        "Extension context invalidated.",
        "The message port closed before a response was received.",
        "Unchecked runtime.lastError: something",
        "Receiving end invalidated",
    ],
)
def test_context_invalid_signatures(text):
    assert is_context_invalid(text)  # nosec B101
    kind, message = classify(RuntimeError(text))
    assert kind is ErrorKind.CONTEXT_INVALID  # nosec B101
    assert message == EXTENSION_RELOADED  # nosec B101


def test_runtime_word_alone_is_not_context_invalid():
    assert not is_context_invalid("runtime quota exceeded")  # nosec B101
    assert classify_exception(RuntimeError("runtime quota exceeded")) is ErrorKind.UNKNOWN  # nosec B101


def test_message_heuristics():
    assert classify_exception(RuntimeError("request timed out")) is ErrorKind.TIMEOUT  # nosec B101
    assert classify_exception(RuntimeError("HTTP 403 Forbidden")) is ErrorKind.AUTH  # nosec B101
    assert classify_exception(RuntimeError("Failed to fetch")) is ErrorKind.NETWORK  # nosec B101


def test_classify_is_total():
    class _Hostile(Exception):
        def __str__(self):
            raise RuntimeError("cannot render")

    assert classify(_Hostile()).kind is ErrorKind.UNKNOWN  # nosec B101
    assert classify(None) == (ErrorKind.UNKNOWN, UNKNOWN_ERROR)  # nosec B101
    assert classify(ValueError("?")).kind is ErrorKind.UNKNOWN  # nosec B101


def test_answer_error_passes_through_unchanged():
    err = AnswerError(kind=ErrorKind.RATE_LIMIT, message="slow down", provider="gemini")
    assert classify(err) == (ErrorKind.RATE_LIMIT, "slow down")  # nosec B101
    assert as_answer_error(err) is err  # nosec B101


def test_as_answer_error_keeps_raw_and_status():
    original = _StatusErr(401)
    err = as_answer_error(original, provider="chatgpt")
    assert err.kind is ErrorKind.AUTH  # nosec B101
    assert err.status == 401  # nosec B101
    assert err.raw is original  # nosec B101
    assert err.provider == "chatgpt"  # nosec B101

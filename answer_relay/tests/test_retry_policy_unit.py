from __future__ import annotations

import asyncio

import pytest

from answer_relay.base.errors import AnswerError, ErrorKind
from answer_relay.base.resilience.error_handling import with_error_handling
from answer_relay.base.resilience.retry import RetryConfig, retry


class _Flaky:
    def __init__(self, fail_times: int, kind: ErrorKind):
        self.calls = 0
        self.fail_times = fail_times
        self.kind = kind

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise AnswerError(kind=self.kind, message="boom", provider="x")
        return "ok"


@pytest.fixture()
def no_sleep(monkeypatch):
    slept = []

    async def _sleep(delay):
        slept.append(delay)

    monkeypatch.setattr(asyncio, "sleep", _sleep)
    return slept


async def test_retry_succeeds_after_transient(no_sleep):
    attempt_log = []

    def attempt_logger(**kw):
        attempt_log.append(kw)

    cfg = RetryConfig(max_attempts=3, delay_seconds=0.5, attempt_logger=attempt_logger)
    flaky = _Flaky(fail_times=2, kind=ErrorKind.NETWORK)

    @retry(cfg)
    async def run():
        return await flaky()

    assert await run() == "ok"  # nosec B101 - asserts are appropriate in unit tests
    assert flaky.calls == 3  # nosec B101 - asserts are appropriate in unit tests
    assert no_sleep == [0.5, 0.5]  # nosec B101 - asserts are appropriate in unit tests
    assert attempt_log[-1]["error"] is None  # nosec B101 - asserts are appropriate in unit tests


@pytest.mark.parametrize("kind", [ErrorKind.AUTH, ErrorKind.RATE_LIMIT, ErrorKind.FORMAT_MISMATCH])
async def test_retry_stops_on_non_retryable(no_sleep, kind):
    flaky = _Flaky(fail_times=99, kind=kind)

    @retry(RetryConfig(max_attempts=4, delay_seconds=1.0))
    async def run():
        return await flaky()

    with pytest.raises(AnswerError) as ei:
        await run()
    assert ei.value.kind is kind  # nosec B101 - asserts are appropriate in unit tests
    assert flaky.calls == 1  # nosec B101 - asserts are appropriate in unit tests
    assert no_sleep == []  # nosec B101 - asserts are appropriate in unit tests


async def test_retry_raises_last_error_when_exhausted(no_sleep):
    flaky = _Flaky(fail_times=99, kind=ErrorKind.TIMEOUT)

    @retry(RetryConfig(max_attempts=2, delay_seconds=0))
    async def run():
        return await flaky()

    with pytest.raises(AnswerError):
        await run()
    assert flaky.calls == 2  # nosec B101 - asserts are appropriate in unit tests


def test_default_retryable_kinds():
    config = RetryConfig()
    for kind in (ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.UNKNOWN):
        assert config.should_retry(AnswerError(kind=kind, message="x"))  # nosec B101
    for kind in (ErrorKind.AUTH, ErrorKind.RATE_LIMIT, ErrorKind.FORMAT_MISMATCH, ErrorKind.CONTEXT_INVALID):
        assert not config.should_retry(AnswerError(kind=kind, message="x"))  # nosec B101


def test_retry_config_budget():
    assert RetryConfig().retries == 0  # nosec B101
    assert list(RetryConfig(max_attempts=3, delay_seconds=2).delays()) == [2, 2]  # nosec B101


async def test_error_handling_wraps_unexpected_exceptions():
    @with_error_handling(provider="gemini")
    async def run():
        raise TimeoutError("deadline exceeded")

    with pytest.raises(AnswerError) as ei:
        await run()
    assert ei.value.kind is ErrorKind.TIMEOUT  # nosec B101
    assert ei.value.provider == "gemini"  # nosec B101
    assert isinstance(ei.value.__cause__, TimeoutError)  # nosec B101

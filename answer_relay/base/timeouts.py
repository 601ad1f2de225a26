"""Unified timeout values for the answer pipeline.

This module centralizes the timeouts and recovery delays used across the
backend clients and the message bus so that no component hard-codes its own
numbers.

Key Components
--------------
TimeoutConfig
    Frozen dataclass capturing normalized timeout values.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use only (and again when the overrides change). Supported
    environment variables (all optional):
        ANSWER_RELAY_HTTP_TIMEOUT_SECONDS
        ANSWER_RELAY_BUS_TIMEOUT_SECONDS
        ANSWER_RELAY_SETTLE_DELAY_SECONDS
        ANSWER_RELAY_BUS_RETRIES

Failure Modes
-------------
Invalid or non-positive overrides are ignored and the defaults apply.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_ENV_NAMES = (
    "ANSWER_RELAY_HTTP_TIMEOUT_SECONDS",
    "ANSWER_RELAY_BUS_TIMEOUT_SECONDS",
    "ANSWER_RELAY_SETTLE_DELAY_SECONDS",
    "ANSWER_RELAY_BUS_RETRIES",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Bound for every backend HTTP call, including
            each individual endpoint probe.
        bus_timeout_seconds: Deadline for one message bus attempt.
        settle_delay_seconds: Pause after re-injecting the foreground agent
            before retrying a send.
        bus_retries: Number of recovery retries after the first send.
    """

    http_timeout_seconds: float = 30.0
    bus_timeout_seconds: float = 5.0
    settle_delay_seconds: float = 0.2
    bus_retries: int = 1


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float with a fallback."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def _parse_env_int(name: str, default: int) -> int:
    """Parse an environment variable as a non-negative int with a fallback."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = int(raw)
    except ValueError:
        return default
    return val if val >= 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`.

    The cache is refreshed when any supported environment override changes,
    which keeps tests using ``monkeypatch.setenv`` deterministic.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.http_timeout_seconds),
        bus_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.bus_timeout_seconds),
        settle_delay_seconds=_parse_env_float(_ENV_NAMES[2], defaults.settle_delay_seconds),
        bus_retries=_parse_env_int(_ENV_NAMES[3], defaults.bus_retries),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]

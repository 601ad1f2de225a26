"""
Normalized failure kinds (taxonomy).

Defines the closed `ErrorKind` enumeration attached to every failure that
crosses the answer pipeline boundary. Values are lowercase snake_case and are
considered a stable public contract for logging and the message envelope.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated failure categories surfaced to callers."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    FORMAT_MISMATCH = "format_mismatch"
    CONTEXT_INVALID = "context_invalid"
    UNKNOWN = "unknown"


# Kinds a caller may retry (bounded). Auth/RateLimit need user action,
# FormatMismatch from a known provider is a contract violation and
# ContextInvalid is terminal for the page session.
RETRYABLE_KINDS = frozenset({ErrorKind.TIMEOUT, ErrorKind.NETWORK, ErrorKind.UNKNOWN})


__all__ = ["ErrorKind", "RETRYABLE_KINDS"]

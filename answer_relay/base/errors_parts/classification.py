"""
Error classification helpers mapping failures to normalized ErrorKind values.

Implements HTTP status extraction, status-to-kind mapping, and message-based
heuristics (including the torn-down execution context signatures) behind a
single total entry point, :func:`classify`. Callers may always attach the
returned message to a user-visible surface.
"""
from __future__ import annotations

import asyncio
from typing import NamedTuple, Optional, Union

import httpx

from .. import constants
from .answer_error import AnswerError
from .error_kind import ErrorKind


class Classification(NamedTuple):
    """Result of classifying a failure: kind plus display-ready message."""

    kind: ErrorKind
    message: str


# Substrings (lowercase) raised when the foreground execution context has been
# destroyed underneath a pending message exchange.
CONTEXT_INVALID_SIGNATURES = (
    "extension context",
    "context invalidated",
    "message port closed",
    "runtime.lasterror",
    "invalidated",
)

_TIMEOUT_SIGNATURES = ("timeout", "timed out")
_NETWORK_SIGNATURES = ("network", "fetch", "connection", "unreachable", "name resolution")

_DEFAULT_MESSAGES = {
    ErrorKind.AUTH: constants.API_KEY_INVALID,
    ErrorKind.RATE_LIMIT: constants.RATE_LIMIT,
    ErrorKind.TIMEOUT: constants.REQUEST_TIMEOUT,
    ErrorKind.NETWORK: constants.NETWORK_ERROR,
    ErrorKind.FORMAT_MISMATCH: constants.INVALID_RESPONSE_FORMAT,
    ErrorKind.CONTEXT_INVALID: constants.EXTENSION_RELOADED,
    ErrorKind.UNKNOWN: constants.UNKNOWN_ERROR,
}


def default_message(kind: ErrorKind) -> str:
    """Return the generic user-facing message for ``kind``."""
    return _DEFAULT_MESSAGES.get(kind, constants.UNKNOWN_ERROR)


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def is_context_invalid(text: str) -> bool:
    """Return True when ``text`` carries a context-invalidation signature."""
    lowered = (text or "").lower()
    return any(sig in lowered for sig in CONTEXT_INVALID_SIGNATURES)


def classify_status(
    status: int,
    detail: Optional[str] = None,
    retry_after: Optional[str] = None,
) -> Classification:
    """Classify a non-2xx HTTP status.

    ``retry_after`` is embedded verbatim for 429 responses; ``detail`` (usually
    the response body) is embedded for statuses without a dedicated kind.
    """
    if status in (401, 403):
        return Classification(
            ErrorKind.AUTH,
            f"API authentication failed ({status}). Please check your API key.",
        )
    if status == 429:
        if retry_after:
            return Classification(
                ErrorKind.RATE_LIMIT,
                f"Rate limit exceeded. Please wait {retry_after} seconds and try again.",
            )
        return Classification(
            ErrorKind.RATE_LIMIT,
            f"Rate limit exceeded ({status}). Please try again later.",
        )
    body = (detail or "").strip() or "no response body"
    return Classification(ErrorKind.UNKNOWN, f"API request failed: {status} - {body}")


def _heuristic_from_message(msg: str) -> Optional[ErrorKind]:
    """Substring heuristic mapping for exceptions without structure."""
    if any(p in msg for p in _TIMEOUT_SIGNATURES):
        return ErrorKind.TIMEOUT
    if "401" in msg or "403" in msg or "unauthorized" in msg or "forbidden" in msg:
        return ErrorKind.AUTH
    if "429" in msg or ("rate" in msg and "limit" in msg):
        return ErrorKind.RATE_LIMIT
    if any(p in msg for p in _NETWORK_SIGNATURES):
        return ErrorKind.NETWORK
    return None


def _classify_exception(exc: BaseException) -> Classification:
    if is_context_invalid(str(exc)):
        return Classification(ErrorKind.CONTEXT_INVALID, constants.EXTENSION_RELOADED)
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return Classification(ErrorKind.TIMEOUT, constants.REQUEST_TIMEOUT)
    status = _extract_status(exc)
    if status is not None:
        return classify_status(status, detail=str(exc))
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return Classification(ErrorKind.NETWORK, constants.NETWORK_ERROR)
    kind = _heuristic_from_message(str(exc).lower())
    if kind is None:
        return Classification(ErrorKind.UNKNOWN, constants.UNKNOWN_ERROR)
    return Classification(kind, default_message(kind))


def classify(failure: Union[BaseException, int, None]) -> Classification:
    """Classify a failure into ``(ErrorKind, message)``.

    Precedence:
        1. AnswerError passthrough (never re-classified).
        2. Bare HTTP status integers.
        3. Context-invalidation signatures.
        4. Timeout exceptions (httpx/asyncio/builtin).
        5. HTTP status carried by the exception.
        6. Transport exceptions.
        7. Substring heuristics.
        8. ``UNKNOWN`` fallback.

    The mapping is total: it never raises.
    """
    try:
        if isinstance(failure, AnswerError):
            return Classification(failure.kind, failure.message or default_message(failure.kind))
        if isinstance(failure, int) and not isinstance(failure, bool):
            return classify_status(failure)
        if isinstance(failure, BaseException):
            return _classify_exception(failure)
    except Exception:  # nosec B110 - classification must stay total
        return Classification(ErrorKind.UNKNOWN, constants.UNKNOWN_ERROR)
    return Classification(ErrorKind.UNKNOWN, constants.UNKNOWN_ERROR)


def classify_exception(exc: BaseException) -> ErrorKind:
    """Return only the :class:`ErrorKind` for ``exc``."""
    return classify(exc).kind


def as_answer_error(failure: BaseException, provider: str = "unknown") -> AnswerError:
    """Wrap ``failure`` in an :class:`AnswerError`, classifying it once."""
    if isinstance(failure, AnswerError):
        return failure
    kind, message = classify(failure)
    return AnswerError(
        kind=kind,
        message=message,
        provider=provider,
        status=_extract_status(failure),
        raw=failure,
    )


__all__ = [
    "Classification",
    "CONTEXT_INVALID_SIGNATURES",
    "classify",
    "classify_status",
    "classify_exception",
    "as_answer_error",
    "default_message",
    "is_context_invalid",
    "_extract_status",
]

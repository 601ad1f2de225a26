"""
Structured answer pipeline exception type.

Carries a normalized `ErrorKind` plus a display-ready message so that no raw,
unclassified exception reaches the UI boundary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .error_kind import ErrorKind, RETRYABLE_KINDS


@dataclass
class AnswerError(Exception):
    """Represents a classified failure of the answer pipeline.

    Attributes:
        kind: Normalized :class:`ErrorKind` classification for the failure.
        message: Human-readable message suitable for direct display.
        provider: Provider key where the error originated (e.g., ``"gemini"``).
        status: HTTP status code when the failure came from a response.
        retry_after: Verbatim ``Retry-After`` header value, if any.
        attempts: Ordered probe log for aggregate discovery failures.
        raw: Optional original exception for diagnostics.
    """

    kind: ErrorKind
    message: str
    provider: str = "unknown"
    status: Optional[int] = None
    retry_after: Optional[str] = None
    attempts: Tuple = field(default_factory=tuple)
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    @property
    def retryable(self) -> bool:
        """Hint for bounded caller retries (not authoritative)."""
        return self.kind in RETRYABLE_KINDS


__all__ = ["AnswerError"]

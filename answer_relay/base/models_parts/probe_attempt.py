"""
One custom-endpoint probe outcome.

The discovery client keeps an ordered log of these and only uses it to build
the aggregate failure message; callers never receive individual attempts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors_parts.error_kind import ErrorKind
from ..kinds import ProbeSchema


@dataclass(frozen=True)
class ProbeAttempt:
    """Outcome of trying one path + schema combination.

    Attributes:
        path: Candidate suffix as tried (``""`` means the endpoint itself).
        schema: Request body shape used.
        status: HTTP status, or ``None`` when no response was received.
        error: Failure kind; ``None`` for the successful attempt.
        detail: Short reason used in the aggregate message.
    """

    path: str
    schema: ProbeSchema
    status: Optional[int] = None
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None

    def describe(self) -> str:
        """Return ``"<path> [<schema>]: <reason>"`` for aggregate messages."""
        shown = self.path or "(endpoint URL)"
        reason = self.detail or (self.error.value if self.error else "ok")
        if self.status is not None:
            reason = f"HTTP {self.status} {reason}"
        return f"{shown} [{self.schema.value}]: {reason}"


__all__ = ["ProbeAttempt"]

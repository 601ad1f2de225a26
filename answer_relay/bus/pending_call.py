"""
Explicit per-call state for the message bus.

A ``PendingCall`` replaces an ambient "request in flight" flag: it is created
when a send starts, armed with a fresh deadline for every attempt, and
settled exactly once. Anything that arrives after settlement must check
:meth:`PendingCall.is_open` and drop its result.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CallState(str, Enum):
    """Lifecycle of one bus call."""

    IDLE = "idle"
    AWAITING = "awaiting_response"
    SUCCESS = "success"
    TIMEOUT = "timeout"
    CONTEXT_INVALID = "context_invalid"
    FAILED = "failed"


_SETTLED = frozenset({CallState.SUCCESS, CallState.TIMEOUT, CallState.CONTEXT_INVALID, CallState.FAILED})


@dataclass
class PendingCall:
    """One outstanding request/response exchange.

    Attributes:
        target: Receiver id the call is addressed to.
        retries_left: Remaining recovery retries; decremented before each one.
        id: Unique call id used in log events.
        deadline: Event loop time at which the current attempt times out.
        attempt: 1-based number of the current attempt (0 before the first).
        state: Current :class:`CallState`.
    """

    target: str
    retries_left: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    deadline: Optional[float] = None
    attempt: int = 0
    state: CallState = CallState.IDLE

    def arm(self, deadline: float) -> int:
        """Start a fresh attempt with its own deadline; return its number."""
        if self.state in _SETTLED:
            raise RuntimeError(f"call {self.id} already settled as {self.state.value}")
        self.attempt += 1
        self.deadline = deadline
        self.state = CallState.AWAITING
        return self.attempt

    def is_open(self, attempt: Optional[int] = None) -> bool:
        """Return True while awaiting (and, if given, still on ``attempt``)."""
        if self.state is not CallState.AWAITING:
            return False
        return attempt is None or attempt == self.attempt

    @property
    def settled(self) -> bool:
        return self.state in _SETTLED

    def settle(self, state: CallState) -> bool:
        """Settle the call once; later settlements are ignored (returns False)."""
        if state not in _SETTLED:
            raise ValueError(f"{state.value} is not a terminal state")
        if self.settled:
            return False
        self.state = state
        self.deadline = None
        return True


__all__ = ["CallState", "PendingCall"]

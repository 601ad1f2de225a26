"""
Cross-context message bus.

Exports:
- MessageBus: timeout race, bounded recovery by re-injection, sticky
  context invalidation
- PendingCall / CallState: explicit per-call state
- Coordinator: privileged side, dispatches envelope actions
- ForegroundAgent: untrusted side, single-outstanding-call guard
- LocalTransport / LocalInjector: in-process transport and injection
"""

from .coordinator import Coordinator
from .foreground import CONTEXT_INVALIDATED, COORDINATOR_TARGET, CallInProgress, ForegroundAgent, Renderer
from .message_bus import MessageBus, default_bus_retry
from .pending_call import CallState, PendingCall
from .transport import LocalInjector, LocalTransport, ReceiverMissing

__all__ = [
    "CallInProgress",
    "CallState",
    "CONTEXT_INVALIDATED",
    "COORDINATOR_TARGET",
    "Coordinator",
    "default_bus_retry",
    "ForegroundAgent",
    "LocalInjector",
    "LocalTransport",
    "MessageBus",
    "PendingCall",
    "ReceiverMissing",
    "Renderer",
]

"""
In-process transport and injector for the message bus.

``LocalTransport`` maps receiver ids to async handlers, standing in for the
host's cross-context messaging. ``LocalInjector`` (re-)creates a foreground
agent through a factory and registers it, standing in for script injection.
Any other transport only has to satisfy the :class:`Transport` and
:class:`Injector` protocols.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol

from ..base.logging import LogContext, get_logger, log_event

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]

RECEIVER_MISSING = "Could not establish connection. Receiving end does not exist."

_logger = get_logger("bus.transport")


class ReceiverMissing(ConnectionError):
    """Raised when no handler is registered for a target."""

    def __init__(self, message: str = RECEIVER_MISSING) -> None:
        super().__init__(message)


class Transport(Protocol):  # pragma: no cover - structural protocol
    async def send(self, target: str, message: Mapping[str, Any]) -> Any: ...


class Injector(Protocol):  # pragma: no cover - structural protocol
    async def inject(self, target: str) -> Any: ...


class LocalTransport:
    """Deliver messages to handlers registered under a target id."""

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, target: str, handler: Handler) -> None:
        self._handlers[target] = handler

    def unregister(self, target: str) -> None:
        self._handlers.pop(target, None)

    def has(self, target: str) -> bool:
        return target in self._handlers

    async def send(self, target: str, message: Mapping[str, Any]) -> Any:
        handler = self._handlers.get(target)
        if handler is None:
            raise ReceiverMissing()
        return await handler(dict(message))


class LocalInjector:
    """Create a fresh agent for a target and register its handler.

    Parameters:
        transport: Transport the new agent is registered on.
        factory: ``factory(target)`` returns an object exposing an async
            ``handle(message)`` method (normally a ``ForegroundAgent``).
    """

    def __init__(self, transport: LocalTransport, factory: Callable[[str], Any]) -> None:
        self._transport = transport
        self._factory = factory
        self.injections = 0
        self.agents: Dict[str, Any] = {}

    async def inject(self, target: str) -> Any:
        agent = self._factory(target)
        self._transport.register(target, agent.handle)
        self.agents[target] = agent
        self.injections += 1
        log_event(_logger, "bus.inject", LogContext(target=target), count=self.injections)
        return agent

    def agent(self, target: str) -> Optional[Any]:
        return self.agents.get(target)


__all__ = [
    "Handler",
    "Injector",
    "LocalInjector",
    "LocalTransport",
    "RECEIVER_MISSING",
    "ReceiverMissing",
    "Transport",
]

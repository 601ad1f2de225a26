"""Foreground agent: the untrusted side of the message bus.

The agent owns the single-outstanding-call guard as an explicit
:class:`PendingCall`. A second :meth:`ForegroundAgent.ask` while one is open
is rejected with :class:`CallInProgress` before anything is sent.

Rendering is delegated to a :class:`Renderer`; widgets themselves live
outside this package.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol, Set

from ..base.constants import CALL_IN_PROGRESS, EXTENSION_RELOADED
from ..base.errors import AnswerError, ErrorKind
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import AnswerResult, Mode, Request
from ..base.dto import ResponseEnvelope
from .message_bus import MessageBus
from .pending_call import CallState, PendingCall

COORDINATOR_TARGET = "coordinator"
CONTEXT_INVALIDATED = "Extension context invalidated."

_logger = get_logger("bus.foreground")


class CallInProgress(Exception):
    """Raised when a call is attempted while another one is open."""

    def __init__(self, message: str = CALL_IN_PROGRESS) -> None:
        super().__init__(message)


class Renderer(Protocol):  # pragma: no cover - structural protocol
    def show_answer(self, result: AnswerResult) -> None: ...

    def show_error(self, message: str, kind: ErrorKind) -> None: ...

    def show_reload_notice(self) -> None: ...


class ForegroundAgent:
    """Capture requests, relay them to the Coordinator and render outcomes.

    Parameters:
        bus: Bus used to reach the Coordinator.
        renderer: Output surface.
        target_id: Id this agent is registered under (used in logs).
        custom_prompt: Instructions attached to pushed selections.
        mode: Answer mode attached to pushed selections.
    """

    def __init__(
        self,
        bus: MessageBus,
        renderer: Renderer,
        *,
        target_id: str = "tab",
        custom_prompt: str = "",
        mode: Mode = Mode.QA,
        coordinator_target: str = COORDINATOR_TARGET,
    ) -> None:
        self._bus = bus
        self._renderer = renderer
        self.target_id = target_id
        self._custom_prompt = custom_prompt
        self._mode = mode
        self._coordinator = coordinator_target
        self._pending: Optional[PendingCall] = None
        self._tasks: Set[asyncio.Task] = set()
        self.torn_down = False

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.settled

    def teardown(self) -> None:
        """Mark the execution context destroyed; later messages fail."""
        self.torn_down = True

    async def ask(self, request: Request) -> Dict[str, Any]:
        """Send ``request`` for solving, render the outcome, return the envelope.

        Raises:
            CallInProgress: if a call from this agent is still open.
        """
        if self.busy:
            raise CallInProgress()
        call = PendingCall(target=self._coordinator)
        call.arm(asyncio.get_running_loop().time())
        self._pending = call
        try:
            return await self._ask(request, call)
        finally:
            self._pending = None

    async def _ask(self, request: Request, call: PendingCall) -> Dict[str, Any]:
        if self.torn_down:
            call.settle(CallState.CONTEXT_INVALID)
            self._renderer.show_reload_notice()
            err = AnswerError(kind=ErrorKind.CONTEXT_INVALID, message=EXTENSION_RELOADED)
            return ResponseEnvelope.fail(err).to_wire()
        message = {"action": "solve", **request.to_dict()}
        try:
            response = await self._bus.send(self._coordinator, message)
        except AnswerError as e:
            call.settle(CallState.CONTEXT_INVALID if e.kind is ErrorKind.CONTEXT_INVALID else CallState.FAILED)
            self._render_failure(e)
            return ResponseEnvelope.fail(e).to_wire()
        call.settle(CallState.SUCCESS)
        result = response.get("result") or {}
        self._renderer.show_answer(
            AnswerResult(text=str(result.get("text", "")), mode=Mode(result.get("mode", request.mode.value)))
        )
        return response

    def _render_failure(self, error: AnswerError) -> None:
        log_event(
            _logger,
            "foreground.error",
            LogContext(target=self.target_id),
            level=logging.WARNING,
            error_code=error.kind.value,
        )
        if error.kind is ErrorKind.CONTEXT_INVALID:
            self._renderer.show_reload_notice()
        else:
            self._renderer.show_error(error.message, error.kind)

    async def handle(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """Answer a Coordinator push.

        ``solveFromSelection`` is acknowledged at once and solved in the
        background, so the Coordinator's deadline only covers delivery.
        """
        if self.torn_down:
            return {"success": False, "error": CONTEXT_INVALIDATED}
        action = message.get("action")
        if action == "ping":
            return ResponseEnvelope.ok({"pong": True}).to_wire()
        if action != "solveFromSelection":
            err = AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message=f"Unsupported action: {action!r}")
            return ResponseEnvelope.fail(err).to_wire()
        if self.busy:
            err = AnswerError(kind=ErrorKind.UNKNOWN, message=CALL_IN_PROGRESS)
            return ResponseEnvelope.fail(err).to_wire()
        try:
            mode = Mode(message.get("mode") or self._mode.value)
        except ValueError:
            mode = self._mode
        request = Request(
            question_text=str(message.get("questionText") or ""),
            custom_prompt=str(message.get("customPrompt") or self._custom_prompt),
            mode=mode,
        )
        task = asyncio.ensure_future(self._ask_in_background(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return ResponseEnvelope.ok({"accepted": True}).to_wire()

    async def _ask_in_background(self, request: Request) -> None:
        try:
            await self.ask(request)
        except CallInProgress:
            log_event(_logger, "foreground.busy", LogContext(target=self.target_id), level=logging.INFO)

    async def drain(self) -> None:
        """Wait for background solves started by :meth:`handle`."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))


__all__ = [
    "CallInProgress",
    "COORDINATOR_TARGET",
    "CONTEXT_INVALIDATED",
    "ForegroundAgent",
    "Renderer",
]

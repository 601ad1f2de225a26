"""Request/response channel between the Coordinator and foreground agents.

State machine per call::

    Idle -> AwaitingResponse -> Settled(success | timeout | context_invalid | failed)

Each attempt races the receiver's response against a fixed deadline. The
timeout race never cancels the underlying send; a late response is dropped
because its attempt is no longer open.

Recovery
--------
When the send itself raises (no receiver, destroyed context) or the response
carries neither ``success: true`` nor a classified ``errorKind``, the bus
re-injects the receiver, waits the settle delay and starts a fresh attempt.
The budget is ``retries_left`` on the :class:`PendingCall`, taken from a
:class:`RetryConfig`; it is a loop variable, never recursion.

Terminal outcomes
-----------------
- Timeout settles the call immediately; no recovery is attempted.
- Context invalidation is sticky per target: the reload notice is shown and
  later sends to that target fail at once until :meth:`MessageBus.reset`.
- Exhausted recovery settles as failure classified by :func:`classify`.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Set, Union

from ..base.constants import EXTENSION_RELOADED, REQUEST_TIMEOUT, UNKNOWN_ERROR
from ..base.errors import AnswerError, ErrorKind, classify, is_context_invalid
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.resilience.retry import RetryConfig
from ..base.timeouts import get_timeout_config
from .pending_call import CallState, PendingCall
from .transport import Injector, Transport

ReloadNotifier = Callable[[str], Union[None, Awaitable[None]]]

_logger = get_logger("bus")


def default_bus_retry() -> RetryConfig:
    """Recovery policy derived from :class:`TimeoutConfig`."""
    cfg = get_timeout_config()
    return RetryConfig(max_attempts=cfg.bus_retries + 1, delay_seconds=cfg.settle_delay_seconds)


class MessageBus:
    """Send envelopes to a target and await a single settled response.

    Parameters:
        transport: Delivers messages (``await transport.send(target, msg)``).
        injector: Optional; when present, enables recovery by re-injection.
        retry_config: Recovery budget (``retries``) and settle delay
            (``delay_seconds``). Defaults to :func:`default_bus_retry`.
        timeout_seconds: Per-attempt deadline. Defaults to
            ``TimeoutConfig.bus_timeout_seconds``.
        on_context_invalid: Called with the target when a context is found
            invalidated, to show the reload notice on some surface.
    """

    def __init__(
        self,
        transport: Transport,
        injector: Optional[Injector] = None,
        *,
        retry_config: Optional[RetryConfig] = None,
        timeout_seconds: Optional[float] = None,
        on_context_invalid: Optional[ReloadNotifier] = None,
    ) -> None:
        self._transport = transport
        self._injector = injector
        self._retry = retry_config or default_bus_retry()
        self._timeout = timeout_seconds or get_timeout_config().bus_timeout_seconds
        self._on_context_invalid = on_context_invalid
        self._invalidated: Set[str] = set()
        self._inflight: Set[asyncio.Future] = set()
        self.late_discards = 0
        self.last_call: Optional[PendingCall] = None

    # ----- Sticky invalidation -----
    def is_invalidated(self, target: str) -> bool:
        return target in self._invalidated

    def reset(self, target: str) -> None:
        """Forget an invalidation (the host page was reloaded)."""
        self._invalidated.discard(target)

    # ----- Public API -----
    async def send(self, target: str, message: Mapping[str, Any]) -> Dict[str, Any]:
        """Deliver ``message`` to ``target`` and return its success envelope.

        Raises:
            AnswerError: ``TIMEOUT``, ``CONTEXT_INVALID`` or the classified
                failure once recovery is exhausted.
        """
        ctx = LogContext(target=target, extra={"action": message.get("action")})
        if target in self._invalidated:
            raise AnswerError(kind=ErrorKind.CONTEXT_INVALID, message=EXTENSION_RELOADED, provider="bus")

        call = PendingCall(target=target, retries_left=self._retry.retries)
        self.last_call = call
        ctx.request_id = call.id
        loop = asyncio.get_running_loop()

        while True:
            attempt = call.arm(loop.time() + self._timeout)
            normalized_log_event(_logger, "bus.send", ctx, phase="send", attempt=attempt)
            try:
                response = await self._attempt(call, attempt, message)
            except asyncio.TimeoutError:
                call.settle(CallState.TIMEOUT)
                self._log_settled(ctx, call, ErrorKind.TIMEOUT)
                raise AnswerError(kind=ErrorKind.TIMEOUT, message=REQUEST_TIMEOUT, provider="bus") from None
            except Exception as e:  # classified below, once
                failure = AnswerError(*classify(e), provider="bus", raw=e)
            else:
                if isinstance(response, dict) and response.get("success") is True:
                    call.settle(CallState.SUCCESS)
                    self._log_settled(ctx, call, None)
                    return response
                failure = self._envelope_failure(response)
                if failure.kind is not ErrorKind.CONTEXT_INVALID and self._is_classified(response):
                    call.settle(CallState.FAILED)
                    self._log_settled(ctx, call, failure.kind)
                    raise failure

            if failure.kind is ErrorKind.CONTEXT_INVALID:
                await self._invalidate(call, ctx)
                raise failure

            if call.retries_left > 0 and self._injector is not None:
                call.retries_left -= 1
                normalized_log_event(
                    _logger,
                    "bus.recover",
                    ctx,
                    phase="recover",
                    attempt=attempt,
                    error_code=failure.kind.value,
                    retries_left=call.retries_left,
                )
                try:
                    await self._injector.inject(target)
                except Exception as e:  # injection refused or the agent factory failed
                    failure = AnswerError(*classify(e), provider="bus", raw=e)
                    if failure.kind is ErrorKind.CONTEXT_INVALID:
                        await self._invalidate(call, ctx)
                        raise failure from e
                    call.settle(CallState.FAILED)
                    self._log_settled(ctx, call, failure.kind)
                    raise failure from e
                await asyncio.sleep(self._retry.delay_seconds)
                continue

            call.settle(CallState.FAILED)
            self._log_settled(ctx, call, failure.kind)
            raise failure

    # ----- Internals -----
    async def _attempt(self, call: PendingCall, attempt: int, message: Mapping[str, Any]) -> Any:
        """Race one transport send against the attempt deadline."""
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future = loop.create_future()
        task = asyncio.ensure_future(self._transport.send(call.target, message))
        self._inflight.add(task)

        def _relay(done: asyncio.Future) -> None:
            self._inflight.discard(done)
            exc = None if done.cancelled() else done.exception()
            if outcome.done() or not call.is_open(attempt):
                self.late_discards += 1
                normalized_log_event(
                    _logger,
                    "bus.late_discarded",
                    LogContext(target=call.target, request_id=call.id),
                    phase="discard",
                    attempt=attempt,
                    level=logging.DEBUG,
                    state=call.state.value,
                )
                return
            if done.cancelled():
                outcome.cancel()
            elif exc is not None:
                outcome.set_exception(exc)
            else:
                outcome.set_result(done.result())

        task.add_done_callback(_relay)
        remaining = max((call.deadline or loop.time()) - loop.time(), 0.0)
        return await asyncio.wait_for(outcome, remaining)

    @staticmethod
    def _is_classified(response: Any) -> bool:
        return isinstance(response, dict) and response.get("success") is False and bool(response.get("errorKind"))

    @staticmethod
    def _envelope_failure(response: Any) -> AnswerError:
        """Turn a non-success envelope into an error without re-classifying."""
        error = response.get("error") if isinstance(response, dict) else None
        text = error if isinstance(error, str) and error.strip() else ""
        if text and is_context_invalid(text):
            return AnswerError(kind=ErrorKind.CONTEXT_INVALID, message=EXTENSION_RELOADED, provider="bus")
        raw_kind = response.get("errorKind") if isinstance(response, dict) else None
        try:
            kind = ErrorKind(raw_kind) if raw_kind else ErrorKind.UNKNOWN
        except ValueError:
            kind = ErrorKind.UNKNOWN
        return AnswerError(kind=kind, message=text or UNKNOWN_ERROR, provider="bus")

    async def _invalidate(self, call: PendingCall, ctx: LogContext) -> None:
        call.settle(CallState.CONTEXT_INVALID)
        self._invalidated.add(call.target)
        self._log_settled(ctx, call, ErrorKind.CONTEXT_INVALID)
        if self._on_context_invalid is None:
            return
        result = self._on_context_invalid(call.target)
        if inspect.isawaitable(result):
            await result

    def _log_settled(self, ctx: LogContext, call: PendingCall, kind: Optional[ErrorKind]) -> None:
        normalized_log_event(
            _logger,
            "bus.settled",
            ctx,
            phase="settle",
            attempt=call.attempt,
            error_code=kind.value if kind else None,
            level=logging.INFO if kind is None else logging.WARNING,
            state=call.state.value,
        )


__all__ = ["MessageBus", "ReloadNotifier", "default_bus_retry"]

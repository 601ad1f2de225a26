"""Coordinator: the privileged side of the message bus.

Owns network-capable calls. Inbound envelopes are validated with the
pydantic DTOs and dispatched by ``action``; every outcome is returned as a
response envelope and no exception escapes :meth:`Coordinator.handle`.

Actions
-------
``getCredential``       stored secret (``apiKey``)
``getProvider``         stored provider selection (``aiProvider``)
``solve``               answer a request with the stored credential
``callCustomEndpoint``  answer through endpoint discovery
``solveFromSelection``  push selected text to a foreground target
``ping``                liveness
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from ..base.constants import API_KEY_MISSING, VERIFY_PROMPT
from ..base.credentials import mask_secret
from ..base.dto import MessageEnvelope, ResponseEnvelope, SolvePayload
from ..base.errors import AnswerError, ErrorKind, as_answer_error
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import Credential, Mode, ProviderKind, Request
from ..config.defaults import DEFAULT_PROVIDER, STORAGE_KEY_PROVIDER, STORAGE_KEY_SECRET
from ..persistence.interfaces import SettingsStore
from ..service.answer_service import AnswerService
from .message_bus import MessageBus

_logger = get_logger("bus.coordinator")

ActionHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


def _format_error(errors: Any) -> str:
    try:
        first = errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        return f"Invalid message: {loc or 'envelope'}: {first.get('msg')}"
    except (IndexError, TypeError, AttributeError):
        return "Invalid message"


class Coordinator:
    """Mediate between foreground agents, settings and the answer service.

    Parameters:
        store: Settings store holding the secret and provider selection.
        service: Answer service; a default one is built when omitted.
        bus: Message bus used for pushes to foreground targets.
    """

    def __init__(
        self,
        store: SettingsStore,
        service: Optional[AnswerService] = None,
        bus: Optional[MessageBus] = None,
    ) -> None:
        self._store = store
        self._service = service or AnswerService()
        self.bus = bus
        self._actions: Dict[str, ActionHandler] = {
            "getCredential": self._get_credential,
            "getProvider": self._get_provider,
            "solve": self._solve,
            "callCustomEndpoint": self._call_custom_endpoint,
            "solveFromSelection": self._solve_from_selection,
            "ping": self._ping,
        }

    # ----- Envelope entry point -----
    async def handle(self, envelope: Mapping[str, Any]) -> Dict[str, Any]:
        """Dispatch one inbound envelope and return the response envelope."""
        try:
            message = MessageEnvelope.model_validate(dict(envelope or {}))
        except ValidationError as e:
            err = AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message=_format_error(e.errors), provider="coordinator")
            return ResponseEnvelope.fail(err).to_wire()

        ctx = LogContext(extra={"action": message.action})
        normalized_log_event(_logger, "coordinator.action", ctx, phase="start")
        try:
            result = await self._actions[message.action](message.payload())
        except AnswerError as e:
            normalized_log_event(
                _logger, "coordinator.action", ctx, phase="finalize", error_code=e.kind.value, level=logging.WARNING
            )
            return ResponseEnvelope.fail(e).to_wire()
        except ValidationError as e:
            err = AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message=_format_error(e.errors), provider="coordinator")
            return ResponseEnvelope.fail(err).to_wire()
        except Exception as e:
            err = as_answer_error(e, provider="coordinator")
            _logger.exception("coordinator action %s failed", message.action)
            return ResponseEnvelope.fail(err).to_wire()
        normalized_log_event(_logger, "coordinator.action", ctx, phase="finalize")
        return ResponseEnvelope.ok(result).to_wire()

    # ----- Settings -----
    def _stored(self) -> Dict[str, str]:
        return self._store.get([STORAGE_KEY_SECRET, STORAGE_KEY_PROVIDER])

    def stored_provider(self) -> ProviderKind:
        raw = self._stored().get(STORAGE_KEY_PROVIDER)
        return ProviderKind.parse(raw, default=ProviderKind(DEFAULT_PROVIDER))

    def save_credential(self, raw: str, provider: ProviderKind | str | None = None) -> None:
        """Persist a secret and provider selection."""
        values = {STORAGE_KEY_SECRET: (raw or "").strip()}
        if provider is not None:
            values[STORAGE_KEY_PROVIDER] = ProviderKind.parse(provider).value
        self._store.set(values)
        log_event(_logger, "coordinator.settings.saved", credential=mask_secret(values[STORAGE_KEY_SECRET]))

    # ----- Actions -----
    async def _get_credential(self, _payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"apiKey": self._stored().get(STORAGE_KEY_SECRET, "")}

    async def _get_provider(self, _payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"provider": self.stored_provider().value}

    async def _ping(self, _payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"pong": True}

    async def _solve(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = SolvePayload.model_validate(payload)
        stored = self._stored()
        selected = ProviderKind.parse(body.provider, default=self.stored_provider())
        credential = Credential.from_raw(stored.get(STORAGE_KEY_SECRET), selected)
        result = await self._service.solve(body.to_request(), credential, selected)
        return result.to_dict()

    async def _call_custom_endpoint(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = SolvePayload.model_validate(payload)
        endpoint = body.endpoint_url or self._stored().get(STORAGE_KEY_SECRET)
        if not endpoint:
            raise AnswerError(kind=ErrorKind.AUTH, message=API_KEY_MISSING, provider=ProviderKind.CUSTOM.value)
        result = await self._service.call_custom_endpoint(body.to_request(), endpoint)
        return result.to_dict()

    async def _solve_from_selection(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        target = payload.get("target")
        if not isinstance(target, str) or not target:
            raise AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message="Invalid message: target: Field required")
        text = payload.get("questionText") or payload.get("text") or ""
        response = await self.dispatch_selection(target, str(text), mode=payload.get("mode"))
        return response.get("result")

    # ----- Direct API -----
    async def dispatch_selection(
        self,
        target: str,
        text: str,
        *,
        custom_prompt: str = "",
        mode: Mode | str | None = None,
    ) -> Dict[str, Any]:
        """Push selected text to a foreground target, recovering if needed.

        Raises:
            AnswerError: as settled by the message bus.
        """
        if self.bus is None:
            raise AnswerError(kind=ErrorKind.UNKNOWN, message="No foreground transport configured.", provider="coordinator")
        message: Dict[str, Any] = {"action": "solveFromSelection", "questionText": text}
        if custom_prompt:
            message["customPrompt"] = custom_prompt
        if mode:
            message["mode"] = Mode(mode).value
        return await self.bus.send(target, message)

    async def verify_credential(self, raw: str, provider: ProviderKind | str | None = None) -> bool:
        """Send one short probe with ``raw``; True when an answer comes back."""
        selected = ProviderKind.parse(provider, default=ProviderKind(DEFAULT_PROVIDER))
        request = Request(question_text=VERIFY_PROMPT, mode=Mode.QA)
        try:
            result = await self._service.solve(request, Credential.from_raw(raw, selected), selected)
        except AnswerError as e:
            log_event(
                _logger,
                "coordinator.verify",
                LogContext(provider=selected.value),
                level=logging.INFO,
                ok=False,
                error_code=e.kind.value,
            )
            return False
        log_event(_logger, "coordinator.verify", LogContext(provider=selected.value), ok=True)
        return bool(result.text.strip())


__all__ = ["Coordinator"]

"""Answer service: the single entry point used by the Coordinator.

Routing
-------
The stored secret decides the route, not the caller's preference:
- endpoint-shaped secrets (URL or bare hostname) go to the
  :class:`~answer_relay.custom.EndpointDiscoveryClient`;
- anything else goes to the fixed client of the selected provider.

Guarantees
----------
- Requests without question text and without images are rejected with
  ``FORMAT_MISMATCH`` before any backend is contacted.
- A missing secret fails with ``AUTH`` and the set-up-your-key message.
- Every failure leaves this module as a classified :class:`AnswerError`.
- ``qa`` answers are normalized through :func:`format_answer`.
"""
from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..base.constants import API_KEY_MISSING, EMPTY_REQUEST
from ..base.credentials import sniff_provider
from ..base.errors import AnswerError, ErrorKind
from ..base.factory import ClientFactory
from ..base.kinds import Mode, ProviderKind
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import AnswerResult, Credential, Request
from ..base.prompt import format_answer
from ..base.resilience.error_handling import with_error_handling
from ..base.resilience.retry import RetryConfig, retry

_logger = get_logger("service.answer")


class AnswerService:
    """Pick a backend client for each request and return its answer.

    Parameters:
        http_client: Optional ``httpx.AsyncClient`` shared by every client
            this service creates (tests inject one backed by
            ``httpx.MockTransport``).
        clients: Optional pre-built clients keyed by provider tag; missing
            ones are created lazily through :class:`ClientFactory`.
        retry_config: Caller-side retry policy. Defaults to a single attempt.
    """

    def __init__(
        self,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        clients: Optional[Dict[ProviderKind, Any]] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self._http = http_client
        self._clients: Dict[ProviderKind, Any] = dict(clients or {})
        self._retry = retry_config or RetryConfig(max_attempts=1)

    def client_for(self, kind: ProviderKind) -> Any:
        client = self._clients.get(kind)
        if client is None:
            client = ClientFactory.create(kind, client=self._http)
            self._clients[kind] = client
        return client

    def _retry_config(self, ctx: LogContext) -> RetryConfig:
        def _log_attempt(*, attempt: int, max_attempts: int, delay: float | None, error: AnswerError | None) -> None:
            if error is None:
                return
            normalized_log_event(
                _logger,
                "answer.retry",
                ctx,
                phase="retry",
                attempt=attempt + 1,
                error_code=error.kind.value,
                max_attempts=max_attempts,
                delay=delay,
            )

        return dataclasses.replace(self._retry, attempt_logger=_log_attempt)

    async def solve(
        self,
        request: Request,
        credential: Credential | str | None,
        selected_provider: ProviderKind | str | None = None,
    ) -> AnswerResult:
        """Answer ``request`` with the backend implied by ``credential``.

        Raises:
            AnswerError: classified failure, never a raw exception.
        """
        if not isinstance(credential, Credential):
            credential = Credential.from_raw(credential, selected_provider)
        kind = sniff_provider(credential.raw, selected_provider or credential.provider)
        return await self._run(request, credential, kind, endpoint=credential.endpoint_url)

    async def call_custom_endpoint(self, request: Request, endpoint_url: str) -> AnswerResult:
        """Answer ``request`` through endpoint discovery regardless of shape."""
        credential = Credential(raw=(endpoint_url or "").strip(), provider=ProviderKind.CUSTOM)
        return await self._run(request, credential, ProviderKind.CUSTOM, endpoint=credential.endpoint_url)

    async def _run(self, request: Request, credential: Credential, kind: ProviderKind, endpoint: str) -> AnswerResult:
        ctx = LogContext(provider=kind.value, extra={"mode": request.mode.value})
        normalized_log_event(_logger, "answer.start", ctx, phase="start", credential=credential.masked())
        t0 = time.perf_counter()
        try:
            self._validate(request, credential, kind)

            @with_error_handling(provider=kind.value)
            async def _once() -> AnswerResult:
                client = self.client_for(kind)
                if kind is ProviderKind.CUSTOM:
                    return await client.call(request, endpoint)
                return await client.call(request, Credential(raw=credential.raw, provider=kind))

            result = await retry(self._retry_config(ctx))(_once)()
        except AnswerError as e:
            normalized_log_event(
                _logger,
                "answer.error",
                ctx,
                phase="finalize",
                error_code=e.kind.value,
                level=logging.WARNING,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )
            raise
        if request.mode is Mode.QA:
            result = AnswerResult(text=format_answer(result.text) or result.text, mode=result.mode)
        normalized_log_event(
            _logger,
            "answer.end",
            ctx,
            phase="finalize",
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return result

    @staticmethod
    def _validate(request: Request, credential: Credential, kind: ProviderKind) -> None:
        if not request.has_content():
            raise AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message=EMPTY_REQUEST, provider=kind.value)
        if not credential.raw:
            raise AnswerError(kind=ErrorKind.AUTH, message=API_KEY_MISSING, provider=kind.value)


__all__ = ["AnswerService"]

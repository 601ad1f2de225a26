"""Shared HTTP machinery for the fixed backend clients.

Purpose:
- Provide a reusable base class for clients speaking one known JSON wire
  format over a single POST, so Gemini and ChatGPT only describe their body
  and envelope.

External dependencies:
- ``httpx.AsyncClient`` (pooled via :mod:`answer_relay.base.http`, or
  injected by callers and tests).

Failure semantics:
- Transport timeouts become ``ErrorKind.TIMEOUT``; every other transport
  failure becomes ``ErrorKind.NETWORK``.
- Non-2xx statuses are classified by :func:`classify_status`.
- A 2xx whose envelope lacks the generated text is ``FORMAT_MISMATCH`` and is
  never retried.

Timeout strategy:
- Every POST is bounded by ``get_timeout_config().http_timeout_seconds``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from .constants import INVALID_RESPONSE_FORMAT, NETWORK_ERROR, REQUEST_TIMEOUT
from .errors import AnswerError, ErrorKind, classify_status
from .http import get_async_client
from .kinds import Mode, ProviderKind
from .logging import LogContext, get_logger, normalized_log_event
from .models import AnswerResult, Credential, Request
from .prompt import build_prompt
from .timeouts import get_timeout_config
from ..config import get_provider_config


def error_detail(response: httpx.Response) -> str:
    """Best-effort short reason from an error response body.

    Prefers ``error.message`` then ``error.code`` from a JSON body, falling
    back to the raw text.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict):
        detail = err.get("message") or err.get("code")
        if detail:
            return str(detail)
    if isinstance(err, str) and err:
        return err
    return response.text.strip()


class HttpProviderBase:
    """Base class for single-call JSON backends.

    Subclasses must set ``provider`` and implement:
    - ``_send(prompt, mode, credential)``: issue the one HTTP call.
    - ``_extract(payload)``: pull the generated text out of the envelope.
    """

    provider: ProviderKind

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        cfg = get_provider_config(self.provider.value)
        self._model = model or cfg.get("model")
        self._base_url = (base_url or cfg.get("base_url") or "").rstrip("/")
        self._client = client
        self._logger = get_logger(f"providers.{self.provider.value}")

    @property
    def provider_name(self) -> str:
        return self.provider.value

    def default_model(self) -> Optional[str]:
        return self._model

    # ----- Abstract surface -----
    async def _send(self, prompt: str, mode: Mode, credential: Credential) -> httpx.Response:  # pragma: no cover - abstract
        raise NotImplementedError

    def _extract(self, payload: Any) -> Optional[str]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _retry_after(self, response: httpx.Response) -> Optional[str]:
        """Return a ``Retry-After`` value to surface; none by default."""
        return None

    # ----- HTTP helpers -----
    def _http(self) -> httpx.AsyncClient:
        return self._client or get_async_client(self.provider_name)

    async def _post(
        self,
        url: str,
        body: Mapping[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Issue one bounded POST, classifying transport failures."""
        timeout = get_timeout_config().http_timeout_seconds
        try:
            return await self._http().post(
                url, json=dict(body), headers=headers, params=params, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise AnswerError(
                kind=ErrorKind.TIMEOUT, message=REQUEST_TIMEOUT, provider=self.provider_name, raw=e
            ) from e
        except (httpx.RequestError, OSError) as e:
            raise AnswerError(
                kind=ErrorKind.NETWORK, message=NETWORK_ERROR, provider=self.provider_name, raw=e
            ) from e

    def _status_error(self, response: httpx.Response) -> AnswerError:
        retry_after = self._retry_after(response) if response.status_code == 429 else None
        kind, message = classify_status(
            response.status_code, detail=error_detail(response), retry_after=retry_after
        )
        return AnswerError(
            kind=kind,
            message=message,
            provider=self.provider_name,
            status=response.status_code,
            retry_after=retry_after,
        )

    def _format_mismatch(self, response: httpx.Response) -> AnswerError:
        return AnswerError(
            kind=ErrorKind.FORMAT_MISMATCH,
            message=INVALID_RESPONSE_FORMAT,
            provider=self.provider_name,
            status=response.status_code,
        )

    def _parse(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError as e:
            raise self._format_mismatch(response) from e
        text = self._extract(payload)
        if text is None:
            raise self._format_mismatch(response)
        return text

    # ----- Public contract -----
    async def call(self, request: Request, credential: Credential) -> AnswerResult:
        """Send ``request`` to the backend and return the generated answer.

        Exactly one HTTP call is issued. Every failure is raised as a
        classified :class:`AnswerError`.
        """
        ctx = LogContext(provider=self.provider_name, model=self._model)
        normalized_log_event(
            self._logger,
            "provider.call.start",
            ctx,
            phase="start",
            mode=request.mode.value,
            has_images=request.has_images(),
        )
        t0 = time.perf_counter()
        try:
            response = await self._send(build_prompt(request), request.mode, credential)
            if not response.is_success:
                raise self._status_error(response)
            text = self._parse(response)
        except AnswerError as e:
            normalized_log_event(
                self._logger,
                "provider.call.error",
                ctx,
                phase="finalize",
                error_code=e.kind.value,
                level=logging.WARNING,
                status=e.status,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )
            raise
        normalized_log_event(
            self._logger,
            "provider.call.end",
            ctx,
            phase="finalize",
            status=response.status_code,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return AnswerResult(text=text, mode=request.mode)


__all__ = ["HttpProviderBase", "error_detail"]

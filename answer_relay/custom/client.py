"""Endpoint discovery client for self-hosted backends of unknown shape.

Purpose:
- Resolve both the path and the JSON schema of a user-supplied endpoint URL
  by probing a fixed, ordered list of candidates.

Algorithm:
1. Normalize the endpoint (``https://`` for bare hosts, no trailing slash).
2. For each candidate suffix in ``CUSTOM_ENDPOINT_CANDIDATE_PATHS`` order,
   pick the body schema from the resulting URL (``generateContent`` means the
   Gemini body, anything else the chat completions body) and POST it.
3. 2xx with a recognized answer field returns immediately. 401/403 and 429
   fail immediately. 404, other statuses, transport failures and 2xx bodies
   without a recognized field are recorded and the next candidate is tried.
4. Exhaustion raises one aggregate error listing every attempt.

Concurrency:
- Probes run strictly sequentially; a later probe is never issued before the
  previous one has been classified.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from ..base.constants import INVALID_RESPONSE_FORMAT
from ..base.credentials import normalize_endpoint
from ..base.errors import AnswerError, ErrorKind, classify_status
from ..base.extraction import DISCOVERY_STRATEGIES, Extractor, extract_first
from ..base.http import get_async_client
from ..base.kinds import Mode, ProbeSchema, ProviderKind
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import AnswerResult, ProbeAttempt, Request
from ..base.prompt import build_prompt
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import CUSTOM_DEFAULT_MODEL, CUSTOM_ENDPOINT_CANDIDATE_PATHS
from ..gemini.client import build_generate_content_body
from ..openai.client import build_chat_body

_PROBE_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def schema_for(path: str) -> ProbeSchema:
    """Select the probe body schema from the candidate path suffix."""
    return ProbeSchema.GENERATE_CONTENT if "generateContent" in path else ProbeSchema.CHAT_COMPLETIONS


def _aggregate_kind(attempts: Sequence[ProbeAttempt]) -> ErrorKind:
    kinds = {a.error for a in attempts if a.error is not None}
    if len(kinds) == 1:
        return kinds.pop()
    if kinds and kinds <= {ErrorKind.TIMEOUT, ErrorKind.NETWORK}:
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def aggregate_message(endpoint: str, attempts: Sequence[ProbeAttempt]) -> str:
    """Build the display message enumerating every attempted path."""
    lines = [f"Custom endpoint {endpoint} did not return a recognized answer. Tried:"]
    lines.extend(f"- {a.describe()}" for a in attempts)
    return "\n".join(lines)


class EndpointDiscoveryClient:
    """Probe a custom endpoint until one candidate yields an answer.

    Attributes:
        last_attempts: Ordered probe log of the most recent call, kept for
            diagnostics and tests. Callers receive failures only as the
            aggregate :class:`AnswerError`.
    """

    provider = ProviderKind.CUSTOM

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        model: Optional[str] = None,
        candidate_paths: Optional[Sequence[str]] = None,
        strategies: Sequence[Extractor] = DISCOVERY_STRATEGIES,
    ) -> None:
        cfg = get_provider_config(self.provider.value)
        self._model = model or cfg.get("model") or CUSTOM_DEFAULT_MODEL
        self._paths: Tuple[str, ...] = tuple(
            CUSTOM_ENDPOINT_CANDIDATE_PATHS if candidate_paths is None else candidate_paths
        )
        self._strategies = tuple(strategies)
        self._client = client
        self._logger = get_logger("providers.custom")
        self.last_attempts: Tuple[ProbeAttempt, ...] = ()

    @property
    def provider_name(self) -> str:
        return self.provider.value

    def default_model(self) -> Optional[str]:
        return self._model

    def candidates(self, endpoint_url: str) -> List[Tuple[str, str]]:
        """Return ``(suffix, url)`` pairs in probe order."""
        base = normalize_endpoint(endpoint_url)
        out = []
        for path in self._paths:
            suffix = path.format(model=self._model)
            out.append((suffix, f"{base}{suffix}"))
        return out

    def _body(self, schema: ProbeSchema, prompt: str, mode: Mode) -> Dict[str, Any]:
        if schema is ProbeSchema.GENERATE_CONTENT:
            return build_generate_content_body(prompt, mode)
        return build_chat_body(prompt, mode, self._model)

    def _record(self, attempts: List[ProbeAttempt], ctx: LogContext, attempt: ProbeAttempt) -> None:
        attempts.append(attempt)
        self.last_attempts = tuple(attempts)
        normalized_log_event(
            self._logger,
            "probe.attempt",
            ctx,
            phase="probe",
            attempt=len(attempts),
            error_code=attempt.error.value if attempt.error else None,
            level=logging.DEBUG if attempt.error is None else logging.INFO,
            path=attempt.path or "/",
            schema=attempt.schema.value,
            status=attempt.status,
        )

    def _fail_fast(
        self,
        response: httpx.Response,
        attempts: List[ProbeAttempt],
    ) -> AnswerError:
        retry_after = response.headers.get("retry-after") if response.status_code == 429 else None
        kind, message = classify_status(response.status_code, retry_after=retry_after)
        return AnswerError(
            kind=kind,
            message=message,
            provider=self.provider_name,
            status=response.status_code,
            retry_after=retry_after,
            attempts=tuple(attempts),
        )

    async def call(self, request: Request, endpoint_url: str) -> AnswerResult:
        """Discover the endpoint's shape and return its answer.

        Raises:
            AnswerError: ``AUTH``/``RATE_LIMIT`` as soon as a probe reports
                them; otherwise an aggregate error after the last candidate.
        """
        endpoint = normalize_endpoint(endpoint_url)
        ctx = LogContext(provider=self.provider_name, model=self._model, target=endpoint)
        prompt = build_prompt(request)
        timeout = get_timeout_config().http_timeout_seconds
        http = self._client or get_async_client("custom.probe")
        attempts: List[ProbeAttempt] = []
        self.last_attempts = ()
        t0 = time.perf_counter()

        for suffix, url in self.candidates(endpoint):
            schema = schema_for(suffix)
            try:
                response = await http.post(
                    url,
                    json=self._body(schema, prompt, request.mode),
                    headers=_PROBE_HEADERS,
                    timeout=timeout,
                )
            except httpx.TimeoutException:
                self._record(attempts, ctx, ProbeAttempt(suffix, schema, error=ErrorKind.TIMEOUT, detail="timed out"))
                continue
            except (httpx.RequestError, OSError) as e:
                detail = str(e) or type(e).__name__
                self._record(attempts, ctx, ProbeAttempt(suffix, schema, error=ErrorKind.NETWORK, detail=detail))
                continue

            status = response.status_code
            if status in (401, 403, 429):
                err = self._fail_fast(response, attempts)
                self._record(attempts, ctx, ProbeAttempt(suffix, schema, status=status, error=err.kind))
                err.attempts = tuple(attempts)
                raise err
            if not response.is_success:
                self._record(
                    attempts,
                    ctx,
                    ProbeAttempt(suffix, schema, status=status, error=ErrorKind.UNKNOWN, detail=response.reason_phrase),
                )
                continue

            try:
                payload = response.json()
            except ValueError:
                payload = None
            text = extract_first(payload, self._strategies) if payload is not None else None
            if text is None:
                self._record(
                    attempts,
                    ctx,
                    ProbeAttempt(
                        suffix, schema, status=status, error=ErrorKind.FORMAT_MISMATCH, detail="no recognized answer field"
                    ),
                )
                continue

            self._record(attempts, ctx, ProbeAttempt(suffix, schema, status=status))
            normalized_log_event(
                self._logger,
                "provider.call.end",
                ctx,
                phase="finalize",
                attempt=len(attempts),
                path=suffix or "/",
                schema=schema.value,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )
            return AnswerResult(text=text, mode=request.mode)

        kind = _aggregate_kind(attempts)
        normalized_log_event(
            self._logger,
            "probe.exhausted",
            ctx,
            phase="finalize",
            attempt=len(attempts),
            error_code=kind.value,
            level=logging.WARNING,
        )
        message = aggregate_message(endpoint, attempts) if attempts else INVALID_RESPONSE_FORMAT
        raise AnswerError(
            kind=kind,
            message=message,
            provider=self.provider_name,
            attempts=tuple(attempts),
        )


__all__ = ["EndpointDiscoveryClient", "aggregate_message", "schema_for"]

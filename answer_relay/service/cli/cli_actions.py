"""CLI action handlers.

Purpose
-------
Subcommand handlers for the answer-relay CLI, keeping the entrypoint thin.
Each handler builds a :class:`Coordinator` over an in-memory settings store,
runs one action on a fresh event loop and closes pooled HTTP clients.

Fallback & Error Semantics
--------------------------
- The secret comes from ``--key`` or, failing that, the provider's
  environment variable (``GEMINI_API_KEY``, ``OPENAI_API_KEY``,
  ``CUSTOM_ENDPOINT_URL``).
- Failures are printed as their classified message; the exit code is 1.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Any, Dict, Optional

from ...base.dto import ResponseEnvelope
from ...base.errors import AnswerError, ErrorKind
from ...base.http import aclose_all_clients
from ...base.kinds import ProviderKind
from ...bus.coordinator import Coordinator
from ...config import get_provider_config
from ...config.defaults import DEFAULT_PROVIDER, STORAGE_KEY_PROVIDER, STORAGE_KEY_SECRET
from ...persistence.memory_store import InMemorySettingsStore
from ..answer_service import AnswerService
from .cli_utils import emit


def resolve_secret(provider: ProviderKind, explicit: Optional[str]) -> str:
    """Return ``explicit`` or the provider's configured credential."""
    if explicit:
        return explicit.strip()
    return (get_provider_config(provider.value).get("api_key") or "").strip()


def parse_option_images(values: list[str]) -> list[Dict[str, str]]:
    """Parse ``LABEL=URL`` pairs; malformed entries raise ``ValueError``."""
    out = []
    for raw in values:
        label, sep, src = raw.partition("=")
        if not sep or not label.strip() or not src.strip():
            raise ValueError(f"invalid --option-image {raw!r}; expected LABEL=URL")
        out.append({"option": label.strip(), "src": src.strip()})
    return out


def _coordinator(provider: ProviderKind, secret: str, service: Optional[AnswerService]) -> Coordinator:
    store = InMemorySettingsStore({STORAGE_KEY_SECRET: secret, STORAGE_KEY_PROVIDER: provider.value})
    return Coordinator(store, service=service)


async def _run_and_close(coro) -> Any:
    try:
        return await coro
    finally:
        await aclose_all_clients()


def handle_solve(args: argparse.Namespace, *, service: Optional[AnswerService] = None) -> int:
    """Answer ``--question`` and print the result.

    Returns
    -------
    int
        0 on success, 1 on any classified failure.
    """
    provider = ProviderKind.parse(args.provider, default=ProviderKind(DEFAULT_PROVIDER))
    try:
        option_images = parse_option_images(args.option_image)
    except ValueError as e:
        emit(ResponseEnvelope.fail(AnswerError(kind=ErrorKind.FORMAT_MISMATCH, message=str(e))).to_wire(), args.json)
        return 1
    message: Dict[str, Any] = {
        "action": "solve",
        "questionText": args.question,
        "customPrompt": args.prompt,
        "mode": args.mode,
        "provider": provider.value,
    }
    if args.question_image or option_images:
        message["images"] = {"questionImage": args.question_image, "optionImages": option_images}
    coordinator = _coordinator(provider, resolve_secret(provider, args.key), service)
    envelope = asyncio.run(_run_and_close(coordinator.handle(message)))
    emit(envelope, args.json)
    return 0 if envelope.get("success") else 1


def handle_verify(args: argparse.Namespace, *, service: Optional[AnswerService] = None) -> int:
    """Send the verification probe and print ``ok`` or ``failed``."""
    provider = ProviderKind.parse(args.provider, default=ProviderKind(DEFAULT_PROVIDER))
    secret = resolve_secret(provider, args.key)
    coordinator = _coordinator(provider, secret, service)
    ok = asyncio.run(_run_and_close(coordinator.verify_credential(secret, provider)))
    print("ok" if ok else "failed")
    return 0 if ok else 1


__all__ = ["handle_solve", "handle_verify", "parse_option_images", "resolve_secret"]

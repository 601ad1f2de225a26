"""Shared async HTTP client pool for backend clients.

Purpose:
    Provide reusable ``httpx.AsyncClient`` instances to avoid per-call
    allocations and reduce connection overhead across the Gemini, ChatGPT and
    custom endpoint clients. Timeouts derive exclusively from
    :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Lifecycle & cleanup:
    - Clients are cached by ``(purpose, event loop)``; an ``AsyncClient`` is
      bound to the loop it first ran on, so a new loop gets a new client.
    - Call :func:`aclose_all_clients` on application shutdown (the FastAPI
      lifespan and the CLI do this).
"""

from __future__ import annotations

import asyncio
from typing import Dict, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[str, int], httpx.AsyncClient] = {}


def _loop_key() -> int:
    try:
        return id(asyncio.get_running_loop())
    except RuntimeError:
        return 0


def get_async_client(purpose: str) -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for ``purpose``.

    Parameters:
        purpose: A short string discriminating separate pools (e.g.,
            "gemini", "custom.probe"). Keep stable to maximize reuse.

    Returns:
        A reusable ``httpx.AsyncClient`` configured with the HTTP timeout.
    """
    key = (purpose, _loop_key())
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client
    timeout = get_timeout_config().http_timeout_seconds
    client = httpx.AsyncClient(timeout=timeout)
    _CLIENTS[key] = client
    return client


async def aclose_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    clients = list(_CLIENTS.values())
    _CLIENTS.clear()
    for c in clients:
        if not c.is_closed:
            await c.aclose()


__all__ = ["get_async_client", "aclose_all_clients"]

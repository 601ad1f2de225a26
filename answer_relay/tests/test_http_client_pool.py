"""Unit tests for the shared async httpx client pool.

Covers:
- Same purpose on the same loop returns the same instance.
- Different purposes yield different instances.
- Closing the pool closes every client and starts fresh afterwards.
"""
from __future__ import annotations

from answer_relay.base.http import aclose_all_clients, get_async_client


async def test_same_purpose_returns_same_instance():
    try:
        c1 = get_async_client("gemini")
        c2 = get_async_client("gemini")
        assert c1 is c2, "Expected pooled client instances to be identical for same key"  # nosec B101
    finally:
        await aclose_all_clients()


async def test_different_purpose_returns_different_instances():
    try:
        c1 = get_async_client("gemini")
        c2 = get_async_client("custom.probe")
        assert c1 is not c2, "Different purposes should not share the same client instance"  # nosec B101
    finally:
        await aclose_all_clients()


async def test_close_all_clients_resets_pool():
    c1 = get_async_client("chatgpt")
    await aclose_all_clients()
    assert c1.is_closed  # nosec B101
    c2 = get_async_client("chatgpt")
    try:
        assert c2 is not c1  # nosec B101
    finally:
        await aclose_all_clients()

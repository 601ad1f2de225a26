"""ForegroundAgent: single outstanding call, rendering and teardown."""

from __future__ import annotations

import asyncio

import pytest

from answer_relay.base.constants import CALL_IN_PROGRESS
from answer_relay.base.errors import ErrorKind
from answer_relay.base.kinds import Mode
from answer_relay.base.models import Request
from answer_relay.base.resilience.retry import RetryConfig
from answer_relay.bus import (
    CONTEXT_INVALIDATED,
    COORDINATOR_TARGET,
    CallInProgress,
    ForegroundAgent,
    LocalTransport,
    MessageBus,
)


class _Renderer:
    def __init__(self):
        self.answers = []
        self.errors = []
        self.reload_notices = 0

    def show_answer(self, result):
        self.answers.append(result)

    def show_error(self, message, kind):
        self.errors.append((message, kind))

    def show_reload_notice(self):
        self.reload_notices += 1


def _agent(handler, **kwargs):
    transport = LocalTransport()
    transport.register(COORDINATOR_TARGET, handler)
    bus = MessageBus(transport, retry_config=RetryConfig(max_attempts=1, delay_seconds=0), timeout_seconds=1)
    renderer = _Renderer()
    return ForegroundAgent(bus, renderer, **kwargs), renderer


async def test_ask_relays_solve_and_renders_answer():
    seen = []

    async def _coordinator(message):
        seen.append(message)
        return {"success": True, "result": {"text": "A: 4", "mode": "qa"}}

    agent, renderer = _agent(_coordinator)

    response = await agent.ask(Request(question_text="What is 2+2?"))

    assert response["success"] is True  # nosec B101
    assert seen[0]["action"] == "solve"  # nosec B101
    assert seen[0]["questionText"] == "What is 2+2?"  # nosec B101
    assert [a.text for a in renderer.answers] == ["A: 4"]  # nosec B101
    assert not agent.busy  # nosec B101


async def test_second_ask_while_open_is_rejected():
    release = asyncio.Event()
    calls = []

    async def _coordinator(message):
        calls.append(message)
        await release.wait()
        return {"success": True, "result": {"text": "A: 4", "mode": "qa"}}

    agent, _ = _agent(_coordinator)
    first = asyncio.ensure_future(agent.ask(Request(question_text="one")))
    await asyncio.sleep(0)
    assert agent.busy  # nosec B101

    with pytest.raises(CallInProgress) as ei:
        await agent.ask(Request(question_text="two"))

    assert str(ei.value) == CALL_IN_PROGRESS  # nosec B101
    release.set()
    await first
    assert len(calls) == 1  # nosec B101
    assert not agent.busy  # nosec B101


async def test_classified_failure_is_rendered_as_error():
    async def _coordinator(message):
        return {"success": False, "error": "Rate limit exceeded.", "errorKind": "rate_limit"}

    agent, renderer = _agent(_coordinator)

    response = await agent.ask(Request(question_text="q"))

    assert response == {"success": False, "error": "Rate limit exceeded.", "errorKind": "rate_limit"}  # nosec B101
    assert renderer.errors == [("Rate limit exceeded.", ErrorKind.RATE_LIMIT)]  # nosec B101
    assert renderer.answers == []  # nosec B101


async def test_context_invalidation_shows_reload_notice():
    async def _coordinator(message):
        raise RuntimeError("Extension context invalidated.")

    agent, renderer = _agent(_coordinator)

    response = await agent.ask(Request(question_text="q"))

    assert response["errorKind"] == "context_invalid"  # nosec B101
    assert renderer.reload_notices == 1  # nosec B101
    assert renderer.errors == []  # nosec B101


async def test_torn_down_agent_fails_without_sending():
    calls = []

    async def _coordinator(message):
        calls.append(message)
        return {"success": True}

    agent, renderer = _agent(_coordinator)
    agent.teardown()

    response = await agent.ask(Request(question_text="q"))
    pushed = await agent.handle({"action": "solveFromSelection", "questionText": "q"})

    assert response["errorKind"] == "context_invalid"  # nosec B101
    assert pushed == {"success": False, "error": CONTEXT_INVALIDATED}  # nosec B101
    assert renderer.reload_notices == 1  # nosec B101
    assert calls == []  # nosec B101


async def test_pushed_selection_is_acknowledged_then_solved():
    seen = []

    async def _coordinator(message):
        seen.append(message)
        return {"success": True, "result": {"text": "B: 5", "mode": "coding"}}

    agent, renderer = _agent(_coordinator, custom_prompt="Explain.", mode=Mode.CODING)

    ack = await agent.handle({"action": "solveFromSelection", "questionText": "3+2"})
    await agent.drain()

    assert ack == {"success": True, "result": {"accepted": True}}  # nosec B101
    assert seen[0]["customPrompt"] == "Explain."  # nosec B101
    assert seen[0]["mode"] == "coding"  # nosec B101
    assert renderer.answers[0].mode is Mode.CODING  # nosec B101


async def test_unknown_push_action_is_format_mismatch():
    agent, _ = _agent(lambda message: None)

    response = await agent.handle({"action": "explode"})
    pong = await agent.handle({"action": "ping"})

    assert response["errorKind"] == "format_mismatch"  # nosec B101
    assert pong == {"success": True, "result": {"pong": True}}  # nosec B101

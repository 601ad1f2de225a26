from __future__ import annotations

import pytest

from answer_relay.bus.pending_call import CallState, PendingCall


def test_arm_starts_fresh_attempts_with_own_deadline():
    call = PendingCall(target="tab-1", retries_left=1)
    assert call.state is CallState.IDLE  # nosec B101
    assert not call.is_open()  # nosec B101

    first = call.arm(10.0)
    second = call.arm(20.0)

    assert (first, second) == (1, 2)  # nosec B101
    assert call.deadline == 20.0  # nosec B101
    assert call.is_open(2)  # nosec B101
    assert not call.is_open(1)  # nosec B101


def test_settles_exactly_once():
    call = PendingCall(target="tab-1")
    call.arm(1.0)

    assert call.settle(CallState.TIMEOUT) is True  # nosec B101
    assert call.settle(CallState.SUCCESS) is False  # nosec B101
    assert call.state is CallState.TIMEOUT  # nosec B101
    assert call.settled  # nosec B101
    assert call.deadline is None  # nosec B101
    assert not call.is_open()  # nosec B101


def test_settled_call_cannot_be_rearmed():
    call = PendingCall(target="tab-1")
    call.arm(1.0)
    call.settle(CallState.FAILED)
    with pytest.raises(RuntimeError):
        call.arm(2.0)


def test_non_terminal_settle_is_rejected():
    call = PendingCall(target="tab-1")
    with pytest.raises(ValueError):
        call.settle(CallState.AWAITING)


def test_ids_are_unique():
    assert PendingCall(target="a").id != PendingCall(target="a").id  # nosec B101

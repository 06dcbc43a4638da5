"""Payment Gate Enforcement - tests for the pure policy and transitions.

Tests cover:
    - disabled = expired OR offline OR in_flight over the full truth table
    - Block reason ordering (expired before offline before in progress)
    - check_payment_start error dict shape and message text
    - Phase derivation and lifecycle transitions; LOCKED is terminal
"""

from datetime import datetime, timezone
from itertools import product

import pytest

from tipjar.core.domain_types import BlockReason, PaymentPhase
from tipjar.core.enforce_payment import (
    abandon_payment,
    begin_payment,
    block_reason,
    check_payment_start,
    clear_acknowledgment,
    complete_payment,
    lock,
    payment_disabled,
    payment_phase,
)
from tipjar.core.session_state import PaymentSession

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
ABA = "open-aba-scanner-btn"


# ─── payment_disabled ────────────────────────────────────────────

@pytest.mark.parametrize("expired,online,in_flight", list(product([True, False], repeat=3)))
def test_disabled_truth_table(expired, online, in_flight):
    expected = expired or not online or in_flight
    assert payment_disabled(expired, online, in_flight) is expected


# ─── block_reason / check_payment_start ──────────────────────────

def test_expired_reported_before_offline():
    assert block_reason(expired=True, online=False, in_flight=True) is BlockReason.EXPIRED


def test_offline_reported_before_in_progress():
    assert block_reason(expired=False, online=False, in_flight=True) is BlockReason.OFFLINE


def test_in_progress_reason():
    assert block_reason(False, True, True) is BlockReason.IN_PROGRESS


def test_no_reason_when_enabled():
    assert block_reason(False, True, False) is None


def test_check_start_passes_when_enabled():
    assert check_payment_start(PaymentSession(), expired=False, online=True, button_id=ABA) is None


def test_check_start_offline_error_shape():
    error = check_payment_start(PaymentSession(), expired=False, online=False, button_id=ABA)
    assert error["status"] == "error"
    assert error["error_code"] == "PAYMENT_REJECTED"
    assert error["reason"] is BlockReason.OFFLINE
    assert error["message"] == f"Action blocked: Button ({ABA}) clicked when offline."


def test_check_start_while_in_flight():
    error = check_payment_start(
        PaymentSession(in_flight=True), expired=False, online=True, button_id=ABA,
    )
    assert error["reason"] is BlockReason.IN_PROGRESS
    assert error["message"].endswith("clicked when payment in progress.")


def test_locked_session_rejected_as_expired():
    error = check_payment_start(
        PaymentSession(locked=True), expired=False, online=True, button_id=ABA,
    )
    assert error["reason"] is BlockReason.EXPIRED


# ─── Phases and transitions ──────────────────────────────────────

def test_fresh_session_is_idle():
    assert payment_phase(PaymentSession()) is PaymentPhase.IDLE


def test_begin_then_complete_acknowledges():
    session = begin_payment(PaymentSession())
    assert payment_phase(session) is PaymentPhase.IN_FLIGHT
    session = complete_payment(session, NOW)
    assert payment_phase(session) is PaymentPhase.ACKNOWLEDGED
    assert session.in_flight is False
    assert session.last_success_at == NOW


def test_clear_acknowledgment_returns_to_idle_keeping_timestamp():
    session = clear_acknowledgment(complete_payment(begin_payment(PaymentSession()), NOW))
    assert payment_phase(session) is PaymentPhase.IDLE
    assert session.last_success_at == NOW


def test_abandon_payment_does_not_acknowledge():
    session = abandon_payment(begin_payment(PaymentSession()))
    assert session.in_flight is False
    assert session.acknowledged is False
    assert session.last_success_at is None


def test_lock_clears_in_flight_and_acknowledgment():
    session = lock(begin_payment(PaymentSession(acknowledged=True)))
    assert payment_phase(session) is PaymentPhase.LOCKED
    assert session.in_flight is False
    assert session.acknowledged is False


def test_complete_ignored_once_locked():
    locked = lock(begin_payment(PaymentSession()))
    assert complete_payment(locked, NOW) is locked


def test_locked_session_stays_locked_through_transitions():
    locked = lock(PaymentSession(last_success_at=NOW))
    for step in (abandon_payment, clear_acknowledgment, lock):
        assert payment_phase(step(locked)) is PaymentPhase.LOCKED
    assert locked.last_success_at == NOW

"""Session Schemas - request validation and snapshot serialization.

Tests cover:
    - SessionCreate strips url and rejects blank values
    - PaymentStart accepts only the two payment buttons
    - TimerRestart accepts strings and integers, bounded length
    - SessionResponse.from_snapshot flattens the read model
"""

import pytest
from pydantic import ValidationError

from tipjar.core.countdown import start_timer
from tipjar.core.feed_records import loaded_feed
from tipjar.core.session_state import PaymentSession, Supporter, TimerState
from tipjar.core.session_view import build_snapshot
from tipjar.schemas.session import (
    PaymentStart, SessionCreate, SessionResponse, TimerRestart,
)


def test_session_create_strips_url():
    assert SessionCreate(url="  https://example.org  ").url == "https://example.org"


def test_session_create_rejects_blank_url():
    with pytest.raises(ValidationError):
        SessionCreate(url="   ")


def test_session_create_defaults():
    body = SessionCreate(url="https://example.org")
    assert body.online is True
    assert body.pixel_ratio == 1.0
    assert body.referrer is None


@pytest.mark.parametrize("button_id", ["open-aba-scanner-btn", "open-acleda-scanner-btn"])
def test_payment_start_accepts_known_buttons(button_id):
    assert PaymentStart(button_id=button_id).button_id == button_id


def test_payment_start_rejects_unknown_button():
    with pytest.raises(ValidationError):
        PaymentStart(button_id="open-paypal-btn")


def test_timer_restart_accepts_string_and_int():
    assert TimerRestart(initial="10:53").initial == "10:53"
    assert TimerRestart(initial=90).initial == 90


def test_timer_restart_rejects_long_string():
    with pytest.raises(ValidationError):
        TimerRestart(initial="1" * 17)


def test_response_from_snapshot():
    snap = build_snapshot(
        TimerState(65), True,
        loaded_feed((Supporter("B", 10.0), Supporter("A", 5.0))),
        PaymentSession(),
    )
    res = SessionResponse.from_snapshot("abc", snap)
    assert res.id == "abc"
    assert res.remaining_time_display == "01:05"
    assert [s.display_amount for s in res.feed.supporters] == ["$10.00", "$5.00"]
    assert res.feed.message is None
    assert res.payment.phase.value == "idle"


def test_response_for_expired_snapshot():
    snap = build_snapshot(start_timer(0), False, loaded_feed(()), PaymentSession(locked=True))
    data = SessionResponse.from_snapshot("abc", snap).model_dump(mode="json")
    assert data["theme"] == "expired"
    assert data["payment"]["phase"] == "locked"
    assert data["payment"]["disabled"] is True
    assert data["feed"]["message"] == "No donations yet. Be the first!"

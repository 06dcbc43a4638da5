"""Countdown - tests for pure parsing and tick transitions.

Tests cover:
    - parse_duration accepts MM:SS and raw second counts
    - parse_duration rejects malformed input with TimerParseError
    - tick() is monotonic and expires exactly once
    - format_display zero-pads and shows "Expired"
"""

import pytest

from tipjar.core.countdown import (
    format_display, just_expired, parse_duration, start_timer, tick,
)
from tipjar.core.domain_types import TimerStatus
from tipjar.core.errors import TimerParseError
from tipjar.core.session_state import TimerState


# ─── parse_duration ──────────────────────────────────────────────

def test_parse_minutes_and_seconds():
    assert parse_duration("10:53") == 653


def test_parse_zero_padded():
    assert parse_duration("02:53") == 173


def test_parse_raw_second_count_string():
    assert parse_duration("90") == 90


def test_parse_raw_second_count_int():
    assert parse_duration(45) == 45


def test_parse_strips_whitespace():
    assert parse_duration(" 1:05 ") == 65


@pytest.mark.parametrize("raw", [
    "", "abc", "1:xx", "xx:10", "1:2:3", "1.5:00", ":", "10:", None, True, 3.5,
])
def test_parse_malformed_raises(raw):
    with pytest.raises(TimerParseError) as exc_info:
        parse_duration(raw)
    assert exc_info.value.code == "TIMER_PARSE_ERROR"


# ─── start_timer / tick ──────────────────────────────────────────

def test_start_timer_is_running():
    state = start_timer(3)
    assert state.status is TimerStatus.RUNNING
    assert state.remaining_seconds == 3


def test_start_timer_non_positive_is_expired():
    assert start_timer(0).expired
    assert start_timer(-5).expired
    assert start_timer(-5).remaining_seconds == 0


def test_tick_decrements():
    assert tick(TimerState(remaining_seconds=5)).remaining_seconds == 4


def test_tick_to_zero_expires():
    state = tick(TimerState(remaining_seconds=1))
    assert state.expired
    assert state.remaining_seconds == 0


def test_tick_on_expired_is_noop():
    expired = TimerState(remaining_seconds=0, status=TimerStatus.EXPIRED)
    assert tick(expired) is expired


def test_tick_sequence_is_monotonic_and_expires_once():
    state = start_timer(5)
    transitions = 0
    previous = state.remaining_seconds
    for _ in range(10):
        after = tick(state)
        assert after.remaining_seconds <= previous
        if just_expired(state, after):
            transitions += 1
        previous = after.remaining_seconds
        state = after
    assert transitions == 1
    assert state.expired


# ─── format_display ──────────────────────────────────────────────

def test_display_pads_minutes_and_seconds():
    assert format_display(TimerState(remaining_seconds=65)) == "01:05"


def test_display_large_minutes():
    assert format_display(TimerState(remaining_seconds=653)) == "10:53"


def test_display_expired():
    assert format_display(start_timer(0)) == "Expired"

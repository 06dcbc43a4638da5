"""Countdown - pure parsing and tick transitions for the session timer.

Invariants:
    - parse_duration raises TimerParseError on malformed input (never guesses)
    - tick() is monotonically non-increasing in remaining_seconds
    - RUNNING -> EXPIRED happens on exactly one tick; EXPIRED is absorbing for tick()

Design Decisions:
    - Reducer shape (state -> state): the asyncio handle in services/ is the
      only side-effecting primitive, so every transition is testable here
"""

from tipjar.core.domain_types import EXPIRED_DISPLAY, TimerStatus
from tipjar.core.errors import TimerParseError
from tipjar.core.session_state import TimerState


def parse_duration(raw: str | int) -> int:
    """Parse ``MM:SS`` or a raw second count into seconds.

    Raises:
        TimerParseError: if the input matches neither form.
    """
    if isinstance(raw, bool):
        raise TimerParseError(raw)
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str):
        raise TimerParseError(raw)

    parts = raw.strip().split(":")
    try:
        if len(parts) == 1:
            return int(parts[0])
        if len(parts) == 2:
            minutes, seconds = int(parts[0]), int(parts[1])
            return minutes * 60 + seconds
    except ValueError:
        raise TimerParseError(raw) from None
    raise TimerParseError(raw)


def start_timer(total_seconds: int) -> TimerState:
    """Fresh timer. A non-positive duration starts out expired."""
    if total_seconds <= 0:
        return TimerState(remaining_seconds=0, status=TimerStatus.EXPIRED)
    return TimerState(remaining_seconds=total_seconds)


def tick(state: TimerState) -> TimerState:
    """Advance one second. No-op once expired."""
    if state.expired:
        return state
    remaining = state.remaining_seconds - 1
    if remaining <= 0:
        return TimerState(remaining_seconds=0, status=TimerStatus.EXPIRED)
    return TimerState(remaining_seconds=remaining)


def just_expired(before: TimerState, after: TimerState) -> bool:
    """True only for the transition that crossed into EXPIRED."""
    return not before.expired and after.expired


def format_display(state: TimerState) -> str:
    if state.expired:
        return EXPIRED_DISPLAY
    minutes, seconds = divmod(state.remaining_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"

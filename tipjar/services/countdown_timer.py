"""Countdown Timer - drives core.countdown transitions from a one-second tick task.

Invariants:
    - At most one tick task; restart() cancels it before starting a fresh run
    - Expiration observers fire exactly once per run
    - Malformed input never raises: the default duration is used and a warning logged
"""

import asyncio
import logging
from collections.abc import Callable

from tipjar.core.countdown import (
    format_display, just_expired, parse_duration, start_timer, tick,
)
from tipjar.core.domain_types import DEFAULT_TIMER_SECONDS
from tipjar.core.errors import TimerParseError
from tipjar.core.session_state import TimerState
from tipjar.services.task_slot import TaskSlot

logger = logging.getLogger(__name__)


def resolve_duration(raw: str | int) -> int:
    """parse_duration with the 173-second fallback."""
    try:
        return parse_duration(raw)
    except TimerParseError as e:
        logger.warning(
            f"{e.message}. Defaulting to {DEFAULT_TIMER_SECONDS} seconds (2:53).",
        )
        return DEFAULT_TIMER_SECONDS


class CountdownTimer:
    """Session countdown. Call start() from within the running event loop."""

    def __init__(
        self,
        initial: str | int,
        on_expired: Callable[[], None] | None = None,
        tick_seconds: float = 1.0,
    ):
        self.tick_seconds = tick_seconds
        self._observers: list[Callable[[], None]] = []
        if on_expired is not None:
            self._observers.append(on_expired)
        self._state = start_timer(resolve_duration(initial))
        self._notified = False
        self._ticker = TaskSlot("countdown-tick")

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def expired(self) -> bool:
        return self._state.expired

    @property
    def display(self) -> str:
        return format_display(self._state)

    def add_observer(self, on_expired: Callable[[], None]) -> None:
        self._observers.append(on_expired)

    def start(self) -> None:
        """Tick from the current state. An already-expired state notifies once."""
        self._ticker.cancel()
        if self._state.expired:
            self._notify_expired()
            return
        self._ticker.replace(self._run())

    def restart(self, initial: str | int) -> None:
        """Begin a fresh RUNNING state, cancelling any pending tick."""
        self._ticker.cancel()
        self._state = start_timer(resolve_duration(initial))
        self._notified = False
        self.start()

    def stop(self) -> None:
        self._ticker.cancel()

    async def _run(self) -> None:
        while not self._state.expired:
            await asyncio.sleep(self.tick_seconds)
            self.advance()

    def advance(self) -> None:
        """Apply one tick. Exposed for the tick task and for tests."""
        before = self._state
        self._state = tick(before)
        if just_expired(before, self._state):
            self._notify_expired()

    def _notify_expired(self) -> None:
        if self._notified:
            return
        self._notified = True
        logger.info("Countdown expired")
        for observer in list(self._observers):
            observer()

"""Session State - immutable value objects for every session component.

Invariants:
    - All records are frozen: a transition returns a new instance
    - TimerState.remaining_seconds >= 0; EXPIRED implies remaining_seconds == 0
    - FeedState.supporters is sorted by amount descending whenever
      loading is False and error is None
    - PaymentSession.in_flight is never True while offline (enforced by the gate)

Design Decisions:
    - Frozen dataclasses: a reader never observes a half-applied update
    - Tuples for sequences so snapshots stay hashable and immutable
"""

from dataclasses import dataclass
from datetime import datetime

from tipjar.core.domain_types import FeedErrorKind, TimerStatus


@dataclass(frozen=True)
class TimerState:
    remaining_seconds: int
    status: TimerStatus = TimerStatus.RUNNING

    @property
    def expired(self) -> bool:
        return self.status is TimerStatus.EXPIRED


@dataclass(frozen=True)
class ConnectivityState:
    online: bool = True


@dataclass(frozen=True)
class Supporter:
    name: str
    amount: float


@dataclass(frozen=True)
class FeedState:
    """Supporter feed snapshot, replaced wholesale on every cycle."""
    supporters: tuple[Supporter, ...] = ()
    loading: bool = True
    error: FeedErrorKind | None = None


@dataclass(frozen=True)
class PaymentSession:
    """Payment lifecycle for one session.

    ``acknowledged`` is the transient "thank you" banner; ``locked`` is set once
    the countdown expires.
    """
    in_flight: bool = False
    last_success_at: datetime | None = None
    acknowledged: bool = False
    locked: bool = False


@dataclass(frozen=True)
class NotificationToken:
    """Per-session visit notification token.

    ``attempted`` blocks a second try within the same load; a new session
    load starts from a fresh token, which is the retry opportunity.
    """
    sent: bool = False
    attempted: bool = False

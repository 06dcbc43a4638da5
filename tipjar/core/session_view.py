"""Session View - the read model handed to the presentation layer.

Invariants:
    - Every field is derived from component snapshots at read time, never cached
    - theme is EXPIRED exactly when is_expired is True; callers may pass a
      latched expiry that outlives the timer state
"""

from dataclasses import dataclass

from tipjar.core.countdown import format_display
from tipjar.core.domain_types import PaymentPhase, Theme
from tipjar.core.enforce_payment import payment_disabled, payment_phase
from tipjar.core.feed_records import feed_message
from tipjar.core.session_state import FeedState, PaymentSession, TimerState


@dataclass(frozen=True)
class SessionSnapshot:
    is_expired: bool
    is_online: bool
    theme: Theme
    feed_state: FeedState
    feed_message: str | None
    payment_session: PaymentSession
    payment_phase: PaymentPhase
    payment_disabled: bool
    remaining_time_display: str

    @property
    def show_thank_you(self) -> bool:
        return self.payment_session.acknowledged


def derive_theme(is_expired: bool) -> Theme:
    return Theme.EXPIRED if is_expired else Theme.DEFAULT


def build_snapshot(
    timer: TimerState,
    online: bool,
    feed: FeedState,
    payment: PaymentSession,
    expired: bool | None = None,
) -> SessionSnapshot:
    if expired is None:
        expired = timer.expired
    return SessionSnapshot(
        is_expired=expired,
        is_online=online,
        theme=derive_theme(expired),
        feed_state=feed,
        feed_message=feed_message(feed),
        payment_session=payment,
        payment_phase=payment_phase(payment),
        payment_disabled=payment_disabled(
            expired or payment.locked, online, payment.in_flight,
        ),
        remaining_time_display=format_display(timer),
    )

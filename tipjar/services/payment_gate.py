"""Payment Gate - permits payment actions and tracks the payment lifecycle.

Invariants:
    - disabled = expired OR offline OR in_flight, computed on read, never stored
    - start() while disabled is rejected with an error dict and changes nothing
    - in_flight is reset (no acknowledgment) the moment connectivity drops
    - One pending confirmation and one pending thank-you clear at most;
      a new one replaces the old
    - Expiry locks the gate, clears the acknowledgment and cancels both timers;
      LOCKED lasts for the rest of the session, a timer restart does not reopen it

Design Decisions:
    - Confirmation is pluggable: auto_confirm schedules a simulated success
      after confirm_delay; otherwise succeed() must be called externally
    - Late confirmations (not in flight, or locked) are ignored, so an
      abandoned payment never shows a thank-you
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from tipjar.core.domain_types import (
    MOCK_PAYMENT_AMOUNT,
    PAYMENT_CONFIRM_DELAY,
    THANK_YOU_DISPLAY_SECONDS,
    PaymentPhase,
)
from tipjar.core.enforce_payment import (
    abandon_payment,
    begin_payment,
    check_payment_start,
    clear_acknowledgment,
    complete_payment,
    lock as lock_session,
    payment_disabled,
    payment_phase,
)
from tipjar.core.session_state import PaymentSession
from tipjar.services.connectivity_monitor import ConnectivityMonitor
from tipjar.services.countdown_timer import CountdownTimer
from tipjar.services.task_slot import TaskSlot, run_after

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentGate:
    """Gate between the payment buttons and the (simulated) payment provider."""

    def __init__(
        self,
        timer: CountdownTimer,
        monitor: ConnectivityMonitor,
        confirm_delay: float = PAYMENT_CONFIRM_DELAY,
        thank_you_seconds: float = THANK_YOU_DISPLAY_SECONDS,
        auto_confirm: bool = True,
        on_success: Callable[[dict], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.timer = timer
        self.monitor = monitor
        self.confirm_delay = confirm_delay
        self.thank_you_seconds = thank_you_seconds
        self.auto_confirm = auto_confirm
        self.on_success = on_success
        self._clock = clock
        self._session = PaymentSession()
        self._confirm = TaskSlot("payment-confirm")
        self._thank_you = TaskSlot("thank-you-clear")
        self._unsubscribe = monitor.subscribe(self._on_connectivity)

    @property
    def session(self) -> PaymentSession:
        return self._session

    @property
    def phase(self) -> PaymentPhase:
        return payment_phase(self._session)

    @property
    def disabled(self) -> bool:
        return payment_disabled(
            self.timer.expired or self._session.locked,
            self.monitor.online,
            self._session.in_flight,
        )

    def start(self, button_id: str) -> dict | None:
        """Begin a payment. Returns the rejection dict when the gate is disabled."""
        error = check_payment_start(
            self._session, self.timer.expired, self.monitor.online, button_id,
        )
        if error:
            logger.info(
                error["message"],
                extra={"button_id": button_id, "reason": error["reason"].value},
            )
            return error

        logger.info(
            f"Action initiated: Button ({button_id}) clicked.",
            extra={"button_id": button_id},
        )
        self._session = begin_payment(self._session)
        if self.auto_confirm:
            payment_data = {"button_id": button_id, "amount": MOCK_PAYMENT_AMOUNT}
            self._confirm.replace(
                run_after(self.confirm_delay, self.succeed, payment_data),
            )
        return None

    def succeed(self, payment_data: dict) -> bool:
        """Confirm the in-flight payment. Returns False when there is none."""
        if self._session.locked or not self._session.in_flight:
            logger.warning(
                "Ignoring payment confirmation: no payment in flight",
                extra={"button_id": payment_data.get("button_id")},
            )
            return False

        self._confirm.cancel()
        self._session = complete_payment(self._session, self._clock())
        self._thank_you.replace(
            run_after(self.thank_you_seconds, self._clear_thank_you),
        )
        logger.info(
            "Payment confirmed", extra={"button_id": payment_data.get("button_id")},
        )
        if self.on_success is not None:
            self.on_success(payment_data)
        return True

    def lock(self) -> None:
        """Countdown expired: Locked, with nothing left pending."""
        self._confirm.cancel()
        self._thank_you.cancel()
        self._session = lock_session(self._session)

    def teardown(self) -> None:
        self._unsubscribe()
        self._confirm.cancel()
        self._thank_you.cancel()

    def _clear_thank_you(self) -> None:
        self._session = clear_acknowledgment(self._session)

    def _on_connectivity(self, online: bool) -> None:
        if online or not self._session.in_flight:
            return
        self._confirm.cancel()
        self._session = abandon_payment(self._session)
        logger.warning("Connectivity lost during payment; payment abandoned")

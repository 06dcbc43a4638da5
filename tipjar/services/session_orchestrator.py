"""Session Orchestrator - composes the session components into one read model.

Invariants:
    - One orchestrator per page load; start() once, teardown() releases every
      task the components own
    - Timer expiry locks the payment gate before any later read
    - Expiry is latched: is_expired and theme stay expired for the rest of the
      session, whatever the timer does afterwards
    - teardown() is final; start() after it does nothing
    - snapshot() is derived from component state at call time (never cached)

Design Decisions:
    - Components wired through constructor injection; from_settings() is the
      production wiring, tests build the parts directly
    - restart_timer() only resets the countdown display; the gate stays
      LOCKED once it has been locked
"""

import logging
import uuid

import httpx

from tipjar.config import Settings
from tipjar.core.domain_types import SessionId
from tipjar.core.session_view import SessionSnapshot, build_snapshot
from tipjar.core.visit_notice import VisitInfo
from tipjar.infrastructure.feed_client import SupporterFeedClient
from tipjar.infrastructure.telegram_client import TelegramClient
from tipjar.services.connectivity_monitor import ConnectivityMonitor
from tipjar.services.countdown_timer import CountdownTimer
from tipjar.services.feed_poller import DonationFeedPoller
from tipjar.services.payment_gate import PaymentGate
from tipjar.services.visit_notifier import VisitNotifier

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """Composition root for one session."""

    def __init__(
        self,
        timer: CountdownTimer,
        monitor: ConnectivityMonitor,
        feed: DonationFeedPoller,
        gate: PaymentGate,
        notifier: VisitNotifier,
        visit: VisitInfo | None = None,
        session_id: SessionId | None = None,
    ):
        self.session_id = session_id or SessionId(str(uuid.uuid4()))
        self.timer = timer
        self.monitor = monitor
        self.feed = feed
        self.gate = gate
        self.notifier = notifier
        self.visit = visit
        self.started = False
        self.torn_down = False
        self._expired = False
        self.timer.add_observer(self._on_expired)
        if self.gate.on_success is None:
            self.gate.on_success = self.notifier.notify_payment

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http: httpx.AsyncClient,
        visit: VisitInfo | None = None,
        online: bool = True,
    ) -> "SessionOrchestrator":
        monitor = ConnectivityMonitor(online=online)
        timer = CountdownTimer(settings.default_timer, tick_seconds=settings.tick_seconds)
        feed = DonationFeedPoller(
            SupporterFeedClient(http, settings.feed_url),
            monitor,
            interval=settings.refresh_interval_seconds,
        )
        gate = PaymentGate(
            timer,
            monitor,
            confirm_delay=settings.payment_confirm_delay_seconds,
            thank_you_seconds=settings.thank_you_seconds,
            auto_confirm=settings.payment_auto_confirm,
        )
        channel = TelegramClient(
            http,
            settings.telegram_bot_token,
            settings.telegram_chat_id,
            api_url=settings.telegram_api_url,
            debug=settings.debug,
        )
        notifier = VisitNotifier(
            channel,
            config_valid=settings.config_valid(),
            settle_seconds=settings.visit_settle_seconds,
        )
        return cls(timer, monitor, feed, gate, notifier, visit=visit)

    # ─── Read model ──────────────────────────────────────────────

    @property
    def is_expired(self) -> bool:
        return self._expired or self.timer.expired

    @property
    def is_online(self) -> bool:
        return self.monitor.online

    def snapshot(self) -> SessionSnapshot:
        return build_snapshot(
            self.timer.state, self.monitor.online, self.feed.state, self.gate.session,
            expired=self.is_expired,
        )

    # ─── Lifecycle ───────────────────────────────────────────────

    def start(self) -> None:
        if self.started or self.torn_down:
            return
        self.started = True
        logger.info("Session started", extra={"session_id": self.session_id})
        self.timer.start()
        self.feed.activate()
        if self.visit is not None:
            self.notifier.start(self.visit)

    def teardown(self) -> None:
        if self.torn_down:
            return
        self.torn_down = True
        self.timer.stop()
        self.feed.teardown()
        self.gate.teardown()
        self.notifier.teardown()
        logger.info("Session torn down", extra={"session_id": self.session_id})

    # ─── Commands ────────────────────────────────────────────────

    def start_payment(self, button_id: str) -> dict | None:
        return self.gate.start(button_id)

    def confirm_payment(self, payment_data: dict) -> bool:
        return self.gate.succeed(payment_data)

    def retry_feed_load(self) -> None:
        self.feed.retry()

    def set_online(self, online: bool) -> None:
        self.monitor.set_online(online)

    def restart_timer(self, initial: str | int) -> None:
        self.timer.restart(initial)

    def _on_expired(self) -> None:
        self._expired = True
        self.gate.lock()
        logger.info("Payments locked: countdown expired", extra={"session_id": self.session_id})

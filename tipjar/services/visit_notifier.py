"""Visit Notifier - one visit notification per session load, after a settle delay.

Invariants:
    - start() schedules at most one send per session, however often it is called
    - Nothing is sent when the configuration-valid signal is False
    - Failure leaves sent False and is not retried within the same load
    - teardown() cancels a pending or in-progress send; no late side effect

Design Decisions:
    - The NotificationToken lives on the notifier instance and moves through the
      pure transitions in core.visit_notice; a new session gets a fresh token
    - Payment alerts share the channel but not the token (best effort, unlimited)
"""

import asyncio
import logging
from datetime import datetime

from tipjar.core.boundary_protocols import NotificationChannel
from tipjar.core.domain_types import VISIT_SETTLE_DELAY
from tipjar.core.errors import NotificationError
from tipjar.core.session_state import NotificationToken
from tipjar.core.visit_notice import (
    VisitInfo,
    begin_attempt,
    build_payment_message,
    build_visit_message,
    record_failure,
    record_success,
    should_notify,
)
from tipjar.services.task_slot import TaskSlot

logger = logging.getLogger(__name__)


class VisitNotifier:

    def __init__(
        self,
        channel: NotificationChannel,
        config_valid: bool,
        settle_seconds: float = VISIT_SETTLE_DELAY,
        token: NotificationToken | None = None,
    ):
        self.channel = channel
        self.config_valid = config_valid
        self.settle_seconds = settle_seconds
        self._token = token or NotificationToken()
        self._visit = TaskSlot("visit-notice")
        self._payment = TaskSlot("payment-notice")

    @property
    def token(self) -> NotificationToken:
        return self._token

    @property
    def pending(self) -> bool:
        return self._visit.pending

    def start(self, visit: VisitInfo) -> bool:
        """Schedule the visit notification. Returns True when one was scheduled."""
        if not should_notify(self._token, self.config_valid):
            return False
        if self._visit.pending:
            return False
        self._visit.replace(self._notify_after_settle(visit))
        return True

    def notify_payment(self, payment_data: dict) -> None:
        """Fire-and-forget payment alert; a newer alert supersedes a pending one."""
        if not self.channel.configured:
            logger.debug("Telegram is not configured. Skipping payment alert.")
            return
        message = build_payment_message(
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            method=str(payment_data.get("button_id", "Unknown")),
            amount=payment_data.get("amount", "Unknown"),
        )
        self._payment.replace(self._send_payment(message))

    def teardown(self) -> None:
        self._visit.cancel()
        self._payment.cancel()

    async def _notify_after_settle(self, visit: VisitInfo) -> None:
        await asyncio.sleep(self.settle_seconds)
        self._token = begin_attempt(self._token)
        try:
            await self.channel.send_message(build_visit_message(visit))
        except NotificationError as e:
            self._token = record_failure(self._token)
            logger.warning(f"Failed to send visit notification: {e.message}")
            return
        self._token = record_success(self._token)
        logger.info("Visit notification sent")

    async def _send_payment(self, message: str) -> None:
        try:
            await self.channel.send_message(message)
        except NotificationError as e:
            logger.warning(f"Failed to send payment notification: {e.message}")

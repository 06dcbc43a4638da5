"""Telegram Client - sends notification text through the Bot API sendMessage call.

Invariants:
    - Unconfigured client (no token or chat id) never touches the network
    - Every failure (transport, non-2xx, ok=false) surfaces as NotificationError
    - asyncio.CancelledError passes through uncaught

Design Decisions:
    - Raise instead of returning False: the notifier decides what a failure means
    - Bot token never logged (the URL embeds it)
"""

import logging

import httpx

from tipjar.core.errors import ErrorContext, NotificationError

logger = logging.getLogger(__name__)


class TelegramClient:
    """Minimal Bot API client for HTML text messages."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        bot_token: str,
        chat_id: str,
        api_url: str = "https://api.telegram.org/bot",
        debug: bool = False,
    ):
        self.http = http
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url
        self.debug = debug

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}{self.bot_token}/{method}"

    async def send_message(
        self,
        text: str,
        parse_mode: str = "HTML",
        disable_web_page_preview: bool = True,
    ) -> dict:
        """POST sendMessage. Returns the decoded Bot API response."""
        if not self.configured:
            raise NotificationError("Telegram is not configured")

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": disable_web_page_preview,
        }
        try:
            response = await self.http.post(
                self._method_url("sendMessage"), json=payload,
            )
        except httpx.TransportError as e:
            raise NotificationError(type(e).__name__) from e

        if not response.is_success:
            if self.debug:
                logger.debug(f"Telegram error body: {response.text[:500]}")
            raise NotificationError(
                f"HTTP {response.status_code}",
                ErrorContext(status_code=response.status_code),
            )
        try:
            body = response.json()
        except ValueError as e:
            raise NotificationError("undecodable response") from e
        if isinstance(body, dict) and body.get("ok") is False:
            raise NotificationError(str(body.get("description", "ok=false")))
        return body

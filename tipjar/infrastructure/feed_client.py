"""Supporter Feed Client - GET the supporter snapshot and map failures to FeedError.

Invariants:
    - 2xx with a JSON list -> ranked supporters (core.feed_records)
    - 404 -> FeedNotFoundError, other non-2xx -> FeedServerError
    - Transport failures (connect, timeout, protocol) -> FeedNetworkError
    - Undecodable body or non-list payload -> FeedFormatError
    - asyncio.CancelledError passes through uncaught

Design Decisions:
    - Shared httpx.AsyncClient injected by the caller (one pool per process)
    - No retry here: the poller's next interval is the retry
"""

import logging

import httpx

from tipjar.core.domain_types import FeedErrorKind
from tipjar.core.errors import (
    ErrorContext,
    FeedFormatError,
    FeedNetworkError,
    FeedNotFoundError,
    FeedServerError,
)
from tipjar.core.feed_records import classify_status, parse_supporters
from tipjar.core.session_state import Supporter

logger = logging.getLogger(__name__)


class SupporterFeedClient:
    """Reads the supporter feed endpoint."""

    def __init__(self, http: httpx.AsyncClient, url: str):
        self.http = http
        self.url = url

    async def fetch(self) -> tuple[Supporter, ...]:
        try:
            response = await self.http.get(self.url)
        except httpx.TransportError as e:
            raise FeedNetworkError(
                f"Could not reach {self.url}: {e}",
            ) from e

        if not response.is_success:
            ctx = ErrorContext(status_code=response.status_code)
            logger.warning(
                f"Failed to fetch {self.url}: {response.status_code} "
                f"{response.reason_phrase}.",
                extra={"status_code": response.status_code},
            )
            if classify_status(response.status_code) is FeedErrorKind.NOT_FOUND:
                raise FeedNotFoundError(f"{self.url} not found", ctx)
            raise FeedServerError(
                f"Server error {response.status_code} fetching supporters", ctx,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FeedFormatError(f"Feed body is not JSON: {e}") from e
        return parse_supporters(payload)

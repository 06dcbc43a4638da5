"""HTTP Client Manager - one shared httpx.AsyncClient per process.

Invariants:
    - Every outbound call (feed, Telegram) goes through the managed client
    - close() is idempotent; a closed manager reports not ready

Design Decisions:
    - Singleton http_manager initialized on startup: FastAPI lifespan manages
      lifecycle (no global import side effects)
    - get_http_client is a FastAPI dependency so tests can override it
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class HttpClientManager:
    """Owns the process-wide AsyncClient and its connection pool."""

    def __init__(self, timeout_seconds: float = 10.0):
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def close(self) -> None:
        if not self.client.is_closed:
            await self.client.aclose()

    def health_check(self) -> bool:
        return not self.client.is_closed


# Singleton (initialized on startup)
http_manager: HttpClientManager | None = None


def init_http(timeout_seconds: float = 10.0) -> HttpClientManager:
    global http_manager
    http_manager = HttpClientManager(timeout_seconds)
    return http_manager


async def close_http() -> None:
    global http_manager
    if http_manager is not None:
        await http_manager.close()
        http_manager = None


def get_http_client() -> httpx.AsyncClient:
    """FastAPI dependency for the shared HTTP client."""
    if not http_manager:
        raise RuntimeError("HTTP client not initialized")
    return http_manager.client

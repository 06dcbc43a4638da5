"""API test fixtures - FastAPI test client with settings and HTTP overridden.

Invariants:
    - Every test gets its own mocked outbound httpx client (no real network)
    - get_settings and get_http_client dependencies overridden per test
    - Sessions left behind by a test are torn down after it

Design Decisions:
    - Lifespan is not run by ASGITransport, so nothing here depends on it
    - Short delays in test settings keep confirmation timelines under 50ms
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from tipjar.api.routes import sessions
from tipjar.config import Settings, get_settings
from tipjar.infrastructure.http_client import get_http_client
from tipjar.main import app

FEED_PAYLOAD = [
    {"name": "A", "amount": 5},
    {"name": "B", "amount": 10},
    {"name": "C", "amount": 5},
]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        aba_payment_url="https://pay.example/aba",
        acleda_payment_url="https://pay.example/acleda",
        acleda_payment_data="khqr-data",
        telegram_bot_token="",
        telegram_chat_id="",
        default_timer="05:00",
        tick_seconds=10.0,
        refresh_interval_seconds=10.0,
        payment_confirm_delay_seconds=0.01,
        thank_you_seconds=10.0,
        visit_settle_seconds=10.0,
    )


@pytest.fixture
def feed_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
async def client(test_settings, feed_requests):
    """FastAPI test client with outbound HTTP served by MockTransport."""
    def handler(request: httpx.Request) -> httpx.Response:
        feed_requests.append(request)
        return httpx.Response(200, json=FEED_PAYLOAD)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_http_client] = lambda: http

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    sessions.teardown_all_sessions()
    await http.aclose()

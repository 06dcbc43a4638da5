"""Error Handlers - log levels and response envelopes per error kind.

Tests cover:
    - Rejected payments -> 409 with the block reason, logged at info with ids
    - Unknown sessions -> 404 logged at info
    - Feed and notification failures log at warning, other errors at error
    - Validation errors list the offending fields
    - Unhandled exceptions -> fixed 500 body, nothing internal leaked
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tipjar.api.error_handlers import log_level_for, register_error_handlers
from tipjar.core.domain_types import BlockReason
from tipjar.core.errors import (
    ErrorCategory,
    ErrorSeverity,
    FeedFormatError,
    NotificationError,
    PaymentRejectedError,
    ResourceNotFoundError,
    TimerParseError,
    TipJarError,
)

ABA = "open-aba-scanner-btn"
HANDLER_LOGGER = "tipjar.api.error_handlers"


def _handler_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == HANDLER_LOGGER]


# ─── log_level_for ───────────────────────────────────────────────

@pytest.mark.parametrize("exc,level", [
    (PaymentRejectedError(BlockReason.OFFLINE), logging.INFO),
    (ResourceNotFoundError("Session", "abc"), logging.INFO),
    (FeedFormatError("bad payload"), logging.WARNING),
    (NotificationError("timeout"), logging.WARNING),
    (TimerParseError("soon"), logging.WARNING),
    (TipJarError(
        "boom", "INTERNAL", ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    ), logging.ERROR),
])
def test_log_level_follows_error_kind(exc, level):
    assert log_level_for(exc) == level


# ─── Through the app ─────────────────────────────────────────────

async def test_rejection_body_carries_reason(client, caplog):
    sid = (await client.post(
        "/api/v1/sessions", json={"url": "https://example.org/donate", "online": False},
    )).json()["id"]

    with caplog.at_level(logging.INFO, logger=HANDLER_LOGGER):
        res = await client.post(f"/api/v1/sessions/{sid}/payments", json={"button_id": ABA})

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["reason"] == "offline"
    assert error["category"] == "business_rule"

    [record] = _handler_records(caplog)
    assert record.levelno == logging.INFO
    assert record.session_id == sid
    assert record.button_id == ABA
    assert record.reason == "offline"
    assert record.exc_info is None


async def test_unknown_session_logged_at_info(client, caplog):
    with caplog.at_level(logging.INFO, logger=HANDLER_LOGGER):
        res = await client.get("/api/v1/sessions/gone")
    assert res.status_code == 404
    [record] = _handler_records(caplog)
    assert record.levelno == logging.INFO
    assert record.path == "/api/v1/sessions/gone"


async def test_validation_details_name_the_field(client):
    res = await client.post("/api/v1/sessions", json={"url": "   "})
    assert res.status_code == 400
    details = res.json()["error"]["details"]
    assert [d["field"] for d in details] == ["body.url"]


async def test_unhandled_exception_returns_fixed_body(caplog):
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        with caplog.at_level(logging.ERROR, logger=HANDLER_LOGGER):
            res = await c.get("/boom")

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "hunter2" not in res.text
    [record] = _handler_records(caplog)
    assert record.exc_info is not None

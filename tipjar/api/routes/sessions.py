"""Session Routes - page-load lifecycle and presentation-layer commands.

Invariants:
    - One SessionOrchestrator per page load, kept in the module-level _sessions registry
    - Every lookup refreshes the session's last-seen time; idle sessions are
      evicted by sweep_idle(), run as a task from the app lifespan
    - Every response body is a SessionResponse built from a fresh snapshot
    - Rejected payment starts surface as 409 PAYMENT_REJECTED, state unchanged
    - DELETE tears the session down before removing it (no timer survives)

Design Decisions:
    - _sessions as module-level registry: sessions are in-memory and per-process,
      lost on restart (no persistence across page loads)
    - get_session_or_404 shared by every route below
"""

import logging
from datetime import datetime

import httpx
from fastapi import APIRouter, Depends, status

from tipjar.config import Settings, get_settings
from tipjar.core.errors import (
    ErrorContext, PaymentRejectedError, ResourceNotFoundError,
)
from tipjar.core.visit_notice import VisitInfo
from tipjar.infrastructure.http_client import get_http_client
from tipjar.schemas.session import (
    ConnectivityUpdate,
    PaymentConfirm,
    PaymentStart,
    SessionCreate,
    SessionResponse,
    TimerRestart,
)
from tipjar.services.session_orchestrator import SessionOrchestrator
from tipjar.services.session_registry import SessionRegistry, sweep_idle_sessions

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])

_sessions = SessionRegistry()


def get_session_or_404(session_id: str) -> SessionOrchestrator:
    session = _sessions.get(session_id)
    if session is None:
        raise ResourceNotFoundError("Session", session_id)
    return session


def _respond(session: SessionOrchestrator) -> SessionResponse:
    return SessionResponse.from_snapshot(session.session_id, session.snapshot())


def teardown_all_sessions() -> None:
    """Shutdown hook: release every session's timers and tasks."""
    _sessions.teardown_all()


async def sweep_idle(settings: Settings) -> None:
    """Lifespan task: evict sessions idle past the configured TTL."""
    await sweep_idle_sessions(
        _sessions,
        settings.session_idle_ttl_seconds,
        settings.session_sweep_interval_seconds,
    )


@router.post(
    "", response_model=SessionResponse, status_code=status.HTTP_201_CREATED,
)
async def create_session(
    body: SessionCreate,
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
):
    """Page load: start timer, feed polling and the visit notification."""
    visit = VisitInfo(
        url=body.url,
        timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        referrer=body.referrer,
        user_agent=body.user_agent,
        screen_width=body.screen_width,
        screen_height=body.screen_height,
        pixel_ratio=body.pixel_ratio,
    )
    session = SessionOrchestrator.from_settings(
        settings, http, visit=visit, online=body.online,
    )
    if not settings.config_valid():
        logger.error(
            "App configuration is invalid: %s", settings.config_problems(),
            extra={"session_id": session.session_id},
        )
    _sessions.add(session)
    session.start()
    return _respond(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _respond(get_session_or_404(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str):
    """Page unload: cancel every pending timer and fetch."""
    get_session_or_404(session_id)
    _sessions.pop(session_id)


@router.post(
    "/{session_id}/payments",
    response_model=SessionResponse, status_code=status.HTTP_202_ACCEPTED,
)
async def start_payment(session_id: str, body: PaymentStart):
    session = get_session_or_404(session_id)
    rejection = session.start_payment(body.button_id)
    if rejection:
        raise PaymentRejectedError(
            rejection["reason"],
            ErrorContext(
                session_id=session_id,
                button_id=body.button_id,
                user_message=rejection["message"],
            ),
        )
    return _respond(session)


@router.post("/{session_id}/payments/confirm", response_model=SessionResponse)
async def confirm_payment(session_id: str, body: PaymentConfirm):
    """External payment confirmation hook."""
    session = get_session_or_404(session_id)
    session.confirm_payment(body.model_dump())
    return _respond(session)


@router.post(
    "/{session_id}/feed/refresh",
    response_model=SessionResponse, status_code=status.HTTP_202_ACCEPTED,
)
async def refresh_feed(session_id: str):
    session = get_session_or_404(session_id)
    session.retry_feed_load()
    return _respond(session)


@router.put("/{session_id}/connectivity", response_model=SessionResponse)
async def update_connectivity(session_id: str, body: ConnectivityUpdate):
    session = get_session_or_404(session_id)
    session.set_online(body.online)
    return _respond(session)


@router.put("/{session_id}/timer", response_model=SessionResponse)
async def restart_timer(session_id: str, body: TimerRestart):
    session = get_session_or_404(session_id)
    session.restart_timer(body.initial)
    return _respond(session)

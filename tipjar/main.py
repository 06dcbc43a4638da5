"""Tip Jar API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TipJarError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Shared HTTP client opened on startup and closed on shutdown via lifespan,
      after every live session is torn down
    - Idle sessions are swept by one background task for the app's lifetime

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tipjar.api.error_handlers import register_error_handlers
from tipjar.api.routes import health, sessions
from tipjar.config import get_settings
from tipjar.infrastructure.http_client import close_http, init_http
from tipjar.infrastructure.observability import setup_logging
from tipjar.services.task_slot import TaskSlot

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_http(settings.http_timeout_seconds)
    problems = settings.config_problems()
    if problems:
        logger.error(
            f"Configuration validation errors: {problems}. "
            "Visit notifications are disabled.",
        )
    sweeper = TaskSlot("session-sweep")
    sweeper.replace(sessions.sweep_idle(settings))
    logger.info("Tip Jar API started")
    yield
    sweeper.cancel()
    sessions.teardown_all_sessions()
    await close_http()
    logger.info("Tip Jar API shutting down")


app = FastAPI(
    title="Tip Jar API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(sessions.router)

register_error_handlers(app)

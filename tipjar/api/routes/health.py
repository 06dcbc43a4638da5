"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the shared HTTP client is not open (readiness)

Design Decisions:
    - The feed endpoint is not checked: a feed outage degrades sessions,
      it does not make the service unready
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from tipjar.infrastructure import http_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "tipjar-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check - includes the outbound HTTP client."""
    manager = http_client.http_manager
    http_ok = manager.health_check() if manager else False
    if not http_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "http_client_unavailable",
            },
        )
    return {"status": "ready", "checks": {"http_client": "healthy"}}

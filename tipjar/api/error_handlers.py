"""Error Handlers - map session errors onto the JSON error envelope.

Invariants:
    - TipJarError -> its own to_response() body and http_status
    - Rejected payments and unknown sessions are routine page traffic: logged at
      info with the session and button ids, never with a stack
    - Feed and notification failures log at warning, also without a stack
    - RequestValidationError -> 400 with one detail per offending field
    - Anything else -> 500 with a fixed body, traceback in the log only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tipjar.core.errors import (
    ErrorCategory, ErrorSeverity, FeedError, PaymentRejectedError, TipJarError,
)

logger = logging.getLogger(__name__)

_ROUTINE = (ErrorCategory.BUSINESS_RULE, ErrorCategory.RESOURCE_NOT_FOUND)

INTERNAL_ERROR_BODY = {
    "error": {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    },
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TipJarError, tipjar_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def log_level_for(exc: TipJarError) -> int:
    if exc.category in _ROUTINE:
        return logging.INFO
    if exc.category is ErrorCategory.EXTERNAL_API:
        return logging.WARNING
    if exc.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING):
        return logging.WARNING
    return logging.ERROR


def _log_extra(request: Request, exc: TipJarError) -> dict:
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "session_id": exc.context.session_id,
        "button_id": exc.context.button_id,
    }
    if exc.context.status_code is not None:
        extra["status_code"] = exc.context.status_code
    if isinstance(exc, PaymentRejectedError):
        extra["reason"] = exc.reason.value
    if isinstance(exc, FeedError):
        extra["error_kind"] = exc.kind.value
    return extra


async def tipjar_error_handler(request: Request, exc: TipJarError) -> JSONResponse:
    logger.log(log_level_for(exc), exc.message, extra=_log_extra(request, exc))
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        "Rejected request body: %s", ", ".join(d["field"] for d in details),
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s", request.url.path,
        exc_info=exc, extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )

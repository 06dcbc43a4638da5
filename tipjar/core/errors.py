"""Error Hierarchy - typed, categorized exceptions for all Tip Jar failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Session errors are recoverable: none of them ends a session
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TipJarError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
    - Cancellation is not part of the hierarchy: asyncio.CancelledError is used as is
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from tipjar.core.domain_types import BlockReason, FeedErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    button_id: str | None = None
    status_code: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class TipJarError(Exception):
    """Base exception for all Tip Jar errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "button_id": self.context.button_id,
                },
            }
        }


# ─── Session Errors (recoverable) ───────────────────────────────

class TimerParseError(TipJarError):
    """Timer input is neither MM:SS nor a second count."""
    def __init__(self, raw: object, context: ErrorContext | None = None):
        super().__init__(
            f"Could not parse time string: {raw!r}",
            "TIMER_PARSE_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.raw = raw


class PaymentRejectedError(TipJarError):
    """Payment start attempted while the gate is disabled."""
    def __init__(self, reason: BlockReason, context: ErrorContext | None = None):
        super().__init__(
            f"Payment blocked: {reason.value}",
            "PAYMENT_REJECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.reason = reason

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["reason"] = self.reason.value
        return response


class ResourceNotFoundError(TipJarError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── External API Errors ────────────────────────────────────────

class FeedError(TipJarError):
    """Supporter feed fetch failed. Subclasses pin the FeedErrorKind."""
    kind: FeedErrorKind = FeedErrorKind.SERVER_ERROR

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FEED_" + self.kind.name, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )


class FeedNotFoundError(FeedError):
    kind = FeedErrorKind.NOT_FOUND


class FeedServerError(FeedError):
    kind = FeedErrorKind.SERVER_ERROR


class FeedNetworkError(FeedError):
    kind = FeedErrorKind.NETWORK_ERROR


class FeedFormatError(FeedError):
    kind = FeedErrorKind.FORMAT_ERROR


class NotificationError(TipJarError):
    """Notification channel dispatch failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Notification dispatch failed: {message}",
            "NOTIFICATION_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )

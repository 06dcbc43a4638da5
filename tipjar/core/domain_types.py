"""Domain Types - enums and constants shared across the session components.

Invariants:
    - All valid states encoded as Enums, no raw string matching
    - Durations expressed in seconds (float) everywhere

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


SessionId = NewType("SessionId", str)


# ─── Defaults ────────────────────────────────────────────────────

DEFAULT_TIMER_SECONDS = 173           # fallback for malformed timer input (2:53)
DEFAULT_REFRESH_INTERVAL = 30.0       # feed poll period
PAYMENT_CONFIRM_DELAY = 2.0           # simulated confirmation
THANK_YOU_DISPLAY_SECONDS = 5.0
VISIT_SETTLE_DELAY = 1.5
MOCK_PAYMENT_AMOUNT = 5.00

EXPIRED_DISPLAY = "Expired"


# ─── Enums ───────────────────────────────────────────────────────

class TimerStatus(str, Enum):
    """Countdown lifecycle. EXPIRED only leaves via an explicit restart."""
    RUNNING = "running"
    EXPIRED = "expired"


class FeedErrorKind(str, Enum):
    """Why the last feed cycle produced no supporters."""
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    FORMAT_ERROR = "format_error"


class PaymentPhase(str, Enum):
    """PaymentSession states. LOCKED is terminal until the timer restarts."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    ACKNOWLEDGED = "acknowledged"
    LOCKED = "locked"


class BlockReason(str, Enum):
    """Reason a payment start was rejected, first match wins."""
    EXPIRED = "expired"
    OFFLINE = "offline"
    IN_PROGRESS = "payment in progress"


class Theme(str, Enum):
    DEFAULT = "default"
    EXPIRED = "expired"

"""Session Schemas - Pydantic models with field-level validation for API boundaries.

Invariants:
    - SessionCreate.url is non-empty after stripping
    - PaymentStart.button_id is one of the known payment buttons
    - SessionResponse is built only from a SessionSnapshot (never from live objects)

Design Decisions:
    - Literal type for button_id over str enum: Pydantic handles validation natively
    - field_validator for side-effect-free transforms (strip)
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from tipjar.core.domain_types import FeedErrorKind, PaymentPhase, Theme
from tipjar.core.feed_records import format_amount
from tipjar.core.session_view import SessionSnapshot

ButtonLiteral = Literal["open-aba-scanner-btn", "open-acleda-scanner-btn"]


class SessionCreate(BaseModel):
    """Page load report - what the browser knows about itself."""
    url: str = Field(min_length=1, max_length=2048)
    referrer: str | None = Field(None, max_length=2048)
    user_agent: str | None = Field(None, max_length=1024)
    screen_width: int | None = Field(None, ge=0, le=20_000)
    screen_height: int | None = Field(None, ge=0, le=20_000)
    pixel_ratio: float = Field(1.0, gt=0, le=10)
    online: bool = True

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty or whitespace")
        return v


class PaymentStart(BaseModel):
    button_id: ButtonLiteral


class PaymentConfirm(BaseModel):
    button_id: ButtonLiteral
    amount: float = Field(5.00, ge=0)


class ConnectivityUpdate(BaseModel):
    online: bool


class TimerRestart(BaseModel):
    """New initial duration, MM:SS or a second count. Malformed -> default."""
    initial: str | int

    @field_validator("initial")
    @classmethod
    def bounded(cls, v: str | int) -> str | int:
        if isinstance(v, str) and len(v) > 16:
            raise ValueError("initial is too long")
        return v


# --- Responses ----------------------------------------------------------------

class SupporterResponse(BaseModel):
    name: str
    amount: float
    display_amount: str


class FeedResponse(BaseModel):
    supporters: list[SupporterResponse]
    loading: bool
    error: FeedErrorKind | None
    message: str | None


class PaymentResponse(BaseModel):
    phase: PaymentPhase
    in_flight: bool
    disabled: bool
    show_thank_you: bool
    last_success_at: datetime | None


class SessionResponse(BaseModel):
    """Read-only session snapshot for the presentation layer."""
    id: str
    is_expired: bool
    is_online: bool
    theme: Theme
    remaining_time_display: str
    feed: FeedResponse
    payment: PaymentResponse

    @classmethod
    def from_snapshot(cls, session_id: str, snap: SessionSnapshot) -> "SessionResponse":
        return cls(
            id=session_id,
            is_expired=snap.is_expired,
            is_online=snap.is_online,
            theme=snap.theme,
            remaining_time_display=snap.remaining_time_display,
            feed=FeedResponse(
                supporters=[
                    SupporterResponse(
                        name=s.name, amount=s.amount,
                        display_amount=format_amount(s.amount),
                    )
                    for s in snap.feed_state.supporters
                ],
                loading=snap.feed_state.loading,
                error=snap.feed_state.error,
                message=snap.feed_message,
            ),
            payment=PaymentResponse(
                phase=snap.payment_phase,
                in_flight=snap.payment_session.in_flight,
                disabled=snap.payment_disabled,
                show_thank_you=snap.show_thank_you,
                last_success_at=snap.payment_session.last_success_at,
            ),
        )

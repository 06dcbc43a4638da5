"""Payment Gate Enforcement - pure policy and transitions for the payment lifecycle.

Invariants:
    - disabled = expired OR offline OR in_flight, recomputed on every read
    - check_payment_start returns an error dict on violation, None on success
    - Block reasons are checked in order: expired, offline, in progress
    - LOCKED is terminal for the session: no transition leaves it

Design Decisions:
    - Pure functions over methods on the gate: testable without an event loop
    - Return dicts (not exceptions) from checks, same shape as the API envelope
"""

from datetime import datetime

from tipjar.core.domain_types import BlockReason, PaymentPhase
from tipjar.core.session_state import PaymentSession


def payment_disabled(expired: bool, online: bool, in_flight: bool) -> bool:
    return expired or not online or in_flight


def block_reason(
    expired: bool, online: bool, in_flight: bool,
) -> BlockReason | None:
    """First reason a payment action is not permitted, or None."""
    if expired:
        return BlockReason.EXPIRED
    if not online:
        return BlockReason.OFFLINE
    if in_flight:
        return BlockReason.IN_PROGRESS
    return None


def check_payment_start(
    session: PaymentSession, expired: bool, online: bool, button_id: str,
) -> dict | None:
    """Validate a payment start. Returns first error or None."""
    reason = block_reason(expired or session.locked, online, session.in_flight)
    if reason is None:
        return None
    return {
        "status": "error",
        "error_code": "PAYMENT_REJECTED",
        "message": f"Action blocked: Button ({button_id}) clicked when {reason.value}.",
        "reason": reason,
    }


def payment_phase(session: PaymentSession) -> PaymentPhase:
    if session.locked:
        return PaymentPhase.LOCKED
    if session.in_flight:
        return PaymentPhase.IN_FLIGHT
    if session.acknowledged:
        return PaymentPhase.ACKNOWLEDGED
    return PaymentPhase.IDLE


# ─── Transitions ─────────────────────────────────────────────────

def begin_payment(session: PaymentSession) -> PaymentSession:
    """Idle/Acknowledged -> InFlight. Caller has already run check_payment_start."""
    return PaymentSession(
        in_flight=True,
        last_success_at=session.last_success_at,
        acknowledged=session.acknowledged,
    )


def complete_payment(session: PaymentSession, now: datetime) -> PaymentSession:
    """InFlight -> Acknowledged. Ignored once locked."""
    if session.locked:
        return session
    return PaymentSession(in_flight=False, last_success_at=now, acknowledged=True)


def clear_acknowledgment(session: PaymentSession) -> PaymentSession:
    """Acknowledged -> Idle (thank-you window elapsed)."""
    return PaymentSession(
        in_flight=session.in_flight,
        last_success_at=session.last_success_at,
        acknowledged=False,
        locked=session.locked,
    )


def abandon_payment(session: PaymentSession) -> PaymentSession:
    """InFlight -> Idle on connectivity loss, no acknowledgment."""
    return PaymentSession(
        in_flight=False,
        last_success_at=session.last_success_at,
        acknowledged=session.acknowledged,
        locked=session.locked,
    )


def lock(session: PaymentSession) -> PaymentSession:
    """Any -> Locked on countdown expiry."""
    return PaymentSession(
        in_flight=False, last_success_at=session.last_success_at,
        acknowledged=False, locked=True,
    )


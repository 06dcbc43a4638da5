"""Feed Records - validation, ordering and messaging for the supporter feed.

Invariants:
    - Non-list payloads raise FeedFormatError; invalid records are dropped
      individually without aborting the batch
    - Output is sorted by amount descending and stable for equal amounts
    - loaded_feed() always clears the error; failed_feed() always empties supporters

Design Decisions:
    - sorted(..., reverse=True) keeps equal keys in input order, which is the
      tie-break rule for supporters
    - bool is rejected as an amount even though it subclasses int
"""

import math
from collections.abc import Iterable

from tipjar.core.domain_types import FeedErrorKind
from tipjar.core.errors import FeedFormatError
from tipjar.core.session_state import FeedState, Supporter

LOADING_MESSAGE = "Loading supporters..."
EMPTY_MESSAGE = "No donations yet. Be the first!"

_ERROR_MESSAGES = {
    FeedErrorKind.NOT_FOUND: "Failed to load supporters",
    FeedErrorKind.SERVER_ERROR: "Failed to load supporters",
    FeedErrorKind.NETWORK_ERROR: "Failed to load supporters",
    FeedErrorKind.FORMAT_ERROR: "Invalid data format",
}


def to_supporter(record: object) -> Supporter | None:
    """Validate one raw record. Returns None when it must be dropped."""
    if not isinstance(record, dict):
        return None
    name = record.get("name")
    amount = record.get("amount")
    if not isinstance(name, str):
        return None
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return Supporter(name=name, amount=float(amount))


def rank_supporters(records: Iterable[object]) -> tuple[Supporter, ...]:
    """Drop invalid records, then stable-sort by amount descending."""
    valid = [s for s in (to_supporter(r) for r in records) if s is not None]
    return tuple(sorted(valid, key=lambda s: s.amount, reverse=True))


def parse_supporters(payload: object) -> tuple[Supporter, ...]:
    """Turn a decoded feed payload into the published supporter sequence.

    Raises:
        FeedFormatError: if the payload is not a list.
    """
    if not isinstance(payload, list):
        raise FeedFormatError(
            f"Feed payload is {type(payload).__name__}, expected list",
        )
    return rank_supporters(payload)


def classify_status(status_code: int) -> FeedErrorKind:
    """Map a non-2xx status to its FeedErrorKind."""
    if status_code == 404:
        return FeedErrorKind.NOT_FOUND
    return FeedErrorKind.SERVER_ERROR


def begin_loading(state: FeedState) -> FeedState:
    """Mark a cycle in progress, keeping the previous snapshot visible."""
    return FeedState(supporters=state.supporters, loading=True, error=state.error)


def loaded_feed(supporters: tuple[Supporter, ...]) -> FeedState:
    return FeedState(supporters=supporters, loading=False, error=None)


def failed_feed(kind: FeedErrorKind) -> FeedState:
    return FeedState(supporters=(), loading=False, error=kind)


def feed_message(state: FeedState) -> str | None:
    """User-facing line for the supporter list, None when there is a list to show."""
    if state.loading:
        return LOADING_MESSAGE
    if state.supporters:
        return None
    if state.error is None:
        return EMPTY_MESSAGE
    return _ERROR_MESSAGES[state.error]


def format_amount(amount: float) -> str:
    return f"${amount:.2f}"

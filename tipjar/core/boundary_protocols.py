"""Boundary Protocols - contracts between the session services and external IO.

Invariants:
    - Services depend on these Protocols, never on concrete clients
    - Implementations provided by infrastructure/ via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async methods: implementations do network IO; core functions that
      interpret their results stay synchronous
"""

from typing import Protocol

from tipjar.core.session_state import Supporter


class FeedSource(Protocol):
    """Supplies the ranked supporter snapshot. Raises FeedError on failure."""
    async def fetch(self) -> tuple[Supporter, ...]: ...


class NotificationChannel(Protocol):
    """Delivers notification text. Raises NotificationError on failure."""
    configured: bool

    async def send_message(self, text: str) -> dict: ...

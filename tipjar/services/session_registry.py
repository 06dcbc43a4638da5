"""Session Registry - live sessions by id, with idle eviction.

Invariants:
    - get() refreshes a session's last-seen time; membership checks do not
    - A session leaves the registry only after teardown(), so no timer or
      feed task outlives its entry
    - evict_idle() never touches a session seen less than ``ttl`` seconds ago

Design Decisions:
    - Monotonic clock injected: eviction tests advance time without sleeping
    - Abandoned page loads never send DELETE, so idleness is the only signal
"""

import asyncio
import logging
import time
from collections.abc import Callable

from tipjar.services.session_orchestrator import SessionOrchestrator

logger = logging.getLogger(__name__)


class SessionRegistry:

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sessions: dict[str, SessionOrchestrator] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __getitem__(self, session_id: str) -> SessionOrchestrator:
        return self._sessions[session_id]

    def add(self, session: SessionOrchestrator) -> None:
        self._sessions[session.session_id] = session
        self._last_seen[session.session_id] = self._clock()

    def get(self, session_id: str) -> SessionOrchestrator | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    def pop(self, session_id: str) -> SessionOrchestrator | None:
        """Remove and tear down a session. Unknown ids return None."""
        self._last_seen.pop(session_id, None)
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.teardown()
        return session

    def evict_idle(self, ttl: float) -> list[str]:
        """Tear down and drop sessions not seen for ``ttl`` seconds."""
        now = self._clock()
        idle = [
            sid for sid, seen in self._last_seen.items() if now - seen >= ttl
        ]
        for sid in idle:
            self.pop(sid)
            logger.info("Evicted idle session", extra={"session_id": sid})
        return idle

    def teardown_all(self) -> None:
        for sid in list(self._sessions):
            self.pop(sid)


async def sweep_idle_sessions(
    registry: SessionRegistry, ttl: float, interval: float,
) -> None:
    """Run evict_idle() every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        registry.evict_idle(ttl)

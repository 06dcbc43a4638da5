"""Donation Feed Poller - periodic, supersede-on-reload supporter feed.

Invariants:
    - At most one fetch in flight: load() cancels the previous fetch first
    - Each fetch carries a generation; only the latest generation may commit
    - A cancelled or stale fetch never mutates FeedState (loading, error included)
    - While offline, load() is a no-op and the previous snapshot stays untouched
    - teardown() cancels the fetch and the interval; nothing fires afterwards

Design Decisions:
    - Generation counter plus task cancellation: cancellation stops the IO,
      the generation check covers a result that already raced past the cancel
    - Reconnect triggers an immediate load and restarts the interval;
      disconnect cancels the outstanding fetch
    - Cycles never re-enter the loading state on their own; only an explicit
      retry() shows the loading message again
"""

import asyncio
import logging

from tipjar.core.boundary_protocols import FeedSource
from tipjar.core.domain_types import DEFAULT_REFRESH_INTERVAL, FeedErrorKind
from tipjar.core.errors import FeedError
from tipjar.core.feed_records import begin_loading, failed_feed, loaded_feed
from tipjar.core.session_state import FeedState
from tipjar.services.connectivity_monitor import ConnectivityMonitor
from tipjar.services.task_slot import TaskSlot

logger = logging.getLogger(__name__)


class DonationFeedPoller:
    """Keeps FeedState in sync with the supporter feed endpoint."""

    def __init__(
        self,
        source: FeedSource,
        monitor: ConnectivityMonitor,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        self.source = source
        self.monitor = monitor
        self.interval = interval
        self._state = FeedState()
        self._generation = 0
        self._active = False
        self._fetch = TaskSlot("feed-fetch")
        self._ticker = TaskSlot("feed-interval")
        self._unsubscribe = monitor.subscribe(self._on_connectivity)

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fetch_pending(self) -> bool:
        return self._fetch.pending

    def activate(self) -> None:
        """Load once now, then every ``interval`` seconds."""
        self._active = True
        self.load()
        self._ticker.replace(self._poll())

    def load(self) -> asyncio.Task | None:
        """Start a fetch cycle, superseding any outstanding one."""
        if not self.monitor.online:
            logger.debug("Feed load skipped while offline")
            return None
        self._generation += 1
        return self._fetch.replace(self._run_fetch(self._generation))

    def retry(self) -> asyncio.Task | None:
        """User-initiated reload; shows the loading state again."""
        if not self.monitor.online:
            return None
        self._state = begin_loading(self._state)
        return self.load()

    def teardown(self) -> None:
        self._active = False
        self._unsubscribe()
        self._ticker.cancel()
        self._cancel_fetch()

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.load()

    async def _run_fetch(self, generation: int) -> None:
        try:
            supporters = await self.source.fetch()
        except asyncio.CancelledError:
            logger.debug("Feed fetch superseded", extra={"generation": generation})
            raise
        except FeedError as e:
            logger.warning(
                f"Supporter feed failed: {e.message}",
                extra={"generation": generation, "error_kind": e.kind.value},
            )
            self._commit(generation, failed_feed(e.kind))
            return
        except Exception as e:
            logger.error(
                f"Error loading or parsing donations: {e}",
                extra={"generation": generation}, exc_info=True,
            )
            self._commit(generation, failed_feed(FeedErrorKind.NETWORK_ERROR))
            return
        self._commit(generation, loaded_feed(supporters))

    def _commit(self, generation: int, state: FeedState) -> None:
        if generation != self._generation:
            logger.debug("Discarding stale feed result", extra={"generation": generation})
            return
        self._state = state

    def _cancel_fetch(self) -> None:
        # no result from the cancelled generation may commit
        self._generation += 1
        self._fetch.cancel()

    def _on_connectivity(self, online: bool) -> None:
        if not self._active:
            return
        if online:
            self.load()
            self._ticker.replace(self._poll())
        else:
            self._cancel_fetch()

"""Task Slot - holder for at most one outstanding asyncio task of a given kind.

Invariants:
    - replace() cancels the previous task before creating the new one
    - cancel() is idempotent and never cancels the task that is calling it
    - Unexpected task failures are logged, never left as "exception never retrieved"

Design Decisions:
    - Tasks for every delay and interval (asyncio.sleep inside the coroutine)
      so one cancellation primitive covers timers and network calls alike
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


async def run_after(delay: float, callback, *args) -> None:
    """Sleep, then invoke a synchronous callback."""
    await asyncio.sleep(delay)
    callback(*args)


class TaskSlot:
    """One named task slot owned by a session component."""

    def __init__(self, name: str):
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def replace(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        self.cancel()
        task = asyncio.get_running_loop().create_task(coro, name=self.name)
        task.add_done_callback(self._log_failure)
        self._task = task
        return task

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()

    def _log_failure(self, task: asyncio.Task) -> None:
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Task {self.name} failed: {exc}",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

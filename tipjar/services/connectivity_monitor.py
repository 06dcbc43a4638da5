"""Connectivity Monitor - online/offline state fed by platform events.

Invariants:
    - Single writer (set_online), many readers (online property, listeners)
    - Every event is applied and broadcast, last write wins, no polling or debouncing
    - Listeners run synchronously in registration order, after the state is committed
"""

import logging
from collections.abc import Callable

from tipjar.core.session_state import ConnectivityState

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


class ConnectivityMonitor:

    def __init__(self, online: bool = True):
        self._state = ConnectivityState(online=online)
        self._listeners: list[Listener] = []

    @property
    def online(self) -> bool:
        return self._state.online

    @property
    def state(self) -> ConnectivityState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns the matching unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        if online != self._state.online:
            logger.info("Connectivity changed: %s", "online" if online else "offline")
        self._state = ConnectivityState(online=online)
        for listener in list(self._listeners):
            listener(online)

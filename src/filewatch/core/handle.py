"""
Per-file watch handle and its debounce/reload state machine

    IDLE --arm--> ARMED --raw event--> PENDING_RELOAD --fire--> IDLE --rearm--> ARMED
                                         ^      |
                                         +------+ raw event (timer replaced)

CLOSED is terminal and reachable from every state. Each arm and close bumps
``generation``; callbacks carry the generation they were scheduled under and
are dropped when it no longer matches, so nothing fires after ``close()``.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Hashable, Optional, Tuple

from .config import NotifyLevel
from .subscriptions import EventKind, Subscription, SubscriptionError
from ..utils import path_utils

if TYPE_CHECKING:
    from .context import WatchContext

log = logging.getLogger(__name__)

QUALIFYING_EVENTS = (EventKind.CHANGE, EventKind.RENAME)


def _file_signature(st: os.stat_result) -> Tuple[int, int]:
    return st.st_mtime_ns, st.st_size


class WatchState(Enum):
    IDLE = 'idle'
    ARMED = 'armed'
    PENDING_RELOAD = 'pending_reload'
    CLOSED = 'closed'


class WatchHandle:
    """One OS subscription plus one debounce timer for a single resource"""

    def __init__(self, resource_id: Hashable, path: Path, context: 'WatchContext',
                 on_closed: Optional[Callable[['WatchHandle'], None]] = None):
        self.resource_id = resource_id
        self.path = path
        self.context = context
        self.state = WatchState.IDLE
        self.generation = 0
        # Content marker recorded just before the last reload
        self.last_marker: Optional[Hashable] = None
        self._reloaded_signature: Optional[Tuple[int, int]] = None
        self._subscription: Optional[Subscription] = None
        self._debounce_timer = None
        self._rearm_timer = None
        self._on_closed = on_closed

    @property
    def closed(self) -> bool:
        return self.state is WatchState.CLOSED

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    @property
    def reload_pending(self) -> bool:
        return self._debounce_timer is not None

    def arm(self) -> bool:
        """Open the OS subscription. Returns False (and closes) on failure."""
        if self.closed:
            return False

        self._release_subscription()
        self.generation += 1
        generation = self.generation
        loop = self.context.loop

        def forward(kind: EventKind) -> None:
            # Called on the observer thread: hop onto the loop
            loop.call_soon(self.on_raw_event, generation, kind)

        try:
            self._subscription = self.context.hub.subscribe(self.path, forward)
        except SubscriptionError as e:
            log.debug("Cannot watch %s: %s", self.path, e)
            self.close()
            return False

        self.state = WatchState.ARMED
        log.debug("Watching %s (resource %s)", self.path, self.resource_id)
        return True

    def on_raw_event(self, generation: int, kind: EventKind) -> None:
        """Restart the debounce timer for a change or rename event"""
        if generation != self.generation:
            return
        if self.state not in (WatchState.ARMED, WatchState.PENDING_RELOAD):
            return
        if kind not in QUALIFYING_EVENTS:
            return

        self._cancel_debounce()
        delay = self.context.config.debounce_delay
        self._debounce_timer = self.context.loop.call_later(delay, self.on_debounce_fire, generation)
        self.state = WatchState.PENDING_RELOAD

    def on_debounce_fire(self, generation: int) -> None:
        """Reload the resource once a burst of events has settled"""
        if generation != self.generation or self.state is not WatchState.PENDING_RELOAD:
            return
        self._debounce_timer = None

        host = self.context.host
        config = self.context.config

        if not host.is_valid(self.resource_id):
            self.close()
            return

        st = path_utils.stat_file(self.path)
        if st is None:
            log.info("Watched file deleted: %s", self.path)
            if config.notify:
                host.notify(f"File deleted: {path_utils.display_path(self.path)}", NotifyLevel.WARN)
            self.close()
            return

        self.last_marker = host.content_marker(self.resource_id)
        self._reloaded_signature = _file_signature(st)

        # Drop the subscription while the host reloads; events from it are stale now
        self._release_subscription()
        self.generation += 1
        generation = self.generation
        self.state = WatchState.IDLE

        log.debug("Reloading resource %s from %s", self.resource_id, self.path)
        try:
            host.trigger_reload(self.resource_id)
        except Exception:
            log.exception("Error reloading %s", self.path)

        # The reload may have closed or replaced this handle
        if generation != self.generation or self.state is not WatchState.IDLE:
            return
        self._rearm_timer = self.context.loop.call_later(config.rearm_delay, self._rearm, generation)

    def _rearm(self, generation: int) -> None:
        if generation != self.generation or self.state is not WatchState.IDLE:
            return
        self._rearm_timer = None

        if not self.context.enabled or not self.context.host.is_valid(self.resource_id):
            self.close()
            return
        if not self.arm():
            return

        # Writes between the reload and the new subscription raised no event
        st = path_utils.stat_file(self.path)
        if st is None or _file_signature(st) != self._reloaded_signature:
            log.debug("%s changed while unsubscribed", self.path)
            self.on_raw_event(self.generation, EventKind.CHANGE)

    def close(self) -> None:
        """Release the subscription and timers. Idempotent; safe from inside a callback."""
        if self.closed:
            return
        self.state = WatchState.CLOSED
        self.generation += 1

        self._cancel_debounce()
        if self._rearm_timer is not None:
            self._rearm_timer.cancel()
            self._rearm_timer = None
        self._release_subscription()
        log.debug("Stopped watching %s (resource %s)", self.path, self.resource_id)

        on_closed, self._on_closed = self._on_closed, None
        if on_closed is not None:
            on_closed(self)

    def _cancel_debounce(self) -> None:
        if self._debounce_timer is not None:
            self._debounce_timer.cancel()
            self._debounce_timer = None

    def _release_subscription(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            self.context.hub.unsubscribe(subscription)

    def __repr__(self) -> str:
        return f"<WatchHandle {self.resource_id} {self.path} {self.state.value} gen={self.generation}>"

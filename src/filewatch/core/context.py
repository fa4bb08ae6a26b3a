"""
Owned state of one filewatch instance
"""

import logging
from typing import Any, Callable, Optional

from .config import Config, load_default_config
from .loop import DispatchLoop
from .registry import WatchRegistry
from .subscriptions import SubscriptionHub
from ..host.base import Host

log = logging.getLogger(__name__)


class WatchContext:
    """Enabled flag, registry, config snapshot and the collaborators they use.

    A context owns the loop and hub it creates; ones passed in are left
    running on ``close()``.
    """

    def __init__(self, host: Host, config: Optional[Config] = None,
                 loop: Any = None, hub: Optional[SubscriptionHub] = None):
        self.host = host
        self._config = config if config is not None else load_default_config()
        self._owns_loop = loop is None
        self.loop = loop if loop is not None else DispatchLoop()
        self._owns_hub = hub is None
        self.hub = hub if hub is not None else SubscriptionHub()
        self.enabled = False
        self.registry = WatchRegistry(self)

    @property
    def config(self) -> Config:
        return self._config

    def reconfigure(self, config: Config) -> None:
        """Swap the config snapshot; running timers keep their delay"""
        self._config = config
        log.debug("Reconfigured: %s", config)

    def start(self) -> None:
        if self._owns_loop:
            self.loop.start()
        if self._owns_hub:
            self.hub.start()

    def close(self) -> None:
        """Tear down every watch and stop owned threads"""
        self.call(self._teardown)
        if self._owns_hub:
            self.hub.stop()
        if self._owns_loop:
            self.loop.stop()

    def call(self, callback: Callable[..., Any], *args: Any) -> Any:
        """Run a callback on the loop thread and return its result.

        Loops without a running thread (tests, host-driven loops) run it inline.
        """
        run_sync = getattr(self.loop, 'run_sync', None)
        is_alive = getattr(self.loop, 'is_alive', None)
        if run_sync is not None and is_alive is not None and is_alive():
            return run_sync(callback, *args)
        return callback(*args)

    def _teardown(self) -> None:
        self.enabled = False
        self.registry.unregister_all()

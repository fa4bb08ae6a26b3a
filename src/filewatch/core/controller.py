"""
Top-level enable/disable/toggle/status surface for filewatch
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Hashable, List, Optional

from .config import Config, NotifyLevel
from .context import WatchContext
from ..host.base import Host, ResourceListener
from ..utils import path_utils

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchedFile:
    resource_id: Hashable
    path: Path


@dataclass(frozen=True)
class WatchStatus:
    """Point-in-time view of what is being watched"""
    enabled: bool
    watched_count: int
    watched_files: List[WatchedFile] = field(default_factory=list)


class LifecycleController(ResourceListener):
    """Drives a WatchContext from user commands and host lifecycle events.

    While enabled the controller is registered as a listener on the host:
    opened resources are watched (when ``auto_enable`` is set), closed ones
    are dropped and renamed ones are re-registered under their new path.
    """

    def __init__(self, context: WatchContext):
        self.context = context

    @property
    def enabled(self) -> bool:
        return self.context.enabled

    @property
    def config(self) -> Config:
        return self.context.config

    def enable(self) -> None:
        """Start watching every open resource"""
        if self.context.enabled:
            return

        self.context.enabled = True
        self.context.host.add_listener(self)

        for resource_id in list(self.context.host.list_resources()):
            self.context.registry.register(resource_id)

        log.info("File watching enabled (%d file(s))", len(self.context.registry))
        self._notify("File watching enabled", self.config.notify_level)

    def disable(self) -> None:
        """Stop watching everything"""
        if not self.context.enabled:
            return

        self.context.enabled = False
        self.context.registry.unregister_all()
        self.context.host.remove_listener(self)

        log.info("File watching disabled")
        self._notify("File watching disabled", self.config.notify_level)

    def toggle(self) -> None:
        if self.context.enabled:
            self.disable()
        else:
            self.enable()

    def reconfigure(self, config: Config) -> None:
        self.context.reconfigure(config)

    def status(self) -> WatchStatus:
        host = self.context.host
        watched_files = [WatchedFile(resource_id, path)
                         for resource_id, path in self.context.registry.list_active()
                         if host.is_valid(resource_id)]
        return WatchStatus(
            enabled=self.context.enabled,
            watched_count=len(watched_files),
            watched_files=watched_files,
        )

    def format_status(self) -> str:
        status = self.status()
        lines = [
            f"File Watch: {'enabled' if status.enabled else 'disabled'}",
            f"Watching {status.watched_count} file(s):",
        ]
        for watched in status.watched_files:
            lines.append(f"  [{watched.resource_id}] {path_utils.display_path(watched.path)}")
        return '\n'.join(lines)

    def print_status(self) -> None:
        self.context.host.notify(self.format_status(), NotifyLevel.INFO)

    def shutdown(self) -> None:
        """Disable and release the context's threads"""
        self.context.call(self.disable)
        self.context.close()

    # Host lifecycle events

    def on_resource_opened(self, resource_id: Hashable) -> None:
        if self.context.enabled and self.config.auto_enable:
            self.context.registry.register(resource_id)

    def on_resource_closed(self, resource_id: Hashable) -> None:
        self.context.registry.unregister(resource_id)

    def on_resource_renamed(self, resource_id: Hashable, old_path: Optional[str], new_path: Optional[str]) -> None:
        self.context.registry.unregister(resource_id)
        if self.context.enabled:
            self.context.registry.register(resource_id)

    def on_resource_reloaded(self, resource_id: Hashable) -> None:
        """Report a reload unless the host kept the buffer content unchanged"""
        handle = self.context.registry.get(resource_id)
        previous = None
        if handle is not None:
            previous, handle.last_marker = handle.last_marker, None

        if not self.config.notify:
            return

        current = self.context.host.content_marker(resource_id)
        if previous is not None and current == previous:
            # The user kept their buffer
            return

        filepath = self.context.host.resolve_path(resource_id) or str(resource_id)
        timestamp = datetime.now().strftime('%H:%M:%S')
        self._notify(f"Reloaded: {path_utils.display_path(filepath)} at {timestamp}", self.config.notify_level)

    def _notify(self, message: str, level: NotifyLevel) -> None:
        if self.config.notify:
            self.context.host.notify(message, level)


def setup(host: Host, config: Optional[Config] = None, loop: Any = None, hub: Any = None) -> LifecycleController:
    """Create, start and (with ``auto_enable``) enable a controller for a host"""
    context = WatchContext(host, config=config, loop=loop, hub=hub)
    context.start()
    controller = LifecycleController(context)
    if context.config.auto_enable:
        context.call(controller.enable)
    return controller

"""
Registry mapping host resources to their watch handles
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional, Tuple

from .eligibility import check_eligible
from .handle import WatchHandle

if TYPE_CHECKING:
    from .context import WatchContext

log = logging.getLogger(__name__)


class WatchRegistry:
    """Holds at most one WatchHandle per resource id.

    Handles that close themselves (file deleted, subscription lost, resource
    gone) are dropped through their ``on_closed`` callback.
    """

    def __init__(self, context: 'WatchContext'):
        self.context = context
        self._entries: Dict[Hashable, WatchHandle] = {}

    def register(self, resource_id: Hashable) -> bool:
        """(Re)start watching a resource. Returns True if it is now watched."""
        self.unregister(resource_id)

        if not self.context.enabled:
            log.debug("Not watching %s: watching is disabled", resource_id)
            return False

        eligibility = check_eligible(self.context.host, resource_id, self.context.config.ignore_patterns)
        if not eligibility.eligible:
            return False

        handle = WatchHandle(resource_id, eligibility.path, self.context, on_closed=self._discard)
        self._entries[resource_id] = handle
        return handle.arm()

    def unregister(self, resource_id: Hashable) -> None:
        """Stop watching a resource; no-op if it is not watched"""
        handle = self._entries.pop(resource_id, None)
        if handle is not None:
            handle.close()

    def unregister_all(self) -> None:
        for resource_id in list(self._entries):
            self.unregister(resource_id)

    def list_active(self) -> List[Tuple[Hashable, Path]]:
        """Point-in-time copy of (resource id, path) in registration order"""
        return [(resource_id, handle.path)
                for resource_id, handle in self._entries.items()
                if not handle.closed]

    def get(self, resource_id: Hashable) -> Optional[WatchHandle]:
        return self._entries.get(resource_id)

    def _discard(self, handle: WatchHandle) -> None:
        # Only drop the entry if it still belongs to this handle
        if self._entries.get(handle.resource_id) is handle:
            del self._entries[handle.resource_id]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, resource_id: Hashable) -> bool:
        return resource_id in self._entries

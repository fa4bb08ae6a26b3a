"""
Interface between filewatch and the application that owns the open files
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Hashable, Iterable, Optional

if TYPE_CHECKING:
    from filewatch.core.config import NotifyLevel

ResourceId = Hashable


class ResourceListener:
    """Receives lifecycle events for host resources.

    All methods are no-ops by default so listeners only override what they need.
    """

    def on_resource_opened(self, resource_id: ResourceId) -> None:
        pass

    def on_resource_closed(self, resource_id: ResourceId) -> None:
        pass

    def on_resource_renamed(self, resource_id: ResourceId, old_path: Optional[str], new_path: Optional[str]) -> None:
        pass

    def on_resource_reloaded(self, resource_id: ResourceId) -> None:
        pass


class Host(ABC):
    """Abstract host application.

    Methods are only ever called from the watch loop thread. Listener
    callbacks must be delivered on that same thread.
    """

    @abstractmethod
    def list_resources(self) -> Iterable[ResourceId]:
        """Return the ids of every currently open resource"""

    @abstractmethod
    def is_valid(self, resource_id: ResourceId) -> bool:
        """Check whether a resource is still open"""

    @abstractmethod
    def resolve_path(self, resource_id: ResourceId) -> Optional[str]:
        """Return the file path backing a resource, or None for scratch resources"""

    @abstractmethod
    def trigger_reload(self, resource_id: ResourceId) -> None:
        """Reload a resource from disk, resolving conflicts the host's way"""

    @abstractmethod
    def content_marker(self, resource_id: ResourceId) -> Hashable:
        """Return a token that changes whenever the in-memory content changes"""

    @abstractmethod
    def notify(self, message: str, level: "NotifyLevel") -> None:
        """Show a message to the user"""

    @abstractmethod
    def add_listener(self, listener: ResourceListener) -> None:
        """Start delivering lifecycle events to a listener"""

    @abstractmethod
    def remove_listener(self, listener: ResourceListener) -> None:
        """Stop delivering lifecycle events to a listener"""

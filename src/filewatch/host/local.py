"""
In-memory host keeping local files as text buffers

Used by the command line interface and as a reference for embedding
filewatch in another application.
"""

import itertools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

from filewatch.host.base import Host, ResourceListener

if TYPE_CHECKING:
    from filewatch.core.config import NotifyLevel

log = logging.getLogger(__name__)

Notifier = Callable[[str, "NotifyLevel"], None]


@dataclass
class Buffer:
    """An open file held in memory"""
    resource_id: int
    path: Optional[str]
    text: str = ''
    version: int = 0
    modified: bool = False


class LocalFileHost(Host):
    """Host whose resources are text buffers read from the local filesystem.

    Reload policy: a clean buffer takes the disk content; a buffer with
    unsaved edits keeps them. Either way listeners get ``on_resource_reloaded``
    when disk and buffer differ, and the content marker only changes when the
    buffer text does.
    """

    def __init__(self, notifier: Optional[Notifier] = None, encoding: str = 'utf-8'):
        self.notifier = notifier
        self.encoding = encoding
        self._buffers: Dict[int, Buffer] = {}
        self._listeners: List[ResourceListener] = []
        self._ids = itertools.count(1)

    # Buffer management

    def open(self, path: Optional[str]) -> int:
        """Open a file (or a scratch buffer when ``path`` is None) and return its id"""
        resource_id = next(self._ids)
        text = ''
        if path is not None:
            path = str(Path(path).expanduser().absolute())
            text = self._read(path) or ''
        self._buffers[resource_id] = Buffer(resource_id, path, text)
        log.debug("Opened buffer %s: %s", resource_id, path)
        self._emit('on_resource_opened', resource_id)
        return resource_id

    def close(self, resource_id: int) -> None:
        if self._buffers.pop(resource_id, None) is None:
            return
        log.debug("Closed buffer %s", resource_id)
        self._emit('on_resource_closed', resource_id)

    def rename(self, resource_id: int, new_path: str) -> None:
        """Point a buffer at a different file (save-as)"""
        buffer = self._buffers[resource_id]
        old_path = buffer.path
        buffer.path = str(Path(new_path).expanduser().absolute())
        self._emit('on_resource_renamed', resource_id, old_path, buffer.path)

    def edit(self, resource_id: int, text: str) -> None:
        """Replace buffer content without writing it to disk"""
        buffer = self._buffers[resource_id]
        buffer.text = text
        buffer.version += 1
        buffer.modified = True

    def get_buffer(self, resource_id: int) -> Optional[Buffer]:
        return self._buffers.get(resource_id)

    def text(self, resource_id: int) -> str:
        return self._buffers[resource_id].text

    # Host interface

    def list_resources(self) -> Iterable[int]:
        return list(self._buffers)

    def is_valid(self, resource_id) -> bool:
        return resource_id in self._buffers

    def resolve_path(self, resource_id) -> Optional[str]:
        buffer = self._buffers.get(resource_id)
        return buffer.path if buffer else None

    def trigger_reload(self, resource_id) -> None:
        buffer = self._buffers.get(resource_id)
        if buffer is None or buffer.path is None:
            return

        disk_text = self._read(buffer.path)
        if disk_text is None or disk_text == buffer.text:
            return

        if buffer.modified:
            log.info("Keeping unsaved changes in %s", buffer.path)
        else:
            buffer.text = disk_text
            buffer.version += 1
        self._emit('on_resource_reloaded', resource_id)

    def content_marker(self, resource_id) -> int:
        return self._buffers[resource_id].version

    def notify(self, message: str, level: "NotifyLevel") -> None:
        if self.notifier is not None:
            self.notifier(message, level)
        else:
            log.log(level.value, message)

    def add_listener(self, listener: ResourceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ResourceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, method: str, *args) -> None:
        # Listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            getattr(listener, method)(*args)

    def _read(self, path: str) -> Optional[str]:
        try:
            return Path(path).read_text(encoding=self.encoding, errors='replace')
        except OSError as e:
            log.debug("Cannot read %s: %s", path, e)
            return None

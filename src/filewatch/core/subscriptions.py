"""
OS-level file change subscriptions built on watchdog

watchdog observes directories, so a single file is watched by scheduling its
parent directory non-recursively and filtering the directory's events down to
the one path. Several files in the same directory share one watch.
"""

import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Set

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileModifiedEvent,
    FileMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

log = logging.getLogger(__name__)


class EventKind(Enum):
    """Classification of a raw filesystem event for one watched file"""
    CHANGE = 'change'
    RENAME = 'rename'
    OTHER = 'other'


class SubscriptionError(OSError):
    """Raised when the OS refuses a change subscription"""


def _fspath(value) -> str:
    return os.path.normpath(os.fsdecode(value))


def classify_event(event: FileSystemEvent, path: str) -> Optional[EventKind]:
    """Classify a watchdog event with respect to one file.

    Returns None when the event does not concern ``path`` at all.
    Content writes are CHANGE; moves to or from the path, creation and
    deletion are RENAME (atomic saves replace the file through a rename).
    """
    if event.is_directory:
        return None

    src_path = _fspath(event.src_path)
    dest_path = _fspath(event.dest_path) if getattr(event, 'dest_path', '') else ''
    if path not in (src_path, dest_path):
        return None

    if isinstance(event, FileModifiedEvent):
        return EventKind.CHANGE
    if isinstance(event, (FileMovedEvent, FileCreatedEvent, FileDeletedEvent)):
        return EventKind.RENAME
    return EventKind.OTHER


class FileEventHandler(FileSystemEventHandler):
    """Forwards the events of a single file to a callback"""

    def __init__(self, path: Path, callback: Callable[[EventKind], None]):
        super().__init__()
        self.path = _fspath(path)
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        kind = classify_event(event, self.path)
        if kind is not None:
            self.callback(kind)


class Subscription:
    """Handle for one active file subscription"""

    __slots__ = ('path', 'directory', 'handler')

    def __init__(self, path: Path, directory: str, handler: FileEventHandler):
        self.path = path
        self.directory = directory
        self.handler = handler

    def __repr__(self) -> str:
        return f"<Subscription {self.path}>"


class _DirectoryWatch:
    __slots__ = ('watch', 'handlers')

    def __init__(self, watch: ObservedWatch):
        self.watch = watch
        self.handlers: Set[FileEventHandler] = set()


class SubscriptionHub:
    """Owns a watchdog observer and hands out per-file subscriptions.

    Callbacks run on the observer thread; callers are expected to hop onto
    their own loop before touching shared state.
    """

    def __init__(self, observer: Optional[BaseObserver] = None):
        self.observer = observer if observer is not None else Observer()
        self._lock = threading.Lock()
        self._directories: Dict[str, _DirectoryWatch] = {}

    def start(self) -> None:
        """Start the observer thread"""
        if not self.observer.is_alive():
            self.observer.start()

    def stop(self) -> None:
        """Stop the observer and drop every subscription"""
        with self._lock:
            self._directories.clear()
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()

    def subscribe(self, path: Path, callback: Callable[[EventKind], None]) -> Subscription:
        """Start delivering change events for ``path`` to ``callback``.

        Raises:
            SubscriptionError: the parent directory is gone or the OS refused
                the watch (permissions, inotify limits, ...)
        """
        directory = _fspath(Path(path).parent)
        if not os.path.isdir(directory):
            raise SubscriptionError(f"Directory does not exist: {directory}")

        handler = FileEventHandler(path, callback)
        with self._lock:
            entry = self._directories.get(directory)
            try:
                if entry is None:
                    watch = self.observer.schedule(handler, directory, recursive=False)
                    entry = _DirectoryWatch(watch)
                    self._directories[directory] = entry
                else:
                    self.observer.add_handler_for_watch(handler, entry.watch)
            except OSError as e:
                raise SubscriptionError(f"Cannot watch {path}: {e}") from e
            entry.handlers.add(handler)

        log.debug("Subscribed to %s", path)
        return Subscription(Path(path), directory, handler)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Stop delivering events for a subscription. Unknown subscriptions are ignored."""
        with self._lock:
            entry = self._directories.get(subscription.directory)
            if entry is None or subscription.handler not in entry.handlers:
                return
            entry.handlers.discard(subscription.handler)
            try:
                if entry.handlers:
                    self.observer.remove_handler_for_watch(subscription.handler, entry.watch)
                else:
                    del self._directories[subscription.directory]
                    self.observer.unschedule(entry.watch)
            except (KeyError, OSError) as e:
                # The emitter may already be gone (directory removed)
                log.debug("Error releasing watch on %s: %s", subscription.directory, e)

        log.debug("Unsubscribed from %s", subscription.path)

    def watched_directories(self) -> Set[str]:
        with self._lock:
            return set(self._directories)

"""
Single-threaded dispatch loop for filewatch

Every piece of watch logic (raw filesystem events, debounce timers, re-arm
timers, lifecycle notifications) runs as a discrete callback on one asyncio
event loop owned by a background thread. Other threads, such as the watchdog
observer, only post callbacks onto it.
"""

import asyncio
import logging
import threading
from concurrent.futures import CancelledError, Future
from typing import Any, Callable, Dict, Optional, Set

log = logging.getLogger(__name__)


class DispatchLoop:
    """asyncio event loop running on a single background thread.

    Example:
        loop = DispatchLoop()
        loop.start()
        loop.call_soon(print, "hello")
        loop.run_sync(controller.enable)
        loop.stop()
    """

    def __init__(self, name: str = 'filewatch-loop'):
        self.name = name
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        # run_sync calls that have been posted but not answered yet
        self._waiting: Set[Future] = set()

    def time(self) -> float:
        """Current loop time in seconds (monotonic)"""
        if self._loop is None:
            raise RuntimeError(f"{self.name} has not been started")
        return self._loop.time()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue a callback to run on the loop thread. Thread-safe.

        Callbacks posted after ``stop()`` are dropped.
        """
        with self._lock:
            if not self._running:
                log.debug("%s is stopped, dropping %r", self.name, callback)
                return
            self._loop.call_soon_threadsafe(callback, *args)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Schedule a callback to run after ``delay`` seconds.

        Returns the asyncio timer handle; cancel it from the loop thread.
        """
        if self.in_loop_thread():
            return self._loop.call_later(delay, callback, *args)
        return self.run_sync(self.call_later, delay, callback, *args)

    def in_loop_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def run_sync(self, callback: Callable[..., Any], *args: Any, timeout: Optional[float] = None) -> Any:
        """Run a callback on the loop thread and wait for its result.

        Runs inline when called from the loop thread itself.

        Raises:
            RuntimeError: the loop is not running, or stopped before the
                callback got to run
        """
        if self.in_loop_thread():
            return callback(*args)

        future: Future = Future()

        def _invoke():
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(callback(*args))
            except BaseException as e:
                future.set_exception(e)

        with self._lock:
            if not self._running:
                raise RuntimeError(f"{self.name} is not running")
            waiting = self._waiting
            waiting.add(future)
            self._loop.call_soon_threadsafe(_invoke)

        try:
            return future.result(timeout)
        except CancelledError:
            raise RuntimeError(f"{self.name} stopped before running {callback!r}") from None
        finally:
            with self._lock:
                waiting.discard(future)

    def start(self) -> None:
        """Start the loop thread"""
        with self._lock:
            if self._running:
                return
            self._loop = asyncio.new_event_loop()
            self._loop.set_exception_handler(self._handle_exception)
            self._running = True
            self._waiting = set()
            self._thread = threading.Thread(target=self._run, args=(self._loop, self._waiting),
                                            name=self.name, daemon=True)
        self._thread.start()
        log.debug("Started %s", self.name)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the loop thread; callbacks still queued are dropped and their waiters released"""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._loop.call_soon_threadsafe(self._loop.stop)
        thread = self._thread
        if thread is not None and not self.in_loop_thread():
            thread.join(timeout)
        log.debug("Stopped %s", self.name)

    def is_alive(self) -> bool:
        """Check if the loop thread is currently running"""
        return self._running and self._thread is not None and self._thread.is_alive()

    def _run(self, loop: asyncio.AbstractEventLoop, waiting: Set[Future]) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            with self._lock:
                if self._loop is loop:
                    self._running = False
                waiting = list(waiting)
            for future in waiting:
                future.cancel()
            loop.close()

    def _handle_exception(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get('exception')
        log.error("Error in loop callback %s: %s", context.get('handle', ''), context.get('message'),
                  exc_info=exception)

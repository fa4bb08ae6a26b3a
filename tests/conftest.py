"""
Shared fixtures: a manually advanced loop, a fake subscription hub and a fake host
"""

import heapq
import itertools
from collections import deque
from pathlib import Path

import pytest

from filewatch.core.config import Config
from filewatch.core.context import WatchContext
from filewatch.core.controller import LifecycleController
from filewatch.core.subscriptions import SubscriptionError
from filewatch.host.base import Host


class ManualTimer:
    """Cancellable timer ordered by deadline, then by scheduling order"""

    def __init__(self, when, seq, callback, args):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled

    def __lt__(self, other):
        return (self.when, self.seq) < (other.when, other.seq)


class ManualLoop:
    """Loop whose clock only moves when a test calls advance()"""

    def __init__(self):
        self.now = 0.0
        self._ready = deque()
        self._timers = []
        self._seq = itertools.count()

    def time(self):
        return self.now

    def call_soon(self, callback, *args):
        self._ready.append((callback, args))

    def call_later(self, delay, callback, *args):
        handle = ManualTimer(self.now + delay, next(self._seq), callback, args)
        heapq.heappush(self._timers, handle)
        return handle

    def run_ready(self):
        while self._ready:
            callback, args = self._ready.popleft()
            callback(*args)

    def advance(self, seconds):
        target = self.now + seconds
        self.run_ready()
        while self._timers and self._timers[0].when <= target + 1e-9:
            timer = heapq.heappop(self._timers)
            self.now = max(self.now, timer.when)
            if not timer.cancelled():
                timer.callback(*timer.args)
            self.run_ready()
        self.now = target

    def pending_timers(self):
        return [timer for timer in self._timers if not timer.cancelled()]


class FakeSubscription:
    def __init__(self, path, callback):
        self.path = Path(path)
        self.callback = callback
        self.active = True


class FakeHub:
    """Records subscriptions and lets tests emit raw events"""

    def __init__(self):
        self.active = []
        self.fail = False
        self.subscribe_count = 0

    def start(self):
        pass

    def stop(self):
        pass

    def subscribe(self, path, callback):
        if self.fail:
            raise SubscriptionError(f"Cannot watch {path}")
        self.subscribe_count += 1
        subscription = FakeSubscription(path, callback)
        self.active.append(subscription)
        return subscription

    def unsubscribe(self, subscription):
        if subscription in self.active:
            self.active.remove(subscription)
            subscription.active = False

    def emit(self, path, kind):
        for subscription in list(self.active):
            if subscription.path == Path(path).resolve():
                subscription.callback(kind)

    def active_for(self, path):
        return [s for s in self.active if s.path == Path(path).resolve()]


class FakeHost(Host):
    """Host with explicit control over validity, markers and reload outcome"""

    def __init__(self, clock=None):
        self.clock = clock
        self.paths = {}
        self.markers = {}
        self.notifications = []
        self.reloads = []
        self.listeners = []
        self.keep_buffer = False
        self.on_reload = None
        self._ids = itertools.count(1)

    # Helpers for tests

    def open(self, path):
        resource_id = next(self._ids)
        self.paths[resource_id] = str(path) if path is not None else None
        self.markers[resource_id] = 0
        for listener in list(self.listeners):
            listener.on_resource_opened(resource_id)
        return resource_id

    def close(self, resource_id):
        self.paths.pop(resource_id, None)
        for listener in list(self.listeners):
            listener.on_resource_closed(resource_id)

    def invalidate(self, resource_id):
        """Drop a resource without telling listeners"""
        self.paths.pop(resource_id, None)

    def rename(self, resource_id, new_path):
        old_path = self.paths[resource_id]
        self.paths[resource_id] = str(new_path)
        for listener in list(self.listeners):
            listener.on_resource_renamed(resource_id, old_path, str(new_path))

    def messages(self, level=None):
        return [message for message, lvl in self.notifications if level is None or lvl is level]

    # Host interface

    def list_resources(self):
        return list(self.paths)

    def is_valid(self, resource_id):
        return resource_id in self.paths

    def resolve_path(self, resource_id):
        return self.paths.get(resource_id)

    def trigger_reload(self, resource_id):
        self.reloads.append((resource_id, self.clock() if self.clock else None))
        if not self.keep_buffer:
            self.markers[resource_id] += 1
        if self.on_reload is not None:
            self.on_reload(resource_id)
        for listener in list(self.listeners):
            listener.on_resource_reloaded(resource_id)

    def content_marker(self, resource_id):
        return self.markers[resource_id]

    def notify(self, message, level):
        self.notifications.append((message, level))

    def add_listener(self, listener):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self.listeners:
            self.listeners.remove(listener)


@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def hub():
    return FakeHub()


@pytest.fixture
def host(loop):
    return FakeHost(clock=loop.time)


@pytest.fixture
def config():
    return Config(debounce_delay=0.1, rearm_delay=0.05)


@pytest.fixture
def context(host, config, loop, hub):
    return WatchContext(host, config=config, loop=loop, hub=hub)


@pytest.fixture
def controller(context):
    return LifecycleController(context)


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("first\n")
    return path.resolve()

"""Core functionality for filewatch."""

from .config import Config, NotifyLevel, load_config, load_default_config
from .loop import DispatchLoop
from .subscriptions import EventKind, SubscriptionHub, SubscriptionError
from .eligibility import Eligibility, check_eligible
from .handle import WatchHandle, WatchState
from .registry import WatchRegistry
from .context import WatchContext
from .controller import LifecycleController, WatchStatus, WatchedFile, setup

__all__ = [
    'Config', 'NotifyLevel', 'load_config', 'load_default_config',
    'DispatchLoop',
    'EventKind', 'SubscriptionHub', 'SubscriptionError',
    'Eligibility', 'check_eligible',
    'WatchHandle', 'WatchState',
    'WatchRegistry',
    'WatchContext',
    'LifecycleController', 'WatchStatus', 'WatchedFile', 'setup',
]

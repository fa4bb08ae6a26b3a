"""
filewatch - Reload open files when they change on disk
"""

__version__ = "0.1.0"
__description__ = "Debounced per-file change watching for editors and other document hosts."

from .core import (
    Config,
    NotifyLevel,
    load_config,
    load_default_config,
    LifecycleController,
    WatchContext,
    WatchStatus,
    setup,
)
from .host import Host, ResourceListener, LocalFileHost

__all__ = [
    'Config',
    'NotifyLevel',
    'load_config',
    'load_default_config',
    'LifecycleController',
    'WatchContext',
    'WatchStatus',
    'setup',
    'Host',
    'ResourceListener',
    'LocalFileHost',
]

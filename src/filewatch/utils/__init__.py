"""Utility functions for filewatch."""

from .path_utils import (
    resolve_path,
    is_path_ignored,
    is_remote_path,
    stat_file,
    display_path,
)
from .logging_utils import setup_logger

__all__ = [
    # Path utilities
    'resolve_path',
    'is_path_ignored',
    'is_remote_path',
    'stat_file',
    'display_path',
    # Logging utilities
    'setup_logger',
]

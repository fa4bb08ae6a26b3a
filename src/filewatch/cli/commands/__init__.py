"""
CLI commands package for filewatch
"""

from .watch import watch_command
from .check import check_command
from .init_config import init_config_command

__all__ = [
    'watch_command',
    'check_command',
    'init_config_command',
]

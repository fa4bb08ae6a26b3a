"""
Configuration management for filewatch
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import tomli

log = logging.getLogger(__name__)

DEFAULT_IGNORE_PATTERNS = (r'\.git/', r'\.swp$', r'~$', r'4913$')


class NotifyLevel(Enum):
    """Severity of a user-facing notification"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, value: Any) -> 'NotifyLevel':
        """Accept a NotifyLevel, a name ('info', 'WARN', 'warning') or a logging level number"""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            for level in cls:
                if level.value == value:
                    return level
            raise ValueError(f"Unknown notify level: {value}")
        name = str(value).strip().upper()
        if name == 'WARNING':
            name = 'WARN'
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown notify level: {value}") from None


@dataclass(frozen=True)
class Config:
    """Configuration snapshot for filewatch.

    Instances are immutable; reconfiguring replaces the whole snapshot.
    """
    debounce_delay: float = 0.1
    notify: bool = True
    notify_level: NotifyLevel = NotifyLevel.INFO
    ignore_patterns: Tuple[str, ...] = field(default=DEFAULT_IGNORE_PATTERNS)
    auto_enable: bool = True
    rearm_delay: float = 0.05
    log_level: str = 'info'

    def __post_init__(self):
        # Normalise mutable/loose inputs so the snapshot stays hashable and typed
        object.__setattr__(self, 'notify_level', NotifyLevel.parse(self.notify_level))
        if not isinstance(self.ignore_patterns, (list, tuple)):
            raise ValueError(f"ignore_patterns must be a list of patterns, got {self.ignore_patterns!r}")
        object.__setattr__(self, 'ignore_patterns', tuple(self.ignore_patterns))
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any option is out of range"""
        if self.debounce_delay < 0:
            raise ValueError(f"debounce_delay must be >= 0, got {self.debounce_delay}")
        if self.rearm_delay < 0:
            raise ValueError(f"rearm_delay must be >= 0, got {self.rearm_delay}")
        for pattern in self.ignore_patterns:
            if not isinstance(pattern, str):
                raise ValueError(f"Ignore pattern must be a string, got {pattern!r}")
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern {pattern!r}: {e}") from e

    def with_overrides(self, **changes) -> 'Config':
        """Return a new snapshot with some options replaced"""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create Config instance from dictionary"""
        return cls(
            debounce_delay=float(data.get('debounce_delay', 0.1)),
            notify=bool(data.get('notify', True)),
            notify_level=NotifyLevel.parse(data.get('notify_level', 'info')),
            ignore_patterns=data.get('ignore_patterns', DEFAULT_IGNORE_PATTERNS),
            auto_enable=bool(data.get('auto_enable', True)),
            rearm_delay=float(data.get('rearm_delay', 0.05)),
            log_level=str(data.get('log_level', 'info')),
        )


def load_config(config_path: str) -> Optional[Config]:
    """Load configuration from TOML file"""
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            return None

        with open(config_file, 'rb') as f:
            data = tomli.load(f)

        # Handle both flat and nested config formats
        if 'filewatch' in data:
            config_data = data['filewatch']
        else:
            config_data = data

        return Config.from_dict(config_data)

    except (OSError, ValueError, tomli.TOMLDecodeError) as e:
        log.error("Error loading config %s: %s", config_path, e)
        return None


def load_default_config() -> Config:
    """Load the default configuration from the package"""
    default_config_path = Path(__file__).parent.parent / 'default.config.toml'
    try:
        with open(default_config_path, 'rb') as f:
            data = tomli.load(f)
        return Config.from_dict(data.get('filewatch', data))
    except (OSError, ValueError, tomli.TOMLDecodeError) as e:
        log.debug("Falling back to built-in defaults: %s", e)
        return Config()

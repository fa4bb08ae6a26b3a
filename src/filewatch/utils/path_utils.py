"""
Path and file utilities for filewatch
"""

import os
import re
from pathlib import Path
from typing import Optional, Sequence, Union

REMOTE_PATH_RE = re.compile(r'^\w+://')


def resolve_path(path: Union[str, Path]) -> Path:
    """Resolve a path to an absolute Path object."""
    return Path(path).expanduser().resolve()


def is_path_ignored(path: Union[str, Path], ignore_patterns: Sequence[str]) -> bool:
    """Check if a path should be ignored based on regex patterns.

    Patterns are tried in order and the first match wins.

    Args:
        path: Path to check
        ignore_patterns: Regex patterns searched anywhere in the path string

    Returns:
        True if the path should be ignored, False otherwise
    """
    path_str = str(path)
    for pattern in ignore_patterns:
        if re.search(pattern, path_str):
            return True
    return False


def is_remote_path(path: str) -> bool:
    """Check if a path uses a URL-like scheme (scp://, fugitive://, ...)."""
    return bool(REMOTE_PATH_RE.match(path))


def stat_file(path: Union[str, Path]) -> Optional[os.stat_result]:
    """Stat a path, returning None if it does not exist or cannot be read."""
    try:
        return os.stat(path)
    except OSError:
        return None


def display_path(path: Union[str, Path], cwd: Optional[Path] = None) -> str:
    """Shorten a path for display.

    Paths below the working directory are shown relative to it, paths below
    the home directory start with ``~``, anything else is shown as is.
    """
    path_obj = Path(path)
    base = cwd if cwd is not None else Path.cwd()
    try:
        return str(path_obj.relative_to(base))
    except ValueError:
        pass

    try:
        return str(Path('~') / path_obj.relative_to(Path.home()))
    except (ValueError, RuntimeError):
        return str(path_obj)

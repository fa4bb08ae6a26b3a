"""
Logging utilities for filewatch
"""

import logging
import sys
from typing import Optional


def setup_logger(name: str, level: str = 'INFO', format_string: Optional[str] = None) -> logging.Logger:
    """Set up a logger with the specified name and level."""
    logger = logging.getLogger(name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)

    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    return logger

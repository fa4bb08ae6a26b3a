"""Command line interface for filewatch."""

from .main import main

__all__ = ['main']

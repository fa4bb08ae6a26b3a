"""
Utility functions for CLI commands
"""

import sys
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style

from filewatch.core.config import Config, NotifyLevel, load_config, load_default_config

DEFAULT_CONFIG_NAME = "filewatch.config.toml"

LEVEL_COLORS = {
    NotifyLevel.DEBUG: Style.DIM,
    NotifyLevel.INFO: Fore.GREEN,
    NotifyLevel.WARN: Fore.YELLOW,
    NotifyLevel.ERROR: Fore.RED,
}


def load_config_with_fallback(config_file: Optional[str], search_dir: Path, verbose: bool = False) -> Config:
    """Load configuration with automatic fallback to default config file and default config."""
    config_obj = None

    if not config_file:
        # Look for default config file in search directory
        default_config = search_dir / DEFAULT_CONFIG_NAME
        if default_config.exists():
            config_file = str(default_config)
            if verbose:
                click.echo(f"{Fore.CYAN}Using default config: {config_file}{Style.RESET_ALL}")

    if config_file:
        config_obj = load_config(config_file)
        if not config_obj:
            click.echo(f"{Fore.RED}Error: Could not load config file: {config_file}{Style.RESET_ALL}")
            sys.exit(1)

    if not config_obj:
        config_obj = load_default_config()

    return config_obj


def echo_notification(message: str, level: NotifyLevel) -> None:
    """Print a host notification in the colour of its level"""
    color = LEVEL_COLORS.get(level, '')
    click.echo(f"{color}{message}{Style.RESET_ALL}", err=level in (NotifyLevel.WARN, NotifyLevel.ERROR))


def handle_cli_exception(e: Exception, verbose: bool = False) -> None:
    """Handle exceptions in CLI commands consistently."""
    click.echo(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
    if verbose:
        import traceback
        traceback.print_exc()
    sys.exit(1)

"""
Watch command for filewatch CLI
"""

import sys
import time
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style

from filewatch.core.controller import setup
from filewatch.host.local import LocalFileHost
from filewatch.utils.logging_utils import setup_logger
from filewatch.cli.utils import load_config_with_fallback, echo_notification, handle_cli_exception


@click.command()
@click.argument('files', nargs=-1, required=True, type=click.Path())
@click.option('--config', '-c', type=click.Path(),
              help='Path to configuration file (TOML)')
@click.option('--debounce', '-d', type=float,
              help='Seconds of quiet after the last change before reloading')
@click.option('--ignore', '-i', multiple=True,
              help='Extra path patterns to ignore (regex supported)')
@click.option('--quiet', '-q', is_flag=True,
              help='Do not print reload notifications')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
def watch_command(files: tuple, config: Optional[str], debounce: Optional[float], ignore: tuple,
                  quiet: bool, verbose: bool):
    """Start watching files and reload them whenever they change on disk.

    FILES: One or more files to open and watch
    """
    config_obj = load_config_with_fallback(config, Path.cwd(), verbose)

    overrides = {}
    if debounce is not None:
        overrides['debounce_delay'] = debounce
    if ignore:
        overrides['ignore_patterns'] = tuple(config_obj.ignore_patterns) + tuple(ignore)
    if quiet:
        overrides['notify'] = False
    if overrides:
        try:
            config_obj = config_obj.with_overrides(**overrides)
        except ValueError as e:
            handle_cli_exception(e, verbose)

    setup_logger('filewatch', 'DEBUG' if verbose else config_obj.log_level)

    click.echo(f"{Fore.GREEN}Starting filewatch...{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}Debounce: {config_obj.debounce_delay}s{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}Ignore patterns: {', '.join(config_obj.ignore_patterns)}{Style.RESET_ALL}")

    host = LocalFileHost(notifier=echo_notification)
    controller = setup(host, config=config_obj)
    context = controller.context

    try:
        for file_path in files:
            context.call(host.open, file_path)
        context.call(controller.enable)

        status = context.call(controller.status)
        watched = {str(watched_file.path) for watched_file in status.watched_files}
        for file_path in files:
            if str(Path(file_path).resolve()) not in watched:
                click.echo(f"{Fore.YELLOW}Not watching: {file_path}{Style.RESET_ALL}")

        if not status.watched_count:
            click.echo(f"{Fore.RED}Error: Nothing to watch{Style.RESET_ALL}")
            controller.shutdown()
            sys.exit(1)

        if verbose:
            click.echo(context.call(controller.format_status))
        click.echo(f"{Fore.YELLOW}Press Ctrl+C to stop watching...{Style.RESET_ALL}")

        # Keep the program running
        while True:
            time.sleep(1)

    except KeyboardInterrupt:
        click.echo(f"\n{Fore.YELLOW}Stopping filewatch...{Style.RESET_ALL}")
        controller.shutdown()
        click.echo(f"{Fore.GREEN}filewatch stopped.{Style.RESET_ALL}")

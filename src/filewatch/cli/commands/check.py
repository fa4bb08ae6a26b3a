"""
Check command for filewatch CLI
"""

from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style

from filewatch.core.eligibility import check_eligible
from filewatch.host.local import LocalFileHost
from filewatch.cli.utils import load_config_with_fallback

REASONS = {
    'no-path': 'no file path',
    'remote': 'remote or virtual path',
    'missing': 'file does not exist',
    'not-regular': 'not a regular file',
    'ignored': 'matches an ignore pattern',
}


@click.command()
@click.argument('files', nargs=-1, required=True, type=click.Path())
@click.option('--config', '-c', type=click.Path(),
              help='Path to configuration file (TOML)')
@click.option('--verbose', '-v', is_flag=True, help='Show the configuration in use')
def check_command(files: tuple, config: Optional[str], verbose: bool):
    """Report which FILES would be watched and why the others would not.

    Exits with status 1 if any file cannot be watched.
    """
    config_obj = load_config_with_fallback(config, Path.cwd(), verbose)

    if verbose:
        click.echo(f"    Debounce: {config_obj.debounce_delay}s")
        click.echo(f"    Ignore patterns: {', '.join(config_obj.ignore_patterns)}")

    host = LocalFileHost()
    rejected = 0
    for file_path in files:
        resource_id = host.open(file_path)
        eligibility = check_eligible(host, resource_id, config_obj.ignore_patterns)
        if eligibility.eligible:
            click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {file_path}")
        else:
            rejected += 1
            reason = REASONS.get(eligibility.reason, eligibility.reason)
            click.echo(f"{Fore.YELLOW}○{Style.RESET_ALL} {file_path} ({reason})")

    if rejected:
        raise click.exceptions.Exit(1)

"""
Init-config command for filewatch CLI
"""

import sys
from pathlib import Path

import click
from colorama import Fore, Style

DEFAULT_TOML_CONTENT = '''# filewatch configuration file

[filewatch]
debounce_delay = 0.1
notify = true
notify_level = "info"
ignore_patterns = [
    "\\\\.git/",
    "\\\\.swp$",
    "~$",
    "4913$",
]
auto_enable = true
rearm_delay = 0.05
log_level = "info"
'''


@click.command()
@click.argument('config_path', type=click.Path(), default='filewatch.config.toml')
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing file')
def init_config_command(config_path: str, force: bool):
    """Create a TOML configuration file. Defaults to 'filewatch.config.toml' if no path specified."""

    try:
        # Ensure the config file has a .toml extension
        if not config_path.endswith('.toml'):
            click.echo(f"{Fore.YELLOW}Warning: Config file should have .toml extension. Adding .toml{Style.RESET_ALL}")
            config_path = config_path + '.toml'

        if Path(config_path).exists() and not force:
            click.echo(f"{Fore.RED}Error: {config_path} already exists (use --force to overwrite){Style.RESET_ALL}")
            sys.exit(1)

        # Get the path to the default config file in the package
        default_config_path = Path(__file__).parent.parent.parent / 'default.config.toml'

        if default_config_path.exists():
            toml_content = default_config_path.read_text(encoding='utf-8')
        else:
            toml_content = DEFAULT_TOML_CONTENT

        with open(config_path, 'w', encoding='utf-8') as dest:
            dest.write(toml_content)

        click.echo(f"{Fore.GREEN}TOML configuration file created: {config_path}{Style.RESET_ALL}")
        click.echo(f"{Fore.CYAN}Edit this file to customize your watching preferences.{Style.RESET_ALL}")

    except OSError as e:
        click.echo(f"{Fore.RED}Error creating config file: {e}{Style.RESET_ALL}")
        sys.exit(1)

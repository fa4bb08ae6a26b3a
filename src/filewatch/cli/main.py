#!/usr/bin/env python3
"""
filewatch CLI - Main entry point
"""

import click
from colorama import init

from filewatch.cli.commands.watch import watch_command
from filewatch.cli.commands.check import check_command
from filewatch.cli.commands.init_config import init_config_command

# Initialize colorama for cross-platform colored output
init()


@click.group()
@click.version_option(package_name='filewatch')
def main():
    """filewatch - Reload open files whenever they change on disk.

    Common workflows:

      # Watch files and report every reload
      filewatch watch notes.md todo.txt

      # Wait longer for editors that save in several steps
      filewatch watch --debounce 0.5 build/output.log

      # See which files would be watched
      filewatch check *.txt

      # Create a configuration file in the current directory
      filewatch init-config

    Use 'filewatch COMMAND --help' for detailed help on any command.
    """
    pass


main.add_command(watch_command, name='watch')
main.add_command(check_command, name='check')
main.add_command(init_config_command, name='init-config')


if __name__ == '__main__':
    main()

"""
Main CLI entry point for the Company Website Resolver.
"""

import click

from site_resolver import __version__
from site_resolver.cli.commands import resolve_command, blacklist_commands, config_commands


@click.group()
@click.version_option(version=__version__, message='Company Website Resolver v%(version)s')
def main():
    """Company Website Resolver - Find official websites for company names."""
    pass


main.add_command(resolve_command)
main.add_command(blacklist_commands)
main.add_command(config_commands)


if __name__ == '__main__':
    main()

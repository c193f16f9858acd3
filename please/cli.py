#!/usr/bin/env python3

import click

from please import __version__
from please.config import configure_logging, load_config
from please.commands.search import search_handler
from please.commands.show import show_handler
from please.commands.versions import versions_handler
from please.commands.catalogs import catalogs_handler


@click.group()
@click.version_option(version=__version__)
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug):
    """please - Install containerized command-line tools.

    Searches the installed package catalogs and discovers the versions
    a package's container image offers.
    """
    configure_logging(load_config(), debug=debug)


cli.add_command(search_handler)
cli.add_command(show_handler)
cli.add_command(versions_handler)
cli.add_command(catalogs_handler)


def main():
    cli()

if __name__ == "__main__":
    main()

"""
Handles the 'catalogs' command: installed catalog archives.
"""

import click

from ..config import load_config
from ..cli_utils import standard_command, add_common_options
from ..output import emit
from ..services import CatalogSearchService
from ..storage import Storage


@click.command(name='catalogs')
@add_common_options('pretty')
@standard_command
def catalogs_handler(pretty):
    """List installed catalogs with their namespace and package count."""
    config = load_config()
    summaries = CatalogSearchService(Storage(config=config)).archives()
    emit(summaries, pretty=pretty, columns=['namespace', 'count', 'path', 'error'] if pretty else None)

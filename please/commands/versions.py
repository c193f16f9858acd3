"""
Handles the 'versions' command: installable versions of one package.

Packages with a static version list answer from the catalog; the rest
ask their image registry.
"""

import click

from ..config import load_config
from ..cli_utils import standard_command, add_common_options
from ..infra import RegistryVersionClient
from ..output import emit, emit_details
from ..services import CatalogSearchService, VersionService
from ..storage import Storage


@click.command(name='versions')
@click.argument('package')
@add_common_options('timeout', 'pretty')
@standard_command
def versions_handler(package, timeout, pretty):
    """List the versions of PACKAGE, newest first.

    Examples:

    \b
        please versions node
        please versions node --timeout 30 --pretty
    """
    config = load_config()
    if timeout is None:
        timeout = config.get('registry', {}).get('timeout_seconds', 10)

    _, manifest, _ = CatalogSearchService(Storage(config=config)).lookup(package)

    with RegistryVersionClient(timeout=timeout) as client:
        available = VersionService(client).available_versions(manifest)

    if pretty:
        emit([{'version': v} for v in available.versions], pretty=True,
             title=f"{available.package} ({available.source})")
    else:
        emit_details(available.to_dict())

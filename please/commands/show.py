"""
Handles the 'show' command: details of one package.
"""

import click

from ..config import load_config
from ..cli_utils import standard_command, add_common_options
from ..output import emit_details
from ..services import CatalogSearchService
from ..storage import Storage


@click.command(name='show')
@click.argument('package')
@click.option('--hooks', is_flag=True, help='Include the pre/post install hook scripts')
@add_common_options('pretty')
@standard_command
def show_handler(package, hooks, pretty):
    """Show the manifest of PACKAGE.

    Examples:

    \b
        please show jq
        please show jq --pretty --hooks
    """
    config = load_config()
    service = CatalogSearchService(Storage(config=config))
    namespace, manifest, archive = service.lookup(package)

    if pretty:
        data = {
            'Name': manifest.name,
            'Namespace': namespace,
            'Description': manifest.description,
            'Homepage': manifest.homepage,
            'License': manifest.license,
            'Categories': manifest.categories,
            'Image': manifest.image,
            'Platforms': manifest.platforms,
            'Versions': manifest.versions if manifest.has_static_versions else 'auto-discover',
            'Default version': manifest.default_version,
        }
    else:
        data = {'namespace': namespace, **manifest.to_dict()}

    if hooks:
        script_hooks = archive.load_script_hooks(manifest.name)
        if pretty:
            data['Pre-install hook'] = script_hooks.pre_hook or '(none)'
            data['Post-install hook'] = script_hooks.post_hook or '(none)'
        else:
            data['hooks'] = script_hooks.to_dict()

    emit_details(data, pretty=pretty, title=f"Package information: {manifest.name}" if pretty else None)

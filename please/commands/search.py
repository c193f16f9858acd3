"""
Handles the 'search' command: find packages across all catalogs.

Default output is one JSON line per hit; --pretty prints a table per
namespace. Catalogs that fail to read are reported on stderr while the
others still answer.
"""

import click

from ..config import load_config
from ..cli_utils import standard_command, add_common_options
from ..exit_codes import DATA_ERROR, CommandError, PartialSuccessError
from ..output import emit, emit_error
from ..services import CatalogSearchService
from ..storage import Storage


@click.command(name='search')
@click.argument('query')
@click.option('--exact', is_flag=True, help='Exact name match instead of fuzzy search')
@add_common_options('limit', 'pretty')
@standard_command
def search_handler(query, exact, limit, pretty):
    """Search every installed catalog for a package.

    \b
    Fuzzy search tolerates typos: up to 30% of the query length in
    edits, and always at least one.

    Examples:

    \b
        please search pyhton            # finds python
        please search jq --exact
        please search node --pretty
    """
    config = load_config()
    if limit is None:
        limit = config.get('search', {}).get('max_fuzzy_results', 10)

    service = CatalogSearchService(
        Storage(config=config),
        # Bounded by config; 0 or null means one worker per catalog
        max_workers=config.get('general', {}).get('max_concurrent_operations') or None,
    )
    result = service.search(query, fuzzy=not exact, max_results=limit)

    for error in result.errors:
        emit_error(error, type='archive_error')

    if pretty:
        columns = ['name', 'description'] if exact else ['name', 'distance', 'description']
        namespaces = [ns for ns in result.namespaces() if result.results[ns]]
        for namespace in namespaces:
            emit(result.results[namespace], pretty=True, columns=columns,
                 title=f"Namespace: {namespace}")
        if not namespaces:
            click.echo("No results found")
    else:
        emit(result.hits())

    if result.all_failed:
        raise CommandError(f"all {result.archives_searched} catalog(s) failed to search", DATA_ERROR)
    if result.errors:
        raise PartialSuccessError(
            f"{len(result.errors)} of {result.archives_searched} catalog(s) failed to search",
            succeeded=result.archives_searched - len(result.errors),
            failed=len(result.errors),
        )

"""
Service layer for please.

Services orchestrate domain objects and infrastructure:
- CatalogSearchService: Concurrent search across all catalog archives
- VersionService: Static version list vs. registry discovery
"""

from .catalog_service import (
    CatalogSearchService,
    CatalogSearchResult,
    SearchHit,
    ArchiveSummary,
    sort_namespaces,
)
from .version_service import VersionService, AvailableVersions

__all__ = [
    'CatalogSearchService',
    'CatalogSearchResult',
    'SearchHit',
    'ArchiveSummary',
    'sort_namespaces',
    'VersionService',
    'AvailableVersions',
]

"""
Domain layer for please.

Contains pure domain objects with no I/O or side effects:
- PackageManifest: One installable package and its container settings
- VersionDiscovery / VersionFilter: Registry-backed version rules
- ScriptHooks: Pre/post install hook bodies
- FuzzyMatch: A fuzzy search hit with its edit distance
"""

from .manifest import (
    PackageManifest,
    ContainerArgs,
    VersionFilter,
    VersionDiscovery,
    ScriptHooks,
    FuzzyMatch,
)

__all__ = [
    'PackageManifest',
    'ContainerArgs',
    'VersionFilter',
    'VersionDiscovery',
    'ScriptHooks',
    'FuzzyMatch',
]

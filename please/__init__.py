"""
please - A package manager for containerized command-line tools.

The package catalog is a set of compressed manifest archives searched by
exact or fuzzy name; packages without a static version list discover their
versions from their container registry.

Quick Start:
    from please import ManifestArchive, RegistryVersionClient

    archive = ManifestArchive("~/.please/manifests/manifest-core.tar.gz")
    manifest = archive.exact_match("node")

    for match in archive.fuzzy_search("pyhton"):
        print(match.name, match.distance)

    with RegistryVersionClient() as client:
        print(client.list_versions(manifest))
"""

__version__ = "0.4.0"

# Domain objects
from .domain import (
    PackageManifest,
    ContainerArgs,
    VersionFilter,
    VersionDiscovery,
    ScriptHooks,
    FuzzyMatch,
)

# Catalog
from .catalog import ManifestDecoder, ManifestArchive

# Version discovery
from .infra import RegistryVersionClient, parse_image_reference
from .versioning import compare_versions, filter_versions

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "PackageManifest",
    "ContainerArgs",
    "VersionFilter",
    "VersionDiscovery",
    "ScriptHooks",
    "FuzzyMatch",
    # Catalog
    "ManifestDecoder",
    "ManifestArchive",
    # Version discovery
    "RegistryVersionClient",
    "parse_image_reference",
    "compare_versions",
    "filter_versions",
    # Configuration
    "load_config",
    "save_config",
]

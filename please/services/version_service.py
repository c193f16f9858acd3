"""
Version service for please.

Decides where a package's versions come from. A static ``versions`` list
in the manifest always wins; only packages without one are sent to the
registry.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..domain import PackageManifest
from ..exit_codes import ConfigError
from ..infra import RegistryVersionClient

logger = logging.getLogger(__name__)

SOURCE_STATIC = 'static'
SOURCE_REGISTRY = 'registry'


@dataclass
class AvailableVersions:
    """Versions for one package and where they came from."""
    package: str
    versions: List[str]
    source: str

    @property
    def latest(self) -> Optional[str]:
        return self.versions[0] if self.versions else None

    def to_dict(self) -> dict:
        return {
            'package': self.package,
            'source': self.source,
            'versions': self.versions,
        }


class VersionService:
    """
    Example:
        with RegistryVersionClient() as client:
            service = VersionService(client)
            available = service.available_versions(manifest)
            print(available.source, available.versions)
    """

    def __init__(self, client: Optional[RegistryVersionClient] = None):
        self.client = client or RegistryVersionClient()

    def available_versions(self, manifest: PackageManifest, timeout: Optional[float] = None) -> AvailableVersions:
        """
        Raises:
            ConfigError: Neither a version list nor version discovery is declared
            AuthError, RegistryError, PatternError: From the registry lookup
        """
        if manifest.has_static_versions:
            return AvailableVersions(manifest.name, list(manifest.versions), SOURCE_STATIC)

        if manifest.version_discovery is None:
            raise ConfigError(f"package '{manifest.name}' declares no versions and no version discovery")

        logger.debug(f"{manifest.name}: no static versions, asking the registry")
        versions = self.client.list_versions(manifest, timeout=timeout)
        return AvailableVersions(manifest.name, versions, SOURCE_REGISTRY)

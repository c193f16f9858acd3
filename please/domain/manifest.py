"""
Package manifest domain objects for please.

A manifest describes one installable containerized tool. Manifests are
decoded one at a time from a catalog archive, so these objects stay small
and carry their own JSON (de)serialization.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


def _get_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _get_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field '{key}' must be a list of strings")
    return list(value)


def _get_object(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field '{key}' must be an object, got {type(value).__name__}")
    return value


@dataclass
class ContainerArgs:
    """Arguments passed to the container runtime."""
    dns: List[str] = field(default_factory=list)
    workdir: str = ''
    volumes: List[str] = field(default_factory=list)
    additional_flags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContainerArgs':
        return cls(
            dns=_get_str_list(data, 'dns'),
            workdir=_get_str(data, 'workdir'),
            volumes=_get_str_list(data, 'volumes'),
            additional_flags=_get_str_list(data, 'additional_flags'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dns': self.dns,
            'workdir': self.workdir,
            'volumes': self.volumes,
            'additional_flags': self.additional_flags,
        }


@dataclass
class VersionFilter:
    """
    Rules applied to a registry tag list.

    Attributes:
        pattern: Inclusion regex (searched, not anchored); empty means no pattern
        exclude: Literal tags to drop, e.g. ["latest", "edge"]
    """
    pattern: str = ''
    exclude: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VersionFilter':
        return cls(
            pattern=_get_str(data, 'pattern'),
            exclude=_get_str_list(data, 'exclude'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'pattern': self.pattern, 'exclude': self.exclude}


@dataclass
class VersionDiscovery:
    """Marks a package whose versions come from its image registry."""
    filter: VersionFilter = field(default_factory=VersionFilter)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VersionDiscovery':
        return cls(filter=VersionFilter.from_dict(_get_object(data, 'filter')))

    def to_dict(self) -> Dict[str, Any]:
        return {'filter': self.filter.to_dict()}


@dataclass
class PackageManifest:
    """
    One installable package.

    When both ``versions`` and ``version_discovery`` are present the static
    list wins; see ``uses_version_discovery``.
    """
    name: str
    description: str = ''
    homepage: str = ''
    license: str = ''
    categories: List[str] = field(default_factory=list)
    image: str = ''
    versions: Optional[List[str]] = None
    version_discovery: Optional[VersionDiscovery] = None
    default_version: str = ''
    script: str = ''
    platforms: List[str] = field(default_factory=list)
    application_args: List[str] = field(default_factory=list)
    container_args: ContainerArgs = field(default_factory=ContainerArgs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PackageManifest':
        """
        Build a manifest from its decoded JSON object.

        Unknown keys are ignored. Raises ValueError when a known key holds
        the wrong JSON type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"manifest must be an object, got {type(data).__name__}")

        versions = None
        if data.get('versions') is not None:
            versions = _get_str_list(data, 'versions')

        discovery = None
        if data.get('version_discovery') is not None:
            discovery = VersionDiscovery.from_dict(_get_object(data, 'version_discovery'))

        return cls(
            name=_get_str(data, 'name'),
            description=_get_str(data, 'description'),
            homepage=_get_str(data, 'homepage'),
            license=_get_str(data, 'license'),
            categories=_get_str_list(data, 'categories'),
            image=_get_str(data, 'image'),
            versions=versions,
            version_discovery=discovery,
            default_version=_get_str(data, 'default_version'),
            script=_get_str(data, 'script'),
            platforms=_get_str_list(data, 'platforms'),
            application_args=_get_str_list(data, 'application_args'),
            container_args=ContainerArgs.from_dict(_get_object(data, 'container_args')),
        )

    @property
    def has_static_versions(self) -> bool:
        return bool(self.versions)

    @property
    def uses_version_discovery(self) -> bool:
        """True when versions must be fetched from the registry."""
        return not self.has_static_versions and self.version_discovery is not None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'name': self.name,
            'description': self.description,
            'homepage': self.homepage,
            'license': self.license,
            'categories': self.categories,
            'image': self.image,
        }
        if self.versions is not None:
            result['versions'] = self.versions
        if self.version_discovery is not None:
            result['version_discovery'] = self.version_discovery.to_dict()
        result.update({
            'default_version': self.default_version,
            'script': self.script,
            'platforms': self.platforms,
            'application_args': self.application_args,
            'container_args': self.container_args.to_dict(),
        })
        return result


@dataclass(frozen=True)
class ScriptHooks:
    """Install hook bodies for one package. Empty means no-op."""
    pre_hook: str = ''
    post_hook: str = ''

    @property
    def has_pre_hook(self) -> bool:
        return bool(self.pre_hook)

    @property
    def has_post_hook(self) -> bool:
        return bool(self.post_hook)

    def to_dict(self) -> Dict[str, Any]:
        return {'pre_hook': self.pre_hook, 'post_hook': self.post_hook}


@dataclass(frozen=True)
class FuzzyMatch:
    """A fuzzy search hit and its edit distance from the query."""
    manifest: PackageManifest
    distance: int

    @property
    def name(self) -> str:
        return self.manifest.name

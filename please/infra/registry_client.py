"""
Container registry client for version discovery.

Talks the Docker Registry HTTP API v2 to list an image's tags:
- Image references are split into registry host and repository path
- Docker Hub repositories get an anonymous pull-scope bearer token
- Tags are filtered and ordered with the package's VersionFilter

Other registries are queried without authentication. No request is
retried; a failure surfaces immediately so the caller can fall back to a
static version list.
"""

import logging
from typing import Optional, List, Tuple, Dict, Any

import requests

from ..domain import PackageManifest
from ..exit_codes import AuthError, ConfigError, RegistryError
from ..versioning import filter_versions

logger = logging.getLogger(__name__)

DOCKER_HUB_REGISTRY = "registry-1.docker.io"
DOCKER_HUB_AUTH_URL = "https://auth.docker.io/token"
DOCKER_HUB_AUTH_SERVICE = "registry.docker.io"

DEFAULT_TIMEOUT = 10


def parse_image_reference(image: str) -> Tuple[str, str]:
    """
    Split an image string into (registry host, repository path).

    Examples:
        nginx              -> ("registry-1.docker.io", "library/nginx")
        ghcr.io/foo/bar    -> ("ghcr.io", "foo/bar")
        docker.io/foo/bar  -> ("registry-1.docker.io", "foo/bar")
        user/repo          -> ("registry-1.docker.io", "user/repo")
    """
    if '/' not in image:
        # Docker Hub official library image
        return DOCKER_HUB_REGISTRY, f"library/{image}"

    host, repository = image.split('/', 1)

    # A first segment with a dot or port is an explicit registry
    if '.' in host or ':' in host:
        if host == 'docker.io':
            host = DOCKER_HUB_REGISTRY
        return host, repository

    return DOCKER_HUB_REGISTRY, image


class RegistryVersionClient:
    """
    Lists the versions available for a package from its image registry.

    The HTTP session is passed in (or created per client) rather than
    shared process-wide, so each client can be tested and closed on its
    own. A client holds no other state and may be used from several
    threads at once.

    Example:
        client = RegistryVersionClient(timeout=5)
        versions = client.list_versions(manifest)   # ["1.3.0", "1.2.0"]
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize RegistryVersionClient.

        Args:
            session: HTTP session to use (creates a new one if None)
            timeout: Default per-request timeout in seconds
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
        })

    def close(self) -> None:
        """Close the HTTP session, aborting pooled connections."""
        self.session.close()

    def __enter__(self) -> 'RegistryVersionClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list_versions(self, manifest: PackageManifest, timeout: Optional[float] = None) -> List[str]:
        """
        Fetch, filter and sort the tags for a manifest's image, newest first.

        Args:
            manifest: Package declaring ``version_discovery``
            timeout: Per-request timeout in seconds (client default if None)

        Raises:
            ConfigError: The manifest has no version_discovery block
            AuthError: Docker Hub token request failed
            RegistryError: Tag listing failed
            PatternError: The filter pattern does not compile
        """
        if manifest is None or manifest.version_discovery is None:
            raise ConfigError("version discovery configuration is required")

        timeout = self.timeout if timeout is None else timeout
        registry, repository = parse_image_reference(manifest.image)
        logger.debug(f"Discovering versions of {manifest.name} from {registry}/{repository}")

        token = self._get_auth_token(registry, repository, timeout)
        tags = self._fetch_tags(registry, repository, token, timeout)
        return filter_versions(tags, manifest.version_discovery.filter)

    def _get_auth_token(self, registry: str, repository: str, timeout: float) -> str:
        """Anonymous pull token for Docker Hub; '' for any other registry."""
        if 'docker.io' not in registry:
            return ''

        params = {
            'service': DOCKER_HUB_AUTH_SERVICE,
            'scope': f"repository:{repository}:pull",
        }
        try:
            response = self.session.get(DOCKER_HUB_AUTH_URL, params=params, timeout=timeout)
        except requests.RequestException as e:
            raise AuthError(f"auth request for {repository} failed: {e}") from e

        if response.status_code != 200:
            raise AuthError(f"auth request for {repository} failed: {response.status_code}")

        data = self._json_object(response)
        token = data.get('token') if data is not None else None
        if not isinstance(token, str):
            raise AuthError(f"auth response for {repository} has no token")
        return token

    def _fetch_tags(self, registry: str, repository: str, token: str, timeout: float) -> List[str]:
        """Raw, unordered tag list from ``/v2/<repository>/tags/list``."""
        url = f"https://{registry}/v2/{repository}/tags/list"
        headers = {}
        if token:
            headers['Authorization'] = f"Bearer {token}"

        try:
            response = self.session.get(url, headers=headers, timeout=timeout)
        except requests.RequestException as e:
            raise RegistryError(f"failed to fetch tags for {registry}/{repository}: {e}") from e

        if response.status_code != 200:
            raise RegistryError(f"failed to fetch tags for {registry}/{repository}: {response.status_code}")

        data = self._json_object(response)
        if data is None:
            raise RegistryError(f"malformed tag list from {registry}/{repository}")

        # A repository without tags reports "tags": null
        tags = data.get('tags')
        if tags is None:
            tags = []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise RegistryError(f"malformed tag list from {registry}/{repository}")

        logger.debug(f"{registry}/{repository}: {len(tags)} tag(s)")
        return tags

    @staticmethod
    def _json_object(response: requests.Response) -> Optional[Dict[str, Any]]:
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

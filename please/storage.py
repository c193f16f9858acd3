"""
On-disk layout of the per-user please directory.

    ~/.please/
        manifests/
            manifest-core.tar.gz    the core catalog
            <other>.tar.gz          any additional catalogs
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import load_config
from .exit_codes import ConfigError

logger = logging.getLogger(__name__)

MANIFESTS_DIR = 'manifests'
CORE_MANIFEST_FILE = 'manifest-core.tar.gz'
ARCHIVE_SUFFIX = '.tar.gz'


class Storage:
    """Resolves where please keeps its catalogs."""

    def __init__(self, root: Optional[Union[str, Path]] = None, config: Optional[dict] = None):
        if root is None:
            config = config or load_config()
            root = config.get('general', {}).get('please_dir', '~/.please')
        self.root = Path(root).expanduser()
        self.manifests_path = self.root / MANIFESTS_DIR
        self.core_manifest_file = self.manifests_path / CORE_MANIFEST_FILE

    def is_initialized(self) -> bool:
        return self.manifests_path.is_dir()

    def get_manifest_paths(self) -> List[Path]:
        """
        Every catalog archive, core first, then by file name.

        Raises:
            ConfigError: The manifests directory is missing or holds no archives
        """
        if not self.is_initialized():
            raise ConfigError(f"please has not been initialized: {self.manifests_path} does not exist")

        paths = [
            p for p in self.manifests_path.iterdir()
            if p.is_file() and p.name.endswith(ARCHIVE_SUFFIX)
        ]
        if not paths:
            raise ConfigError(f"no manifest archives found in {self.manifests_path}")

        paths.sort(key=lambda p: (p.name != CORE_MANIFEST_FILE, p.name))
        logger.debug(f"Found {len(paths)} manifest archive(s) in {self.manifests_path}")
        return paths

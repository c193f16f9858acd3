"""
Catalog service for please.

Fans a package query out over every catalog archive and merges the
answers by namespace. One worker runs per archive, each with its own
ManifestArchive, so workers share nothing but the result map. A failing
archive is reported alongside the others' results instead of aborting the
whole search.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Iterator

from ..catalog import ManifestArchive, MAX_FUZZY_SEARCH_RESULTS
from ..domain import PackageManifest
from ..exit_codes import PackageNotFoundError
from ..storage import Storage

logger = logging.getLogger(__name__)

CORE_NAMESPACE = 'core'


def sort_namespaces(namespaces) -> List[str]:
    """The core namespace first, then alphabetical."""
    return sorted(namespaces, key=lambda ns: (ns != CORE_NAMESPACE, ns))


@dataclass
class SearchHit:
    """One manifest returned by a catalog search."""
    namespace: str
    manifest: PackageManifest
    distance: Optional[int] = None

    def to_dict(self) -> dict:
        result = {
            'namespace': self.namespace,
            'name': self.manifest.name,
            'description': self.manifest.description,
        }
        if self.distance is not None:
            result['distance'] = self.distance
        return result


@dataclass
class CatalogSearchResult:
    """Merged search results plus the per-archive errors."""
    results: Dict[str, List[SearchHit]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    archives_searched: int = 0

    def namespaces(self) -> List[str]:
        return sort_namespaces(self.results)

    def hits(self) -> Iterator[SearchHit]:
        """All hits, namespace by namespace."""
        for namespace in self.namespaces():
            yield from self.results[namespace]

    @property
    def total(self) -> int:
        return sum(len(hits) for hits in self.results.values())

    @property
    def all_failed(self) -> bool:
        return self.archives_searched > 0 and len(self.errors) >= self.archives_searched


@dataclass
class ArchiveSummary:
    """Namespace and size of one catalog archive."""
    path: str
    namespace: str = ''
    count: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {'path': self.path, 'namespace': self.namespace, 'count': self.count}
        if self.error:
            result['error'] = self.error
        return result


class CatalogSearchService:
    """
    Service for searching every installed catalog at once.

    Example:
        service = CatalogSearchService()

        result = service.search("pyhton")
        for namespace in result.namespaces():
            for hit in result.results[namespace]:
                print(namespace, hit.manifest.name, hit.distance)

        namespace, manifest, archive = service.lookup("jq")
    """

    def __init__(self, storage: Optional[Storage] = None, max_workers: Optional[int] = None):
        """
        Initialize CatalogSearchService.

        Args:
            storage: Storage layout (creates default if None)
            max_workers: Upper bound on concurrently scanned archives; None
                runs one worker per archive
        """
        self.storage = storage or Storage()
        self.max_workers = None if max_workers is None else max(1, max_workers)

    def _paths(self) -> List[Path]:
        return self.storage.get_manifest_paths()

    def search(
        self,
        query: str,
        fuzzy: bool = True,
        max_results: int = MAX_FUZZY_SEARCH_RESULTS,
    ) -> CatalogSearchResult:
        """
        Search every archive concurrently.

        Args:
            query: Package name (exact) or approximate name (fuzzy)
            fuzzy: Fuzzy search if True, exact match otherwise
            max_results: Per-archive candidate cap for fuzzy search

        Returns:
            CatalogSearchResult keyed by namespace. An exact-match miss is
            not an error; any other per-archive failure is listed in
            ``errors`` as "manifest <path>: <reason>".
        """
        paths = self._paths()
        result = CatalogSearchResult(archives_searched=len(paths))
        lock = threading.Lock()

        def search_one(path: Path) -> None:
            try:
                archive = ManifestArchive(path)
                if fuzzy:
                    hits = [
                        SearchHit(archive.namespace, match.manifest, match.distance)
                        for match in archive.fuzzy_search(query, max_results)
                    ]
                else:
                    try:
                        hits = [SearchHit(archive.namespace, archive.exact_match(query))]
                    except PackageNotFoundError:
                        hits = []
            except Exception as e:
                # One unreadable archive must not abort the others
                logger.warning(f"Search failed for {path}: {e}")
                with lock:
                    result.errors.append(f"manifest {path}: {e}")
                return

            with lock:
                result.results.setdefault(archive.namespace, []).extend(hits)

        workers = len(paths) if self.max_workers is None else min(self.max_workers, len(paths))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # Workers record their own outcome; list() just waits for them
            list(executor.map(search_one, paths))

        logger.debug(
            f"Searched {len(paths)} archive(s) for {query!r}: "
            f"{result.total} hit(s), {len(result.errors)} error(s)"
        )
        return result

    def lookup(self, name: str) -> Tuple[str, PackageManifest, ManifestArchive]:
        """
        Find a package by exact name, core catalog first.

        Returns:
            (namespace, manifest, archive) of the first archive holding it

        Raises:
            PackageNotFoundError: No archive has the package
        """
        for path in self._paths():
            archive = ManifestArchive(path)
            try:
                return archive.namespace, archive.exact_match(name), archive
            except PackageNotFoundError:
                continue
        raise PackageNotFoundError(name)

    def archives(self) -> List[ArchiveSummary]:
        """Namespace and manifest count of every archive."""
        summaries = []
        for path in self._paths():
            try:
                archive = ManifestArchive(path)
            except Exception as e:
                summaries.append(ArchiveSummary(path=str(path), error=str(e)))
                continue
            summaries.append(ArchiveSummary(path=str(path), namespace=archive.namespace, count=archive.count))
        return summaries

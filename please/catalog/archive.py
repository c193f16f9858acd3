"""
Whole-catalog operations over one manifest archive.

Every operation is a single sequential streaming pass over the archive
that stops as soon as it has its answer. Nothing is cached between calls
except the namespace and manifest count read at construction.
"""

import logging
from contextlib import closing
from pathlib import Path
from typing import Iterator, List, Union

from rapidfuzz.distance import Levenshtein

from ..domain import PackageManifest, ScriptHooks, FuzzyMatch
from ..exit_codes import PackageNotFoundError
from .decoder import ManifestDecoder, open_archive, translate_archive_errors, member_name

logger = logging.getLogger(__name__)

MAX_FUZZY_SEARCH_RESULTS = 10

HOOKS_PREFIX = 'hooks/'
PREHOOK_SUFFIX = '_prehook.sh'
POSTHOOK_SUFFIX = '_posthook.sh'


def fuzzy_threshold(query: str) -> int:
    """
    Largest edit distance a fuzzy candidate may have for ``query``.

    30% of the query length rounded down, but never below 1, so even a
    one or two character query tolerates a single typo.
    """
    return max(1, len(query) * 3 // 10)


class ManifestArchive:
    """
    A catalog archive on disk.

    The archive is scanned once on construction to learn its namespace and
    manifest count; both are fixed for the life of the object. Archives are
    replaced wholesale, never edited in place, so a fresh instance per CLI
    invocation always sees a consistent file.

    Example:
        archive = ManifestArchive("~/.please/manifests/manifest-core.tar.gz")
        archive.namespace        # "core"
        archive.count            # 412
        archive.exact_match("jq")
        archive.fuzzy_search("pyhton")
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()
        namespace = ''
        count = 0
        with ManifestDecoder(self._path) as decoder:
            namespace = decoder.namespace
            for _ in decoder:
                count += 1
        self._namespace = namespace
        self._count = count
        logger.debug(f"Loaded archive {self._path}: namespace={namespace!r} count={count}")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def count(self) -> int:
        """Number of manifests in the archive."""
        return self._count

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"ManifestArchive({str(self._path)!r}, namespace={self._namespace!r}, count={self._count})"

    def iter_manifests(self) -> Iterator[PackageManifest]:
        """
        Lazily yield every manifest from the start of the archive.

        The underlying decoder is closed when the generator finishes or is
        closed; wrap it in ``contextlib.closing`` when stopping early.
        """
        with ManifestDecoder(self._path) as decoder:
            yield from decoder

    def exact_match(self, name: str) -> PackageManifest:
        """
        Return the first manifest whose name equals ``name`` (case-sensitive).

        Raises:
            PackageNotFoundError: No manifest has that name
        """
        with closing(self.iter_manifests()) as manifests:
            for manifest in manifests:
                if manifest.name == name:
                    return manifest
        raise PackageNotFoundError(name)

    def fuzzy_search(self, query: str, max_results: int = MAX_FUZZY_SEARCH_RESULTS) -> List[FuzzyMatch]:
        """
        Find manifests whose names are within ``fuzzy_threshold(query)`` edits.

        The scan stops as soon as ``max_results`` candidates have been seen,
        so a closer match later in the archive can be missed. Results are
        ordered by distance, ties in archive order. No candidates is an
        empty list, not an error.
        """
        if max_results <= 0:
            return []

        max_distance = fuzzy_threshold(query)
        candidates: List[FuzzyMatch] = []

        with closing(self.iter_manifests()) as manifests:
            for manifest in manifests:
                distance = Levenshtein.distance(query, manifest.name, score_cutoff=max_distance)
                if distance <= max_distance:
                    candidates.append(FuzzyMatch(manifest=manifest, distance=distance))
                    if len(candidates) >= max_results:
                        break

        # Best matches first; sort is stable so ties keep archive order
        candidates.sort(key=lambda c: c.distance)
        logger.debug(f"Fuzzy search {query!r} in {self._path}: {len(candidates)} candidate(s)")
        return candidates

    def load_script_hooks(self, package_name: str) -> ScriptHooks:
        """
        Read ``hooks/<name>_prehook.sh`` and ``hooks/<name>_posthook.sh``.

        Either, both or neither may be present; a missing hook comes back
        as an empty body. Scanning stops once both have been read.
        """
        wanted = {
            f"{package_name}{PREHOOK_SUFFIX}": 'pre_hook',
            f"{package_name}{POSTHOOK_SUFFIX}": 'post_hook',
        }
        found = {}

        with open_archive(self._path) as tar, translate_archive_errors(self._path):
            for member in tar:
                if not member.isreg():
                    continue
                name = member_name(member)
                if not name.startswith(HOOKS_PREFIX):
                    continue
                field = wanted.get(name[len(HOOKS_PREFIX):])
                if field is None:
                    continue

                found[field] = tar.extractfile(member).read().decode('utf-8')
                if len(found) == len(wanted):
                    break

        logger.debug(f"Hooks for {package_name} in {self._path}: {sorted(found)}")
        return ScriptHooks(**found)

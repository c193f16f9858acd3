"""
Version ordering and filtering for registry tags.

Container tags are not PEP 440 versions, so ``packaging.version`` is the
wrong tool here. Tags are compared as dotted integer tuples instead:

    compare_versions("1.10.0", "1.9.9")  ->  1
    compare_versions("v2.0", "2.0.0")    ->  0   (missing parts are 0)
    compare_versions("1.2.x", "1.2.0")   ->  0   (non-numeric parts are 0)

This is best-effort ordering, not SemVer: pre-release and build metadata
are not understood ("1.0.0-rc1" compares as "1.0.0" with a 0 patch part).
"""

import functools
import logging
import re
from typing import Iterable, List, Optional

from .domain import VersionFilter
from .exit_codes import PatternError

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r'[+-]?[0-9]+')


def _component(part: str) -> int:
    if _INTEGER.fullmatch(part):
        return int(part)
    return 0


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two version strings component by component.

    Returns:
        1 if v1 > v2, -1 if v1 < v2, 0 if equal
    """
    # Strip a single 'v' prefix if present
    if v1.startswith('v'):
        v1 = v1[1:]
    if v2.startswith('v'):
        v2 = v2[1:]

    parts1 = v1.split('.')
    parts2 = v2.split('.')

    for i in range(max(len(parts1), len(parts2))):
        n1 = _component(parts1[i]) if i < len(parts1) else 0
        n2 = _component(parts2[i]) if i < len(parts2) else 0
        if n1 > n2:
            return 1
        if n1 < n2:
            return -1

    return 0


version_key = functools.cmp_to_key(compare_versions)


def sort_versions(versions: Iterable[str], newest_first: bool = True) -> List[str]:
    """Sort tags with ``compare_versions``; equal tags keep their input order."""
    return sorted(versions, key=version_key, reverse=newest_first)


def filter_versions(tags: Iterable[str], version_filter: Optional[VersionFilter]) -> List[str]:
    """
    Apply a VersionFilter to a raw tag list and order the result newest first.

    Tags in ``exclude`` are dropped by exact match; when ``pattern`` is set,
    tags it does not match (``re.search``) are dropped too.

    Raises:
        PatternError: ``pattern`` is not a valid regular expression
    """
    version_filter = version_filter or VersionFilter()

    regex = None
    if version_filter.pattern:
        try:
            regex = re.compile(version_filter.pattern)
        except re.error as e:
            raise PatternError(version_filter.pattern, str(e)) from e

    excluded = set(version_filter.exclude)
    tags = list(tags)

    filtered = [
        tag for tag in tags
        if tag not in excluded and (regex is None or regex.search(tag))
    ]

    logger.debug(f"Filtered {len(tags)} tag(s) down to {len(filtered)}")
    return sort_versions(filtered)

"""
Package catalog for please.

- ManifestDecoder: streams manifests out of a ``.tar.gz`` catalog
- ManifestArchive: exact lookup, fuzzy search, count and install hooks
"""

from .decoder import ManifestDecoder
from .archive import ManifestArchive, MAX_FUZZY_SEARCH_RESULTS, fuzzy_threshold

__all__ = [
    'ManifestDecoder',
    'ManifestArchive',
    'MAX_FUZZY_SEARCH_RESULTS',
    'fuzzy_threshold',
]

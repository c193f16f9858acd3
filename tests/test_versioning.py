"""
Tests for tag comparison and filtering.
"""

import pytest

from please.domain import VersionFilter
from please.exit_codes import DATA_ERROR, PatternError
from please.versioning import compare_versions, filter_versions, sort_versions


class TestCompareVersions:

    @pytest.mark.parametrize("v1,v2,expected", [
        ("1.10.0", "1.9.9", 1),
        ("1.9.9", "1.10.0", -1),
        ("v2.0", "2.0.0", 0),
        ("2.0.0", "v2.0", 0),
        ("1.2.x", "1.2.0", 0),
        ("1.2.x", "1.2.1", -1),
        ("2", "1.99.99", 1),
        ("1.0.0", "1.0.0", 0),
        ("", "0", 0),
    ])
    def test_compare(self, v1, v2, expected):
        assert compare_versions(v1, v2) == expected

    def test_prerelease_suffix_not_understood(self):
        # "0-rc1" is not an integer, so the patch component counts as 0
        assert compare_versions("1.0.0-rc1", "1.0.0") == 0
        assert compare_versions("1.0.0-rc1", "1.0.1") == -1

    def test_only_one_v_stripped(self):
        assert compare_versions("vv1", "0") == 0


class TestSortVersions:

    def test_newest_first(self):
        assert sort_versions(["1.9.9", "1.10.0", "1.2.0"]) == ["1.10.0", "1.9.9", "1.2.0"]

    def test_oldest_first(self):
        assert sort_versions(["1.9.9", "1.10.0", "1.2.0"], newest_first=False) == ["1.2.0", "1.9.9", "1.10.0"]

    def test_equal_versions_keep_input_order(self):
        assert sort_versions(["2.0", "v2.0.0", "1.0"]) == ["2.0", "v2.0.0", "1.0"]


class TestFilterVersions:

    def test_pattern_and_exclude(self):
        version_filter = VersionFilter(
            pattern=r"^[0-9]+\.[0-9]+\.[0-9]+$",
            exclude=["latest", "edge"],
        )

        result = filter_versions(["1.2.0", "latest", "1.3.0", "edge", "rc1"], version_filter)

        assert result == ["1.3.0", "1.2.0"]

    def test_exclude_only(self):
        version_filter = VersionFilter(exclude=["latest"])

        assert filter_versions(["latest", "1.0", "2.0"], version_filter) == ["2.0", "1.0"]

    def test_exclude_is_exact(self):
        version_filter = VersionFilter(exclude=["1.0"])

        assert filter_versions(["1.0", "1.0.1"], version_filter) == ["1.0.1"]

    def test_pattern_is_not_anchored(self):
        version_filter = VersionFilter(pattern=r"[0-9]+\.[0-9]+")

        result = filter_versions(["3.12-slim", "alpine", "3.11"], version_filter)

        # "12-slim" is not an integer, so 3.12-slim orders as 3.0
        assert result == ["3.11", "3.12-slim"]

    def test_no_filter(self):
        assert filter_versions(["1.0", "2.0"], None) == ["2.0", "1.0"]

    def test_empty_tags(self):
        assert filter_versions([], VersionFilter(pattern="^1")) == []

    def test_invalid_pattern(self):
        with pytest.raises(PatternError) as exc_info:
            filter_versions(["1.0"], VersionFilter(pattern="[unclosed"))

        assert exc_info.value.pattern == "[unclosed"
        assert exc_info.value.exit_code == DATA_ERROR

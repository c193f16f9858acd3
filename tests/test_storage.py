"""
Tests for the please directory layout.
"""

import pytest

from please.exit_codes import ConfigError
from please.storage import Storage


class TestStorage:

    def test_root_from_config(self, tmp_path):
        storage = Storage(config={"general": {"please_dir": str(tmp_path)}})

        assert storage.root == tmp_path
        assert storage.manifests_path == tmp_path / "manifests"
        assert storage.core_manifest_file == tmp_path / "manifests" / "manifest-core.tar.gz"

    def test_explicit_root_wins(self, tmp_path):
        storage = Storage(root=tmp_path / "a", config={"general": {"please_dir": str(tmp_path / "b")}})

        assert storage.root == tmp_path / "a"

    def test_not_initialized(self, tmp_path):
        storage = Storage(root=tmp_path)

        assert not storage.is_initialized()
        with pytest.raises(ConfigError):
            storage.get_manifest_paths()

    def test_no_archives(self, tmp_path):
        (tmp_path / "manifests").mkdir()
        (tmp_path / "manifests" / "notes.txt").write_text("hi")

        with pytest.raises(ConfigError) as exc_info:
            Storage(root=tmp_path).get_manifest_paths()

        assert "no manifest archives" in str(exc_info.value)

    def test_core_first_then_by_name(self, tmp_path):
        manifests = tmp_path / "manifests"
        manifests.mkdir()
        for name in ["zeta.tar.gz", "manifest-core.tar.gz", "alpha.tar.gz", "readme.md"]:
            (manifests / name).write_bytes(b"")
        (manifests / "dir.tar.gz").mkdir()

        paths = Storage(root=tmp_path).get_manifest_paths()

        assert [p.name for p in paths] == ["manifest-core.tar.gz", "alpha.tar.gz", "zeta.tar.gz"]

"""
Shared fixtures: build real .tar.gz catalogs on disk.
"""

import io
import json
import tarfile
from pathlib import Path

import pytest


def _add_member(tar: tarfile.TarFile, name: str, data: bytes) -> None:
    info = tarfile.TarInfo(name=name)
    info.size = len(data)
    tar.addfile(info, io.BytesIO(data))


def write_catalog(
    path: Path,
    manifests=None,
    namespace=None,
    hooks=None,
    raw_json=None,
    member_name='manifests.json',
    extra_members=None,
    trailing_members=None,
) -> Path:
    """
    Write a catalog archive.

    Args:
        path: Where to write the .tar.gz
        manifests: List of manifest dicts (or bare names)
        namespace: None for the bare-array layout, else the wrapped layout
        hooks: {member name under hooks/: script body}
        raw_json: Exact JSON text for the structured member (overrides manifests)
        member_name: Name of the structured member
        extra_members: {name: bytes} added before the structured member
        trailing_members: {name: bytes} added after the hooks
    """
    manifests = [
        {'name': m} if isinstance(m, str) else m
        for m in (manifests or [])
    ]
    if raw_json is None:
        if namespace is None:
            raw_json = json.dumps(manifests)
        else:
            raw_json = json.dumps({'namespace': namespace, 'manifests': manifests})

    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, 'w:gz') as tar:
        for name, data in (extra_members or {}).items():
            _add_member(tar, name, data)
        if member_name is not None:
            _add_member(tar, member_name, raw_json.encode('utf-8'))
        for name, body in (hooks or {}).items():
            _add_member(tar, f'hooks/{name}', body.encode('utf-8'))
        for name, data in (trailing_members or {}).items():
            _add_member(tar, name, data)
    return path


@pytest.fixture
def catalog_factory(tmp_path):
    """Return a function that writes catalogs under tmp_path."""
    counter = {'n': 0}

    def factory(filename=None, **kwargs):
        if filename is None:
            counter['n'] += 1
            filename = f'catalog-{counter["n"]}.tar.gz'
        return write_catalog(tmp_path / filename, **kwargs)

    return factory


@pytest.fixture
def track_open(monkeypatch):
    """Record every file opened through builtins.open."""
    import builtins

    opened = []
    real_open = builtins.open

    def tracking_open(*args, **kwargs):
        f = real_open(*args, **kwargs)
        opened.append(f)
        return f

    monkeypatch.setattr(builtins, 'open', tracking_open)
    return opened

"""
test_archive.py

Tests for sdist unpacking.
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from pkgdoc.archive import unpack
from pkgdoc.errors import ArchiveError


def _tarball(path: Path, files: dict[str, str]) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, text in files.items():
            data = text.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def test_single_top_level_directory_is_source_root(tmp_path):
    archive = _tarball(
        tmp_path / "demo-1.0.tar.gz",
        {"demo-1.0/demo/__init__.py": "", "demo-1.0/PKG-INFO": "Name: demo\n"},
    )
    root = unpack(archive, tmp_path / "out")
    assert root == tmp_path / "out" / "demo-1.0"
    assert (root / "demo" / "__init__.py").is_file()


def test_flat_archive_returns_dest(tmp_path):
    archive = _tarball(tmp_path / "flat.tar.gz", {"a.py": "", "b.py": ""})
    assert unpack(archive, tmp_path / "out") == tmp_path / "out"


def test_existing_dest_is_replaced(tmp_path):
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "stale.py").write_text("old")
    archive = _tarball(tmp_path / "demo.tar.gz", {"demo/new.py": ""})
    unpack(archive, dest)
    assert not (dest / "stale.py").exists()
    assert (dest / "demo" / "new.py").exists()


def test_missing_archive(tmp_path):
    with pytest.raises(FileNotFoundError):
        unpack(tmp_path / "nope.tar.gz", tmp_path / "out")


def test_corrupt_archive(tmp_path):
    bad = tmp_path / "bad.tar.gz"
    bad.write_bytes(b"definitely not a tarball")
    with pytest.raises(ArchiveError):
        unpack(bad, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_path_traversal_rejected(tmp_path):
    archive = _tarball(tmp_path / "evil.tar.gz", {"../escape.py": "x = 1\n"})
    with pytest.raises(ArchiveError):
        unpack(archive, tmp_path / "out")
    assert not (tmp_path / "escape.py").exists()

"""
archive.py

Unpacking of source-distribution archives (``.tar.gz``).
"""

from __future__ import annotations

import shutil
import tarfile
from pathlib import Path

from pkgdoc.errors import ArchiveError
from pkgdoc.logging import get_logger

log = get_logger("archive")


def unpack(archive: Path, dest: Path) -> Path:
    """
    Extract ``archive`` into ``dest``, replacing anything already there.

    Members are extracted with tarfile's ``data`` filter, so absolute paths,
    ``..`` components and special files are rejected.

    :param archive: Path to a gzip-compressed tarball.
    :param dest: Output directory.
    :return: The source root: the single top-level directory of the archive
             when there is exactly one (the usual sdist layout), else ``dest``.
    :raises FileNotFoundError: If ``archive`` does not exist.
    :raises ArchiveError: If the archive cannot be read or contains unsafe members.
    """
    archive = Path(archive)
    dest = Path(dest)
    if not archive.is_file():
        raise FileNotFoundError(f"Archive not found: {archive}")

    if dest.exists():
        shutil.rmtree(dest)
    dest.mkdir(parents=True)

    try:
        with tarfile.open(archive, "r:*") as tar:
            tar.extractall(dest, filter="data")
    except tarfile.TarError as exc:
        shutil.rmtree(dest, ignore_errors=True)
        raise ArchiveError(f"Cannot unpack {archive.name}: {exc}") from exc

    entries = list(dest.iterdir())
    log.debug("unpacked %s into %s (%d top-level entries)", archive.name, dest, len(entries))
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return dest

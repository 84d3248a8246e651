"""
cache.py

CacheManager: three-tier filesystem cache keyed by ``(name, version)``.

Layout::

    {root}/
        archives/{name}-{version}.tar.gz    raw source archive
        extracted/{name}-{version}/         unpacked source tree
        docs/{name}-{version}.json          encoded PackageDocument
        docs/{name}-{version}.meta          sidecar: {"name": ..., "version": ...}

The sidecar records the exact identity of each saved document, so
:meth:`CacheManager.list_cached` never has to split a filename whose name or
version itself contains ``-``.

There is no locking: concurrent writers race and the last :meth:`save` wins.
Filesystem errors propagate as :class:`OSError`.
"""

from __future__ import annotations

import json
import shutil
from enum import Enum
from pathlib import Path

from pkgdoc.errors import DecodeError
from pkgdoc.logging import get_logger
from pkgdoc.model import PackageDocument, decode, encode

log = get_logger("cache")

META_SUFFIX = ".meta"


class Tier(Enum):
    """A cache tier: directory name plus the artifact suffix."""

    ARCHIVES = ("archives", ".tar.gz")
    EXTRACTED = ("extracted", "")
    DOCS = ("docs", ".json")

    @property
    def dirname(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]


class CacheManager:
    """
    Persist and retrieve package artifacts under a single root.

    Example::

        cache = CacheManager("~/.pkgdoc_cache")
        if not cache.exists("requests", "2.32.3"):
            cache.save(doc)
        doc = cache.load("requests", "2.32.3")

    :param root: Cache root directory (``~`` is expanded).
    """

    def __init__(self, root: str | Path) -> None:
        self.root: Path = Path(root).expanduser()

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def tier_dir(self, tier: Tier) -> Path:
        return self.root / tier.dirname

    def path(self, tier: Tier, name: str, version: str) -> Path:
        """
        Path of the ``tier`` artifact for ``(name, version)``.

        :return: ``{root}/{tier}/{name}-{version}{suffix}``
        """
        return self.tier_dir(tier) / f"{name}-{version}{tier.suffix}"

    def meta_path(self, name: str, version: str) -> Path:
        return self.tier_dir(Tier.DOCS) / f"{name}-{version}{META_SUFFIX}"

    def ensure_directories(self) -> None:
        """Create the root and all tier directories if absent."""
        for tier in Tier:
            self.tier_dir(tier).mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def exists(self, name: str, version: str) -> bool:
        """
        True iff the docs-tier file is present and its sidecar, if any,
        names ``(name, version)``.  The document itself is not decoded.
        """
        if not self.path(Tier.DOCS, name, version).is_file():
            return False
        owner = self._read_meta(self.meta_path(name, version))
        return owner is None or owner == (name, version)

    def load(self, name: str, version: str) -> PackageDocument | None:
        """
        Decode the cached document.

        ``("a-b", "1")`` and ``("a", "b-1")`` share a filename; a stored
        document belonging to the other key counts as a miss.

        :return: The document, or ``None`` on a cache miss.
        :raises DecodeError: If the stored bytes or sidecar are corrupt.
        """
        path = self.path(Tier.DOCS, name, version)
        if not path.is_file():
            log.debug("cache miss: %s@%s", name, version)
            return None
        owner = self._read_meta(self.meta_path(name, version))
        if owner is not None and owner != (name, version):
            log.warning("cache miss: %s holds %s@%s, not %s@%s", path.name, *owner, name, version)
            return None
        doc = decode(path.read_bytes())
        if doc.key != (name, version):
            log.warning("cache miss: %s holds %s@%s, not %s@%s", path.name, *doc.key, name, version)
            return None
        log.debug("cache hit: %s@%s", name, version)
        return doc

    def save(self, doc: PackageDocument) -> Path:
        """
        Write ``doc`` (and its sidecar) to the docs tier, overwriting any prior copy.

        :return: Path of the written document.
        """
        self.ensure_directories()
        path = self.path(Tier.DOCS, doc.name, doc.version)
        path.write_bytes(encode(doc))
        self.meta_path(doc.name, doc.version).write_text(
            json.dumps({"name": doc.name, "version": doc.version}), encoding="utf-8"
        )
        log.info("cached %s@%s at %s", doc.name, doc.version, path)
        return path

    def list_cached(self) -> list[tuple[str, str]]:
        """
        Enumerate cached documents.

        Identity comes from the sidecar.  A document without one is listed
        only when its filename stem contains exactly one ``-``; otherwise it
        is skipped with a warning.

        :return: Sorted ``(name, version)`` pairs.
        """
        docs_dir = self.tier_dir(Tier.DOCS)
        if not docs_dir.is_dir():
            return []

        found: list[tuple[str, str]] = []
        for path in docs_dir.glob(f"*{Tier.DOCS.suffix}"):
            key = self._read_meta(path.with_suffix(META_SUFFIX))
            if key is None:
                stem = path.stem
                if stem.count("-") != 1:
                    log.warning("Skipping %s: no metadata and ambiguous filename", path.name)
                    continue
                name, version = stem.split("-")
                key = (name, version)
            found.append(key)
        return sorted(found)

    def _read_meta(self, meta: Path) -> tuple[str, str] | None:
        if not meta.is_file():
            return None
        try:
            data = json.loads(meta.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DecodeError(f"malformed metadata: {exc.msg}", meta.name) from exc
        name = data.get("name") if isinstance(data, dict) else None
        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
            raise DecodeError("metadata must hold non-empty 'name' and 'version'", meta.name)
        return name, version

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def evict(self, name: str, version: str) -> None:
        """
        Remove every tier's artifact for ``(name, version)``.

        Nothing is removed when the sidecar names a different package that
        shares the same filename.
        """
        try:
            owner = self._read_meta(self.meta_path(name, version))
        except DecodeError as exc:
            log.warning("evicting %s@%s despite unreadable metadata: %s", name, version, exc)
            owner = None
        if owner is not None and owner != (name, version):
            log.warning("not evicting %s@%s: artifacts belong to %s@%s", name, version, *owner)
            return
        for tier in Tier:
            _remove(self.path(tier, name, version))
        _remove(self.meta_path(name, version))
        log.info("evicted %s@%s", name, version)

    def evict_all(self, name: str) -> int:
        """
        Remove every cached version of ``name``.

        :return: Number of versions evicted.
        """
        versions = [v for n, v in self.list_cached() if n == name]
        for version in versions:
            self.evict(name, version)
        return len(versions)

    def evict_everything(self) -> None:
        """Remove the whole cache root."""
        if self.root.exists():
            shutil.rmtree(self.root)
            log.info("cleared cache at %s", self.root)

    def __repr__(self) -> str:
        return f"CacheManager(root={self.root!r})"


def _remove(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()

"""
extractor.py

DocExtractor: orchestrates fetch → unpack → analyze → normalize → cache.

Owns the default collaborators (PyPI client, Python analyzer) unless they
are injected, and exposes a cache-first :meth:`DocExtractor.get_package`.
"""

from __future__ import annotations

from pathlib import Path

from pkgdoc.analysis import Analyzer
from pkgdoc.archive import unpack
from pkgdoc.cache import CacheManager, Tier
from pkgdoc.client import LATEST, PypiClient
from pkgdoc.logging import get_logger
from pkgdoc.model import PackageDocument
from pkgdoc.normalizer import Normalizer
from pkgdoc.pyanalyzer import PythonAnalyzer

log = get_logger("extractor")


class DocExtractor:
    """
    Builds and caches package documentation.

    Example::

        with DocExtractor(CacheManager("~/.pkgdoc_cache")) as ex:
            doc = ex.get_package("attrs")
            print(len(doc.all_classes))

    :param cache: Cache manager holding all three tiers.
    :param client: Upstream registry client (a :class:`PypiClient` is created lazily).
    :param analyzer: Source analyzer (defaults to :class:`PythonAnalyzer`).
    """

    def __init__(
        self,
        cache: CacheManager,
        *,
        client: PypiClient | None = None,
        analyzer: Analyzer | None = None,
    ) -> None:
        self.cache = cache
        self._client = client
        self._owns_client = client is None
        self.analyzer = analyzer or PythonAnalyzer()
        self.normalizer = Normalizer(self.analyzer)

    # ------------------------------------------------------------------
    # Lazy client
    # ------------------------------------------------------------------

    @property
    def client(self) -> PypiClient:
        """Upstream client (created on first use)."""
        if self._client is None:
            self._client = PypiClient()
        return self._client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_package(
        self, name: str, version: str | None = None, *, force_refresh: bool = False
    ) -> PackageDocument:
        """
        Return documentation for ``name`` ``version``, extracting on a cache miss.

        An explicit version already in the cache is served without contacting
        the registry; ``None`` / ``"latest"`` is always resolved upstream first.

        :param name: Package name.
        :param version: Version, ``"latest"`` or ``None``.
        :param force_refresh: Re-extract even if cached.
        :return: The (possibly freshly extracted) document.
        """
        explicit = version is not None and version != LATEST
        if explicit and not force_refresh:
            cached = self.cache.load(name, version)
            if cached is not None:
                return cached

        resolved = self.client.resolve_version(name, version)

        if not force_refresh and not explicit:
            cached = self.cache.load(name, resolved)
            if cached is not None:
                return cached

        doc = self.extract(name, resolved)
        self.cache.save(doc)
        return doc

    def extract(self, name: str, version: str) -> PackageDocument:
        """
        Download, unpack, analyse and normalize one release (nothing is saved to the docs tier).

        :return: The new document.
        """
        self.cache.ensure_directories()

        archive = self.client.download_archive(
            name, version, self.cache.path(Tier.ARCHIVES, name, version)
        )
        source_root = unpack(archive, self.cache.path(Tier.EXTRACTED, name, version))
        info = self.client.package_info(name, version)
        return self._normalize(source_root, name, version, **info)

    def extract_local(
        self,
        source_root: str | Path,
        name: str,
        version: str,
        *,
        description: str | None = None,
        repository: str | None = None,
        homepage: str | None = None,
    ) -> PackageDocument:
        """
        Document a local source tree (no network) and save it.

        :param source_root: Directory holding the package sources.
        :return: The new document.
        """
        doc = self._normalize(
            Path(source_root),
            name,
            version,
            description=description,
            repository=repository,
            homepage=homepage,
        )
        self.cache.save(doc)
        return doc

    def _normalize(
        self,
        source_root: Path,
        name: str,
        version: str,
        *,
        description: str | None = None,
        repository: str | None = None,
        homepage: str | None = None,
    ) -> PackageDocument:
        files = self.analyzer.discover(source_root)
        log.info("Analysing %d files for %s@%s", len(files), name, version)
        return self.normalizer.normalize(
            name,
            version,
            files,
            root=source_root,
            description=description,
            repository=repository,
            homepage=homepage,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the client if this extractor created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> DocExtractor:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DocExtractor(cache={self.cache!r}, analyzer={type(self.analyzer).__name__})"

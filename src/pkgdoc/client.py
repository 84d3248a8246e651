"""
client.py

PypiClient: minimal synchronous client for the PyPI JSON API.

Endpoints used::

    GET {base_url}/pypi/{name}/json     package metadata, release files

The client resolves versions, reads package metadata and downloads the
source distribution (``.tar.gz``) of a release.  It never retries: a 404
becomes :class:`~pkgdoc.errors.UpstreamNotFound`, any other failure
:class:`~pkgdoc.errors.UpstreamError`.
"""

from __future__ import annotations

from pathlib import Path

import httpx

from pkgdoc.config import DEFAULT_PYPI_URL, DEFAULT_TIMEOUT
from pkgdoc.errors import UpstreamError, UpstreamNotFound
from pkgdoc.logging import get_logger

log = get_logger("client")

LATEST = "latest"

# project_urls keys (lower-cased) that name the source repository.
_REPOSITORY_KEYS = ("source", "source code", "repository", "code", "github", "homepage")


class PypiClient:
    """
    Talks to a PyPI-compatible registry.

    Example::

        with PypiClient() as client:
            version = client.resolve_version("requests")
            client.download_archive("requests", version, Path("requests.tar.gz"))

    :param base_url: Registry root (``https://pypi.org``).
    :param http: Pre-built ``httpx.Client`` (tests pass one with a mock transport).
    :param timeout: Request timeout in seconds when the client builds its own ``httpx.Client``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PYPI_URL,
        http: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self.http = http or httpx.Client(timeout=timeout, follow_redirects=True)
        self._metadata: dict[str, dict] = {}

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def metadata(self, name: str) -> dict:
        """
        Fetch (and memoise) the JSON metadata of a package.

        :raises UpstreamNotFound: On HTTP 404.
        :raises UpstreamError: On any other HTTP or transport failure.
        """
        if name in self._metadata:
            return self._metadata[name]

        url = f"{self.base_url}/pypi/{name}/json"
        log.debug("GET %s", url)
        response = self._get(url)
        if response.status_code == 404:
            raise UpstreamNotFound(name)
        if response.status_code != 200:
            raise UpstreamError(f"Failed to fetch package info for {name}", response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Invalid metadata response for {name}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("info"), dict):
            raise UpstreamError(f"Invalid metadata response for {name}")
        self._metadata[name] = data
        return data

    def resolve_version(self, name: str, version: str | None = None) -> str:
        """
        Resolve ``None`` / ``"latest"`` to the latest release and check the version exists.

        :raises UpstreamNotFound: If the package or the requested version is missing.
        """
        data = self.metadata(name)
        if version is None or version == LATEST:
            latest = data["info"].get("version")
            if not latest:
                raise UpstreamError(f"No latest version published for {name}")
            return latest
        releases = data.get("releases")
        if isinstance(releases, dict) and version not in releases:
            raise UpstreamNotFound(name, version)
        return version

    def package_info(self, name: str, version: str | None = None) -> dict[str, str | None]:
        """
        Descriptive metadata for a package.

        :return: dict with ``description``, ``repository`` and ``homepage`` (each may be ``None``).
        """
        info = self.metadata(name)["info"]
        urls = {str(k).lower(): v for k, v in (info.get("project_urls") or {}).items()}
        repository = next((urls[k] for k in _REPOSITORY_KEYS if urls.get(k)), None)
        homepage = info.get("home_page") or urls.get("homepage") or urls.get("home")
        return {
            "description": info.get("summary") or None,
            "repository": repository,
            "homepage": homepage or None,
        }

    # ------------------------------------------------------------------
    # Archives
    # ------------------------------------------------------------------

    def archive_url(self, name: str, version: str) -> str:
        """
        URL of the source distribution of ``name`` ``version``.

        :raises UpstreamNotFound: If the version is missing or has no sdist.
        """
        data = self.metadata(name)
        files = (data.get("releases") or {}).get(version)
        if files is None and data["info"].get("version") == version:
            files = data.get("urls")
        if files is None:
            raise UpstreamNotFound(name, version)
        for entry in files:
            if entry.get("packagetype") == "sdist" and str(entry.get("filename", "")).endswith(
                ".tar.gz"
            ):
                return entry["url"]
        raise UpstreamNotFound(name, version)

    def download_archive(self, name: str, version: str, dest: Path) -> Path:
        """
        Stream the sdist of ``name`` ``version`` to ``dest``.

        :return: ``dest``
        :raises UpstreamError: If the download fails.
        """
        url = self.archive_url(name, version)
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        log.info("Downloading %s@%s from %s", name, version, url)
        try:
            with self.http.stream("GET", url) as response:
                if response.status_code != 200:
                    raise UpstreamError(
                        f"Failed to download {name}@{version}", response.status_code
                    )
                with dest.open("wb") as fh:
                    for chunk in response.iter_bytes():
                        fh.write(chunk)
        except httpx.HTTPError as exc:
            dest.unlink(missing_ok=True)
            raise UpstreamError(f"Failed to download {name}@{version}: {exc}") from exc
        except UpstreamError:
            dest.unlink(missing_ok=True)
            raise
        return dest

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _get(self, url: str) -> httpx.Response:
        try:
            return self.http.get(url)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}") from exc

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> PypiClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PypiClient(base_url={self.base_url!r})"

"""
config.py

Runtime settings for pkgdoc.

Settings are read once from the environment by the entry points and passed
explicitly into the components that need them:

    PKGDOC_CACHE_DIR   cache root        (default ~/.pkgdoc_cache,
                                          %LOCALAPPDATA%\\pkgdoc_cache on Windows)
    PKGDOC_PYPI_URL    registry base URL (default https://pypi.org)
    PKGDOC_TIMEOUT     HTTP timeout, s   (default 30)
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from pkgdoc.errors import PkgDocError

DEFAULT_PYPI_URL = "https://pypi.org"
DEFAULT_TIMEOUT = 30.0


class ConfigError(PkgDocError, ValueError):
    """Raised when an environment variable holds an unusable value."""


def default_cache_dir(
    environ: Mapping[str, str] | None = None, platform: str | None = None
) -> Path:
    """
    Return the platform default cache root.

    :param environ: Environment mapping (defaults to ``os.environ``).
    :param platform: ``sys.platform`` override, for tests.
    """
    env = os.environ if environ is None else environ
    plat = sys.platform if platform is None else platform
    if plat.startswith("win"):
        local = env.get("LOCALAPPDATA")
        if local:
            return Path(local) / "pkgdoc_cache"
    home = env.get("HOME") or env.get("USERPROFILE")
    base = Path(home) if home else Path.home()
    return base / ".pkgdoc_cache"


@dataclass
class Settings:
    """Resolved pkgdoc settings."""

    cache_dir: Path = field(default_factory=default_cache_dir)
    pypi_url: str = DEFAULT_PYPI_URL
    timeout: float = DEFAULT_TIMEOUT


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build :class:`Settings` from environment variables.

    :param environ: Environment mapping (defaults to ``os.environ``).
    :return: Settings with every unset variable at its default.
    :raises ConfigError: If ``PKGDOC_TIMEOUT`` is not a positive number.
    """
    env = os.environ if environ is None else environ

    cache_dir = env.get("PKGDOC_CACHE_DIR")
    pypi_url = env.get("PKGDOC_PYPI_URL") or DEFAULT_PYPI_URL

    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get("PKGDOC_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigError(f"PKGDOC_TIMEOUT must be a number, got {raw_timeout!r}") from exc
        if timeout <= 0:
            raise ConfigError(f"PKGDOC_TIMEOUT must be positive, got {raw_timeout!r}")

    return Settings(
        cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(env),
        pypi_url=pypi_url.rstrip("/"),
        timeout=timeout,
    )


def resolve_cache_dir(
    override: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> Path:
    """Cache root from a command-line override, else from the environment."""
    if override:
        return Path(override).expanduser()
    return load_settings(environ).cache_dir


__all__ = [
    "ConfigError",
    "Settings",
    "default_cache_dir",
    "load_settings",
    "resolve_cache_dir",
    "DEFAULT_PYPI_URL",
]

"""
test_config.py

Tests for environment-driven settings and logging setup.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pkgdoc.config import (
    DEFAULT_PYPI_URL,
    ConfigError,
    default_cache_dir,
    load_settings,
    resolve_cache_dir,
)
from pkgdoc.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Cache location
# ---------------------------------------------------------------------------


def test_default_cache_dir_posix():
    assert default_cache_dir({"HOME": "/home/ada"}, platform="linux") == Path(
        "/home/ada/.pkgdoc_cache"
    )


def test_default_cache_dir_userprofile_fallback():
    path = default_cache_dir({"USERPROFILE": "/users/ada"}, platform="darwin")
    assert path == Path("/users/ada/.pkgdoc_cache")


def test_default_cache_dir_windows():
    env = {"LOCALAPPDATA": "C:/Users/ada/AppData/Local", "HOME": "/ignored"}
    assert default_cache_dir(env, platform="win32") == Path(
        "C:/Users/ada/AppData/Local/pkgdoc_cache"
    )


def test_resolve_cache_dir_prefers_override(tmp_path):
    assert resolve_cache_dir(tmp_path, environ={"PKGDOC_CACHE_DIR": "/elsewhere"}) == tmp_path
    assert resolve_cache_dir(None, environ={"PKGDOC_CACHE_DIR": "/elsewhere"}) == Path("/elsewhere")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_load_settings_defaults():
    settings = load_settings({"HOME": "/home/ada"})
    assert settings.pypi_url == DEFAULT_PYPI_URL
    assert settings.timeout == 30.0
    assert settings.cache_dir == default_cache_dir({"HOME": "/home/ada"})


def test_load_settings_from_environment():
    settings = load_settings(
        {
            "PKGDOC_CACHE_DIR": "/tmp/pkgdoc",
            "PKGDOC_PYPI_URL": "https://mirror.example.org/",
            "PKGDOC_TIMEOUT": "5",
        }
    )
    assert settings.cache_dir == Path("/tmp/pkgdoc")
    assert settings.pypi_url == "https://mirror.example.org"
    assert settings.timeout == 5.0


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout(raw):
    with pytest.raises(ConfigError):
        load_settings({"PKGDOC_TIMEOUT": raw})


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def test_get_logger_is_namespaced():
    assert get_logger("cache").name == "pkgdoc.cache"


def test_configure_logging_levels(tmp_path):
    log_file = tmp_path / "pkgdoc.log"
    root = configure_logging(verbose=False, log_file=log_file)
    assert root.level == logging.DEBUG
    assert [h.level for h in root.handlers] == [logging.WARNING, logging.DEBUG]

    root = configure_logging(verbose=False)
    assert root.level == logging.WARNING

    root = configure_logging(verbose=True)
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1

    get_logger("test").warning("hello")
    configure_logging()

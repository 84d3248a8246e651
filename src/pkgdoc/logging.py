"""Logging utilities for pkgdoc commands and library code."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "pkgdoc"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the pkgdoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the pkgdoc logger with stderr output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # replace handlers left by an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[pkgdoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger"]

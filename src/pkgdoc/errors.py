"""
errors.py

Error taxonomy for pkgdoc.

Every failure the pipeline can report carries its own type so a transport
layer (CLI, MCP server) can render a precise message.  Only
:class:`AnalysisUnresolvable` is recovered locally (the file is skipped);
everything else aborts the current operation.

Filesystem failures are not wrapped: they surface as the builtin
:class:`OSError`.
"""

from __future__ import annotations

from pathlib import Path


class PkgDocError(Exception):
    """Base class for all pkgdoc errors."""


class UpstreamNotFound(PkgDocError):
    """
    The package (or a specific version of it) does not exist upstream.

    :param name: Package name.
    :param version: Requested version, or ``None`` when the package itself is missing.
    """

    def __init__(self, name: str, version: str | None = None) -> None:
        self.name = name
        self.version = version
        target = f"{name}@{version}" if version else name
        super().__init__(f"Package not found: {target}")


class UpstreamError(PkgDocError):
    """
    An upstream registry request failed for a reason other than "not found".

    :param message: What went wrong.
    :param status_code: HTTP status code, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        text = f"{message} ({status_code})" if status_code is not None else message
        super().__init__(text)


class AnalysisUnresolvable(PkgDocError):
    """
    A single source file could not be analysed.

    Raised by :meth:`pkgdoc.analysis.Analyzer.analyze`; the normalizer logs
    it and moves on to the next file.

    :param path: The file that could not be analysed.
    :param reason: Short human-readable cause.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot analyse {self.path}: {reason}")


class NoDeclarationsError(PkgDocError):
    """No file of a package yielded a single public declaration."""

    def __init__(self, name: str, version: str) -> None:
        self.name = name
        self.version = version
        super().__init__(f"No public declarations found in {name}@{version}")


class DecodeError(PkgDocError):
    """
    Encoded documentation does not match the expected schema.

    :param reason: What is wrong with the data.
    :param location: Dotted path of the offending field (``""`` for the root).
    """

    def __init__(self, reason: str, location: str = "") -> None:
        self.reason = reason
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"Invalid documentation data{where}: {reason}")


class ArchiveError(PkgDocError):
    """A package archive exists but cannot be unpacked."""


__all__ = [
    "PkgDocError",
    "UpstreamNotFound",
    "UpstreamError",
    "AnalysisUnresolvable",
    "NoDeclarationsError",
    "DecodeError",
    "ArchiveError",
]

#!/usr/bin/env python3
"""
mcp_server.py: pkgdoc MCP Server

Serves the documentation of one package version as Model Context Protocol
(MCP) tools, so any MCP-compatible agent (Claude Desktop, Cursor, Continue,
etc.) can look up its API while writing code.

Tools
-----
search(query, limit)
    Ranked keyword search over classes, functions and enums.

get_class(class_name) / get_function(function_name) / get_enum(enum_name)
    Full rendering of one declaration.

get_library(library_name)
    Declarations of one module.

get_methods(class_name)
    Method signatures and descriptions of a class.

list_classes() / list_functions() / list_enums() / list_libraries()
    Names, one per line.

get_package_info()
    Package metadata and declaration counts.

Lookups of unknown names fail with a tool error (``Class not found: X``).

Usage
-----
Install the package, then run::

    pkgdoc-mcp requests --version 2.32.3

Or configure in Claude Desktop's ``claude_desktop_config.json``::

    {
      "mcpServers": {
        "requests-docs": {
          "command": "pkgdoc-mcp",
          "args": ["requests", "--version", "2.32.3"]
        }
      }
    }
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from pkgdoc.cache import CacheManager
from pkgdoc.client import PypiClient
from pkgdoc.config import load_settings
from pkgdoc.errors import PkgDocError
from pkgdoc.extractor import DocExtractor
from pkgdoc.logging import configure_logging
from pkgdoc.query import Found, NotFound, QueryEngine
from pkgdoc.render import (
    format_class,
    format_enum,
    format_function,
    format_library,
    format_methods,
    format_names,
    format_package_info,
    format_search,
)

# ---------------------------------------------------------------------------
# Global state, initialised in main() before the server starts
# ---------------------------------------------------------------------------

_engine: QueryEngine | None = None


def _get_engine() -> QueryEngine:
    if _engine is None:
        raise RuntimeError(
            "pkgdoc not initialised.  Run the server via 'pkgdoc-mcp <package> [--version V]'"
        )
    return _engine


def set_engine(engine: QueryEngine | None) -> None:
    """Install the engine the tools answer from (``None`` to reset)."""
    global _engine
    _engine = engine


def _unwrap(result: Found | NotFound):
    if isinstance(result, NotFound):
        raise ToolError(result.message)
    return result.value


# ---------------------------------------------------------------------------
# MCP server
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "pkgdoc",
    instructions=(
        "pkgdoc serves the public API documentation of one package version. "
        "Use search to find classes, functions and enums by keyword, then get_class, "
        "get_function or get_enum for full signatures. Use get_package_info first "
        "to see which package and version is loaded."
    ),
)


@mcp.tool()
def search(query: str, limit: int = 10) -> str:
    """
    Search classes, functions and enums by keyword.

    Names are matched case-insensitively (exact, prefix and substring) and
    descriptions by substring; results are ranked by combined score.

    :param query: Search keyword, e.g. "session".
    :param limit: Maximum number of results (default 10).
    :return: One ``kind: name - description`` line per hit.
    """
    return format_search(query, _get_engine().search(query, limit))


@mcp.tool()
def get_class(class_name: str) -> str:
    """
    Full documentation of a class: supertypes, constructors, fields and methods.

    :param class_name: Exact (case-sensitive) class name.
    """
    return format_class(_unwrap(_get_engine().get_class(class_name)))


@mcp.tool()
def get_function(function_name: str) -> str:
    """
    Signature and documentation of a top-level function.

    :param function_name: Exact (case-sensitive) function name.
    """
    return format_function(_unwrap(_get_engine().get_function(function_name)))


@mcp.tool()
def get_enum(enum_name: str) -> str:
    """
    Values and documentation of an enum.

    :param enum_name: Exact (case-sensitive) enum name.
    """
    return format_enum(_unwrap(_get_engine().get_enum(enum_name)))


@mcp.tool()
def get_library(library_name: str) -> str:
    """
    Declarations contained in one library (module).

    :param library_name: Library name as returned by list_libraries.
    """
    return format_library(_unwrap(_get_engine().get_library(library_name)))


@mcp.tool()
def get_methods(class_name: str) -> str:
    """
    Method signatures and descriptions of a class.

    :param class_name: Exact (case-sensitive) class name.
    """
    return format_methods(class_name, _unwrap(_get_engine().get_methods(class_name)))


@mcp.tool()
def list_classes() -> str:
    """List all class names, one per line."""
    return format_names("class", _get_engine().list_classes())


@mcp.tool()
def list_functions() -> str:
    """List all top-level function names, one per line."""
    return format_names("function", _get_engine().list_functions())


@mcp.tool()
def list_enums() -> str:
    """List all enum names, one per line."""
    return format_names("enum", _get_engine().list_enums())


@mcp.tool()
def list_libraries() -> str:
    """List all library (module) names, one per line."""
    return format_names("library", _get_engine().list_libraries())


@mcp.tool()
def get_package_info() -> str:
    """
    Package name, version, metadata and declaration counts.

    Useful for confirming which package is loaded before issuing queries.
    """
    return format_package_info(_get_engine().package_info())


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _parse_args(argv: list | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pkgdoc-mcp",
        description="pkgdoc MCP server: exposes package documentation tools to AI agents.",
    )
    p.add_argument("package", help="Package name on the registry")
    p.add_argument(
        "--version",
        default=None,
        help="Package version (default: latest release)",
    )
    p.add_argument(
        "--refresh",
        action="store_true",
        help="Re-extract documentation even if it is cached",
    )
    p.add_argument(
        "--cache-dir",
        default=None,
        help="Cache root (default: $PKGDOC_CACHE_DIR or ~/.pkgdoc_cache)",
    )
    p.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="MCP transport: stdio (default, for Claude Desktop) or sse (HTTP)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    return p.parse_args(argv)


def main(argv: list | None = None) -> None:
    """
    CLI entry point for the pkgdoc MCP server.

    Loads (extracting on a cache miss) the requested package and starts the
    MCP server using the requested transport (stdio for Claude Desktop, sse
    for HTTP clients).
    """
    args = _parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        settings = load_settings()
        cache_dir = Path(args.cache_dir).expanduser() if args.cache_dir else settings.cache_dir
        cache = CacheManager(cache_dir)
        with PypiClient(settings.pypi_url, timeout=settings.timeout) as client:
            extractor = DocExtractor(cache, client=client)
            doc = extractor.get_package(args.package, args.version, force_refresh=args.refresh)
    except PkgDocError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    engine = QueryEngine(doc)
    stats = engine.stats()
    print(
        f"pkgdoc MCP server starting\n"
        f"  package  : {doc.name}@{doc.version}\n"
        f"  cache    : {cache.root}\n"
        f"  libraries: {stats['libraries']}\n"
        f"  classes  : {stats['classes']}\n"
        f"  transport: {args.transport}",
        file=sys.stderr,
    )

    set_engine(engine)
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()

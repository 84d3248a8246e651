#!/usr/bin/env python3
"""
pkgdoc_query.py

CLI entry point: search or look up declarations in cached documentation.

Works offline against the docs tier; run ``pkgdoc extract`` first.
"""

from __future__ import annotations

import argparse
import sys

from pkgdoc.cache import CacheManager
from pkgdoc.config import resolve_cache_dir
from pkgdoc.errors import PkgDocError
from pkgdoc.logging import configure_logging
from pkgdoc.query import LOOKUP_KINDS, NotFound, QueryEngine
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


def _parse_args(argv: list | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pkgdoc query",
        description="Query cached package documentation.",
    )
    p.add_argument("package", help="Package name")
    p.add_argument(
        "--version",
        default=None,
        help="Cached version (default: the only cached version of the package)",
    )
    what = p.add_mutually_exclusive_group(required=True)
    what.add_argument("--search", metavar="QUERY", help="Keyword search")
    what.add_argument("--class", dest="class_name", metavar="NAME", help="Show a class")
    what.add_argument("--function", metavar="NAME", help="Show a top-level function")
    what.add_argument("--enum", metavar="NAME", help="Show an enum")
    what.add_argument("--library", metavar="NAME", help="Show a library")
    what.add_argument("--methods", metavar="CLASS", help="Show the methods of a class")
    what.add_argument("--list", choices=LOOKUP_KINDS, help="List names of one kind")
    what.add_argument("--info", action="store_true", help="Show package info and statistics")
    p.add_argument("--limit", type=int, default=10, help="Maximum search results (default: 10)")
    p.add_argument("--cache-dir", default=None, help="Cache root (default: ~/.pkgdoc_cache)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _pick_version(cache: CacheManager, name: str) -> str | None:
    versions = [v for n, v in cache.list_cached() if n == name]
    if len(versions) == 1:
        return versions[0]
    if versions:
        print(
            f"error: several versions of {name} are cached ({', '.join(versions)}); "
            "pass --version",
            file=sys.stderr,
        )
    else:
        print(f"error: {name} is not cached; run 'pkgdoc extract {name}' first", file=sys.stderr)
    return None


def render(engine: QueryEngine, args: argparse.Namespace) -> str:
    """
    Run the requested query.

    :raises LookupError: When a lookup matches nothing (message is the not-found text).
    """
    if args.search is not None:
        return format_search(args.search, engine.search(args.search, args.limit))
    if args.list is not None:
        return format_names(args.list, engine.list_names(args.list))
    if args.info:
        return format_package_info(engine.package_info())

    if args.class_name is not None:
        result, fmt = engine.get_class(args.class_name), format_class
    elif args.function is not None:
        result, fmt = engine.get_function(args.function), format_function
    elif args.enum is not None:
        result, fmt = engine.get_enum(args.enum), format_enum
    elif args.library is not None:
        result, fmt = engine.get_library(args.library), format_library
    else:
        result = engine.get_methods(args.methods)
        if isinstance(result, NotFound):
            raise LookupError(result.message)
        return format_methods(args.methods, result.value)

    if isinstance(result, NotFound):
        raise LookupError(result.message)
    return fmt(result.value)


def main(argv: list | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        cache = CacheManager(resolve_cache_dir(args.cache_dir))
        version = args.version or _pick_version(cache, args.package)
        if version is None:
            return 1
        doc = cache.load(args.package, version)
    except PkgDocError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if doc is None:
        print(
            f"error: {args.package}@{version} is not cached; "
            f"run 'pkgdoc extract {args.package} --version {version}' first",
            file=sys.stderr,
        )
        return 1

    try:
        text = render(QueryEngine(doc), args)
    except LookupError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(text, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())

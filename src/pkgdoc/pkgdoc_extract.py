#!/usr/bin/env python3
"""
pkgdoc_extract.py

CLI entry point: registry (or local tree) → analysis → cached documentation.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pkgdoc.cache import CacheManager
from pkgdoc.client import PypiClient
from pkgdoc.config import load_settings, resolve_cache_dir
from pkgdoc.errors import PkgDocError
from pkgdoc.extractor import DocExtractor
from pkgdoc.logging import configure_logging
from pkgdoc.query import QueryEngine


def _parse_args(argv: list | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pkgdoc extract",
        description="Extract API documentation for a package and store it in the cache.",
    )
    p.add_argument("package", help="Package name")
    p.add_argument("--version", default=None, help="Package version (default: latest)")
    p.add_argument(
        "--refresh", action="store_true", help="Re-extract even if already cached"
    )
    p.add_argument(
        "--local",
        type=Path,
        default=None,
        help="Document this local source tree instead of downloading (requires --version)",
    )
    p.add_argument("--cache-dir", default=None, help="Cache root (default: ~/.pkgdoc_cache)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(verbose=args.verbose)

    if args.local is not None and not args.version:
        print("error: --local requires --version", file=sys.stderr)
        return 2

    print(f"Extracting documentation for {args.package}...")
    try:
        settings = load_settings()
        cache = CacheManager(resolve_cache_dir(args.cache_dir))
        with PypiClient(settings.pypi_url, timeout=settings.timeout) as client:
            extractor = DocExtractor(cache, client=client)
            if args.local is not None:
                doc = extractor.extract_local(args.local, args.package, args.version)
            else:
                doc = extractor.get_package(
                    args.package, args.version, force_refresh=args.refresh
                )
    except PkgDocError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    stats = QueryEngine(doc).stats()
    print(f"Extracted {doc.name}@{doc.version}")
    print(f"  Libraries: {stats['libraries']}")
    print(f"  Classes: {stats['classes']}")
    print(f"  Functions: {stats['functions']}")
    print(f"  Enums: {stats['enums']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

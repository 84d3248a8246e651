#!/usr/bin/env python3
"""
pkgdoc_list.py

CLI entry point: list cached package documentation.
"""

from __future__ import annotations

import argparse
import sys

from pkgdoc.cache import CacheManager
from pkgdoc.config import resolve_cache_dir
from pkgdoc.errors import PkgDocError
from pkgdoc.logging import configure_logging


def main(argv: list | None = None) -> int:
    p = argparse.ArgumentParser(prog="pkgdoc list", description="List cached packages.")
    p.add_argument("--cache-dir", default=None, help="Cache root (default: ~/.pkgdoc_cache)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = p.parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        cached = CacheManager(resolve_cache_dir(args.cache_dir)).list_cached()
    except PkgDocError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if not cached:
        print("No cached packages.")
        return 0

    print("Cached packages:")
    for name, version in cached:
        print(f"  {name}@{version}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

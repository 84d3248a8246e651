#!/usr/bin/env python3
"""
pkgdoc_clean.py

CLI entry point: remove cached artifacts.

    pkgdoc clean NAME --version V   one version (all tiers)
    pkgdoc clean NAME               every cached version of NAME
    pkgdoc clean --all              the whole cache
"""

from __future__ import annotations

import argparse
import sys

from pkgdoc.cache import CacheManager
from pkgdoc.config import resolve_cache_dir
from pkgdoc.errors import PkgDocError
from pkgdoc.logging import configure_logging


def main(argv: list | None = None) -> int:
    p = argparse.ArgumentParser(prog="pkgdoc clean", description="Remove cached packages.")
    p.add_argument("package", nargs="?", default=None, help="Package name")
    p.add_argument("--version", default=None, help="Specific version to remove")
    p.add_argument("--all", action="store_true", help="Remove all cached packages")
    p.add_argument("--cache-dir", default=None, help="Cache root (default: ~/.pkgdoc_cache)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = p.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if not args.all and not args.package:
        p.print_usage(sys.stderr)
        print("error: give a package name or --all", file=sys.stderr)
        return 2

    try:
        cache = CacheManager(resolve_cache_dir(args.cache_dir))
        if args.all:
            cache.evict_everything()
            print("Cleared all cached packages.")
        elif args.version:
            cache.evict(args.package, args.version)
            print(f"Cleared {args.package}@{args.version}")
        else:
            count = cache.evict_all(args.package)
            print(f"Cleared all versions of {args.package} ({count})")
    except PkgDocError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

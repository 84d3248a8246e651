"""Dispatcher for ``python -m pkgdoc <subcommand> [args…]``.

Subcommands
-----------
extract     Extract documentation for a package into the cache
list        List cached packages
clean       Remove cached packages
query       Search or look up declarations in a cached package
serve       Start the MCP server for one package
"""

import importlib
import sys

_COMMANDS: dict[str, str] = {
    "extract": "pkgdoc.pkgdoc_extract",
    "list": "pkgdoc.pkgdoc_list",
    "clean": "pkgdoc.pkgdoc_clean",
    "query": "pkgdoc.pkgdoc_query",
    "serve": "pkgdoc.mcp_server",
}

_HELP = """\
usage: pkgdoc <subcommand> [options]

subcommands:
  extract     Extract documentation for a package into the cache
  list        List cached packages
  clean       Remove cached packages
  query       Search or look up declarations in a cached package
  serve       Start the MCP server for one package

Run  pkgdoc <subcommand> --help  for per-command options.
"""


def main(argv: list | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args or args[0] in ("-h", "--help"):
        print(_HELP, end="")
        return 0

    subcommand = args[0]
    if subcommand not in _COMMANDS:
        print(f"error: unknown subcommand '{subcommand}'\n", file=sys.stderr)
        print(_HELP, end="", file=sys.stderr)
        return 1

    mod = importlib.import_module(_COMMANDS[subcommand])
    return mod.main(args[1:]) or 0


if __name__ == "__main__":
    sys.exit(main())

"""
render.py

Plain-text rendering of documentation for transports (MCP tools, CLI).

Every function returns a single string with ``\\n`` line endings and no
trailing blank lines.
"""

from __future__ import annotations

from collections.abc import Sequence

from pkgdoc.model import (
    ClassDeclaration,
    EnumDeclaration,
    FunctionDeclaration,
    LibraryUnit,
    Method,
)
from pkgdoc.query import SearchHit

# Empty-list messages, keyed by lookup kind.
EMPTY_LIST_MESSAGES = {
    "class": "No classes found",
    "function": "No top-level functions found",
    "enum": "No enums found",
    "library": "No libraries found",
    "mixin": "No mixins found",
    "extension": "No extensions found",
    "typedef": "No typedefs found",
    "variable": "No variables found",
}


def _finish(lines: list[str]) -> str:
    return "\n".join(lines).rstrip() + "\n"


def format_class(cls: ClassDeclaration) -> str:
    """Header, supertypes, description, then constructors / fields / methods."""
    lines = [f"{'abstract ' if cls.is_abstract else ''}class {cls.name}"]
    if cls.superclass:
        lines.append(f"  extends {cls.superclass}")
    if cls.interfaces:
        lines.append(f"  implements {', '.join(cls.interfaces)}")
    if cls.mixins:
        lines.append(f"  with {', '.join(cls.mixins)}")
    lines.append("")

    if cls.description:
        lines += [cls.description, ""]

    if cls.constructors:
        lines.append("Constructors:")
        lines += [f"  {c.signature}" for c in cls.constructors]
        lines.append("")

    if cls.fields:
        lines.append("Fields:")
        lines += [f"  {f.signature}" for f in cls.fields]
        lines.append("")

    if cls.methods:
        lines.append("Methods:")
        lines += [f"  {m.signature}" for m in cls.methods]

    return _finish(lines)


def format_function(func: FunctionDeclaration) -> str:
    lines = [func.signature, ""]
    if func.description:
        lines.append(func.description)
    return _finish(lines)


def format_enum(enum: EnumDeclaration) -> str:
    lines = [f"enum {enum.name}", ""]
    if enum.description:
        lines += [enum.description, ""]
    lines.append("Values:")
    for value in enum.values:
        suffix = f" - {value.description}" if value.description else ""
        lines.append(f"  {value.name}{suffix}")
    if enum.methods:
        lines += ["", "Methods:"]
        lines += [f"  {m.signature}" for m in enum.methods]
    return _finish(lines)


def format_library(lib: LibraryUnit) -> str:
    """One line per non-empty declaration kind, names comma-separated."""
    lines = [f"library {lib.name}", ""]
    if lib.description:
        lines += [lib.description, ""]
    for label, decls in (
        ("Classes", lib.classes),
        ("Functions", lib.functions),
        ("Enums", lib.enums),
        ("Mixins", lib.mixins),
        ("Extensions", lib.extensions),
        ("Typedefs", lib.typedefs),
        ("Variables", lib.variables),
    ):
        if decls:
            lines.append(f"{label}: {', '.join(d.name for d in decls)}")
    return _finish(lines)


def format_methods(class_name: str, methods: Sequence[Method]) -> str:
    """Each method as its signature followed by an indented description."""
    if not methods:
        return f"{class_name} has no methods\n"
    blocks = [f"{m.signature}\n  {m.description or ''}".rstrip() for m in methods]
    return "\n\n".join(blocks) + "\n"


def format_search(query: str, hits: Sequence[SearchHit]) -> str:
    if not hits:
        return f'No results found for "{query}"\n'
    lines = []
    for hit in hits:
        suffix = f" - {hit.description}" if hit.description else ""
        lines.append(f"{hit.kind}: {hit.name}{suffix}")
    return _finish(lines)


def format_names(kind: str, names: Sequence[str]) -> str:
    if not names:
        return EMPTY_LIST_MESSAGES.get(kind, f"No {kind} entries found") + "\n"
    return "\n".join(names) + "\n"


def format_package_info(info: dict) -> str:
    """
    Render :meth:`pkgdoc.query.QueryEngine.package_info` output.

    :param info: dict with ``name``, ``version``, optional metadata and ``stats``.
    """
    lines = [f"Package: {info['name']}", f"Version: {info['version']}"]
    for label, key in (("Description", "description"), ("Homepage", "homepage"), ("Repository", "repository")):
        if info.get(key):
            lines.append(f"{label}: {info[key]}")
    stats = info.get("stats", {})
    lines += [
        "",
        "Statistics:",
        f"  Libraries: {stats.get('libraries', 0)}",
        f"  Classes: {stats.get('classes', 0)}",
        f"  Functions: {stats.get('functions', 0)}",
        f"  Enums: {stats.get('enums', 0)}",
    ]
    return _finish(lines)


__all__ = [
    "format_class",
    "format_function",
    "format_enum",
    "format_library",
    "format_methods",
    "format_search",
    "format_names",
    "format_package_info",
]

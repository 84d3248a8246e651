"""
analysis.py

Contract between pkgdoc and a static-analysis capability.

An :class:`Analyzer` turns one source file into a flat-ish list of
:class:`RawDeclaration` records.  Records are deliberately loose: they mirror
what a parser sees (every name, private or not, plus any synthesized
accessors) and leave filtering, deduplication and doc cleaning to
:class:`pkgdoc.normalizer.Normalizer`.

Kinds
-----
Top level: ``class``, ``mixin``, ``extension``, ``enum``, ``function``,
``typedef``, ``variable``.  A ``library`` record (usually unnamed) carries
the file's own documentation.

Members (inside :attr:`RawDeclaration.members`): ``constructor``, ``method``,
``field``, ``enum_value``.

Modifiers
---------
``static``, ``abstract``, ``const``, ``final``, ``late``, ``operator``,
``getter``, ``setter``, ``factory``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

TOP_LEVEL_KINDS = frozenset(
    {"class", "mixin", "extension", "enum", "function", "typedef", "variable"}
)
LIBRARY_KIND = "library"
MEMBER_KINDS = frozenset({"constructor", "method", "field", "enum_value"})
MODIFIERS = frozenset(
    {"static", "abstract", "const", "final", "late", "operator", "getter", "setter", "factory"}
)

# Directories never searched for sources.
SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".tox",
        ".nox",
        ".venv",
        "venv",
        "env",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        "build",
        "dist",
        "node_modules",
        "site-packages",
        "tests",
        "test",
        "testing",
        "docs",
        "doc",
        "examples",
        "benchmarks",
    }
)

# Build and tooling scripts that are not part of a package's interface.
SKIP_FILES = frozenset({"setup.py", "conftest.py", "noxfile.py", "fabfile.py", "manage.py"})


@dataclass(frozen=True)
class RawParameter:
    """
    A formal parameter as reported by the analyzer.

    :param required: ``None`` when the analyzer has no opinion; the normalizer
                     then infers it from ``named`` and ``default``.
    """

    name: str
    type: str | None = None
    named: bool = False
    required: bool | None = None
    default: str | None = None


@dataclass(frozen=True)
class RawDeclaration:
    """
    One declaration record produced by an :class:`Analyzer`.

    :param kind: Kind tag (see module docstring).
    :param name: Declared name; ``None`` or empty for anonymous declarations.
    :param documentation: Raw documentation text, comment markers included.
    :param type: Type or return-type display text.
    :param modifiers: Modifier flags.
    :param parameters: Ordered formal parameters (callables only).
    :param type_parameters: Type-parameter names.
    :param supertype: Superclass (class) or extended type (extension).
    :param interfaces: Implemented interfaces.
    :param mixins: Applied behaviours for classes; ``on`` constraints for mixins.
    :param members: Nested member records for type declarations.
    """

    kind: str
    name: str | None
    documentation: str | None = None
    type: str | None = None
    modifiers: frozenset[str] = frozenset()
    parameters: tuple[RawParameter, ...] = ()
    type_parameters: tuple[str, ...] = ()
    supertype: str | None = None
    interfaces: tuple[str, ...] = ()
    mixins: tuple[str, ...] = ()
    members: tuple[RawDeclaration, ...] = ()

    def has(self, modifier: str) -> bool:
        return modifier in self.modifiers


class Analyzer:
    """
    Base class for static-analysis capabilities.

    Subclasses implement :meth:`analyze`; :meth:`discover` may be overridden
    to change which files of a source tree are considered.
    """

    #: File suffixes :meth:`discover` collects.
    suffixes: tuple[str, ...] = ()

    def analyze(self, path: Path) -> list[RawDeclaration]:
        """
        Return the declarations of one source file.

        :param path: File to analyse.
        :raises AnalysisUnresolvable: If the file cannot be analysed.
        """
        raise NotImplementedError

    def discover(self, root: Path) -> list[Path]:
        """
        Enumerate candidate source files under ``root``, sorted by relative path.

        Hidden directories, :data:`SKIP_DIRS` and :data:`SKIP_FILES` are skipped.
        """
        root = Path(root)
        found: list[Path] = []
        for dirpath, dirs, files in os.walk(root):
            dirs[:] = [d for d in dirs if d not in SKIP_DIRS and not d.startswith(".")]
            for f in files:
                if f.endswith(self.suffixes) and not f.startswith(".") and f not in SKIP_FILES:
                    found.append(Path(dirpath) / f)
        return sorted(found, key=lambda p: p.relative_to(root).as_posix())

"""
normalizer.py

Normalizer: converts analyzer output into the documentation model.

For each source file the analyzer's records are walked in order and:

1. unnamed and private (leading ``_``) declarations are dropped, members
   included;
2. names are deduplicated per namespace: the first occurrence wins, except
   that a getter and a setter of the same name are both kept;
3. parameters are classified positional / named and required / optional,
   default text carried verbatim;
4. documentation text is cleaned of comment markers and blank lines;
5. each declaration lands in the typed list of its :class:`LibraryUnit`.

A file the analyzer cannot resolve is logged and skipped.  If no file yields
any declaration the whole extraction fails with
:class:`~pkgdoc.errors.NoDeclarationsError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from pathlib import Path, PurePosixPath

from pkgdoc.analysis import LIBRARY_KIND, Analyzer, RawDeclaration, RawParameter
from pkgdoc.errors import AnalysisUnresolvable, NoDeclarationsError
from pkgdoc.logging import get_logger
from pkgdoc.model import (
    DYNAMIC,
    ClassDeclaration,
    Constructor,
    EnumDeclaration,
    EnumValue,
    ExtensionDeclaration,
    Field,
    FunctionDeclaration,
    LibraryUnit,
    Method,
    MixinDeclaration,
    PackageDocument,
    Parameter,
    TypeAliasDeclaration,
    VariableDeclaration,
)

log = get_logger("normalizer")

PRIVACY_MARKER = "_"
ACCESSOR_ROLES = ("getter", "setter")

# Leading path components that are layout, not part of the library name.
_LAYOUT_DIRS = frozenset({"src", "lib"})


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def is_private(name: str) -> bool:
    """True if the (last dotted segment of the) name carries the privacy marker."""
    return name.rpartition(".")[2].startswith(PRIVACY_MARKER)


def clean_documentation(text: str | None) -> str | None:
    """
    Strip comment markers, trim every line and drop blank lines.

    ``///`` line markers and ``/** ... */`` block delimiters are removed;
    inside a block comment the leading ``*`` of each line is removed too.

    :param text: Raw documentation text as attached by the analyzer.
    :return: Cleaned multi-line text, or ``None`` if nothing remains.
    """
    if not text:
        return None
    in_block = text.lstrip().startswith("/*")
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("///"):
            line = line[3:]
        elif line.startswith("/**"):
            line = line[3:]
        if line.endswith("*/"):
            line = line[:-2]
        line = line.strip()
        if in_block and line.startswith("*"):
            line = line[1:].strip()
        if line:
            lines.append(line)
    return "\n".join(lines) or None


def library_name(path: Path, root: Path) -> str:
    """
    Derive a library name from a file path.

    ``root/src/pkg/sub/mod.py`` → ``pkg.sub.mod``;
    ``root/pkg/__init__.py`` → ``pkg``.  Deterministic for a given
    ``(path, root)``.  Distinct files may share a name (``root/foo.py`` and
    ``root/lib/foo.py``); :meth:`Normalizer.normalize` renames the later one.
    """
    try:
        rel = PurePosixPath(Path(path).relative_to(root).as_posix())
    except ValueError:
        rel = PurePosixPath(Path(path).name)
    parts = list(rel.with_suffix("").parts)
    if len(parts) > 1 and parts[0] in _LAYOUT_DIRS:
        parts = parts[1:]
    if len(parts) > 1 and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def _role(record: RawDeclaration) -> str | None:
    for role in ACCESSOR_ROLES:
        if record.has(role):
            return role
    return None


class _Namespace:
    """
    First-wins name registry.

    A later record with a taken name is admitted only when it is an accessor
    and every earlier record of that name is the opposite accessor.
    """

    def __init__(self) -> None:
        self._roles: dict[str, list[str | None]] = {}

    def admit(self, name: str, role: str | None) -> bool:
        roles = self._roles.get(name)
        if roles is None:
            self._roles[name] = [role]
            return True
        if role is not None and all(r is not None and r != role for r in roles):
            roles.append(role)
            return True
        return False


def _visible(records: Iterable[RawDeclaration]) -> list[RawDeclaration]:
    """Apply the privacy filter and per-namespace deduplication."""
    seen = _Namespace()
    kept = []
    for rec in records:
        if not rec.name:
            continue
        if is_private(rec.name):
            continue
        if not seen.admit(rec.name, _role(rec)):
            log.debug("dropping duplicate %s %r", rec.kind, rec.name)
            continue
        kept.append(rec)
    return kept


def convert_parameter(raw: RawParameter) -> Parameter:
    """
    Classify one parameter.

    When the analyzer gives no ``required`` flag, a positional parameter is
    required iff it has no default and a named one is optional.  A positional
    parameter with a default is always optional.
    """
    required = raw.required
    if required is None:
        required = not raw.named and raw.default is None
    if not raw.named and raw.default is not None:
        required = False
    return Parameter(
        name=raw.name,
        type=raw.type or DYNAMIC,
        named=raw.named,
        required=required,
        default=raw.default,
    )


def _params(raw: RawDeclaration) -> tuple[Parameter, ...]:
    return tuple(convert_parameter(p) for p in raw.parameters)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


def _constructor(rec: RawDeclaration) -> Constructor:
    return Constructor(
        name=rec.name or "",
        description=clean_documentation(rec.documentation),
        parameters=_params(rec),
        is_const=rec.has("const"),
        is_factory=rec.has("factory"),
    )


def _method(rec: RawDeclaration) -> Method:
    return Method(
        name=rec.name or "",
        description=clean_documentation(rec.documentation),
        return_type=rec.type or DYNAMIC,
        parameters=_params(rec),
        type_parameters=rec.type_parameters,
        is_static=rec.has("static"),
        is_abstract=rec.has("abstract"),
        is_operator=rec.has("operator"),
        is_getter=rec.has("getter"),
        is_setter=rec.has("setter") and not rec.has("getter"),
    )


def _field(rec: RawDeclaration) -> Field:
    return Field(
        name=rec.name or "",
        description=clean_documentation(rec.documentation),
        type=rec.type or DYNAMIC,
        is_static=rec.has("static"),
        is_final=rec.has("final"),
        is_const=rec.has("const"),
        is_late=rec.has("late"),
    )


class _Members:
    """Typed member lists of one type declaration."""

    def __init__(self, owner: RawDeclaration) -> None:
        self.constructors: list[Constructor] = []
        self.methods: list[Method] = []
        self.fields: list[Field] = []
        self.values: list[EnumValue] = []
        for rec in _visible(owner.members):
            if rec.kind == "constructor":
                self.constructors.append(_constructor(rec))
            elif rec.kind == "method":
                self.methods.append(_method(rec))
            elif rec.kind == "field":
                self.fields.append(_field(rec))
            elif rec.kind == "enum_value":
                self.values.append(
                    EnumValue(name=rec.name or "", description=clean_documentation(rec.documentation))
                )
            else:
                log.debug("ignoring %s member %r of %r", rec.kind, rec.name, owner.name)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


class Normalizer:
    """
    Builds :class:`PackageDocument` instances from analyzer output.

    Example::

        normalizer = Normalizer(PythonAnalyzer())
        files = normalizer.analyzer.discover(root)
        doc = normalizer.normalize("requests", "2.32.3", files, root=root)

    :param analyzer: Analysis capability used by :meth:`normalize`.
    """

    def __init__(self, analyzer: Analyzer | None = None) -> None:
        self.analyzer = analyzer

    def normalize(
        self,
        name: str,
        version: str,
        files: Sequence[Path],
        *,
        root: Path,
        description: str | None = None,
        repository: str | None = None,
        homepage: str | None = None,
    ) -> PackageDocument:
        """
        Analyse every file in order and assemble the package document.

        :param name: Package name.
        :param version: Package version.
        :param files: Source files, in the order libraries should appear.
        :param root: Source root used to derive library names.
        :return: The normalized document.
        :raises NoDeclarationsError: If no file yields any public declaration.
        """
        if self.analyzer is None:
            raise ValueError("Normalizer.normalize() requires an analyzer")

        libraries: list[LibraryUnit] = []
        seen: set[str] = set()
        skipped = 0
        for path in files:
            try:
                records = self.analyzer.analyze(path)
            except AnalysisUnresolvable as exc:
                skipped += 1
                log.warning("Skipping %s: %s", exc.path, exc.reason)
                continue
            unit = self.normalize_library(path, records, root)
            if unit is None:
                continue
            if unit.name in seen:
                renamed = _relative(path, root)
                log.warning("Library name %r already taken; using %r", unit.name, renamed)
                unit = replace(unit, name=renamed)
            seen.add(unit.name)
            libraries.append(unit)

        if not libraries:
            raise NoDeclarationsError(name, version)

        log.info(
            "Normalized %s@%s: %d libraries from %d files (%d skipped)",
            name,
            version,
            len(libraries),
            len(files),
            skipped,
        )
        return PackageDocument(
            name=name,
            version=version,
            description=description,
            repository=repository,
            homepage=homepage,
            libraries=tuple(libraries),
        )

    def normalize_library(
        self, path: Path, records: Sequence[RawDeclaration], root: Path
    ) -> LibraryUnit | None:
        """
        Convert one file's records into a :class:`LibraryUnit`.

        :return: The unit, or ``None`` if every record filtered away.
        """
        description: str | None = None
        buckets: dict[str, list] = {
            "classes": [],
            "functions": [],
            "enums": [],
            "typedefs": [],
            "extensions": [],
            "mixins": [],
            "variables": [],
        }

        for rec in records:
            if rec.kind == LIBRARY_KIND and description is None:
                description = clean_documentation(rec.documentation)

        for rec in _visible(r for r in records if r.kind != LIBRARY_KIND):
            converted = self._declaration(rec)
            if converted is None:
                log.debug("ignoring unknown kind %r for %r in %s", rec.kind, rec.name, path)
                continue
            bucket, decl = converted
            buckets[bucket].append(decl)

        unit = LibraryUnit(
            name=library_name(path, root),
            path=_relative(path, root),
            description=description,
            **{k: tuple(v) for k, v in buckets.items()},
        )
        if unit.is_empty():
            return None
        return unit

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _declaration(self, rec: RawDeclaration) -> tuple[str, object] | None:
        name = rec.name or ""
        doc = clean_documentation(rec.documentation)

        if rec.kind == "class":
            m = _Members(rec)
            return "classes", ClassDeclaration(
                name=name,
                description=doc,
                is_abstract=rec.has("abstract"),
                superclass=rec.supertype,
                interfaces=rec.interfaces,
                mixins=rec.mixins,
                type_parameters=rec.type_parameters,
                constructors=tuple(m.constructors),
                methods=tuple(m.methods),
                fields=tuple(m.fields),
            )
        if rec.kind == "mixin":
            m = _Members(rec)
            return "mixins", MixinDeclaration(
                name=name,
                description=doc,
                superclass_constraints=rec.mixins,
                interfaces=rec.interfaces,
                type_parameters=rec.type_parameters,
                methods=tuple(m.methods),
                fields=tuple(m.fields),
            )
        if rec.kind == "extension":
            m = _Members(rec)
            return "extensions", ExtensionDeclaration(
                name=name,
                description=doc,
                on_type=rec.supertype or rec.type or DYNAMIC,
                type_parameters=rec.type_parameters,
                methods=tuple(m.methods),
                fields=tuple(m.fields),
            )
        if rec.kind == "enum":
            m = _Members(rec)
            return "enums", EnumDeclaration(
                name=name,
                description=doc,
                values=tuple(m.values),
                methods=tuple(m.methods),
                fields=tuple(m.fields),
            )
        if rec.kind == "function":
            return "functions", FunctionDeclaration(
                name=name,
                description=doc,
                return_type=rec.type or DYNAMIC,
                parameters=_params(rec),
                type_parameters=rec.type_parameters,
                is_getter=rec.has("getter"),
                is_setter=rec.has("setter") and not rec.has("getter"),
            )
        if rec.kind == "typedef":
            return "typedefs", TypeAliasDeclaration(
                name=name,
                description=doc,
                type=rec.type or DYNAMIC,
                type_parameters=rec.type_parameters,
            )
        if rec.kind == "variable":
            return "variables", VariableDeclaration(
                name=name,
                description=doc,
                type=rec.type or DYNAMIC,
                is_const=rec.has("const"),
                is_final=rec.has("final"),
            )
        return None


def _relative(path: Path, root: Path) -> str:
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return Path(path).as_posix()

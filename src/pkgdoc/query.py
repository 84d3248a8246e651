"""
query.py

QueryEngine: read-only search and lookup over one PackageDocument.

Search
------
Classes, functions and enums are scored against the query (case-insensitive)
and the weights of every matching rule are summed::

    exact name match         100
    name starts with query    50
    name contains query       25
    description contains      10

Zero-score declarations are dropped; results are sorted by descending score,
ties keeping discovery order (classes, then functions, then enums, each in
library order).

Lookup
------
Every by-name lookup returns :class:`Found` or :class:`NotFound`; callers
never see ``None`` or an exception for a missing name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pkgdoc.model import ClassDeclaration, Method, PackageDocument

T = TypeVar("T")

EXACT_SCORE = 100
PREFIX_SCORE = 50
CONTAINS_SCORE = 25
DESCRIPTION_SCORE = 10

#: Kinds accepted by :meth:`QueryEngine.get_by_name` and :meth:`QueryEngine.list_names`.
LOOKUP_KINDS: tuple[str, ...] = (
    "class",
    "function",
    "enum",
    "mixin",
    "extension",
    "typedef",
    "variable",
    "library",
)

SEARCH_KINDS: tuple[str, ...] = ("class", "function", "enum")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchHit:
    """One ranked search result."""

    kind: str
    name: str
    description: str | None
    score: int

    def to_dict(self) -> dict:
        out = {"kind": self.kind, "name": self.name, "score": self.score}
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class Found(Generic[T]):
    """A successful lookup."""

    value: T

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """A lookup that matched nothing."""

    kind: str
    name: str

    def __bool__(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"{self.kind.capitalize()} not found: {self.name}"


Lookup = Found | NotFound


def score(name: str, description: str | None, query: str) -> int:
    """
    Relevance of one declaration for a lower-cased query.

    :param name: Declaration name.
    :param description: Declaration documentation, if any.
    :param query: Query text, already lower-cased.
    """
    lowered = name.lower()
    total = 0
    if lowered == query:
        total += EXACT_SCORE
    if lowered.startswith(query):
        total += PREFIX_SCORE
    if query in lowered:
        total += CONTAINS_SCORE
    if description and query in description.lower():
        total += DESCRIPTION_SCORE
    return total


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class QueryEngine:
    """
    Answers queries against a loaded document without mutating it.

    Example::

        engine = QueryEngine(cache.load("requests", "2.32.3"))
        for hit in engine.search("session"):
            print(hit.kind, hit.name, hit.score)

    :param doc: The document to query.
    """

    def __init__(self, doc: PackageDocument) -> None:
        self.doc = doc

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = 10) -> list[SearchHit]:
        """
        Ranked keyword search over classes, functions and enums.

        :param query: Search text; blank queries match nothing.
        :param limit: Maximum number of hits; ``<= 0`` returns nothing.
        :return: Hits sorted by descending score (stable).
        """
        if not query.strip() or limit <= 0:
            return []
        needle = query.lower()

        hits: list[SearchHit] = []
        for kind in SEARCH_KINDS:
            for decl in self.doc.all_of_kind(kind):
                s = score(decl.name, decl.description, needle)
                if s > 0:
                    hits.append(SearchHit(kind, decl.name, decl.description, s))

        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _candidates(self, kind: str) -> list:
        if kind == "library":
            return list(self.doc.libraries)
        if kind not in LOOKUP_KINDS:
            raise ValueError(f"unknown kind {kind!r}; expected one of {', '.join(LOOKUP_KINDS)}")
        return self.doc.all_of_kind(kind)

    def get_by_name(self, kind: str, name: str) -> Lookup:
        """
        Exact, case-sensitive lookup of a declaration of ``kind``.

        :raises ValueError: If ``kind`` is not one of :data:`LOOKUP_KINDS`.
        """
        for decl in self._candidates(kind):
            if decl.name == name:
                return Found(decl)
        return NotFound(kind, name)

    def get_class(self, name: str) -> Lookup:
        return self.get_by_name("class", name)

    def get_function(self, name: str) -> Lookup:
        return self.get_by_name("function", name)

    def get_enum(self, name: str) -> Lookup:
        return self.get_by_name("enum", name)

    def get_library(self, name: str) -> Lookup:
        return self.get_by_name("library", name)

    def get_methods(self, class_name: str) -> Lookup:
        """
        Methods of a class.

        :return: ``Found(tuple[Method, ...])`` (possibly empty) or ``NotFound``.
        """
        result = self.get_class(class_name)
        if isinstance(result, NotFound):
            return result
        cls: ClassDeclaration = result.value
        methods: tuple[Method, ...] = cls.methods
        return Found(methods)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_names(self, kind: str) -> list[str]:
        """Names of every declaration of ``kind``, in model order."""
        return [decl.name for decl in self._candidates(kind)]

    def list_classes(self) -> list[str]:
        return self.list_names("class")

    def list_functions(self) -> list[str]:
        return self.list_names("function")

    def list_enums(self) -> list[str]:
        return self.list_names("enum")

    def list_libraries(self) -> list[str]:
        return self.list_names("library")

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, int]:
        """
        Declaration counts.

        :return: dict with ``libraries``, ``classes``, ``functions``, ``enums``,
                 ``mixins``, ``extensions``, ``typedefs``, ``variables``.
        """
        doc = self.doc
        return {
            "libraries": len(doc.libraries),
            "classes": len(doc.all_classes),
            "functions": len(doc.all_functions),
            "enums": len(doc.all_enums),
            "mixins": len(doc.all_mixins),
            "extensions": len(doc.all_extensions),
            "typedefs": len(doc.all_typedefs),
            "variables": len(doc.all_variables),
        }

    def package_info(self) -> dict:
        """Identity, metadata and :meth:`stats` of the document."""
        doc = self.doc
        return {
            "name": doc.name,
            "version": doc.version,
            "description": doc.description,
            "homepage": doc.homepage,
            "repository": doc.repository,
            "stats": self.stats(),
        }

    def __repr__(self) -> str:
        return f"QueryEngine({self.doc.name}@{self.doc.version})"


__all__ = [
    "QueryEngine",
    "SearchHit",
    "Found",
    "NotFound",
    "Lookup",
    "score",
    "LOOKUP_KINDS",
    "EXACT_SCORE",
    "PREFIX_SCORE",
    "CONTAINS_SCORE",
    "DESCRIPTION_SCORE",
]

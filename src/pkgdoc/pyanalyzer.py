"""
pyanalyzer.py

PythonAnalyzer: an :class:`~pkgdoc.analysis.Analyzer` for Python sources,
built on the standard :mod:`ast` module.

Mapping
-------
- ``class`` statements become ``class`` records; ``Enum`` subclasses become
  ``enum`` records whose assignments are ``enum_value`` members.
- The first real base is the supertype, the remaining bases are applied
  behaviours (mixins).  ``Generic[...]`` / ``Protocol[...]`` contribute type
  parameters only.
- ``__init__`` is the constructor, named after the class.
- ``@property`` / ``@cached_property`` become getters, ``@x.setter`` setters,
  ``@staticmethod`` / ``@classmethod`` static methods.
- Operator dunders (``__add__``, ``__eq__``, ``__getitem__`` ...) become
  operator methods named by their symbol.  Other dunders keep their names and
  are filtered as private downstream.
- Annotated or assigned class attributes become fields (``ClassVar`` static,
  ``Final`` final); module-level ones become variables (UPPER_CASE const).
- ``X: TypeAlias = ...`` and ``type X = ...`` become typedefs.

Only the module body and class bodies are traversed (NOT ast.walk).
"""

from __future__ import annotations

import ast
from pathlib import Path

from pkgdoc.analysis import LIBRARY_KIND, Analyzer, RawDeclaration, RawParameter
from pkgdoc.errors import AnalysisUnresolvable
from pkgdoc.logging import get_logger

log = get_logger("pyanalyzer")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OPERATORS: dict[str, str] = {
    "__add__": "+",
    "__sub__": "-",
    "__mul__": "*",
    "__matmul__": "@",
    "__truediv__": "/",
    "__floordiv__": "//",
    "__mod__": "%",
    "__pow__": "**",
    "__lshift__": "<<",
    "__rshift__": ">>",
    "__and__": "&",
    "__or__": "|",
    "__xor__": "^",
    "__neg__": "unary-",
    "__pos__": "unary+",
    "__invert__": "~",
    "__lt__": "<",
    "__le__": "<=",
    "__gt__": ">",
    "__ge__": ">=",
    "__eq__": "==",
    "__ne__": "!=",
    "__getitem__": "[]",
    "__setitem__": "[]=",
    "__contains__": "in",
    "__call__": "()",
}

ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
TYPE_PARAM_BASES = frozenset({"Generic", "Protocol"})
ABSTRACT_BASES = frozenset({"ABC", "Protocol"})
IGNORED_BASES = frozenset({"object", "ABC", "Generic"})
GETTER_DECORATORS = frozenset({"property", "cached_property", "abstractproperty"})

# `type X = ...` statements (Python 3.12+).
_TYPE_ALIAS = getattr(ast, "TypeAlias", ())


# ---------------------------------------------------------------------------
# Expression helpers
# ---------------------------------------------------------------------------


def _tail(name: str) -> str:
    return name.rpartition(".")[2]


def _dotted(expr: ast.AST) -> str | None:
    """Best-effort dotted name of ``expr`` (subscripts and calls unwrapped)."""
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        left = _dotted(expr.value)
        return f"{left}.{expr.attr}" if left else expr.attr
    if isinstance(expr, ast.Call):
        return _dotted(expr.func)
    if isinstance(expr, ast.Subscript):
        return _dotted(expr.value)
    return None


def _text(expr: ast.AST | None) -> str | None:
    return ast.unparse(expr) if expr is not None else None


def _annotation(expr: ast.AST | None) -> str | None:
    # forward reference: "Box" -> Box
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return expr.value
    return _text(expr)


def _unwrap(annotation: ast.AST | None, wrapper: str) -> tuple[ast.AST | None, bool]:
    """
    Strip one ``wrapper[...]`` layer (e.g. ``ClassVar[int]`` → ``int``).

    :return: ``(inner_annotation, was_wrapped)``; a bare ``Final`` yields ``(None, True)``.
    """
    if annotation is None:
        return None, False
    name = _dotted(annotation)
    if name is None or _tail(name) != wrapper:
        return annotation, False
    if isinstance(annotation, ast.Subscript):
        return annotation.slice, True
    return None, True


def _type_param_names(node: ast.AST) -> list[str]:
    return [p.name for p in getattr(node, "type_params", None) or []]


def _subscript_names(expr: ast.Subscript) -> list[str]:
    items = expr.slice.elts if isinstance(expr.slice, ast.Tuple) else [expr.slice]
    return [ast.unparse(item) for item in items]


def _attribute_doc(body: list[ast.stmt], index: int) -> str | None:
    """Docstring convention for attributes: a bare string right after the assignment."""
    if index + 1 < len(body):
        nxt = body[index + 1]
        if (
            isinstance(nxt, ast.Expr)
            and isinstance(nxt.value, ast.Constant)
            and isinstance(nxt.value.value, str)
        ):
            return nxt.value.value
    return None


def _assigned_names(stmt: ast.stmt) -> list[str]:
    if isinstance(stmt, ast.AnnAssign):
        targets = [stmt.target]
    elif isinstance(stmt, ast.Assign):
        targets = stmt.targets
    else:
        return []
    return [t.id for t in targets if isinstance(t, ast.Name)]


def _is_typevar(value: ast.AST | None) -> bool:
    name = _dotted(value) if isinstance(value, ast.Call) else None
    return name is not None and _tail(name) in {"TypeVar", "ParamSpec", "TypeVarTuple", "NewType"}


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def _parameters(args: ast.arguments, *, skip_first: bool) -> tuple[RawParameter, ...]:
    """
    Convert an ``ast.arguments`` node.

    Positional parameters leave ``required`` unset (inferred from the default
    downstream); keyword-only parameters report it explicitly.
    """
    positional = [*args.posonlyargs, *args.args]
    defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults))
    defaults.extend(args.defaults)
    pairs = list(zip(positional, defaults))
    if skip_first and pairs:
        pairs = pairs[1:]

    params = [
        RawParameter(name=a.arg, type=_annotation(a.annotation), default=_text(d)) for a, d in pairs
    ]
    if args.vararg is not None:
        params.append(
            RawParameter(
                name=f"*{args.vararg.arg}", type=_annotation(args.vararg.annotation), required=False
            )
        )
    for a, d in zip(args.kwonlyargs, args.kw_defaults):
        params.append(
            RawParameter(
                name=a.arg,
                type=_annotation(a.annotation),
                named=True,
                required=d is None,
                default=_text(d),
            )
        )
    if args.kwarg is not None:
        params.append(
            RawParameter(
                name=f"**{args.kwarg.arg}",
                type=_annotation(args.kwarg.annotation),
                named=True,
                required=False,
            )
        )
    return tuple(params)


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


class PythonAnalyzer(Analyzer):
    """
    Static analysis of Python modules.

    Example::

        analyzer = PythonAnalyzer()
        for path in analyzer.discover(Path("requests-2.32.3")):
            records = analyzer.analyze(path)
    """

    suffixes = (".py",)

    def analyze(self, path: Path) -> list[RawDeclaration]:
        """
        Parse one module and return its declaration records.

        :param path: Python source file.
        :raises AnalysisUnresolvable: On syntax or decoding errors.
        """
        path = Path(path)
        try:
            src = path.read_text(encoding="utf-8")
            tree = ast.parse(src, filename=str(path))
        except (SyntaxError, UnicodeDecodeError, ValueError) as exc:
            raise AnalysisUnresolvable(path, f"{type(exc).__name__}: {exc}") from exc

        records: list[RawDeclaration] = []
        module_doc = ast.get_docstring(tree)
        if module_doc:
            records.append(RawDeclaration(kind=LIBRARY_KIND, name=None, documentation=module_doc))

        body = tree.body
        for i, stmt in enumerate(body):
            if isinstance(stmt, ast.ClassDef):
                records.append(self._class(stmt))
            elif isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
                records.append(self._function(stmt))
            elif isinstance(stmt, ast.AnnAssign | ast.Assign):
                records.extend(self._variables(stmt, _attribute_doc(body, i)))
            elif isinstance(stmt, _TYPE_ALIAS):
                records.append(
                    RawDeclaration(
                        kind="typedef",
                        name=stmt.name.id,
                        type=ast.unparse(stmt.value),
                        type_parameters=tuple(_type_param_names(stmt)),
                    )
                )

        log.debug("%s: %d records", path, len(records))
        return records

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def _function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> RawDeclaration:
        return RawDeclaration(
            kind="function",
            name=node.name,
            documentation=ast.get_docstring(node),
            type=_annotation(node.returns),
            parameters=_parameters(node.args, skip_first=False),
            type_parameters=tuple(_type_param_names(node)),
        )

    def _variables(self, stmt: ast.AnnAssign | ast.Assign, doc: str | None) -> list[RawDeclaration]:
        annotation = stmt.annotation if isinstance(stmt, ast.AnnAssign) else None
        if _is_typevar(stmt.value):
            return []

        alias_name = _dotted(annotation) if annotation is not None else None
        if alias_name is not None and _tail(alias_name) == "TypeAlias":
            return [
                RawDeclaration(kind="typedef", name=n, documentation=doc, type=_text(stmt.value))
                for n in _assigned_names(stmt)
            ]

        inner, is_final = _unwrap(annotation, "Final")
        out = []
        for name in _assigned_names(stmt):
            mods = set()
            if is_final:
                mods.add("final")
            if name.isupper():
                mods.add("const")
            out.append(
                RawDeclaration(
                    kind="variable",
                    name=name,
                    documentation=doc,
                    type=_annotation(inner),
                    modifiers=frozenset(mods),
                )
            )
        return out

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    def _class(self, node: ast.ClassDef) -> RawDeclaration:
        base_names = [_dotted(b) or "" for b in node.bases]
        tails = {_tail(n) for n in base_names}
        is_enum = bool(tails & ENUM_BASES)

        type_params = _type_param_names(node)
        supertypes: list[str] = []
        for base, name in zip(node.bases, base_names):
            tail = _tail(name)
            if tail in TYPE_PARAM_BASES and isinstance(base, ast.Subscript):
                type_params.extend(p for p in _subscript_names(base) if p not in type_params)
            if tail in IGNORED_BASES or tail == "Protocol":
                continue
            supertypes.append(ast.unparse(base))

        metaclass = next((kw.value for kw in node.keywords if kw.arg == "metaclass"), None)
        mods = set()
        if tails & ABSTRACT_BASES or (_dotted(metaclass) or "").endswith("ABCMeta"):
            mods.add("abstract")

        members = self._enum_members(node) if is_enum else self._members(node)
        if any(m.has("abstract") for m in members):
            mods.add("abstract")

        return RawDeclaration(
            kind="enum" if is_enum else "class",
            name=node.name,
            documentation=ast.get_docstring(node),
            modifiers=frozenset(mods),
            type_parameters=tuple(type_params),
            supertype=None if is_enum or not supertypes else supertypes[0],
            mixins=() if is_enum else tuple(supertypes[1:]),
            members=tuple(members),
        )

    def _enum_members(self, node: ast.ClassDef) -> list[RawDeclaration]:
        out: list[RawDeclaration] = []
        body = node.body
        for i, stmt in enumerate(body):
            if isinstance(stmt, ast.Assign | ast.AnnAssign) and stmt.value is not None:
                for name in _assigned_names(stmt):
                    out.append(
                        RawDeclaration(
                            kind="enum_value", name=name, documentation=_attribute_doc(body, i)
                        )
                    )
            elif isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
                out.append(self._method(stmt, node.name))
        return out

    def _members(self, node: ast.ClassDef) -> list[RawDeclaration]:
        out: list[RawDeclaration] = []
        body = node.body
        for i, stmt in enumerate(body):
            if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
                out.append(self._method(stmt, node.name))
            elif isinstance(stmt, ast.AnnAssign | ast.Assign):
                out.extend(self._fields(stmt, _attribute_doc(body, i)))
        return out

    def _fields(self, stmt: ast.AnnAssign | ast.Assign, doc: str | None) -> list[RawDeclaration]:
        annotation = stmt.annotation if isinstance(stmt, ast.AnnAssign) else None
        inner, is_static = _unwrap(annotation, "ClassVar")
        inner, is_final = _unwrap(inner, "Final")
        mods = set()
        if is_static:
            mods.add("static")
        if is_final:
            mods.add("final")
        return [
            RawDeclaration(
                kind="field",
                name=name,
                documentation=doc,
                type=_annotation(inner),
                modifiers=frozenset(mods),
            )
            for name in _assigned_names(stmt)
        ]

    def _method(self, node: ast.FunctionDef | ast.AsyncFunctionDef, class_name: str) -> RawDeclaration:
        decorators = [_dotted(d) or "" for d in node.decorator_list]
        tails = {_tail(d) for d in decorators}
        doc = ast.get_docstring(node)

        if node.name == "__init__":
            return RawDeclaration(
                kind="constructor",
                name=class_name,
                documentation=doc,
                parameters=_parameters(node.args, skip_first=True),
            )

        mods = set()
        is_static = "staticmethod" in tails
        if is_static or "classmethod" in tails:
            mods.add("static")
        if "abstractmethod" in tails:
            mods.add("abstract")

        name = node.name
        if tails & GETTER_DECORATORS:
            mods.add("getter")
        elif any(d.endswith(".setter") for d in decorators):
            mods.add("setter")
        elif name in OPERATORS:
            mods.add("operator")
            name = OPERATORS[name]

        return RawDeclaration(
            kind="method",
            name=name,
            documentation=doc,
            type=_annotation(node.returns),
            modifiers=frozenset(mods),
            parameters=_parameters(node.args, skip_first=not is_static),
            type_parameters=tuple(_type_param_names(node)),
        )

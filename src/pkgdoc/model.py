"""
model.py

Canonical documentation model for a package's public interface.

Frozen, comparable dataclasses plus the JSON codec used by the cache:

    PackageDocument -> LibraryUnit -> {Class, Mixin, Extension, Enum,
                                       Function, TypeAlias, Variable}Declaration

Serialisation contract
----------------------
* :func:`encode` omits every field equal to its default (empty sequence,
  ``False``, ``None``; ``True`` for :attr:`Parameter.required`).
* :func:`decode` restores those defaults and validates every field it reads,
  raising :class:`~pkgdoc.errors.DecodeError` on any schema mismatch.
* ``decode(encode(doc)) == doc`` for every well-formed document.

Documents are immutable: sequences are stored as tuples and lists passed to
the constructors are converted.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from pkgdoc.errors import DecodeError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DYNAMIC = "dynamic"

#: Declaration kinds in the order a LibraryUnit lists them.
DECLARATION_KINDS: tuple[str, ...] = (
    "class",
    "function",
    "enum",
    "typedef",
    "extension",
    "mixin",
    "variable",
)

_KIND_FIELDS = {
    "class": "classes",
    "function": "functions",
    "enum": "enums",
    "typedef": "typedefs",
    "extension": "extensions",
    "mixin": "mixins",
    "variable": "variables",
}

T = TypeVar("T")


def _freeze(obj: object, *names: str) -> None:
    """Convert list-valued fields of a frozen dataclass to tuples."""
    for name in names:
        value = getattr(obj, name)
        if not isinstance(value, tuple):
            object.__setattr__(obj, name, tuple(value))


def _join(location: str, key: str) -> str:
    return f"{location}.{key}" if location else key


# ---------------------------------------------------------------------------
# Strict field reader
# ---------------------------------------------------------------------------


class _Reader:
    """
    Typed access to one JSON object.

    Every accessor checks the runtime type of the value it returns and raises
    :class:`DecodeError` naming the exact field on mismatch.

    :param data: Decoded JSON value expected to be an object.
    :param location: Dotted path of ``data`` inside the document.
    """

    def __init__(self, data: object, location: str) -> None:
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {type(data).__name__}", location)
        self.data: dict[str, Any] = data
        self.location = location

    def _at(self, key: str) -> str:
        return _join(self.location, key)

    def required_str(self, key: str) -> str:
        value = self.data.get(key)
        if value is None:
            raise DecodeError("missing required field", self._at(key))
        if not isinstance(value, str):
            raise DecodeError(f"expected a string, got {type(value).__name__}", self._at(key))
        if not value:
            raise DecodeError("must not be empty", self._at(key))
        return value

    def optional_str(self, key: str, default: str | None = None) -> str | None:
        value = self.data.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise DecodeError(f"expected a string, got {type(value).__name__}", self._at(key))
        return value

    def str_or(self, key: str, default: str) -> str:
        return self.optional_str(key) or default

    def flag(self, key: str, default: bool = False) -> bool:
        value = self.data.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise DecodeError(f"expected a boolean, got {type(value).__name__}", self._at(key))
        return value

    def str_list(self, key: str) -> tuple[str, ...]:
        items = self._list(key)
        for i, item in enumerate(items):
            if not isinstance(item, str):
                raise DecodeError(
                    f"expected a string, got {type(item).__name__}", f"{self._at(key)}[{i}]"
                )
        return tuple(items)

    def objects(self, key: str, from_dict: Callable[[object, str], T]) -> tuple[T, ...]:
        items = self._list(key)
        return tuple(from_dict(item, f"{self._at(key)}[{i}]") for i, item in enumerate(items))

    def _list(self, key: str) -> list:
        value = self.data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise DecodeError(f"expected a list, got {type(value).__name__}", self._at(key))
        return value


def _compact(pairs: dict[str, Any]) -> dict[str, Any]:
    """Drop entries equal to their type default (``None``, ``False``, empty)."""
    return {k: v for k, v in pairs.items() if v is not None and v is not False and v != []}


def _dicts(items: tuple) -> list[dict]:
    return [item.to_dict() for item in items]


def _type_params(names: tuple[str, ...]) -> str:
    return f"<{', '.join(names)}>" if names else ""


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Parameter:
    """
    A formal parameter of a callable.

    :param name: Parameter name.
    :param type: Display string of the declared type.
    :param named: ``True`` for a named (keyword) parameter, ``False`` for positional.
    :param required: Whether a caller must supply it.
    :param default: Display text of the default value, if any.
    """

    name: str
    type: str = DYNAMIC
    named: bool = False
    required: bool = True
    default: str | None = None

    def __post_init__(self) -> None:
        if self.positional and self.required and self.default is not None:
            raise ValueError(f"required positional parameter {self.name!r} cannot have a default")

    @property
    def positional(self) -> bool:
        return not self.named

    @property
    def signature(self) -> str:
        prefix = "required " if self.required and self.named else ""
        suffix = f" = {self.default}" if self.default is not None else ""
        return f"{prefix}{self.type} {self.name}{suffix}"

    def to_dict(self) -> dict:
        out = {"name": self.name, "type": self.type}
        if not self.required:
            out["isRequired"] = False
        if self.named:
            out["isNamed"] = True
        if self.default is not None:
            out["defaultValue"] = self.default
        return out

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> Parameter:
        r = _Reader(data, location)
        named = r.flag("isNamed")
        required = r.flag("isRequired", True)
        default = r.optional_str("defaultValue")
        if not named and required and default is not None:
            raise DecodeError("required positional parameter cannot have a default", location)
        return cls(
            name=r.required_str("name"),
            type=r.str_or("type", DYNAMIC),
            named=named,
            required=required,
            default=default,
        )


def _param_list(parameters: tuple[Parameter, ...]) -> str:
    """Render parameters as positional, ``[optional]``, ``{named}``."""
    required = [p.signature for p in parameters if p.positional and p.required]
    optional = [p.signature for p in parameters if p.positional and not p.required]
    named = [p.signature for p in parameters if p.named]
    parts = list(required)
    if optional:
        parts.append(f"[{', '.join(optional)}]")
    if named:
        parts.append(f"{{{', '.join(named)}}}")
    return ", ".join(parts)


@dataclass(frozen=True)
class Constructor:
    """A constructor of a class (named constructors use ``Class.name``)."""

    name: str
    description: str | None = None
    parameters: tuple[Parameter, ...] = ()
    is_const: bool = False
    is_factory: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "parameters")

    @property
    def signature(self) -> str:
        prefix = "const " if self.is_const else "factory " if self.is_factory else ""
        return f"{prefix}{self.name}({_param_list(self.parameters)})"

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "parameters": _dicts(self.parameters),
                "isConst": self.is_const,
                "isFactory": self.is_factory,
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> Constructor:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            parameters=r.objects("parameters", Parameter.from_dict),
            is_const=r.flag("isConst"),
            is_factory=r.flag("isFactory"),
        )


@dataclass(frozen=True)
class Method:
    """
    A method, getter, setter or operator of a type.

    A getter and a setter sharing a name are two separate ``Method`` entries.
    """

    name: str
    description: str | None = None
    return_type: str = DYNAMIC
    parameters: tuple[Parameter, ...] = ()
    type_parameters: tuple[str, ...] = ()
    is_static: bool = False
    is_abstract: bool = False
    is_operator: bool = False
    is_getter: bool = False
    is_setter: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "parameters", "type_parameters")
        if self.is_getter and self.is_setter:
            raise ValueError(f"method {self.name!r} cannot be both getter and setter")

    @property
    def signature(self) -> str:
        static = "static " if self.is_static else ""
        if self.is_getter:
            return f"{static}{self.return_type} get {self.name}"
        if self.is_setter:
            param = self.parameters[0].signature if self.parameters else "value"
            return f"{static}set {self.name}({param})"
        op = "operator " if self.is_operator else ""
        return (
            f"{static}{self.return_type} {op}{self.name}"
            f"{_type_params(self.type_parameters)}({_param_list(self.parameters)})"
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "returnType": self.return_type,
                "parameters": _dicts(self.parameters),
                "typeParameters": list(self.type_parameters),
                "isStatic": self.is_static,
                "isAbstract": self.is_abstract,
                "isOperator": self.is_operator,
                "isGetter": self.is_getter,
                "isSetter": self.is_setter,
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> Method:
        r = _Reader(data, location)
        try:
            return cls(
                name=r.required_str("name"),
                description=r.optional_str("description"),
                return_type=r.str_or("returnType", DYNAMIC),
                parameters=r.objects("parameters", Parameter.from_dict),
                type_parameters=r.str_list("typeParameters"),
                is_static=r.flag("isStatic"),
                is_abstract=r.flag("isAbstract"),
                is_operator=r.flag("isOperator"),
                is_getter=r.flag("isGetter"),
                is_setter=r.flag("isSetter"),
            )
        except ValueError as exc:
            raise DecodeError(str(exc), location) from exc


@dataclass(frozen=True)
class Field:
    """A field (property with storage) of a type."""

    name: str
    description: str | None = None
    type: str = DYNAMIC
    is_static: bool = False
    is_final: bool = False
    is_const: bool = False
    is_late: bool = False

    @property
    def signature(self) -> str:
        mods = [
            word
            for word, on in (
                ("static", self.is_static),
                ("late", self.is_late),
                ("const", self.is_const),
                ("final", self.is_final and not self.is_const),
            )
            if on
        ]
        return " ".join([*mods, self.type, self.name])

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "type": self.type,
                "isStatic": self.is_static,
                "isFinal": self.is_final,
                "isConst": self.is_const,
                "isLate": self.is_late,
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> Field:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            type=r.str_or("type", DYNAMIC),
            is_static=r.flag("isStatic"),
            is_final=r.flag("isFinal"),
            is_const=r.flag("isConst"),
            is_late=r.flag("isLate"),
        )


# ---------------------------------------------------------------------------
# Type declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassDeclaration:
    """
    A class.

    :param superclass: Display string of the supertype (``None`` for the root type).
    :param interfaces: Implemented interfaces.
    :param mixins: Applied behaviours (mixins) in application order.
    """

    name: str
    description: str | None = None
    is_abstract: bool = False
    superclass: str | None = None
    interfaces: tuple[str, ...] = ()
    mixins: tuple[str, ...] = ()
    type_parameters: tuple[str, ...] = ()
    constructors: tuple[Constructor, ...] = ()
    methods: tuple[Method, ...] = ()
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        _freeze(
            self, "interfaces", "mixins", "type_parameters", "constructors", "methods", "fields"
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "isAbstract": self.is_abstract,
                "superclass": self.superclass,
                "interfaces": list(self.interfaces),
                "mixins": list(self.mixins),
                "typeParameters": list(self.type_parameters),
                "constructors": _dicts(self.constructors),
                "methods": _dicts(self.methods),
                "fields": _dicts(self.fields),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> ClassDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            is_abstract=r.flag("isAbstract"),
            superclass=r.optional_str("superclass"),
            interfaces=r.str_list("interfaces"),
            mixins=r.str_list("mixins"),
            type_parameters=r.str_list("typeParameters"),
            constructors=r.objects("constructors", Constructor.from_dict),
            methods=r.objects("methods", Method.from_dict),
            fields=r.objects("fields", Field.from_dict),
        )


@dataclass(frozen=True)
class MixinDeclaration:
    """A mixin; ``superclass_constraints`` lists its ``on`` types."""

    name: str
    description: str | None = None
    superclass_constraints: tuple[str, ...] = ()
    interfaces: tuple[str, ...] = ()
    type_parameters: tuple[str, ...] = ()
    methods: tuple[Method, ...] = ()
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        _freeze(
            self, "superclass_constraints", "interfaces", "type_parameters", "methods", "fields"
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "superclassConstraints": list(self.superclass_constraints),
                "interfaces": list(self.interfaces),
                "typeParameters": list(self.type_parameters),
                "methods": _dicts(self.methods),
                "fields": _dicts(self.fields),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> MixinDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            superclass_constraints=r.str_list("superclassConstraints"),
            interfaces=r.str_list("interfaces"),
            type_parameters=r.str_list("typeParameters"),
            methods=r.objects("methods", Method.from_dict),
            fields=r.objects("fields", Field.from_dict),
        )


@dataclass(frozen=True)
class ExtensionDeclaration:
    """An extension adding members to an existing type (``on_type``)."""

    name: str
    description: str | None = None
    on_type: str = DYNAMIC
    type_parameters: tuple[str, ...] = ()
    methods: tuple[Method, ...] = ()
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "type_parameters", "methods", "fields")

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "onType": self.on_type,
                "typeParameters": list(self.type_parameters),
                "methods": _dicts(self.methods),
                "fields": _dicts(self.fields),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> ExtensionDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            on_type=r.str_or("onType", DYNAMIC),
            type_parameters=r.str_list("typeParameters"),
            methods=r.objects("methods", Method.from_dict),
            fields=r.objects("fields", Field.from_dict),
        )


@dataclass(frozen=True)
class EnumValue:
    name: str
    description: str | None = None

    def to_dict(self) -> dict:
        return _compact({"name": self.name, "description": self.description})

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> EnumValue:
        r = _Reader(data, location)
        return cls(name=r.required_str("name"), description=r.optional_str("description"))


@dataclass(frozen=True)
class EnumDeclaration:
    """An enumeration; ``values`` keeps declaration order."""

    name: str
    description: str | None = None
    values: tuple[EnumValue, ...] = ()
    methods: tuple[Method, ...] = ()
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "values", "methods", "fields")

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "values": _dicts(self.values),
                "methods": _dicts(self.methods),
                "fields": _dicts(self.fields),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> EnumDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            values=r.objects("values", EnumValue.from_dict),
            methods=r.objects("methods", Method.from_dict),
            fields=r.objects("fields", Field.from_dict),
        )


# ---------------------------------------------------------------------------
# Top-level declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionDeclaration:
    """A top-level function (or top-level getter / setter)."""

    name: str
    description: str | None = None
    return_type: str = DYNAMIC
    parameters: tuple[Parameter, ...] = ()
    type_parameters: tuple[str, ...] = ()
    is_getter: bool = False
    is_setter: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "parameters", "type_parameters")
        if self.is_getter and self.is_setter:
            raise ValueError(f"function {self.name!r} cannot be both getter and setter")

    @property
    def signature(self) -> str:
        if self.is_getter:
            return f"{self.return_type} get {self.name}"
        if self.is_setter:
            param = self.parameters[0].signature if self.parameters else "value"
            return f"set {self.name}({param})"
        return (
            f"{self.return_type} {self.name}"
            f"{_type_params(self.type_parameters)}({_param_list(self.parameters)})"
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "returnType": self.return_type,
                "parameters": _dicts(self.parameters),
                "typeParameters": list(self.type_parameters),
                "isGetter": self.is_getter,
                "isSetter": self.is_setter,
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> FunctionDeclaration:
        r = _Reader(data, location)
        try:
            return cls(
                name=r.required_str("name"),
                description=r.optional_str("description"),
                return_type=r.str_or("returnType", DYNAMIC),
                parameters=r.objects("parameters", Parameter.from_dict),
                type_parameters=r.str_list("typeParameters"),
                is_getter=r.flag("isGetter"),
                is_setter=r.flag("isSetter"),
            )
        except ValueError as exc:
            raise DecodeError(str(exc), location) from exc


@dataclass(frozen=True)
class TypeAliasDeclaration:
    """A named alias for another type."""

    name: str
    description: str | None = None
    type: str = DYNAMIC
    type_parameters: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "type_parameters")

    @property
    def signature(self) -> str:
        return f"typedef {self.name}{_type_params(self.type_parameters)} = {self.type}"

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "type": self.type,
                "typeParameters": list(self.type_parameters),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> TypeAliasDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            type=r.str_or("type", DYNAMIC),
            type_parameters=r.str_list("typeParameters"),
        )


@dataclass(frozen=True)
class VariableDeclaration:
    """A top-level variable or constant."""

    name: str
    description: str | None = None
    type: str = DYNAMIC
    is_const: bool = False
    is_final: bool = False

    @property
    def signature(self) -> str:
        mod = "const " if self.is_const else "final " if self.is_final else ""
        return f"{mod}{self.type} {self.name}"

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "type": self.type,
                "isConst": self.is_const,
                "isFinal": self.is_final,
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> VariableDeclaration:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            description=r.optional_str("description"),
            type=r.str_or("type", DYNAMIC),
            is_const=r.flag("isConst"),
            is_final=r.flag("isFinal"),
        )


Declaration = (
    ClassDeclaration
    | FunctionDeclaration
    | EnumDeclaration
    | TypeAliasDeclaration
    | ExtensionDeclaration
    | MixinDeclaration
    | VariableDeclaration
)


# ---------------------------------------------------------------------------
# Library / package
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LibraryUnit:
    """
    Declarations of one source file.

    :param name: Library name, derived from ``path`` (see
                 :func:`pkgdoc.normalizer.library_name`).
    :param path: Package-relative POSIX path of the originating file.
    """

    name: str
    path: str | None = None
    description: str | None = None
    classes: tuple[ClassDeclaration, ...] = ()
    functions: tuple[FunctionDeclaration, ...] = ()
    enums: tuple[EnumDeclaration, ...] = ()
    typedefs: tuple[TypeAliasDeclaration, ...] = ()
    extensions: tuple[ExtensionDeclaration, ...] = ()
    mixins: tuple[MixinDeclaration, ...] = ()
    variables: tuple[VariableDeclaration, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, *_KIND_FIELDS.values())

    def of_kind(self, kind: str) -> tuple:
        """Return the declarations of ``kind`` (one of :data:`DECLARATION_KINDS`)."""
        try:
            return getattr(self, _KIND_FIELDS[kind])
        except KeyError:
            raise ValueError(f"unknown declaration kind: {kind!r}") from None

    def declarations(self) -> Iterator[tuple[str, Declaration]]:
        """Yield ``(kind, declaration)`` for every declaration, grouped by kind."""
        for kind in DECLARATION_KINDS:
            for decl in self.of_kind(kind):
                yield kind, decl

    def is_empty(self) -> bool:
        return not any(self.of_kind(kind) for kind in DECLARATION_KINDS)

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "path": self.path,
                "description": self.description,
                "classes": _dicts(self.classes),
                "functions": _dicts(self.functions),
                "enums": _dicts(self.enums),
                "typedefs": _dicts(self.typedefs),
                "extensions": _dicts(self.extensions),
                "mixins": _dicts(self.mixins),
                "variables": _dicts(self.variables),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> LibraryUnit:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            path=r.optional_str("path"),
            description=r.optional_str("description"),
            classes=r.objects("classes", ClassDeclaration.from_dict),
            functions=r.objects("functions", FunctionDeclaration.from_dict),
            enums=r.objects("enums", EnumDeclaration.from_dict),
            typedefs=r.objects("typedefs", TypeAliasDeclaration.from_dict),
            extensions=r.objects("extensions", ExtensionDeclaration.from_dict),
            mixins=r.objects("mixins", MixinDeclaration.from_dict),
            variables=r.objects("variables", VariableDeclaration.from_dict),
        )


@dataclass(frozen=True)
class PackageDocument:
    """
    Documentation of one package version.

    ``(name, version)`` identifies the document.  Once built it is never
    mutated; a forced re-extraction produces a new instance.
    """

    name: str
    version: str
    description: str | None = None
    repository: str | None = None
    homepage: str | None = None
    libraries: tuple[LibraryUnit, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "libraries")

    @property
    def key(self) -> tuple[str, str]:
        return self.name, self.version

    def all_of_kind(self, kind: str) -> list:
        """Declarations of ``kind`` across all libraries, in library order."""
        return [decl for lib in self.libraries for decl in lib.of_kind(kind)]

    @property
    def all_classes(self) -> list[ClassDeclaration]:
        return self.all_of_kind("class")

    @property
    def all_functions(self) -> list[FunctionDeclaration]:
        return self.all_of_kind("function")

    @property
    def all_enums(self) -> list[EnumDeclaration]:
        return self.all_of_kind("enum")

    @property
    def all_typedefs(self) -> list[TypeAliasDeclaration]:
        return self.all_of_kind("typedef")

    @property
    def all_extensions(self) -> list[ExtensionDeclaration]:
        return self.all_of_kind("extension")

    @property
    def all_mixins(self) -> list[MixinDeclaration]:
        return self.all_of_kind("mixin")

    @property
    def all_variables(self) -> list[VariableDeclaration]:
        return self.all_of_kind("variable")

    def to_dict(self) -> dict:
        return _compact(
            {
                "name": self.name,
                "version": self.version,
                "description": self.description,
                "repository": self.repository,
                "homepage": self.homepage,
                "libraries": _dicts(self.libraries),
            }
        )

    @classmethod
    def from_dict(cls, data: object, location: str = "") -> PackageDocument:
        r = _Reader(data, location)
        return cls(
            name=r.required_str("name"),
            version=r.required_str("version"),
            description=r.optional_str("description"),
            repository=r.optional_str("repository"),
            homepage=r.optional_str("homepage"),
            libraries=r.objects("libraries", LibraryUnit.from_dict),
        )

    def __str__(self) -> str:
        return f"PackageDocument({self.name}@{self.version})"


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode(doc: PackageDocument) -> bytes:
    """
    Serialise a document to pretty-printed UTF-8 JSON.

    :param doc: Document to encode.
    :return: Encoded bytes (2-space indent, trailing newline).
    """
    return (json.dumps(doc.to_dict(), indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def decode(data: bytes | str) -> PackageDocument:
    """
    Parse and validate an encoded document.

    :param data: Bytes (UTF-8) or text produced by :func:`encode`.
    :return: The decoded :class:`PackageDocument`.
    :raises DecodeError: If the data is not valid JSON or violates the schema.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"not valid UTF-8 ({exc.reason})") from exc
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"malformed JSON: {exc.msg} (line {exc.lineno})") from exc
    return PackageDocument.from_dict(payload)


__all__ = [
    "DYNAMIC",
    "DECLARATION_KINDS",
    "Parameter",
    "Constructor",
    "Method",
    "Field",
    "ClassDeclaration",
    "MixinDeclaration",
    "ExtensionDeclaration",
    "EnumValue",
    "EnumDeclaration",
    "FunctionDeclaration",
    "TypeAliasDeclaration",
    "VariableDeclaration",
    "Declaration",
    "LibraryUnit",
    "PackageDocument",
    "encode",
    "decode",
]

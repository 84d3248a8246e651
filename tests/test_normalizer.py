"""
test_normalizer.py

Tests for the Normalizer: privacy filtering, deduplication, parameter
classification, documentation cleaning, unresolvable files.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgdoc.analysis import Analyzer, RawDeclaration, RawParameter
from pkgdoc.errors import AnalysisUnresolvable, NoDeclarationsError
from pkgdoc.normalizer import (
    Normalizer,
    clean_documentation,
    convert_parameter,
    is_private,
    library_name,
)

ROOT = Path("/pkg")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeAnalyzer(Analyzer):
    """Deterministic analyzer returning canned records per file name."""

    def __init__(self, records: dict[str, list[RawDeclaration] | Exception]) -> None:
        self.records = records
        self.calls: list[Path] = []

    def analyze(self, path: Path) -> list[RawDeclaration]:
        self.calls.append(path)
        result = self.records[Path(path).name]
        if isinstance(result, Exception):
            raise result
        return result


def _lib(records: list[RawDeclaration], name: str = "mod.py"):
    return Normalizer().normalize_library(ROOT / name, records, ROOT)


def _cls(name: str, *members: RawDeclaration, **kw) -> RawDeclaration:
    return RawDeclaration(kind="class", name=name, members=tuple(members), **kw)


def _method(name: str, *mods: str, **kw) -> RawDeclaration:
    return RawDeclaration(kind="method", name=name, modifiers=frozenset(mods), **kw)


# ---------------------------------------------------------------------------
# Privacy
# ---------------------------------------------------------------------------


def test_private_class_dropped():
    unit = _lib([_cls("Foo"), _cls("_Bar")])
    assert [c.name for c in unit.classes] == ["Foo"]


def test_private_members_dropped():
    unit = _lib([_cls("Foo", _method("run"), _method("_helper"), _method("__repr__"))])
    assert [m.name for m in unit.classes[0].methods] == ["run"]


def test_unnamed_records_dropped():
    unit = _lib([RawDeclaration(kind="function", name=None), RawDeclaration(kind="function", name="f")])
    assert [f.name for f in unit.functions] == ["f"]


def test_is_private_checks_last_segment():
    assert is_private("_x")
    assert is_private("Widget._internal")
    assert not is_private("Widget.named")
    assert not is_private("[]")


def test_file_with_only_private_records_yields_none():
    assert _lib([_cls("_Hidden")]) is None


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


def test_first_occurrence_wins():
    unit = _lib(
        [
            RawDeclaration(kind="function", name="f", documentation="first"),
            RawDeclaration(kind="function", name="f", documentation="second"),
        ]
    )
    assert len(unit.functions) == 1
    assert unit.functions[0].description == "first"


def test_duplicate_across_kinds_dropped():
    unit = _lib([_cls("Thing"), RawDeclaration(kind="function", name="Thing")])
    assert [c.name for c in unit.classes] == ["Thing"]
    assert unit.functions == ()


def test_getter_setter_pair_kept():
    unit = _lib(
        [
            _cls(
                "Box",
                _method("size", "getter", type="int"),
                _method("size", "setter", parameters=(RawParameter("v", "int"),)),
                _method("size", "getter"),
            )
        ]
    )
    methods = unit.classes[0].methods
    assert [(m.name, m.is_getter, m.is_setter) for m in methods] == [
        ("size", True, False),
        ("size", False, True),
    ]


def test_field_then_getter_keeps_field_only():
    unit = _lib(
        [_cls("Box", RawDeclaration(kind="field", name="size"), _method("size", "getter"))]
    )
    cls = unit.classes[0]
    assert [f.name for f in cls.fields] == ["size"]
    assert cls.methods == ()


def test_top_level_accessor_pair_kept():
    unit = _lib(
        [
            RawDeclaration(kind="function", name="level", modifiers=frozenset({"getter"})),
            RawDeclaration(kind="function", name="level", modifiers=frozenset({"setter"})),
        ]
    )
    assert [(f.is_getter, f.is_setter) for f in unit.functions] == [(True, False), (False, True)]


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def test_positional_required_inferred_from_default():
    assert convert_parameter(RawParameter("a")).required is True
    p = convert_parameter(RawParameter("b", default="1"))
    assert p.required is False
    assert p.default == "1"


def test_named_optional_by_default():
    p = convert_parameter(RawParameter("k", "int", named=True))
    assert p.named is True
    assert p.required is False


def test_explicit_required_flag_respected():
    p = convert_parameter(RawParameter("k", named=True, required=True))
    assert p.required is True


def test_positional_with_default_never_required():
    p = convert_parameter(RawParameter("a", required=True, default="0"))
    assert p.required is False


def test_missing_type_becomes_dynamic():
    assert convert_parameter(RawParameter("a")).type == "dynamic"


def test_default_text_carried_verbatim():
    p = convert_parameter(RawParameter("a", default="{'x': [1, 2]}"))
    assert p.default == "{'x': [1, 2]}"


# ---------------------------------------------------------------------------
# Documentation cleaning
# ---------------------------------------------------------------------------


def test_clean_triple_slash():
    assert clean_documentation("/// First line.\n///\n/// Second.") == "First line.\nSecond."


def test_clean_block_comment():
    text = "/**\n * Does things.\n *\n * More detail.\n */"
    assert clean_documentation(text) == "Does things.\nMore detail."


def test_clean_plain_docstring_keeps_bullets():
    text = "Summary.\n\n    * item one\n    * item two\n"
    assert clean_documentation(text) == "Summary.\n* item one\n* item two"


def test_clean_empty_is_none():
    assert clean_documentation(None) is None
    assert clean_documentation("") is None
    assert clean_documentation("///\n///   \n") is None


# ---------------------------------------------------------------------------
# Library naming
# ---------------------------------------------------------------------------


def test_library_name_from_path():
    assert library_name(ROOT / "pkg" / "core.py", ROOT) == "pkg.core"
    assert library_name(ROOT / "pkg" / "__init__.py", ROOT) == "pkg"
    assert library_name(ROOT / "src" / "pkg" / "io" / "read.py", ROOT) == "pkg.io.read"
    assert library_name(ROOT / "single.py", ROOT) == "single"


def test_library_records_path_and_description():
    unit = _lib(
        [
            RawDeclaration(kind="library", name=None, documentation="Module docs."),
            RawDeclaration(kind="function", name="f"),
        ],
        name="tool.py",
    )
    assert unit.name == "tool"
    assert unit.path == "tool.py"
    assert unit.description == "Module docs."


# ---------------------------------------------------------------------------
# Declaration mapping
# ---------------------------------------------------------------------------


def test_all_kinds_land_in_typed_lists():
    unit = _lib(
        [
            _cls("C"),
            RawDeclaration(kind="function", name="f", type="int"),
            RawDeclaration(
                kind="enum",
                name="E",
                members=(
                    RawDeclaration(kind="enum_value", name="A", documentation="first"),
                    RawDeclaration(kind="enum_value", name="B"),
                ),
            ),
            RawDeclaration(kind="typedef", name="T", type="dict[str, int]"),
            RawDeclaration(kind="extension", name="X", supertype="str"),
            RawDeclaration(kind="mixin", name="M", mixins=("Base",)),
            RawDeclaration(kind="variable", name="V", modifiers=frozenset({"const"})),
        ]
    )
    assert [c.name for c in unit.classes] == ["C"]
    assert unit.functions[0].return_type == "int"
    assert [(v.name, v.description) for v in unit.enums[0].values] == [("A", "first"), ("B", None)]
    assert unit.typedefs[0].type == "dict[str, int]"
    assert unit.extensions[0].on_type == "str"
    assert unit.mixins[0].superclass_constraints == ("Base",)
    assert unit.variables[0].is_const is True


def test_class_members_mapped():
    unit = _lib(
        [
            _cls(
                "Shape",
                RawDeclaration(
                    kind="constructor",
                    name="Shape",
                    parameters=(RawParameter("sides", "int"),),
                ),
                _method("area", "abstract", type="float"),
                _method("+", "operator", type="Shape"),
                RawDeclaration(kind="field", name="COUNT", type="int", modifiers=frozenset({"static"})),
                modifiers=frozenset({"abstract"}),
                supertype="Base",
                mixins=("ReprMixin",),
                type_parameters=("T",),
            )
        ]
    )
    cls = unit.classes[0]
    assert cls.is_abstract is True
    assert cls.superclass == "Base"
    assert cls.mixins == ("ReprMixin",)
    assert cls.type_parameters == ("T",)
    assert cls.constructors[0].signature == "Shape(int sides)"
    assert cls.methods[0].is_abstract is True
    assert cls.methods[1].is_operator is True
    assert cls.fields[0].is_static is True


def test_unknown_kind_ignored():
    unit = _lib([RawDeclaration(kind="macro", name="m"), RawDeclaration(kind="function", name="f")])
    assert [f.name for f in unit.functions] == ["f"]


# ---------------------------------------------------------------------------
# normalize()
# ---------------------------------------------------------------------------


def test_normalize_skips_unresolvable_files():
    analyzer = FakeAnalyzer(
        {
            "a.py": [RawDeclaration(kind="function", name="fa")],
            "part.py": AnalysisUnresolvable("part.py", "fragment of another file"),
            "b.py": [_cls("B")],
        }
    )
    files = [ROOT / "a.py", ROOT / "part.py", ROOT / "b.py"]
    doc = Normalizer(analyzer).normalize("demo", "1.0", files, root=ROOT, description="Demo")
    assert [lib.name for lib in doc.libraries] == ["a", "b"]
    assert doc.description == "Demo"
    assert analyzer.calls == files


def test_normalize_renames_colliding_library_names():
    analyzer = FakeAnalyzer({"foo.py": [RawDeclaration(kind="function", name="f")]})
    files = [ROOT / "foo.py", ROOT / "lib" / "foo.py"]
    doc = Normalizer(analyzer).normalize("demo", "1.0", files, root=ROOT)
    assert [lib.name for lib in doc.libraries] == ["foo", "lib/foo.py"]
    assert library_name(files[1], ROOT) == "foo"


def test_normalize_without_declarations_raises():
    analyzer = FakeAnalyzer(
        {
            "a.py": AnalysisUnresolvable("a.py", "broken"),
            "b.py": [_cls("_Private")],
        }
    )
    with pytest.raises(NoDeclarationsError) as exc_info:
        Normalizer(analyzer).normalize("demo", "1.0", [ROOT / "a.py", ROOT / "b.py"], root=ROOT)
    assert exc_info.value.name == "demo"


def test_normalize_empty_file_list_raises():
    with pytest.raises(NoDeclarationsError):
        Normalizer(FakeAnalyzer({})).normalize("demo", "1.0", [], root=ROOT)


def test_normalize_requires_analyzer():
    with pytest.raises(ValueError):
        Normalizer().normalize("demo", "1.0", [ROOT / "a.py"], root=ROOT)

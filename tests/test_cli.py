"""
test_cli.py

Tests for the ``pkgdoc`` subcommands: extract (local), list, clean, query,
and the dispatcher.
"""

from __future__ import annotations

import pytest

from pkgdoc import __main__ as dispatcher
from pkgdoc import pkgdoc_clean, pkgdoc_extract, pkgdoc_list, pkgdoc_query
from pkgdoc.cache import CacheManager
from pkgdoc.model import (
    ClassDeclaration,
    FunctionDeclaration,
    LibraryUnit,
    Method,
    PackageDocument,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _doc(name: str = "demo", version: str = "1.0.0") -> PackageDocument:
    return PackageDocument(
        name=name,
        version=version,
        libraries=[
            LibraryUnit(
                name="demo.core",
                classes=[ClassDeclaration("Widget", methods=[Method("draw")])],
                functions=[FunctionDeclaration("make_widget")],
            )
        ],
    )


@pytest.fixture()
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture()
def cache(cache_dir):
    return CacheManager(cache_dir)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def test_list_empty(cache_dir, capsys):
    assert pkgdoc_list.main(["--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "No cached packages.\n"


def test_list_entries(cache, cache_dir, capsys):
    cache.save(_doc("demo", "1.0.0"))
    cache.save(_doc("my-pkg", "2.0.0"))
    assert pkgdoc_list.main(["--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "Cached packages:\n  demo@1.0.0\n  my-pkg@2.0.0\n"


# ---------------------------------------------------------------------------
# clean
# ---------------------------------------------------------------------------


def test_clean_requires_target(cache_dir):
    assert pkgdoc_clean.main(["--cache-dir", str(cache_dir)]) == 2


def test_clean_one_version(cache, cache_dir, capsys):
    cache.save(_doc("demo", "1.0.0"))
    cache.save(_doc("demo", "2.0.0"))
    assert pkgdoc_clean.main(["demo", "--version", "1.0.0", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "Cleared demo@1.0.0\n"
    assert cache.list_cached() == [("demo", "2.0.0")]


def test_clean_all_versions(cache, cache_dir, capsys):
    cache.save(_doc("demo", "1.0.0"))
    cache.save(_doc("demo", "2.0.0"))
    assert pkgdoc_clean.main(["demo", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "Cleared all versions of demo (2)\n"
    assert cache.list_cached() == []


def test_clean_everything(cache, cache_dir, capsys):
    cache.save(_doc())
    assert pkgdoc_clean.main(["--all", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "Cleared all cached packages.\n"
    assert not cache_dir.exists()


# ---------------------------------------------------------------------------
# query
# ---------------------------------------------------------------------------


def test_query_search(cache, cache_dir, capsys):
    cache.save(_doc())
    assert pkgdoc_query.main(["demo", "--search", "widget", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "class: Widget\nfunction: make_widget\n"


def test_query_class_and_methods(cache, cache_dir, capsys):
    cache.save(_doc())
    assert pkgdoc_query.main(["demo", "--class", "Widget", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out.startswith("class Widget\n")
    assert pkgdoc_query.main(["demo", "--methods", "Widget", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "dynamic draw()\n"


def test_query_list_and_info(cache, cache_dir, capsys):
    cache.save(_doc())
    assert pkgdoc_query.main(["demo", "--list", "library", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "demo.core\n"
    assert pkgdoc_query.main(["demo", "--info", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out.startswith("Package: demo\nVersion: 1.0.0\n")


def test_query_not_found(cache, cache_dir, capsys):
    cache.save(_doc())
    assert pkgdoc_query.main(["demo", "--function", "nope", "--cache-dir", str(cache_dir)]) == 1
    assert capsys.readouterr().err == "error: Function not found: nope\n"


def test_query_uncached_package(cache_dir, capsys):
    assert pkgdoc_query.main(["ghost", "--info", "--cache-dir", str(cache_dir)]) == 1
    assert "ghost is not cached" in capsys.readouterr().err


def test_query_ambiguous_version(cache, cache_dir, capsys):
    cache.save(_doc("demo", "1.0.0"))
    cache.save(_doc("demo", "2.0.0"))
    assert pkgdoc_query.main(["demo", "--info", "--cache-dir", str(cache_dir)]) == 1
    assert "pass --version" in capsys.readouterr().err
    args = ["demo", "--version", "2.0.0", "--info", "--cache-dir", str(cache_dir)]
    assert pkgdoc_query.main(args) == 0


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


def test_extract_local_requires_version(tmp_path, cache_dir, capsys):
    args = ["demo", "--local", str(tmp_path), "--cache-dir", str(cache_dir)]
    assert pkgdoc_extract.main(args) == 2
    assert "--local requires --version" in capsys.readouterr().err


def test_extract_local_tree(tmp_path, cache, cache_dir, capsys):
    src = tmp_path / "tree"
    (src / "demo").mkdir(parents=True)
    (src / "demo" / "core.py").write_text("class Widget:\n    pass\n\n\ndef make():\n    pass\n")

    args = ["demo", "--version", "0.1.0", "--local", str(src), "--cache-dir", str(cache_dir)]
    assert pkgdoc_extract.main(args) == 0
    assert capsys.readouterr().out == (
        "Extracting documentation for demo...\n"
        "Extracted demo@0.1.0\n"
        "  Libraries: 1\n"
        "  Classes: 1\n"
        "  Functions: 1\n"
        "  Enums: 0\n"
    )
    assert cache.exists("demo", "0.1.0")


def test_extract_local_without_declarations(tmp_path, cache_dir, capsys):
    src = tmp_path / "tree"
    src.mkdir()
    (src / "empty.py").write_text("_x = 1\n")
    args = ["demo", "--version", "0.1.0", "--local", str(src), "--cache-dir", str(cache_dir)]
    assert pkgdoc_extract.main(args) == 1
    assert capsys.readouterr().err.startswith("error: ")


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def test_dispatcher_help(capsys):
    assert dispatcher.main([]) == 0
    assert "usage: pkgdoc <subcommand>" in capsys.readouterr().out


def test_dispatcher_unknown_subcommand(capsys):
    assert dispatcher.main(["frobnicate"]) == 1
    assert "unknown subcommand 'frobnicate'" in capsys.readouterr().err


def test_dispatcher_routes_to_subcommand(cache_dir, capsys):
    assert dispatcher.main(["list", "--cache-dir", str(cache_dir)]) == 0
    assert capsys.readouterr().out == "No cached packages.\n"

"""
test_mcp_server.py

Tests for the MCP tool functions, called directly against an installed
QueryEngine.
"""

from __future__ import annotations

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from pkgdoc import mcp_server
from pkgdoc.model import (
    ClassDeclaration,
    EnumDeclaration,
    EnumValue,
    FunctionDeclaration,
    LibraryUnit,
    Method,
    PackageDocument,
)
from pkgdoc.query import QueryEngine


def _doc() -> PackageDocument:
    return PackageDocument(
        name="demo",
        version="1.0.0",
        description="Demo package",
        libraries=[
            LibraryUnit(
                name="demo.core",
                classes=[ClassDeclaration("Foo", description="The foo.", methods=[Method("run")])],
                functions=[FunctionDeclaration("fooBar")],
                enums=[EnumDeclaration("Mode", values=[EnumValue("FAST")])],
            )
        ],
    )


@pytest.fixture(autouse=True)
def engine():
    mcp_server.set_engine(QueryEngine(_doc()))
    yield
    mcp_server.set_engine(None)


def test_search_tool():
    assert mcp_server.search("foo") == "class: Foo - The foo.\nfunction: fooBar\n"
    assert mcp_server.search("foo", limit=1) == "class: Foo - The foo.\n"


def test_lookup_tools():
    assert mcp_server.get_class("Foo").startswith("class Foo\n")
    assert mcp_server.get_function("fooBar") == "dynamic fooBar()\n"
    assert "  FAST" in mcp_server.get_enum("Mode")
    assert mcp_server.get_library("demo.core").startswith("library demo.core\n")
    assert mcp_server.get_methods("Foo") == "dynamic run()\n"


def test_lookup_not_found_raises_tool_error():
    with pytest.raises(ToolError, match="Class not found: Bar"):
        mcp_server.get_class("Bar")
    with pytest.raises(ToolError, match="Function not found: nope"):
        mcp_server.get_function("nope")
    with pytest.raises(ToolError, match="Class not found: Bar"):
        mcp_server.get_methods("Bar")


def test_list_tools():
    assert mcp_server.list_classes() == "Foo\n"
    assert mcp_server.list_functions() == "fooBar\n"
    assert mcp_server.list_enums() == "Mode\n"
    assert mcp_server.list_libraries() == "demo.core\n"


def test_list_tools_empty():
    mcp_server.set_engine(QueryEngine(PackageDocument(name="e", version="1")))
    assert mcp_server.list_classes() == "No classes found\n"
    assert mcp_server.list_functions() == "No top-level functions found\n"


def test_package_info_tool():
    text = mcp_server.get_package_info()
    assert text.startswith("Package: demo\nVersion: 1.0.0\nDescription: Demo package\n")
    assert "  Classes: 1" in text


def test_tools_require_engine():
    mcp_server.set_engine(None)
    with pytest.raises(RuntimeError):
        mcp_server.list_classes()


def test_main_reports_missing_package(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("PKGDOC_PYPI_URL", "http://127.0.0.1:9")
    monkeypatch.setenv("PKGDOC_TIMEOUT", "0.5")
    with pytest.raises(SystemExit) as exc_info:
        mcp_server.main(["demo", "--cache-dir", str(tmp_path)])
    assert exc_info.value.code == 1
    assert capsys.readouterr().err.startswith("error: ")

"""
pkgdoc: searchable API documentation for published packages.

Registry archive → AST analysis → normalized model → filesystem cache →
keyword search / lookup (CLI and MCP server).

Public API
----------
Primary entry point::

    from pkgdoc import CacheManager, DocExtractor, QueryEngine

    with DocExtractor(CacheManager("~/.pkgdoc_cache")) as extractor:
        doc = extractor.get_package("attrs", "24.2.0")
    engine = QueryEngine(doc)
    hits = engine.search("validator")

Individual layers::

    from pkgdoc import Normalizer, PythonAnalyzer, PypiClient

Model and codec::

    from pkgdoc import PackageDocument, LibraryUnit, encode, decode
"""

__version__ = "0.1.0"

# Model and codec
from pkgdoc.model import (
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
    decode,
    encode,
)

# Errors
from pkgdoc.errors import (
    AnalysisUnresolvable,
    ArchiveError,
    DecodeError,
    NoDeclarationsError,
    PkgDocError,
    UpstreamError,
    UpstreamNotFound,
)

# Layers
from pkgdoc.analysis import Analyzer, RawDeclaration, RawParameter
from pkgdoc.pyanalyzer import PythonAnalyzer
from pkgdoc.normalizer import Normalizer
from pkgdoc.cache import CacheManager, Tier
from pkgdoc.query import Found, NotFound, QueryEngine, SearchHit
from pkgdoc.client import PypiClient

# Orchestrator
from pkgdoc.extractor import DocExtractor

__all__ = [
    # model
    "PackageDocument",
    "LibraryUnit",
    "ClassDeclaration",
    "MixinDeclaration",
    "ExtensionDeclaration",
    "EnumDeclaration",
    "EnumValue",
    "FunctionDeclaration",
    "TypeAliasDeclaration",
    "VariableDeclaration",
    "Constructor",
    "Method",
    "Field",
    "Parameter",
    "encode",
    "decode",
    # errors
    "PkgDocError",
    "UpstreamNotFound",
    "UpstreamError",
    "AnalysisUnresolvable",
    "NoDeclarationsError",
    "DecodeError",
    "ArchiveError",
    # layers
    "Analyzer",
    "RawDeclaration",
    "RawParameter",
    "PythonAnalyzer",
    "Normalizer",
    "CacheManager",
    "Tier",
    "QueryEngine",
    "SearchHit",
    "Found",
    "NotFound",
    "PypiClient",
    # orchestrator
    "DocExtractor",
]

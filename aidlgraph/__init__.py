"""
aidlgraph: AIDL parsing, type linking and dependency graphs.

Pipeline::

    source text ──parse──▶ ast.File ──build──▶ UnresolvedModel
                                                    │ link
                                                    ▼
                         graph queries ◀──── ResolvedModel

Quick start::

    from aidlgraph import AnalysisSession

    session = AnalysisSession()
    session.load({"IFoo.aidl": text_a, "IBar.aidl": text_b})
    for dep in session.dependencies("com.example.IFoo"):
        print(dep.symbol.key, sorted(dep.ordinals))
"""

__version__ = "0.1.0"

from aidlgraph.builder import ModelBuilder, build
from aidlgraph.config import AnalysisConfig, DuplicatePolicy, configure_logging
from aidlgraph.diagnostics import Diagnostic, DiagnosticCollector, DiagnosticSeverity
from aidlgraph.errors import (
    AidlError,
    DuplicateSymbolError,
    InvalidTypeError,
    ModelError,
    NotFoundError,
    ParseError,
    ParseFileError,
)
from aidlgraph.graph import (
    Dependency,
    dependencies_of,
    find_dependencies,
    find_references,
    references_of,
)
from aidlgraph.linker import Linker, link
from aidlgraph.model import ResolvedModel, UnresolvedModel
from aidlgraph.parser import ParsedBatch, parse, parse_batch
from aidlgraph.session import AnalysisSession

__all__ = [
    "__version__",
    "AnalysisConfig",
    "AnalysisSession",
    "AidlError",
    "Dependency",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSeverity",
    "DuplicatePolicy",
    "DuplicateSymbolError",
    "InvalidTypeError",
    "Linker",
    "ModelBuilder",
    "ModelError",
    "NotFoundError",
    "ParseError",
    "ParseFileError",
    "ParsedBatch",
    "ResolvedModel",
    "UnresolvedModel",
    "build",
    "configure_logging",
    "dependencies_of",
    "find_dependencies",
    "find_references",
    "link",
    "parse",
    "parse_batch",
    "references_of",
]

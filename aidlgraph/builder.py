"""
AST → UnresolvedModel.

One pass over the parsed files:

- one ``Package`` per distinct package path, shared by every symbol and
  every type declared in it
- one symbol per top-level item, keyed ``"{package}.{name}"``
- ordinals assigned in declaration order (interfaces: consts, then methods,
  on one shared counter)
- every type occurrence wrapped as ``UnresolvedType`` owned by the
  *declaring* package; the linker decides what it refers to

Duplicate keys follow ``AnalysisConfig.duplicate_policy``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from aidlgraph import ast as A
from aidlgraph.config import AnalysisConfig, DuplicatePolicy
from aidlgraph.diagnostics import (
    DUPLICATE_SYMBOL,
    DiagnosticCollector,
    DiagnosticSeverity,
)
from aidlgraph.errors import DuplicateSymbolError
from aidlgraph.model import (
    Arg,
    Const,
    Enum,
    EnumElement,
    Interface,
    Member,
    Method,
    Package,
    PrimitiveType,
    Struct,
    Symbol,
    UnresolvedModel,
    UnresolvedType,
)
from aidlgraph.primitives import ROOT_PACKAGE, primitive_names

__all__ = ["ModelBuilder", "build", "primitive_registry"]

logger = logging.getLogger(__name__)


def primitive_registry() -> Dict[str, PrimitiveType]:
    """Name → PrimitiveType for every built-in, all owned by the root package."""
    root = Package(ROOT_PACKAGE)
    return {name: PrimitiveType(name, root) for name in primitive_names()}


class ModelBuilder:
    """Accumulates symbols from parsed files into an ``UnresolvedModel``."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        collector: Optional[DiagnosticCollector] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.collector = collector if collector is not None else DiagnosticCollector(
            min_severity=self.config.min_severity
        )
        self._packages: Dict[str, Package] = {}
        self._symbols: Dict[str, Symbol] = {}

    def package(self, path: str) -> Package:
        """Return the shared ``Package`` for *path*."""
        pkg = self._packages.get(path)
        if pkg is None:
            pkg = self._packages[path] = Package(path)
        return pkg

    def add_file(self, file: A.File) -> None:
        pkg = self.package(file.package)
        for item in file.items:
            self._add_symbol(self._symbol(item, pkg, file.imports), file.source_name)

    def build(self) -> UnresolvedModel:
        model = UnresolvedModel(self._symbols, primitive_registry())
        logger.debug(
            "Built %d symbol(s) in %d package(s)",
            len(self._symbols), len(self._packages),
        )
        return model

    # ─────────────────────────────────────────────────────────────────
    #  Internals
    # ─────────────────────────────────────────────────────────────────

    def _add_symbol(self, symbol: Symbol, source_name: str) -> None:
        key = symbol.key
        if key in self._symbols:
            if self.config.duplicate_policy is DuplicatePolicy.ERROR:
                raise DuplicateSymbolError(key)
            logger.info("Duplicate symbol %s, keeping the last declaration", key)
            self.collector.report(
                DUPLICATE_SYMBOL,
                f"symbol {key} redeclared; the later declaration wins",
                DiagnosticSeverity.INFORMATION,
                key=key,
                source_name=source_name,
            )
            del self._symbols[key]
        self._symbols[key] = symbol

    def _symbol(self, item: A.Item, pkg: Package, imports: tuple) -> Symbol:
        if isinstance(item, A.InterfaceDecl):
            return self._interface(item, pkg, imports)
        if isinstance(item, A.ParcelableDecl):
            return self._struct(item, pkg, imports)
        if isinstance(item, A.EnumDecl):
            return self._enum(item, pkg, imports)
        raise TypeError(f"unexpected item {type(item).__name__}")

    def _interface(self, decl: A.InterfaceDecl, pkg: Package, imports: tuple) -> Interface:
        ordinal = 0
        consts: List[Const] = []
        for c in decl.consts:
            consts.append(
                Const(
                    name=c.name,
                    type=UnresolvedType(pkg, c.const_type.name),
                    value=c.value,
                    ordinal=ordinal,
                    doc=c.doc,
                )
            )
            ordinal += 1

        methods: List[Method] = []
        for m in decl.methods:
            methods.append(
                Method(
                    name=m.name,
                    return_arg=_arg("", m.return_type, pkg),
                    args=tuple(
                        _arg(a.name, a.arg_type, pkg, a.direction) for a in m.args
                    ),
                    ordinal=ordinal,
                    oneway=m.is_oneway,
                    doc=m.doc,
                )
            )
            ordinal += 1

        return Interface(
            package=pkg,
            name=decl.name,
            consts=tuple(consts),
            methods=tuple(methods),
            imports=tuple(imports),
            doc=decl.doc,
        )

    def _struct(self, decl: A.ParcelableDecl, pkg: Package, imports: tuple) -> Struct:
        members = tuple(
            Member(_arg(m.name, m.member_type, pkg), ordinal, m.doc)
            for ordinal, m in enumerate(decl.members)
        )
        return Struct(
            package=pkg,
            name=decl.name,
            members=members,
            imports=tuple(imports),
            doc=decl.doc,
        )

    def _enum(self, decl: A.EnumDecl, pkg: Package, imports: tuple) -> Enum:
        elements = tuple(
            EnumElement(e.name, e.value, ordinal, e.doc)
            for ordinal, e in enumerate(decl.elements)
        )
        return Enum(
            package=pkg,
            name=decl.name,
            elements=elements,
            imports=tuple(imports),
            doc=decl.doc,
        )


def _arg(
    name: str,
    type_ref: A.TypeRef,
    pkg: Package,
    direction: A.Direction = A.Direction.UNSPECIFIED,
) -> Arg:
    return Arg(
        name=name,
        type=UnresolvedType(pkg, type_ref.name),
        generic_args=tuple(_arg("", g, pkg) for g in type_ref.generic_types),
        direction=direction,
    )


def build(
    files: Iterable[A.File],
    config: Optional[AnalysisConfig] = None,
    collector: Optional[DiagnosticCollector] = None,
) -> UnresolvedModel:
    """Build an ``UnresolvedModel`` from parsed files, in the order given."""
    builder = ModelBuilder(config, collector)
    for file in files:
        builder.add_file(file)
    return builder.build()

"""
Type linker: ``UnresolvedModel`` → ``ResolvedModel``.

Each ``UnresolvedType(owner, name)`` is resolved by the first rule that
matches:

1. ``name`` is a primitive                      → ``StandardType``
2. a symbol ``{owner}.{name}`` exists           → ``ItemType``
3. for an import ``imp`` of the referencing file, ``name`` or
   ``{imp}.{name}`` equals a symbol key         → ``ItemType``

Anything else stays unresolved and is reported once per occurrence as an
``unresolvedType`` diagnostic; linking carries on.

Wildcard imports (``a.b.*``) are not expanded: ``a.b.*.Foo`` never equals
a key, so such references only resolve through rules 1 and 2.

``StandardType`` and ``ItemType`` pass through untouched, which makes
``link(link(m)) == link(m)``.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Union

from aidlgraph.config import AnalysisConfig
from aidlgraph.diagnostics import (
    UNRESOLVED_TYPE,
    DiagnosticCollector,
    DiagnosticSeverity,
)
from aidlgraph.model import (
    Arg,
    Const,
    Enum,
    Interface,
    ItemType,
    Member,
    Method,
    ResolvedModel,
    StandardType,
    Struct,
    Symbol,
    Type,
    UnresolvedModel,
    UnresolvedType,
)

__all__ = ["Linker", "link"]

logger = logging.getLogger(__name__)


class Linker:
    """Resolves every type reference of one model against itself."""

    def __init__(
        self,
        model: Union[UnresolvedModel, ResolvedModel],
        config: Optional[AnalysisConfig] = None,
        collector: Optional[DiagnosticCollector] = None,
    ) -> None:
        self.model = model
        self.config = config or AnalysisConfig()
        self.collector = collector if collector is not None else DiagnosticCollector(
            min_severity=self.config.min_severity
        )
        self._unresolved_count = 0

    def link(self) -> ResolvedModel:
        self._unresolved_count = 0
        symbols: Dict[str, Symbol] = {}
        for key, symbol in self.model.symbols.items():
            symbols[key] = self._resolve_symbol(symbol)
        logger.debug(
            "Linked %d symbol(s), %d unresolved reference(s)",
            len(symbols), self._unresolved_count,
        )
        return ResolvedModel(symbols, self.model.primitives)

    # ─────────────────────────────────────────────────────────────────
    #  Type resolution
    # ─────────────────────────────────────────────────────────────────

    def resolve_type(self, t: Type, imports: Sequence[str]) -> Optional[Type]:
        """Resolve one type; ``None`` when no rule matches."""
        if not isinstance(t, UnresolvedType):
            return t

        primitive = self.model.primitives.get(t.name)
        if primitive is not None:
            return StandardType(primitive)

        symbols = self.model.symbols
        same_package = symbols.get(f"{t.owner.path}.{t.name}")
        if same_package is not None:
            return ItemType(same_package.key, same_package.name)

        for imp in imports:
            for symbol in symbols.values():
                if t.name == symbol.key or f"{imp}.{t.name}" == symbol.key:
                    return ItemType(symbol.key, symbol.name)
        return None

    def _resolve(self, t: Type, symbol: Symbol) -> Type:
        resolved = self.resolve_type(t, symbol.imports)
        if resolved is not None:
            return resolved
        self._unresolved_count += 1
        if self.config.warn_unresolved:
            logger.warning("unresolved type: %s", t.key)
        self.collector.report(
            UNRESOLVED_TYPE,
            f"unresolved type: {t.key}",
            DiagnosticSeverity.WARNING,
            key=t.key,
            source_name=symbol.key,
        )
        return t

    def _resolve_arg(self, arg: Arg, symbol: Symbol) -> Arg:
        generic_args = tuple(self._resolve_arg(g, symbol) for g in arg.generic_args)
        return Arg(
            name=arg.name,
            type=self._resolve(arg.type, symbol),
            generic_args=generic_args,
            direction=arg.direction,
        )

    # ─────────────────────────────────────────────────────────────────
    #  Symbols
    # ─────────────────────────────────────────────────────────────────

    def _resolve_symbol(self, symbol: Symbol) -> Symbol:
        if isinstance(symbol, Interface):
            return self._resolve_interface(symbol)
        if isinstance(symbol, Struct):
            return self._resolve_struct(symbol)
        if isinstance(symbol, Enum):
            return symbol
        raise TypeError(f"unexpected symbol {type(symbol).__name__}")

    def _resolve_interface(self, interface: Interface) -> Interface:
        consts = tuple(
            Const(c.name, self._resolve(c.type, interface), c.value, c.ordinal, c.doc)
            for c in interface.consts
        )
        methods = tuple(
            Method(
                name=m.name,
                return_arg=self._resolve_arg(m.return_arg, interface),
                args=tuple(self._resolve_arg(a, interface) for a in m.args),
                ordinal=m.ordinal,
                oneway=m.oneway,
                doc=m.doc,
            )
            for m in interface.methods
        )
        return Interface(
            package=interface.package,
            name=interface.name,
            consts=consts,
            methods=methods,
            imports=interface.imports,
            doc=interface.doc,
        )

    def _resolve_struct(self, struct: Struct) -> Struct:
        members = tuple(
            Member(self._resolve_arg(m.arg, struct), m.ordinal, m.doc)
            for m in struct.members
        )
        return Struct(
            package=struct.package,
            name=struct.name,
            members=members,
            imports=struct.imports,
            doc=struct.doc,
        )


def link(
    model: Union[UnresolvedModel, ResolvedModel],
    config: Optional[AnalysisConfig] = None,
    collector: Optional[DiagnosticCollector] = None,
) -> ResolvedModel:
    """Resolve every type reference in *model* and return the new model."""
    return Linker(model, config, collector).link()

"""
aidlgraph/graph.py
══════════════════

Dependency and reference queries over a ``ResolvedModel``.

    ┌─────────────────────────────────────────────────────────────────┐
    │  find_dependencies(S)  symbols S refers to, one hop             │
    │  find_references(T)    symbols whose dependencies include T     │
    └─────────────────────────────────────────────────────────────────┘

Each result entry pairs a target symbol with the set of *local* ordinals
(const / method / member indices of the queried or referring symbol) that
mention it.  Repeated mentions from several ordinals merge into one entry.

What counts as a mention:

    Interface   const types, method argument types, method return types
    Struct      member types
    Enum        nothing

Generic arguments are searched to any depth (``List<Map<String, Foo>>``
mentions ``Foo``), but a referenced symbol's own members are never
followed, so cycles between symbols terminate naturally.

There is no reverse index: ``find_references`` re-runs
``find_dependencies`` over the whole model on every call.

Usage example::

    from aidlgraph.graph import find_dependencies, references_of

    for dep in find_dependencies(model, model.get("com.foo.IFoo")):
        print(dep.symbol.key, sorted(dep.ordinals))

    for ref in references_of(model, "com.foo.Bar"):
        print(f"{ref.symbol.key} uses it at {sorted(ref.ordinals)}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Set, Tuple

from aidlgraph.model import (
    Arg,
    Interface,
    ItemType,
    ResolvedModel,
    Struct,
    Symbol,
    Type,
)

__all__ = [
    "Dependency",
    "find_dependencies",
    "find_references",
    "dependencies_of",
    "references_of",
]


@dataclass(frozen=True)
class Dependency:
    """A symbol paired with the local ordinals that refer to it."""

    ordinals: FrozenSet[int]
    symbol: Symbol

    @property
    def key(self) -> str:
        return self.symbol.key


# ═════════════════════════════════════════════════════════════════════
#  Mention discovery
# ═════════════════════════════════════════════════════════════════════

def _arg_types(arg: Arg) -> Iterator[Type]:
    for generic in arg.generic_args:
        yield from _arg_types(generic)
    yield arg.type


def _mentions(symbol: Symbol) -> Iterator[Tuple[int, Type]]:
    """Yield ``(ordinal, type)`` for every type occurrence in *symbol*."""
    if isinstance(symbol, Interface):
        for const in symbol.consts:
            yield const.ordinal, const.type
        for method in symbol.methods:
            for arg in method.args:
                for t in _arg_types(arg):
                    yield method.ordinal, t
            for t in _arg_types(method.return_arg):
                yield method.ordinal, t
    elif isinstance(symbol, Struct):
        for member in symbol.members:
            for t in _arg_types(member.arg):
                yield member.ordinal, t


def _check_model(model: object) -> None:
    if not isinstance(model, ResolvedModel):
        raise TypeError(
            f"graph queries need a ResolvedModel, got {type(model).__name__}"
        )


# ═════════════════════════════════════════════════════════════════════
#  Queries
# ═════════════════════════════════════════════════════════════════════

def find_dependencies(model: ResolvedModel, symbol: Symbol) -> List[Dependency]:
    """Symbols *symbol* refers to directly, in first-mention order."""
    _check_model(model)
    order: List[str] = []
    ordinals: Dict[str, Set[int]] = {}
    targets: Dict[str, Symbol] = {}
    for ordinal, t in _mentions(symbol):
        if not isinstance(t, ItemType):
            continue
        target = model.symbol_of(t)
        if target is None:
            continue
        if t.key not in ordinals:
            order.append(t.key)
            ordinals[t.key] = set()
            targets[t.key] = target
        ordinals[t.key].add(ordinal)
    return [Dependency(frozenset(ordinals[k]), targets[k]) for k in order]


def find_references(model: ResolvedModel, symbol: Symbol) -> List[Dependency]:
    """Symbols that depend on *symbol*, in model order.

    Each entry carries the referring symbol and the union of its ordinals
    that mention *symbol*.
    """
    _check_model(model)
    result: List[Dependency] = []
    for candidate in model:
        found: Set[int] = set()
        for dep in find_dependencies(model, candidate):
            if dep.symbol.key == symbol.key:
                found |= dep.ordinals
        if found:
            result.append(Dependency(frozenset(found), candidate))
    return result


def dependencies_of(model: ResolvedModel, key: str) -> List[Dependency]:
    """``find_dependencies`` by key; raises ``NotFoundError`` for unknown keys."""
    _check_model(model)
    return find_dependencies(model, model.get(key))


def references_of(model: ResolvedModel, key: str) -> List[Dependency]:
    """``find_references`` by key; raises ``NotFoundError`` for unknown keys."""
    _check_model(model)
    return find_references(model, model.get(key))

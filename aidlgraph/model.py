"""aidlgraph/model.py – Symbol model shared by the builder, linker and graph.

A model is a key → symbol mapping plus the primitive registry.  It exists
in two explicitly different stages:

    UnresolvedModel   every non-primitive type is an ``UnresolvedType``
          │  link()
          ▼
    ResolvedModel     types are ``StandardType`` or ``ItemType``; an
                      ``UnresolvedType`` survivor is an unresolvable name

Graph queries accept only a ``ResolvedModel``.

Design invariants
-----------------
* Every node is a frozen dataclass; stages produce new values, never
  mutate old ones.
* A symbol's key (``"{package}.{name}"``) is computed once, at
  construction.
* ``ItemType`` stores the target symbol's *key*, not the symbol itself.
  The model's symbol table is the single owner of every symbol, so
  reference cycles between interfaces never become object cycles.
* Ordinals are contiguous from 0 within a symbol; interfaces share one
  counter between consts and methods.

Module layout
-------------
§1  Packages and primitive types
§2  Types       – StandardType | UnresolvedType | ItemType
§3  Members     – Arg, Const, Method, Member, EnumElement
§4  Symbols     – Interface | Struct | Enum
§5  Models      – UnresolvedModel, ResolvedModel
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum as _Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from aidlgraph.ast import Direction
from aidlgraph.errors import InvalidTypeError, NotFoundError

__all__ = [
    "Package",
    "PrimitiveType",
    "StandardType",
    "UnresolvedType",
    "ItemType",
    "Type",
    "Arg",
    "Const",
    "Method",
    "Member",
    "EnumElement",
    "SymbolKind",
    "Interface",
    "Struct",
    "Enum",
    "Symbol",
    "UnresolvedModel",
    "ResolvedModel",
    "walk_types",
]

# ════════════════════════════════════════════════════════════════════════
# §1  Packages and primitive types
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Package:
    """A dotted package path; ``""`` is the root package."""

    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class PrimitiveType:
    name: str
    package: Package
    key: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        key = f"{self.package.path}.{self.name}" if self.package.path else self.name
        object.__setattr__(self, "key", key)

    def is_void(self) -> bool:
        return self.name == "void"


# ════════════════════════════════════════════════════════════════════════
# §2  Types
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StandardType:
    """A reference to a built-in primitive."""

    primitive: PrimitiveType

    @property
    def name(self) -> str:
        return self.primitive.name

    @property
    def key(self) -> str:
        return self.primitive.key

    def is_void(self) -> bool:
        return self.primitive.is_void()


@dataclass(frozen=True, slots=True)
class UnresolvedType:
    """A bare type name plus the package of the symbol that wrote it."""

    owner: Package
    name: str
    key: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", f"{self.owner.path}:{self.name}")

    def is_void(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class ItemType:
    """A resolved reference to a declared symbol, held by key."""

    key: str
    name: str

    def is_void(self) -> bool:
        return False


Type = Union[StandardType, UnresolvedType, ItemType]


# ════════════════════════════════════════════════════════════════════════
# §3  Members
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Arg:
    """A typed slot: parameter, return value, member or generic argument.

    Generic parameters are nested ``Arg``s, so ``Map<String, Foo>`` is an
    ``Arg`` of type ``Map`` with two unnamed children.
    """

    name: str
    type: Type
    generic_args: Tuple["Arg", ...] = ()
    direction: Direction = Direction.UNSPECIFIED


@dataclass(frozen=True, slots=True)
class Const:
    name: str
    type: Type
    value: str
    ordinal: int
    doc: str = ""


@dataclass(frozen=True, slots=True)
class Method:
    name: str
    return_arg: Arg
    args: Tuple[Arg, ...]
    ordinal: int
    oneway: bool = False
    doc: str = ""


@dataclass(frozen=True, slots=True)
class Member:
    arg: Arg
    ordinal: int
    doc: str = ""

    @property
    def name(self) -> str:
        return self.arg.name


@dataclass(frozen=True, slots=True)
class EnumElement:
    name: str
    value: str
    ordinal: int
    doc: str = ""


# ════════════════════════════════════════════════════════════════════════
# §4  Symbols
# ════════════════════════════════════════════════════════════════════════


class SymbolKind(_Enum):
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"

    @property
    def rank(self) -> int:
        """Listing order: interfaces, then structs, then enums."""
        return _KIND_RANK[self]


_KIND_RANK = {SymbolKind.INTERFACE: 0, SymbolKind.STRUCT: 1, SymbolKind.ENUM: 2}


def _symbol_key(package: Package, name: str) -> str:
    return f"{package.path}.{name}"


@dataclass(frozen=True, slots=True)
class Interface:
    package: Package
    name: str
    consts: Tuple[Const, ...] = ()
    methods: Tuple[Method, ...] = ()
    imports: Tuple[str, ...] = ()
    doc: str = ""
    key: str = field(init=False, compare=False)

    kind = SymbolKind.INTERFACE

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _symbol_key(self.package, self.name))


@dataclass(frozen=True, slots=True)
class Struct:
    """A parcelable."""

    package: Package
    name: str
    members: Tuple[Member, ...] = ()
    imports: Tuple[str, ...] = ()
    doc: str = ""
    key: str = field(init=False, compare=False)

    kind = SymbolKind.STRUCT

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _symbol_key(self.package, self.name))


@dataclass(frozen=True, slots=True)
class Enum:
    package: Package
    name: str
    elements: Tuple[EnumElement, ...] = ()
    imports: Tuple[str, ...] = ()
    doc: str = ""
    key: str = field(init=False, compare=False)

    kind = SymbolKind.ENUM

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _symbol_key(self.package, self.name))


Symbol = Union[Interface, Struct, Enum]


def _walk_arg(arg: Arg) -> Iterator[Type]:
    for generic in arg.generic_args:
        yield from _walk_arg(generic)
    yield arg.type


def walk_types(symbol: Symbol) -> Iterator[Type]:
    """Yield every type occurrence in *symbol*, generic children first."""
    if isinstance(symbol, Interface):
        for const in symbol.consts:
            yield const.type
        for method in symbol.methods:
            for arg in method.args:
                yield from _walk_arg(arg)
            yield from _walk_arg(method.return_arg)
    elif isinstance(symbol, Struct):
        for member in symbol.members:
            yield from _walk_arg(member.arg)


# ════════════════════════════════════════════════════════════════════════
# §5  Models
# ════════════════════════════════════════════════════════════════════════


class _Model:
    """Read-only key → symbol table plus the primitive registry."""

    __slots__ = ("_symbols", "_primitives")

    def __init__(
        self,
        symbols: Mapping[str, Symbol],
        primitives: Mapping[str, PrimitiveType],
    ) -> None:
        self._symbols = MappingProxyType(dict(symbols))
        self._primitives = MappingProxyType(dict(primitives))

    @property
    def symbols(self) -> Mapping[str, Symbol]:
        return self._symbols

    @property
    def primitives(self) -> Mapping[str, PrimitiveType]:
        return self._primitives

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, key: object) -> bool:
        return key in self._symbols

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            dict(self._symbols) == dict(other._symbols)
            and dict(self._primitives) == dict(other._primitives)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._symbols)} symbols)"


class UnresolvedModel(_Model):
    """Builder output: every declared type is still a bare name."""

    __slots__ = ()


class ResolvedModel(_Model):
    """Linker output; the only stage graph queries accept."""

    __slots__ = ("_unresolved",)

    def __init__(
        self,
        symbols: Mapping[str, Symbol],
        primitives: Mapping[str, PrimitiveType],
    ) -> None:
        super().__init__(symbols, primitives)
        seen: List[str] = []
        for symbol in self._symbols.values():
            for t in walk_types(symbol):
                if isinstance(t, UnresolvedType) and t.key not in seen:
                    seen.append(t.key)
        self._unresolved = tuple(seen)

    @property
    def unresolved(self) -> Tuple[str, ...]:
        """Distinct keys of unresolved types that survived linking."""
        return self._unresolved

    def get(self, key: str) -> Symbol:
        """Return the symbol for *key*; raise ``NotFoundError`` if absent."""
        try:
            return self._symbols[key]
        except KeyError:
            raise NotFoundError(key) from None

    def _get_kind(self, key: str, kind: SymbolKind) -> Symbol:
        symbol = self.get(key)
        if symbol.kind is not kind:
            raise InvalidTypeError(key, kind.value, symbol.kind.value)
        return symbol

    def interface(self, key: str) -> Interface:
        return self._get_kind(key, SymbolKind.INTERFACE)  # type: ignore[return-value]

    def struct(self, key: str) -> Struct:
        return self._get_kind(key, SymbolKind.STRUCT)  # type: ignore[return-value]

    def enum(self, key: str) -> Enum:
        return self._get_kind(key, SymbolKind.ENUM)  # type: ignore[return-value]

    def symbol_of(self, t: Type) -> Optional[Symbol]:
        """Follow an ``ItemType`` to its symbol; ``None`` for anything else."""
        if isinstance(t, ItemType):
            return self._symbols.get(t.key)
        return None

"""aidlgraph/ast.py – Abstract syntax of AIDL source files.

The parser produces these nodes; the builder consumes them. Nothing here is
resolved: a ``TypeRef`` is just the name the author wrote plus its generic
arguments.

Design invariants
-----------------
* Every AST node is a frozen dataclass (immutable after construction).
* Nodes that carry children use tuples, never lists.
* Declaration order is preserved everywhere (consts and methods are kept
  in separate tuples, each in source order).
* Documentation is the text of the last ``/** ... */`` comment directly
  preceding a declaration, ``""`` when there is none.
* Annotations are opaque: ``@Name(args)`` is kept as the text ``Name(args)``.

Module layout
-------------
§1  Leaf nodes  – annotations, directions, type references
§2  Members     – args, consts, methods, parcelable members, enum elements
§3  Items       – interface, parcelable, enum declarations
§4  File        – compilation unit
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

__all__ = [
    "Annotation",
    "Direction",
    "TypeRef",
    "ArgDecl",
    "ConstDecl",
    "MethodDecl",
    "MemberDecl",
    "EnumElementDecl",
    "InterfaceDecl",
    "ParcelableDecl",
    "EnumDecl",
    "Item",
    "File",
]

# ════════════════════════════════════════════════════════════════════════
# §1  Leaf nodes
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Annotation:
    """``@Name`` or ``@Name(raw text)``, stored without the ``@``."""

    text: str

    def __str__(self) -> str:
        return f"@{self.text}"


class Direction(Enum):
    """Parameter direction keyword."""

    IN = "in"
    OUT = "out"
    INOUT = "inout"
    UNSPECIFIED = ""


@dataclass(frozen=True, slots=True)
class TypeRef:
    """A type as written: a possibly dotted name plus generic arguments.

    ``Foo[]`` is represented as ``TypeRef("Array", (TypeRef("Foo"),))``.
    """

    name: str
    generic_types: Tuple["TypeRef", ...] = ()

    def pretty(self) -> str:
        if not self.generic_types:
            return self.name
        inner = ", ".join(t.pretty() for t in self.generic_types)
        return f"{self.name}<{inner}>"


# ════════════════════════════════════════════════════════════════════════
# §2  Members
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ArgDecl:
    """One method parameter. ``name`` is ``""`` for unnamed parameters."""

    name: str
    arg_type: TypeRef
    direction: Direction = Direction.UNSPECIFIED
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class ConstDecl:
    """``const Type NAME = value;`` – value is kept as raw text."""

    name: str
    const_type: TypeRef
    value: str
    doc: str = ""
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class MethodDecl:
    """``[oneway] ReturnType name(args) [= id];``"""

    name: str
    return_type: TypeRef
    args: Tuple[ArgDecl, ...] = ()
    is_oneway: bool = False
    doc: str = ""
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class MemberDecl:
    """``Type name [= value];`` inside a parcelable."""

    name: str
    member_type: TypeRef
    doc: str = ""
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class EnumElementDecl:
    """``NAME [= value]`` – value is raw text, ``""`` when absent."""

    name: str
    value: str = ""
    doc: str = ""


# ════════════════════════════════════════════════════════════════════════
# §3  Items
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class InterfaceDecl:
    name: str
    doc: str = ""
    consts: Tuple[ConstDecl, ...] = ()
    methods: Tuple[MethodDecl, ...] = ()
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class ParcelableDecl:
    name: str
    doc: str = ""
    members: Tuple[MemberDecl, ...] = ()
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class EnumDecl:
    name: str
    doc: str = ""
    elements: Tuple[EnumElementDecl, ...] = ()
    annotations: Tuple[Annotation, ...] = ()


Item = Union[InterfaceDecl, ParcelableDecl, EnumDecl]


# ════════════════════════════════════════════════════════════════════════
# §4  File
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class File:
    """A parsed compilation unit."""

    package: str
    imports: Tuple[str, ...] = ()
    items: Tuple[Item, ...] = ()
    source_name: str = field(default="<string>", compare=False)

    def item_by_name(self, name: str) -> Optional[Item]:
        """Look up a top-level declaration by name."""
        for item in self.items:
            if item.name == name:
                return item
        return None

"""
sexp.py: S-expression rendering of parsed files and model symbols
=================================================================

A compact, stable text form of the pipeline's data, for debugging and
golden tests.  Rendering goes through ``sexpdata.dumps``, so the output
reads back with ``sexpdata.loads``.

Shapes::

    (file (package "com.foo") (imports "com.bar.IBar") ITEM...)
    (interface "com.foo.IFoo" (doc "...") (const 0 "V" "int" "4")
               (method 1 "get" (returns TYPE) (args (arg "x" TYPE in))))
    (struct "com.foo.Data" (member 0 "id" TYPE))
    (enum "com.foo.Color" (element 0 "RED" "1"))
    (model SYMBOL...)

A type is its name (``"int"``, ``"com.foo.IBar"`` for a resolved
symbol), ``(unresolved "com.foo:Missing")``, or a list headed by one of
those followed by its generic arguments: ``("Map" "String" ("List" "int"))``.
Keywords are symbols; names, keys and values are strings.
"""

from __future__ import annotations

from typing import Any, List, Union

import sexpdata
from sexpdata import Symbol

from aidlgraph import ast as A
from aidlgraph.model import (
    Arg,
    Enum,
    Interface,
    Struct,
    Symbol as ModelSymbol,
    Type,
    UnresolvedModel,
    ResolvedModel,
    UnresolvedType,
)

__all__ = ["dumps_file", "dumps_symbol", "dumps_model", "file_to_sexp", "symbol_to_sexp"]


def _doc(doc: str) -> List[Any]:
    return [[Symbol("doc"), doc]] if doc else []


def _direction(direction: A.Direction) -> List[Any]:
    if direction is A.Direction.UNSPECIFIED:
        return []
    return [Symbol(direction.value)]


# ===================================================================
#  AST
# ===================================================================

def _type_ref(t: A.TypeRef) -> Any:
    if not t.generic_types:
        return t.name
    return [t.name] + [_type_ref(g) for g in t.generic_types]


def _annotations(annotations) -> List[Any]:
    if not annotations:
        return []
    return [[Symbol("annotations")] + [a.text for a in annotations]]


def _item_to_sexp(item: A.Item) -> List[Any]:
    if isinstance(item, A.InterfaceDecl):
        body: List[Any] = []
        for c in item.consts:
            body.append(
                [Symbol("const"), c.name, _type_ref(c.const_type), c.value]
                + _doc(c.doc)
            )
        for m in item.methods:
            head: List[Any] = [Symbol("method"), m.name]
            if m.is_oneway:
                head.append(Symbol("oneway"))
            args = [
                [Symbol("arg"), a.name, _type_ref(a.arg_type)] + _direction(a.direction)
                for a in m.args
            ]
            body.append(
                head
                + [[Symbol("returns"), _type_ref(m.return_type)]]
                + [[Symbol("args")] + args]
                + _doc(m.doc)
            )
        keyword = "interface"
    elif isinstance(item, A.ParcelableDecl):
        body = [
            [Symbol("member"), m.name, _type_ref(m.member_type)] + _doc(m.doc)
            for m in item.members
        ]
        keyword = "parcelable"
    else:
        body = [
            [Symbol("element"), e.name, e.value] + _doc(e.doc)
            for e in item.elements
        ]
        keyword = "enum"
    return (
        [Symbol(keyword), item.name]
        + _annotations(item.annotations)
        + _doc(item.doc)
        + body
    )


def file_to_sexp(file: A.File) -> List[Any]:
    """Nested-list form of a parsed file, ready for ``sexpdata.dumps``."""
    return (
        [Symbol("file"), [Symbol("package"), file.package]]
        + [[Symbol("imports")] + list(file.imports)]
        + [_item_to_sexp(item) for item in file.items]
    )


def dumps_file(file: A.File) -> str:
    return sexpdata.dumps(file_to_sexp(file))


# ===================================================================
#  Model
# ===================================================================

def _type(t: Type) -> Any:
    if isinstance(t, UnresolvedType):
        return [Symbol("unresolved"), t.key]
    return t.key


def _arg_type(arg: Arg) -> Any:
    if not arg.generic_args:
        return _type(arg.type)
    return [_type(arg.type)] + [_arg_type(g) for g in arg.generic_args]


def symbol_to_sexp(symbol: ModelSymbol) -> List[Any]:
    """Nested-list form of one model symbol."""
    body: List[Any] = []
    if isinstance(symbol, Interface):
        for c in symbol.consts:
            body.append([Symbol("const"), c.ordinal, c.name, _type(c.type), c.value])
        for m in symbol.methods:
            head: List[Any] = [Symbol("method"), m.ordinal, m.name]
            if m.oneway:
                head.append(Symbol("oneway"))
            args = [
                [Symbol("arg"), a.name, _arg_type(a)] + _direction(a.direction)
                for a in m.args
            ]
            body.append(
                head
                + [[Symbol("returns"), _arg_type(m.return_arg)]]
                + [[Symbol("args")] + args]
            )
    elif isinstance(symbol, Struct):
        for member in symbol.members:
            body.append(
                [Symbol("member"), member.ordinal, member.name, _arg_type(member.arg)]
            )
    elif isinstance(symbol, Enum):
        for e in symbol.elements:
            body.append([Symbol("element"), e.ordinal, e.name, e.value])
    return [Symbol(symbol.kind.value), symbol.key] + _doc(symbol.doc) + body


def dumps_symbol(symbol: ModelSymbol) -> str:
    return sexpdata.dumps(symbol_to_sexp(symbol))


def dumps_model(model: Union[UnresolvedModel, ResolvedModel]) -> str:
    """All symbols of *model*, in model order."""
    return sexpdata.dumps([Symbol("model")] + [symbol_to_sexp(s) for s in model])

# tests/test_sexp.py
"""
Tests for the S-expression debug rendering.
"""

import sexpdata
from sexpdata import Symbol

from aidlgraph.builder import build
from aidlgraph.linker import link
from aidlgraph.parser import parse
from aidlgraph.sexp import dumps_file, dumps_model, dumps_symbol, symbol_to_sexp
from tests.conftest import ENUM_AIDL, PARCELABLE_AIDL, UNRESOLVED_AIDL


def _load(text):
    return sexpdata.loads(text, nil=None, true=None, false=None)


class TestDumpFile:

    def test_interface(self):
        src = (
            "package a.b;\n"
            "import c.d;\n"
            "/** Doc. */\n"
            "interface I {\n"
            "  const int X = 1;\n"
            "  oneway void f(in Map<String, List<int>> m);\n"
            "}"
        )
        tree = _load(dumps_file(parse(src)))
        assert tree[0] == Symbol("file")
        assert tree[1] == [Symbol("package"), "a.b"]
        assert tree[2] == [Symbol("imports"), "c.d"]
        iface = tree[3]
        assert iface[:3] == [Symbol("interface"), "I", [Symbol("doc"), "Doc."]]
        assert iface[3] == [Symbol("const"), "X", "int", "1"]
        assert iface[4] == [
            Symbol("method"), "f", Symbol("oneway"),
            [Symbol("returns"), "void"],
            [Symbol("args"),
             [Symbol("arg"), "m", ["Map", "String", ["List", "int"]], Symbol("in")]],
        ]

    def test_enum_with_annotation(self):
        tree = _load(dumps_file(parse(ENUM_AIDL)))
        enum = tree[3]
        assert enum[0] == Symbol("enum")
        assert enum[1] == "Color"
        assert enum[2] == [Symbol("annotations"), 'Backing(type="int")']
        assert enum[3] == [Symbol("doc"), "Primary colors."]
        assert enum[4] == [Symbol("element"), "RED", "1"]


class TestDumpSymbol:

    def test_struct_resolved(self):
        model = link(build([parse(PARCELABLE_AIDL)]))
        tree = _load(dumps_symbol(model.get("com.example.data.Polygon")))
        assert tree[0] == Symbol("struct")
        assert tree[1] == "com.example.data.Polygon"
        assert tree[2] == [Symbol("doc"), "A polygon."]
        assert tree[3] == [Symbol("member"), 0, "corners", ["Array", "com.example.data.Point"]]
        assert tree[4] == [Symbol("member"), 1, "name", "String"]

    def test_unresolved_type(self):
        model = link(build([parse(UNRESOLVED_AIDL)]))
        tree = _load(dumps_symbol(model.get("com.broken.Lonely")))
        method = tree[2]
        assert method[:3] == [Symbol("method"), 0, "meet"]
        assert method[3] == [Symbol("returns"), "void"]
        assert method[4] == [
            Symbol("args"),
            [Symbol("arg"), "s", [Symbol("unresolved"), "com.broken:Stranger"]],
        ]

    def test_list_form_matches_text(self):
        model = link(build([parse(ENUM_AIDL)]))
        color = model.get("com.example.data.Color")
        assert _load(dumps_symbol(color)) == symbol_to_sexp(color)


class TestDumpModel:

    def test_model_order(self):
        model = link(build([parse(PARCELABLE_AIDL), parse(ENUM_AIDL)]))
        tree = _load(dumps_model(model))
        assert tree[0] == Symbol("model")
        assert [entry[1] for entry in tree[1:]] == [
            "com.example.data.Point",
            "com.example.data.Polygon",
            "com.example.data.Color",
        ]

# tests/test_parser.py
"""
Tests for the AIDL parser: source text → AST nodes.
"""

import pytest

from aidlgraph.ast import (
    Annotation,
    Direction,
    EnumDecl,
    File,
    InterfaceDecl,
    ParcelableDecl,
    TypeRef,
)
from aidlgraph.errors import ParseError, ParseFileError
from aidlgraph.parser import ParsedBatch, parse, parse_batch
from tests.conftest import (
    ENUM_AIDL,
    PARCELABLE_AIDL,
    SALAD_DOC,
    SERVICE_AIDL,
    TEST_AIDL,
)


class TestParseFile:

    def test_package_only(self):
        f = parse("package com.example;")
        assert isinstance(f, File)
        assert f.package == "com.example"
        assert f.imports == ()
        assert f.items == ()

    def test_source_name_recorded(self):
        f = parse("package a;", source_name="A.aidl")
        assert f.source_name == "A.aidl"

    def test_imports_and_forward_declarations(self):
        src = """
            package a.b;
            import x.y;
            import z.*;
            parcelable Fwd;
            interface I {}
        """
        f = parse(src)
        assert f.imports == ("x.y", "z.*")
        assert len(f.items) == 1
        assert f.items[0].name == "I"

    def test_item_order_preserved(self):
        f = parse(TEST_AIDL)
        assert [i.name for i in f.items] == [
            "FirstService", "SecondService", "ThirdService",
        ]

    def test_item_by_name(self):
        f = parse(TEST_AIDL)
        assert f.item_by_name("SecondService").name == "SecondService"
        assert f.item_by_name("Nope") is None

    def test_comments_everywhere(self):
        src = (
            "package /* c */ a ; // x\n"
            "interface /* y */ Foo /* z */ { // w\n"
            "  void /* t */ f( /* u */ int /* v */ x ) ; }\n"
            "// trailing\n"
        )
        f = parse(src)
        method = f.items[0].methods[0]
        assert method.name == "f"
        assert method.args[0].name == "x"
        assert method.args[0].arg_type == TypeRef("int")


class TestParseInterface:

    def test_concrete_service(self):
        f = parse(TEST_AIDL)
        first = f.items[0]
        assert isinstance(first, InterfaceDecl)
        assert [c.name for c in first.consts] == ["VERSION"]
        assert [m.name for m in first.methods] == [
            "getMessage1", "getMessage2", "getMessage3",
            "getResult", "useOtherServices",
        ]

    def test_javadoc_extraction(self):
        first = parse(TEST_AIDL).items[0]
        assert first.doc == SALAD_DOC
        assert "Krumpli" not in first.doc

    def test_single_line_javadoc(self):
        f = parse("package a;\n/** Prepare a salad. */\ninterface FirstService {}")
        assert f.items[0].doc == "Prepare a salad."

    def test_line_comment_after_javadoc_drops_it(self):
        f = parse("package a;\n/** doc */\n// plain\ninterface Foo {}")
        assert f.items[0].doc == ""

    def test_plain_block_comment_is_not_doc(self):
        f = parse("package a;\n/* not doc */\ninterface Foo {}")
        assert f.items[0].doc == ""

    def test_method_doc(self):
        src = "package a;\ninterface Foo {\n  /** Does f. */\n  void f();\n  void g();\n}"
        methods = parse(src).items[0].methods
        assert methods[0].doc == "Does f."
        assert methods[1].doc == ""

    def test_unnamed_and_named_args(self):
        first = parse(TEST_AIDL).items[0]
        get1, get2, get3 = first.methods[:3]
        assert get1.args[0].name == "name"
        assert get2.args[0].name == ""
        assert get3.args[0].name == ""
        assert get3.args[0].arg_type == TypeRef("String")

    def test_generic_args(self):
        get_result = parse(TEST_AIDL).items[0].methods[3]
        assert get_result.is_oneway
        assert get_result.return_type == TypeRef("int")
        assert len(get_result.args) == 2
        assert get_result.args[1].name == "val2"
        assert get_result.args[1].arg_type == TypeRef(
            "Map",
            (TypeRef("String"), TypeRef("Vector", (TypeRef("int"),))),
        )

    def test_pretty_type(self):
        get_result = parse(TEST_AIDL).items[0].methods[3]
        assert get_result.args[1].arg_type.pretty() == "Map<String, Vector<int>>"

    def test_oneway_flag(self):
        methods = parse(TEST_AIDL).items[0].methods
        assert not methods[0].is_oneway
        assert methods[4].is_oneway

    def test_const_values(self):
        src = """
            package a;
            interface Consts {
                const int VERSION = 4;
                const String NAME = "hello";
                const double PI = 3.14;
                const int MASK = 0x1F;
                const int NEG = -1;
                const int[] EMPTY = {};
            }
        """
        consts = parse(src).items[0].consts
        assert [c.value for c in consts] == ["4", "hello", "3.14", "0x1F", "-1", "{}"]
        assert consts[1].const_type == TypeRef("String")
        assert consts[5].const_type == TypeRef("Array", (TypeRef("int"),))

    def test_method_with_transaction_id(self):
        f = parse("package a;\ninterface Foo { void f() = 3; int g(int x)=4; }")
        assert [m.name for m in f.items[0].methods] == ["f", "g"]

    def test_directions(self):
        src = (
            "package a;\n"
            "interface Foo { void f(in int a, out String b, "
            "inout List<String> c, int d); }"
        )
        args = parse(src).items[0].methods[0].args
        assert [a.direction for a in args] == [
            Direction.IN, Direction.OUT, Direction.INOUT, Direction.UNSPECIFIED,
        ]
        assert args[0].arg_type == TypeRef("int")
        assert args[2].arg_type == TypeRef("List", (TypeRef("String"),))

    def test_direction_prefix_is_not_a_keyword(self):
        args = parse("package a;\ninterface Foo { void f(int inbox); }").items[0].methods[0].args
        assert args[0].direction is Direction.UNSPECIFIED
        assert args[0].arg_type == TypeRef("int")
        assert args[0].name == "inbox"

    def test_array_types(self):
        src = "package a;\ninterface Foo { void f(int [] a, Foo[][] b); }"
        args = parse(src).items[0].methods[0].args
        assert args[0].arg_type == TypeRef("Array", (TypeRef("int"),))
        assert args[1].arg_type == TypeRef(
            "Array", (TypeRef("Array", (TypeRef("Foo"),)),)
        )

    def test_qualified_type_name(self):
        src = "package a;\ninterface Foo { com.other.Bar get(); }"
        method = parse(src).items[0].methods[0]
        assert method.return_type == TypeRef("com.other.Bar")

    def test_annotations(self):
        src = """
            package a;
            @VintfStability
            interface Foo {
                @nullable String get(@utf8InCpp String key);
                @JavaDefault @Hide const int X = 1;
            }
        """
        item = parse(src).items[0]
        assert item.annotations == (Annotation("VintfStability"),)
        method = item.methods[0]
        assert method.annotations == (Annotation("nullable"),)
        assert method.args[0].annotations == (Annotation("utf8InCpp"),)
        assert [str(a) for a in item.consts[0].annotations] == ["@JavaDefault", "@Hide"]

    def test_empty_interface(self):
        item = parse("package a;\ninterface Empty {}").items[0]
        assert item.consts == ()
        assert item.methods == ()


class TestParseParcelable:

    def test_members(self):
        f = parse(PARCELABLE_AIDL)
        point, polygon = f.items
        assert isinstance(point, ParcelableDecl)
        assert [m.name for m in point.members] == ["x", "y"]
        assert [m.name for m in polygon.members] == ["corners", "name", "labels"]

    def test_member_types(self):
        polygon = parse(PARCELABLE_AIDL).items[1]
        assert polygon.members[0].member_type == TypeRef("Array", (TypeRef("Point"),))
        assert polygon.members[2].member_type == TypeRef(
            "Map", (TypeRef("String"), TypeRef("List", (TypeRef("Point"),))),
        )

    def test_docs(self):
        polygon = parse(PARCELABLE_AIDL).items[1]
        assert polygon.doc == "A polygon."
        assert polygon.members[0].doc == "Corner points, in order."
        assert polygon.members[1].doc == ""


class TestParseEnum:

    def test_elements(self):
        color = parse(ENUM_AIDL).items[0]
        assert isinstance(color, EnumDecl)
        assert [(e.name, e.value) for e in color.elements] == [
            ("RED", "1"), ("GREEN", "2"), ("BLUE", ""),
        ]

    def test_doc_and_annotation(self):
        color = parse(ENUM_AIDL).items[0]
        assert color.doc == "Primary colors."
        assert color.annotations == (Annotation('Backing(type="int")'),)
        assert color.elements[1].doc == "The green one."

    def test_string_values_and_no_trailing_comma(self):
        color = parse('package a;\nenum E { A = "x", B }').items[0]
        assert [(e.name, e.value) for e in color.elements] == [("A", "x"), ("B", "")]

    def test_empty_enum(self):
        assert parse("package a;\nenum E {}").items[0].elements == ()


class TestParseErrors:

    def test_missing_package(self):
        with pytest.raises(ParseError) as exc_info:
            parse("interface Foo {}")
        assert exc_info.value.line == 1
        assert exc_info.value.column == 1

    def test_unexpected_element_location(self):
        src = "package com.x;\ninterface Foo {\n    completely_unexpected\n}\n"
        with pytest.raises(ParseError) as exc_info:
            parse(src, source_name="Foo.aidl")
        err = exc_info.value
        assert err.line == 3
        assert err.column == 5
        assert err.section == "completely_unexpected"
        assert err.source_name == "Foo.aidl"
        assert str(err).startswith("Foo.aidl:3:5: ")

    def test_long_section_is_truncated(self):
        src = "package a;\ninterface Foo {\n    this is definitely not valid aidl at all;\n}"
        with pytest.raises(ParseError) as exc_info:
            parse(src)
        section = exc_info.value.section
        assert len(section) == 30
        assert section == "this is definitely not vali..."

    def test_no_recovery_after_bad_element(self):
        src = "package a;\ninterface Foo {\n  void ok();\n  ???;\n  void later();\n}"
        with pytest.raises(ParseError) as exc_info:
            parse(src)
        assert exc_info.value.line == 4
        assert exc_info.value.section == "???"

    def test_bad_parcelable_member(self):
        with pytest.raises(ParseError) as exc_info:
            parse("package a;\nparcelable P {\n  int;\n}")
        assert exc_info.value.line == 3
        assert exc_info.value.section == "int"

    def test_unterminated_body(self):
        with pytest.raises(ParseError):
            parse("package a;\ninterface Foo {\n  void f();\n")

    def test_unterminated_comment(self):
        with pytest.raises(ParseError) as exc_info:
            parse("package a;\n/* never closed")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 1

    def test_garbage_at_top_level(self):
        with pytest.raises(ParseError) as exc_info:
            parse("package a;\ninterface Foo {}\nstruct Bar {}")
        assert exc_info.value.line == 3

    def test_to_dict(self):
        with pytest.raises(ParseError) as exc_info:
            parse("interface Foo {}", source_name="x.aidl")
        d = exc_info.value.to_dict()
        assert d["source"] == "x.aidl"
        assert d["line"] == 1
        assert d["column"] == 1


class TestParseBatch:

    def test_good_and_bad_units(self):
        batch = parse_batch({
            "service.aidl": SERVICE_AIDL,
            "bad.aidl": "interface Foo {}",
        })
        assert isinstance(batch, ParsedBatch)
        assert not batch.ok
        assert [f.source_name for f in batch.files] == ["service.aidl"]
        assert len(batch.errors) == 1
        err = batch.errors[0]
        assert isinstance(err, ParseFileError)
        assert err.name == "bad.aidl"
        assert err.line == 1
        assert err.content_error.source_name == "bad.aidl"

    def test_pairs_keep_order(self):
        batch = parse_batch([
            ("b.aidl", "package b;"),
            ("a.aidl", "package a;"),
        ])
        assert batch.ok
        assert [f.package for f in batch.files] == ["b", "a"]

    def test_failure_is_logged(self, caplog):
        with caplog.at_level("ERROR", logger="aidlgraph.parser"):
            parse_batch([("bad.aidl", "nonsense")])
        assert "bad.aidl" in caplog.text

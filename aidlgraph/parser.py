"""aidlgraph/parser.py – AIDL source text → AST parser.

Converts the text of one ``.aidl`` compilation unit into the frozen AST
nodes defined in :mod:`aidlgraph.ast`.

Design principles
-----------------
* **Single-pass, recursive-descent** directly over the character stream;
  there is no separate token list because comments double as
  documentation and must be seen in place.
* **Backtracking alternatives** – an alternative that does not apply
  raises the internal ``_NoMatch`` and the caller rewinds the cursor
  (``_attempt``).  Only a committed construct produces a ``ParseError``.
* **Fail-fast with location** – the first hard failure stops the unit and
  is reported with line, column and a short excerpt of the offending text.
  Inside a declaration body the excerpt is the offending element, up to
  the next ``;`` or ``}``.
* **Comments are trivia** – ``//`` and ``/* */`` comments are allowed
  wherever whitespace is.  The last ``/** ... */`` directly preceding a
  declaration becomes its documentation.

Public API
----------
``parse(text, source_name="<string>") -> aidlgraph.ast.File``
    Parse a complete compilation unit, raising ``ParseError``.

``parse_batch(sources) -> ParsedBatch``
    Parse several units; failures are collected per unit.

Surface syntax (overview)
-------------------------
::

    file        → comment* 'package' NAME ';' (import | forward)* item*
    import      → 'import' NAME ('.' '*')? ';'
    forward     → ('interface' | 'parcelable' | 'enum') IDENT ';'
    item        → annotation* ( interface | parcelable | enum )
    interface   → 'interface' IDENT '{' (const | method)* '}'
    parcelable  → 'parcelable' IDENT '{' member* '}'
    enum        → 'enum' IDENT '{' (element (',' element)* ','?)? '}'
    const       → annotation* 'const' type IDENT '=' value ';'
    method      → annotation* 'oneway'? type IDENT '(' args? ')' ('=' INT)? ';'
    member      → annotation* type IDENT ('=' value)? ';'
    element     → IDENT ('=' (INT | STRING))?
    args        → arg (',' arg)*
    arg         → annotation* direction? type IDENT?
    direction   → 'in' | 'out' | 'inout'
    type        → NAME ('<' type (',' type)* '>')? '[]'*
    annotation  → '@' NAME ('(' raw-text ')')?
    value       → NUMBER | STRING | '{}'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import (
    Callable,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from aidlgraph import ast as A
from aidlgraph.errors import SECTION_LIMIT, ParseError, ParseFileError

__all__ = ["parse", "parse_batch", "ParsedBatch"]

logger = logging.getLogger(__name__)

R = TypeVar("R")

# ═══════════════════════════════════════════════════════════════════════
#  Lexical patterns
# ═══════════════════════════════════════════════════════════════════════

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")
_NUMBER_RE = re.compile(r"-?(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d*)?[fFlL]?)")
_INT_RE = re.compile(r"-?\d+")

_ITEM_KEYWORDS = ("interface", "parcelable", "enum")
_DIRECTIONS = (A.Direction.INOUT, A.Direction.IN, A.Direction.OUT)


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _javadoc(comment: str) -> str:
    """Extract documentation text from a ``/** ... */`` comment.

    Each line is stripped of surrounding whitespace and one leading ``*``;
    non-empty lines are joined with a single space.
    """
    if not comment.startswith("/**"):
        return ""
    lines: List[str] = []
    for raw in comment[3:-2].splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line:
            lines.append(line)
    return " ".join(lines)


# ═══════════════════════════════════════════════════════════════════════
#  Parser
# ═══════════════════════════════════════════════════════════════════════

class _NoMatch(Exception):
    """The alternative being tried does not apply at the cursor."""


class _Parser:
    """Recursive descent parser for one AIDL compilation unit."""

    def __init__(self, text: str, source_name: str = "<string>"):
        self._text = text
        self._source_name = source_name
        self._pos = 0
        self._n = len(text)

    # ---- Cursor helpers ----

    def _at_end(self) -> bool:
        return self._pos >= self._n

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < self._n else ""

    def _literal(self, s: str) -> bool:
        if self._text.startswith(s, self._pos):
            self._pos += len(s)
            return True
        return False

    def _keyword(self, word: str) -> bool:
        """Consume *word* only when it is not the prefix of a longer identifier."""
        end = self._pos + len(word)
        if not self._text.startswith(word, self._pos):
            return False
        if end < self._n and _is_ident_char(self._text[end]):
            return False
        self._pos = end
        return True

    def _match(self, pattern: re.Pattern) -> Optional[str]:
        m = pattern.match(self._text, self._pos)
        if m is None:
            return None
        self._pos = m.end()
        return m.group()

    def _require(self, pattern: re.Pattern) -> str:
        value = self._match(pattern)
        if value is None:
            raise _NoMatch()
        return value

    def _require_literal(self, s: str) -> None:
        self._skip_trivia()
        if not self._literal(s):
            raise _NoMatch()

    def _attempt(self, fn: Callable[..., R], *args) -> Optional[R]:
        """Run *fn*; on ``_NoMatch`` rewind the cursor and return ``None``."""
        saved = self._pos
        try:
            return fn(*args)
        except _NoMatch:
            self._pos = saved
            return None

    def _skip_ws(self) -> None:
        while self._pos < self._n and self._text[self._pos].isspace():
            self._pos += 1

    def _skip_trivia(self) -> str:
        """Skip whitespace and comments.

        Returns the documentation of the last comment skipped when it is a
        javadoc block, ``""`` otherwise.
        """
        last_block: Optional[str] = None
        while True:
            self._skip_ws()
            if self._text.startswith("//", self._pos):
                end = self._text.find("\n", self._pos)
                self._pos = self._n if end < 0 else end
                last_block = None
            elif self._text.startswith("/*", self._pos):
                end = self._text.find("*/", self._pos + 2)
                if end < 0:
                    raise self._error(self._pos, message="unterminated comment")
                last_block = self._text[self._pos:end + 2]
                self._pos = end + 2
            else:
                break
        return _javadoc(last_block) if last_block else ""

    # ---- Errors ----

    def _error(self, pos: int, section: Optional[str] = None,
               message: str = "syntax error") -> ParseError:
        if section is None:
            section = self._text[pos:pos + SECTION_LIMIT]
        return ParseError.at(self._text, pos, section, self._source_name, message)

    def _element_error(self, pos: int) -> ParseError:
        """Error for a body element: the excerpt runs up to the next ';' or '}'."""
        end = pos
        while end < self._n and self._text[end] not in ";}":
            end += 1
        section = self._text[pos:end].rstrip() or None
        return self._error(pos, section, message="unexpected element")

    # ---- File ----

    def parse_file(self) -> A.File:
        self._skip_trivia()
        package = self._parse_package()

        imports: List[str] = []
        while True:
            saved = self._pos
            self._skip_trivia()
            imported = self._attempt(self._parse_import)
            if imported is not None:
                imports.append(imported)
                continue
            if self._attempt(self._parse_forward_declaration):
                continue
            self._pos = saved
            break

        items: List[A.Item] = []
        while True:
            doc = self._skip_trivia()
            if self._at_end():
                break
            items.append(self._parse_item(doc))

        return A.File(
            package=package,
            imports=tuple(imports),
            items=tuple(items),
            source_name=self._source_name,
        )

    def _parse_package(self) -> str:
        """package → 'package' NAME ';'"""
        if not self._keyword("package"):
            raise self._error(self._pos, message="expected 'package'")
        self._skip_trivia()
        name = self._match(_NAME_RE)
        if name is None:
            raise self._error(self._pos, message="expected package name")
        self._skip_trivia()
        if not self._literal(";"):
            raise self._error(self._pos, message="expected ';'")
        return name

    def _parse_import(self) -> str:
        """import → 'import' NAME ('.' '*')? ';'"""
        if not self._keyword("import"):
            raise _NoMatch()
        self._skip_trivia()
        name = self._require(_NAME_RE)
        if self._literal(".*"):
            name += ".*"
        self._require_literal(";")
        return name

    def _parse_forward_declaration(self) -> bool:
        """forward → ('interface' | 'parcelable' | 'enum') IDENT ';'"""
        if not any(self._keyword(k) for k in _ITEM_KEYWORDS):
            raise _NoMatch()
        self._skip_trivia()
        self._require(_IDENT_RE)
        self._require_literal(";")
        return True

    # ---- Items ----

    def _parse_item(self, doc: str) -> A.Item:
        start = self._pos
        try:
            annotations = self._parse_annotations()
            self._skip_trivia()
            if self._keyword("interface"):
                return self._parse_interface(doc, annotations)
            if self._keyword("parcelable"):
                return self._parse_parcelable(doc, annotations)
            if self._keyword("enum"):
                return self._parse_enum(doc, annotations)
        except _NoMatch:
            pass
        raise self._error(start, message="expected interface, parcelable or enum")

    def _parse_item_header(self) -> str:
        """IDENT '{' after an item keyword; failures here are hard errors."""
        self._skip_trivia()
        name = self._match(_IDENT_RE)
        if name is None:
            raise self._error(self._pos, message="expected a name")
        self._skip_trivia()
        if not self._literal("{"):
            raise self._error(self._pos, message="expected '{'")
        return name

    def _at_body_end(self) -> bool:
        """Consume a closing brace; a body running into EOF is a hard error."""
        if self._literal("}"):
            return True
        if self._at_end():
            raise self._error(self._pos, message="expected '}'")
        return False

    def _parse_interface(
        self, doc: str, annotations: Tuple[A.Annotation, ...]
    ) -> A.InterfaceDecl:
        name = self._parse_item_header()
        consts: List[A.ConstDecl] = []
        methods: List[A.MethodDecl] = []
        while True:
            element_doc = self._skip_trivia()
            if self._at_body_end():
                break
            start = self._pos
            const = self._attempt(self._parse_const, element_doc)
            if const is not None:
                consts.append(const)
                continue
            method = self._attempt(self._parse_method, element_doc)
            if method is not None:
                methods.append(method)
                continue
            raise self._element_error(start)
        return A.InterfaceDecl(
            name=name,
            doc=doc,
            consts=tuple(consts),
            methods=tuple(methods),
            annotations=annotations,
        )

    def _parse_parcelable(
        self, doc: str, annotations: Tuple[A.Annotation, ...]
    ) -> A.ParcelableDecl:
        name = self._parse_item_header()
        members: List[A.MemberDecl] = []
        while True:
            member_doc = self._skip_trivia()
            if self._at_body_end():
                break
            start = self._pos
            member = self._attempt(self._parse_member, member_doc)
            if member is None:
                raise self._element_error(start)
            members.append(member)
        return A.ParcelableDecl(
            name=name,
            doc=doc,
            members=tuple(members),
            annotations=annotations,
        )

    def _parse_enum(
        self, doc: str, annotations: Tuple[A.Annotation, ...]
    ) -> A.EnumDecl:
        name = self._parse_item_header()
        elements: List[A.EnumElementDecl] = []
        element_doc = self._skip_trivia()
        if not self._at_body_end():
            while True:
                start = self._pos
                element = self._attempt(self._parse_enum_element, element_doc)
                if element is None:
                    raise self._element_error(start)
                elements.append(element)
                self._skip_trivia()
                if self._literal(","):
                    element_doc = self._skip_trivia()
                    if self._at_body_end():
                        break
                    continue
                if self._at_body_end():
                    break
                raise self._element_error(self._pos)
        return A.EnumDecl(
            name=name,
            doc=doc,
            elements=tuple(elements),
            annotations=annotations,
        )

    # ---- Body elements ----

    def _parse_const(self, doc: str) -> A.ConstDecl:
        """const → annotation* 'const' type IDENT '=' value ';'"""
        annotations = self._parse_annotations()
        self._skip_trivia()
        if not self._keyword("const"):
            raise _NoMatch()
        self._skip_trivia()
        const_type = self._parse_type()
        self._skip_trivia()
        name = self._require(_IDENT_RE)
        self._require_literal("=")
        self._skip_trivia()
        value = self._parse_value()
        self._require_literal(";")
        return A.ConstDecl(
            name=name,
            const_type=const_type,
            value=value,
            doc=doc,
            annotations=annotations,
        )

    def _parse_method(self, doc: str) -> A.MethodDecl:
        """method → annotation* 'oneway'? type IDENT '(' args? ')' ('=' INT)? ';'"""
        annotations = self._parse_annotations()
        self._skip_trivia()
        is_oneway = self._keyword("oneway")
        self._skip_trivia()
        return_type = self._parse_type()
        self._skip_trivia()
        name = self._require(_IDENT_RE)
        self._require_literal("(")
        args = self._parse_args()
        self._require_literal(")")
        self._skip_trivia()
        if self._literal("="):
            self._skip_trivia()
            self._require(_INT_RE)
        self._require_literal(";")
        return A.MethodDecl(
            name=name,
            return_type=return_type,
            args=args,
            is_oneway=is_oneway,
            doc=doc,
            annotations=annotations,
        )

    def _parse_member(self, doc: str) -> A.MemberDecl:
        """member → annotation* type IDENT ('=' value)? ';'

        A default value is accepted and dropped.
        """
        annotations = self._parse_annotations()
        self._skip_trivia()
        member_type = self._parse_type()
        self._skip_trivia()
        name = self._require(_IDENT_RE)
        self._skip_trivia()
        if self._literal("="):
            self._skip_trivia()
            self._parse_value()
        self._require_literal(";")
        return A.MemberDecl(
            name=name,
            member_type=member_type,
            doc=doc,
            annotations=annotations,
        )

    def _parse_enum_element(self, doc: str) -> A.EnumElementDecl:
        """element → IDENT ('=' (INT | STRING))?"""
        name = self._require(_IDENT_RE)
        saved = self._pos
        self._skip_trivia()
        value = ""
        if self._literal("="):
            self._skip_trivia()
            if self._peek() == '"':
                value = self._parse_string()
            else:
                value = self._require(_INT_RE)
        else:
            self._pos = saved
        return A.EnumElementDecl(name=name, value=value, doc=doc)

    def _parse_value(self) -> str:
        """value → NUMBER | STRING | '{}'  (strings lose their quotes)"""
        if self._peek() == '"':
            return self._parse_string()
        if self._literal("{}"):
            return "{}"
        return self._require(_NUMBER_RE)

    def _parse_string(self) -> str:
        end = self._text.find('"', self._pos + 1)
        if end < 0:
            raise _NoMatch()
        value = self._text[self._pos + 1:end]
        self._pos = end + 1
        return value

    # ---- Arguments and types ----

    def _parse_args(self) -> Tuple[A.ArgDecl, ...]:
        """args → (arg (',' arg)*)?"""
        self._skip_trivia()
        if self._peek() == ")":
            return ()
        args = [self._parse_arg()]
        while True:
            self._skip_trivia()
            if not self._literal(","):
                break
            args.append(self._parse_arg())
        return tuple(args)

    def _parse_arg(self) -> A.ArgDecl:
        """arg → annotation* direction? type IDENT?"""
        annotations = self._parse_annotations()
        self._skip_trivia()

        direction = A.Direction.UNSPECIFIED
        before_direction = self._pos
        for candidate in _DIRECTIONS:
            if self._keyword(candidate.value):
                direction = candidate
                break

        arg_type: Optional[A.TypeRef]
        if direction is A.Direction.UNSPECIFIED:
            arg_type = self._parse_type()
        else:
            self._skip_trivia()
            arg_type = self._attempt(self._parse_type)
            if arg_type is None:
                # The "direction" was the type name itself, e.g. ``foo(in)``.
                self._pos = before_direction
                direction = A.Direction.UNSPECIFIED
                arg_type = self._parse_type()

        saved = self._pos
        self._skip_trivia()
        name = self._match(_IDENT_RE)
        if name is None:
            self._pos = saved
            name = ""
        return A.ArgDecl(
            name=name,
            arg_type=arg_type,
            direction=direction,
            annotations=annotations,
        )

    def _parse_type(self) -> A.TypeRef:
        """type → NAME ('<' type (',' type)* '>')? '[]'*"""
        name = self._require(_NAME_RE)
        saved = self._pos
        self._skip_trivia()
        if self._literal("<"):
            self._skip_trivia()
            generic_types = [self._parse_type()]
            while True:
                self._skip_trivia()
                if not self._literal(","):
                    break
                self._skip_trivia()
                generic_types.append(self._parse_type())
            self._require_literal(">")
            type_ref = A.TypeRef(name, tuple(generic_types))
        else:
            self._pos = saved
            type_ref = A.TypeRef(name)

        while True:
            saved = self._pos
            self._skip_ws()
            if not self._literal("[]"):
                self._pos = saved
                break
            type_ref = A.TypeRef("Array", (type_ref,))
        return type_ref

    def _parse_annotations(self) -> Tuple[A.Annotation, ...]:
        """annotation* where annotation → '@' NAME ('(' raw-text ')')?"""
        annotations: List[A.Annotation] = []
        while True:
            saved = self._pos
            self._skip_trivia()
            if self._peek() != "@":
                self._pos = saved
                break
            start = self._pos + 1
            self._pos = start
            self._require(_NAME_RE)
            if self._peek() == "(":
                close = self._text.find(")", self._pos)
                if close < 0:
                    raise _NoMatch()
                self._pos = close + 1
            annotations.append(A.Annotation(self._text[start:self._pos]))
        return tuple(annotations)


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def parse(text: str, source_name: str = "<string>") -> A.File:
    """Parse one AIDL compilation unit.

    Parameters
    ----------
    text : str
        Complete source text of the unit.
    source_name : str
        Name used in error messages and recorded on the ``File``.

    Raises
    ------
    ParseError
        On the first unrecoverable grammar mismatch.
    """
    return _Parser(text, source_name).parse_file()


@dataclass(frozen=True)
class ParsedBatch:
    """Result of parsing several units: the good files and the per-unit errors."""

    files: Tuple[A.File, ...] = ()
    errors: Tuple[ParseFileError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


Sources = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def parse_batch(sources: Sources) -> ParsedBatch:
    """Parse an ordered batch of ``(name, text)`` units.

    A unit that fails to parse is left out of ``files`` and reported in
    ``errors``; the remaining units are unaffected.
    """
    pairs = sources.items() if isinstance(sources, Mapping) else sources
    files: List[A.File] = []
    errors: List[ParseFileError] = []
    for name, text in pairs:
        try:
            files.append(parse(text, source_name=name))
        except ParseError as exc:
            logger.error("Failed to parse %s: %s", name, exc)
            errors.append(ParseFileError(name, exc))
    logger.debug("Parsed %d unit(s), %d failed", len(files) + len(errors), len(errors))
    return ParsedBatch(files=tuple(files), errors=tuple(errors))

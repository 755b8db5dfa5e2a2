# aidlgraph/errors.py
"""
AIDL Error Types

Exception hierarchy for the aidlgraph pipeline. Every error raised by the
library derives from ``AidlError`` and carries structured fields so that a
presentation layer can render it without parsing messages.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  AidlError (base)                                                           │
│  ├── ParseError            - First grammar mismatch in one source unit      │
│  ├── ParseFileError        - ParseError tagged with the unit's name         │
│  └── ModelError            - Symbol model / query errors                    │
│      ├── NotFoundError     - Key absent from the model                      │
│      ├── InvalidTypeError  - Key names a symbol of another kind             │
│      └── DuplicateSymbolError - Same key declared twice (strict mode only)  │
└─────────────────────────────────────────────────────────────────────────────┘

Unresolved type references are *not* errors: the linker reports them as
diagnostics (see :mod:`aidlgraph.diagnostics`) and keeps going.

Example Usage:
──────────────
    from aidlgraph.errors import ParseError, NotFoundError

    try:
        file = parse(text, source_name="IFoo.aidl")
    except ParseError as exc:
        print(exc.line, exc.column, exc.section)
"""

from __future__ import annotations

from typing import Any, Dict

__all__ = [
    "AidlError",
    "ParseError",
    "ParseFileError",
    "ModelError",
    "NotFoundError",
    "InvalidTypeError",
    "DuplicateSymbolError",
    "SECTION_LIMIT",
    "excerpt",
]

#: Longest offending-text excerpt carried by a ``ParseError``.
SECTION_LIMIT: int = 30


def excerpt(text: str, limit: int = SECTION_LIMIT) -> str:
    """Cut *text* down to *limit* characters, marking the cut with ``...``."""
    if len(text) < limit:
        return text
    return text[: limit - 3] + "..."


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class AidlError(Exception):
    """Base exception for all aidlgraph errors."""


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ParseError(AidlError):
    """
    First unrecoverable grammar mismatch in a compilation unit.

    Attributes:
        line: 1-based line of the offending text
        column: 1-based column of the offending text
        section: short excerpt of the offending text (at most 30 characters)
        source_name: name of the unit being parsed
    """

    def __init__(
        self,
        line: int,
        column: int,
        section: str,
        source_name: str = "<string>",
        message: str = "syntax error",
    ) -> None:
        self.line = line
        self.column = column
        self.section = excerpt(section)
        self.source_name = source_name
        self.message = message
        super().__init__(str(self))

    @classmethod
    def at(
        cls,
        text: str,
        pos: int,
        section: str,
        source_name: str = "<string>",
        message: str = "syntax error",
    ) -> "ParseError":
        """Build an error for offset *pos* of *text*."""
        line = text.count("\n", 0, pos) + 1
        column = pos - (text.rfind("\n", 0, pos) + 1) + 1
        return cls(line, column, section, source_name, message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "source": self.source_name,
            "line": self.line,
            "column": self.column,
            "section": self.section,
            "message": self.message,
        }

    def __str__(self) -> str:
        return (
            f"{self.source_name}:{self.line}:{self.column}: "
            f"{self.message} near {self.section!r}"
        )


class ParseFileError(AidlError):
    """A ``ParseError`` attributed to a named compilation unit."""

    def __init__(self, name: str, content_error: ParseError) -> None:
        self.name = name
        self.content_error = content_error
        super().__init__(f"{name}: {content_error}")

    @property
    def line(self) -> int:
        return self.content_error.line

    @property
    def column(self) -> int:
        return self.content_error.column


# ───────────────────────────────────────────────────────────────────────────────
# MODEL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ModelError(AidlError):
    """Error raised while building or querying a symbol model."""


class NotFoundError(ModelError):
    """No symbol with the requested key exists in the model."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Symbol not found: {key!r}")


class InvalidTypeError(ModelError):
    """The key names a symbol, but not of the requested kind."""

    def __init__(self, key: str, expected: str, found: str) -> None:
        self.key = key
        self.expected = expected
        self.found = found
        super().__init__(f"Symbol {key!r} is a {found}, expected a {expected}")


class DuplicateSymbolError(ModelError):
    """Two declarations produced the same key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Redefinition of symbol {key!r}")

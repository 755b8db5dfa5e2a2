"""Built-in AIDL types usable without an import.

The registry is closed: the linker matches a bare type name against these
names before looking at declared symbols, so ``Map`` always resolves here
even if a user declares a ``Map`` of their own.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

__all__ = ["Primitive", "ROOT_PACKAGE", "primitive_names"]

#: Path of the package that owns every primitive.
ROOT_PACKAGE = ""


class Primitive(Enum):
    VOID = "void"
    BOOLEAN = "boolean"
    BOOLEAN_ARRAY = "boolean[]"
    CHAR = "char"
    CHAR_ARRAY = "char[]"
    BYTE = "byte"
    BYTE_ARRAY = "byte[]"
    INT = "int"
    INT_ARRAY = "int[]"
    LONG = "long"
    LONG_ARRAY = "long[]"
    FLOAT = "float"
    FLOAT_ARRAY = "float[]"
    DOUBLE = "double"
    DOUBLE_ARRAY = "double[]"
    STRING = "String"
    VECTOR = "Vector"
    MAP = "Map"
    LIST = "List"
    ARRAY = "Array"

    @property
    def is_void(self) -> bool:
        return self is Primitive.VOID


def primitive_names() -> Tuple[str, ...]:
    """Names of all primitives, in registry order."""
    return tuple(p.value for p in Primitive)

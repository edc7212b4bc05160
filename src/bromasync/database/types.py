# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data types as stored in a program database.

Types are immutable values: two types are equivalent exactly when they
compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ###############
# Public Interface
# ###############


class TypeKind(Enum):
    """Kinds of placeholder type that can be created in a database."""

    ENUM = "enum"
    STRUCT = "struct"


@dataclass(frozen=True)
class TypePath:
    """Location of a named type: its category path plus the type name.

    Attributes:
        category: Category segments from the root, e.g. ``("cocos2d",)``.
        name: The type name, including any template suffix.
    """

    category: tuple[str, ...]
    name: str

    def __str__(self) -> str:
        return "/" + "/".join([*self.category, self.name])


@dataclass(frozen=True)
class BuiltinType:
    """A primitive type living in the root category (``int``, ``float``...)."""

    name: str
    length: int
    is_float: bool = False

    @property
    def path(self) -> TypePath:
        return TypePath((), self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class EnumType:
    """A named enumeration."""

    path: TypePath
    length: int

    def __str__(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class StructType:
    """A named structure. A length of 0 means the layout is not yet defined."""

    path: TypePath
    length: int = 0

    @property
    def is_defined(self) -> bool:
        return self.length > 0

    def __str__(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class PointerType:
    """One level of indirection to *target*."""

    target: DataType
    length: int = 4

    def __str__(self) -> str:
        return f"{self.target}*"


DataType = BuiltinType | EnumType | StructType | PointerType


def is_struct_by_value(data_type: DataType) -> bool:
    """Return True for a structure passed by value (not through a pointer)."""
    return isinstance(data_type, StructType)


def is_float_scalar(data_type: DataType) -> bool:
    """Return True for a floating-point builtin such as ``float`` or ``double``."""
    return isinstance(data_type, BuiltinType) and data_type.is_float


def is_undefined(data_type: DataType) -> bool:
    """Return True if the size of *data_type* is not known yet."""
    return isinstance(data_type, StructType) and not data_type.is_defined

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Functions, parameters and namespaces of a program database."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bromasync.database.types import DataType

# ###############
# Public Interface
# ###############


class SourceType(Enum):
    """Who last authored a piece of function metadata."""

    DEFAULT = "default"
    ANALYSIS = "analysis"
    IMPORTED = "imported"
    USER_DEFINED = "user_defined"


class StorageMode(Enum):
    """How parameter storage of a function is determined."""

    DYNAMIC = "dynamic"
    CUSTOM = "custom"


@dataclass(frozen=True)
class RegisterStorage:
    """A parameter passed in a named register."""

    register: str

    def __str__(self) -> str:
        return self.register


@dataclass(frozen=True)
class StackStorage:
    """A parameter passed on the stack at *offset*, occupying *size* bytes."""

    offset: int
    size: int

    def __str__(self) -> str:
        return f"Stack[0x{self.offset:x}]:{self.size}"


Storage = RegisterStorage | StackStorage


@dataclass(frozen=True)
class Namespace:
    """A namespace or class symbol. ``parent=None`` means the global namespace."""

    name: str
    parent: Namespace | None = None
    is_class: bool = False

    @property
    def path(self) -> tuple[str, ...]:
        if self.parent is None:
            return (self.name,)
        return (*self.parent.path, self.name)

    def __str__(self) -> str:
        return "::".join(self.path)


@dataclass(frozen=True)
class Parameter:
    """A function parameter. ``storage=None`` leaves placement to the convention."""

    name: str | None
    data_type: DataType
    source: SourceType = SourceType.USER_DEFINED
    storage: Storage | None = None

    def __str__(self) -> str:
        if self.name is None:
            return str(self.data_type)
        return f"{self.data_type} {self.name}"


@dataclass(frozen=True)
class ReturnValue:
    """The return slot of a function."""

    data_type: DataType
    source: SourceType = SourceType.DEFAULT


@dataclass
class Function:
    """A function entity at a fixed address."""

    address: int
    name: str
    namespace: Namespace | None = None
    calling_convention: str | None = None
    return_value: ReturnValue | None = None
    parameters: list[Parameter] = field(default_factory=list)
    storage_mode: StorageMode = StorageMode.DYNAMIC

    @property
    def qualified_name(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}::{self.name}"

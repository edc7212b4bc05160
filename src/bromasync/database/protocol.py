# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Interface of the program database that bindings are synchronized into.

The database is an external collaborator: the sync engine only queries and
mutates it through this protocol. :class:`~bromasync.database.memory.InMemoryDatabase`
is the bundled implementation; adapters for disassembler projects implement
the same methods.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bromasync.database.entities import Function, Namespace, Parameter, ReturnValue, SourceType, StorageMode
from bromasync.database.types import DataType, TypeKind, TypePath

# ###############
# Public Interface
# ###############


class DatabaseError(Exception):
    """Raised when a database cannot be loaded, saved, or is inconsistent."""


@runtime_checkable
class ProgramDatabase(Protocol):
    """Protocol for program databases.

    Every mutating method is applied immediately; there is no transaction
    or rollback.
    """

    @property
    def image_base(self) -> int:
        """Load address that binding offsets are relative to."""
        ...

    @property
    def pointer_size(self) -> int:
        """Size in bytes of a pointer."""
        ...

    @property
    def integer_size(self) -> int:
        """Size in bytes of the native ``int``."""
        ...

    # -------- functions --------

    def function_at(self, address: int) -> Function | None:
        """Return the function starting at *address*, or ``None``."""
        ...

    def create_function(self, address: int, name: str) -> Function | None:
        """Create a function at *address*; return ``None`` if that is not possible."""
        ...

    def set_parent_namespace(self, function: Function, namespace: Namespace) -> None:
        """Move *function* into *namespace*."""
        ...

    def update_function(
        self,
        function: Function,
        calling_convention: str | None,
        return_type: DataType | None,
        parameters: list[Parameter],
        storage_mode: StorageMode,
        source: SourceType,
    ) -> None:
        """Replace the signature of *function*.

        ``calling_convention=None`` keeps the current convention and
        ``return_type=None`` keeps the current return value. A new return
        value is recorded as authored by *source*; parameters keep the
        source they carry.
        """
        ...

    def get_parameter_count(self, function: Function) -> int:
        ...

    def get_parameter(self, function: Function, index: int) -> Parameter:
        ...

    def get_parameters(self, function: Function) -> list[Parameter]:
        ...

    def get_return(self, function: Function) -> ReturnValue | None:
        ...

    def get_calling_convention(self, function: Function) -> str | None:
        ...

    def get_storage_mode(self, function: Function) -> StorageMode:
        ...

    # -------- namespaces --------

    def get_namespace(self, parent: Namespace | None, name: str) -> Namespace | None:
        """Return the child namespace or class *name* of *parent*, or ``None``."""
        ...

    def create_namespace(self, parent: Namespace | None, name: str) -> Namespace:
        ...

    def create_class(self, parent: Namespace | None, name: str) -> Namespace:
        ...

    # -------- types --------

    def category_exists(self, category: tuple[str, ...]) -> bool:
        ...

    def create_category(self, category: tuple[str, ...]) -> None:
        ...

    def get_type(self, path: TypePath) -> DataType | None:
        """Return the type stored at *path*, or ``None``."""
        ...

    def create_type(self, kind: TypeKind, path: TypePath, size: int) -> DataType:
        """Create an empty enum or structure of *size* bytes at *path*."""
        ...

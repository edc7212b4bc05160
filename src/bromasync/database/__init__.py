# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Program database model, protocol, and the bundled in-memory implementation."""

from bromasync.database.entities import (
    Function,
    Namespace,
    Parameter,
    RegisterStorage,
    ReturnValue,
    SourceType,
    StackStorage,
    Storage,
    StorageMode,
)
from bromasync.database.memory import InMemoryDatabase, load_database, save_database
from bromasync.database.protocol import DatabaseError, ProgramDatabase
from bromasync.database.types import (
    BuiltinType,
    DataType,
    EnumType,
    PointerType,
    StructType,
    TypeKind,
    TypePath,
)

__all__ = [
    # Types
    "BuiltinType",
    "DataType",
    "EnumType",
    "PointerType",
    "StructType",
    "TypeKind",
    "TypePath",
    # Entities
    "Function",
    "Namespace",
    "Parameter",
    "RegisterStorage",
    "ReturnValue",
    "SourceType",
    "StackStorage",
    "Storage",
    "StorageMode",
    # Database
    "DatabaseError",
    "InMemoryDatabase",
    "ProgramDatabase",
    "load_database",
    "save_database",
]

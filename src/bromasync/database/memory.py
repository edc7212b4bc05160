# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""In-memory program database with JSON persistence.

The JSON format is versioned so future schema changes can be detected.
Builtin types are not written out; every database starts with them.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

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
from bromasync.database.protocol import DatabaseError
from bromasync.database.types import (
    BuiltinType,
    DataType,
    EnumType,
    PointerType,
    StructType,
    TypeKind,
    TypePath,
)

# ###############
# Public Interface
# ###############

DATABASE_FORMAT_VERSION = "1"

BUILTIN_TYPES: tuple[BuiltinType, ...] = (
    BuiltinType("void", 0),
    BuiltinType("bool", 1),
    BuiltinType("char", 1),
    BuiltinType("uchar", 1),
    BuiltinType("short", 2),
    BuiltinType("ushort", 2),
    BuiltinType("int", 4),
    BuiltinType("uint", 4),
    BuiltinType("long", 4),
    BuiltinType("ulong", 4),
    BuiltinType("longlong", 8),
    BuiltinType("ulonglong", 8),
    BuiltinType("size_t", 4),
    BuiltinType("float", 4, is_float=True),
    BuiltinType("double", 8, is_float=True),
    BuiltinType("longdouble", 10, is_float=True),
)


class InMemoryDatabase:
    """A complete :class:`~bromasync.database.protocol.ProgramDatabase` held in memory."""

    def __init__(self, *, image_base: int = 0x400000, pointer_size: int = 4, integer_size: int = 4) -> None:
        self._image_base = image_base
        self._pointer_size = pointer_size
        self._integer_size = integer_size
        self._functions: dict[int, Function] = {}
        self._namespaces: dict[tuple[str, ...], Namespace] = {}
        self._categories: set[tuple[str, ...]] = {()}
        self._types: dict[TypePath, DataType] = {t.path: t for t in BUILTIN_TYPES}

    @property
    def image_base(self) -> int:
        return self._image_base

    @property
    def pointer_size(self) -> int:
        return self._pointer_size

    @property
    def integer_size(self) -> int:
        return self._integer_size

    @property
    def functions(self) -> list[Function]:
        """All functions ordered by address."""
        return [self._functions[address] for address in sorted(self._functions)]

    @property
    def namespaces(self) -> list[Namespace]:
        """All namespaces in creation order."""
        return list(self._namespaces.values())

    @property
    def categories(self) -> list[tuple[str, ...]]:
        """All non-root categories, sorted."""
        return sorted(c for c in self._categories if c)

    @property
    def user_types(self) -> list[DataType]:
        """All non-builtin types in creation order."""
        return [t for t in self._types.values() if not isinstance(t, BuiltinType)]

    # -------- functions --------

    def function_at(self, address: int) -> Function | None:
        return self._functions.get(address)

    def create_function(self, address: int, name: str) -> Function | None:
        if address in self._functions:
            return None
        function = Function(address=address, name=name)
        self._functions[address] = function
        return function

    def set_parent_namespace(self, function: Function, namespace: Namespace) -> None:
        function.namespace = namespace

    def update_function(
        self,
        function: Function,
        calling_convention: str | None,
        return_type: DataType | None,
        parameters: list[Parameter],
        storage_mode: StorageMode,
        source: SourceType,
    ) -> None:
        if calling_convention is not None:
            function.calling_convention = calling_convention
        if return_type is not None:
            function.return_value = ReturnValue(return_type, source)
        if storage_mode == StorageMode.DYNAMIC:
            parameters = [dataclasses.replace(p, storage=None) for p in parameters]
        function.parameters = list(parameters)
        function.storage_mode = storage_mode

    def get_parameter_count(self, function: Function) -> int:
        return len(function.parameters)

    def get_parameter(self, function: Function, index: int) -> Parameter:
        return function.parameters[index]

    def get_parameters(self, function: Function) -> list[Parameter]:
        return list(function.parameters)

    def get_return(self, function: Function) -> ReturnValue | None:
        return function.return_value

    def get_calling_convention(self, function: Function) -> str | None:
        return function.calling_convention

    def get_storage_mode(self, function: Function) -> StorageMode:
        return function.storage_mode

    # -------- namespaces --------

    def get_namespace(self, parent: Namespace | None, name: str) -> Namespace | None:
        return self._namespaces.get(_child_path(parent, name))

    def create_namespace(self, parent: Namespace | None, name: str) -> Namespace:
        return self._add_namespace(Namespace(name=name, parent=parent))

    def create_class(self, parent: Namespace | None, name: str) -> Namespace:
        return self._add_namespace(Namespace(name=name, parent=parent, is_class=True))

    # -------- types --------

    def category_exists(self, category: tuple[str, ...]) -> bool:
        return tuple(category) in self._categories

    def create_category(self, category: tuple[str, ...]) -> None:
        for end in range(1, len(category) + 1):
            self._categories.add(tuple(category[:end]))

    def get_type(self, path: TypePath) -> DataType | None:
        return self._types.get(path)

    def create_type(self, kind: TypeKind, path: TypePath, size: int) -> DataType:
        if kind == TypeKind.ENUM:
            return self.add_type(EnumType(path, size))
        return self.add_type(StructType(path, size))

    def add_type(self, data_type: EnumType | StructType) -> DataType:
        """Store a named type, creating its category if needed."""
        if data_type.path in self._types:
            raise DatabaseError(f"Type '{data_type.path}' already exists")
        self.create_category(data_type.path.category)
        self._types[data_type.path] = data_type
        return data_type

    # ------------------------------------------------------------------

    def _add_namespace(self, namespace: Namespace) -> Namespace:
        if namespace.path in self._namespaces:
            raise DatabaseError(f"Namespace '{namespace}' already exists")
        self._namespaces[namespace.path] = namespace
        return namespace


def serialize(database: InMemoryDatabase) -> str:
    """Serialize a database to an indented JSON string."""
    return json.dumps(_database_to_dict(database), indent=2)


def deserialize(data: str) -> InMemoryDatabase:
    """Deserialize a database from a JSON string.

    Raises:
        DatabaseError: If the data is not valid JSON, the format version is
            not recognised, or required entries are missing.
    """
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise DatabaseError(f"Invalid database JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise DatabaseError("Database JSON must be an object")
    version = obj.get("v")
    if version != DATABASE_FORMAT_VERSION:
        raise DatabaseError(f"Unsupported database format version: {version!r}")
    try:
        return _database_from_dict(obj)
    except (KeyError, TypeError, ValueError) as exc:
        raise DatabaseError(f"Malformed database entry: {exc!r}") from exc


def save_database(database: InMemoryDatabase, path: Path) -> None:
    """Write *database* to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(database), encoding="utf-8")


def load_database(path: Path) -> InMemoryDatabase:
    """Read a database written by :func:`save_database`.

    Raises:
        DatabaseError: If the file cannot be read or is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatabaseError(f"Cannot read database file '{path}': {exc}") from exc
    return deserialize(text)


# ################
# Implementation
# ################


def _child_path(parent: Namespace | None, name: str) -> tuple[str, ...]:
    return (name,) if parent is None else (*parent.path, name)


def _database_to_dict(database: InMemoryDatabase) -> dict[str, Any]:
    return {
        "v": DATABASE_FORMAT_VERSION,
        "image-base": database.image_base,
        "pointer-size": database.pointer_size,
        "integer-size": database.integer_size,
        "categories": [list(c) for c in database.categories],
        "types": [_type_to_dict(t) for t in database.user_types],
        "namespaces": [{"path": list(ns.path), "class": ns.is_class} for ns in database.namespaces],
        "functions": [_function_to_dict(f) for f in database.functions],
    }


def _database_from_dict(obj: dict[str, Any]) -> InMemoryDatabase:
    database = InMemoryDatabase(
        image_base=obj["image-base"],
        pointer_size=obj["pointer-size"],
        integer_size=obj["integer-size"],
    )
    for category in obj.get("categories", []):
        database.create_category(tuple(category))
    for t in obj.get("types", []):
        database.add_type(_type_from_dict(t))
    for ns in obj.get("namespaces", []):
        *parent_path, name = ns["path"]
        parent = database._namespaces[tuple(parent_path)] if parent_path else None
        if ns["class"]:
            database.create_class(parent, name)
        else:
            database.create_namespace(parent, name)
    for f in obj.get("functions", []):
        database._functions[f["address"]] = _function_from_dict(f, database)
    return database


def _type_to_dict(data_type: DataType) -> dict[str, Any]:
    if isinstance(data_type, BuiltinType):
        return {"kind": "builtin", "name": data_type.name}
    if isinstance(data_type, PointerType):
        return {"kind": "pointer", "target": _type_to_dict(data_type.target), "length": data_type.length}
    kind = "enum" if isinstance(data_type, EnumType) else "struct"
    return {
        "kind": kind,
        "category": list(data_type.path.category),
        "name": data_type.path.name,
        "length": data_type.length,
    }


def _type_from_dict(obj: dict[str, Any]) -> DataType:
    kind = obj["kind"]
    if kind == "builtin":
        builtin = _BUILTINS_BY_NAME.get(obj["name"])
        if builtin is None:
            raise ValueError(f"unknown builtin type {obj['name']!r}")
        return builtin
    if kind == "pointer":
        return PointerType(_type_from_dict(obj["target"]), obj["length"])
    path = TypePath(tuple(obj["category"]), obj["name"])
    if kind == "enum":
        return EnumType(path, obj["length"])
    if kind == "struct":
        return StructType(path, obj["length"])
    raise ValueError(f"unknown type kind {kind!r}")


def _storage_to_dict(storage: Storage | None) -> dict[str, Any] | None:
    if storage is None:
        return None
    if isinstance(storage, RegisterStorage):
        return {"register": storage.register}
    return {"offset": storage.offset, "size": storage.size}


def _storage_from_dict(obj: dict[str, Any] | None) -> Storage | None:
    if obj is None:
        return None
    if "register" in obj:
        return RegisterStorage(obj["register"])
    return StackStorage(obj["offset"], obj["size"])


def _parameter_to_dict(param: Parameter) -> dict[str, Any]:
    return {
        "name": param.name,
        "type": _type_to_dict(param.data_type),
        "source": param.source.value,
        "storage": _storage_to_dict(param.storage),
    }


def _parameter_from_dict(obj: dict[str, Any]) -> Parameter:
    return Parameter(
        name=obj["name"],
        data_type=_type_from_dict(obj["type"]),
        source=SourceType(obj["source"]),
        storage=_storage_from_dict(obj.get("storage")),
    )


def _function_to_dict(function: Function) -> dict[str, Any]:
    ret = function.return_value
    return {
        "address": function.address,
        "name": function.name,
        "namespace": list(function.namespace.path) if function.namespace else None,
        "convention": function.calling_convention,
        "return": None if ret is None else {"type": _type_to_dict(ret.data_type), "source": ret.source.value},
        "params": [_parameter_to_dict(p) for p in function.parameters],
        "storage-mode": function.storage_mode.value,
    }


def _function_from_dict(obj: dict[str, Any], database: InMemoryDatabase) -> Function:
    namespace = None
    if obj.get("namespace"):
        namespace = database._namespaces[tuple(obj["namespace"])]
    ret = obj.get("return")
    return Function(
        address=obj["address"],
        name=obj["name"],
        namespace=namespace,
        calling_convention=obj.get("convention"),
        return_value=None if ret is None else ReturnValue(_type_from_dict(ret["type"]), SourceType(ret["source"])),
        parameters=[_parameter_from_dict(p) for p in obj.get("params", [])],
        storage_mode=StorageMode(obj.get("storage-mode", StorageMode.DYNAMIC.value)),
    )


_BUILTINS_BY_NAME: dict[str, BuiltinType] = {t.name: t for t in BUILTIN_TYPES}

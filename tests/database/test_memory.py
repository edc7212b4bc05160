# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the in-memory program database and its JSON persistence."""

import json
from pathlib import Path

import pytest

from bromasync.database import (
    BuiltinType,
    DatabaseError,
    EnumType,
    InMemoryDatabase,
    Parameter,
    PointerType,
    ProgramDatabase,
    RegisterStorage,
    ReturnValue,
    SourceType,
    StackStorage,
    StorageMode,
    StructType,
    TypeKind,
    TypePath,
    load_database,
    save_database,
)
from bromasync.database.memory import DATABASE_FORMAT_VERSION, deserialize, serialize

# ###############
# Helpers
# ###############

_INT = BuiltinType("int", 4)
_FLOAT = BuiltinType("float", 4, is_float=True)


def _populated() -> InMemoryDatabase:
    """Return a database with a namespace, a class, a type and two functions."""
    db = InMemoryDatabase(image_base=0x10000000)
    ns = db.create_namespace(None, "cocos2d")
    cls = db.create_class(ns, "CCNode")
    node = db.create_type(TypeKind.STRUCT, TypePath(("cocos2d",), "CCNode"), 0)
    db.create_type(TypeKind.ENUM, TypePath((), "GameMode"), 4)

    function = db.create_function(0x10001000, "setScale")
    assert function is not None
    db.set_parent_namespace(function, cls)
    db.update_function(
        function,
        "__thiscall",
        BuiltinType("void", 0),
        [
            Parameter("this", PointerType(node)),
            Parameter("scale", _FLOAT, SourceType.ANALYSIS, RegisterStorage("XMM1_Da")),
            Parameter(None, _INT, SourceType.ANALYSIS, StackStorage(0, 4)),
        ],
        StorageMode.CUSTOM,
        SourceType.ANALYSIS,
    )
    assert db.create_function(0x10002000, "free") is not None
    return db


# ###############
# Protocol Conformance
# ###############


def test_in_memory_database_satisfies_protocol() -> None:
    assert isinstance(InMemoryDatabase(), ProgramDatabase)


def test_builtins_are_available() -> None:
    db = InMemoryDatabase()
    assert db.get_type(TypePath((), "int")) == _INT
    assert db.get_type(TypePath((), "double")) == BuiltinType("double", 8, is_float=True)
    assert db.user_types == []


# ###############
# Functions
# ###############


class TestFunctions:
    def test_create_and_lookup(self) -> None:
        db = InMemoryDatabase()
        function = db.create_function(0x401000, "f")
        assert function is not None
        assert db.function_at(0x401000) is function
        assert db.function_at(0x402000) is None

    def test_create_at_taken_address_fails(self) -> None:
        db = InMemoryDatabase()
        db.create_function(0x401000, "f")
        assert db.create_function(0x401000, "g") is None

    def test_update_records_return_source(self) -> None:
        db = InMemoryDatabase()
        function = db.create_function(0x401000, "f")
        assert function is not None
        db.update_function(function, "__cdecl", _INT, [], StorageMode.DYNAMIC, SourceType.ANALYSIS)
        assert db.get_return(function) == ReturnValue(_INT, SourceType.ANALYSIS)
        assert db.get_calling_convention(function) == "__cdecl"

    def test_update_with_none_keeps_convention_and_return(self) -> None:
        db = InMemoryDatabase()
        function = db.create_function(0x401000, "f")
        assert function is not None
        db.update_function(function, "__thiscall", _INT, [], StorageMode.DYNAMIC, SourceType.USER_DEFINED)
        db.update_function(function, None, None, [Parameter("a", _INT)], StorageMode.DYNAMIC, SourceType.ANALYSIS)
        assert db.get_calling_convention(function) == "__thiscall"
        assert db.get_return(function) == ReturnValue(_INT, SourceType.USER_DEFINED)
        assert db.get_parameter_count(function) == 1

    def test_dynamic_storage_drops_explicit_storage(self) -> None:
        db = InMemoryDatabase()
        function = db.create_function(0x401000, "f")
        assert function is not None
        params = [Parameter("a", _INT, storage=StackStorage(0, 4))]
        db.update_function(function, None, None, params, StorageMode.DYNAMIC, SourceType.ANALYSIS)
        assert db.get_parameter(function, 0).storage is None
        assert db.get_storage_mode(function) == StorageMode.DYNAMIC

    def test_functions_are_ordered_by_address(self) -> None:
        db = InMemoryDatabase()
        db.create_function(0x3000, "c")
        db.create_function(0x1000, "a")
        assert [f.name for f in db.functions] == ["a", "c"]

    def test_qualified_name(self) -> None:
        db = _populated()
        function = db.function_at(0x10001000)
        assert function is not None
        assert function.qualified_name == "cocos2d::CCNode::setScale"


# ###############
# Namespaces and Types
# ###############


class TestNamespaces:
    def test_lookup_by_parent(self) -> None:
        db = InMemoryDatabase()
        ns = db.create_namespace(None, "gd")
        cls = db.create_class(ns, "string")
        assert db.get_namespace(ns, "string") is cls
        assert db.get_namespace(None, "string") is None
        assert cls.is_class
        assert str(cls) == "gd::string"

    def test_duplicate_namespace_raises(self) -> None:
        db = InMemoryDatabase()
        db.create_namespace(None, "gd")
        with pytest.raises(DatabaseError):
            db.create_class(None, "gd")


class TestTypes:
    def test_create_category_adds_prefixes(self) -> None:
        db = InMemoryDatabase()
        db.create_category(("a", "b"))
        assert db.category_exists(("a",))
        assert db.category_exists(("a", "b"))
        assert not db.category_exists(("b",))

    def test_create_enum_and_struct(self) -> None:
        db = InMemoryDatabase()
        enum = db.create_type(TypeKind.ENUM, TypePath(("gd",), "Mode"), 4)
        struct = db.create_type(TypeKind.STRUCT, TypePath(("gd",), "Thing"), 0)
        assert enum == EnumType(TypePath(("gd",), "Mode"), 4)
        assert isinstance(struct, StructType) and not struct.is_defined
        assert db.category_exists(("gd",))
        assert db.get_type(TypePath(("gd",), "Mode")) == enum

    def test_duplicate_type_raises(self) -> None:
        db = InMemoryDatabase()
        db.create_type(TypeKind.ENUM, TypePath((), "Mode"), 4)
        with pytest.raises(DatabaseError):
            db.create_type(TypeKind.STRUCT, TypePath((), "Mode"), 0)

    def test_type_path_str(self) -> None:
        assert str(TypePath(("cocos2d", "extension"), "CCControl")) == "/cocos2d/extension/CCControl"


# ###############
# Persistence
# ###############


class TestPersistence:
    def test_save_and_load_preserve_everything(self, tmp_path: Path) -> None:
        db = _populated()
        path = tmp_path / "out" / "program.json"
        save_database(db, path)
        loaded = load_database(path)

        assert loaded.image_base == 0x10000000
        assert loaded.categories == db.categories
        assert loaded.user_types == db.user_types
        assert [ns.path for ns in loaded.namespaces] == [ns.path for ns in db.namespaces]
        assert loaded.functions == db.functions

    def test_serialized_form_is_versioned_json(self) -> None:
        obj = json.loads(serialize(InMemoryDatabase()))
        assert obj["v"] == DATABASE_FORMAT_VERSION
        assert obj["functions"] == []

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(DatabaseError, match="Invalid database JSON"):
            deserialize("{not json")

    def test_unknown_version_raises(self) -> None:
        with pytest.raises(DatabaseError, match="format version"):
            deserialize('{"v": "99"}')

    def test_missing_fields_raise(self) -> None:
        with pytest.raises(DatabaseError, match="Malformed"):
            deserialize('{"v": "1"}')

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DatabaseError, match="Cannot read"):
            load_database(tmp_path / "absent.json")

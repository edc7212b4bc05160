# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for resolving type expressions against the database."""

import pytest

from bromasync.database.memory import InMemoryDatabase
from bromasync.database.types import BuiltinType, EnumType, PointerType, StructType, TypeKind, TypePath
from bromasync.model.types import TypeRef
from bromasync.sync.report import SyncError, SyncWarning
from bromasync.sync.types import TypeResolver

# ###############
# Helpers
# ###############


def _resolver(db: InMemoryDatabase | None = None) -> tuple[TypeResolver, InMemoryDatabase, list[SyncWarning]]:
    db = db or InMemoryDatabase()
    warnings: list[SyncWarning] = []
    return TypeResolver(db, warnings), db, warnings


# ###############
# Existing Types
# ###############


class TestExistingTypes:
    def test_builtin(self) -> None:
        resolver, _, warnings = _resolver()
        assert resolver.resolve(TypeRef(name="int")) == BuiltinType("int", 4)
        assert warnings == []

    def test_pointer_levels(self) -> None:
        resolver, _, _ = _resolver()
        result = resolver.resolve(TypeRef(name="char", pointer_depth=2))
        assert result == PointerType(PointerType(BuiltinType("char", 1)))

    def test_reference_becomes_pointer(self) -> None:
        resolver, db, _ = _resolver()
        point = db.create_type(TypeKind.STRUCT, TypePath(("cocos2d",), "CCPoint"), 8)
        result = resolver.resolve(TypeRef(name="cocos2d::CCPoint", is_const=True, reference_depth=1))
        assert result == PointerType(point)

    def test_const_is_dropped(self) -> None:
        resolver, _, _ = _resolver()
        assert resolver.resolve(TypeRef(name="int", is_const=True)) == BuiltinType("int", 4)

    def test_pointer_size_follows_database(self) -> None:
        resolver, _, _ = _resolver(InMemoryDatabase(pointer_size=8))
        result = resolver.resolve(TypeRef(name="int", pointer_depth=1))
        assert isinstance(result, PointerType)
        assert result.length == 8


# ###############
# Placeholders
# ###############


class TestPlaceholders:
    def test_by_value_becomes_enum(self) -> None:
        resolver, db, warnings = _resolver()
        result = resolver.resolve(TypeRef(name="GameMode"))
        assert result == EnumType(TypePath((), "GameMode"), 4)
        assert db.get_type(TypePath((), "GameMode")) == result
        assert warnings == [SyncWarning("Created new type /GameMode, assumed it's an enum")]

    def test_indirect_becomes_struct(self) -> None:
        resolver, _, warnings = _resolver()
        result = resolver.resolve(TypeRef(name="cocos2d::CCNode", pointer_depth=1))
        assert result == PointerType(StructType(TypePath(("cocos2d",), "CCNode"), 0))
        assert warnings == [SyncWarning("Created new type /cocos2d/CCNode, assumed it's a struct")]

    def test_placeholder_is_reused(self) -> None:
        resolver, _, warnings = _resolver()
        first = resolver.resolve(TypeRef(name="Mode"))
        second = resolver.resolve(TypeRef(name="Mode"))
        assert first == second
        assert len(warnings) == 1

    def test_enum_size_follows_database(self) -> None:
        resolver, _, _ = _resolver(InMemoryDatabase(integer_size=2))
        result = resolver.resolve(TypeRef(name="Small"))
        assert isinstance(result, EnumType)
        assert result.length == 2

    def test_namespaces_become_categories(self) -> None:
        resolver, db, _ = _resolver()
        resolver.resolve(TypeRef(name="cocos2d::extension::CCScrollView", pointer_depth=1))
        assert db.category_exists(("cocos2d",))
        assert db.category_exists(("cocos2d", "extension"))

    def test_template_arguments_are_part_of_name(self) -> None:
        resolver, db, _ = _resolver()
        ref = TypeRef(name="gd::vector", template_args=[TypeRef(name="int")], reference_depth=1)
        resolver.resolve(ref)
        assert isinstance(db.get_type(TypePath(("gd",), "vector<int>")), StructType)

    def test_class_pointer(self) -> None:
        resolver, _, _ = _resolver()
        result = resolver.resolve_class_pointer("PlayLayer")
        assert result == PointerType(StructType(TypePath((), "PlayLayer"), 0))


def test_nameless_type_raises() -> None:
    resolver, _, _ = _resolver()
    with pytest.raises(SyncError, match="has no name"):
        resolver.resolve(TypeRef(name="gd::"))

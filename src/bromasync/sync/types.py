# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of parsed type expressions to database types.

Namespace segments of a type name map to nested categories. A template
argument clause is kept as part of the type name rather than modelled as a
generic parameter, so ``gd::vector<int>`` resolves to the type named
``vector<int>`` in category ``/gd``.

Types that do not exist yet are created as empty placeholders. The guess is
based on how the type is used: a type used by value is assumed to be an
enum, a type used through a pointer or reference is assumed to be a struct.
"""

from __future__ import annotations

from bromasync.database.protocol import ProgramDatabase
from bromasync.database.types import DataType, PointerType, TypeKind, TypePath
from bromasync.model.types import TypeRef
from bromasync.sync.report import SyncError, SyncWarning

# ###############
# Public Interface
# ###############


class TypeResolver:
    """Resolves :class:`TypeRef` values against a program database.

    Placeholder creations are appended to *warnings*.
    """

    def __init__(self, database: ProgramDatabase, warnings: list[SyncWarning]) -> None:
        self._db = database
        self._warnings = warnings

    def resolve(self, type_ref: TypeRef) -> DataType:
        """Return the database type for *type_ref*, creating a placeholder if needed.

        ``const`` has no representation in the database and is dropped.
        Every ``*`` and every ``&`` adds one level of pointer indirection.

        Raises:
            SyncError: If the type expression has no name.
        """
        path = self._type_path(type_ref)
        data_type = self._db.get_type(path)
        if data_type is None:
            data_type = self._create_placeholder(path, type_ref)
        for _ in range(type_ref.pointer_depth + type_ref.reference_depth):
            data_type = PointerType(data_type, self._db.pointer_size)
        return data_type

    def resolve_class_pointer(self, class_name: str) -> DataType:
        """Return the type of the implicit ``this`` parameter of *class_name*."""
        return self.resolve(TypeRef(name=class_name, pointer_depth=1))

    # ------------------------------------------------------------------

    def _type_path(self, type_ref: TypeRef) -> TypePath:
        """Map the qualified name to a type path, creating categories on the way."""
        *namespaces, name = type_ref.path
        if not name:
            raise SyncError(f"Type expression {str(type_ref)!r} has no name")
        category: tuple[str, ...] = ()
        for segment in namespaces:
            category = (*category, segment)
            if not self._db.category_exists(category):
                self._db.create_category(category)
        return TypePath(category, name + type_ref.template_suffix)

    def _create_placeholder(self, path: TypePath, type_ref: TypeRef) -> DataType:
        if type_ref.is_indirect:
            data_type = self._db.create_type(TypeKind.STRUCT, path, 0)
            self._warnings.append(SyncWarning(f"Created new type {path}, assumed it's a struct"))
        else:
            data_type = self._db.create_type(TypeKind.ENUM, path, self._db.integer_size)
            self._warnings.append(SyncWarning(f"Created new type {path}, assumed it's an enum"))
        return data_type

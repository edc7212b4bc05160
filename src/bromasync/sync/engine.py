# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synchronization of Broma files into a program database.

Files, classes and functions are processed strictly in order: input order
of the files, then source order within each file. Later functions may rely
on namespaces and types created for earlier ones, and every database
mutation is applied as soon as it is computed.

For every function with an address on the target platform:

1. Look up the function at ``image_base + offset``; create it inside its
   class namespace if it does not exist.
2. Pick the calling convention from platform, link status and dispatch.
3. Resolve the return type and build the parameter list: implicit ``this``
   (non-static functions), implicit ``ret`` (structure returned by value),
   then the declared parameters.
4. Reconcile against user-authored metadata already in the database.
5. Assign explicit storage where the convention requires it.
6. Write the signature back.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from bromasync.database.entities import Function, Namespace, Parameter, SourceType, StorageMode
from bromasync.database.protocol import ProgramDatabase
from bromasync.database.types import is_struct_by_value
from bromasync.model.declarations import ClassDecl, FunctionDecl
from bromasync.parser.lexer import LexerError
from bromasync.parser.parser import ParseError, parse
from bromasync.sync.conventions import Platform, resolve_calling_convention
from bromasync.sync.decisions import DecisionProvider
from bromasync.sync.reconciler import SignatureReconciler
from bromasync.sync.report import SyncAborted, SyncError, SyncSummary, SyncWarning
from bromasync.sync.storage import allocate_storage, needs_custom_storage
from bromasync.sync.types import TypeResolver

# ###############
# Public Interface
# ###############


def sync_files(
    files: list[Path],
    *,
    platform: Platform,
    database: ProgramDatabase,
    decisions: DecisionProvider,
) -> SyncSummary:
    """Synchronize a list of .bro files into *database*.

    Args:
        files: Binding files, processed in list order.
        platform: Target platform; selects addresses and conventions.
        database: The program database to update.
        decisions: Answers signature conflicts.

    Returns:
        A summary of added and updated functions and all warnings.

    Raises:
        SyncAborted: If a conflict was answered with abort.
        SyncError: On unreadable or malformed files and other fatal errors.
    """
    return sync_sources(_read_sources(files), platform=platform, database=database, decisions=decisions)


def sync_sources(
    sources: Iterable[tuple[str, str]],
    *,
    platform: Platform,
    database: ProgramDatabase,
    decisions: DecisionProvider,
) -> SyncSummary:
    """Synchronize ``(label, text)`` binding sources into *database*.

    The label is only used in error messages.

    Raises:
        SyncAborted: If a conflict was answered with abort.
        SyncError: On malformed sources and other fatal errors.
    """
    return _SyncRun(platform, database, decisions).run(sources)


# ################
# Implementation
# ################


_SOURCE = SourceType.ANALYSIS


def _read_sources(files: list[Path]) -> Iterator[tuple[str, str]]:
    for path in files:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SyncError(f"Cannot read binding file '{path}': {exc}") from exc
        yield str(path), text


def _snapshot(database: ProgramDatabase, function: Function) -> tuple[object, ...]:
    """Capture everything about a signature that an update can change."""
    return (
        database.get_calling_convention(function),
        database.get_return(function),
        tuple(database.get_parameters(function)),
        database.get_storage_mode(function),
    )


class _SyncRun:
    """State of a single synchronization run."""

    def __init__(self, platform: Platform, database: ProgramDatabase, decisions: DecisionProvider) -> None:
        if not isinstance(platform, Platform):
            raise SyncError(f"Unknown platform {platform!r}")
        self._platform = platform
        self._db = database
        self._warnings: list[SyncWarning] = []
        self._added: list[str] = []
        self._updated: list[str] = []
        self._types = TypeResolver(database, self._warnings)
        self._reconciler = SignatureReconciler(database, decisions)

    def run(self, sources: Iterable[tuple[str, str]]) -> SyncSummary:
        try:
            for label, text in sources:
                try:
                    classes = parse(text)
                except (LexerError, ParseError) as exc:
                    raise SyncError(f"Parse error in '{label}': {exc}") from exc
                for cls in classes:
                    linked = cls.is_linked(self._platform.tag)
                    for function in cls.functions:
                        self._sync_function(cls, function, linked)
        except SyncAborted as exc:
            raise SyncAborted(exc.location, self._summary()) from exc
        return self._summary()

    def _summary(self) -> SyncSummary:
        return SyncSummary(
            added=tuple(self._added),
            updated=tuple(self._updated),
            warnings=tuple(self._warnings),
        )

    def _sync_function(self, cls: ClassDecl, decl: FunctionDecl, linked: bool) -> None:
        offset = decl.address_for(self._platform.tag)
        if offset is None:
            return
        location = cls.qualified_name_of(decl)
        address = self._db.image_base + offset

        function = self._db.function_at(address)
        added = function is None
        if function is None:
            function = self._db.create_function(address, decl.name)
            if function is None:
                raise SyncError(f"Unable to create a function at address 0x{address:x} for {location}")
            self._db.set_parent_namespace(function, self._ensure_namespace(cls.namespace_path))

        convention = resolve_calling_convention(self._platform, linked, decl.dispatch)

        return_type = self._types.resolve(decl.return_type) if decl.return_type is not None else None
        # Everything written from a declaration is analysis-sourced so that a
        # later run only asks about metadata the user edited by hand.
        params: list[Parameter] = []
        if decl.has_this:
            params.append(Parameter("this", self._types.resolve_class_pointer(cls.name), _SOURCE))
        # ret goes directly after this, as the ABI passes the hidden return
        # slot, not at the end of the list.
        if return_type is not None and is_struct_by_value(return_type):
            params.append(Parameter("ret", return_type, _SOURCE))
        for param in decl.params:
            params.append(Parameter(param.name, self._types.resolve(param.type), _SOURCE))

        before = _snapshot(self._db, function)
        result = self._reconciler.reconcile(
            function,
            params,
            return_type,
            location,
            is_destructor=decl.is_destructor,
        )

        params = result.parameters
        storage_mode = StorageMode.DYNAMIC
        if convention is not None and needs_custom_storage(convention, params):
            params = allocate_storage(convention, params, location, self._warnings)
            storage_mode = StorageMode.CUSTOM

        self._db.update_function(
            function,
            convention.database_name if convention is not None else None,
            result.return_type,
            params,
            storage_mode,
            _SOURCE,
        )

        if added:
            self._added.append(location)
        elif _snapshot(self._db, function) != before:
            self._updated.append(location)

    def _ensure_namespace(self, path: list[str]) -> Namespace:
        """Look up or create the namespaces of *path*; the last segment is a class."""
        namespace: Namespace | None = None
        for index, segment in enumerate(path):
            existing = self._db.get_namespace(namespace, segment)
            if existing is None:
                if index == len(path) - 1:
                    existing = self._db.create_class(namespace, segment)
                else:
                    existing = self._db.create_namespace(namespace, segment)
            namespace = existing
        if namespace is None:
            raise SyncError("Class declaration has an empty name")
        return namespace

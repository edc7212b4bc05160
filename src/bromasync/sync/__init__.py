# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synchronization of parsed bindings into a program database."""

from bromasync.sync.conventions import CallingConvention, Platform, resolve_calling_convention
from bromasync.sync.decisions import (
    Conflict,
    ConflictKind,
    Decision,
    DecisionProvider,
    FixedDecisionProvider,
    ScriptedDecisionProvider,
)
from bromasync.sync.engine import sync_files, sync_sources
from bromasync.sync.reconciler import Reconciliation, SignatureReconciler
from bromasync.sync.report import SyncAborted, SyncError, SyncSummary, SyncWarning
from bromasync.sync.storage import allocate_storage, needs_custom_storage
from bromasync.sync.types import TypeResolver

__all__ = [
    "CallingConvention",
    "Conflict",
    "ConflictKind",
    "Decision",
    "DecisionProvider",
    "FixedDecisionProvider",
    "Platform",
    "Reconciliation",
    "ScriptedDecisionProvider",
    "SignatureReconciler",
    "SyncAborted",
    "SyncError",
    "SyncSummary",
    "SyncWarning",
    "TypeResolver",
    "allocate_storage",
    "needs_custom_storage",
    "resolve_calling_convention",
    "sync_files",
    "sync_sources",
]

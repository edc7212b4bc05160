# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reconciliation of a declared signature with an existing database function.

Only metadata the user authored in the database can conflict; anything
produced by analysis is overwritten without asking.
"""

from __future__ import annotations

from dataclasses import dataclass

from bromasync.database.entities import Function, Parameter, SourceType
from bromasync.database.protocol import ProgramDatabase
from bromasync.database.types import DataType
from bromasync.sync.decisions import Conflict, ConflictKind, Decision, DecisionProvider
from bromasync.sync.report import SyncAborted, SyncSummary

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Reconciliation:
    """The signature to apply after all conflicts were decided.

    Attributes:
        parameters: Final parameter list.
        return_type: Final return type; ``None`` keeps the existing return.
        conflicts: Conflicts that were raised, in order.
    """

    parameters: list[Parameter]
    return_type: DataType | None
    conflicts: tuple[Conflict, ...] = ()


class SignatureReconciler:
    """Diffs incoming signatures against database functions and applies decisions."""

    def __init__(self, database: ProgramDatabase, decisions: DecisionProvider) -> None:
        self._db = database
        self._decisions = decisions

    def reconcile(
        self,
        function: Function,
        parameters: list[Parameter],
        return_type: DataType | None,
        location: str,
        *,
        is_destructor: bool = False,
    ) -> Reconciliation:
        """Decide the final signature of *function*.

        A signature conflict exists if the function has more parameters than
        declared, or if a user-authored parameter differs in type or name.
        Destructors are exempt. A return-type conflict exists if a
        user-authored return type differs from the declared one.

        Keeping the existing signature keeps the database parameter list as
        a whole; keeping the existing return type keeps only the return.

        Raises:
            SyncAborted: If a conflict is answered with abort. Its summary is
                empty; the caller knows what was committed.
        """
        conflicts: list[Conflict] = []

        if not is_destructor and self._has_signature_conflict(function, parameters):
            conflict = Conflict(
                location=location,
                kind=ConflictKind.SIGNATURE,
                incoming=format_parameters(parameters),
                existing=format_parameters(self._db.get_parameters(function)),
            )
            conflicts.append(conflict)
            if self._decide(conflict) == Decision.KEEP_EXISTING:
                parameters = self._db.get_parameters(function)

        existing_return = self._db.get_return(function)
        if (
            return_type is not None
            and existing_return is not None
            and existing_return.source == SourceType.USER_DEFINED
            and existing_return.data_type != return_type
        ):
            conflict = Conflict(
                location=location,
                kind=ConflictKind.RETURN_TYPE,
                incoming=str(return_type),
                existing=str(existing_return.data_type),
            )
            conflicts.append(conflict)
            if self._decide(conflict) == Decision.KEEP_EXISTING:
                return_type = None

        return Reconciliation(parameters=list(parameters), return_type=return_type, conflicts=tuple(conflicts))

    # ------------------------------------------------------------------

    def _has_signature_conflict(self, function: Function, parameters: list[Parameter]) -> bool:
        count = self._db.get_parameter_count(function)
        if count > len(parameters):
            return True
        for i in range(count):
            existing = self._db.get_parameter(function, i)
            if existing.source != SourceType.USER_DEFINED:
                continue
            incoming = parameters[i]
            if existing.data_type != incoming.data_type:
                return True
            if existing.name is not None and incoming.name is not None and existing.name != incoming.name:
                return True
        return False

    def _decide(self, conflict: Conflict) -> Decision:
        decision = self._decisions.resolve(conflict)
        if decision == Decision.ABORT:
            raise SyncAborted(conflict.location, SyncSummary())
        return decision


def format_parameters(parameters: list[Parameter]) -> str:
    """Render a parameter list as ``(type name, ...)``."""
    return "(" + ", ".join(str(p) for p in parameters) + ")"

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conflicts between binding declarations and the database, and who decides them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from bromasync.sync.report import SyncError

# ###############
# Public Interface
# ###############


class ConflictKind(Enum):
    """What part of a function signature disagrees."""

    SIGNATURE = "signature"
    RETURN_TYPE = "return type"


class Decision(Enum):
    """Answer to a conflict."""

    USE_INCOMING = "use_incoming"
    KEEP_EXISTING = "keep_existing"
    ABORT = "abort"


@dataclass(frozen=True)
class Conflict:
    """A disagreement between a binding declaration and a user-authored database entry.

    Attributes:
        location: Qualified function name.
        kind: Which part of the signature disagrees.
        incoming: The value from the binding file, rendered as text.
        existing: The value currently in the database, rendered as text.
    """

    location: str
    kind: ConflictKind
    incoming: str
    existing: str

    def describe(self) -> str:
        """Return a multi-line description for prompts and logs."""
        return (
            f"Conflict between {self.kind.value}s in {self.location}:\n"
            f"  Broma:    {self.incoming}\n"
            f"  Database: {self.existing}"
        )


@runtime_checkable
class DecisionProvider(Protocol):
    """Something that answers conflicts, such as a user prompt or a script."""

    def resolve(self, conflict: Conflict) -> Decision:
        """Return the decision for *conflict*. May block."""
        ...


class FixedDecisionProvider:
    """Answers every conflict with the same decision."""

    def __init__(self, decision: Decision) -> None:
        self.decision = decision

    def resolve(self, conflict: Conflict) -> Decision:
        return self.decision


@dataclass
class ScriptedDecisionProvider:
    """Replays a fixed sequence of decisions and records the conflicts it saw.

    Attributes:
        decisions: Decisions to hand out, in order.
        seen: Conflicts received so far.
    """

    decisions: list[Decision]
    seen: list[Conflict] = field(default_factory=list)

    def resolve(self, conflict: Conflict) -> Decision:
        if len(self.seen) >= len(self.decisions):
            raise SyncError(f"No scripted decision left for conflict in {conflict.location}")
        self.seen.append(conflict)
        return self.decisions[len(self.seen) - 1]

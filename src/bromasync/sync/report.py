# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Outcome records of a synchronization run."""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SyncWarning:
    """A non-fatal issue that may need manual follow-up in the database.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class SyncSummary:
    """Result of a synchronization run.

    Attributes:
        added: Qualified names of functions created, in processing order.
        updated: Qualified names of existing functions whose signature changed.
        warnings: Warnings in the order they were raised.
    """

    added: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    warnings: tuple[SyncWarning, ...] = ()

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def updated_count(self) -> int:
        return len(self.updated)


class SyncError(Exception):
    """Raised when synchronization cannot continue.

    Covers unreadable or malformed binding files, unknown platforms,
    unsupported parameter types and database failures.
    """


class SyncAborted(SyncError):
    """Raised when a conflict is answered with abort.

    Functions processed before the abort stay committed; *summary* describes
    them.
    """

    def __init__(self, location: str, summary: SyncSummary) -> None:
        super().__init__(f"Synchronization aborted at {location}")
        self.location = location
        self.summary = summary

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Target platforms and calling-convention selection."""

from __future__ import annotations

from enum import Enum

from bromasync.model.declarations import Dispatch
from bromasync.sync.report import SyncError

# ###############
# Public Interface
# ###############


class Platform(Enum):
    """Platforms a binding file can carry addresses for.

    The value is the tag used in address clauses and ``link(...)`` attributes.
    """

    WINDOWS = "win"
    MAC = "mac"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def is_convention_sensitive(self) -> bool:
        """True for the platform whose ABI depends on the chosen convention."""
        return self is Platform.WINDOWS

    @classmethod
    def parse(cls, value: str) -> Platform:
        """Look up a platform by tag (``win``) or name (``Windows``).

        Raises:
            SyncError: If *value* names no known platform.
        """
        for platform in cls:
            if value == platform.value or value.lower() == platform.name.lower():
                return platform
        known = ", ".join(p.value for p in cls)
        raise SyncError(f"Unknown platform {value!r} (expected one of: {known})")


class CallingConvention(Enum):
    """Calling conventions of the convention-sensitive platform."""

    CDECL = "cdecl"
    THISCALL = "thiscall"
    MEMBERCALL = "membercall"
    FASTCALL = "fastcall"
    OPTCALL = "optcall"

    @property
    def database_name(self) -> str:
        """The convention name understood by the program database.

        Membercall and optcall have no database equivalent; they are stored
        as thiscall and fastcall with explicit parameter storage.
        """
        return _DATABASE_NAMES[self]

    @property
    def needs_explicit_storage(self) -> bool:
        return self in (CallingConvention.MEMBERCALL, CallingConvention.OPTCALL)


def resolve_calling_convention(
    platform: Platform,
    is_linked: bool,
    dispatch: Dispatch,
) -> CallingConvention | None:
    """Pick the calling convention of a function.

    Returns ``None`` on platforms where the database infers the convention
    itself.

    Raises:
        SyncError: If *platform* is not a :class:`Platform`.
    """
    if not isinstance(platform, Platform):
        raise SyncError(f"Unknown platform {platform!r}")
    if not platform.is_convention_sensitive:
        return None
    if dispatch in (Dispatch.VIRTUAL, Dispatch.CALLBACK):
        return CallingConvention.THISCALL
    if dispatch == Dispatch.STATIC:
        return CallingConvention.CDECL if is_linked else CallingConvention.OPTCALL
    return CallingConvention.THISCALL if is_linked else CallingConvention.MEMBERCALL


# ################
# Implementation
# ################

_DATABASE_NAMES: dict[CallingConvention, str] = {
    CallingConvention.CDECL: "__cdecl",
    CallingConvention.OPTCALL: "__fastcall",
    CallingConvention.FASTCALL: "__fastcall",
    CallingConvention.MEMBERCALL: "__thiscall",
    CallingConvention.THISCALL: "__thiscall",
}

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for platform lookup and calling-convention selection."""

import pytest

from bromasync.model.declarations import Dispatch
from bromasync.sync.conventions import CallingConvention, Platform, resolve_calling_convention
from bromasync.sync.report import SyncError

# ###############
# Platform
# ###############


class TestPlatform:
    @pytest.mark.parametrize("value", ["win", "windows", "Windows", "WINDOWS"])
    def test_parse_windows(self, value: str) -> None:
        assert Platform.parse(value) is Platform.WINDOWS

    def test_parse_mac(self) -> None:
        assert Platform.parse("mac") is Platform.MAC

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(SyncError, match="Unknown platform 'android'"):
            Platform.parse("android")

    def test_only_windows_is_convention_sensitive(self) -> None:
        assert Platform.WINDOWS.is_convention_sensitive
        assert not Platform.MAC.is_convention_sensitive
        assert Platform.MAC.tag == "mac"


# ###############
# Convention Matrix
# ###############


class TestResolveCallingConvention:
    @pytest.mark.parametrize(
        "dispatch,linked,expected",
        [
            (Dispatch.VIRTUAL, True, CallingConvention.THISCALL),
            (Dispatch.VIRTUAL, False, CallingConvention.THISCALL),
            (Dispatch.CALLBACK, False, CallingConvention.THISCALL),
            (Dispatch.STATIC, True, CallingConvention.CDECL),
            (Dispatch.STATIC, False, CallingConvention.OPTCALL),
            (Dispatch.NONE, True, CallingConvention.THISCALL),
            (Dispatch.NONE, False, CallingConvention.MEMBERCALL),
            (Dispatch.INLINE, False, CallingConvention.MEMBERCALL),
        ],
    )
    def test_windows_matrix(self, dispatch: Dispatch, linked: bool, expected: CallingConvention) -> None:
        assert resolve_calling_convention(Platform.WINDOWS, linked, dispatch) is expected

    @pytest.mark.parametrize("dispatch", list(Dispatch))
    @pytest.mark.parametrize("linked", [True, False])
    def test_other_platform_asserts_nothing(self, dispatch: Dispatch, linked: bool) -> None:
        assert resolve_calling_convention(Platform.MAC, linked, dispatch) is None

    def test_unknown_platform_raises(self) -> None:
        with pytest.raises(SyncError):
            resolve_calling_convention("win", False, Dispatch.NONE)  # type: ignore[arg-type]


class TestCallingConvention:
    def test_database_names(self) -> None:
        assert CallingConvention.CDECL.database_name == "__cdecl"
        assert CallingConvention.THISCALL.database_name == "__thiscall"
        assert CallingConvention.MEMBERCALL.database_name == "__thiscall"
        assert CallingConvention.OPTCALL.database_name == "__fastcall"
        assert CallingConvention.FASTCALL.database_name == "__fastcall"

    def test_explicit_storage_conventions(self) -> None:
        explicit = {c for c in CallingConvention if c.needs_explicit_storage}
        assert explicit == {CallingConvention.MEMBERCALL, CallingConvention.OPTCALL}

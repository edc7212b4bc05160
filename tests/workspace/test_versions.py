# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for binding version discovery."""

from pathlib import Path

import pytest

from bromasync.workspace import WorkspaceError, discover_versions, resolve_target_files, select_version

# ###############
# Helpers
# ###############


def _make_versions(tmp_path: Path, *names: str) -> Path:
    bindings = tmp_path / "bindings"
    for name in names:
        (bindings / name).mkdir(parents=True)
    return bindings


# ###############
# discover_versions
# ###############


class TestDiscoverVersions:
    def test_sorted_numerically(self, tmp_path: Path) -> None:
        bindings = _make_versions(tmp_path, "2.10", "2.2", "1.9")
        assert discover_versions(bindings) == ["1.9", "2.2", "2.10"]

    def test_files_and_hidden_directories_are_ignored(self, tmp_path: Path) -> None:
        bindings = _make_versions(tmp_path, "2.204", ".git")
        (bindings / "README.md").write_text("x", encoding="utf-8")
        assert discover_versions(bindings) == ["2.204"]

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(WorkspaceError, match="does not exist"):
            discover_versions(tmp_path / "bindings")


# ###############
# select_version
# ###############


class TestSelectVersion:
    def test_newest_by_default(self) -> None:
        assert select_version(["2.1", "2.2", "2.204"]) == "2.204"

    def test_requested_version(self) -> None:
        assert select_version(["2.1", "2.2"], "2.1") == "2.1"

    def test_unknown_version_raises(self) -> None:
        with pytest.raises(WorkspaceError, match="Unknown version '3.0'"):
            select_version(["2.1"], "3.0")

    def test_no_versions_raises(self) -> None:
        with pytest.raises(WorkspaceError, match="No binding versions"):
            select_version([])


# ###############
# resolve_target_files
# ###############


class TestResolveTargetFiles:
    def test_paths_in_order(self, tmp_path: Path) -> None:
        bindings = _make_versions(tmp_path, "2.2")
        for name in ("Cocos2d.bro", "GeometryDash.bro"):
            (bindings / "2.2" / name).write_text("", encoding="utf-8")
        paths = resolve_target_files(bindings, "2.2", ["GeometryDash.bro", "Cocos2d.bro"])
        assert [p.name for p in paths] == ["GeometryDash.bro", "Cocos2d.bro"]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        bindings = _make_versions(tmp_path, "2.2")
        with pytest.raises(WorkspaceError, match="'Cocos2d.bro' not found for version 2.2"):
            resolve_target_files(bindings, "2.2", ["Cocos2d.bro"])

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Discovery of binding versions and their files.

A bindings directory holds one subdirectory per game version, e.g.
``bindings/2.204/GeometryDash.bro``.
"""

from __future__ import annotations

import re
from pathlib import Path

from bromasync.workspace.config import WorkspaceError

# ###############
# Public Interface
# ###############


def discover_versions(bindings_dir: Path) -> list[str]:
    """Return the version subdirectories of *bindings_dir*, oldest first.

    Versions are ordered by their numeric components, so ``2.2`` sorts
    before ``2.10``.

    Raises:
        WorkspaceError: If *bindings_dir* is not a directory.
    """
    if not bindings_dir.is_dir():
        raise WorkspaceError(f"Bindings directory '{bindings_dir}' does not exist")
    names = [p.name for p in bindings_dir.iterdir() if p.is_dir() and not p.name.startswith(".")]
    return sorted(names, key=_version_key)


def select_version(versions: list[str], requested: str | None = None) -> str:
    """Return *requested* if it is available, or the newest version.

    Raises:
        WorkspaceError: If no versions exist or *requested* is unknown.
    """
    if not versions:
        raise WorkspaceError("No binding versions found")
    if requested is None:
        return versions[-1]
    if requested not in versions:
        raise WorkspaceError(f"Unknown version {requested!r} (available: {', '.join(versions)})")
    return requested


def resolve_target_files(bindings_dir: Path, version: str, names: list[str]) -> list[Path]:
    """Return the paths of the binding files *names* for *version*, in order.

    Raises:
        WorkspaceError: If any of the files does not exist.
    """
    version_dir = bindings_dir / version
    paths: list[Path] = []
    for name in names:
        path = version_dir / name
        if not path.is_file():
            raise WorkspaceError(f"Binding file '{name}' not found for version {version} (expected '{path}')")
        paths.append(path)
    return paths


# ################
# Implementation
# ################

_NUMBER_RE = re.compile(r"\d+")


def _version_key(name: str) -> tuple[list[int], str]:
    return [int(n) for n in _NUMBER_RE.findall(name)], name

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the bromasync workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".bromasync.yaml"

DEFAULT_BINDINGS_DIRECTORY = "bindings"
DEFAULT_TARGET_FILES = ("Cocos2d.bro", "GeometryDash.bro")
DEFAULT_PLATFORM = "win"


class WorkspaceError(Exception):
    """Raised when the workspace configuration or layout is invalid."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a bromasync workspace.

    Attributes:
        bindings_directory: Path (relative to the workspace root) of the
            directory holding one subdirectory per game version.
        target_files: Binding file names to synchronize, in order.
        platform: Default target platform tag or name.
        version: Pinned version; ``None`` selects the newest one.
    """

    bindings_directory: str = DEFAULT_BINDINGS_DIRECTORY
    target_files: list[str] = field(default_factory=lambda: list(DEFAULT_TARGET_FILES))
    platform: str = DEFAULT_PLATFORM
    version: str | None = None


def load_workspace_config(directory: Path) -> WorkspaceConfig:
    """Load the workspace configuration from *directory*.

    A workspace without a configuration file uses the defaults.

    Args:
        directory: The workspace root.

    Returns:
        A WorkspaceConfig instance.

    Raises:
        WorkspaceError: If the file cannot be read or the configuration is invalid.
    """
    path = directory / CONFIG_FILE_NAME
    if not path.exists():
        return WorkspaceConfig()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkspaceError(f"Cannot read workspace config file: {exc}") from exc

    return _parse_workspace_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Raises:
        WorkspaceError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return WorkspaceConfig()
    if not isinstance(data, dict):
        raise WorkspaceError(f"{source_label}: workspace config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise WorkspaceError(f"{source_label}: unknown field(s) {', '.join(repr(k) for k in unknown)}")

    config = WorkspaceConfig()
    if "bindings-directory" in data:
        config.bindings_directory = _require_string(data, "bindings-directory", source_label)
    if "platform" in data:
        config.platform = _require_string(data, "platform", source_label)
    if "version" in data:
        # Unquoted versions such as 2.204 load as floats.
        value = data["version"]
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise WorkspaceError(f"{source_label}: 'version' must be a string")
        config.version = str(value)
    if "target-files" in data:
        files = data["target-files"]
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise WorkspaceError(f"{source_label}: 'target-files' must be a list of strings")
        if not files:
            raise WorkspaceError(f"{source_label}: 'target-files' must not be empty")
        config.target_files = list(files)
    return config


_KNOWN_KEYS = frozenset({"bindings-directory", "target-files", "platform", "version"})


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising WorkspaceError if it has another type."""
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceError(f"{source_label}: '{key}' must be a string")
    return value

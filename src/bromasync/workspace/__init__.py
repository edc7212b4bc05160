# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration and binding version discovery."""

from bromasync.workspace.config import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceError,
    load_workspace_config,
)
from bromasync.workspace.versions import discover_versions, resolve_target_files, select_version

__all__ = [
    "CONFIG_FILE_NAME",
    "WorkspaceConfig",
    "WorkspaceError",
    "discover_versions",
    "load_workspace_config",
    "resolve_target_files",
    "select_version",
]

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration model for Broma files (classes, functions, type expressions)."""

from bromasync.model.declarations import (
    SENTINEL_ADDRESS,
    ClassDecl,
    Dispatch,
    FunctionDecl,
    ParamDecl,
)
from bromasync.model.types import TypeRef

__all__ = [
    # Type expressions
    "TypeRef",
    # Declarations
    "SENTINEL_ADDRESS",
    "Dispatch",
    "ParamDecl",
    "FunctionDecl",
    "ClassDecl",
]

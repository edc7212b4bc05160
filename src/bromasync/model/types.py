# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type expressions as written in Broma declarations."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TypeRef(BaseModel):
    """A parsed C++ type expression such as ``const gd::vector<CCNode*>&``.

    Attributes:
        name: The ``::``-qualified type name without template arguments.
        template_args: Template arguments in source order.
        is_const: True if a leading or trailing ``const`` was written.
        pointer_depth: Number of ``*`` suffixes.
        reference_depth: Number of ``&`` suffixes.
    """

    name: str
    template_args: list[TypeRef] = _Field(default_factory=list)
    is_const: bool = False
    pointer_depth: int = 0
    reference_depth: int = 0

    @property
    def path(self) -> list[str]:
        """The qualified name split into its ``::`` segments."""
        return self.name.split("::")

    @property
    def template_suffix(self) -> str:
        """The template argument clause, e.g. ``<int, CCNode*>``, or ``""``."""
        if not self.template_args:
            return ""
        return "<" + ", ".join(str(arg) for arg in self.template_args) + ">"

    @property
    def is_indirect(self) -> bool:
        """True if the type carries any pointer or reference suffix."""
        return self.pointer_depth > 0 or self.reference_depth > 0

    def __str__(self) -> str:
        prefix = "const " if self.is_const else ""
        return f"{prefix}{self.name}{self.template_suffix}{'*' * self.pointer_depth}{'&' * self.reference_depth}"


# Resolve the self-reference in template_args.
TypeRef.model_rebuild()

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Class and function declarations parsed from Broma files."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel
from pydantic import Field as _Field

from bromasync.model.types import TypeRef

# ###############
# Public Interface
# ###############

# Address value used in binding files to mark an address as not yet known.
SENTINEL_ADDRESS = 0x9999999


class Dispatch(Enum):
    """Dispatch keyword written in front of a function declaration."""

    NONE = "none"
    INLINE = "inline"
    VIRTUAL = "virtual"
    STATIC = "static"
    CALLBACK = "callback"


class ParamDecl(BaseModel):
    """A single declared parameter. Unnamed parameters have ``name=None``."""

    type: TypeRef
    name: str | None = None


class FunctionDecl(BaseModel):
    """A member or static function declared inside a class body.

    Attributes:
        name: The function name, or the ``~Name`` marker for destructors.
        is_destructor: True for ``~Name()`` entries.
        dispatch: The dispatch keyword, ``Dispatch.NONE`` if absent.
        return_type: The declared return type; ``None`` for destructors.
        params: Declared parameters in source order. The implicit ``this``
            is not included.
        addresses: Address offsets keyed by platform tag (``win``, ``mac``...).
            The sentinel address is never stored.
    """

    name: str
    is_destructor: bool = False
    dispatch: Dispatch = Dispatch.NONE
    return_type: TypeRef | None = None
    params: list[ParamDecl] = _Field(default_factory=list)
    addresses: dict[str, int] = _Field(default_factory=dict)

    @property
    def has_this(self) -> bool:
        """True if the function receives an implicit ``this`` pointer."""
        return self.dispatch != Dispatch.STATIC

    def address_for(self, platform_tag: str) -> int | None:
        """Return the address offset for *platform_tag*, or None if unset."""
        offset = self.addresses.get(platform_tag)
        if offset is None or offset == SENTINEL_ADDRESS:
            return None
        return offset


class ClassDecl(BaseModel):
    """A ``class`` block with its function entries in source order."""

    name: str
    linked_platforms: list[str] = _Field(default_factory=list)
    functions: list[FunctionDecl] = _Field(default_factory=list)

    @property
    def namespace_path(self) -> list[str]:
        """Namespace segments followed by the class name itself."""
        return self.name.split("::")

    def is_linked(self, platform_tag: str) -> bool:
        """Return True if the class is dynamically linked on *platform_tag*."""
        return platform_tag in self.linked_platforms

    def qualified_name_of(self, function: FunctionDecl) -> str:
        """Return the fully-qualified identity of *function*, e.g. ``cocos2d::CCNode::~CCNode``."""
        return f"{self.name}::{function.name}"

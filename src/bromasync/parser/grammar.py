# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Grammar rules for the Broma binding language.

Each rule is a plain function taking a :class:`TokenCursor`. A rule either
consumes the tokens of one construct and returns its model, or returns
``None`` and leaves the cursor where it found it. Rules compose freely, which
lets the parser scan class bodies for function entries the same way a
pattern search would, skipping over anything that is not a declaration.

Rules:

* :func:`parse_type_ref` -- ``[const] A::B[<T, ...>] [const] [*...] [&...]``
* :func:`parse_param` -- ``type [name]``
* :func:`parse_address_clause` -- ``= win 0x1234, mac 0x5678``
* :func:`parse_function` -- ``[dispatch] (ret name | ~Name) (params) [= addresses]``
* :func:`parse_link_attribute` -- ``[[link(win, android)]]``
* :func:`parse_class_header` -- ``class A::B [: bases] {``
"""

import re

from bromasync.model.declarations import SENTINEL_ADDRESS, Dispatch, FunctionDecl, ParamDecl
from bromasync.model.types import TypeRef
from bromasync.parser.lexer import Token, TokenType

# ###############
# Public Interface
# ###############

# Template arguments may nest this many levels deep (``A<B<C>>``).
MAX_TEMPLATE_DEPTH = 2


class TokenCursor:
    """A backtracking position over a token list that ends with an EOF token."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    @property
    def current(self) -> Token:
        """The current (un-consumed) token."""
        return self._tokens[self._pos]

    def peek(self, offset: int = 1) -> Token:
        """Return the token *offset* positions ahead, clamped to EOF."""
        return self._tokens[min(self._pos + offset, len(self._tokens) - 1)]

    def at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self.current.type == TokenType.EOF

    def check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of *types* (without consuming)."""
        return self.current.type in types

    def advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def match(self, *types: TokenType) -> Token | None:
        """Consume the current token if it matches any of *types*."""
        if self.check(*types):
            return self.advance()
        return None

    def mark(self) -> int:
        """Return the current position for a later :meth:`reset`."""
        return self._pos

    def reset(self, mark: int) -> None:
        """Rewind to a position obtained from :meth:`mark`."""
        self._pos = mark


def parse_type_ref(cursor: TokenCursor, depth: int = MAX_TEMPLATE_DEPTH) -> TypeRef | None:
    """Parse a type expression.

    Template arguments are parsed with ``depth - 1``; a template clause at
    depth 0 does not match, which bounds nesting to *depth* levels.
    """
    start = cursor.mark()
    is_const = cursor.match(TokenType.CONST) is not None
    name = _parse_qualified_name(cursor)
    if name is None:
        cursor.reset(start)
        return None

    template_args: list[TypeRef] = []
    if cursor.check(TokenType.LANGLE):
        args = _parse_template_args(cursor, depth) if depth > 0 else None
        if args is None:
            cursor.reset(start)
            return None
        template_args = args

    if cursor.match(TokenType.CONST):
        is_const = True
    pointer_depth = 0
    while cursor.match(TokenType.STAR):
        pointer_depth += 1
    reference_depth = 0
    while cursor.match(TokenType.AMPERSAND):
        reference_depth += 1

    return TypeRef(
        name=name,
        template_args=template_args,
        is_const=is_const,
        pointer_depth=pointer_depth,
        reference_depth=reference_depth,
    )


def parse_param(cursor: TokenCursor) -> ParamDecl | None:
    """Parse: <type> [<name>]"""
    param_type = parse_type_ref(cursor)
    if param_type is None:
        return None
    name_tok = cursor.match(TokenType.IDENTIFIER)
    return ParamDecl(type=param_type, name=name_tok.value if name_tok else None)


def parse_address_clause(cursor: TokenCursor) -> dict[str, int] | None:
    """Parse: = <platform> 0x<hex> [, <platform> 0x<hex>]*

    The first address given for a platform wins. Sentinel addresses are
    dropped so they read as absent everywhere downstream.
    """
    start = cursor.mark()
    if cursor.match(TokenType.EQUALS) is None:
        return None
    found: dict[str, int] = {}
    while cursor.check(TokenType.IDENTIFIER) and _is_hex(cursor.peek()):
        platform = cursor.advance().value
        offset = int(cursor.advance().value, 16)
        found.setdefault(platform, offset)
        cursor.match(TokenType.COMMA)
    if not found:
        cursor.reset(start)
        return None
    return {platform: offset for platform, offset in found.items() if offset != SENTINEL_ADDRESS}


def parse_function(cursor: TokenCursor) -> FunctionDecl | None:
    """Parse one function entry of a class body.

    A ``{ ... }`` body directly following the declaration is consumed as a
    balanced block so that its contents are not scanned for declarations.
    """
    start = cursor.mark()
    dispatch = Dispatch.NONE
    if cursor.check(*_DISPATCH_KEYWORDS):
        dispatch = _DISPATCH_KEYWORDS[cursor.advance().type]

    return_type: TypeRef | None = None
    if cursor.check(TokenType.TILDE) and cursor.peek().type == TokenType.IDENTIFIER:
        cursor.advance()  # consume ~
        name = "~" + cursor.advance().value
        is_destructor = True
    else:
        return_type = parse_type_ref(cursor)
        name_tok = cursor.match(TokenType.IDENTIFIER) if return_type is not None else None
        if name_tok is None:
            cursor.reset(start)
            return None
        name = name_tok.value
        is_destructor = False

    params = _parse_param_list(cursor)
    if params is None:
        cursor.reset(start)
        return None

    addresses = parse_address_clause(cursor) or {}
    if cursor.check(TokenType.LBRACE):
        skip_balanced(cursor)

    return FunctionDecl(
        name=name,
        is_destructor=is_destructor,
        dispatch=dispatch,
        return_type=return_type,
        params=params,
        addresses=addresses,
    )


def parse_link_attribute(cursor: TokenCursor) -> list[str] | None:
    """Parse a ``[[...]]`` attribute block and return its ``link(...)`` platforms.

    Returns an empty list for an attribute block without ``link``, and
    ``None`` (cursor unchanged) if no complete attribute block starts here.
    """
    if not (cursor.check(TokenType.LBRACKET) and cursor.peek().type == TokenType.LBRACKET):
        return None
    start = cursor.mark()
    cursor.advance()
    cursor.advance()
    platforms: list[str] = []
    while not cursor.at_end():
        if cursor.check(TokenType.RBRACKET) and cursor.peek().type == TokenType.RBRACKET:
            cursor.advance()
            cursor.advance()
            return platforms
        tok = cursor.advance()
        if tok.type == TokenType.IDENTIFIER and tok.value == "link" and cursor.match(TokenType.LPAREN):
            while not cursor.check(TokenType.RPAREN, TokenType.EOF):
                item = cursor.advance()
                if item.type == TokenType.IDENTIFIER:
                    platforms.append(item.value)
            cursor.match(TokenType.RPAREN)
    cursor.reset(start)
    return None


def parse_class_header(cursor: TokenCursor) -> str | None:
    """Parse: class <qualified-name> [: <ignored base clause>] {

    Returns the qualified class name with the cursor placed just after the
    opening brace, or ``None`` for anything else (e.g. forward declarations).
    """
    start = cursor.mark()
    if cursor.match(TokenType.CLASS) is None:
        return None
    name = _parse_qualified_name(cursor)
    if name is not None:
        if cursor.match(TokenType.COLON):
            while not cursor.check(TokenType.LBRACE, TokenType.EOF):
                cursor.advance()
        if cursor.match(TokenType.LBRACE):
            return name
    cursor.reset(start)
    return None


def skip_balanced(cursor: TokenCursor) -> None:
    """Consume a ``{ ... }`` block including nested blocks, or up to EOF."""
    depth = 0
    while not cursor.at_end():
        tok = cursor.advance()
        if tok.type == TokenType.LBRACE:
            depth += 1
        elif tok.type == TokenType.RBRACE:
            depth -= 1
            if depth <= 0:
                return


# ################
# Implementation
# ################

_DISPATCH_KEYWORDS: dict[TokenType, Dispatch] = {
    TokenType.INLINE: Dispatch.INLINE,
    TokenType.VIRTUAL: Dispatch.VIRTUAL,
    TokenType.STATIC: Dispatch.STATIC,
    TokenType.CALLBACK: Dispatch.CALLBACK,
}

_HEX_RE = re.compile(r"0x[0-9a-fA-F]+")


def _is_hex(tok: Token) -> bool:
    return tok.type == TokenType.NUMBER and _HEX_RE.fullmatch(tok.value) is not None


def _parse_qualified_name(cursor: TokenCursor) -> str | None:
    """Parse: <ident> [:: <ident>]*"""
    first = cursor.match(TokenType.IDENTIFIER)
    if first is None:
        return None
    parts = [first.value]
    while cursor.check(TokenType.SCOPE) and cursor.peek().type == TokenType.IDENTIFIER:
        cursor.advance()  # consume ::
        parts.append(cursor.advance().value)
    return "::".join(parts)


def _parse_template_args(cursor: TokenCursor, depth: int) -> list[TypeRef] | None:
    """Parse: < <type> [, <type>]* > with nested arguments at ``depth - 1``."""
    cursor.advance()  # consume <
    args: list[TypeRef] = []
    while True:
        arg = parse_type_ref(cursor, depth - 1)
        if arg is None:
            return None
        args.append(arg)
        if cursor.match(TokenType.COMMA) is None:
            break
    if cursor.match(TokenType.RANGLE) is None:
        return None
    return args


def _parse_param_list(cursor: TokenCursor) -> list[ParamDecl] | None:
    """Parse: ( [<param> [, <param>]* [,]] )"""
    if cursor.match(TokenType.LPAREN) is None:
        return None
    params: list[ParamDecl] = []
    while not cursor.check(TokenType.RPAREN):
        param = parse_param(cursor)
        if param is None:
            return None
        params.append(param)
        if cursor.match(TokenType.COMMA) is None:
            break
    if cursor.match(TokenType.RPAREN) is None:
        return None
    return params

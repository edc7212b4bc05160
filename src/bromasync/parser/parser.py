# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Class-block scanner for Broma files.

Finds every ``class`` block in a token stream and collects the function
entries of its body in source order. Everything outside class blocks, and
anything inside a body that is not a function entry (member fields, padding,
comments), is skipped.

A class body ends at the first ``}`` that sits at the very start of a line.
Closing braces of nested blocks are expected to be indented, so this rule
keeps a malformed inline body from swallowing the classes that follow it.
"""

from bromasync.model.declarations import ClassDecl
from bromasync.parser.grammar import TokenCursor, parse_class_header, parse_function, parse_link_attribute
from bromasync.parser.lexer import Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised when the parser cannot delimit a class block.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str) -> list[ClassDecl]:
    """Parse Broma source text into class declarations.

    Args:
        source: The full text of a .bro file.

    Returns:
        The class declarations in source order, each holding its function
        declarations in source order.

    Raises:
        LexerError: If the source contains unterminated literals or comments.
        ParseError: If a class body has no closing ``}`` at the start of a line.
    """
    tokens = tokenize(source)
    return _Parser(tokens).parse()


# ################
# Implementation
# ################


class _Parser:
    """Scanner over the top-level token stream of one file."""

    def __init__(self, tokens: list[Token]) -> None:
        self._cursor = TokenCursor(tokens)

    def parse(self) -> list[ClassDecl]:
        """Scan the full token stream and return all class blocks."""
        classes: list[ClassDecl] = []
        cursor = self._cursor
        while not cursor.at_end():
            linked = parse_link_attribute(cursor)
            class_tok = cursor.current
            name = parse_class_header(cursor)
            if name is not None:
                classes.append(self._parse_class_body(name, linked or [], class_tok))
            elif linked is None:
                cursor.advance()
        return classes

    def _parse_class_body(self, name: str, linked: list[str], class_tok: Token) -> ClassDecl:
        """Collect the body tokens up to the closing boundary and scan them."""
        body = self._take_body(name, class_tok)
        cls = ClassDecl(name=name, linked_platforms=linked)
        cursor = TokenCursor(body)
        while not cursor.at_end():
            function = parse_function(cursor)
            if function is not None:
                cls.functions.append(function)
            else:
                cursor.advance()
        return cls

    def _take_body(self, name: str, class_tok: Token) -> list[Token]:
        """Consume tokens up to and including the first ``}`` in column 1.

        Returns the body tokens terminated by an EOF token.
        """
        cursor = self._cursor
        body: list[Token] = []
        while not cursor.at_end():
            tok = cursor.advance()
            if tok.type == TokenType.RBRACE and tok.column == 1:
                body.append(Token(TokenType.EOF, "", tok.line, tok.column))
                return body
            body.append(tok)
        raise ParseError(
            f"Class {name!r} has no closing '}}' at the start of a line",
            class_tok.line,
            class_tok.column,
        )

# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for Broma binding files.

Converts raw source text into a sequence of tokens for the grammar rules.
Class bodies may contain inline C++ code, so characters that have no meaning
to the binding grammar are passed through as SYMBOL tokens instead of being
rejected.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the Broma lexer."""

    # Keywords
    CLASS = "class"
    CONST = "const"
    INLINE = "inline"
    VIRTUAL = "virtual"
    STATIC = "static"
    CALLBACK = "callback"

    # Symbols and operators
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LANGLE = "<"
    RANGLE = ">"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    SCOPE = "::"
    EQUALS = "="
    STAR = "*"
    AMPERSAND = "&"
    TILDE = "~"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # Any other character (inline code bodies, preprocessor lines, ...)
    SYMBOL = "SYMBOL"

    # End of file
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """Raised when the scanner encounters an unterminated literal or comment.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Tokenize Broma source text into a sequence of tokens.

    Returns a list of tokens. The final token is always an EOF token.
    Comments and whitespace are consumed and not included in the output.

    Args:
        source: The full text of a .bro file.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unterminated string/char literals or unterminated
            block comments.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "class": TokenType.CLASS,
    "const": TokenType.CONST,
    "inline": TokenType.INLINE,
    "virtual": TokenType.VIRTUAL,
    "static": TokenType.STATIC,
    "callback": TokenType.CALLBACK,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "=": TokenType.EQUALS,
    "*": TokenType.STAR,
    "&": TokenType.AMPERSAND,
    "~": TokenType.TILDE,
}


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the newline itself)."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/'."""
        start_line = self._line
        start_col = self._column
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return
            self._advance()
        raise LexerError("Unterminated block comment", start_line, start_col)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch == ":":
            if self._peek() == ":":
                self._advance()
                self._advance()
                self._tokens.append(Token(TokenType.SCOPE, "::", line, col))
            else:
                self._advance()
                self._tokens.append(Token(TokenType.COLON, ":", line, col))
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, line, col))
        elif ch in "\"'":
            self._scan_quoted(ch, line, col)
        elif ch.isdigit():
            self._scan_number(line, col)
        elif ch.isalpha() or ch == "_":
            self._scan_identifier_or_keyword(line, col)
        else:
            self._advance()
            self._tokens.append(Token(TokenType.SYMBOL, ch, line, col))

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_quoted(self, quote: str, line: int, col: int) -> None:
        """Scan a string or char literal, keeping escapes verbatim."""
        start = self._pos
        self._advance()  # opening quote
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()  # closing quote
                self._tokens.append(Token(TokenType.STRING, self._source[start : self._pos], line, col))
                return
            if ch == "\n":
                break
            if ch == "\\":
                self._advance()
                if self._pos >= len(self._source):
                    break
            self._advance()
        raise LexerError("Unterminated string literal", line, col)

    def _scan_number(self, line: int, col: int) -> None:
        """Scan a numeric literal such as '0x1f2e', '42' or '1.5f'.

        The grammar only interprets hexadecimal addresses; other numeric
        forms only need to be consumed as a single token.
        """
        start = self._pos
        while self._pos < len(self._source) and (
            self._current().isalnum() or self._current() in "_."
        ):
            self._advance()
        value = self._source[start : self._pos]
        self._tokens.append(Token(TokenType.NUMBER, value, line, col))

    def _scan_identifier_or_keyword(self, line: int, col: int) -> None:
        """Scan an identifier and map it to a keyword token type if applicable."""
        start = self._pos
        while self._pos < len(self._source) and (
            self._current().isalnum() or self._current() == "_"
        ):
            self._advance()
        value = self._source[start : self._pos]
        token_type = _KEYWORDS.get(value, TokenType.IDENTIFIER)
        self._tokens.append(Token(token_type, value, line, col))

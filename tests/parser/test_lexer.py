# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Broma lexer."""

import pytest

from bromasync.parser.lexer import LexerError, Token, TokenType, tokenize

# ###############
# Test Helpers
# ###############


def _types(source: str) -> list[TokenType]:
    """Return the token types of *source* without the trailing EOF."""
    return [t.type for t in tokenize(source)[:-1]]


def _values(source: str) -> list[str]:
    return [t.value for t in tokenize(source)[:-1]]


# ###############
# Basics
# ###############


class TestBasics:
    def test_empty_source_yields_only_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_eof_is_always_last(self) -> None:
        tokens = tokenize("class Foo {")
        assert tokens[-1].type == TokenType.EOF
        assert sum(1 for t in tokens if t.type == TokenType.EOF) == 1

    def test_whitespace_is_skipped(self) -> None:
        assert _values("  \t foo \r\n bar ") == ["foo", "bar"]

    def test_tokens_are_frozen(self) -> None:
        token = tokenize("foo")[0]
        assert token == Token(TokenType.IDENTIFIER, "foo", 1, 1)
        with pytest.raises(AttributeError):
            token.value = "bar"  # type: ignore[misc]


# ###############
# Keywords and Identifiers
# ###############


class TestKeywords:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("class", TokenType.CLASS),
            ("const", TokenType.CONST),
            ("inline", TokenType.INLINE),
            ("virtual", TokenType.VIRTUAL),
            ("static", TokenType.STATIC),
            ("callback", TokenType.CALLBACK),
        ],
    )
    def test_keyword(self, word: str, expected: TokenType) -> None:
        assert _types(word) == [expected]

    def test_keyword_prefix_is_identifier(self) -> None:
        assert _types("classy constant") == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]

    def test_identifier_with_underscore_and_digits(self) -> None:
        assert _values("_m_node2") == ["_m_node2"]


# ###############
# Symbols
# ###############


class TestSymbols:
    def test_scope_is_single_token(self) -> None:
        assert _types("cocos2d::CCNode") == [TokenType.IDENTIFIER, TokenType.SCOPE, TokenType.IDENTIFIER]

    def test_single_colon(self) -> None:
        assert _types(": base") == [TokenType.COLON, TokenType.IDENTIFIER]

    def test_nested_template_closers_are_separate(self) -> None:
        assert _types("A<B<C>>")[-2:] == [TokenType.RANGLE, TokenType.RANGLE]

    def test_punctuation(self) -> None:
        assert _types("{}()[],;=*&~") == [
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.COMMA,
            TokenType.SEMICOLON,
            TokenType.EQUALS,
            TokenType.STAR,
            TokenType.AMPERSAND,
            TokenType.TILDE,
        ]

    def test_unknown_characters_become_symbols(self) -> None:
        tokens = tokenize("#include +")
        assert tokens[0] == Token(TokenType.SYMBOL, "#", 1, 1)
        assert tokens[2] == Token(TokenType.SYMBOL, "+", 1, 10)


# ###############
# Literals
# ###############


class TestLiterals:
    def test_hex_number(self) -> None:
        assert tokenize("0x1a2B")[0] == Token(TokenType.NUMBER, "0x1a2B", 1, 1)

    def test_float_number_is_one_token(self) -> None:
        assert _values("1.5f") == ["1.5f"]

    def test_string_literal_keeps_quotes(self) -> None:
        assert _values('"a\\"b"') == ['"a\\"b"']

    def test_char_literal(self) -> None:
        assert _types("'}'") == [TokenType.STRING]

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize('x = "abc\n')
        assert exc_info.value.line == 1
        assert exc_info.value.column == 5


# ###############
# Comments
# ###############


class TestComments:
    def test_line_comment_is_skipped(self) -> None:
        assert _values("foo // void bar() = win 0x10;\nbaz") == ["foo", "baz"]

    def test_block_comment_is_skipped(self) -> None:
        assert _values("foo /* } \n } */ baz") == ["foo", "baz"]

    def test_unterminated_block_comment_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize("\n  /* never closed")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3


# ###############
# Positions
# ###############


class TestPositions:
    def test_line_and_column_are_one_based(self) -> None:
        tokens = tokenize("class Foo {\n\tvoid bar();\n}")
        by_value = {t.value: t for t in tokens}
        assert (by_value["class"].line, by_value["class"].column) == (1, 1)
        assert (by_value["void"].line, by_value["void"].column) == (2, 2)
        assert (by_value["}"].line, by_value["}"].column) == (3, 1)

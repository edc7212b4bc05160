# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer, grammar rules and class-block parser for Broma files."""

from bromasync.parser.lexer import LexerError
from bromasync.parser.parser import ParseError, parse

__all__ = [
    "parse",
    "ParseError",
    "LexerError",
]

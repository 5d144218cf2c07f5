"""Shared definitions for token kinds.

This module centralizes the token kinds produced by the lexer and consumed
by the parser, together with the fixed keyword table. Keeping them in one
place prevents the two components from drifting apart when a keyword is
added or renamed.


File: token_types.py
Version: 0.1.0
License: MIT
"""

from enum import Enum


class TokenType(str, Enum):
    """
    Enumeration of token kinds.
    """

    # Indentation (one token per leading character of a line)
    SPACE = "space"
    TAB = "tab"

    # Single-character tokens
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"
    COMMA = "comma"
    DOT = "dot"
    MINUS = "minus"
    PLUS = "plus"
    SLASH = "slash"
    STAR = "star"

    # One or two character tokens
    BANG = "bang"
    BANG_EQUAL = "bang_equal"
    EQUAL_EQUAL = "equal_equal"
    GREATER = "greater"
    GREATER_EQUAL = "greater_equal"
    LESS = "less"
    LESS_EQUAL = "less_equal"
    COLON = "colon"
    DOUBLE_COLON = "double_colon"

    # Literals
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"

    # Keywords
    AND = "and"
    CLASS = "class"
    ELSE = "else"
    FALSE = "false"
    FOR = "for"
    FUNCTION = "function"
    IF = "if"
    NULL = "null"
    OR = "or"
    PRINT = "print"
    RETURN = "return"
    SUPER = "super"
    THIS = "this"
    TO = "to"
    TRUE = "true"
    SET = "set"
    WHILE = "while"

    EOF = "eof"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """
        Return the underlying string value for nicer debug output.
        """
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "function": TokenType.FUNCTION,
    "if": TokenType.IF,
    "null": TokenType.NULL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "to": TokenType.TO,
    "true": TokenType.TRUE,
    "set": TokenType.SET,
    "while": TokenType.WHILE,
}

INDENTATION = (TokenType.SPACE, TokenType.TAB)

# Tokens that may begin a statement; the parser resynchronizes on these.
STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUNCTION,
    TokenType.SET,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


__all__ = ["TokenType", "KEYWORDS", "INDENTATION", "STATEMENT_STARTS"]

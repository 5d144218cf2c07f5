"""Lexer for CraftLang.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its kind, source text, literal value and line number.

Indentation is not interpreted here. At the start of the source and after
every line break each leading space or tab of the line becomes its own
``SPACE`` / ``TAB`` token, so the parser can decide which indentation unit
is in effect for each block. Line comments
starting with ``//`` are skipped. Bad characters and unterminated strings
are reported on the :class:`~craftlang.diagnostics.Reporter` and scanning
carries on.


File: lexer.py
Version: 0.1.0
License: MIT
"""

import re
from typing import Any, TYPE_CHECKING

from craftlang.token_types import KEYWORDS, TokenType

if TYPE_CHECKING:
    from craftlang.diagnostics import Reporter


class Token:
    """
    Represents a lexical token with a kind, lexeme and optional literal.
    """
    __slots__ = ("type", "lexeme", "literal", "line")

    def __init__(self, type_: TokenType, lexeme: str, literal: Any, line: int):
        """
        Initialize a new token.

        Parameters:
            type_ (TokenType): The token kind.
            lexeme (str): The source text of the token.
            literal (Any): The parsed value for strings and numbers.
            line (int): The source line.
        """
        self.type = type_
        self.lexeme = lexeme
        self.literal = literal
        self.line = line

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.lexeme!r}, {self.literal!r}, line={self.line})"


TOKEN_SPECIFICATION: list[tuple[str, str]] = [
    # Line structure
    ('NEWLINE',       r'\n'),
    ('INDENT',        r'(?:^|(?<=\n))[ \t]+'),
    ('SKIP',          r'[ \t\r]+'),
    ('COMMENT',       r'//[^\n]*'),

    # Literals
    ('NUMBER',        r'\d+(?:\.\d+)?'),
    # Only a backslash right before a quote escapes it.
    ('STRING',        r'"(?:[^"\\]|\\"|\\(?!"))*"'),
    ('UNTERMINATED',  r'"(?:[^"\\]|\\"|\\(?!"))*'),
    ('IDENTIFIER',    r'[A-Za-z_][A-Za-z0-9_]*'),

    # Two-character operators
    ('BANG_EQUAL',    r'!='),
    ('EQUAL_EQUAL',   r'=='),
    ('LESS_EQUAL',    r'<='),
    ('GREATER_EQUAL', r'>='),
    ('DOUBLE_COLON',  r'::'),

    # Single-character operators and delimiters
    ('LEFT_PAREN',    r'\('),
    ('RIGHT_PAREN',   r'\)'),
    ('COMMA',         r','),
    ('DOT',           r'\.'),
    ('MINUS',         r'-'),
    ('PLUS',          r'\+'),
    ('STAR',          r'\*'),
    ('SLASH',         r'/'),
    ('BANG',          r'!'),
    ('LESS',          r'<'),
    ('GREATER',       r'>'),
    ('COLON',         r':'),

    ('MISMATCH',      r'[\s\S]'),
]

TOKEN_REGEX = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in TOKEN_SPECIFICATION)
)


def tokenize(source: str, reporter: 'Reporter') -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        source (str): The source code to tokenize.
        reporter (Reporter): Receives lexical errors.

    Returns:
        list[Token]: The tokens, always terminated by an ``EOF`` token.
    """
    tokens: list[Token] = []
    line_num = 1

    for match_obj in TOKEN_REGEX.finditer(source):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            continue
        if kind in ('SKIP', 'COMMENT'):
            continue
        if kind == 'INDENT':
            for char in value:
                type_ = TokenType.SPACE if char == ' ' else TokenType.TAB
                tokens.append(Token(type_, char, None, line_num))
            continue
        if kind == 'MISMATCH':
            if value == '\0':
                continue
            if value == '=':
                reporter.error(
                    line_num,
                    "Unexpected character '='. For comparison use '==' instead."
                )
            else:
                reporter.error(line_num, f"Unexpected character '{value}'.")
            continue
        if kind == 'UNTERMINATED':
            line_num += value.count('\n')
            reporter.error(line_num, "Unterminated string.")
            continue

        if kind == 'NUMBER':
            tokens.append(Token(TokenType.NUMBER, value, float(value), line_num))
        elif kind == 'STRING':
            literal = value[1:-1].replace('\\"', '"')
            tokens.append(Token(TokenType.STRING, value, literal, line_num))
            line_num += value.count('\n')
        elif kind == 'IDENTIFIER':
            type_ = KEYWORDS.get(value, TokenType.IDENTIFIER)
            tokens.append(Token(type_, value, None, line_num))
        else:
            tokens.append(Token(TokenType[kind], value, None, line_num))

    tokens.append(Token(TokenType.EOF, "", None, line_num))
    return tokens

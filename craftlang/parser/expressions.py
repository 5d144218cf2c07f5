"""
Expression parsing utilities for CraftLang.

These functions operate on a `craftlang.parser.parser.Parser` instance and
implement the recursive descent logic for expressions, maintaining
operator precedence and associativity. From lowest to highest precedence:
or, and, equality, comparison, term, factor, unary, call, primary.


File: expressions.py
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from craftlang.ast_nodes import (
    Binary,
    Call,
    Expr,
    Get,
    Grouping,
    Literal,
    Logical,
    Super,
    This,
    Unary,
    Variable,
)
from craftlang.token_types import TokenType

if TYPE_CHECKING:
    from craftlang.parser import Parser


# ---- Entry point ----

def parse_expression(parser: 'Parser') -> Expr:
    """Parse an expression starting from the lowest-precedence operator."""
    return parser.logical_or()


def parse_logical_or(parser: 'Parser') -> Expr:
    """Parse logical OR expressions using the 'or' keyword."""
    expr = parser.logical_and()
    while parser.match(TokenType.OR):
        operator = parser.previous()
        expr = Logical(expr, operator, parser.logical_and())
    return expr


def parse_logical_and(parser: 'Parser') -> Expr:
    """Parse logical AND expressions using the 'and' keyword."""
    expr = parser.equality()
    while parser.match(TokenType.AND):
        operator = parser.previous()
        expr = Logical(expr, operator, parser.equality())
    return expr


def parse_equality(parser: 'Parser') -> Expr:
    """Parse equality expressions (==, !=)."""
    expr = parser.comparison()
    while parser.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
        operator = parser.previous()
        expr = Binary(expr, operator, parser.comparison())
    return expr


def parse_comparison(parser: 'Parser') -> Expr:
    """Parse comparison expressions (<, <=, >, >=)."""
    expr = parser.term()
    while parser.match(
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    ):
        operator = parser.previous()
        expr = Binary(expr, operator, parser.term())
    return expr


def parse_term(parser: 'Parser') -> Expr:
    """Parse addition and subtraction expressions."""
    expr = parser.factor()
    while parser.match(TokenType.MINUS, TokenType.PLUS):
        operator = parser.previous()
        expr = Binary(expr, operator, parser.factor())
    return expr


def parse_factor(parser: 'Parser') -> Expr:
    """Parse multiplication and division expressions."""
    expr = parser.unary()
    while parser.match(TokenType.SLASH, TokenType.STAR):
        operator = parser.previous()
        expr = Binary(expr, operator, parser.unary())
    return expr


def parse_unary(parser: 'Parser') -> Expr:
    """Parse prefix '!' and '-'."""
    if parser.match(TokenType.BANG, TokenType.MINUS):
        operator = parser.previous()
        return Unary(operator, parser.unary())
    return parser.call()


# ---- Highest precedence ----

def parse_call(parser: 'Parser') -> Expr:
    """Parse a primary followed by any number of calls and '.name' accesses."""
    expr = parser.primary()
    while True:
        if parser.match(TokenType.LEFT_PAREN):
            expr = _finish_call(parser, expr)
        elif parser.match(TokenType.DOT):
            name = parser.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
            expr = Get(expr, name)
        else:
            break
    return expr


def _finish_call(parser: 'Parser', callee: Expr) -> Expr:
    """
    Parse the argument list of a call after its '('.

    Syntax:
        <callee>(<expression>, ...)
    """
    arguments = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(arguments) >= parser.max_arguments:
                parser.error(
                    parser.peek(),
                    f"Can't have more than {parser.max_arguments} arguments."
                )
            arguments.append(parser.expression())
            if not parser.match(TokenType.COMMA):
                break
    paren = parser.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
    return Call(callee, paren, tuple(arguments))


def parse_primary(parser: 'Parser') -> Expr:
    """Parse a literal, variable, 'this', 'super.name' or parenthesized group."""
    if parser.match(TokenType.FALSE):
        return Literal(False)
    if parser.match(TokenType.TRUE):
        return Literal(True)
    if parser.match(TokenType.NULL):
        return Literal(None)

    if parser.match(TokenType.NUMBER, TokenType.STRING):
        return Literal(parser.previous().literal)

    if parser.match(TokenType.SUPER):
        keyword = parser.previous()
        parser.consume(TokenType.DOT, "Expect '.' after 'super'.")
        method = parser.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
        return Super(keyword, method)

    if parser.match(TokenType.THIS):
        return This(parser.previous())

    if parser.match(TokenType.IDENTIFIER):
        return Variable(parser.previous())

    if parser.match(TokenType.LEFT_PAREN):
        expr = parser.expression()
        parser.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
        return Grouping(expr)

    raise parser.error(parser.peek(), "Expect expression.")

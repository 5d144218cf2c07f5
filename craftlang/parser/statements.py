"""Statement parsing utilities for CraftLang.

These functions operate on a `craftlang.parser.parser.Parser` instance and
handle declarations (classes, functions, ``set ... to ...``), the general
statements (if, print, return, while, blocks, expression statements) and
class bodies. Blocks are introduced by a trailing ``:`` and consist of the
lines indented one level deeper.


File: statements.py
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from craftlang.ast_nodes import (
    Block,
    Class,
    Expression,
    Function,
    Get,
    If,
    Print,
    Return,
    Set,
    Stmt,
    Var,
    Variable,
    While,
)
from craftlang.exceptions import ParseException
from craftlang.token_types import TokenType

if TYPE_CHECKING:
    from craftlang.parser import Parser


def parse_declaration(parser: 'Parser') -> Stmt:
    """
    Parse a declaration or fall through to a general statement.

    Syntax:
        class <name> [:: <superclass>]: <methods>
        function <name>(<params>) [:: <type>]: <block>
        set <target> to <expression>
        <statement>

    Args:
        parser: The parser instance.

    Returns:
        Stmt: The parsed statement.
    """
    if parser.match(TokenType.CLASS):
        return parse_class(parser)
    if parser.match(TokenType.FUNCTION):
        return parser.function("function")
    if parser.match(TokenType.SET):
        return parse_assignment(parser)
    return parser.statement()


def parse_class(parser: 'Parser') -> Class:
    """
    Parse a class declaration after the 'class' keyword.

    Syntax:
        class <name> [:: <superclass>]:
            function <method>(<params>): <block>
            ...

    Args:
        parser: The parser instance.

    Returns:
        Class: The class node. Whether the superclass names the class itself
        is checked by the resolver.
    """
    name = parser.consume(TokenType.IDENTIFIER, "Expect class name.")
    superclass = None
    if parser.match(TokenType.DOUBLE_COLON):
        superclass = Variable(
            parser.consume(TokenType.IDENTIFIER, "Expect superclass name.")
        )
    parser.consume(TokenType.COLON, "Expect ':' before class body.")
    methods = parser.indented(parser.method)
    return Class(name, superclass, tuple(methods))


def parse_method(parser: 'Parser') -> Function | None:
    """
    Parse one method of a class body.

    A broken method is reported and skipped so the rest of the class body
    is still checked.

    Returns:
        Function | None: The method, or None after an error.
    """
    try:
        parser.begin_line()
        parser.consume(TokenType.FUNCTION, "Expect method declaration.")
        return parser.function("method")
    except ParseException:
        parser.synchronize()
        return None


def parse_function(parser: 'Parser', kind: str) -> Function:
    """
    Parse a function or method after its 'function' keyword.

    Syntax:
        function <name>(<params>) [:: <type>]: <block>

    Args:
        parser: The parser instance.
        kind (str): 'function' or 'method', used in error messages.

    Returns:
        Function: The declaration node.
    """
    name = parser.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
    parser.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
    params = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(params) >= parser.max_arguments:
                parser.error(
                    parser.peek(),
                    f"Can't have more than {parser.max_arguments} parameters."
                )
            params.append(parser.consume(TokenType.IDENTIFIER, "Expect parameter name."))
            if not parser.match(TokenType.COMMA):
                break
    parser.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

    return_type = None
    if parser.match(TokenType.DOUBLE_COLON):
        if not parser.match(TokenType.IDENTIFIER, TokenType.NULL):
            raise parser.error(parser.peek(), "Expect return type.")
        return_type = parser.previous()

    parser.consume(TokenType.COLON, f"Expect ':' before {kind} body.")
    body = parser.block()
    return Function(name, tuple(params), tuple(body), return_type)


def parse_assignment(parser: 'Parser') -> Stmt:
    """
    Parse an expression that may be followed by 'to <value>'.

    Syntax:
        [set] <identifier> to <expression>
        [set] <expression>.<identifier> to <expression>

    A plain variable target becomes a `Var` statement; a property target
    becomes a `Set` expression statement. Anything else is reported as an
    invalid assignment target.

    Args:
        parser: The parser instance.

    Returns:
        Stmt: The resulting statement.
    """
    expr = parser.expression()
    if parser.match(TokenType.TO):
        to = parser.previous()
        value = parser.expression()
        if isinstance(expr, Variable):
            return Var(expr.name, value)
        if isinstance(expr, Get):
            return Expression(Set(expr.object, expr.name, value))
        parser.error(to, "Invalid assignment target.")
    return Expression(expr)


def parse_statement(parser: 'Parser') -> Stmt:
    """
    Parse a single general statement.

    Args:
        parser: The parser instance.

    Returns:
        Stmt: The parsed statement.
    """
    if parser.match(TokenType.IF):
        return parse_if(parser)
    if parser.match(TokenType.PRINT):
        return Print(parser.expression())
    if parser.match(TokenType.RETURN):
        return parse_return(parser)
    if parser.match(TokenType.WHILE):
        return parse_while(parser)
    if parser.match(TokenType.COLON):
        return Block(tuple(parser.block()))
    return parse_assignment(parser)


def parse_if(parser: 'Parser') -> If:
    """
    Parse a conditional 'if' statement with an optional else branch.

    Syntax:
        if <condition>:
            <block>
        else if <condition>:
            <block>
        else:
            <block>

    Args:
        parser: The parser instance.

    Returns:
        If: The conditional; 'else if' nests another `If` as the else branch.
    """
    condition = parser.expression()
    parser.consume(TokenType.COLON, "Expect ':' after if condition.")
    then_branch = Block(tuple(parser.block()))

    else_branch = None
    if parser.at_else():
        if parser.match(TokenType.IF):
            else_branch = parse_if(parser)
        else:
            parser.consume(TokenType.COLON, "Expect ':' after 'else'.")
            else_branch = Block(tuple(parser.block()))

    return If(condition, then_branch, else_branch)


def parse_while(parser: 'Parser') -> While:
    """
    Parse a 'while' loop.

    Syntax:
        while <condition>:
            <block>
    """
    condition = parser.expression()
    parser.consume(TokenType.COLON, "Expect ':' after while condition.")
    return While(condition, Block(tuple(parser.block())))


def parse_return(parser: 'Parser') -> Return:
    """
    Parse a 'return' statement. The value is optional and must start on
    the same line as the keyword.

    Syntax:
        return [<expression>]
    """
    keyword = parser.previous()
    value = None
    if not parser.is_at_end() and parser.peek().line == keyword.line:
        value = parser.expression()
    return Return(keyword, value)

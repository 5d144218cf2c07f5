"""
Main parser entry point for CraftLang.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`craftlang.parser.expressions` and `craftlang.parser.statements`.

1. Token Consumption
The parser walks the token list with a single cursor. `consume()` checks
the current token against the expected kind and advances, or reports an
error and raises `ParseException`.

2. The Off-side Rule
The lexer emits every leading space or tab as its own token. Each block
fixes its own width from its first line: one tab, or one, two or four
spaces deeper than the enclosing block. `widths` holds the absolute width of
every open block, and the run of indentation tokens in front of a statement
must equal one of them. The outermost block also fixes the indentation
character until the parse returns to the top level. A run belonging to a
blank line is skipped transparently. Between parentheses line breaks carry
no meaning, so `advance()` steps over indentation there.

3. Error Recovery
An error inside `declaration()` is reported, the parser discards tokens up
to the next line that starts a statement, and the bogus statement is
replaced by a no-op. Parsing then carries on so that one pass reports as
many independent errors as possible.


File: parser.py
Version: 0.1.0
License: MIT
"""

from typing import Callable, TYPE_CHECKING

from craftlang.ast_nodes import Expr, Expression, Literal, Stmt
from craftlang.exceptions import ParseException
from craftlang.lexer import Token
from craftlang.token_types import INDENTATION, STATEMENT_STARTS, TokenType

from . import expressions as _expr
from . import statements as _stmt

if TYPE_CHECKING:
    from craftlang.diagnostics import Reporter


MAX_ARGUMENTS = 255
SPACE_UNITS = (1, 2, 4)


class Parser:
    """CraftLang parser."""

    def __init__(self, tokens: list[Token], reporter: 'Reporter'):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): Token instances terminated by an EOF token.
            reporter (Reporter): Receives syntax errors.
        """
        self.tokens = tokens
        self.reporter = reporter
        self.position = 0
        self.curr_token = self.tokens[self.position]
        self.depth = 0
        self.indent_char: str | None = None
        self.widths: list[int] = [0]
        self.paren_depth = 0
        self.last_token = self.curr_token
        self.max_arguments = MAX_ARGUMENTS

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self.curr_token

    def previous(self) -> Token:
        """Return the most recently consumed token."""
        return self.last_token

    def is_at_end(self) -> bool:
        """True once the cursor sits on the EOF token."""
        return self.curr_token.type == TokenType.EOF

    def advance(self) -> Token:
        """Consume the current token and return it."""
        if self.is_at_end():
            return self.last_token
        token = self.curr_token
        if token.type == TokenType.LEFT_PAREN:
            self.paren_depth += 1
        elif token.type == TokenType.RIGHT_PAREN and self.paren_depth:
            self.paren_depth -= 1
        self._seek(self.position + 1)
        if self.paren_depth:
            while self.curr_token.type in INDENTATION:
                self._seek(self.position + 1)
        self.last_token = token
        return token

    def check(self, token_type: TokenType) -> bool:
        """True if the current token is of ``token_type``."""
        if self.is_at_end():
            return False
        return self.curr_token.type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it is one of ``token_types``."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consume the current token if it matches the expected kind.

        Parameters:
            token_type (TokenType): The expected token kind.
            message (str): The error to report otherwise.

        Raises:
            ParseException: If the token does not match the expected kind.
        """
        if self.check(token_type):
            return self.advance()
        raise self.error(self.curr_token, message)

    def error(self, token: Token, message: str) -> ParseException:
        """
        Report a syntax error and return the exception used to unwind.
        """
        self.reporter.token_error(token, message)
        return ParseException(message)

    def _seek(self, position: int) -> None:
        self.position = position
        self.curr_token = self.tokens[position]
        if position > 0:
            self.last_token = self.tokens[position - 1]

    # ------------------------------------------------------------------
    # Indentation
    # ------------------------------------------------------------------

    def _line_run(self) -> tuple[int, int]:
        """
        Locate the indentation in front of the next real token.

        Runs that belong to blank lines (the next token sits on a later
        line, or is EOF) are passed over.

        Returns:
            tuple: ``(start, end)`` token positions of the run.
        """
        start = self.position
        while True:
            line = self.tokens[start].line
            end = start
            while self.tokens[end].type in INDENTATION and self.tokens[end].line == line:
                end += 1
            following = self.tokens[end]
            if end > start and (following.type == TokenType.EOF or following.line != line):
                start = end
                continue
            return start, end

    def _level_of(self, start: int, end: int) -> int | None:
        """
        Convert an indentation run to a nesting level.

        Returns:
            int | None: The depth of the open block whose width the run
            matches, or None if it matches none of them.
        """
        count = end - start
        if count == 0:
            return 0
        if self.indent_char is None:
            return None
        if any(self.tokens[i].lexeme != self.indent_char for i in range(start, end)):
            return None
        if count in self.widths:
            return self.widths.index(count)
        return None

    def _is_mixed(self, start: int, end: int) -> bool:
        return len({self.tokens[i].lexeme for i in range(start, end)}) > 1

    def _open_width(self, start: int, end: int) -> None:
        """
        Record the width of a block from its first line.

        Raises:
            ParseException: If the line mixes tabs and spaces, switches the
            indentation character, or steps in by anything other than one
            tab or one, two or four spaces.
        """
        first = self.tokens[end]
        count = end - start
        if count <= self.widths[-1]:
            raise self.error(first, "Expect indented block after ':'.")
        char = self.tokens[start].lexeme
        if self._is_mixed(start, end) or (self.depth > 1 and char != self.indent_char):
            raise self.error(first, "Inconsistent indentation: mixed tabs and spaces.")
        step = count - self.widths[-1]
        allowed = (1,) if char == "\t" else SPACE_UNITS
        if step not in allowed:
            raise self.error(
                first,
                f"Invalid indentation unit: use one tab or 1, 2 or 4 spaces, found {step}."
            )
        self.indent_char = char
        self.widths.append(count)

    def begin_line(self) -> None:
        """
        Consume the indentation in front of a statement.

        Raises:
            ParseException: If the indentation does not match the current depth.
        """
        start, end = self._line_run()
        level = self._level_of(start, end)
        self._seek(end)
        if level == self.depth:
            return
        if end > start and self._is_mixed(start, end):
            raise self.error(self.curr_token, "Inconsistent indentation: mixed tabs and spaces.")
        expected = self.widths[self.depth]
        raise self.error(
            self.curr_token,
            f"Invalid indentation: expected {expected}, found {end - start}."
        )

    def end_statement(self) -> None:
        """
        Require a line break after a statement.

        Raises:
            ParseException: If another token follows on the same line.
        """
        token = self.curr_token
        if token.type == TokenType.EOF or token.type in INDENTATION:
            return
        if token.line == self.previous().line:
            raise self.error(token, "Expect line break after statement.")

    def indented(self, parse_item: Callable[[], object]) -> list:
        """
        Parse the lines indented one level deeper than the opener.

        The current token follows the ``:`` that opened the block. Items are
        collected until a line is indented less than the block, or the input
        ends; that line is left for the enclosing block to measure.

        Parameters:
            parse_item: Parses one line; a None result is dropped.

        Returns:
            list: The parsed items in source order.
        """
        self.depth += 1
        try:
            start, end = self._line_run()
            first = self.tokens[end]
            if end == start or first.type == TokenType.EOF:
                raise self.error(first, "Expect indented block after ':'.")
            self._open_width(start, end)

            items = []
            while True:
                start, end = self._line_run()
                if self.tokens[end].type == TokenType.EOF:
                    break
                level = self._level_of(start, end)
                if level is not None and level < self.depth:
                    break
                item = parse_item()
                if item is not None:
                    items.append(item)
            return items
        finally:
            self.depth -= 1
            del self.widths[self.depth + 1:]
            if self.depth == 0:
                self.indent_char = None

    def at_else(self) -> bool:
        """
        Consume a following ``else`` at the current depth.

        Nothing is consumed unless the next line is indented exactly like the
        ``if`` and starts with ``else``.
        """
        start, end = self._line_run()
        if self.tokens[end].type != TokenType.ELSE:
            return False
        if self._level_of(start, end) != self.depth:
            return False
        self._seek(end + 1)
        return True

    def synchronize(self) -> None:
        """
        Discard tokens until the start of the next statement line.
        """
        self.paren_depth = 0
        if not self.is_at_end():
            self._seek(self.position + 1)
        while not self.is_at_end():
            token = self.curr_token
            if token.type in INDENTATION:
                start, end = self._line_run()
                following = self.tokens[end].type
                if following in STATEMENT_STARTS or following == TokenType.EOF:
                    return
                self._seek(end)
                continue
            if token.type in STATEMENT_STARTS and self.previous().line < token.line:
                return
            self._seek(self.position + 1)

    # ------------------------------------------------------------------
    # Expression wrappers
    # ------------------------------------------------------------------

    def expression(self) -> Expr:
        """
        Parse a full expression starting from the lowest precedence.
        """
        return _expr.parse_expression(self)

    def logical_or(self) -> Expr:
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logical_or(self)

    def logical_and(self) -> Expr:
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logical_and(self)

    def equality(self) -> Expr:
        """
        Parse an equality expression.
        """
        return _expr.parse_equality(self)

    def comparison(self) -> Expr:
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self) -> Expr:
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self) -> Expr:
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self) -> Expr:
        """
        Parse a prefix ``!`` or ``-`` expression.
        """
        return _expr.parse_unary(self)

    def call(self) -> Expr:
        """
        Parse calls and property access chained onto a primary.
        """
        return _expr.parse_call(self)

    def primary(self) -> Expr:
        """
        Parse a literal, variable, ``this``, ``super`` or group.
        """
        return _expr.parse_primary(self)

    # ------------------------------------------------------------------
    # Statement wrappers
    # ------------------------------------------------------------------

    def declaration(self) -> Stmt:
        """
        Parse one statement line, recovering from syntax errors.
        """
        try:
            self.begin_line()
            statement = _stmt.parse_declaration(self)
            self.end_statement()
            return statement
        except ParseException:
            self.synchronize()
            return Expression(Literal(None))

    def statement(self) -> Stmt:
        """
        Parse a general statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> list[Stmt]:
        """
        Parse an indented block of statements.
        """
        return self.indented(self.declaration)

    def function(self, kind: str):
        """
        Parse a function or method declaration after its keyword.
        """
        return _stmt.parse_function(self, kind)

    def method(self):
        """
        Parse one method line of a class body, recovering from errors.
        """
        return _stmt.parse_method(self)

    def parse(self) -> list[Stmt]:
        """
        Parse the full input into a list of statements.
        """
        statements = []
        while True:
            _, end = self._line_run()
            if self.tokens[end].type == TokenType.EOF:
                break
            statements.append(self.declaration())
        return statements

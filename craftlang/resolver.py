"""Resolver.

A static pass that runs between parsing and evaluation.

1. Scope Distances
The resolver walks the statement list once, keeping a stack of lexical
scopes (innermost last). Each scope maps a declared name to a flag telling
whether its initializer has finished. For every variable, ``this`` and
``super`` reference it records how many scopes outward the binding lives.
References found in no scope are left out of the table and are looked up in
the global frame at run time.

2. Declaring or Assigning
``set name to value`` assigns when ``name`` is already bound in an enclosing
scope, or when it is a top-level name of the program (the binding then lives
in the global frame, one step past the outermost scope). Otherwise it
declares ``name`` in the innermost scope.

3. Checks
Reading a variable inside its own initializer, ``return`` outside a
function, returning a value from ``init``, ``this`` / ``super`` outside a
class, ``super`` without a superclass and a class inheriting from itself are
reported. The walk always continues so one pass reports every problem.


File: resolver.py
Version: 0.1.0
License: MIT
"""

from enum import Enum
from typing import Iterable, TYPE_CHECKING

from craftlang.ast_nodes import (
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Set,
    Stmt,
    Super,
    This,
    Unary,
    Var,
    Variable,
    While,
)

if TYPE_CHECKING:
    from craftlang.diagnostics import Reporter
    from craftlang.lexer import Token


class FunctionType(Enum):
    """Kind of function body being resolved."""
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassType(Enum):
    """Kind of class body being resolved."""
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


def top_level_names(statements: Iterable[Stmt]) -> set[str]:
    """
    Collect the names a program binds in its global frame.

    Args:
        statements: The top-level statements.

    Returns:
        set[str]: Names of top-level ``set`` targets, functions and classes.
    """
    names = set()
    for stmt in statements:
        if isinstance(stmt, (Var, Function, Class)):
            names.add(stmt.name.lexeme)
    return names


class Resolver:
    """Static scope resolver for CraftLang."""

    def __init__(self, reporter: 'Reporter', known_globals: Iterable[str] = ()):
        """
        Initialize the resolver.

        Parameters:
            reporter (Reporter): Receives static errors.
            known_globals: Names already bound in the global frame, e.g. by
                earlier REPL entries or by the host.
        """
        self.reporter = reporter
        self.scopes: list[dict[str, bool]] = []
        self.locals: dict[Expr | Stmt, int] = {}
        self.global_names: set[str] = set(known_globals)
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: list[Stmt]) -> dict[Expr | Stmt, int]:
        """
        Resolve a program.

        Parameters:
            statements (list): The top-level statements.

        Returns:
            dict: The binding table, node -> scope distance.
        """
        self.global_names |= top_level_names(statements)
        self._resolve_statements(statements)
        return self.locals

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: 'Token') -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = False

    def _define(self, name: 'Token') -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _distance(self, name: str) -> int | None:
        for i in range(len(self.scopes) - 1, -1, -1):
            if name in self.scopes[i]:
                return len(self.scopes) - 1 - i
        return None

    def _resolve_local(self, node: Expr, name: str) -> None:
        distance = self._distance(name)
        if distance is not None:
            self.locals[node] = distance

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _resolve_statements(self, statements: Iterable[Stmt]) -> None:
        for stmt in statements:
            self._resolve_statement(stmt)

    def _resolve_function(self, function: Function, kind: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = kind

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_statements(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    def _resolve_class(self, stmt: Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.reporter.token_error(
                    stmt.superclass.name, "A class cannot inherit from itself."
                )
            self.current_class = ClassType.SUBCLASS
            self._resolve_expression(stmt.superclass)
            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            else:
                kind = FunctionType.METHOD
            self._resolve_function(method, kind)

        self._end_scope()
        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_var(self, stmt: Var) -> None:
        name = stmt.name.lexeme
        distance = self._distance(name)
        if distance is None and self.scopes and name in self.global_names:
            distance = len(self.scopes)

        if distance is not None:
            if stmt.initializer is not None:
                self._resolve_expression(stmt.initializer)
            self.locals[stmt] = distance
            return

        self._declare(stmt.name)
        if stmt.initializer is not None:
            self._resolve_expression(stmt.initializer)
        self._define(stmt.name)

    def _resolve_statement(self, stmt: Stmt) -> None:
        match stmt:
            case Block(statements=statements):
                self._begin_scope()
                self._resolve_statements(statements)
                self._end_scope()
            case Class():
                self._resolve_class(stmt)
            case Expression(expression=expr):
                self._resolve_expression(expr)
            case Function(name=name):
                self._declare(name)
                self._define(name)
                self._resolve_function(stmt, FunctionType.FUNCTION)
            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self._resolve_expression(condition)
                self._resolve_statement(then_branch)
                if else_branch is not None:
                    self._resolve_statement(else_branch)
            case Print(expression=expr):
                self._resolve_expression(expr)
            case Return(keyword=keyword, value=value):
                if self.current_function == FunctionType.NONE:
                    self.reporter.token_error(keyword, "Cannot return from top-level code.")
                if value is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self.reporter.token_error(
                            keyword, "Cannot return a value from an initializer."
                        )
                    self._resolve_expression(value)
            case Var():
                self._resolve_var(stmt)
            case While(condition=condition, body=body):
                self._resolve_expression(condition)
                self._resolve_statement(body)
            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _resolve_expression(self, expr: Expr) -> None:
        match expr:
            case Binary(left=left, right=right) | Logical(left=left, right=right):
                self._resolve_expression(left)
                self._resolve_expression(right)
            case Call(callee=callee, arguments=arguments):
                self._resolve_expression(callee)
                for argument in arguments:
                    self._resolve_expression(argument)
            case Get(object=obj):
                self._resolve_expression(obj)
            case Grouping(expression=inner):
                self._resolve_expression(inner)
            case Literal():
                pass
            case Set(object=obj, value=value):
                self._resolve_expression(value)
                self._resolve_expression(obj)
            case Super(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self.reporter.token_error(keyword, "Cannot use 'super' outside of a class.")
                elif self.current_class != ClassType.SUBCLASS:
                    self.reporter.token_error(
                        keyword, "Cannot use 'super' in a class with no superclass."
                    )
                self._resolve_local(expr, "super")
            case This(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self.reporter.token_error(keyword, "Cannot use 'this' outside of a class.")
                    return
                self._resolve_local(expr, "this")
            case Unary(right=right):
                self._resolve_expression(right)
            case Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.reporter.token_error(
                        name, "Cannot read local variable in its own initializer."
                    )
                self._resolve_local(expr, name.lexeme)
            case _:
                raise TypeError(f"Unknown expression type: {type(expr).__name__}")

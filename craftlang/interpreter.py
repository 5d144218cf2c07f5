"""Interpreter.

This is a tree-walk interpreter for evaluating the AST produced by the parser
and annotated by the resolver.

1. Execution Model
Statements are executed via `execute()` and expressions are evaluated using
`evaluate()`, both dispatching on the node class. `execute()` returns None
to carry on, or a `ReturnSignal` that unwinds to the enclosing call.

2. Environment
The interpreter keeps the global frame for its whole lifetime and a pointer
to the current frame. Blocks and calls swap in a fresh frame and restore the
previous one on the way out, including when an error propagates.

3. Variable Lookup
A reference the resolver annotated is read exactly that many frames up the
chain; an unannotated one is read from the global frame.

4. Error Handling
Type mismatches, bad calls and property access on non-instances raise
`CraftRuntimeException`. The first one aborts the rest of the statement list
passed to `interpret()` and is recorded on the reporter with its line.
An exception escaping a native function is converted to one at the call
site. While a program runs the Python recursion limit is raised to
`RECURSION_LIMIT`; hitting it stops the run with "Stack overflow.".


File: interpreter.py
Version: 0.1.0
License: MIT
"""

import math
import sys
import time
from typing import Any, Callable as PyCallable, TYPE_CHECKING, TextIO
from weakref import WeakKeyDictionary

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
from craftlang.environment import Environment
from craftlang.exceptions import CraftRuntimeException
from craftlang.runtime import (
    Callable,
    Class as ClassValue,
    Function as FunctionValue,
    Instance,
    NativeFunction,
    ReturnSignal,
)
from craftlang.token_types import TokenType

if TYPE_CHECKING:
    from craftlang.diagnostics import Reporter
    from craftlang.lexer import Token


# Each script call costs several Python frames.
RECURSION_LIMIT = 10_000

NUMBER_OPERATORS = (
    TokenType.MINUS,
    TokenType.SLASH,
    TokenType.STAR,
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
)


def is_number(value: Any) -> bool:
    """True for numbers; booleans do not count."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Only null and false are falsey."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """
    Value equality for numbers and strings, identity for everything else.
    """
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is b


def kind_of(value: Any) -> str:
    """Name of a value's kind, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, ClassValue):
        return "class"
    if isinstance(value, Callable):
        return "function"
    if isinstance(value, Instance):
        return "instance"
    return type(value).__name__


def divide_by_zero(lhs: float, rhs: float) -> float:
    """IEEE 754 result of ``lhs / rhs`` for a zero ``rhs``."""
    if lhs == 0 or math.isnan(lhs):
        return math.nan
    return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


def stringify(value: Any) -> str:
    """
    Convert a value to its display text.

    Numbers drop a trailing ``.0``, null renders as ``null`` and booleans as
    ``true`` / ``false``. Infinities and NaN render as ``Infinity``,
    ``-Infinity`` and ``NaN``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class Interpreter:
    """Tree-walk interpreter for CraftLang."""

    def __init__(self, reporter: 'Reporter', out: TextIO | None = None):
        """
        Initialize the interpreter.

        Parameters:
            reporter (Reporter): Receives the runtime error that stops a run.
            out (TextIO | None): Where ``print`` writes; stdout when None.
        """
        self.reporter = reporter
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        # Entries vanish with their nodes, so REPL entries do not pile up.
        self.locals: WeakKeyDictionary[Expr | Stmt, int] = WeakKeyDictionary()
        self.define_native("clock", 0, time.time)

    def define_native(self, name: str, arity: int, function: PyCallable[..., Any]) -> None:
        """
        Expose a Python callable to scripts as a global function.

        Parameters:
            name (str): The global name.
            arity (int): Number of arguments scripts must pass.
            function: Called with the evaluated arguments.
        """
        self.globals.define(name, NativeFunction(name, arity, function))

    def interpret(self, statements: list[Stmt], bindings: dict[Expr | Stmt, int] | None = None) -> None:
        """
        Execute a program.

        Parameters:
            statements (list): The resolved top-level statements.
            bindings (dict): The resolver's binding table for them.
        """
        if bindings:
            self.locals.update(bindings)
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))
        try:
            for statement in statements:
                self.execute(statement)
        except CraftRuntimeException as error:
            self.reporter.runtime_error(error)
        except RecursionError:
            self.environment = self.globals
            self.reporter.runtime_error(CraftRuntimeException(None, "Stack overflow."))
        finally:
            sys.setrecursionlimit(previous_limit)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute_block(self, statements, environment: Environment) -> ReturnSignal | None:
        """
        Execute ``statements`` inside ``environment``, restoring the current
        frame afterwards.
        """
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                outcome = self.execute(statement)
                if outcome is not None:
                    return outcome
            return None
        finally:
            self.environment = previous

    def execute(self, stmt: Stmt) -> ReturnSignal | None:
        """
        Execute a single statement.

        Returns:
            ReturnSignal | None: A signal if ``return`` ran, otherwise None.
        """
        match stmt:
            case Block(statements=statements):
                return self.execute_block(statements, Environment(self.environment))

            case Class():
                self._execute_class(stmt)

            case Expression(expression=expr):
                self.evaluate(expr)

            case Function(name=name):
                self.environment.define(name.lexeme, FunctionValue(stmt, self.environment))

            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case Print(expression=expr):
                print(stringify(self.evaluate(expr)), file=self.out)

            case Return(value=value):
                return ReturnSignal(None if value is None else self.evaluate(value))

            case Var(name=name, initializer=initializer):
                value = None if initializer is None else self.evaluate(initializer)
                distance = self.locals.get(stmt)
                if distance is None:
                    self.environment.define(name.lexeme, value)
                else:
                    self.environment.define_at(distance, name.lexeme, value)

            case While(condition=condition, body=body):
                while is_truthy(self.evaluate(condition)):
                    outcome = self.execute(body)
                    if outcome is not None:
                        return outcome

            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")
        return None

    def _execute_class(self, stmt: Class) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, ClassValue):
                raise CraftRuntimeException(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == "init"
            methods[method.name.lexeme] = FunctionValue(method, self.environment, is_initializer)

        klass = ClassValue(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.define(stmt.name.lexeme, klass)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _look_up_variable(self, name: 'Token', expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def evaluate(self, expr: Expr) -> Any:
        """
        Recursively evaluate an expression node and return its value.

        Raises:
            CraftRuntimeException: On type mismatches and invalid calls or
            property access.
        """
        match expr:
            case Literal(value=value):
                return value

            case Grouping(expression=inner):
                return self.evaluate(inner)

            case Variable(name=name):
                return self._look_up_variable(name, expr)

            case This(keyword=keyword):
                return self._look_up_variable(keyword, expr)

            case Unary(operator=operator, right=right):
                operand = self.evaluate(right)
                if operator.type == TokenType.MINUS:
                    self._check_number_operand(operator, operand)
                    return -operand
                return not is_truthy(operand)

            case Binary():
                return self._evaluate_binary(expr)

            case Logical(left=left, operator=operator, right=right):
                lhs = self.evaluate(left)
                if operator.type == TokenType.OR:
                    if is_truthy(lhs):
                        return lhs
                elif not is_truthy(lhs):
                    return lhs
                return self.evaluate(right)

            case Call():
                return self._evaluate_call(expr)

            case Get(object=obj, name=name):
                target = self.evaluate(obj)
                if isinstance(target, Instance):
                    return target.get(name)
                raise CraftRuntimeException(name, "Only instances have properties.")

            case Set(object=obj, name=name, value=value_expr):
                target = self.evaluate(obj)
                if not isinstance(target, Instance):
                    raise CraftRuntimeException(name, "Only instances have fields.")
                value = self.evaluate(value_expr)
                target.set(name, value)
                return value

            case Super(method=method):
                distance = self.locals[expr]
                superclass = self.environment.get_at(distance, "super")
                instance = self.environment.get_at(distance - 1, "this")
                function = superclass.find_method(method.lexeme)
                if function is None:
                    raise CraftRuntimeException(method, f"Undefined property '{method.lexeme}'.")
                return function.bind(instance)

            case _:
                raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _evaluate_binary(self, expr: Binary) -> Any:
        lhs = self.evaluate(expr.left)
        rhs = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type in NUMBER_OPERATORS:
            self._check_number_operands(operator, lhs, rhs)

        match operator.type:
            case TokenType.PLUS:
                if is_number(lhs) and is_number(rhs):
                    return lhs + rhs
                if isinstance(lhs, str) or isinstance(rhs, str):
                    return stringify(lhs) + stringify(rhs)
                raise CraftRuntimeException(
                    operator, f"Can't add {kind_of(lhs)} to {kind_of(rhs)}."
                )
            case TokenType.MINUS:
                return lhs - rhs
            case TokenType.STAR:
                return lhs * rhs
            case TokenType.SLASH:
                if rhs == 0:
                    return divide_by_zero(lhs, rhs)
                return lhs / rhs
            case TokenType.GREATER:
                return lhs > rhs
            case TokenType.GREATER_EQUAL:
                return lhs >= rhs
            case TokenType.LESS:
                return lhs < rhs
            case TokenType.LESS_EQUAL:
                return lhs <= rhs
            case TokenType.BANG_EQUAL:
                return not is_equal(lhs, rhs)
            case TokenType.EQUAL_EQUAL:
                return is_equal(lhs, rhs)
        raise CraftRuntimeException(operator, f"Unknown operator '{operator.lexeme}'.")

    def _evaluate_call(self, expr: Call) -> Any:
        callee = self.evaluate(expr.callee)

        if not isinstance(callee, Callable):
            raise CraftRuntimeException(expr.paren, "Can only call functions and classes.")

        if len(expr.arguments) != callee.arity():
            raise CraftRuntimeException(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(expr.arguments)}."
            )

        arguments = [self.evaluate(argument) for argument in expr.arguments]
        if not isinstance(callee, NativeFunction):
            return callee.call(self, arguments)
        try:
            return callee.call(self, arguments)
        except (CraftRuntimeException, RecursionError):
            raise
        except Exception as e:
            raise CraftRuntimeException(
                expr.paren, f"Error in native function '{callee.name}': {e}"
            ) from e

    @staticmethod
    def _check_number_operand(operator: 'Token', operand: Any) -> None:
        if is_number(operand):
            return
        raise CraftRuntimeException(operator, "Operand must be a number.")

    @staticmethod
    def _check_number_operands(operator: 'Token', lhs: Any, rhs: Any) -> None:
        if is_number(lhs) and is_number(rhs):
            return
        raise CraftRuntimeException(operator, "Operands must be numbers.")

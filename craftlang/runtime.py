"""Runtime values for CraftLang.

Primitives are plain Python values: ``None`` for null, ``bool``, ``float``
for every number and ``str``. This module holds the rest of the object
model: the callable capability shared by functions and classes, class
instances, and the control outcome used to carry ``return`` values.


File: runtime.py
Version: 0.1.0
License: MIT
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable as PyCallable, TYPE_CHECKING

from craftlang.environment import Environment
from craftlang.exceptions import CraftRuntimeException

if TYPE_CHECKING:
    from craftlang.ast_nodes import Function as FunctionDecl
    from craftlang.interpreter import Interpreter
    from craftlang.lexer import Token


@dataclass(frozen=True)
class ReturnSignal:
    """
    Outcome of a statement that executed ``return``.

    Statement execution yields None to continue, or one of these to unwind
    to the enclosing call. It is never raised and never reported.
    """
    value: Any = None


class Callable(ABC):
    """Anything a script can call: functions, classes, native functions."""

    @abstractmethod
    def arity(self) -> int:
        """Number of arguments the call expects."""

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        """Invoke with already-evaluated arguments."""


class Function(Callable):
    """A user-defined function or method together with its closure."""

    def __init__(self, declaration: 'FunctionDecl', closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: 'Instance') -> 'Function':
        """
        Return a copy of this method whose closure binds ``this``.
        """
        environment = Environment(self.closure)
        environment.define("this", instance)
        return Function(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)

        # Initializers always hand back the instance, even on a bare return.
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if outcome is not None:
            return outcome.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class NativeFunction(Callable):
    """A host-provided function exposed to scripts."""

    def __init__(self, name: str, arity: int, function: PyCallable[..., Any]):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        return self.function(*arguments)

    def __str__(self) -> str:
        return "<native fn>"


class Class(Callable):
    """A class: its name, optional superclass and method table."""

    def __init__(self, name: str, superclass: 'Class | None', methods: dict[str, Function]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Function | None:
        """
        Look ``name`` up on this class, then on its ancestors, nearest first.
        """
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        instance = Instance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


class Instance:
    """An instance of a class. Fields appear on first assignment."""

    def __init__(self, klass: Class):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: 'Token') -> Any:
        """
        Read a field, falling back to a method bound to this instance.

        Raises:
            CraftRuntimeException: If neither a field nor a method exists.
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise CraftRuntimeException(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: 'Token', value: Any) -> None:
        """Assign a field, creating it if needed."""
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

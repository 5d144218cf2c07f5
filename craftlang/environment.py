"""Environment.

A scope frame: a mapping from name to value plus a link to the enclosing
frame. Frames are created on entering a block, a function call or a method
binding and live for as long as something (a closure or the running call)
references them. The chain from any frame to the global frame mirrors the
resolver's scope stack, so a recorded distance is a number of ``enclosing``
hops.


File: environment.py
Version: 0.1.0
License: MIT
"""

from typing import Any

from craftlang.exceptions import UndefinedVariableException


class Environment:
    """One frame of the environment chain."""

    __slots__ = ("values", "enclosing")

    def __init__(self, enclosing: 'Environment | None' = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind ``name`` in this frame, replacing any previous binding."""
        self.values[name] = value

    def ancestor(self, distance: int) -> 'Environment':
        """Return the frame ``distance`` hops up the chain."""
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        """Read ``name`` from the frame ``distance`` hops up the chain."""
        return self.ancestor(distance).values[name]

    def define_at(self, distance: int, name: str, value: Any) -> None:
        """Bind ``name`` in the frame ``distance`` hops up the chain."""
        self.ancestor(distance).values[name] = value

    def get(self, name) -> Any:
        """
        Read a global binding.

        Parameters:
            name (Token): The referencing token, used for error reporting.

        Raises:
            UndefinedVariableException: If the name is not bound here.
        """
        try:
            return self.values[name.lexeme]
        except KeyError:
            raise UndefinedVariableException(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def names(self) -> list[str]:
        """Names bound directly in this frame."""
        return list(self.values)

"""Diagnostics for CraftLang.

Every phase of the pipeline (lexer, parser, resolver, interpreter) records
its findings on a :class:`Reporter` handed to it by the host. The reporter
is the explicit result object of a run: it keeps the ordered list of
diagnostics and exposes the two flags a host acts on, ``had_error`` for
compile-time problems and ``had_runtime_error`` for a failed evaluation.


File: diagnostics.py
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from craftlang.token_types import TokenType

if TYPE_CHECKING:
    from craftlang.exceptions import CraftRuntimeException
    from craftlang.lexer import Token


COMPILE = "compile"
RUNTIME = "runtime"


@dataclass
class Diagnostic:
    """A single error, tied to a source line when one is known."""

    line: int | None
    message: str
    where: str = ""
    kind: str = COMPILE

    def __str__(self) -> str:
        if self.kind == RUNTIME:
            if self.line is None:
                return self.message
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


@dataclass
class Reporter:
    """
    Collects diagnostics across the phases of one run.
    """

    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        """True if any lexical, syntactic or static error was recorded."""
        return any(d.kind == COMPILE for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        """True if evaluation stopped on a runtime error."""
        return any(d.kind == RUNTIME for d in self.diagnostics)

    def error(self, line: int, message: str) -> None:
        """
        Record a compile-time error that has no token attached.

        Parameters:
            line (int): The source line.
            message (str): What went wrong.
        """
        self.diagnostics.append(Diagnostic(line, message))

    def token_error(self, token: 'Token', message: str) -> None:
        """
        Record a compile-time error located at ``token``.

        Parameters:
            token (Token): The offending token.
            message (str): What went wrong.
        """
        if token.type == TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        self.diagnostics.append(Diagnostic(token.line, message, where))

    def runtime_error(self, error: 'CraftRuntimeException') -> None:
        """
        Record the runtime error that stopped evaluation.
        """
        line = error.token.line if error.token is not None else None
        self.diagnostics.append(Diagnostic(line, error.message, kind=RUNTIME))

    def reset(self) -> None:
        """Forget everything recorded so far."""
        self.diagnostics.clear()

    def __iter__(self):
        return iter(self.diagnostics)


__all__ = ["COMPILE", "RUNTIME", "Diagnostic", "Reporter"]

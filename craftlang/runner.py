"""Pipeline helpers.

Lexing, parsing, resolving and interpreting are sequential phases. Each
phase records its errors on the run's :class:`Reporter`; a compile-time
error in one phase stops the pipeline before the next one starts.


File: runner.py
Version: 0.1.0
License: MIT
"""

import os
import sys
import time
from dataclasses import dataclass, field
from typing import TextIO

from craftlang.ast_nodes import Stmt, format_node
from craftlang.diagnostics import Reporter
from craftlang.interpreter import Interpreter
from craftlang.lexer import Token, tokenize
from craftlang.parser import Parser
from craftlang.resolver import Resolver


@dataclass
class Timings:
    """Milliseconds spent in each phase."""
    phases: dict[str, float] = field(default_factory=dict)

    def measure(self, phase: str, started: float) -> None:
        self.phases[phase] = (time.perf_counter() - started) * 1000.0

    def __str__(self) -> str:
        return "\n".join(f"{phase.capitalize()} in {ms:.3f}ms" for phase, ms in self.phases.items())


def debug_print_tokens_ast(tokens: list[Token], statements: list[Stmt]) -> None:
    """
    Print tokenized source and AST to stderr.
    """
    print("\nTokens:\n", file=sys.stderr)
    print(tokens, file=sys.stderr)
    print("\nAST:\n", file=sys.stderr)
    for stmt in statements:
        print(format_node(stmt), file=sys.stderr)
    print(" ", file=sys.stderr)


def check_source(source: str, reporter: Reporter | None = None) -> tuple[list[Stmt], Reporter]:
    """
    Run every compile-time phase and collect all of their diagnostics.

    Unlike :func:`run_source` this does not stop between phases, which is
    what an editor wants. Nothing is executed.

    Returns:
        tuple: The parsed statements and the reporter.
    """
    reporter = reporter if reporter is not None else Reporter()
    tokens = tokenize(source, reporter)
    statements = Parser(tokens, reporter).parse()
    Resolver(reporter).resolve(statements)
    return statements, reporter


def run_source(
    source: str,
    interpreter: Interpreter | None = None,
    out: TextIO | None = None,
    timings: Timings | None = None,
) -> Reporter:
    """
    Scan, parse, resolve and interpret ``source``.

    Parameters:
        source (str): The script text.
        interpreter (Interpreter | None): Reused across calls to keep global
            state, e.g. by the REPL. A fresh one is created when None.
        out (TextIO | None): Output stream for a fresh interpreter.
        timings (Timings | None): Filled with per-phase durations.

    Returns:
        Reporter: The diagnostics of this run.
    """
    if interpreter is None:
        interpreter = Interpreter(Reporter(), out)
    reporter = interpreter.reporter
    timings = timings if timings is not None else Timings()

    started = time.perf_counter()
    tokens = tokenize(source, reporter)
    timings.measure("scanned", started)
    if reporter.had_error:
        return reporter

    started = time.perf_counter()
    statements = Parser(tokens, reporter).parse()
    timings.measure("parsed", started)
    if reporter.had_error:
        return reporter

    if os.environ.get("CRAFTDEBUG"):
        debug_print_tokens_ast(tokens, statements)

    started = time.perf_counter()
    bindings = Resolver(reporter, interpreter.globals.names()).resolve(statements)
    timings.measure("resolved", started)
    if reporter.had_error:
        return reporter

    started = time.perf_counter()
    interpreter.interpret(statements, bindings)
    timings.measure("interpreted", started)
    return reporter

"""
CraftLang Interpreter

This is the command line entry point for the CraftLang interpreter.

Workflow:
1. The source script is read from the file given on the command line.
2. The lexer tokenizes the source, keeping leading indentation as tokens.
3. The parser builds statements, enforcing the indentation rules.
4. The resolver binds every variable reference to its scope.
5. The interpreter walks the statements and prints output.

Diagnostics go to stderr. The exit status tells compile-time errors (65)
apart from runtime errors (70). Without a script an interactive session
(REPL) starts instead.


File: cli.py
Version: 0.1.0
License: MIT
"""

import argparse
import os
import sys

from craftlang.diagnostics import Reporter
from craftlang.interpreter import Interpreter
from craftlang.runner import Timings, run_source


EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def print_diagnostics(reporter: Reporter) -> None:
    """
    Print every recorded diagnostic to stderr.
    """
    for diagnostic in reporter:
        print(diagnostic, file=sys.stderr)


def exit_code(reporter: Reporter) -> int:
    """
    Map a run's diagnostics to a process exit status.
    """
    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def run_script(script_name: str, show_timings: bool = False) -> int:
    """
    Run a CraftLang script.

    Returns:
        int: The exit status.
    """
    if not os.path.isfile(script_name):
        print(f"File not found: {script_name}", file=sys.stderr)
        return EX_NOINPUT

    with open(script_name, "r", encoding="utf-8") as f:
        code = f.read()

    timings = Timings()
    reporter = run_source(code, timings=timings)
    print_diagnostics(reporter)
    if show_timings:
        print(timings, file=sys.stderr)
    return exit_code(reporter)


def needs_more_input(buffer: list[str]) -> bool:
    """
    True while a REPL entry is incomplete.

    An entry whose first line opens a block (ends with ``:``) runs once a
    blank line is entered.
    """
    if not buffer or not buffer[0].rstrip().endswith(":"):
        return False
    return buffer[-1].strip() != ""


def run_repl() -> int:
    """
    Run the interactive REPL.

    Global state persists between entries. Errors are printed and the
    session continues.
    """
    print("CraftLang Interpreter - REPL")
    print("Type `exit` or `quit` to leave.")
    interpreter = Interpreter(Reporter())
    buffer: list[str] = []
    while True:
        try:
            prompt = "> " if not buffer else "... "
            line = input(prompt)
        except KeyboardInterrupt:
            print("\nInterrupted.")
            break
        except EOFError:
            print()
            break

        if not buffer and line.strip() in {"exit", "quit"}:
            break
        buffer.append(line)
        if needs_more_input(buffer):
            continue

        source = "\n".join(buffer)
        buffer.clear()
        reporter = run_source(source, interpreter)
        print_diagnostics(reporter)
        reporter.reset()
    return EX_OK


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    Behaviour:
    - No script: enter the REPL.
    - A script path: run it and return its exit status.
    """
    parser = argparse.ArgumentParser(
        prog="craft",
        description="CraftLang interpreter.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "script",
        nargs="?",
        default=None,
        help="Path to a CraftLang source file. Omit to start the REPL.",
    )
    parser.add_argument(
        "--timings",
        action="store_true",
        help="Print how long each phase took to stderr.",
    )
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EX_OK if not e.code else EX_USAGE

    if args.script is None:
        return run_repl()
    return run_script(args.script, args.timings)


if __name__ == "__main__":
    sys.exit(main())

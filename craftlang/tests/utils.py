"""
Utility functions shared across CraftLang tests.
"""
from craftlang.diagnostics import Reporter
from craftlang.lexer import tokenize
from craftlang.parser import Parser
from craftlang.resolver import Resolver
from craftlang.runner import run_source


def parse_source(source: str):
    """
    Parse source code and return the statements and the reporter.
    """
    reporter = Reporter()
    tokens = tokenize(source, reporter)
    parser = Parser(tokens, reporter)
    return parser.parse(), reporter


def resolve_source(source: str):
    """
    Parse and resolve source code.

    Returns the statements, the binding table and the reporter.
    """
    statements, reporter = parse_source(source)
    bindings = Resolver(reporter).resolve(statements)
    return statements, bindings, reporter


def messages(reporter: Reporter) -> list[str]:
    """
    Return the message text of every recorded diagnostic.
    """
    return [d.message for d in reporter]


def run(source: str, capsys):
    """
    Run source code and return its printed lines and the reporter.
    """
    reporter = run_source(source)
    captured = capsys.readouterr().out.strip().splitlines()
    return captured, reporter

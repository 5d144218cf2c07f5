"""CraftLang: an embeddable, indentation-sensitive scripting language.

The pipeline is lexer -> parser -> resolver -> interpreter. Hosts usually
only need :func:`run_source`, or :func:`check_source` for diagnostics
without execution.


File: __init__.py
Version: 0.1.0
License: MIT
"""

from craftlang.diagnostics import Diagnostic, Reporter
from craftlang.interpreter import Interpreter
from craftlang.lexer import Token, tokenize
from craftlang.parser import Parser
from craftlang.resolver import Resolver
from craftlang.runner import check_source, run_source

__version__ = "0.1.0"

__all__ = [
    "Diagnostic",
    "Interpreter",
    "Parser",
    "Reporter",
    "Resolver",
    "Token",
    "check_source",
    "run_source",
    "tokenize",
]

"""Errors.


File: exceptions.py
Version: 0.1.0
License: MIT
"""


class ParseException(Exception):
    """
    Unwinds the parser back to the enclosing declaration after an error
    has been reported.
    """


class CraftRuntimeException(Exception):
    """
    Error raised while evaluating a script.
    """
    def __init__(self, token, message):
        self.token = token
        self.message = message
        line = getattr(token, "line", None)
        if line is not None:
            message = f"{message} on line {line}"
        super().__init__(message)


class UndefinedVariableException(CraftRuntimeException):
    """
    Error for undefined variables.
    """
    def __init__(self, token):
        self.varname = token.lexeme
        super().__init__(token, f"Undefined variable '{token.lexeme}'.")

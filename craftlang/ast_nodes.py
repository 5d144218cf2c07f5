"""AST node definitions for CraftLang.

Expressions and statements are two closed families of frozen dataclasses.
Nodes compare and hash by identity (``eq=False``) so the resolver can key
its binding table on the node objects themselves: two references to ``x``
on the same line are still two distinct keys.


File: ast_nodes.py
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass
from typing import Any

from craftlang.lexer import Token


# ---- Expressions ----

@dataclass(frozen=True, eq=False)
class Expr:
    """Base class of expression nodes."""


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    """Short-circuiting ``and`` / ``or``."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


# ---- Statements ----

@dataclass(frozen=True, eq=False)
class Stmt:
    """Base class of statement nodes."""


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]
    # Parsed from ``:: Type`` and never checked.
    return_type: Token | None = None


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Variable | None
    methods: tuple[Function, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Expr | None = None


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    """``set name to value``: declares or assigns, as decided by the resolver."""
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


def format_node(node) -> str:
    """
    Convert a node back to a readable one-line string for debugging.

    Args:
        node (Expr | Stmt): The node to format.

    Returns:
        str: A parenthesized rendering of the node.
    """
    match node:
        case Literal(value=None):
            return "null"
        case Literal(value=bool() as value):
            return "true" if value else "false"
        case Literal(value=str() as value):
            return repr(value)
        case Literal(value=value):
            text = str(value)
            return text[:-2] if text.endswith(".0") else text
        case Grouping(expression=expr):
            return f"(group {format_node(expr)})"
        case Unary(operator=op, right=right):
            return f"({op.lexeme} {format_node(right)})"
        case Binary(left=left, operator=op, right=right) | Logical(left=left, operator=op, right=right):
            return f"({op.lexeme} {format_node(left)} {format_node(right)})"
        case Variable(name=name):
            return name.lexeme
        case Set(object=obj, name=name, value=value):
            return f"(set {format_node(obj)}.{name.lexeme} {format_node(value)})"
        case Get(object=obj, name=name):
            return f"{format_node(obj)}.{name.lexeme}"
        case Call(callee=callee, arguments=args):
            parts = [format_node(callee), *(format_node(a) for a in args)]
            return f"(call {' '.join(parts)})"
        case This():
            return "this"
        case Super(method=method):
            return f"super.{method.lexeme}"
        case Block(statements=statements):
            return "(block " + " ".join(format_node(s) for s in statements) + ")"
        case Function(name=name, params=params, body=body):
            names = " ".join(p.lexeme for p in params)
            inner = " ".join(format_node(s) for s in body)
            return f"(function {name.lexeme} ({names}) {inner})"
        case Class(name=name, superclass=superclass, methods=methods):
            parent = f" :: {superclass.name.lexeme}" if superclass else ""
            inner = " ".join(format_node(m) for m in methods)
            return f"(class {name.lexeme}{parent} {inner})"
        case Expression(expression=expr):
            return f"(; {format_node(expr)})"
        case If(condition=cond, then_branch=then_branch, else_branch=else_branch):
            tail = f" {format_node(else_branch)}" if else_branch else ""
            return f"(if {format_node(cond)} {format_node(then_branch)}{tail})"
        case Print(expression=expr):
            return f"(print {format_node(expr)})"
        case Return(value=value):
            return "(return)" if value is None else f"(return {format_node(value)})"
        case Var(name=name, initializer=init):
            return f"(set {name.lexeme} {format_node(init) if init else 'null'})"
        case While(condition=cond, body=body):
            return f"(while {format_node(cond)} {format_node(body)})"
        case _:
            return f"<node {type(node).__name__}>"

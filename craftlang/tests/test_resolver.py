"""
Tests for static resolution: scope distances and static errors.
"""
from craftlang.diagnostics import Reporter
from craftlang.resolver import Resolver

from craftlang.tests.utils import messages, resolve_source, run


def test_self_initializer_in_nested_scope(capsys):
    source = (
        "print \"start\"\n"
        "if true:\n"
        "    set fresh to fresh\n"
    )
    _, _, reporter = resolve_source(source)
    assert messages(reporter) == ["Cannot read local variable in its own initializer."]
    captured, reporter = run(source, capsys)
    assert captured == []
    assert reporter.had_error


def test_return_at_top_level():
    _, _, reporter = resolve_source("return 1\n")
    assert messages(reporter) == ["Cannot return from top-level code."]


def test_return_value_from_initializer():
    source = (
        "class A:\n"
        "    function init():\n"
        "        return 1\n"
    )
    _, _, reporter = resolve_source(source)
    assert messages(reporter) == ["Cannot return a value from an initializer."]


def test_this_and_super_outside_class():
    source = (
        "print this\n"
        "print super.method\n"
    )
    _, _, reporter = resolve_source(source)
    assert messages(reporter) == [
        "Cannot use 'this' outside of a class.",
        "Cannot use 'super' outside of a class.",
    ]


def test_super_without_superclass():
    source = (
        "class A:\n"
        "    function f():\n"
        "        return super.f()\n"
    )
    _, _, reporter = resolve_source(source)
    assert messages(reporter) == ["Cannot use 'super' in a class with no superclass."]


def test_class_inheriting_from_itself():
    source = (
        "class A :: A:\n"
        "    function f():\n"
        "        return 1\n"
    )
    _, _, reporter = resolve_source(source)
    assert messages(reporter) == ["A class cannot inherit from itself."]
    assert str(reporter.diagnostics[0]) == "[line 1] Error at 'A': A class cannot inherit from itself."


def test_all_static_errors_in_one_pass():
    source = (
        "return 1\n"
        "function f():\n"
        "    print this\n"
    )
    _, _, reporter = resolve_source(source)
    assert [d.line for d in reporter] == [1, 3]


def test_closure_reference_distance():
    source = (
        "function outer():\n"
        "    set x to 1\n"
        "    function inner():\n"
        "        print x\n"
        "    return inner\n"
    )
    statements, bindings, reporter = resolve_source(source)
    assert not reporter.had_error
    inner = statements[0].body[1]
    reference = inner.body[0].expression
    assert bindings[reference] == 1


def test_global_assignment_from_function_is_bound_to_global_frame():
    source = (
        "set g to 1\n"
        "function f():\n"
        "    set g to 2\n"
    )
    statements, bindings, _ = resolve_source(source)
    assert statements[0] not in bindings
    assert bindings[statements[1].body[0]] == 1


def test_unknown_name_is_left_to_global_lookup():
    statements, bindings, _ = resolve_source("print missing\n")
    assert statements[0].expression not in bindings


def test_distances_are_stable():
    """
    Resolving the same statements twice records the same distances.
    """
    source = (
        "function make():\n"
        "    set n to 0\n"
        "    function step():\n"
        "        set n to n + 1\n"
        "        return n\n"
        "    return step\n"
    )
    statements, first, reporter = resolve_source(source)
    assert not reporter.had_error
    second = Resolver(Reporter()).resolve(statements)
    assert first == second

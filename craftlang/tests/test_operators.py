"""
Tests for operators, truthiness, equality, display and runtime errors.
"""
import io

from craftlang.diagnostics import Reporter
from craftlang.interpreter import Interpreter, stringify
from craftlang.runner import run_source

from craftlang.tests.utils import messages, run


def test_arithmetic_and_precedence(capsys):
    source = (
        "print 1 + 2 * 3\n"
        "print (1 + 2) * 3\n"
        "print 7 / 2\n"
        "print -3 - -1\n"
        "print 10 - 2 - 3\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["7", "9", "3.5", "-2", "5"]


def test_string_concatenation_coerces_other_side(capsys):
    source = (
        "print 1 + \"x\"\n"
        "print \"x\" + 1\n"
        "print \"is \" + true\n"
        "print \"a\" + null\n"
        "print \"ab\" + \"cd\"\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["1x", "x1", "is true", "anull", "abcd"]


def test_adding_number_and_boolean_fails(capsys):
    _, reporter = run("print 1 + true\n", capsys)
    assert messages(reporter) == ["Can't add number to boolean."]
    assert reporter.had_runtime_error


def test_comparison_needs_numbers(capsys):
    _, reporter = run("print \"a\" < \"b\"\n", capsys)
    assert messages(reporter) == ["Operands must be numbers."]
    _, reporter = run("print -\"a\"\n", capsys)
    assert messages(reporter) == ["Operand must be a number."]


def test_division_by_zero_follows_ieee(capsys):
    captured, reporter = run("print 1 / 0\nprint -1 / 0\nprint 0 / 0\nprint 1 / 0 > 1000\n", capsys)
    assert captured == ["Infinity", "-Infinity", "NaN", "true"]
    assert not reporter.had_error


def test_equality(capsys):
    source = (
        "print 1 == 1\n"
        "print \"a\" == \"a\"\n"
        "print null == null\n"
        "print null == false\n"
        "print 0 == false\n"
        "print 1 != 2\n"
        "print \"1\" == 1\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["true", "true", "true", "false", "false", "true", "false"]


def test_functions_compare_by_identity(capsys):
    source = (
        "function f():\n"
        "    return 1\n"
        "set g to f\n"
        "print f == g\n"
        "function h():\n"
        "    return 1\n"
        "print f == h\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["true", "false"]


def test_truthiness(capsys):
    source = (
        "if 0:\n"
        "    print \"zero\"\n"
        "if \"\":\n"
        "    print \"empty\"\n"
        "if null:\n"
        "    print \"null\"\n"
        "else:\n"
        "    print \"not null\"\n"
        "print !false\n"
        "print !0\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["zero", "empty", "not null", "true", "false"]


def test_logical_operators_short_circuit(capsys):
    source = (
        "print null or \"default\"\n"
        "print false and 1\n"
        "print 1 and 2\n"
        "print 1 or missing\n"
        "print false and missing\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["default", "false", "2", "1", "false"]
    assert not reporter.had_runtime_error


def test_arity_is_enforced(capsys):
    source = (
        "function two(a, b):\n"
        "    return a\n"
        "two(1)\n"
    )
    _, reporter = run(source, capsys)
    assert messages(reporter) == ["Expected 2 arguments but got 1."]
    _, reporter = run(source.replace("two(1)", "two(1, 2, 3)"), capsys)
    assert messages(reporter) == ["Expected 2 arguments but got 3."]


def test_only_functions_and_classes_are_callable(capsys):
    _, reporter = run("\"text\"()\n", capsys)
    assert messages(reporter) == ["Can only call functions and classes."]


def test_runtime_error_stops_the_program(capsys):
    source = (
        "print \"before\"\n"
        "print -\"x\"\n"
        "print \"after\"\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["before"]
    assert str(reporter.diagnostics[0]) == "Operand must be a number.\n[line 2]"


def test_stringify():
    assert stringify(None) == "null"
    assert stringify(True) == "true"
    assert stringify(3.0) == "3"
    assert stringify(2.5) == "2.5"
    assert stringify("text") == "text"
    assert stringify(float("inf")) == "Infinity"
    assert stringify(float("-inf")) == "-Infinity"
    assert stringify(float("nan")) == "NaN"


def test_native_functions():
    """
    Hosts can expose Python callables; clock() is always available.
    """
    out = io.StringIO()
    interpreter = Interpreter(Reporter(), out)
    interpreter.define_native("double", 1, lambda n: n * 2)
    reporter = run_source("print double(21)\nprint clock() > 0\nprint clock\n", interpreter)
    assert not reporter.had_error
    assert out.getvalue().splitlines() == ["42", "true", "<native fn>"]


def test_output_stream_is_configurable():
    out = io.StringIO()
    reporter = run_source("print \"captured\"\n", out=out)
    assert not reporter.had_runtime_error
    assert out.getvalue() == "captured\n"


def test_failing_native_function_is_a_runtime_error():
    """
    A Python exception raised by a native function stops the script like any
    other runtime error, pointing at the call.
    """
    out = io.StringIO()
    interpreter = Interpreter(Reporter(), out)
    interpreter.define_native("half", 1, lambda n: n / 2)
    reporter = run_source("print half(4)\nprint half(\"a\")\nprint \"unreachable\"\n", interpreter)
    assert reporter.had_runtime_error
    assert out.getvalue().splitlines() == ["2"]
    assert messages(reporter)[0].startswith("Error in native function 'half':")
    assert reporter.diagnostics[0].line == 2

"""
Tests for scoping rules and closures in CraftLang.
"""
import gc
import io

from craftlang.diagnostics import Reporter
from craftlang.interpreter import Interpreter
from craftlang.runner import run_source

from craftlang.tests.utils import messages, run


def test_counter_factory_keeps_state(capsys):
    """
    A returned function keeps reading and writing its outer function's locals.
    """
    source = (
        "function makeCounter():\n"
        "    set count to 0\n"
        "    function counter():\n"
        "        set count to count + 1\n"
        "        return count\n"
        "    return counter\n"
        "set c to makeCounter()\n"
        "print c()\n"
        "print c()\n"
        "set d to makeCounter()\n"
        "print d()\n"
        "print c()\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["1", "2", "1", "3"]
    assert not reporter.had_error


def test_function_assigns_top_level_variable(capsys):
    source = (
        "set total to 0\n"
        "function add(n):\n"
        "    set total to total + n\n"
        "add(2)\n"
        "add(3)\n"
        "print total\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["5"]


def test_loop_updates_outer_variable(capsys):
    source = (
        "set i to 0\n"
        "while i < 3:\n"
        "    print i\n"
        "    i to i + 1\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["0", "1", "2"]


def test_parameter_shadows_global(capsys):
    source = (
        "set x to \"global\"\n"
        "function show(x):\n"
        "    print x\n"
        "show(\"param\")\n"
        "print x\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["param", "global"]


def test_functions_have_fresh_environment(capsys):
    source = (
        "function inner():\n"
        "    set y to 1\n"
        "    return y\n"
        "function outer():\n"
        "    set y to 2\n"
        "    return inner()\n"
        "print outer()\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["1"]


def test_block_locals_do_not_leak(capsys):
    source = (
        "if true:\n"
        "    set hidden to 1\n"
        "print hidden\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == []
    assert messages(reporter) == ["Undefined variable 'hidden'."]
    assert str(reporter.diagnostics[0]) == "Undefined variable 'hidden'.\n[line 3]"


def test_closure_sees_later_assignment(capsys):
    source = (
        "set greeting to \"hello\"\n"
        "function greet():\n"
        "    print greeting\n"
        "greet()\n"
        "set greeting to \"bye\"\n"
        "greet()\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["hello", "bye"]


def test_recursion(capsys):
    source = (
        "function fib(n):\n"
        "    if n < 2:\n"
        "        return n\n"
        "    return fib(n - 1) + fib(n - 2)\n"
        "print fib(15)\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["610"]


def test_runaway_recursion_is_a_runtime_error(capsys):
    source = (
        "function down():\n"
        "    return down()\n"
        "down()\n"
        "print \"unreachable\"\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == []
    assert messages(reporter) == ["Stack overflow."]
    assert reporter.had_runtime_error


def test_deep_recursion_is_not_a_stack_overflow(capsys):
    source = (
        "function sum(n):\n"
        "    if n == 0:\n"
        "        return 0\n"
        "    return n + sum(n - 1)\n"
        "print sum(1000)\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["500500"]
    assert not reporter.had_error


def test_finished_entries_release_their_bindings():
    """
    A long-lived interpreter only keeps bindings for code that is still
    reachable, such as the bodies of defined functions.
    """
    out = io.StringIO()
    interpreter = Interpreter(Reporter(), out)
    run_source("function f(n):\n    return n\n", interpreter)
    gc.collect()
    kept = len(interpreter.locals)
    assert kept > 0

    for _ in range(3):
        run_source("if true:\n    set t to 1\n    print t\n", interpreter)
    gc.collect()
    assert len(interpreter.locals) == kept

    run_source("print f(3)\n", interpreter)
    assert out.getvalue().splitlines() == ["1", "1", "1", "3"]

"""
Tests for classes, instances, initializers and inheritance.
"""
from craftlang.tests.utils import messages, run


def test_counter_class(capsys):
    source = (
        "class Counter:\n"
        "    function init():\n"
        "        this.count to 0\n"
        "    function next():\n"
        "        this.count to this.count + 1\n"
        "        return this.count\n"
        "set c to Counter()\n"
        "print c.next()\n"
        "print c.next()\n"
        "print c.next()\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["1", "2", "3"]
    assert not reporter.had_error
    assert not reporter.had_runtime_error


def test_override_and_super_dispatch(capsys):
    source = (
        "class Base:\n"
        "    function greet():\n"
        "        return \"base\"\n"
        "class Derived :: Base:\n"
        "    function greet():\n"
        "        return \"derived\"\n"
        "    function parent():\n"
        "        return super.greet()\n"
        "set d to Derived()\n"
        "print d.greet()\n"
        "print d.parent()\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["derived", "base"]


def test_inherited_methods_and_initializer(capsys):
    source = (
        "class Shape:\n"
        "    function init(name):\n"
        "        this.name to name\n"
        "    function describe():\n"
        "        return \"a \" + this.name\n"
        "class Square :: Shape:\n"
        "    function init(side):\n"
        "        super.init(\"square\")\n"
        "        this.side to side\n"
        "    function area():\n"
        "        return this.side * this.side\n"
        "set s to Square(3)\n"
        "print s.describe()\n"
        "print s.area()\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["a square", "9"]
    assert not reporter.had_runtime_error


def test_initializer_returns_the_instance(capsys):
    source = (
        "class Point:\n"
        "    function init(x):\n"
        "        this.x to x\n"
        "        return\n"
        "set p to Point(3)\n"
        "print p.init(5) == p\n"
        "print p.x\n"
    )
    captured, reporter = run(source, capsys)
    assert captured == ["true", "5"]
    assert not reporter.had_error


def test_bound_method_remembers_instance(capsys):
    source = (
        "class Person:\n"
        "    function init(name):\n"
        "        this.name to name\n"
        "    function hello():\n"
        "        print \"hi \" + this.name\n"
        "set speak to Person(\"ada\").hello\n"
        "speak()\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["hi ada"]


def test_fields_shadow_methods(capsys):
    source = (
        "class Box:\n"
        "    function value():\n"
        "        return \"method\"\n"
        "set b to Box()\n"
        "set b.value to \"field\"\n"
        "print b.value\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["field"]


def test_display_of_classes_and_instances(capsys):
    source = (
        "class Thing:\n"
        "    function f():\n"
        "        return 1\n"
        "print Thing\n"
        "print Thing()\n"
        "print Thing().f\n"
    )
    captured, _ = run(source, capsys)
    assert captured == ["Thing", "Thing instance", "<fn f>"]


def test_undefined_property(capsys):
    source = (
        "class Empty:\n"
        "    function f():\n"
        "        return 1\n"
        "print Empty().missing\n"
    )
    _, reporter = run(source, capsys)
    assert messages(reporter) == ["Undefined property 'missing'."]


def test_property_access_on_non_instance(capsys):
    _, reporter = run("set n to 1\nprint n.field\n", capsys)
    assert messages(reporter) == ["Only instances have properties."]
    _, reporter = run("set n to 1\nset n.field to 2\n", capsys)
    assert messages(reporter) == ["Only instances have fields."]


def test_superclass_must_be_a_class(capsys):
    source = (
        "set notClass to 1\n"
        "class A :: notClass:\n"
        "    function f():\n"
        "        return 1\n"
    )
    _, reporter = run(source, capsys)
    assert messages(reporter) == ["Superclass must be a class."]
    assert reporter.diagnostics[0].line == 2


def test_class_arity_comes_from_init(capsys):
    source = (
        "class Pair:\n"
        "    function init(a, b):\n"
        "        this.a to a\n"
        "Pair(1)\n"
    )
    _, reporter = run(source, capsys)
    assert messages(reporter) == ["Expected 2 arguments but got 1."]

"""
Tests for TypeFacade: static types of expressions, names and calls.
"""

import pytest
from javamaybe.shared.nodes import LocalVarDeclStmt, MethodCallExpr, NameExpr, ReturnStmt
from javamaybe.shared.types import (
    ArrayType, BOOLEAN, CHAR, DOUBLE, INT, LONG, NULL, OBJECT, ReferenceType, STRING, TypeVariable,
    UNRESOLVED, WildcardType,
)
from tests.test_utils import find_type, parse


def _initializer_types(facade, body, members=""):
    """Types of the initializers of every local declared in body, in order."""
    unit = parse(f"class A {{ {members} void run() {{ {body} }} }}")
    stmts = find_type(unit, "A").get_methods_by_name("run")[0].body.statements
    return [facade.get_type(v.initializer)
            for s in stmts if isinstance(s, LocalVarDeclStmt) for v in s.variables]


class TestLiteralsAndOperators:

    @pytest.mark.parametrize("expr,expected", [
        ("1", INT), ("1L", LONG), ("1.5", DOUBLE), ("'c'", CHAR), ("true", BOOLEAN),
        ("\"s\"", STRING), ("null", NULL),
        ("1 + 2L", LONG), ("1 + 2.0", DOUBLE), ("\"a\" + 1", STRING), ("1 < 2", BOOLEAN),
        ("-'c'", INT), ("!true", BOOLEAN),
        ("true ? 1 : 2.0", DOUBLE), ("true ? null : 1", ReferenceType("java.lang.Integer")),
        ("(1)", INT), ("new int[2][]", ArrayType(ArrayType(INT))), ("String.class",
                                                                   ReferenceType("java.lang.Class", (STRING,))),
    ])
    def test_expression_types(self, facade, expr, expected):
        assert _initializer_types(facade, f"Object x = {expr};") == [expected]


class TestNames:

    def test_locals_parameters_and_fields(self, facade):
        unit = parse("""
            class A {
                long total;
                void run(double d) {
                    String s = "";
                    Object a = s, b = d, c = total, e = missing;
                }
            }
        """)
        stmt = find_type(unit, "A").methods[0].body.statements[1]
        assert [facade.get_type(v.initializer) for v in stmt.variables] == [STRING, DOUBLE, LONG, UNRESOLVED]

    def test_later_declarations_are_not_visible(self, facade):
        assert _initializer_types(facade, "Object a = x; int x = 1;") == [UNRESOLVED, INT]

    def test_foreach_and_catch_variables(self, facade):
        unit = parse("""
            class A {
                void run(String[] xs) {
                    for (String x : xs) { f(x); }
                    try { } catch (IllegalStateException e) { f(e); }
                }
            }
        """)
        args = [c.arguments[0] for c in unit.find_all(MethodCallExpr)]
        assert [facade.get_type(a) for a in args] == [STRING, ReferenceType("java.lang.IllegalStateException")]

    def test_type_parameters(self, facade):
        unit = parse("class Box<T> { T value; <U> U get(U u) { return u; } }")
        ret = find_type(unit, "Box").methods[0].body.statements[0]
        assert isinstance(ret, ReturnStmt)
        assert facade.get_type(ret.expression) == TypeVariable("U")

    def test_imports_and_nested_types(self, facade):
        unit = parse("""
            package p;
            import java.util.List;
            class A {
                static class Inner {}
                void run(List<String> l, Inner i) { f(l); f(i); }
            }
        """)
        args = [c.arguments[0] for c in unit.find_all(MethodCallExpr)]
        assert facade.get_type(args[0]) == ReferenceType("java.util.List", (STRING,))
        assert facade.get_type(args[1]) == ReferenceType("p.A.Inner")


class TestCalls:

    def test_library_methods(self, facade):
        assert _initializer_types(facade, """
            String s = "abc";
            Object a = s.length(), b = s.substring(1), c = Math.max(1, 2L), d = Integer.valueOf(3);
        """) == [STRING, INT, STRING, LONG, ReferenceType("java.lang.Integer")]

    def test_own_methods_and_overloads(self, facade):
        assert _initializer_types(
            facade,
            "Object a = pick(1), b = pick(\"s\"), c = this.pick(2.0);",
            members="int pick(int i) { return i; } String pick(String s) { return s; } double pick(double d) { return d; }",
        ) == [INT, STRING, DOUBLE]

    def test_generic_method_infers_from_argument(self, facade):
        assert _initializer_types(facade, "Object o = java.util.Objects.requireNonNull(\"x\");") == [STRING]

    def test_wildcard_arguments_are_kept_and_captured_by_members(self, facade):
        number = ReferenceType("java.lang.Number")
        assert _initializer_types(
            facade,
            "Object a = ns, b = ns.get(0), c = unknown.get(0), d = sup.get(0);",
            members="java.util.List<? extends Number> ns; java.util.List<?> unknown; "
                    "java.util.List<? super Integer> sup;",
        ) == [ReferenceType("java.util.List", (WildcardType(number),)), number, OBJECT, OBJECT]

    def test_call_target_type(self, facade):
        unit = parse("""
            class Outer {
                void helper() {}
                class Inner {
                    void run() { helper(); "s".trim(); Math.abs(1); }
                }
            }
        """)
        calls = unit.find_all(MethodCallExpr)
        assert [facade.call_target_type(c) for c in calls] == [
            ReferenceType("Outer"), STRING, ReferenceType("java.lang.Math"),
        ]


class TestAssignability:

    @pytest.mark.parametrize("target,source,expected", [
        (OBJECT, STRING, True),
        (ReferenceType("java.lang.CharSequence"), STRING, True),
        (STRING, OBJECT, False),
        (LONG, INT, True),
        (INT, LONG, False),
        (OBJECT, INT, True),
        (ReferenceType("java.lang.Number"), INT, True),
        (INT, ReferenceType("java.lang.Integer"), True),
        (STRING, NULL, True),
        (INT, NULL, False),
        (ArrayType(OBJECT), ArrayType(STRING), True),
        (ArrayType(STRING), ArrayType(INT), False),
        (STRING, UNRESOLVED, True),
        (STRING, ReferenceType("com.example.Unknown"), True),
    ])
    def test_is_assignable(self, facade, target, source, expected):
        assert facade.is_assignable(target, source) is expected

    def test_name_resolves_against_unit(self, facade):
        unit = parse("class Base {} class Derived extends Base { void run(Derived d) { f(d); } }")
        arg = unit.find_all(NameExpr)[0]
        assert facade.is_assignable(ReferenceType("Base"), facade.get_type(arg), arg)

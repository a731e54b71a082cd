"""
End-to-End Tests for Any specialization

Parse -> AnyReplacementPass -> CompileOnlyCleanupPass -> print:
- Overload order and placement
- Fallback for parameters no call reaches
- Nested types, chained specializations
- Cleanup of marker imports and @CompileOnly members
"""

import logging
from textwrap import dedent

import pytest
from javamaybe.compiler.processor import SyncTaskProcessor, Task
from javamaybe.passes.any_replacement import AnyReplacementPass
from javamaybe.shared.errors import JavaMaybeImplementationError
from tests.test_utils import find_type, parse, signatures, to_java

pytestmark = pytest.mark.integration


class TestOverloads:
    """Which overloads are generated, and where they go"""

    def test_one_overload_per_argument_type(self, specialize_factory):
        """Each distinct argument type yields an overload, in order of first use"""
        unit = specialize_factory("""
            class A {
                void m(Any a, int b) {}
                void main() { m("x", 1); m(2.0, 1); }
            }
        """)
        assert signatures(find_type(unit, "A")) == ["m(String a, int b)", "m(double a, int b)", "main()"]

    def test_method_without_any_is_unchanged(self, specialize_factory):
        """Units without markers print exactly as before"""
        source = """
            class A {
                int twice(int x) { return x * 2; }
                void main() { twice(3); }
            }
        """
        assert to_java(specialize_factory(source)) == to_java(parse(source))

    def test_uncalled_method_falls_back_to_object(self, specialize_factory, caplog):
        """No call site: a single Object overload and a warning"""
        with caplog.at_level(logging.WARNING):
            unit = specialize_factory("class A { void m(Any a) { } }")
        assert signatures(find_type(unit, "A")) == ["m(Object a)"]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "parameter 'a' of m" in warnings[0].getMessage()

    def test_overloads_are_the_cartesian_product_in_place(self, specialize_factory):
        """Count is the product of candidate counts; overloads replace the original contiguously"""
        unit = specialize_factory("""
            class A {
                void before() {}
                void m(Any a, long n, Any b) {}
                void after() {
                    m(1, 1L, "x");
                    m(2.0, 2L, 'c');
                    m(1, 3L, 'c');
                }
            }
        """)
        assert signatures(find_type(unit, "A")) == [
            "before()",
            "m(int a, long n, String b)",
            "m(int a, long n, char b)",
            "m(double a, long n, String b)",
            "m(double a, long n, char b)",
            "after()",
        ]

    def test_null_and_boxed_arguments(self, specialize_factory):
        """null normalizes to Object; boxed and primitive types stay distinct"""
        unit = specialize_factory("""
            class A {
                void m(Any a) {}
                void main() { m(null); m(Integer.valueOf(1)); m(1); }
            }
        """)
        assert signatures(find_type(unit, "A"), "m") == ["m(Object a)", "m(Integer a)", "m(int a)"]

    def test_generic_parameters_become_object(self, specialize_factory):
        """Non-marker parameters get their normalized types"""
        unit = specialize_factory("""
            class A {
                <T> void m(Any a, T t) {}
                void main() { m(1, "x"); }
            }
        """)
        assert signatures(find_type(unit, "A"), "m") == ["m(int a, Object t)"]

    def test_type_arguments_stay_writable(self, specialize_factory):
        """A caller's List<T> or wildcard list yields a parameter type every such list fits"""
        unit = specialize_factory("""
            import java.util.List;

            class A {
                void m(Any a) {}
                <T> void caller(List<T> xs) { m(xs); }
                void main(List<? extends Number> ns, List<String> ss) { m(ns); m(ss); }
            }
        """)
        assert signatures(find_type(unit, "A"), "m") == [
            "m(java.util.List<?> a)",
            "m(java.util.List<? extends Number> a)",
            "m(java.util.List<String> a)",
        ]

    def test_generic_type_arguments_of_other_parameters(self, specialize_factory):
        """Non-marker parameters lose their type variables the same way"""
        unit = specialize_factory("""
            class A {
                <T> void m(Any a, java.util.List<T> xs) {}
                void main(java.util.List<String> ss) { m(1, ss); }
            }
        """)
        assert signatures(find_type(unit, "A"), "m") == ["m(int a, java.util.List<?> xs)"]

    def test_instanceof_on_primitive_overload(self, specialize_factory):
        """A primitive overload answers instanceof checks on its parameter with true"""
        unit = specialize_factory("""
            class A {
                boolean m(Any a) { return a instanceof Any; }
                void main() { m(1); m("s"); }
            }
        """)
        printed = [to_java(method) for method in find_type(unit, "A").get_methods_by_name("m")]
        assert printed == [
            "boolean m(int a) {\n    return true;\n}\n",
            "boolean m(String a) {\n    return a instanceof String;\n}\n",
        ]

    def test_bodies_follow_the_parameter_type(self, specialize_factory):
        """Marker locals and casts over a forked parameter are retyped"""
        unit = specialize_factory("""
            class A {
                Object box(Any v) {
                    Any copy = v;
                    return (Any) copy;
                }
                void main() { box(1.5); }
            }
        """)
        assert to_java(find_type(unit, "A").methods[0]) == dedent("""\
            Object box(double v) {
                double copy = v;
                return (double) copy;
            }
        """)

    def test_overloads_do_not_share_nodes(self, specialize_factory):
        """Every overload is an independent copy of the original"""
        unit = specialize_factory("""
            class A {
                void m(Any a) { int x = 1; }
                void main() { m(1); m("s"); }
            }
        """)
        first, second = find_type(unit, "A").get_methods_by_name("m")
        assert first.body is not second.body
        assert first.body.statements[0] is not second.body.statements[0]
        assert first.parent is second.parent is find_type(unit, "A")


class TestOrdering:
    """Processing order across nested types and chained methods"""

    def test_nested_types_first(self, specialize_factory, caplog):
        """Member types are processed before the methods of their enclosing type"""
        with caplog.at_level(logging.INFO, logger="javamaybe.passes.any_replacement"):
            unit = specialize_factory("""
                class Outer {
                    void a(Any x) {}
                    class Inner {
                        void b(Any y) {}
                        void c() { b(1); a("s"); }
                    }
                    void d() {}
                }
            """)
        headers = [r.getMessage() for r in caplog.records
                   if r.name == "javamaybe.passes.any_replacement" and r.levelno == logging.INFO]
        assert headers == ["b:", "c:", "a:", "d:"]
        assert signatures(find_type(unit, "Inner"), "b") == ["b(int y)"]
        assert signatures(find_type(unit, "Outer"), "a") == ["a(String x)"]

    def test_calls_inside_overloads_feed_later_methods(self, specialize_factory):
        """A method split later sees the calls made by earlier overloads"""
        unit = specialize_factory("""
            class A {
                void m(Any a) { n(a); }
                void n(Any b) {}
                void main() { m(1); m("s"); }
            }
        """)
        assert signatures(find_type(unit, "A")) == [
            "m(int a)", "m(String a)", "n(int b)", "n(String b)", "main()",
        ]

    def test_calls_from_other_types(self, specialize_factory):
        """Qualified calls from any type in the unit count"""
        unit = specialize_factory("""
            class Util {
                static void log(Any value) {}
            }
            class App {
                void run(String[] args) { Util.log(args); Util.log(args.length); }
            }
        """)
        assert signatures(find_type(unit, "Util")) == ["log(String[] value)", "log(int value)"]


class TestCleanup:
    """Marker imports and @CompileOnly members disappear from the output"""

    def test_full_unit(self, specialize_factory):
        unit = specialize_factory(dedent("""\
            package demo;

            import java.util.List;
            import javamaybe.Any;
            import javamaybe.CompileOnly;

            public class Printer {
                @CompileOnly
                void probe(List<String> names) {
                    show(1);
                    show(names);
                }

                void show(Any value) {
                    System.out.println(value);
                }
            }
        """))
        assert to_java(unit) == dedent("""\
            package demo;

            import java.util.List;

            public class Printer {
                void show(int value) {
                    System.out.println(value);
                }

                void show(java.util.List<String> value) {
                    System.out.println(value);
                }
            }
        """)


class TestProcessor:
    """SyncTaskProcessor futures"""

    def test_process_returns_completed_future(self, processor):
        future = processor.process(Task(parse("class A { void m(Any a) {} void f() { m(1); } }")))
        assert future.done()
        assert signatures(find_type(future.result(), "A")) == ["m(int a)", "f()"]

    def test_failure_is_delivered_through_future(self, type_solver, monkeypatch):
        def broken(self, unit):
            raise JavaMaybeImplementationError("boom")

        monkeypatch.setattr(AnyReplacementPass, "run", broken)
        future = SyncTaskProcessor(type_solver).process(Task(parse("class A {}")))
        assert future.done()
        assert isinstance(future.exception(), JavaMaybeImplementationError)

    def test_process_all_keeps_task_order(self, processor):
        sources = [
            f"class C{i} {{ void m(Any a) {{}} void f() {{ m({literal}); }} }}"
            for i, literal in enumerate(["1", "\"s\"", "2.0", "'c'", "true"])
        ]
        futures = processor.process_all([Task(parse(s)) for s in sources], max_workers=3)
        results = [signatures(find_type(f.result(), f"C{i}"), "m") for i, f in enumerate(futures)]
        assert results == [["m(int a)"], ["m(String a)"], ["m(double a)"], ["m(char a)"], ["m(boolean a)"]]

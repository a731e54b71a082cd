"""
Tests for CompileOnlyCleanupPass.
"""

from textwrap import dedent

from javamaybe.passes.compile_only_cleanup import CompileOnlyCleanupPass
from tests.test_utils import find_type, parse, to_java


class TestCompileOnlyCleanup:

    def test_specializer_imports_are_removed(self, facade):
        unit = parse("""
            import java.util.List;
            import javamaybe.Any;
            import javamaybe.CompileOnly;
            import javamaybe.*;
            import static javamaybe.Any.foo;
            class A {}
        """)
        CompileOnlyCleanupPass(facade).run(unit)
        assert [(i.name, i.is_wildcard, i.is_static) for i in unit.imports] == [
            ("java.util.List", False, False),
            ("javamaybe", True, False),
            ("javamaybe.Any.foo", False, True),
        ]

    def test_compile_only_members_are_removed(self, facade):
        unit = parse("""
            import javamaybe.CompileOnly;
            class A {
                @CompileOnly int helper;
                int kept;
                @CompileOnly void stub(Any a) {}
                void run() {}
                @CompileOnly static class Scaffold {}
                static class Inner {
                    @CompileOnly Inner() {}
                    @javamaybe.CompileOnly void alsoGone() {}
                    void stays() {}
                }
            }
        """)
        CompileOnlyCleanupPass(facade).run(unit)
        assert to_java(unit) == dedent("""\
            class A {
                int kept;

                void run() {
                }

                static class Inner {
                    void stays() {
                    }
                }
            }
        """)

    def test_other_annotation_with_same_simple_name_stays(self, facade):
        unit = parse("""
            import com.example.CompileOnly;
            class A {
                @CompileOnly void m() {}
            }
        """)
        CompileOnlyCleanupPass(facade).run(unit)
        assert [m.name for m in find_type(unit, "A").methods] == ["m"]

    def test_unresolvable_annotation_is_decided_by_name(self, facade):
        unit = parse("class A { @CompileOnly void m() {} void n() {} }")
        CompileOnlyCleanupPass(facade).run(unit)
        assert [m.name for m in find_type(unit, "A").methods] == ["n"]

    def test_visited_nodes_are_skipped(self, facade):
        unit = parse("""
            import javamaybe.Any;
            class A {
                @CompileOnly void m() {}
            }
        """)
        visited = {id(unit.imports[0]), id(unit.types[0])}
        CompileOnlyCleanupPass(facade).run(unit, visited)
        assert [i.name for i in unit.imports] == ["javamaybe.Any"]
        assert [m.name for m in find_type(unit, "A").methods] == ["m"]

    def test_runs_once_per_node(self, facade):
        unit = parse("import javamaybe.Any; class A { @CompileOnly void m() {} void n() {} }")
        visited = set()
        cleanup = CompileOnlyCleanupPass(facade)
        cleanup.run(unit, visited)
        size = len(visited)
        cleanup.run(unit, visited)
        assert len(visited) == size
        assert to_java(unit) == "class A {\n    void n() {\n    }\n}\n"

"""
Tests for the fork context: marked parameters and candidate collection.
"""

from javamaybe.frontend.parser import parse_type
from javamaybe.analysis.type_fork import BuildTypeFork, TypeForkPath, is_marker_ref, is_marker_type
from javamaybe.shared.types import ArrayType, CHAR, DOUBLE, INT, OBJECT, ReferenceType, STRING
from tests.test_utils import find_type, parse


def _collect(source, facade, method_name="m", type_name="A", index=0):
    unit = parse(source)
    method = find_type(unit, type_name).get_methods_by_name(method_name)[index]
    return BuildTypeFork(TypeForkPath.construct(facade, method)).run()


class TestMarkerDetection:

    def test_marker_refs(self):
        assert is_marker_ref(parse_type("Any"))
        assert is_marker_ref(parse_type("javamaybe.Any"))
        assert not is_marker_ref(parse_type("Any<String>"))
        assert not is_marker_ref(parse_type("Any[]"))
        assert not is_marker_ref(parse_type("Object"))

    def test_marker_types(self):
        assert is_marker_type(ReferenceType("javamaybe.Any"))
        assert not is_marker_type(ReferenceType("javamaybe.Any", (STRING,)))
        assert not is_marker_type(OBJECT)


class TestTypeForkPath:

    def test_marked_parameters_in_declaration_order(self, facade):
        unit = parse("class A { void m(Any b, int x, Any a) {} }")
        path = TypeForkPath.construct(facade, find_type(unit, "A").methods[0])
        assert path.any_param_names == ["b", "a"]
        assert path.position_of("a") == 2
        assert not path.is_any_param("x")

    def test_method_without_marker_is_empty(self, facade):
        unit = parse("class A { void m(String s) {} }")
        assert TypeForkPath.construct(facade, find_type(unit, "A").methods[0]).is_empty()

    def test_varargs_marker_is_not_forked(self, facade):
        unit = parse("class A { void m(Any... rest) {} }")
        assert TypeForkPath.construct(facade, find_type(unit, "A").methods[0]).is_empty()


class TestBuildTypeFork:

    def test_candidates_in_first_seen_order(self, facade):
        path = _collect("""
            class A {
                void m(Any a) {}
                void main() { m(2.0); m("x"); m(1); m("y"); }
            }
        """, facade)
        assert path.candidates("a") == [DOUBLE, STRING, INT]

    def test_calls_with_other_arity_are_ignored(self, facade):
        path = _collect("""
            class A {
                void m(Any a) {}
                void m(Any a, int b) {}
                void main() { m("x"); m(1.0, 2); }
            }
        """, facade)
        assert path.candidates("a") == [STRING]

    def test_overloads_of_same_arity_are_told_apart(self, facade):
        path = _collect("""
            class A {
                void m(Any a, int b) {}
                void m(Any a, String b) {}
                void main() { m("x", 1); m(2.0, "y"); }
            }
        """, facade)
        assert path.candidates("a") == [STRING]

    def test_marker_and_void_arguments_are_skipped(self, facade):
        path = _collect("""
            class A {
                void v() {}
                void m(Any a) { m(a); }
                void main() { m(v()); m(1); }
            }
        """, facade)
        assert path.candidates("a") == [INT]

    def test_null_and_unresolved_arguments_become_object(self, facade):
        path = _collect("""
            class A {
                void m(Any a) {}
                void main() { m(null); m(undefinedName); }
            }
        """, facade)
        assert path.candidates("a") == [OBJECT]

    def test_calls_in_other_types_of_the_unit_count(self, facade):
        path = _collect("""
            class A {
                static void m(Any a) {}
            }
            class B {
                void main() { A.m(new int[0]); new A().m('c'); }
            }
        """, facade)
        assert path.candidates("a") == [ArrayType(INT), CHAR]

"""
Tests for the pass manager and AnyReplacementPass run on its own.
"""

import logging

import pytest
from javamaybe.passes.any_replacement import AnyReplacementPass
from javamaybe.passes.base import BasePass, PassManager
from javamaybe.passes.compile_only_cleanup import CompileOnlyCleanupPass
from tests.test_utils import find_type, parse, signatures


class _Recorder(BasePass):
    log = []

    def run(self, unit):
        self.log.append(type(self).__name__)
        return unit


class First(_Recorder):
    pass


class Second(_Recorder):
    requires = [First]


class Cyclic(_Recorder):
    pass


Cyclic.requires = [Cyclic]


class TestPassManager:

    def test_dependencies_run_first(self, facade):
        _Recorder.log = []
        manager = PassManager()
        manager.register_pass(Second)
        manager.register_pass(First)
        unit = parse("class A {}")
        assert manager.run_all(unit, facade) is unit
        assert _Recorder.log == ["First", "Second"]

    def test_default_pipeline_order(self):
        manager = PassManager()
        manager.register_pass(CompileOnlyCleanupPass)
        manager.register_pass(AnyReplacementPass)
        assert manager._topological_sort() == [AnyReplacementPass, CompileOnlyCleanupPass]

    def test_cycle_is_rejected(self):
        manager = PassManager()
        manager.register_pass(Cyclic)
        with pytest.raises(RuntimeError, match="Circular"):
            manager._topological_sort()


class TestAnyReplacementPass:

    def test_overloads_replace_the_original_in_place(self, facade):
        unit = parse("""
            class A {
                void before() {}
                void m(Any a, int b) {}
                void after() { m("x", 1); m(2.0, 1); }
            }
        """)
        AnyReplacementPass(facade).run(unit)
        assert signatures(find_type(unit, "A")) == [
            "before()", "m(String a, int b)", "m(double a, int b)", "after()",
        ]

    def test_method_without_marker_is_untouched(self, facade):
        unit = parse("class A { void m(String s) { m(\"x\"); } }")
        method = find_type(unit, "A").methods[0]
        AnyReplacementPass(facade).run(unit)
        assert find_type(unit, "A").methods == [method]

    def test_missing_call_sites_fall_back_with_warning(self, facade, caplog):
        unit = parse("class A { void m(Any a) {} }")
        with caplog.at_level(logging.WARNING, logger="javamaybe.passes.any_replacement"):
            AnyReplacementPass(facade).run(unit)
        assert signatures(find_type(unit, "A")) == ["m(Object a)"]
        assert any("no call passes a type for parameter 'a'" in r.getMessage() for r in caplog.records)

    def test_interface_methods_are_split(self, facade):
        unit = parse("interface I { void m(Any a); } class A { void f(I i) { i.m(1); } }")
        AnyReplacementPass(facade).run(unit)
        assert signatures(find_type(unit, "I")) == ["m(int a)"]

    def test_enum_methods_are_split(self, facade):
        unit = parse("""
            enum E {
                X, Y;
                void m(Any a) {}
                void f() { m('c'); }
            }
        """)
        AnyReplacementPass(facade).run(unit)
        assert signatures(find_type(unit, "E"), "m") == ["m(char a)"]

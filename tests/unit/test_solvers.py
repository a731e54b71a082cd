"""
Tests for the type solvers.
"""

import zipfile

import pytest
from javamaybe.resolution.solvers import (
    CombinedTypeSolver, JarTypeSolver, JavaParserTypeSolver, ReflectionTypeSolver, split_top_level,
)
from javamaybe.shared.errors import ArchiveLoadError, ConfigurationError


class TestReflectionTypeSolver:

    @pytest.mark.parametrize("name", [
        "java.lang.Object", "java.lang.String", "java.lang.Integer", "java.util.List",
        "javamaybe.Any", "javamaybe.CompileOnly",
    ])
    def test_known_types(self, name):
        assert ReflectionTypeSolver().has_type(name)

    def test_unknown_type(self):
        assert ReflectionTypeSolver().try_to_solve_type("com.example.Missing") is None

    def test_descriptor_shape(self):
        descriptor = ReflectionTypeSolver().try_to_solve_type("java.lang.Integer")
        assert descriptor.kind == "class"
        assert descriptor.simple_name == "Integer"
        assert [t.name for t in descriptor.supertypes] == ["Number", "Comparable"]

    def test_generic_signatures(self):
        descriptor = ReflectionTypeSolver().try_to_solve_type("java.util.Optional")
        assert descriptor.type_parameters == ["T"]
        of = descriptor.get_methods("of")[0]
        assert of.is_static and of.type_parameters == ["U"]

    def test_varargs_signature(self):
        as_list = ReflectionTypeSolver().try_to_solve_type("java.util.Arrays").get_methods("asList")[0]
        assert as_list.is_varargs
        assert as_list.accepts_arity(0) and as_list.accepts_arity(3)

    def test_descriptors_are_built_once(self):
        solver = ReflectionTypeSolver()
        assert solver.try_to_solve_type("java.lang.String") is solver.try_to_solve_type("java.lang.String")

    def test_split_top_level(self):
        assert split_top_level("java.util.Map<K, V>, int") == ["java.util.Map<K, V>", "int"]
        assert split_top_level("") == []


class TestJavaParserTypeSolver:

    def test_types_under_source_root(self, tmp_path):
        package = tmp_path / "com" / "example"
        package.mkdir(parents=True)
        (package / "Shape.java").write_text(
            "package com.example;\n"
            "public class Shape { double area() { return 0; } static class Corner {} }\n")
        solver = JavaParserTypeSolver(tmp_path)
        shape = solver.try_to_solve_type("com.example.Shape")
        assert shape.declaration is not None
        assert [m.name for m in shape.get_methods("area")] == ["area"]
        assert solver.has_type("com.example.Shape.Corner")
        assert not solver.has_type("com.example.Circle")

    def test_broken_source_is_a_gap(self, tmp_path, caplog):
        (tmp_path / "Broken.java").write_text("class Broken {")
        assert JavaParserTypeSolver(tmp_path).try_to_solve_type("Broken") is None
        assert "cannot parse" in caplog.text

    def test_missing_root_is_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not a directory"):
            JavaParserTypeSolver(tmp_path / "missing")


class TestJarTypeSolver:

    def test_class_and_source_entries(self, tmp_path):
        jar = tmp_path / "lib.jar"
        with zipfile.ZipFile(jar, "w") as archive:
            archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
            archive.writestr("org/lib/Widget.class", b"\xca\xfe\xba\xbe")
            archive.writestr("org/lib/Widget$Part.class", b"\xca\xfe\xba\xbe")
            archive.writestr("org/lib/module-info.class", b"\xca\xfe\xba\xbe")
            archive.writestr("org/lib/Gadget.java", "package org.lib; public class Gadget { int size() { return 1; } }")
        solver = JarTypeSolver(jar)

        widget = solver.try_to_solve_type("org.lib.Widget")
        assert widget is not None and not widget.complete
        assert solver.has_type("org.lib.Widget.Part")
        assert not solver.has_type("org.lib.module-info")

        gadget = solver.try_to_solve_type("org.lib.Gadget")
        assert gadget.complete
        assert gadget.get_methods("size")

    def test_bad_archive(self, tmp_path):
        bogus = tmp_path / "bogus.jar"
        bogus.write_bytes(b"not a zip")
        with pytest.raises(ArchiveLoadError) as info:
            JarTypeSolver(bogus)
        assert info.value.path == str(bogus)
        assert isinstance(info.value, ConfigurationError)

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveLoadError):
            JarTypeSolver(tmp_path / "missing.jar")


class TestCombinedTypeSolver:

    def test_first_solver_wins(self, tmp_path):
        (tmp_path / "java" / "lang").mkdir(parents=True)
        (tmp_path / "java" / "lang" / "String.java").write_text("package java.lang; class String { void own() {} }")
        combined = CombinedTypeSolver(ReflectionTypeSolver(), JavaParserTypeSolver(tmp_path))
        assert combined.try_to_solve_type("java.lang.String").declaration is None

        combined = CombinedTypeSolver(JavaParserTypeSolver(tmp_path), ReflectionTypeSolver())
        assert combined.try_to_solve_type("java.lang.String").get_methods("own")

    def test_add(self, tmp_path):
        (tmp_path / "Late.java").write_text("class Late {}")
        combined = CombinedTypeSolver(ReflectionTypeSolver())
        assert not combined.has_type("Late")
        combined.add(JavaParserTypeSolver(tmp_path))
        assert combined.has_type("Late")

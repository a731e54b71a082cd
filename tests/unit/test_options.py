"""
Tests for command-line options and environment construction.
"""

import os
import zipfile

import pytest
from javamaybe.compiler.options import build_type_solver, parse_options
from javamaybe.resolution.solvers import JarTypeSolver, JavaParserTypeSolver, ReflectionTypeSolver
from javamaybe.shared.errors import ArchiveLoadError, ConfigurationError


@pytest.fixture
def layout(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "A.java").write_text("class A {}")
    extra = tmp_path / "extra"
    extra.mkdir()
    jar = tmp_path / "lib.jar"
    with zipfile.ZipFile(jar, "w") as archive:
        archive.writestr("lib/Thing.class", b"")
    return tmp_path


class TestParseOptions:

    def test_defaults(self, layout, monkeypatch):
        monkeypatch.chdir(layout)
        options = parse_options([])
        assert str(options.input_path) == "."
        assert options.output_dir.name == "out"
        assert options.sourcepath == [] and options.classpath == []
        assert not options.verbose

    def test_all_options(self, layout):
        options = parse_options([
            "-i", str(layout / "src"), "-o", str(layout / "out"),
            "--sourcepath", str(layout / "extra"),
            "--classpath", os.pathsep.join([str(layout / "lib.jar"), str(layout / "extra")]),
            "-v",
        ])
        assert options.input_path == layout / "src"
        assert options.sourcepath == [layout / "extra"]
        assert options.classpath == [layout / "lib.jar", layout / "extra"]
        assert options.verbose

    def test_missing_input(self, layout):
        with pytest.raises(ConfigurationError, match="input not found"):
            parse_options(["-i", str(layout / "nope")])

    def test_output_must_be_a_directory(self, layout):
        with pytest.raises(ConfigurationError, match="not a directory"):
            parse_options(["-i", str(layout / "src"), "-o", str(layout / "src" / "A.java")])

    def test_sourcepath_entry_must_be_a_directory(self, layout):
        with pytest.raises(ConfigurationError, match="source path entry"):
            parse_options(["-i", str(layout / "src"), "--sourcepath", str(layout / "lib.jar")])

    def test_classpath_entry_must_be_directory_or_archive(self, layout):
        with pytest.raises(ConfigurationError, match="class path entry"):
            parse_options(["-i", str(layout / "src"), "--classpath", str(layout / "src" / "A.java")])


class TestBuildTypeSolver:

    def test_solver_order(self, layout):
        options = parse_options([
            "-i", str(layout / "src"),
            "--sourcepath", str(layout / "extra"),
            "--classpath", str(layout / "lib.jar"),
        ])
        solvers = build_type_solver(options).solvers
        assert [type(s) for s in solvers] == [
            ReflectionTypeSolver, JavaParserTypeSolver, JavaParserTypeSolver, JarTypeSolver,
        ]
        assert solvers[1].root == layout / "src"
        assert build_type_solver(options).has_type("lib.Thing")
        assert build_type_solver(options).has_type("A")

    def test_file_input_adds_no_source_root(self, layout):
        options = parse_options(["-i", str(layout / "src" / "A.java")])
        assert [type(s) for s in build_type_solver(options).solvers] == [ReflectionTypeSolver]

    def test_unreadable_archive(self, layout):
        (layout / "broken.zip").write_bytes(b"garbage")
        options = parse_options(["-i", str(layout / "src"), "--classpath", str(layout / "broken.zip")])
        with pytest.raises(ArchiveLoadError):
            build_type_solver(options)

"""
Command-line options and the type resolution environment they describe.
"""

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..resolution.solvers import (
    CombinedTypeSolver, JarTypeSolver, JavaParserTypeSolver, ReflectionTypeSolver, TypeSolver,
)
from ..shared.errors import ConfigurationError
from ..utils.config import ARCHIVE_EXTENSIONS, DEFAULT_INPUT_PATH, DEFAULT_OUTPUT_DIR


@dataclass
class Options:
    input_path: Path
    output_dir: Path
    sourcepath: List[Path] = field(default_factory=list)
    classpath: List[Path] = field(default_factory=list)
    verbose: bool = False


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="javamaybe",
        description="Replace methods with Any-typed parameters by concrete overloads.",
    )
    parser.add_argument("-i", "--input", default=DEFAULT_INPUT_PATH,
                        help=f"Java file or source directory (default: {DEFAULT_INPUT_PATH})")
    parser.add_argument("-o", "--output-dir", default=DEFAULT_OUTPUT_DIR,
                        help=f"Directory for the rewritten sources (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("--sourcepath", default="",
                        help=f"Extra source roots, separated by '{os.pathsep}'")
    parser.add_argument("--classpath", default="",
                        help=f"Source roots and .jar/.zip archives, separated by '{os.pathsep}'")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _split_path(value: str) -> List[Path]:
    return [Path(entry) for entry in value.split(os.pathsep) if entry]


def parse_options(argv: Optional[Sequence[str]] = None) -> Options:
    """Parse and validate; raises ConfigurationError for unusable paths."""
    args = build_arg_parser().parse_args(argv)
    options = Options(
        input_path=Path(args.input),
        output_dir=Path(args.output_dir),
        sourcepath=_split_path(args.sourcepath),
        classpath=_split_path(args.classpath),
        verbose=args.verbose,
    )
    validate_options(options)
    return options


def validate_options(options: Options) -> None:
    if not options.input_path.exists():
        raise ConfigurationError(f"input not found: {options.input_path}")
    if not os.access(options.input_path, os.R_OK):
        raise ConfigurationError(f"input not readable: {options.input_path}")
    if options.output_dir.exists() and not options.output_dir.is_dir():
        raise ConfigurationError(f"output path is not a directory: {options.output_dir}")
    for entry in options.sourcepath:
        if not entry.is_dir():
            raise ConfigurationError(f"source path entry is not a directory: {entry}")
    for entry in options.classpath:
        if entry.is_dir():
            continue
        if not (entry.is_file() and entry.suffix.lower() in ARCHIVE_EXTENSIONS):
            raise ConfigurationError(f"class path entry is neither a directory nor an archive: {entry}")


def build_type_solver(options: Options) -> TypeSolver:
    """
    Built-in library types first, then the input's own source root, then
    --sourcepath, then --classpath entries in the order given.
    """
    solver = CombinedTypeSolver(ReflectionTypeSolver())
    if options.input_path.is_dir():
        solver.add(JavaParserTypeSolver(options.input_path))
    for entry in options.sourcepath:
        solver.add(JavaParserTypeSolver(entry))
    for entry in options.classpath:
        if entry.is_dir():
            solver.add(JavaParserTypeSolver(entry))
        else:
            solver.add(JarTypeSolver(entry))
    return solver

"""
Driver

Pattern: parse every input file, specialize the units, print them to the
output directory at the same relative path. Diagnostics for all files are
collected in one ErrorReporter; nothing is written when any file fails to
parse.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..backends.java_printer import JavaPrinter
from ..frontend.parser import Parser, default_parser
from ..resolution.solvers import TypeSolver
from ..shared.errors import ErrorReporter, JavaMaybeError
from ..shared.nodes import CompilationUnit
from ..utils.io_utils import iter_java_files, read_source_file, write_source_file
from .processor import SyncTaskProcessor, Task

logger = logging.getLogger(__name__)


@dataclass
class DriverResult:
    success: bool
    reporter: ErrorReporter
    written: List[Path] = field(default_factory=list)


class CompilerDriver:
    """
    Usage:
        driver = CompilerDriver(build_type_solver(options))
        result = driver.run(options.input_path, options.output_dir)
    """

    def __init__(self, type_solver: TypeSolver, parser: Optional[Parser] = None,
                 max_workers: Optional[int] = None):
        self.parser = parser if parser is not None else default_parser()
        self.processor = SyncTaskProcessor(type_solver)
        self.max_workers = max_workers

    def run(self, input_path: Path, output_dir: Path) -> DriverResult:
        reporter = ErrorReporter()
        root = input_path if input_path.is_dir() else input_path.parent

        # Phase 1: parse everything
        parsed: List[Tuple[Path, CompilationUnit]] = []
        for path in iter_java_files(input_path):
            source = read_source_file(path)
            reporter.source_files[str(path)] = source
            try:
                parsed.append((path, self.parser.parse(source, str(path))))
            except JavaMaybeError as e:
                reporter.report_exception(e)
        if reporter.has_errors():
            return DriverResult(success=False, reporter=reporter)
        logger.debug("parsed %d file(s) under %s", len(parsed), root)

        # Phase 2: specialize
        futures = self.processor.process_all([Task(unit) for _, unit in parsed], self.max_workers)

        # Phase 3: print
        result = DriverResult(success=True, reporter=reporter)
        printer = JavaPrinter()
        for (path, _), future in zip(parsed, futures):
            try:
                unit = future.result()
            except JavaMaybeError as e:
                reporter.report_exception(e)
                result.success = False
                continue
            target = output_dir / path.relative_to(root)
            write_source_file(target, printer.print(unit))
            result.written.append(target)
            logger.debug("wrote %s", target)
        return result

"""
Task processing: one compilation unit through the pass pipeline.

Pattern: SyncTaskProcessor(type_solver).process(Task(unit)) returns a
Future that is already done. process_all() fans independent units out
over a thread pool; the environment is only read, so units share it.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..passes.any_replacement import AnyReplacementPass
from ..passes.base import PassManager
from ..passes.compile_only_cleanup import CompileOnlyCleanupPass
from ..resolution.facade import TypeFacade
from ..resolution.solvers import TypeSolver
from ..shared.nodes import CompilationUnit

logger = logging.getLogger(__name__)


@dataclass
class Task:
    """A parsed unit waiting for specialization."""
    unit: CompilationUnit


class SyncTaskProcessor:

    def __init__(self, type_solver: TypeSolver):
        self.type_solver = type_solver
        self.facade = TypeFacade(type_solver)
        self.pass_manager = PassManager()
        self.pass_manager.register_pass(AnyReplacementPass)
        self.pass_manager.register_pass(CompileOnlyCleanupPass)

    def process(self, task: Task) -> "Future[CompilationUnit]":
        """Run the passes now; failures are delivered through the future."""
        future: "Future[CompilationUnit]" = Future()
        try:
            future.set_result(self._run(task))
        except Exception as e:
            future.set_exception(e)
        return future

    def process_all(self, tasks: Sequence[Task],
                    max_workers: Optional[int] = None) -> List["Future[CompilationUnit]"]:
        """Futures in task order, all done on return."""
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return [pool.submit(self._run, task) for task in tasks]

    def _run(self, task: Task) -> CompilationUnit:
        logger.debug("processing %s", task.unit.source_file)
        return self.pass_manager.run_all(task.unit, self.facade)

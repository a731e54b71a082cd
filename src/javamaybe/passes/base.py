"""
Base Pass System

Pattern: a pass rewrites a CompilationUnit in place and returns it; the
PassManager runs registered passes in dependency order.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Set, Type

from ..resolution.facade import TypeFacade
from ..shared.nodes import CompilationUnit


class BasePass(ABC):
    """
    Base class for unit passes.

    - One instance per unit; the facade is the only shared state
    - Explicit dependencies via `requires`
    - Passes mutate the unit and return it
    """
    requires: List[Type['BasePass']] = []  # Dependencies (empty by default)

    def __init__(self, facade: TypeFacade):
        self.facade = facade

    @abstractmethod
    def run(self, unit: CompilationUnit) -> CompilationUnit:
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    - Passes run in topological order of `requires`
    - Ties keep registration order
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], Set[Type[BasePass]]] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        """Register a pass"""
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, unit: CompilationUnit, facade: TypeFacade) -> CompilationUnit:
        for pass_class in self._topological_sort():
            unit = pass_class(facade).run(unit)
        return unit

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        in_degree = {p: len(self._dependency_graph[p] & set(self.passes)) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular dependency detected in passes")

        return result

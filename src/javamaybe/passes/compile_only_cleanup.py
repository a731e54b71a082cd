"""
Post-specialization cleanup.

Removes what only exists for the specializer:
- imports of the marker type and of the CompileOnly annotation
- members (fields, methods, constructors, nested types) annotated @CompileOnly
"""

import logging
from typing import List, Optional, Set

from ..shared.nodes import (
    Annotation, BodyDeclaration, CompilationUnit, ImportDeclaration, Node, TypeDeclaration,
)
from ..shared.types import ReferenceType
from ..utils.config import ANY_QUALIFIED_NAME, COMPILE_ONLY_ANNOTATION, COMPILE_ONLY_QUALIFIED_NAME
from .any_replacement import AnyReplacementPass
from .base import BasePass

logger = logging.getLogger(__name__)

_SPECIALIZER_IMPORTS = frozenset({ANY_QUALIFIED_NAME, COMPILE_ONLY_QUALIFIED_NAME})


class CompileOnlyCleanupPass(BasePass):
    requires = [AnyReplacementPass]

    def run(self, unit: CompilationUnit, visited: Optional[Set[int]] = None) -> CompilationUnit:
        """visited holds ids of nodes already handled; each node is handled once."""
        if visited is None:
            visited = set()
        # Members first: annotation names resolve through the imports
        self._clean_members(unit.types, visited)
        for imp in list(unit.imports):
            if self._first_visit(imp, visited) and self._is_specializer_import(imp):
                logger.debug("removing import %s", imp.name)
                imp.remove()
        return unit

    def _clean_members(self, members: List[BodyDeclaration], visited: Set[int]) -> None:
        for member in list(members):
            if not self._first_visit(member, visited):
                continue
            if self._is_compile_only(member):
                logger.debug("removing @%s member %s", COMPILE_ONLY_ANNOTATION, getattr(member, "name", member))
                member.remove()
            elif isinstance(member, TypeDeclaration):
                self._clean_members(member.members, visited)

    def _is_compile_only(self, member: BodyDeclaration) -> bool:
        return any(self._is_compile_only_annotation(a, member) for a in member.annotations)

    def _is_compile_only_annotation(self, annotation: Annotation, context: Node) -> bool:
        if annotation.simple_name != COMPILE_ONLY_ANNOTATION:
            return False
        resolved = self.facade.solve_type_name(annotation.name, context)
        if isinstance(resolved, ReferenceType):
            return resolved.qualified_name == COMPILE_ONLY_QUALIFIED_NAME
        # Not resolvable: the simple name decides
        return True

    @staticmethod
    def _is_specializer_import(imp: ImportDeclaration) -> bool:
        return not imp.is_static and not imp.is_wildcard and imp.name in _SPECIALIZER_IMPORTS

    @staticmethod
    def _first_visit(node: Node, visited: Set[int]) -> bool:
        if id(node) in visited:
            return False
        visited.add(id(node))
        return True

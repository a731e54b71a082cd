"""
Fork context: which parameters of a method are marked Any, and which
concrete types reach each of them.

Pattern: TypeForkPath.construct(facade, method) reads the parameter list;
BuildTypeFork(path).run() then walks every call in the method's compilation
unit and records the normalized type of each argument that lands on a marked
parameter.

A call counts as a call of the method when:
- name and argument count match
- its target type is the method's declaring type (unqualified calls resolve
  to the innermost enclosing type that has a method of that name)
- every argument at an unmarked position is assignable to that parameter,
  which tells overloads of the same arity apart
"""

import logging
from typing import Dict, List, Optional

from ..resolution.facade import TypeFacade
from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    ClassTypeRef, CompilationUnit, MethodCallExpr, MethodDeclaration, Node, TypeRef,
)
from ..shared.types import ReferenceType, ResolvedType
from ..utils.config import ANY_TYPE_NAME
from . import type_normalizer

logger = logging.getLogger(__name__)


def is_marker_ref(ref: Optional[TypeRef]) -> bool:
    """Any or some.pkg.Any, written without type arguments."""
    return isinstance(ref, ClassTypeRef) and ref.name == ANY_TYPE_NAME and ref.type_arguments is None


def is_marker_type(ty: ResolvedType) -> bool:
    return isinstance(ty, ReferenceType) and ty.simple_name == ANY_TYPE_NAME and not ty.type_arguments


class TypeForkPath:
    """Marked parameter names in declaration order, each with its candidate types."""

    def __init__(self, facade: TypeFacade, method: MethodDeclaration):
        self.facade = facade
        self.method = method
        self._candidates: Dict[str, Dict[ResolvedType, None]] = {}

    @classmethod
    def construct(cls, facade: TypeFacade, method: MethodDeclaration) -> 'TypeForkPath':
        path = cls(facade, method)
        for param in method.parameters:
            if is_marker_ref(param.type) and not param.is_varargs:
                path._candidates[param.name] = {}
        return path

    def is_empty(self) -> bool:
        return not self._candidates

    @property
    def any_param_names(self) -> List[str]:
        return list(self._candidates)

    def is_any_param(self, name: str) -> bool:
        return name in self._candidates

    def position_of(self, name: str) -> int:
        for index, param in enumerate(self.method.parameters):
            if param.name == name:
                return index
        raise KeyError(name)

    def add_candidate(self, name: str, ty: ResolvedType) -> None:
        self._candidates[name][ty] = None

    def candidates(self, name: str) -> List[ResolvedType]:
        """Candidate types in order of first observation."""
        return list(self._candidates[name])

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={[t.describe() for t in types]}"
                          for name, types in self._candidates.items())
        return f"TypeForkPath({self.method.name}: {parts})"


class BuildTypeFork(ASTVisitor[None]):
    """Collects candidate types for a TypeForkPath from call sites."""

    def __init__(self, path: TypeForkPath):
        self.path = path
        self.facade = path.facade
        self.method = path.method
        self._declaring = self.facade.declaring_type(self.method)
        self._calls_seen = 0

    def run(self) -> TypeForkPath:
        if self.path.is_empty():
            return self.path
        root: Node = self.method.find_ancestor(CompilationUnit) or self.method
        root.accept(self)
        logger.debug("%s: %d matching call(s), %r", self.method.name, self._calls_seen, self.path)
        return self.path

    def visit_method_call_expr(self, node: MethodCallExpr) -> None:
        if self._calls_method(node):
            self._calls_seen += 1
            for index, param in enumerate(self.method.parameters):
                if not self.path.is_any_param(param.name):
                    continue
                arg_type = type_normalizer.get_type(node.arguments[index], self.facade)
                if is_marker_type(arg_type) or arg_type.is_void():
                    continue
                self.path.add_candidate(param.name, arg_type)
        self.generic_visit(node)

    def _calls_method(self, call: MethodCallExpr) -> bool:
        if call.name != self.method.name or len(call.arguments) != len(self.method.parameters):
            return False
        if self._declaring is None:
            return False
        target = self.facade.call_target_type(call)
        if target is None or target.qualified_name != self._declaring.qualified_name:
            return False
        for param, arg in zip(self.method.parameters, call.arguments):
            if self.path.is_any_param(param.name):
                continue
            if not self.facade.is_assignable(self.facade.get_type(param), self.facade.get_type(arg), call):
                return False
        return True

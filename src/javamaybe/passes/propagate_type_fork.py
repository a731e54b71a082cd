"""
Body rewriting for one specialization.

Pattern: PropagateTypeFork(parameter_map).apply(method) on a private clone.
Parameters get the combination's types; marker-typed constructs that only
see a forked name are retargeted to that name's concrete type:
- `(Any) x` casts
- `Any y = x;` locals (y is then forked too)
- `for (Any e : xs)` over a forked array
- `x instanceof Any` (`true` when x became a primitive)

A local, catch or loop variable with the same name as a forked one hides it
for the rest of its scope.
"""

import logging
from typing import Dict, Optional

from ..analysis.type_fork import is_marker_ref
from ..shared.ast_visitor import ScopedASTVisitor
from ..shared.nodes import (
    BlockStmt, CallableDeclaration, CastExpr, CatchClause, EnclosedExpr, Expression, ForEachStmt,
    ForStmt, InstanceOfExpr, LiteralExpr, LocalVarDeclStmt, NameExpr, SwitchEntry, TypeRef,
)
from ..shared.types import ArrayType, PrimitiveType, ResolvedType

logger = logging.getLogger(__name__)


class PropagateTypeFork(ScopedASTVisitor[None, Optional[ResolvedType]]):
    """
    Scope values: the concrete type of a forked name, None for a name that
    hides a forked one.
    """

    def __init__(self, parameter_map: Dict[str, ResolvedType]):
        super().__init__()
        self.parameter_map = parameter_map

    def apply(self, method: CallableDeclaration) -> CallableDeclaration:
        with self._scope():
            for param in method.parameters:
                concrete = self.parameter_map[param.name]
                if param.is_varargs and isinstance(concrete, ArrayType):
                    concrete = concrete.component
                forked = is_marker_ref(param.type)
                param.set_type(TypeRef.from_resolved(concrete))
                self._set_var(param.name, concrete if forked else None)
            if method.body is not None:
                self.visit(method.body)
        return method

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def visit_block_stmt(self, node: BlockStmt) -> None:
        with self._scope():
            self.generic_visit(node)

    def visit_switch_entry(self, node: SwitchEntry) -> None:
        with self._scope():
            self.generic_visit(node)

    def visit_for_stmt(self, node: ForStmt) -> None:
        with self._scope():
            self.generic_visit(node)

    def visit_catch_clause(self, node: CatchClause) -> None:
        with self._scope():
            self._set_var(node.name, None)
            self.generic_visit(node)

    def visit_for_each_stmt(self, node: ForEachStmt) -> None:
        self.visit(node.iterable)
        with self._scope():
            element: Optional[ResolvedType] = None
            if is_marker_ref(node.variable_type):
                iterated = self._forked_type(node.iterable)
                if isinstance(iterated, ArrayType):
                    element = iterated.component
                    node.set('variable_type', TypeRef.from_resolved(element))
            self._set_var(node.variable_name, element)
            self.visit(node.body)

    def visit_local_var_decl_stmt(self, node: LocalVarDeclStmt) -> None:
        # Initializers see the names declared before this statement
        self.generic_visit(node)
        concrete: Optional[ResolvedType] = None
        if is_marker_ref(node.type):
            sources = [self._forked_type(v.initializer) if v.initializer is not None else None
                       for v in node.variables]
            if sources and sources[0] is not None and all(s == sources[0] for s in sources):
                concrete = sources[0]
                node.set('type', TypeRef.from_resolved(concrete))
        for variable in node.variables:
            self._set_var(variable.name, concrete)

    # ------------------------------------------------------------------
    # Retargeting
    # ------------------------------------------------------------------

    def visit_cast_expr(self, node: CastExpr) -> None:
        # Outer casts first: `(Any) (Any) x` still sees x through the inner cast
        if is_marker_ref(node.type):
            concrete = self._forked_type(node.expression)
            if concrete is not None:
                node.set('type', TypeRef.from_resolved(concrete))
        self.generic_visit(node)

    def visit_instance_of_expr(self, node: InstanceOfExpr) -> None:
        if is_marker_ref(node.type):
            concrete = self._forked_type(node.expression)
            if isinstance(concrete, PrimitiveType):
                # A primitive is never null and always boxes to its own box type
                node.replace_with(LiteralExpr("boolean", "true", location=node.location))
                return
            if concrete is not None:
                node.set('type', TypeRef.from_resolved(concrete))
        self.generic_visit(node)

    def _forked_type(self, expr: Optional[Expression]) -> Optional[ResolvedType]:
        """Concrete type of expr when it is a forked name, seen through parentheses and marker casts."""
        while True:
            if isinstance(expr, EnclosedExpr):
                expr = expr.inner
            elif isinstance(expr, CastExpr) and is_marker_ref(expr.type):
                expr = expr.expression
            else:
                break
        if isinstance(expr, NameExpr):
            return self._get_var(expr.name)
        return None

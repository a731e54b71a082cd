"""
Type Facade: static types of AST nodes

Pattern: JavaParser symbol solver JavaParserFacade.getType(node)

Answers "what is the static type of this node" for expressions, parameters,
variable declarators and type references, against one TypeSolver.

Name lookup walks the AST outward from the node:
  locals declared earlier in enclosing blocks -> for / foreach / catch
  variables -> method parameters -> fields of enclosing types (and their
  supertypes) -> types (type parameters, member types, unit types, imports,
  same package, wildcard imports, java.lang, fully qualified names)

Resolution gaps are answers, not errors: UNRESOLVED (or a TypeVariable)
flows to the type normalizer.
"""

import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..shared.nodes import (
    ArrayAccessExpr, ArrayCreationExpr, ArrayInitializer, ArrayTypeRef, AssignExpr,
    BinaryExpr, BlockStmt, CallableDeclaration, CastExpr, CatchClause, ClassDeclaration,
    ClassExpr, ClassTypeRef, CompilationUnit, ConditionalExpr, EnclosedExpr, EnumDeclaration,
    Expression, FieldAccessExpr, FieldDeclaration, ForEachStmt, ForStmt, InstanceOfExpr,
    LiteralExpr, LocalVarDeclStmt, MethodCallExpr, NameExpr, Node, ObjectCreationExpr,
    Parameter, PrimitiveTypeRef, SuperExpr, SwitchEntry, ThisExpr, TypeDeclaration,
    TypeRef, UnaryExpr, VariableDeclarator, VoidTypeRef, WildcardTypeRef,
)
from ..shared.types import (
    ArrayType, BOOLEAN, BOXES, CLASS, INT, NULL, OBJECT, PRIMITIVES, PrimitiveType,
    ReferenceType, ResolvedType, STRING, TypeVariable, UNRESOLVED, VOID, WildcardType,
    binary_numeric_promotion, is_numeric, is_widening, unary_numeric_promotion, unbox,
)
from ..utils.config import IMPLICIT_IMPORT_PACKAGE
from .solvers import (
    MethodSignature, TypeDescriptor, TypeSolver, describe_declaration, find_type_in_unit,
)

logger = logging.getLogger(__name__)

_LITERAL_TYPES: Dict[str, ResolvedType] = {
    "int": PRIMITIVES["int"],
    "long": PRIMITIVES["long"],
    "float": PRIMITIVES["float"],
    "double": PRIMITIVES["double"],
    "char": PRIMITIVES["char"],
    "boolean": BOOLEAN,
    "string": STRING,
    "null": NULL,
}

_COMPARISON_OPS = {"<", ">", "<=", ">=", "==", "!=", "&&", "||"}
_ARITHMETIC_OPS = {"+", "-", "*", "/", "%"}
_BITWISE_OPS = {"&", "|", "^"}
_SHIFT_OPS = {"<<", ">>", ">>>"}


def box(ty: ResolvedType) -> ResolvedType:
    if isinstance(ty, PrimitiveType):
        return ReferenceType(BOXES[ty.name])
    return ty


class TypeFacade:
    """
    Static typing over one TypeSolver.

    The facade holds no caches: declarations change while a unit is being
    specialized, so every query reads the current tree.
    """

    def __init__(self, type_solver: TypeSolver):
        self.type_solver = type_solver

    # =========================================================================
    # Public API
    # =========================================================================

    def get_type(self, node: Node) -> ResolvedType:
        """Static type of node; UNRESOLVED when it cannot be determined."""
        if isinstance(node, Expression):
            return self._expression_type(node)
        if isinstance(node, Parameter):
            declared = self.resolve_type_ref(node.type)
            return ArrayType(declared) if node.is_varargs else declared
        if isinstance(node, VariableDeclarator):
            owner = node.parent
            if isinstance(owner, (LocalVarDeclStmt, FieldDeclaration)):
                return self.resolve_type_ref(owner.type)
            return UNRESOLVED
        if isinstance(node, TypeRef):
            return self.resolve_type_ref(node)
        return UNRESOLVED

    def resolve_type_ref(self, ref: Optional[TypeRef], type_variables: Tuple[str, ...] = (),
                         substitutions: Optional[Dict[str, ResolvedType]] = None) -> ResolvedType:
        """
        Resolve type syntax in the context of its position in the tree.

        type_variables names type parameters in scope that are not visible from
        the tree (built-in signatures); substitutions replaces type variables.
        """
        if ref is None:
            return UNRESOLVED
        if isinstance(ref, PrimitiveTypeRef):
            return PRIMITIVES[ref.name]
        if isinstance(ref, VoidTypeRef):
            return VOID
        if isinstance(ref, ArrayTypeRef):
            component = self.resolve_type_ref(ref.component, type_variables, substitutions)
            return ArrayType(component) if not component.is_unresolved() else UNRESOLVED
        if isinstance(ref, WildcardTypeRef):
            bound_ref = ref.extended if ref.extended is not None else ref.super_bound
            if bound_ref is None:
                return WildcardType()
            bound = self.resolve_type_ref(bound_ref, type_variables, substitutions)
            return WildcardType(bound, is_super=ref.super_bound is not None)
        if isinstance(ref, ClassTypeRef):
            return self._resolve_class_type(ref, type_variables, substitutions or {})
        return UNRESOLVED

    def solve_type_name(self, name: str, context: Optional[Node]) -> Optional[ResolvedType]:
        """Resolve a (possibly qualified) type name as seen from context."""
        first, _, rest = name.partition('.')
        resolved = self._solve_simple_type_name(first, context)
        if resolved is not None:
            if not rest:
                return resolved
            if isinstance(resolved, ReferenceType):
                nested = f"{resolved.qualified_name}.{rest}"
                if self.find_descriptor(nested, context) is not None:
                    return ReferenceType(nested)
            return None
        if rest and self.find_descriptor(name, context) is not None:
            return ReferenceType(name)
        return None

    def find_descriptor(self, qualified_name: str, context: Optional[Node] = None) -> Optional[TypeDescriptor]:
        """Types of the unit being processed first, then the solver."""
        unit = _unit_of(context)
        if unit is not None:
            decl = find_type_in_unit(unit, qualified_name)
            if decl is not None:
                return describe_declaration(decl, qualified_name)
        return self.type_solver.try_to_solve_type(qualified_name)

    def declaring_type(self, node: Node) -> Optional[ReferenceType]:
        decl = node if isinstance(node, TypeDeclaration) else node.find_ancestor(TypeDeclaration)
        if decl is None:
            return None
        return ReferenceType(decl.qualified_name)

    def call_target_type(self, call: MethodCallExpr) -> Optional[ReferenceType]:
        """
        The type whose method `call` invokes, before overload selection.

        Unqualified calls go to the innermost enclosing type declaring (or
        inheriting) a method of that name.
        """
        if call.scope is None:
            for decl in _enclosing_types(call):
                receiver = ReferenceType(decl.qualified_name)
                if self.find_methods(receiver, call.name, call):
                    return receiver
            return None
        if isinstance(call.scope, SuperExpr):
            return _erase(self._expression_type(call.scope))
        static_type = self._static_scope_type(call.scope)
        if static_type is not None:
            return static_type
        receiver = self._expression_type(call.scope)
        return _erase(receiver)

    def find_methods(self, receiver: ReferenceType, name: str,
                     context: Optional[Node] = None) -> List[Tuple[TypeDescriptor, MethodSignature]]:
        """Methods named name on receiver and its supertypes, nearest first."""
        found: List[Tuple[TypeDescriptor, MethodSignature]] = []
        for descriptor, _ in self._descriptor_hierarchy(receiver, context):
            for signature in descriptor.get_methods(name):
                found.append((descriptor, signature))
        return found

    def is_assignable(self, target: ResolvedType, source: ResolvedType,
                      context: Optional[Node] = None) -> bool:
        """
        Loose assignment compatibility (JLS 5.2, no generics checking).

        Unknown answers are compatible: an incomplete environment must not
        make a call site disappear.
        """
        if _is_gap(target) or _is_gap(source):
            return True
        if target == source:
            return True
        if target.is_primitive():
            return is_widening(source, target)
        if source.is_null():
            return not target.is_primitive()
        if source.is_primitive():
            source = box(source)
        if target == OBJECT:
            return True
        if isinstance(target, ArrayType):
            return isinstance(source, ArrayType) and self.is_assignable(target.component, source.component, context)
        if not isinstance(source, ReferenceType) or not isinstance(target, ReferenceType):
            return False
        if target.erasure() == source.erasure():
            return True
        saw_incomplete = False
        for descriptor, _ in self._descriptor_hierarchy(source, context):
            if descriptor.qualified_name == target.qualified_name:
                return True
            saw_incomplete = saw_incomplete or not descriptor.complete
        if self.find_descriptor(source.qualified_name, context) is None:
            return True
        return saw_incomplete

    # =========================================================================
    # Types
    # =========================================================================

    def _resolve_class_type(self, ref: ClassTypeRef, type_variables: Tuple[str, ...],
                            substitutions: Dict[str, ResolvedType]) -> ResolvedType:
        if ref.scope is None and ref.type_arguments is None:
            if ref.name in substitutions:
                return substitutions[ref.name]
            if ref.name in type_variables:
                return TypeVariable(ref.name)
        resolved = self.solve_type_name(ref.qualified_name, ref)
        if resolved is None:
            # Unknown to the environment: keep the name as written
            resolved = ReferenceType(ref.qualified_name)
        if isinstance(resolved, ReferenceType) and ref.type_arguments:
            arguments = tuple(self.resolve_type_ref(a, type_variables, substitutions)
                              for a in ref.type_arguments)
            resolved = ReferenceType(resolved.qualified_name, arguments)
        return resolved

    def _solve_simple_type_name(self, name: str, context: Optional[Node]) -> Optional[ResolvedType]:
        node = context
        while node is not None:
            if isinstance(node, (TypeDeclaration, CallableDeclaration)):
                if any(p.name == name for p in node.type_parameters):
                    return TypeVariable(name)
            if isinstance(node, TypeDeclaration):
                if node.name == name:
                    return ReferenceType(node.qualified_name)
                for member in node.member_types:
                    if member.name == name:
                        return ReferenceType(member.qualified_name)
            node = node.parent
        unit = _unit_of(context)
        if unit is not None:
            for decl in unit.types:
                if decl.name == name:
                    return ReferenceType(decl.qualified_name)
            for imp in unit.imports:
                if not imp.is_wildcard and not imp.is_static and imp.simple_name == name:
                    return ReferenceType(imp.name)
            if unit.package and self.type_solver.has_type(f"{unit.package}.{name}"):
                return ReferenceType(f"{unit.package}.{name}")
            for imp in unit.imports:
                if imp.is_wildcard and not imp.is_static and self.type_solver.has_type(f"{imp.name}.{name}"):
                    return ReferenceType(f"{imp.name}.{name}")
        implicit = f"{IMPLICIT_IMPORT_PACKAGE}.{name}"
        if self.type_solver.has_type(implicit):
            return ReferenceType(implicit)
        return None

    def _descriptor_hierarchy(self, start: ReferenceType, context: Optional[Node]
                              ) -> Iterator[Tuple[TypeDescriptor, Dict[str, ResolvedType]]]:
        """Breadth-first over start and its supertypes, ending with Object."""
        queue: List[Tuple[ReferenceType, Optional[Node]]] = [(start, context)]
        seen: Set[str] = set()
        while queue:
            current, ctx = queue.pop(0)
            if current.qualified_name in seen:
                continue
            seen.add(current.qualified_name)
            descriptor = self.find_descriptor(current.qualified_name, ctx)
            if descriptor is None:
                continue
            substitutions = dict(zip(descriptor.type_parameters, map(_capture, current.type_arguments)))
            yield descriptor, substitutions
            for super_ref in descriptor.supertypes:
                supertype = self.resolve_type_ref(super_ref, tuple(descriptor.type_parameters), substitutions)
                if isinstance(supertype, ReferenceType):
                    queue.append((supertype, super_ref if super_ref.parent is not None else None))
            if isinstance(descriptor.declaration, EnumDeclaration):
                queue.append((ReferenceType("java.lang.Enum", (ReferenceType(descriptor.qualified_name),)), None))
            if not queue and OBJECT.qualified_name not in seen:
                queue.append((OBJECT, None))

    # =========================================================================
    # Expressions
    # =========================================================================

    def _expression_type(self, expr: Expression) -> ResolvedType:
        handler = getattr(self, "_type_of_" + expr._visit_name, None)
        if handler is None:
            return UNRESOLVED
        result = handler(expr)
        return result if result is not None else UNRESOLVED

    def _type_of_literal_expr(self, expr: LiteralExpr) -> ResolvedType:
        return _LITERAL_TYPES.get(expr.kind, UNRESOLVED)

    def _type_of_enclosed_expr(self, expr: EnclosedExpr) -> ResolvedType:
        return self._expression_type(expr.inner)

    def _type_of_this_expr(self, expr: ThisExpr) -> ResolvedType:
        return self.declaring_type(expr) or UNRESOLVED

    def _type_of_super_expr(self, expr: SuperExpr) -> ResolvedType:
        decl = expr.find_ancestor(TypeDeclaration)
        if isinstance(decl, ClassDeclaration) and not decl.is_interface and decl.extended_types:
            return self.resolve_type_ref(decl.extended_types[0])
        return OBJECT

    def _type_of_name_expr(self, expr: NameExpr) -> ResolvedType:
        variable = self._find_variable(expr.name, expr)
        if variable is not None:
            return variable
        # A type used as a scope (Math in Math.max) has its own type
        return self.solve_type_name(expr.name, expr) or UNRESOLVED

    def _type_of_field_access_expr(self, expr: FieldAccessExpr) -> ResolvedType:
        static_type = self._static_scope_type(expr.scope)
        if static_type is not None:
            return self._field_type(static_type, expr.name, expr) or UNRESOLVED
        qualified = _dotted_name(expr)
        if qualified is not None and self._find_variable(qualified.split('.')[0], expr) is None:
            as_type = self.solve_type_name(qualified, expr)
            if as_type is not None:
                return as_type
        scope_type = self._expression_type(expr.scope)
        if isinstance(scope_type, ArrayType) and expr.name == "length":
            return INT
        if isinstance(scope_type, ReferenceType):
            return self._field_type(scope_type, expr.name, expr) or UNRESOLVED
        return UNRESOLVED

    def _type_of_method_call_expr(self, expr: MethodCallExpr) -> ResolvedType:
        receiver = self.call_target_type(expr)
        if receiver is None:
            return UNRESOLVED
        if expr.scope is not None and not isinstance(expr.scope, SuperExpr):
            scope_type = self._expression_type(expr.scope)
            if isinstance(scope_type, ReferenceType) and scope_type.qualified_name == receiver.qualified_name:
                receiver = scope_type
            elif isinstance(scope_type, ArrayType):
                receiver = OBJECT
        argument_types = [self._expression_type(a) for a in expr.arguments]
        best = self._select_overload(receiver, expr, argument_types)
        if best is None:
            logger.debug("no method %s/%d on %s", expr.name, len(expr.arguments), receiver.describe())
            return UNRESOLVED
        descriptor, signature, substitutions = best
        type_variables = tuple(descriptor.type_parameters) + tuple(signature.type_parameters)
        inferred = dict(substitutions)
        for param_ref, arg_type in zip(signature.parameter_types, argument_types):
            if (isinstance(param_ref, ClassTypeRef) and param_ref.scope is None
                    and param_ref.name in signature.type_parameters and not _is_gap(arg_type)):
                inferred.setdefault(param_ref.name, box(arg_type))
        return self.resolve_type_ref(signature.return_type, type_variables, inferred)

    def _type_of_object_creation_expr(self, expr: ObjectCreationExpr) -> ResolvedType:
        return self.resolve_type_ref(expr.type)

    def _type_of_array_creation_expr(self, expr: ArrayCreationExpr) -> ResolvedType:
        result = self.resolve_type_ref(expr.element_type)
        if result.is_unresolved():
            return UNRESOLVED
        for _ in range(expr.rank):
            result = ArrayType(result)
        return result

    def _type_of_array_initializer(self, expr: ArrayInitializer) -> ResolvedType:
        owner = expr.parent
        if isinstance(owner, VariableDeclarator):
            return self.get_type(owner)
        if isinstance(owner, ArrayCreationExpr):
            return self._expression_type(owner)
        if isinstance(owner, ArrayInitializer):
            enclosing = self._expression_type(owner)
            return enclosing.component if isinstance(enclosing, ArrayType) else UNRESOLVED
        return UNRESOLVED

    def _type_of_array_access_expr(self, expr: ArrayAccessExpr) -> ResolvedType:
        array_type = self._expression_type(expr.array)
        if isinstance(array_type, ArrayType):
            return array_type.component
        return UNRESOLVED

    def _type_of_cast_expr(self, expr: CastExpr) -> ResolvedType:
        return self.resolve_type_ref(expr.type)

    def _type_of_instance_of_expr(self, expr: InstanceOfExpr) -> ResolvedType:
        return BOOLEAN

    def _type_of_class_expr(self, expr: ClassExpr) -> ResolvedType:
        return ReferenceType(CLASS.qualified_name, (box(self.resolve_type_ref(expr.type)),))

    def _type_of_binary_expr(self, expr: BinaryExpr) -> ResolvedType:
        op = expr.operator
        if op in _COMPARISON_OPS:
            return BOOLEAN
        left = self._expression_type(expr.left)
        right = self._expression_type(expr.right)
        if op == "+" and STRING in (left, right):
            return STRING
        if op in _SHIFT_OPS:
            return unary_numeric_promotion(left) or UNRESOLVED
        if op in _BITWISE_OPS and unbox(left) == BOOLEAN and unbox(right) == BOOLEAN:
            return BOOLEAN
        if op in _ARITHMETIC_OPS or op in _BITWISE_OPS:
            return binary_numeric_promotion(left, right) or UNRESOLVED
        return UNRESOLVED

    def _type_of_unary_expr(self, expr: UnaryExpr) -> ResolvedType:
        operand = self._expression_type(expr.expression)
        if expr.operator == "!":
            return BOOLEAN
        if expr.operator in ("++", "--"):
            return operand
        return unary_numeric_promotion(operand) or UNRESOLVED

    def _type_of_assign_expr(self, expr: AssignExpr) -> ResolvedType:
        return self._expression_type(expr.target)

    def _type_of_conditional_expr(self, expr: ConditionalExpr) -> ResolvedType:
        then_type = self._expression_type(expr.then_expr)
        else_type = self._expression_type(expr.else_expr)
        if then_type == else_type:
            return then_type
        if then_type.is_null():
            return box(else_type)
        if else_type.is_null():
            return box(then_type)
        if is_numeric(unbox(then_type)) and is_numeric(unbox(else_type)):
            return binary_numeric_promotion(then_type, else_type) or UNRESOLVED
        if _is_gap(then_type) or _is_gap(else_type):
            return UNRESOLVED
        return OBJECT

    # =========================================================================
    # Lookup helpers
    # =========================================================================

    def _static_scope_type(self, scope: Expression) -> Optional[ReferenceType]:
        """The type named by scope when it names a type rather than a value."""
        qualified = _dotted_name(scope)
        if qualified is None:
            return None
        if self._find_variable(qualified.split('.')[0], scope) is not None:
            return None
        resolved = self.solve_type_name(qualified, scope)
        return resolved if isinstance(resolved, ReferenceType) else None

    def _select_overload(self, receiver: ReferenceType, call: MethodCallExpr,
                         argument_types: List[ResolvedType]
                         ) -> Optional[Tuple[TypeDescriptor, MethodSignature, Dict[str, ResolvedType]]]:
        fallback = None
        for descriptor, substitutions in self._descriptor_hierarchy(receiver, call):
            for signature in descriptor.get_methods(call.name):
                if not signature.accepts_arity(len(argument_types)):
                    continue
                if fallback is None:
                    fallback = (descriptor, signature, substitutions)
                type_variables = tuple(descriptor.type_parameters) + tuple(signature.type_parameters)
                parameter_types = [self.resolve_type_ref(p, type_variables, substitutions)
                                   for p in signature.parameter_types]
                if signature.is_varargs and parameter_types:
                    last = parameter_types[-1]
                    if isinstance(last, ArrayType) and not (
                            len(argument_types) == len(parameter_types)
                            and isinstance(argument_types[-1], ArrayType)):
                        extra = len(argument_types) - len(parameter_types) + 1
                        parameter_types = parameter_types[:-1] + [last.component] * extra
                if all(self.is_assignable(p, a, call) for p, a in zip(parameter_types, argument_types)):
                    return descriptor, signature, substitutions
        return fallback

    def _field_type(self, owner: ReferenceType, name: str, context: Node) -> Optional[ResolvedType]:
        for descriptor, substitutions in self._descriptor_hierarchy(owner, context):
            field = descriptor.fields.get(name)
            if field is not None:
                return self.resolve_type_ref(field.type, tuple(descriptor.type_parameters), substitutions)
            decl = descriptor.declaration
            if isinstance(decl, EnumDeclaration) and any(e.name == name for e in decl.entries):
                return ReferenceType(descriptor.qualified_name)
            if name in descriptor.member_types:
                return ReferenceType(f"{descriptor.qualified_name}.{name}")
        return None

    def _find_variable(self, name: str, node: Node) -> Optional[ResolvedType]:
        """Type of the variable `name` visible at node, or None."""
        child: Node = node
        scope = node.parent
        while scope is not None:
            if isinstance(scope, (BlockStmt, SwitchEntry)):
                for stmt in scope.statements:
                    if stmt is child:
                        break
                    found = _declared_in(stmt, name)
                    if found is not None:
                        return self.resolve_type_ref(found)
            elif isinstance(scope, LocalVarDeclStmt):
                for var in scope.variables:
                    if var is child:
                        break
                    if var.name == name:
                        return self.resolve_type_ref(scope.type)
            elif isinstance(scope, ForStmt):
                for init in scope.initialization:
                    if init is child:
                        break
                    found = _declared_in(init, name)
                    if found is not None:
                        return self.resolve_type_ref(found)
            elif isinstance(scope, ForEachStmt):
                if child is not scope.iterable and scope.variable_name == name:
                    return self.resolve_type_ref(scope.variable_type)
            elif isinstance(scope, CatchClause):
                if scope.name == name:
                    return self.resolve_type_ref(scope.types[0]) if len(scope.types) == 1 else ReferenceType("java.lang.Throwable")
            elif isinstance(scope, CallableDeclaration):
                param = scope.get_parameter_by_name(name)
                if param is not None:
                    return self.get_type(param)
            elif isinstance(scope, TypeDeclaration):
                found_type = self._field_type(ReferenceType(scope.qualified_name), name, scope)
                if found_type is not None and not _is_member_type_name(scope, name):
                    return found_type
            child, scope = scope, scope.parent
        return None


# ============================================================================
# Module helpers
# ============================================================================

def _unit_of(node: Optional[Node]) -> Optional[CompilationUnit]:
    if node is None:
        return None
    if isinstance(node, CompilationUnit):
        return node
    return node.find_ancestor(CompilationUnit)


def _enclosing_types(node: Node) -> Iterator[TypeDeclaration]:
    decl = node.find_ancestor(TypeDeclaration)
    while decl is not None:
        yield decl
        decl = decl.find_ancestor(TypeDeclaration)


def _declared_in(stmt: Node, name: str) -> Optional[TypeRef]:
    if isinstance(stmt, LocalVarDeclStmt):
        for var in stmt.variables:
            if var.name == name:
                return stmt.type
    return None


def _dotted_name(expr: Expression) -> Optional[str]:
    """a.b.c for a chain of names and field accesses, else None."""
    if isinstance(expr, NameExpr):
        return expr.name
    if isinstance(expr, FieldAccessExpr):
        scope = _dotted_name(expr.scope)
        return f"{scope}.{expr.name}" if scope is not None else None
    return None


def _is_member_type_name(decl: TypeDeclaration, name: str) -> bool:
    return any(t.name == name for t in decl.member_types)


def _is_gap(ty: ResolvedType) -> bool:
    return ty.is_unresolved() or ty.is_type_variable()


def _erase(ty: ResolvedType) -> Optional[ReferenceType]:
    if isinstance(ty, ReferenceType):
        return ty.erasure()
    return None


def _capture(ty: ResolvedType) -> ResolvedType:
    """Member types of C<? extends X> read as if declared on C<X>."""
    if isinstance(ty, WildcardType):
        return ty.upper_bound()
    return ty

"""
Java AST (Abstract Syntax Tree) Definitions

Pattern: JavaParser com.github.javaparser.ast

Visitor Pattern Support:
- Every node has accept(visitor), dispatching to visitor.visit_<snake_name>
  (MethodDeclaration -> visit_method_declaration), falling back to
  visitor.generic_visit when the visitor does not handle that node type
- _fields lists the child attributes (nodes or lists of nodes) in source order

Ownership:
- Every node knows its parent; link_parents() sets the links for a subtree
- clone() deep-copies a subtree; the copy has no parent until it is inserted
"""

from __future__ import annotations

import copy
import re
from typing import Any, Iterator, List, Optional, Tuple, Type, TypeVar, TYPE_CHECKING

from .source_location import SourceLocation
from .types import (
    ResolvedType, PrimitiveType, ReferenceType, ArrayType, TypeVariable, WildcardType, OBJECT,
)

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')
N = TypeVar('N', bound='Node')

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


class Node:
    """
    Base class for all AST nodes

    Compile-time optimization:
    - __slots__ for memory efficiency and attribute checking
    """
    __slots__ = ('location', 'parent')
    _fields: Tuple[str, ...] = ()
    _visit_name: str = "node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._visit_name = _CAMEL_BOUNDARY.sub('_', cls.__name__).lower()

    def __init__(self, location: Optional[SourceLocation] = None):
        self.location = location
        self.parent: Optional[Node] = None

    def accept(self, visitor: 'ASTVisitor[T]') -> T:
        method = getattr(visitor, "visit_" + self._visit_name, None)
        if method is None:
            return visitor.generic_visit(self)
        return method(self)

    # ------------------------------------------------------------------
    # Tree structure
    # ------------------------------------------------------------------

    def iter_children(self) -> Iterator['Node']:
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    def walk(self) -> Iterator['Node']:
        """Pre-order walk of the subtree, self included (document order)."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.iter_children())))

    def find_all(self, cls: Type[N]) -> List[N]:
        return [n for n in self.walk() if isinstance(n, cls)]

    def link_parents(self) -> 'Node':
        for node in self.walk():
            for child in node.iter_children():
                child.parent = node
        return self

    def find_ancestor(self, *classes: type) -> Optional[Any]:
        node = self.parent
        while node is not None:
            if isinstance(node, classes):
                return node
            node = node.parent
        return None

    def set(self, name: str, value: Any) -> None:
        """Assign a child field and adopt the new child(ren)."""
        setattr(self, name, value)
        if isinstance(value, Node):
            value.parent = self
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    item.parent = self

    def remove(self) -> bool:
        """Detach this node from the parent's child list it lives in."""
        parent = self.parent
        if parent is None:
            return False
        for name in parent._fields:
            value = getattr(parent, name)
            if isinstance(value, list):
                for index, item in enumerate(value):
                    if item is self:
                        del value[index]
                        self.parent = None
                        return True
        return False

    def replace_with(self, replacement: 'Node') -> bool:
        """Put replacement where this node sits in its parent."""
        parent = self.parent
        if parent is None:
            return False
        for name in parent._fields:
            value = getattr(parent, name)
            if value is self:
                parent.set(name, replacement)
            elif isinstance(value, list) and any(item is self for item in value):
                value[:] = [replacement if item is self else item for item in value]
                replacement.parent = parent
            else:
                continue
            self.parent = None
            return True
        return False

    def clone(self: N) -> N:
        """Deep copy of this subtree; the parent is not copied."""
        memo = {id(self.parent): None} if self.parent is not None else {}
        return copy.deepcopy(self, memo)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} at {self.location}>"


# ============================================================================
# Compilation unit, imports, annotations
# ============================================================================

class CompilationUnit(Node):
    __slots__ = ('package', 'imports', 'types', 'source_file')
    _fields = ('imports', 'types')

    def __init__(self, package: Optional[str], imports: List['ImportDeclaration'],
                 types: List['TypeDeclaration'], source_file: str = "<unknown>",
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.package = package
        self.imports = imports
        self.types = types
        self.source_file = source_file


class ImportDeclaration(Node):
    __slots__ = ('name', 'is_static', 'is_wildcard')

    def __init__(self, name: str, is_static: bool = False, is_wildcard: bool = False,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.is_static = is_static
        self.is_wildcard = is_wildcard

    @property
    def simple_name(self) -> str:
        return self.name.rsplit('.', 1)[-1]


class Annotation(Node):
    """@Name, @Name(value) or @Name(key = value, ...)."""
    __slots__ = ('name', 'pairs')
    _fields = ('pairs',)

    def __init__(self, name: str, pairs: Optional[List['MemberValuePair']] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.pairs = pairs if pairs is not None else []

    @property
    def simple_name(self) -> str:
        return self.name.rsplit('.', 1)[-1]


class MemberValuePair(Node):
    """Annotation argument; name is None for the single-value form."""
    __slots__ = ('name', 'value')
    _fields = ('value',)

    def __init__(self, name: Optional[str], value: Node, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.value = value


# ============================================================================
# Type references (syntax; see shared/types.py for resolved types)
# ============================================================================

class TypeRef(Node):
    __slots__ = ()

    @staticmethod
    def from_resolved(resolved: ResolvedType) -> 'TypeRef':
        """Build the syntax for a resolved type, spelled as source_name() spells it."""
        if isinstance(resolved, PrimitiveType):
            return PrimitiveTypeRef(resolved.name)
        if isinstance(resolved, ArrayType):
            return ArrayTypeRef(TypeRef.from_resolved(resolved.component))
        if isinstance(resolved, TypeVariable):
            return ClassTypeRef(None, resolved.name)
        if isinstance(resolved, WildcardType):
            if resolved.bound is None:
                return WildcardTypeRef()
            bound = TypeRef.from_resolved(resolved.bound)
            if resolved.is_super:
                return WildcardTypeRef(super_bound=bound).link_parents()
            return WildcardTypeRef(extended=bound).link_parents()
        if not isinstance(resolved, ReferenceType):
            resolved = OBJECT
        spelled = resolved.source_name().split('<', 1)[0]
        scope: Optional[ClassTypeRef] = None
        for part in spelled.split('.'):
            scope = ClassTypeRef(scope, part)
        if resolved.type_arguments:
            scope.set('type_arguments', [TypeRef.from_resolved(t) for t in resolved.type_arguments])
        return scope.link_parents()


class PrimitiveTypeRef(TypeRef):
    __slots__ = ('name',)

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name


class VoidTypeRef(TypeRef):
    __slots__ = ()


class ClassTypeRef(TypeRef):
    """
    Class or interface type, possibly qualified (scope) and parameterized.

    type_arguments is None when no <...> was written, [] for the diamond <>.
    """
    __slots__ = ('scope', 'name', 'type_arguments')
    _fields = ('scope', 'type_arguments')

    def __init__(self, scope: Optional['ClassTypeRef'], name: str,
                 type_arguments: Optional[List[TypeRef]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.scope = scope
        self.name = name
        self.type_arguments = type_arguments

    @property
    def qualified_name(self) -> str:
        if self.scope is None:
            return self.name
        return f"{self.scope.qualified_name}.{self.name}"


class ArrayTypeRef(TypeRef):
    __slots__ = ('component',)
    _fields = ('component',)

    def __init__(self, component: TypeRef, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.component = component


class WildcardTypeRef(TypeRef):
    __slots__ = ('extended', 'super_bound')
    _fields = ('extended', 'super_bound')

    def __init__(self, extended: Optional[TypeRef] = None, super_bound: Optional[TypeRef] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.extended = extended
        self.super_bound = super_bound


class TypeParameter(Node):
    __slots__ = ('name', 'bounds')
    _fields = ('bounds',)

    def __init__(self, name: str, bounds: Optional[List[ClassTypeRef]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.bounds = bounds if bounds is not None else []


# ============================================================================
# Declarations
# ============================================================================

class BodyDeclaration(Node):
    __slots__ = ('modifiers', 'annotations')

    def __init__(self, modifiers: Optional[List[str]] = None,
                 annotations: Optional[List[Annotation]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.modifiers = modifiers if modifiers is not None else []
        self.annotations = annotations if annotations is not None else []

    def is_static(self) -> bool:
        return "static" in self.modifiers

    def has_annotation(self, simple_name: str) -> bool:
        return any(a.simple_name == simple_name for a in self.annotations)


class TypeDeclaration(BodyDeclaration):
    __slots__ = ('name', 'type_parameters', 'members')

    def __init__(self, name: str, members: List[BodyDeclaration],
                 type_parameters: Optional[List[TypeParameter]] = None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.members = members
        self.type_parameters = type_parameters if type_parameters is not None else []

    @property
    def methods(self) -> List['MethodDeclaration']:
        return [m for m in self.members if isinstance(m, MethodDeclaration)]

    @property
    def fields(self) -> List['FieldDeclaration']:
        return [m for m in self.members if isinstance(m, FieldDeclaration)]

    @property
    def member_types(self) -> List['TypeDeclaration']:
        return [m for m in self.members if isinstance(m, TypeDeclaration)]

    def get_methods_by_name(self, name: str) -> List['MethodDeclaration']:
        return [m for m in self.methods if m.name == name]

    def insert_member(self, index: int, member: BodyDeclaration) -> None:
        self.members.insert(index, member)
        member.parent = self

    @property
    def qualified_name(self) -> str:
        """Package and enclosing types joined with '.'."""
        outer = self.find_ancestor(TypeDeclaration)
        if outer is not None:
            return f"{outer.qualified_name}.{self.name}"
        unit = self.find_ancestor(CompilationUnit)
        if unit is not None and unit.package:
            return f"{unit.package}.{self.name}"
        return self.name


class ClassDeclaration(TypeDeclaration):
    """Class or interface (is_interface)."""
    __slots__ = ('is_interface', 'extended_types', 'implemented_types')
    _fields = ('annotations', 'type_parameters', 'extended_types', 'implemented_types', 'members')

    def __init__(self, name: str, members: List[BodyDeclaration], is_interface: bool = False,
                 extended_types: Optional[List[ClassTypeRef]] = None,
                 implemented_types: Optional[List[ClassTypeRef]] = None, **kwargs):
        super().__init__(name, members, **kwargs)
        self.is_interface = is_interface
        self.extended_types = extended_types if extended_types is not None else []
        self.implemented_types = implemented_types if implemented_types is not None else []


class EnumDeclaration(TypeDeclaration):
    __slots__ = ('implemented_types', 'entries')
    _fields = ('annotations', 'implemented_types', 'entries', 'members')

    def __init__(self, name: str, entries: List['EnumConstant'], members: List[BodyDeclaration],
                 implemented_types: Optional[List[ClassTypeRef]] = None, **kwargs):
        super().__init__(name, members, **kwargs)
        self.entries = entries
        self.implemented_types = implemented_types if implemented_types is not None else []


class EnumConstant(Node):
    __slots__ = ('name', 'arguments', 'annotations')
    _fields = ('annotations', 'arguments')

    def __init__(self, name: str, arguments: Optional[List['Expression']] = None,
                 annotations: Optional[List[Annotation]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.arguments = arguments
        self.annotations = annotations if annotations is not None else []


class VariableDeclarator(Node):
    """One name in a field or local declaration; the initializer may be an ArrayInitializer."""
    __slots__ = ('name', 'initializer')
    _fields = ('initializer',)

    def __init__(self, name: str, initializer: Optional[Node] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name
        self.initializer = initializer


class FieldDeclaration(BodyDeclaration):
    __slots__ = ('type', 'variables')
    _fields = ('annotations', 'type', 'variables')

    def __init__(self, type: TypeRef, variables: List[VariableDeclarator], **kwargs):
        super().__init__(**kwargs)
        self.type = type
        self.variables = variables


class Parameter(Node):
    __slots__ = ('modifiers', 'annotations', 'type', 'name', 'is_varargs')
    _fields = ('annotations', 'type')

    def __init__(self, type: TypeRef, name: str, is_varargs: bool = False,
                 modifiers: Optional[List[str]] = None,
                 annotations: Optional[List[Annotation]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.type = type
        self.name = name
        self.is_varargs = is_varargs
        self.modifiers = modifiers if modifiers is not None else []
        self.annotations = annotations if annotations is not None else []

    def set_type(self, type: TypeRef) -> 'Parameter':
        self.set('type', type)
        return self


class CallableDeclaration(BodyDeclaration):
    __slots__ = ('name', 'type_parameters', 'parameters', 'thrown_types', 'body')

    def __init__(self, name: str, parameters: List[Parameter],
                 body: Optional['BlockStmt'] = None,
                 type_parameters: Optional[List[TypeParameter]] = None,
                 thrown_types: Optional[List[ClassTypeRef]] = None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.parameters = parameters
        self.body = body
        self.type_parameters = type_parameters if type_parameters is not None else []
        self.thrown_types = thrown_types if thrown_types is not None else []

    def get_parameter(self, index: int) -> Parameter:
        return self.parameters[index]

    def get_parameter_by_name(self, name: str) -> Optional[Parameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def set_parameters(self, parameters: List[Parameter]) -> None:
        self.set('parameters', list(parameters))


class MethodDeclaration(CallableDeclaration):
    __slots__ = ('return_type',)
    _fields = ('annotations', 'type_parameters', 'return_type', 'parameters', 'thrown_types', 'body')

    def __init__(self, name: str, return_type: TypeRef, parameters: List[Parameter], **kwargs):
        super().__init__(name, parameters, **kwargs)
        self.return_type = return_type


class ConstructorDeclaration(CallableDeclaration):
    __slots__ = ()
    _fields = ('annotations', 'type_parameters', 'parameters', 'thrown_types', 'body')


class InitializerDeclaration(BodyDeclaration):
    __slots__ = ('body',)
    _fields = ('body',)

    def __init__(self, body: 'BlockStmt', **kwargs):
        super().__init__(**kwargs)
        self.body = body


# ============================================================================
# Statements
# ============================================================================

class Statement(Node):
    __slots__ = ()


class BlockStmt(Statement):
    __slots__ = ('statements',)
    _fields = ('statements',)

    def __init__(self, statements: List[Statement], location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.statements = statements


class LocalVarDeclStmt(Statement):
    """Local variable declaration; also used for the init part of a basic for."""
    __slots__ = ('modifiers', 'annotations', 'type', 'variables')
    _fields = ('annotations', 'type', 'variables')

    def __init__(self, type: TypeRef, variables: List[VariableDeclarator],
                 modifiers: Optional[List[str]] = None,
                 annotations: Optional[List[Annotation]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.type = type
        self.variables = variables
        self.modifiers = modifiers if modifiers is not None else []
        self.annotations = annotations if annotations is not None else []


class ExpressionStmt(Statement):
    __slots__ = ('expression',)
    _fields = ('expression',)

    def __init__(self, expression: 'Expression', location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.expression = expression


class IfStmt(Statement):
    __slots__ = ('condition', 'then_stmt', 'else_stmt')
    _fields = ('condition', 'then_stmt', 'else_stmt')

    def __init__(self, condition: 'Expression', then_stmt: Statement,
                 else_stmt: Optional[Statement] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.condition = condition
        self.then_stmt = then_stmt
        self.else_stmt = else_stmt


class WhileStmt(Statement):
    __slots__ = ('condition', 'body')
    _fields = ('condition', 'body')

    def __init__(self, condition: 'Expression', body: Statement, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.condition = condition
        self.body = body


class DoStmt(Statement):
    __slots__ = ('body', 'condition')
    _fields = ('body', 'condition')

    def __init__(self, body: Statement, condition: 'Expression', location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.body = body
        self.condition = condition


class ForStmt(Statement):
    __slots__ = ('initialization', 'condition', 'update', 'body')
    _fields = ('initialization', 'condition', 'update', 'body')

    def __init__(self, initialization: List[Node], condition: Optional['Expression'],
                 update: List['Expression'], body: Statement,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.initialization = initialization
        self.condition = condition
        self.update = update
        self.body = body


class ForEachStmt(Statement):
    __slots__ = ('modifiers', 'variable_type', 'variable_name', 'iterable', 'body')
    _fields = ('variable_type', 'iterable', 'body')

    def __init__(self, variable_type: TypeRef, variable_name: str, iterable: 'Expression',
                 body: Statement, modifiers: Optional[List[str]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.variable_type = variable_type
        self.variable_name = variable_name
        self.iterable = iterable
        self.body = body
        self.modifiers = modifiers if modifiers is not None else []


class ReturnStmt(Statement):
    __slots__ = ('expression',)
    _fields = ('expression',)

    def __init__(self, expression: Optional['Expression'] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.expression = expression


class BreakStmt(Statement):
    __slots__ = ('label',)

    def __init__(self, label: Optional[str] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.label = label


class ContinueStmt(Statement):
    __slots__ = ('label',)

    def __init__(self, label: Optional[str] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.label = label


class ThrowStmt(Statement):
    __slots__ = ('expression',)
    _fields = ('expression',)

    def __init__(self, expression: 'Expression', location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.expression = expression


class EmptyStmt(Statement):
    __slots__ = ()


class CatchClause(Node):
    __slots__ = ('modifiers', 'types', 'name', 'body')
    _fields = ('types', 'body')

    def __init__(self, types: List[TypeRef], name: str, body: BlockStmt,
                 modifiers: Optional[List[str]] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.types = types
        self.name = name
        self.body = body
        self.modifiers = modifiers if modifiers is not None else []


class TryStmt(Statement):
    __slots__ = ('try_block', 'catch_clauses', 'finally_block')
    _fields = ('try_block', 'catch_clauses', 'finally_block')

    def __init__(self, try_block: BlockStmt, catch_clauses: List[CatchClause],
                 finally_block: Optional[BlockStmt] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.try_block = try_block
        self.catch_clauses = catch_clauses
        self.finally_block = finally_block


class SwitchEntry(Node):
    """Labels (None stands for default) followed by the statements of that group."""
    __slots__ = ('labels', 'statements')
    _fields = ('labels', 'statements')

    def __init__(self, labels: List[Optional['Expression']], statements: List[Statement],
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.labels = labels
        self.statements = statements


class SwitchStmt(Statement):
    __slots__ = ('selector', 'entries')
    _fields = ('selector', 'entries')

    def __init__(self, selector: 'Expression', entries: List[SwitchEntry],
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.selector = selector
        self.entries = entries


class SynchronizedStmt(Statement):
    __slots__ = ('expression', 'body')
    _fields = ('expression', 'body')

    def __init__(self, expression: 'Expression', body: BlockStmt, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.expression = expression
        self.body = body


class AssertStmt(Statement):
    __slots__ = ('check', 'message')
    _fields = ('check', 'message')

    def __init__(self, check: 'Expression', message: Optional['Expression'] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.check = check
        self.message = message


class ExplicitConstructorInvocationStmt(Statement):
    """this(...) or super(...) as the first statement of a constructor."""
    __slots__ = ('is_this', 'arguments')
    _fields = ('arguments',)

    def __init__(self, is_this: bool, arguments: List['Expression'], location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.is_this = is_this
        self.arguments = arguments


# ============================================================================
# Expressions
# ============================================================================

class Expression(Node):
    __slots__ = ()


class LiteralExpr(Expression):
    """
    Literal; value is the source text.

    kind: int, long, float, double, char, string, boolean, null
    """
    __slots__ = ('kind', 'value')

    def __init__(self, kind: str, value: str, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.kind = kind
        self.value = value


class NameExpr(Expression):
    __slots__ = ('name',)

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name


class ThisExpr(Expression):
    __slots__ = ()


class SuperExpr(Expression):
    __slots__ = ()


class FieldAccessExpr(Expression):
    __slots__ = ('scope', 'name')
    _fields = ('scope',)

    def __init__(self, scope: Expression, name: str, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.scope = scope
        self.name = name


class MethodCallExpr(Expression):
    __slots__ = ('scope', 'name', 'arguments')
    _fields = ('scope', 'arguments')

    def __init__(self, scope: Optional[Expression], name: str, arguments: List[Expression],
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.scope = scope
        self.name = name
        self.arguments = arguments


class ObjectCreationExpr(Expression):
    __slots__ = ('type', 'arguments')
    _fields = ('type', 'arguments')

    def __init__(self, type: ClassTypeRef, arguments: List[Expression], location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.type = type
        self.arguments = arguments


class ArrayInitializer(Expression):
    __slots__ = ('values',)
    _fields = ('values',)

    def __init__(self, values: List[Expression], location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.values = values


class ArrayCreationExpr(Expression):
    """new T[d1][d2][]...; or new T[]...{...} (dimensions empty, initializer set)."""
    __slots__ = ('element_type', 'dimensions', 'extra_dimensions', 'initializer')
    _fields = ('element_type', 'dimensions', 'initializer')

    def __init__(self, element_type: TypeRef, dimensions: List[Expression], extra_dimensions: int = 0,
                 initializer: Optional[ArrayInitializer] = None, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.element_type = element_type
        self.dimensions = dimensions
        self.extra_dimensions = extra_dimensions
        self.initializer = initializer

    @property
    def rank(self) -> int:
        return len(self.dimensions) + self.extra_dimensions


class ArrayAccessExpr(Expression):
    __slots__ = ('array', 'index')
    _fields = ('array', 'index')

    def __init__(self, array: Expression, index: Expression, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.array = array
        self.index = index


class CastExpr(Expression):
    __slots__ = ('type', 'expression')
    _fields = ('type', 'expression')

    def __init__(self, type: TypeRef, expression: Expression, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.type = type
        self.expression = expression


class InstanceOfExpr(Expression):
    __slots__ = ('expression', 'type')
    _fields = ('expression', 'type')

    def __init__(self, expression: Expression, type: TypeRef, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.expression = expression
        self.type = type


class BinaryExpr(Expression):
    __slots__ = ('left', 'operator', 'right')
    _fields = ('left', 'right')

    def __init__(self, left: Expression, operator: str, right: Expression, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.left = left
        self.operator = operator
        self.right = right


class UnaryExpr(Expression):
    __slots__ = ('operator', 'expression', 'is_postfix')
    _fields = ('expression',)

    def __init__(self, operator: str, expression: Expression, is_postfix: bool = False,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.operator = operator
        self.expression = expression
        self.is_postfix = is_postfix


class AssignExpr(Expression):
    __slots__ = ('target', 'operator', 'value')
    _fields = ('target', 'value')

    def __init__(self, target: Expression, operator: str, value: Expression, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.target = target
        self.operator = operator
        self.value = value


class ConditionalExpr(Expression):
    __slots__ = ('condition', 'then_expr', 'else_expr')
    _fields = ('condition', 'then_expr', 'else_expr')

    def __init__(self, condition: Expression, then_expr: Expression, else_expr: Expression,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.condition = condition
        self.then_expr = then_expr
        self.else_expr = else_expr


class EnclosedExpr(Expression):
    """Parenthesized expression, kept so printing reproduces the source."""
    __slots__ = ('inner',)
    _fields = ('inner',)

    def __init__(self, inner: Expression, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.inner = inner


class ClassExpr(Expression):
    """Class literal: Type.class"""
    __slots__ = ('type',)
    _fields = ('type',)

    def __init__(self, type: TypeRef, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.type = type


def strip_enclosing(expr: Optional[Expression]) -> Optional[Expression]:
    """Remove any number of surrounding parentheses."""
    while isinstance(expr, EnclosedExpr):
        expr = expr.inner
    return expr

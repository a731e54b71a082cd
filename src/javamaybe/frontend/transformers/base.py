"""
Java AST Transformer
Converts the lark parse tree into javamaybe AST nodes (shared/nodes.py)

Conventions:
- One method per grammar rule or alias, called as (meta, *children)
- Anonymous punctuation and keywords are filtered by lark before we see them
- Operators arrive as named tokens (PLUS, LT, COMPOUND_ASSIGN, ...)
"""

from lark import Transformer, v_args
from lark.lexer import Token
from typing import Any, List, Optional, Tuple, Union
from typing_extensions import TypeAlias
from dataclasses import dataclass
import logging

from ...shared.errors import JavaMaybeImplementationError
from ...shared.source_location import SourceLocation
from ...shared.nodes import (
    Annotation, ArrayAccessExpr, ArrayCreationExpr, ArrayInitializer, ArrayTypeRef,
    AssertStmt, AssignExpr, BinaryExpr, BlockStmt, BreakStmt, CastExpr, CatchClause,
    ClassExpr, ClassTypeRef, CompilationUnit, ConditionalExpr, ContinueStmt, DoStmt,
    EmptyStmt, EnclosedExpr, ExplicitConstructorInvocationStmt, Expression,
    ExpressionStmt, FieldAccessExpr, FieldDeclaration, ForEachStmt, ForStmt, IfStmt,
    ImportDeclaration, InitializerDeclaration, InstanceOfExpr, LiteralExpr,
    LocalVarDeclStmt, MemberValuePair, MethodCallExpr, NameExpr, Node,
    ObjectCreationExpr, PrimitiveTypeRef, ReturnStmt, Statement, SuperExpr,
    SwitchEntry, SwitchStmt, SynchronizedStmt, ThisExpr, ThrowStmt, TryStmt,
    TypeDeclaration, TypeParameter, TypeRef, UnaryExpr, VariableDeclarator,
    VoidTypeRef, WhileStmt, WildcardTypeRef,
)
from .literals import LiteralParser
from .declarations import (
    DeclarationParser, EnumConstantList, ExtendsList, ImplementsList, MemberList,
    Modifiers, ParameterList, Superclass, ThrowsList, TypeParameterList,
)

LarkMeta: TypeAlias = Any

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class SwitchLabel:
    """case expr: (expression) or default: (None)"""
    expression: Optional[Expression]


class ForInit(list):
    pass


class ForUpdate(list):
    pass


@v_args(inline=True, meta=True)
class JavaTransformer(Transformer):
    """
    Java AST Transformer

    current_file must be set before transform() so every node gets a
    SourceLocation in the right file.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: Optional[str] = None
        self.literal_parser = LiteralParser(self._extract_location)
        self.declaration_parser = DeclarationParser(self._extract_location)

    def __default__(self, data, children, meta):
        """Every grammar rule must map to a node; never leak a lark Tree"""
        raise JavaMaybeImplementationError(
            f"Missing transformer method for grammar rule '{data}'"
        )

    def _extract_location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object; None for empty matches"""
        if meta is None or getattr(meta, 'empty', True):
            return None
        if not self.current_file:
            raise JavaMaybeImplementationError(
                "Parser bug: current_file not set before transform()"
            )
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            end_line=getattr(meta, 'end_line', 0) or 0,
            end_column=getattr(meta, 'end_column', 0) or 0,
        )

    # =========================================================================
    # Compilation unit
    # =========================================================================

    def compilation_unit(self, meta: LarkMeta, *items: Any) -> CompilationUnit:
        package: Optional[str] = None
        imports: List[ImportDeclaration] = []
        types: List[TypeDeclaration] = []
        for item in items:
            if isinstance(item, str):
                package = item
            elif isinstance(item, ImportDeclaration):
                imports.append(item)
            elif isinstance(item, TypeDeclaration):
                types.append(item)
        unit = CompilationUnit(package, imports, types,
                               source_file=self.current_file or "<unknown>",
                               location=self._extract_location(meta))
        unit.link_parents()
        return unit

    def type_only(self, meta: LarkMeta, type_ref: TypeRef) -> TypeRef:
        return type_ref.link_parents()

    def package_decl(self, meta: LarkMeta, name: str) -> str:
        return name

    def import_decl(self, meta: LarkMeta, *args: Any) -> ImportDeclaration:
        is_static = any(a == "static" for a in args)
        is_wildcard = any(a == "*" for a in args)
        name = next(a for a in args if a not in ("static", "*"))
        return ImportDeclaration(name, is_static=is_static, is_wildcard=is_wildcard,
                                 location=self._extract_location(meta))

    def static_kw(self, meta: LarkMeta) -> str:
        return "static"

    def wildcard(self, meta: LarkMeta) -> str:
        return "*"

    def qualified_name(self, meta: LarkMeta, *parts: Token) -> str:
        return ".".join(str(p) for p in parts)

    def empty_member(self, meta: LarkMeta) -> None:
        return None

    # =========================================================================
    # Modifiers and annotations
    # =========================================================================

    def modifiers(self, meta: LarkMeta, *items: Union[str, Annotation]) -> Modifiers:
        return DeclarationParser.split_modifiers(items)

    def modifier_kw(self, meta: LarkMeta, keyword: Token) -> str:
        return str(keyword)

    def annotation(self, meta: LarkMeta, name: str,
                   pairs: Optional[List[MemberValuePair]] = None) -> Annotation:
        return Annotation(name, pairs, location=self._extract_location(meta))

    def empty_annotation_args(self, meta: LarkMeta) -> List[MemberValuePair]:
        return []

    def single_annotation_arg(self, meta: LarkMeta, value: Node) -> List[MemberValuePair]:
        return [MemberValuePair(None, value, location=self._extract_location(meta))]

    def annotation_args(self, meta: LarkMeta, *pairs: MemberValuePair) -> List[MemberValuePair]:
        return list(pairs)

    def element_value_pair(self, meta: LarkMeta, name: Token, value: Node) -> MemberValuePair:
        return MemberValuePair(str(name), value, location=self._extract_location(meta))

    def element_value_array(self, meta: LarkMeta, *values: Node) -> ArrayInitializer:
        return ArrayInitializer(list(values), location=self._extract_location(meta))

    # =========================================================================
    # Type declarations
    # =========================================================================

    def class_decl(self, meta: LarkMeta, modifiers: Modifiers, name: Token, *args: Any):
        return self.declaration_parser.parse_class(meta, modifiers, name, *args)

    def interface_decl(self, meta: LarkMeta, modifiers: Modifiers, name: Token, *args: Any):
        return self.declaration_parser.parse_class(meta, modifiers, name, *args, is_interface=True)

    def enum_decl(self, meta: LarkMeta, modifiers: Modifiers, name: Token, *args: Any):
        return self.declaration_parser.parse_enum(meta, modifiers, name, *args)

    def superclass(self, meta: LarkMeta, type_ref: ClassTypeRef) -> Superclass:
        return Superclass(type_ref)

    def super_interfaces(self, meta: LarkMeta, *types: ClassTypeRef) -> ImplementsList:
        return ImplementsList(types)

    def extends_interfaces(self, meta: LarkMeta, *types: ClassTypeRef) -> ExtendsList:
        return ExtendsList(types)

    def type_parameters(self, meta: LarkMeta, *params: TypeParameter) -> TypeParameterList:
        return TypeParameterList(params)

    def type_parameter(self, meta: LarkMeta, name: Token, *bounds: ClassTypeRef) -> TypeParameter:
        return TypeParameter(str(name), list(bounds), location=self._extract_location(meta))

    def class_body(self, meta: LarkMeta, *members: Any) -> MemberList:
        return DeclarationParser.members(members)

    def enum_body(self, meta: LarkMeta, *args: Any):
        return self.declaration_parser.parse_enum_body(meta, *args)

    def enum_constants(self, meta: LarkMeta, *constants: Any) -> EnumConstantList:
        return EnumConstantList(constants)

    def enum_constant(self, meta: LarkMeta, modifiers: Modifiers, name: Token,
                      arguments: Optional[List[Expression]] = None):
        return self.declaration_parser.parse_enum_constant(meta, modifiers, name, arguments)

    def enum_body_decls(self, meta: LarkMeta, *members: Any) -> MemberList:
        return DeclarationParser.members(members)

    def field_decl(self, meta: LarkMeta, modifiers: Modifiers, type_ref: TypeRef,
                   variables: List[VariableDeclarator]) -> FieldDeclaration:
        return FieldDeclaration(type_ref, variables, modifiers=modifiers.keywords,
                                annotations=modifiers.annotations,
                                location=self._extract_location(meta))

    def method_decl(self, meta: LarkMeta, modifiers: Modifiers, *args: Any):
        return self.declaration_parser.parse_method(meta, modifiers, *args)

    def constructor_decl(self, meta: LarkMeta, modifiers: Modifiers, *args: Any):
        return self.declaration_parser.parse_constructor(meta, modifiers, *args)

    def no_body(self, meta: LarkMeta) -> None:
        return None

    def static_initializer(self, meta: LarkMeta, body: BlockStmt) -> InitializerDeclaration:
        return InitializerDeclaration(body, modifiers=["static"], location=self._extract_location(meta))

    def instance_initializer(self, meta: LarkMeta, body: BlockStmt) -> InitializerDeclaration:
        return InitializerDeclaration(body, location=self._extract_location(meta))

    def formal_parameters(self, meta: LarkMeta, *params: Any) -> ParameterList:
        return ParameterList(params)

    def formal_parameter(self, meta: LarkMeta, modifiers: Modifiers, type_ref: TypeRef, *args: Token):
        return self.declaration_parser.parse_parameter(meta, modifiers, type_ref, *args)

    def throws(self, meta: LarkMeta, *types: ClassTypeRef) -> ThrowsList:
        return ThrowsList(types)

    def variable_declarators(self, meta: LarkMeta, *declarators: VariableDeclarator) -> List[VariableDeclarator]:
        return list(declarators)

    def variable_declarator(self, meta: LarkMeta, name: Token,
                            initializer: Optional[Node] = None) -> VariableDeclarator:
        return VariableDeclarator(str(name), initializer, location=self._extract_location(meta))

    def array_initializer(self, meta: LarkMeta, *values: Expression) -> ArrayInitializer:
        return ArrayInitializer(list(values), location=self._extract_location(meta))

    # =========================================================================
    # Types
    # =========================================================================

    def void_type(self, meta: LarkMeta) -> VoidTypeRef:
        return VoidTypeRef(location=self._extract_location(meta))

    def primitive_type(self, meta: LarkMeta, keyword: Token) -> PrimitiveTypeRef:
        return PrimitiveTypeRef(str(keyword), location=self._extract_location(meta))

    def array_type(self, meta: LarkMeta, element: TypeRef, rank: int) -> ArrayTypeRef:
        result: TypeRef = element
        for _ in range(rank):
            result = ArrayTypeRef(result, location=self._extract_location(meta))
        return result

    def class_type(self, meta: LarkMeta, *parts: Tuple[Token, Optional[List[TypeRef]]]) -> ClassTypeRef:
        scope: Optional[ClassTypeRef] = None
        for name, type_arguments in parts:
            scope = ClassTypeRef(scope, str(name), type_arguments,
                                 location=self._extract_location(meta))
        return scope

    def class_type_part(self, meta: LarkMeta, name: Token,
                        type_arguments: Optional[List[TypeRef]] = None):
        return name, type_arguments

    def type_arguments(self, meta: LarkMeta, *args: TypeRef) -> List[TypeRef]:
        return list(args)

    def wildcard_type(self, meta: LarkMeta) -> WildcardTypeRef:
        return WildcardTypeRef(location=self._extract_location(meta))

    def wildcard_extends(self, meta: LarkMeta, bound: TypeRef) -> WildcardTypeRef:
        return WildcardTypeRef(extended=bound, location=self._extract_location(meta))

    def wildcard_super(self, meta: LarkMeta, bound: TypeRef) -> WildcardTypeRef:
        return WildcardTypeRef(super_bound=bound, location=self._extract_location(meta))

    def dims(self, meta: LarkMeta, *dims: int) -> int:
        return len(dims)

    def dim(self, meta: LarkMeta) -> int:
        return 1

    # =========================================================================
    # Statements
    # =========================================================================

    def block(self, meta: LarkMeta, *statements: Statement) -> BlockStmt:
        return BlockStmt(list(statements), location=self._extract_location(meta))

    def local_var_decl_stmt(self, meta: LarkMeta, decl: LocalVarDeclStmt) -> LocalVarDeclStmt:
        decl.location = self._extract_location(meta)
        return decl

    def local_var_decl(self, meta: LarkMeta, modifiers: Modifiers, type_ref: TypeRef,
                       variables: List[VariableDeclarator]) -> LocalVarDeclStmt:
        return LocalVarDeclStmt(type_ref, variables, modifiers=modifiers.keywords,
                                annotations=modifiers.annotations,
                                location=self._extract_location(meta))

    def if_stmt(self, meta: LarkMeta, condition: Expression, then_stmt: Statement,
                else_stmt: Optional[Statement] = None) -> IfStmt:
        return IfStmt(condition, then_stmt, else_stmt, location=self._extract_location(meta))

    def while_stmt(self, meta: LarkMeta, condition: Expression, body: Statement) -> WhileStmt:
        return WhileStmt(condition, body, location=self._extract_location(meta))

    def do_stmt(self, meta: LarkMeta, body: Statement, condition: Expression) -> DoStmt:
        return DoStmt(body, condition, location=self._extract_location(meta))

    def for_stmt(self, meta: LarkMeta, *args: Any) -> ForStmt:
        init: List[Node] = []
        update: List[Expression] = []
        condition: Optional[Expression] = None
        for arg in args[:-1]:
            if isinstance(arg, ForInit):
                init = list(arg)
            elif isinstance(arg, ForUpdate):
                update = list(arg)
            else:
                condition = arg
        return ForStmt(init, condition, update, args[-1], location=self._extract_location(meta))

    def for_init_decl(self, meta: LarkMeta, decl: LocalVarDeclStmt) -> ForInit:
        return ForInit([decl])

    def for_init_exprs(self, meta: LarkMeta, *exprs: Expression) -> ForInit:
        return ForInit(exprs)

    def for_update(self, meta: LarkMeta, *exprs: Expression) -> ForUpdate:
        return ForUpdate(exprs)

    def foreach_stmt(self, meta: LarkMeta, modifiers: Modifiers, type_ref: TypeRef, name: Token,
                     iterable: Expression, body: Statement) -> ForEachStmt:
        return ForEachStmt(type_ref, str(name), iterable, body, modifiers=modifiers.keywords,
                           location=self._extract_location(meta))

    def empty_stmt(self, meta: LarkMeta) -> EmptyStmt:
        return EmptyStmt(location=self._extract_location(meta))

    def expression_stmt(self, meta: LarkMeta, expression: Expression) -> ExpressionStmt:
        return ExpressionStmt(expression, location=self._extract_location(meta))

    def assert_stmt(self, meta: LarkMeta, check: Expression,
                    message: Optional[Expression] = None) -> AssertStmt:
        return AssertStmt(check, message, location=self._extract_location(meta))

    def switch_stmt(self, meta: LarkMeta, selector: Expression, *items: Any) -> SwitchStmt:
        """Group the flat label/statement sequence into entries"""
        entries: List[SwitchEntry] = []
        current: Optional[SwitchEntry] = None
        for item in items:
            if isinstance(item, SwitchLabel):
                if current is None or current.statements:
                    current = SwitchEntry([], [])
                    entries.append(current)
                current.labels.append(item.expression)
            elif current is None:
                raise JavaMaybeImplementationError("switch statement before the first label")
            else:
                current.statements.append(item)
        return SwitchStmt(selector, entries, location=self._extract_location(meta))

    def case_label(self, meta: LarkMeta, expression: Expression) -> SwitchLabel:
        return SwitchLabel(expression)

    def default_label(self, meta: LarkMeta) -> SwitchLabel:
        return SwitchLabel(None)

    def break_stmt(self, meta: LarkMeta) -> BreakStmt:
        return BreakStmt(location=self._extract_location(meta))

    def continue_stmt(self, meta: LarkMeta) -> ContinueStmt:
        return ContinueStmt(location=self._extract_location(meta))

    def return_stmt(self, meta: LarkMeta, expression: Optional[Expression] = None) -> ReturnStmt:
        return ReturnStmt(expression, location=self._extract_location(meta))

    def synchronized_stmt(self, meta: LarkMeta, expression: Expression, body: BlockStmt) -> SynchronizedStmt:
        return SynchronizedStmt(expression, body, location=self._extract_location(meta))

    def throw_stmt(self, meta: LarkMeta, expression: Expression) -> ThrowStmt:
        return ThrowStmt(expression, location=self._extract_location(meta))

    def try_stmt(self, meta: LarkMeta, try_block: BlockStmt, *rest: Any) -> TryStmt:
        catches = [r for r in rest if isinstance(r, CatchClause)]
        finally_block = rest[-1] if rest and isinstance(rest[-1], BlockStmt) else None
        return TryStmt(try_block, catches, finally_block, location=self._extract_location(meta))

    def catch_clause(self, meta: LarkMeta, modifiers: Modifiers, types: List[TypeRef],
                     name: Token, body: BlockStmt) -> CatchClause:
        return CatchClause(types, str(name), body, modifiers=modifiers.keywords,
                           location=self._extract_location(meta))

    def catch_type(self, meta: LarkMeta, *types: ClassTypeRef) -> List[TypeRef]:
        return list(types)

    def finally_clause(self, meta: LarkMeta, body: BlockStmt) -> BlockStmt:
        return body

    def this_call_stmt(self, meta: LarkMeta, arguments: List[Expression]) -> ExplicitConstructorInvocationStmt:
        return ExplicitConstructorInvocationStmt(True, arguments, location=self._extract_location(meta))

    def super_call_stmt(self, meta: LarkMeta, arguments: List[Expression]) -> ExplicitConstructorInvocationStmt:
        return ExplicitConstructorInvocationStmt(False, arguments, location=self._extract_location(meta))

    # =========================================================================
    # Expressions
    # =========================================================================

    def assignment(self, meta: LarkMeta, target: Expression, operator: str,
                   value: Expression) -> AssignExpr:
        return AssignExpr(target, operator, value, location=self._extract_location(meta))

    def assign_op(self, meta: LarkMeta, token: Token) -> str:
        return str(token)

    def conditional(self, meta: LarkMeta, condition: Expression, then_expr: Expression,
                    else_expr: Expression) -> ConditionalExpr:
        return ConditionalExpr(condition, then_expr, else_expr, location=self._extract_location(meta))

    def binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> BinaryExpr:
        return BinaryExpr(left, str(operator), right, location=self._extract_location(meta))

    def shift_right(self, meta: LarkMeta, left: Expression, gt1: Token, gt2: Token,
                    right: Expression) -> BinaryExpr:
        return BinaryExpr(left, ">>", right, location=self._extract_location(meta))

    def unsigned_shift_right(self, meta: LarkMeta, left: Expression, gt1: Token, gt2: Token,
                             gt3: Token, right: Expression) -> BinaryExpr:
        return BinaryExpr(left, ">>>", right, location=self._extract_location(meta))

    def instanceof_expr(self, meta: LarkMeta, expression: Expression, type_ref: TypeRef) -> InstanceOfExpr:
        return InstanceOfExpr(expression, type_ref, location=self._extract_location(meta))

    def unary(self, meta: LarkMeta, operator: Token, operand: Expression) -> UnaryExpr:
        return UnaryExpr(str(operator), operand, location=self._extract_location(meta))

    def pre_inc_dec(self, meta: LarkMeta, operator: Token, operand: Expression) -> UnaryExpr:
        return UnaryExpr(str(operator), operand, location=self._extract_location(meta))

    def post_inc_dec(self, meta: LarkMeta, operand: Expression, operator: Token) -> UnaryExpr:
        return UnaryExpr(str(operator), operand, is_postfix=True, location=self._extract_location(meta))

    def cast_expr(self, meta: LarkMeta, type_ref: TypeRef, expression: Expression) -> CastExpr:
        return CastExpr(type_ref, expression, location=self._extract_location(meta))

    def this_expr(self, meta: LarkMeta) -> ThisExpr:
        return ThisExpr(location=self._extract_location(meta))

    def name_expr(self, meta: LarkMeta, name: Token) -> NameExpr:
        return NameExpr(str(name), location=self._extract_location(meta))

    def enclosed_expr(self, meta: LarkMeta, inner: Expression) -> EnclosedExpr:
        return EnclosedExpr(inner, location=self._extract_location(meta))

    def field_access(self, meta: LarkMeta, scope: Expression, name: Token) -> FieldAccessExpr:
        return FieldAccessExpr(scope, str(name), location=self._extract_location(meta))

    def super_field_access(self, meta: LarkMeta, name: Token) -> FieldAccessExpr:
        location = self._extract_location(meta)
        return FieldAccessExpr(SuperExpr(location=location), str(name), location=location)

    def unqualified_call(self, meta: LarkMeta, name: Token, arguments: List[Expression]) -> MethodCallExpr:
        return MethodCallExpr(None, str(name), arguments, location=self._extract_location(meta))

    def qualified_call(self, meta: LarkMeta, scope: Expression, name: Token,
                       arguments: List[Expression]) -> MethodCallExpr:
        return MethodCallExpr(scope, str(name), arguments, location=self._extract_location(meta))

    def super_call(self, meta: LarkMeta, name: Token, arguments: List[Expression]) -> MethodCallExpr:
        location = self._extract_location(meta)
        return MethodCallExpr(SuperExpr(location=location), str(name), arguments, location=location)

    def arguments(self, meta: LarkMeta, *args: Expression) -> List[Expression]:
        return list(args)

    def array_access(self, meta: LarkMeta, array: Expression, index: Expression) -> ArrayAccessExpr:
        return ArrayAccessExpr(array, index, location=self._extract_location(meta))

    def class_literal(self, meta: LarkMeta, type_ref: TypeRef) -> ClassExpr:
        return ClassExpr(type_ref, location=self._extract_location(meta))

    def class_instance_creation(self, meta: LarkMeta, type_ref: ClassTypeRef,
                                arguments: List[Expression]) -> ObjectCreationExpr:
        return ObjectCreationExpr(type_ref, arguments, location=self._extract_location(meta))

    def array_creation(self, meta: LarkMeta, element: TypeRef, dimensions: List[Expression],
                       extra: int = 0) -> ArrayCreationExpr:
        return ArrayCreationExpr(element, dimensions, extra, location=self._extract_location(meta))

    def array_creation_init(self, meta: LarkMeta, element: TypeRef, rank: int,
                            initializer: ArrayInitializer) -> ArrayCreationExpr:
        return ArrayCreationExpr(element, [], rank, initializer, location=self._extract_location(meta))

    def dim_exprs(self, meta: LarkMeta, *dimensions: Expression) -> List[Expression]:
        return list(dimensions)

    # Literals

    def int_literal(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return self.literal_parser.parse_int(meta, token)

    def float_literal(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return self.literal_parser.parse_float(meta, token)

    def string_literal(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return self.literal_parser.parse_string(meta, token)

    def char_literal(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return self.literal_parser.parse_char(meta, token)

    def true_literal(self, meta: LarkMeta) -> LiteralExpr:
        return self.literal_parser.parse_keyword(meta, "boolean", "true")

    def false_literal(self, meta: LarkMeta) -> LiteralExpr:
        return self.literal_parser.parse_keyword(meta, "boolean", "false")

    def null_literal(self, meta: LarkMeta) -> LiteralExpr:
        return self.literal_parser.parse_keyword(meta, "null", "null")

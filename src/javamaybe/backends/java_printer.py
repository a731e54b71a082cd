"""
Java source printer.

Pattern: one visit_<node> per node type (like the AST visitors). Statements
and declarations emit whole lines at the current indentation; expressions
and types return their text. Parentheses are printed where the source had
them (EnclosedExpr); no other parentheses are added.
"""

from typing import List, Optional, Sequence

from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    Annotation, ArrayAccessExpr, ArrayCreationExpr, ArrayInitializer, ArrayTypeRef, AssertStmt,
    AssignExpr, BinaryExpr, BlockStmt, BodyDeclaration, BreakStmt, CastExpr, ClassDeclaration,
    ClassExpr, ClassTypeRef, CompilationUnit, ConditionalExpr, ConstructorDeclaration, ContinueStmt,
    DoStmt, EmptyStmt, EnclosedExpr, EnumConstant, EnumDeclaration, ExplicitConstructorInvocationStmt,
    Expression, ExpressionStmt, FieldAccessExpr, FieldDeclaration, ForEachStmt, ForStmt, IfStmt,
    ImportDeclaration, InitializerDeclaration, InstanceOfExpr, LiteralExpr, LocalVarDeclStmt,
    MemberValuePair, MethodCallExpr, MethodDeclaration, NameExpr, Node, ObjectCreationExpr, Parameter,
    PrimitiveTypeRef, ReturnStmt, Statement, SuperExpr, SwitchEntry, SwitchStmt, SynchronizedStmt,
    ThisExpr, ThrowStmt, TryStmt, TypeParameter, UnaryExpr, VariableDeclarator, VoidTypeRef, WhileStmt,
    WildcardTypeRef,
)
from ..shared.errors import JavaMaybeImplementationError
from ..utils.config import INDENT_WIDTH


class JavaPrinter(ASTVisitor[Optional[str]]):
    """
    Usage:
        text = JavaPrinter().print(unit)

    A printer instance is single-use per print() call; print() resets it.
    """

    def __init__(self, indent_width: int = INDENT_WIDTH):
        self.indent_unit = " " * indent_width
        self._lines: List[str] = []
        self._depth = 0

    def print(self, node: Node) -> str:
        """Source text for a unit, declaration or statement; expressions and types as one line."""
        self._lines = []
        self._depth = 0
        text = self.visit(node)
        if isinstance(text, str):
            return text
        return "\n".join(self._lines) + "\n"

    def generic_visit(self, node: Node) -> Optional[str]:
        raise JavaMaybeImplementationError(f"no printer for {type(node).__name__}")

    # =========================================================================
    # Output
    # =========================================================================

    def _emit(self, text: str) -> None:
        self._lines.append(self.indent_unit * self._depth + text if text else "")

    def _emit_statements(self, statements: Sequence[Statement]) -> None:
        self._depth += 1
        for stmt in statements:
            self.visit(stmt)
        self._depth -= 1

    def _open(self, header: str, body: Statement) -> Optional[str]:
        """Emit header and body; returns "}" when the caller still has to close a block."""
        if isinstance(body, BlockStmt):
            self._emit(header + " {")
            self._emit_statements(body.statements)
            return "}"
        self._emit(header)
        self._emit_statements([body])
        return None

    def _close(self, closing: Optional[str]) -> None:
        if closing:
            self._emit(closing)

    # =========================================================================
    # Compilation unit and declarations
    # =========================================================================

    def visit_compilation_unit(self, node: CompilationUnit) -> None:
        if node.package:
            self._emit(f"package {node.package};")
            self._emit("")
        for imp in node.imports:
            self.visit(imp)
        if node.imports:
            self._emit("")
        for index, decl in enumerate(node.types):
            if index:
                self._emit("")
            self.visit(decl)

    def visit_import_declaration(self, node: ImportDeclaration) -> None:
        static = "static " if node.is_static else ""
        wildcard = ".*" if node.is_wildcard else ""
        self._emit(f"import {static}{node.name}{wildcard};")

    def _emit_annotations(self, annotations: Sequence[Annotation]) -> None:
        for annotation in annotations:
            self._emit(self.visit(annotation))

    def _modifiers(self, modifiers: Sequence[str]) -> str:
        return "".join(f"{m} " for m in modifiers)

    def _type_parameters(self, params: Sequence[TypeParameter]) -> str:
        if not params:
            return ""
        return "<" + ", ".join(self.visit(p) for p in params) + ">"

    def _members(self, members: Sequence[BodyDeclaration]) -> None:
        self._depth += 1
        for index, member in enumerate(members):
            if index:
                self._emit("")
            self.visit(member)
        self._depth -= 1

    def visit_class_declaration(self, node: ClassDeclaration) -> None:
        self._emit_annotations(node.annotations)
        keyword = "interface" if node.is_interface else "class"
        header = f"{self._modifiers(node.modifiers)}{keyword} {node.name}{self._type_parameters(node.type_parameters)}"
        if node.extended_types:
            header += " extends " + self._type_list(node.extended_types)
        if node.implemented_types:
            header += " implements " + self._type_list(node.implemented_types)
        self._emit(header + " {")
        self._members(node.members)
        self._emit("}")

    def visit_enum_declaration(self, node: EnumDeclaration) -> None:
        self._emit_annotations(node.annotations)
        header = f"{self._modifiers(node.modifiers)}enum {node.name}"
        if node.implemented_types:
            header += " implements " + self._type_list(node.implemented_types)
        self._emit(header + " {")
        self._depth += 1
        if node.entries:
            entries = ", ".join(self.visit(e) for e in node.entries)
            self._emit(entries + (";" if node.members else ""))
        elif node.members:
            self._emit(";")
        self._depth -= 1
        if node.members:
            self._emit("")
        self._members(node.members)
        self._emit("}")

    def visit_enum_constant(self, node: EnumConstant) -> str:
        annotations = "".join(self.visit(a) + " " for a in node.annotations)
        if node.arguments is None:
            return f"{annotations}{node.name}"
        return f"{annotations}{node.name}({self._arguments(node.arguments)})"

    def visit_field_declaration(self, node: FieldDeclaration) -> None:
        self._emit_annotations(node.annotations)
        declarators = ", ".join(self.visit(v) for v in node.variables)
        self._emit(f"{self._modifiers(node.modifiers)}{self.visit(node.type)} {declarators};")

    def visit_variable_declarator(self, node: VariableDeclarator) -> str:
        if node.initializer is None:
            return node.name
        return f"{node.name} = {self.visit(node.initializer)}"

    def visit_method_declaration(self, node: MethodDeclaration) -> None:
        self._emit_annotations(node.annotations)
        type_params = self._type_parameters(node.type_parameters)
        header = (f"{self._modifiers(node.modifiers)}{type_params + ' ' if type_params else ''}"
                  f"{self.visit(node.return_type)} {node.name}({self._parameters(node.parameters)})"
                  f"{self._throws(node.thrown_types)}")
        self._callable_body(header, node.body)

    def visit_constructor_declaration(self, node: ConstructorDeclaration) -> None:
        self._emit_annotations(node.annotations)
        type_params = self._type_parameters(node.type_parameters)
        header = (f"{self._modifiers(node.modifiers)}{type_params + ' ' if type_params else ''}"
                  f"{node.name}({self._parameters(node.parameters)}){self._throws(node.thrown_types)}")
        self._callable_body(header, node.body)

    def _callable_body(self, header: str, body: Optional[BlockStmt]) -> None:
        if body is None:
            self._emit(header + ";")
            return
        self._close(self._open(header, body))

    def visit_initializer_declaration(self, node: InitializerDeclaration) -> None:
        header = "static" if node.is_static() else ""
        if header:
            self._close(self._open(header, node.body))
        else:
            self.visit(node.body)

    def _parameters(self, params: Sequence[Parameter]) -> str:
        return ", ".join(self.visit(p) for p in params)

    def visit_parameter(self, node: Parameter) -> str:
        annotations = "".join(self.visit(a) + " " for a in node.annotations)
        ellipsis = "..." if node.is_varargs else ""
        return f"{annotations}{self._modifiers(node.modifiers)}{self.visit(node.type)}{ellipsis} {node.name}"

    def _throws(self, thrown: Sequence[ClassTypeRef]) -> str:
        return " throws " + self._type_list(thrown) if thrown else ""

    def visit_annotation(self, node: Annotation) -> str:
        if not node.pairs:
            return f"@{node.name}"
        return f"@{node.name}(" + ", ".join(self.visit(p) for p in node.pairs) + ")"

    def visit_member_value_pair(self, node: MemberValuePair) -> str:
        value = self.visit(node.value)
        return value if node.name is None else f"{node.name} = {value}"

    # =========================================================================
    # Types
    # =========================================================================

    def _type_list(self, types: Sequence[Node]) -> str:
        return ", ".join(self.visit(t) for t in types)

    def visit_primitive_type_ref(self, node: PrimitiveTypeRef) -> str:
        return node.name

    def visit_void_type_ref(self, node: VoidTypeRef) -> str:
        return "void"

    def visit_class_type_ref(self, node: ClassTypeRef) -> str:
        text = node.name if node.scope is None else f"{self.visit(node.scope)}.{node.name}"
        if node.type_arguments is not None:
            text += "<" + self._type_list(node.type_arguments) + ">"
        return text

    def visit_array_type_ref(self, node: ArrayTypeRef) -> str:
        return self.visit(node.component) + "[]"

    def visit_wildcard_type_ref(self, node: WildcardTypeRef) -> str:
        if node.extended is not None:
            return "? extends " + self.visit(node.extended)
        if node.super_bound is not None:
            return "? super " + self.visit(node.super_bound)
        return "?"

    def visit_type_parameter(self, node: TypeParameter) -> str:
        if not node.bounds:
            return node.name
        return f"{node.name} extends " + " & ".join(self.visit(b) for b in node.bounds)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_block_stmt(self, node: BlockStmt) -> None:
        self._emit("{")
        self._emit_statements(node.statements)
        self._emit("}")

    def _local_declaration(self, node: LocalVarDeclStmt) -> str:
        annotations = "".join(self.visit(a) + " " for a in node.annotations)
        declarators = ", ".join(self.visit(v) for v in node.variables)
        return f"{annotations}{self._modifiers(node.modifiers)}{self.visit(node.type)} {declarators}"

    def visit_local_var_decl_stmt(self, node: LocalVarDeclStmt) -> None:
        self._emit(self._local_declaration(node) + ";")

    def visit_expression_stmt(self, node: ExpressionStmt) -> None:
        self._emit(self.visit(node.expression) + ";")

    def visit_if_stmt(self, node: IfStmt) -> None:
        closing = self._open(f"if ({self.visit(node.condition)})", node.then_stmt)
        branch = node.else_stmt
        while branch is not None:
            prefix = closing + " " if closing else ""
            if isinstance(branch, IfStmt):
                closing = self._open(f"{prefix}else if ({self.visit(branch.condition)})", branch.then_stmt)
                branch = branch.else_stmt
            else:
                closing = self._open(f"{prefix}else", branch)
                branch = None
        self._close(closing)

    def visit_while_stmt(self, node: WhileStmt) -> None:
        self._close(self._open(f"while ({self.visit(node.condition)})", node.body))

    def visit_do_stmt(self, node: DoStmt) -> None:
        closing = self._open("do", node.body)
        condition = f"while ({self.visit(node.condition)});"
        self._emit(f"{closing} {condition}" if closing else condition)

    def visit_for_stmt(self, node: ForStmt) -> None:
        init = ", ".join(self._local_declaration(i) if isinstance(i, LocalVarDeclStmt) else self.visit(i)
                         for i in node.initialization)
        condition = self.visit(node.condition) if node.condition is not None else ""
        update = ", ".join(self.visit(u) for u in node.update)
        header = f"for ({init};{' ' + condition if condition else ''};{' ' + update if update else ''})"
        self._close(self._open(header, node.body))

    def visit_for_each_stmt(self, node: ForEachStmt) -> None:
        header = (f"for ({self._modifiers(node.modifiers)}{self.visit(node.variable_type)} "
                  f"{node.variable_name} : {self.visit(node.iterable)})")
        self._close(self._open(header, node.body))

    def visit_return_stmt(self, node: ReturnStmt) -> None:
        if node.expression is None:
            self._emit("return;")
        else:
            self._emit(f"return {self.visit(node.expression)};")

    def visit_break_stmt(self, node: BreakStmt) -> None:
        self._emit("break;" if node.label is None else f"break {node.label};")

    def visit_continue_stmt(self, node: ContinueStmt) -> None:
        self._emit("continue;" if node.label is None else f"continue {node.label};")

    def visit_throw_stmt(self, node: ThrowStmt) -> None:
        self._emit(f"throw {self.visit(node.expression)};")

    def visit_empty_stmt(self, node: EmptyStmt) -> None:
        self._emit(";")

    def visit_try_stmt(self, node: TryStmt) -> None:
        closing = self._open("try", node.try_block)
        for clause in node.catch_clauses:
            types = " | ".join(self.visit(t) for t in clause.types)
            closing = self._open(f"{closing} catch ({self._modifiers(clause.modifiers)}{types} {clause.name})",
                                 clause.body)
        if node.finally_block is not None:
            closing = self._open(f"{closing} finally", node.finally_block)
        self._close(closing)

    def visit_switch_stmt(self, node: SwitchStmt) -> None:
        self._emit(f"switch ({self.visit(node.selector)}) {{")
        self._depth += 1
        for entry in node.entries:
            self.visit(entry)
        self._depth -= 1
        self._emit("}")

    def visit_switch_entry(self, node: SwitchEntry) -> None:
        for label in node.labels:
            self._emit("default:" if label is None else f"case {self.visit(label)}:")
        self._emit_statements(node.statements)

    def visit_synchronized_stmt(self, node: SynchronizedStmt) -> None:
        self._close(self._open(f"synchronized ({self.visit(node.expression)})", node.body))

    def visit_assert_stmt(self, node: AssertStmt) -> None:
        message = f" : {self.visit(node.message)}" if node.message is not None else ""
        self._emit(f"assert {self.visit(node.check)}{message};")

    def visit_explicit_constructor_invocation_stmt(self, node: ExplicitConstructorInvocationStmt) -> None:
        keyword = "this" if node.is_this else "super"
        self._emit(f"{keyword}({self._arguments(node.arguments)});")

    # =========================================================================
    # Expressions
    # =========================================================================

    def _arguments(self, arguments: Sequence[Expression]) -> str:
        return ", ".join(self.visit(a) for a in arguments)

    def visit_literal_expr(self, node: LiteralExpr) -> str:
        return node.value

    def visit_name_expr(self, node: NameExpr) -> str:
        return node.name

    def visit_this_expr(self, node: ThisExpr) -> str:
        return "this"

    def visit_super_expr(self, node: SuperExpr) -> str:
        return "super"

    def visit_field_access_expr(self, node: FieldAccessExpr) -> str:
        return f"{self.visit(node.scope)}.{node.name}"

    def visit_method_call_expr(self, node: MethodCallExpr) -> str:
        scope = f"{self.visit(node.scope)}." if node.scope is not None else ""
        return f"{scope}{node.name}({self._arguments(node.arguments)})"

    def visit_object_creation_expr(self, node: ObjectCreationExpr) -> str:
        return f"new {self.visit(node.type)}({self._arguments(node.arguments)})"

    def visit_array_initializer(self, node: ArrayInitializer) -> str:
        return "{" + self._arguments(node.values) + "}"

    def visit_array_creation_expr(self, node: ArrayCreationExpr) -> str:
        dims = "".join(f"[{self.visit(d)}]" for d in node.dimensions) + "[]" * node.extra_dimensions
        text = f"new {self.visit(node.element_type)}{dims}"
        if node.initializer is not None:
            text += " " + self.visit(node.initializer)
        return text

    def visit_array_access_expr(self, node: ArrayAccessExpr) -> str:
        return f"{self.visit(node.array)}[{self.visit(node.index)}]"

    def visit_cast_expr(self, node: CastExpr) -> str:
        return f"({self.visit(node.type)}) {self.visit(node.expression)}"

    def visit_instance_of_expr(self, node: InstanceOfExpr) -> str:
        return f"{self.visit(node.expression)} instanceof {self.visit(node.type)}"

    def visit_binary_expr(self, node: BinaryExpr) -> str:
        return f"{self.visit(node.left)} {node.operator} {self.visit(node.right)}"

    def visit_unary_expr(self, node: UnaryExpr) -> str:
        operand = self.visit(node.expression)
        if node.is_postfix:
            return operand + node.operator
        # `- -x` must not print as `--x`
        separator = " " if operand[:1] in ("+", "-") and node.operator[-1] in ("+", "-") else ""
        return node.operator + separator + operand

    def visit_assign_expr(self, node: AssignExpr) -> str:
        return f"{self.visit(node.target)} {node.operator} {self.visit(node.value)}"

    def visit_conditional_expr(self, node: ConditionalExpr) -> str:
        return f"{self.visit(node.condition)} ? {self.visit(node.then_expr)} : {self.visit(node.else_expr)}"

    def visit_enclosed_expr(self, node: EnclosedExpr) -> str:
        return f"({self.visit(node.inner)})"

    def visit_class_expr(self, node: ClassExpr) -> str:
        return f"{self.visit(node.type)}.class"

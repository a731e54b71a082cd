"""
Method preprocessing: every branch and loop body becomes a block.

`if (c) x = 1; else y = 2;` turns into `if (c) { x = 1; } else { y = 2; }`.
An `else if` chain stays a chain. Applied in place before a method is
cloned, so every specialization starts from the same shape.
"""

from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    BlockStmt, CallableDeclaration, DoStmt, ForEachStmt, ForStmt, IfStmt, Node, Statement, WhileStmt,
)


def _as_block(stmt: Statement) -> BlockStmt:
    if isinstance(stmt, BlockStmt):
        return stmt
    block = BlockStmt([], location=stmt.location)
    block.set('statements', [stmt])
    return block


class MethodPreprocessor(ASTVisitor[None]):

    @classmethod
    def process(cls, method: CallableDeclaration) -> CallableDeclaration:
        if method.body is not None:
            method.body.accept(cls())
        return method

    def visit_if_stmt(self, node: IfStmt) -> None:
        node.set('then_stmt', _as_block(node.then_stmt))
        if node.else_stmt is not None and not isinstance(node.else_stmt, IfStmt):
            node.set('else_stmt', _as_block(node.else_stmt))
        self.generic_visit(node)

    def visit_while_stmt(self, node: WhileStmt) -> None:
        self._wrap_body(node)

    def visit_do_stmt(self, node: DoStmt) -> None:
        self._wrap_body(node)

    def visit_for_stmt(self, node: ForStmt) -> None:
        self._wrap_body(node)

    def visit_for_each_stmt(self, node: ForEachStmt) -> None:
        self._wrap_body(node)

    def _wrap_body(self, node: Node) -> None:
        node.set('body', _as_block(node.body))
        self.generic_visit(node)

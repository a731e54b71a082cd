"""
AST Visitor Pattern and Scope Management

This module provides:
1. ASTVisitor (default traversal over every node's _fields)
2. ScopedASTVisitor (visitor + lexical scope stack)

Design:
- Node.accept() dispatches to visit_<snake_name>; nodes without an override
  fall back to generic_visit, which visits the children in source order
- Subclasses override only the node types they care about and call
  self.generic_visit(node) to keep descending
- Scopes are entered with a context manager so they always unwind
"""

from typing import TypeVar, Generic, Dict, List, Optional
from contextlib import contextmanager

from .nodes import Node

T = TypeVar('T')
V = TypeVar('V')


class ASTVisitor(Generic[T]):
    """
    Base AST visitor with default traversal for all nodes.

    Usage:
        class CallCollector(ASTVisitor[None]):
            def __init__(self):
                self.calls = []

            def visit_method_call_expr(self, node):
                self.calls.append(node)
                self.generic_visit(node)
    """

    def visit(self, node: Optional[Node]) -> Optional[T]:
        if node is None:
            return None
        return node.accept(self)

    def generic_visit(self, node: Node) -> Optional[T]:
        # Snapshot: a visitor may detach or replace children while walking
        for child in list(node.iter_children()):
            child.accept(self)
        return None


class ScopedASTVisitor(ASTVisitor[T], Generic[T, V]):
    """
    Visitor that tracks lexically scoped bindings (name -> V).

    Usage:
        with self._scope():
            self._set_var("x", value)
            ...
        # scope exited, shadowing undone
    """

    def __init__(self):
        # Index 0 is the outermost scope
        self._scope_stack: List[Dict[str, V]] = [{}]

    @contextmanager
    def _scope(self):
        self._push_scope()
        try:
            yield
        finally:
            self._pop_scope()

    def _push_scope(self) -> None:
        """Enter a new scope (prefer using _scope() context manager)"""
        self._scope_stack.append({})

    def _pop_scope(self) -> None:
        """Exit current scope (prefer using _scope() context manager)"""
        if len(self._scope_stack) > 1:
            self._scope_stack.pop()

    def _set_var(self, var_name: str, value: V) -> None:
        """Set variable data in current scope (with shadowing)"""
        self._scope_stack[-1][var_name] = value

    def _get_var(self, var_name: str) -> Optional[V]:
        """Get variable data, checking scopes from innermost to outermost"""
        for scope in reversed(self._scope_stack):
            if var_name in scope:
                return scope[var_name]
        return None

    def _current_scope(self) -> Dict[str, V]:
        return self._scope_stack[-1]

    def _scope_depth(self) -> int:
        return len(self._scope_stack)

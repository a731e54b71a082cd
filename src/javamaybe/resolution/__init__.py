"""
Type resolution environment: solvers (lookup by name) and the facade
(static types of AST nodes).
"""

from .solvers import (
    TypeSolver, TypeDescriptor, MethodSignature, FieldSignature,
    ReflectionTypeSolver, JavaParserTypeSolver, JarTypeSolver, CombinedTypeSolver,
)
from .facade import TypeFacade

__all__ = [
    'TypeSolver', 'TypeDescriptor', 'MethodSignature', 'FieldSignature',
    'ReflectionTypeSolver', 'JavaParserTypeSolver', 'JarTypeSolver', 'CombinedTypeSolver',
    'TypeFacade',
]

"""
Java AST Transformers
=====================

Specialized transformers for different AST node types.
"""

from .base import JavaTransformer
from .literals import LiteralParser
from .declarations import DeclarationParser, Modifiers

__all__ = [
    'JavaTransformer',
    'LiteralParser',
    'DeclarationParser',
    'Modifiers',
]

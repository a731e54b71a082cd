"""
Backends: rendering the specialized AST back to source.
"""

from .java_printer import JavaPrinter

__all__ = ['JavaPrinter']

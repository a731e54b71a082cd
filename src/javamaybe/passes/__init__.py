"""
Passes
======

Rewrites of a parsed compilation unit, run by PassManager in dependency order:
AnyReplacementPass, then CompileOnlyCleanupPass.
"""

from .base import BasePass, PassManager
from .method_preprocessor import MethodPreprocessor
from .propagate_type_fork import PropagateTypeFork
from .any_replacement import AnyReplacementPass
from .compile_only_cleanup import CompileOnlyCleanupPass

__all__ = [
    'BasePass',
    'PassManager',
    'MethodPreprocessor',
    'PropagateTypeFork',
    'AnyReplacementPass',
    'CompileOnlyCleanupPass',
]

"""
Analysis for specialization: type normalization, fork contexts and
combination enumeration.
"""

from .slot_iteration import SlotIteration
from .type_fork import TypeForkPath, BuildTypeFork, is_marker_ref, is_marker_type
from . import type_normalizer

__all__ = ['SlotIteration', 'TypeForkPath', 'BuildTypeFork', 'is_marker_ref', 'is_marker_type',
           'type_normalizer']

"""
Any replacement: every method with Any-typed parameters is replaced by one
overload per combination of the types its call sites pass.

Pattern:
1. Member types first (post-order), then the declaration's own methods
2. Per method: preprocess, build the fork context, enumerate combinations
3. Per combination: clone, rewrite, insert before the original
4. Remove the original

The overloads of one method are contiguous and sit where the original was,
ordered by combination (last parameter varies fastest).
"""

import logging
from typing import List

from ..analysis.slot_iteration import SlotIteration
from ..analysis.type_fork import BuildTypeFork, TypeForkPath
from ..analysis.type_normalizer import fallback_type, runtime_type
from ..shared.errors import JavaMaybeImplementationError
from ..shared.nodes import (
    BodyDeclaration, ClassDeclaration, CompilationUnit, EnumDeclaration, MethodDeclaration, TypeDeclaration,
)
from ..shared.types import ResolvedType
from .base import BasePass
from .method_preprocessor import MethodPreprocessor
from .propagate_type_fork import PropagateTypeFork

logger = logging.getLogger(__name__)


class AnyReplacementPass(BasePass):

    def run(self, unit: CompilationUnit) -> CompilationUnit:
        for decl in list(unit.types):
            self._visit_type(decl)
        return unit

    def _visit_type(self, decl: TypeDeclaration) -> None:
        for member in decl.member_types:
            self._visit_type(member)
        if isinstance(decl, (ClassDeclaration, EnumDeclaration)):
            self._split_methods(decl)

    def _split_methods(self, decl: TypeDeclaration) -> None:
        # Snapshot: splitting inserts and removes members
        for method in list(decl.methods):
            self._split_method(decl, method)

    def _split_method(self, decl: TypeDeclaration, method: MethodDeclaration) -> None:
        logger.info("%s:", method.name)
        MethodPreprocessor.process(method)
        path = TypeForkPath.construct(self.facade, method)
        if path.is_empty():
            return
        BuildTypeFork(path).run()

        combinations = self._slots(path)
        names = [param.name for param in method.parameters]
        logger.debug("%s.%s: %d overload(s)", decl.name, method.name, len(combinations))
        for combination in combinations:
            overload = method.clone()
            PropagateTypeFork(dict(zip(names, combination))).apply(overload)
            decl.insert_member(_index_of(decl.members, method), overload)
        method.remove()

    def _slots(self, path: TypeForkPath) -> SlotIteration[ResolvedType]:
        builder = SlotIteration.builder()
        for index, param in enumerate(path.method.parameters):
            if not path.is_any_param(param.name):
                builder.add_item_to_slot(runtime_type(self.facade.get_type(param), self.facade), index)
                continue
            candidates = path.candidates(param.name)
            if not candidates:
                fallback = fallback_type(self.facade)
                logger.warning("%s: no call passes a type for parameter '%s' of %s, using %s",
                               param.location or "<unknown>", param.name, path.method.name,
                               fallback.source_name())
                candidates = [fallback]
            builder.add_items_to_slot(candidates, index)
        return builder.build()


def _index_of(members: List[BodyDeclaration], member: BodyDeclaration) -> int:
    for index, candidate in enumerate(members):
        if candidate is member:
            return index
    raise JavaMaybeImplementationError(f"method {getattr(member, 'name', member)} is not a member")

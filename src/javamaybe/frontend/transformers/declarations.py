"""
Declaration Parser - Extracted from JavaTransformer
Handles assembly of type, method and constructor declarations

With @v_args(inline=True) the optional parts of a declaration arrive as a
flat argument list with absent parts simply missing, so each optional part
is wrapped in a small marker type and picked out by isinstance.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar, Union
from typing_extensions import TypeAlias
from lark.lexer import Token

from ...shared.nodes import (
    Annotation, BlockStmt, BodyDeclaration, ClassDeclaration, ClassTypeRef,
    ConstructorDeclaration, EnumConstant, EnumDeclaration, MethodDeclaration,
    Parameter, TypeParameter, TypeRef,
)
from ...shared.source_location import SourceLocation

LarkMeta: TypeAlias = Any
LocationExtractor: TypeAlias = Callable[[LarkMeta], Optional[SourceLocation]]

P = TypeVar('P')


@dataclass
class Modifiers:
    """Keyword modifiers and annotations, in source order within each list"""
    keywords: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)


class TypeParameterList(list):
    """<T, U extends V>"""


class ParameterList(list):
    """(A a, B b)"""


class ThrowsList(list):
    """throws A, B"""


class ImplementsList(list):
    """implements A, B (classes and enums)"""


class ExtendsList(list):
    """extends A, B (interfaces)"""


class MemberList(list):
    """Body declarations of a class body or the tail of an enum body"""


class EnumConstantList(list):
    pass


@dataclass
class Superclass:
    type: ClassTypeRef


def _pick(args: Tuple[Any, ...], cls: Type[P]) -> Optional[P]:
    for arg in args:
        if isinstance(arg, cls):
            return arg
    return None


class DeclarationParser:
    """Dedicated parser for declarations with optional parts"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_class(self, meta: LarkMeta, modifiers: Modifiers, name: Token, *args: Any,
                    is_interface: bool = False) -> ClassDeclaration:
        type_params = _pick(args, TypeParameterList) or []
        members = _pick(args, MemberList) or []
        if is_interface:
            extended = list(_pick(args, ExtendsList) or [])
            implemented: List[ClassTypeRef] = []
        else:
            superclass = _pick(args, Superclass)
            extended = [superclass.type] if superclass is not None else []
            implemented = list(_pick(args, ImplementsList) or [])
        return ClassDeclaration(
            name=str(name),
            members=list(members),
            is_interface=is_interface,
            extended_types=extended,
            implemented_types=implemented,
            type_parameters=list(type_params),
            modifiers=modifiers.keywords,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    def parse_enum(self, meta: LarkMeta, modifiers: Modifiers, name: Token, *args: Any) -> EnumDeclaration:
        body: Tuple[EnumConstantList, MemberList] = args[-1]
        entries, members = body
        return EnumDeclaration(
            name=str(name),
            entries=list(entries),
            members=list(members),
            implemented_types=list(_pick(args, ImplementsList) or []),
            modifiers=modifiers.keywords,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    def parse_enum_body(self, meta: LarkMeta, *args: Any) -> Tuple[EnumConstantList, MemberList]:
        entries = _pick(args, EnumConstantList) or EnumConstantList()
        members = _pick(args, MemberList) or MemberList()
        return entries, members

    def parse_method(self, meta: LarkMeta, modifiers: Modifiers, *args: Any) -> MethodDeclaration:
        """modifiers type_parameters? result_type NAME formal_parameters throws? method_body"""
        rest = list(args)
        type_params: List[TypeParameter] = []
        if isinstance(rest[0], TypeParameterList):
            type_params = list(rest.pop(0))
        return_type, name, params = rest[0], rest[1], rest[2]
        thrown = _pick(tuple(rest[3:]), ThrowsList) or []
        body: Optional[BlockStmt] = rest[-1]
        return MethodDeclaration(
            name=str(name),
            return_type=return_type,
            parameters=list(params),
            body=body,
            type_parameters=type_params,
            thrown_types=list(thrown),
            modifiers=modifiers.keywords,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    def parse_constructor(self, meta: LarkMeta, modifiers: Modifiers, *args: Any) -> ConstructorDeclaration:
        """modifiers type_parameters? NAME formal_parameters throws? block"""
        rest = list(args)
        type_params: List[TypeParameter] = []
        if isinstance(rest[0], TypeParameterList):
            type_params = list(rest.pop(0))
        name, params = rest[0], rest[1]
        thrown = _pick(tuple(rest[2:]), ThrowsList) or []
        return ConstructorDeclaration(
            name=str(name),
            parameters=list(params),
            body=rest[-1],
            type_parameters=type_params,
            thrown_types=list(thrown),
            modifiers=modifiers.keywords,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    def parse_parameter(self, meta: LarkMeta, modifiers: Modifiers, type_ref: TypeRef,
                        *args: Token) -> Parameter:
        """modifiers type ELLIPSIS? NAME"""
        is_varargs = len(args) == 2
        name = args[-1]
        return Parameter(
            type=type_ref,
            name=str(name),
            is_varargs=is_varargs,
            modifiers=modifiers.keywords,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    def parse_enum_constant(self, meta: LarkMeta, modifiers: Modifiers, name: Token,
                            arguments: Optional[list] = None) -> EnumConstant:
        return EnumConstant(
            name=str(name),
            arguments=arguments,
            annotations=modifiers.annotations,
            location=self.extract_location(meta),
        )

    @staticmethod
    def split_modifiers(items: Tuple[Union[Token, Annotation], ...]) -> Modifiers:
        result = Modifiers()
        for item in items:
            if isinstance(item, Annotation):
                result.annotations.append(item)
            else:
                result.keywords.append(str(item))
        return result

    @staticmethod
    def members(items: Tuple[Optional[BodyDeclaration], ...]) -> MemberList:
        """Drop empty members (stray semicolons)."""
        return MemberList(m for m in items if m is not None)

"""
Literal Parser - Extracted from JavaTransformer
Handles classification of literal tokens
"""

from typing import Any, Callable, Optional
from typing_extensions import TypeAlias
from lark.lexer import Token

from ...shared.nodes import LiteralExpr
from ...shared.source_location import SourceLocation

LarkMeta: TypeAlias = Any
LocationExtractor: TypeAlias = Callable[[LarkMeta], Optional[SourceLocation]]


class LiteralParser:
    """Turns literal tokens into LiteralExpr nodes, keeping the source spelling."""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_int(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        kind = "long" if str(token)[-1] in "lL" else "int"
        return LiteralExpr(kind, str(token), location=self.extract_location(meta))

    def parse_float(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        kind = "float" if str(token)[-1] in "fF" else "double"
        return LiteralExpr(kind, str(token), location=self.extract_location(meta))

    def parse_string(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return LiteralExpr("string", str(token), location=self.extract_location(meta))

    def parse_char(self, meta: LarkMeta, token: Token) -> LiteralExpr:
        return LiteralExpr("char", str(token), location=self.extract_location(meta))

    def parse_keyword(self, meta: LarkMeta, kind: str, value: str) -> LiteralExpr:
        """true / false / null"""
        return LiteralExpr(kind, value, location=self.extract_location(meta))

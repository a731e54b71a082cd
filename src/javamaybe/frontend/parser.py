"""
Parser

Pattern: JavaParser StaticJavaParser.parse / parseType
"""

from functools import lru_cache
from pathlib import Path
import logging

from lark import Lark
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from ..shared.nodes import CompilationUnit, TypeRef
from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import PARSER_START_RULES
from .transformers.base import JavaTransformer

logger = logging.getLogger("javamaybe.frontend.parser")


class Parser:
    """
    Java source parser.

    - Takes source code, returns a CompilationUnit with parent links set
    - Preserves source locations
    - Converts lark errors to ParseError
    - Safe to share between threads (a fresh transformer per call)
    """

    def __init__(self):
        grammar_path = Path(__file__).parent / "grammar.lark"
        # Earley: casts and parenthesized expressions share a prefix that an
        # LALR(1) table cannot split
        self.parser = Lark.open(
            str(grammar_path),
            start=PARSER_START_RULES,
            parser='earley',
            lexer='basic',
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, source: str, source_file: str = "Main.java") -> CompilationUnit:
        """Parse a whole source file."""
        return self._run(source, source_file, "compilation_unit")

    def parse_type(self, text: str) -> TypeRef:
        """Parse a type on its own: "java.util.List<String>", "int[]", "void"."""
        return self._run(text, "<type>", "type_only")

    def _run(self, source: str, source_file: str, start: str):
        transformer = JavaTransformer()
        transformer.current_file = source_file
        try:
            tree = self.parser.parse(source, start=start)
            return transformer.transform(tree)
        except VisitError as e:
            # Errors raised inside transformer callbacks are wrapped by lark
            raise e.orig_exc from e
        except UnexpectedInput as e:
            location = None
            line = getattr(e, 'line', -1)
            column = getattr(e, 'column', -1)
            if line is not None and line > 0:
                location = SourceLocation(file=source_file, line=line, column=max(column, 1))
            logger.debug("parse of %s failed: %s", source_file, e)
            raise ParseError(f"Parse error: {_describe(e)}", source_file, location,
                             source_code=source) from e
        except LarkError as e:
            raise ParseError(f"Parse error: {e}", source_file, source_code=source) from e


def _describe(e: UnexpectedInput) -> str:
    token = getattr(e, 'token', None)
    if token is not None:
        if token.type in ('$END', '<EOF>'):
            return "unexpected end of input"
        return f"unexpected token '{token}'"
    char = getattr(e, 'char', None)
    if char is not None:
        return f"unexpected character '{char}'"
    return str(e).strip().splitlines()[0]


@lru_cache(maxsize=None)
def default_parser() -> Parser:
    """Process-wide parser; building the Earley tables once is the slow part."""
    return Parser()


def parse_type(text: str) -> TypeRef:
    return default_parser().parse_type(text)

"""
Shared components: AST, resolved types, errors, source locations.
"""

from .source_location import SourceLocation, UNKNOWN_LOCATION
from .errors import (
    Error, ErrorReporter, JavaMaybeError, ConfigurationError, ArchiveLoadError,
    JavaSourceError, ParseError, JavaMaybeImplementationError,
)
from .types import (
    TypeKind, ResolvedType, PrimitiveType, ReferenceType, ArrayType, TypeVariable, WildcardType,
    NULL, VOID, UNRESOLVED, OBJECT, STRING, PRIMITIVES,
)
from .ast_visitor import ASTVisitor, ScopedASTVisitor

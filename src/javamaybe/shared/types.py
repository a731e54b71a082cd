"""
Resolved Type System

Pattern: JavaParser symbol solver ResolvedType
Reference: the "what is the static type of this node" answers of TypeFacade

Convention: these are *answers*, not syntax. Syntax lives in shared/nodes.py
as TypeRef nodes; TypeFacade turns a TypeRef or an expression into one of the
types below. All types are immutable and hashable so they can key dicts and
populate insertion-ordered candidate sets.
"""

from dataclasses import dataclass
from typing import Tuple, Optional
from enum import Enum


JAVA_LANG_PACKAGE = "java.lang"


class TypeKind(Enum):
    """Type kind (JavaParser pattern: ResolvedType.isXxx())."""
    PRIMITIVE = "primitive"
    REFERENCE = "reference"
    ARRAY = "array"
    TYPE_VARIABLE = "type_variable"
    WILDCARD = "wildcard"
    NULL = "null"
    VOID = "void"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ResolvedType:
    """
    Base resolved type.

    describe() is the fully qualified spelling (java.lang.String, int[]);
    source_name() is what the specializer writes back into generated code.
    """
    kind: TypeKind

    def describe(self) -> str:
        raise NotImplementedError

    def source_name(self) -> str:
        return self.describe()

    def is_primitive(self) -> bool:
        return self.kind == TypeKind.PRIMITIVE

    def is_reference(self) -> bool:
        return self.kind == TypeKind.REFERENCE

    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    def is_type_variable(self) -> bool:
        return self.kind == TypeKind.TYPE_VARIABLE

    def is_null(self) -> bool:
        return self.kind == TypeKind.NULL

    def is_wildcard(self) -> bool:
        return self.kind == TypeKind.WILDCARD

    def is_void(self) -> bool:
        return self.kind == TypeKind.VOID

    def is_unresolved(self) -> bool:
        return self.kind == TypeKind.UNRESOLVED

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class PrimitiveType(ResolvedType):
    """Primitive type (int, double, boolean, ...)."""
    name: str

    def __init__(self, name: str):
        object.__setattr__(self, 'kind', TypeKind.PRIMITIVE)
        object.__setattr__(self, 'name', name)

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ReferenceType(ResolvedType):
    """
    Class, interface or enum type, with optional type arguments.

    qualified_name uses '.' for both packages and nesting (a.b.Outer.Inner).
    """
    qualified_name: str
    type_arguments: Tuple[ResolvedType, ...] = ()

    def __init__(self, qualified_name: str, type_arguments: Tuple[ResolvedType, ...] = ()):
        object.__setattr__(self, 'kind', TypeKind.REFERENCE)
        object.__setattr__(self, 'qualified_name', qualified_name)
        object.__setattr__(self, 'type_arguments', tuple(type_arguments))

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit('.', 1)[-1]

    @property
    def package_name(self) -> str:
        if '.' not in self.qualified_name:
            return ""
        return self.qualified_name.rsplit('.', 1)[0]

    def erasure(self) -> 'ReferenceType':
        if not self.type_arguments:
            return self
        return ReferenceType(self.qualified_name)

    def describe(self) -> str:
        if not self.type_arguments:
            return self.qualified_name
        args = ", ".join(t.describe() for t in self.type_arguments)
        return f"{self.qualified_name}<{args}>"

    def source_name(self) -> str:
        if self.package_name == JAVA_LANG_PACKAGE:
            base = self.simple_name
        else:
            base = self.qualified_name
        if not self.type_arguments:
            return base
        args = ", ".join(t.source_name() for t in self.type_arguments)
        return f"{base}<{args}>"

    def __repr__(self) -> str:
        return f"ReferenceType({self.describe()})"


@dataclass(frozen=True)
class ArrayType(ResolvedType):
    """Array type; component may itself be an array."""
    component: ResolvedType

    def __init__(self, component: ResolvedType):
        object.__setattr__(self, 'kind', TypeKind.ARRAY)
        object.__setattr__(self, 'component', component)

    def describe(self) -> str:
        return f"{self.component.describe()}[]"

    def source_name(self) -> str:
        return f"{self.component.source_name()}[]"

    def __repr__(self) -> str:
        return f"ArrayType({self.describe()})"


@dataclass(frozen=True)
class TypeVariable(ResolvedType):
    """Unbound type variable (T, E, ...). Normalized to Object before use."""
    name: str

    def __init__(self, name: str):
        object.__setattr__(self, 'kind', TypeKind.TYPE_VARIABLE)
        object.__setattr__(self, 'name', name)

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"TypeVariable({self.name})"


@dataclass(frozen=True)
class WildcardType(ResolvedType):
    """
    Wildcard type argument: ?, ? extends bound, ? super bound.

    Only appears inside type_arguments; member lookups see upper_bound().
    """
    bound: Optional[ResolvedType] = None
    is_super: bool = False

    def __init__(self, bound: Optional[ResolvedType] = None, is_super: bool = False):
        object.__setattr__(self, 'kind', TypeKind.WILDCARD)
        object.__setattr__(self, 'bound', bound)
        object.__setattr__(self, 'is_super', is_super)

    def upper_bound(self) -> ResolvedType:
        if self.bound is None or self.is_super:
            return OBJECT
        return self.bound

    def describe(self) -> str:
        return self._spell(self.bound.describe() if self.bound is not None else None)

    def source_name(self) -> str:
        return self._spell(self.bound.source_name() if self.bound is not None else None)

    def _spell(self, bound: Optional[str]) -> str:
        if bound is None:
            return "?"
        return f"? {'super' if self.is_super else 'extends'} {bound}"

    def __repr__(self) -> str:
        return f"WildcardType({self.describe()})"


@dataclass(frozen=True)
class _SingletonType(ResolvedType):
    label: str

    def __init__(self, kind: TypeKind, label: str):
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'label', label)

    def describe(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return self.label.upper()


NULL = _SingletonType(TypeKind.NULL, "null")
VOID = _SingletonType(TypeKind.VOID, "void")
UNRESOLVED = _SingletonType(TypeKind.UNRESOLVED, "<unresolved>")

BOOLEAN = PrimitiveType("boolean")
BYTE = PrimitiveType("byte")
SHORT = PrimitiveType("short")
CHAR = PrimitiveType("char")
INT = PrimitiveType("int")
LONG = PrimitiveType("long")
FLOAT = PrimitiveType("float")
DOUBLE = PrimitiveType("double")

PRIMITIVES = {t.name: t for t in (BOOLEAN, BYTE, SHORT, CHAR, INT, LONG, FLOAT, DOUBLE)}

OBJECT = ReferenceType("java.lang.Object")
STRING = ReferenceType("java.lang.String")
CLASS = ReferenceType("java.lang.Class")

# Numeric widening order (JLS 5.1.2); char widens to int and above only
_NUMERIC_RANK = {"byte": 1, "short": 2, "char": 2, "int": 3, "long": 4, "float": 5, "double": 6}

BOXES = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "short": "java.lang.Short",
    "char": "java.lang.Character",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}
UNBOXES = {boxed: prim for prim, boxed in BOXES.items()}


def is_numeric(ty: ResolvedType) -> bool:
    return isinstance(ty, PrimitiveType) and ty.name in _NUMERIC_RANK


def unbox(ty: ResolvedType) -> ResolvedType:
    """Unboxing conversion; returns ty unchanged when it is not a box type."""
    if isinstance(ty, ReferenceType) and ty.qualified_name in UNBOXES:
        return PRIMITIVES[UNBOXES[ty.qualified_name]]
    return ty


def binary_numeric_promotion(left: ResolvedType, right: ResolvedType) -> Optional[ResolvedType]:
    """JLS 5.6.2: widest of the two, but never narrower than int."""
    left, right = unbox(left), unbox(right)
    if not (is_numeric(left) and is_numeric(right)):
        return None
    for candidate in (DOUBLE, FLOAT, LONG):
        if candidate in (left, right):
            return candidate
    return INT


def unary_numeric_promotion(operand: ResolvedType) -> Optional[ResolvedType]:
    operand = unbox(operand)
    if not is_numeric(operand):
        return None
    if operand.name in ("byte", "short", "char"):
        return INT
    return operand


def is_widening(source: ResolvedType, target: ResolvedType) -> bool:
    """Identity or widening primitive conversion (with unboxing of the source)."""
    source = unbox(source)
    if source == target:
        return True
    if not (is_numeric(source) and is_numeric(target)):
        return False
    if target.name == "char":
        return False
    if source.name == "char":
        return _NUMERIC_RANK[target.name] >= _NUMERIC_RANK["int"]
    return _NUMERIC_RANK[source.name] < _NUMERIC_RANK[target.name]

"""
Type normalizer: concrete types for resolver answers.

A type variable, a resolution gap or the null type is replaced by the
fallback root type, java.lang.Object as the environment resolves it. The
fallback is computed once per environment by asking the environment for the
type of `new Object()` in a tiny parsed class, and kept in a weak side
table: dropping the environment drops its entry.

Type variables and gaps nested in type arguments cannot become Object
(List<T> is no List<Object>); they become wildcards instead.
"""

import logging
import threading
import weakref

from ..resolution.facade import TypeFacade
from ..resolution.solvers import TypeSolver
from ..shared.nodes import Node, ObjectCreationExpr
from ..shared.types import ArrayType, ReferenceType, ResolvedType, TypeKind, WildcardType
from ..utils.config import FALLBACK_TYPE_NAME

logger = logging.getLogger(__name__)

# Fallback probe: an in-context `new java.lang.Object()` expression
_OBJECT_PROBE_SOURCE = "class T{{new " + FALLBACK_TYPE_NAME + "().clone();}}"

_NORMALIZED_KINDS = (TypeKind.TYPE_VARIABLE, TypeKind.UNRESOLVED, TypeKind.NULL)

_solved_object: "weakref.WeakKeyDictionary[TypeSolver, ResolvedType]" = weakref.WeakKeyDictionary()
_solved_object_lock = threading.Lock()


def _object_probe() -> ObjectCreationExpr:
    from ..frontend.parser import default_parser
    unit = default_parser().parse(_OBJECT_PROBE_SOURCE, "<object-probe>")
    return unit.find_all(ObjectCreationExpr)[0]


def fallback_type(facade: TypeFacade) -> ResolvedType:
    """The fallback type for facade's environment (same object on every call)."""
    environment = facade.type_solver
    with _solved_object_lock:
        solved = _solved_object.get(environment)
        if solved is None:
            solved = facade.get_type(_object_probe())
            _solved_object[environment] = solved
            logger.debug("fallback type for %r is %s", environment, solved.describe())
        return solved


def runtime_type(type: ResolvedType, facade: TypeFacade) -> ResolvedType:
    """
    type itself, or a type that can be written anywhere and still accepts
    every value of type. Never raises.

    - T, gaps and null become the fallback
    - arrays normalize their component
    - type arguments are normalized by _runtime_argument
    """
    if type.kind in _NORMALIZED_KINDS:
        logger.debug("no concrete type for %s, using fallback", type.describe())
        return fallback_type(facade)
    if isinstance(type, WildcardType):
        return runtime_type(type.upper_bound(), facade)
    if isinstance(type, ArrayType):
        component = runtime_type(type.component, facade)
        return type if component == type.component else ArrayType(component)
    if isinstance(type, ReferenceType) and type.type_arguments:
        arguments = tuple(_runtime_argument(a, facade) for a in type.type_arguments)
        if arguments != type.type_arguments:
            normalized = ReferenceType(type.qualified_name, arguments)
            logger.debug("type arguments of %s normalized to %s", type.describe(), normalized.describe())
            return normalized
    return type


def _runtime_argument(argument: ResolvedType, facade: TypeFacade) -> ResolvedType:
    """
    A type argument that C<argument> is still a subtype of C<result> for.

    Type arguments are invariant, so anything that has to change is widened
    through a wildcard: List<T> -> List<?>, List<List<T>> -> List<? extends List<?>>.
    """
    if argument.kind in _NORMALIZED_KINDS:
        return WildcardType()
    if isinstance(argument, WildcardType):
        if argument.bound is None:
            return argument
        if argument.bound.kind in _NORMALIZED_KINDS:
            return WildcardType()
        bound = runtime_type(argument.bound, facade)
        if bound == argument.bound:
            return argument
        # A lower bound cannot be widened
        return WildcardType() if argument.is_super else WildcardType(bound)
    normalized = runtime_type(argument, facade)
    return argument if normalized == argument else WildcardType(normalized)


def get_type(node: Node, facade: TypeFacade) -> ResolvedType:
    return runtime_type(facade.get_type(node), facade)

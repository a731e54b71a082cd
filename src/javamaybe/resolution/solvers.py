"""
Type Resolution Environment: type solvers

Pattern: JavaParser symbol solver TypeSolver family
- ReflectionTypeSolver: built-in java.lang / java.util types
- JavaParserTypeSolver: types declared in a source directory
- JarTypeSolver: types packaged in a jar/zip archive
- CombinedTypeSolver: prioritized list, first hit wins

A solver answers one question, "what is the type with this qualified name?",
with a TypeDescriptor or None. Static typing of expressions lives in
resolution/facade.py.

Solvers keep identity hashing (no __eq__): they are used as weak dictionary
keys by the type normalizer.
"""

import logging
import re
import threading
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from ..shared.errors import ArchiveLoadError, ConfigurationError, JavaSourceError
from ..shared.nodes import (
    CompilationUnit, EnumDeclaration, FieldDeclaration, MethodDeclaration, TypeDeclaration, TypeRef,
)
from ..utils.config import CLASS_FILE_EXTENSION, DEFAULT_FILE_ENCODING, JAVA_FILE_EXTENSION
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)


# ============================================================================
# Descriptors
# ============================================================================

@dataclass
class FieldSignature:
    name: str
    type: TypeRef
    is_static: bool = False


@dataclass
class MethodSignature:
    """
    Declared shape of a method. Types are TypeRef syntax, resolved by the
    facade in the context of the declaring type.
    """
    name: str
    parameter_types: List[TypeRef]
    return_type: TypeRef
    is_varargs: bool = False
    is_static: bool = False
    type_parameters: List[str] = field(default_factory=list)

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def accepts_arity(self, count: int) -> bool:
        if self.is_varargs:
            return count >= self.arity - 1
        return count == self.arity


@dataclass
class TypeDescriptor:
    """
    What a solver knows about a type.

    declaration is set for source-backed types; class-file entries of an
    archive carry a name only (members empty, complete=False).
    """
    qualified_name: str
    kind: str = "class"
    type_parameters: List[str] = field(default_factory=list)
    supertypes: List[TypeRef] = field(default_factory=list)
    fields: Dict[str, FieldSignature] = field(default_factory=dict)
    methods: Dict[str, List[MethodSignature]] = field(default_factory=dict)
    member_types: List[str] = field(default_factory=list)
    declaration: Optional[TypeDeclaration] = None
    complete: bool = True

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit('.', 1)[-1]

    def get_methods(self, name: str) -> List[MethodSignature]:
        return self.methods.get(name, [])

    def add_method(self, signature: MethodSignature) -> None:
        self.methods.setdefault(signature.name, []).append(signature)


def describe_declaration(decl: TypeDeclaration, qualified_name: Optional[str] = None) -> TypeDescriptor:
    """Build a descriptor from a parsed type declaration (parents must be linked)."""
    if isinstance(decl, EnumDeclaration):
        kind = "enum"
        supertypes = list(decl.implemented_types)
    else:
        kind = "interface" if decl.is_interface else "class"
        supertypes = list(decl.extended_types) + list(decl.implemented_types)
    descriptor = TypeDescriptor(
        qualified_name=qualified_name or decl.qualified_name,
        kind=kind,
        type_parameters=[p.name for p in decl.type_parameters],
        supertypes=supertypes,
        member_types=[t.name for t in decl.member_types],
        declaration=decl,
    )
    for member in decl.members:
        if isinstance(member, FieldDeclaration):
            for var in member.variables:
                descriptor.fields[var.name] = FieldSignature(var.name, member.type, member.is_static())
        elif isinstance(member, MethodDeclaration):
            descriptor.add_method(MethodSignature(
                name=member.name,
                parameter_types=[p.type for p in member.parameters],
                return_type=member.return_type,
                is_varargs=bool(member.parameters) and member.parameters[-1].is_varargs,
                is_static=member.is_static(),
                type_parameters=[p.name for p in member.type_parameters],
            ))
    return descriptor


def find_type_in_unit(unit: CompilationUnit, qualified_name: str) -> Optional[TypeDeclaration]:
    """Find a top-level or nested declaration of unit by qualified name."""
    prefix = unit.package + "." if unit.package else ""
    if not qualified_name.startswith(prefix):
        return None
    parts = qualified_name[len(prefix):].split('.')
    candidates: List[TypeDeclaration] = unit.types
    found: Optional[TypeDeclaration] = None
    for part in parts:
        found = next((t for t in candidates if t.name == part), None)
        if found is None:
            return None
        candidates = found.member_types
    return found


# ============================================================================
# Solvers
# ============================================================================

class TypeSolver:
    """Base solver: a lookup by qualified name that may miss."""

    def try_to_solve_type(self, qualified_name: str) -> Optional[TypeDescriptor]:
        raise NotImplementedError

    def has_type(self, qualified_name: str) -> bool:
        return self.try_to_solve_type(qualified_name) is not None


# Built-in types. Header: kind name[<params>] [extends ...] [implements ...]
# Members: [static] ReturnType name(ParamTypes) | field [static] Type name
# java.lang types may be written by simple name.
_BUILTIN_TYPES = """
class java.lang.Object
    boolean equals(Object)
    int hashCode()
    String toString()
    Class<?> getClass()
interface java.lang.CharSequence
    int length()
    char charAt(int)
    CharSequence subSequence(int, int)
interface java.lang.Comparable<T>
    int compareTo(T)
interface java.lang.Iterable<T>
    java.util.Iterator<T> iterator()
interface java.lang.Runnable
    void run()
interface java.lang.AutoCloseable
    void close()
class java.lang.String implements CharSequence, Comparable<String>
    int length()
    char charAt(int)
    boolean isEmpty()
    String substring(int)
    String substring(int, int)
    int indexOf(String)
    int indexOf(int)
    boolean contains(CharSequence)
    boolean startsWith(String)
    boolean endsWith(String)
    boolean equalsIgnoreCase(String)
    String trim()
    String toUpperCase()
    String toLowerCase()
    String replace(CharSequence, CharSequence)
    String[] split(String)
    char[] toCharArray()
    String concat(String)
    int compareTo(String)
    static String valueOf(Object)
    static String format(String, Object...)
    static String join(CharSequence, CharSequence...)
class java.lang.StringBuilder implements CharSequence
    StringBuilder append(Object)
    StringBuilder insert(int, Object)
    StringBuilder reverse()
    int length()
    char charAt(int)
    String toString()
class java.lang.Number
    int intValue()
    long longValue()
    float floatValue()
    double doubleValue()
class java.lang.Integer extends Number implements Comparable<Integer>
    field static int MAX_VALUE
    field static int MIN_VALUE
    static Integer valueOf(int)
    static int parseInt(String)
    static String toString(int)
    static int compare(int, int)
    int compareTo(Integer)
class java.lang.Long extends Number implements Comparable<Long>
    field static long MAX_VALUE
    field static long MIN_VALUE
    static Long valueOf(long)
    static long parseLong(String)
    int compareTo(Long)
class java.lang.Double extends Number implements Comparable<Double>
    field static double MAX_VALUE
    field static double MIN_VALUE
    field static double NaN
    static Double valueOf(double)
    static double parseDouble(String)
    static boolean isNaN(double)
    int compareTo(Double)
class java.lang.Float extends Number implements Comparable<Float>
    static Float valueOf(float)
    static float parseFloat(String)
    int compareTo(Float)
class java.lang.Short extends Number implements Comparable<Short>
    static Short valueOf(short)
class java.lang.Byte extends Number implements Comparable<Byte>
    static Byte valueOf(byte)
class java.lang.Character implements Comparable<Character>
    static Character valueOf(char)
    static boolean isDigit(char)
    static boolean isLetter(char)
    static boolean isWhitespace(char)
    char charValue()
class java.lang.Boolean implements Comparable<Boolean>
    field static Boolean TRUE
    field static Boolean FALSE
    static Boolean valueOf(boolean)
    static boolean parseBoolean(String)
    boolean booleanValue()
class java.lang.Void
class java.lang.Math
    static int abs(int)
    static long abs(long)
    static double abs(double)
    static int max(int, int)
    static long max(long, long)
    static double max(double, double)
    static int min(int, int)
    static long min(long, long)
    static double min(double, double)
    static double sqrt(double)
    static double pow(double, double)
    static double floor(double)
    static double ceil(double)
    static long round(double)
    static double random()
    field static double PI
    field static double E
class java.lang.System
    field static java.io.PrintStream out
    field static java.io.PrintStream err
    static long currentTimeMillis()
    static long nanoTime()
    static String getProperty(String)
    static String lineSeparator()
    static int identityHashCode(Object)
class java.lang.Class<T>
    String getName()
    String getSimpleName()
    boolean isInstance(Object)
    T cast(Object)
class java.lang.Enum<E> implements Comparable<E>
    String name()
    int ordinal()
class java.lang.Thread implements Runnable
    void start()
    void join()
    static Thread currentThread()
    static void sleep(long)
class java.lang.Throwable
    String getMessage()
    Throwable getCause()
    void printStackTrace()
class java.lang.Exception extends Throwable
class java.lang.RuntimeException extends Exception
class java.lang.Error extends Throwable
class java.lang.IllegalArgumentException extends RuntimeException
class java.lang.IllegalStateException extends RuntimeException
class java.lang.NullPointerException extends RuntimeException
class java.lang.UnsupportedOperationException extends RuntimeException
class java.lang.IndexOutOfBoundsException extends RuntimeException
class java.lang.ClassCastException extends RuntimeException
class java.lang.InterruptedException extends Exception
interface java.lang.Override
interface java.lang.Deprecated
interface java.lang.SuppressWarnings
interface java.lang.FunctionalInterface
interface java.lang.SafeVarargs
class java.io.PrintStream
    void println()
    void println(Object)
    void print(Object)
    java.io.PrintStream printf(String, Object...)
    void flush()
class java.io.IOException extends Exception
interface java.util.Iterator<E>
    boolean hasNext()
    E next()
    void remove()
interface java.util.Collection<E> extends Iterable<E>
    int size()
    boolean isEmpty()
    boolean contains(Object)
    boolean add(E)
    boolean remove(Object)
    void clear()
    Object[] toArray()
    java.util.stream.Stream<E> stream()
interface java.util.List<E> extends java.util.Collection<E>
    E get(int)
    E set(int, E)
    void add(int, E)
    E remove(int)
    int indexOf(Object)
    java.util.List<E> subList(int, int)
    static <T> java.util.List<T> of(T...)
interface java.util.Set<E> extends java.util.Collection<E>
    static <T> java.util.Set<T> of(T...)
interface java.util.Queue<E> extends java.util.Collection<E>
    boolean offer(E)
    E poll()
    E peek()
interface java.util.Deque<E> extends java.util.Queue<E>
    void push(E)
    E pop()
interface java.util.Map<K, V>
    V get(Object)
    V put(K, V)
    V remove(Object)
    V getOrDefault(Object, V)
    boolean containsKey(Object)
    boolean containsValue(Object)
    int size()
    boolean isEmpty()
    void clear()
    java.util.Set<K> keySet()
    java.util.Collection<V> values()
    java.util.Set<java.util.Map.Entry<K, V>> entrySet()
interface java.util.Map.Entry<K, V>
    K getKey()
    V getValue()
    V setValue(V)
class java.util.ArrayList<E> implements java.util.List<E>
class java.util.LinkedList<E> implements java.util.List<E>, java.util.Deque<E>
class java.util.ArrayDeque<E> implements java.util.Deque<E>
class java.util.HashSet<E> implements java.util.Set<E>
class java.util.LinkedHashSet<E> extends java.util.HashSet<E>
class java.util.TreeSet<E> implements java.util.Set<E>
class java.util.HashMap<K, V> implements java.util.Map<K, V>
class java.util.LinkedHashMap<K, V> extends java.util.HashMap<K, V>
class java.util.TreeMap<K, V> implements java.util.Map<K, V>
class java.util.Optional<T>
    T get()
    boolean isPresent()
    T orElse(T)
    static <U> java.util.Optional<U> of(U)
    static <U> java.util.Optional<U> ofNullable(U)
    static <U> java.util.Optional<U> empty()
interface java.util.Comparator<T>
    int compare(T, T)
class java.util.Objects
    static boolean equals(Object, Object)
    static int hash(Object...)
    static int hashCode(Object)
    static String toString(Object)
    static boolean isNull(Object)
    static <U> U requireNonNull(U)
    static <U> U requireNonNull(U, String)
class java.util.Arrays
    static String toString(Object[])
    static <U> java.util.List<U> asList(U...)
class java.util.Collections
    static <U> java.util.List<U> emptyList()
    static <U> java.util.List<U> singletonList(U)
    static <U> java.util.List<U> unmodifiableList(java.util.List<U>)
interface java.util.stream.Stream<T>
    long count()
class javamaybe.Any
interface javamaybe.CompileOnly
"""

_HEADER = re.compile(
    r"^(?P<kind>class|interface|enum)\s+(?P<name>[\w.$]+)"
    r"(?:<(?P<params>[^>]*)>)?"
    r"(?:\s+extends\s+(?P<extends>.+?))?"
    r"(?:\s+implements\s+(?P<implements>.+?))?\s*$"
)
_METHOD = re.compile(
    r"^(?P<static>static\s+)?(?:<(?P<tparams>[^>]*)>\s+)?"
    r"(?P<ret>.+?)\s+(?P<name>\w+)\((?P<params>.*)\)$"
)
_FIELD = re.compile(r"^field\s+(?P<static>static\s+)?(?P<type>.+?)\s+(?P<name>\w+)$")


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on separator outside <...>: "Map<K, V>, int" -> ["Map<K, V>", "int"]"""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in text:
        if ch == '<':
            depth += 1
        elif ch == '>':
            depth -= 1
        if ch == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


class ReflectionTypeSolver(TypeSolver):
    """
    Answers queries for the built-in runtime types.

    The member table is parsed on first use of each type; signature types go
    through the same grammar as source code (Parser.parse_type).
    """

    def __init__(self):
        self._blocks: Dict[str, List[str]] = {}
        self._cache: Dict[str, TypeDescriptor] = {}
        self._lock = threading.Lock()
        header: Optional[str] = None
        for line in _BUILTIN_TYPES.strip().splitlines():
            if not line.strip():
                continue
            if line.startswith(" "):
                self._blocks[header].append(line.strip())
            else:
                header = _HEADER.match(line).group("name")
                self._blocks[header] = [line]

    def known_types(self) -> List[str]:
        return list(self._blocks)

    def try_to_solve_type(self, qualified_name: str) -> Optional[TypeDescriptor]:
        block = self._blocks.get(qualified_name)
        if block is None:
            return None
        with self._lock:
            descriptor = self._cache.get(qualified_name)
            if descriptor is None:
                descriptor = self._build(block)
                self._cache[qualified_name] = descriptor
        return descriptor

    def _build(self, block: List[str]) -> TypeDescriptor:
        from ..frontend.parser import parse_type

        header = _HEADER.match(block[0])
        supertypes = []
        for clause in (header.group("extends"), header.group("implements")):
            if clause:
                supertypes.extend(parse_type(t) for t in split_top_level(clause))
        params = header.group("params")
        descriptor = TypeDescriptor(
            qualified_name=header.group("name"),
            kind=header.group("kind"),
            type_parameters=split_top_level(params) if params else [],
            supertypes=supertypes,
        )
        for line in block[1:]:
            field_match = _FIELD.match(line)
            if field_match:
                name = field_match.group("name")
                descriptor.fields[name] = FieldSignature(
                    name, parse_type(field_match.group("type")), bool(field_match.group("static")))
                continue
            m = _METHOD.match(line)
            param_texts = split_top_level(m.group("params"))
            is_varargs = bool(param_texts) and param_texts[-1].endswith("...")
            if is_varargs:
                param_texts[-1] = param_texts[-1][:-3] + "[]"
            tparams = m.group("tparams")
            descriptor.add_method(MethodSignature(
                name=m.group("name"),
                parameter_types=[parse_type(t) for t in param_texts],
                return_type=parse_type(m.group("ret")),
                is_varargs=is_varargs,
                is_static=bool(m.group("static")),
                type_parameters=split_top_level(tparams) if tparams else [],
            ))
        return descriptor


class _UnitSource(TypeSolver):
    """Shared lazy parse-and-index logic for source-backed solvers."""

    def __init__(self):
        self._units: Dict[str, Optional[CompilationUnit]] = {}
        self._lock = threading.Lock()

    def _load_unit(self, key: str) -> Optional[CompilationUnit]:
        raise NotImplementedError

    def _unit(self, key: str) -> Optional[CompilationUnit]:
        with self._lock:
            if key not in self._units:
                try:
                    self._units[key] = self._load_unit(key)
                except JavaSourceError as e:
                    # A broken file on the source path is a resolution gap
                    logger.warning("cannot parse %s: %s", key, e.message)
                    self._units[key] = None
            return self._units[key]

    def _solve_in(self, key: str, qualified_name: str) -> Optional[TypeDescriptor]:
        unit = self._unit(key)
        if unit is None:
            return None
        decl = find_type_in_unit(unit, qualified_name)
        if decl is None:
            return None
        return describe_declaration(decl, qualified_name)


def _candidate_paths(qualified_name: str) -> Iterator[str]:
    """a.b.Outer.Inner -> a/b/Outer/Inner, a/b/Outer, a/b, a (as relative paths)"""
    parts = qualified_name.split('.')
    for k in range(len(parts), 0, -1):
        yield "/".join(parts[:k])


class JavaParserTypeSolver(_UnitSource):
    """Types declared under a source root: <root>/<package path>/<Outer>.java"""

    def __init__(self, root: Union[str, Path]):
        super().__init__()
        self.root = Path(root)
        if not self.root.is_dir():
            raise ConfigurationError(f"source path {self.root} is not a directory")

    def try_to_solve_type(self, qualified_name: str) -> Optional[TypeDescriptor]:
        for relative in _candidate_paths(qualified_name):
            path = self.root / (relative + JAVA_FILE_EXTENSION)
            if path.is_file():
                return self._solve_in(str(path), qualified_name)
        return None

    def _load_unit(self, key: str) -> Optional[CompilationUnit]:
        from ..frontend.parser import default_parser
        return default_parser().parse(read_source_file(key), key)

    def __repr__(self) -> str:
        return f"JavaParserTypeSolver({self.root})"


class JarTypeSolver(_UnitSource):
    """
    Types packaged in a jar or zip archive.

    .class entries are indexed by name only (no members); .java entries are
    parsed on demand. The archive is read once at construction to build the
    index; an unreadable archive fails construction with ArchiveLoadError.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._class_entries: Dict[str, str] = {}
        self._source_entries: Dict[str, str] = {}
        try:
            with zipfile.ZipFile(self.path) as archive:
                names = archive.namelist()
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveLoadError(str(self.path), str(e)) from e
        for name in names:
            if name.endswith(CLASS_FILE_EXTENSION):
                stem = name[:-len(CLASS_FILE_EXTENSION)]
                if stem.rsplit('/', 1)[-1] in ("module-info", "package-info"):
                    continue
                self._class_entries[stem.replace('/', '.').replace('$', '.')] = name
            elif name.endswith(JAVA_FILE_EXTENSION):
                self._source_entries[name[:-len(JAVA_FILE_EXTENSION)]] = name
        logger.debug("indexed %s: %d classes, %d sources", self.path,
                     len(self._class_entries), len(self._source_entries))

    def try_to_solve_type(self, qualified_name: str) -> Optional[TypeDescriptor]:
        for relative in _candidate_paths(qualified_name):
            entry = self._source_entries.get(relative)
            if entry is not None:
                descriptor = self._solve_in(entry, qualified_name)
                if descriptor is not None:
                    return descriptor
        if qualified_name in self._class_entries:
            return TypeDescriptor(qualified_name=qualified_name, complete=False)
        return None

    def _load_unit(self, key: str) -> Optional[CompilationUnit]:
        from ..frontend.parser import default_parser
        try:
            with zipfile.ZipFile(self.path) as archive:
                source = archive.read(key).decode(DEFAULT_FILE_ENCODING)
        except (OSError, zipfile.BadZipFile, KeyError) as e:
            logger.warning("cannot read %s from %s: %s", key, self.path, e)
            return None
        return default_parser().parse(source, f"{self.path}!/{key}")

    def __repr__(self) -> str:
        return f"JarTypeSolver({self.path})"


class CombinedTypeSolver(TypeSolver):
    """Tries each solver in order; the first one that knows the type wins."""

    def __init__(self, *solvers: TypeSolver):
        self.solvers: List[TypeSolver] = list(solvers)

    def add(self, solver: TypeSolver) -> None:
        self.solvers.append(solver)

    def try_to_solve_type(self, qualified_name: str) -> Optional[TypeDescriptor]:
        for solver in self.solvers:
            descriptor = solver.try_to_solve_type(qualified_name)
            if descriptor is not None:
                return descriptor
        return None

    def __repr__(self) -> str:
        return f"CombinedTypeSolver({', '.join(repr(s) for s in self.solvers)})"

"""
Tests for resolved types: spelling, boxing and numeric conversions.
"""

import pytest
from javamaybe.shared.nodes import ArrayTypeRef, ClassTypeRef, PrimitiveTypeRef, TypeRef, WildcardTypeRef
from javamaybe.shared.types import (
    ArrayType, BOOLEAN, CHAR, DOUBLE, FLOAT, INT, LONG, NULL, OBJECT, PrimitiveType,
    ReferenceType, SHORT, STRING, TypeVariable, UNRESOLVED, VOID, WildcardType,
    binary_numeric_promotion, is_widening, unary_numeric_promotion, unbox,
)


class TestSpelling:

    def test_java_lang_types_use_simple_name(self):
        assert STRING.source_name() == "String"
        assert STRING.describe() == "java.lang.String"

    def test_other_packages_stay_qualified(self):
        list_type = ReferenceType("java.util.List", (STRING,))
        assert list_type.source_name() == "java.util.List<String>"
        assert list_type.describe() == "java.util.List<java.lang.String>"

    def test_array_spelling(self):
        assert ArrayType(ArrayType(INT)).source_name() == "int[][]"

    def test_erasure_drops_arguments(self):
        assert ReferenceType("java.util.List", (STRING,)).erasure() == ReferenceType("java.util.List")

    def test_wildcard_spelling(self):
        number = ReferenceType("java.lang.Number")
        assert WildcardType().source_name() == "?"
        assert WildcardType(number).source_name() == "? extends Number"
        assert WildcardType(number, is_super=True).describe() == "? super java.lang.Number"
        assert WildcardType(number, is_super=True).upper_bound() == OBJECT
        assert WildcardType(number).upper_bound() == number

    def test_types_are_hashable_values(self):
        assert ReferenceType("java.lang.String") == STRING
        assert len({STRING, ReferenceType("java.lang.String"), INT, PrimitiveType("int")}) == 2

    def test_kinds(self):
        assert NULL.is_null()
        assert VOID.is_void()
        assert UNRESOLVED.is_unresolved()
        assert TypeVariable("T").is_type_variable()
        assert INT.is_primitive()
        assert OBJECT.is_reference()
        assert WildcardType().is_wildcard()


class TestConversions:

    def test_unbox(self):
        assert unbox(ReferenceType("java.lang.Integer")) == INT
        assert unbox(STRING) == STRING

    def test_binary_promotion(self):
        assert binary_numeric_promotion(INT, DOUBLE) == DOUBLE
        assert binary_numeric_promotion(SHORT, CHAR) == INT
        assert binary_numeric_promotion(ReferenceType("java.lang.Long"), INT) == LONG
        assert binary_numeric_promotion(INT, BOOLEAN) is None

    def test_unary_promotion(self):
        assert unary_numeric_promotion(CHAR) == INT
        assert unary_numeric_promotion(FLOAT) == FLOAT
        assert unary_numeric_promotion(STRING) is None

    @pytest.mark.parametrize("source,target,expected", [
        (INT, LONG, True),
        (INT, DOUBLE, True),
        (CHAR, INT, True),
        (SHORT, CHAR, False),
        (LONG, INT, False),
        (INT, INT, True),
    ])
    def test_widening(self, source, target, expected):
        assert is_widening(source, target) is expected


class TestTypeRefFromResolved:

    def test_primitive(self):
        ref = TypeRef.from_resolved(DOUBLE)
        assert isinstance(ref, PrimitiveTypeRef) and ref.name == "double"

    def test_java_lang_reference(self):
        ref = TypeRef.from_resolved(STRING)
        assert isinstance(ref, ClassTypeRef)
        assert ref.scope is None and ref.name == "String"

    def test_qualified_reference_with_arguments(self):
        ref = TypeRef.from_resolved(ReferenceType("java.util.Map", (STRING, ReferenceType("java.lang.Integer"))))
        assert ref.qualified_name == "java.util.Map"
        assert [a.name for a in ref.type_arguments] == ["String", "Integer"]
        assert all(a.parent is ref for a in ref.type_arguments)

    def test_array(self):
        ref = TypeRef.from_resolved(ArrayType(STRING))
        assert isinstance(ref, ArrayTypeRef)
        assert ref.component.name == "String"

    def test_non_concrete_becomes_object(self):
        assert TypeRef.from_resolved(UNRESOLVED).name == "Object"

    def test_wildcard_arguments(self):
        ref = TypeRef.from_resolved(ReferenceType("java.util.List", (WildcardType(STRING),)))
        wildcard = ref.type_arguments[0]
        assert isinstance(wildcard, WildcardTypeRef)
        assert wildcard.extended.name == "String" and wildcard.super_bound is None
        assert wildcard.extended.parent is wildcard

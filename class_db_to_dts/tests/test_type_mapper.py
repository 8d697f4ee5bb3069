"""Tests for the schema type to TypeScript type mapping."""

from __future__ import annotations

import pytest

from class_db_to_dts.pipeline.analyzer import NameResolver, ReferenceResolver, TypeMapper, UnitContext
from class_db_to_dts.pipeline.errors import UnmappedPrimitiveError, UnresolvedReferenceError
from class_db_to_dts.pipeline.schema_ast import (
    ClassEntry,
    ConstantEntry,
    EnumGroup,
    SchemaModel,
    TypeReference,
    TypeStringParser,
)


@pytest.fixture
def model():
    node = ClassEntry(
        name="Node",
        base="Object",
        enums=[EnumGroup(owner="Node", name="ProcessMode", constants=[ConstantEntry("PROCESS_MODE_INHERIT", 0)])],
    )
    return SchemaModel(
        classes=[ClassEntry(name="Object"), node, ClassEntry(name="Texture", base="Object")],
        global_enums=[
            EnumGroup(name="Error", constants=[ConstantEntry("OK", 0)]),
            EnumGroup(name="Variant.Type", constants=[ConstantEntry("TYPE_NIL", 0)]),
        ],
    )


@pytest.fixture
def mapper(model):
    return TypeMapper(ReferenceResolver(model), NameResolver())


@pytest.fixture
def context(model):
    return UnitContext(class_entry=model.classes[1])


class TestTypeMapper:
    """Test cases for TypeMapper"""

    def test_primitive_table_is_total(self):
        assert set(TypeMapper.PRIMITIVE_TYPE_MAP) == set(TypeStringParser.PRIMITIVE_TYPES)

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("bool", "boolean"),
            ("int", "int"),
            ("uint64", "int"),
            ("char32", "int"),
            ("float", "float"),
            ("double", "float"),
            ("String", "string"),
        ],
    )
    def test_primitives(self, mapper, context, tag, expected):
        assert mapper.map_type(TypeReference.primitive(tag), context) == expected

    def test_numeric_primitives_import_core_names(self, mapper, context):
        mapper.map_type(TypeReference.primitive("int32"), context)
        mapper.map_type(TypeReference.primitive("real_t"), context)
        mapper.map_type(TypeReference.primitive("bool"), context)
        assert context.sorted_imports() == ["float", "int"]

    def test_unmapped_primitive(self, mapper, context):
        with pytest.raises(UnmappedPrimitiveError) as exc_info:
            mapper.map_type(TypeReference.primitive("int128"), context, "get_big")
        assert exc_info.value.location == "Node.get_big"

    def test_void_and_variant(self, mapper, context):
        assert mapper.map_type(TypeReference.void(), context) == "void"
        assert mapper.map_type(TypeReference.variant(), context) == "unknown | null"
        assert context.imports == set()

    def test_nullable_class(self, mapper, context):
        ref = TypeReference.nullable(TypeReference.class_ref("Texture"))
        assert mapper.map_type(ref, context) == "Texture | null"
        assert context.imports == {"Texture"}

    def test_self_reference_records_no_import(self, mapper, context):
        assert mapper.map_type(TypeReference.class_ref("Node"), context) == "Node"
        assert context.imports == set()

    def test_unresolved_class(self, mapper, context):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            mapper.map_type(TypeReference.class_ref("Missing"), context, "get_missing")
        assert exc_info.value.reference == "Missing"
        assert exc_info.value.class_name == "Node"

    def test_containers(self, mapper, context):
        array = TypeReference.container("Array", TypeReference.class_ref("Texture"))
        assert mapper.map_type(array, context) == "GodotArray<Texture>"

        untyped = TypeReference.container("Array", TypeReference.variant())
        assert mapper.map_type(untyped, context) == "GodotArray<unknown | null>"

        dictionary = TypeReference.container("Dictionary", TypeReference.primitive("String"), TypeReference.primitive("int"))
        assert mapper.map_type(dictionary, context) == "GodotDictionary<string, int>"
        assert context.imports == {"GodotArray", "GodotDictionary", "Texture", "int"}

    def test_nested_containers(self, mapper, context):
        inner = TypeReference.container("Array", TypeReference.primitive("float"))
        outer = TypeReference.container("Array", inner)
        assert mapper.map_type(outer, context) == "GodotArray<GodotArray<float>>"

    def test_class_enum(self, model, mapper):
        context = UnitContext(class_entry=model.classes[2])
        assert mapper.map_type(TypeReference.enum_ref("Node.ProcessMode"), context) == "Node.ProcessMode"
        assert context.imports == {"Node"}

    def test_class_enum_with_reserved_name(self):
        foo = ClassEntry(name="Foo", enums=[EnumGroup(owner="Foo", name="default", constants=[ConstantEntry("A", 0)])])
        mapper = TypeMapper(ReferenceResolver(SchemaModel(classes=[foo])), NameResolver())
        context = UnitContext(class_entry=foo)
        assert mapper.map_type(TypeReference.enum_ref("Foo.default"), context) == "Foo.default_"

    def test_global_enums(self, mapper, context):
        assert mapper.map_type(TypeReference.enum_ref("Error"), context) == "Error"
        assert mapper.map_type(TypeReference.enum_ref("Variant.Type"), context) == "VariantType"
        assert context.imports == {"Error", "VariantType"}

    def test_unresolved_enum(self, mapper, context):
        with pytest.raises(UnresolvedReferenceError):
            mapper.map_type(TypeReference.enum_ref("Node.Missing"), context)

    def test_union(self, mapper, context):
        ref = TypeReference.union(TypeReference.class_ref("Texture"), TypeReference.class_ref("Object"))
        assert mapper.map_type(ref, context) == "Texture | Object"

    def test_signal_type(self, mapper, context):
        assert mapper.map_signal([], context) == "Signal<[]>"
        assert mapper.map_signal([("node", "Node"), ("count", "int")], context) == "Signal<[node: Node, count: int]>"
        assert "Signal" in context.imports

"""Tests for the type string parser."""

from __future__ import annotations

import pytest

from class_db_to_dts.pipeline.errors import SchemaStructureError
from class_db_to_dts.pipeline.schema_ast import TypeReference, TypeStringParser, TypeTag


@pytest.fixture
def parser():
    return TypeStringParser()


class TestTypeStringParser:
    """Test cases for TypeStringParser"""

    @pytest.mark.parametrize("spelling", ["bool", "int", "float", "String", "int64", "real_t"])
    def test_primitives(self, parser, spelling):
        assert parser.parse(spelling) == TypeReference.primitive(spelling)

    @pytest.mark.parametrize("spelling", ["void", "Nil"])
    def test_void(self, parser, spelling):
        assert parser.parse(spelling).tag == TypeTag.VOID

    def test_variant(self, parser):
        ref = parser.parse("Variant")
        assert ref.is_variant
        assert ref.tag == TypeTag.NULLABLE

    def test_meta_width_applies_to_numbers(self, parser):
        assert parser.parse("int", meta="uint32") == TypeReference.primitive("uint32")
        assert parser.parse("float", meta="double") == TypeReference.primitive("double")

    def test_meta_ignored_for_classes(self, parser):
        assert parser.parse("Node", meta="int32") == TypeReference.class_ref("Node")

    def test_class_reference(self, parser):
        assert parser.parse("AudioStream") == TypeReference.class_ref("AudioStream")

    @pytest.mark.parametrize("spelling", ["Node[]", "Array[Node]", "typedarray::Node", "typedarray::24/17:Node"])
    def test_typed_arrays(self, parser, spelling):
        assert parser.parse(spelling) == TypeReference.container("Array", TypeReference.class_ref("Node"))

    def test_untyped_containers_hold_variants(self, parser):
        array = parser.parse("Array")
        assert array.name == "Array"
        assert array.args[0].is_variant

        dictionary = parser.parse("Dictionary")
        assert dictionary.name == "Dictionary"
        assert all(arg.is_variant for arg in dictionary.args)

    def test_typed_dictionary(self, parser):
        expected = TypeReference.container("Dictionary", TypeReference.primitive("String"), TypeReference.class_ref("Node"))
        assert parser.parse("Dictionary[String, Node]") == expected
        assert parser.parse("typeddictionary::String;Node") == expected

    def test_nested_containers(self, parser):
        ref = parser.parse("Array[Dictionary[String, Array[int]]]")
        inner = ref.args[0]
        assert inner.name == "Dictionary"
        assert inner.args[1] == TypeReference.container("Array", TypeReference.primitive("int"))

    def test_enum_references(self, parser):
        assert parser.parse("enum::Node.ProcessMode") == TypeReference.enum_ref("Node.ProcessMode")
        assert parser.parse("bitfield::Object.ConnectFlags") == TypeReference.enum_ref("Object.ConnectFlags", True)

    def test_enum_attribute_wins_over_type(self, parser):
        ref = parser.parse("int", enum="Error")
        assert ref == TypeReference.enum_ref("Error")

    def test_comma_separated_hints_become_union(self, parser):
        ref = parser.parse("CanvasItemMaterial,ShaderMaterial")
        assert ref.tag == TypeTag.UNION
        assert [a.name for a in ref.args] == ["CanvasItemMaterial", "ShaderMaterial"]

    @pytest.mark.parametrize(
        "spelling",
        ["", "Array[Node", "Array[ ]", "Dictionary[String]", "Set[int]", "Node-Path", "typeddictionary::String", "enum::Node..Mode"],
    )
    def test_malformed_spellings(self, parser, spelling):
        with pytest.raises(SchemaStructureError):
            parser.parse(spelling, class_name="Node", member_name="broken")

    def test_error_carries_location(self, parser):
        with pytest.raises(SchemaStructureError) as exc_info:
            parser.parse("Array[Node", class_name="Node", member_name="get_children")
        assert exc_info.value.class_name == "Node"
        assert exc_info.value.member_name == "get_children"
        assert str(exc_info.value).startswith("Node.get_children:")

    def test_missing_type(self, parser):
        with pytest.raises(SchemaStructureError):
            parser.parse(None)

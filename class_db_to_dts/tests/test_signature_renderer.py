"""Tests for member signature rendering."""

from __future__ import annotations

import pytest

from class_db_to_dts.pipeline.analyzer import NameResolver, ReferenceResolver, TypeMapper, UnitContext
from class_db_to_dts.pipeline.ast_backends import SignatureRenderer, render_default
from class_db_to_dts.pipeline.errors import SignatureInconsistencyError
from class_db_to_dts.pipeline.schema_ast import (
    ClassEntry,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
    SchemaModel,
    SignalEntry,
    TypeReference,
    Visibility,
)

INT = TypeReference.primitive("int")
FLOAT = TypeReference.primitive("float")
STRING = TypeReference.primitive("String")


def render(class_entry, *others):
    model = SchemaModel(classes=[class_entry, *others])
    name_resolver = NameResolver()
    renderer = SignatureRenderer(TypeMapper(ReferenceResolver(model), name_resolver), name_resolver)
    context = UnitContext(class_entry=class_entry)
    return renderer.render_class_members(class_entry, context), context


def lines(members):
    return [m.to_string() for m in members]


class TestRenderDefault:
    """Test cases for render_default"""

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ("0.0", "/* = 0.0 */"),
            ("-1", "/* = -1 */"),
            ("1e-05", "/* = 1e-05 */"),
            ("true", "/* = true */"),
            ("null", "/* = null */"),
            ('""', '/* = "" */'),
            ('&"Master"', '/* = "Master" */'),
            ('^""', '/* = "" */'),
            ("[]", "/* = [] */"),
            ("{}", "/* = {} */"),
            ("Color(1, 1, 1, 1)", "/* = <opaque> Color(1, 1, 1, 1) */"),
            ("", "/* = <opaque> */"),
        ],
    )
    def test_literals(self, literal, expected):
        assert render_default(literal) == expected

    def test_comment_terminator_is_escaped(self):
        assert render_default("a */ b") == "/* = <opaque> a *\\/ b */"


class TestSignatureRenderer:
    """Test cases for SignatureRenderer"""

    def test_volume_and_play(self):
        player = ClassEntry(
            name="Player",
            properties=[PropertyEntry(name="volume", type=FLOAT)],
            methods=[
                MethodEntry(
                    name="play",
                    parameters=[ParameterEntry(name="from", type=FLOAT, optional=True, default="0.0")],
                )
            ],
        )
        members, context = render(player)
        assert lines(members) == [
            "volume: float;",
            "play(from_?: float /* = 0.0 */): void;",
        ]
        assert context.imports == {"float"}

    def test_read_only_property(self):
        members, _ = render(ClassEntry(name="A", properties=[PropertyEntry(name="bus_count", type=INT, read_only=True)]))
        assert lines(members) == ["readonly busCount: int;"]

    def test_indexed_property_expands_to_accessors(self):
        light = ClassEntry(
            name="Light",
            properties=[PropertyEntry(name="light_energy", type=FLOAT, indexed=True, index=0)],
        )
        members, _ = render(light)
        assert lines(members) == [
            "getLightEnergy(index: int): float;",
            "setLightEnergy(index: int, value: float): void;",
        ]
        assert all(m.source_name == "light_energy" for m in members)

    def test_read_only_indexed_property_has_no_setter(self):
        light = ClassEntry(
            name="Light",
            properties=[PropertyEntry(name="light_energy", type=FLOAT, indexed=True, index=0, read_only=True)],
        )
        members, _ = render(light)
        assert lines(members) == ["getLightEnergy(index: int): float;"]

    def test_static_value_constant(self):
        vector = ClassEntry(
            name="Vector2",
            is_builtin=True,
            properties=[PropertyEntry(name="ZERO", type=TypeReference.class_ref("Vector2"), read_only=True, is_static=True)],
        )
        members, context = render(vector)
        assert lines(members) == ["static readonly ZERO: Vector2;"]
        assert context.imports == set()

    def test_overloads_get_positional_suffix(self):
        entry = ClassEntry(
            name="Store",
            methods=[
                MethodEntry(name="get_value", return_type=INT),
                MethodEntry(name="get_value", parameters=[ParameterEntry(name="key", type=STRING)], return_type=INT),
                MethodEntry(name="get_value", parameters=[ParameterEntry(name="key", type=INT)], return_type=INT),
            ],
        )
        members, _ = render(entry)
        assert [m.name for m in members] == ["getValue", "getValue_1", "getValue_2"]
        assert {m.source_name for m in members} == {"get_value"}

    def test_identical_overloads(self):
        entry = ClassEntry(
            name="Store",
            methods=[
                MethodEntry(name="get_value", parameters=[ParameterEntry(name="a", type=INT)], return_type=INT),
                MethodEntry(name="get_value", parameters=[ParameterEntry(name="b", type=INT)], return_type=INT),
            ],
        )
        with pytest.raises(SignatureInconsistencyError, match="identical signatures") as exc_info:
            render(entry)
        assert exc_info.value.location == "Store.get_value"

    def test_overloads_differing_in_return_type(self):
        entry = ClassEntry(
            name="Store",
            methods=[
                MethodEntry(name="get_value", return_type=INT),
                MethodEntry(name="get_value", return_type=STRING),
            ],
        )
        members, _ = render(entry)
        assert lines(members) == ["getValue(): int;", "getValue_1(): string;"]

    def test_required_after_optional(self):
        entry = ClassEntry(
            name="A",
            methods=[
                MethodEntry(
                    name="f",
                    parameters=[
                        ParameterEntry(name="a", type=INT, optional=True, default="0"),
                        ParameterEntry(name="b", type=INT),
                    ],
                )
            ],
        )
        with pytest.raises(SignatureInconsistencyError, match="follows optional parameter 'a'") as exc_info:
            render(entry)
        assert exc_info.value.location == "A.f"

    def test_vararg_method(self):
        entry = ClassEntry(
            name="Object",
            methods=[
                MethodEntry(
                    name="emit_signal",
                    parameters=[ParameterEntry(name="signal", type=STRING)],
                    return_type=TypeReference.variant(),
                    is_vararg=True,
                )
            ],
        )
        members, _ = render(entry)
        assert lines(members) == ["emitSignal(signal: string, ...args: (unknown | null)[]): unknown | null;"]

    def test_vararg_rest_name_avoids_parameter(self):
        entry = ClassEntry(
            name="A",
            methods=[MethodEntry(name="f", parameters=[ParameterEntry(name="args", type=INT)], is_vararg=True)],
        )
        members, _ = render(entry)
        assert lines(members) == ["f(args: int, ...argsRest: (unknown | null)[]): void;"]

    def test_duplicate_parameter_names(self):
        entry = ClassEntry(
            name="A",
            methods=[
                MethodEntry(
                    name="f",
                    parameters=[ParameterEntry(name="from", type=INT), ParameterEntry(name="from", type=INT)],
                )
            ],
        )
        members, _ = render(entry)
        assert lines(members) == ["f(from_: int, from_2: int): void;"]

    def test_static_method(self):
        entry = ClassEntry(
            name="Vector2",
            methods=[MethodEntry(name="from_angle", parameters=[ParameterEntry(name="angle", type=FLOAT)], is_static=True)],
        )
        members, _ = render(entry)
        assert lines(members) == ["static fromAngle(angle: float): void;"]

    def test_virtual_methods(self):
        entry = ClassEntry(
            name="Node",
            methods=[
                MethodEntry(name="_process", parameters=[ParameterEntry(name="delta", type=FLOAT)], visibility=Visibility.VIRTUAL),
                MethodEntry(name="_get_configuration_hint", return_type=STRING, visibility=Visibility.VIRTUAL),
            ],
        )
        members, _ = render(entry)
        assert lines(members) == [
            "_process(delta: float): void;",
            "private getConfigurationHint(): string;",
        ]

    def test_private_name_colliding_with_public_keeps_underscore(self):
        entry = ClassEntry(
            name="Resource",
            methods=[
                MethodEntry(name="_get_rid", return_type=INT, visibility=Visibility.VIRTUAL),
                MethodEntry(name="get_rid", return_type=INT),
            ],
        )
        members, _ = render(entry)
        assert lines(members) == ["private _getRid(): int;", "getRid(): int;"]

    def test_field_and_method_collision(self):
        entry = ClassEntry(
            name="A",
            properties=[PropertyEntry(name="size", type=INT)],
            methods=[MethodEntry(name="size", return_type=INT)],
        )
        with pytest.raises(SignatureInconsistencyError, match="member name 'size'"):
            render(entry)

    def test_signals(self):
        entry = ClassEntry(
            name="Node",
            signals=[
                SignalEntry(name="ready"),
                SignalEntry(name="child_entered_tree", parameters=[ParameterEntry(name="node", type=TypeReference.class_ref("Node"))]),
            ],
        )
        members, context = render(entry)
        assert lines(members) == [
            "readonly ready: Signal<[]>;",
            "readonly childEnteredTree: Signal<[node: Node]>;",
        ]
        assert context.imports == {"Signal"}

    def test_signal_colliding_with_method_gets_suffix(self):
        entry = ClassEntry(
            name="Button",
            methods=[MethodEntry(name="pressed", return_type=TypeReference.primitive("bool"))],
            signals=[SignalEntry(name="pressed")],
        )
        members, _ = render(entry)
        assert lines(members) == ["pressed(): boolean;", "readonly pressedSignal: Signal<[]>;"]
        assert members[1].source_name == "pressed"

    def test_unknown_member_entry(self):
        model = SchemaModel(classes=[ClassEntry(name="A")])
        name_resolver = NameResolver()
        renderer = SignatureRenderer(TypeMapper(ReferenceResolver(model), name_resolver), name_resolver)
        with pytest.raises(TypeError):
            renderer.render_member(object(), UnitContext(class_entry=model.classes[0]))

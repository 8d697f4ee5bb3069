"""
Signature renderer for class members.

Turns property, method, signal and constant entries of the schema into
TypeScript member declarations: indexed properties expand into accessor
pairs, same-named methods become suffixed overloads and optional
parameters carry their default literal as a comment.
"""

from __future__ import annotations

import re

from ...utils import upper_first
from ..analyzer.name_resolver import NameResolver
from ..analyzer.type_mapper import CORE_INT, VARIANT_TYPE, TypeMapper, UnitContext
from ..errors import SignatureInconsistencyError
from ..schema_ast.nodes import (
    ClassEntry,
    EnumGroup,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
    SignalEntry,
    Visibility,
)
from .ts_ast_nodes import MemberDeclaration, TsConstant, TsField, TsMethod, TsParameter, TsSignal
from .ts_serializer import escape_comment

_NUMBER_LITERAL = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$")
_STRING_LITERAL = re.compile(r'^"(?:[^"\\]|\\.)*"$')
_KEYWORD_LITERALS = {"null", "true", "false", "[]", "{}"}

# Name of the trailing rest parameter of vararg methods
REST_PARAMETER = "args"


def render_default(literal: str | None) -> str:
    """
    Render the default value of an optional parameter as a comment.

    Literals that are valid TypeScript literals are normalised (&"" and ^""
    string-name and node-path literals become plain strings); anything else
    is kept verbatim and marked opaque.

    Examples:
        "0.0" -> /* = 0.0 */
        '&""' -> /* = "" */
        "Color(1, 1, 1, 1)" -> /* = <opaque> Color(1, 1, 1, 1) */
    """
    text = (literal or "").strip()
    if text[:1] in ("&", "^") and _STRING_LITERAL.match(text[1:]):
        text = text[1:]

    if text in _KEYWORD_LITERALS or _NUMBER_LITERAL.match(text) or _STRING_LITERAL.match(text):
        value = text
    elif text:
        value = f"<opaque> {text}"
    else:
        value = "<opaque>"
    return f"/* = {escape_comment(value)} */"


class SignatureRenderer:
    """Renders schema members into TypeScript member declarations."""

    def __init__(self, type_mapper: TypeMapper, name_resolver: NameResolver):
        """
        Initialize the renderer.

        Args:
            type_mapper: Mapper used for every parameter, return and field type
            name_resolver: Identifier rules for members and parameters
        """
        self.type_mapper = type_mapper
        self.name_resolver = name_resolver

    def render_member(self, entry, context: UnitContext, overload_index: int = 0) -> list[MemberDeclaration]:
        """
        Render one schema member.

        Args:
            entry: A PropertyEntry, MethodEntry, SignalEntry or EnumGroup
            context: Unit context of the owning class
            overload_index: Position of a method inside its same-name group

        Returns:
            The member declarations (an indexed property yields two)
        """
        if isinstance(entry, PropertyEntry):
            return self.render_property(entry, context)
        if isinstance(entry, MethodEntry):
            return [self.render_method(entry, context, overload_index)]
        if isinstance(entry, SignalEntry):
            return [self.render_signal(entry, context)]
        if isinstance(entry, EnumGroup):
            return self.render_constants(entry, context)
        raise TypeError(f"Cannot render member of type {type(entry).__name__}")

    def render_class_members(self, class_entry: ClassEntry, context: UnitContext) -> list[MemberDeclaration]:
        """
        Render every member of a class in schema order.

        Same-named methods are grouped: the first keeps the bare name and
        each later one gets the suffix _<n>. Name collisions are settled
        here, after all members have been rendered.

        Raises:
            SignatureInconsistencyError: On identical overloads or unresolvable name collisions
        """
        members: list[MemberDeclaration] = []
        for group in class_entry.enums:
            members.extend(self.render_constants(group, context))
        for prop in class_entry.properties:
            members.extend(self.render_property(prop, context))

        positions: dict[str, int] = {}
        overloads: dict[str, list[TsMethod]] = {}
        for method in class_entry.methods:
            index = positions.get(method.name, 0)
            positions[method.name] = index + 1
            rendered = self.render_method(method, context, index)
            self._check_overload(class_entry.name, method.name, overloads.setdefault(method.name, []), rendered)
            members.append(rendered)

        signals = [self.render_signal(signal, context) for signal in class_entry.signals]

        self._settle_collisions(class_entry.name, members)
        taken = {m.name for m in members if not m.is_static}
        for signal in signals:
            if signal.name in taken:
                signal.name = f"{signal.name}Signal"
            if signal.name in taken:
                raise SignatureInconsistencyError(f"signal name '{signal.name}' collides with another member", class_entry.name, signal.source_name)
            taken.add(signal.name)
        members.extend(signals)
        return members

    def render_property(self, prop: PropertyEntry, context: UnitContext) -> list[MemberDeclaration]:
        type_name = self.type_mapper.map_type(prop.type, context, prop.name)

        if prop.is_static:
            # Value-type constants keep their UPPER_CASE name
            return [
                TsField(
                    name=self.name_resolver.sanitize(prop.name),
                    source_name=prop.name,
                    is_static=True,
                    readonly=True,
                    type_name=type_name,
                    doc=prop.doc,
                    deprecated=prop.deprecated,
                )
            ]

        resolved = self.name_resolver.member_name(prop.name)
        if not prop.indexed:
            return [
                TsField(
                    name=resolved.name,
                    source_name=prop.name,
                    is_private=resolved.is_private,
                    readonly=prop.read_only,
                    type_name=type_name,
                    doc=prop.doc,
                    deprecated=prop.deprecated,
                )
            ]

        index_type = self.type_mapper.core_type(CORE_INT, context)
        accessor = upper_first(resolved.name)
        accessors: list[MemberDeclaration] = [
            TsMethod(
                name=f"get{accessor}",
                source_name=prop.name,
                is_private=resolved.is_private,
                parameters=[TsParameter(name="index", type_name=index_type)],
                return_type=type_name,
                doc=prop.doc,
                deprecated=prop.deprecated,
            )
        ]
        if not prop.read_only:
            accessors.append(
                TsMethod(
                    name=f"set{accessor}",
                    source_name=prop.name,
                    is_private=resolved.is_private,
                    parameters=[
                        TsParameter(name="index", type_name=index_type),
                        TsParameter(name="value", type_name=type_name),
                    ],
                    return_type="void",
                    doc=prop.doc,
                    deprecated=prop.deprecated,
                )
            )
        return accessors

    def render_method(self, method: MethodEntry, context: UnitContext, overload_index: int = 0) -> TsMethod:
        """
        Render a method signature.

        Raises:
            SignatureInconsistencyError: If a required parameter follows an optional one
        """
        resolved = self.name_resolver.member_name(method.name, is_virtual=method.visibility == Visibility.VIRTUAL)
        name = f"{resolved.name}_{overload_index}" if overload_index else resolved.name

        parameters = self._render_parameters(method.parameters, context, method.name)
        if method.is_vararg:
            used = {p.name for p in parameters}
            rest_name = REST_PARAMETER if REST_PARAMETER not in used else f"{REST_PARAMETER}Rest"
            parameters.append(TsParameter(name=rest_name, type_name=VARIANT_TYPE, is_rest=True))

        return TsMethod(
            name=name,
            source_name=method.name,
            is_private=resolved.is_private,
            is_static=method.is_static,
            parameters=parameters,
            return_type=self.type_mapper.map_type(method.return_type, context, method.name),
            doc=method.doc,
            deprecated=method.deprecated,
        )

    def render_signal(self, signal: SignalEntry, context: UnitContext) -> TsSignal:
        arguments = []
        for param in signal.parameters:
            arguments.append(
                (
                    self.name_resolver.parameter_name(param.name),
                    self.type_mapper.map_type(param.type, context, signal.name),
                )
            )
        return TsSignal(
            name=self.name_resolver.member_name(signal.name).name,
            source_name=signal.name,
            type_name=self.type_mapper.map_signal(arguments, context),
            doc=signal.doc,
            deprecated=signal.deprecated,
        )

    def render_constants(self, group: EnumGroup, context: UnitContext) -> list[MemberDeclaration]:
        return [
            TsConstant(
                name=self.name_resolver.sanitize(constant.name),
                source_name=constant.name,
                value=constant.value,
                doc=constant.doc,
                deprecated=constant.deprecated,
            )
            for constant in group.constants
        ]

    def _render_parameters(self, params: list[ParameterEntry], context: UnitContext, member_name: str) -> list[TsParameter]:
        rendered: list[TsParameter] = []
        seen_optional = None
        used: set[str] = set()
        for param in params:
            if param.optional:
                seen_optional = seen_optional or param.name
            elif seen_optional is not None:
                raise SignatureInconsistencyError(
                    f"required parameter '{param.name}' follows optional parameter '{seen_optional}'",
                    context.class_entry.name,
                    member_name,
                )

            name = self.name_resolver.parameter_name(param.name)
            base, n = name, 2
            while name in used:
                name = f"{base}{n}"
                n += 1
            used.add(name)

            rendered.append(
                TsParameter(
                    name=name,
                    type_name=self.type_mapper.map_type(param.type, context, member_name),
                    optional=param.optional,
                    default_comment=render_default(param.default) if param.optional else None,
                )
            )
        return rendered

    def _check_overload(self, class_name: str, method_name: str, group: list[TsMethod], rendered: TsMethod) -> None:
        key = rendered.signature_key()
        for other in group:
            if other.signature_key() == key:
                raise SignatureInconsistencyError(
                    f"overloads '{other.name}' and '{rendered.name}' have identical signatures",
                    class_name,
                    method_name,
                )
        group.append(rendered)

    def _settle_collisions(self, class_name: str, members: list[MemberDeclaration]) -> None:
        """
        Resolve name collisions between constants, fields and methods.

        A private member whose stripped name collides with a public one
        keeps its leading underscore. Any other collision is an error.
        """
        owners: dict[tuple[bool, str], MemberDeclaration] = {}
        for member in members:
            if member.is_private:
                continue
            owners.setdefault((member.is_static, member.name), member)

        for member in members:
            if member.is_private and (member.is_static, member.name) in owners:
                member.name = f"_{member.name}"

        seen: dict[tuple[bool, str], MemberDeclaration] = {}
        for member in members:
            key = (member.is_static, member.name)
            other = seen.get(key)
            if other is not None:
                raise SignatureInconsistencyError(
                    f"member name '{member.name}' of '{member.source_name}' collides with '{other.source_name}'",
                    class_name,
                    member.source_name,
                )
            seen[key] = member


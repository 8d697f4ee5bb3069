"""
Type mapper from schema type references to TypeScript type expressions.

Mapping is a pure function of the schema model, except that every
resolved reference records an import edge in the unit context of the
class being emitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import UnmappedPrimitiveError
from ..schema_ast.nodes import ClassEntry, TypeReference, TypeTag
from .name_resolver import NameResolver
from .reference_resolver import ReferenceResolver

# Names exported by the shared core prelude (core.d.ts)
CORE_INT = "int"
CORE_FLOAT = "float"
CORE_SIGNAL = "Signal"
CORE_ARRAY = "GodotArray"
CORE_DICTIONARY = "GodotDictionary"
CORE_NAMES = frozenset({CORE_INT, CORE_FLOAT, CORE_SIGNAL, CORE_ARRAY, CORE_DICTIONARY})

# Rendering of the engine's open-ended variant type
VARIANT_TYPE = "unknown | null"


@dataclass
class UnitContext:
    """Per-class state of one declaration unit.

    Attributes:
        class_entry: The class being emitted
        imports: Names the unit must import, recorded while mapping types
    """

    class_entry: ClassEntry
    imports: set[str] = field(default_factory=set)

    def record(self, name: str) -> None:
        """Record an import edge, ignoring self references."""
        if name != self.class_entry.name:
            self.imports.add(name)

    def sorted_imports(self) -> list[str]:
        return sorted(self.imports)


class TypeMapper:
    """Translates TypeReference values into TypeScript type expressions."""

    # Total over TypeStringParser.PRIMITIVE_TYPES
    PRIMITIVE_TYPE_MAP = {
        "bool": "boolean",
        "int": CORE_INT,
        "int8": CORE_INT,
        "int16": CORE_INT,
        "int32": CORE_INT,
        "int64": CORE_INT,
        "uint8": CORE_INT,
        "uint16": CORE_INT,
        "uint32": CORE_INT,
        "uint64": CORE_INT,
        "char16": CORE_INT,
        "char32": CORE_INT,
        "float": CORE_FLOAT,
        "double": CORE_FLOAT,
        "real_t": CORE_FLOAT,
        "String": "string",
    }

    def __init__(self, resolver: ReferenceResolver, name_resolver: NameResolver):
        """
        Initialize the mapper.

        Args:
            resolver: Class and enum lookup over the whole schema
            name_resolver: Identifier rules for global enum aliases
        """
        self.resolver = resolver
        self.name_resolver = name_resolver

    def map_type(self, type_ref: TypeReference, context: UnitContext, member_name: str | None = None) -> str:
        """
        Translate a type reference.

        Args:
            type_ref: The reference to translate
            context: Unit context receiving import edges
            member_name: Member being rendered (for error messages)

        Returns:
            TypeScript type expression

        Raises:
            UnmappedPrimitiveError: For a primitive tag missing from the table
            UnresolvedReferenceError: For an unknown class or enum name
        """
        if type_ref.tag == TypeTag.VOID:
            return "void"

        if type_ref.tag == TypeTag.PRIMITIVE:
            mapped = self.PRIMITIVE_TYPE_MAP.get(type_ref.name)
            if mapped is None:
                raise UnmappedPrimitiveError(type_ref.name, context.class_entry.name, member_name)
            if mapped in CORE_NAMES:
                context.record(mapped)
            return mapped

        if type_ref.tag == TypeTag.CLASS:
            return self.map_class_name(type_ref.name, context, member_name)

        if type_ref.tag == TypeTag.ENUM:
            return self._map_enum(type_ref, context, member_name)

        if type_ref.tag == TypeTag.CONTAINER:
            return self._map_container(type_ref, context, member_name)

        if type_ref.tag == TypeTag.NULLABLE:
            if type_ref.is_variant:
                return VARIANT_TYPE
            inner = self.map_type(type_ref.args[0], context, member_name)
            return f"{inner} | null"

        if type_ref.tag == TypeTag.UNION:
            return " | ".join(self.map_type(arg, context, member_name) for arg in type_ref.args)

        raise ValueError(f"Unknown type tag {type_ref.tag}")

    def map_class_name(self, name: str, context: UnitContext, member_name: str | None = None) -> str:
        """Resolve a class-by-name reference and record its import edge."""
        class_entry = self.resolver.resolve_class(name, context.class_entry.name, member_name)
        context.record(class_entry.name)
        return class_entry.name

    def map_signal(self, argument_types: list[tuple[str, str]], context: UnitContext) -> str:
        """Build the event type of a signal from its (name, mapped type) arguments."""
        context.record(CORE_SIGNAL)
        arguments = ", ".join(f"{name}: {type_str}" for name, type_str in argument_types)
        return f"{CORE_SIGNAL}<[{arguments}]>"

    def core_type(self, name: str, context: UnitContext) -> str:
        """Reference a core prelude name (e.g. int for index arguments)."""
        context.record(name)
        return name

    def _map_enum(self, type_ref: TypeReference, context: UnitContext, member_name: str | None) -> str:
        resolved = self.resolver.resolve_enum(type_ref.name, context.class_entry.name, member_name)
        if resolved.owner is None:
            alias = self.name_resolver.global_enum_name(resolved.group.qualified_name)
            context.record(alias)
            return alias
        context.record(resolved.owner.name)
        return f"{resolved.owner.name}.{self.name_resolver.sanitize(resolved.group.name)}"

    def _map_container(self, type_ref: TypeReference, context: UnitContext, member_name: str | None) -> str:
        args = [self.map_type(arg, context, member_name) for arg in type_ref.args]
        if type_ref.name == "Dictionary":
            context.record(CORE_DICTIONARY)
            key, value = (args + [VARIANT_TYPE, VARIANT_TYPE])[:2]
            return f"{CORE_DICTIONARY}<{key}, {value}>"
        context.record(CORE_ARRAY)
        element = args[0] if args else VARIANT_TYPE
        return f"{CORE_ARRAY}<{element}>"

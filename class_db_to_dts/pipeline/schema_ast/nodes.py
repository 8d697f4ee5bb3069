"""
Schema model node definitions.

These nodes represent the reflected class database exactly as loaded from
the reflection source, before any name mapping or language-specific
processing. The model is built once per run and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeTag(str, Enum):
    """Kind of a type reference."""

    PRIMITIVE = "primitive"  # bool, int, float, String, sized integers ...
    CLASS = "class"  # An engine class, looked up by name
    ENUM = "enum"  # An enum group, "Class.Group" or a global "Group"
    CONTAINER = "container"  # Array / Dictionary, typed or untyped
    NULLABLE = "nullable"  # T | null, or the engine variant when inner is None
    UNION = "union"  # Comma separated class hints
    VOID = "void"


class Visibility(str, Enum):
    """Method visibility."""

    PUBLIC = "public"
    VIRTUAL = "virtual"  # Engine-internal override point


@dataclass(frozen=True)
class TypeReference:
    """A single type mention inside the schema.

    Attributes:
        tag: Which variant this reference is
        name: Primitive tag, class name, enum name or container kind
        args: Container element types (one for Array, key and value for Dictionary),
            the inner type of a NULLABLE, or the members of a UNION
        is_bitfield: For ENUM references, whether the enum is a bitfield
    """

    tag: TypeTag
    name: str = ""
    args: tuple[TypeReference, ...] = ()
    is_bitfield: bool = False

    @staticmethod
    def primitive(name: str) -> TypeReference:
        return TypeReference(TypeTag.PRIMITIVE, name)

    @staticmethod
    def class_ref(name: str) -> TypeReference:
        return TypeReference(TypeTag.CLASS, name)

    @staticmethod
    def enum_ref(name: str, is_bitfield: bool = False) -> TypeReference:
        return TypeReference(TypeTag.ENUM, name, is_bitfield=is_bitfield)

    @staticmethod
    def container(kind: str, *args: TypeReference) -> TypeReference:
        return TypeReference(TypeTag.CONTAINER, kind, tuple(args))

    @staticmethod
    def nullable(inner: TypeReference | None = None) -> TypeReference:
        return TypeReference(TypeTag.NULLABLE, "", (inner,) if inner is not None else ())

    @staticmethod
    def variant() -> TypeReference:
        """The engine's open-ended variant type."""
        return TypeReference(TypeTag.NULLABLE)

    @staticmethod
    def union(*members: TypeReference) -> TypeReference:
        return TypeReference(TypeTag.UNION, "", tuple(members))

    @staticmethod
    def void() -> TypeReference:
        return TypeReference(TypeTag.VOID)

    @property
    def is_variant(self) -> bool:
        return self.tag == TypeTag.NULLABLE and not self.args

    def __str__(self) -> str:
        if self.tag == TypeTag.VOID:
            return "void"
        if self.is_variant:
            return "Variant"
        if self.tag == TypeTag.NULLABLE:
            return f"{self.args[0]}?"
        if self.tag == TypeTag.UNION:
            return ",".join(str(a) for a in self.args)
        if self.tag == TypeTag.CONTAINER and self.args:
            return f"{self.name}[{', '.join(str(a) for a in self.args)}]"
        return self.name


@dataclass
class ParameterEntry:
    """A method parameter."""

    name: str = ""
    type: TypeReference = field(default_factory=TypeReference.variant)
    optional: bool = False
    # Literal text of the default value, exactly as the schema spells it
    default: str | None = None


@dataclass
class PropertyEntry:
    """A class property."""

    name: str = ""
    type: TypeReference = field(default_factory=TypeReference.variant)
    read_only: bool = False

    # Accessed through a get/set pair taking an index argument
    indexed: bool = False
    index: int | None = None

    # Class-level constant of a value type (Vector2.ZERO)
    is_static: bool = False

    setter: str = ""
    getter: str = ""
    doc: str = ""
    deprecated: str | None = None


@dataclass
class MethodEntry:
    """A class method."""

    name: str = ""
    parameters: list[ParameterEntry] = field(default_factory=list)
    return_type: TypeReference = field(default_factory=TypeReference.void)
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_vararg: bool = False
    is_const: bool = False
    doc: str = ""
    deprecated: str | None = None


@dataclass
class ConstantEntry:
    """A named integer constant."""

    name: str = ""
    value: int = 0
    doc: str = ""
    deprecated: str | None = None


@dataclass
class EnumGroup:
    """A group of integer constants.

    A group without a name holds the flat constants of a class.
    """

    owner: str | None = None  # Owning class name, None for global groups
    name: str | None = None
    constants: list[ConstantEntry] = field(default_factory=list)
    is_bitfield: bool = False

    @property
    def qualified_name(self) -> str:
        """Name used by enum references ("Node.ProcessMode" or "Error")."""
        if self.owner:
            return f"{self.owner}.{self.name}"
        return self.name or ""


@dataclass
class SignalEntry:
    """A signal with its argument list."""

    name: str = ""
    parameters: list[ParameterEntry] = field(default_factory=list)
    doc: str = ""
    deprecated: str | None = None


@dataclass
class ClassEntry:
    """A reflected engine class."""

    name: str = ""
    base: str | None = None
    properties: list[PropertyEntry] = field(default_factory=list)
    methods: list[MethodEntry] = field(default_factory=list)
    enums: list[EnumGroup] = field(default_factory=list)
    signals: list[SignalEntry] = field(default_factory=list)
    doc: str = ""
    deprecated: str | None = None

    # Value type (Vector2, Color, ...) rather than an object class
    is_builtin: bool = False

    # Exactly one live instance exists, obtained through an external accessor
    is_singleton: bool = False

    def find_enum(self, name: str) -> EnumGroup | None:
        """Find a named enum group of this class."""
        for group in self.enums:
            if group.name == name:
                return group
        return None


@dataclass
class SchemaModel:
    """Root of the loaded schema."""

    classes: list[ClassEntry] = field(default_factory=list)
    global_enums: list[EnumGroup] = field(default_factory=list)

    # Engine version tag used in generated headers (e.g. "4.4.3-stable")
    version: str = ""

    # Where the schema was read from (for logs and error messages)
    source: str = ""

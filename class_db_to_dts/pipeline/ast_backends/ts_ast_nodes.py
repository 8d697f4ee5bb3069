"""
TypeScript declaration AST node definitions.

These nodes represent the structure of an ambient declaration file
(.d.ts). They are built by the class emitter and serialized to text by
TsSerializer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MemberKind(str, Enum):
    """Member sections of a class body, in emission order."""

    CONSTANT = "constant"
    FIELD = "field"
    METHOD = "method"
    SIGNAL = "signal"


@dataclass
class TsNode:
    """Base class for all TypeScript AST nodes."""

    pass


@dataclass
class TsParameter(TsNode):
    """Represents a method parameter."""

    name: str = ""
    type_name: str = ""
    optional: bool = False
    # Already rendered default comment, e.g. /* = 0.0 */
    default_comment: str | None = None
    is_rest: bool = False

    def to_string(self) -> str:
        if self.is_rest:
            return f"...{self.name}: ({self.type_name})[]"
        marker = "?" if self.optional else ""
        text = f"{self.name}{marker}: {self.type_name}"
        if self.default_comment:
            text += f" {self.default_comment}"
        return text


@dataclass
class MemberDeclaration(TsNode):
    """A single member of a class body.

    Attributes:
        name: Rendered TypeScript identifier
        source_name: Name of the member in the schema
        is_private: Engine-internal member, not meant to be called directly
        is_static: Class-level member
        doc: Opaque documentation summary
        deprecated: Deprecation note, if any
    """

    name: str = ""
    source_name: str = ""
    is_private: bool = False
    is_static: bool = False
    doc: str = ""
    deprecated: str | None = None

    kind = MemberKind.FIELD

    def modifiers(self) -> str:
        parts = []
        if self.is_private:
            parts.append("private ")
        if self.is_static:
            parts.append("static ")
        return "".join(parts)

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass
class TsConstant(MemberDeclaration):
    """An integer constant rendered as a static literal-typed member."""

    value: int = 0
    is_static: bool = True

    kind = MemberKind.CONSTANT

    def to_string(self) -> str:
        return f"static readonly {self.name}: {self.value};"


@dataclass
class TsField(MemberDeclaration):
    """A property rendered as a field."""

    type_name: str = ""
    readonly: bool = False

    kind = MemberKind.FIELD

    def to_string(self) -> str:
        readonly = "readonly " if self.readonly else ""
        return f"{self.modifiers()}{readonly}{self.name}: {self.type_name};"


@dataclass
class TsMethod(MemberDeclaration):
    """A method signature."""

    parameters: list[TsParameter] = field(default_factory=list)
    return_type: str = "void"

    kind = MemberKind.METHOD

    def signature_key(self) -> tuple:
        """What makes two overloads indistinguishable to a caller."""
        return (
            tuple(p.type_name for p in self.parameters if not p.is_rest),
            any(p.is_rest for p in self.parameters),
            self.return_type,
            self.is_static,
        )

    def to_string(self) -> str:
        params = ", ".join(p.to_string() for p in self.parameters)
        return f"{self.modifiers()}{self.name}({params}): {self.return_type};"


@dataclass
class TsSignal(MemberDeclaration):
    """A signal rendered as a read-only event member."""

    type_name: str = ""

    kind = MemberKind.SIGNAL

    def to_string(self) -> str:
        return f"readonly {self.name}: {self.type_name};"


@dataclass
class TsEnumAlias(TsNode):
    """A named enum group rendered as a type alias in the class namespace."""

    name: str = ""
    values: list[int] = field(default_factory=list)
    is_bitfield: bool = False

    def to_string(self) -> str:
        if self.is_bitfield:
            return f"type {self.name} = int;"
        if not self.values:
            return f"type {self.name} = never;"
        # Distinct values, first occurrence order
        literals = " | ".join(str(v) for v in dict.fromkeys(self.values))
        return f"type {self.name} = {literals};"


@dataclass
class TsImport(TsNode):
    """A type-only import line."""

    names: list[str] = field(default_factory=list)
    module: str = "../index"

    def to_string(self) -> str:
        return f'import type {{ {", ".join(self.names)} }} from "{self.module}";'


@dataclass
class TsClass(TsNode):
    """An ambient class declaration plus its merged enum namespace."""

    name: str = ""
    base_class: str | None = None
    doc: str = ""
    doc_tags: list[str] = field(default_factory=list)
    members: list[MemberDeclaration] = field(default_factory=list)
    enum_aliases: list[TsEnumAlias] = field(default_factory=list)

    def members_of(self, kind: MemberKind) -> list[MemberDeclaration]:
        return [m for m in self.members if m.kind == kind]


@dataclass
class TsFile(TsNode):
    """Represents a complete declaration file for one class."""

    generation_comment: str = ""
    imports: list[TsImport] = field(default_factory=list)
    cls: TsClass | None = None

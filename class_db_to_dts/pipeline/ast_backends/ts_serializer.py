"""
TypeScript declaration serializer.

Converts TypeScript AST nodes to declaration file text.
Follows these layout rules:
- 4-space indentation
- One member per line, documentation block comment above it
- Blank line between member sections
- Enum aliases in a namespace merged with the class, after the class body
"""

from __future__ import annotations

from .ts_ast_nodes import MemberDeclaration, MemberKind, TsClass, TsFile

SECTION_ORDER = [MemberKind.CONSTANT, MemberKind.FIELD, MemberKind.METHOD, MemberKind.SIGNAL]


def escape_comment(text: str) -> str:
    """Make text safe inside a /* */ block comment."""
    return text.replace("*/", "*\\/")


class TsSerializer:
    """Serializes TypeScript AST nodes to declaration text."""

    INDENT = "    "  # 4 spaces

    def __init__(self, emit_docs: bool = True):
        """
        Initialize the serializer.

        Args:
            emit_docs: Whether documentation comments are written
        """
        self.emit_docs = emit_docs

    def serialize(self, file: TsFile) -> str:
        """Serialize a complete declaration file."""
        lines: list[str] = []

        if file.generation_comment:
            lines.append(file.generation_comment)

        for imp in file.imports:
            lines.append(imp.to_string())

        if lines:
            lines.append("")

        if file.cls is not None:
            lines.extend(self._serialize_class(file.cls))

        return "\n".join(lines) + "\n"

    def _serialize_class(self, cls: TsClass) -> list[str]:
        lines: list[str] = []
        lines.extend(self._doc_block(cls.doc, cls.doc_tags, ""))

        extends = f" extends {cls.base_class}" if cls.base_class else ""
        lines.append(f"export declare class {cls.name}{extends} {{")

        first_section = True
        for kind in SECTION_ORDER:
            members = cls.members_of(kind)
            if not members:
                continue
            if not first_section:
                lines.append("")
            first_section = False
            for member in members:
                lines.extend(self._serialize_member(member))

        lines.append("}")

        if cls.enum_aliases:
            lines.append("")
            lines.append(f"export declare namespace {cls.name} {{")
            for alias in cls.enum_aliases:
                lines.append(f"{self.INDENT}{alias.to_string()}")
            lines.append("}")

        return lines

    def _serialize_member(self, member: MemberDeclaration) -> list[str]:
        tags = []
        if member.deprecated is not None:
            tags.append(f"@deprecated {member.deprecated}".rstrip())
        lines = self._doc_block(member.doc, tags, self.INDENT)
        lines.append(f"{self.INDENT}{member.to_string()}")
        return lines

    def _doc_block(self, doc: str, tags: list[str], indent: str) -> list[str]:
        """Render a /** */ documentation block, or nothing.

        Tags carry contracts (@singleton, @deprecated) and are written even
        when documentation text is disabled.
        """
        body: list[str] = []
        if self.emit_docs:
            body = [line.strip() for line in doc.strip().splitlines()]
            body = [line for line in body if line]
        body.extend(tags)
        if not body:
            return []
        if len(body) == 1:
            return [f"{indent}/** {escape_comment(body[0])} */"]
        lines = [f"{indent}/**"]
        lines.extend(f"{indent} * {escape_comment(line)}" for line in body)
        lines.append(f"{indent} */")
        return lines

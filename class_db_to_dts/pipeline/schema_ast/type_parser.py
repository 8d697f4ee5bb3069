"""
Type string parser.

Turns the type spellings used by the reflection sources into TypeReference
values. Both the documentation XML ("Node[]", "Array[int]", enum attributes)
and extension_api.json ("typedarray::Node", "enum::Node.ProcessMode",
"int" with a "meta" width) spellings are accepted.
"""

from __future__ import annotations

import re

from ..errors import SchemaStructureError
from .nodes import TypeReference

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_QUALIFIED_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class TypeStringParser:
    """Parses type spellings into TypeReference values."""

    # Every primitive tag a schema can produce
    PRIMITIVE_TYPES = frozenset(
        {
            "bool",
            "int",
            "int8",
            "int16",
            "int32",
            "int64",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
            "char16",
            "char32",
            "float",
            "double",
            "real_t",
            "String",
        }
    )

    VOID_TYPES = frozenset({"void", "Nil"})
    VARIANT_TYPES = frozenset({"Variant"})

    ARRAY = "Array"
    DICTIONARY = "Dictionary"

    def parse(
        self,
        type_str: str | None,
        meta: str | None = None,
        enum: str | None = None,
        is_bitfield: bool = False,
        class_name: str | None = None,
        member_name: str | None = None,
    ) -> TypeReference:
        """
        Parse a type spelling.

        Args:
            type_str: The type as written in the schema
            meta: Optional width qualifier (extension_api.json "meta")
            enum: Optional enum name (documentation XML "enum" attribute)
            is_bitfield: Whether the enum attribute names a bitfield
            class_name: Owning class (for error messages)
            member_name: Owning member (for error messages)

        Returns:
            The parsed TypeReference

        Raises:
            SchemaStructureError: If the spelling is malformed
        """
        self._class_name = class_name
        self._member_name = member_name

        if enum:
            return self._parse_enum_name(enum.strip(), is_bitfield)

        if type_str is None or not type_str.strip():
            raise self._error("missing type")

        type_str = type_str.strip()
        if meta and meta in self.PRIMITIVE_TYPES and type_str in ("int", "float"):
            return TypeReference.primitive(meta)
        return self._parse(type_str)

    def _parse(self, text: str) -> TypeReference:
        if text.startswith("enum::"):
            return self._parse_enum_name(text[len("enum::") :], False)
        if text.startswith("bitfield::"):
            return self._parse_enum_name(text[len("bitfield::") :], True)
        if text.startswith("typedarray::"):
            element = self._strip_hint(text[len("typedarray::") :])
            return TypeReference.container(self.ARRAY, self._parse(element))
        if text.startswith("typeddictionary::"):
            key, sep, value = text[len("typeddictionary::") :].partition(";")
            if not sep:
                raise self._error(f"malformed typed dictionary '{text}'")
            return TypeReference.container(
                self.DICTIONARY,
                self._parse(self._strip_hint(key)),
                self._parse(self._strip_hint(value)),
            )

        parts = self._split_top_level(text)
        if len(parts) > 1:
            return TypeReference.union(*(self._parse(part) for part in parts))

        if text.endswith("[]"):
            return TypeReference.container(self.ARRAY, self._parse(text[:-2].strip()))

        if "[" in text:
            return self._parse_generic(text)

        if text in self.VOID_TYPES:
            return TypeReference.void()
        if text in self.VARIANT_TYPES:
            return TypeReference.variant()
        if text in self.PRIMITIVE_TYPES:
            return TypeReference.primitive(text)
        if text == self.ARRAY:
            return TypeReference.container(self.ARRAY, TypeReference.variant())
        if text == self.DICTIONARY:
            return TypeReference.container(self.DICTIONARY, TypeReference.variant(), TypeReference.variant())

        if not _IDENTIFIER.match(text):
            raise self._error(f"malformed type reference '{text}'")
        return TypeReference.class_ref(text)

    def _parse_generic(self, text: str) -> TypeReference:
        """Parse "Array[T]" and "Dictionary[K, V]"."""
        open_index = text.index("[")
        if not text.endswith("]"):
            raise self._error(f"malformed type reference '{text}'")
        kind = text[:open_index].strip()
        inner = text[open_index + 1 : -1]
        args = self._split_top_level(inner)
        if not inner.strip() or any(not a for a in args):
            raise self._error(f"malformed type reference '{text}'")

        if kind == self.ARRAY and len(args) == 1:
            return TypeReference.container(self.ARRAY, self._parse(args[0]))
        if kind == self.DICTIONARY and len(args) == 2:
            return TypeReference.container(self.DICTIONARY, self._parse(args[0]), self._parse(args[1]))
        raise self._error(f"unsupported generic type '{text}'")

    def _parse_enum_name(self, name: str, is_bitfield: bool) -> TypeReference:
        if not _QUALIFIED_IDENTIFIER.match(name):
            raise self._error(f"malformed enum reference '{name}'")
        return TypeReference.enum_ref(name, is_bitfield)

    def _split_top_level(self, text: str) -> list[str]:
        """Split on commas that are not nested inside brackets."""
        parts: list[str] = []
        depth = 0
        current = ""
        for char in text:
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth < 0:
                    raise self._error(f"unbalanced brackets in '{text}'")
            if char == "," and depth == 0:
                parts.append(current.strip())
                current = ""
                continue
            current += char
        if depth != 0:
            raise self._error(f"unbalanced brackets in '{text}'")
        parts.append(current.strip())
        return parts

    def _strip_hint(self, text: str) -> str:
        """Drop property-hint prefixes such as "24/17:" from element types."""
        if ":" in text:
            return text.rsplit(":", 1)[1].strip()
        return text.strip()

    def _error(self, message: str) -> SchemaStructureError:
        return SchemaStructureError(message, self._class_name, self._member_name)

"""
Name resolver for TypeScript identifiers.

Converts snake_case member names to camelCase, escapes reserved words,
collapses path-like names and decides which underscore-prefixed names
are engine-internal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ...utils import snake_to_camel_case, upper_first

# Reserved and contextual keywords that cannot be used as identifiers in TypeScript
TS_RESERVED_KEYWORDS = frozenset(
    {
        "any",
        "as",
        "await",
        "boolean",
        "break",
        "case",
        "catch",
        "class",
        "const",
        "constructor",
        "continue",
        "debugger",
        "declare",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "from",
        "function",
        "get",
        "if",
        "implements",
        "import",
        "in",
        "instanceof",
        "interface",
        "let",
        "module",
        "namespace",
        "new",
        "null",
        "number",
        "of",
        "package",
        "private",
        "protected",
        "public",
        "require",
        "return",
        "set",
        "static",
        "string",
        "super",
        "switch",
        "symbol",
        "this",
        "throw",
        "true",
        "try",
        "type",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "yield",
    }
)

# Engine callbacks users override; they stay public and keep their underscore
ENGINE_CALLBACKS = frozenset(
    {
        "_ready",
        "_process",
        "_physics_process",
        "_input",
        "_init",
        "_enter_tree",
        "_exit_tree",
        "_get_configuration_warnings",
        "_shortcut_input",
        "_unhandled_input",
        "_unhandled_key_input",
    }
)

_PATH_SEPARATORS = re.compile(r"[/:.\s]+")
_ILLEGAL_CHARACTERS = re.compile(r"[^A-Za-z0-9_$]")


@dataclass
class ResolvedName:
    """Result of member name resolution."""

    name: str = ""  # TypeScript identifier
    is_private: bool = False  # Engine-internal, flagged "do not call directly"


class NameResolver:
    """Resolves schema names into TypeScript identifiers."""

    def __init__(self, public_underscore_names: list[str] | None = None):
        """
        Initialize the resolver.

        Args:
            public_underscore_names: Underscore-prefixed names that are public API
        """
        self.public_underscore_names = frozenset(public_underscore_names or [])

    def member_name(self, raw: str, is_virtual: bool = False) -> ResolvedName:
        """
        Resolve a property, method or signal name.

        Engine callbacks and whitelisted names keep their leading underscore and
        stay public. Any other underscore-prefixed name, and any virtual method,
        is private: its underscore is stripped and the rest camelCased.
        """
        if raw in ENGINE_CALLBACKS or raw in self.public_underscore_names:
            return ResolvedName(name=self.sanitize(raw), is_private=False)
        if raw.startswith("_"):
            return ResolvedName(name=self.sanitize(snake_to_camel_case(raw.lstrip("_"))), is_private=True)
        return ResolvedName(name=self.sanitize(snake_to_camel_case(raw)), is_private=is_virtual)

    def parameter_name(self, raw: str) -> str:
        """Resolve a parameter name."""
        return self.sanitize(snake_to_camel_case(raw))

    def sanitize(self, raw: str) -> str:
        """
        Make a valid TypeScript identifier out of a raw name.

        Path-like names such as "voice/1/cutoff_hz" collapse into one
        camelCased identifier, illegal characters become underscores, a
        leading digit gets an underscore prefix and reserved words get an
        underscore suffix.
        """
        name = raw
        parts = [p for p in _PATH_SEPARATORS.split(name) if p]
        if len(parts) > 1:
            name = "".join(
                snake_to_camel_case(part) if i == 0 else upper_first(snake_to_camel_case(part)) for i, part in enumerate(parts)
            )
        name = _ILLEGAL_CHARACTERS.sub("_", name)
        if name[:1].isdigit():
            name = "_" + name
        if name in TS_RESERVED_KEYWORDS:
            name = name + "_"
        return name

    def global_enum_name(self, qualified_name: str) -> str:
        """Alias name of a global enum group ("Variant.Type" -> "VariantType")."""
        return self.sanitize("".join(upper_first(part) for part in qualified_name.split(".")))

    def file_stem(self, class_name: str) -> str:
        """Output file stem of a class."""
        return class_name

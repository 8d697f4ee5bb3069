"""
Utility functions for the class database to TypeScript declaration generator.
"""

import re

# One or more underscores followed by the character to upper-case
_CAMEL_PATTERN = re.compile(r"_+([a-zA-Z0-9])")


def snake_to_camel_case(text: str) -> str:
    """Convert snake_case to camelCase, keeping the first word as written.

    Examples:
        "get_value" -> "getValue"
        "volume_db" -> "volumeDb"
        "position" -> "position"
        "from_position" -> "fromPosition"
        "bake_mesh_2d" -> "bakeMesh2d"

    Args:
        text: The snake_case name

    Returns:
        camelCase string
    """
    return _CAMEL_PATTERN.sub(lambda m: m.group(1).upper(), text)


def upper_first(text: str) -> str:
    """Upper-case the first character only ("lightEnergy" -> "LightEnergy")."""
    return text[:1].upper() + text[1:]

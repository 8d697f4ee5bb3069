"""
Analyzer module.

Contains reference resolution, name resolution and type mapping.
"""

from __future__ import annotations

from .name_resolver import ENGINE_CALLBACKS, TS_RESERVED_KEYWORDS, NameResolver, ResolvedName
from .reference_resolver import ReferenceResolver, ResolvedEnum, iter_class_types, iter_references
from .type_mapper import CORE_NAMES, VARIANT_TYPE, TypeMapper, UnitContext

__all__ = [
    "CORE_NAMES",
    "ENGINE_CALLBACKS",
    "TS_RESERVED_KEYWORDS",
    "VARIANT_TYPE",
    "NameResolver",
    "ReferenceResolver",
    "ResolvedEnum",
    "ResolvedName",
    "TypeMapper",
    "UnitContext",
    "iter_class_types",
    "iter_references",
]

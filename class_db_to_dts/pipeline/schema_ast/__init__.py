"""
Schema model module.

Contains the schema model definitions and the loaders that build it
from the engine's reflection sources.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import SchemaStructureError
from .json_loader import JsonSchemaLoader
from .nodes import (
    ClassEntry,
    ConstantEntry,
    EnumGroup,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
    SchemaModel,
    SignalEntry,
    TypeReference,
    TypeTag,
    Visibility,
)
from .type_parser import TypeStringParser
from .xml_loader import XmlSchemaLoader


def load_schema(path: str | Path, version: str = "") -> SchemaModel:
    """
    Load a schema from a documentation XML directory or a JSON API description.

    Args:
        path: Directory of class documents, or a .json file
        version: Engine version tag recorded in the model

    Returns:
        The loaded SchemaModel
    """
    path = Path(path)
    if path.is_dir():
        return XmlSchemaLoader().load_directory(path, version)
    if path.suffix == ".json":
        return JsonSchemaLoader().load_file(path, version)
    raise SchemaStructureError(f"unsupported schema source: {path}")


__all__ = [
    "ClassEntry",
    "ConstantEntry",
    "EnumGroup",
    "JsonSchemaLoader",
    "MethodEntry",
    "ParameterEntry",
    "PropertyEntry",
    "SchemaModel",
    "SignalEntry",
    "TypeReference",
    "TypeStringParser",
    "TypeTag",
    "Visibility",
    "XmlSchemaLoader",
    "load_schema",
]

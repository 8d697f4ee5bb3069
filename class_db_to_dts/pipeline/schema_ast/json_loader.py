"""
Loader for the engine's JSON API description (extension_api.json).

Phase 1 of the pipeline: read the JSON document (or an equivalent
dictionary) into the schema model without resolving any reference.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ...logging_config import get_logger
from ..errors import SchemaStructureError
from .nodes import (
    ClassEntry,
    ConstantEntry,
    EnumGroup,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
    SchemaModel,
    SignalEntry,
    Visibility,
)
from .type_parser import TypeStringParser
from .xml_loader import SKIPPED_CLASSES

logger = get_logger(__name__)


class JsonSchemaLoader:
    """Loads an extension_api.json style document into a SchemaModel."""

    def __init__(self):
        self.type_parser = TypeStringParser()

    def load_file(self, path: Path, version: str = "") -> SchemaModel:
        """
        Load a JSON API description from disk.

        Args:
            path: Path to the JSON document
            version: Engine version tag; read from the document header when empty

        Returns:
            The loaded SchemaModel

        Raises:
            SchemaStructureError: If the document is malformed
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaStructureError(f"{path.name}: {e}") from e
        except OSError as e:
            raise SchemaStructureError(f"cannot read schema {path}: {e}") from e

        model = self.load_dict(data, version)
        model.source = str(path)
        return model

    def load_dict(self, data: dict[str, Any], version: str = "") -> SchemaModel:
        """Build a SchemaModel from the decoded JSON document."""
        if not isinstance(data, dict):
            raise SchemaStructureError("API description must be a JSON object")

        model = SchemaModel(version=version or self._header_version(data.get("header", {})))
        seen: set[str] = set()

        for raw in self._list(data, "global_enums"):
            model.global_enums.append(self._parse_enum(raw, None))

        # Flat global constants share one unnamed group
        flat = EnumGroup()
        for raw in self._list(data, "global_constants"):
            constant_name = self._required(raw, "name")
            value = raw.get("value")
            if not isinstance(value, int) or isinstance(value, bool):
                raise SchemaStructureError(f"constant value {value!r} is not an integer", None, constant_name)
            flat.constants.append(ConstantEntry(name=constant_name, value=value, doc=raw.get("description", "")))
        if flat.constants:
            model.global_enums.append(flat)

        for raw in self._list(data, "builtin_classes"):
            class_entry = self._parse_class(raw, is_builtin=True)
            if class_entry is not None:
                self._add_class(model, class_entry, seen)

        for raw in self._list(data, "classes"):
            class_entry = self._parse_class(raw, is_builtin=False)
            if class_entry is not None:
                self._add_class(model, class_entry, seen)

        singleton_names = {self._required(s, "type") for s in self._list(data, "singletons")}
        for class_entry in model.classes:
            class_entry.is_singleton = class_entry.name in singleton_names

        logger.info(f"Loaded {len(model.classes)} classes and {len(model.global_enums)} global enum groups")
        return model

    def _add_class(self, model: SchemaModel, class_entry: ClassEntry, seen: set[str]) -> None:
        if class_entry.name in seen:
            raise SchemaStructureError("duplicate class name", class_entry.name)
        seen.add(class_entry.name)
        model.classes.append(class_entry)

    def _header_version(self, header: dict[str, Any]) -> str:
        """Build a tag such as "4.4.3-stable" from the document header."""
        if not isinstance(header, dict) or "version_major" not in header:
            return ""
        version = f"{header['version_major']}.{header.get('version_minor', 0)}.{header.get('version_patch', 0)}"
        status = header.get("version_status")
        return f"{version}-{status}" if status else version

    def _parse_class(self, raw: dict[str, Any], is_builtin: bool) -> ClassEntry | None:
        name = self._required(raw, "name")
        if name in SKIPPED_CLASSES:
            logger.debug(f"Skipping class {name}")
            return None

        base = raw.get("inherits") or None
        if isinstance(base, list):
            raise SchemaStructureError(f"multiple base classes {base}", name)

        class_entry = ClassEntry(
            name=name,
            base=base,
            doc=raw.get("brief_description", ""),
            is_builtin=is_builtin,
        )

        # Builtin classes list plain fields under "members"
        for member in self._list(raw, "members"):
            member_name = self._required(member, "name", name)
            class_entry.properties.append(
                PropertyEntry(
                    name=member_name,
                    type=self._parse_type(member, name, member_name),
                )
            )

        for prop in self._list(raw, "properties"):
            class_entry.properties.append(self._parse_property(prop, name))

        for method in self._list(raw, "methods"):
            class_entry.methods.append(self._parse_method(method, name))

        for signal in self._list(raw, "signals"):
            signal_name = self._required(signal, "name", name)
            class_entry.signals.append(
                SignalEntry(
                    name=signal_name,
                    parameters=self._parse_arguments(signal, name, signal_name),
                )
            )

        flat = EnumGroup(owner=name)
        for constant in self._list(raw, "constants"):
            constant_name = self._required(constant, "name", name)
            value = constant.get("value")
            if isinstance(value, int) and not isinstance(value, bool):
                flat.constants.append(ConstantEntry(name=constant_name, value=value))
            elif "type" in constant:
                # Typed constant of a value type (Vector2.ZERO)
                class_entry.properties.append(
                    PropertyEntry(
                        name=constant_name,
                        type=self._parse_type(constant, name, constant_name),
                        read_only=True,
                        is_static=True,
                    )
                )
            else:
                raise SchemaStructureError(f"constant value {value!r} is not an integer", name, constant_name)
        if flat.constants:
            class_entry.enums.append(flat)

        for raw_enum in self._list(raw, "enums"):
            class_entry.enums.append(self._parse_enum(raw_enum, name))

        return class_entry

    def _parse_property(self, prop: dict[str, Any], class_name: str) -> PropertyEntry:
        prop_name = self._required(prop, "name", class_name)
        index = prop.get("index")
        if index is not None and not isinstance(index, int):
            raise SchemaStructureError(f"property index {index!r} is not an integer", class_name, prop_name)

        return PropertyEntry(
            name=prop_name,
            type=self._parse_type(prop, class_name, prop_name),
            read_only=not prop.get("setter"),
            indexed=index is not None,
            index=index,
            setter=prop.get("setter", ""),
            getter=prop.get("getter", ""),
        )

    def _parse_method(self, method: dict[str, Any], class_name: str) -> MethodEntry:
        method_name = self._required(method, "name", class_name)

        # Classes use a "return_value" object, builtin classes a "return_type" string
        if "return_value" in method:
            return_type = self._parse_type(method["return_value"], class_name, method_name)
        elif "return_type" in method:
            return_type = self.type_parser.parse(method["return_type"], class_name=class_name, member_name=method_name)
        else:
            return_type = self.type_parser.parse("void")

        return MethodEntry(
            name=method_name,
            parameters=self._parse_arguments(method, class_name, method_name),
            return_type=return_type,
            visibility=Visibility.VIRTUAL if method.get("is_virtual") else Visibility.PUBLIC,
            is_static=bool(method.get("is_static")),
            is_vararg=bool(method.get("is_vararg")),
            is_const=bool(method.get("is_const")),
        )

    def _parse_arguments(self, raw: dict[str, Any], class_name: str, member_name: str) -> list[ParameterEntry]:
        params = []
        for argument in self._list(raw, "arguments"):
            has_default = "default_value" in argument
            params.append(
                ParameterEntry(
                    name=self._required(argument, "name", class_name),
                    type=self._parse_type(argument, class_name, member_name),
                    optional=has_default,
                    default=str(argument["default_value"]) if has_default else None,
                )
            )
        return params

    def _parse_enum(self, raw: dict[str, Any], owner: str | None) -> EnumGroup:
        enum_name = self._required(raw, "name", owner)
        group = EnumGroup(owner=owner, name=enum_name, is_bitfield=bool(raw.get("is_bitfield")))
        for value in self._list(raw, "values"):
            constant_name = self._required(value, "name", owner)
            constant_value = value.get("value")
            if not isinstance(constant_value, int) or isinstance(constant_value, bool):
                raise SchemaStructureError(f"enum value {constant_value!r} is not an integer", owner, constant_name)
            group.constants.append(
                ConstantEntry(
                    name=constant_name,
                    value=constant_value,
                    doc=value.get("description", ""),
                )
            )
        return group

    def _parse_type(self, raw: dict[str, Any], class_name: str, member_name: str):
        return self.type_parser.parse(
            raw.get("type"),
            meta=raw.get("meta"),
            class_name=class_name,
            member_name=member_name,
        )

    def _list(self, raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
        value = raw.get(key) or []
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise SchemaStructureError(f"'{key}' must be a list of objects", raw.get("name"))
        return value

    def _required(self, raw: dict[str, Any], key: str, class_name: str | None = None) -> str:
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            raise SchemaStructureError(f"missing required field '{key}'", class_name)
        return value.strip()

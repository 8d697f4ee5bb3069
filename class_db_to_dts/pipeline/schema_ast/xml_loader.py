"""
Loader for engine documentation XML (one <class> document per file).

Phase 1 of the pipeline: read a directory of class documents into the
schema model without resolving any reference.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

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

logger = get_logger(__name__)

GLOBAL_SCOPE = "@GlobalScope"

# Documents that describe primitives or types provided by the core prelude
SKIPPED_CLASSES = frozenset({"int", "float", "bool", "String", "Nil", "Variant", "Signal"})

# Constant values spelled as a constructor call, e.g. "Vector2(0, 0)"
_VALUE_CONSTRUCTOR = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\(.*\)$")


class XmlSchemaLoader:
    """Loads a documentation XML directory into a SchemaModel."""

    def __init__(self):
        self.type_parser = TypeStringParser()

    def load_directory(self, directory: Path, version: str = "") -> SchemaModel:
        """
        Load every *.xml class document of a directory.

        Args:
            directory: Directory holding the class documents
            version: Engine version tag recorded in the model

        Returns:
            The loaded SchemaModel

        Raises:
            SchemaStructureError: If a document is malformed
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise SchemaStructureError(f"schema directory not found: {directory}")

        documents = []
        for path in sorted(directory.glob("*.xml"), key=lambda p: p.name):
            try:
                root = ET.parse(path).getroot()
            except ET.ParseError as e:
                raise SchemaStructureError(f"{path.name}: {e}") from e
            documents.append(root)

        model = self.load_documents(documents, version)
        model.source = str(directory)
        return model

    def load_documents(self, documents: list[ET.Element], version: str = "") -> SchemaModel:
        """Build a SchemaModel from already parsed <class> elements."""
        model = SchemaModel(version=version)
        singletons: list[str] = []
        seen: set[str] = set()

        for root in documents:
            if root.tag != "class":
                raise SchemaStructureError(f"expected a <class> document, found <{root.tag}>")
            name = self._required(root, "name")

            if name == GLOBAL_SCOPE:
                model.global_enums.extend(self._parse_constants(root, None))
                singletons.extend(self._required(m, "type", name) for m in root.iterfind("members/member"))
                continue
            if name in SKIPPED_CLASSES or name.startswith("@"):
                logger.debug(f"Skipping class document {name}")
                continue
            if name in seen:
                raise SchemaStructureError("duplicate class name", name)
            seen.add(name)

            model.classes.append(self._parse_class(root, name))

        singleton_names = set(singletons)
        for class_entry in model.classes:
            class_entry.is_singleton = class_entry.name in singleton_names

        logger.info(f"Loaded {len(model.classes)} classes and {len(model.global_enums)} global enum groups")
        return model

    def _parse_class(self, root: ET.Element, name: str) -> ClassEntry:
        """Parse one <class> element."""
        base = root.get("inherits") or None
        if base is not None and "," in base:
            raise SchemaStructureError(f"multiple base classes '{base}'", name)

        class_entry = ClassEntry(
            name=name,
            base=base,
            doc=self._text(root.find("brief_description")),
            deprecated=root.get("deprecated"),
            is_builtin=root.find("constructors") is not None,
        )

        for member in root.iterfind("members/member"):
            # Overrides only restate an inherited default value
            if member.get("overrides"):
                continue
            class_entry.properties.append(self._parse_member(member, name, class_entry.is_builtin))

        for method in root.iterfind("methods/method"):
            class_entry.methods.append(self._parse_method(method, name))

        for signal in root.iterfind("signals/signal"):
            signal_name = self._required(signal, "name", name)
            class_entry.signals.append(
                SignalEntry(
                    name=signal_name,
                    parameters=self._parse_params(signal, name, signal_name),
                    doc=self._text(signal.find("description")),
                    deprecated=signal.get("deprecated"),
                )
            )

        class_entry.enums = self._parse_constants(root, name)
        class_entry.properties.extend(self._parse_typed_constants(root, name))
        return class_entry

    def _parse_member(self, member: ET.Element, class_name: str, is_builtin: bool = False) -> PropertyEntry:
        member_name = self._required(member, "name", class_name)
        prop_type = self.type_parser.parse(
            member.get("type"),
            enum=member.get("enum"),
            is_bitfield=member.get("is_bitfield") == "true",
            class_name=class_name,
            member_name=member_name,
        )
        return PropertyEntry(
            name=member_name,
            type=prop_type,
            # Value type fields are plain writable fields without accessors
            read_only=not is_builtin and not member.get("setter"),
            setter=member.get("setter", ""),
            getter=member.get("getter", ""),
            doc=self._text(member),
            deprecated=member.get("deprecated"),
        )

    def _parse_method(self, method: ET.Element, class_name: str) -> MethodEntry:
        method_name = self._required(method, "name", class_name)
        qualifiers = (method.get("qualifiers") or "").split()

        return_node = method.find("return")
        if return_node is None:
            return_type = self.type_parser.parse("void")
        else:
            return_type = self.type_parser.parse(
                return_node.get("type"),
                enum=return_node.get("enum"),
                is_bitfield=return_node.get("is_bitfield") == "true",
                class_name=class_name,
                member_name=method_name,
            )

        return MethodEntry(
            name=method_name,
            parameters=self._parse_params(method, class_name, method_name),
            return_type=return_type,
            visibility=Visibility.VIRTUAL if "virtual" in qualifiers else Visibility.PUBLIC,
            is_static="static" in qualifiers,
            is_vararg="vararg" in qualifiers,
            is_const="const" in qualifiers,
            doc=self._text(method.find("description")),
            deprecated=method.get("deprecated"),
        )

    def _parse_params(self, node: ET.Element, class_name: str, member_name: str) -> list[ParameterEntry]:
        params = []
        for param in node.iterfind("param"):
            default = param.get("default")
            params.append(
                ParameterEntry(
                    name=self._required(param, "name", class_name),
                    type=self.type_parser.parse(
                        param.get("type"),
                        enum=param.get("enum"),
                        is_bitfield=param.get("is_bitfield") == "true",
                        class_name=class_name,
                        member_name=member_name,
                    ),
                    optional=default is not None,
                    default=default,
                )
            )
        # Documents number parameters explicitly; honour that order
        order = [self._parse_int(p.get("index", "")) for p in node.iterfind("param")]
        if order and None not in order:
            params = [param for _, param in sorted(zip(order, params), key=lambda pair: pair[0])]
        return params

    def _parse_constants(self, root: ET.Element, owner: str | None) -> list[EnumGroup]:
        """Group integer <constant> elements by their enum attribute, keeping first-seen order."""
        groups: dict[str | None, EnumGroup] = {}
        for constant in root.iterfind("constants/constant"):
            constant_name = self._required(constant, "name", owner)
            raw_value = self._required(constant, "value", owner)
            value = self._parse_int(raw_value)
            if value is None:
                if owner is not None and _VALUE_CONSTRUCTOR.match(raw_value):
                    # Typed constant of a value type, emitted as a static property
                    continue
                raise SchemaStructureError(f"constant value '{raw_value}' is not an integer", owner, constant_name)

            group_name = constant.get("enum") or None
            group = groups.get(group_name)
            if group is None:
                group = EnumGroup(owner=owner, name=group_name)
                groups[group_name] = group
            if constant.get("is_bitfield") == "true":
                group.is_bitfield = True
            group.constants.append(
                ConstantEntry(
                    name=constant_name,
                    value=value,
                    doc=self._text(constant),
                    deprecated=constant.get("deprecated"),
                )
            )
        return list(groups.values())

    def _parse_typed_constants(self, root: ET.Element, owner: str) -> list[PropertyEntry]:
        """Typed constants of value types ("Vector2(0, 0)") become static read-only properties."""
        properties = []
        for constant in root.iterfind("constants/constant"):
            raw_value = constant.get("value", "")
            if self._parse_int(raw_value) is not None:
                continue
            match = _VALUE_CONSTRUCTOR.match(raw_value)
            if match is None:
                continue
            constant_name = self._required(constant, "name", owner)
            properties.append(
                PropertyEntry(
                    name=constant_name,
                    type=self.type_parser.parse(match.group(1), class_name=owner, member_name=constant_name),
                    read_only=True,
                    is_static=True,
                    doc=self._text(constant),
                    deprecated=constant.get("deprecated"),
                )
            )
        return properties

    def _parse_int(self, raw_value: str) -> int | None:
        try:
            return int(raw_value.strip())
        except ValueError:
            return None

    def _required(self, node: ET.Element, attribute: str, class_name: str | None = None) -> str:
        value = node.get(attribute)
        if value is None or not value.strip():
            raise SchemaStructureError(f"<{node.tag}> is missing required attribute '{attribute}'", class_name)
        return value.strip()

    def _text(self, node: ET.Element | None) -> str:
        if node is None or node.text is None:
            return ""
        return node.text.strip()

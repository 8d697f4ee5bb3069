"""
Module assembler.

Collects the declaration units of a run into the output file set: one
file per class, the core prelude, the global enums, the aggregate index
and the API name map.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import jinja2

from ...logging_config import get_logger
from ..analyzer.name_resolver import NameResolver
from ..analyzer.type_mapper import CORE_NAMES
from ..ast_backends.class_emitter import DeclarationUnit
from ..errors import OutputCollisionError
from ..schema_ast.nodes import EnumGroup

logger = get_logger(__name__)

CLASSES_DIR = "classes"
DECLARATION_SUFFIX = ".d.ts"
CORE_FILE = "core.d.ts"
GLOBALS_FILE = "globals.d.ts"
INDEX_FILE = "index.d.ts"
API_MAP_FILE = "api-map.json"


class FileSet:
    """Ordered mapping of relative output paths to file contents."""

    def __init__(self):
        self._files: dict[str, str] = {}

    def add(self, rel_path: str, content: str) -> None:
        if rel_path in self._files:
            raise OutputCollisionError(f"two outputs render to {rel_path}")
        self._files[rel_path] = content

    def get(self, rel_path: str) -> str | None:
        return self._files.get(rel_path)

    def paths(self) -> list[str]:
        return list(self._files)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._files.items())

    def __contains__(self, rel_path: str) -> bool:
        return rel_path in self._files

    def __len__(self) -> int:
        return len(self._files)


class ModuleAssembler:
    """Assembles declaration units into a FileSet."""

    TEMPLATE_LANG = "typescript"

    def __init__(
        self,
        name_resolver: NameResolver,
        global_enums: list[EnumGroup] | None = None,
        header: str = "",
        version: str = "",
        emit_api_map: bool = True,
    ):
        """
        Initialize the assembler.

        Args:
            name_resolver: Identifier rules for global enum aliases
            global_enums: Enum groups not owned by any class; unnamed groups hold flat global constants
            header: Generation comment written at the top of aggregate files
            version: Engine version tag recorded in the API map
            emit_api_map: Whether api-map.json is part of the output
        """
        self.name_resolver = name_resolver
        self.global_enums = [g for g in (global_enums or []) if g.name]
        self.global_constants = [c for g in (global_enums or []) if not g.name for c in g.constants]
        self.header = header
        self.version = version
        self.emit_api_map = emit_api_map
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.core_template = self.jinja_env.get_template(f"core{DECLARATION_SUFFIX}.jinja2")
        self.globals_template = self.jinja_env.get_template(f"globals{DECLARATION_SUFFIX}.jinja2")
        self.index_template = self.jinja_env.get_template(f"index{DECLARATION_SUFFIX}.jinja2")

    def assemble(self, units: list[DeclarationUnit]) -> FileSet:
        """
        Assemble the output file set.

        Args:
            units: Declaration units in emission order

        Returns:
            The complete FileSet

        Raises:
            OutputCollisionError: If two outputs would share a file name or an exported name
        """
        self._check_collisions(units)

        file_set = FileSet()
        file_set.add(CORE_FILE, self.core_template.render(header=self.header))
        file_set.add(
            GLOBALS_FILE,
            self.globals_template.render(
                header=self.header,
                groups=self._global_groups(),
                constants=self._global_constants(),
            ),
        )

        for unit in units:
            file_set.add(self.class_path(unit.file_stem), unit.content)

        file_set.add(INDEX_FILE, self.index_template.render(header=self.header, class_files=[u.file_stem for u in units]))

        if self.emit_api_map:
            file_set.add(API_MAP_FILE, self.render_api_map(units))

        logger.info(f"Assembled {len(file_set)} files ({len(units)} classes)")
        return file_set

    def class_path(self, file_stem: str) -> str:
        return f"{CLASSES_DIR}/{file_stem}{DECLARATION_SUFFIX}"

    def render_api_map(self, units: list[DeclarationUnit]) -> str:
        """Render the schema name to TypeScript name map of every class."""
        classes = {}
        for unit in units:
            members = []
            for member in unit.members:
                members.append(
                    {
                        "kind": member.kind.value,
                        "name": member.source_name,
                        "ts_name": member.name,
                        "private": member.is_private,
                        "static": member.is_static,
                    }
                )
            classes[unit.class_name] = {
                "file": self.class_path(unit.file_stem),
                "base": unit.base_class,
                "members": members,
            }
        return json.dumps({"version": self.version, "classes": classes}, indent=2) + "\n"

    def _global_groups(self) -> list[dict]:
        groups = []
        for group in self.global_enums:
            values = list(dict.fromkeys(c.value for c in group.constants))
            groups.append(
                {
                    "alias": self.name_resolver.global_enum_name(group.qualified_name),
                    "is_bitfield": group.is_bitfield,
                    "literals": " | ".join(str(v) for v in values) if values else "never",
                    "constants": [{"name": self.name_resolver.sanitize(c.name), "value": c.value} for c in group.constants],
                }
            )
        return groups

    def _global_constants(self) -> list[dict]:
        return [{"name": self.name_resolver.sanitize(c.name), "value": c.value} for c in self.global_constants]

    def _check_collisions(self, units: list[DeclarationUnit]) -> None:
        """
        Detect outputs that would overwrite each other.

        File names are compared case-insensitively since the output may
        land on a case-insensitive filesystem. Exported names of classes,
        global enum aliases, flat global constants and core prelude names
        must be distinct, since the index re-exports all of them.
        """
        stems: dict[str, str] = {}
        for unit in units:
            key = unit.file_stem.lower()
            if key in stems:
                raise OutputCollisionError(
                    f"file name {self.class_path(unit.file_stem)} collides with class '{stems[key]}'",
                    unit.class_name,
                )
            stems[key] = unit.class_name

        exported: dict[str, str] = {name: "core prelude" for name in CORE_NAMES}
        for group in self._global_groups():
            if group["alias"] in exported:
                raise OutputCollisionError(f"global enum alias '{group['alias']}' collides with {exported[group['alias']]}")
            exported[group["alias"]] = "a global enum"
        for constant in self._global_constants():
            if constant["name"] in exported:
                raise OutputCollisionError(f"global constant '{constant['name']}' collides with {exported[constant['name']]}")
            exported[constant["name"]] = "a global constant"
        for unit in units:
            if unit.class_name in exported:
                raise OutputCollisionError(f"class name collides with {exported[unit.class_name]}", unit.class_name)
            exported[unit.class_name] = f"class '{unit.class_name}'"


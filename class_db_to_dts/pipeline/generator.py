"""
Pipeline generator.

Runs the whole generation as one linear pass:

1. Load: read the reflection source into the schema model
2. Validate: check the class graph and select the classes to emit
3. Emit: render one declaration unit per class
4. Assemble: build the output file set
5. Format: optional post-processing of the declaration files
6. Write: publish the file set atomically

Any GenerationError aborts the run; nothing is written unless every
phase succeeded.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from pathlib import Path
from typing import Any

from ..logging_config import get_logger
from .analyzer import NameResolver, ReferenceResolver, TypeMapper
from .assembler import AtomicWriter, FileSet, ModuleAssembler
from .ast_backends import ClassEmitter, DeclarationUnit
from .config import GeneratorConfig
from .errors import GenerationError
from .formatters import PrettierFormatter
from .schema_ast import JsonSchemaLoader, SchemaModel, load_schema

logger = get_logger(__name__)


class RunState(str, Enum):
    """State of a generation run."""

    PENDING = "pending"
    LOADED = "loaded"
    VALIDATED = "validated"
    EMITTED = "emitted"
    ASSEMBLED = "assembled"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineGenerator:
    """Generates TypeScript declarations from an engine class database."""

    def __init__(
        self,
        schema: SchemaModel | dict[str, Any] | str | Path,
        config: GeneratorConfig | None = None,
        command_line: str = "",
    ):
        """
        Initialize the generator.

        Args:
            schema: A loaded SchemaModel, a decoded extension_api.json
                dictionary, or a path to an XML directory or JSON file
            config: Generation configuration
            command_line: Command line recorded in the generation comment
        """
        self.schema = schema
        self.config = config or GeneratorConfig()
        self.command_line = command_line
        self.state = RunState.PENDING

        self.model: SchemaModel | None = None
        self.units: list[DeclarationUnit] = []
        self.file_set: FileSet | None = None

    def generate(self) -> FileSet:
        """
        Run the pipeline up to the assembled file set, writing nothing.

        Returns:
            The assembled FileSet

        Raises:
            GenerationError: On any fatal error; the run state becomes FAILED
        """
        try:
            model = self._load()
            self._advance(RunState.LOADED, f"{len(model.classes)} classes from {model.source or 'memory'}")

            model, resolver = self._validate(model)
            self.model = model
            self._advance(RunState.VALIDATED, f"{len(model.classes)} classes selected")

            name_resolver = NameResolver(self.config.public_underscore_names)
            type_mapper = TypeMapper(resolver, name_resolver)
            header = self._generation_comment(model)
            emitter = ClassEmitter(
                type_mapper,
                name_resolver,
                emit_docs=self.config.emit_docs,
                sort_members=self.config.sort_members,
                generation_comment=header,
            )
            self.units = [emitter.emit_class(class_entry) for class_entry in model.classes]
            self._advance(RunState.EMITTED, f"{len(self.units)} declaration units")

            assembler = ModuleAssembler(
                name_resolver,
                global_enums=model.global_enums,
                header=header,
                version=self._version(model),
                emit_api_map=self.config.emit_api_map,
            )
            self.file_set = assembler.assemble(self.units)
            self._advance(RunState.ASSEMBLED, f"{len(self.file_set)} files")
        except GenerationError as e:
            self._fail(e)
            raise

        return self.file_set

    def write(self, output_dir: str | Path) -> FileSet:
        """
        Run the whole pipeline and publish the declarations.

        Args:
            output_dir: Directory receiving the declaration files

        Returns:
            The published FileSet

        Raises:
            GenerationError: On any fatal error; nothing is written
        """
        file_set = self.generate()
        try:
            if self.config.formatter.enabled:
                file_set = self._format(file_set)

            AtomicWriter().write(
                Path(output_dir),
                file_set,
                mode=self.config.output.mode,
                validate=self.config.output.validate_before_write,
                atomic=self.config.output.atomic_write,
            )
        except GenerationError as e:
            self._fail(e)
            raise

        self.file_set = file_set
        self._advance(RunState.COMPLETED, f"written to {output_dir}")
        return file_set

    def _load(self) -> SchemaModel:
        if isinstance(self.schema, SchemaModel):
            return self.schema
        if isinstance(self.schema, dict):
            return JsonSchemaLoader().load_dict(self.schema, self.config.version)
        return load_schema(self.schema, self.config.version)

    def _validate(self, model: SchemaModel) -> tuple[SchemaModel, ReferenceResolver]:
        """
        Apply class selection and validate the class graph.

        Ignored classes are removed from the model, so any remaining
        reference to one of them fails resolution. A subset is expanded
        to its dependency closure.
        """
        if self.config.ignore_classes:
            ignored = set(self.config.ignore_classes)
            model = dataclasses.replace(model, classes=[c for c in model.classes if c.name not in ignored])

        resolver = ReferenceResolver(model)
        resolver.validate_inheritance()

        if self.config.only_classes:
            selected = set(resolver.dependency_closure(self.config.only_classes))
            logger.info(f"Subset of {len(self.config.only_classes)} classes expands to {len(selected)}")
            model = dataclasses.replace(model, classes=[c for c in model.classes if c.name in selected])
            resolver = ReferenceResolver(model)

        return model, resolver

    def _format(self, file_set: FileSet) -> FileSet:
        formatter = PrettierFormatter()
        formatted = FileSet()
        for rel_path, content in file_set.items():
            if rel_path.endswith(".d.ts"):
                content = formatter.format(content, self.config.formatter, Path(rel_path).name)
            formatted.add(rel_path, content)
        return formatted

    def _version(self, model: SchemaModel) -> str:
        return self.config.version or model.version

    def _generation_comment(self, model: SchemaModel) -> str:
        if not self.config.add_generation_comment:
            return ""
        version = self._version(model)
        source = f"engine {version} class reference" if version else "engine class reference"
        lines = [f"// Generated by class_db_to_dts from the {source}. Do not edit."]
        if self.command_line:
            lines.append(f"// Command: {self.command_line}")
        return "\n".join(lines)

    def _advance(self, state: RunState, detail: str) -> None:
        logger.info(f"{self.state.value} -> {state.value}: {detail}")
        self.state = state

    def _fail(self, error: GenerationError) -> None:
        logger.debug(f"Run failed in state {self.state.value}: {error}")
        self.state = RunState.FAILED

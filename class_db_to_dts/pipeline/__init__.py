"""
Pipeline - class database to TypeScript declaration generator.

This module provides a multi-phase architecture for generating ambient
declaration files from an engine's reflected class database:

1. Phase 1 (Schema AST): Load the XML or JSON class database into the schema model
2. Phase 2 (Analyzer): Resolve references, names and types
3. Phase 3 (AST Backend): Build a TypeScript AST per class and serialize it
4. Phase 4 (Assembler): Collect the files of the run and publish them atomically
5. Phase 5 (Formatter): Optional post-processing (e.g., prettier)
"""

from __future__ import annotations

from .assembler import AtomicWriter, FileSet, ModuleAssembler
from .config import FormatterConfig, GeneratorConfig, OutputConfig, OutputMode
from .errors import (
    GenerationError,
    OutputCollisionError,
    OutputExistsError,
    OutputValidationError,
    SchemaStructureError,
    SignatureInconsistencyError,
    UnmappedPrimitiveError,
    UnresolvedReferenceError,
)
from .generator import PipelineGenerator, RunState
from .schema_ast import SchemaModel, load_schema

__all__ = [
    "PipelineGenerator",
    "RunState",
    "GeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "FileSet",
    "ModuleAssembler",
    "SchemaModel",
    "load_schema",
    "GenerationError",
    "OutputCollisionError",
    "OutputExistsError",
    "OutputValidationError",
    "SchemaStructureError",
    "SignatureInconsistencyError",
    "UnmappedPrimitiveError",
    "UnresolvedReferenceError",
]

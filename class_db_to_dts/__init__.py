"""Class database to TypeScript declaration generator

A Python package for generating TypeScript ambient declarations (.d.ts)
from an engine's reflected class database, read from documentation XML
or extension_api.json, with atomic output and configurable options.
"""

__version__ = "1.0.1"

from .pipeline import (
    AtomicWriter,
    FormatterConfig,
    GenerationError,
    GeneratorConfig,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    load_schema,
)

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "GenerationError",
    "AtomicWriter",
    "load_schema",
]

"""
Assembler module.

Collects declaration units into the output file set and publishes it
atomically.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .module_assembler import (
    API_MAP_FILE,
    CLASSES_DIR,
    CORE_FILE,
    GLOBALS_FILE,
    INDEX_FILE,
    FileSet,
    ModuleAssembler,
)

__all__ = [
    "API_MAP_FILE",
    "CLASSES_DIR",
    "CORE_FILE",
    "GLOBALS_FILE",
    "INDEX_FILE",
    "AtomicWriter",
    "FileSet",
    "ModuleAssembler",
]

"""
Configuration for the declaration generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for the declaration directory.

    Controls behavior when the output directory already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if the directory exists
    FORCE = "force"  # Replace the directory


@dataclass
class OutputConfig:
    """Configuration for output directory handling.

    Attributes:
        mode: How to handle an existing output directory
        validate_before_write: Whether to check every file before publishing
        atomic_write: Whether to publish through a temporary sibling directory
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for the post-processing formatter."""

    # Whether formatting is enabled
    enabled: bool = False

    # Formatter command line; code is passed on stdin
    command: list[str] = field(default_factory=lambda: ["prettier", "--parser", "typescript"])

    # Seconds before the formatter run is abandoned
    timeout: int = 120


@dataclass
class GeneratorConfig:
    """Configuration options for declaration generation."""

    # Classes to leave out of the output
    ignore_classes: list[str] = field(default_factory=list)

    # Emit only these classes and everything they depend on (empty = all)
    only_classes: list[str] = field(default_factory=list)

    # Sort members by rendered name inside each section (default: schema order)
    sort_members: bool = False

    # Write documentation comments
    emit_docs: bool = True

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Write api-map.json next to the declarations
    emit_api_map: bool = True

    # Underscore-prefixed names that are public API and keep their underscore
    public_underscore_names: list[str] = field(default_factory=list)

    # Engine version tag for headers (empty = taken from the schema)
    version: str = ""

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ignore_classes": self.ignore_classes,
            "only_classes": self.only_classes,
            "sort_members": self.sort_members,
            "emit_docs": self.emit_docs,
            "add_generation_comment": self.add_generation_comment,
            "emit_api_map": self.emit_api_map,
            "public_underscore_names": self.public_underscore_names,
            "version": self.version,
            "formatter": {
                "enabled": self.formatter.enabled,
                "command": self.formatter.command,
                "timeout": self.formatter.timeout,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }

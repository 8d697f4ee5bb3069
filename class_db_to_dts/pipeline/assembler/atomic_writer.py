"""
Atomic directory writer for safe declaration output.

Ensures that a failed or interrupted run never leaves a partially
written declaration directory behind.
"""

from __future__ import annotations

import json
import re
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from ...logging_config import get_logger
from ..config import OutputMode
from ..errors import OutputExistsError, OutputValidationError
from .module_assembler import FileSet

logger = get_logger(__name__)

# Block comments, line comments and double-quoted strings, which may contain unbalanced brackets
_NON_CODE = re.compile(r'/\*.*?\*/|//[^\n]*|"(?:[^"\\\n]|\\.)*"', re.DOTALL)


class AtomicWriter:
    """Publishes a FileSet as a directory, with validation.

    Uses a two-phase commit approach:
    1. Validate every file and write them all to a temporary sibling directory
    2. Swap the temporary directory into place

    The swap is a pair of renames on the same filesystem, so readers see
    either the old directory or the complete new one.
    """

    def __init__(self, validate_declarations: Callable[[str, str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_declarations: Optional validation function called with (path, content) of each .d.ts file
        """
        self._validate_declarations = validate_declarations or self._default_validate_declarations

    def write(
        self,
        output_dir: Path,
        file_set: FileSet,
        mode: OutputMode = OutputMode.ERROR_IF_EXISTS,
        validate: bool = True,
        atomic: bool = True,
    ) -> None:
        """Write a file set to a directory.

        Args:
            output_dir: Target directory
            file_set: Files to publish, keyed by relative path
            mode: Behavior when the target directory exists
            validate: Whether to validate every file before writing anything
            atomic: Whether to go through a temporary sibling directory

        Raises:
            OutputExistsError: If the directory exists in error mode
            OutputValidationError: If a file fails validation
            OSError: If file operations fail
        """
        output_dir = Path(output_dir)
        if output_dir.exists() and mode == OutputMode.ERROR_IF_EXISTS:
            raise OutputExistsError(f"Output directory already exists: {output_dir}. Use force mode to replace it.")

        if validate:
            for rel_path, content in file_set.items():
                self._validate_content(rel_path, content)

        if not atomic:
            if output_dir.exists():
                shutil.rmtree(output_dir)
            self._write_files(output_dir, file_set)
            return

        output_dir.parent.mkdir(parents=True, exist_ok=True)

        # Same parent directory ensures the final renames stay on one filesystem
        temp_dir = Path(tempfile.mkdtemp(dir=output_dir.parent, prefix=f".{output_dir.name}.", suffix=".tmp"))
        backup_dir: Path | None = None
        try:
            self._write_files(temp_dir, file_set)

            if output_dir.exists():
                backup_dir = temp_dir.with_name(f"{temp_dir.name}.old")
                output_dir.replace(backup_dir)
            temp_dir.replace(output_dir)
        except Exception:
            if backup_dir is not None and backup_dir.exists() and not output_dir.exists():
                backup_dir.replace(output_dir)
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise

        if backup_dir is not None:
            shutil.rmtree(backup_dir, ignore_errors=True)
        logger.info(f"Published {len(file_set)} files to {output_dir}")

    def _write_files(self, directory: Path, file_set: FileSet) -> None:
        for rel_path, content in file_set.items():
            path = directory / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)

    def _validate_content(self, rel_path: str, content: str) -> None:
        """Validate content based on file type.

        Raises:
            OutputValidationError: If validation fails
        """
        if rel_path.endswith(".d.ts"):
            self._validate_declarations(rel_path, content)
        elif rel_path.endswith(".json"):
            try:
                json.loads(content)
            except json.JSONDecodeError as e:
                raise OutputValidationError(f"{rel_path}: invalid JSON: {e}") from e

    def _default_validate_declarations(self, rel_path: str, content: str) -> None:
        """Default structural check of a declaration file.

        Raises:
            OutputValidationError: If brackets are unbalanced outside comments and strings
        """
        code = _NON_CODE.sub("", content)
        for open_char, close_char in (("{", "}"), ("(", ")"), ("[", "]")):
            opened = code.count(open_char)
            closed = code.count(close_char)
            if opened != closed:
                raise OutputValidationError(f"{rel_path}: unbalanced '{open_char}{close_char}': {opened} open, {closed} close")

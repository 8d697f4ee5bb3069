"""
Prettier formatter for TypeScript declarations.
"""

from __future__ import annotations

import subprocess

from ...logging_config import get_logger
from ..config import FormatterConfig
from .base import Formatter

logger = get_logger(__name__)


class PrettierFormatter(Formatter):
    """Formatter running prettier (or a compatible command) over stdin."""

    def __init__(self):
        self._available: dict[str, bool] = {}

    def is_available(self, config: FormatterConfig) -> bool:
        """Check if the formatter executable runs."""
        executable = config.command[0] if config.command else ""
        if executable not in self._available:
            try:
                result = subprocess.run(
                    [executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available[executable] = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError, PermissionError):
                self._available[executable] = False
        return self._available[executable]

    def format(self, code: str, config: FormatterConfig, filename: str = "index.d.ts") -> str:
        """
        Format declaration text using prettier.

        Args:
            code: Declaration text to format
            config: Formatter configuration
            filename: Path prettier uses to infer the parser

        Returns:
            Formatted code, or the original code if the formatter is missing or fails
        """
        if not self.is_available(config):
            logger.warning(f"Formatter {config.command[:1]} is not available, output left unformatted")
            return code

        cmd = list(config.command) + ["--stdin-filepath", filename]
        try:
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=config.timeout,
            )
        except subprocess.SubprocessError as e:
            logger.warning(f"Formatter failed on {filename}: {e}")
            return code

        if result.returncode == 0:
            return result.stdout
        logger.warning(f"Formatter failed on {filename}: {result.stderr.strip()}")
        return code

"""
Base class for declaration formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for declaration formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, filename: str = "index.d.ts") -> str:
        """
        Format the given code.

        Args:
            code: The declaration text to format
            config: Formatter configuration
            filename: Name used by the formatter to pick a parser

        Returns:
            Formatted code
        """

    @abstractmethod
    def is_available(self, config: FormatterConfig) -> bool:
        """
        Check if the formatter is available (executable installed).

        Returns:
            True if the formatter can be used
        """

"""
Shared utilities for the hardcode-replacer CLI.
"""

from __future__ import annotations

import logging
import sys
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TextIO, TypeVar

T = TypeVar("T")


# =============================================================================
# Exceptions
# =============================================================================


class HardcodeReplacerError(Exception):
    """Base class for user-facing errors."""


# =============================================================================
# Logging
# =============================================================================


class Logger:
    """Simple colored console logger with --no-color support.

    Messages go to stdout until ``set_stderr(True)`` is called, which JSON
    output mode does so the document on stdout stays parseable.
    """

    COLORS = {
        "reset": "\033[0m",
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "magenta": "\033[95m",
        "cyan": "\033[96m",
        "bold": "\033[1m",
        "dim": "\033[2m",
    }

    def __init__(self, use_color: Optional[bool] = None):
        self._use_color = use_color
        self._use_stderr = False

    def set_color(self, use_color: bool) -> None:
        """Set whether to use color output."""
        self._use_color = use_color

    def set_stderr(self, use_stderr: bool) -> None:
        """Route all messages to stderr."""
        self._use_stderr = use_stderr

    @property
    def _stream(self) -> TextIO:
        return sys.stderr if self._use_stderr else sys.stdout

    def _color(self, text: str, color: str) -> str:
        use_color = self._use_color
        if use_color is None:
            use_color = self._stream.isatty()
        if not use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _print(self, message: str) -> None:
        print(message, file=self._stream)

    def header(self, message: str) -> None:
        """Print a section header."""
        self._print(f"\n{self._color('===', 'cyan')} {self._color(message, 'bold')} {self._color('===', 'cyan')}")

    def info(self, message: str) -> None:
        """Print an info message."""
        self._print(f"  {message}")

    def success(self, message: str) -> None:
        """Print a success message."""
        self._print(f"  {self._color('[OK]', 'green')} {message}")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._print(f"  {self._color('[WARN]', 'yellow')} {message}")

    def error(self, message: str) -> None:
        """Print an error message."""
        self._print(f"  {self._color('[ERROR]', 'red')} {message}")

    def dim(self, message: str) -> None:
        """Print a dim/secondary message."""
        self._print(f"  {self._color(message, 'dim')}")


# Global logger instance
log = Logger()


def configure_logging(verbose: bool = False) -> None:
    """Configure stdlib logging for module-level diagnostics."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# =============================================================================
# Collection Helpers
# =============================================================================


def group_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """Group items by key, preserving first-seen key order."""
    grouped: dict[str, list[T]] = defaultdict(list)
    for item in items:
        grouped[key(item)].append(item)
    return dict(grouped)


def count_by(items: Iterable[T], key: Callable[[T], Any]) -> dict[str, int]:
    """Count items per key; missing keys count as ``unknown``."""
    counts: dict[str, int] = {}
    for item in items:
        value = key(item) or "unknown"
        if isinstance(value, Enum):
            value = value.value
        counts[str(value)] = counts.get(str(value), 0) + 1
    return counts


def is_comment_line(text: str) -> bool:
    """Line starts a ``//``, ``/* */``, JSDoc or JSX ``{/* */}`` comment."""
    stripped = text.lstrip()
    return stripped.startswith(("//", "*", "/*", "{/*"))


def location_key(item: Any) -> tuple[str, int, int]:
    """Sort key for deterministic (file, line, column) ordering."""
    return (item.file, item.line, item.column)

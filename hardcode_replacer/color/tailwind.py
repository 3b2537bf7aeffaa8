"""
Tailwind CSS color utility classes.

Tables of the utility prefixes, palette names and shades Tailwind ships,
a search pattern built from them, a parser for single class names, and
Tailwind v4 detection (``@theme { --color-*: ... }`` blocks in CSS).
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

COLOR_PREFIXES = [
    "bg", "text", "border", "ring", "shadow", "divide", "outline",
    "accent", "fill", "stroke", "decoration", "placeholder",
    "from", "via", "to", "caret",
]

COLOR_NAMES = [
    "slate", "gray", "zinc", "neutral", "stone",
    "red", "orange", "amber", "yellow", "lime",
    "green", "emerald", "teal", "cyan", "sky",
    "blue", "indigo", "violet", "purple", "fuchsia",
    "pink", "rose",
]

# Color values without a shade suffix
SPECIAL_COLORS = ["black", "white", "transparent", "current", "inherit"]

SHADES = ["50", "100", "200", "300", "400", "500", "600", "700", "800", "900", "950"]

# CSS entry points checked for a v4 @theme block when a directory is scanned
CSS_ENTRY_POINTS = ["tailwind.css", "globals.css", "app.css", "global.css", "index.css"]

THEME_BLOCK = re.compile(r"@theme\s*\{([^}]+)\}")

_ARBITRARY_CLASS = re.compile(r"^(\w+)-\[([^\]]+)\]$")
_SHADED_CLASS = re.compile(r"^(\w+)-(\w+)-(\d+)(?:/(\d+))?$")
_SPECIAL_CLASS = re.compile(r"^(\w+)-(\w+)(?:/(\d+))?$")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class TailwindClass:
    """A parsed Tailwind color utility.

    Attributes:
        prefix: Utility prefix (``bg``, ``text``, ...).
        color: Palette name, or None for arbitrary values.
        shade: Shade number as written, or None.
        opacity: Opacity modifier after ``/``, or None.
        arbitrary: Bracketed arbitrary value (``#ff0000``), or None.
    """

    prefix: str
    color: Optional[str] = None
    shade: Optional[str] = None
    opacity: Optional[str] = None
    arbitrary: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Patterns and Parsing
# =============================================================================


def build_tailwind_color_pattern() -> str:
    """Search pattern for shaded, special and arbitrary color utilities."""
    prefixes = "|".join(COLOR_PREFIXES)
    colors = "|".join(COLOR_NAMES)
    specials = "|".join(SPECIAL_COLORS)
    shades = "|".join(SHADES)
    return (
        rf"\b(?:{prefixes})-(?:{colors})-(?:{shades})(?:/\d+)?\b"
        rf"|\b(?:{prefixes})-(?:{specials})(?:/\d+)?\b"
        rf"|\b(?:{prefixes})-\[[^\]]*\]"
    )


def parse_tailwind_color_class(cls: str) -> Optional[TailwindClass]:
    """Split a utility class into its parts; None if it is not a color utility."""
    arbitrary = _ARBITRARY_CLASS.match(cls)
    if arbitrary:
        return TailwindClass(prefix=arbitrary.group(1), arbitrary=arbitrary.group(2))

    shaded = _SHADED_CLASS.match(cls)
    if shaded:
        return TailwindClass(
            prefix=shaded.group(1),
            color=shaded.group(2),
            shade=shaded.group(3),
            opacity=shaded.group(4),
        )

    special = _SPECIAL_CLASS.match(cls)
    if special and special.group(2) in SPECIAL_COLORS:
        return TailwindClass(
            prefix=special.group(1),
            color=special.group(2),
            opacity=special.group(3),
        )

    return None


# =============================================================================
# Tailwind v4
# =============================================================================


def _has_theme_block(path: Path) -> bool:
    try:
        return bool(THEME_BLOCK.search(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Could not read %s: %s", path, e)
        return False


def detect_tailwind_version(search_paths: Iterable[str]) -> int:
    """Return 4 if any scanned CSS entry point has an ``@theme`` block, else 3."""
    for raw in search_paths:
        path = Path(raw).resolve()
        if path.is_file() and path.suffix == ".css":
            if _has_theme_block(path):
                return 4
        elif path.is_dir():
            for entry in CSS_ENTRY_POINTS:
                candidate = path / entry
                if candidate.exists() and _has_theme_block(candidate):
                    return 4
    return 3

"""
Nearest-palette-entry matching.

Two matchers share the same contract: parse the input color, walk the
palette, and return the closest entry by CIE76 Delta-E.

``find_nearest_color`` is a plain strict-minimum search (first entry wins
ties). ``find_nearest_color_semantic`` additionally looks at the CSS/JS
property the color was found under: within a soft window of
``SEMANTIC_TIE_WINDOW`` Delta-E, an entry whose variable name matches the
property's category (``--border-*`` for ``border-color``) beats a
perceptually equal entry that does not.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .model import color_distance, parse_color


# =============================================================================
# Constants
# =============================================================================

# Delta-E window inside which semantic relevance overrides raw distance
SEMANTIC_TIE_WINDOW = 0.5


class PropertyCategory(str, Enum):
    """Semantic domain of the property a color is applied to."""

    BACKGROUND = "background"
    TEXT = "text"
    BORDER = "border"
    SHADOW = "shadow"
    FILL = "fill"


# Property names (CSS and camelCase JS) per category, checked in order
PROPERTY_CATEGORIES: dict[PropertyCategory, tuple[str, ...]] = {
    PropertyCategory.BACKGROUND: ("background", "backgroundColor", "bg"),
    PropertyCategory.TEXT: ("color", "textDecorationColor", "caretColor"),
    PropertyCategory.BORDER: (
        "borderColor", "borderTopColor", "borderRightColor", "borderBottomColor",
        "borderLeftColor", "border-color", "border-top-color", "border-right-color",
        "border-bottom-color", "border-left-color", "outlineColor", "outline-color",
    ),
    PropertyCategory.SHADOW: ("boxShadow", "textShadow", "box-shadow", "text-shadow"),
    PropertyCategory.FILL: ("fill", "stroke"),
}

# Variable-name keywords per category
VAR_NAME_CATEGORIES: dict[PropertyCategory, re.Pattern[str]] = {
    PropertyCategory.BACKGROUND: re.compile(r"bg|background", re.IGNORECASE),
    PropertyCategory.TEXT: re.compile(r"text|font|foreground", re.IGNORECASE),
    PropertyCategory.BORDER: re.compile(r"border|outline|ring|divide", re.IGNORECASE),
    PropertyCategory.SHADOW: re.compile(r"shadow", re.IGNORECASE),
    PropertyCategory.FILL: re.compile(r"fill|stroke", re.IGNORECASE),
}


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class MatchResult:
    """Nearest palette entry for a color.

    Attributes:
        name: Palette key (variable name).
        hex: Palette value as normalized hex.
        distance: Delta-E to the input, rounded to 2 decimals.
    """

    name: str
    hex: str
    distance: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Matching
# =============================================================================


def _round_distance(distance: float) -> float:
    return round(distance * 100) / 100


def find_nearest_color(value: str, palette: Mapping[str, str]) -> Optional[MatchResult]:
    """Find the palette entry closest to ``value``.

    Returns None if the color cannot be parsed or no palette entry is usable.
    """
    rgb = parse_color(value)
    if rgb is None:
        return None

    nearest: Optional[MatchResult] = None
    min_distance = math.inf

    for name, hex_value in palette.items():
        palette_rgb = parse_color(hex_value)
        if palette_rgb is None:
            continue

        distance = color_distance(rgb, palette_rgb)
        if distance < min_distance:
            min_distance = distance
            nearest = MatchResult(name, hex_value, _round_distance(distance))

    return nearest


def get_property_category(css_property: Optional[str]) -> Optional[PropertyCategory]:
    """Map a CSS/JS property name to its semantic category.

    Exact (case-insensitive) name matches are tried across all categories
    first, then substring containment in category order. Without the exact
    pass ``border-color`` would fall into TEXT because it contains ``color``.
    """
    if not css_property:
        return None

    prop = css_property.lower()
    for category, names in PROPERTY_CATEGORIES.items():
        if any(prop == name.lower() for name in names):
            return category
    for category, names in PROPERTY_CATEGORIES.items():
        if any(name.lower() in prop for name in names):
            return category
    return None


def semantic_score(var_name: str, category: Optional[PropertyCategory]) -> int:
    """1 if the variable name carries the category's keywords, else 0."""
    if category is None:
        return 0
    return 1 if VAR_NAME_CATEGORIES[category].search(var_name) else 0


def find_nearest_color_semantic(
    value: str,
    palette: Mapping[str, str],
    css_property: Optional[str] = None,
    tie_window: float = SEMANTIC_TIE_WINDOW,
) -> Optional[MatchResult]:
    """Find the nearest palette entry, preferring names that fit the property.

    A candidate replaces the current best when it is more than ``tie_window``
    closer, or when it is within ``tie_window`` and has a higher semantic
    score.
    """
    rgb = parse_color(value)
    if rgb is None:
        return None

    category = get_property_category(css_property)

    nearest: Optional[MatchResult] = None
    min_distance = math.inf
    best_score = 0

    for name, hex_value in palette.items():
        palette_rgb = parse_color(hex_value)
        if palette_rgb is None:
            continue

        distance = color_distance(rgb, palette_rgb)
        score = semantic_score(name, category)

        is_better = distance < min_distance - tie_window or (
            abs(distance - min_distance) <= tie_window and score > best_score
        )
        if nearest is None or is_better:
            min_distance = distance
            best_score = score
            nearest = MatchResult(name, hex_value, _round_distance(distance))

    return nearest

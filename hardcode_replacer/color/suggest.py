"""
Alpha extraction and replacement suggestions.

Given a hardcoded color literal this module answers three questions for the
reporting layer: does it carry a non-opaque alpha channel, what replacement
expression should be proposed when a palette variable matches, and what
should a new variable be called when nothing matches.
"""

from __future__ import annotations

import re
from typing import Optional

from .model import RGB, parse_color, rgb_to_lab, round_half_up


FALLBACK_VARIABLE_NAME = "--color-custom"

# Pairwise channel difference below which a color counts as grayscale
_GRAY_TOLERANCE = 15

_HEX_8 = re.compile(r"^#[0-9a-f]{8}$")
_HEX_4 = re.compile(r"^#[0-9a-f]{4}$")
_MODERN_ALPHA = re.compile(r"/\s*([\d.]+)(%?)\s*\)")
_LEGACY_ALPHA = re.compile(
    r"^(rgba|hsla)\(\s*[\d.]+[a-z%]*\s*,\s*[\d.]+%?\s*,\s*[\d.]+%?\s*,\s*([\d.]+)(%?)\s*\)"
)

# Upper hue boundaries (exclusive), first match wins; anything >= 345 wraps to red
_HUE_BUCKETS: tuple[tuple[float, str], ...] = (
    (15, "red"),
    (45, "orange"),
    (70, "yellow"),
    (150, "green"),
    (190, "teal"),
    (250, "blue"),
    (290, "purple"),
    (345, "pink"),
)

# (upper L bound exclusive, suffix)
_SHADE_BUCKETS: tuple[tuple[float, str], ...] = (
    (20, "-dark"),
    (40, "-700"),
    (60, "-500"),
    (80, "-300"),
)

# Property keyword -> variable prefix, checked in order
_PROPERTY_PREFIXES: tuple[tuple[str, str], ...] = (
    ("bg", "bg"),
    ("background", "bg"),
    ("border", "border"),
    ("text", "text"),
    ("shadow", "shadow"),
    ("outline", "outline"),
)

_COLOR_FUNCTIONS = "rgba?|hsla?|oklch|oklab|lch|lab|hwb|color"
_CSS_PROPERTY = re.compile(
    rf"([\w-]+)\s*:\s*(?:#|(?:{_COLOR_FUNCTIONS})\()", re.IGNORECASE
)
_JS_PROPERTY = re.compile(r"(\w+)\s*:\s*['\"`]")


# =============================================================================
# Alpha
# =============================================================================


def _opacity(value: float) -> Optional[float]:
    return value if value < 1 else None


def _parse_alpha(raw: str, percent: str) -> Optional[float]:
    try:
        alpha = float(raw)
    except ValueError:
        return None
    if percent:
        alpha /= 100
    return _opacity(alpha)


def extract_alpha(value: Optional[str]) -> Optional[float]:
    """Return the alpha channel of a literal, or None when opaque/absent."""
    if not value or not isinstance(value, str):
        return None

    text = value.strip().lower()

    if _HEX_8.match(text):
        return _opacity(int(text[7:9], 16) / 255)
    if _HEX_4.match(text):
        return _opacity(int(text[4] * 2, 16) / 255)

    if not text.startswith(("rgb", "hsl")):
        return None

    modern = _MODERN_ALPHA.search(text)
    if modern:
        return _parse_alpha(modern.group(1), modern.group(2))

    legacy = _LEGACY_ALPHA.match(text)
    if legacy:
        return _parse_alpha(legacy.group(2), legacy.group(3))

    return None


def color_mix_suggestion(var_name: str, alpha: float) -> str:
    """Build a ``color-mix()`` that applies ``alpha`` to a variable."""
    percent = round_half_up(alpha * 100)
    return f"color-mix(in srgb, var({var_name}) {percent}%, transparent)"


# =============================================================================
# Variable Name Suggestions
# =============================================================================


def hue_name(rgb: RGB) -> str:
    """Bucket a color into a coarse hue family name."""
    r, g, b = rgb
    if abs(r - g) < _GRAY_TOLERANCE and abs(g - b) < _GRAY_TOLERANCE and abs(r - b) < _GRAY_TOLERANCE:
        luminance = (r + g + b) / 3
        if luminance < 30:
            return "black"
        if luminance > 225:
            return "white"
        return "gray"

    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low

    if high == r:
        hue = 60 * (((g - b) / delta) % 6)
    elif high == g:
        hue = 60 * ((b - r) / delta + 2)
    else:
        hue = 60 * ((r - g) / delta + 4)
    hue %= 360

    for boundary, name in _HUE_BUCKETS:
        if hue < boundary:
            return name
    return "red"


def shade_suffix(rgb: RGB) -> str:
    """Map Lab lightness to a shade suffix."""
    lightness = rgb_to_lab(*rgb).l
    for boundary, suffix in _SHADE_BUCKETS:
        if lightness < boundary:
            return suffix
    return "-light"


def _property_prefix(css_property: Optional[str]) -> str:
    if not css_property:
        return "color"
    prop = css_property.lower()
    for keyword, prefix in _PROPERTY_PREFIXES:
        if keyword in prop:
            return prefix
    return "color"


def suggest_variable_name(value: str, css_property: Optional[str] = None) -> str:
    """Suggest a token name like ``--bg-blue-500`` for an unmatched color."""
    rgb = parse_color(value)
    if rgb is None:
        return FALLBACK_VARIABLE_NAME

    prefix = _property_prefix(css_property)
    return f"--{prefix}-{hue_name(rgb)}{shade_suffix(rgb)}"


# =============================================================================
# Property Extraction
# =============================================================================


def extract_css_property(line_text: Optional[str]) -> Optional[str]:
    """Find the property a color on this line is assigned to.

    Tries a CSS declaration (``border-color: #ccc``) first, then a JS object
    key (``backgroundColor: '#fff'``).
    """
    if not line_text:
        return None

    css = _CSS_PROPERTY.search(line_text)
    if css:
        return css.group(1)

    js = _JS_PROPERTY.search(line_text)
    if js:
        return js.group(1)

    return None

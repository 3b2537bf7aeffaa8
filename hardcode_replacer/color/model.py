"""
Color parsing, normalization and perceptual distance.

Parses any supported color literal (hex, rgb/rgba, hsl/hsla, CSS named
colors) into an RGB triple, converts RGB to CIE 1976 Lab (D65) and measures
CIE76 Delta-E between two colors. Modern color functions (oklch, oklab, lch,
lab, hwb, color()) are classified but not converted.

Every function here fails soft: unparseable input yields ``None`` (or
``math.inf`` for distances), never an exception.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import NamedTuple, Optional, Union

from .named import NAMED_COLOR_SET, NAMED_COLORS


# =============================================================================
# Data Structures
# =============================================================================


class RGB(NamedTuple):
    """Integer sRGB triple, each channel in [0, 255]."""

    r: int
    g: int
    b: int


class Lab(NamedTuple):
    """CIE 1976 L*a*b* coordinates (D65 white point)."""

    l: float
    a: float
    b: float


class ColorKind(str, Enum):
    """Syntactic kind of a color literal."""

    HEX = "hex"
    RGB = "rgb"
    RGBA = "rgba"
    HSL = "hsl"
    HSLA = "hsla"
    OKLCH = "oklch"
    OKLAB = "oklab"
    LCH = "lch"
    LAB = "lab"
    HWB = "hwb"
    COLOR_FN = "color()"
    NAMED = "named"
    UNKNOWN = "unknown"


ColorInput = Union[str, RGB, None]


# =============================================================================
# Constants
# =============================================================================

# sRGB -> XYZ matrix, D65
_SRGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

# D65 reference white
_WHITE_X, _WHITE_Y, _WHITE_Z = 0.95047, 1.0, 1.08883

_NUM = r"([\d.]+)"

_RGB_MODERN = re.compile(
    rf"rgba?\(\s*{_NUM}(%?)\s+{_NUM}(%?)\s+{_NUM}(%?)\s*(?:/\s*{_NUM}(%?)\s*)?\)?"
)
_RGB_LEGACY = re.compile(
    rf"rgba?\(\s*{_NUM}(%?)\s*,\s*{_NUM}(%?)\s*,\s*{_NUM}(%?)\s*(?:,\s*{_NUM}(%?)\s*)?\)?"
)

_HUE_UNIT = r"(?:deg|rad|grad|turn)?"

_HSL_MODERN = re.compile(
    rf"hsla?\(\s*{_NUM}{_HUE_UNIT}\s+{_NUM}%?\s+{_NUM}%?\s*(?:/\s*{_NUM}(%?)\s*)?\)?"
)
_HSL_LEGACY = re.compile(
    rf"hsla?\(\s*{_NUM}{_HUE_UNIT}\s*,\s*{_NUM}%?\s*,\s*{_NUM}%?\s*(?:,\s*{_NUM}(%?)\s*)?\)?"
)

# Prefix -> kind, checked in order (longer prefixes first where they overlap)
_KIND_PREFIXES: tuple[tuple[str, ColorKind], ...] = (
    ("#", ColorKind.HEX),
    ("rgba", ColorKind.RGBA),
    ("rgb", ColorKind.RGB),
    ("hsla", ColorKind.HSLA),
    ("hsl", ColorKind.HSL),
    ("oklch", ColorKind.OKLCH),
    ("oklab", ColorKind.OKLAB),
    ("lch", ColorKind.LCH),
    ("lab", ColorKind.LAB),
    ("hwb", ColorKind.HWB),
    ("color(", ColorKind.COLOR_FN),
)


# =============================================================================
# Helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _to_byte(value: float) -> int:
    """Round and clamp a channel to 0-255."""
    return max(0, min(255, round_half_up(value)))


def _channel(raw: str, percent: str) -> float:
    value = float(raw)
    if percent:
        value = round_half_up(value * 2.55)
    return value


# =============================================================================
# Parsing Functions
# =============================================================================


def hex_to_rgb(value: str) -> Optional[RGB]:
    """Parse ``#rgb``, ``#rgba``, ``#rrggbb`` or ``#rrggbbaa``.

    Alpha digits are ignored; use ``extract_alpha`` to recover them.
    """
    digits = value.strip().replace("#", "")
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)

    try:
        r = int(digits[0:2], 16)
        g = int(digits[2:4], 16)
        b = int(digits[4:6], 16)
    except ValueError:
        return None
    return RGB(r, g, b)


def rgb_string_to_rgb(value: str) -> Optional[RGB]:
    """Parse ``rgb()``/``rgba()`` in modern or legacy comma syntax."""
    match = _RGB_MODERN.search(value) or _RGB_LEGACY.search(value)
    if not match:
        return None

    try:
        r = _channel(match.group(1), match.group(2))
        g = _channel(match.group(3), match.group(4))
        b = _channel(match.group(5), match.group(6))
    except ValueError:
        return None
    return RGB(_to_byte(r), _to_byte(g), _to_byte(b))


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_string_to_rgb(value: str) -> Optional[RGB]:
    """Parse ``hsl()``/``hsla()`` in modern or legacy comma syntax.

    Hue unit suffixes are accepted but the number is always read as degrees.
    """
    match = _HSL_MODERN.search(value) or _HSL_LEGACY.search(value)
    if not match:
        return None

    try:
        h = (float(match.group(1)) % 360) / 360
        s = float(match.group(2)) / 100
        l = float(match.group(3)) / 100
    except ValueError:
        return None

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)

    return RGB(_to_byte(r * 255), _to_byte(g * 255), _to_byte(b * 255))


def parse_color(value: ColorInput) -> Optional[RGB]:
    """Parse any supported color literal to RGB.

    Returns None for empty input, unsupported syntax (oklch, lab, ...) or
    malformed values.
    """
    if isinstance(value, RGB):
        return value
    if not value or not isinstance(value, str):
        return None

    text = value.strip().lower()
    if text in NAMED_COLOR_SET:
        return hex_to_rgb(NAMED_COLORS[text])
    if text.startswith("#"):
        return hex_to_rgb(text)
    if text.startswith("rgb"):
        return rgb_string_to_rgb(text)
    if text.startswith("hsl"):
        return hsl_string_to_rgb(text)
    return None


def classify_color(value: str) -> ColorKind:
    """Return the syntactic kind of a color literal.

    Purely prefix based: ``oklch(...)`` is OKLCH even though it cannot be
    converted to RGB.
    """
    text = (value or "").strip().lower()
    for prefix, kind in _KIND_PREFIXES:
        if text.startswith(prefix):
            return kind
    if text in NAMED_COLOR_SET:
        return ColorKind.NAMED
    return ColorKind.UNKNOWN


# =============================================================================
# Conversion Functions
# =============================================================================


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format channels as lowercase ``#rrggbb``, clamping to [0, 255]."""
    return "#" + "".join(
        f"{max(0, min(255, round_half_up(c))):02x}" for c in (r, g, b)
    )


def normalize_to_hex(value: ColorInput) -> Optional[str]:
    """Normalize any parseable color to canonical ``#rrggbb``."""
    rgb = parse_color(value)
    if rgb is None:
        return None
    return rgb_to_hex(*rgb)


def _linearize(channel: float) -> float:
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _lab_f(t: float) -> float:
    if t > 0.008856:
        return t ** (1 / 3)
    return 7.787 * t + 16 / 116


def rgb_to_lab(r: float, g: float, b: float) -> Lab:
    """Convert sRGB channels (0-255) to CIE Lab under D65."""
    linear = [_linearize(c / 255) for c in (r, g, b)]
    x, y, z = (
        sum(coef * c for coef, c in zip(row, linear)) for row in _SRGB_TO_XYZ
    )

    fx = _lab_f(x / _WHITE_X)
    fy = _lab_f(y / _WHITE_Y)
    fz = _lab_f(z / _WHITE_Z)

    return Lab(
        l=116 * fy - 16,
        a=500 * (fx - fy),
        b=200 * (fy - fz),
    )


def color_distance(color1: ColorInput, color2: ColorInput) -> float:
    """CIE76 Delta-E between two colors.

    0 = identical, <1 imperceptible, 1-2 close, 2-10 noticeable, >10 different.
    Returns ``math.inf`` when either side cannot be parsed.
    """
    rgb1 = parse_color(color1)
    rgb2 = parse_color(color2)
    if rgb1 is None or rgb2 is None:
        return math.inf

    lab1 = rgb_to_lab(*rgb1)
    lab2 = rgb_to_lab(*rgb2)
    return math.sqrt(
        (lab2.l - lab1.l) ** 2 + (lab2.a - lab1.a) ** 2 + (lab2.b - lab1.b) ** 2
    )

"""
Search patterns for color literals in source files.

The same pattern strings are handed to ripgrep and to the Python fallback
scanner, so they stick to the regex subset both engines understand.
"""

from __future__ import annotations

# Hex colors: #fff, #ffff, #ffffff, #ffffffff
HEX_PATTERN = r"#(?:[0-9a-fA-F]{3,4}){1,2}\b"

# \b keeps JS helpers like hexToRgba(...) out
RGB_PATTERN = r"\brgba?\([^)]+\)"
HSL_PATTERN = r"\bhsla?\([^)]+\)"

OKLCH_PATTERN = r"\boklch\([^)]+\)"
OKLAB_PATTERN = r"\boklab\([^)]+\)"
LCH_PATTERN = r"\blch\([^)]+\)"
LAB_PATTERN = r"\blab\([^)]+\)"
HWB_PATTERN = r"\bhwb\([^)]+\)"

# color() needs a colorspace keyword, otherwise every JS color(...) call matches
COLOR_FN_PATTERN = (
    r"\bcolor\(\s*(?:srgb|srgb-linear|display-p3|a98-rgb|prophoto-rgb|rec2020"
    r"|xyz|xyz-d50|xyz-d65)\b[^)]*\)"
)

# CSS properties that take color values (named color detection)
CSS_COLOR_PROPERTIES = [
    "color", "background-color", "background", "border-color",
    "border-top-color", "border-right-color", "border-bottom-color", "border-left-color",
    "border", "outline-color", "outline", "text-decoration-color",
    "fill", "stroke", "stop-color", "flood-color", "lighting-color",
    "column-rule-color", "caret-color", "accent-color",
    "box-shadow", "text-shadow", "scrollbar-color",
]

# camelCase equivalents used in JSX inline styles
JS_COLOR_PROPERTIES = [
    "color", "backgroundColor", "background", "borderColor",
    "borderTopColor", "borderRightColor", "borderBottomColor", "borderLeftColor",
    "border", "outlineColor", "outline", "textDecorationColor",
    "fill", "stroke", "boxShadow", "textShadow",
    "caretColor", "accentColor", "columnRuleColor",
]

# Keywords that look like named colors in property position but are not colors
NON_COLOR_KEYWORDS = frozenset({
    "inherit", "initial", "unset", "revert", "currentcolor", "transparent", "none", "auto",
})

DEFAULT_FILE_TYPES = [
    "html", "htm", "css", "scss", "sass", "less", "styl",
    "jsx", "tsx", "js", "ts", "vue", "svelte", "astro",
]


def build_color_search_pattern() -> str:
    """Alternation of every color literal syntax."""
    return "|".join([
        HEX_PATTERN,
        RGB_PATTERN,
        HSL_PATTERN,
        OKLCH_PATTERN,
        OKLAB_PATTERN,
        LCH_PATTERN,
        LAB_PATTERN,
        HWB_PATTERN,
        COLOR_FN_PATTERN,
    ])


def build_named_color_patterns() -> list[str]:
    """Patterns for ``color: red`` (CSS) and ``color: 'red'`` (JS) contexts."""
    css_props = "|".join(CSS_COLOR_PROPERTIES)
    js_props = "|".join(JS_COLOR_PROPERTIES)
    return [
        rf"\b(?:{css_props})\s*:\s*[a-zA-Z]+",
        rf"\b(?:{js_props})\s*:\s*['\"][a-zA-Z]+['\"]",
    ]

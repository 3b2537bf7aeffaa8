"""
Design-token palette loading.

Builds a ``{name: "#rrggbb"}`` palette from a variables file:

- CSS/SCSS/Sass/Less: ``--name: value`` custom properties (Tailwind v4
  ``@theme`` blocks are plain custom properties and are covered too)
- JSON and YAML: nested objects flattened to dotted keys
- JS/TS: loose ``key: 'value'`` pairs

Entries whose value cannot be normalized to hex are dropped.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Mapping, Union

import yaml

from .color.model import normalize_to_hex
from .utils import HardcodeReplacerError

log = logging.getLogger(__name__)

Palette = dict[str, str]


class VariablesFileError(HardcodeReplacerError):
    """The variables file is missing or unreadable."""


# =============================================================================
# Constants
# =============================================================================

CSS_EXTENSIONS = frozenset({".css", ".scss", ".sass", ".less"})
JSON_EXTENSIONS = frozenset({".json"})
YAML_EXTENSIONS = frozenset({".yaml", ".yml"})
JS_EXTENSIONS = frozenset({".js", ".ts", ".mjs", ".cjs"})

_CSS_VARIABLE = re.compile(
    r"--([\w-]+)\s*:\s*(#[0-9a-fA-F]{3,8}|rgba?\([^)]+\)|hsla?\([^)]+\)|[a-zA-Z]+)\s*;?"
)
_JS_PAIR = re.compile(r"""['"]?([\w-]+)['"]?\s*:\s*['"]([^'"]+)['"]""")


# =============================================================================
# Parsers
# =============================================================================


def parse_css_colors(content: str) -> Palette:
    """Collect color-valued custom properties, keyed with their ``--`` prefix."""
    palette: Palette = {}
    for match in _CSS_VARIABLE.finditer(content):
        hex_value = normalize_to_hex(match.group(2).strip())
        if hex_value:
            palette[f"--{match.group(1)}"] = hex_value
    return palette


def flatten_colors(data: Mapping[str, Any], prefix: str = "") -> Palette:
    """Flatten nested mappings into dotted keys, keeping color strings only."""
    palette: Palette = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, str):
            hex_value = normalize_to_hex(value)
            if hex_value:
                palette[full_key] = hex_value
        elif isinstance(value, Mapping):
            palette.update(flatten_colors(value, full_key))
    return palette


def parse_json_colors(content: str) -> Palette:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return {}
    return flatten_colors(data) if isinstance(data, dict) else {}


def parse_yaml_colors(content: str) -> Palette:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return {}
    return flatten_colors(data) if isinstance(data, dict) else {}


def parse_js_colors(content: str) -> Palette:
    """Loosely match ``key: 'value'`` pairs in JS/TS source."""
    palette: Palette = {}
    for match in _JS_PAIR.finditer(content):
        hex_value = normalize_to_hex(match.group(2).strip())
        if hex_value:
            palette[match.group(1)] = hex_value
    return palette


_PARSERS_BY_EXTENSION: list[tuple[frozenset[str], Callable[[str], Palette]]] = [
    (JSON_EXTENSIONS, parse_json_colors),
    (YAML_EXTENSIONS, parse_yaml_colors),
    (CSS_EXTENSIONS, parse_css_colors),
    (JS_EXTENSIONS, parse_js_colors),
]

# Tried in order for unknown extensions
_FALLBACK_PARSERS: list[Callable[[str], Palette]] = [
    parse_css_colors,
    parse_json_colors,
    parse_js_colors,
]


def parse_variables(content: str, extension: str = "") -> Palette:
    """Parse variables content, choosing the parser by file extension."""
    ext = extension.lower()
    for extensions, parser in _PARSERS_BY_EXTENSION:
        if ext in extensions:
            return parser(content)

    for parser in _FALLBACK_PARSERS:
        palette = parser(content)
        if palette:
            return palette
    return {}


def load_palette(path: Union[str, Path]) -> Palette:
    """Load a palette from a variables file.

    Raises:
        VariablesFileError: The file does not exist or cannot be read.
    """
    resolved = Path(path).resolve()
    if not resolved.is_file():
        raise VariablesFileError(f"File not found: {resolved}")

    try:
        content = resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VariablesFileError(f"Cannot read {resolved}: {e}") from e

    palette = parse_variables(content, resolved.suffix)
    log.debug("Loaded %d color variables from %s", len(palette), resolved)
    return palette

"""
Context classification for color occurrences.

Decides whether a hardcoded color found in source text can be replaced by a
design-token reference (``actionable``) or sits somewhere a ``var()`` cannot
go: a CSS variable definition, a theme file, a canvas/WebGL consumer, a
lookup table, generated markup, browser meta tags, or a deliberate
black/white overlay.

Classification is a fixed-priority cascade:

1. CSS custom-property declaration on the line.
2. File-level signals (imports, path, content), computed once per file and
   memoized in an ``AnalysisCache`` owned by the calling command.
3. Black/white with alpha (``effect``).
4. Line-level heuristics in ``LINE_RULES``, first match wins.
5. Everything else is actionable.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Union

from .color.model import RGB, parse_color
from .color.suggest import extract_alpha
from .search import Occurrence

log = logging.getLogger(__name__)


# =============================================================================
# Context Tags
# =============================================================================


class ContextTag(str, Enum):
    """Where a color occurrence lives, and therefore whether it can be rewritten."""

    ACTIONABLE = "actionable"
    CSS_DEFINITION = "css-definition"
    THEME_DEFINITION = "theme-definition"
    CANVAS = "canvas"
    MAPPING = "mapping"
    GENERATED = "generated"
    META = "meta"
    EFFECT = "effect"


CONTEXT_LABELS: dict[ContextTag, str] = {
    ContextTag.ACTIONABLE: "ACTIONABLE",
    ContextTag.CSS_DEFINITION: "CSS VAR DEFINITION",
    ContextTag.THEME_DEFINITION: "THEME DEFINITION",
    ContextTag.CANVAS: "CANVAS/WEBGL",
    ContextTag.MAPPING: "MAPPING/LOOKUP",
    ContextTag.GENERATED: "GENERATED CODE",
    ContextTag.META: "META/MANIFEST",
    ContextTag.EFFECT: "EFFECT (black/white alpha)",
}


def is_actionable(tag: Union[ContextTag, str, None]) -> bool:
    """True only for the ``actionable`` tag."""
    return tag == ContextTag.ACTIONABLE


def context_label(tag: Union[ContextTag, str]) -> str:
    """Display label for a tag; unknown values come back unchanged."""
    try:
        return CONTEXT_LABELS[ContextTag(tag)]
    except ValueError:
        return str(tag)


# =============================================================================
# File-Level Signals
# =============================================================================

# Only the first N lines are scanned for imports
IMPORT_SCAN_LINES = 100

# Canvas, WebGL, charting and image libraries (values they receive cannot be var())
CANVAS_IMPORTS = [
    "three", "@react-three", "react-force-graph", "sigma", "@sigma",
    "graphology", "pixi", "pixijs", "@pixi", "d3", "canvas",
    "fabric", "konva", "react-konva", "paper", "p5", "chart.js",
    "recharts", "visx", "nivo", "sharp", "jimp", "node-canvas",
]

DEFINITION_FILE_PATTERNS = [
    re.compile(r"\.theme\.[jt]sx?$"),
    re.compile(r"[/\\]theme\.[jt]sx?$"),
    re.compile(r"[/\\]themes?[/\\].*\.[jt]sx?$"),
    re.compile(r"[/\\]tokens?\.[jt]sx?$"),
    re.compile(r"[/\\]palette\.[jt]sx?$"),
    re.compile(r"[/\\]colors?\.[jt]sx?$"),
    re.compile(r"design-tokens"),
    re.compile(r"tailwind\.config"),
]

MAPPING_FILE_PATTERNS = [
    re.compile(r"[Ee]ngine\.[jt]sx?$"),
    re.compile(r"[Mm]apper\.[jt]sx?$"),
    re.compile(r"[Cc]onverter\.[jt]sx?$"),
    re.compile(r"[Mm]apping\.[jt]sx?$"),
    re.compile(r"MCP[Ss]ervice\.[jt]sx?$"),
]

THEME_BUILDER_PATTERNS = [
    re.compile(r"createTheme\s*\("),
    re.compile(r"createMuiTheme\s*\("),
    re.compile(r"extendTheme\s*\("),
]

CSS_EXTENSIONS = frozenset({".css", ".scss", ".sass", ".less"})
SCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})

_OG_IMAGE_IMPORT = re.compile(r"(?:from|require).*(?:satori|@vercel/og|ImageResponse)")
_CANVAS_IMPORT_PATTERNS = [
    re.compile(rf"(?:from|require)\s*\(?\s*['\"]{re.escape(lib)}", re.IGNORECASE)
    for lib in CANVAS_IMPORTS
]


@dataclass
class FileInfo:
    """Static signals about one source file, all False when unreadable."""

    is_canvas_consumer: bool = False
    is_definition_file: bool = False
    is_mapping_file: bool = False
    is_theme_builder: bool = False
    has_css_var_usage: bool = False
    is_css_file: bool = False


def _read_text(file_path: str) -> Optional[str]:
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Cannot read %s: %s", file_path, e)
        return None


def analyze_file(file_path: str) -> FileInfo:
    """Compute the ``FileInfo`` for a path. Content is only read for JS/TS files."""
    info = FileInfo()
    ext = Path(file_path).suffix.lower()
    info.is_css_file = ext in CSS_EXTENSIONS
    info.is_definition_file = any(p.search(file_path) for p in DEFINITION_FILE_PATTERNS)
    info.is_mapping_file = any(p.search(file_path) for p in MAPPING_FILE_PATTERNS)

    if ext not in SCRIPT_EXTENSIONS:
        return info

    content = _read_text(file_path)
    if content is None:
        return info

    head = "\n".join(content.split("\n")[:IMPORT_SCAN_LINES])
    info.is_canvas_consumer = any(p.search(head) for p in _CANVAS_IMPORT_PATTERNS)
    info.is_theme_builder = any(p.search(content) for p in THEME_BUILDER_PATTERNS)
    info.has_css_var_usage = "getCssVar" in content or "getComputedStyle" in content
    if _OG_IMAGE_IMPORT.search(head):
        info.is_canvas_consumer = True

    return info


class AnalysisCache:
    """Per-invocation memo of ``FileInfo`` records and file lines.

    Each top-level command constructs a fresh cache, so nothing leaks between
    runs. ``clear()`` resets it explicitly.
    """

    def __init__(self) -> None:
        self._info: dict[str, FileInfo] = {}
        self._lines: dict[str, list[str]] = {}

    def file_info(self, file_path: str) -> FileInfo:
        info = self._info.get(file_path)
        if info is None:
            info = analyze_file(file_path)
            self._info[file_path] = info
        return info

    def lines(self, file_path: str) -> list[str]:
        lines = self._lines.get(file_path)
        if lines is None:
            content = _read_text(file_path)
            lines = content.split("\n") if content is not None else []
            self._lines[file_path] = lines
        return lines

    def clear(self) -> None:
        self._info.clear()
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._info)


# =============================================================================
# Line-Level Rules
# =============================================================================


class LineRule(NamedTuple):
    """A named predicate over the trimmed line text and the tag it assigns."""

    name: str
    predicate: Callable[[str], bool]
    tag: ContextTag


_CSS_VAR_DECLARATION = re.compile(r"^\s*--[\w-]+\s*:")
_META_VALUE = re.compile(r"""(?:content|color)\s*[:=]\s*["']#[0-9a-fA-F]""")
_META_KEYWORD = re.compile(r"theme-color|msapplication|mask-icon|safari-pinned")
_TEMPLATE_MARKUP = re.compile(r"`[\s\S]*<[\s\S]*>")
_QUOTED_PROPERTY_KEY = re.compile(r"""^\s*['"][\w-]+\s*:.*#[0-9a-fA-F]""")
_QUOTED_VALUE = re.compile(r"""['"].*['"]""")
_HEX_KEY = re.compile(r"""^\s*['"]#[0-9a-fA-F]{3,8}['"]""")
_CSS_STRING_KEY = re.compile(r"""^\s*css\s*:\s*['"]""")
_RUNTIME_READ = re.compile(r"getCssVar|getComputedStyle|getPropertyValue")
_OR_FALLBACK = re.compile(r"""\|\|\s*['"]#""")


def _is_meta_tag(text: str) -> bool:
    return bool(_META_VALUE.search(text) and _META_KEYWORD.search(text))


def _is_generated_markup(text: str) -> bool:
    return bool(_TEMPLATE_MARKUP.search(text)) and "${" in text


def _is_quoted_property_key(text: str) -> bool:
    if not _QUOTED_PROPERTY_KEY.search(text):
        return False
    return bool(_QUOTED_VALUE.search(text.split(":")[-1]))


LINE_RULES: list[LineRule] = [
    LineRule("meta-tag", _is_meta_tag, ContextTag.META),
    LineRule("template-markup", _is_generated_markup, ContextTag.GENERATED),
    LineRule("quoted-property-key", _is_quoted_property_key, ContextTag.MAPPING),
    LineRule("hex-object-key", lambda text: bool(_HEX_KEY.search(text)), ContextTag.MAPPING),
    LineRule("css-string-key", lambda text: bool(_CSS_STRING_KEY.search(text)), ContextTag.MAPPING),
    LineRule("runtime-css-read", lambda text: bool(_RUNTIME_READ.search(text)), ContextTag.CANVAS),
    LineRule("or-fallback", lambda text: bool(_OR_FALLBACK.search(text)), ContextTag.CANVAS),
]

_BLACK = RGB(0, 0, 0)
_WHITE = RGB(255, 255, 255)


def is_effect_color(value: Optional[str]) -> bool:
    """Pure black or white with a non-opaque alpha channel."""
    if not value:
        return False
    rgb = parse_color(value)
    if rgb not in (_BLACK, _WHITE):
        return False
    return extract_alpha(value) is not None


# =============================================================================
# Classification
# =============================================================================


def _classify_file(info: FileInfo, text: str) -> Optional[ContextTag]:
    if info.is_canvas_consumer:
        return ContextTag.CANVAS
    # A non-stylesheet that reads CSS variables at runtime bridges them into
    # canvas/JS; its literals are fallbacks
    if info.has_css_var_usage and not info.is_css_file:
        return ContextTag.CANVAS
    if info.is_theme_builder:
        return ContextTag.THEME_DEFINITION
    if info.is_definition_file:
        return ContextTag.ACTIONABLE if "var(--" in text else ContextTag.THEME_DEFINITION
    if info.is_mapping_file:
        return ContextTag.MAPPING
    return None


def classify_context(
    occurrence: Occurrence,
    cache: Optional[AnalysisCache] = None,
) -> ContextTag:
    """Assign a context tag to a color occurrence.

    Args:
        occurrence: The search hit; ``file``, ``text`` and ``match`` are used.
        cache: File analysis memo. A throwaway cache is used when omitted.

    Returns:
        The first matching tag of the cascade, ``ACTIONABLE`` if none match.
    """
    text = (occurrence.text or "").strip()

    if _CSS_VAR_DECLARATION.search(text):
        return ContextTag.CSS_DEFINITION

    if cache is None:
        cache = AnalysisCache()
    file_tag = _classify_file(cache.file_info(occurrence.file), text)
    if file_tag is not None:
        return file_tag

    if is_effect_color(occurrence.match):
        return ContextTag.EFFECT

    for rule in LINE_RULES:
        if rule.predicate(text):
            return rule.tag

    return ContextTag.ACTIONABLE


# =============================================================================
# Comments
# =============================================================================


def _ends_inside_comment(line: str, open_comment: bool) -> bool:
    pos = 0
    while True:
        if open_comment:
            end = line.find("*/", pos)
            if end == -1:
                return True
            open_comment = False
            pos = end + 2
        else:
            start = line.find("/*", pos)
            if start == -1:
                return False
            open_comment = True
            pos = start + 2


def is_in_block_comment(file_path: str, line: int, cache: AnalysisCache) -> bool:
    """True if 1-based ``line`` starts inside a ``/* ... */`` opened earlier."""
    lines = cache.lines(file_path)
    open_comment = False
    for text in lines[: max(line - 1, 0)]:
        open_comment = _ends_inside_comment(text, open_comment)
    return open_comment

"""
``colors`` command: find hardcoded color literals.

Searches for hex and functional color syntaxes (and, unless disabled, named
colors in property position), classifies every hit by context and reports
actionable ones per file with a collapsed summary of the rest.
"""

from __future__ import annotations

import argparse
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..color.model import ColorKind, classify_color, normalize_to_hex
from ..color.named import NAMED_COLORS, NAMED_COLOR_SET
from ..color.patterns import NON_COLOR_KEYWORDS, build_color_search_pattern, build_named_color_patterns
from ..context import AnalysisCache, ContextTag, classify_context, context_label, is_actionable
from ..search import Occurrence, SearchOptions, search
from ..utils import count_by, group_by, log
from .common import begin_output, dedupe, group_by_file, is_comment_line, print_json, search_options, sort_by_location

logger = logging.getLogger(__name__)

# ``foo: string`` style annotations on lines without string literals
_TYPE_ANNOTATION = re.compile(r":\s*(string|number|boolean|void|any)\b")
_NAMED_VALUE = re.compile(r""":\s*['"]?([a-zA-Z]+)['"]?\s*[;,}]?\s*$""")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class ColorResult:
    """A classified color literal."""

    file: str
    line: int
    column: int
    value: str
    kind: ColorKind
    hex: Optional[str]
    line_text: str
    context: ContextTag

    @property
    def actionable(self) -> bool:
        return is_actionable(self.context)

    @property
    def context_label(self) -> str:
        return context_label(self.context)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "value": self.value,
            "type": self.kind.value,
            "hex": self.hex,
            "lineText": self.line_text,
            "context": self.context.value,
            "contextLabel": self.context_label,
            "actionable": self.actionable,
        }


# =============================================================================
# Scanning
# =============================================================================


def _is_type_annotation(text: str) -> bool:
    return bool(_TYPE_ANNOTATION.search(text)) and "'" not in text and '"' not in text


def literal_results(
    occurrences: Sequence[Occurrence],
    cache: AnalysisCache,
) -> list[ColorResult]:
    """Classify raw literal hits, skipping comments, interpolations and annotations."""
    results: list[ColorResult] = []
    for occ in occurrences:
        value = occ.match.strip()
        kind = classify_color(value)
        if kind == ColorKind.UNKNOWN:
            continue
        if is_comment_line(occ.text):
            continue
        if "${" in value:
            continue
        if _is_type_annotation(occ.text):
            logger.debug("Skipping type annotation at %s:%d", occ.file, occ.line)
            continue

        results.append(
            ColorResult(
                file=occ.file,
                line=occ.line,
                column=occ.column,
                value=value,
                kind=kind,
                hex=normalize_to_hex(value),
                line_text=occ.text.strip(),
                context=classify_context(occ, cache),
            )
        )
    return results


def named_results(
    occurrences: Sequence[Occurrence],
    cache: AnalysisCache,
) -> list[ColorResult]:
    """Keep ``prop: name`` hits whose value is a real CSS named color."""
    results: list[ColorResult] = []
    for occ in occurrences:
        match = _NAMED_VALUE.search(occ.match or occ.text)
        if not match:
            continue

        name = match.group(1).lower()
        if name not in NAMED_COLOR_SET or name in NON_COLOR_KEYWORDS:
            continue
        if is_comment_line(occ.text):
            continue

        results.append(
            ColorResult(
                file=occ.file,
                line=occ.line,
                column=occ.column + match.start(1),
                value=name,
                kind=ColorKind.NAMED,
                hex=NAMED_COLORS[name],
                line_text=occ.text.strip(),
                context=classify_context(occ, cache),
            )
        )
    return results


def find_colors(
    paths: Sequence[str],
    options: Optional[SearchOptions] = None,
    named: bool = True,
    cache: Optional[AnalysisCache] = None,
) -> list[ColorResult]:
    """Search, classify, dedupe by location and sort."""
    options = options or SearchOptions()
    cache = cache or AnalysisCache()

    results = literal_results(search(build_color_search_pattern(), paths, options), cache)

    if named:
        named_options = SearchOptions(
            include=options.include,
            exclude=options.exclude,
            file_types=options.file_types,
            case_sensitive=True,
        )
        for pattern in build_named_color_patterns():
            results.extend(named_results(search(pattern, paths, named_options), cache))

    unique = dedupe(results, lambda r: (r.file, r.line, r.column))
    return sort_by_location(unique)


# =============================================================================
# Output
# =============================================================================


def colors_json(results: Sequence[ColorResult]) -> dict[str, Any]:
    actionable = [r for r in results if r.actionable]
    skipped = [r for r in results if not r.actionable]
    return {
        "command": "colors",
        "summary": {
            "totalColors": len(results),
            "actionable": len(actionable),
            "skipped": len(skipped),
            "totalFiles": len({r.file for r in results}),
            "byType": count_by(results, lambda r: r.kind),
            "skippedByContext": count_by(skipped, lambda r: r.context),
        },
        "actionable": group_by_file(actionable),
        "skipped": group_by_file(skipped),
    }


def print_colors_text(results: Sequence[ColorResult]) -> None:
    if not results:
        log.info("No hardcoded color values found.")
        return

    actionable = [r for r in results if r.actionable]
    skipped = [r for r in results if not r.actionable]
    file_count = len({r.file for r in results})
    types = count_by(results, lambda r: r.kind)

    log.header("Hardcoded Colors")
    log.info(f"Found {len(results)} hardcoded color values in {file_count} files")
    log.info(f"Actionable: {len(actionable)} | Skipped: {len(skipped)}")
    log.info("Types: " + ", ".join(f"{kind}({count})" for kind, count in types.items()))
    print()

    for file, items in group_by(actionable, lambda r: r.file).items():
        log.info(f"FILE: {file}")
        for r in items:
            hex_info = f" -> {r.hex}" if r.hex else ""
            log.info(f"  L{r.line}:{r.column}  {r.value}  ({r.kind.value}{hex_info})")
            log.dim(f"    {r.line_text}")
        print()

    if skipped:
        log.info(f"--- Skipped {len(skipped)} non-actionable colors ---")
        for label, items in group_by(skipped, lambda r: r.context_label).items():
            files = {r.file for r in items}
            log.info(f"  [{label}] {len(items)} colors in {len(files)} files")
        print()


# =============================================================================
# CLI Entry Point
# =============================================================================


def cmd_colors(args: argparse.Namespace) -> int:
    """Main entry point for the colors command."""
    json_mode = begin_output(args)
    results = find_colors(args.paths, search_options(args), named=args.named)

    if json_mode:
        print_json(colors_json(results))
    else:
        print_colors_text(results)
    return 0

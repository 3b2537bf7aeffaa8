"""
``compare`` command: match hardcoded colors against a design-token palette.

Each color literal is matched to the nearest palette variable (CIE76
Delta-E, with property-aware tie-breaking) and given a status:

- ``exact``: distance 0
- ``close``: distance within the threshold
- ``unmatched``: nothing within the threshold

Actionable exact/close matches get a ready-to-paste replacement
(``var(--x)``, or ``color-mix()`` when the literal has alpha); actionable
unmatched colors get a suggested variable name. Results can be saved as a
baseline, diffed against one, or fixed in place.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..baseline import diff_against_baseline, load_baseline, save_baseline
from ..color.matcher import MatchResult, find_nearest_color_semantic
from ..color.model import ColorKind, classify_color, normalize_to_hex
from ..color.patterns import build_color_search_pattern
from ..color.suggest import color_mix_suggestion, extract_alpha, extract_css_property, suggest_variable_name
from ..config import DEFAULT_THRESHOLD
from ..context import AnalysisCache, ContextTag, classify_context, context_label, is_actionable, is_in_block_comment
from ..search import Occurrence, SearchOptions, search
from ..utils import count_by, group_by, log
from ..variables import VariablesFileError, load_palette
from .common import (
    SKIPPED_EXAMPLES,
    begin_output,
    dedupe,
    is_comment_line,
    print_json,
    search_options,
    short_path,
    sort_by_location,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================


class MatchStatus(str, Enum):
    EXACT = "exact"
    CLOSE = "close"
    UNMATCHED = "unmatched"


@dataclass
class ComparisonResult:
    """A color literal compared against the palette.

    Attributes:
        file: Source file.
        line: 1-based line.
        column: 1-based column.
        value: Literal as written.
        kind: Syntactic color kind.
        hex: Normalized hex, None for unconvertible syntaxes.
        status: exact, close or unmatched.
        match: Nearest palette entry, if any.
        context: Context tag.
        line_text: Trimmed source line.
        suggestion: Replacement expression for exact/close matches.
        name_suggestion: Proposed variable name for actionable unmatched colors.
        css_property: Property the color is assigned to, if detected.
    """

    file: str
    line: int
    column: int
    value: str
    kind: ColorKind
    hex: Optional[str]
    status: MatchStatus
    match: Optional[MatchResult]
    context: ContextTag
    line_text: str
    suggestion: Optional[str] = None
    name_suggestion: Optional[str] = None
    css_property: Optional[str] = None

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
            "status": self.status.value,
            "match": self.match.to_dict() if self.match else None,
            "context": self.context.value,
            "contextLabel": self.context_label,
            "actionable": self.actionable,
            "lineText": self.line_text,
            "suggestion": self.suggestion,
            "nameSuggestion": self.name_suggestion,
            "cssProperty": self.css_property,
        }


# =============================================================================
# Comparison
# =============================================================================


def match_status(match: Optional[MatchResult], threshold: float) -> MatchStatus:
    if match is not None and match.distance == 0:
        return MatchStatus.EXACT
    if match is not None and match.distance <= threshold:
        return MatchStatus.CLOSE
    return MatchStatus.UNMATCHED


def replacement_for(match: MatchResult, value: str) -> str:
    """``var(--x)``, or a ``color-mix()`` carrying the literal's alpha."""
    alpha = extract_alpha(value)
    if alpha is not None and alpha < 1:
        return color_mix_suggestion(match.name, alpha)
    return f"var({match.name})"


def compare_occurrence(
    occ: Occurrence,
    palette: Mapping[str, str],
    threshold: float,
    cache: AnalysisCache,
) -> Optional[ComparisonResult]:
    """Compare one search hit; None if it should be skipped."""
    value = occ.match.strip()
    kind = classify_color(value)
    if kind == ColorKind.UNKNOWN:
        return None
    if is_comment_line(occ.text) or is_in_block_comment(occ.file, occ.line, cache):
        return None
    if "${" in value:
        return None

    hex_value = normalize_to_hex(value)
    css_property = extract_css_property(occ.text)
    nearest = find_nearest_color_semantic(value, palette, css_property) if hex_value else None
    status = match_status(nearest, threshold)
    context = classify_context(occ, cache)

    suggestion = None
    if nearest is not None and status != MatchStatus.UNMATCHED:
        suggestion = replacement_for(nearest, value)

    name_suggestion = None
    if status == MatchStatus.UNMATCHED and is_actionable(context):
        name_suggestion = suggest_variable_name(value, css_property)

    return ComparisonResult(
        file=occ.file,
        line=occ.line,
        column=occ.column,
        value=value,
        kind=kind,
        hex=hex_value,
        status=status,
        match=nearest,
        context=context,
        line_text=occ.text.strip(),
        suggestion=suggestion,
        name_suggestion=name_suggestion,
        css_property=css_property,
    )


def compare_colors(
    paths: Sequence[str],
    palette: Mapping[str, str],
    threshold: float = DEFAULT_THRESHOLD,
    options: Optional[SearchOptions] = None,
    cache: Optional[AnalysisCache] = None,
) -> list[ComparisonResult]:
    """Search the paths and compare every color literal against the palette."""
    cache = cache or AnalysisCache()
    occurrences = search(build_color_search_pattern(), paths, options or SearchOptions())

    results: list[ComparisonResult] = []
    for occ in occurrences:
        result = compare_occurrence(occ, palette, threshold, cache)
        if result is not None:
            results.append(result)

    unique = dedupe(results, lambda r: (r.file, r.line, r.column))
    return sort_by_location(unique)


# =============================================================================
# Fixing
# =============================================================================


def fixable(results: Sequence[ComparisonResult]) -> list[ComparisonResult]:
    return [r for r in results if r.actionable and r.status == MatchStatus.EXACT and r.suggestion]


def apply_fixes(results: Sequence[ComparisonResult]) -> int:
    """Rewrite actionable exact matches in place and return the count.

    Replacements run bottom-up and right-to-left within a line so earlier
    columns stay valid.
    """
    fix_count = 0
    for file, items in group_by(fixable(results), lambda r: r.file).items():
        path = Path(file)
        try:
            # newline="" keeps CRLF endings as written
            with open(path, encoding="utf-8", newline="") as f:
                lines = f.read().split("\n")
            for r in sorted(items, key=lambda r: (r.line, r.column), reverse=True):
                index = r.line - 1
                if not 0 <= index < len(lines):
                    continue
                text = lines[index]
                start = text.find(r.value, max(r.column - 2, 0))
                if start == -1:
                    logger.debug("Value %s moved at %s:%d, not fixed", r.value, file, r.line)
                    continue
                lines[index] = text[:start] + r.suggestion + text[start + len(r.value):]
                fix_count += 1
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write("\n".join(lines))
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Error fixing {file}: {e}")
    return fix_count


# =============================================================================
# Output
# =============================================================================


def _by_status(results: Sequence[ComparisonResult], status: MatchStatus) -> list[ComparisonResult]:
    return [r for r in results if r.status == status]


def _status_counts(results: Sequence[ComparisonResult]) -> dict[str, int]:
    return {status.value: len(_by_status(results, status)) for status in MatchStatus}


def compare_json(
    results: Sequence[ComparisonResult],
    palette: Mapping[str, str],
    threshold: float,
) -> dict[str, Any]:
    actionable = [r for r in results if r.actionable]
    skipped = [r for r in results if not r.actionable]
    return {
        "command": "compare",
        "palette": dict(palette),
        "threshold": threshold,
        "summary": {
            "total": len(results),
            "actionable": len(actionable),
            "skipped": len(skipped),
            "byStatus": _status_counts(results),
            "actionableByStatus": _status_counts(actionable),
            "skippedByContext": count_by(skipped, lambda r: r.context),
        },
        "actionable": {
            status.value: [r.to_dict() for r in _by_status(actionable, status)]
            for status in (MatchStatus.UNMATCHED, MatchStatus.CLOSE, MatchStatus.EXACT)
        },
        "skipped": {
            "byContext": {
                context: [r.to_dict() for r in items]
                for context, items in group_by(skipped, lambda r: r.context.value).items()
            },
        },
    }


def print_compare_text(
    results: Sequence[ComparisonResult],
    palette: Mapping[str, str],
    threshold: float,
    vars_file: str,
) -> None:
    if not results:
        log.info("No hardcoded colors found to compare.")
        return

    actionable = [r for r in results if r.actionable]
    skipped = [r for r in results if not r.actionable]
    exact = _by_status(actionable, MatchStatus.EXACT)
    close = _by_status(actionable, MatchStatus.CLOSE)
    unmatched = _by_status(actionable, MatchStatus.UNMATCHED)

    log.header("Color Variable Comparison")
    log.info(f"Palette: {len(palette)} variables from {Path(vars_file).name}")
    log.info(f"Threshold: delta-E <= {threshold:g} for close matches")
    log.info(f"Total found: {len(results)} | Actionable: {len(actionable)} | Skipped: {len(skipped)}")
    log.info(f"Actionable: {len(exact)} exact | {len(close)} close | {len(unmatched)} unmatched")
    if skipped:
        by_label = count_by(skipped, lambda r: r.context_label)
        log.info("Skipped: " + ", ".join(f"{count} {label}" for label, count in by_label.items()))
    print()

    if unmatched:
        log.info(f"--- ACTIONABLE UNMATCHED ({len(unmatched)}) ---")
        for r in unmatched:
            hex_info = f" -> {r.hex}" if r.hex else ""
            nearest = f" (nearest: {r.match.name} {r.match.hex} dE={r.match.distance:g})" if r.match else ""
            name = f" [suggest: {r.name_suggestion}]" if r.name_suggestion else ""
            log.info(f"  {r.file}:{r.line}:{r.column}  {r.value}{hex_info}{nearest}{name}")
            log.dim(f"    {r.line_text}")
        print()

    if close:
        log.info(f"--- ACTIONABLE CLOSE MATCHES ({len(close)}) ---")
        for r in close:
            replace = f" | replace: {r.suggestion}" if r.suggestion else ""
            log.info(
                f"  {r.file}:{r.line}:{r.column}  {r.value} -> use {r.match.name} "
                f"({r.match.hex}, dE={r.match.distance:g}){replace}"
            )
            log.dim(f"    {r.line_text}")
        print()

    if exact:
        log.info(f"--- ACTIONABLE EXACT MATCHES ({len(exact)}) ---")
        for r in exact:
            replace = f" | replace: {r.suggestion}" if r.suggestion else ""
            log.info(f"  {r.file}:{r.line}:{r.column}  {r.value} -> {r.match.name} ({r.match.hex}){replace}")
            log.dim(f"    {r.line_text}")
        print()

    if skipped:
        log.info(f"--- SKIPPED ({len(skipped)} non-actionable) ---")
        for label, items in group_by(skipped, lambda r: r.context_label).items():
            log.info(f"  [{label}] {len(items)} colors in {len({r.file for r in items})} files")
            for r in items[:SKIPPED_EXAMPLES]:
                log.dim(f"    e.g. {short_path(r.file)}:{r.line}  {r.value}")
            if len(items) > SKIPPED_EXAMPLES:
                log.dim(f"    ... and {len(items) - SKIPPED_EXAMPLES} more")
        print()


# =============================================================================
# CLI Entry Point
# =============================================================================


def cmd_compare(args: argparse.Namespace) -> int:
    """Main entry point for the compare command."""
    json_mode = begin_output(args)

    if not args.vars:
        log.error("--vars <file> is required. Specify a CSS, JSON, YAML, JS, or TS variables file.")
        return 1

    try:
        palette = load_palette(args.vars)
    except VariablesFileError as e:
        log.error(str(e))
        return 1

    if not palette:
        log.error(f"No color variables found in {args.vars}")
        return 1

    threshold = args.threshold
    results = compare_colors(args.paths, palette, threshold, search_options(args))

    if args.baseline:
        path = save_baseline(results, args.baseline)
        log.success(f"Baseline saved: {len(results)} entries to {path}")

    if args.diff:
        baseline = load_baseline(args.diff)
        if baseline is not None:
            new_results = diff_against_baseline(results, baseline)
            log.info(
                f"Diff: {len(new_results)} new issues "
                f"({len(results) - len(new_results)} already in baseline)"
            )
            results = new_results

    if args.fix:
        fix_count = apply_fixes(results)
        log.success(f"Fixed {fix_count} exact matches with var() replacements.")
        return 0

    if json_mode:
        print_json(compare_json(results, palette, threshold))
    else:
        print_compare_text(results, palette, threshold, args.vars)
    return 0

"""
``tailwind`` command: find Tailwind color utilities.

Reports palette classes (``bg-red-500``, ``text-white/50``) and arbitrary
values (``border-[#ff0000]``). With ``--vars``, arbitrary color values are
matched against the palette and get a ``prefix-[var(--x)]`` suggestion.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..color.matcher import MatchResult, find_nearest_color
from ..color.model import normalize_to_hex
from ..color.tailwind import TailwindClass, build_tailwind_color_pattern, detect_tailwind_version, parse_tailwind_color_class
from ..config import DEFAULT_THRESHOLD
from ..search import Occurrence, SearchOptions, search
from ..utils import count_by, group_by, log
from ..variables import VariablesFileError, load_palette
from .common import begin_output, dedupe, group_by_file, is_comment_line, print_json, search_options, sort_by_location
from .compare import MatchStatus, match_status

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class TailwindResult:
    """A Tailwind color utility found in source."""

    file: str
    line: int
    column: int
    value: str
    parsed: TailwindClass
    context: str
    hex: Optional[str] = None
    status: Optional[MatchStatus] = None
    match: Optional[MatchResult] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "value": self.value,
            **self.parsed.to_dict(),
            "context": self.context,
        }
        if self.status is not None:
            data.update({
                "hex": self.hex,
                "status": self.status.value,
                "match": self.match.to_dict() if self.match else None,
                "suggestion": self.suggestion,
            })
        return data


# =============================================================================
# Scanning
# =============================================================================


def tailwind_results(occurrences: Sequence[Occurrence]) -> list[TailwindResult]:
    results: list[TailwindResult] = []
    for occ in occurrences:
        value = occ.match.strip()
        if is_comment_line(occ.text):
            continue
        parsed = parse_tailwind_color_class(value)
        if parsed is None:
            continue
        results.append(
            TailwindResult(
                file=occ.file,
                line=occ.line,
                column=occ.column,
                value=value,
                parsed=parsed,
                context=occ.text.strip(),
            )
        )
    return results


def match_arbitrary_values(
    results: Sequence[TailwindResult],
    palette: Mapping[str, str],
    threshold: float = DEFAULT_THRESHOLD,
) -> None:
    """Annotate arbitrary color values with their nearest palette variable."""
    for r in results:
        arbitrary = r.parsed.arbitrary
        if not arbitrary:
            continue
        hex_value = normalize_to_hex(arbitrary)
        if hex_value is None:
            continue

        r.hex = hex_value
        r.match = find_nearest_color(arbitrary, palette)
        r.status = match_status(r.match, threshold)
        if r.match is not None and r.status != MatchStatus.UNMATCHED:
            r.suggestion = f"{r.parsed.prefix}-[var({r.match.name})]"


def find_tailwind(
    paths: Sequence[str],
    options: Optional[SearchOptions] = None,
    palette: Optional[Mapping[str, str]] = None,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[TailwindResult]:
    """Search, parse, dedupe by (file, line, column, value) and sort."""
    occurrences = search(build_tailwind_color_pattern(), paths, options or SearchOptions())
    results = dedupe(tailwind_results(occurrences), lambda r: (r.file, r.line, r.column, r.value))
    results = sort_by_location(results)
    if palette:
        match_arbitrary_values(results, palette, threshold)
    return results


# =============================================================================
# Output
# =============================================================================


def tailwind_json(results: Sequence[TailwindResult], version: int) -> dict[str, Any]:
    grouped = group_by_file(results)
    return {
        "command": "tailwind",
        "tailwindVersion": version,
        "summary": {
            "totalClasses": len(results),
            "totalFiles": len(grouped),
            "byPrefix": count_by(results, lambda r: r.parsed.prefix),
            "byColor": count_by(results, lambda r: r.parsed.color or "arbitrary"),
            "byStatus": count_by([r for r in results if r.status], lambda r: r.status),
        },
        "results": grouped,
    }


def _detail(r: TailwindResult) -> str:
    if r.parsed.arbitrary:
        return f"arbitrary: {r.parsed.arbitrary}"
    return f"{r.parsed.color}-{r.parsed.shade or 'default'}"


def print_tailwind_text(results: Sequence[TailwindResult], version: int) -> None:
    if not results:
        log.info("No Tailwind color classes found.")
        return

    grouped = group_by(results, lambda r: r.file)
    log.header("Tailwind Color Classes")
    log.info(f"Tailwind v{version} detected")
    log.info(f"Found {len(results)} Tailwind color classes in {len(grouped)} files")
    print()

    for file, items in grouped.items():
        log.info(f"FILE: {file}")
        for r in items:
            log.info(f"  L{r.line}:{r.column}  {r.value}  ({r.parsed.prefix}, {_detail(r)})")
            if r.status is not None:
                nearest = f" {r.match.name} dE={r.match.distance:g}" if r.match else ""
                replace = f" | replace: {r.suggestion}" if r.suggestion else ""
                log.info(f"    {r.status.value.upper()}{nearest}{replace}")
            log.dim(f"    {r.context}")
        print()


# =============================================================================
# CLI Entry Point
# =============================================================================


def cmd_tailwind(args: argparse.Namespace) -> int:
    """Main entry point for the tailwind command."""
    json_mode = begin_output(args)

    palette = None
    if args.vars:
        try:
            palette = load_palette(args.vars)
        except VariablesFileError as e:
            log.error(str(e))
            return 1
        if not palette:
            log.warning(f"No color variables found in {args.vars}; arbitrary values will not be matched")

    version = args.tailwind_version or detect_tailwind_version(args.paths or ["."])
    results = find_tailwind(args.paths, search_options(args), palette, args.threshold)

    if json_mode:
        print_json(tailwind_json(results, version))
    else:
        print_tailwind_text(results, version)
    return 0

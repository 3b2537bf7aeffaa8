"""
``patterns`` command: find repeated class lists worth extracting.
"""

from __future__ import annotations

import argparse
from typing import Any, Optional, Sequence

from ..class_patterns import (
    CLASS_ATTRIBUTE_PATTERNS,
    CLASS_HELPER_PATTERN,
    DEFAULT_MIN_CLASSES,
    DEFAULT_MIN_COUNT,
    PatternReport,
    aggregate_patterns,
    class_occurrences,
)
from ..search import SearchOptions, search_many
from ..utils import log
from .common import begin_output, dedupe, print_json, search_options, sort_by_location


def find_patterns(
    paths: Sequence[str],
    options: Optional[SearchOptions] = None,
    min_count: int = DEFAULT_MIN_COUNT,
    min_classes: int = DEFAULT_MIN_CLASSES,
) -> PatternReport:
    """Collect class strings from attributes and helper calls, then aggregate."""
    options = options or SearchOptions(case_sensitive=True)
    hits = search_many([*CLASS_ATTRIBUTE_PATTERNS, CLASS_HELPER_PATTERN], paths, options)
    hits = sort_by_location(dedupe(hits, lambda o: (o.file, o.line, o.column)))
    return aggregate_patterns(class_occurrences(hits), min_count, min_classes)


def patterns_json(report: PatternReport) -> dict[str, Any]:
    return {
        "command": "patterns",
        "summary": {
            "totalPatterns": len(report.patterns),
            "minCount": report.min_count,
            "minClasses": report.min_classes,
            "totalLocations": report.total_locations,
        },
        "patterns": [p.to_dict() for p in report.patterns],
        "frequentSubsets": [pair.to_dict() for pair in report.pairs],
        "subsetRelations": [rel.to_dict() for rel in report.subsets],
    }


def print_patterns_text(report: PatternReport) -> None:
    if not report.patterns:
        log.info(
            f"No repeated class patterns found "
            f"(min {report.min_count} occurrences, min {report.min_classes} classes)."
        )
        return

    log.header("Repeated Class Patterns")
    log.info(f"Found {len(report.patterns)} repeated patterns across {report.total_locations} locations")
    log.info(f"Criteria: >={report.min_count} occurrences, >={report.min_classes} classes")
    print()

    for i, pattern in enumerate(report.patterns, start=1):
        log.info(f'{i}. "{pattern.normalized}"')
        log.info(
            f"   Classes: {pattern.class_count} | Occurrences: {pattern.count} "
            f"| Impact score: {pattern.impact_score}"
        )
        log.dim("   Consider: CVA variant, @apply directive, or component extraction")
        log.info("   Locations:")
        for loc in pattern.locations:
            log.info(f"     {loc.file}:{loc.line}:{loc.column}")
            if loc.original != pattern.normalized:
                log.dim(f'       original: "{loc.original}"')
        print()

    if report.pairs:
        log.info("--- Frequently Co-occurring Class Pairs ---")
        for pair in report.pairs:
            log.info(f'  "{pair.pattern}" ({pair.count} co-occurrences)')
        print()

    if report.subsets:
        log.info("--- Extraction Bases (pattern contained in another) ---")
        for rel in report.subsets:
            log.info(f'  "{rel.base}" ({rel.base_count}x) is part of "{rel.extended}" ({rel.extended_count}x)')
            log.dim(f"    extra: {' '.join(rel.extra)}")
        print()

    log.dim("TIP: Use class-variance-authority (CVA) to create typed variants from repeated patterns.")
    log.dim("TIP: Use tailwind-merge to simplify conflicting/duplicate Tailwind classes.")


def cmd_patterns(args: argparse.Namespace) -> int:
    """Main entry point for the patterns command."""
    json_mode = begin_output(args)
    report = find_patterns(
        args.paths,
        search_options(args, case_sensitive=True),
        min_count=args.min_count,
        min_classes=args.min_classes,
    )

    if json_mode:
        print_json(patterns_json(report))
    else:
        print_patterns_text(report)
    return 0

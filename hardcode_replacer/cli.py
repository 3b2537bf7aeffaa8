"""
Main CLI for hardcode-replacer.

Finds hardcoded colors, Tailwind color classes and repeated class patterns in
web codebases, and compares colors against a design-token palette.
"""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .class_patterns import DEFAULT_MIN_CLASSES, DEFAULT_MIN_COUNT
from .config import DEFAULT_THRESHOLD, load_config, merge_options
from .search import SearchError
from .utils import HardcodeReplacerError, configure_logging, log


GUIDE = """
HARDCODE-REPLACER - Usage Guide
===============================

PURPOSE
  Scan web codebases for hardcoded color values, compare them against your
  design token / CSS variable palette, and generate exact replacement code.

TYPICAL WORKFLOW
  1. Scan:      hardcode-replacer colors src/
  2. Compare:   hardcode-replacer compare src/ --vars styles/theme.css
  3. Auto-fix:  hardcode-replacer compare src/ --vars styles/theme.css --fix
  4. Baseline:  hardcode-replacer compare src/ --vars styles/theme.css --baseline .hcr-baseline.json
  5. Diff:      hardcode-replacer compare src/ --vars styles/theme.css --diff .hcr-baseline.json
  6. Tailwind:  hardcode-replacer tailwind src/ --vars styles/theme.css
  7. Patterns:  hardcode-replacer patterns src/ --min-count 3

CONTEXT CLASSIFICATION
  Every found color is classified into one of these categories:

  ACTIONABLE          Can be replaced with var() or color-mix()
  CSS VAR DEFINITION  This IS a CSS variable definition
  THEME DEFINITION    In a theme/token file like theme.ts, palette.js
  CANVAS/WEBGL        In a canvas context (three.js, d3, sharp, etc.)
  MAPPING/LOOKUP      Used as an object key or lookup value
  GENERATED CODE      Template-generated markup
  META/MANIFEST       Browser-level meta tags (no CSS var support)
  EFFECT              Pure black/white with alpha (intentional overlay)

  Detection is automatic based on file imports, file paths, and line content.

COLOR MATCHING
  Colors are matched using CIE76 Delta-E perceptual distance:
    0      Identical
    < 1    Imperceptible
    1-2    Close (same intended color)
    2-10   Noticeable deviation
    > 10   Different color

  Default threshold: 10. Use --threshold 5 for stricter matching.

REPLACEMENT SYNTAX
  Exact match (opaque):     var(--primary-500)
  Exact match (with alpha): color-mix(in srgb, var(--primary-500) 40%, transparent)
  Close match:              Same as exact, but review the delta-E distance first
  Unmatched:                A suggested variable name (e.g. --color-red-700)

SUPPORTED FORMATS
  Color values:    hex, rgb, rgba, hsl, hsla, oklch, oklab, lch, lab, hwb, color(), named
  Modern syntax:   rgb(255 0 0 / 50%), hsl(360 100% 50% / 0.5)
  Variable files:  CSS custom properties, JSON/YAML (nested), JS/TS exports
  Class patterns:  className="...", class="...", cn(), clsx(), classnames(), twMerge(), cva()

CONFIG FILE
  Create .hardcode-replacerrc.json (or .hardcode-replacerrc.yaml) in your
  project root:
  {
    "exclude": ["**/*.test.*"],
    "vars": "src/styles/variables.css",
    "threshold": 10
  }

MACHINE-READABLE OUTPUT
  Use --format json. The document includes:
  - summary with counts by status and context
  - actionable results grouped by exact/close/unmatched
  - skipped results grouped by context
  - suggestion field with exact replacement code
  - nameSuggestion field for unmatched colors
"""


# =============================================================================
# Argument Parsing
# =============================================================================


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every scan command."""
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to search (default: .)",
    )
    parser.add_argument(
        "--include",
        help='File glob to include (e.g. "*.tsx")',
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="File glob to exclude (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all subcommands."""

    parser = argparse.ArgumentParser(
        prog="hardcode-replacer",
        description="Find and fix hardcoded colors, Tailwind color classes, and repeated class patterns.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  colors    Find all hardcoded color values (hex, rgb, hsl, oklch, named)
  compare   Compare found colors against a variables file, get replacements
  tailwind  Find Tailwind color utility classes and arbitrary values
  patterns  Find repeated className/cn()/clsx() patterns for extraction
  guide     Show a detailed usage guide

Examples:
  hardcode-replacer colors src/
  hardcode-replacer compare src/ --vars styles/variables.css
  hardcode-replacer compare src/ --vars styles/variables.css --fix

Config: place .hardcode-replacerrc.json in your project root for defaults.
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug diagnostics on stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # --- guide ---
    subparsers.add_parser(
        "guide",
        help="Show a detailed usage guide",
        description="Show a detailed usage guide for humans and AI assistants.",
    )

    # --- colors ---
    colors_parser = subparsers.add_parser(
        "colors",
        help="Find hardcoded color values",
        description="Find hardcoded color values (hex, rgb, hsl, oklch, named, etc.).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hardcode-replacer colors src/
  hardcode-replacer colors src/ --include "*.tsx" --no-named
  hardcode-replacer colors src/ --format json
        """,
    )
    _add_scan_arguments(colors_parser)
    colors_parser.add_argument(
        "--no-named",
        dest="named",
        action="store_false",
        help="Skip named CSS color detection (red, blue, etc.)",
    )

    # --- compare ---
    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare colors against a variables file",
        description="Compare colors against a variables file and get exact replacement code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hardcode-replacer compare src/ --vars styles/theme.css
  hardcode-replacer compare src/ --vars tokens.json --threshold 5
  hardcode-replacer compare src/ --vars styles/theme.css --baseline .hcr-baseline.json
  hardcode-replacer compare src/ --vars styles/theme.css --diff .hcr-baseline.json
        """,
    )
    _add_scan_arguments(compare_parser)
    compare_parser.add_argument(
        "--vars",
        help="Variables file (CSS, JSON, YAML, JS or TS); may come from the config file",
    )
    compare_parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f'Delta-E threshold for a "close" match (default: {DEFAULT_THRESHOLD:g})',
    )
    compare_parser.add_argument(
        "--fix",
        action="store_true",
        help="Replace actionable exact matches in place with var() / color-mix()",
    )
    compare_parser.add_argument(
        "--baseline",
        help="Save results to a baseline JSON file",
    )
    compare_parser.add_argument(
        "--diff",
        help="Show only findings not present in a previous baseline",
    )

    # --- tailwind ---
    tailwind_parser = subparsers.add_parser(
        "tailwind",
        help="Find Tailwind color classes",
        description="Find Tailwind CSS color classes and arbitrary color values.",
    )
    _add_scan_arguments(tailwind_parser)
    tailwind_parser.add_argument(
        "--vars",
        help="Compare arbitrary values (bg-[#hex]) against a palette",
    )
    tailwind_parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Delta-E threshold for arbitrary value matching (default: {DEFAULT_THRESHOLD:g})",
    )
    tailwind_parser.add_argument(
        "--tailwind-version",
        type=int,
        choices=[3, 4],
        help="Tailwind major version (default: detect from @theme blocks)",
    )

    # --- patterns ---
    patterns_parser = subparsers.add_parser(
        "patterns",
        help="Find repeated class patterns",
        description="Find repeated className/cn()/clsx() patterns for extraction.",
    )
    _add_scan_arguments(patterns_parser)
    patterns_parser.add_argument(
        "--min-count",
        type=_positive_int,
        default=DEFAULT_MIN_COUNT,
        help=f"Minimum occurrences to report (default: {DEFAULT_MIN_COUNT})",
    )
    patterns_parser.add_argument(
        "--min-classes",
        type=_positive_int,
        default=DEFAULT_MIN_CLASSES,
        help=f"Minimum classes in a pattern (default: {DEFAULT_MIN_CLASSES})",
    )

    return parser


# =============================================================================
# Command Dispatch
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        log.set_color(False)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "guide":
        print(GUIDE)
        return 0

    merge_options(args, load_config(args.paths[0] if args.paths else "."))

    try:
        if args.command == "colors":
            from .commands.colors import cmd_colors
            return cmd_colors(args)

        elif args.command == "compare":
            from .commands.compare import cmd_compare
            return cmd_compare(args)

        elif args.command == "tailwind":
            from .commands.tailwind import cmd_tailwind
            return cmd_tailwind(args)

        elif args.command == "patterns":
            from .commands.patterns import cmd_patterns
            return cmd_patterns(args)

        else:
            log.error(f"Unknown command: {args.command}")
            return 1

    except SearchError as e:
        log.error(str(e))
        return 2
    except HardcodeReplacerError as e:
        log.error(str(e))
        return 1
    except KeyboardInterrupt:
        log.warning("Interrupted")
        return 130
    finally:
        log.set_stderr(False)


if __name__ == "__main__":
    sys.exit(main())

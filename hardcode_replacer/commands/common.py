"""
Helpers shared by the scan commands.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

from ..search import SearchOptions
from ..utils import group_by, is_comment_line, location_key, log

T = TypeVar("T")

# How many skipped examples to show per context in text reports
SKIPPED_EXAMPLES = 3


def search_options(args: argparse.Namespace, **overrides: Any) -> SearchOptions:
    """Build search filters from the common ``--include``/``--exclude`` flags."""
    return SearchOptions(
        include=getattr(args, "include", None),
        exclude=list(getattr(args, "exclude", None) or []),
        **overrides,
    )


def dedupe(results: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Drop later results whose key was already seen."""
    seen: set[Hashable] = set()
    unique: list[T] = []
    for result in results:
        k = key(result)
        if k in seen:
            continue
        seen.add(k)
        unique.append(result)
    return unique


def sort_by_location(results: Iterable[T]) -> list[T]:
    return sorted(results, key=location_key)


def group_by_file(results: Sequence[Any]) -> dict[str, list[dict[str, Any]]]:
    """JSON-ready ``{file: [result dicts]}``."""
    grouped = group_by(results, lambda r: r.file)
    return {file: [r.to_dict() for r in items] for file, items in grouped.items()}


def print_json(document: dict[str, Any]) -> None:
    print(json.dumps(document, indent=2))


def begin_output(args: argparse.Namespace) -> bool:
    """Route console messages to stderr in JSON mode. Returns True for JSON."""
    json_mode = getattr(args, "format", "text") == "json"
    log.set_stderr(json_mode)
    return json_mode


def short_path(file: str) -> str:
    """Last two path segments, for compact examples."""
    return "/".join(file.split("/")[-2:])

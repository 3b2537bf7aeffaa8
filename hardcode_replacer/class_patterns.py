"""
Repeated class-string detection.

Class attribute values and class-merging helper arguments are normalized
(split on whitespace, deduplicated, sorted) and grouped. Groups that repeat
often enough are candidates for a CVA variant, an ``@apply`` rule or a shared
component. Two secondary views are derived from the same groups: class pairs
that keep appearing together, and patterns that are strict subsets of other
patterns (a natural extraction base).
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from .search import Occurrence
from .utils import is_comment_line


# =============================================================================
# Constants
# =============================================================================

DEFAULT_MIN_COUNT = 2
DEFAULT_MIN_CLASSES = 2
MAX_PAIR_RESULTS = 20
MAX_SUBSET_RESULTS = 10

# Search patterns for static class attributes
CLASS_ATTRIBUTE_PATTERNS = [
    r'className="[^"]*"',
    r"className='[^']*'",
    r'class="[^"]*"',
    r"class='[^']*'",
    r"className=\{`[^`]*`\}",
]

CLASS_HELPERS = ["cn", "clsx", "classnames", "twMerge", "cva"]

CLASS_HELPER_PATTERN = rf"\b(?:{'|'.join(CLASS_HELPERS)})\([^)]*\)"

_ATTRIBUTE_VALUE = re.compile(r"""(?:className|class)=(?:"([^"]*)"|'([^']*)'|\{`([^`]*)`\})""")
_HELPER_CALL = re.compile(rf"^(?:{'|'.join(CLASS_HELPERS)})\(")
_STRING_LITERAL = re.compile(r""""([^"]*)"|'([^']*)'|`([^`]*)`""")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class ClassOccurrence:
    """One class string found in a source file."""

    file: str
    line: int
    column: int
    class_string: str
    context: str = ""


@dataclass
class PatternLocation:
    file: str
    line: int
    column: int
    original: str
    context: str = ""


@dataclass
class ClassPattern:
    """A normalized class list and every place it was seen.

    Attributes:
        normalized: Sorted, deduplicated, space-joined class list.
        classes: The individual classes, sorted.
        count: Number of occurrences.
        locations: Where each occurrence was found, with its original string.
    """

    normalized: str
    classes: tuple[str, ...]
    count: int = 0
    locations: list[PatternLocation] = field(default_factory=list)

    @property
    def class_count(self) -> int:
        return len(self.classes)

    @property
    def impact_score(self) -> int:
        return self.count * self.class_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "normalized": self.normalized,
            "classCount": self.class_count,
            "occurrences": self.count,
            "impactScore": self.impact_score,
            "locations": [asdict(loc) for loc in self.locations],
        }


@dataclass(frozen=True)
class ClassPair:
    pattern: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SubsetRelation:
    """``base`` is a strict subset of ``extended``."""

    base: str
    extended: str
    extra: tuple[str, ...]
    base_count: int
    extended_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "extended": self.extended,
            "extra": list(self.extra),
            "baseCount": self.base_count,
            "extendedCount": self.extended_count,
        }


@dataclass
class PatternReport:
    patterns: list[ClassPattern]
    pairs: list[ClassPair]
    subsets: list[SubsetRelation]
    min_count: int = DEFAULT_MIN_COUNT
    min_classes: int = DEFAULT_MIN_CLASSES

    @property
    def total_locations(self) -> int:
        return sum(p.count for p in self.patterns)


# =============================================================================
# Extraction
# =============================================================================


def split_classes(class_string: str) -> list[str]:
    """Split on any whitespace, dropping empties."""
    return class_string.split()


def normalize_class_string(class_string: str) -> str:
    return " ".join(sorted(set(split_classes(class_string))))


def extract_class_strings(match_text: str) -> list[str]:
    """Pull static class strings out of a matched attribute or helper call.

    Template literals containing ``${`` are dynamic and skipped.
    """
    values: list[str] = []

    attribute = _ATTRIBUTE_VALUE.match(match_text)
    if attribute:
        candidates = [next(g for g in attribute.groups() if g is not None)]
        if attribute.group(3) is not None and "${" in attribute.group(3):
            candidates = []
    elif _HELPER_CALL.match(match_text):
        candidates = []
        for literal in _STRING_LITERAL.finditer(match_text):
            value = next(g for g in literal.groups() if g is not None)
            if literal.group(3) is not None and "${" in value:
                continue
            candidates.append(value)
    else:
        candidates = []

    for candidate in candidates:
        stripped = candidate.strip()
        if stripped:
            values.append(stripped)
    return values


def class_occurrences(occurrences: Iterable[Occurrence]) -> list[ClassOccurrence]:
    """Turn raw search hits into class occurrences, skipping comment lines."""
    results: list[ClassOccurrence] = []
    for occ in occurrences:
        if is_comment_line(occ.text):
            continue
        for class_string in extract_class_strings(occ.match):
            results.append(
                ClassOccurrence(
                    file=occ.file,
                    line=occ.line,
                    column=occ.column,
                    class_string=class_string,
                    context=occ.text.strip(),
                )
            )
    return results


# =============================================================================
# Aggregation
# =============================================================================


def group_patterns(
    occurrences: Iterable[ClassOccurrence],
    min_classes: int = DEFAULT_MIN_CLASSES,
) -> dict[str, ClassPattern]:
    """Group occurrences by normalized class string, dropping short lists."""
    groups: dict[str, ClassPattern] = {}
    for occ in occurrences:
        classes = tuple(sorted(set(split_classes(occ.class_string))))
        if len(classes) < min_classes:
            continue

        normalized = " ".join(classes)
        pattern = groups.get(normalized)
        if pattern is None:
            pattern = ClassPattern(normalized=normalized, classes=classes)
            groups[normalized] = pattern

        pattern.count += 1
        pattern.locations.append(
            PatternLocation(
                file=occ.file,
                line=occ.line,
                column=occ.column,
                original=occ.class_string,
                context=occ.context,
            )
        )
    return groups


def rank_patterns(groups: dict[str, ClassPattern], min_count: int = DEFAULT_MIN_COUNT) -> list[ClassPattern]:
    """Patterns seen at least ``min_count`` times, highest impact first."""
    retained = [p for p in groups.values() if p.count >= min_count]
    return sorted(retained, key=lambda p: p.impact_score, reverse=True)


def find_common_pairs(
    groups: dict[str, ClassPattern],
    min_count: int = DEFAULT_MIN_COUNT,
    limit: int = MAX_PAIR_RESULTS,
) -> list[ClassPair]:
    """Class pairs that co-occur at least ``2 * min_count`` times.

    Only classes that individually appear in ``min_count`` occurrences are
    paired.
    """
    class_freq: dict[str, int] = {}
    for pattern in groups.values():
        for cls in pattern.classes:
            class_freq[cls] = class_freq.get(cls, 0) + pattern.count

    pair_freq: dict[str, int] = {}
    for pattern in groups.values():
        classes = pattern.classes
        for i, first in enumerate(classes):
            if class_freq.get(first, 0) < min_count:
                continue
            for second in classes[i + 1:]:
                if class_freq.get(second, 0) < min_count:
                    continue
                key = f"{first} {second}"
                pair_freq[key] = pair_freq.get(key, 0) + pattern.count

    frequent = [ClassPair(key, count) for key, count in pair_freq.items() if count >= min_count * 2]
    frequent.sort(key=lambda pair: pair.count, reverse=True)
    return frequent[:limit]


def find_subset_relations(
    patterns: list[ClassPattern],
    limit: int = MAX_SUBSET_RESULTS,
) -> list[SubsetRelation]:
    """Pairs of patterns where one class set strictly contains the other."""
    relations: list[SubsetRelation] = []
    for base in patterns:
        base_set = set(base.classes)
        for extended in patterns:
            extended_set = set(extended.classes)
            if base_set < extended_set:
                relations.append(
                    SubsetRelation(
                        base=base.normalized,
                        extended=extended.normalized,
                        extra=tuple(sorted(extended_set - base_set)),
                        base_count=base.count,
                        extended_count=extended.count,
                    )
                )
                if len(relations) >= limit:
                    return relations
    return relations


def aggregate_patterns(
    occurrences: Iterable[ClassOccurrence],
    min_count: int = DEFAULT_MIN_COUNT,
    min_classes: int = DEFAULT_MIN_CLASSES,
) -> PatternReport:
    """Run grouping, ranking, pair and subset detection in one pass."""
    groups = group_patterns(occurrences, min_classes)
    patterns = rank_patterns(groups, min_count)
    return PatternReport(
        patterns=patterns,
        pairs=find_common_pairs(groups, min_count),
        subsets=find_subset_relations(patterns),
        min_count=min_count,
        min_classes=min_classes,
    )

"""
Baseline snapshots for incremental adoption.

``save_baseline`` writes the current comparison results to JSON. A later run
with ``--diff`` loads that snapshot and keeps only findings whose
``(file, value, hex)`` key is not in it, so a team can stop new hardcoded
colors without fixing every existing one first.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .utils import log

T = TypeVar("T")


class BaselineEntry(BaseModel):
    """One finding recorded in a baseline file."""

    file: str = Field(description="Source file path as reported by the search")
    line: int = Field(description="1-based line number")
    column: int = Field(description="1-based column")
    value: str = Field(description="Color literal as written")
    hex: Optional[str] = Field(None, description="Normalized hex, null if unconvertible")
    status: str = Field(description="exact, close or unmatched")
    context: str = Field(description="Context tag of the occurrence")

    def key(self) -> tuple[str, str, Optional[str]]:
        return (self.file, self.value, self.hex)


_ENTRIES = TypeAdapter(List[BaselineEntry])


def _key(result: Any) -> tuple[str, str, Optional[str]]:
    return (result.file, result.value, result.hex)


def build_baseline(results: Sequence[Any]) -> list[BaselineEntry]:
    """Snapshot comparison results as baseline entries."""
    return [
        BaselineEntry(
            file=r.file,
            line=r.line,
            column=r.column,
            value=r.value,
            hex=r.hex,
            status=getattr(r.status, "value", r.status),
            context=getattr(r.context, "value", r.context),
        )
        for r in results
    ]


def save_baseline(results: Sequence[Any], path: Union[str, Path]) -> Path:
    """Write a baseline file and return its resolved path."""
    resolved = Path(path).resolve()
    entries = build_baseline(results)
    payload = [entry.model_dump() for entry in entries]
    resolved.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return resolved


def load_baseline(path: Union[str, Path]) -> Optional[list[BaselineEntry]]:
    """Load a baseline file, or None (with a warning) if missing or malformed."""
    resolved = Path(path).resolve()
    if not resolved.exists():
        log.warning(f"Baseline file not found: {resolved}. Showing all results.")
        return None

    try:
        return _ENTRIES.validate_json(resolved.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        log.warning(f"Could not parse baseline file {resolved}: {e.__class__.__name__}. Showing all results.")
        return None


def diff_against_baseline(results: Sequence[T], baseline: Sequence[BaselineEntry]) -> list[T]:
    """Results whose (file, value, hex) key is absent from the baseline."""
    known = {entry.key() for entry in baseline}
    return [r for r in results if _key(r) not in known]

"""
File search collaborator.

Runs a regex over a set of files and yields one ``Occurrence`` per match.
ripgrep (``rg --json``) is used when it is on PATH; otherwise a pure-Python
scanner walks the tree and applies the same include/exclude globs.
"""

from __future__ import annotations

import json
import logging
import os
import re
import shutil
import subprocess
from dataclasses import asdict, dataclass
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, Iterator, Optional, Sequence

from .color.patterns import DEFAULT_FILE_TYPES
from .utils import HardcodeReplacerError

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Always excluded, in addition to user excludes
DEFAULT_EXCLUDES = [
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    "coverage/**",
    ".next/**",
    "*.min.js",
    "*.min.css",
    "*.map",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
]

_BRACES = re.compile(r"\{([^{}]*)\}")


class SearchError(HardcodeReplacerError):
    """The search backend failed (ripgrep exit status 2)."""


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class Occurrence:
    """One regex match in a source file.

    Attributes:
        file: Path as reported by the search backend.
        line: 1-based line number.
        column: 1-based column of the match start.
        match: The matched substring.
        text: The full line, trailing whitespace removed.
    """

    file: str
    line: int
    column: int
    match: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SearchOptions:
    """Filters shared by both backends.

    ``include`` is a single glob that replaces the file-type filter;
    ``file_types`` are bare extensions (``tsx``, ``css``).
    """

    include: Optional[str] = None
    exclude: Sequence[str] = ()
    file_types: Optional[Sequence[str]] = None
    case_sensitive: bool = False

    def include_globs(self) -> list[str]:
        if self.include:
            return [self.include]
        types = self.file_types or DEFAULT_FILE_TYPES
        return [f"**/*.{ext}" for ext in types]

    def exclude_globs(self) -> list[str]:
        excludes = [self.exclude] if isinstance(self.exclude, str) else list(self.exclude)
        return excludes + DEFAULT_EXCLUDES


# =============================================================================
# Backends
# =============================================================================


def has_ripgrep() -> bool:
    """Check whether ``rg`` is available on PATH."""
    return shutil.which("rg") is not None


def _search_paths(paths: Sequence[str]) -> list[str]:
    return list(paths) if paths else ["."]


def _char_column(encoded_line: bytes, byte_offset: int) -> int:
    """1-based character column for a ripgrep byte offset."""
    return len(encoded_line[:byte_offset].decode("utf-8", "replace")) + 1


def parse_ripgrep_json(output: str) -> list[Occurrence]:
    """Turn ``rg --json`` output into occurrences, one per submatch."""
    results: list[Occurrence] = []
    for raw in output.strip().split("\n"):
        if not raw:
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            log.debug("Skipping malformed ripgrep line: %s", raw[:80])
            continue
        if data.get("type") != "match":
            continue

        match_data = data.get("data", {})
        file = (match_data.get("path") or {}).get("text", "")
        line_number = match_data.get("line_number")
        raw_text = (match_data.get("lines") or {}).get("text") or ""
        text = raw_text.rstrip()
        if line_number is None:
            continue

        encoded = raw_text.encode("utf-8")
        for sub in match_data.get("submatches", []):
            results.append(
                Occurrence(
                    file=file,
                    line=line_number,
                    column=_char_column(encoded, sub["start"]),
                    match=(sub.get("match") or {}).get("text", ""),
                    text=text,
                )
            )
    return results


def search_with_ripgrep(
    pattern: str,
    paths: Sequence[str],
    options: SearchOptions,
) -> list[Occurrence]:
    """Search using ``rg --json``.

    Raises:
        SearchError: ripgrep exited with status 2 and produced no matches.
    """
    args = ["rg", "--json"]
    if not options.case_sensitive:
        args.append("-i")
    for glob in options.include_globs():
        args.extend(["--glob", glob])
    for glob in options.exclude_globs():
        args.extend(["--glob", f"!{glob}"])
    args.extend(["-e", pattern])
    args.extend(_search_paths(paths))

    log.debug("Running %s", " ".join(args))
    result = subprocess.run(args, capture_output=True, text=True)

    # 1 means no matches
    if result.returncode == 1:
        return []
    if result.returncode == 2:
        if not result.stdout.strip():
            raise SearchError(f"ripgrep error: {result.stderr.strip()}")
        # Partial failure (e.g. an unreadable file); keep what matched
        log.warning("ripgrep reported errors: %s", result.stderr.strip())

    return parse_ripgrep_json(result.stdout)


def _expand_braces(pattern: str) -> list[str]:
    """Expand ``*.{ts,tsx}`` into ``*.ts``, ``*.tsx``."""
    match = _BRACES.search(pattern)
    if not match:
        return [pattern]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(_expand_braces(pattern[: match.start()] + option + pattern[match.end():]))
    return expanded


def _glob_matches(rel_path: str, glob: str) -> bool:
    """Approximate ripgrep's gitignore-style glob semantics."""
    for pattern in _expand_braces(glob):
        if pattern.startswith("**/"):
            pattern = pattern[3:]
        if pattern.endswith("/**"):
            directory = pattern[:-3]
            path = PurePosixPath(rel_path)
            if "/" in directory:
                if any(fnmatch(parent.as_posix(), directory) for parent in path.parents):
                    return True
            elif any(fnmatch(part, directory) for part in path.parts[:-1]):
                return True
            continue
        if "/" in pattern:
            if fnmatch(rel_path, pattern):
                return True
        elif fnmatch(PurePosixPath(rel_path).name, pattern):
            return True
    return False


def _walk(root: Path, options: SearchOptions) -> Iterator[Path]:
    includes = options.include_globs()
    excludes = options.exclude_globs()

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root)
        dirnames[:] = sorted(
            d for d in dirnames
            if not any(_glob_matches((rel_dir / d / "_").as_posix(), g) for g in excludes)
        )
        for name in sorted(filenames):
            rel_path = (current / name).relative_to(root).as_posix()
            if any(_glob_matches(rel_path, g) for g in excludes):
                continue
            if any(_glob_matches(rel_path, g) for g in includes):
                yield current / name


def _scan_file(path: Path, regex: re.Pattern[str], display: str) -> Iterator[Occurrence]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Skipping unreadable file %s: %s", path, e)
        return

    for line_number, line in enumerate(content.split("\n"), start=1):
        for match in regex.finditer(line):
            yield Occurrence(
                file=display,
                line=line_number,
                column=match.start() + 1,
                match=match.group(0),
                text=line.rstrip(),
            )


def search_with_python(
    pattern: str,
    paths: Sequence[str],
    options: SearchOptions,
) -> list[Occurrence]:
    """Pure-Python equivalent of the ripgrep backend.

    Explicit file paths are always searched; directories are walked and
    filtered by the include/exclude globs.
    """
    flags = 0 if options.case_sensitive else re.IGNORECASE
    regex = re.compile(pattern, flags)

    results: list[Occurrence] = []
    for raw in _search_paths(paths):
        root = Path(raw)
        if root.is_file():
            results.extend(_scan_file(root, regex, raw))
        elif root.is_dir():
            for path in _walk(root, options):
                display = path.as_posix() if raw != "." else path.relative_to(root).as_posix()
                results.extend(_scan_file(path, regex, display))
        else:
            log.warning("Path not found: %s", raw)
    return results


def search(
    pattern: str,
    paths: Optional[Sequence[str]] = None,
    options: Optional[SearchOptions] = None,
) -> list[Occurrence]:
    """Search ``paths`` for ``pattern`` with the best available backend."""
    paths = paths or []
    options = options or SearchOptions()
    if has_ripgrep():
        return search_with_ripgrep(pattern, paths, options)
    log.debug("ripgrep not found, using the Python scanner")
    return search_with_python(pattern, paths, options)


def search_many(
    patterns: Iterable[str],
    paths: Optional[Sequence[str]] = None,
    options: Optional[SearchOptions] = None,
) -> list[Occurrence]:
    """Run several searches and concatenate the results."""
    results: list[Occurrence] = []
    for pattern in patterns:
        results.extend(search(pattern, paths, options))
    return results

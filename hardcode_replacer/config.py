"""
Project configuration.

A config file is looked up from the first scan path upward to the filesystem
root; the first file found wins. JSON and YAML are accepted:

    {
      "exclude": ["**/*.test.*", "**/*.stories.*"],
      "include": "*.{tsx,jsx}",
      "vars": "src/styles/variables.css",
      "threshold": 10,
      "named": true,
      "minCount": 2,
      "minClasses": 3,
      "tailwindVersion": 4
    }

Command-line options always win; a config value only applies when the
matching option was left at its default.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .class_patterns import DEFAULT_MIN_CLASSES, DEFAULT_MIN_COUNT
from .utils import log

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CONFIG_FILES = [
    ".hardcode-replacerrc.json",
    ".hardcode-replacerrc",
    ".hardcode-replacerrc.yaml",
    ".hardcode-replacerrc.yml",
    "hardcode-replacer.config.json",
    "hardcode-replacer.config.yaml",
]

# Delta-E at or below which a palette entry counts as a close match
DEFAULT_THRESHOLD = 10.0


# =============================================================================
# Model
# =============================================================================


class ProjectConfig(BaseModel):
    """Contents of a project config file. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    exclude: List[str] = Field(default_factory=list, description="Globs to exclude")
    include: Optional[str] = Field(None, description="Glob to include")
    vars: Optional[str] = Field(None, description="Variables file for compare/tailwind")
    threshold: Optional[float] = Field(None, ge=0, description="Close-match Delta-E")
    named: Optional[bool] = Field(None, description="Detect named CSS colors")
    min_count: Optional[int] = Field(None, alias="minCount", ge=1)
    min_classes: Optional[int] = Field(None, alias="minClasses", ge=1)
    tailwind_version: Optional[Literal[3, 4]] = Field(None, alias="tailwindVersion")

    @field_validator("exclude", mode="before")
    @classmethod
    def _exclude_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


# =============================================================================
# Loading
# =============================================================================


def find_config_file(start_dir: Union[str, Path] = ".") -> Optional[Path]:
    """Walk from ``start_dir`` up to the root and return the first config file."""
    current = Path(start_dir).resolve()
    if current.is_file():
        current = current.parent

    for directory in [current, *current.parents]:
        for filename in CONFIG_FILES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def _parse_config_text(path: Path, content: str) -> Any:
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(content)
    return json.loads(content)


def load_config(start_dir: Union[str, Path] = ".") -> ProjectConfig:
    """Load the nearest config file; an empty config if none or malformed."""
    path = find_config_file(start_dir)
    if path is None:
        return ProjectConfig()

    logger.debug("Using config file %s", path)
    try:
        data = _parse_config_text(path, path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data or {})
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        log.warning(f"Ignoring unreadable config file {path}: {e}")
    except ValidationError as e:
        log.warning(f"Ignoring invalid config file {path}: {e.error_count()} error(s)")
    return ProjectConfig()


def merge_options(args: argparse.Namespace, config: ProjectConfig) -> argparse.Namespace:
    """Fill options left at their defaults from the config file, in place."""
    if config.exclude and hasattr(args, "exclude") and not args.exclude:
        args.exclude = list(config.exclude)
    if config.include and hasattr(args, "include") and not args.include:
        args.include = config.include
    if config.vars and hasattr(args, "vars") and not args.vars:
        args.vars = config.vars
    if config.threshold is not None and getattr(args, "threshold", None) == DEFAULT_THRESHOLD:
        args.threshold = config.threshold
    if config.named is False and hasattr(args, "named"):
        args.named = False
    if config.min_count and getattr(args, "min_count", None) == DEFAULT_MIN_COUNT:
        args.min_count = config.min_count
    if config.min_classes and getattr(args, "min_classes", None) == DEFAULT_MIN_CLASSES:
        args.min_classes = config.min_classes
    if config.tailwind_version and hasattr(args, "tailwind_version") and not args.tailwind_version:
        args.tailwind_version = config.tailwind_version
    return args

"""
Tests for project config discovery, validation and merging.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hardcode_replacer.cli import create_parser
from hardcode_replacer.config import (
    DEFAULT_THRESHOLD,
    ProjectConfig,
    find_config_file,
    load_config,
    merge_options,
)

from .conftest import WriteFiles


@pytest.mark.evergreen
class TestFindConfig:
    """Config file discovery."""

    def test_none(self, project: Path) -> None:
        """No config file anywhere up the tree gives defaults."""
        assert load_config(project) == ProjectConfig()

    def test_walks_upward(self, write_files: WriteFiles) -> None:
        """A config in a parent directory is found from a subdirectory."""
        root = write_files({
            ".hardcode-replacerrc.json": json.dumps({"vars": "tokens.css"}),
            "src/deep/file.tsx": "",
        })
        assert find_config_file(root / "src" / "deep") == root / ".hardcode-replacerrc.json"
        assert find_config_file(root / "src" / "deep" / "file.tsx") == root / ".hardcode-replacerrc.json"

    def test_priority(self, write_files: WriteFiles) -> None:
        """The rc file wins over the config.json name in the same directory."""
        root = write_files({
            "hardcode-replacer.config.json": "{}",
            ".hardcode-replacerrc.json": "{}",
        })
        assert find_config_file(root).name == ".hardcode-replacerrc.json"


@pytest.mark.evergreen
class TestLoadConfig:
    """Parsing and validation."""

    def test_json(self, write_files: WriteFiles) -> None:
        """JSON config with camelCase keys."""
        root = write_files({
            ".hardcode-replacerrc.json": json.dumps({
                "exclude": ["**/*.test.*"],
                "vars": "src/styles/variables.css",
                "threshold": 5,
                "minCount": 3,
                "tailwindVersion": 4,
                "somethingElse": True,
            }),
        })
        config = load_config(root)
        assert config.exclude == ["**/*.test.*"]
        assert config.vars == "src/styles/variables.css"
        assert config.threshold == 5
        assert config.min_count == 3
        assert config.tailwind_version == 4

    def test_yaml(self, write_files: WriteFiles) -> None:
        """YAML config; a string exclude becomes a list."""
        root = write_files({
            ".hardcode-replacerrc.yaml": "exclude: 'legacy/**'\nnamed: false\nminClasses: 3\n",
        })
        config = load_config(root)
        assert config.exclude == ["legacy/**"]
        assert config.named is False
        assert config.min_classes == 3

    def test_extensionless_rc_is_json(self, write_files: WriteFiles) -> None:
        """.hardcode-replacerrc is read as JSON."""
        root = write_files({".hardcode-replacerrc": '{"threshold": 2.5}'})
        assert load_config(root).threshold == 2.5

    def test_malformed(self, write_files: WriteFiles, capsys: pytest.CaptureFixture[str]) -> None:
        """Unparseable config warns and falls back to defaults."""
        root = write_files({".hardcode-replacerrc.json": "{oops"})
        assert load_config(root) == ProjectConfig()
        assert "Ignoring unreadable config file" in capsys.readouterr().out

    def test_invalid_values(self, write_files: WriteFiles, capsys: pytest.CaptureFixture[str]) -> None:
        """Values failing validation warn and fall back to defaults."""
        root = write_files({".hardcode-replacerrc.json": json.dumps({"threshold": -1, "tailwindVersion": 5})})
        assert load_config(root) == ProjectConfig()
        assert "Ignoring invalid config file" in capsys.readouterr().out

    def test_empty_yaml(self, write_files: WriteFiles) -> None:
        """An empty YAML file is an empty config."""
        root = write_files({".hardcode-replacerrc.yml": ""})
        assert load_config(root) == ProjectConfig()


@pytest.mark.evergreen
class TestMergeOptions:
    """Config values fill CLI options left at their defaults."""

    def test_fills_defaults(self) -> None:
        """Config applies where the CLI was silent."""
        args = create_parser().parse_args(["compare", "src"])
        config = ProjectConfig(vars="tokens.css", threshold=4, exclude=["legacy/**"])
        merge_options(args, config)
        assert args.vars == "tokens.css"
        assert args.threshold == 4
        assert args.exclude == ["legacy/**"]

    def test_cli_wins(self) -> None:
        """Explicit CLI values are kept."""
        args = create_parser().parse_args(
            ["compare", "src", "--vars", "cli.css", "--threshold", "7", "--exclude", "x/**"]
        )
        merge_options(args, ProjectConfig(vars="tokens.css", threshold=4, exclude=["legacy/**"]))
        assert args.vars == "cli.css"
        assert args.threshold == 7
        assert args.exclude == ["x/**"]

    def test_only_relevant_options(self) -> None:
        """Options a command does not have are not added."""
        args = create_parser().parse_args(["patterns", "src"])
        merge_options(args, ProjectConfig(vars="tokens.css", minCount=4, tailwindVersion=4))
        assert not hasattr(args, "vars")
        assert not hasattr(args, "tailwind_version")
        assert args.min_count == 4

    def test_named_disabled(self) -> None:
        """named: false turns off named color detection."""
        args = create_parser().parse_args(["colors"])
        merge_options(args, ProjectConfig(named=False))
        assert args.named is False

    def test_tailwind_version(self) -> None:
        """Config version applies unless given on the command line."""
        args = create_parser().parse_args(["tailwind"])
        merge_options(args, ProjectConfig(tailwindVersion=4))
        assert args.tailwind_version == 4

        args = create_parser().parse_args(["tailwind", "--tailwind-version", "3"])
        merge_options(args, ProjectConfig(tailwindVersion=4))
        assert args.tailwind_version == 3

    def test_default_threshold(self) -> None:
        """The default close-match threshold."""
        assert create_parser().parse_args(["compare"]).threshold == DEFAULT_THRESHOLD == 10.0

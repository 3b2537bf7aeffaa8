"""
Shared pytest fixtures for hardcode-replacer tests.

Provides throwaway project trees and an in-process CLI runner. Searches
always use the pure-Python scanner so results do not depend on whether
ripgrep is installed.

Test Tier Markers:
  @pytest.mark.evergreen - Tests that always run, never skip (production tests)
  @pytest.mark.dev       - Development/WIP tests, toggle-able
"""

from __future__ import annotations

import io
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Callable, Generator

import pytest

from hardcode_replacer import search as search_module
from hardcode_replacer.utils import log


# =============================================================================
# Test Data Constants
# =============================================================================

TOKENS_CSS = """\
:root {
  --primary: #10b981;
  --danger: #ef4444;
  --gray-500: #6b7280;
  --spacing: 4px;
}
"""

BUTTON_TSX = """\
export function Button() {
  return <button style={{ color: '#10b981', borderColor: '#ef4444', background: '#123456' }}>Go</button>;
}
"""

WriteFiles = Callable[[dict[str, str]], Path]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test tiers."""
    config.addinivalue_line(
        "markers",
        "evergreen: tests that always run, never skip (production tests)"
    )
    config.addinivalue_line(
        "markers",
        "dev: development/WIP tests, toggle-able for active development"
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def python_search(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Force the Python scanner and plain, stdout-routed console output."""
    monkeypatch.setattr(search_module, "has_ripgrep", lambda: False)
    log.set_color(False)
    log.set_stderr(False)
    yield
    log.set_stderr(False)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory that is also the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_files(project: Path) -> WriteFiles:
    """Write ``{relative_path: content}`` into the project and return its root."""

    def _write(files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            path = project / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return project

    return _write


@pytest.fixture
def sample_project(write_files: WriteFiles) -> Path:
    """Project with a token stylesheet and one component using hardcoded colors."""
    return write_files({
        "styles/tokens.css": TOKENS_CSS,
        "src/Button.tsx": BUTTON_TSX,
    })


# =============================================================================
# CLI Runner
# =============================================================================


class CLIRunner:
    """Helper class to run CLI commands in-process with captured output."""

    def run(self, args: list[str]) -> "CLIResult":
        """Run CLI with given args and return result.

        Args:
            args: Command line arguments (without 'hardcode-replacer' prefix)

        Returns:
            CLIResult with return code and captured output
        """
        from hardcode_replacer.cli import main

        stdout_capture = io.StringIO()
        stderr_capture = io.StringIO()

        with redirect_stdout(stdout_capture), redirect_stderr(stderr_capture):
            try:
                returncode = main(args)
            except SystemExit as e:
                returncode = e.code if isinstance(e.code, int) else 1

        return CLIResult(
            returncode=returncode or 0,
            stdout=stdout_capture.getvalue(),
            stderr=stderr_capture.getvalue(),
        )


class CLIResult:
    """Result of running a CLI command."""

    def __init__(self, returncode: int, stdout: str, stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def __repr__(self) -> str:
        return f"CLIResult(returncode={self.returncode}, stdout={self.stdout[:100]!r}...)"


@pytest.fixture
def cli_runner(project: Path) -> CLIRunner:
    """CLI runner whose working directory is the temporary project."""
    return CLIRunner()

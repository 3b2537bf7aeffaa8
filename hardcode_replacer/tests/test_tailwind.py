"""
Tests for Tailwind class parsing, version detection and the tailwind scan.
"""

from __future__ import annotations

import re

import pytest

from hardcode_replacer.color.tailwind import (
    TailwindClass,
    build_tailwind_color_pattern,
    detect_tailwind_version,
    parse_tailwind_color_class,
)
from hardcode_replacer.commands.compare import MatchStatus
from hardcode_replacer.commands.tailwind import find_tailwind, tailwind_json
from hardcode_replacer.variables import parse_css_colors

from .conftest import WriteFiles


V4_CSS = """\
@import "tailwindcss";

@theme {
  --color-brand: #10b981;
  --color-danger: oklch(0.63 0.26 29);
  --font-sans: Inter, sans-serif;
}
"""


@pytest.mark.evergreen
class TestParseClass:
    """Tests for parse_tailwind_color_class."""

    def test_shaded(self) -> None:
        """prefix-color-shade."""
        assert parse_tailwind_color_class("bg-red-500") == TailwindClass(prefix="bg", color="red", shade="500")

    def test_shaded_with_opacity(self) -> None:
        """Opacity modifier after a slash."""
        parsed = parse_tailwind_color_class("border-slate-200/50")
        assert parsed is not None
        assert parsed.shade == "200"
        assert parsed.opacity == "50"

    def test_special(self) -> None:
        """Shade-less special colors."""
        assert parse_tailwind_color_class("text-white/50") == TailwindClass(prefix="text", color="white", opacity="50")
        assert parse_tailwind_color_class("fill-current") == TailwindClass(prefix="fill", color="current")

    def test_arbitrary(self) -> None:
        """Bracketed arbitrary values."""
        assert parse_tailwind_color_class("border-[#ff0000]") == TailwindClass(prefix="border", arbitrary="#ff0000")

    @pytest.mark.parametrize("cls", ["flex", "bg-primary", "p-4", "text-lg"])
    def test_not_color_classes(self, cls: str) -> None:
        """Non-color utilities parse to None."""
        assert parse_tailwind_color_class(cls) is None

    def test_to_dict(self) -> None:
        """Serializes every field."""
        assert TailwindClass(prefix="bg", color="red", shade="500").to_dict() == {
            "prefix": "bg",
            "color": "red",
            "shade": "500",
            "opacity": None,
            "arbitrary": None,
        }


@pytest.mark.evergreen
class TestSearchPattern:
    """Tests for build_tailwind_color_pattern."""

    def test_matches(self) -> None:
        """All three class shapes are found on one line."""
        line = '<div className="bg-red-500 hover:text-white/50 border-[#10b981] flex p-4">'
        found = re.findall(build_tailwind_color_pattern(), line)
        assert found == ["bg-red-500", "text-white/50", "border-[#10b981]"]

    def test_longest_shade(self) -> None:
        """Three-digit shades are not cut to their two-digit prefix."""
        assert re.findall(build_tailwind_color_pattern(), "bg-blue-950") == ["bg-blue-950"]


@pytest.mark.evergreen
class TestVersion:
    """Tailwind v4 detection and theme parsing."""

    def test_v3_default(self, write_files: WriteFiles) -> None:
        """Without an @theme block the project is v3."""
        root = write_files({"src/app.css": "@tailwind base;\n"})
        assert detect_tailwind_version([str(root / "src")]) == 3

    def test_v4_entry_point(self, write_files: WriteFiles) -> None:
        """An @theme block in a known entry point means v4."""
        root = write_files({"src/globals.css": V4_CSS})
        assert detect_tailwind_version([str(root / "src")]) == 4

    def test_v4_explicit_css_file(self, write_files: WriteFiles) -> None:
        """A CSS file passed directly is checked too."""
        root = write_files({"styles/brand.css": V4_CSS})
        assert detect_tailwind_version([str(root / "styles" / "brand.css")]) == 4

    def test_theme_colors_load_as_palette(self) -> None:
        """Color declarations in an @theme block become palette entries."""
        assert parse_css_colors(V4_CSS) == {"--color-brand": "#10b981"}


@pytest.mark.evergreen
class TestFindTailwind:
    """End-to-end tailwind scan without the CLI."""

    def test_scan_and_match(self, write_files: WriteFiles) -> None:
        """Arbitrary values are matched against the palette."""
        write_files({
            "src/Card.tsx": (
                'export const Card = () => <div className="bg-red-500 text-white/50 border-[#10b981]" />;\n'
                '// <div className="bg-blue-500" />\n'
            ),
        })
        results = find_tailwind(["src"], palette={"--primary": "#10b981"})

        assert [r.value for r in results] == ["bg-red-500", "text-white/50", "border-[#10b981]"]
        arbitrary = results[2]
        assert arbitrary.status == MatchStatus.EXACT
        assert arbitrary.suggestion == "border-[var(--primary)]"
        assert results[0].status is None

        data = tailwind_json(results, 3)
        assert data["summary"]["totalClasses"] == 3
        assert data["summary"]["byPrefix"] == {"bg": 1, "text": 1, "border": 1}
        assert data["summary"]["byColor"] == {"red": 1, "white": 1, "arbitrary": 1}
        assert data["summary"]["byStatus"] == {"exact": 1}
        entry = data["results"]["src/Card.tsx"][2]
        assert entry["arbitrary"] == "#10b981"
        assert entry["match"]["name"] == "--primary"

    def test_unmatched_arbitrary(self, write_files: WriteFiles) -> None:
        """Far-off arbitrary colors get no suggestion."""
        write_files({"src/a.tsx": '<p className="text-[#ff0000]" />\n'})
        results = find_tailwind(["src"], palette={"--primary": "#10b981"}, threshold=5)
        assert results[0].status == MatchStatus.UNMATCHED
        assert results[0].suggestion is None

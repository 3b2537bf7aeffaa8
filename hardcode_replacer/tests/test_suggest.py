"""
Tests for alpha extraction, color-mix() suggestions, variable name
suggestions and property extraction.
"""

from __future__ import annotations

import pytest

from hardcode_replacer.color.model import RGB
from hardcode_replacer.color.suggest import (
    FALLBACK_VARIABLE_NAME,
    color_mix_suggestion,
    extract_alpha,
    extract_css_property,
    hue_name,
    suggest_variable_name,
)


@pytest.mark.evergreen
class TestExtractAlpha:
    """Tests for extract_alpha."""

    def test_hex8(self) -> None:
        """#rrggbbaa alpha is the last byte over 255."""
        assert extract_alpha("#ff000080") == pytest.approx(0.5, abs=0.01)

    def test_hex4(self) -> None:
        """#rgba alpha digit is doubled."""
        assert extract_alpha("#f008") == pytest.approx(0.53, abs=0.01)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("rgba(255,0,0,0.5)", 0.5),
            ("rgba(255, 0, 0, 0.25)", 0.25),
            ("rgb(255 0 0 / 0.3)", 0.3),
            ("rgb(255 0 0 / 50%)", 0.5),
            ("hsla(0, 100%, 50%, 0.5)", 0.5),
            ("hsl(0 100% 50% / 50%)", 0.5),
        ],
    )
    def test_functional(self, value: str, expected: float) -> None:
        """Legacy fourth argument and modern slash alpha."""
        assert extract_alpha(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["#ff0000", "#ff0000ff", "rgba(255, 0, 0, 1)", "rgb(255, 0, 0)", "red", "", None],
    )
    def test_opaque_or_absent(self, value: str | None) -> None:
        """Opaque and alpha-less values report no alpha."""
        assert extract_alpha(value) is None

    def test_other_functions_ignored(self) -> None:
        """Only rgb and hsl functions are inspected."""
        assert extract_alpha("oklch(0.5 0.1 200 / 0.5)") is None


@pytest.mark.evergreen
class TestColorMix:
    """Tests for color_mix_suggestion."""

    def test_percentage(self) -> None:
        """Alpha becomes a whole percentage."""
        assert color_mix_suggestion("--danger", 0.5) == "color-mix(in srgb, var(--danger) 50%, transparent)"

    def test_rounds(self) -> None:
        """Fractional percentages round to the nearest integer."""
        assert "33%" in color_mix_suggestion("--danger", 0.333)
        assert "13%" in color_mix_suggestion("--danger", 0.125)


@pytest.mark.evergreen
class TestSuggestVariableName:
    """Tests for suggest_variable_name and hue_name."""

    def test_red(self) -> None:
        """Mid-lightness red."""
        assert suggest_variable_name("#ff0000") == "--color-red-500"

    def test_background_prefix(self) -> None:
        """Background properties use the bg prefix."""
        assert suggest_variable_name("#ff0000", "background-color") == "--bg-red-500"
        assert suggest_variable_name("#ff0000", "backgroundColor") == "--bg-red-500"

    def test_border_prefix(self) -> None:
        """Border properties use the border prefix."""
        assert suggest_variable_name("#0000ff", "border-color").startswith("--border-blue")

    def test_gray(self) -> None:
        """Near-equal channels are gray."""
        assert suggest_variable_name("#808080") == "--color-gray-500"

    def test_black_and_white(self) -> None:
        """Extremes get black/white with dark/light shades."""
        assert suggest_variable_name("#000000") == "--color-black-dark"
        assert suggest_variable_name("#ffffff") == "--color-white-light"

    def test_blue_shade(self) -> None:
        """Pure blue is a darker shade."""
        assert suggest_variable_name("#0000ff") == "--color-blue-700"

    def test_unparseable(self) -> None:
        """Unparseable values get the fallback name."""
        assert suggest_variable_name("notacolor") == FALLBACK_VARIABLE_NAME == "--color-custom"

    @pytest.mark.parametrize(
        "rgb,name",
        [
            (RGB(255, 0, 0), "red"),
            (RGB(255, 165, 0), "orange"),
            (RGB(0, 255, 0), "green"),
            (RGB(0, 0, 255), "blue"),
            (RGB(160, 32, 240), "purple"),
            (RGB(255, 0, 128), "pink"),
            (RGB(255, 0, 20), "red"),
        ],
    )
    def test_hue_buckets(self, rgb: RGB, name: str) -> None:
        """Hue angles fall into named buckets, wrapping to red."""
        assert hue_name(rgb) == name


@pytest.mark.evergreen
class TestExtractCssProperty:
    """Tests for extract_css_property."""

    @pytest.mark.parametrize(
        "line,prop",
        [
            ("  background-color: #ff0000;", "background-color"),
            ("  color: rgb(255, 0, 0);", "color"),
            ("  border-color: #ccc;", "border-color"),
            ("  backgroundColor: '#ff0000',", "backgroundColor"),
        ],
    )
    def test_detects(self, line: str, prop: str) -> None:
        """CSS declarations and JS object keys."""
        assert extract_css_property(line) == prop

    def test_none(self) -> None:
        """Lines without a property assignment."""
        assert extract_css_property("  // a comment") is None
        assert extract_css_property("") is None
        assert extract_css_property(None) is None

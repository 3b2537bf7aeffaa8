"""
Tests for context classification of color occurrences.
"""

from __future__ import annotations

import pytest

from hardcode_replacer.context import (
    LINE_RULES,
    AnalysisCache,
    ContextTag,
    analyze_file,
    classify_context,
    context_label,
    is_actionable,
    is_effect_color,
    is_in_block_comment,
)
from hardcode_replacer.search import Occurrence

from .conftest import WriteFiles


def occ(text: str, match: str = "#10b981", file: str = "src/component.tsx") -> Occurrence:
    """Occurrence for a line in a (possibly nonexistent) file."""
    return Occurrence(file=file, line=1, column=1, match=match, text=text)


@pytest.mark.evergreen
class TestLineClassification:
    """Line-level rules, evaluated for files with no file-level signal."""

    def test_css_variable_definition(self) -> None:
        """A custom property declaration in any file."""
        assert classify_context(occ("  --primary-500: #10b981;", file="anything.css")) == ContextTag.CSS_DEFINITION

    def test_meta_tag(self) -> None:
        """theme-color meta tags."""
        text = '<meta name="theme-color" content="#10b981">'
        assert classify_context(occ(text, file="index.html")) == ContextTag.META

    def test_or_fallback(self) -> None:
        """|| '#hex' fallbacks are canvas values."""
        assert classify_context(occ("  return someVar || '#10b981';", file="src/utils.js")) == ContextTag.CANVAS

    def test_runtime_css_read(self) -> None:
        """Lines reading CSS variables at runtime."""
        text = "  const color = getCssVar('--primary') || '#10b981';"
        assert classify_context(occ(text)) == ContextTag.CANVAS

    def test_hex_object_key(self) -> None:
        """A hex literal used as a lookup key."""
        assert classify_context(occ("  '#10b981': 'success',", file="src/utils.js")) == ContextTag.MAPPING

    def test_quoted_property_key(self) -> None:
        """Quoted style-string keys mapping to quoted values."""
        assert classify_context(occ("  'hover:#10b981': 'accent',")) == ContextTag.MAPPING

    def test_css_string_key(self) -> None:
        """css: '...' strings in JS objects."""
        assert classify_context(occ("  css: 'color: #10b981',")) == ContextTag.MAPPING

    def test_generated_markup(self) -> None:
        """Template literals producing markup with interpolation."""
        text = "  const html = `<div style=\"color: #10b981\">${label}</div>`;"
        assert classify_context(occ(text)) == ContextTag.GENERATED

    def test_actionable(self) -> None:
        """A plain style declaration."""
        assert classify_context(occ("  color: #10b981;")) == ContextTag.ACTIONABLE

    def test_rule_order(self) -> None:
        """Rules are named and meta comes first."""
        names = [rule.name for rule in LINE_RULES]
        assert names[0] == "meta-tag"
        assert names.index("hex-object-key") < names.index("or-fallback")


@pytest.mark.evergreen
class TestEffectColors:
    """Pure black/white with alpha."""

    def test_black_shadow(self) -> None:
        """Translucent black in a shadow."""
        text = "  box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);"
        assert classify_context(occ(text, match="rgba(0, 0, 0, 0.1)")) == ContextTag.EFFECT

    def test_white_overlay(self) -> None:
        """Translucent white."""
        text = "  background: rgba(255, 255, 255, 0.5);"
        assert classify_context(occ(text, match="rgba(255, 255, 255, 0.5)")) == ContextTag.EFFECT

    def test_opaque_black_is_actionable(self) -> None:
        """Without alpha, black is an ordinary color."""
        assert classify_context(occ("  color: #000000;", match="#000000")) == ContextTag.ACTIONABLE

    def test_is_effect_color(self) -> None:
        """Only pure black/white with alpha qualify."""
        assert is_effect_color("#00000080")
        assert is_effect_color("rgb(255 255 255 / 10%)")
        assert not is_effect_color("rgba(16, 185, 129, 0.5)")
        assert not is_effect_color("#ffffff")
        assert not is_effect_color(None)

    def test_effect_before_line_rules(self) -> None:
        """The effect check runs before the line rules."""
        text = "  '#00000033': 'overlay',"
        assert classify_context(occ(text, match="#00000033")) == ContextTag.EFFECT


@pytest.mark.evergreen
class TestFileClassification:
    """File-level signals read from disk."""

    def test_canvas_import(self, write_files: WriteFiles) -> None:
        """Files importing canvas libraries are canvas context."""
        write_files({"src/Scene.tsx": "import * as THREE from 'three';\nconst c = '#10b981';\n"})
        result = classify_context(occ("const c = '#10b981';", file="src/Scene.tsx"))
        assert result == ContextTag.CANVAS

    def test_og_image(self, write_files: WriteFiles) -> None:
        """OG image generation is rendered outside CSS."""
        write_files({"src/og.tsx": "import { ImageResponse } from '@vercel/og';\n"})
        assert analyze_file("src/og.tsx").is_canvas_consumer

    def test_css_var_bridge(self, write_files: WriteFiles) -> None:
        """Script files reading CSS variables treat literals as fallbacks."""
        write_files({"src/chart.ts": "const v = getComputedStyle(el);\nconst c = '#10b981';\n"})
        assert classify_context(occ("const c = '#10b981';", file="src/chart.ts")) == ContextTag.CANVAS

    def test_theme_builder(self, write_files: WriteFiles) -> None:
        """createTheme() calls define a theme."""
        write_files({"src/mui.ts": "export default createTheme({ palette: {} });\n"})
        assert classify_context(occ("  main: '#10b981',", file="src/mui.ts")) == ContextTag.THEME_DEFINITION

    def test_definition_file(self) -> None:
        """Token files are theme definitions by path alone."""
        assert classify_context(occ("  primary: '#10b981',", file="src/theme.ts")) == ContextTag.THEME_DEFINITION
        assert classify_context(occ("  primary: '#10b981',", file="src/design-tokens/base.js")) == ContextTag.THEME_DEFINITION

    def test_definition_file_with_var_reference(self) -> None:
        """Lines that already use var() stay actionable."""
        text = "  border: '1px solid var(--x, #10b981)',"
        assert classify_context(occ(text, file="src/colors.ts")) == ContextTag.ACTIONABLE

    def test_mapping_file(self) -> None:
        """Mapper/converter files are lookup tables."""
        assert classify_context(occ("  color: '#10b981',", file="src/StyleMapper.ts")) == ContextTag.MAPPING

    def test_css_definition_beats_file_rules(self) -> None:
        """Custom property declarations win over file-level signals."""
        assert classify_context(occ("  --brand: #10b981;", file="src/theme.ts")) == ContextTag.CSS_DEFINITION

    def test_css_file_not_read(self, write_files: WriteFiles) -> None:
        """Stylesheets are never treated as canvas bridges."""
        write_files({"styles/app.css": "/* getComputedStyle */\n.a { color: #10b981; }\n"})
        info = analyze_file("styles/app.css")
        assert info.is_css_file
        assert not info.has_css_var_usage

    def test_unreadable_file_defaults(self) -> None:
        """Missing files get default signals."""
        info = analyze_file("does/not/exist.tsx")
        assert not info.is_canvas_consumer
        assert not info.is_theme_builder


@pytest.mark.evergreen
class TestAnalysisCache:
    """Per-run memoization."""

    def test_memoizes_and_clears(self, write_files: WriteFiles) -> None:
        """File info is computed once until cleared."""
        write_files({"src/a.tsx": "const a = 1;\n"})
        cache = AnalysisCache()
        first = cache.file_info("src/a.tsx")
        assert cache.file_info("src/a.tsx") is first
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0

    def test_stale_without_clear(self, write_files: WriteFiles) -> None:
        """A reused cache does not see file edits; a new one does."""
        root = write_files({"src/a.tsx": "const a = '#10b981';\n"})
        cache = AnalysisCache()
        assert not cache.file_info("src/a.tsx").is_canvas_consumer
        (root / "src/a.tsx").write_text("import * as d3 from 'd3';\n", encoding="utf-8")
        assert not cache.file_info("src/a.tsx").is_canvas_consumer
        assert AnalysisCache().file_info("src/a.tsx").is_canvas_consumer


@pytest.mark.evergreen
class TestBlockComments:
    """is_in_block_comment."""

    def test_inside_and_after(self, write_files: WriteFiles) -> None:
        """Lines inside an open block comment, not after it closes."""
        write_files({
            "src/a.css": "/*\n  .old { color: #fff; }\n*/\n.new { color: #000; }\n/* one-liner */ .x {}\n",
        })
        cache = AnalysisCache()
        assert is_in_block_comment("src/a.css", 2, cache)
        assert not is_in_block_comment("src/a.css", 4, cache)
        assert not is_in_block_comment("src/a.css", 5, cache)
        assert not is_in_block_comment("src/a.css", 1, cache)


@pytest.mark.evergreen
class TestLabels:
    """Tag labels and actionability."""

    def test_labels(self) -> None:
        """Known tags have display labels."""
        assert context_label(ContextTag.CANVAS) == "CANVAS/WEBGL"
        assert context_label("meta") == context_label(ContextTag.META)

    def test_unknown_label(self) -> None:
        """Unknown tags label as themselves."""
        assert context_label("unknown") == "unknown"

    def test_is_actionable(self) -> None:
        """Only the actionable tag is actionable."""
        assert is_actionable(ContextTag.ACTIONABLE)
        assert is_actionable("actionable")
        assert not is_actionable(ContextTag.EFFECT)
        assert not is_actionable(None)

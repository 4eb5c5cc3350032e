"""Tests for the space-substitution optimizer."""

from __future__ import annotations

from statement_fitter.fitting.density import normalize
from statement_fitter.fitting.measure import AF1206_LINE_WIDTH_PX, CompressionMarker
from statement_fitter.fitting.optimizer import (
    MAX_UNDERFLOW,
    FitStatus,
    _seeded_index,
    _string_hash,
    analyze_text_fit,
    optimization_suggestions,
    optimize_bullet,
    optimize_multiline,
    render,
)


def _bullet(n: int) -> str:
    return "- " + " ".join(["lit"] * n)


class TestHashing:
    def test_string_hash_matches_rolling_hash(self):
        assert _string_hash("a") == 97
        assert _string_hash("hello") == 99162322

    def test_string_hash_wraps_to_signed_32_bit(self):
        assert _string_hash("polygenelubricants") == -(2**31)

    def test_seeded_index_in_range(self):
        for seed in ("a", "Led the team", "polygenelubricants"):
            assert 0 <= _seeded_index(seed, 7) < 7
        assert _seeded_index("anything", 0) == 0

    def test_seeded_index_negative_hash_uses_truncated_remainder(self):
        # 9 * -2**31 + 5 = -19327352827, remainder -52827 rather than 47173
        assert _seeded_index("polygenelubricants", 100) == 52


class TestRender:
    def test_overflow_relative_to_line_width(self):
        rendering = render("Led the team.", 100)
        assert rendering.line_count == 1
        assert rendering.overflow == rendering.full_width - 100
        assert rendering.lines == ["Led the team."]


class TestOptimizeBullet:
    def test_shrinks_overflowing_bullet_onto_one_line(self):
        text = _bullet(37)
        assert render(text).overflow > 0

        result = optimize_bullet(text)

        assert result.status == FitStatus.OPTIMIZED
        assert result.rendering.overflow <= 0
        assert result.rendering.line_count == 1
        assert result.text.startswith("- lit")
        assert CompressionMarker.NARROW.value in result.text
        assert normalize(result.text) == text

    def test_pads_short_bullet(self):
        text = _bullet(35)
        assert render(text).overflow < MAX_UNDERFLOW

        result = optimize_bullet(text)

        assert result.status == FitStatus.OPTIMIZED
        assert MAX_UNDERFLOW < result.rendering.overflow <= 0
        assert CompressionMarker.WIDE.value in result.text

    def test_deterministic(self):
        assert optimize_bullet(_bullet(37)).text == optimize_bullet(_bullet(37)).text

    def test_hopeless_bullet_fails(self):
        result = optimize_bullet(_bullet(100))
        assert result.status == FitStatus.FAILED
        assert result.rendering.overflow > 0

    def test_single_word_cannot_be_padded(self):
        assert optimize_bullet("Led").status == FitStatus.FAILED

    def test_markers_in_input_are_reset(self):
        text = _bullet(37)
        marked = text.replace(" ", CompressionMarker.WIDE.value)
        assert optimize_bullet(marked).text == optimize_bullet(text).text


class TestOptimizeMultiline:
    def test_keeps_compression_that_saves_a_line(self):
        text = " ".join(["lit"] * 37)
        result = optimize_multiline(text)

        assert result.status == FitStatus.OPTIMIZED
        assert result.rendering.line_count == 1

    def test_rejects_negligible_savings(self):
        result = optimize_multiline("Led the team.")
        assert result.status == FitStatus.NOT_OPTIMIZED
        assert result.text == "Led the team."


class TestAnalysis:
    def test_short_statement(self):
        analysis = analyze_text_fit("Led the team.")
        assert analysis.fits_on_single_line
        assert analysis.estimated_lines == 1
        assert analysis.overflow_px == 0
        assert not analysis.is_optimal

    def test_long_statement(self):
        analysis = analyze_text_fit(" ".join(["lit"] * 65))
        assert not analysis.fits_on_single_line
        assert analysis.estimated_lines == 2
        assert analysis.line_width_px == AF1206_LINE_WIDTH_PX

    def test_suggestions_name_abbreviations(self):
        hints = optimization_suggestions("Led training and management of 40 personnel")
        assert 'Consider replacing "and" with "&"' in hints
        assert 'Consider replacing "management" with "mgmt"' in hints
        assert any("only fills" in h for h in hints)

    def test_suggestions_for_overflow(self):
        hints = optimization_suggestions(_bullet(37))
        assert hints[0].startswith("Statement overflows by")
        assert "Can be optimized using space compression." in hints

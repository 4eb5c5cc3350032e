"""Tests for rendered-width measurement."""

from __future__ import annotations

import pytest

from statement_fitter.fitting.measure import (
    CHAR_WIDTHS,
    DEFAULT_CHAR_WIDTH,
    NON_BREAKING_HYPHEN,
    CompressionMarker,
    char_width,
    char_width_category,
    character_width_profile,
    measure_width,
)


class TestMeasureWidth:
    def test_empty_string(self):
        assert measure_width("") == 0

    def test_sum_of_characters(self):
        assert measure_width("Led") == pytest.approx(
            CHAR_WIDTHS["L"] + CHAR_WIDTHS["e"] + CHAR_WIDTHS["d"]
        )

    def test_unknown_character_uses_default(self):
        assert char_width("\u00e9") == DEFAULT_CHAR_WIDTH
        assert measure_width("\u4e2d\u6587") == 2 * DEFAULT_CHAR_WIDTH

    def test_no_kerning(self):
        """Repeated characters accumulate exactly."""
        assert measure_width("m" * 10) == pytest.approx(10 * char_width("m"))

    def test_narrow_marker_is_narrower_than_space(self):
        assert char_width(CompressionMarker.NARROW.value) < char_width(" ")
        assert char_width(CompressionMarker.THIN.value) < char_width(" ")

    def test_wide_marker_is_wider_than_space(self):
        assert char_width(CompressionMarker.WIDE.value) > char_width(" ")

    def test_non_breaking_hyphen_matches_hyphen(self):
        assert char_width(NON_BREAKING_HYPHEN) == char_width("-")


class TestCompressionMarker:
    def test_values(self):
        assert CompressionMarker.NARROW.value == "\u2006"
        assert CompressionMarker.WIDE.value == "\u2004"

    def test_narrow_chars(self):
        assert CompressionMarker.narrow_chars() == {"\u2006", "\u2009"}
        assert CompressionMarker.WIDE.value not in CompressionMarker.narrow_chars()


class TestWidthProfile:
    def test_categories(self):
        assert char_width_category("i") == "narrow"
        assert char_width_category("a") == "average"
        assert char_width_category("W") == "wide"

    def test_profile_counts(self):
        profile = character_width_profile("Wing")
        assert profile == {"narrow": 1, "average": 2, "wide": 1}

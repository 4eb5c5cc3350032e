"""Tests for reversible density transforms."""

from __future__ import annotations

import re

import pytest

from statement_fitter.fitting.density import (
    adjustable_spaces,
    compress,
    expand,
    from_display_text,
    is_compressed,
    normalize,
    saved_width,
    to_display_text,
    toggle_segment,
    visualize,
)
from statement_fitter.fitting.measure import (
    NON_BREAKING_HYPHEN,
    CompressionMarker,
    measure_width,
)
from statement_fitter.fitting.segmenter import segment_into_lines

NARROW = CompressionMarker.NARROW.value
THIN = CompressionMarker.THIN.value
WIDE = CompressionMarker.WIDE.value

STATEMENTS = [
    "Managed the daily operations of a 15 person flight.",
    "- Led 12 Airmen through UCI prep & drove 98% pass rate",
    "Saved $1.2M, cut 2,400 man-hours\u2014the best in AMC",
    "  Trained  40 Amn on tri-service ops ",
    "",
]


class TestCompress:
    def test_compress_then_normalize_restores_original(self, short_statement):
        result = compress(short_statement)

        assert result.changed
        assert NARROW in result.text
        assert normalize(result.text) == short_statement

    @pytest.mark.parametrize("text", STATEMENTS)
    def test_inverse_law(self, text):
        assert normalize(compress(text).text) == text

    @pytest.mark.parametrize("text", STATEMENTS)
    def test_idempotent(self, text):
        once = compress(text).text
        twice = compress(once)
        assert twice.text == once
        assert not twice.changed

    @pytest.mark.parametrize("text", STATEMENTS)
    def test_alphanumerics_unchanged(self, text):
        compressed = compress(text).text
        assert re.sub(r"\s", "", compressed) == re.sub(r"\s", "", text)
        assert len(compressed.split()) == len(text.split())

    @pytest.mark.parametrize("text", STATEMENTS)
    def test_width_never_grows(self, text):
        result = compress(text)
        if result.changed:
            assert measure_width(result.text) < measure_width(text)
        else:
            assert measure_width(result.text) == measure_width(text)

    def test_saved_width(self, short_statement):
        result = compress(short_statement)
        assert saved_width(result) == pytest.approx(
            measure_width(short_statement) - measure_width(result.text)
        )

    def test_digit_groups_kept_together(self):
        assert compress("logged 15 000 sorties").touched == (6, 13)

    def test_dash_and_ampersand_spacing_kept(self):
        result = compress("- Led team & crew")
        assert result.text == f"- Led{NARROW}team & crew"

    def test_leading_trailing_and_double_spaces_untouched(self):
        assert adjustable_spaces(" a  b ") == []


class TestNormalize:
    def test_no_markers_is_noop(self, short_statement):
        assert normalize(short_statement) == short_statement

    def test_all_markers_become_spaces(self):
        assert normalize(f"a{NARROW}b{THIN}c{WIDE}d") == "a b c d"

    def test_idempotent(self):
        text = f"a{NARROW}b"
        assert normalize(normalize(text)) == normalize(text)


class TestExpand:
    def test_expand_widens(self, short_statement):
        result = expand(short_statement)
        assert WIDE in result.text
        assert not is_compressed(result.text)
        assert measure_width(result.text) > measure_width(short_statement)
        assert saved_width(result) < 0
        assert normalize(result.text) == short_statement


class TestToggleSegment:
    def test_toggle_only_touches_segment(self, two_line_statement):
        first, second = segment_into_lines(two_line_statement)
        toggled = toggle_segment(two_line_statement, first)

        assert is_compressed(toggled[first.start:first.end])
        assert toggled[second.start:] == two_line_statement[second.start:]
        assert len(toggled) == len(two_line_statement)

    def test_toggle_twice_restores(self, two_line_statement):
        first = segment_into_lines(two_line_statement)[0]
        toggled = toggle_segment(two_line_statement, first)
        restored = toggle_segment(toggled, segment_into_lines(toggled)[0])
        assert restored == two_line_statement


    def test_toggle_restores_padded_line(self):
        text = " ".join(["lit"] * 30)
        padded = text.replace(" ", WIDE)
        [segment] = segment_into_lines(padded)

        assert not is_compressed(padded)
        assert toggle_segment(padded, segment) == text


class TestDisplayText:
    def test_hyphen_round_trip(self):
        display = to_display_text("tri-service")
        assert display == f"tri{NON_BREAKING_HYPHEN}service"
        assert from_display_text(display) == "tri-service"

    def test_visualize(self):
        assert visualize(f"a{NARROW}b{WIDE}c d") == "a\u22c5b\u00b7c d"

"""Greedy word-wrap of statement text into the visual lines of a form field."""

from __future__ import annotations

import re
from dataclasses import dataclass

from statement_fitter.fitting.measure import (
    AF1206_LINE_WIDTH_PX,
    CompressionMarker,
    measure_width,
)

# \s covers the Unicode marker spaces, so markers are wrap points like " ".
# Hyphens are not: the 1206 PDF keeps "tri-service" together.
_WORD_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class VisualLineSegment:
    """One wrapped line of a statement, addressed by offsets into the full text."""

    text: str
    start: int
    end: int
    width: float
    is_compressed: bool
    exceeds_budget: bool = False


@dataclass(frozen=True)
class LineSlot:
    """A fixed editor row; padded rows have no segment and cannot be toggled."""

    index: int
    segment: VisualLineSegment | None

    @property
    def exists(self) -> bool:
        return self.segment is not None


def _make_segment(text: str, start: int, end: int, line_width: float) -> VisualLineSegment:
    line = text[start:end]
    # Trailing whitespace on the last line is invisible and never forces a wrap.
    width = measure_width(line.rstrip())
    return VisualLineSegment(
        text=line,
        start=start,
        end=end,
        width=width,
        is_compressed=any(c in CompressionMarker.narrow_chars() for c in line),
        exceeds_budget=width > line_width,
    )


def segment_into_lines(
    text: str,
    line_width: float = AF1206_LINE_WIDTH_PX,
) -> list[VisualLineSegment]:
    """Split *text* into the lines a renderer would produce at *line_width* px.

    Words are added to the current line while the line, measured with the
    separators actually present in the text, stays within the budget. The
    whitespace run at each wrap point belongs to neither neighbouring segment;
    leading whitespace stays on the first segment and trailing whitespace on
    the last, so offsets always index the original string.

    A word wider than the whole budget is placed alone on its line and the
    segment is flagged with ``exceeds_budget``.

    Empty or whitespace-only text yields no segments.
    """
    words = list(_WORD_RE.finditer(text))
    if not words:
        return []

    segments: list[VisualLineSegment] = []
    line_start = 0
    line_end = words[0].end()

    for match in words[1:]:
        if measure_width(text[line_start:match.end()]) <= line_width:
            line_end = match.end()
            continue
        segments.append(_make_segment(text, line_start, line_end, line_width))
        line_start = match.start()
        line_end = match.end()

    segments.append(_make_segment(text, line_start, len(text), line_width))
    return segments


def rendered_line_count(text: str, line_width: float = AF1206_LINE_WIDTH_PX) -> int:
    """Number of visual lines *text* occupies at *line_width*."""
    return len(segment_into_lines(text, line_width))


def pad_lines(segments: list[VisualLineSegment], slots: int) -> list[LineSlot]:
    """Return exactly max(slots, len(segments)) rows, padding with empty rows."""
    count = max(slots, len(segments))
    return [
        LineSlot(index=i, segment=segments[i] if i < len(segments) else None)
        for i in range(count)
    ]

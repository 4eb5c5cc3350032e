"""Reversible spacing transforms that change a statement's visual density.

Compression state lives in the text itself: narrowed spaces are stored as
``CompressionMarker.NARROW`` so that the saved statement re-renders with the
same wrap. ``normalize`` turns every marker back into an ordinary space.
"""

from __future__ import annotations

from typing import NamedTuple

from statement_fitter.fitting.measure import (
    NON_BREAKING_HYPHEN,
    CompressionMarker,
    char_width,
)
from statement_fitter.fitting.segmenter import VisualLineSegment

# Spacing around these is part of the punctuation ("- Led", "ops & maint").
_SPACING_SENSITIVE = frozenset({"-", NON_BREAKING_HYPHEN, "\u2013", "\u2014", "&"})


class Compression(NamedTuple):
    """Result of ``compress``/``expand``: the new text and the replaced offsets."""

    text: str
    touched: tuple[int, ...]

    @property
    def changed(self) -> bool:
        return bool(self.touched)


def _is_adjustable_space(text: str, i: int) -> bool:
    if text[i] != " " or i == 0 or i == len(text) - 1:
        return False
    before, after = text[i - 1], text[i + 1]
    if before.isspace() or after.isspace():
        return False
    if before.isdigit() and after.isdigit():
        return False
    return before not in _SPACING_SENSITIVE and after not in _SPACING_SENSITIVE


def adjustable_spaces(text: str) -> list[int]:
    """Offsets of the ordinary inter-word spaces that may be swapped for a marker."""
    return [i for i in range(len(text)) if _is_adjustable_space(text, i)]


def _replace_spaces(text: str, marker: CompressionMarker) -> Compression:
    touched = adjustable_spaces(text)
    if not touched:
        return Compression(text, ())
    chars = list(text)
    for i in touched:
        chars[i] = marker.value
    return Compression("".join(chars), tuple(touched))


def compress(text: str) -> Compression:
    """Narrow every adjustable space. Idempotent; alphanumerics are never changed."""
    return _replace_spaces(text, CompressionMarker.NARROW)


def expand(text: str) -> Compression:
    """Widen every adjustable space to pad out a short line."""
    return _replace_spaces(text, CompressionMarker.WIDE)


def normalize(text: str) -> str:
    """Replace every spacing marker with an ordinary space."""
    for marker in CompressionMarker:
        text = text.replace(marker.value, " ")
    return text


def is_compressed(text: str) -> bool:
    return any(c in CompressionMarker.narrow_chars() for c in text)


def has_markers(text: str) -> bool:
    return any(marker.value in text for marker in CompressionMarker)


def saved_width(compression: Compression) -> float:
    """Pixels gained by a ``compress`` result (negative for ``expand``)."""
    return sum(
        char_width(" ") - char_width(compression.text[i]) for i in compression.touched
    )


def toggle_segment(text: str, segment: VisualLineSegment) -> str:
    """Normalize the segment's line if it holds any spacing marker, otherwise compress it.

    Only ``text[segment.start:segment.end]`` is rewritten; the rest of the
    statement is spliced back unchanged.
    """
    line = text[segment.start:segment.end]
    new_line = normalize(line) if has_markers(line) else compress(line).text
    return text[:segment.start] + new_line + text[segment.end:]


def to_display_text(text: str) -> str:
    """Swap hyphens for non-breaking hyphens so an editor does not wrap at them."""
    return text.replace("-", NON_BREAKING_HYPHEN)


def from_display_text(text: str) -> str:
    return text.replace(NON_BREAKING_HYPHEN, "-")


def visualize(text: str) -> str:
    """Make markers visible: narrow spaces as a dot operator, wide as a middle dot."""
    return (
        text.replace(CompressionMarker.NARROW.value, "\u22c5")
        .replace(CompressionMarker.THIN.value, "\u22c5")
        .replace(CompressionMarker.WIDE.value, "\u00b7")
    )

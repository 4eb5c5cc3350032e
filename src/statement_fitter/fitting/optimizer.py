"""Space-substitution optimizer for single-line bullets and multi-line statements.

``optimize_bullet`` swaps ordinary spaces between word pairs for narrow
markers (when the bullet overflows) or wide markers (when it falls short)
until the bullet lands on the line width. Pairs are picked by a string hash so
the same input always produces the same output.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum

from statement_fitter.fitting.density import compress, normalize, saved_width
from statement_fitter.fitting.measure import (
    AF1206_LINE_WIDTH_PX,
    CompressionMarker,
    character_width_profile,
    measure_width,
)
from statement_fitter.fitting.segmenter import VisualLineSegment, segment_into_lines

logger = logging.getLogger(__name__)

# Bullets shorter than this (px below the line width) cannot be padded to fit.
MAX_UNDERFLOW = -4.0

COMMON_ABBREVIATIONS: dict[str, str] = {
    "and": "&",
    "with": "w/",
    "without": "w/o",
    "information": "info",
    "approximately": "approx",
    "percent": "%",
    "number": "#",
    "management": "mgmt",
    "maintenance": "maint",
    "equipment": "equip",
    "operational": "ops",
    "organization": "org",
    "administration": "admin",
    "communication": "comm",
    "requirements": "reqts",
    "personnel": "psnl",
    "training": "trng",
    "professional": "prof",
    "development": "dev",
    "squadron": "sq",
    "headquarters": "HQ",
    "department": "dept",
    "government": "govt",
    "commander": "CC",
    "superintendent": "supt",
    "technical": "tech",
    "sergeant": "Sgt",
}


class FitStatus(IntEnum):
    OPTIMIZED = 0
    FAILED = 1
    NOT_OPTIMIZED = -1


@dataclass
class Rendering:
    """How a text lays out at a given width."""

    segments: list[VisualLineSegment]
    full_width: float
    overflow: float  # full_width - line_width, as if on a single line

    @property
    def lines(self) -> list[str]:
        return [s.text for s in self.segments]

    @property
    def line_count(self) -> int:
        return len(self.segments)


@dataclass
class FitResult:
    status: FitStatus
    text: str
    rendering: Rendering


@dataclass
class TextFitAnalysis:
    text: str
    width_px: float
    line_width_px: float
    fits_on_single_line: bool
    overflow_px: float
    overflow_percent: float
    fill_percent: float
    estimated_lines: int
    is_optimal: bool  # fills 90-100% of the line
    can_be_optimized: bool
    width_profile: dict[str, int] = field(default_factory=dict)


def render(text: str, line_width: float = AF1206_LINE_WIDTH_PX) -> Rendering:
    full_width = measure_width(text.rstrip())
    return Rendering(
        segments=segment_into_lines(text, line_width),
        full_width=full_width,
        overflow=full_width - line_width,
    )


def _string_hash(value: str) -> int:
    """32-bit signed rolling hash (h * 31 + c)."""
    h = 0
    for c in value:
        h = (h * 31 + ord(c)) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def _seeded_index(seed: str, upper: int) -> int:
    """Deterministic integer in [0, upper) derived from *seed*."""
    if upper <= 0:
        return 0
    # Truncated remainder: the sign follows the hash, then abs().
    fraction = abs(math.fmod(9 * _string_hash(seed) + 5, 100000) / 100000)
    return min(int(fraction * upper), upper - 1)


def optimize_bullet(sentence: str, line_width: float = AF1206_LINE_WIDTH_PX) -> FitResult:
    """Adjust inter-word spacing so a one-line bullet fills *line_width*.

    The space after the first word (the bullet dash) is never changed. If even
    replacing every remaining space cannot fit the bullet, the fully adjusted
    text is returned with ``FitStatus.FAILED``.
    """
    sentence = normalize(sentence)
    initial = render(sentence, line_width)
    if initial.overflow == 0:
        return FitResult(FitStatus.OPTIMIZED, sentence, initial)

    words = sentence.rstrip().split()
    if len(words) < 2:
        status = FitStatus.OPTIMIZED if MAX_UNDERFLOW < initial.overflow <= 0 else FitStatus.FAILED
        return FitResult(status, sentence, initial)

    shrinking = initial.overflow > 0
    marker = (CompressionMarker.NARROW if shrinking else CompressionMarker.WIDE).value

    worst_case = words[0] + " " + marker.join(words[1:])
    worst = render(worst_case, line_width)
    if (shrinking and worst.overflow > 0) or (not shrinking and worst.overflow < MAX_UNDERFLOW):
        logger.debug("Bullet cannot be fitted (worst-case overflow %.2f px)", worst.overflow)
        return FitResult(FitStatus.FAILED, worst_case, worst)

    previous = initial
    while True:
        if len(words) <= 2:
            current = render(" ".join(words), line_width)
            ok = (shrinking and current.overflow <= 0) or (
                not shrinking and current.overflow > MAX_UNDERFLOW
            )
            return FitResult(
                FitStatus.OPTIMIZED if ok else FitStatus.FAILED, " ".join(words), current
            )

        # Never merge into the first word, and always leave a pair to merge.
        index = _seeded_index("".join(words), len(words) - 2) + 1
        merged = words[:index] + [words[index] + marker + words[index + 1]] + words[index + 2:]
        candidate = " ".join(merged)
        current = render(candidate, line_width)

        if not shrinking and current.overflow > 0:
            return FitResult(FitStatus.OPTIMIZED, " ".join(words), previous)
        if shrinking and current.overflow <= 0:
            return FitResult(FitStatus.OPTIMIZED, candidate, current)

        words = merged
        previous = current


def optimize_multiline(text: str, line_width: float = AF1206_LINE_WIDTH_PX) -> FitResult:
    """Compress a whole statement and keep it if it saves a line or > 5 px."""
    normalized = normalize(text)
    before = render(normalized, line_width)
    compression = compress(normalized)
    after = render(compression.text, line_width)

    if after.line_count < before.line_count or saved_width(compression) > 5:
        return FitResult(FitStatus.OPTIMIZED, compression.text, after)
    return FitResult(FitStatus.NOT_OPTIMIZED, normalized, before)


def analyze_text_fit(text: str, line_width: float = AF1206_LINE_WIDTH_PX) -> TextFitAnalysis:
    width = measure_width(text.rstrip())
    overflow = width - line_width
    fill_percent = width / line_width * 100
    return TextFitAnalysis(
        text=text,
        width_px=width,
        line_width_px=line_width,
        fits_on_single_line=width <= line_width,
        overflow_px=max(0.0, overflow),
        overflow_percent=max(0.0, overflow / line_width * 100),
        fill_percent=min(100.0, fill_percent),
        estimated_lines=max(1, math.ceil(width / line_width)),
        is_optimal=90 <= fill_percent <= 100,
        can_be_optimized=optimize_bullet(text, line_width).status == FitStatus.OPTIMIZED,
        width_profile=character_width_profile(text),
    )


def optimization_suggestions(statement: str, line_width: float = AF1206_LINE_WIDTH_PX) -> list[str]:
    """Human-readable hints for getting a bullet onto one line."""
    analysis = analyze_text_fit(statement, line_width)
    if analysis.fits_on_single_line and analysis.is_optimal:
        return ["Statement is already optimally sized."]

    suggestions: list[str] = []
    if not analysis.fits_on_single_line:
        suggestions.append(f"Statement overflows by {analysis.overflow_percent:.1f}%")
        if analysis.can_be_optimized:
            suggestions.append("Can be optimized using space compression.")
        else:
            suggestions.append("Consider shortening the statement or using abbreviations.")
    elif analysis.fill_percent < 90:
        suggestions.append(
            f"Statement only fills {analysis.fill_percent:.1f}% - consider adding more impact details."
        )

    lowered = {w.strip(".,;:!?()").lower() for w in statement.split()}
    for word, abbreviation in COMMON_ABBREVIATIONS.items():
        if word in lowered:
            suggestions.append(f'Consider replacing "{word}" with "{abbreviation}"')

    if statement and analysis.width_profile["wide"] / len(statement) > 0.15:
        suggestions.append("Statement has many wide characters (M, W, etc.) - consider rephrasing.")
    return suggestions

"""Rendered-width estimates for AF Form 1206 text.

Widths come from a per-character table for Times New Roman 12pt at 96 DPI
(a 16 px em), so a string's width is the plain sum of its characters' widths.
There is no kerning: long runs of the same character accumulate exactly.

The table follows the pdf-bullets project (https://github.com/AF-VCD/pdf-bullets,
MIT licensed), which measured these values against the real form fonts.
"""

from __future__ import annotations

from enum import Enum

# 6.5 in text column at 96 DPI. Override per form through FittingConfig.
AF1206_LINE_WIDTH_PX = 624.0

# Width of the PDF form field measured by pdf-bullets (202.321 mm at 96 DPI).
PDF_FIELD_LINE_WIDTH_PX = 765.95

DEFAULT_CHAR_WIDTH = 8.0

NON_BREAKING_HYPHEN = "\u2011"


class CompressionMarker(str, Enum):
    """Unicode spaces stored in statement text to change visual density."""

    NARROW = "\u2006"  # six-per-em space
    THIN = "\u2009"  # thin space, produced by older editors
    WIDE = "\u2004"  # three-per-em space

    @classmethod
    def narrow_chars(cls) -> frozenset[str]:
        return frozenset({cls.NARROW.value, cls.THIN.value})

    @classmethod
    def all_chars(cls) -> frozenset[str]:
        return frozenset(m.value for m in cls)


CHAR_WIDTHS: dict[str, float] = {
    " ": 4.0,
    "!": 5.328125,
    '"': 6.53125,
    "#": 8.0,
    "$": 8.0,
    "%": 13.328125,
    "&": 12.4453125,
    "'": 2.8828125,
    "(": 5.328125,
    ")": 5.328125,
    "*": 8.0,
    "+": 9.0234375,
    ",": 4.0,
    "-": 5.328125,
    ".": 4.0,
    "/": 4.4453125,
    **{d: 8.0 for d in "0123456789"},
    ":": 4.4453125,
    ";": 4.4453125,
    "<": 9.0234375,
    "=": 9.0234375,
    ">": 9.0234375,
    "?": 7.1015625,
    "@": 14.734375,
    "A": 11.5546875,
    "B": 10.671875,
    "C": 10.671875,
    "D": 11.5546875,
    "E": 9.7734375,
    "F": 8.8984375,
    "G": 11.5546875,
    "H": 11.5546875,
    "I": 5.328125,
    "J": 6.2265625,
    "K": 11.5546875,
    "L": 9.7734375,
    "M": 14.2265625,
    "N": 11.5546875,
    "O": 11.5546875,
    "P": 8.8984375,
    "Q": 11.5546875,
    "R": 10.671875,
    "S": 8.8984375,
    "T": 9.7734375,
    "U": 11.5546875,
    "V": 11.5546875,
    "W": 15.1015625,
    "X": 11.5546875,
    "Y": 11.5546875,
    "Z": 9.7734375,
    "[": 5.328125,
    "\\": 4.4453125,
    "]": 5.328125,
    "^": 7.5078125,
    "_": 8.0,
    "`": 5.328125,
    "a": 7.1015625,
    "b": 8.0,
    "c": 7.1015625,
    "d": 8.0,
    "e": 7.1015625,
    "f": 5.328125,
    "g": 8.0,
    "h": 8.0,
    "i": 4.4453125,
    "j": 4.4453125,
    "k": 8.0,
    "l": 4.4453125,
    "m": 12.4453125,
    "n": 8.0,
    "o": 8.0,
    "p": 8.0,
    "q": 8.0,
    "r": 5.328125,
    "s": 6.2265625,
    "t": 4.4453125,
    "u": 8.0,
    "v": 8.0,
    "w": 11.5546875,
    "x": 8.0,
    "y": 8.0,
    "z": 7.1015625,
    "{": 7.6796875,
    "|": 3.203125,
    "}": 7.6796875,
    "~": 8.65625,
    CompressionMarker.WIDE.value: 5.33,
    CompressionMarker.THIN.value: 2.67,
    CompressionMarker.NARROW.value: 2.67,
    NON_BREAKING_HYPHEN: 5.328125,
}


def char_width(char: str) -> float:
    """Return the pixel width of a single character."""
    return CHAR_WIDTHS.get(char, DEFAULT_CHAR_WIDTH)


def measure_width(text: str) -> float:
    """Return the width of *text* laid out on one line, ignoring wrapping."""
    return sum(char_width(c) for c in text)


def char_width_category(char: str) -> str:
    """Classify a character as "narrow", "average" or "wide"."""
    width = char_width(char)
    if width <= 5.5:
        return "narrow"
    if width >= 11:
        return "wide"
    return "average"


def character_width_profile(text: str) -> dict[str, int]:
    """Count characters in each width category."""
    counts = {"narrow": 0, "average": 0, "wide": 0}
    for c in text:
        counts[char_width_category(c)] += 1
    return counts

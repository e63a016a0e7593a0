from __future__ import annotations

import re
from collections.abc import Mapping

# Relative advance widths (em fractions) for a generic proportional face.
CHAR_WIDTH_RATIOS: dict[str, float] = {
    # narrow
    "i": 0.28, "l": 0.28, "j": 0.28, ".": 0.28, ",": 0.28, "'": 0.19, "|": 0.26,
    "!": 0.33, ":": 0.28, ";": 0.28, " ": 0.28, "I": 0.33, "f": 0.33, "t": 0.33,
    "r": 0.39, "(": 0.33, ")": 0.33, "-": 0.33, "[": 0.28, "]": 0.28,
    # medium
    "a": 0.56, "b": 0.56, "c": 0.5, "d": 0.56, "e": 0.56, "g": 0.56, "h": 0.56,
    "k": 0.5, "n": 0.56, "o": 0.56, "p": 0.56, "q": 0.56, "s": 0.5, "u": 0.56,
    "v": 0.5, "x": 0.5, "y": 0.5, "z": 0.5,
    "0": 0.56, "1": 0.56, "2": 0.56, "3": 0.56, "4": 0.56,
    "5": 0.56, "6": 0.56, "7": 0.56, "8": 0.56, "9": 0.56,
    "J": 0.5, "L": 0.56, "F": 0.61, "E": 0.67, "P": 0.67, "S": 0.67, "T": 0.61,
    "Z": 0.61, "A": 0.67, "B": 0.67, "K": 0.67, "V": 0.67, "X": 0.67, "Y": 0.67,
    "C": 0.72, "D": 0.72, "H": 0.72, "N": 0.72, "R": 0.72, "U": 0.72,
    "G": 0.78, "O": 0.78, "Q": 0.78,
    # wide
    "m": 0.83, "w": 0.72, "M": 0.83, "W": 0.94, "@": 1.0, "%": 0.89,
}

MONOSPACE_PATTERNS: tuple[str, ...] = (
    "courier",
    "consolas",
    "monaco",
    "menlo",
    "lucidaconsole",
    "inconsolata",
    "sourcecodepro",
    "firacode",
    "mono",
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_DEFAULT_RATIO = 1.0


def is_monospace_font(font_name: str, patterns: tuple[str, ...] = MONOSPACE_PATTERNS) -> bool:
    """Return True if *font_name* looks like a fixed-pitch face.

    Subset prefixes and separators are ignored: ``ABCDEF+Courier-Bold`` matches.
    """
    key = _NON_ALNUM_RE.sub("", font_name.lower())
    return any(p in key for p in patterns)


def char_width_ratio(ch: str, ratios: Mapping[str, float] = CHAR_WIDTH_RATIOS) -> float:
    return ratios.get(ch, _DEFAULT_RATIO)


def _uniform(text: str, total_width: float) -> list[float]:
    each = total_width / len(text)
    return [each] * len(text)


def estimate_char_widths(
    text: str,
    total_width: float,
    font_name: str,
    ratios: Mapping[str, float] = CHAR_WIDTH_RATIOS,
    monospace_patterns: tuple[str, ...] = MONOSPACE_PATTERNS,
) -> list[float]:
    """Split a run's measured width across its characters.

    Monospace fonts get equal shares; anything else is weighted by *ratios*.
    The result always has ``len(text)`` entries summing to *total_width*.
    """
    if not text:
        return []
    if len(text) == 1:
        return [total_width]
    if is_monospace_font(font_name, monospace_patterns):
        return _uniform(text, total_width)

    weights = [char_width_ratio(ch, ratios) for ch in text]
    weight_sum = sum(weights)
    if weight_sum <= 0:
        return _uniform(text, total_width)

    scale = total_width / weight_sum
    return [w * scale for w in weights]

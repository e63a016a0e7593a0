from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import pdfplumber

from pdf_metrics import estimate_char_widths
from pdf_models import TextRun

_LINE_TOLERANCE = 1.0
_GAP_FACTOR = 1.5
_MIN_GAP = 4.0
_FALLBACK_WIDTH_RATIO = 0.5


def _fallback_widths(text: str, total_width: float, font_name: str, font_size: float) -> list[float]:
    if not text:
        return []
    if total_width == 0:
        return [font_size * _FALLBACK_WIDTH_RATIO] * len(text)
    return estimate_char_widths(text, total_width, font_name)


def run_from_item(item: Mapping[str, Any]) -> TextRun:
    """Build a TextRun from an engine text item that lacks per-glyph advances.

    Expects the keys ``str``, ``transform``, ``width``, ``height``, ``fontName``
    and ``hasEOL``; missing ones fall back to empty/zero values.
    """
    text = item.get("str") or ""
    transform = tuple(item.get("transform") or (1, 0, 0, 1, 0, 0))
    width = item.get("width") or 0.0
    font_name = item.get("fontName") or ""
    return TextRun(
        text=text,
        transform=transform,
        width=width,
        height=item.get("height") or transform[0] or 0.0,
        font_name=font_name,
        has_eol=bool(item.get("hasEOL")),
        char_widths=_fallback_widths(text, width, font_name, transform[0]),
    )


def _baseline(c: dict) -> float:
    return c["matrix"][5]


def _make_run(row: list[dict]) -> TextRun:
    first, last = row[0], row[-1]
    text = "".join(c["text"] for c in row)
    width = last["x1"] - first["x0"]
    size = max(c["size"] for c in row)
    # pdfminer keeps the font size out of the char matrix; fold it back in
    a, b, cc, d = first["matrix"][:4]
    k = size / (math.hypot(cc, d) or 1.0)

    measured = [c["x1"] - c["x0"] for c in row]
    measured_total = sum(measured)
    if len(measured) == len(text) and measured_total > 0 and width > 0:
        char_widths = [w * width / measured_total for w in measured]
    else:
        char_widths = _fallback_widths(text, width, first["fontname"], size)

    return TextRun(
        text=text,
        transform=(a * k, b * k, cc * k, d * k, first["x0"], _baseline(first)),
        width=width,
        height=size,
        font_name=first["fontname"],
        char_widths=char_widths,
    )


def _gap_run(prev: TextRun, gap: float) -> TextRun:
    """A one-space run standing in for whitespace the PDF expressed as positioning."""
    a, b, c, d, _, ty = prev.transform
    width = max(gap, 0.0)
    return TextRun(
        text=" ",
        transform=(a, b, c, d, prev.transform[4] + prev.width, ty),
        width=width,
        height=prev.height,
        font_name=prev.font_name,
        char_widths=[width],
    )


def chars_to_runs(chars: Sequence[dict]) -> list[TextRun]:
    """Group pdfplumber ``page.chars`` into positioned text runs, keeping stream order.

    A run ends on a font change, a baseline move, or a horizontal jump. Jumps
    on the same baseline become explicit one-space runs; a baseline move marks
    the previous run as end-of-line.
    """
    runs: list[TextRun] = []
    row: list[dict] = []

    def flush() -> None:
        if row:
            runs.append(_make_run(row))
            row.clear()

    for c in chars:
        if not row:
            row.append(c)
            continue

        prev = row[-1]
        if abs(_baseline(c) - _baseline(prev)) > _LINE_TOLERANCE:
            flush()
            runs[-1].has_eol = True
            row.append(c)
            continue

        gap = c["x0"] - prev["x1"]
        avg_char_width = (prev["x1"] - row[0]["x0"]) / len(row)
        is_gap = gap > max(avg_char_width * _GAP_FACTOR, _MIN_GAP) or gap < -_LINE_TOLERANCE
        if is_gap:
            flush()
            runs.append(_gap_run(runs[-1], gap))
            row.append(c)
            continue

        if c["fontname"] != prev["fontname"] or c["size"] != prev["size"]:
            flush()
        row.append(c)

    flush()
    if runs:
        runs[-1].has_eol = True
    return runs


def page_runs(page: pdfplumber.page.Page) -> list[TextRun]:
    return chars_to_runs(page.chars)

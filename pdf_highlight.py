from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Literal

from pdf_geometry import (
    merge_adjacent_rects,
    pdf_rect_to_css_rect,
    rect_from_transform,
    rotate_pdf_rect,
    slice_rect_horizontal,
)
from pdf_models import Highlight, PageTextIndex, Rect, SearchMatch, TextRun

logger = logging.getLogger(__name__)

_MERGE_TOLERANCE_PX = 2.0


@dataclass
class RunRange:
    """A slice ``[start_offset, end_offset)`` of one run's literal text."""

    run_index: int
    start_offset: int
    end_offset: int


def map_char_range_to_runs(index: PageTextIndex, start_char: int, end_char: int) -> list[RunRange]:
    """Group normalized positions into per-run ranges of original offsets.

    A change of run index always opens a new range. A range end is pushed past
    combining marks that were composed into its last character, and offsets
    are clamped to the run's text so a line-break separator never widens a
    range past its run.
    """
    ranges: list[RunRange] = []
    current: RunRange | None = None

    for pos in range(start_char, end_char):
        run_idx = index.char_runs[pos]
        offset = index.char_offsets[pos]
        if current is None or current.run_index != run_idx:
            current = RunRange(run_idx, offset, offset + 1)
            ranges.append(current)
        else:
            current.end_offset = max(current.end_offset, offset + 1)

    for r in ranges:
        text = index.runs[r.run_index].text
        limit = len(text)
        while r.end_offset < limit and unicodedata.combining(text[r.end_offset]):
            r.end_offset += 1
        r.start_offset = min(r.start_offset, limit)
        r.end_offset = min(r.end_offset, limit)
    return ranges


def _run_slice_fractions(run: TextRun, start: int, end: int) -> tuple[float, float]:
    widths = run.char_widths
    total = sum(widths)
    if not widths or total == 0:
        count = len(run.text)
        logger.debug("no glyph widths for %r, slicing by character count", run.text)
        return start / count, end / count
    return sum(widths[:start]) / total, sum(widths[:end]) / total


def _range_rect(run: TextRun, r: RunRange) -> Rect:
    """Page-space box for part of a run, sliced while the text is still horizontal."""
    full = rect_from_transform(run.transform, run.width, run.height)
    if r.start_offset == 0 and r.end_offset == len(run.text):
        return full
    start_fraction, end_fraction = _run_slice_fractions(run, r.start_offset, r.end_offset)
    return slice_rect_horizontal(full, start_fraction, end_fraction)


def compute_highlight_rects(
    index: PageTextIndex,
    highlight: Highlight,
    page_height: float,
    scale: float,
    rotation: int = 0,
    unrotated_width: float = 0,
    unrotated_height: float = 0,
) -> list[Rect]:
    """Pixel-space overlay rectangles for *highlight* on the page described by *index*.

    *page_height* is the unscaled, unrotated page height. Out-of-range or
    foreign-page highlights yield an empty list.
    """
    if highlight.page != index.page_number:
        return []
    start_char, end_char = highlight.start_char, highlight.end_char
    if start_char < 0 or start_char >= end_char or end_char > len(index):
        return []

    rects: list[Rect] = []
    for r in map_char_range_to_runs(index, start_char, end_char):
        if r.start_offset >= r.end_offset:
            continue
        page_rect = _range_rect(index.runs[r.run_index], r)
        if rotation % 360:
            page_rect = rotate_pdf_rect(page_rect, rotation, unrotated_width, unrotated_height)
        rects.append(pdf_rect_to_css_rect(page_rect, page_height, scale))

    return merge_adjacent_rects(rects, _MERGE_TOLERANCE_PX * scale)


def highlight_from_match(
    match: SearchMatch,
    highlight_id: str,
    color: str,
    style: Literal["filled", "outline"] = "filled",
) -> Highlight:
    return Highlight(
        id=highlight_id,
        page=match.page,
        start_char=match.start_char,
        end_char=match.end_char,
        color=color,
        style=style,
    )

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace

from pdf_models import Rect

_DESCENDER_RATIO = 0.25


def rect_from_transform(transform: Sequence[float], run_width: float, run_height: float) -> Rect:
    """Page-space box of a text run from its ``[a, b, c, d, e, f]`` text matrix.

    ``f`` is the baseline, so the box is pushed down by a quarter of the font
    size to cover descenders. The width is corrected for matrices whose
    horizontal scale differs from the vertical one.
    """
    scale_x, skew_y, skew_x, scale_y, tx, ty = transform[:6]
    font_size = math.hypot(scale_y, skew_x)
    scale_ratio_x = math.hypot(scale_x, skew_y) / font_size if font_size else 1.0
    descender = font_size * _DESCENDER_RATIO
    return Rect(
        x=tx,
        y=ty - descender,
        width=run_width * scale_ratio_x,
        height=run_height + descender,
    )


def pdf_rect_to_css_rect(rect: Rect, page_height: float, scale: float) -> Rect:
    """Flip a bottom-left-origin page rect to top-left-origin pixels at *scale*."""
    return Rect(
        x=rect.x * scale,
        y=(page_height - rect.y - rect.height) * scale,
        width=rect.width * scale,
        height=rect.height * scale,
    )


def rotate_pdf_rect(rect: Rect, rotation: int, orig_width: float, orig_height: float) -> Rect:
    """Map an unrotated page-space rect into a page rotated clockwise by *rotation* degrees.

    Text matrices are always reported against the unrotated page, so this is
    the only bridge into the rotated viewport. Unsupported angles are identity.
    """
    rotation %= 360
    if rotation == 90:
        return Rect(rect.y, orig_width - rect.x - rect.width, rect.height, rect.width)
    if rotation == 180:
        return Rect(
            orig_width - rect.x - rect.width,
            orig_height - rect.y - rect.height,
            rect.width,
            rect.height,
        )
    if rotation == 270:
        return Rect(orig_height - rect.y - rect.height, rect.x, rect.height, rect.width)
    return replace(rect)


def slice_rect_horizontal(rect: Rect, start_fraction: float, end_fraction: float) -> Rect:
    return Rect(
        x=rect.x + rect.width * start_fraction,
        y=rect.y,
        width=rect.width * (end_fraction - start_fraction),
        height=rect.height,
    )


def merge_adjacent_rects(rects: Sequence[Rect], tolerance: float) -> list[Rect]:
    """Coalesce rects that sit on the same line without a visible gap.

    Output is ordered by (y, x). Input rects are never modified.
    """
    if len(rects) <= 1:
        return [replace(r) for r in rects]

    ordered = sorted(rects, key=lambda r: (r.y, r.x))
    merged: list[Rect] = [replace(ordered[0])]
    for current in ordered[1:]:
        last = merged[-1]
        same_line = abs(current.y - last.y) < tolerance
        adjacent = current.x <= last.right + tolerance
        if same_line and adjacent:
            last.width = max(last.right, current.right) - last.x
            last.height = max(last.height, current.height)
        else:
            merged.append(replace(current))
    return merged

from __future__ import annotations

from pdf_metrics import estimate_char_widths
from pdf_models import TextRun


def make_run(
    text: str,
    tx: float = 100.0,
    ty: float = 500.0,
    width: float | None = None,
    has_eol: bool = False,
    font: str = "Helvetica",
    size: float = 12.0,
) -> TextRun:
    if width is None:
        width = len(text) * 6.0
    return TextRun(
        text=text,
        transform=(size, 0.0, 0.0, size, tx, ty),
        width=width,
        height=size,
        font_name=font,
        has_eol=has_eol,
        char_widths=estimate_char_widths(text, width, font),
    )

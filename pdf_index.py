"""Build the searchable text of a page while remembering where every character came from.

Three passes, each carrying a parallel (run index, char offset) map:

  1. concatenate  – join run strings, inserting a space between runs on
                    different lines and rejoining words split by an
                    end-of-line hyphen
  2. normalize    – NFC composition and smart-quote folding
  3. collapse     – squeeze whitespace runs to one space, drop leading and
                    trailing whitespace
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Sequence

from pdf_models import PageTextIndex, TextRun

logger = logging.getLogger(__name__)

_LINE_TOLERANCE = 1.0

_QUOTE_TABLE = str.maketrans({
    "\u201c": '"',
    "\u201d": '"',
    "\u2018": "'",
    "\u2019": "'",
})


def _concatenate(runs: Sequence[TextRun]) -> tuple[list[str], list[int], list[int]]:
    chars: list[str] = []
    src_runs: list[int] = []
    src_offsets: list[int] = []
    prev_idx: int | None = None

    for idx, run in enumerate(runs):
        if not run.text:
            continue

        if prev_idx is not None:
            prev = runs[prev_idx]
            if prev.text.endswith("-") and prev.has_eol:
                chars.pop()
                src_runs.pop()
                src_offsets.pop()
            elif abs(prev.baseline - run.baseline) > _LINE_TOLERANCE:
                chars.append(" ")
                src_runs.append(prev_idx)
                src_offsets.append(len(prev.text))

        for offset, ch in enumerate(run.text):
            chars.append(ch)
            src_runs.append(idx)
            src_offsets.append(offset)
        prev_idx = idx

    return chars, src_runs, src_offsets


def _normalize(
    chars: list[str], src_runs: list[int], src_offsets: list[int]
) -> tuple[list[str], list[int], list[int]]:
    """NFC-compose cluster by cluster so the map stays aligned.

    A cluster is a starter plus its trailing combining marks; every output
    character of a cluster maps to the matching (or last) source character.
    """
    out_chars: list[str] = []
    out_runs: list[int] = []
    out_offsets: list[int] = []

    i = 0
    n = len(chars)
    while i < n:
        j = i + 1
        while j < n and unicodedata.combining(chars[j]):
            j += 1
        composed = unicodedata.normalize("NFC", "".join(chars[i:j])).translate(_QUOTE_TABLE)
        for k, ch in enumerate(composed):
            src = min(i + k, j - 1)
            out_chars.append(ch)
            out_runs.append(src_runs[src])
            out_offsets.append(src_offsets[src])
        i = j

    return out_chars, out_runs, out_offsets


def _collapse_whitespace(
    chars: list[str], src_runs: list[int], src_offsets: list[int]
) -> tuple[list[str], list[int], list[int]]:
    out_chars: list[str] = []
    out_runs: list[int] = []
    out_offsets: list[int] = []
    prev_was_space = False

    for ch, run_idx, offset in zip(chars, src_runs, src_offsets):
        if ch.isspace():
            if out_chars and not prev_was_space:
                out_chars.append(" ")
                out_runs.append(run_idx)
                out_offsets.append(offset)
            prev_was_space = True
        else:
            prev_was_space = False
            out_chars.append(ch)
            out_runs.append(run_idx)
            out_offsets.append(offset)

    if out_chars and out_chars[-1] == " ":
        out_chars.pop()
        out_runs.pop()
        out_offsets.pop()

    return out_chars, out_runs, out_offsets


def build_page_text_index(page_number: int, runs: Sequence[TextRun]) -> PageTextIndex:
    """Return the normalized text and char map for one page's runs, in reading order."""
    raw = _concatenate(runs)
    chars, char_runs, char_offsets = _collapse_whitespace(*_normalize(*raw))

    logger.debug(
        "page %d: %d runs, %d raw chars, %d indexed chars",
        page_number, len(runs), len(raw[0]), len(chars),
    )
    return PageTextIndex(
        page_number=page_number,
        normalized_text="".join(chars),
        char_runs=char_runs,
        char_offsets=char_offsets,
        runs=list(runs),
    )

"""Search a PDF and compute overlay rectangles for every hit.

  1. index_document   – pdfplumber chars → text runs → one PageTextIndex per page
  2. highlight_query  – search all pages, then map each match back to
                        pixel-space rectangles at the requested scale/rotation
"""

from __future__ import annotations

import argparse
import logging
import sys
import warnings
from collections.abc import Mapping
from pathlib import Path

import pdfplumber

from pdf_extract import page_runs
from pdf_highlight import compute_highlight_rects, highlight_from_match
from pdf_index import build_page_text_index
from pdf_models import PageTextIndex, Rect, SearchMatch
from pdf_search import match_context, search_pages

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")

logger = logging.getLogger(__name__)

_MATCH_COLOR = "#ffeb3b"


def index_document(pdf_path: str | Path) -> tuple[dict[int, PageTextIndex], dict[int, tuple[float, float]]]:
    """Return per-page text indices and unrotated (width, height) sizes, keyed by page number."""
    indices: dict[int, PageTextIndex] = {}
    sizes: dict[int, tuple[float, float]] = {}
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            runs = page_runs(page)
            indices[page.page_number] = build_page_text_index(page.page_number, runs)
            sizes[page.page_number] = (float(page.width), float(page.height))
            logger.debug("indexed page %d (%d runs)", page.page_number, len(runs))
    return indices, sizes


def highlight_query(
    indices: Mapping[int, PageTextIndex],
    sizes: Mapping[int, tuple[float, float]],
    query: str,
    scale: float = 1.0,
    rotation: int = 0,
) -> list[tuple[SearchMatch, list[Rect]]]:
    ordered = [indices[n] for n in sorted(indices)]
    results: list[tuple[SearchMatch, list[Rect]]] = []
    for i, match in enumerate(search_pages(ordered, query)):
        width, height = sizes[match.page]
        highlight = highlight_from_match(match, f"match-{i}", _MATCH_COLOR)
        rects = compute_highlight_rects(
            indices[match.page], highlight, height, scale, rotation, width, height
        )
        results.append((match, rects))
    return results


def _print_match(rank: int, match: SearchMatch, rects: list[Rect], index: PageTextIndex, verbose: bool) -> None:
    print(f"  #{rank} page {match.page} [{match.start_char}:{match.end_char}]  {match.text!r}")
    for r in rects:
        print(f"      rect x={r.x:8.2f} y={r.y:8.2f} w={r.width:8.2f} h={r.height:8.2f}")
    if verbose:
        print(f"      Context:     {match_context(index, match)}")


def find_and_highlight(
    pdf_path: str,
    query: str,
    scale: float = 1.0,
    rotation: int = 0,
    verbose: bool = False,
) -> None:
    path = Path(pdf_path)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)

    indices, sizes = index_document(path)
    results = highlight_query(indices, sizes, query, scale, rotation)

    print("=" * 64)
    print(f"RESULTS for {query!r}")
    print("=" * 64)

    if not results:
        print("No matches found in the document.")
        return

    print(f"\n{len(results)} match{'es' if len(results) != 1 else ''}:\n")
    for i, (match, rects) in enumerate(results, 1):
        _print_match(i, match, rects, indices[match.page], verbose)

    print()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search a PDF and print overlay rectangles for each match.",
    )
    parser.add_argument("pdf", help="Path to the PDF file")
    parser.add_argument("query", help="Text to search for (case-insensitive)")
    parser.add_argument(
        "-s", "--scale",
        type=float, default=1.0,
        help="Render scale for pixel coordinates (default: 1.0)",
    )
    parser.add_argument(
        "-r", "--rotation",
        type=int, default=0, choices=(0, 90, 180, 270),
        help="Clockwise page rotation in degrees (default: 0)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show match context and debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    find_and_highlight(
        args.pdf,
        args.query,
        scale=args.scale,
        rotation=args.rotation,
        verbose=args.verbose,
    )


if __name__ == "__main__":
    main()

from __future__ import annotations

from collections.abc import Iterable

from pdf_models import PageTextIndex, SearchMatch


def _fold_case(text: str) -> str:
    """Lower-case *text* without changing its length.

    Characters whose lower case form expands (U+0130 becomes two code points)
    are left as they are, so offsets in the result index the original text.
    """
    folded: list[str] = []
    for ch in text:
        low = ch.lower()
        folded.append(low if len(low) == 1 else ch)
    return "".join(folded)


def search_pages(indices: Iterable[PageTextIndex], query: str) -> list[SearchMatch]:
    """Case-insensitive substring search over page indices, in the order given.

    Overlapping hits are reported: ``"aa"`` in ``"aaa"`` matches at 0 and 1.
    """
    if not query:
        return []

    needle = _fold_case(query)
    results: list[SearchMatch] = []
    for index in indices:
        haystack = _fold_case(index.normalized_text)
        pos = haystack.find(needle)
        while pos != -1:
            end = pos + len(needle)
            results.append(SearchMatch(
                page=index.page_number,
                start_char=pos,
                end_char=end,
                text=index.normalized_text[pos:end],
            ))
            pos = haystack.find(needle, pos + 1)
    return results


def next_match_index(current: int, total: int) -> int:
    """Index of the match after *current*, wrapping to the first; -1 if there are none."""
    if total == 0:
        return -1
    return (current + 1) % total


def prev_match_index(current: int, total: int) -> int:
    if total == 0:
        return -1
    return (current - 1 + total) % total


def match_context(index: PageTextIndex, match: SearchMatch, radius: int = 40) -> str:
    """Return a short excerpt of the page text around *match* for display."""
    text = index.normalized_text
    start = max(0, match.start_char - radius)
    end = min(len(text), match.end_char + radius)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"

from __future__ import annotations

import pytest

from conftest import make_run
from pdf_index import build_page_text_index
from pdf_models import SearchMatch
from pdf_search import match_context, next_match_index, prev_match_index, search_pages


def _page(number, text):
    return build_page_text_index(number, [make_run(text)])


def test_empty_query_returns_nothing():
    assert search_pages([_page(1, "anything")], "") == []


def test_case_insensitive_matches_preserve_original_text():
    matches = search_pages([_page(1, "The cat and the dog")], "the")
    assert matches == [
        SearchMatch(page=1, start_char=0, end_char=3, text="The"),
        SearchMatch(page=1, start_char=12, end_char=15, text="the"),
    ]


def test_overlapping_matches():
    matches = search_pages([_page(1, "aaa")], "aa")
    assert [m.start_char for m in matches] == [0, 1]


def test_matches_ordered_by_page_then_offset():
    pages = [_page(1, "x ab ab"), _page(2, "ab")]
    matches = search_pages(pages, "AB")
    assert [(m.page, m.start_char) for m in matches] == [(1, 2), (1, 5), (2, 0)]


def test_single_page_starts_are_non_decreasing():
    matches = search_pages([_page(1, "abababab aba")], "aba")
    starts = [m.start_char for m in matches]
    assert starts == sorted(starts)


def test_no_match():
    assert search_pages([_page(1, "hello")], "world") == []


def test_query_longer_than_text():
    assert search_pages([_page(1, "hi")], "hello") == []


@pytest.mark.parametrize("current,total,expected", [
    (4, 5, 0), (0, 5, 1), (2, 5, 3), (0, 1, 0), (-1, 0, -1), (-1, 3, 0),
])
def test_next_match_index(current, total, expected):
    assert next_match_index(current, total) == expected


@pytest.mark.parametrize("current,total,expected", [
    (0, 5, 4), (3, 5, 2), (1, 5, 0), (0, 1, 0), (-1, 0, -1), (-1, 3, 1),
])
def test_prev_match_index(current, total, expected):
    assert prev_match_index(current, total) == expected


def test_match_context():
    page = _page(1, "the quick brown fox jumps")
    match = search_pages([page], "brown")[0]
    assert match_context(page, match, radius=4) == "...ick brown fox..."
    assert match_context(page, match, radius=100) == "the quick brown fox jumps"


def test_expanding_lower_case_does_not_shift_offsets():
    page = _page(1, "\u0130stanbul cat")
    [match] = search_pages([page], "cat")
    assert match == SearchMatch(page=1, start_char=9, end_char=12, text="cat")
    assert match.end_char <= len(page)


def test_expanding_character_still_matches_itself():
    page = _page(1, "in \u0130STANBUL today")
    [match] = search_pages([page], "\u0130stanbul")
    assert match.start_char == 3
    assert match.text == "\u0130STANBUL"

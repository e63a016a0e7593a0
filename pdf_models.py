from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class TextRun:
    """One positioned glyph run as reported by the document engine."""

    text: str
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float
    font_name: str = ""
    has_eol: bool = False
    char_widths: list[float] = field(default_factory=list)

    @property
    def baseline(self) -> float:
        return self.transform[5]


@dataclass(frozen=True)
class CharMapping:
    """Source of one normalized character: run index and offset in the run's literal text."""

    run_index: int
    char_offset: int


@dataclass(frozen=True)
class PageTextIndex:
    """Search text for one page plus a per-character map back into its runs.

    ``char_runs[i]`` and ``char_offsets[i]`` locate ``normalized_text[i]``.
    """

    page_number: int
    normalized_text: str
    char_runs: list[int]
    char_offsets: list[int]
    runs: list[TextRun]

    def __len__(self) -> int:
        return len(self.char_runs)

    def mapping(self, position: int) -> CharMapping:
        return CharMapping(self.char_runs[position], self.char_offsets[position])

    @property
    def char_map(self) -> list[CharMapping]:
        return [CharMapping(r, o) for r, o in zip(self.char_runs, self.char_offsets)]


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class Highlight:
    """A caller-owned character range on one page, rendered as an overlay."""

    id: str
    page: int
    start_char: int
    end_char: int
    color: str
    style: Literal["filled", "outline"] = "filled"


@dataclass(frozen=True)
class SearchMatch:
    """A single query hit in a page's normalized text."""

    page: int
    start_char: int
    end_char: int
    text: str

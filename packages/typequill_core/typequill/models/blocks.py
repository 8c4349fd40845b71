"""Formatted text: segments, lines and blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .elements import LineSpacing


class Tag(Enum):
    """Structural role of a block, used by the paginator."""
    CONTACT = "contact"
    HEAD = "head"
    TOC = "toc"


@dataclass(slots=True)
class Segment:
    """A run of text in one display state and the PostScript that prints it."""
    text: str
    ps: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(slots=True)
class Line:
    column: int = 0
    segments: List[Segment] = field(default_factory=list)
    note_refs: List[str] = field(default_factory=list)

    @property
    def length(self) -> int:
        """Total number of characters in the line."""
        return sum(segment.length for segment in self.segments)

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)

    def ps(self) -> str:
        return "".join(segment.ps for segment in self.segments)


@dataclass(slots=True)
class Block:
    """Lines of one structural unit with its vertical padding.

    A negative ``padding_before`` starts a new page; the block is then
    preceded by ``-padding_before - 1`` blank rows on that page.
    """
    lines: List[Line] = field(default_factory=list)
    footnotes: List[Tuple[str, List["Block"]]] = field(default_factory=list)
    line_spacing: LineSpacing = LineSpacing.SINGLE
    padding_before: int = 0
    padding_after: int = 0
    tag: Optional[Tag] = None

    def count_lines(self) -> int:
        """Rows occupied by the block's lines, not counting padding."""
        if not self.lines:
            return 0
        if self.line_spacing is LineSpacing.DOUBLE:
            return len(self.lines) * 2 - 1
        return len(self.lines)


BlockList = List[Block]


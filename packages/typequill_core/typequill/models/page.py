"""Composed pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .blocks import Block, Line, Segment

# A blank row is stored as None.
Row = Optional[Line]


@dataclass(slots=True)
class Page:
    """One sheet: body rows from the top line down and footnote rows.

    ``number`` is the printed page number, or -1 for an unnumbered page.
    """
    number: int
    height: int
    lines: List[Row] = field(default_factory=list)
    footer: List[Row] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return self.height - len(self.lines)


@dataclass(slots=True)
class Typescript:
    """Everything the PostScript writer needs for one document."""
    pages: List[Page]
    short_title: Segment
    short_author_name: Segment
    contact: Optional[Block] = None
    word_count: Optional[int] = None
    has_structure: bool = False

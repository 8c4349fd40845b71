"""Manuscript page geometry.

Horizontal positions are character columns and vertical positions are
line rows counted up from the bottom of the sheet. One column is one
Courier advance (7.2 pt) and one row is one 12 pt line.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .text_metrics import FontMetrics, courier_metrics, page_size

INDENT = 5
LEFT_MARGIN = 10
RIGHT_MARGIN = 74
SLUG_LINE = 62
TOP_LINE = 59
MIDDLE_LINE = 27
BOTTOM_LINE = 6
PART_SKIP = 5
CHAPTER_SKIP = 11
SECTION_SKIP = 5


@dataclass(slots=True)
class PageConfig:
    """Configuration for manuscript pages."""
    indent: int = INDENT
    left_margin: int = LEFT_MARGIN
    right_margin: int = RIGHT_MARGIN
    slug_line: int = SLUG_LINE
    top_line: int = TOP_LINE
    middle_line: int = MIDDLE_LINE
    bottom_line: int = BOTTOM_LINE
    part_skip: int = PART_SKIP
    chapter_skip: int = CHAPTER_SKIP
    section_skip: int = SECTION_SKIP
    metrics: FontMetrics = field(default_factory=courier_metrics)

    @property
    def char_width(self) -> float:
        return self.metrics.char_width

    @property
    def line_height(self) -> float:
        return self.metrics.line_height

    @property
    def page_height(self) -> int:
        """Number of rows between the top and bottom lines, inclusive."""
        return self.top_line - self.bottom_line + 1

    @property
    def line_length(self) -> int:
        """Width of the body column in characters."""
        return self.right_margin - self.left_margin + 1

    @property
    def heading_length(self) -> int:
        """Width used for balanced, centered headings."""
        return self.right_margin - self.left_margin - 4 * self.indent + 1

    @property
    def center(self) -> int:
        return self.left_margin + (self.right_margin - self.left_margin) // 2

    @property
    def page_columns(self) -> int:
        """Number of character columns across the physical sheet."""
        width, _ = page_size()
        return int(width // self.char_width)

    def centered_column(self, length: int) -> int:
        """Start column of a centered run of ``length`` characters."""
        return self.center - length // 2 - length % 2

    def x(self, column: int) -> int:
        """Device x coordinate of a column."""
        return int(round(column * self.char_width))

    def y(self, row: int) -> int:
        """Device y coordinate of a row."""
        return int(round(row * self.line_height))


DEFAULT_CONFIG = PageConfig()

"""
Fixed-pitch text metrics.

Uses ReportLab's built-in Courier metrics for the character advance and
ReportLab's page sizes for the device page. Every glyph in Courier has the
same advance, so a run's width is its character count times the advance.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics

FONT_NAME = "Courier"
FONT_SIZE = 12


@dataclass(slots=True, frozen=True)
class FontMetrics:
    """Advance width and line height of the typewriter face."""
    font_name: str
    font_size: float
    char_width: float
    line_height: float


@lru_cache(maxsize=None)
def courier_metrics(font_size: float = FONT_SIZE) -> FontMetrics:
    """Measure Courier at ``font_size`` through ReportLab."""
    advance = pdfmetrics.stringWidth(" ", FONT_NAME, font_size)
    return FontMetrics(
        font_name=FONT_NAME,
        font_size=font_size,
        char_width=round(advance, 3),
        line_height=float(font_size),
    )


def page_size() -> Tuple[int, int]:
    """US Letter in whole points, as used by the bounding box."""
    width, height = letter
    return int(round(width)), int(round(height))

"""
Paginator: flows formatted blocks into pages.

Body rows fill a page from the top line down. Footnotes are collected into
a pool when the block declaring them arrives and are moved to the footer
of the page holding the first line that references them. A line whose
footnotes do not fit under it starts a new page, so a footnote always
shares its page with its first reference and is never split.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Tuple

from ..exceptions import DanglingReferenceError, LayoutError
from ..models.blocks import Block, BlockList, Line, Tag
from ..models.elements import LineSpacing
from ..models.page import Page, Row
from .page_engine import DEFAULT_CONFIG, PageConfig
from .segments import segment_from_text

logger = logging.getLogger(__name__)

UNNUMBERED = -1
TOC_TITLE = "Table of Contents"


def footnote_rows(blocks: BlockList) -> List[Row]:
    """Footer rows of one footnote: its lines, blank rows between double-spaced lines."""
    rows: List[Row] = []
    for j, block in enumerate(blocks):
        for k, line in enumerate(block.lines):
            rows.append(line)
            last = j == len(blocks) - 1 and k == len(block.lines) - 1
            if not last and block.line_spacing is LineSpacing.DOUBLE:
                rows.append(None)
    return rows


class Paginator:
    """Turns block lists into page lists.

    With ``has_structure`` the document opens with an unnumbered title page
    and numbering starts at ``first_page`` on the page after it. Otherwise
    the first page is numbered ``first_page``.
    """

    def __init__(self, first_page: int = 1, has_structure: bool = False,
                 config: Optional[PageConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.first_page = first_page
        self.has_structure = has_structure
        self.contact: Optional[Block] = None
        self.pages: List[Page] = []
        self._footnotes: Dict[str, BlockList] = {}
        self._placed: Set[str] = set()
        self._next_page_no = UNNUMBERED
        self._numbered = True
        self._last_padding_after = 0

    # state

    def _start_a_new_page(self) -> Page:
        number = self._next_page_no if self._numbered else UNNUMBERED
        page = Page(number=number, height=self.config.page_height)
        self.pages.append(page)
        if self._numbered and self._next_page_no != UNNUMBERED:
            self._next_page_no += 1
        logger.debug(f"Page {len(self.pages)} started (number {page.number})")
        return page

    @property
    def _page(self) -> Page:
        return self.pages[-1]

    # public

    def paginate(self, blocks: BlockList) -> List[Page]:
        """Flow a sequence of blocks into pages.

        Raises:
            DanglingReferenceError: If a note reference has no footnote,
                a footnote label is declared more than once, or a footnote
                is never referenced
            LayoutError: If a line runs off the sheet or a footnote cannot
                fit on any page
        """
        toc: List[Tuple[int, Block]] = []

        if not self.pages:
            if self.has_structure:
                self._start_a_new_page()
                self._next_page_no = self.first_page
            else:
                self._next_page_no = self.first_page
                self._start_a_new_page()

        for block in blocks:
            if block.tag is Tag.CONTACT:
                self.contact = block
            elif block.tag is Tag.TOC:
                toc.append((self._page.number, block))
            else:
                self.compose(block)

        if self._footnotes:
            label = next(iter(self._footnotes))
            raise DanglingReferenceError("Footnote is never referenced", label)

        if toc:
            self.compose_toc(toc)

        logger.debug(f"Paginated {len(blocks)} blocks into {len(self.pages)} pages")
        return self.pages

    def compose(self, block: Block) -> None:
        """Add a block to the current page, after its padding."""
        if block.padding_before < 0:
            self._start_a_new_page()
            padding_before = -block.padding_before - 1
            self._last_padding_after = 0
        else:
            padding_before = block.padding_before

        padding = max(padding_before, self._last_padding_after)
        self._last_padding_after = block.padding_after
        self._page.lines.extend([None] * padding)

        self.compose_block(block)

    def compose_block(self, block: Block) -> None:
        for label, footnote in block.footnotes:
            if label in self._footnotes or label in self._placed:
                raise DanglingReferenceError("Footnote label declared twice", label)
            self._footnotes[label] = footnote

        n = len(block.lines)
        for i, line in enumerate(block.lines):
            self._check_width(line)

            if line.note_refs:
                self._place_footnotes(line)

            remainder = self._page.remaining - 1
            if self._page.footer:
                remainder -= len(self._page.footer) + 2
            if remainder < 1:
                self._start_a_new_page()

            self._page.lines.append(line)

            if (i < n - 1 and block.line_spacing is LineSpacing.DOUBLE
                    and self._page.remaining > 1):
                self._page.lines.append(None)

    def _place_footnotes(self, line: Line) -> None:
        """Reserve footer rows for the footnotes first referenced on ``line``."""
        due: List[Tuple[str, List[Row]]] = []
        for label in line.note_refs:
            if label in self._footnotes:
                due.append((label, footnote_rows(self._footnotes[label])))
            elif label not in self._placed:
                raise DanglingReferenceError("Note reference without a footnote", label)

        if not due:
            return

        footer_height = sum(len(rows) for _, rows in due) + len(due) - 1
        if footer_height + 4 > self.config.page_height:
            raise LayoutError(
                "Footnote does not fit on a page",
                f"{footer_height} rows for {', '.join(label for label, _ in due)} "
                f"referenced by {line.text[:40]!r}",
            )

        remainder = self._page.remaining - 1 - footer_height - 2
        if self._page.footer:
            remainder -= 1 + len(self._page.footer)
        if remainder < 1:
            self._start_a_new_page()

        for label, rows in due:
            del self._footnotes[label]
            self._placed.add(label)
            if self._page.footer:
                self._page.footer.append(None)
            self._page.footer.extend(rows)
            logger.debug(f"Footnote {label!r} placed on page {len(self.pages)}")

    def _check_width(self, line: Line) -> None:
        if line.column + line.length > self.config.page_columns:
            raise LayoutError(
                "Line runs off the page",
                f"{line.length} characters at column {line.column}: {line.text[:40]!r}",
            )

    # table of contents

    def compose_toc(self, entries: List[Tuple[int, Block]]) -> None:
        """Append the table of contents on unnumbered pages."""
        config = self.config
        self._numbered = False
        self.compose(Block(
            lines=[Line(
                column=config.centered_column(len(TOC_TITLE)),
                segments=[segment_from_text(TOC_TITLE)],
            )],
            padding_before=-1,
            padding_after=config.chapter_skip,
            tag=Tag.TOC,
        ))

        for page_no, entry in entries:
            if not entry.lines:
                continue
            block = Block(
                lines=[self._with_leader(entry.lines[0], page_no)] + entry.lines[1:],
                line_spacing=entry.line_spacing,
                padding_before=entry.padding_before,
                padding_after=entry.padding_after,
                tag=entry.tag,
            )

            # Entries are never split across pages.
            if self._page.remaining - 2 < block.count_lines():
                self._start_a_new_page()
                self._last_padding_after = 0

            self.compose(block)

    def _with_leader(self, line: Line, page_no: int) -> Line:
        """Copy of ``line`` with a dot leader out to the page number."""
        n = line.length
        number = str(page_no)
        p = len(number)
        remaining = self.config.line_length - n - p

        if n % 2 == 1:
            remaining -= 1
            before = " "
        else:
            remaining -= 2
            before = "  "
        after = " " if p % 2 == 0 else ""
        dots = ". " * max(remaining // 2, 0)

        leader = segment_from_text(f"{before}{dots}{after}{number}")
        return Line(column=line.column, segments=line.segments + [leader], note_refs=line.note_refs)


def paginate(blocks: BlockList, first_page: int = 1, has_structure: bool = False,
             config: Optional[PageConfig] = None) -> Tuple[List[Page], Optional[Block]]:
    """Flow blocks into pages; returns the pages and the set-aside contact block."""
    paginator = Paginator(first_page, has_structure, config)
    pages = paginator.paginate(blocks)
    return pages, paginator.contact

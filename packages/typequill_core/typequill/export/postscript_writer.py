"""
PostScript writer for composed typescripts.

Renders pages into a PostScript program: the prologue template with the
document comments filled in, then one page per composed page, then the
trailer. The whole program is built in memory before anything is written.
"""

from __future__ import annotations

import logging
import sys
from decimal import ROUND_HALF_EVEN, Decimal
from importlib import resources
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from ..engine.page_engine import DEFAULT_CONFIG, PageConfig
from ..exceptions import RenderingError
from ..models.blocks import Block
from ..models.elements import LineSpacing
from ..models.page import Page, Row, Typescript
from ..version import PROGRAM_NAME

logger = logging.getLogger(__name__)

ENCODING = "iso-8859-15"
FOOTNOTE_RULE = "(____________________) show "


def load_prologue() -> str:
    """Read the prologue template shipped with the package."""
    return resources.files(__package__).joinpath("prologue.ps").read_text(encoding="utf-8")


def round_word_count(word_count: int) -> int:
    """Round to the nearest hundred, or the nearest thousand above 1,000.

    Ties go to the even neighbour.
    """
    scale = Decimal(10000) if word_count > 1000 else Decimal(1000)
    tenths = (Decimal(word_count) / scale).quantize(Decimal("0.1"), rounding=ROUND_HALF_EVEN)
    return int(tenths * scale)


class PostScriptWriter:
    """
    Writes a typescript as PostScript.

    Rows are placed from the top line down, one line height apart; blank
    rows only advance the position. Footnotes are set from the bottom line
    up, under a short rule.
    """

    def __init__(self, typescript: Typescript, config: Optional[PageConfig] = None,
                 creator: str = PROGRAM_NAME):
        self.typescript = typescript
        self.config = config or DEFAULT_CONFIG
        self.creator = creator
        self._out: List[str] = []

    def render(self) -> bytes:
        """Build the complete program as ISO-8859-15 bytes."""
        self._out = []
        self._write_prologue()

        for i, page in enumerate(self.typescript.pages):
            self._start_a_new_page(i + 1, page.number)

            if i == 0:
                if self.typescript.contact is not None:
                    self._write_contact(self.typescript.contact)
                if self.typescript.word_count is not None:
                    self._write_word_count(self.typescript.word_count)

            self._write_rows(page.lines, self.config.left_margin, self.config.top_line, positioned=True)
            if page.footer:
                self._write_footer(page)

            self._out.append("page-end\n")

        self._out.append("%%Trailer\n")
        text = "".join(self._out)
        logger.debug(f"Rendered {len(self.typescript.pages)} pages")
        return text.encode(ENCODING, errors="replace")

    def export(self, output: Union[str, Path, BinaryIO, None] = None) -> int:
        """
        Render and write the program.

        Args:
            output: Output path, binary stream, or None for standard output

        Returns:
            Number of bytes written
        """
        data = self.render()
        try:
            if output is None:
                sys.stdout.buffer.write(data)
                sys.stdout.buffer.flush()
            elif isinstance(output, (str, Path)):
                Path(output).write_bytes(data)
            else:
                output.write(data)
        except OSError as e:
            raise RenderingError("Cannot write PostScript output", str(e)) from e
        return len(data)

    # pieces

    def _moveto(self, column: int, row_y: int) -> str:
        return f"{self.config.x(column)} {row_y} moveto "

    def _write_prologue(self) -> None:
        prologue = load_prologue()
        prologue = prologue.replace("@title@", self.typescript.short_title.text, 1)
        prologue = prologue.replace("@creator@", self.creator, 1)
        prologue = prologue.replace("@pages@", str(len(self.typescript.pages)), 1)
        self._out.append(prologue)

    def _has_slug_line(self, page_no: int) -> bool:
        typescript = self.typescript
        if page_no > 1:
            return True
        if page_no == 1:
            return typescript.has_structure or (
                typescript.contact is None and typescript.word_count is None
            )
        return False

    def _start_a_new_page(self, ordinal: int, page_no: int) -> None:
        self._out.append(f"%%Page: {ordinal} {ordinal}\n")
        self._out.append("page-begin\n")

        if self._has_slug_line(page_no):
            config = self.config
            self._out.append(
                self._moveto(config.left_margin, config.y(config.slug_line))
                + self.typescript.short_author_name.ps
                + "(/) show "
                + self.typescript.short_title.ps
                + f"(/{page_no}) show \n"
            )

    def _write_contact(self, block: Block) -> None:
        config = self.config
        y = config.y(config.top_line)
        step = config.y(1)
        for i, line in enumerate(block.lines):
            if i > 0 and block.line_spacing is LineSpacing.DOUBLE:
                y -= step
            self._out.append(f"{self._moveto(line.column, y)}{line.ps()}\n")
            y -= step

    def _write_word_count(self, word_count: int) -> None:
        config = self.config
        text = f"Approx. {round_word_count(word_count):,} words"
        column = config.right_margin - len(text)
        self._out.append(f"{self._moveto(column, config.y(config.top_line))}({text}) show \n")

    def _write_rows(self, rows: List[Row], column: int, top_row: int, positioned: bool) -> None:
        y = self.config.y(top_row)
        step = self.config.y(1)
        for line in rows:
            if line is not None:
                x_column = line.column if positioned else column
                self._out.append(f"{self._moveto(x_column, y)}{line.ps()}\n")
            y -= step

    def _write_footer(self, page: Page) -> None:
        config = self.config
        rule_row = config.bottom_line + len(page.footer) + 2
        self._out.append(f"{self._moveto(config.left_margin, config.y(rule_row))}{FOOTNOTE_RULE}\n")
        self._write_rows(page.footer, config.left_margin, rule_row - 2, positioned=False)


def render_postscript(typescript: Typescript, config: Optional[PageConfig] = None,
                      creator: str = PROGRAM_NAME) -> bytes:
    """Render a typescript to PostScript bytes."""
    return PostScriptWriter(typescript, config, creator).render()

"""Short title and author surname for the slug line."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..models.blocks import Segment
from ..models.elements import ContainerElement, ElementKind, first_surname
from ..models.tokens import DisplayFlags, FormatFlags, Token, TokenKind, TokenList, text_length
from .page_engine import DEFAULT_CONFIG, PageConfig
from .segments import line_from_tokens, segment_from_text, segment_from_tokens

DEFAULT_TITLE = "Working Title"
DEFAULT_AUTHOR = "ANONYMOUS"
ELLIPSIS = ". . ."

# Columns kept free for the author name and the page number.
SLUG_RESERVE = 20


def _slug_tokens(tokens: Sequence[Token]) -> TokenList:
    """Plain uppercase copies of printable tokens."""
    return [
        replace(token, text=token.text.upper(), dpy=DisplayFlags.NONE)
        for token in tokens
        if token.kind not in (TokenKind.LINE_BREAK, TokenKind.NOTE_REF)
    ]


def shorten(tokens: Sequence[Token], config: Optional[PageConfig] = None) -> Segment:
    """First balanced line of a title, uppercased, with an ellipsis if cut.

    The segment text keeps the title's case; only the PostScript is
    uppercased.
    """
    config = config or DEFAULT_CONFIG
    line_length = config.right_margin - config.left_margin - SLUG_RESERVE
    total = text_length(list(tokens))
    height = total // line_length + 1
    cutoff = total // height

    n = len(tokens)
    end = n
    x = 0
    for i, token in enumerate(tokens):
        if token.frm & FormatFlags.MLB:
            end = i
            break
        if token.frm & FormatFlags.DLB:
            if x + token.length >= cutoff:
                end = i if token.frm & FormatFlags.DOB else i + 1
                break
        x += token.length

    head = list(tokens[:end])
    printable = _slug_tokens(head)
    plaintext = "".join(
        token.text for token in head
        if token.kind not in (TokenKind.LINE_BREAK, TokenKind.NOTE_REF)
    )
    if not printable:
        return Segment(DEFAULT_TITLE, f"({DEFAULT_TITLE.upper()}) show ")
    if end < n:
        printable.extend([Token.space(), Token.punct(ELLIPSIS)])
        plaintext += " " + ELLIPSIS

    segment = segment_from_tokens(printable)
    return Segment(text=plaintext, ps=segment.ps)


def short_title(manuscript: ContainerElement, config: Optional[PageConfig] = None) -> Segment:
    """Slug line title of a manuscript, or ``Working Title`` without one."""
    head = manuscript.find(ElementKind.HEAD)
    title = head.find(ElementKind.TITLE) if head is not None else None
    if title is None or not title.tokens:
        return Segment(DEFAULT_TITLE, f"({DEFAULT_TITLE.upper()}) show ")
    return shorten(title.tokens, config)


def short_author_name(manuscript: ContainerElement) -> Segment:
    """Uppercased surname of the first author, or ``ANONYMOUS``."""
    head = manuscript.find(ElementKind.HEAD)
    authors = head.find(ElementKind.AUTHORS) if head is not None else None
    surname = first_surname(authors) if authors is not None else None
    if surname is None:
        return segment_from_text(DEFAULT_AUTHOR)

    tokens = _slug_tokens(surname.tokens)
    if not tokens:
        return segment_from_text(DEFAULT_AUTHOR)
    line = line_from_tokens(tokens)
    return Segment(text=line.text, ps=line.ps())

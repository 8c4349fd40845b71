"""Conversion of tokens into PostScript segments and lines."""

from __future__ import annotations

from typing import Sequence

from ..models.blocks import Line, Segment
from ..models.tokens import DisplayFlags, Token, TokenKind

_ESCAPES = str.maketrans({"\\": "\\\\", "(": "\\(", ")": "\\)"})


def escape(text: str) -> str:
    """Escape the characters that are special inside a PostScript string."""
    return text.translate(_ESCAPES)


def segment_from_text(text: str) -> Segment:
    """A plain segment shown at the current point."""
    return Segment(text=text, ps=f"({escape(text)}) show ")


def segment_from_tokens(tokens: Sequence[Token]) -> Segment:
    """Build one segment from tokens that share a display state.

    The display state of the first token decides the operators: ``ushow``
    underlines emphasis, and sub/superscripts are raised or lowered by half
    a line and then moved back.
    """
    dpy = tokens[0].dpy if tokens else DisplayFlags.NONE
    text = "".join(token.text for token in tokens if token.kind is not TokenKind.LINE_BREAK)

    prefix = suffix = ""
    if dpy & DisplayFlags.SUB:
        prefix, suffix = "0 -6 rmoveto ", "0 6 rmoveto "
    elif dpy & DisplayFlags.SUP:
        prefix, suffix = "0 6 rmoveto ", "0 -6 rmoveto "

    show = "ushow " if dpy & DisplayFlags.EM else "show "
    return Segment(text=text, ps=f"{prefix}({escape(text)}) {show}{suffix}")


def line_from_tokens(tokens: Sequence[Token]) -> Line:
    """Split tokens into segments at each display state change."""
    segments = []
    note_refs = []
    start = 0
    dpy = tokens[0].dpy if tokens else DisplayFlags.NONE

    for i, token in enumerate(tokens):
        if token.kind is TokenKind.LINE_BREAK:
            continue
        if token.dpy != dpy:
            if i > start:
                segments.append(segment_from_tokens(tokens[start:i]))
            start = i
            dpy = token.dpy
        if token.kind is TokenKind.NOTE_REF and token.text not in note_refs:
            note_refs.append(token.text)

    if len(tokens) > start:
        segments.append(segment_from_tokens(tokens[start:]))

    return Line(column=0, segments=segments, note_refs=note_refs)

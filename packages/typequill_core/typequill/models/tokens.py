"""Text tokens.

Element text is held as a flat list of tokens. A token knows its printed
text, the display state it is shown in (emphasis, subscript, superscript)
and the format flags that tell the line breaker where it may break.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, Flag, auto
from typing import List


class TokenKind(Enum):
    CLOSE = "close"
    LINE_BREAK = "line_break"
    NOTE_REF = "note_ref"
    OPEN = "open"
    PUNCT = "punct"
    SPACE = "space"
    SYMBOL = "symbol"
    WORD = "word"


class DisplayFlags(Flag):
    """Display state, rendered by the PostScript prologue."""
    NONE = 0
    EM = auto()
    SUB = auto()
    SUP = auto()


class FormatFlags(Flag):
    """Line breaking hints."""
    NONE = 0
    FS = auto()    # full stop
    DLB = auto()   # discretionary line break
    MLB = auto()   # mandatory line break
    DOB = auto()   # discard on break


@dataclass(slots=True)
class Token:
    kind: TokenKind
    text: str = ""
    dpy: DisplayFlags = DisplayFlags.NONE
    frm: FormatFlags = FormatFlags.NONE

    @property
    def length(self) -> int:
        if self.kind is TokenKind.LINE_BREAK:
            return 0
        return len(self.text)

    def with_display(self, dpy: DisplayFlags) -> "Token":
        return replace(self, dpy=dpy)

    @classmethod
    def word(cls, text: str, dpy: DisplayFlags = DisplayFlags.NONE) -> "Token":
        return cls(TokenKind.WORD, text, dpy)

    @classmethod
    def space(cls, count: int = 1, dpy: DisplayFlags = DisplayFlags.NONE) -> "Token":
        return cls(TokenKind.SPACE, " " * count, dpy, FormatFlags.DLB | FormatFlags.DOB)

    @classmethod
    def punct(cls, text: str, frm: FormatFlags = FormatFlags.NONE,
              dpy: DisplayFlags = DisplayFlags.NONE) -> "Token":
        return cls(TokenKind.PUNCT, text, dpy, frm)

    @classmethod
    def symbol(cls, text: str, dpy: DisplayFlags = DisplayFlags.NONE) -> "Token":
        return cls(TokenKind.SYMBOL, text, dpy)

    @classmethod
    def note_ref(cls, label: str) -> "Token":
        return cls(TokenKind.NOTE_REF, label, DisplayFlags.SUP)

    @classmethod
    def line_break(cls) -> "Token":
        return cls(TokenKind.LINE_BREAK, "", DisplayFlags.NONE, FormatFlags.MLB)


TokenList = List[Token]


def text_length(tokens: TokenList) -> int:
    return sum(token.length for token in tokens)


def trim_whitespace(tokens: TokenList) -> None:
    """Drop one leading and one trailing space token, in place."""
    if tokens and tokens[0].kind is TokenKind.SPACE:
        del tokens[0]
    if tokens and tokens[-1].kind is TokenKind.SPACE:
        tokens.pop()


def contains_only_whitespace(tokens: TokenList) -> bool:
    return all(token.kind is TokenKind.SPACE for token in tokens)

"""Line breaking for fixed-pitch text.

Three strategies share the same split bookkeeping:

* ``fill``: greedy, as many tokens per line as the column allows.
* ``balance``: lines of roughly equal length, for centered headings.
* ``hang``: greedy with every line after the first indented.

A split is a ``(index, discard)`` pair. The token just before ``index``
is the break token; it is dropped from the line when ``discard`` is set
(spaces, mandatory breaks) and kept otherwise (hyphens, dashes).
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..models.blocks import Line
from ..models.tokens import FormatFlags, Token, text_length
from .page_engine import INDENT
from .segments import line_from_tokens, segment_from_text

logger = logging.getLogger(__name__)

Split = Tuple[int, bool]


def next_word_fits(tokens: Sequence[Token], line_length: int, i: int, x: int) -> bool:
    """Check whether the text up to the next break point fits on the line.

    ``tokens[i]`` is a break token at column ``x``. A following break token
    that is discarded on break does not count toward the width, one that is
    kept does.
    """
    u = x + tokens[i].length

    for token in tokens[i + 1:]:
        if token.frm & FormatFlags.MLB:
            return u <= line_length
        if token.frm & FormatFlags.DLB:
            if token.frm & FormatFlags.DOB:
                return u <= line_length
            return u + token.length <= line_length
        u += token.length

    return u <= line_length


def _lines_from_splits(tokens: Sequence[Token], splits: List[Split]) -> List[Line]:
    lines: List[Line] = []
    for (i, _), (end, discard) in zip(splits, splits[1:]):
        j = end - 1 if discard else end
        if j > i:
            lines.append(line_from_tokens(tokens[i:j]))
    return lines


def fill(tokens: Sequence[Token], line_length: int) -> List[Line]:
    """Break ``tokens`` greedily into lines of at most ``line_length``."""
    splits: List[Split] = [(0, False)]
    x = 0

    for i, token in enumerate(tokens):
        if token.frm & FormatFlags.MLB:
            splits.append((i + 1, True))
            x = 0
        elif token.frm & FormatFlags.DLB:
            if not next_word_fits(tokens, line_length, i, x):
                splits.append((i + 1, bool(token.frm & FormatFlags.DOB)))
                x = 0
            else:
                x += token.length
        else:
            x += token.length

    splits.append((len(tokens), False))
    lines = _lines_from_splits(tokens, splits)
    _warn_overflow(lines, line_length)
    return lines


def balance(tokens: Sequence[Token], line_length: int) -> List[Line]:
    """Break ``tokens`` into lines of similar length.

    The number of lines is the number ``fill`` would need for text without
    break constraints; each line closes at the first break point past the
    average length.
    """
    total = text_length(tokens)
    height = total // line_length + 1
    cutoff = total // height

    splits: List[Split] = [(0, False)]
    x = 0

    for i, token in enumerate(tokens):
        if token.frm & FormatFlags.MLB:
            splits.append((i + 1, True))
            x = 0
        elif token.frm & FormatFlags.DLB:
            if x + token.length >= cutoff:
                splits.append((i + 1, bool(token.frm & FormatFlags.DOB)))
                x = 0
            else:
                x += token.length
        else:
            x += token.length

    splits.append((len(tokens), False))
    return _lines_from_splits(tokens, splits)


def hang(tokens: Sequence[Token], first_line_length: int) -> List[Line]:
    """Break ``tokens`` with a hanging indent.

    The first line uses the full length; later lines are shortened by the
    paragraph indent and start with that many spaces.
    """
    line_length = first_line_length
    splits: List[Split] = [(0, False)]
    x = 0
    indented = False

    for i, token in enumerate(tokens):
        if token.frm & FormatFlags.MLB:
            splits.append((i + 1, True))
            x = 0
        elif token.frm & FormatFlags.DLB:
            if not next_word_fits(tokens, line_length, i, x):
                splits.append((i + 1, bool(token.frm & FormatFlags.DOB)))
                x = 0
            else:
                x += token.length
        else:
            x += token.length

        # every line after the first is shortened by the indent
        if not indented and len(splits) > 1:
            line_length -= min(INDENT, line_length - 1)
            indented = True

    splits.append((len(tokens), False))

    lines = _lines_from_splits(tokens, splits)
    for line in lines[1:]:
        line.segments.insert(0, segment_from_text(" " * INDENT))
    return lines


def _warn_overflow(lines: List[Line], line_length: int) -> None:
    for line in lines:
        if line.length > line_length:
            logger.warning(
                f"Run of {line.length} characters exceeds the {line_length}-column line: "
                f"{line.text[:40]!r}"
            )

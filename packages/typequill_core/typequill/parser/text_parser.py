"""
Tokenizer for element text.

Whitespace is collapsed to a single space, except after a full stop
(``.``, ``?``, ``!`` or ``:``, possibly followed by closing quotes or
brackets), where typewriter style wants two. Typographic quotes and
dashes are mapped to the characters a typewriter has.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..models.tokens import DisplayFlags, FormatFlags, Token, TokenKind, TokenList

OPEN_CHARS = {"(": "(", "[": "[", "{": "{", "«": "«", "‘": "'", "“": '"'}
CLOSE_CHARS = {")": ")", "]": "]", "}": "}", "»": "»", "’": "'", "”": '"'}
PUNCT_CHARS = {
    "!": "!", "'": "'", ",": ",", "-": "-", ".": ".", ":": ":", ";": ";",
    "?": "?", "¡": "¡", "¿": "¿", "–": "-", "—": "--", "…": ". . .",
}
FULL_STOPS = frozenset(".?!:")
DASHES = frozenset("-–—")
APOSTROPHES = frozenset("'’")
NON_BREAKING_SPACES = frozenset("~\u00a0")


def _is_word_char(char: str) -> bool:
    return char.isalnum()


def _space_width(tokens: TokenList) -> int:
    """Two spaces after a full stop, looking through closing marks."""
    for token in reversed(tokens):
        if token.kind is TokenKind.CLOSE:
            continue
        if token.kind is TokenKind.PUNCT and token.frm & FormatFlags.FS:
            return 2
        return 1
    return 1


def tokenize(text: str, tokens: Optional[TokenList] = None,
             dpy: DisplayFlags = DisplayFlags.NONE) -> Tuple[int, TokenList]:
    """Append the tokens of ``text`` to ``tokens``.

    Args:
        text: Raw character data
        tokens: Tokens already in the element, used for whitespace context
        dpy: Display state of the enclosing inline element

    Returns:
        Tuple of (number of words, token list)
    """
    if tokens is None:
        tokens = []

    word_count = 0
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if char in NON_BREAKING_SPACES:
            tokens.append(Token.symbol(" ", dpy))
            i += 1

        elif char.isspace():
            while i < n and text[i].isspace() and text[i] not in NON_BREAKING_SPACES:
                i += 1
            if tokens and tokens[-1].kind in (TokenKind.SPACE, TokenKind.LINE_BREAK):
                continue
            tokens.append(Token.space(_space_width(tokens), dpy))

        elif _is_word_char(char):
            start = i
            while i < n:
                if _is_word_char(text[i]):
                    i += 1
                elif (text[i] in APOSTROPHES and i + 1 < n
                      and _is_word_char(text[i + 1])):
                    i += 1
                else:
                    break
            word = text[start:i].replace("’", "'")
            tokens.append(Token.word(word, dpy))
            word_count += 1

        elif char in OPEN_CHARS:
            tokens.append(Token(TokenKind.OPEN, OPEN_CHARS[char], dpy))
            i += 1

        elif char in CLOSE_CHARS:
            tokens.append(Token(TokenKind.CLOSE, CLOSE_CHARS[char], dpy))
            i += 1

        elif char in PUNCT_CHARS:
            frm = FormatFlags.NONE
            if char in FULL_STOPS:
                frm = FormatFlags.FS
            elif char in DASHES:
                frm = FormatFlags.DLB
            tokens.append(Token.punct(PUNCT_CHARS[char], frm, dpy))
            i += 1

        else:
            tokens.append(Token.symbol(char, dpy))
            i += 1

    return word_count, tokens

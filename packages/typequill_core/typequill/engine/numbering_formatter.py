"""Formatting of part, section and list item numbers."""

from __future__ import annotations

from typing import Optional

from .page_engine import INDENT

_ROMAN_VALUES = [1000, 900, 500, 400, 100, 90, 50, 40, 10, 9, 5, 4, 1]
_ROMAN_SYMBOLS = ['M', 'CM', 'D', 'CD', 'C', 'XC', 'L', 'XL', 'X', 'IX', 'V', 'IV', 'I']


def to_roman(num: int) -> str:
    """Convert number to Roman numerals; falls back to arabic outside 1..3999."""
    if num < 1 or num > 3999:
        return str(num)

    result = ''
    for value, symbol in zip(_ROMAN_VALUES, _ROMAN_SYMBOLS):
        count = num // value
        result += symbol * count
        num -= value * count
    return result


def to_letters(num: int) -> str:
    """Convert number to letters (A, B, C, ... Z, AA, AB, ...)."""
    if num < 1:
        return str(num)

    result = ''
    while num > 0:
        num -= 1
        result = chr(ord('A') + num % 26) + result
        num //= 26
    return result


def list_item_prefix(number: Optional[int], indent: int = INDENT) -> str:
    """Marker printed before the first line of a list item.

    Ordered items get ``"     N. "`` and unordered items ``"     * "``,
    each padded so that short markers line up on a two-indent boundary.
    """
    if number is not None:
        label = f"{number}."
    else:
        label = "*"

    pad = max(indent - len(label) - 1, 0)
    return " " * indent + label + " " + " " * pad


def toc_prefix(tag: str, indent: int) -> str:
    """Number column of a table of contents entry at ``indent``."""
    pad = max(INDENT - len(tag) - 2, 0)
    return " " * (indent - INDENT) + f"{tag}. " + " " * pad

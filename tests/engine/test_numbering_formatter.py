"""Tests for number formatting."""

import pytest

from typequill.engine.numbering_formatter import list_item_prefix, to_letters, to_roman, toc_prefix


class TestNumbers:
    """Test suite for roman numerals and letters."""

    @pytest.mark.parametrize("number, expected", [
        (1, "I"), (4, "IV"), (9, "IX"), (14, "XIV"), (1994, "MCMXCIV"), (3999, "MMMCMXCIX"),
    ])
    def test_to_roman(self, number, expected):
        assert to_roman(number) == expected

    def test_to_roman_out_of_range(self):
        assert to_roman(0) == "0"
        assert to_roman(4000) == "4000"

    @pytest.mark.parametrize("number, expected", [(1, "A"), (3, "C"), (26, "Z"), (27, "AA"), (28, "AB")])
    def test_to_letters(self, number, expected):
        assert to_letters(number) == expected


class TestPrefixes:
    """Test suite for list and contents markers."""

    def test_ordered_item(self):
        assert list_item_prefix(5) == "     5.   "

    def test_two_digit_item(self):
        assert list_item_prefix(10) == "     10.  "

    def test_unordered_item(self):
        assert list_item_prefix(None) == "     *    "

    def test_prefixes_are_two_indents_wide(self):
        assert all(len(list_item_prefix(n)) == 10 for n in (None, 1, 42))

    def test_toc_prefix(self):
        assert toc_prefix("1", 5) == "1.   "
        assert toc_prefix("A", 15) == "          A.   "

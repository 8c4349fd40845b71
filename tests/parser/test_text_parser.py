"""Tests for the element text tokenizer."""

from typequill.models.tokens import DisplayFlags, FormatFlags, TokenKind
from typequill.parser.text_parser import tokenize


def texts(tokens):
    return [token.text for token in tokens]


class TestTokenize:
    """Test suite for tokenize."""

    def test_words_and_single_spaces(self):
        """Whitespace runs collapse to one space."""
        count, tokens = tokenize("one   two\n\tthree")
        assert count == 3
        assert texts(tokens) == ["one", " ", "two", " ", "three"]

    def test_two_spaces_after_full_stop(self):
        """A full stop is followed by a double space."""
        _, tokens = tokenize("Hello.  World? Yes")
        assert texts(tokens) == ["Hello", ".", "  ", "World", "?", "  ", "Yes"]
        assert tokens[1].frm & FormatFlags.FS

    def test_two_spaces_after_closing_quote(self):
        """Closing quotes after a full stop keep the double space."""
        _, tokens = tokenize("He said “Stop.” Then")
        assert texts(tokens) == ["He", " ", "said", " ", '"', "Stop", ".", '"', "  ", "Then"]

    def test_apostrophe_stays_in_word(self):
        count, tokens = tokenize("don’t")
        assert count == 1
        assert texts(tokens) == ["don't"]

    def test_dashes(self):
        """Dashes are mapped to typewriter hyphens and allow a break."""
        _, tokens = tokenize("a—b–c")
        assert texts(tokens) == ["a", "--", "b", "-", "c"]
        assert tokens[1].frm & FormatFlags.DLB
        assert not tokens[1].frm & FormatFlags.DOB

    def test_ellipsis(self):
        _, tokens = tokenize("wait…")
        assert texts(tokens) == ["wait", ". . ."]

    def test_non_breaking_space(self):
        """Tilde and NBSP become symbols, not break points."""
        _, tokens = tokenize("Mr.~Smith and co")
        kinds = [token.kind for token in tokens]
        assert kinds.count(TokenKind.SPACE) == 1
        assert tokens[2].kind is TokenKind.SYMBOL
        assert tokens[2].text == " "

    def test_leading_and_trailing_whitespace(self):
        _, tokens = tokenize("  a  ")
        assert [token.kind for token in tokens] == [TokenKind.SPACE, TokenKind.WORD, TokenKind.SPACE]

    def test_space_flags(self):
        _, tokens = tokenize("a b")
        assert tokens[1].frm == FormatFlags.DLB | FormatFlags.DOB

    def test_appends_to_existing_tokens(self):
        """Whitespace after an existing space is dropped."""
        _, tokens = tokenize("a ")
        _, tokens = tokenize(" b", tokens)
        assert texts(tokens) == ["a", " ", "b"]

    def test_display_flags(self):
        _, tokens = tokenize("big word", dpy=DisplayFlags.EM)
        assert all(token.dpy is DisplayFlags.EM for token in tokens)

    def test_other_characters_are_symbols(self):
        _, tokens = tokenize("5%")
        assert texts(tokens) == ["5", "%"]
        assert tokens[1].kind is TokenKind.SYMBOL

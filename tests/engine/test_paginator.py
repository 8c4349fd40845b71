"""Tests for the paginator."""

import pytest

from conftest import make_block, make_line
from typequill.engine.paginator import Paginator, footnote_rows, paginate
from typequill.exceptions import DanglingReferenceError, LayoutError
from typequill.models.blocks import Block, Tag
from typequill.models.elements import LineSpacing


def with_ref(block, index, label):
    block.lines[index].note_refs = [label]
    return block


def footnote(label, n=1, spacing=LineSpacing.SINGLE):
    return (label, [make_block(n, prefix=f"note {label}", line_spacing=spacing)])


class TestPageNumbering:
    """Test suite for page numbers."""

    def test_first_page_number(self):
        pages, _ = paginate([make_block(3), Block(padding_before=-1), make_block(3)], first_page=7)
        assert [page.number for page in pages] == [7, 8]

    def test_structured_document_has_unnumbered_title_page(self):
        pages, _ = paginate(
            [make_block(1), Block(padding_before=-1), make_block(1), Block(padding_before=-1)],
            first_page=1, has_structure=True,
        )
        assert [page.number for page in pages] == [-1, 1, 2]

    def test_numbers_increase_by_one(self):
        pages, _ = paginate([make_block(200)], first_page=3)
        numbers = [page.number for page in pages]
        assert numbers == list(range(3, 3 + len(numbers)))
        assert len(numbers) == 4

    def test_page_height(self):
        pages, _ = paginate([make_block(60)])
        assert len(pages[0].lines) == 53
        assert len(pages[1].lines) == 7


class TestComposition:
    """Test suite for padding and spacing."""

    def test_double_spacing(self):
        pages, _ = paginate([make_block(3, line_spacing=LineSpacing.DOUBLE)])
        rows = pages[0].lines
        assert [row is None for row in rows] == [False, True, False, True, False]

    def test_padding_is_the_larger_of_both(self):
        pages, _ = paginate([make_block(1, padding_after=3), make_block(1, padding_before=1)])
        assert [row is None for row in pages[0].lines] == [False, True, True, True, False]

    def test_new_page_padding(self):
        pages, _ = paginate([make_block(1), make_block(1, padding_before=-4)])
        assert [row is None for row in pages[1].lines] == [True, True, True, False]

    def test_contact_is_set_aside(self):
        contact = make_block(2, tag=Tag.CONTACT)
        pages, found = paginate([contact, make_block(1)])
        assert found is contact
        assert len(pages[0].lines) == 1

    def test_line_off_the_sheet(self):
        block = Block(lines=[make_line("z" * 80, column=10)])
        with pytest.raises(LayoutError):
            paginate([block])

    def test_input_order_is_kept(self):
        pages, _ = paginate([make_block(120)])
        texts = [row.text for page in pages for row in page.lines if row is not None]
        assert texts == [f"line {i}" for i in range(120)]


class TestFootnotes:
    """Test suite for footnote placement."""

    def test_footnote_on_page_of_reference(self):
        block = with_ref(make_block(10, footnotes=[footnote("1", 3)]), 4, "1")
        pages, _ = paginate([block])
        assert len(pages) == 1
        assert [row.text for row in pages[0].footer] == ["note 1 0", "note 1 1", "note 1 2"]

    def test_reference_moves_to_next_page(self):
        """A line whose footnote does not fit goes to the next page with it."""
        block = with_ref(make_block(50, footnotes=[footnote("1", 5)]), 49, "1")
        pages, _ = paginate([block])
        assert len(pages) == 2
        assert pages[0].footer == []
        assert pages[1].lines[0].text == "line 49"
        assert len(pages[1].footer) == 5

    def test_footnote_fits_at_page_bottom(self):
        block = with_ref(make_block(40, footnotes=[footnote("1", 5)]), 39, "1")
        pages, _ = paginate([block])
        assert len(pages) == 1
        assert len(pages[0].footer) == 5

    def test_body_leaves_room_for_footer(self):
        block = with_ref(make_block(60, footnotes=[footnote("1", 10)]), 0, "1")
        pages, _ = paginate([block])
        first = pages[0]
        assert len(first.lines) + len(first.footer) + 2 < first.height
        assert pages[1].footer == []

    def test_several_footnotes_are_separated(self):
        block = make_block(3, footnotes=[footnote("1", 2), footnote("2", 1)])
        block.lines[0].note_refs = ["1", "2"]
        pages, _ = paginate([block])
        footer = pages[0].footer
        assert [row.text if row else None for row in footer] == ["note 1 0", "note 1 1", None, "note 2 0"]

    def test_footnotes_from_different_lines(self):
        block = make_block(3, footnotes=[footnote("1"), footnote("2")])
        block.lines[0].note_refs = ["1"]
        block.lines[2].note_refs = ["2"]
        pages, _ = paginate([block])
        assert [row.text if row else None for row in pages[0].footer] == ["note 1 0", None, "note 2 0"]

    def test_repeated_reference_is_allowed(self):
        block = make_block(3, footnotes=[footnote("1")])
        block.lines[0].note_refs = ["1"]
        block.lines[2].note_refs = ["1"]
        pages, _ = paginate([block])
        assert len(pages[0].footer) == 1

    def test_tallest_footnote_shares_page_with_reference(self):
        block = with_ref(make_block(3, footnotes=[footnote("1", 50)]), 0, "1")
        pages, _ = paginate([block])
        assert len(pages[0].footer) == 50
        assert pages[0].lines[0] is block.lines[0]

    def test_footnote_rows_double_spaced(self):
        rows = footnote_rows([make_block(2, line_spacing=LineSpacing.DOUBLE)])
        assert [row is None for row in rows] == [False, True, False]


class TestReferenceErrors:
    """Test suite for dangling references."""

    def test_reference_without_footnote(self):
        block = with_ref(make_block(2), 1, "9")
        with pytest.raises(DanglingReferenceError) as excinfo:
            paginate([block])
        assert excinfo.value.label == "9"

    def test_unreferenced_footnote(self):
        with pytest.raises(DanglingReferenceError) as excinfo:
            paginate([make_block(2, footnotes=[footnote("3")])])
        assert excinfo.value.label == "3"

    def test_label_declared_twice(self):
        block = make_block(2, footnotes=[footnote("1"), footnote("1")])
        with pytest.raises(DanglingReferenceError):
            paginate([block])

    def test_label_declared_again_after_placement(self):
        first = with_ref(make_block(1, footnotes=[footnote("*")]), 0, "*")
        second = with_ref(make_block(1, footnotes=[footnote("*")]), 0, "*")
        with pytest.raises(DanglingReferenceError) as excinfo:
            paginate([first, second])
        assert excinfo.value.label == "*"

    def test_footnote_one_row_too_tall(self):
        block = with_ref(make_block(3, footnotes=[footnote("1", 51)]), 1, "1")
        with pytest.raises(LayoutError):
            paginate([block])

    def test_footnote_taller_than_page(self):
        block = with_ref(make_block(1, footnotes=[footnote("1", 60)]), 0, "1")
        with pytest.raises(LayoutError):
            paginate([block])


class TestTableOfContents:
    """Test suite for the table of contents."""

    def test_toc_follows_body(self):
        entry = Block(lines=[make_line("1.   Youth")], padding_after=1, tag=Tag.TOC)
        paginator = Paginator(5, False)
        pages = paginator.paginate([make_block(2), entry])
        assert [page.number for page in pages] == [5, -1]
        toc = pages[-1]
        assert toc.lines[0].text == "Table of Contents"
        line = toc.lines[12]
        assert line.text.startswith("1.   Youth  . . .")
        assert line.text.endswith(". 5")
        assert line.length == 65

    def test_even_page_number_leader(self):
        entry = Block(lines=[make_line("1.   Youth")], tag=Tag.TOC)
        pages, _ = paginate([make_block(2), entry], first_page=10)
        line = pages[-1].lines[-1]
        assert line.text.endswith(".  10")
        assert line.length == 65

    def test_no_toc_without_entries(self):
        pages, _ = paginate([make_block(2)])
        assert len(pages) == 1

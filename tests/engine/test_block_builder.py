"""Tests for the block builder."""

import pytest

from typequill.engine.block_builder import BlockBuilder, build_blocks
from typequill.exceptions import GrammarError
from typequill.models.blocks import Tag
from typequill.models.elements import LineSpacing
from typequill.parser.xml_reader import read_string


def build(markup):
    return build_blocks(read_string(markup))


class TestFlowElements:
    """Test suite for paragraphs and other flow elements."""

    def test_lone_line_break(self):
        """A bare <br/> gives one empty line at the body column."""
        blocks = build("<br/>")
        assert len(blocks) == 1
        block = blocks[0]
        assert len(block.lines) == 1
        line = block.lines[0]
        assert line.column == 10
        assert len(line.segments) == 1
        assert line.segments[0].text == ""
        assert line.segments[0].ps == "() show "
        assert block.footnotes == []

    def test_paragraph(self):
        block = build("<p>It was a ship.</p>")[0]
        assert block.line_spacing is LineSpacing.DOUBLE
        assert block.padding_after == 1
        assert block.lines[0].column == 10
        assert block.lines[0].text == "     It was a ship."

    def test_column_width_run(self):
        """A run as wide as the column stays on one line."""
        block = build(f"<p>{'x' * 65}</p>")[0]
        assert [line.text for line in block.lines] == ["x" * 65]

    def test_paragraph_lines_fit_column(self):
        block = build("<p>" + "Words and more words. " * 20 + "</p>")[0]
        assert len(block.lines) > 1
        assert all(line.length <= 65 for line in block.lines)

    def test_single_spaced_paragraph(self):
        block = build('<p lineSpacing="single" indent="0">a</p>')[0]
        assert block.line_spacing is LineSpacing.SINGLE
        assert block.padding_after == 0
        assert block.lines[0].text == "a"

    def test_blockquote_margins(self):
        blocks = build("<blockquote><p>quoted</p></blockquote>")
        assert blocks[0].lines[0].column == 15
        assert blocks[-1].padding_after == 1

    def test_scene_divider(self):
        block = build("<div/>")[0]
        assert block.lines[0].text == "#"
        assert block.lines[0].column == 42
        assert (block.padding_before, block.padding_after) == (1, 1)

    def test_page_break(self):
        block = build("<pageBreak/>")[0]
        assert block.lines == []
        assert block.padding_before == -1

    def test_attribution_is_flush_right(self):
        block = build("<attribution>Joseph Conrad</attribution>")[0]
        line = block.lines[0]
        assert line.column + line.length == 74

    def test_bibliography_hangs(self):
        text = "Conrad, Joseph. Youth: A Narrative. London: William Blackwood and Sons, 1902. Reprinted many times."
        block = build(f"<bibRef>{text}</bibRef>")[0]
        assert len(block.lines) > 1
        assert all(line.text.startswith("     ") for line in block.lines[1:])

    def test_elements_are_not_modified(self):
        p = read_string("<p>Some text</p>")
        before = list(p.tokens)
        BlockBuilder().build(p)
        BlockBuilder().build(p)
        assert p.tokens == before


class TestLists:
    """Test suite for list items."""

    def test_start_number(self):
        blocks = build('<ol startNo="5"><li>a</li><li>b</li><li>c</li></ol>')
        prefixes = [block.lines[0].segments[0].text for block in blocks]
        assert [prefix.strip() for prefix in prefixes] == ["5.", "6.", "7."]

    def test_item_lines_start_at_left_margin(self):
        block = build("<ul><li>item</li></ul>")[0]
        assert block.lines[0].column == 10
        assert block.lines[0].text == "     *    item"

    def test_only_items_in_lists(self):
        with pytest.raises(GrammarError):
            build("<ol><p>x</p></ol>")


class TestDivisions:
    """Test suite for parts, chapters and sections."""

    def test_chapter(self):
        blocks = build("<body><chapter>Youth</chapter></body>")
        headline, title, toc = blocks
        assert headline.lines[0].text == "Chapter 1"
        assert headline.padding_before == -1
        assert headline.padding_after == 2
        assert title.lines[0].text == "Youth"
        assert title.padding_after == 11
        assert toc.tag is Tag.TOC

    def test_untitled_chapter(self):
        blocks = build("<body><chapter/></body>")
        assert len(blocks) == 1
        assert blocks[0].padding_after == 11

    def test_part_numbers_are_roman(self):
        blocks = build("<body><part/><part/></body>")
        assert [block.lines[0].text for block in blocks] == ["Part I", "Part II"]

    def test_section_letters(self):
        blocks = build("<body><section/><section/><section/></body>")
        assert blocks[-1].lines[0].text == "Section C"

    def test_headline_is_centered(self):
        headline = build("<body><chapter/></body>")[0]
        assert headline.lines[0].column == 37

    def test_toc_entry_has_number_column(self):
        toc = build("<manuscript><body><chapter>Youth</chapter></body></manuscript>")[-1]
        assert toc.lines[0].text == "1.   Youth"
        assert toc.lines[0].note_refs == []

    def test_front_matter(self):
        blocks = build("<frontmatter><p>Preface</p></frontmatter>")
        assert blocks[0].lines[0].text == "FRONTMATTER"
        assert blocks[0].padding_before == -1
        assert blocks[1].tag is Tag.TOC


class TestHead:
    """Test suite for the title page."""

    def test_head_blocks(self, sample_manuscript):
        blocks = build(sample_manuscript)
        contact, title, authors = blocks[:3]
        assert contact.tag is Tag.CONTACT
        assert contact.lines[0].text == "J.  Conrad, Kent"
        assert title.tag is Tag.HEAD
        assert title.lines[0].text == "The Long Voyage"
        assert title.padding_before == 23
        assert authors.lines[0].text == "by Joseph Conrad"

    def test_several_authors(self):
        blocks = build(
            "<authors><person><sn>Ford</sn></person><person><sn>Conrad</sn></person>"
            "<person><sn>Hueffer</sn></person></authors>"
        )
        assert blocks[0].lines[0].text == "by Ford, Conrad and Hueffer"

    def test_suffix_comma(self):
        blocks = build(
            '<person><gn>Martin</gn><sn>King</sn><suffix comma="true">Jr.</suffix></person>'
        )
        assert blocks[0].lines[0].text == "Martin King, Jr."


class TestFootnotes:
    """Test suite for footnote formatting."""

    def test_footnote_is_attached(self):
        block = build("<p>Text<footnote>A note.</footnote></p>")[0]
        assert block.lines[0].note_refs == ["1"]
        label, body = block.footnotes[0]
        assert label == "1"
        assert body[0].lines[0].text == "    1A note."
        assert body[0].line_spacing is LineSpacing.SINGLE

    def test_nested_footnote_is_rejected(self):
        with pytest.raises(GrammarError):
            build("<p>a<footnote><p>b<footnote>c</footnote></p></footnote></p>")

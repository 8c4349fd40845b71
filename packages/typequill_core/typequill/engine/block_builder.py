"""
Block builder: turns the element tree into formatted blocks.

Each structural element becomes one or more blocks of broken lines with
resolved padding, line spacing and structural tag. Grouping elements
(manuscript, body, front and back matter, lists) contribute the blocks of
their children. The element tree is never modified.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..exceptions import GrammarError
from ..models.blocks import Block, BlockList, Line, Tag
from ..models.elements import (
    ContainerElement,
    Element,
    ElementKind,
    EmptyElement,
    LineSpacing,
    TextElement,
)
from ..models.tokens import DisplayFlags, Token, TokenKind, TokenList
from . import line_breaker
from .numbering_formatter import list_item_prefix, to_letters, to_roman, toc_prefix
from .page_engine import DEFAULT_CONFIG, PageConfig
from .segments import segment_from_text

logger = logging.getLogger(__name__)

Footnotes = List[Tuple[str, BlockList]]

FLOW_KINDS = frozenset({
    ElementKind.ATTRIBUTION, ElementKind.BLOCKQUOTE, ElementKind.BR,
    ElementKind.DIV, ElementKind.OL, ElementKind.P, ElementKind.PAGE_BREAK,
    ElementKind.UL,
})

ALLOWED_CHILDREN: Dict[ElementKind, frozenset] = {
    ElementKind.MANUSCRIPT: frozenset({
        ElementKind.HEAD, ElementKind.FRONTMATTER, ElementKind.BODY, ElementKind.BACKMATTER,
    }),
    ElementKind.BODY: FLOW_KINDS | {ElementKind.CHAPTER, ElementKind.PART, ElementKind.SECTION},
    ElementKind.FRONTMATTER: FLOW_KINDS | {ElementKind.BIB_REF},
    ElementKind.BACKMATTER: FLOW_KINDS | {ElementKind.BIB_REF},
    ElementKind.OL: frozenset({ElementKind.LI, ElementKind.PAGE_BREAK}),
    ElementKind.UL: frozenset({ElementKind.LI, ElementKind.PAGE_BREAK}),
    ElementKind.BLOCKQUOTE: frozenset({ElementKind.P, ElementKind.PAGE_BREAK}),
    ElementKind.LI: frozenset({ElementKind.P, ElementKind.PAGE_BREAK}),
}


class BlockBuilder:
    """Formats elements into blocks."""

    def __init__(self, config: Optional[PageConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._formatters: Dict[ElementKind, Callable[[Element], BlockList]] = {
            ElementKind.ATTRIBUTION: self._format_attribution,
            ElementKind.AUTHORS: self._format_authors,
            ElementKind.BACKMATTER: self._format_matter,
            ElementKind.BIB_REF: self._format_bib_ref,
            ElementKind.BLOCKQUOTE: self._format_blockquote,
            ElementKind.BODY: self._format_children,
            ElementKind.BR: self._format_br,
            ElementKind.CHAPTER: self._format_chapter,
            ElementKind.CONTACT: self._format_contact,
            ElementKind.DIV: self._format_div,
            ElementKind.EM: self._format_fragment,
            ElementKind.FOOTNOTE: self._format_footnote_fragment,
            ElementKind.FRONTMATTER: self._format_matter,
            ElementKind.GN: self._format_name_part,
            ElementKind.HEAD: self._format_head,
            ElementKind.LI: self._format_li,
            ElementKind.MANUSCRIPT: self._format_children,
            ElementKind.NOTE_REF: self._format_note_ref,
            ElementKind.OL: self._format_children,
            ElementKind.P: self._format_p_element,
            ElementKind.PAGE_BREAK: self._format_page_break,
            ElementKind.PART: self._format_part,
            ElementKind.PERSON: self._format_person,
            ElementKind.PREFIX: self._format_name_part,
            ElementKind.SECTION: self._format_section,
            ElementKind.SN: self._format_name_part,
            ElementKind.SUB: self._format_fragment,
            ElementKind.SUBTITLE: self._format_heading,
            ElementKind.SUFFIX: self._format_name_part,
            ElementKind.SUP: self._format_fragment,
            ElementKind.TITLE: self._format_heading,
            ElementKind.UL: self._format_children,
        }

    def build(self, elem: Element) -> BlockList:
        """Format an element and everything below it.

        Args:
            elem: Root of a manuscript or of any fragment of one

        Returns:
            Blocks in document order

        Raises:
            GrammarError: If an element appears where it has no layout
        """
        blocks = self._format(elem)
        logger.debug(f"Built {len(blocks)} blocks from <{elem.kind.tag}>")
        return blocks

    def _format(self, elem: Element) -> BlockList:
        return self._formatters[elem.kind](elem)

    # helpers

    @property
    def _heading_length(self) -> int:
        return self.config.heading_length

    def _center(self, lines: List[Line]) -> List[Line]:
        for line in lines:
            line.column = self.config.centered_column(line.length)
        return lines

    def _at_left_margin(self, lines: List[Line]) -> List[Line]:
        for line in lines:
            line.column = self.config.left_margin
        return lines

    def _single_line(self, text: str, column: int) -> Line:
        return Line(column=column, segments=[segment_from_text(text)])

    def _headline(self, text: str, padding_before: int, padding_after: int,
                  tag: Optional[Tag] = None) -> Block:
        segment = segment_from_text(text)
        line = Line(column=self.config.centered_column(segment.length), segments=[segment])
        return Block(lines=[line], padding_before=padding_before,
                     padding_after=padding_after, tag=tag)

    def _check_child(self, parent: Element, child: Element) -> None:
        allowed = ALLOWED_CHILDREN.get(parent.kind)
        if allowed is not None and child.kind not in allowed:
            raise GrammarError("Element not allowed here", f"<{child.kind.tag}> in <{parent.kind.tag}>")

    # grouping elements

    def _format_children(self, elem: ContainerElement) -> BlockList:
        blocks: BlockList = []
        for child in elem.children:
            self._check_child(elem, child)
            blocks.extend(self._format(child))
        return blocks

    def _format_matter(self, elem: ContainerElement) -> BlockList:
        """Front or back matter: a labelled heading on a new page."""
        label = elem.attributes.label
        blocks = [
            self._headline(label, -1, self.config.chapter_skip),
            self._toc_label_entry(label),
        ]
        blocks.extend(self._format_children(elem))
        return blocks

    # head

    def _format_head(self, elem: ContainerElement) -> BlockList:
        """Title page blocks, with the title padded toward the middle line."""
        title = subtitle = authors = contact = None
        line_count = 0
        n = len(elem.children)

        for i, child in enumerate(elem.children):
            if child.kind is ElementKind.AUTHORS:
                authors = self._format_authors(child)[0]
                line_count += authors.count_lines()
            elif child.kind is ElementKind.CONTACT:
                contact = self._format_contact(child)[0]
            elif child.kind in (ElementKind.TITLE, ElementKind.SUBTITLE):
                block = self._format_heading(child)[0]
                if i < n - 1:
                    line_count += block.count_lines() + 2
                if child.kind is ElementKind.TITLE:
                    title = block
                else:
                    subtitle = block
            else:
                raise GrammarError("Element not allowed here", f"<{child.kind.tag}> in <head>")

        if title is not None:
            title.padding_before = max(self.config.middle_line - line_count, 0)

        return [block for block in (contact, title, subtitle, authors) if block is not None]

    def _format_heading(self, elem: TextElement) -> BlockList:
        lines = self._center(line_breaker.balance(elem.tokens, self._heading_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            line_spacing=elem.attributes.line_spacing,
            padding_before=0,
            padding_after=2,
            tag=Tag.HEAD,
        )]

    def _format_authors(self, elem: ContainerElement) -> BlockList:
        """``by A, B and C`` centered under the title."""
        n = len(elem.children)
        tokens: TokenList = [Token.word("by"), Token.space()]
        footnotes: List[ContainerElement] = []

        for i, child in enumerate(elem.children):
            if child.kind is not ElementKind.PERSON:
                raise GrammarError("Element not allowed here", f"<{child.kind.tag}> in <authors>")
            if i > 0:
                if i == n - 1:
                    tokens.extend([Token.space(), Token.word("and"), Token.space()])
                else:
                    tokens.extend([Token.symbol(","), Token.space()])
            person_tokens, person_footnotes = self.person_tokens(child)
            tokens.extend(person_tokens)
            footnotes.extend(person_footnotes)

        lines = self._center(line_breaker.balance(tokens, self._heading_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(footnotes),
            line_spacing=elem.attributes.line_spacing,
            padding_before=2,
            padding_after=2,
            tag=Tag.HEAD,
        )]

    def person_tokens(self, elem: ContainerElement) -> Tuple[TokenList, List[ContainerElement]]:
        """Assemble a person's name parts into one run of tokens."""
        tokens: TokenList = []
        footnotes: List[ContainerElement] = []

        for i, child in enumerate(elem.children):
            kind = child.kind
            if kind is ElementKind.FOOTNOTE:
                tokens.append(Token.note_ref(child.attributes.label))
                footnotes.append(child)
            elif kind is ElementKind.NOTE_REF:
                tokens.append(Token.note_ref(child.attributes.label))
            elif kind in (ElementKind.PREFIX, ElementKind.GN, ElementKind.SN):
                if i > 0:
                    tokens.append(Token.space())
                tokens.extend(child.tokens)
                footnotes.extend(child.footnotes)
            elif kind is ElementKind.SUFFIX:
                if child.attributes.comma:
                    tokens.append(Token.punct(","))
                if i > 0:
                    tokens.append(Token.space())
                tokens.extend(child.tokens)
                footnotes.extend(child.footnotes)
            else:
                raise GrammarError("Element not allowed here", f"<{kind.tag}> in <person>")

        return tokens, footnotes

    def _format_person(self, elem: ContainerElement) -> BlockList:
        tokens, footnotes = self.person_tokens(elem)
        lines = self._center(line_breaker.balance(tokens, self._heading_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(footnotes),
            padding_before=3,
            padding_after=3,
            tag=Tag.HEAD,
        )]

    def _format_contact(self, elem: TextElement) -> BlockList:
        """Contact details, set at half width in the top left corner."""
        line_length = (self.config.right_margin - self.config.left_margin) // 2 + 1
        lines = self._at_left_margin(line_breaker.fill(elem.tokens, line_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            line_spacing=elem.attributes.line_spacing,
            padding_before=0,
            padding_after=2,
            tag=Tag.CONTACT,
        )]

    # divisions

    def _format_part(self, elem: TextElement) -> BlockList:
        """Part heading, vertically centered on a page of its own."""
        config = self.config
        tag = to_roman(elem.attributes.number)
        has_title = bool(elem.tokens)
        height = 1
        blocks: BlockList = []

        if has_title:
            lines = self._center(line_breaker.balance(elem.tokens, self._heading_length))
            height += 2 + len(lines)
            blocks.append(Block(
                lines=lines,
                footnotes=self.format_footnotes(elem.footnotes),
                line_spacing=elem.attributes.line_spacing,
                padding_before=1,
                padding_after=config.part_skip,
            ))
            blocks.append(self._toc_entry(elem, tag))

        padding_before = -(config.middle_line - height + 1)
        blocks.insert(0, self._headline(
            f"Part {tag}", padding_before, 2 if has_title else config.part_skip,
        ))
        return blocks

    def _format_chapter(self, elem: TextElement) -> BlockList:
        config = self.config
        tag = str(elem.attributes.number)
        has_title = bool(elem.tokens)
        blocks = [self._headline(f"Chapter {tag}", -1, 2 if has_title else config.chapter_skip)]

        if has_title:
            lines = self._center(line_breaker.balance(elem.tokens, self._heading_length))
            blocks.append(Block(
                lines=lines,
                footnotes=self.format_footnotes(elem.footnotes),
                line_spacing=elem.attributes.line_spacing,
                padding_before=0,
                padding_after=config.chapter_skip,
            ))
            blocks.append(self._toc_entry(elem, tag))

        return blocks

    def _format_section(self, elem: TextElement) -> BlockList:
        config = self.config
        tag = to_letters(elem.attributes.number)
        has_title = bool(elem.tokens)
        blocks = [self._headline(
            f"Section {tag}", elem.attributes.padding_before,
            2 if has_title else config.section_skip,
        )]

        if has_title:
            lines = self._center(line_breaker.balance(elem.tokens, self._heading_length))
            blocks.append(Block(
                lines=lines,
                footnotes=self.format_footnotes(elem.footnotes),
                line_spacing=elem.attributes.line_spacing,
                padding_before=1,
                padding_after=config.section_skip,
            ))
            blocks.append(self._toc_entry(elem, tag))

        return blocks

    # table of contents

    def _toc_indent(self, depth: int) -> int:
        indent = self.config.indent
        if depth == 2:
            return indent * 3
        if depth == 1:
            return indent * 2
        return indent

    def _toc_entry(self, elem: TextElement, tag: str) -> Block:
        """Table of contents line for a part, chapter or section title."""
        config = self.config
        indent = self._toc_indent(elem.attributes.depth)
        tokens = [token for token in elem.tokens if token.kind is not TokenKind.NOTE_REF]
        line_length = config.right_margin - config.left_margin - config.indent * 2 - indent

        lines = self._at_left_margin(line_breaker.fill(tokens, line_length))
        for i, line in enumerate(lines):
            prefix = toc_prefix(tag, indent) if i == 0 else " " * indent
            line.segments.insert(0, segment_from_text(prefix))

        return Block(lines=lines, padding_before=0, padding_after=1, tag=Tag.TOC)

    def _toc_label_entry(self, label: str) -> Block:
        line = self._single_line(label, self.config.left_margin)
        return Block(lines=[line], padding_before=0, padding_after=1, tag=Tag.TOC)

    # flow elements

    def format_p(self, elem: TextElement, indent: Optional[int] = None,
                 leading: Sequence[Token] = ()) -> Block:
        """Format a paragraph.

        Args:
            elem: The paragraph
            indent: First line indent overriding the element's own
            leading: Tokens placed before the paragraph text
        """
        attributes = elem.attributes
        indent = attributes.indent if indent is None else indent

        tokens: TokenList = list(leading) + list(elem.tokens)
        if indent > 0:
            tokens.insert(0, Token.space(indent))

        line_length = attributes.right_margin - attributes.left_margin + 1
        lines = line_breaker.fill(tokens, line_length)
        for line in lines:
            line.column = attributes.left_margin

        return Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            line_spacing=attributes.line_spacing,
            padding_before=0,
            padding_after=1 if attributes.line_spacing is LineSpacing.DOUBLE else 0,
        )

    def _format_p_element(self, elem: TextElement) -> BlockList:
        return [self.format_p(elem)]

    def _format_blockquote(self, elem: ContainerElement) -> BlockList:
        blocks: BlockList = []
        n = len(elem.children)
        for i, child in enumerate(elem.children):
            self._check_child(elem, child)
            if child.kind is ElementKind.P:
                block = self.format_p(child)
                if i == n - 1:
                    block.padding_after = 1
                blocks.append(block)
            else:
                blocks.extend(self._format(child))
        return blocks

    def _format_li(self, elem: ContainerElement) -> BlockList:
        """List item: marker on the first line, text hung two indents in."""
        config = self.config
        prefix = list_item_prefix(elem.attributes.number, config.indent)
        hanging = " " * (config.indent * 2)
        blocks: BlockList = []
        n = len(elem.children)

        for i, child in enumerate(elem.children):
            self._check_child(elem, child)
            if child.kind is not ElementKind.P:
                blocks.extend(self._format(child))
                continue

            block = self.format_p(child, indent=0 if i == 0 else None)
            for j, line in enumerate(block.lines):
                line.column -= config.indent * 2
                text = prefix if i == 0 and j == 0 else hanging
                line.segments.insert(0, segment_from_text(text))
            if i == n - 1:
                block.padding_after = 1
            blocks.append(block)

        return blocks

    def _format_attribution(self, elem: TextElement) -> BlockList:
        """Attribution, set flush right."""
        lines = line_breaker.balance(elem.tokens, self._heading_length)
        for line in lines:
            line.column = self.config.right_margin - line.length
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            line_spacing=elem.attributes.line_spacing,
            padding_before=1,
            padding_after=1,
        )]

    def _format_bib_ref(self, elem: TextElement) -> BlockList:
        lines = self._at_left_margin(line_breaker.hang(elem.tokens, self.config.line_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            line_spacing=elem.attributes.line_spacing,
            padding_before=0,
            padding_after=1,
        )]

    def _format_br(self, elem: EmptyElement) -> BlockList:
        line = Line(column=self.config.left_margin, segments=[segment_from_text("")])
        return [Block(lines=[line])]

    def _format_div(self, elem: EmptyElement) -> BlockList:
        line = self._single_line("#", self.config.center)
        return [Block(lines=[line], padding_before=1, padding_after=1)]

    def _format_page_break(self, elem: EmptyElement) -> BlockList:
        return [Block(padding_before=-1)]

    # fragments

    def _format_fragment(self, elem: TextElement, tag: Optional[Tag] = None,
                         tokens: Optional[TokenList] = None) -> BlockList:
        tokens = elem.tokens if tokens is None else tokens
        lines = self._at_left_margin(line_breaker.fill(tokens, self.config.line_length))
        return [Block(
            lines=lines,
            footnotes=self.format_footnotes(elem.footnotes),
            tag=tag,
        )]

    def _format_name_part(self, elem: TextElement) -> BlockList:
        tokens = elem.tokens
        if elem.kind is ElementKind.SUFFIX and elem.attributes.comma:
            tokens = [Token.punct(","), Token.space()] + list(tokens)
        return self._format_fragment(elem, Tag.HEAD, tokens)

    def _format_note_ref(self, elem: EmptyElement) -> BlockList:
        line = self._single_line(elem.attributes.label, self.config.left_margin)
        return [Block(lines=[line])]

    def _format_footnote_fragment(self, elem: ContainerElement) -> BlockList:
        """A lone footnote, printed under a line holding its reference."""
        config = self.config
        wrapper = TextElement(ElementKind.P)
        wrapper.attributes.line_spacing = LineSpacing.DOUBLE
        wrapper.attributes.left_margin = config.left_margin
        wrapper.attributes.right_margin = config.right_margin
        wrapper.tokens = [Token.note_ref(elem.attributes.label)]
        wrapper.footnotes = [elem]
        return [self.format_p(wrapper)]

    # footnotes

    def format_footnotes(self, footnotes: Sequence[ContainerElement]) -> Footnotes:
        """Format footnote bodies, keyed by label.

        The first paragraph starts flush left with the raised label, right
        aligned in the paragraph indent.
        """
        indent = self.config.indent
        result: Footnotes = []

        for footnote in footnotes:
            label = footnote.attributes.label
            blocks: BlockList = []

            for i, child in enumerate(footnote.children):
                if child.kind is not ElementKind.P:
                    raise GrammarError("Element not allowed here", f"<{child.kind.tag}> in <footnote>")
                if child.footnotes:
                    raise GrammarError("Footnote inside a footnote", f"label {label!r}")
                if i == 0:
                    spaces = max(indent - 1 - max(len(label) - 1, 0), 0)
                    marker = Token.word(" " * spaces + label, DisplayFlags.SUP)
                    blocks.append(self.format_p(child, indent=0, leading=[marker]))
                else:
                    blocks.append(self.format_p(child))

            result.append((label, blocks))

        return result


def build_blocks(elem: Element, config: Optional[PageConfig] = None) -> BlockList:
    """Format an element tree into blocks."""
    return BlockBuilder(config).build(elem)

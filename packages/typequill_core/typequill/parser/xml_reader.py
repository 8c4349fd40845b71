"""
XML reader for manuscript documents.

Builds the element tree from manuscript markup: resolves automatic
numbering, line spacing and margins, tokenizes text, folds inline
elements into the tokens of their enclosing text element and wraps loose
text in block quotations, footnotes and list items into paragraphs.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from ..engine.page_engine import INDENT, LEFT_MARGIN, RIGHT_MARGIN
from ..exceptions import GrammarError, ParsingError
from ..models.elements import (
    CONTAINER_KINDS,
    EMPTY_KINDS,
    TEXT_KINDS,
    Attributes,
    ContainerElement,
    Element,
    ElementKind,
    LineSpacing,
    TextElement,
    new_element,
)
from ..models.tokens import (
    DisplayFlags,
    Token,
    TokenKind,
    contains_only_whitespace,
    trim_whitespace,
)
from .text_parser import tokenize

logger = logging.getLogger(__name__)

_KINDS_BY_TAG = {kind.tag: kind for kind in ElementKind}

INLINE_FLAGS = {
    ElementKind.EM: DisplayFlags.EM,
    ElementKind.SUB: DisplayFlags.SUB,
    ElementKind.SUP: DisplayFlags.SUP,
}

MIXED_CONTENT_KINDS = frozenset({ElementKind.BLOCKQUOTE, ElementKind.FOOTNOTE, ElementKind.LI})

# Margins of the paragraph that wraps loose text in mixed content.
WRAPPER_MARGINS = {
    ElementKind.BLOCKQUOTE: (LEFT_MARGIN + INDENT, RIGHT_MARGIN - INDENT),
    ElementKind.FOOTNOTE: (LEFT_MARGIN, RIGHT_MARGIN),
    ElementKind.LI: (LEFT_MARGIN + 2 * INDENT, RIGHT_MARGIN),
}

LINE_SPACING_VALUES = ("single", "double")
MAX_INDENT = RIGHT_MARGIN - LEFT_MARGIN + 1


def _local_name(name: str) -> str:
    return name.rsplit("}", 1)[-1]


class ManuscriptReader:
    """Reads manuscript markup into an element tree."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.next_note_no = 1
        self.next_part_no = 1
        self.next_chapter_no = 1
        self.next_section_no = 1
        self.list_counters: List[Optional[int]] = []
        self.has_parts = False
        self.has_chapters = False
        self.has_sections = False
        self.word_count = 0

    def read(self, source: Union[str, bytes]) -> Element:
        """Parse a manuscript or a manuscript fragment.

        Args:
            source: XML document text

        Returns:
            Root element of the tree

        Raises:
            ParsingError: If the markup is not well-formed
            GrammarError: If an element or attribute is not in the grammar
        """
        self._reset()
        try:
            root = ET.fromstring(source)
        except ET.ParseError as e:
            raise ParsingError("Malformed manuscript markup", str(e)) from e

        elem = self._read_element(root, None)

        if elem.kind is ElementKind.MANUSCRIPT:
            self._finish_manuscript(elem)

        logger.debug(f"Read <{elem.kind.tag}> with {self.word_count} words")
        return elem

    # elements

    def _kind(self, node: ET.Element) -> ElementKind:
        if not isinstance(node.tag, str):
            raise GrammarError("Unexpected markup node", repr(node.tag))
        name = _local_name(node.tag)
        try:
            return _KINDS_BY_TAG[name]
        except KeyError:
            raise GrammarError("Unknown element", f"<{name}>") from None

    def _read_element(self, node: ET.Element, parent: Optional[Element]) -> Element:
        kind = self._kind(node)
        attributes = self._attributes(kind, node, parent)
        elem = new_element(kind, attributes)

        if kind in (ElementKind.OL, ElementKind.UL):
            self.list_counters.append(attributes.start_no)

        try:
            if kind in TEXT_KINDS:
                self._read_text_content(elem, node)
            elif kind in MIXED_CONTENT_KINDS:
                self._read_mixed_content(elem, node)
            elif kind in CONTAINER_KINDS:
                self._read_children(elem, node)
            elif len(node) or (node.text and not node.text.isspace()):
                raise GrammarError("Empty element has content", f"<{kind.tag}>")
        finally:
            if kind in (ElementKind.OL, ElementKind.UL):
                self.list_counters.pop()

        return elem

    def _read_children(self, elem: ContainerElement, node: ET.Element) -> None:
        self._check_no_text(elem, node.text)
        for child in node:
            elem.children.append(self._read_element(child, elem))
            self._check_no_text(elem, child.tail)

    def _check_no_text(self, elem: Element, text: Optional[str]) -> None:
        if text and not text.isspace():
            raise GrammarError("Text is not allowed here", f"<{elem.kind.tag}>: {text.strip()[:40]!r}")

    def _parse_text(self, elem: TextElement, text: Optional[str]) -> None:
        if not text:
            return
        dpy = INLINE_FLAGS.get(elem.kind, DisplayFlags.NONE)
        n, elem.tokens = tokenize(text, elem.tokens, dpy)
        self.word_count += n

    def _read_text_content(self, elem: TextElement, node: ET.Element) -> None:
        self._parse_text(elem, node.text)
        for child in node:
            self._resume_text_element(elem, self._read_element(child, elem))
            self._parse_text(elem, child.tail)

        if elem.kind not in INLINE_FLAGS:
            trim_whitespace(elem.tokens)

    def _resume_text_element(self, elem: TextElement, child: Element) -> None:
        """Fold an inline child into the tokens of a text element."""
        kind = child.kind

        if kind is ElementKind.BR:
            elem.tokens.append(Token.line_break())

        elif kind in INLINE_FLAGS:
            tokens = child.tokens
            outer = INLINE_FLAGS.get(elem.kind)
            if outer is not None:
                tokens = [token.with_display(token.dpy | outer) for token in tokens]
            if (tokens and tokens[0].kind is TokenKind.SPACE and elem.tokens
                    and elem.tokens[-1].kind in (TokenKind.SPACE, TokenKind.LINE_BREAK)):
                tokens = tokens[1:]
            elem.tokens.extend(tokens)
            elem.footnotes.extend(child.footnotes)

        elif kind is ElementKind.FOOTNOTE:
            elem.tokens.append(Token.note_ref(child.attributes.label))
            elem.footnotes.append(child)

        elif kind is ElementKind.NOTE_REF:
            elem.tokens.append(Token.note_ref(child.attributes.label))

        else:
            raise GrammarError("Element not allowed in text", f"<{kind.tag}> in <{elem.kind.tag}>")

    def _read_mixed_content(self, elem: ContainerElement, node: ET.Element) -> None:
        """Read a container that takes paragraphs or loose text."""
        self._resume_mixed_text(elem, node.text)

        for child in node:
            child_elem = self._read_element(child, elem)

            if child_elem.kind is ElementKind.P:
                last = elem.children[-1] if elem.children else None
                if last is not None and last.kind is ElementKind.P and contains_only_whitespace(last.tokens):
                    elem.children.pop()
                elem.children.append(child_elem)
            elif child_elem.kind is ElementKind.PAGE_BREAK:
                elem.children.append(child_elem)
            else:
                self._resume_text_element(self._wrapper(elem), child_elem)

            self._resume_mixed_text(elem, child.tail)

        for child in elem.children:
            if child.kind is ElementKind.P:
                trim_whitespace(child.tokens)
        elem.children = [
            child for child in elem.children
            if child.kind is not ElementKind.P or child.tokens or child.footnotes
        ]

    def _resume_mixed_text(self, elem: ContainerElement, text: Optional[str]) -> None:
        if not text:
            return
        # Whitespace-only wrappers are dropped when a paragraph follows.
        self._parse_text(self._wrapper(elem), text)

    def _wrapper(self, elem: ContainerElement) -> TextElement:
        """Paragraph that receives loose text, reusing a trailing one."""
        if elem.children and elem.children[-1].kind is ElementKind.P:
            return elem.children[-1]

        left_margin, right_margin = WRAPPER_MARGINS[elem.kind]
        wrapper = TextElement(ElementKind.P, Attributes(
            indent=0,
            line_spacing=elem.attributes.line_spacing,
            left_margin=left_margin,
            right_margin=right_margin,
        ))
        elem.children.append(wrapper)
        return wrapper

    # attributes

    def _attributes(self, kind: ElementKind, node: ET.Element,
                    parent: Optional[Element]) -> Attributes:
        values = {_local_name(key): value for key, value in node.attrib.items()}
        attributes = Attributes(line_spacing=self._line_spacing(values, LineSpacing.SINGLE))

        if kind is ElementKind.MANUSCRIPT:
            attributes.first_page = self._int(values, "firstPage", kind, default=1)
            if attributes.first_page < 1:
                raise GrammarError("First page number must be positive", f"firstPage={attributes.first_page}")

        elif kind is ElementKind.PART:
            attributes.number = self._next_number(values, kind, "next_part_no")
            self.next_chapter_no = 1
            self.next_section_no = 1
            self.has_parts = True

        elif kind is ElementKind.CHAPTER:
            attributes.number = self._next_number(values, kind, "next_chapter_no")
            self.next_section_no = 1
            self.has_chapters = True

        elif kind is ElementKind.SECTION:
            attributes.number = self._next_number(values, kind, "next_section_no")
            attributes.padding_before = -1
            if (parent is not None and parent.kind is ElementKind.BODY and parent.children
                    and parent.children[-1].kind is ElementKind.CHAPTER):
                attributes.padding_before = 0
            self.has_sections = True

        elif kind is ElementKind.OL:
            attributes.start_no = self._int(values, "startNo", kind, default=1)

        elif kind is ElementKind.LI:
            if parent is not None and parent.kind in (ElementKind.OL, ElementKind.UL):
                attributes.line_spacing = self._line_spacing(values, parent.attributes.line_spacing)
            if self.list_counters and self.list_counters[-1] is not None:
                number = self._int(values, "number", kind, default=self.list_counters[-1])
                attributes.number = number
                self.list_counters[-1] = number + 1

        elif kind is ElementKind.P:
            self._paragraph_attributes(attributes, values, parent)

        elif kind is ElementKind.FOOTNOTE:
            label = values.get("label")
            if label is None:
                label = str(self.next_note_no)
                self.next_note_no += 1
            elif label.strip().isdigit():
                self.next_note_no = int(label) + 1
            attributes.label = label

        elif kind is ElementKind.NOTE_REF:
            attributes.label = values.get("label", "*")

        elif kind is ElementKind.FRONTMATTER:
            attributes.label = values.get("label", "FRONTMATTER")

        elif kind is ElementKind.BACKMATTER:
            attributes.label = values.get("label", "BACKMATTER")

        elif kind is ElementKind.SUFFIX:
            comma = values.get("comma", "false")
            if comma not in ("true", "false"):
                raise GrammarError("Invalid comma attribute", f"<suffix comma={comma!r}>")
            attributes.comma = comma == "true"

        return attributes

    def _paragraph_attributes(self, attributes: Attributes, values: dict,
                              parent: Optional[Element]) -> None:
        indent = self._int(values, "indent", ElementKind.P, default=INDENT)
        if not 0 <= indent <= MAX_INDENT:
            raise GrammarError("Paragraph indent out of range", f"indent={indent}")

        line_spacing = LineSpacing.DOUBLE
        left_margin = LEFT_MARGIN
        right_margin = RIGHT_MARGIN

        if parent is not None:
            if parent.kind is ElementKind.BLOCKQUOTE:
                line_spacing = parent.attributes.line_spacing
                left_margin += INDENT
                right_margin -= INDENT
            elif parent.kind is ElementKind.FOOTNOTE:
                line_spacing = parent.attributes.line_spacing
            elif parent.kind is ElementKind.LI:
                line_spacing = parent.attributes.line_spacing
                left_margin += 2 * INDENT

        attributes.indent = indent
        attributes.line_spacing = self._line_spacing(values, line_spacing)
        attributes.left_margin = left_margin
        attributes.right_margin = right_margin

    def _line_spacing(self, values: dict, default: LineSpacing) -> LineSpacing:
        value = values.get("lineSpacing")
        if value is None:
            return default
        if value not in LINE_SPACING_VALUES:
            raise GrammarError("Unrecognized line spacing", repr(value))
        return LineSpacing.from_string(value)

    def _int(self, values: dict, name: str, kind: ElementKind, default: int) -> int:
        value = values.get(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise GrammarError("Attribute is not an integer", f"<{kind.tag} {name}={value!r}>") from None

    def _next_number(self, values: dict, kind: ElementKind, counter: str) -> int:
        number = self._int(values, "number", kind, default=getattr(self, counter))
        setattr(self, counter, number + 1)
        return number

    # post-processing

    def _finish_manuscript(self, elem: ContainerElement) -> None:
        attributes = elem.attributes
        attributes.word_count = self.word_count
        attributes.has_structure = self.has_parts or self.has_chapters or self.has_sections

        part_depth = 0 if self.has_parts else -1
        if self.has_chapters:
            chapter_depth = 1 if part_depth >= 0 else 0
        else:
            chapter_depth = -1
        if self.has_sections:
            section_depth = 2 if part_depth >= 0 and chapter_depth >= 0 else 1
        else:
            section_depth = -1

        depths = {
            ElementKind.PART: part_depth,
            ElementKind.CHAPTER: chapter_depth,
            ElementKind.SECTION: section_depth,
        }
        body = elem.find(ElementKind.BODY)
        if body is not None:
            for child in body.children:
                if child.kind in depths:
                    child.attributes.depth = depths[child.kind]


def read_string(source: Union[str, bytes]) -> Element:
    """Read manuscript markup from a string."""
    return ManuscriptReader().read(source)


def read_file(path: Union[str, Path]) -> Element:
    """Read manuscript markup from a file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ParsingError(f"Cannot read {path}", str(e)) from e
    return ManuscriptReader().read(data)

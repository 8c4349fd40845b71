"""Element tree for manuscript documents.

The tree is a closed set of element kinds, one per grammar tag. Each node
is one of three shapes: a container holding child elements, a text element
holding tokens (and the footnotes declared inside it), or an empty element
holding only attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union

from .tokens import TokenList


class LineSpacing(Enum):
    SINGLE = 1
    DOUBLE = 2

    @classmethod
    def from_string(cls, value: str) -> "LineSpacing":
        return cls.DOUBLE if value == "double" else cls.SINGLE


class ElementKind(Enum):
    ATTRIBUTION = "attribution"
    AUTHORS = "authors"
    BACKMATTER = "backmatter"
    BIB_REF = "bibRef"
    BLOCKQUOTE = "blockquote"
    BODY = "body"
    BR = "br"
    CHAPTER = "chapter"
    CONTACT = "contact"
    DIV = "div"
    EM = "em"
    FOOTNOTE = "footnote"
    FRONTMATTER = "frontmatter"
    GN = "gn"
    HEAD = "head"
    LI = "li"
    MANUSCRIPT = "manuscript"
    NOTE_REF = "noteRef"
    OL = "ol"
    P = "p"
    PAGE_BREAK = "pageBreak"
    PART = "part"
    PERSON = "person"
    PREFIX = "prefix"
    SECTION = "section"
    SN = "sn"
    SUB = "sub"
    SUBTITLE = "subtitle"
    SUFFIX = "suffix"
    SUP = "sup"
    TITLE = "title"
    UL = "ul"

    @property
    def tag(self) -> str:
        return self.value


CONTAINER_KINDS = frozenset({
    ElementKind.AUTHORS, ElementKind.BACKMATTER, ElementKind.BLOCKQUOTE,
    ElementKind.BODY, ElementKind.FOOTNOTE, ElementKind.FRONTMATTER,
    ElementKind.HEAD, ElementKind.LI, ElementKind.MANUSCRIPT, ElementKind.OL,
    ElementKind.PERSON, ElementKind.UL,
})

TEXT_KINDS = frozenset({
    ElementKind.ATTRIBUTION, ElementKind.BIB_REF, ElementKind.CHAPTER,
    ElementKind.CONTACT, ElementKind.EM, ElementKind.GN, ElementKind.P,
    ElementKind.PART, ElementKind.PREFIX, ElementKind.SECTION, ElementKind.SN,
    ElementKind.SUB, ElementKind.SUBTITLE, ElementKind.SUFFIX, ElementKind.SUP,
    ElementKind.TITLE,
})

EMPTY_KINDS = frozenset({
    ElementKind.BR, ElementKind.DIV, ElementKind.NOTE_REF, ElementKind.PAGE_BREAK,
})


@dataclass(slots=True)
class Attributes:
    """Resolved attribute set; each kind uses the subset it needs."""
    line_spacing: LineSpacing = LineSpacing.SINGLE
    number: Optional[int] = None
    depth: int = -1
    indent: int = 0
    left_margin: int = 0
    right_margin: int = 0
    start_no: Optional[int] = None
    label: Optional[str] = None
    comma: bool = False
    padding_before: int = -1
    first_page: int = 1
    word_count: int = 0
    has_structure: bool = False


@dataclass(slots=True)
class ContainerElement:
    kind: ElementKind
    attributes: Attributes = field(default_factory=Attributes)
    children: List["Element"] = field(default_factory=list)

    def find(self, kind: ElementKind) -> Optional["Element"]:
        """First direct child of the given kind."""
        for child in self.children:
            if child.kind is kind:
                return child
        return None

    def iter_kind(self, kind: ElementKind) -> Iterator["Element"]:
        return (child for child in self.children if child.kind is kind)


@dataclass(slots=True)
class TextElement:
    kind: ElementKind
    attributes: Attributes = field(default_factory=Attributes)
    tokens: TokenList = field(default_factory=list)
    footnotes: List[ContainerElement] = field(default_factory=list)


@dataclass(slots=True)
class EmptyElement:
    kind: ElementKind
    attributes: Attributes = field(default_factory=Attributes)


Element = Union[ContainerElement, TextElement, EmptyElement]


def new_element(kind: ElementKind, attributes: Optional[Attributes] = None) -> Element:
    """Create an empty node of the right shape for ``kind``."""
    attributes = attributes or Attributes()
    if kind in CONTAINER_KINDS:
        return ContainerElement(kind, attributes)
    if kind in TEXT_KINDS:
        return TextElement(kind, attributes)
    return EmptyElement(kind, attributes)


def first_surname(authors: ContainerElement) -> Optional[TextElement]:
    """Surname of the first person in an authors element that has one."""
    for person in authors.iter_kind(ElementKind.PERSON):
        sn = person.find(ElementKind.SN)
        if sn is not None:
            return sn
    return None

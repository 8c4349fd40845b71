"""Document models: element tree, tokens, blocks and pages."""

from .blocks import Block, BlockList, Line, Segment, Tag
from .elements import (
    Attributes,
    ContainerElement,
    Element,
    ElementKind,
    EmptyElement,
    LineSpacing,
    TextElement,
)
from .page import Page, Typescript
from .tokens import DisplayFlags, FormatFlags, Token, TokenKind

__all__ = [
    "Attributes",
    "Block",
    "BlockList",
    "ContainerElement",
    "DisplayFlags",
    "Element",
    "ElementKind",
    "EmptyElement",
    "FormatFlags",
    "Line",
    "LineSpacing",
    "Page",
    "Segment",
    "Tag",
    "TextElement",
    "Token",
    "TokenKind",
    "Typescript",
]

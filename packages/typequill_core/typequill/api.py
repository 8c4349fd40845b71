"""
Simple high-level API for typequill.

Main entry point for users: read manuscript markup, lay it out and write
PostScript.

Usage example:
>>> from typequill import api
>>>
>>> # Whole pipeline
>>> api.convert('story.xml', 'story.ps')
>>>
>>> # Step by step
>>> root = api.read('story.xml')
>>> typescript = api.typeset(root)
>>> data = api.render(typescript)
"""

from __future__ import annotations

import logging
import pprint
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .engine.block_builder import build_blocks
from .engine.page_engine import PageConfig
from .engine.paginator import Paginator
from .engine.segments import segment_from_text
from .engine.slug_line import short_author_name, short_title
from .export.postscript_writer import PostScriptWriter, render_postscript
from .models.blocks import BlockList
from .models.elements import Element, ElementKind
from .models.page import Typescript
from .parser.xml_reader import read_file, read_string
from .version import PROGRAM_NAME

logger = logging.getLogger(__name__)

__all__ = [
    "read",
    "read_markup",
    "build",
    "typeset",
    "render",
    "convert",
    "dump_elements",
    "dump_blocks",
]

PathLike = Union[str, Path]


def read(path: PathLike) -> Element:
    """Read a manuscript, or a fragment of one, from a file."""
    return read_file(path)


def read_markup(markup: Union[str, bytes]) -> Element:
    """Read a manuscript, or a fragment of one, from a string."""
    return read_string(markup)


def build(root: Element, config: Optional[PageConfig] = None) -> BlockList:
    """Format an element tree into blocks."""
    return build_blocks(root, config)


def typeset(root: Element, config: Optional[PageConfig] = None) -> Typescript:
    """
    Format and paginate an element tree.

    A manuscript gets a title page, slug line data and a word count. Any
    other root is laid out as a fragment from page 1, titled with its
    element name.

    Args:
        root: Element tree from ``read`` or ``read_markup``
        config: Page geometry, defaults to the standard manuscript page

    Returns:
        Composed pages with the metadata the writer needs
    """
    blocks = build_blocks(root, config)

    if root.kind is ElementKind.MANUSCRIPT:
        attributes = root.attributes
        paginator = Paginator(attributes.first_page, attributes.has_structure, config)
        pages = paginator.paginate(blocks)
        typescript = Typescript(
            pages=pages,
            short_title=short_title(root, config),
            short_author_name=short_author_name(root),
            contact=paginator.contact,
            word_count=attributes.word_count,
            has_structure=attributes.has_structure,
        )
    else:
        paginator = Paginator(1, False, config)
        pages = paginator.paginate(blocks)
        typescript = Typescript(
            pages=pages,
            short_title=segment_from_text(root.kind.tag),
            short_author_name=segment_from_text(PROGRAM_NAME),
        )

    logger.info(f"Typeset <{root.kind.tag}>: {len(blocks)} blocks, {len(pages)} pages")
    return typescript


def render(typescript: Typescript, config: Optional[PageConfig] = None) -> bytes:
    """Render a typescript to PostScript bytes."""
    return render_postscript(typescript, config)


def convert(source: PathLike, output: Union[PathLike, BinaryIO, None] = None,
            config: Optional[PageConfig] = None) -> int:
    """
    Convert a markup file to PostScript.

    Args:
        source: Input markup file
        output: Output path or binary stream; standard output when None

    Returns:
        Number of bytes written
    """
    typescript = typeset(read_file(source), config)
    return PostScriptWriter(typescript, config).export(output)


def dump_elements(root: Element) -> str:
    """Readable dump of an element tree."""
    return pprint.pformat(root, width=100)


def dump_blocks(blocks: BlockList) -> str:
    """One block per line."""
    return "\n".join(repr(block) for block in blocks)

"""
typequill - standard manuscript typesetting.

Reads manuscript markup (a title page, front matter, a body of parts,
chapters, sections and paragraphs, back matter, footnotes) and lays it out
the way a typewritten submission looks: Courier 12, double spaced, one inch
margins, a slug line on every page and footnotes kept on the page of their
first reference. The result is a PostScript program.

Quick Start:
    from typequill import convert

    convert("story.xml", "story.ps")

    # Step by step
    from typequill import read, typeset, render

    typescript = typeset(read("story.xml"))
    data = render(typescript)
"""

from .version import PROGRAM_NAME, __version__, __version_info__

from .exceptions import (
    DanglingReferenceError,
    GrammarError,
    LayoutError,
    ParsingError,
    RenderingError,
    TypequillError,
)

from .api import (
    build,
    convert,
    dump_blocks,
    dump_elements,
    read,
    read_markup,
    render,
    typeset,
)

__all__ = [
    "PROGRAM_NAME",
    "__version__",
    "__version_info__",
    "DanglingReferenceError",
    "GrammarError",
    "LayoutError",
    "ParsingError",
    "RenderingError",
    "TypequillError",
    "build",
    "convert",
    "dump_blocks",
    "dump_elements",
    "read",
    "read_markup",
    "render",
    "typeset",
]

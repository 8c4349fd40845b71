"""Output writers."""

from .postscript_writer import PostScriptWriter, render_postscript, round_word_count

__all__ = ["PostScriptWriter", "render_postscript", "round_word_count"]

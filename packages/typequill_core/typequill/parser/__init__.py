"""Readers for manuscript markup."""

from .text_parser import tokenize
from .xml_reader import ManuscriptReader, read_file, read_string

__all__ = ["ManuscriptReader", "read_file", "read_string", "tokenize"]

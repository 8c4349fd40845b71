"""
Pytest configuration for typequill
"""

import logging
import sys
from pathlib import Path

import pytest

from typequill.models.blocks import Block, Line
from typequill.engine.segments import segment_from_text


SAMPLE_MANUSCRIPT = """\
<manuscript>
  <head>
    <title>The Long Voyage</title>
    <authors>
      <person><gn>Joseph</gn><sn>Conrad</sn></person>
    </authors>
    <contact>J. Conrad, Kent</contact>
  </head>
  <body>
    <chapter>Youth</chapter>
    <p>It was a ship.</p>
    <chapter>Heart</chapter>
    <p>Another.<footnote>A note.</footnote></p>
  </body>
</manuscript>
"""


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests; undo whatever setup_logging installed."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()
    package_logger = logging.getLogger("typequill")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_manuscript() -> str:
    """Small structured manuscript with a contact block and a footnote."""
    return SAMPLE_MANUSCRIPT


@pytest.fixture
def sample_path(tmp_path) -> Path:
    """The sample manuscript written to a file."""
    path = tmp_path / "voyage.xml"
    path.write_text(SAMPLE_MANUSCRIPT, encoding="utf-8")
    return path


def make_line(text: str, note_refs=None, column: int = 10) -> Line:
    return Line(column=column, segments=[segment_from_text(text)], note_refs=list(note_refs or []))


def make_block(n: int, prefix: str = "line", **kwargs) -> Block:
    """Single spaced block of ``n`` numbered lines."""
    return Block(lines=[make_line(f"{prefix} {i}") for i in range(n)], **kwargs)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "e2e: marks tests as end-to-end tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False

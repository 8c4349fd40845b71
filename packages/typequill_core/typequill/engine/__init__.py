"""Layout engine: line breaking, block building and pagination."""

from .block_builder import BlockBuilder, build_blocks
from .page_engine import DEFAULT_CONFIG, PageConfig
from .paginator import Paginator, paginate

__all__ = [
    "BlockBuilder",
    "DEFAULT_CONFIG",
    "PageConfig",
    "Paginator",
    "build_blocks",
    "paginate",
]

"""
Command-line interface for typequill.

Usage:
    typequill story.xml > story.ps
    typequill story.xml --output story.ps
    typequill story.xml --elements
    typequill story.xml --blocks
"""

import argparse
import sys
from pathlib import Path

from .exceptions import TypequillError
from .utils.logger import get_logger, setup_logging
from .version import PROGRAM_NAME, __version__

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="typequill - typeset manuscript markup as standard manuscript PostScript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  typequill story.xml > story.ps
  typequill story.xml -o story.ps
  typequill story.xml --elements
  typequill chapter.xml --blocks --log-level DEBUG
        """,
    )

    parser.add_argument("input", help="Input manuscript markup file")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-e", "--elements",
        action="store_true",
        help="Print the element tree instead of PostScript"
    )
    mode.add_argument(
        "-b", "--blocks",
        action="store_true",
        help="Print the formatted blocks instead of PostScript"
    )

    parser.add_argument(
        "-o", "--output",
        help="Output file path (default: standard output)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Log plain text instead of rich console output"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"{PROGRAM_NAME} {__version__}",
    )

    return parser


def _write_text(text: str, output) -> None:
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def cmd_elements(args) -> int:
    """Handle --elements."""
    from .api import dump_elements, read

    _write_text(dump_elements(read(args.input)), args.output)
    return 0


def cmd_blocks(args) -> int:
    """Handle --blocks."""
    from .api import build, dump_blocks, read

    _write_text(dump_blocks(build(read(args.input))), args.output)
    return 0


def cmd_convert(args) -> int:
    """Handle the default PostScript conversion."""
    from .api import convert

    size = convert(args.input, args.output)
    logger.info(f"Wrote {size:,} bytes to {args.output or 'standard output'}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, use_rich=not args.plain_logs)

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"error: file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        if args.elements:
            return cmd_elements(args)
        if args.blocks:
            return cmd_blocks(args)
        return cmd_convert(args)
    except TypequillError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

#!/usr/bin/env python3
"""
Example of the high-level API.

Typesets the sample manuscript next to this script, step by step.
"""

from pathlib import Path

from typequill import api
from typequill.utils import setup_logging

HERE = Path(__file__).parent


def main():
    """Run the pipeline on youth.xml."""
    setup_logging("INFO")

    # 1. Read the markup
    print("Reading manuscript...")
    root = api.read(HERE / "youth.xml")
    print(f"   Words: {root.attributes.word_count}")

    # 2. Format and paginate
    print("Typesetting...")
    blocks = api.build(root)
    typescript = api.typeset(root)
    print(f"   Blocks: {len(blocks)}")
    print(f"   Pages: {len(typescript.pages)}")

    # 3. Write PostScript
    output = HERE / "output" / "youth.ps"
    output.parent.mkdir(exist_ok=True)
    output.write_bytes(api.render(typescript))
    print(f"   Saved: {output}")


if __name__ == "__main__":
    main()

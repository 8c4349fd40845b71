"""
Entry point for running typequill as a module.

Usage:
    python -m typequill story.xml > story.ps
    python -m typequill story.xml --blocks
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

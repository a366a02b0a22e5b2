"""
Entry point for running the review CLI as a module.

Usage:
    python -m moviereviews <command>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

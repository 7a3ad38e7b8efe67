"""
Entry point for running mathml_to_ascii as a module.

Usage:
    python -m mathml_to_ascii chapter.xhtml --all
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

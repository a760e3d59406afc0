"""Main entry point for running symkalk_pkg as a module.

This allows running SymKalk with:
    python -m symkalk_pkg
    python -m symkalk_pkg -e "x = 5" -e "2(x + 1)"

This is equivalent to running:
    python symkalk.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())

#!/usr/bin/env python3
"""
SymKalk - Symbolic Expression Engine

Main entry point for the SymKalk calculator. This file serves as a thin
wrapper that delegates all functionality to the symkalk_pkg package.

Usage:
    python symkalk.py                          # Interactive REPL
    python symkalk.py -e "x = 5" -e "2(x+1)"   # Evaluate lines
    python symkalk.py --help                   # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for SymKalk.

    Delegates to the symkalk_pkg.cli module, which handles argument parsing,
    the interactive loop and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from symkalk_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import symkalk_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Centralized configuration for SymKalk.

This module defines:
- Input validation limits (length)
- Output formatting precision
- Reserved names and REPL commands
- Plot sampling and ASCII canvas dimensions

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with SYMKALK_)
"""

import os

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("symkalk")
except Exception:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Logging
LOG_LEVEL = os.getenv("SYMKALK_LOG_LEVEL", "WARNING")

# Output configuration
OUTPUT_PRECISION = int(os.getenv("SYMKALK_OUTPUT_PRECISION", "6"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SYMKALK_MAX_INPUT_LENGTH", "10000"))  # characters
STRICT_INPUT = (
    os.getenv("SYMKALK_STRICT_INPUT", "false").lower() == "true"
)  # raise instead of warn on characters outside the alphabet

# Binding store
ANSWER_NAME = os.getenv("SYMKALK_ANSWER_NAME", "ans")

# REPL commands
QUIT_COMMAND = os.getenv("SYMKALK_QUIT_COMMAND", "quit")
HELP_COMMAND = "help"
VARS_COMMAND = "vars"
DIFF_COMMAND = "diff"
PLOT_COMMAND = "plot"

# Plotting
PLOT_POINTS = int(os.getenv("SYMKALK_PLOT_POINTS", "100"))
PLOT_ROWS = int(os.getenv("SYMKALK_PLOT_ROWS", "20"))  # Height of ASCII plot in characters
PLOT_COLS = int(os.getenv("SYMKALK_PLOT_COLS", "60"))  # Width of ASCII plot in characters
PLOT_DEFAULT_MIN = float(os.getenv("SYMKALK_PLOT_DEFAULT_MIN", "-10"))
PLOT_DEFAULT_MAX = float(os.getenv("SYMKALK_PLOT_DEFAULT_MAX", "10"))

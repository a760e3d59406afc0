from __future__ import annotations

import argparse
import json
import sys
from typing import Callable

from . import config
from .api import diff, evaluate
from .config import VERSION
from .engine import Engine
from .expr import Constant
from .logging_config import get_logger, setup_logging
from .parser import format_numeric
from .plotting import plot_named
from .types import EvalResult

logger = get_logger("cli")

WELCOME = f"SymKalk {VERSION} - symbolic expression engine. Type '{config.HELP_COMMAND}' for help, '{config.QUIT_COMMAND}' to exit."


def print_help_text() -> None:
    help_text = f"""
Expressions
  Numbers are digit sequences, variables are single letters.
  Operators: +  *  =  and parentheses. 2(x + y) means 2 * (x + y).

  >> x = 5              bind x to the constant 5
  >> y = 1 + x          bind y to a formula, re-evaluated on every use
  >> y * y              evaluate and store the result as 'ans'
  36

Commands
  {config.VARS_COMMAND:<22} list variables and stored expressions
  {config.DIFF_COMMAND + " <name> <var>":<22} differentiate a stored expression
  {config.PLOT_COMMAND + " <name> <var> [lo hi]":<22} ASCII plot of a stored expression
  {config.HELP_COMMAND:<22} show this help
  {config.QUIT_COMMAND:<22} leave the calculator
"""
    print(help_text)


def format_result(result: EvalResult, output_format: str = "human") -> str:
    if output_format == "json":
        return json.dumps(result.to_dict())
    if not result.ok:
        return f"Error: {result.error}"
    if result.name == config.ANSWER_NAME or result.name is None:
        return result.result or ""
    return f"{result.name} = {result.result}"


def describe_bindings(engine: Engine) -> str:
    lines = []
    for name, value in engine.variables.items():
        expr = engine.get_expression(name)
        # a name rebound to a formula leaves a stale slot behind
        if expr is not None and not isinstance(expr, Constant):
            continue
        lines.append(f"  {name} = {format_numeric(value)}")
    for name, expr in engine.bindings():
        if name in engine.variables and isinstance(expr, Constant):
            continue
        lines.append(f"  {name} := {engine.format_expr(expr)}")
    return "\n".join(lines) if lines else "  (no bindings)"


def _run_diff(engine: Engine, args: list[str]) -> str:
    if len(args) != 2:
        return f"Usage: {config.DIFF_COMMAND} <name> <var>"
    result = diff(engine, args[0], args[1])
    if not result.ok:
        return f"Error: {result.error}"
    return f"{result.name} = {result.expression}\n{result.result}"


def _run_plot(engine: Engine, args: list[str]) -> str:
    if len(args) not in (2, 4):
        return f"Usage: {config.PLOT_COMMAND} <name> <var> [lo hi]"
    x_min = x_max = None
    if len(args) == 4:
        try:
            x_min, x_max = float(args[2]), float(args[3])
        except ValueError:
            return "Error: Plot range must be two numbers"
    result = plot_named(engine, args[0], args[1], x_min, x_max, ascii=True)
    if not result.ok:
        return f"Error: {result.error}"
    return result.result


def handle_line(engine: Engine, line: str, output_format: str = "human") -> str | None:
    """Handle one REPL line and return the text to print (None for nothing)."""
    stripped = line.strip()
    if not stripped:
        return None
    words = stripped.split()
    command = words[0].lower()
    if command == config.HELP_COMMAND and len(words) == 1:
        print_help_text()
        return None
    if command == config.VARS_COMMAND and len(words) == 1:
        return describe_bindings(engine)
    if command == config.DIFF_COMMAND:
        return _run_diff(engine, words[1:])
    if command == config.PLOT_COMMAND:
        return _run_plot(engine, words[1:])
    return format_result(evaluate(engine, stripped), output_format)


def _safe_handle_line(engine: Engine, line: str) -> str | None:
    try:
        return handle_line(engine, line)
    except Exception as e:
        logger.exception("Unexpected error in REPL command", extra={"line": line})
        return f"Error: {e}"


def repl(engine: Engine | None = None, input_func: Callable[[str], str] = input) -> int:
    """Read lines until the quit command or end of input."""
    engine = engine or Engine()
    print(WELCOME)
    while True:
        try:
            line = input_func(">> ")
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print("\nInterrupted by user.")
            return 1
        if line.strip() == config.QUIT_COMMAND:
            return 0
        output = _safe_handle_line(engine, line)
        if output is not None:
            print(output)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for SymKalk CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="symkalk")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        action="append",
        help="Evaluate a line and exit (repeatable; lines share one binding store)",
        dest="eval_lines",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject lines containing unsupported characters instead of ignoring them",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: SYMKALK_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    # Apply CLI configuration overrides
    if args.precision and args.precision > 0:
        config.OUTPUT_PRECISION = int(args.precision)
    if args.strict:
        config.STRICT_INPUT = True

    if args.version:
        print(VERSION)
        return 0

    engine = Engine()
    if args.eval_lines:
        exit_code = 0
        for line in args.eval_lines:
            result = evaluate(engine, line)
            print(format_result(result, args.format))
            if not result.ok:
                exit_code = 1
        return exit_code

    return repl(engine)


if __name__ == "__main__":
    sys.exit(main_entry())

"""Optional plotting of a named expression against one variable."""

from __future__ import annotations

import math

import numpy as np

try:
    # Non-GUI backend so plotting works without a display
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from . import config
from .engine import Engine
from .expr import evaluate
from .logging_config import get_logger
from .numeric import Numeric, NumericKind
from .types import EvalResult, EvaluationError, SymkalkError, UnknownNameError

logger = get_logger("plotting")


def sample_named(
    engine: Engine,
    name: str,
    variable: str,
    x_min: float,
    x_max: float,
    points: int | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Evaluate the expression bound to ``name`` at evenly spaced values of ``variable``.

    Other variables keep their current values. The engine is not modified.
    Points where evaluation fails or the value is not real become NaN.

    Returns:
        Tuple (x_vals, y_vals) of float arrays

    Raises:
        UnknownNameError: If ``name`` has no stored expression
    """
    expr = engine.get_expression(name)
    if expr is None:
        raise UnknownNameError(f"No expression named '{name}'")
    if points is None:
        points = config.PLOT_POINTS

    x_vals = np.linspace(x_min, x_max, points)
    y_vals = np.full(points, np.nan)
    values = list(engine.values)
    index = engine.variables.lookup(variable)

    for i, x in enumerate(x_vals):
        if index is not None:
            values[index] = Numeric.from_real(float(x))
        try:
            y = evaluate(expr, values)
        except EvaluationError as e:
            logger.debug("No value at %s=%s: %s", variable, x, e, extra={"target": name})
            continue
        if y.kind == NumericKind.COMPLEX and y.value.imag != 0:
            continue
        y_vals[i] = y.to_real()
    return x_vals, y_vals


def ascii_plot(
    x_vals: np.ndarray,
    y_vals: np.ndarray,
    rows: int | None = None,
    cols: int | None = None,
) -> str:
    """Render sampled points as text, with axes drawn where they are in range."""
    rows = rows or config.PLOT_ROWS
    cols = cols or config.PLOT_COLS
    x_min, x_max = float(x_vals[0]), float(x_vals[-1])
    x_range = x_max - x_min if x_max != x_min else 1

    valid_y = [y for y in y_vals if math.isfinite(y) and -1e10 < y < 1e10]
    if not valid_y:
        raise EvaluationError("Cannot plot: function values out of range")
    y_min, y_max = min(valid_y), max(valid_y)
    y_range = y_max - y_min if y_max != y_min else 1

    canvas = [[" " for _ in range(cols)] for _ in range(rows)]
    x_axis_row = int((y_max - 0) / y_range * (rows - 1)) if y_min <= 0 <= y_max else -1
    y_axis_col = int((0 - x_min) / x_range * (cols - 1)) if x_min <= 0 <= x_max else -1
    for r in range(rows):
        for c in range(cols):
            if r == x_axis_row and c == y_axis_col:
                canvas[r][c] = "+"
            elif r == x_axis_row:
                canvas[r][c] = "-"
            elif c == y_axis_col:
                canvas[r][c] = "|"

    for x, y in zip(x_vals, y_vals):
        if not math.isfinite(y) or not -1e10 < y < 1e10:
            continue
        col = int((x - x_min) / x_range * (cols - 1))
        row = int((y_max - y) / y_range * (rows - 1))
        canvas[max(0, min(rows - 1, row))][max(0, min(cols - 1, col))] = "*"

    return "\n".join("".join(line) for line in canvas)


def plot_named(
    engine: Engine,
    name: str,
    variable: str = "x",
    x_min: float | None = None,
    x_max: float | None = None,
    points: int | None = None,
    ascii: bool = True,
    output_path: str | None = None,
) -> EvalResult:
    """Plot the expression bound to ``name`` against ``variable``.

    Args:
        engine: Binding store holding the expression
        name: Name of the stored expression
        variable: Variable for the horizontal axis
        x_min: Left end of the range (default: config.PLOT_DEFAULT_MIN)
        x_max: Right end of the range (default: config.PLOT_DEFAULT_MAX)
        points: Number of samples (default: config.PLOT_POINTS)
        ascii: Return an ASCII plot instead of writing an image
        output_path: PNG path for matplotlib output (default: a temporary file)

    Returns:
        EvalResult whose ``result`` is the ASCII plot or the saved file path
    """
    x_min = config.PLOT_DEFAULT_MIN if x_min is None else x_min
    x_max = config.PLOT_DEFAULT_MAX if x_max is None else x_max
    if x_min >= x_max:
        return EvalResult(ok=False, error="Plot range is empty", code="VALIDATION_ERROR")
    if not ascii and not HAS_MATPLOTLIB:
        return EvalResult(
            ok=False,
            error="matplotlib not installed. Use ascii=True for ASCII plot.",
            code="MISSING_DEPENDENCY",
        )

    try:
        x_vals, y_vals = sample_named(engine, name, variable, x_min, x_max, points)
        if ascii:
            return EvalResult(ok=True, name=name, result=ascii_plot(x_vals, y_vals))

        if output_path is None:
            import tempfile

            with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as handle:
                output_path = handle.name

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(x_vals, y_vals, linewidth=2, color="#2E86AB", label=name)
        ax.set_xlabel(variable)
        ax.set_ylabel(name)
        ax.set_title(f"{name} = {engine.format_expr(engine.get_expression(name))}")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, alpha=0.3)
        ax.legend(loc="best")
        plt.tight_layout()
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        return EvalResult(ok=True, name=name, result=output_path)
    except SymkalkError as e:
        return EvalResult(ok=False, error=str(e), code=e.code)
    except OSError as e:
        return EvalResult(ok=False, error=f"Failed to save plot: {e}", code="IO_ERROR")

"""Public API for SymKalk - returns structured objects instead of raising."""

from __future__ import annotations

from .calculus import pretty
from .engine import Engine, split_assignment
from .lexer import scan_ignored, tokenize
from .logging_config import get_logger
from .parser import format_numeric
from .types import EvalResult, SymkalkError, ValidationError

logger = get_logger("api")


def evaluate(engine: Engine, line: str) -> EvalResult:
    """Interpret one line against ``engine``.

    Args:
        engine: Binding store to read and update
        line: Input line (e.g., "x = 5", "2(x + 1)")

    Returns:
        EvalResult with the target name, formatted value and stored expression

    Example:
        >>> engine = Engine()
        >>> evaluate(engine, "x = 5").result
        '5'
        >>> evaluate(engine, "x * x + 1").result
        '26'
    """
    try:
        name = engine.process_line(line)
        value = engine.evaluate_named(name)
        expr = engine.get_expression(name)
        return EvalResult(
            ok=True,
            name=name,
            result=format_numeric(value) if value is not None else None,
            expression=engine.format_expr(expr) if expr is not None else None,
        )
    except SymkalkError as e:
        return EvalResult(ok=False, error=str(e), code=e.code)
    except Exception as e:
        logger.exception("Unexpected error interpreting line", extra={"line": line})
        return EvalResult(ok=False, error=f"Unexpected error: {e}", code="INTERNAL_ERROR")


def diff(engine: Engine, name: str, variable: str) -> EvalResult:
    """Differentiate the expression bound to ``name`` with respect to ``variable``.

    Returns:
        EvalResult whose ``expression`` is the derivative and whose ``result``
        is its value under the current bindings

    Example:
        >>> engine = Engine()
        >>> _ = evaluate(engine, "x = 3")
        >>> _ = evaluate(engine, "f = x * x * x")
        >>> diff(engine, "f", "x").result
        '27'
    """
    try:
        derivative = engine.differentiate_named(name, variable)
        value = engine.evaluate(derivative)
    except SymkalkError as e:
        return EvalResult(ok=False, error=str(e), code=e.code)
    except Exception as e:
        logger.exception(
            "Unexpected error differentiating",
            extra={"target": name, "variable": variable},
        )
        return EvalResult(ok=False, error=f"Unexpected error: {e}", code="INTERNAL_ERROR")

    return EvalResult(
        ok=True,
        name=f"d{name}/d{variable}",
        result=format_numeric(value),
        expression=pretty(derivative, engine.variable_names),
    )


def validate_expression(line: str) -> tuple[bool, str | None]:
    """Validate a line without touching any binding store.

    Unsupported characters count as invalid here even outside strict mode.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_expression("2(x + 1)")
        (True, None)
        >>> validate_expression("(x + 1")
        (False, "Invalid expression: Unclosed '(' at token 0")
    """
    ignored = scan_ignored(line)
    if ignored:
        return False, f"Unsupported characters in input: {', '.join(map(repr, ignored))}"
    try:
        _, rhs = split_assignment(tokenize(line, strict=True))
        Engine().parse(rhs)
        return True, None
    except ValidationError as e:
        return False, str(e)
    except SymkalkError as e:
        return False, f"Invalid expression: {e}"

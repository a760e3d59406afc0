"""Infix to postfix conversion and result formatting.

This module handles:
- Shunting-yard conversion of an infix token sequence to postfix order
- Parenthesis matching
- Result formatting (numbers, superscript exponents)
"""

from __future__ import annotations

import re
from typing import Any

from . import config
from .logging_config import get_logger
from .numeric import Numeric, NumericKind
from .tokens import Operator, OperatorKind, Token, format_tokens, is_term
from .types import MismatchedParenthesisError

logger = get_logger("parser")


def _pops_before(top: Operator, incoming: Operator) -> bool:
    if top.kind == OperatorKind.LEFT_PAREN:
        return False
    if top.precedence > incoming.precedence:
        return True
    return top.precedence == incoming.precedence and incoming.left_associative


def to_postfix(tokens: list[Token]) -> list[Token]:
    """Convert an infix token sequence to postfix with the shunting-yard algorithm.

    Args:
        tokens: Infix tokens as produced by lexer.tokenize

    Returns:
        Tokens in postfix (operator-after-operands) order

    Raises:
        MismatchedParenthesisError: On an unmatched ')' or an unclosed '('
    """
    output: list[Token] = []
    stack: list[Operator] = []

    for token in tokens:
        if is_term(token):
            output.append(token)
        elif token.kind == OperatorKind.LEFT_PAREN:
            stack.append(token)
        elif token.kind == OperatorKind.RIGHT_PAREN:
            while True:
                if not stack:
                    _, position = is_balanced(tokens)
                    raise MismatchedParenthesisError(
                        f"Unmatched ')' at token {position}", position
                    )
                top = stack.pop()
                if top.kind == OperatorKind.LEFT_PAREN:
                    break
                output.append(top)
        else:
            while stack and _pops_before(stack[-1], token):
                output.append(stack.pop())
            stack.append(token)

    while stack:
        top = stack.pop()
        if top.kind == OperatorKind.LEFT_PAREN:
            _, position = is_balanced(tokens)
            raise MismatchedParenthesisError(
                f"Unclosed '(' at token {position}", position
            )
        output.append(top)

    logger.debug("Postfix: %s", format_tokens(output))
    return output


def is_balanced(tokens: list[Token]) -> tuple[bool, int | None]:
    """Check parenthesis balance of a token sequence.

    Returns:
        Tuple (balanced, position) where position is the index of the first
        offending token, or None when balanced
    """
    open_positions: list[int] = []
    for i, token in enumerate(tokens):
        if is_term(token):
            continue
        if token.kind == OperatorKind.LEFT_PAREN:
            open_positions.append(i)
        elif token.kind == OperatorKind.RIGHT_PAREN:
            if not open_positions:
                return False, i
            open_positions.pop()
    if open_positions:
        return False, open_positions[0]
    return True, None


def superscriptify(input_str: str) -> str:
    """Convert numeric string to Unicode superscript characters.

    Args:
        input_str: Input string with digits and '-' (e.g., "123", "-5")

    Returns:
        String with superscript Unicode characters (e.g., "¹²³", "⁻⁵")
    """
    mapping = {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "-": "⁻",
    }
    return "".join(mapping.get(char, char) for char in input_str)


def format_superscript(expr_str: str) -> str:
    """Replace Python power notation (**) with Unicode superscripts.

    Args:
        expr_str: Expression string (e.g., "x**2", "x**-3")

    Returns:
        String with superscripts (e.g., "x²", "x⁻³")
    """
    return re.sub(r"\*\*(\-?\d+)", lambda m: superscriptify(m.group(1)), expr_str)


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a real value with the given number of significant digits."""
    if precision is None:
        precision = config.OUTPUT_PRECISION
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        return str(val)


def format_numeric(value: Numeric, precision: int | None = None) -> str:
    """Format a Numeric for display; Integers are printed exactly."""
    if value.kind == NumericKind.INTEGER:
        return str(value.value)
    if value.kind == NumericKind.REAL:
        return format_number(value.value, precision)
    real = format_number(value.value.real, precision)
    imag = format_number(abs(value.value.imag), precision)
    sign = "-" if value.value.imag < 0 else "+"
    return f"{real} {sign} {imag}i"

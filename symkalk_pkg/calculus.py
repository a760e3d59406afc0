"""Symbolic differentiation and the SymPy bridge."""

from __future__ import annotations

from typing import Sequence

import sympy as sp

from .expr import (
    Binary,
    BinaryFunction,
    Constant,
    Expr,
    Unary,
    UnaryFunction,
    Variable,
    add,
    clean_node,
    constant,
    cos,
    div,
    integer,
    mul,
    neg,
    one,
    postvisitor,
    power,
    simplify_node,
    sin,
    sub,
    to_string,
    zero,
)
from .logging_config import get_logger
from .numeric import Numeric, NumericKind
from .parser import format_superscript
from .types import UnsupportedDerivativeError

logger = get_logger("calculus")


def _reduced_exponent(exponent: Expr) -> Expr:
    if isinstance(exponent, Constant):
        return constant(exponent.value - Numeric.one())
    return sub(exponent, one())


# The rules below receive cleaned operands and derivatives, so each node they
# build only needs the local rules applied to itself.


def _derive_unary(expr: Unary, da: Expr) -> Expr:
    a = expr.argument
    function = expr.function
    if function == UnaryFunction.NEG:
        return neg(da)
    if function == UnaryFunction.EXP:
        return simplify_node(mul(da, expr))
    if function == UnaryFunction.SIN:
        return simplify_node(mul(da, cos(a)))
    if function == UnaryFunction.COS:
        return simplify_node(mul(neg(da), sin(a)))
    if function == UnaryFunction.SQRT:
        return simplify_node(div(da, simplify_node(mul(integer(2), expr))))
    raise UnsupportedDerivativeError(f"No derivative rule for {function.value}")


def _derive_binary(expr: Binary, da: Expr, db: Expr, exponent_varies: bool) -> Expr:
    a, b = expr.lhs, expr.rhs
    function = expr.function

    if function == BinaryFunction.POW:
        if exponent_varies:
            raise UnsupportedDerivativeError(
                "the exponent depends on the differentiation variable"
            )
        scaled = simplify_node(mul(b, power(a, _reduced_exponent(b))))
        return simplify_node(mul(scaled, da))

    if function == BinaryFunction.ADD:
        return simplify_node(add(da, db))
    if function == BinaryFunction.SUB:
        return sub(da, db)
    if function == BinaryFunction.MUL:
        return simplify_node(
            add(simplify_node(mul(da, b)), simplify_node(mul(a, db)))
        )
    if function == BinaryFunction.DIV:
        numerator = sub(simplify_node(mul(da, b)), simplify_node(mul(a, db)))
        return simplify_node(div(numerator, power(b, integer(2))))
    raise UnsupportedDerivativeError(f"No derivative rule for {function.value}")


def _derive_node(
    node: Expr, *args: tuple[bool, Expr, Expr], index: int, names: Sequence[str] | None
) -> tuple[bool, Expr, Expr]:
    # Each result is (depends on the variable, derivative, cleaned node).
    cleaned = clean_node(node, *(arg[2] for arg in args))
    if isinstance(node, Constant):
        return False, zero(), cleaned
    if isinstance(node, Variable):
        if node.index == index:
            return True, one(), cleaned
        return False, zero(), cleaned
    if not any(arg[0] for arg in args):
        return False, zero(), cleaned
    if isinstance(node, Unary):
        return True, _derive_unary(cleaned, args[0][1]), cleaned
    if isinstance(node, Binary):
        (_, da, a), (b_depends, db, b) = args
        try:
            # the rule sees both cleaned operands even where ``cleaned`` collapsed
            rule_input = Binary(node.function, a, b)
            return True, _derive_binary(rule_input, da, db, b_depends), cleaned
        except UnsupportedDerivativeError as e:
            raise UnsupportedDerivativeError(
                f"Cannot differentiate {to_string(node, names)}: {e}"
            ) from e
    raise TypeError(f"Not an expression node: {type(node).__name__}")


def derivative(expr: Expr, index: int, names: Sequence[str] | None = None) -> Expr:
    """Differentiate ``expr`` with respect to ``Variable(index)``.

    Subtrees that do not depend on the variable short-circuit to ``0``. Every
    node built by a rule is cleaned before it is embedded further up.

    Args:
        expr: Expression to differentiate
        index: Variable slot to differentiate with respect to
        names: Optional variable names, used only in error messages

    Returns:
        The cleaned derivative tree

    Raises:
        UnsupportedDerivativeError: For ``a ^ b`` where ``b`` depends on the variable
    """
    return postvisitor(expr, _derive_node, index=index, names=names)[1]


# SymPy bridge

_SYMPY_UNARY = {
    UnaryFunction.NEG: lambda arg: -arg,
    UnaryFunction.EXP: sp.exp,
    UnaryFunction.SIN: sp.sin,
    UnaryFunction.COS: sp.cos,
    UnaryFunction.SQRT: sp.sqrt,
}

_SYMPY_BINARY = {
    BinaryFunction.ADD: lambda lhs, rhs: lhs + rhs,
    BinaryFunction.SUB: lambda lhs, rhs: lhs - rhs,
    BinaryFunction.MUL: lambda lhs, rhs: lhs * rhs,
    BinaryFunction.DIV: lambda lhs, rhs: lhs / rhs,
    BinaryFunction.POW: lambda lhs, rhs: lhs**rhs,
}


def numeric_to_sympy(value: Numeric) -> sp.Expr:
    if value.kind == NumericKind.INTEGER:
        return sp.Integer(value.value)
    if value.kind == NumericKind.REAL:
        return sp.Float(value.value)
    return sp.Float(value.value.real) + sp.I * sp.Float(value.value.imag)


def _sympy_node(node: Expr, *args: sp.Expr, names: Sequence[str] | None) -> sp.Expr:
    if isinstance(node, Constant):
        return numeric_to_sympy(node.value)
    if isinstance(node, Variable):
        if names is not None and 0 <= node.index < len(names):
            return sp.Symbol(names[node.index])
        return sp.Symbol(f"v{node.index}")
    if isinstance(node, Unary):
        return _SYMPY_UNARY[node.function](*args)
    if isinstance(node, Binary):
        return _SYMPY_BINARY[node.function](*args)
    raise TypeError(f"Not an expression node: {type(node).__name__}")


def to_sympy(expr: Expr, names: Sequence[str] | None = None) -> sp.Expr:
    """Convert an expression tree into an equivalent SymPy expression.

    Division is converted to SymPy's exact division, so an Integer quotient
    that this engine truncates stays a Rational on the SymPy side.

    Args:
        expr: Expression tree
        names: Variable names indexed by slot; missing slots become ``v<i>``
    """
    return postvisitor(expr, _sympy_node, names=names)


def pretty(expr: Expr, names: Sequence[str] | None = None) -> str:
    """Render ``expr`` through SymPy with superscript exponents, e.g. ``4*x - 5/x²``."""
    try:
        return format_superscript(sp.sstr(to_sympy(expr, names)))
    except (TypeError, ValueError, ZeroDivisionError, RecursionError) as e:
        logger.debug("SymPy rendering failed, using plain form: %s", e)
        return to_string(expr, names)

"""Expression trees.

An expression is one of four immutable node kinds:

- ``Constant``: a Numeric literal leaf
- ``Variable``: an index into an externally supplied list of values
- ``Unary``: a function (neg, exp, sin, cos, sqrt) applied to one argument
- ``Binary``: an operator (add, sub, mul, div, pow) applied to two operands

Nodes are frozen dataclasses, so structural equality is ``==`` (``same_tree``
for arbitrarily deep trees) and a subtree can be referenced by any number of
parents. All algorithms in this module are plain functions dispatching on the
node kind; the set of kinds is closed. Walks go through ``postvisitor``, which
keeps its own stack, so a long chain such as ``1 + 1 + ... + 1`` never hits
the interpreter recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar, Union

from .numeric import Numeric, NumericKind
from .types import UndefinedVariableIndexError

T = TypeVar("T")


class UnaryFunction(Enum):
    NEG = "neg"
    EXP = "exp"
    SIN = "sin"
    COS = "cos"
    SQRT = "sqrt"


class BinaryFunction(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


@dataclass(frozen=True)
class Constant:
    value: Numeric


@dataclass(frozen=True)
class Variable:
    index: int


@dataclass(frozen=True)
class Unary:
    function: UnaryFunction
    argument: "Expr"


@dataclass(frozen=True)
class Binary:
    function: BinaryFunction
    lhs: "Expr"
    rhs: "Expr"


Expr = Union[Constant, Variable, Unary, Binary]


# Constructors


def constant(value: Numeric) -> Constant:
    return Constant(value)


def integer(value: int) -> Constant:
    return Constant(Numeric.from_integer(value))


def real(value: float) -> Constant:
    return Constant(Numeric.from_real(value))


def zero() -> Constant:
    return integer(0)


def one() -> Constant:
    return integer(1)


def variable(index: int) -> Variable:
    return Variable(index)


def neg(argument: Expr) -> Unary:
    return Unary(UnaryFunction.NEG, argument)


def exp(argument: Expr) -> Unary:
    return Unary(UnaryFunction.EXP, argument)


def sin(argument: Expr) -> Unary:
    return Unary(UnaryFunction.SIN, argument)


def cos(argument: Expr) -> Unary:
    return Unary(UnaryFunction.COS, argument)


def sqrt(argument: Expr) -> Unary:
    return Unary(UnaryFunction.SQRT, argument)


def add(lhs: Expr, rhs: Expr) -> Binary:
    return Binary(BinaryFunction.ADD, lhs, rhs)


def sub(lhs: Expr, rhs: Expr) -> Binary:
    return Binary(BinaryFunction.SUB, lhs, rhs)


def mul(lhs: Expr, rhs: Expr) -> Binary:
    return Binary(BinaryFunction.MUL, lhs, rhs)


def div(lhs: Expr, rhs: Expr) -> Binary:
    return Binary(BinaryFunction.DIV, lhs, rhs)


def power(base: Expr, exponent: Expr) -> Binary:
    return Binary(BinaryFunction.POW, base, exponent)


def is_zero(expr: Expr) -> bool:
    return isinstance(expr, Constant) and expr.value.is_zero()


def is_unity(expr: Expr) -> bool:
    return isinstance(expr, Constant) and expr.value.is_unity()


# Traversal


def operands(expr: Expr) -> tuple:
    if isinstance(expr, Unary):
        return (expr.argument,)
    if isinstance(expr, Binary):
        return (expr.lhs, expr.rhs)
    return ()


def postvisitor(expr: Expr, fn: Callable[..., T], **kwargs: Any) -> T:
    """Visit ``expr`` in postorder applying ``fn`` to every node.

    ``fn(node, *operand_results, **kwargs)`` receives the node followed by the
    results already computed for its operands. The walk uses an explicit
    stack, so tree depth is bounded only by memory. A subtree shared by
    several parents is visited once.
    """
    # Keyed by id(): every key is a node reachable from expr, so ids stay unique.
    visited: dict[int, T] = {}
    stack = [(expr, False)]
    while stack:
        node, processed = stack.pop()
        if id(node) in visited:
            continue
        children = operands(node)
        if processed:
            visited[id(node)] = fn(
                node, *(visited[id(child)] for child in children), **kwargs
            )
        else:
            stack.append((node, True))
            for child in reversed(children):
                if id(child) not in visited:
                    stack.append((child, False))
    return visited[id(expr)]


def same_tree(lhs: Expr, rhs: Expr) -> bool:
    """Structural equality without recursion; identical objects compare equal at once."""
    stack = [(lhs, rhs)]
    while stack:
        a, b = stack.pop()
        if a is b:
            continue
        if type(a) is not type(b):
            return False
        if isinstance(a, (Constant, Variable)):
            if a != b:
                return False
        elif a.function != b.function:
            return False
        else:
            stack.extend(zip(operands(a), operands(b)))
    return True


# Evaluation

_UNARY_EVAL = {
    UnaryFunction.NEG: lambda value: -value,
    UnaryFunction.EXP: Numeric.exp,
    UnaryFunction.SIN: Numeric.sin,
    UnaryFunction.COS: Numeric.cos,
    UnaryFunction.SQRT: Numeric.sqrt,
}

_BINARY_EVAL = {
    BinaryFunction.ADD: lambda lhs, rhs: lhs + rhs,
    BinaryFunction.SUB: lambda lhs, rhs: lhs - rhs,
    BinaryFunction.MUL: lambda lhs, rhs: lhs * rhs,
    BinaryFunction.DIV: lambda lhs, rhs: lhs / rhs,
    BinaryFunction.POW: lambda lhs, rhs: lhs.pow(rhs),
}


def _evaluate_node(node: Expr, *args: Numeric, values: Sequence[Numeric]) -> Numeric:
    if isinstance(node, Constant):
        return node.value
    if isinstance(node, Variable):
        if not 0 <= node.index < len(values):
            raise UndefinedVariableIndexError(node.index, len(values))
        return values[node.index]
    if isinstance(node, Unary):
        return _UNARY_EVAL[node.function](*args)
    if isinstance(node, Binary):
        return _BINARY_EVAL[node.function](*args)
    raise TypeError(f"Not an expression node: {type(node).__name__}")


def evaluate(expr: Expr, values: Sequence[Numeric]) -> Numeric:
    """Evaluate ``expr`` with ``values[i]`` substituted for ``Variable(i)``.

    Raises:
        UndefinedVariableIndexError: If a variable index is outside ``values``
        DivisionByZeroError: On division by zero
        IntegerOverflowError: If an Integer result leaves the 64-bit range
    """
    return postvisitor(expr, _evaluate_node, values=values)


# Dependency queries


def _depends_any(node: Expr, *args: bool) -> bool:
    return isinstance(node, Variable) or any(args)


def _depends_on(node: Expr, *args: bool, index: int) -> bool:
    if isinstance(node, Variable):
        return node.index == index
    return any(args)


def depends_on_any_variable(expr: Expr) -> bool:
    return postvisitor(expr, _depends_any)


def depends_on_variable(expr: Expr, index: int) -> bool:
    """True if ``expr`` contains ``Variable(index)``. Named expressions are not chased."""
    return postvisitor(expr, _depends_on, index=index)


# Simplification


def simplify_node(expr: Expr) -> Expr:
    """Apply the local identity rules to ``expr`` itself, assuming clean children."""
    if not isinstance(expr, Binary):
        return expr
    lhs, rhs = expr.lhs, expr.rhs
    if expr.function == BinaryFunction.ADD:
        if is_zero(lhs):
            return rhs
        if is_zero(rhs):
            return lhs
    elif expr.function == BinaryFunction.MUL:
        if is_zero(lhs) or is_zero(rhs):
            return zero()
        if is_unity(lhs):
            return rhs
        if is_unity(rhs):
            return lhs
    elif expr.function == BinaryFunction.DIV:
        if same_tree(lhs, rhs):
            return one()
    return expr


def clean_node(node: Expr, *args: Expr) -> Expr:
    """Rebuild ``node`` over already cleaned operands and apply the local rules."""
    if isinstance(node, Unary):
        if args[0] is not node.argument:
            node = Unary(node.function, args[0])
        return node
    if isinstance(node, Binary):
        if args[0] is not node.lhs or args[1] is not node.rhs:
            node = Binary(node.function, *args)
        return simplify_node(node)
    return node


def clean(expr: Expr) -> Expr:
    """Simplify ``expr`` in a single bottom-up pass.

    Rules, applied after the children have been cleaned:

    - ``0 + a`` and ``a + 0`` become ``a``
    - ``0 * a`` and ``a * 0`` become ``0``
    - ``1 * a`` and ``a * 1`` become ``a``
    - ``a / a`` becomes ``1`` when both sides are structurally equal

    The pass is syntactic: equal values with different shapes are not merged.
    Unchanged subtrees are returned as the same objects.
    """
    return postvisitor(expr, clean_node)


# Rendering

_PRECEDENCE = {
    BinaryFunction.ADD: 1,
    BinaryFunction.SUB: 1,
    BinaryFunction.MUL: 2,
    BinaryFunction.DIV: 2,
    BinaryFunction.POW: 3,
}
_NEG_PRECEDENCE = 4
_ATOM_PRECEDENCE = 5


def _variable_name(index: int, names: Sequence[str] | None) -> str:
    if names is not None and 0 <= index < len(names):
        return names[index]
    return f"v{index}"


def _render_node(
    node: Expr, *args: tuple[str, int], names: Sequence[str] | None
) -> tuple[str, int]:
    if isinstance(node, Constant):
        value = node.value
        text = str(value.value)
        if value.kind == NumericKind.COMPLEX or value.value.real < 0:
            return text, 0
        return text, _ATOM_PRECEDENCE
    if isinstance(node, Variable):
        return _variable_name(node.index, names), _ATOM_PRECEDENCE
    if isinstance(node, Unary):
        argument, prec = args[0]
        if node.function == UnaryFunction.NEG:
            if prec < _NEG_PRECEDENCE:
                argument = f"({argument})"
            return f"-{argument}", _NEG_PRECEDENCE
        return f"{node.function.value}({argument})", _ATOM_PRECEDENCE
    if isinstance(node, Binary):
        prec = _PRECEDENCE[node.function]
        (lhs, lhs_prec), (rhs, rhs_prec) = args
        if node.function == BinaryFunction.POW:
            # -a ^ b would read as -(a ^ b)
            lhs_wrap = lhs_prec <= prec or lhs_prec == _NEG_PRECEDENCE
            rhs_wrap = rhs_prec < prec
        elif node.function in (BinaryFunction.SUB, BinaryFunction.DIV):
            lhs_wrap, rhs_wrap = lhs_prec < prec, rhs_prec <= prec
        else:
            lhs_wrap, rhs_wrap = lhs_prec < prec, rhs_prec < prec
        if lhs_wrap:
            lhs = f"({lhs})"
        if rhs_wrap:
            rhs = f"({rhs})"
        return f"{lhs} {node.function.value} {rhs}", prec
    raise TypeError(f"Not an expression node: {type(node).__name__}")


def to_string(expr: Expr, names: Sequence[str] | None = None) -> str:
    """Render ``expr`` as infix text with minimal parentheses, e.g. ``2 * x * x + 5 / x``.

    Args:
        expr: Expression to render
        names: Variable names indexed by slot; missing slots render as ``v<i>``
    """
    return postvisitor(expr, _render_node, names=names)[0]

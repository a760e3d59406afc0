"""Binding store and line interpreter.

The Engine owns two interning tables:

- ``variables``: name -> slot -> current Numeric value
- ``expressions``: name -> slot -> symbolic Expr

Names are resolved to integer slots while a line is parsed; evaluation only
indexes the dense value list. Entries are appended on first use and
overwritten in place afterwards. Nothing is ever removed.
"""

from __future__ import annotations

from typing import Generic, Iterator, Optional, TypeVar

from . import config
from .calculus import derivative
from .expr import (
    Expr,
    Variable,
    add,
    clean,
    constant,
    depends_on_any_variable,
    depends_on_variable,
    evaluate,
    mul,
    to_string,
    zero,
)
from .lexer import tokenize
from .logging_config import get_logger
from .numeric import Numeric
from .parser import to_postfix
from .tokens import ASSIGN, NumberTerm, OperatorKind, Token, VariableTerm
from .types import MalformedExpressionError, UnknownNameError

logger = get_logger("engine")

T = TypeVar("T")


def split_assignment(tokens: list[Token]) -> tuple[Optional[str], list[Token]]:
    """Split a leading ``variable =`` off a token sequence.

    Returns:
        Tuple (target name or None, right-hand side tokens)
    """
    if len(tokens) >= 2 and isinstance(tokens[0], VariableTerm) and tokens[1] == ASSIGN:
        return tokens[0].name, tokens[2:]
    return None, tokens


class InternTable(Generic[T]):
    """Name -> handle mapping paired with a handle-indexed payload list."""

    def __init__(self) -> None:
        self._handles: dict[str, int] = {}
        self._names: list[str] = []
        self._payloads: list[T] = []

    def lookup(self, name: str) -> Optional[int]:
        return self._handles.get(name)

    def get(self, name: str) -> Optional[T]:
        handle = self._handles.get(name)
        if handle is None:
            return None
        return self._payloads[handle]

    def assign(self, name: str, payload: T) -> int:
        """Bind ``name`` to ``payload``, appending on first use, else overwriting."""
        handle = self._handles.get(name)
        if handle is None:
            handle = len(self._payloads)
            self._handles[name] = handle
            self._names.append(name)
            self._payloads.append(payload)
        else:
            self._payloads[handle] = payload
        return handle

    def intern(self, name: str, default: T) -> int:
        """Return the handle for ``name``, creating it with ``default`` if unknown."""
        handle = self._handles.get(name)
        if handle is None:
            handle = self.assign(name, default)
        return handle

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def payloads(self) -> list[T]:
        return self._payloads

    def items(self) -> Iterator[tuple[str, T]]:
        return zip(self._names, self._payloads)

    def __getitem__(self, handle: int) -> T:
        return self._payloads[handle]

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._payloads)


class Engine:
    """Caller-owned evaluation environment.

    Example:
        >>> engine = Engine()
        >>> engine.process_line("x = 5")
        'x'
        >>> engine.interpret("2(x + 1)")
        Integer(12)
    """

    def __init__(self) -> None:
        self.variables: InternTable[Numeric] = InternTable()
        self.expressions: InternTable[Expr] = InternTable()

    # Binding store

    def get_variable(self, name: str) -> Optional[Numeric]:
        return self.variables.get(name)

    def assign_variable(self, name: str, value: Numeric) -> int:
        return self.variables.assign(name, value)

    def get_expression(self, name: str) -> Optional[Expr]:
        return self.expressions.get(name)

    def assign_expression(self, name: str, expr: Expr) -> int:
        return self.expressions.assign(name, expr)

    def variable_index(self, name: str) -> int:
        """Slot of variable ``name``, created with value 0 on first reference."""
        return self.variables.intern(name, Numeric.zero())

    @property
    def variable_names(self) -> list[str]:
        return self.variables.names

    @property
    def values(self) -> list[Numeric]:
        return self.variables.payloads

    # Evaluation

    def evaluate(self, expr: Expr) -> Numeric:
        """Evaluate ``expr`` against the current variable values."""
        return evaluate(expr, self.values)

    def evaluate_named(self, name: str) -> Optional[Numeric]:
        """Evaluate the expression bound to ``name``.

        A name with no stored expression but a variable value evaluates to
        that value. Returns None if ``name`` is unbound in both tables.
        """
        expr = self.expressions.get(name)
        if expr is not None:
            return self.evaluate(expr)
        return self.variables.get(name)

    def format_expr(self, expr: Expr) -> str:
        return to_string(expr, self.variable_names)

    # Parsing

    def resolve_name(self, name: str) -> Expr:
        """Tree for a variable term.

        A name bound to a symbolic expression that depends on variables is
        replaced by that (shared) expression; any other name resolves to its
        variable slot, which is created with value 0 on first reference.
        """
        expr = self.expressions.get(name)
        if expr is not None and depends_on_any_variable(expr):
            return expr
        return Variable(self.variable_index(name))

    def build_expr(self, postfix: list[Token]) -> Expr:
        """Run a postfix token stream as a stack machine and return the tree.

        Raises:
            MalformedExpressionError: If the stream does not reduce to one tree
        """
        stack: list[Expr] = []
        for token in postfix:
            if isinstance(token, NumberTerm):
                stack.append(constant(token.value))
            elif isinstance(token, VariableTerm):
                stack.append(self.resolve_name(token.name))
            elif token.kind in (OperatorKind.ADD, OperatorKind.MUL):
                if len(stack) < 2:
                    raise MalformedExpressionError(
                        f"Operator '{token}' is missing an operand"
                    )
                rhs = stack.pop()
                lhs = stack.pop()
                if token.kind == OperatorKind.ADD:
                    stack.append(add(lhs, rhs))
                else:
                    stack.append(mul(lhs, rhs))
            elif token.kind == OperatorKind.ASSIGN:
                raise MalformedExpressionError(
                    "Assignment is only allowed as 'variable = expression'"
                )
            # parentheses never survive to_postfix

        if not stack:
            raise MalformedExpressionError("Empty expression")
        if len(stack) > 1:
            raise MalformedExpressionError(
                f"Expression has {len(stack)} operands without an operator between them"
            )
        return stack[0]

    def parse(self, tokens: list[Token]) -> Expr:
        return self.build_expr(to_postfix(tokens))

    def process_line(self, text: str) -> str:
        """Parse one line and store its result; return the name it was stored under.

        ``v = expr`` assigns to ``v``. If ``expr`` has no variable dependency,
        or depends on ``v`` itself, it is evaluated now and ``v`` is bound to
        the constant in both tables. Otherwise the symbolic expression is
        stored and evaluated again on every lookup. Any other line is stored
        under ``ans``.

        Raises:
            SymkalkError: Any tokenizer, parser or evaluation error
        """
        assigned, tokens = split_assignment(tokenize(text))
        is_assignment = assigned is not None
        target = assigned if is_assignment else config.ANSWER_NAME

        tree = self.parse(tokens)

        if not is_assignment:
            self.assign_expression(target, tree)
            logger.debug("%s := %s", target, self.format_expr(tree))
            return target

        own_slot = self.variables.lookup(target)
        self_reference = own_slot is not None and depends_on_variable(tree, own_slot)
        if self_reference or not depends_on_any_variable(tree):
            value = self.evaluate(tree)
            self.assign_variable(target, value)
            self.assign_expression(target, constant(value))
            logger.debug("%s = %r", target, value)
        else:
            self.assign_expression(target, tree)
            logger.debug("%s := %s (lazy)", target, self.format_expr(tree))
        return target

    def interpret(self, text: str) -> Optional[Numeric]:
        """Process ``text`` and evaluate the name it was stored under."""
        return self.evaluate_named(self.process_line(text))

    # Calculus

    def differentiate_named(self, name: str, variable: str) -> Expr:
        """Derivative of the expression bound to ``name`` with respect to ``variable``.

        Raises:
            UnknownNameError: If ``name`` has no stored expression
            UnsupportedDerivativeError: For a power whose exponent depends on ``variable``
        """
        expr = self.expressions.get(name)
        if expr is None:
            raise UnknownNameError(f"No expression named '{name}'")
        index = self.variables.lookup(variable)
        if index is None:
            return zero()
        return clean(derivative(expr, index, self.variable_names))

    def bindings(self) -> Iterator[tuple[str, Expr]]:
        return self.expressions.items()

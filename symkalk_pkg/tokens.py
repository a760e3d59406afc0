"""Token value types and the operator precedence table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .numeric import Numeric


class OperatorKind(Enum):
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    ADD = "+"
    MUL = "*"
    ASSIGN = "="


# kind -> (precedence, left associative)
OPERATOR_TABLE = {
    OperatorKind.LEFT_PAREN: (1, True),
    OperatorKind.RIGHT_PAREN: (1, True),
    OperatorKind.ADD: (2, True),
    OperatorKind.MUL: (4, True),
    OperatorKind.ASSIGN: (4, False),
}


@dataclass(frozen=True)
class NumberTerm:
    value: Numeric

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VariableTerm:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Operator:
    kind: OperatorKind

    @property
    def precedence(self) -> int:
        return OPERATOR_TABLE[self.kind][0]

    @property
    def left_associative(self) -> bool:
        return OPERATOR_TABLE[self.kind][1]

    def __str__(self) -> str:
        return self.kind.value


Term = Union[NumberTerm, VariableTerm]
Token = Union[NumberTerm, VariableTerm, Operator]

LEFT_PAREN = Operator(OperatorKind.LEFT_PAREN)
RIGHT_PAREN = Operator(OperatorKind.RIGHT_PAREN)
ADD = Operator(OperatorKind.ADD)
MUL = Operator(OperatorKind.MUL)
ASSIGN = Operator(OperatorKind.ASSIGN)

OPERATOR_CHARS = {op.kind.value: op for op in (LEFT_PAREN, RIGHT_PAREN, ADD, MUL, ASSIGN)}


def number(value: int) -> NumberTerm:
    return NumberTerm(Numeric.from_integer(value))


def is_term(token: Token) -> bool:
    return isinstance(token, (NumberTerm, VariableTerm))


def format_tokens(tokens: list[Token]) -> str:
    """Render a token sequence space-separated, e.g. ``1 2 3 * +``."""
    return " ".join(str(token) for token in tokens)

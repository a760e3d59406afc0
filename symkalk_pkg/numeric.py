"""Tagged scalar values used as literals and evaluation results.

A Numeric is one of three kinds ordered by width::

    INTEGER < REAL < COMPLEX

Binary arithmetic promotes both operands to the wider kind before applying the
native Python operation, so ``Real + Integer`` and ``Integer + Real`` are both
Real. Division by zero raises DivisionByZeroError for every kind instead of
returning an infinity or NaN. Integers are signed 64-bit: a literal or result
outside that range raises IntegerOverflowError.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from .types import DivisionByZeroError, EvaluationError, IntegerOverflowError

INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


class NumericKind(IntEnum):
    INTEGER = 0
    REAL = 1
    COMPLEX = 2


_CASTS = {
    NumericKind.INTEGER: int,
    NumericKind.REAL: float,
    NumericKind.COMPLEX: complex,
}


def _trunc_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


@dataclass(frozen=True)
class Numeric:
    """A scalar tagged with its kind."""

    kind: NumericKind
    value: Union[int, float, complex]

    def __post_init__(self) -> None:
        if self.kind == NumericKind.INTEGER and not (
            INTEGER_MIN <= self.value <= INTEGER_MAX
        ):
            raise IntegerOverflowError("Integer result outside the 64-bit range")

    @staticmethod
    def from_integer(value: int) -> "Numeric":
        return Numeric(NumericKind.INTEGER, int(value))

    @staticmethod
    def from_real(value: float) -> "Numeric":
        return Numeric(NumericKind.REAL, float(value))

    @staticmethod
    def from_complex(value: complex) -> "Numeric":
        return Numeric(NumericKind.COMPLEX, complex(value))

    @staticmethod
    def zero() -> "Numeric":
        return Numeric.from_integer(0)

    @staticmethod
    def one() -> "Numeric":
        return Numeric.from_integer(1)

    def is_zero(self) -> bool:
        return self.value == _CASTS[self.kind](0)

    def is_unity(self) -> bool:
        return self.value == _CASTS[self.kind](1)

    def promote(self, kind: NumericKind) -> "Numeric":
        """Widen this value to ``kind``. Narrowing is not allowed."""
        if kind < self.kind:
            raise ValueError(f"Cannot narrow {self.kind.name} to {kind.name}")
        if kind == self.kind:
            return self
        return Numeric(kind, _CASTS[kind](self.value))

    def to_real(self) -> float:
        if self.kind == NumericKind.COMPLEX:
            return self.value.real
        return float(self.value)

    def _coerce(self, other: "Numeric"):
        kind = max(self.kind, other.kind)
        return kind, self.promote(kind).value, other.promote(kind).value

    def __neg__(self) -> "Numeric":
        return Numeric(self.kind, -self.value)

    def __add__(self, other: "Numeric") -> "Numeric":
        kind, lhs, rhs = self._coerce(other)
        return Numeric(kind, lhs + rhs)

    def __sub__(self, other: "Numeric") -> "Numeric":
        kind, lhs, rhs = self._coerce(other)
        return Numeric(kind, lhs - rhs)

    def __mul__(self, other: "Numeric") -> "Numeric":
        kind, lhs, rhs = self._coerce(other)
        return Numeric(kind, lhs * rhs)

    def __truediv__(self, other: "Numeric") -> "Numeric":
        kind, lhs, rhs = self._coerce(other)
        if other.is_zero():
            raise DivisionByZeroError(f"Division by zero: {self} / {other}")
        if kind == NumericKind.INTEGER:
            return Numeric(kind, _trunc_div(lhs, rhs))
        return Numeric(kind, lhs / rhs)

    def pow(self, exponent: Union[int, "Numeric"]) -> "Numeric":
        """Raise to ``exponent``.

        An Integer base with a non-negative Integer exponent stays exact. A
        negative Integer exponent moves the result into the Real kind, and a
        negative or fractional base with a Real exponent may land in Complex.
        """
        if not isinstance(exponent, Numeric):
            exponent = Numeric.from_integer(exponent)
        kind, base, power = self._coerce(exponent)
        if base == 0 and power.real < 0:
            raise DivisionByZeroError(f"Zero raised to negative power {exponent}")
        if kind == NumericKind.INTEGER and power < 0:
            kind, base = NumericKind.REAL, float(base)
        elif kind == NumericKind.INTEGER and abs(base) > 1 and power > 63:
            raise IntegerOverflowError(f"Integer overflow in {self} ^ {exponent}")
        try:
            result = base**power
        except OverflowError as e:
            raise EvaluationError(f"Overflow in {self} ^ {exponent}: {e}") from e
        if isinstance(result, complex) and kind != NumericKind.COMPLEX:
            return Numeric.from_complex(result)
        return Numeric(kind, result)

    # Unary functions evaluate in at least the Real kind.

    def exp(self) -> "Numeric":
        if self.kind == NumericKind.COMPLEX:
            return Numeric.from_complex(cmath.exp(self.value))
        try:
            return Numeric.from_real(math.exp(self.value))
        except OverflowError as e:
            raise EvaluationError(f"Overflow in exp({self}): {e}") from e

    def sin(self) -> "Numeric":
        if self.kind == NumericKind.COMPLEX:
            return Numeric.from_complex(cmath.sin(self.value))
        return Numeric.from_real(math.sin(self.value))

    def cos(self) -> "Numeric":
        if self.kind == NumericKind.COMPLEX:
            return Numeric.from_complex(cmath.cos(self.value))
        return Numeric.from_real(math.cos(self.value))

    def sqrt(self) -> "Numeric":
        if self.kind == NumericKind.COMPLEX or self.value < 0:
            return Numeric.from_complex(cmath.sqrt(self.value))
        return Numeric.from_real(math.sqrt(self.value))

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{self.kind.name.capitalize()}({self.value!r})"

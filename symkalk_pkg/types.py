"""Type definitions, result dataclasses and the exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class EvalResult:
    """Result of interpreting a line or differentiating a named expression."""

    ok: bool
    name: str | None = None
    result: str | None = None
    expression: str | None = None
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict = {"ok": self.ok}
        if self.name is not None:
            result_dict["name"] = self.name
        if self.result is not None:
            result_dict["result"] = self.result
        if self.expression is not None:
            result_dict["expression"] = self.expression
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, code={self.code!r})"
        parts = [f"ok={self.ok}"]
        if self.name is not None:
            parts.append(f"name={self.name!r}")
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.expression is not None:
            parts.append(f"expression={self.expression!r}")
        return f"EvalResult({', '.join(parts)})"


class SymkalkError(Exception):
    """Base class for all recoverable engine errors."""

    default_code = "SYMKALK_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(SymkalkError):
    """Raised when input validation fails."""

    default_code = "VALIDATION_ERROR"


class IgnoredInputError(ValidationError):
    """Raised in strict mode when a line contains characters outside the alphabet."""

    default_code = "IGNORED_INPUT"

    def __init__(self, characters: list[str], code: str | None = None):
        self.characters = characters
        shown = ", ".join(repr(ch) for ch in characters)
        super().__init__(f"Unsupported characters in input: {shown}", code)


class ParseError(SymkalkError):
    """Raised when a token stream cannot be turned into an expression."""

    default_code = "PARSE_ERROR"


class MismatchedParenthesisError(ParseError):
    """Raised for an unmatched ')' or an unconsumed '('."""

    default_code = "MISMATCHED_PARENTHESIS"

    def __init__(
        self, message: str, position: int | None = None, code: str | None = None
    ):
        self.position = position
        super().__init__(message, code)


class MalformedExpressionError(ParseError):
    """Raised when a postfix stream does not reduce to exactly one tree."""

    default_code = "MALFORMED_EXPRESSION"


class EvaluationError(SymkalkError):
    """Raised when a tree cannot be evaluated."""

    default_code = "EVALUATION_ERROR"


class UndefinedVariableIndexError(EvaluationError):
    """Raised when evaluation reads a variable slot outside the bound values."""

    default_code = "UNDEFINED_VARIABLE_INDEX"

    def __init__(self, index: int, bound: int, code: str | None = None):
        self.index = index
        self.bound = bound
        super().__init__(
            f"Variable index {index} is out of range ({bound} values bound)", code
        )


class DivisionByZeroError(EvaluationError):
    """Raised on division by zero for every numeric kind."""

    default_code = "DIVISION_BY_ZERO"


class IntegerOverflowError(EvaluationError):
    """Raised when an Integer result leaves the signed 64-bit range."""

    default_code = "INTEGER_OVERFLOW"


class DerivativeError(SymkalkError):
    """Raised when differentiation fails."""

    default_code = "DERIVATIVE_ERROR"


class UnsupportedDerivativeError(DerivativeError):
    """Raised when no rule covers the node being differentiated."""

    default_code = "UNSUPPORTED_DERIVATIVE"


class UnknownNameError(SymkalkError):
    """Raised when a command refers to a name that has never been bound."""

    default_code = "UNKNOWN_NAME"

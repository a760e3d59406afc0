"""Tokenizer: raw text to an infix token sequence.

Two passes over the whole line:

1. Character scan. Whitespace and the ``;`` statement terminator are skipped,
   ``( ) + * =`` become operators, each ASCII digit becomes a one-digit Integer
   term and each ASCII letter a one-letter variable term. Any other character
   is dropped and reported (logged, or raised in strict mode).
2. Post-processing. Runs of digit terms are merged into one number and an
   explicit ``*`` is inserted between a term and a directly following ``(``.
   A merged literal above the signed 64-bit range is rejected.
"""

from __future__ import annotations

from . import config
from .logging_config import get_logger
from .numeric import INTEGER_MAX
from .tokens import (
    LEFT_PAREN,
    MUL,
    OPERATOR_CHARS,
    NumberTerm,
    Token,
    VariableTerm,
    number,
)
from .types import IgnoredInputError, ValidationError

logger = get_logger("lexer")

TERMINATORS = ";"


def scan_ignored(text: str) -> list[str]:
    """Return the characters of ``text`` that the tokenizer would drop, in order."""
    return [
        ch
        for ch in text
        if not (
            ch.isspace()
            or ch in TERMINATORS
            or ch in OPERATOR_CHARS
            or _is_ascii_digit(ch)
            or _is_ascii_letter(ch)
        )
    ]


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ascii_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def scan(text: str, strict: bool | None = None) -> list[Token]:
    """First pass: map each character to at most one raw token."""
    if strict is None:
        strict = config.STRICT_INPUT
    if len(text) > config.MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long ({len(text)} characters, limit {config.MAX_INPUT_LENGTH})",
            "TOO_LONG",
        )

    ignored = scan_ignored(text)
    if ignored:
        if strict:
            raise IgnoredInputError(ignored)
        logger.warning(
            "Ignoring unsupported characters %r", ignored, extra={"line": text}
        )

    raw: list[Token] = []
    for ch in text:
        if ch in OPERATOR_CHARS:
            raw.append(OPERATOR_CHARS[ch])
        elif _is_ascii_digit(ch):
            raw.append(number(ord(ch) - ord("0")))
        elif _is_ascii_letter(ch):
            raw.append(VariableTerm(ch))
    return raw


def merge_numbers(raw: list[Token]) -> list[Token]:
    """Second pass: merge digit runs and insert implicit multiplication."""
    result: list[Token] = []
    i = 0
    while i < len(raw):
        token = raw[i]
        if isinstance(token, NumberTerm):
            value = 0
            while i < len(raw) and isinstance(raw[i], NumberTerm):
                value = value * 10 + raw[i].value.value
                if value > INTEGER_MAX:
                    raise ValidationError(
                        "Integer literal exceeds the 64-bit range", "NUMBER_TOO_LARGE"
                    )
                i += 1
            result.append(number(value))
        else:
            result.append(token)
            i += 1
        if isinstance(token, (NumberTerm, VariableTerm)):
            if i < len(raw) and raw[i] == LEFT_PAREN:
                result.append(MUL)
    return result


def tokenize(text: str, strict: bool | None = None) -> list[Token]:
    """Tokenize a full line into an infix token sequence.

    Args:
        text: Input line (e.g., "32(x + y)")
        strict: Raise IgnoredInputError on unsupported characters instead of
            logging them. Defaults to config.STRICT_INPUT.

    Returns:
        List of tokens with digit runs merged and implicit ``*`` inserted

    Raises:
        ValidationError: If the line exceeds MAX_INPUT_LENGTH (code TOO_LONG) or
            a literal exceeds the 64-bit range (code NUMBER_TOO_LARGE)
        IgnoredInputError: In strict mode, if unsupported characters are present
    """
    tokens = merge_numbers(scan(text, strict))
    logger.debug("Tokenized %r into %d tokens", text, len(tokens))
    return tokens

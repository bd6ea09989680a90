"""
Table Companion - Constrained Arithmetic

Evaluates flat formulas that contain no dice ("3", "10/2+1") using a small
recursive-descent parser. Only numeric literals, unary +/- and the binary
operators + - * / are accepted; anything else is rejected.
"""

import math
import re
from fractions import Fraction


class ArithmeticParseError(ValueError):
    """Raised when an expression falls outside the supported grammar."""


_TOKEN_RE = re.compile(r"\s*(?:(\d+\.\d+|\.\d+|\d+)|([+\-*/]))")

# Longest numeric literal accepted, digits and decimal point included
MAX_LITERAL_LENGTH = 16


def tokenize(expression: str) -> list[str]:
    """Split an expression into number and operator tokens.

    Raises:
        ArithmeticParseError: On any character that is not part of a token, or
            a number longer than MAX_LITERAL_LENGTH
    """
    tokens: list[str] = []
    pos = 0
    text = expression.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ArithmeticParseError(
                f"Unexpected character {text[pos:].lstrip()[:1]!r} at position {pos}."
            )
        number = match.group(1)
        if number is not None and len(number) > MAX_LITERAL_LENGTH:
            raise ArithmeticParseError(
                f"Number at position {pos} is longer than {MAX_LITERAL_LENGTH} characters."
            )
        tokens.append(number or match.group(2))
        pos = match.end()
    return tokens


class _Parser:
    # expr   := term (('+' | '-') term)*
    # term   := factor (('*' | '/') factor)*
    # factor := ('+' | '-')* NUMBER

    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise ArithmeticParseError("Unexpected end of expression.")
        self.pos += 1
        return token

    def parse(self) -> Fraction:
        if not self.tokens:
            raise ArithmeticParseError("Empty expression.")
        value = self._expr()
        if self._peek() is not None:
            raise ArithmeticParseError(f"Unexpected token {self._peek()!r}.")
        return value

    def _expr(self) -> Fraction:
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> Fraction:
        value = self._factor()
        while self._peek() in ("*", "/"):
            op = self._next()
            rhs = self._factor()
            if op == "*":
                value = value * rhs
            else:
                if rhs == 0:
                    raise ArithmeticParseError("Division by zero.")
                value = value / rhs
        return value

    def _factor(self) -> Fraction:
        sign = 1
        token = self._next()
        while token in ("+", "-"):
            if token == "-":
                sign = -sign
            token = self._next()
        if token in ("*", "/"):
            raise ArithmeticParseError(f"Operator {token!r} is missing a left operand.")
        return sign * Fraction(token)


def evaluate_arithmetic(expression: str) -> int:
    """
    Evaluate a flat arithmetic expression.

    Computation is exact; the final value is floored to an integer so that
    "7/2" yields 3 and "-7/2" yields -4.

    Args:
        expression: Text made of numbers and + - * / operators

    Returns:
        The integer value of the expression

    Raises:
        ArithmeticParseError: If the expression is empty, malformed, or divides by zero
    """
    return math.floor(_Parser(tokenize(expression)).parse())

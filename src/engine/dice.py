"""
Table Companion - Dice Formula Evaluator

Rolls human-typed formulas such as "2d6+3", "1d20" or "4" and reports the
total together with a breakdown of every die. Formulas are a left-to-right
sequence of ``<count>d<sides>`` terms and integer modifiers joined by + or -.
Formulas without dice fall back to constrained arithmetic; anything else
yields an invalid result instead of raising.

The random source is injected so tests can supply a fixed sequence.
"""

import logging
import math
import random
import re
from dataclasses import dataclass

from src.engine.arithmetic import ArithmeticParseError, evaluate_arithmetic
from src.engine.base import RandomSource, RollResult, TermKind, TermRoll

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_TERM_RE = re.compile(r"([+-]?)(?:(\d+)[dD](\d+)|(\d+))")

_default_rng = random.Random()

MAX_NUMBER_DIGITS = 9
DEFAULT_MAX_DICE = 100
DEFAULT_MAX_SIDES = 1000


@dataclass(frozen=True)
class FormulaTerm:
    """
    A parsed, not yet rolled, formula term.

    Attributes:
        sign: +1 or -1
        count: Number of dice (0 for a flat modifier)
        sides: Sides per die (0 for a flat modifier)
        value: Modifier value (0 for a dice term)
    """
    sign: int
    count: int = 0
    sides: int = 0
    value: int = 0

    @property
    def is_dice(self) -> bool:
        return self.count > 0


def parse_formula(formula: str) -> tuple[FormulaTerm, ...] | None:
    """Parse a formula into signed terms.

    Only the first term may omit its sign. A dice term with a zero count or
    zero sides does not match, nor does any number longer than
    MAX_NUMBER_DIGITS digits.

    Args:
        formula: Formula text; whitespace is ignored

    Returns:
        The parsed terms, or None if the text is not a valid dice formula
    """
    text = _WHITESPACE_RE.sub("", formula)
    if not text:
        return None

    terms: list[FormulaTerm] = []
    pos = 0
    while pos < len(text):
        match = _TERM_RE.match(text, pos)
        if match is None:
            return None
        sign_text, count, sides, literal = match.groups()
        if terms and not sign_text:
            return None
        if any(n is not None and len(n) > MAX_NUMBER_DIGITS for n in (count, sides, literal)):
            return None
        sign = -1 if sign_text == "-" else 1

        if literal is not None:
            terms.append(FormulaTerm(sign=sign, value=int(literal)))
        else:
            if int(count) == 0 or int(sides) == 0:
                return None
            terms.append(FormulaTerm(sign=sign, count=int(count), sides=int(sides)))
        pos = match.end()

    return tuple(terms)


def roll_die(sides: int, rng: RandomSource | None = None) -> int:
    """Roll a single die with faces 1..sides."""
    if sides < 1:
        raise ValueError(f"A die needs at least one side, got {sides}.")
    source = rng if rng is not None else _default_rng
    return math.floor(source.random() * sides) + 1


def render_breakdown(terms: tuple[TermRoll, ...]) -> str:
    """Join rendered terms with the operators that preceded them."""
    parts: list[str] = []
    for index, term in enumerate(terms):
        if term.sign < 0:
            parts.append("-")
        elif index > 0:
            parts.append("+")
        parts.append(term.render())
    return "".join(parts)


class DiceFormulaEvaluator:
    """
    Evaluates dice formulas against an injectable random source.

    Instances hold no mutable state beyond the random source, so a single
    evaluator may be shared across UI callbacks.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        max_dice: int | None = DEFAULT_MAX_DICE,
        max_sides: int | None = DEFAULT_MAX_SIDES,
    ) -> None:
        self.rng = rng if rng is not None else _default_rng
        self.max_dice = max_dice
        self.max_sides = max_sides

    def roll(self, formula: str) -> RollResult:
        """Evaluate a formula.

        Args:
            formula: Text such as "2d6+3"

        Returns:
            RollResult with total and breakdown; RollResult.invalid() when
            the formula cannot be evaluated
        """
        text = _WHITESPACE_RE.sub("", formula or "")
        parsed = parse_formula(text)

        try:
            if parsed is not None and any(term.is_dice for term in parsed):
                if self.max_dice is not None and any(t.count > self.max_dice for t in parsed):
                    logger.debug("Rejected formula %r: more than %d dice in a term", text, self.max_dice)
                    return RollResult.invalid()
                if self.max_sides is not None and any(t.sides > self.max_sides for t in parsed):
                    logger.debug("Rejected formula %r: a die has more than %d sides", text, self.max_sides)
                    return RollResult.invalid()
                return self._roll_terms(parsed)

            return self._evaluate_flat(text)
        except (ValueError, OverflowError) as exc:
            logger.debug("Rejected formula %r: %s", text, exc)
            return RollResult.invalid()

    def _roll_terms(self, parsed: tuple[FormulaTerm, ...]) -> RollResult:
        terms: list[TermRoll] = []
        for term in parsed:
            if term.is_dice:
                values = tuple(roll_die(term.sides, self.rng) for _ in range(term.count))
                terms.append(TermRoll(
                    kind=TermKind.DICE,
                    sign=term.sign,
                    values=values,
                    count=term.count,
                    sides=term.sides,
                ))
            else:
                terms.append(TermRoll(kind=TermKind.MODIFIER, sign=term.sign, values=(term.value,)))

        rolled = tuple(terms)
        return RollResult(
            result=sum(t.subtotal for t in rolled),
            breakdown=render_breakdown(rolled),
            terms=rolled,
        )

    def _evaluate_flat(self, text: str) -> RollResult:
        try:
            value = evaluate_arithmetic(text)
        except ArithmeticParseError as exc:
            logger.debug("Rejected formula %r: %s", text, exc)
            return RollResult.invalid()

        return RollResult(
            result=value,
            breakdown=str(value),
            terms=(TermRoll(kind=TermKind.EXPRESSION, sign=1, values=(value,)),),
        )


def roll_dice_formula(formula: str, rng: RandomSource | None = None) -> RollResult:
    """Evaluate a formula with an optional random source."""
    return DiceFormulaEvaluator(rng=rng).roll(formula)


def is_valid_formula(formula: str) -> bool:
    """Return True if the formula is a dice formula or valid flat arithmetic."""
    parsed = parse_formula(formula)
    if parsed is not None:
        return True
    try:
        evaluate_arithmetic(_WHITESPACE_RE.sub("", formula))
    except ArithmeticParseError:
        return False
    return True

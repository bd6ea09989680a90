"""
Table Companion - Engine Base Classes

This module defines the foundational data structures and enums shared by the
dice evaluator and the battle engine. All classes are immutable (frozen
dataclasses) so results can be cached in UI session state and compared
safely between reruns.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol


INVALID_FORMULA = "Invalid formula"


class RandomSource(Protocol):
    """Anything that yields uniform floats in ``[0, 1)``.

    ``random.Random`` instances satisfy this protocol.
    """

    def random(self) -> float:
        ...


class DieType(Enum):
    """Standard polyhedral dice offered as quick rolls."""
    D4 = 4
    D6 = 6
    D8 = 8
    D10 = 10
    D12 = 12
    D20 = 20

    @property
    def formula(self) -> str:
        return f"1d{self.value}"


STANDARD_DICE: tuple[int, ...] = tuple(d.value for d in DieType)


class TermKind(Enum):
    """Kinds of terms that make up a formula."""
    DICE = auto()
    MODIFIER = auto()
    EXPRESSION = auto()  # flat arithmetic fallback


@dataclass(frozen=True)
class TermRoll:
    """
    A single evaluated term within a formula.

    Attributes:
        kind: Dice term, flat modifier, or arithmetic fallback
        sign: +1 or -1, taken from the operator preceding the term
        values: Individual die faces (dice) or the single literal value
        count: Number of dice rolled (dice terms only)
        sides: Sides per die (dice terms only)
    """
    kind: TermKind
    sign: int
    values: tuple[int, ...]
    count: int = 0
    sides: int = 0

    @property
    def subtotal(self) -> int:
        """Signed contribution of this term to the result."""
        return self.sign * sum(self.values)

    def render(self) -> str:
        """Unsigned display text for the breakdown."""
        if self.kind == TermKind.DICE and len(self.values) > 1:
            return "(" + "+".join(str(v) for v in self.values) + ")"
        return str(self.values[0])


@dataclass(frozen=True)
class RollResult:
    """
    Outcome of evaluating a formula.

    Attributes:
        result: Signed total of every term
        breakdown: Human-readable rendering of each term, for display only
        terms: The evaluated terms in input order
    """
    result: int
    breakdown: str
    terms: tuple[TermRoll, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.breakdown != INVALID_FORMULA

    @property
    def dice_values(self) -> tuple[int, ...]:
        """Every die face rolled, in order."""
        return tuple(
            v for term in self.terms if term.kind == TermKind.DICE for v in term.values
        )

    @classmethod
    def invalid(cls) -> "RollResult":
        return cls(result=0, breakdown=INVALID_FORMULA)

    def __str__(self) -> str:
        if not self.is_valid:
            return INVALID_FORMULA
        return f"{self.result} [{self.breakdown}]"

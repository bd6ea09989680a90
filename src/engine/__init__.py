"""
Table Companion Engine.

Pure Python logic with zero UI/database dependencies.
Handles dice formula evaluation, turn order and combatant state.
"""

from src.engine.base import (
    INVALID_FORMULA,
    STANDARD_DICE,
    DieType,
    RandomSource,
    RollResult,
    TermKind,
    TermRoll,
)
from src.engine.arithmetic import ArithmeticParseError, evaluate_arithmetic
from src.engine.battle import BattleState, BattleTurnEngine, CombatantState, Side
from src.engine.dice import (
    DiceFormulaEvaluator,
    is_valid_formula,
    parse_formula,
    roll_dice_formula,
    roll_die,
)

__all__ = [
    # Data Classes
    "RollResult",
    "TermRoll",
    "CombatantState",
    "BattleState",
    # Enums
    "DieType",
    "TermKind",
    "Side",
    # Protocols
    "RandomSource",
    # Constants
    "INVALID_FORMULA",
    "STANDARD_DICE",
    # Engines
    "DiceFormulaEvaluator",
    "BattleTurnEngine",
    # Functions
    "evaluate_arithmetic",
    "is_valid_formula",
    "parse_formula",
    "roll_dice_formula",
    "roll_die",
    # Errors
    "ArithmeticParseError",
]

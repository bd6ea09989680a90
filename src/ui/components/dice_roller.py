"""Dice roller component — quick dice buttons plus a custom formula box."""

from __future__ import annotations

import streamlit as st

from src.engine.base import DieType, RollResult
from src.engine.dice import DiceFormulaEvaluator

HISTORY_KEY = "roll_history"
HISTORY_LIMIT = 20


def record_roll(formula: str, result: RollResult) -> None:
    """Prepend a roll to the session history."""
    history = st.session_state.setdefault(HISTORY_KEY, [])
    history.insert(0, (formula, result))
    del history[HISTORY_LIMIT:]


def render_dice_roller(evaluator: DiceFormulaEvaluator, key: str = "dice") -> RollResult | None:
    """Render quick-roll buttons and a formula input.

    Args:
        evaluator: Evaluator to roll with.
        key: Widget key prefix so the roller can appear on several pages.

    Returns:
        The RollResult of a roll made this rerun, else ``None``.
    """
    formula: str | None = None

    cols = st.columns(len(DieType))
    for col, die in zip(cols, DieType):
        with col:
            if st.button(die.name.lower(), key=f"{key}_quick_{die.value}", use_container_width=True):
                formula = die.formula

    with st.form(f"{key}_custom_form", clear_on_submit=False):
        custom = st.text_input("Custom Roll", placeholder="e.g. 2d6+3", key=f"{key}_formula")
        if st.form_submit_button("Roll", type="primary"):
            formula = custom.strip() or "1d20"

    if formula is None:
        return None

    result = evaluator.roll(formula)
    record_roll(formula, result)
    return result

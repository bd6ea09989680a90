"""Dice page — formula roller and session roll history."""

from __future__ import annotations

import streamlit as st

from src.config.settings import get_settings
from src.engine.dice import DiceFormulaEvaluator
from src.ui.components.dice_roller import HISTORY_KEY, render_dice_roller
from src.ui.themes.animations import render_roll_result


def render_dice_page() -> None:
    """Render the standalone dice roller."""
    st.title("Dice")
    st.caption("Roll a standard die or type a formula such as `2d6+3` or `1d20-1`.")

    evaluator = DiceFormulaEvaluator(max_dice=get_settings().max_dice_per_term)
    render_dice_roller(evaluator, key="dice_page")

    history = st.session_state.get(HISTORY_KEY, [])
    if not history:
        return

    latest_formula, latest = history[0]
    render_roll_result(latest_formula, latest)

    if len(history) > 1:
        st.subheader("History")
        for formula, result in history[1:]:
            st.markdown(f"`{formula}` → **{result.result}** &nbsp; {result.breakdown}")

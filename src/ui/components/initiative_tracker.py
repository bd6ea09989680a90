"""Initiative tracker — combatants in turn order with the active marker."""

from __future__ import annotations

from html import escape
from typing import Mapping

import streamlit as st

from src.database.models import Character
from src.engine.battle import BattleState, BattleTurnEngine, Side


def render_initiative_tracker(
    state: BattleState,
    current_turn: int,
    characters: Mapping[int, Character],
) -> None:
    """Render the initiative panel.

    Args:
        state: Current rosters.
        current_turn: Global turn counter.
        characters: Character templates keyed by id; missing ids are skipped.
    """
    order = BattleTurnEngine.initiative_order(state)
    active_index = BattleTurnEngine.active_index(state, current_turn)

    html = ['<div class="initiative">']
    html.append('<div class="initiative-title">Initiative</div>')

    for idx, combatant in enumerate(order):
        character = characters.get(combatant.character_id)
        if character is None:
            continue

        side = BattleTurnEngine.side_of(state, combatant.character_id)
        row_classes = ["initiative-row"]
        if idx == active_index:
            row_classes.append("active")
        if side == Side.OPPONENTS:
            row_classes.append("opponent")

        indicator = "&#9876; " if idx == active_index else ""

        status_html = ""
        if combatant.status:
            status_html = f'<span class="status">{escape(combatant.status)}</span>'

        down_html = ""
        if combatant.current_hp == 0:
            down_html = '<span class="down">[down]</span>'

        html.append(
            f'<div class="{" ".join(row_classes)}">'
            f'<span class="order">{combatant.turn_order}</span>'
            f'<span class="name">{indicator}{escape(character.name)}{down_html}{status_html}</span>'
            f'<span class="hp">{combatant.current_hp}</span>'
            f"</div>"
        )

    html.append("</div>")
    st.markdown("".join(html), unsafe_allow_html=True)

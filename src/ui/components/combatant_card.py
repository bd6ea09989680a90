"""Combatant card — HP, status and turn-order badge for one roster entry."""

from __future__ import annotations

from html import escape
from typing import Iterable

import streamlit as st

from src.database.models import Ability, Character
from src.engine.battle import CombatantState, Side


def visible_abilities(character: Character, ability_ids: Iterable[str] | None) -> list[Ability]:
    """Abilities to offer in battle: the team's picks in template order, or all when unset."""
    if ability_ids is None:
        return list(character.abilities)
    chosen = set(ability_ids)
    return [a for a in character.abilities if a.id in chosen]


def render_combatant_card(
    combatant: CombatantState,
    character: Character,
    side: Side,
    is_active: bool,
    ability_ids: Iterable[str] | None = None,
) -> dict | None:
    """Render one combatant with HP and status controls.

    Args:
        combatant: Battle-scoped state.
        character: The character template for name and max HP.
        side: Roster the combatant is on (styles opponents differently).
        is_active: Whether it is this combatant's turn.
        ability_ids: Abilities the team picked for this character; None shows all.

    Returns:
        ``{"hp_delta": int}``, ``{"current_hp": int}``, ``{"status": str}``
        or ``{"roll": formula}`` when the user acted, otherwise ``None``.
    """
    key = f"{side.value}_{combatant.character_id}"
    classes = ["combatant-card"]
    if side == Side.OPPONENTS:
        classes.append("opponent")
    if is_active:
        classes.append("active")

    st.markdown(
        f'<div class="{" ".join(classes)}">'
        f'<span class="name">{escape(character.name)}</span>'
        f'<span class="turn-badge">{combatant.turn_order}</span>'
        f'<div class="stats">HP {combatant.current_hp}/{character.hp} '
        f"&middot; AC {character.ac} &middot; Speed {character.speed}</div>"
        "</div>",
        unsafe_allow_html=True,
    )

    minus_col, hp_col, plus_col, status_col = st.columns([1, 2, 1, 4])

    with minus_col:
        if st.button("−", key=f"hp_minus_{key}"):
            return {"hp_delta": -1}

    with hp_col:
        new_hp = st.number_input(
            "HP",
            min_value=0,
            value=combatant.current_hp,
            step=1,
            key=f"hp_input_{key}_{combatant.current_hp}",
            label_visibility="collapsed",
        )
        if int(new_hp) != combatant.current_hp:
            return {"current_hp": int(new_hp)}

    with plus_col:
        if st.button("+", key=f"hp_plus_{key}"):
            return {"hp_delta": 1}

    with status_col:
        new_status = st.text_input(
            "Status",
            value=combatant.status,
            placeholder="None",
            key=f"status_{key}",
            label_visibility="collapsed",
        )
        if new_status != combatant.status:
            return {"status": new_status}

    abilities = visible_abilities(character, ability_ids)
    if abilities:
        with st.expander("Abilities"):
            for ability in abilities:
                line = f"**{escape(ability.name)}**"
                if ability.is_passive:
                    line += " *(passive)*"
                if ability.damage:
                    line += f" — damage `{ability.damage}`"
                if ability.range:
                    line += f" — range {ability.range}"
                st.markdown(line)
                if ability.description:
                    st.caption(ability.description)
                if ability.damage and st.button(
                    f"Roll {ability.damage}",
                    key=f"roll_{key}_{ability.id}",
                ):
                    return {"roll": ability.damage}

    return None

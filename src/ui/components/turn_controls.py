"""Turn control buttons — Next Turn, Save, End Battle."""

from __future__ import annotations

import streamlit as st


def render_turn_controls(
    current_turn: int,
    active_name: str | None,
    has_combatants: bool,
    is_dirty: bool,
) -> str | None:
    """Render the battle action bar.

    Args:
        current_turn: Global turn counter.
        active_name: Display name of the active combatant, if any.
        has_combatants: Whether either roster has entries.
        is_dirty: Whether there are unsaved changes.

    Returns:
        ``"next_turn"``, ``"save"``, ``"end_battle"``, or ``None`` if no action taken.
    """
    info_col, next_col, save_col, end_col = st.columns([3, 1, 1, 1])

    with info_col:
        st.markdown(
            f"**Turn:** {current_turn} &nbsp;&nbsp; "
            f"**Current:** {active_name or 'None'}"
        )

    with next_col:
        if st.button(
            "Next Turn",
            key=f"btn_next_turn_{current_turn}",
            use_container_width=True,
            disabled=not has_combatants,
            type="primary",
        ):
            return "next_turn"

    with save_col:
        if st.button(
            "Save" if is_dirty else "Saved",
            key="btn_save_battle",
            use_container_width=True,
            disabled=not is_dirty,
        ):
            return "save"

    with end_col:
        if st.session_state.get("_confirm_end_battle"):
            if st.button("Confirm End", key="btn_confirm_end", use_container_width=True):
                st.session_state["_confirm_end_battle"] = False
                return "end_battle"
            st.caption("All progress will be lost.")
        elif st.button("End Battle", key="btn_end_battle", use_container_width=True):
            st.session_state["_confirm_end_battle"] = True
            st.rerun()

    return None

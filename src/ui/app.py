"""Table Companion — Streamlit Application Entrypoint."""

from __future__ import annotations

import streamlit as st

PAGES = ("Characters", "Teams", "Battle", "Dice")

_DICE_HELP = """\
**Formulas:**
- `1d20` — one twenty-sided die
- `2d6+3` — two six-sided dice plus 3
- `1d8+1d6-1` — terms add up left to right
- `4` — a flat number

Dice terms may only be joined with `+` or `-`.
"""


def _render_sidebar() -> str:
    """Owner name and navigation. Returns the selected page."""
    ss = st.session_state
    with st.sidebar:
        st.markdown("## Table Companion")
        owner = st.text_input(
            "Your Name",
            value=ss.get("owner_id", ""),
            max_chars=30,
            placeholder="Enter your name...",
        )
        ss["owner_id"] = owner.strip()

        page = st.radio("Go to", PAGES, key="page", label_visibility="collapsed")

        st.divider()
        st.markdown("### Dice Notation")
        st.markdown(_DICE_HELP)
    return page


def main() -> None:
    """Application entrypoint. Must call ``st.set_page_config`` first."""
    st.set_page_config(
        page_title="Table Companion",
        page_icon="🎲",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    from src.config.log_setup import configure_logging
    from src.ui.themes import load_css

    configure_logging()
    load_css()

    page = _render_sidebar()

    if page == "Dice":
        from src.ui.views.dice import render_dice_page
        render_dice_page()
        return

    # Everything else is scoped to an owner
    if not st.session_state.get("owner_id"):
        st.title("Table Companion")
        st.info("Enter your name in the sidebar to load your characters, teams and battles.")
        return

    # Page routing (lazy imports to avoid circular deps)
    if page == "Characters":
        from src.ui.views.characters import render_characters_page
        render_characters_page()
    elif page == "Teams":
        from src.ui.views.teams import render_teams_page
        render_teams_page()
    elif page == "Battle":
        from src.ui.views.battle import render_battle_page
        render_battle_page()


if __name__ == "__main__":
    main()

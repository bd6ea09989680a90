"""CSS injection and HTML helpers for the battle theme."""

from html import escape
from pathlib import Path

import streamlit as st

from src.engine.base import RollResult


def load_css() -> None:
    """Inject the battle CSS theme into the Streamlit app."""
    css_path = Path(__file__).parent / "battle.css"
    css_text = css_path.read_text(encoding="utf-8")
    st.markdown(f"<style>{css_text}</style>", unsafe_allow_html=True)


def render_roll_result(formula: str, result: RollResult) -> None:
    """Render a roll result card with the formula, total and breakdown."""
    if not result.is_valid:
        st.markdown(
            '<div class="roll-result invalid">'
            f'<p class="formula">{escape(formula)}</p>'
            f"<h2>{escape(result.breakdown)}</h2>"
            "</div>",
            unsafe_allow_html=True,
        )
        return

    st.markdown(
        '<div class="roll-result">'
        f'<p class="formula">{escape(formula)}</p>'
        f'<span class="total">{result.result}</span>'
        f'<p class="breakdown">{escape(result.breakdown)}</p>'
        "</div>",
        unsafe_allow_html=True,
    )


def render_turn_banner(name: str, is_opponent: bool) -> None:
    """Render the banner announcing whose turn it is."""
    side_class = "opponent" if is_opponent else "ally"
    st.markdown(
        f'<div class="turn-banner {side_class}">'
        f"&#9876; {escape(name)}'s turn &#9876;"
        "</div>",
        unsafe_allow_html=True,
    )

"""Battle theme for Table Companion."""

from src.ui.themes.animations import (
    load_css,
    render_roll_result,
    render_turn_banner,
)

__all__ = [
    "load_css",
    "render_roll_result",
    "render_turn_banner",
]

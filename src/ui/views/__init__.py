"""Page renderers for Table Companion."""

from src.ui.views.battle import render_battle_page
from src.ui.views.characters import render_characters_page
from src.ui.views.dice import render_dice_page
from src.ui.views.teams import render_teams_page

__all__ = [
    "render_battle_page",
    "render_characters_page",
    "render_dice_page",
    "render_teams_page",
]

"""UI components for Table Companion."""

from src.ui.components.combatant_card import render_combatant_card
from src.ui.components.dice_roller import record_roll, render_dice_roller
from src.ui.components.initiative_tracker import render_initiative_tracker
from src.ui.components.turn_controls import render_turn_controls

__all__ = [
    "record_roll",
    "render_combatant_card",
    "render_dice_roller",
    "render_initiative_tracker",
    "render_turn_controls",
]

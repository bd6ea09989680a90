"""Battle page — start or resume a battle and track turns, HP and status."""

from __future__ import annotations

import logging
from typing import Iterable

import streamlit as st

from src.config.settings import get_settings
from src.database.battles import BattleManager
from src.database.characters import CharacterManager
from src.database.client import get_supabase_client, with_retry
from src.database.models import Battle, Character, Team
from src.database.teams import TeamManager
from src.engine.battle import BattleState, BattleTurnEngine, Side
from src.engine.dice import DiceFormulaEvaluator
from src.ui.components.combatant_card import render_combatant_card
from src.ui.components.dice_roller import HISTORY_KEY, record_roll, render_dice_roller
from src.ui.components.initiative_tracker import render_initiative_tracker
from src.ui.components.turn_controls import render_turn_controls
from src.ui.themes.animations import render_roll_result, render_turn_banner

logger = logging.getLogger(__name__)

_SIDE_TITLES = {Side.ALLIES: "Your Team", Side.OPPONENTS: "Opponent Team"}


def _managers() -> tuple[BattleManager, TeamManager, CharacterManager]:
    client = get_supabase_client()
    return BattleManager(client), TeamManager(client), CharacterManager(client)


def _load_characters(char_mgr: CharacterManager, owner_id: str) -> dict[int, Character]:
    characters = with_retry(char_mgr.list_by_owner, owner_id)
    characters += with_retry(char_mgr.list_public)
    return {c.id: c for c in characters}


def _enter_battle(battle: Battle) -> bool:
    """Copy a stored battle into session state; returns False if its state is unreadable."""
    try:
        state = BattleState.from_dict(battle.battle_state)
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning("Battle %s has an unreadable state: %s", battle.id, exc)
        st.error(f"Battle '{battle.name}' could not be loaded: {exc}")
        return False

    ss = st.session_state
    ss["battle_id"] = battle.id
    ss["battle_name"] = battle.name
    ss["battle_team_ids"] = (battle.team_id, battle.opponent_team_id)
    ss["battle_state"] = state
    ss["current_turn"] = battle.current_turn or BattleTurnEngine.STARTING_TURN
    ss["battle_dirty"] = False
    return True


def _leave_battle() -> None:
    ss = st.session_state
    for key in (
        "battle_id", "battle_name", "battle_team_ids", "battle_state", "current_turn", "battle_dirty",
    ):
        ss.pop(key, None)


def _selected_abilities(teams: Iterable[Team | None]) -> dict[int, tuple[str, ...]]:
    """Ability ids each character's team picked for it, merged across both teams."""
    selected: dict[int, tuple[str, ...]] = {}
    for team in teams:
        if team is None:
            continue
        for cid in team.character_ids:
            selected[cid] = tuple(team.character_abilities.get(cid, ()))
    return selected


def render_battle_page() -> None:
    """Render the battle setup or the battle tracker."""
    ss = st.session_state
    owner_id = ss.get("owner_id")

    try:
        battle_mgr, team_mgr, char_mgr = _managers()
        characters = _load_characters(char_mgr, owner_id)
    except Exception as exc:
        st.error(f"Connection error — please refresh the page. ({type(exc).__name__})")
        return

    if ss.get("battle_id") is None:
        _render_setup(battle_mgr, team_mgr, characters, owner_id)
    else:
        _render_tracker(battle_mgr, team_mgr, characters)


def _render_setup(
    battle_mgr: BattleManager,
    team_mgr: TeamManager,
    characters: dict[int, Character],
    owner_id: str,
) -> None:
    st.title("Battle")

    try:
        teams = with_retry(team_mgr.list_by_owner, owner_id)
        battles = with_retry(battle_mgr.list_by_owner, owner_id)
    except Exception as exc:
        st.error(f"Could not load battles. ({type(exc).__name__})")
        return

    new_tab, resume_tab = st.tabs(["Start Battle", "Saved Battles"])

    with new_tab:
        if not teams:
            st.info("Create a team in the Teams tab first.")
        else:
            _render_start_form(battle_mgr, teams, characters, owner_id)

    with resume_tab:
        if not battles:
            st.caption("No saved battles.")
        for battle in battles:
            name_col, resume_col, delete_col = st.columns([3, 1, 1])
            name_col.markdown(f"**{battle.name}** · turn {battle.current_turn}")
            if resume_col.button("Resume", key=f"resume_{battle.id}", use_container_width=True):
                if _enter_battle(battle):
                    st.rerun()
            if delete_col.button("Delete", key=f"delete_battle_{battle.id}", use_container_width=True):
                try:
                    with_retry(battle_mgr.delete, battle.id)
                except Exception as exc:
                    st.error(f"Failed to delete battle: {exc}")
                    return
                st.rerun()


def _render_start_form(battle_mgr, teams, characters, owner_id) -> None:
    by_id = {t.id: t for t in teams}
    with st.form("start_battle_form"):
        name = st.text_input("Battle Name", placeholder="e.g. Goblin Ambush")
        team_id = st.selectbox(
            "Your Team", options=list(by_id), format_func=lambda tid: by_id[tid].name
        )
        opponent_id = st.selectbox(
            "Opponent Team",
            options=[None, *by_id],
            format_func=lambda tid: "None" if tid is None else by_id[tid].name,
        )
        submitted = st.form_submit_button("Start Battle", type="primary")

    if not submitted:
        return
    if not name or not name.strip():
        st.error("Please enter a battle name.")
        return

    allies = [characters[cid] for cid in by_id[team_id].character_ids if cid in characters]
    opponents = []
    if opponent_id is not None:
        opponents = [characters[cid] for cid in by_id[opponent_id].character_ids if cid in characters]

    try:
        state = BattleTurnEngine.build_state(allies, opponents)
    except ValueError as exc:
        st.error(str(exc))
        return

    try:
        battle = with_retry(
            battle_mgr.create,
            owner_id,
            name.strip(),
            team_id=team_id,
            opponent_team_id=opponent_id,
            battle_state=state.to_dict(),
        )
    except Exception as exc:
        st.error(f"Failed to create battle: {exc}")
        return

    if _enter_battle(battle):
        st.rerun()


def _apply_card_action(state: BattleState, side: Side, character_id: int, action: dict) -> BattleState:
    if "hp_delta" in action:
        return BattleTurnEngine.adjust_hp(state, side, character_id, action["hp_delta"])
    if "current_hp" in action:
        return BattleTurnEngine.update_combatant(state, side, character_id, current_hp=action["current_hp"])
    if "status" in action:
        return BattleTurnEngine.update_combatant(state, side, character_id, status=action["status"])
    return state


def _load_selection(team_mgr: TeamManager) -> dict[int, tuple[str, ...]] | None:
    """Ability selection of the battle's teams, or None when they cannot be loaded."""
    try:
        teams = [
            with_retry(team_mgr.get, team_id)
            for team_id in st.session_state.get("battle_team_ids", ())
            if team_id is not None
        ]
    except Exception as exc:
        logger.warning("Loading team ability selection failed: %s", exc)
        return None
    return _selected_abilities(teams)


def _render_tracker(
    battle_mgr: BattleManager,
    team_mgr: TeamManager,
    characters: dict[int, Character],
) -> None:
    ss = st.session_state
    state: BattleState = ss["battle_state"]
    current_turn: int = ss["current_turn"]
    evaluator = DiceFormulaEvaluator(max_dice=get_settings().max_dice_per_term)
    selection = _load_selection(team_mgr)

    st.title(ss.get("battle_name") or "Battle")

    # Recomputed on every rerun; never cached across roster changes
    active = BattleTurnEngine.active_combatant(state, current_turn)
    active_character = characters.get(active.character_id) if active else None

    if active_character is not None:
        render_turn_banner(
            active_character.name,
            BattleTurnEngine.side_of(state, active.character_id) == Side.OPPONENTS,
        )

    action = render_turn_controls(
        current_turn=current_turn,
        active_name=active_character.name if active_character else None,
        has_combatants=len(state) > 0,
        is_dirty=ss.get("battle_dirty", False),
    )

    if action == "next_turn":
        ss["current_turn"] = BattleTurnEngine.advance_turn(current_turn)
        ss["battle_dirty"] = True
        st.rerun()
    elif action == "save":
        if _save(battle_mgr):
            st.rerun()
    elif action == "end_battle":
        try:
            with_retry(battle_mgr.delete, ss["battle_id"])
        except Exception as exc:
            st.error(f"Failed to end battle: {exc}")
            return
        _leave_battle()
        st.rerun()

    allies_col, opponents_col, order_col = st.columns([2, 2, 1])

    for side, col in ((Side.ALLIES, allies_col), (Side.OPPONENTS, opponents_col)):
        with col:
            st.subheader(_SIDE_TITLES[side])
            pairs = BattleTurnEngine.pair_with_templates(state.roster(side), characters)
            for combatant, character in pairs:
                if character is None:
                    continue
                card_action = render_combatant_card(
                    combatant,
                    character,
                    side,
                    is_active=active is not None and active.character_id == combatant.character_id,
                    ability_ids=None if selection is None else selection.get(combatant.character_id),
                )
                if card_action is None:
                    continue
                if "roll" in card_action:
                    record_roll(card_action["roll"], evaluator.roll(card_action["roll"]))
                    st.rerun()
                ss["battle_state"] = _apply_card_action(state, side, combatant.character_id, card_action)
                ss["battle_dirty"] = True
                st.rerun()

    with order_col:
        render_initiative_tracker(state, current_turn, characters)
        if st.button("Back to battles", use_container_width=True) and _leave_after_save(battle_mgr):
            st.rerun()

    with st.expander("Quick Dice", expanded=bool(ss.get(HISTORY_KEY))):
        render_dice_roller(evaluator, key="battle_dice")
        history = ss.get(HISTORY_KEY, [])
        if history:
            render_roll_result(*history[0])


def _save(battle_mgr: BattleManager) -> bool:
    """Write the turn counter and rosters back; returns True on success."""
    ss = st.session_state
    try:
        saved = with_retry(
            battle_mgr.save_progress,
            ss["battle_id"],
            ss["current_turn"],
            ss["battle_state"].to_dict(),
        )
    except Exception as exc:
        logger.exception("Saving battle %s failed", ss.get("battle_id"))
        st.error(f"Failed to save battle: {exc}")
        return False
    if saved is None:
        st.error("Battle no longer exists.")
        _leave_battle()
        return False
    ss["battle_dirty"] = False
    return True


def _leave_after_save(battle_mgr: BattleManager) -> bool:
    """Save pending changes and leave the tracker; stays in the battle if the save fails."""
    if st.session_state.get("battle_dirty") and not _save(battle_mgr):
        return False
    _leave_battle()
    return True

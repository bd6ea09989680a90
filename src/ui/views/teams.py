"""Teams page — build rosters of up to six characters and pick their abilities."""

from __future__ import annotations

import streamlit as st

from src.config.settings import get_settings
from src.database.characters import CharacterManager
from src.database.client import get_supabase_client, with_retry
from src.database.models import Character, Team
from src.database.teams import TeamManager


def _managers() -> tuple[TeamManager, CharacterManager]:
    client = get_supabase_client()
    return TeamManager(client, get_settings().max_team_size), CharacterManager(client)


def render_teams_page() -> None:
    """Render the team list and team builder."""
    ss = st.session_state
    owner_id = ss.get("owner_id")
    st.title("Teams")

    try:
        team_mgr, char_mgr = _managers()
        teams = with_retry(team_mgr.list_by_owner, owner_id)
        characters = with_retry(char_mgr.list_by_owner, owner_id)
        characters += [c for c in with_retry(char_mgr.list_public) if c.owner_id != owner_id]
    except Exception as exc:
        st.error(f"Could not load teams. ({type(exc).__name__})")
        return

    list_col, builder_col = st.columns([1, 2])

    with list_col:
        if st.button("New Team", type="primary", use_container_width=True):
            ss["editing_team_id"] = None
            ss["team_builder_open"] = True
            st.rerun()
        if not teams:
            st.caption("No teams yet.")
        for team in teams:
            if st.button(
                f"{team.name}  ·  {len(team.character_ids)} members",
                key=f"team_{team.id}",
                use_container_width=True,
            ):
                ss["editing_team_id"] = team.id
                ss["team_builder_open"] = True
                st.rerun()

    with builder_col:
        if not ss.get("team_builder_open"):
            st.info("Select a team from the list or create a new one.")
            return
        editing = next((t for t in teams if t.id == ss.get("editing_team_id")), None)
        _render_builder(team_mgr, owner_id, editing, characters)


def _render_builder(
    mgr: TeamManager,
    owner_id: str,
    team: Team | None,
    characters: list[Character],
) -> None:
    ss = st.session_state
    by_id = {c.id: c for c in characters}
    max_size = mgr.max_team_size
    key = f"team_{team.id if team else 'new'}"

    # Dangling ids (deleted characters) are dropped from the selectable roster
    current_ids = [cid for cid in (team.character_ids if team else []) if cid in by_id]

    st.subheader("Team Builder")
    name = st.text_input("Team Name", value=team.name if team else "", key=f"{key}_name")
    member_ids = st.multiselect(
        f"Team Members (max {max_size})",
        options=list(by_id),
        default=current_ids,
        format_func=lambda cid: f"{by_id[cid].name} (HP {by_id[cid].hp}, AC {by_id[cid].ac})",
        max_selections=max_size,
        key=f"{key}_members",
    )
    st.caption(f"{len(member_ids)}/{max_size} Members")

    selection: dict[int, list[str]] = {}
    for cid in member_ids:
        character = by_id[cid]
        if not character.abilities:
            continue
        chosen = (team.character_abilities.get(cid, []) if team else [])
        selection[cid] = st.multiselect(
            f"{character.name} — abilities",
            options=[a.id for a in character.abilities],
            default=[aid for aid in chosen if character.ability(aid) is not None],
            format_func=lambda aid, c=character: c.ability(aid).name,
            key=f"{key}_abilities_{cid}",
        )

    save_col, delete_col = st.columns(2)
    with save_col:
        save = st.button("Save Team", type="primary", key=f"{key}_save", use_container_width=True)
    with delete_col:
        delete = team is not None and st.button(
            "Delete Team", key=f"{key}_delete", use_container_width=True
        )

    if delete:
        try:
            with_retry(mgr.delete, team.id)
        except Exception as exc:
            st.error(f"Failed to delete team: {exc}")
            return
        ss["team_builder_open"] = False
        st.rerun()

    if not save:
        return

    if not name.strip():
        st.error("Team name is required.")
        return

    try:
        if team is None:
            saved = with_retry(mgr.create, owner_id, name.strip(), member_ids, selection)
        else:
            saved = with_retry(
                mgr.update,
                team.id,
                name=name.strip(),
                character_ids=member_ids,
                character_abilities=selection,
            )
    except ValueError as exc:
        st.error(str(exc))
        return
    except Exception as exc:
        st.error(f"Failed to save team: {exc}")
        return

    if saved is None:
        st.error("Team no longer exists.")
        return
    ss["editing_team_id"] = saved.id
    st.success("Team saved.")
    st.rerun()

"""Characters page — list, create, edit and delete character templates."""

from __future__ import annotations

import streamlit as st

from src.database.characters import CharacterManager, new_ability_id
from src.database.client import get_supabase_client, with_retry
from src.database.models import Ability, Character
from src.engine.dice import is_valid_formula

_ABILITY_COLUMNS = ["name", "description", "damage", "range", "effect", "is_passive"]


def _manager() -> CharacterManager:
    return CharacterManager(get_supabase_client())


def _ability_rows(character: Character | None) -> list[dict]:
    rows = [a.model_dump() for a in character.abilities] if character else []
    # Seed a blank row so the editor knows its columns; unnamed rows are dropped on save.
    return rows or [{"id": "", **{col: "" for col in _ABILITY_COLUMNS}, "is_passive": False}]


def _abilities_from_rows(rows: list[dict]) -> list[Ability]:
    """Turn edited table rows back into abilities, keeping existing ids."""
    abilities = []
    for row in rows:
        name = (row.get("name") or "").strip()
        if not name:
            continue
        abilities.append(Ability(
            id=row.get("id") or new_ability_id(),
            name=name,
            description=row.get("description") or "",
            damage=row.get("damage") or None,
            range=row.get("range") or None,
            effect=row.get("effect") or None,
            is_passive=bool(row.get("is_passive")),
        ))
    return abilities


def render_characters_page() -> None:
    """Render the character list and editor."""
    ss = st.session_state
    owner_id = ss.get("owner_id")
    st.title("Characters")

    try:
        mgr = _manager()
        mine = with_retry(mgr.list_by_owner, owner_id)
        public = [c for c in with_retry(mgr.list_public) if c.owner_id != owner_id]
    except Exception as exc:
        st.error(f"Could not load characters. ({type(exc).__name__})")
        return

    list_col, editor_col = st.columns([1, 2])

    with list_col:
        if st.button("New Character", type="primary", use_container_width=True):
            ss["editing_character_id"] = None
            ss["character_editor_open"] = True
            st.rerun()

        st.subheader("Yours")
        if not mine:
            st.caption("No characters yet.")
        for character in mine:
            if st.button(
                f"{character.name}  ·  HP {character.hp}",
                key=f"char_{character.id}",
                use_container_width=True,
            ):
                ss["editing_character_id"] = character.id
                ss["character_editor_open"] = True
                st.rerun()

        if public:
            st.subheader("Public")
            for character in public:
                st.markdown(f"{character.name} · HP {character.hp} · AC {character.ac}")

    with editor_col:
        if not ss.get("character_editor_open"):
            st.info("Select a character from the list or create a new one.")
            return
        editing = next((c for c in mine if c.id == ss.get("editing_character_id")), None)
        _render_editor(mgr, owner_id, editing)


def _render_editor(mgr: CharacterManager, owner_id: str, character: Character | None) -> None:
    ss = st.session_state
    st.subheader("Edit Character" if character else "New Character")
    form_key = f"character_form_{character.id if character else 'new'}"

    with st.form(form_key):
        name = st.text_input("Name", value=character.name if character else "")
        c1, c2, c3, c4 = st.columns(4)
        hp = c1.number_input("HP", min_value=0, value=character.hp if character else 10)
        ac = c2.number_input("AC", min_value=0, value=character.ac if character else 10)
        speed = c3.number_input("Speed", min_value=0, value=character.speed if character else 30)
        initiative = c4.number_input(
            "Initiative", min_value=-100, value=character.initiative if character else 0
        )
        tags = st.text_input("Tags", value=(character.tags or "") if character else "")
        is_public = st.checkbox("Visible to everyone", value=character.is_public if character else False)

        st.markdown("**Abilities**")
        rows = st.data_editor(
            _ability_rows(character),
            column_order=_ABILITY_COLUMNS,
            num_rows="dynamic",
            use_container_width=True,
            key=f"{form_key}_abilities",
        )
        submitted = st.form_submit_button("Save Character", type="primary")

    if character is not None and st.button("Delete Character", key=f"delete_char_{character.id}"):
        try:
            with_retry(mgr.delete, character.id)
        except Exception as exc:
            st.error(f"Failed to delete character: {exc}")
            return
        ss["character_editor_open"] = False
        st.rerun()

    if not submitted:
        return

    if not name.strip():
        st.error("Character name is required.")
        return

    abilities = _abilities_from_rows(list(rows))
    bad = [a.name for a in abilities if a.damage and not is_valid_formula(a.damage)]
    if bad:
        st.warning(f"Damage formula not recognised for: {', '.join(bad)}")

    fields = dict(
        name=name.strip(),
        hp=int(hp),
        speed=int(speed),
        ac=int(ac),
        initiative=int(initiative),
        tags=tags.strip(),
        abilities=abilities,
        is_public=is_public,
    )
    try:
        if character is None:
            saved = with_retry(mgr.create, owner_id, **fields)
        else:
            saved = with_retry(mgr.update, character.id, **fields)
    except Exception as exc:
        st.error(f"Failed to save character: {exc}")
        return

    if saved is None:
        st.error("Character no longer exists.")
        return
    ss["editing_character_id"] = saved.id
    st.success("Character saved.")
    st.rerun()

"""
Table Companion - Character Manager

CRUD operations for the `characters` table.
"""

import logging
import secrets
from typing import Iterable

from supabase import Client

from src.database.models import Ability, Character
from src.engine.validators import validate_stat

logger = logging.getLogger(__name__)


def new_ability_id() -> str:
    """Generate a short random id for a newly added ability."""
    return secrets.token_hex(4)


def _serialize_abilities(abilities: Iterable[Ability | dict]) -> list[dict]:
    return [Ability.model_validate(a).model_dump() for a in abilities]


class CharacterManager:
    """Manages character templates in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("characters")

    def create(
        self,
        owner_id: str,
        name: str,
        hp: int,
        speed: int,
        ac: int,
        initiative: int,
        *,
        tags: str | None = None,
        abilities: Iterable[Ability | dict] = (),
        is_public: bool = False,
    ) -> Character:
        """Create a character owned by ``owner_id``."""
        data = (
            self.table
            .insert({
                "owner_id": owner_id,
                "name": name,
                "hp": validate_stat("HP", hp),
                "speed": validate_stat("Speed", speed),
                "ac": validate_stat("AC", ac),
                "initiative": validate_stat("Initiative", initiative, minimum=-100),
                "tags": tags,
                "abilities": _serialize_abilities(abilities),
                "is_public": is_public,
            })
            .execute()
        )
        character = Character.model_validate(data.data[0])
        logger.info("Created character %s (%s) for %s", character.id, name, owner_id)
        return character

    def get(self, character_id: int) -> Character | None:
        """Get a single character by id."""
        data = (
            self.table
            .select("*")
            .eq("id", character_id)
            .execute()
        )
        if data.data:
            return Character.model_validate(data.data[0])
        return None

    def list_by_owner(self, owner_id: str) -> list[Character]:
        """All characters belonging to an owner, oldest first."""
        data = (
            self.table
            .select("*")
            .eq("owner_id", owner_id)
            .order("id")
            .execute()
        )
        return [Character.model_validate(row) for row in data.data]

    def list_public(self) -> list[Character]:
        """All characters shared publicly by any owner."""
        data = (
            self.table
            .select("*")
            .eq("is_public", True)
            .order("id")
            .execute()
        )
        return [Character.model_validate(row) for row in data.data]

    def update(
        self,
        character_id: int,
        *,
        name: str | None = None,
        hp: int | None = None,
        speed: int | None = None,
        ac: int | None = None,
        initiative: int | None = None,
        tags: str | None = None,
        abilities: Iterable[Ability | dict] | None = None,
        is_public: bool | None = None,
    ) -> Character | None:
        """Update character fields. Only provided fields are changed.

        Returns:
            The updated character, or None if it does not exist
        """
        updates: dict = {}
        if name is not None:
            updates["name"] = name
        if hp is not None:
            updates["hp"] = validate_stat("HP", hp)
        if speed is not None:
            updates["speed"] = validate_stat("Speed", speed)
        if ac is not None:
            updates["ac"] = validate_stat("AC", ac)
        if initiative is not None:
            updates["initiative"] = validate_stat("Initiative", initiative, minimum=-100)
        if tags is not None:
            updates["tags"] = tags
        if abilities is not None:
            updates["abilities"] = _serialize_abilities(abilities)
        if is_public is not None:
            updates["is_public"] = is_public

        if not updates:
            return self.get(character_id)

        data = (
            self.table
            .update(updates)
            .eq("id", character_id)
            .execute()
        )
        if data.data:
            return Character.model_validate(data.data[0])
        return None

    def delete(self, character_id: int) -> bool:
        """Delete a character.

        Teams and battles referencing it keep the dangling id.

        Returns:
            True if a row was removed
        """
        data = self.table.delete().eq("id", character_id).execute()
        removed = bool(data.data)
        if removed:
            logger.info("Deleted character %s", character_id)
        return removed

"""
Table Companion - Team Manager

CRUD operations for the `teams` table.
"""

import logging
from typing import Iterable, Mapping, Sequence

from supabase import Client

from src.database.models import Team
from src.engine.validators import (
    MAX_TEAM_SIZE,
    validate_ability_selection,
    validate_team_members,
)

logger = logging.getLogger(__name__)


def _serialize_selection(
    selection: Mapping[int, Iterable[str]],
    character_ids: Sequence[int],
) -> dict[str, list[str]]:
    # JSON object keys must be strings
    return {
        str(cid): list(ability_ids)
        for cid, ability_ids in validate_ability_selection(selection, character_ids).items()
    }


class TeamManager:
    """Manages teams in Supabase."""

    def __init__(self, client: Client, max_team_size: int = MAX_TEAM_SIZE) -> None:
        self.client = client
        self.table = client.table("teams")
        self.max_team_size = max_team_size

    def create(
        self,
        owner_id: str,
        name: str,
        character_ids: Sequence[int] = (),
        character_abilities: Mapping[int, Iterable[str]] | None = None,
    ) -> Team:
        """Create a team. Roster order is the order of ``character_ids``."""
        members = validate_team_members(character_ids, self.max_team_size)
        data = (
            self.table
            .insert({
                "owner_id": owner_id,
                "name": name,
                "character_ids": list(members),
                "character_abilities": _serialize_selection(character_abilities or {}, members),
            })
            .execute()
        )
        team = Team.model_validate(data.data[0])
        logger.info("Created team %s (%s) with %d members", team.id, name, len(members))
        return team

    def get(self, team_id: int) -> Team | None:
        """Get a single team by id."""
        data = (
            self.table
            .select("*")
            .eq("id", team_id)
            .execute()
        )
        if data.data:
            return Team.model_validate(data.data[0])
        return None

    def list_by_owner(self, owner_id: str) -> list[Team]:
        """All teams belonging to an owner, oldest first."""
        data = (
            self.table
            .select("*")
            .eq("owner_id", owner_id)
            .order("id")
            .execute()
        )
        return [Team.model_validate(row) for row in data.data]

    def update(
        self,
        team_id: int,
        *,
        name: str | None = None,
        character_ids: Sequence[int] | None = None,
        character_abilities: Mapping[int, Iterable[str]] | None = None,
    ) -> Team | None:
        """Update team fields. Only provided fields are changed.

        When only ``character_abilities`` is given it is validated against
        the stored roster.
        """
        updates: dict = {}
        members: tuple[int, ...] | None = None
        if name is not None:
            updates["name"] = name
        if character_ids is not None:
            members = validate_team_members(character_ids, self.max_team_size)
            updates["character_ids"] = list(members)
        if character_abilities is not None:
            if members is None:
                current = self.get(team_id)
                if current is None:
                    return None
                members = tuple(current.character_ids)
            updates["character_abilities"] = _serialize_selection(character_abilities, members)

        if not updates:
            return self.get(team_id)

        data = (
            self.table
            .update(updates)
            .eq("id", team_id)
            .execute()
        )
        if data.data:
            return Team.model_validate(data.data[0])
        return None

    def delete(self, team_id: int) -> bool:
        """Delete a team. Battles referencing it keep the dangling id."""
        data = self.table.delete().eq("id", team_id).execute()
        removed = bool(data.data)
        if removed:
            logger.info("Deleted team %s", team_id)
        return removed

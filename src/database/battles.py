"""
Table Companion - Battle Manager

CRUD operations for the `battles` table. The battle state column is an
opaque JSON blob written verbatim from ``BattleState.to_dict()``.
"""

import logging

from supabase import Client

from src.database.models import Battle

logger = logging.getLogger(__name__)

EMPTY_BATTLE_STATE: dict = {"allies": [], "opponents": []}


class BattleManager:
    """Manages battles in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("battles")

    def create(
        self,
        owner_id: str,
        name: str,
        *,
        team_id: int | None = None,
        opponent_team_id: int | None = None,
        battle_state: dict | None = None,
        current_turn: int = 1,
    ) -> Battle:
        """Create a battle, starting on turn 1 unless told otherwise."""
        data = (
            self.table
            .insert({
                "owner_id": owner_id,
                "name": name,
                "team_id": team_id,
                "opponent_team_id": opponent_team_id,
                "current_turn": current_turn,
                "battle_state": battle_state if battle_state is not None else EMPTY_BATTLE_STATE,
            })
            .execute()
        )
        battle = Battle.model_validate(data.data[0])
        logger.info("Created battle %s (%s) for %s", battle.id, name, owner_id)
        return battle

    def get(self, battle_id: int) -> Battle | None:
        """Get a single battle by id."""
        data = (
            self.table
            .select("*")
            .eq("id", battle_id)
            .execute()
        )
        if data.data:
            return Battle.model_validate(data.data[0])
        return None

    def list_by_owner(self, owner_id: str) -> list[Battle]:
        """All battles belonging to an owner, oldest first."""
        data = (
            self.table
            .select("*")
            .eq("owner_id", owner_id)
            .order("id")
            .execute()
        )
        return [Battle.model_validate(row) for row in data.data]

    def update(
        self,
        battle_id: int,
        *,
        name: str | None = None,
        team_id: int | None = None,
        opponent_team_id: int | None = None,
        current_turn: int | None = None,
        battle_state: dict | None = None,
    ) -> Battle | None:
        """Update battle fields. Only provided fields are changed."""
        updates: dict = {}
        if name is not None:
            updates["name"] = name
        if team_id is not None:
            updates["team_id"] = team_id
        if opponent_team_id is not None:
            updates["opponent_team_id"] = opponent_team_id
        if current_turn is not None:
            updates["current_turn"] = current_turn
        if battle_state is not None:
            updates["battle_state"] = battle_state

        if not updates:
            return self.get(battle_id)

        data = (
            self.table
            .update(updates)
            .eq("id", battle_id)
            .execute()
        )
        if data.data:
            return Battle.model_validate(data.data[0])
        return None

    def save_progress(
        self,
        battle_id: int,
        current_turn: int,
        battle_state: dict,
    ) -> Battle | None:
        """Persist the turn counter and rosters in one write (last write wins)."""
        return self.update(battle_id, current_turn=current_turn, battle_state=battle_state)

    def delete(self, battle_id: int) -> bool:
        """Delete a battle."""
        data = self.table.delete().eq("id", battle_id).execute()
        removed = bool(data.data)
        if removed:
            logger.info("Deleted battle %s", battle_id)
        return removed

"""
Table Companion - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Ability(BaseModel):
    """An entry of the `characters.abilities` JSON column."""

    id: str
    name: str = Field(min_length=1)
    description: str = ""
    damage: str | None = None
    range: str | None = None
    effect: str | None = None
    is_passive: bool = False

    model_config = {"frozen": True}


class Character(BaseModel):
    """Mirrors the `characters` table."""

    id: int
    owner_id: str
    name: str
    hp: int = Field(ge=0)
    speed: int = 0
    ac: int = 0
    initiative: int = 0
    tags: str | None = None
    abilities: list[Ability] = Field(default_factory=list)
    is_public: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}

    def ability(self, ability_id: str) -> Ability | None:
        return next((a for a in self.abilities if a.id == ability_id), None)


class Team(BaseModel):
    """Mirrors the `teams` table."""

    id: int
    owner_id: str
    name: str
    character_ids: list[int] = Field(default_factory=list)
    # Keys arrive as strings from the JSON column; pydantic coerces them back.
    character_abilities: dict[int, list[str]] = Field(default_factory=dict)
    created_at: datetime

    model_config = {"from_attributes": True}


class Battle(BaseModel):
    """Mirrors the `battles` table."""

    id: int
    owner_id: str
    name: str
    team_id: int | None = None
    opponent_team_id: int | None = None
    current_turn: int = 1
    battle_state: dict = Field(default_factory=lambda: {"allies": [], "opponents": []})
    created_at: datetime

    model_config = {"from_attributes": True}

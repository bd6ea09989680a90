"""
Table Companion Database Layer.

Supabase integration for characters, teams, and battle persistence.
"""

from src.database.battles import BattleManager
from src.database.characters import CharacterManager
from src.database.client import get_supabase_client, with_retry
from src.database.models import Ability, Battle, Character, Team
from src.database.teams import TeamManager

__all__ = [
    "get_supabase_client",
    "with_retry",
    "Ability",
    "Battle",
    "BattleManager",
    "Character",
    "CharacterManager",
    "Team",
    "TeamManager",
]
